"""
Módulo de extração: loop paginado com repetição e checkpoint.
"""

from src.extraction.extractor import PaginatedExtractor, extract_all, RETRYABLE_ERRORS
from src.extraction.state import ExtractionState

__all__ = [
    "PaginatedExtractor",
    "ExtractionState",
    "extract_all",
    "RETRYABLE_ERRORS",
]
