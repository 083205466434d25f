"""
Módulo core: modelos de dados, exceções e tipos.
"""

from src.core.models import (
    PageRequest,
    PageResult,
    ExtractionConfig,
    ExtractionResult,
)
from src.core.exceptions import (
    ExtractorError,
    SourceUnavailable,
    ShapeValidationError,
    CheckpointWriteError,
    ExtractionAborted,
    ConfigurationError,
)
from src.core.types import (
    ExtractionPhase,
    TerminationReason,
    RunStatus,
)

__all__ = [
    # Models
    "PageRequest",
    "PageResult",
    "ExtractionConfig",
    "ExtractionResult",
    # Exceptions
    "ExtractorError",
    "SourceUnavailable",
    "ShapeValidationError",
    "CheckpointWriteError",
    "ExtractionAborted",
    "ConfigurationError",
    # Types
    "ExtractionPhase",
    "TerminationReason",
    "RunStatus",
]
