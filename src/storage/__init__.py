"""
Módulo de storage: checkpoints dos registros coletados.
Suporta JSON e CSV.
"""

from src.storage.base import CheckpointSink, StorageType
from src.storage.file_storage import (
    JsonFileCheckpointSink,
    CsvFileCheckpointSink,
    create_sink,
)

__all__ = [
    "CheckpointSink",
    "StorageType",
    "JsonFileCheckpointSink",
    "CsvFileCheckpointSink",
    "create_sink",
]
