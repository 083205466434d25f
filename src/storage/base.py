"""
Classe base abstrata para destinos de checkpoint.
Define interface comum para persistência dos registros acumulados.
"""

import os
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path

from config.logging_config import LoggerMixin
from src.core.exceptions import CheckpointWriteError


class StorageType(str, Enum):
    """Formatos de checkpoint disponíveis."""
    JSON = "json"
    CSV = "csv"


class CheckpointSink(ABC, LoggerMixin):
    """
    Destino de checkpoint com semântica de sobrescrita completa:
    cada `save` substitui o conteúdo anterior no mesmo caminho.
    """

    def __init__(self, path: Path):
        """
        Inicializa o destino.

        Args:
            path: Arquivo de saída
        """
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    @property
    @abstractmethod
    def storage_type(self) -> StorageType:
        """Retorna o formato do checkpoint."""
        pass

    @abstractmethod
    def serialize(self, records: list[str]) -> bytes:
        """Converte os registros no conteúdo do arquivo."""
        pass

    @abstractmethod
    async def load(self) -> list[str]:
        """Lê o último checkpoint gravado."""
        pass

    async def save(self, records: list[str]) -> None:
        """
        Grava o snapshot dos registros, substituindo o anterior.

        Args:
            records: Registros acumulados até agora

        Raises:
            CheckpointWriteError: Falha de escrita
        """
        content = self.serialize(list(records))
        tmp_path = self.path.with_name(f".{self.path.name}.tmp")

        try:
            tmp_path.write_bytes(content)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise CheckpointWriteError(path=str(self.path), cause=e) from e

        self.logger.debug(
            "Checkpoint salvo",
            count=len(records),
            path=str(self.path),
        )
