"""
Checkpoints em arquivo (JSON e CSV).
JSON é o formato de saída padrão; CSV facilita análise com pandas.
"""

import io
import json
from pathlib import Path

import pandas as pd

from src.core.exceptions import CheckpointWriteError
from src.storage.base import CheckpointSink, StorageType


class JsonFileCheckpointSink(CheckpointSink):
    """
    Checkpoint em arquivo JSON.
    Lista de nomes com indentação de 2 espaços.
    """

    @property
    def storage_type(self) -> StorageType:
        return StorageType.JSON

    def serialize(self, records: list[str]) -> bytes:
        return json.dumps(records, indent=2, ensure_ascii=False).encode("utf-8")

    async def load(self) -> list[str]:
        """
        Carrega a lista gravada no último checkpoint.

        Returns:
            Registros do arquivo, ou lista vazia se ele não existe
        """
        if not self.path.exists():
            return []

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise CheckpointWriteError(
                "Checkpoint ilegível",
                path=str(self.path),
                cause=e,
            ) from e

        if not isinstance(data, list):
            raise CheckpointWriteError(
                "Checkpoint JSON não é uma lista",
                path=str(self.path),
            )
        return [str(item) for item in data]


class CsvFileCheckpointSink(CheckpointSink):
    """
    Checkpoint em arquivo CSV.
    Uma coluna `name`, encoding utf-8-sig para abrir direto no Excel.
    """

    COLUMN = "name"

    @property
    def storage_type(self) -> StorageType:
        return StorageType.CSV

    def serialize(self, records: list[str]) -> bytes:
        df = pd.DataFrame({self.COLUMN: records}, dtype="object")
        buffer = io.StringIO()
        df.to_csv(buffer, index=False)
        return buffer.getvalue().encode("utf-8-sig")

    async def load(self) -> list[str]:
        """Carrega os nomes do CSV."""
        if not self.path.exists():
            return []

        try:
            df = pd.read_csv(
                self.path,
                encoding="utf-8-sig",
                dtype={self.COLUMN: str},
                keep_default_na=False,
            )
        except (OSError, ValueError) as e:
            raise CheckpointWriteError(
                "Checkpoint ilegível",
                path=str(self.path),
                cause=e,
            ) from e

        if self.COLUMN not in df.columns:
            return []
        return df[self.COLUMN].tolist()


SINK_REGISTRY: dict[StorageType, type[CheckpointSink]] = {
    StorageType.JSON: JsonFileCheckpointSink,
    StorageType.CSV: CsvFileCheckpointSink,
}


def create_sink(path: Path, storage_type: StorageType = StorageType.JSON) -> CheckpointSink:
    """
    Cria o destino de checkpoint para o formato pedido.

    Args:
        path: Arquivo de saída
        storage_type: Formato

    Returns:
        Instância do destino
    """
    return SINK_REGISTRY[StorageType(storage_type)](path)
