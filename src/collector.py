"""
BeverageCollector: Orquestrador principal do sistema.
Traduz as configurações em uma ExtractionConfig explícita e coordena
fonte, extrator e checkpoint para uma coleta completa.
"""

import asyncio
from pathlib import Path
from typing import Any, Optional

import httpx

from config.logging_config import LoggerMixin, setup_logging
from config.settings import Settings, get_settings
from config.sources import PaginationStyle, SourceConfig, get_active_sources, get_source_config
from src.core.models import ExtractionConfig, ExtractionResult
from src.extraction import PaginatedExtractor
from src.extraction.extractor import SleepFunc
from src.sources import SOURCE_REGISTRY, PageSource
from src.storage import CheckpointSink, StorageType, create_sink


class BeverageCollector(LoggerMixin):
    """
    Orquestrador da coleta de nomes de bebidas.

    Responsabilidades:
    - Montar a fonte de páginas e o destino de checkpoint
    - Executar o extrator paginado
    - Expor o resultado marcado (completo ou parcial)
    """

    def __init__(
        self,
        source_id: str = "carrefour_bebidas",
        output_path: Optional[Path] = None,
        storage_type: Optional[StorageType] = None,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        """
        Inicializa o coletor.

        Args:
            source_id: Fonte registrada em SOURCES_CONFIG
            output_path: Arquivo de checkpoint (None = settings)
            storage_type: Formato do checkpoint (None = settings)
            settings: Configurações (None = get_settings())
            client: Cliente HTTP injetado na fonte
            sleep: Corrotina de espera usada pelo extrator
        """
        self.settings = settings or get_settings()
        self.source_config: SourceConfig = get_source_config(source_id)
        self.storage_type = StorageType(storage_type or self.settings.output_format)
        self.output_path = Path(output_path or self.settings.output_path)
        self._client = client
        self._sleep = sleep

        setup_logging(
            level=self.settings.log_level,
            log_path=self.settings.log_path,
            json_format=self.settings.log_json,
            source_id=source_id,
        )

        self.sink: CheckpointSink = create_sink(self.output_path, self.storage_type)

        self.logger.info(
            "BeverageCollector inicializado",
            source=source_id,
            storage_type=self.storage_type.value,
            output=str(self.output_path),
        )

    def build_config(self, **overrides: Any) -> ExtractionConfig:
        """
        Monta a configuração da extração a partir das settings.

        Args:
            **overrides: Campos de ExtractionConfig a sobrescrever
                (None é ignorado)

        Returns:
            Configuração explícita
        """
        values: dict[str, Any] = {
            "page_size": self.settings.page_size,
            "inter_request_delay": self.settings.request_delay,
            "max_consecutive_failures": self.settings.max_consecutive_failures,
            "checkpoint_every": self.settings.checkpoint_every,
            "expected_total": self.settings.expected_total,
            "progress_log_interval": self.settings.progress_log_interval,
            "initial_token": self.source_config.initial_token,
            "offset_pagination": self.source_config.pagination is PaginationStyle.OFFSET,
            "checkpoint_sink": self.sink,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ExtractionConfig(**values)

    def build_source(self, page_size: int) -> PageSource:
        """Instancia a fonte registrada para este coletor."""
        source_class = SOURCE_REGISTRY[self.source_config.id]
        return source_class(
            self.source_config,
            page_size=page_size,
            client=self._client,
        )

    async def collect(self, **overrides: Any) -> ExtractionResult:
        """
        Executa a coleta completa.

        Args:
            **overrides: Campos de ExtractionConfig a sobrescrever

        Returns:
            Resultado da extração
        """
        config = self.build_config(**overrides)

        self.logger.info(
            "Iniciando coleta",
            source=self.source_config.id,
            page_size=config.page_size,
            delay=config.inter_request_delay,
            expected=config.expected_total,
        )

        extractor = PaginatedExtractor(config, sleep=self._sleep)
        async with self.build_source(config.page_size) as source:
            return await extractor.extract_all(source)

    @staticmethod
    def get_available_sources() -> list[dict[str, str]]:
        """Lista fontes ativas para exibição."""
        return [
            {
                "id": source.id,
                "name": source.display_name,
                "status": source.status.value,
                "pagination": source.pagination.value,
            }
            for source in get_active_sources()
        ]
