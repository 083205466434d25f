"""
Classe base para fontes de páginas.
Toda fonte (API GraphQL, navegador, arquivo) expõe a mesma operação
`fetch_page(token) -> PageResult`, de modo que o loop de extração é
idêntico para qualquer adaptador.
"""

from abc import ABC, abstractmethod
from typing import Optional

from config.logging_config import LoggerMixin
from src.core.models import PageResult


class PageSource(ABC, LoggerMixin):
    """
    Classe base abstrata para fontes de páginas.
    Pode ser usada como gerenciador de contexto assíncrono para abrir e
    liberar recursos (cliente HTTP, browser).
    """

    source_id: str = "unknown"

    def __init__(self, page_size: int = 100):
        """
        Inicializa a fonte.

        Args:
            page_size: Registros pedidos por página
        """
        if page_size <= 0:
            raise ValueError("page_size deve ser maior que zero")
        self.page_size = page_size

    # MÉTODOS ABSTRATOS

    @abstractmethod
    async def fetch_page(self, token: str) -> PageResult:
        """
        Busca a página identificada por `token`.

        Raises:
            SourceUnavailable: Erro de transporte, status HTTP ou JSON
            ShapeValidationError: Payload sem os campos esperados
        """
        pass

    # CICLO DE VIDA

    async def open(self) -> None:
        """Aloca recursos da fonte. Padrão: nada a fazer."""
        return None

    async def close(self) -> None:
        """Libera recursos da fonte. Padrão: nada a fazer."""
        return None

    async def __aenter__(self) -> "PageSource":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> Optional[bool]:
        await self.close()
        return None
