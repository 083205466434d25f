"""
Estado mutável de uma extração.
Pertence exclusivamente ao extrator e só muda entre passos de paginação.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from src.core.types import ExtractionPhase


@dataclass
class ExtractionState:
    """Estado de uma execução do loop de paginação."""

    current_token: str
    expected_total: Optional[int] = None
    accumulated: list[str] = field(default_factory=list)
    consecutive_failures: int = 0
    failed_attempts: int = 0
    pages_fetched: int = 0
    phase: ExtractionPhase = ExtractionPhase.PRIMING
    last_error: Optional[Exception] = None
    started_at: datetime = field(default_factory=datetime.now)

    @property
    def collected_count(self) -> int:
        """Total coletado; sempre igual a len(accumulated)."""
        return len(self.accumulated)

    @property
    def unbounded(self) -> bool:
        """Total esperado desconhecido: o loop segue apenas `has_more`."""
        return self.expected_total is None

    @property
    def within_expected_total(self) -> bool:
        """Ainda falta coletar para atingir o total esperado."""
        return self.unbounded or self.collected_count < self.expected_total

    def record_page(self, records: list[str], next_token: str) -> None:
        """
        Registra uma página bem-sucedida.

        Args:
            records: Registros da página
            next_token: Token da próxima página
        """
        self.accumulated.extend(records)
        self.pages_fetched += 1
        self.current_token = next_token
        self.consecutive_failures = 0
        self.last_error = None

    def record_failure(self, error: Exception) -> None:
        """Registra uma tentativa falha no token atual."""
        self.consecutive_failures += 1
        self.failed_attempts += 1
        self.last_error = error
