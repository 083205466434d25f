"""
Modelos de dados Pydantic para o sistema.
Define estruturas de página, configuração e resultado da extração.
"""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from src.core.exceptions import ExtractionAborted
from src.core.types import PageSize, PageToken, RunStatus, Seconds, TerminationReason


class PageRequest(BaseModel):
    """Pedido de uma página: token opaco + tamanho fixo."""

    model_config = ConfigDict(frozen=True)

    cursor: PageToken
    page_size: PageSize


class PageResult(BaseModel):
    """
    Página retornada pela fonte.
    Consumida uma única vez pelo extrator.
    """

    records: list[str] = Field(default_factory=list)
    has_more: bool
    next_token: Optional[str] = None
    total_count: Optional[int] = Field(default=None, ge=0)

    @computed_field
    @property
    def size(self) -> int:
        """Quantidade de registros da página."""
        return len(self.records)


class ExtractionConfig(BaseModel):
    """
    Configuração explícita de uma extração.
    Substitui as constantes globais (tamanho do lote, delay, arquivo de saída).
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    page_size: PageSize = 100
    inter_request_delay: Seconds = 1.0
    max_consecutive_failures: int = Field(default=5, ge=1)
    checkpoint_every: int = Field(default=500, gt=0)

    # Qualquer objeto com `async save(records)`
    checkpoint_sink: Any = Field(..., exclude=True)

    initial_token: PageToken = "0"

    # None = desconhecido (faz a chamada de sondagem)
    expected_total: Optional[int] = Field(default=None, ge=0)

    # Avança o token em page_size quando a página não traz next_token
    offset_pagination: bool = False

    progress_log_interval: Seconds = 5.0

    @field_validator("checkpoint_sink")
    @classmethod
    def validate_sink(cls, v: Any) -> Any:
        """Garante que o destino de checkpoint implementa `save`."""
        if not callable(getattr(v, "save", None)):
            raise ValueError("checkpoint_sink deve implementar save(records)")
        return v

    @computed_field
    @property
    def failure_backoff(self) -> float:
        """Espera após uma falha: dobro do delay entre requisições."""
        return self.inter_request_delay * 2


class ExtractionResult(BaseModel):
    """
    Resultado de uma extração.

    `status` distingue a coleta completa (SUCCESS) da interrompida pelo
    limite de falhas (PARTIAL); neste caso `error` carrega ExtractionAborted
    com os registros parciais.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    run_id: UUID = Field(default_factory=uuid4)
    source_id: Optional[str] = None

    status: RunStatus
    termination: TerminationReason
    records: list[str] = Field(default_factory=list)

    expected_total: Optional[int] = None
    pages_fetched: int = 0
    failed_attempts: int = 0
    consecutive_failures: int = 0

    started_at: datetime = Field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None

    error: Optional[ExtractionAborted] = Field(default=None, exclude=True)

    @computed_field
    @property
    def collected(self) -> int:
        """Total de registros coletados."""
        return len(self.records)

    @computed_field
    @property
    def difference(self) -> Optional[int]:
        """Diferença entre esperado e coletado (None se total desconhecido)."""
        if self.expected_total is None:
            return None
        return self.expected_total - self.collected

    @computed_field
    @property
    def duration_seconds(self) -> Optional[float]:
        """Duração da extração em segundos."""
        if self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()

    @property
    def ok(self) -> bool:
        """Indica extração completa."""
        return self.status is RunStatus.SUCCESS

    def raise_for_status(self) -> "ExtractionResult":
        """
        Levanta ExtractionAborted se a extração foi parcial.

        Returns:
            O próprio resultado, quando completo
        """
        if self.error is not None:
            raise self.error
        return self

    def summary(self) -> dict[str, Any]:
        """Resumo para exibição (esperado, coletado, diferença)."""
        return {
            "status": self.status.value,
            "termination": self.termination.value,
            "expected": self.expected_total,
            "collected": self.collected,
            "difference": self.difference,
            "pages": self.pages_fetched,
        }
