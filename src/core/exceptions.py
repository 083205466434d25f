"""
Hierarquia de exceções do sistema.
Todas as exceções herdam de ExtractorError para facilitar tratamento.
"""

from typing import Any, Optional


class ExtractorError(Exception):
    """
    Exceção base do sistema.
    Todas as exceções customizadas herdam desta classe.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        base = self.message
        if self.details:
            base += f" | Details: {self.details}"
        if self.cause:
            base += f" | Caused by: {self.cause}"
        return base

    def to_dict(self) -> dict[str, Any]:
        """Serializa exceção para dicionário."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "cause": str(self.cause) if self.cause else None,
        }


# EXCEÇÕES DA FONTE DE PÁGINAS

class SourceUnavailable(ExtractorError):
    """Falha transitória ao buscar uma página (rede, status HTTP, JSON)."""

    def __init__(
        self,
        message: str = "Fonte indisponível",
        *,
        source_id: Optional[str] = None,
        token: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if source_id:
            details["source_id"] = source_id
        if token is not None:
            details["token"] = token
        if status_code:
            details["status_code"] = status_code
        super().__init__(message, details=details, **kwargs)
        self.source_id = source_id
        self.token = token
        self.status_code = status_code


class ShapeValidationError(ExtractorError):
    """Payload da fonte sem os campos esperados."""

    def __init__(
        self,
        message: str = "Estrutura de resposta inválida",
        *,
        field: Optional[str] = None,
        raw_data: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if raw_data:
            # Limita tamanho para não poluir logs
            details["raw_data"] = raw_data[:200] if len(raw_data) > 200 else raw_data
        super().__init__(message, details=details, **kwargs)
        self.field = field


# EXCEÇÕES DE CHECKPOINT

class CheckpointWriteError(ExtractorError):
    """Falha ao gravar checkpoint. Registrada em log, nunca interrompe a extração."""

    def __init__(
        self,
        message: str = "Erro ao salvar checkpoint",
        *,
        path: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if path:
            details["path"] = path
        super().__init__(message, details=details, **kwargs)
        self.path = path


# EXCEÇÕES DE EXTRAÇÃO

class ExtractionAborted(ExtractorError):
    """
    Limite de falhas consecutivas atingido antes do fim da paginação.
    Carrega os registros parciais acumulados até a interrupção.
    """

    def __init__(
        self,
        message: str = "Extração interrompida: limite de falhas consecutivas atingido",
        *,
        records: Optional[list[str]] = None,
        failures: int = 0,
        token: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        details["collected"] = len(records or [])
        details["consecutive_failures"] = failures
        if token is not None:
            details["token"] = token
        super().__init__(message, details=details, **kwargs)
        self.records = list(records or [])
        self.failures = failures
        self.token = token


# EXCEÇÕES DE CONFIGURAÇÃO

class ConfigurationError(ExtractorError):
    """Configuração de extração inválida."""

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if value is not None:
            details["invalid_value"] = str(value)
        super().__init__(message, details=details, **kwargs)
