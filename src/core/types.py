"""
Tipos customizados e enumerações do sistema.
"""

from enum import Enum
from typing import Annotated

from pydantic import Field, StringConstraints


# ENUMERAÇÕES

class ExtractionPhase(str, Enum):
    """Fase do ciclo de vida de uma extração."""

    PRIMING = "priming"
    PAGINATING = "paginating"
    TERMINATED = "terminated"


class TerminationReason(str, Enum):
    """Motivo do encerramento do loop de paginação."""

    EXHAUSTED = "exhausted"                        # hasMore == false
    EXPECTED_TOTAL_REACHED = "expected_total_reached"
    FAILURE_BUDGET = "failure_budget"              # falhas consecutivas esgotadas


class RunStatus(str, Enum):
    """Status final de uma extração."""

    SUCCESS = "success"
    PARTIAL = "partial"           # Registros parciais, limite de falhas atingido

    @classmethod
    def from_termination(cls, reason: TerminationReason) -> "RunStatus":
        """Infere o status a partir do motivo de encerramento."""
        if reason is TerminationReason.FAILURE_BUDGET:
            return cls.PARTIAL
        return cls.SUCCESS


# TIPOS ANOTADOS

# Token de paginação (cursor ou offset, definido pela fonte)
PageToken = Annotated[str, StringConstraints(strip_whitespace=True)]

# Tamanho de página
PageSize = Annotated[int, Field(gt=0)]

# Duração em segundos
Seconds = Annotated[float, Field(ge=0)]
