"""
Testes unitários para os modelos de dados.
"""

import pytest
from pydantic import ValidationError

from src.core.exceptions import ExtractionAborted
from src.core.models import ExtractionConfig, ExtractionResult, PageRequest, PageResult
from src.core.types import RunStatus, TerminationReason
from tests.fixtures.pages import RecordingSink


class TestPageRequest:
    """Testes para PageRequest."""

    def test_imutavel(self):
        """Pedido de página não pode ser alterado."""
        request = PageRequest(cursor="0", page_size=100)

        with pytest.raises(ValidationError):
            request.cursor = "100"

    def test_page_size_positivo(self):
        """page_size zero é rejeitado."""
        with pytest.raises(ValidationError):
            PageRequest(cursor="0", page_size=0)


class TestPageResult:
    """Testes para PageResult."""

    def test_nomes_preservados(self):
        """Nomes são guardados como a fonte os devolve."""
        result = PageResult(records=["  Cerveja   Brahma  350ml "], has_more=False)

        assert result.records == ["  Cerveja   Brahma  350ml "]
        assert result.size == 1

    def test_total_negativo_invalido(self):
        """total_count negativo é rejeitado."""
        with pytest.raises(ValidationError):
            PageResult(records=[], has_more=False, total_count=-1)


class TestExtractionConfig:
    """Testes para ExtractionConfig."""

    def test_valores_padrao(self):
        """Padrões: lote 100, 1s de delay, 5 falhas, checkpoint a cada 500."""
        config = ExtractionConfig(checkpoint_sink=RecordingSink())

        assert config.page_size == 100
        assert config.inter_request_delay == 1.0
        assert config.max_consecutive_failures == 5
        assert config.checkpoint_every == 500
        assert config.initial_token == "0"
        assert config.expected_total is None
        assert config.failure_backoff == 2.0

    def test_destino_sem_save(self):
        """Destino sem `save` é rejeitado."""
        with pytest.raises(ValidationError):
            ExtractionConfig(checkpoint_sink=object())

    @pytest.mark.parametrize(
        "field,value",
        [
            ("page_size", 0),
            ("inter_request_delay", -1),
            ("max_consecutive_failures", 0),
            ("checkpoint_every", 0),
            ("expected_total", -5),
        ],
    )
    def test_limites(self, field, value):
        """Valores fora dos limites são rejeitados."""
        with pytest.raises(ValidationError):
            ExtractionConfig(checkpoint_sink=RecordingSink(), **{field: value})


class TestExtractionResult:
    """Testes para ExtractionResult."""

    def test_sucesso(self):
        """Resultado completo: diferença e raise_for_status."""
        result = ExtractionResult(
            status=RunStatus.SUCCESS,
            termination=TerminationReason.EXHAUSTED,
            records=["a", "b"],
            expected_total=3,
        )

        assert result.ok
        assert result.collected == 2
        assert result.difference == 1
        assert result.raise_for_status() is result

    def test_parcial(self):
        """Resultado parcial expõe o erro anexado."""
        error = ExtractionAborted(records=["a"], failures=5)
        result = ExtractionResult(
            status=RunStatus.PARTIAL,
            termination=TerminationReason.FAILURE_BUDGET,
            records=["a"],
            error=error,
        )

        assert not result.ok
        assert result.difference is None
        with pytest.raises(ExtractionAborted):
            result.raise_for_status()

    def test_resumo(self):
        """summary traz esperado, coletado e diferença."""
        result = ExtractionResult(
            status=RunStatus.SUCCESS,
            termination=TerminationReason.EXPECTED_TOTAL_REACHED,
            records=["a", "b", "c"],
            expected_total=3,
            pages_fetched=2,
        )

        assert result.summary() == {
            "status": "success",
            "termination": "expected_total_reached",
            "expected": 3,
            "collected": 3,
            "difference": 0,
            "pages": 2,
        }

    def test_status_a_partir_do_encerramento(self):
        """Só o limite de falhas gera PARTIAL."""
        assert RunStatus.from_termination(TerminationReason.FAILURE_BUDGET) is RunStatus.PARTIAL
        assert RunStatus.from_termination(TerminationReason.EXHAUSTED) is RunStatus.SUCCESS
        assert RunStatus.from_termination(TerminationReason.EXPECTED_TOTAL_REACHED) is RunStatus.SUCCESS
