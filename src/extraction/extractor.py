"""
Loop de extração paginada com checkpoint.

Ciclo de vida: PRIMING -> PAGINATING -> TERMINATED.

- PRIMING: sem total esperado configurado, a primeira página é buscada para
  ler `total_count`. Em caso de falha, segue sem total (apenas `has_more`).
  A página obtida é aproveitada como primeira página do loop.
- PAGINATING: páginas buscadas em sequência; falhas transitórias repetem o
  mesmo token com espera fixa de 2x o delay, até o limite de falhas
  consecutivas.
- TERMINATED: checkpoint final sempre gravado; o resultado é marcado como
  PARTIAL quando o limite de falhas foi atingido.
"""

import asyncio
import time
from datetime import datetime
from typing import Awaitable, Callable, Optional

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from config.logging_config import LoggerMixin, LogThrottle
from src.core.exceptions import (
    ConfigurationError,
    ExtractionAborted,
    ShapeValidationError,
    SourceUnavailable,
)
from src.core.models import ExtractionConfig, ExtractionResult, PageResult
from src.core.types import ExtractionPhase, RunStatus, TerminationReason
from src.extraction.state import ExtractionState
from src.sources.base import PageSource


# Erros tratados como transitórios: a mesma página é pedida de novo
RETRYABLE_ERRORS = (SourceUnavailable, ShapeValidationError)

SleepFunc = Callable[[float], Awaitable[None]]


class PaginatedExtractor(LoggerMixin):
    """
    Extrator paginado genérico.
    Não conhece o transporte: qualquer PageSource serve.
    """

    def __init__(
        self,
        config: ExtractionConfig,
        sleep: SleepFunc = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Inicializa o extrator.

        Args:
            config: Configuração da extração
            sleep: Corrotina de espera (substituível em testes)
            clock: Relógio monotônico usado para limitar logs de progresso
        """
        if config.offset_pagination and not config.initial_token.isdigit():
            raise ConfigurationError(
                "Paginação por offset exige token inicial numérico",
                field="initial_token",
                value=config.initial_token,
            )

        self.config = config
        self._sleep = sleep
        self._clock = clock

    async def extract_all(self, source: PageSource) -> ExtractionResult:
        """
        Coleta todas as páginas da fonte.

        Args:
            source: Fonte de páginas (já aberta)

        Returns:
            Resultado com os registros; PARTIAL se o limite de falhas
            consecutivas foi atingido
        """
        source_id = getattr(source, "source_id", type(source).__name__)
        log = self.log_operation("extract_all", source=source_id)
        throttle = LogThrottle(self.config.progress_log_interval, clock=self._clock)

        state = ExtractionState(
            current_token=self.config.initial_token,
            expected_total=self.config.expected_total,
        )

        log.info(
            "Iniciando extração completa",
            expected=state.expected_total,
            page_size=self.config.page_size,
        )

        try:
            pending = await self._prime(source, state)
            state.phase = ExtractionPhase.PAGINATING

            while True:
                if pending is None:
                    if not state.within_expected_total:
                        termination = TerminationReason.EXPECTED_TOTAL_REACHED
                        break
                    pending = await self._fetch_with_retry(source, state)
                    if pending is None:
                        termination = TerminationReason.FAILURE_BUDGET
                        break

                page, pending = pending, None
                await self._consume(state, page, throttle)

                if not page.has_more:
                    termination = TerminationReason.EXHAUSTED
                    break
                if not state.within_expected_total:
                    termination = TerminationReason.EXPECTED_TOTAL_REACHED
                    break

                await self._sleep(self.config.inter_request_delay)
        finally:
            # Erros não recuperáveis ainda gravam o que foi coletado
            state.phase = ExtractionPhase.TERMINATED
            await self._checkpoint(state.accumulated, final=True)

        result = self._build_result(state, termination, source_id)

        log.info(
            "Verificação final",
            status=result.status.value,
            termination=termination.value,
            expected=result.expected_total,
            collected=result.collected,
            difference=result.difference,
            pages=result.pages_fetched,
            failed_attempts=result.failed_attempts,
        )

        return result

    # FASES

    async def _prime(
        self,
        source: PageSource,
        state: ExtractionState,
    ) -> Optional[PageResult]:
        """
        Sonda o total de itens com a primeira página.

        Returns:
            A página sondada (consumida depois pelo loop), ou None
        """
        if not state.unbounded:
            return None

        try:
            page = await self._fetch_page(source, state.current_token)
        except RETRYABLE_ERRORS as e:
            self.logger.warning(
                "Sondagem do total falhou, seguindo sem total",
                token=state.current_token,
                error=str(e),
            )
            return None

        state.expected_total = page.total_count
        self.logger.info("Total esperado", expected=state.expected_total)
        return page

    async def _fetch_with_retry(
        self,
        source: PageSource,
        state: ExtractionState,
    ) -> Optional[PageResult]:
        """
        Busca a página atual, repetindo o mesmo token em falhas transitórias.

        Returns:
            Página obtida, ou None quando o limite de falhas é atingido
        """
        page = None
        try:
            async for attempt in self._retrying():
                with attempt:
                    try:
                        page = await self._fetch_page(source, state.current_token)
                    except RETRYABLE_ERRORS as e:
                        state.record_failure(e)
                        self.logger.warning(
                            "Erro ao buscar lote",
                            attempt=state.consecutive_failures,
                            max_failures=self.config.max_consecutive_failures,
                            token=state.current_token,
                            error=str(e),
                        )
                        raise
        except RETRYABLE_ERRORS:
            self.logger.error(
                "Limite de falhas consecutivas atingido",
                failures=state.consecutive_failures,
                token=state.current_token,
            )
            return None
        return page

    def _retrying(self) -> AsyncRetrying:
        """Política de repetição: espera fixa, sem crescimento exponencial."""
        return AsyncRetrying(
            stop=stop_after_attempt(self.config.max_consecutive_failures),
            wait=wait_fixed(self.config.failure_backoff),
            retry=retry_if_exception_type(RETRYABLE_ERRORS),
            sleep=self._sleep,
            reraise=True,
        )

    async def _fetch_page(self, source: PageSource, token: str) -> PageResult:
        """Busca e valida uma página."""
        page = await source.fetch_page(token)

        if not isinstance(page, PageResult):
            raise ShapeValidationError(
                "Fonte retornou objeto inesperado",
                field="page",
                raw_data=repr(page),
            )
        if page.has_more and page.next_token is None and not self.config.offset_pagination:
            raise ShapeValidationError(
                "Página indica continuação sem próximo cursor",
                field="next_token",
            )
        return page

    async def _consume(
        self,
        state: ExtractionState,
        page: PageResult,
        throttle: LogThrottle,
    ) -> None:
        """Incorpora uma página ao estado e grava checkpoint periódico."""
        next_token = self._next_token(state.current_token, page)
        state.record_page(page.records, next_token)

        self.logger.debug(
            "Lote coletado",
            batch=page.size,
            total=state.collected_count,
            next_cursor=next_token,
        )
        if throttle.ready():
            self.logger.info(
                "Progresso",
                collected=state.collected_count,
                expected=state.expected_total,
                pages=state.pages_fetched,
            )

        if page.records and state.collected_count % self.config.checkpoint_every == 0:
            await self._checkpoint(state.accumulated)

    def _next_token(self, current: str, page: PageResult) -> str:
        """Token da próxima página: offset calculado ou cursor da fonte."""
        if self.config.offset_pagination:
            return str(int(current) + self.config.page_size)
        if page.next_token is not None:
            return page.next_token
        return current

    async def _checkpoint(self, records: list[str], final: bool = False) -> bool:
        """
        Grava checkpoint. Falhas são registradas e não interrompem a extração.

        Returns:
            True se o checkpoint foi gravado
        """
        try:
            await self.config.checkpoint_sink.save(list(records))
        except Exception as e:
            self.logger.warning(
                "Falha ao salvar checkpoint",
                count=len(records),
                final=final,
                error=str(e),
            )
            return False

        self.logger.info(
            "Checkpoint final salvo" if final else "Progresso salvo",
            count=len(records),
        )
        return True

    def _build_result(
        self,
        state: ExtractionState,
        termination: TerminationReason,
        source_id: str,
    ) -> ExtractionResult:
        """Monta o resultado marcado (SUCCESS ou PARTIAL)."""
        status = RunStatus.from_termination(termination)
        error = None
        if status is RunStatus.PARTIAL:
            error = ExtractionAborted(
                records=state.accumulated,
                failures=state.consecutive_failures,
                token=state.current_token,
                cause=state.last_error,
            )

        return ExtractionResult(
            source_id=source_id,
            status=status,
            termination=termination,
            records=list(state.accumulated),
            expected_total=state.expected_total,
            pages_fetched=state.pages_fetched,
            failed_attempts=state.failed_attempts,
            consecutive_failures=state.consecutive_failures,
            started_at=state.started_at,
            finished_at=datetime.now(),
            error=error,
        )


async def extract_all(
    page_source: PageSource,
    config: ExtractionConfig,
    *,
    sleep: SleepFunc = asyncio.sleep,
) -> ExtractionResult:
    """
    Atalho funcional para PaginatedExtractor(config).extract_all(source).

    Args:
        page_source: Fonte de páginas
        config: Configuração explícita da extração
        sleep: Corrotina de espera

    Returns:
        Resultado da extração
    """
    return await PaginatedExtractor(config, sleep=sleep).extract_all(page_source)
