"""
Configuração de logging estruturado usando structlog.
Gera logs em formato JSON para produção e colorido para desenvolvimento.
"""

import logging
import sys
import time
from pathlib import Path
from typing import Callable, Optional

import structlog
from structlog.typing import Processor


def setup_logging(
    level: str = "INFO",
    log_path: Optional[Path] = None,
    json_format: bool = False,
    source_id: Optional[str] = None,
) -> structlog.BoundLogger:
    """
    Configura o sistema de logging.

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR)
        log_path: Diretório para salvar arquivos de log
        json_format: Se True, usa formato JSON (produção)
        source_id: ID da fonte, bindado ao logger retornado

    Returns:
        Logger configurado
    """

    # Processadores comuns
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_format:
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(
                colors=log_path is None,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    log_level = getattr(logging, level.upper())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # structlog e bibliotecas (httpx) passam pelo logging padrão
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )
    root = logging.getLogger()
    root.setLevel(log_level)

    if log_path:
        log_path.mkdir(parents=True, exist_ok=True)
        log_file = (log_path / "extractor.log").resolve()

        # Chamadas repetidas não duplicam o handler do mesmo arquivo
        if not any(
            isinstance(h, logging.FileHandler) and Path(h.baseFilename) == log_file
            for h in root.handlers
        ):
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setLevel(log_level)
            root.addHandler(file_handler)

    logger = structlog.get_logger()

    if source_id:
        logger = logger.bind(source=source_id)

    return logger


def get_logger(name: str = "bebidas_extractor", **context) -> structlog.BoundLogger:
    """
    Retorna um logger com contexto.

    Args:
        name: Nome do logger
        **context: Contexto adicional para bind

    Returns:
        Logger com contexto
    """
    logger = structlog.get_logger(name)
    if context:
        logger = logger.bind(**context)
    return logger


class LoggerMixin:
    """Mixin para adicionar logging a classes."""

    @property
    def logger(self) -> structlog.BoundLogger:
        """Retorna logger com nome da classe."""
        if not hasattr(self, "_logger"):
            self._logger = get_logger(self.__class__.__name__)
        return self._logger

    def log_operation(
        self,
        operation: str,
        **kwargs,
    ) -> structlog.BoundLogger:
        """Retorna logger com operação bindada."""
        return self.logger.bind(operation=operation, **kwargs)


class LogThrottle:
    """
    Limita a frequência de uma linha de log recorrente.

    O instante da última emissão só é atualizado quando a linha é de fato
    emitida, de modo que `ready()` volta a ser verdadeiro a cada `interval`
    segundos, independente de quantas vezes for consultado.
    """

    def __init__(
        self,
        interval: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.interval = interval
        self._clock = clock
        self._last_emit: Optional[float] = None

    def ready(self) -> bool:
        """Retorna True (e registra a emissão) se o intervalo já passou."""
        now = self._clock()
        if self._last_emit is None or now - self._last_emit >= self.interval:
            self._last_emit = now
            return True
        return False

    def reset(self) -> None:
        """Esquece a última emissão; a próxima consulta libera o log."""
        self._last_emit = None
