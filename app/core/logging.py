"""Structured logging for the localization service.

Loggers are structlog BoundLoggers over the standard logging module. Request
scoped values (path, resolved language) are carried through structlog
contextvars, so every event logged while localizing a response is tagged
with the request it belongs to.
"""

import inspect
import logging
import sys
from typing import Optional

import structlog
from structlog.stdlib import BoundLogger

from .config import settings

# Level above CRITICAL: nothing is emitted.
SILENT = logging.CRITICAL + 1


def _is_test_environment() -> bool:
    """Detect if running in a test environment."""
    return "pytest" in sys.modules


def _processors(is_production: bool) -> list:
    chain = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]
    chain.append(
        structlog.processors.JSONRenderer()
        if is_production
        else structlog.dev.ConsoleRenderer()
    )
    return chain


def configure_logging(
    log_level: Optional[str] = None,
    is_production: Optional[bool] = None,
) -> BoundLogger:
    """Configure structlog and the root logger.

    Args:
        log_level: Overrides settings.LOG_LEVEL.
        is_production: Render JSON (True) or console output (False);
            defaults to settings.is_production.

    Returns:
        The root BoundLogger. Under pytest all output is dropped.
    """
    if _is_test_environment():
        structlog.configure(
            processors=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(format="%(message)s", level=SILENT, force=True)
        logging.root.setLevel(SILENT)
        return structlog.stdlib.get_logger()

    if is_production is None:
        is_production = settings.is_production
    level_name = (log_level or settings.LOG_LEVEL).upper()

    structlog.configure(
        processors=_processors(is_production),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level_name, logging.INFO),
    )
    return structlog.stdlib.get_logger().bind(environment=settings.ENVIRONMENT)


logger: BoundLogger = configure_logging()


def get_module_logger() -> BoundLogger:
    """Get a logger bound to the calling module.

    "infrastructure.i18n.translator" gives component="translator".
    """
    frame = inspect.currentframe()
    module = inspect.getmodule(frame.f_back) if frame is not None else None
    if module is None:
        return logger.bind(component="unknown")

    return logger.bind(
        component=module.__name__.rsplit(".", 1)[-1],
        module_path=module.__name__,
    )


def bind_request_context(**values) -> None:
    """Replace the request-scoped logging context with values."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**values)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
