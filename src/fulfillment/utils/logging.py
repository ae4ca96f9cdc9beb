"""Logging configuration for the fulfillment engine.

structlog renders key-value events on top of the standard library handlers.
Log level follows PROTEAN_ENV unless LOG_LEVEL overrides it. Operator actions
run inside ``operation_context`` so every event they emit carries the order,
operator and action.
"""

import logging
import os
import sys
from contextlib import contextmanager

import structlog

_LEVELS = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

# Libraries that log every request or query at INFO
_NOISY_LOGGERS = ("protean", "httpx", "asyncio", "sqlalchemy.engine")


def _environment() -> str:
    return (os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    return os.getenv("LOG_LEVEL", _LEVELS.get(_environment(), "INFO"))


def setup_stdlib_logging() -> None:
    log_level = get_log_level()

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    root_logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_structlog() -> None:
    """JSON events in production and staging, plain console lines elsewhere."""
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]

    if _environment() in ("production", "staging"):
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging() -> None:
    setup_stdlib_logging()
    setup_structlog()


@contextmanager
def operation_context(operation: str, order_id: str, operator_id: str):
    """Tag every log event emitted inside the block with the operator action."""
    with structlog.contextvars.bound_contextvars(
        operation=operation,
        order_id=str(order_id),
        operator_id=str(operator_id),
    ):
        yield
