"""Logging configuration

Every record carries the correlation id of the request it was logged from
(see app.core.middleware), so all lines of one booking attempt, lock wait
included, can be pulled out of the log together.
"""
import logging
import sys
from contextvars import ContextVar

from app.config.settings import get_settings

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="-")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s"

NOISY_LOGGERS = [
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "sqlalchemy.orm",
    "alembic",
    "redis",
    "uvicorn",
    "uvicorn.error",
    "uvicorn.access",
]


class CorrelationIdFilter(logging.Filter):
    """Fill record.correlation_id from the current request context"""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = correlation_id_var.get()
        return True


def setup_logging(verbose=True):
    """Configure application logging"""
    settings = get_settings()

    if verbose:
        level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    else:
        level = logging.WARNING

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[handler])

    if not verbose:
        for name in NOISY_LOGGERS:
            logger = logging.getLogger(name)
            logger.setLevel(logging.ERROR)
            logger.propagate = False
