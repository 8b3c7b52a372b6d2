"""
Logging configuration for the application.

``setup_logging`` configures the root logger with a console handler
and, when a log file is configured, a file handler.  It only runs
once per process: repeated calls (for example from tests building
several applications) leave the existing handlers alone.

Strawberry logs every resolver failure at ERROR level with a
traceback.  Validation, auth and not-found failures are ordinary
outcomes that the services already log, so ``ExpectedErrorFilter``
drops strawberry's copy of them and keeps everything else.
"""

import logging
from pathlib import Path
from typing import Optional

from .errors import LibraryError

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
STRAWBERRY_LOGGER = "strawberry.execution"


def _library_error(exc: Optional[BaseException]) -> Optional[LibraryError]:
    """Find a ``LibraryError`` wrapped inside GraphQL errors."""
    seen = set()
    while exc is not None and id(exc) not in seen:
        if isinstance(exc, LibraryError):
            return exc
        seen.add(id(exc))
        exc = getattr(exc, "original_error", None) or exc.__cause__
    return None


class ExpectedErrorFilter(logging.Filter):
    """Reject log records whose exception is a request-level ``LibraryError``."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not record.exc_info:
            return True
        return _library_error(record.exc_info[1]) is None


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure root logger.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path to a file to log messages to.  If omitted or empty, no
        file handler is added.
    """
    strawberry_logger = logging.getLogger(STRAWBERRY_LOGGER)
    if not any(isinstance(f, ExpectedErrorFilter) for f in strawberry_logger.filters):
        strawberry_logger.addFilter(ExpectedErrorFilter())

    logger = logging.getLogger()
    if logger.handlers:
        return

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
