"""Logging configuration for the HTTP service.

Usage:
    from context_optimizer.logging_config import configure_logging

    configure_logging()          # level from settings.log_level
    configure_logging("DEBUG")   # explicit level
"""

import logging
import sys

from .config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are too chatty at DEBUG
QUIET_LOGGERS = ("httpx", "httpcore", "multipart")


def configure_logging(level: str | None = None) -> None:
    """Install a stream handler on the root logger.

    Calling it again replaces the handler it installed before, so reloads do
    not duplicate output.

    Args:
        level: Log level name (defaults to settings.log_level)
    """
    level_name = (level or settings.log_level).upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_context_optimizer", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler._context_optimizer = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(numeric_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    logging.getLogger(__name__).debug(f"Logging configured at {level_name}")
