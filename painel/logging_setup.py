"""Logging configuration for the ``painel`` package.

Entry points call ``configure_logging`` once at startup. Library modules only
use ``logging.getLogger(__name__)`` and never attach handlers themselves.
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "painel"
LOG_LEVEL_ENV = "PAINEL_LOG_LEVEL"

_configured = False

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def resolve_level(level: int | str | None, fallback: str = "WARNING") -> int:
    """Resolve a logging level from an explicit value, the environment or a fallback.

    Args:
        level: Level as int or name (e.g. "INFO"). None defers to PAINEL_LOG_LEVEL.
        fallback: Level name used when nothing else is set or a name is unknown.

    Returns:
        Numeric logging level.
    """
    if isinstance(level, int):
        return level
    name = level or os.environ.get(LOG_LEVEL_ENV) or fallback
    name = name.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelName(name)
    if isinstance(numeric, int):
        return numeric
    return logging.getLevelName(fallback.upper())


def configure_logging(level: int | str | None = None, fallback: str = "WARNING") -> None:
    """Attach a single rich handler to the package logger.

    Calling it again only updates the level.
    """
    global _configured

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(resolve_level(level, fallback))

    if _configured:
        return

    handler = RichHandler(console=Console(stderr=True), show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    _configured = True
