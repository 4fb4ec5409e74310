"""Loguru setup shared by every life_parser module.

Sinks are installed once, on the first ``get_logger`` call, and file sinks
are opened lazily so importing the package never touches the filesystem.
Call ``configure_logging`` again to move the log directory or change level.
"""

import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger
from loguru._logger import Logger as LoguruLogger

from life_parser.config import settings

_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[component]}</cyan> - <level>{message}</level>"
)
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[component]} - {message}"

_configured = False


def _ours(record: dict) -> bool:
    return "component" in record["extra"]


def configure_logging(
    log_dir: Optional[Union[str, Path]] = None, level: Optional[str] = None
) -> Path:
    """Install the console sink plus ``parser.log`` and ``errors.log``.

    Returns the directory the file sinks write to.
    """
    global _configured
    directory = Path(log_dir or settings.log_dir)
    logger.remove()

    logger.add(
        sys.stderr,
        format=_CONSOLE_FORMAT,
        level=level or settings.log_level,
        filter=_ours,
        colorize=True,
    )
    # Unknown inputs, registrations and dialogue traces
    logger.add(
        directory / "parser.log",
        format=_FILE_FORMAT,
        level="DEBUG",
        filter=_ours,
        rotation="10 MB",
        retention="7 days",
        delay=True,
    )
    logger.add(
        directory / "errors.log",
        format=_FILE_FORMAT,
        level="ERROR",
        filter=_ours,
        rotation="10 MB",
        retention="30 days",
        delay=True,
    )

    _configured = True
    return directory


def get_logger(name: str) -> LoguruLogger:
    """Logger tagged with ``name``; configures the sinks on first use."""
    if not _configured:
        configure_logging()
    return logger.bind(component=name)  # type: ignore[return-value]
