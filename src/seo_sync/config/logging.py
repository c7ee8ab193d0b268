"""loguru sinks for the sync worker and the one-off CLIs."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from seo_sync.config.settings import Settings, get_settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> | <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {process}:{thread.name} | {name}:{function}:{line} | {message}"


def setup_logging(settings: Settings | None = None, to_file: bool | None = None) -> Path | None:
    """Replace loguru's default sink with ours.

    Returns the log directory when a file sink was added. Scheduler runs happen on
    APScheduler worker threads, so the file sink records the thread name.
    """
    settings = settings or get_settings()
    to_file = settings.log_to_file if to_file is None else to_file
    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=settings.log_level.upper(), colorize=True)

    if not to_file:
        return None

    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_dir / "seo_sync_{time:YYYY-MM-DD}.log",
        format=FILE_FORMAT,
        level="DEBUG",
        rotation="00:00",
        retention="14 days",
        compression="gz",
        enqueue=True,
    )
    logger.info("Writing logs to {} ({})", log_dir, settings.app_env)
    return log_dir
