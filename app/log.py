from __future__ import annotations

from pathlib import Path
import sys
from typing import Optional

from loguru import logger


LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def configure_logging(debug: bool = False, level: str = "INFO", log_dir: Optional[Path] = None) -> None:
    logger.remove()
    console_level = "DEBUG" if debug else level
    logger.add(sys.stderr, level=console_level, format=LOG_FORMAT, backtrace=debug, diagnose=False)
    if log_dir is None:
        return
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.warning(f"File logging disabled, cannot create {log_dir}: {exc}")
        return
    logger.add(
        log_dir / "poster_viewer.log",
        level="DEBUG",
        format=LOG_FORMAT,
        rotation="1 MB",
        retention=3,
        encoding="utf-8",
    )
