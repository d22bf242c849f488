"""Logging helpers for the blazor-pack CLI."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from loguru import logger


class _InterceptHandler(logging.Handler):
    """Forward stdlib records from the library modules into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(exception=record.exc_info).log(level, record.getMessage())


def init_logging(log_file: Optional[Path] = None, level: str = "INFO") -> None:
    """Configure loguru for console + file logging."""

    logger.remove()
    logger.add(
        lambda msg: print(msg, end="", file=sys.stderr),
        colorize=True,
        level=level.upper(),
    )

    target = log_file or _default_log_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    logger.add(target, level=level.upper(), rotation="10 MB", retention="7 days")

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)


def _default_log_path() -> Path:
    workspace = os.environ.get("BLAZOR_PACK_WORKSPACE", "target")
    return Path(workspace).expanduser().resolve() / "logs" / "blazor-pack.log"
