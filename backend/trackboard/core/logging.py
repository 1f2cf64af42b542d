"""Loguru sink setup, called once by the application entry point."""
from __future__ import annotations
import sys
from typing import Optional

from loguru import logger

from trackboard.core import config


def configure_logging(level: Optional[str] = None) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=level or config.LOG_LEVEL,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    )
