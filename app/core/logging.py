"""Logging setup for the API process."""

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.core.config import Settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def resolve_log_level(settings: "Settings") -> int:
    """LOG_LEVEL wins; otherwise verbose in dev, INFO in prod."""
    if settings.LOG_LEVEL:
        return getattr(logging, settings.LOG_LEVEL, logging.INFO)
    return logging.INFO if settings.is_production else logging.DEBUG


def configure_logging(settings: "Settings") -> None:
    """Configure the root logger and quiet noisy third-party loggers."""
    logging.basicConfig(
        level=resolve_log_level(settings),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
