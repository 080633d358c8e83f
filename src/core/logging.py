"""Logging configuration."""
import logging
import sys

from src.core.config import settings


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger; repeated calls only adjust the level."""

    global _configured

    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)
    _configured = True
