# app/utils/my_logging.py
"""Logging configuration"""
import logging
import sys
from typing import Optional

from app.config.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Framework loggers that drown out booking and slot logs at INFO
CHATTY_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "uvicorn.access")


def setup_logging(level: Optional[str] = None):
    """
    Configure root logging to stdout at LOG_LEVEL (or `level`).

    SQL and access logs are only let through when the app runs in DEBUG.
    """
    settings = get_settings()
    level_name = (level or settings.LOG_LEVEL).upper()

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    chatty_level = logging.DEBUG if settings.DEBUG else logging.WARNING
    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(chatty_level)
