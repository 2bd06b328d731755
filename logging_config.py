from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Iterable

from settings import get_settings

CONTEXT_KEYS = (
    "endpoint",
    "status_code",
    "reading_count",
    "windowed_count",
    "critical_count",
    "bucket_count",
    "elapsed_ms",
    "reason",
)

# Streamlit owns the root logger; only the dashboard's own modules are routed here.
DASHBOARD_LOGGERS = ("api_client", "pipeline", "models", "forms")

_configured = False


class ContextualFormatter(logging.Formatter):
    """Append selected ``extra`` attributes to the message as ``key=value``."""

    def __init__(self, fmt: str | None = None, datefmt: str | None = None, keys: Iterable[str] = CONTEXT_KEYS) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._keys = tuple(keys)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = " ".join(
            f"{key}={getattr(record, key)}" for key in self._keys if getattr(record, key, None) is not None
        )
        return f"{message} | {context}" if context else message


def configure_logging() -> None:
    global _configured
    if _configured:
        return

    log_level = get_settings().log_level
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "contextual": {
                    "()": ContextualFormatter,
                    "fmt": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                }
            },
            "handlers": {
                "default": {"class": "logging.StreamHandler", "formatter": "contextual"}
            },
            "loggers": {
                name: {"handlers": ["default"], "level": log_level, "propagate": False}
                for name in DASHBOARD_LOGGERS
            },
        }
    )
    _configured = True
