from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


_API_URL_ENV = "AIR_QUALITY_API_URL"
_API_TIMEOUT_ENV = "AIR_QUALITY_API_TIMEOUT"
_REFRESH_ENV = "DASHBOARD_REFRESH_SECONDS"
_TIMEZONE_ENV = "DASHBOARD_TIMEZONE"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_API_URL = "http://localhost:5154"
DEFAULT_API_TIMEOUT = 10.0
DEFAULT_REFRESH_SECONDS = 60


@dataclass(frozen=True)
class Settings:
    api_base_url: str
    api_timeout: float
    refresh_seconds: int
    timezone: Optional[str]
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_timeout(default: float) -> float:
    value = os.getenv(_API_TIMEOUT_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_refresh_seconds(default: int) -> int:
    value = os.getenv(_REFRESH_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed >= 0 else default


def _read_timezone() -> Optional[str]:
    value = os.getenv(_TIMEZONE_ENV)
    if value is None:
        return None
    candidate = value.strip()
    if not candidate:
        return None
    try:
        ZoneInfo(candidate)
    except (ZoneInfoNotFoundError, ValueError):
        return None
    return candidate


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        api_base_url=_read_str_env(_API_URL_ENV, DEFAULT_API_URL).rstrip("/"),
        api_timeout=_read_timeout(DEFAULT_API_TIMEOUT),
        refresh_seconds=_read_refresh_seconds(DEFAULT_REFRESH_SECONDS),
        timezone=_read_timezone(),
        log_level=_read_log_level("INFO"),
    )
