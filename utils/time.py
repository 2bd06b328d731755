from __future__ import annotations

from datetime import date, datetime, time as time_t, timedelta
from typing import Any, Optional
from zoneinfo import ZoneInfo

import pandas as pd


def to_local_naive(value: Any, tz: Optional[str] = None) -> datetime:
    """
    Parse an ISO-8601-like value via pandas and return a naive datetime in
    local display time. Values carrying an offset are converted to ``tz``
    (or the system timezone when ``tz`` is None); naive values are taken as
    already local. Raises ValueError when the value cannot be parsed.
    """
    try:
        ts = pd.Timestamp(value)
    except TypeError as exc:
        raise ValueError(f"Unparseable timestamp: {value!r}") from exc
    if pd.isna(ts):
        raise ValueError(f"Unparseable timestamp: {value!r}")
    dt = ts.to_pydatetime()
    if dt.tzinfo is not None:
        dt = dt.astimezone(ZoneInfo(tz) if tz else None).replace(tzinfo=None)
    return dt


def minute_of_day(d: date, minutes: int) -> datetime:
    """Return the datetime ``minutes`` after midnight of ``d``."""
    return datetime.combine(d, time_t.min) + timedelta(minutes=minutes)


def format_minutes(minutes: int) -> str:
    """Format an offset from midnight as 'HH:MM', e.g. 615 -> '10:15'."""
    hours, mins = divmod(int(minutes), 60)
    return f"{hours:02d}:{mins:02d}"
