"""Time-window filtering, threshold checks and bucketed averages over readings.

Every function here is pure: inputs are never mutated and empty inputs
produce empty results (or ``None`` / ``AirQualityStatus.UNKNOWN``) instead of
raising. Missing or NaN metric values are not filtered out; they propagate
into averages and comparisons as-is.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence, Union

from constants import METRIC_FIELDS, STATUS_DETAILS, THRESHOLDS
from models import Reading
from utils.time import minute_of_day

RAW_WINDOW_MINUTES = 30


class AirQualityStatus(str, Enum):
    GOOD = "Good"
    MODERATE = "Moderate"
    POOR = "Poor"
    UNKNOWN = "Unknown"

    @property
    def color(self) -> str:
        return STATUS_DETAILS[self.value][0]

    @property
    def description(self) -> str:
        return STATUS_DETAILS[self.value][1]


@dataclass(frozen=True)
class TimeWindow:
    """A minute range within one calendar day; both ends are inclusive."""

    day: date
    start_minute: int = 0
    end_minute: int = 1439

    @property
    def start(self) -> datetime:
        return minute_of_day(self.day, self.start_minute)

    @property
    def end(self) -> datetime:
        return minute_of_day(self.day, self.end_minute)

    @property
    def length(self) -> int:
        return self.end_minute - self.start_minute


@dataclass(frozen=True)
class AggregatedBucket:
    label: str
    values: Dict[str, float] = field(default_factory=dict)
    sample_count: int = 0


SeriesPoint = Union[Reading, AggregatedBucket]


def default_metric_selection() -> Dict[str, bool]:
    return {name: True for name in METRIC_FIELDS}


def window_readings(readings: Sequence[Reading], window: TimeWindow) -> List[Reading]:
    start, end = window.start, window.end
    return [
        r
        for r in readings
        if r.timestamp.date() == window.day and start <= r.timestamp <= end
    ]


def most_recent(readings: Sequence[Reading]) -> Optional[Reading]:
    """Latest reading across the whole list, regardless of the selected window."""
    if not readings:
        return None
    return max(readings, key=lambda r: r.timestamp)


def exceeded_metrics(
    reading: Reading, thresholds: Mapping[str, float] = THRESHOLDS
) -> List[str]:
    return [name for name, limit in thresholds.items() if reading.metric(name) > limit]


def critical_events(
    readings: Sequence[Reading], thresholds: Mapping[str, float] = THRESHOLDS
) -> List[Reading]:
    return [r for r in readings if exceeded_metrics(r, thresholds)]


def bucket_width(window: TimeWindow) -> Optional[int]:
    """Bucket width in minutes, or None when the window is short enough to show raw readings."""
    length = window.length
    if length <= RAW_WINDOW_MINUTES:
        return None
    if length > 12 * 60:
        return 60
    if length > 4 * 60:
        return 30
    if length > 60:
        return 10
    return 1


def aggregate_by_interval(
    windowed: Sequence[Reading],
    window: TimeWindow,
    metrics: Mapping[str, bool],
) -> List[SeriesPoint]:
    """
    Average the windowed readings into fixed-width buckets anchored at the
    window start.

    Short windows (30 minutes or less) return the readings unchanged. Buckets
    without readings are skipped, so the series is sparse. Only metrics
    flagged in ``metrics`` are averaged; with none selected nothing is emitted.
    """
    width = bucket_width(window)
    if width is None:
        return list(windowed)

    selected = [name for name in METRIC_FIELDS if metrics.get(name)]
    if not selected:
        return []

    hourly = width >= 60
    current = window.start.replace(second=0, microsecond=0)
    if hourly:
        current = current.replace(minute=0)
    label_format = "%H:00" if hourly else "%H:%M"
    step = timedelta(minutes=width)
    end = window.end

    buckets: List[SeriesPoint] = []
    while current < end:
        upper = current + step
        members = [r for r in windowed if current <= r.timestamp < upper]
        if members:
            values = {
                name: sum(r.metric(name) for r in members) / len(members)
                for name in selected
            }
            buckets.append(
                AggregatedBucket(
                    label=current.strftime(label_format),
                    values=values,
                    sample_count=len(members),
                )
            )
        current = upper
    return buckets


def count_exceedances(
    reading: Reading, thresholds: Mapping[str, float] = THRESHOLDS
) -> int:
    return len(exceeded_metrics(reading, thresholds))


def classify_air_quality(
    latest: Optional[Reading], thresholds: Mapping[str, float] = THRESHOLDS
) -> AirQualityStatus:
    if latest is None:
        return AirQualityStatus.UNKNOWN
    exceedances = count_exceedances(latest, thresholds)
    if exceedances == 0:
        return AirQualityStatus.GOOD
    if exceedances <= 2:
        return AirQualityStatus.MODERATE
    return AirQualityStatus.POOR
