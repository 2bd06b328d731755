"""Fetch -> filter -> aggregate -> classify, driven by an explicit state object."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import date
from typing import List, Mapping, Optional, Sequence

from aggregation import (
    AirQualityStatus,
    SeriesPoint,
    TimeWindow,
    aggregate_by_interval,
    bucket_width,
    classify_air_quality,
    critical_events,
    default_metric_selection,
    most_recent,
    window_readings,
)
from api_client import AirQualityClient
from constants import THRESHOLDS
from models import Reading

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardState:
    """Everything a render cycle depends on besides the fetched data."""

    day: date
    start_minute: int = 0
    end_minute: int = 1439
    metrics: Mapping[str, bool] = field(default_factory=default_metric_selection)
    token: Optional[str] = None

    @property
    def window(self) -> TimeWindow:
        return TimeWindow(self.day, self.start_minute, self.end_minute)

    @property
    def selected_metrics(self) -> List[str]:
        return [name for name, enabled in self.metrics.items() if enabled]


@dataclass(frozen=True)
class DashboardView:
    windowed: List[Reading]
    latest: Optional[Reading]
    critical: List[Reading]
    series: List[SeriesPoint]
    status: AirQualityStatus
    bucket_minutes: Optional[int]


def build_view(
    readings: Sequence[Reading],
    state: DashboardState,
    thresholds: Mapping[str, float] = THRESHOLDS,
) -> DashboardView:
    window = state.window
    windowed = window_readings(readings, window)
    latest = most_recent(readings)
    return DashboardView(
        windowed=windowed,
        latest=latest,
        critical=critical_events(readings, thresholds),
        series=aggregate_by_interval(windowed, window, state.metrics),
        status=classify_air_quality(latest, thresholds),
        bucket_minutes=bucket_width(window),
    )


def refresh(client: AirQualityClient, state: DashboardState) -> DashboardView:
    """Run one refresh cycle. Overlapping calls are not coalesced."""
    started = time.perf_counter()
    readings = client.fetch_readings(state.token)
    view = build_view(readings, state)
    logger.info(
        "Dashboard refreshed",
        extra={
            "reading_count": len(readings),
            "windowed_count": len(view.windowed),
            "critical_count": len(view.critical),
            "bucket_count": len(view.series),
            "elapsed_ms": int((time.perf_counter() - started) * 1000),
        },
    )
    return view
