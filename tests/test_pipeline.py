from __future__ import annotations

import logging
from datetime import date, datetime
from typing import List, Optional

import pytest

from aggregation import AirQualityStatus
from api_client import ApiError
from models import Reading
from pipeline import DashboardState, build_view, refresh

DAY = date(2026, 2, 1)


def make_reading(ts: str, **metrics) -> Reading:
    values = dict(co2_ppm=400.0, nh3_ppm=1.0, benzene_ppm=0.01, lpg_ppm=10.0, co_ppm=1.0)
    values.update(metrics)
    return Reading(id=ts, timestamp=datetime.fromisoformat(ts), temperature=20.0, humidity=30.0, **values)


class StubClient:
    def __init__(self, readings: List[Reading], error: Optional[Exception] = None) -> None:
        self.readings = readings
        self.error = error
        self.tokens: List[Optional[str]] = []

    def fetch_readings(self, token: Optional[str] = None) -> List[Reading]:
        self.tokens.append(token)
        if self.error is not None:
            raise self.error
        return self.readings


READINGS = [
    make_reading("2026-02-01T08:10:00", co2_ppm=1100.0),
    make_reading("2026-02-01T08:40:00"),
    make_reading("2026-02-02T06:00:00", co2_ppm=1500.0, nh3_ppm=60.0, benzene_ppm=0.2),
    make_reading("2026-01-30T12:00:00", co_ppm=10.0),
]


def test_build_view_scopes_window_but_not_latest_or_critical():
    state = DashboardState(day=DAY, start_minute=480, end_minute=600)

    view = build_view(READINGS, state)

    assert [r.id for r in view.windowed] == ["2026-02-01T08:10:00", "2026-02-01T08:40:00"]
    assert view.latest.id == "2026-02-02T06:00:00"
    assert [r.id for r in view.critical] == [
        "2026-02-01T08:10:00",
        "2026-02-02T06:00:00",
        "2026-01-30T12:00:00",
    ]
    assert view.status is AirQualityStatus.POOR
    assert view.bucket_minutes == 10
    assert [b.label for b in view.series] == ["08:10", "08:40"]


def test_build_view_metric_selection_only_affects_series():
    metrics = {"co2_ppm": False, "nh3_ppm": True, "benzene_ppm": False, "lpg_ppm": False, "co_ppm": False}
    state = DashboardState(day=DAY, start_minute=480, end_minute=600, metrics=metrics)

    view = build_view(READINGS, state)

    assert len(view.critical) == 3
    assert all(set(b.values) == {"nh3_ppm"} for b in view.series)
    assert state.selected_metrics == ["nh3_ppm"]


def test_build_view_empty_data():
    view = build_view([], DashboardState(day=DAY))

    assert view.windowed == []
    assert view.latest is None
    assert view.critical == []
    assert view.series == []
    assert view.status is AirQualityStatus.UNKNOWN


def test_refresh_fetches_with_state_token():
    client = StubClient(READINGS)
    state = DashboardState(day=DAY, start_minute=480, end_minute=500, token="tok")

    view = refresh(client, state)

    assert client.tokens == ["tok"]
    assert view.bucket_minutes is None
    assert view.series == view.windowed


def test_refresh_logs_fetched_and_windowed_counts_separately(caplog):
    client = StubClient(READINGS)
    state = DashboardState(day=DAY, start_minute=480, end_minute=600)

    with caplog.at_level(logging.INFO, logger="pipeline"):
        refresh(client, state)

    record = next(r for r in caplog.records if r.getMessage() == "Dashboard refreshed")
    assert record.reading_count == 4
    assert record.windowed_count == 2
    assert record.critical_count == 3


def test_refresh_propagates_api_errors():
    client = StubClient([], error=ApiError("down", 503))

    with pytest.raises(ApiError):
        refresh(client, DashboardState(day=DAY))
