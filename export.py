from __future__ import annotations

import io
from typing import Iterable

import pandas as pd

from constants import METRIC_FIELDS, METRIC_LABELS
from models import Reading

TIMESTAMP_COLUMN = "Timestamp"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
CRITICAL_EVENTS_FILENAME = "critical_events.csv"


def critical_events_frame(events: Iterable[Reading]) -> pd.DataFrame:
    columns = [TIMESTAMP_COLUMN, *(METRIC_LABELS[name] for name in METRIC_FIELDS)]
    rows = []
    for event in events:
        row = {TIMESTAMP_COLUMN: event.timestamp.strftime(TIMESTAMP_FORMAT)}
        for name in METRIC_FIELDS:
            row[METRIC_LABELS[name]] = event.metric(name)
        rows.append(row)
    return pd.DataFrame(rows, columns=columns)


def export_critical_events_csv(events: Iterable[Reading]) -> str:
    return critical_events_frame(events).to_csv(index=False)


def parse_critical_events_csv(text: str) -> pd.DataFrame:
    df = pd.read_csv(io.StringIO(text))
    df[TIMESTAMP_COLUMN] = pd.to_datetime(df[TIMESTAMP_COLUMN], format=TIMESTAMP_FORMAT)
    return df
