from __future__ import annotations

import math
from typing import Mapping, Optional, Sequence

import pandas as pd
import plotly.graph_objects as go

from aggregation import AggregatedBucket, SeriesPoint
from constants import METRIC_COLORS, METRIC_FIELDS, METRIC_LABELS, THRESHOLDS
from models import Reading

DEFAULT_RADAR_MAX = 100.0


def _selected(selection: Mapping[str, bool]) -> list[str]:
    return [name for name in METRIC_FIELDS if selection.get(name)]


def series_frame(points: Sequence[SeriesPoint], selection: Mapping[str, bool]) -> pd.DataFrame:
    """
    Flatten a series into a frame with a 'label' column plus one column per
    selected metric. Raw readings are labelled with their ISO timestamp.
    """
    metrics = _selected(selection)
    rows = []
    for point in points:
        if isinstance(point, AggregatedBucket):
            row = {"label": point.label}
            row.update({name: point.values.get(name) for name in metrics})
        else:
            row = {"label": point.timestamp.isoformat(timespec="seconds")}
            row.update({name: point.metric(name) for name in metrics})
        rows.append(row)
    return pd.DataFrame(rows, columns=["label", *metrics])


def build_trend_figure(
    points: Sequence[SeriesPoint],
    selection: Mapping[str, bool],
    *,
    thresholds: Mapping[str, float] = THRESHOLDS,
    height: int = 420,
) -> go.Figure:
    fig = go.Figure()
    df = series_frame(points, selection)
    metrics = _selected(selection)
    for name in metrics:
        fig.add_trace(
            go.Scatter(
                x=df["label"],
                y=df[name],
                mode="lines+markers",
                name=METRIC_LABELS[name],
                line=dict(color=METRIC_COLORS[name], shape="spline", smoothing=0.8),
            )
        )

    # Limit line only when a single metric is shown
    if len(metrics) == 1:
        name = metrics[0]
        limit = thresholds[name]
        fig.add_hline(y=limit, line_dash="dash", line_color="#d32f2f", line_width=2)
        fig.add_annotation(
            xref="paper",
            x=1,
            xanchor="right",
            yref="y",
            y=limit,
            text=f"{METRIC_LABELS[name]} limit {limit:g} ppm",
            font=dict(color="#d32f2f", size=11),
            showarrow=False,
            yshift=10,
        )

    fig.update_layout(
        template="simple_white",
        height=height,
        margin=dict(l=40, r=20, t=40, b=40),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
        xaxis_title="Time",
        yaxis_title="Concentration (ppm)",
    )
    fig.update_xaxes(type="category")
    fig.update_yaxes(rangemode="tozero")
    return fig


def radar_max(latest: Optional[Reading], selection: Mapping[str, bool]) -> float:
    if latest is None:
        return DEFAULT_RADAR_MAX
    values = [latest.metric(name) for name in _selected(selection)]
    peak = max((v for v in values if not math.isnan(v)), default=0.0)
    return peak * 1.2 or DEFAULT_RADAR_MAX


def build_radar_figure(
    latest: Optional[Reading], selection: Mapping[str, bool], *, height: int = 420
) -> go.Figure:
    labels = [METRIC_LABELS[name] for name in METRIC_FIELDS]
    values = [
        latest.metric(name) if latest is not None and selection.get(name) else 0.0
        for name in METRIC_FIELDS
    ]
    fig = go.Figure(
        go.Scatterpolar(
            r=values + values[:1],
            theta=labels + labels[:1],
            fill="toself",
            name="Air quality",
            line=dict(color="rgba(54, 162, 235, 1)"),
            fillcolor="rgba(54, 162, 235, 0.2)",
        )
    )
    fig.update_layout(
        template="simple_white",
        height=height,
        margin=dict(l=40, r=40, t=40, b=40),
        showlegend=False,
        polar=dict(radialaxis=dict(range=[0, radar_max(latest, selection)], visible=True)),
    )
    return fig
