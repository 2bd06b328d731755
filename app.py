from __future__ import annotations

from datetime import date
from typing import Optional

import pandas as pd
import streamlit as st

from aggregation import AirQualityStatus, exceeded_metrics
from api_client import AirQualityClient, ApiError
from charts import build_radar_figure, build_trend_figure
from constants import METRIC_FIELDS, METRIC_LABELS, MINUTES_PER_DAY_MAX, TIME_RANGE_STEP
from export import CRITICAL_EVENTS_FILENAME, export_critical_events_csv
from forms import TOKEN_KEY, render_add_reading_form, render_login_form
from logging_config import configure_logging
from models import Reading
from pipeline import DashboardState, DashboardView, refresh
from settings import get_settings
from utils.time import format_minutes

_TIME_OPTIONS = list(range(0, MINUTES_PER_DAY_MAX + 1, TIME_RANGE_STEP)) + [MINUTES_PER_DAY_MAX]

_STATUS_BOX = {
    AirQualityStatus.GOOD: st.success,
    AirQualityStatus.MODERATE: st.warning,
    AirQualityStatus.POOR: st.error,
    AirQualityStatus.UNKNOWN: st.info,
}


@st.cache_resource
def get_client() -> AirQualityClient:
    return AirQualityClient(get_settings())


def _render_latest(latest: Optional[Reading]) -> None:
    st.subheader("Latest reading")
    if latest is None:
        st.info("No data")
        return
    col1, col2 = st.columns(2)
    col1.metric("Temperature", f"{latest.temperature} °C")
    col2.metric("Humidity", f"{latest.humidity} %")
    cols = st.columns(len(METRIC_FIELDS))
    for col, name in zip(cols, METRIC_FIELDS):
        col.metric(METRIC_LABELS[name], f"{latest.metric(name)} ppm")
    st.caption(f"Recorded at {latest.timestamp:%Y-%m-%d %H:%M:%S}")


def _render_status(status: AirQualityStatus) -> None:
    st.subheader("Air quality status")
    _STATUS_BOX[status](f"**{status.value}**: {status.description}")


def _render_chart(view: DashboardView, state: DashboardState) -> None:
    st.subheader("Air quality chart")
    chart_type = st.radio("Chart type", ["Radar", "Line"], horizontal=True, key="chart_type")
    if chart_type == "Radar":
        st.plotly_chart(build_radar_figure(view.latest, state.metrics), use_container_width=True)
        return
    if view.bucket_minutes is None:
        st.caption("Showing raw readings.")
    else:
        st.caption(f"Averaged every {view.bucket_minutes} min.")
    if not view.series:
        st.info("No readings in the selected time range.")
        return
    st.plotly_chart(build_trend_figure(view.series, state.metrics), use_container_width=True)


def _render_critical(critical: list[Reading]) -> None:
    st.subheader("Critical events")
    if not critical:
        st.info("No critical events")
        return
    rows = []
    for event in critical:
        row = {"Time": event.timestamp.strftime("%Y-%m-%d %H:%M:%S")}
        for name in METRIC_FIELDS:
            row[f"{METRIC_LABELS[name]} (ppm)"] = event.metric(name)
        row["Exceeded"] = ", ".join(METRIC_LABELS[name] for name in exceeded_metrics(event))
        rows.append(row)
    st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
    st.download_button(
        "Export CSV",
        data=export_critical_events_csv(critical),
        file_name=CRITICAL_EVENTS_FILENAME,
        mime="text/csv",
    )


def _render_dashboard(
    client: AirQualityClient,
    day: date,
    start_minute: int,
    end_minute: int,
    token: Optional[str],
) -> None:
    st.caption("Metrics")
    cols = st.columns(len(METRIC_FIELDS))
    metrics = {
        name: col.checkbox(METRIC_LABELS[name], value=True, key=f"metric_{name}")
        for col, name in zip(cols, METRIC_FIELDS)
    }
    state = DashboardState(
        day=day,
        start_minute=start_minute,
        end_minute=end_minute,
        metrics=metrics,
        token=token,
    )
    try:
        view = refresh(client, state)
    except ApiError as e:
        st.error(f"Could not load readings: {e}")
        return

    col_left, col_right = st.columns([1, 2])
    with col_left:
        _render_latest(view.latest)
        _render_status(view.status)
    with col_right:
        _render_chart(view, state)
    _render_critical(view.critical)


def main() -> None:
    configure_logging()
    settings = get_settings()
    st.set_page_config(page_title="Air Quality Dashboard", page_icon="🌫️", layout="wide")
    st.title("🌫️ Air Quality Dashboard")
    st.caption("Sensor readings, threshold exceedances and trends over time.")

    client = get_client()

    with st.sidebar:
        render_login_form(client)
        st.divider()
        st.subheader("Select date")
        day = st.date_input("Date", value=date.today())
        start_minute, end_minute = st.select_slider(
            "Time range",
            options=_TIME_OPTIONS,
            value=(0, MINUTES_PER_DAY_MAX),
            format_func=format_minutes,
        )
        st.caption(f"Selected: {format_minutes(start_minute)}–{format_minutes(end_minute)}")

    run_every = settings.refresh_seconds or None
    dashboard = st.fragment(run_every=run_every)(_render_dashboard)

    tabs = st.tabs(["Dashboard", "Submit reading"])
    with tabs[0]:
        dashboard(client, day, start_minute, end_minute, st.session_state.get(TOKEN_KEY))
    with tabs[1]:
        render_add_reading_form(client)


if __name__ == "__main__":
    main()
