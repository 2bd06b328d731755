from __future__ import annotations

import logging
from datetime import date, datetime

import streamlit as st

from api_client import AirQualityClient, ApiError, AuthenticationError
from constants import METRIC_FIELDS, METRIC_LABELS
from models import Reading

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
EMAIL_KEY = "email"


def render_login_form(client: AirQualityClient) -> None:
    if st.session_state.get(TOKEN_KEY):
        st.caption(f"Signed in as {st.session_state.get(EMAIL_KEY) or 'unknown user'}")
        if st.button("Log out", use_container_width=True):
            st.session_state.pop(TOKEN_KEY, None)
            st.session_state.pop(EMAIL_KEY, None)
            st.rerun()
        return

    with st.form("login_form", clear_on_submit=False):
        st.subheader("Sign in")
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Sign in", use_container_width=True)
        if submitted:
            try:
                token = client.login(email.strip(), password)
            except AuthenticationError:
                st.error("Invalid email or password.")
                return
            except ApiError as e:
                st.error(str(e))
                return
            st.session_state[TOKEN_KEY] = token
            st.session_state[EMAIL_KEY] = email.strip()
            try:
                client.subscribe_notifications(token, email.strip())
            except ApiError as e:
                logger.warning("Notification subscription failed", extra={"reason": str(e)})
            st.rerun()


def render_add_reading_form(client: AirQualityClient) -> None:
    st.subheader("Submit a reading")
    with st.form("reading_form", clear_on_submit=True):
        today = date.today()
        now = datetime.now().time().replace(second=0, microsecond=0)
        col1, col2 = st.columns(2)
        with col1:
            d = st.date_input("Date", value=today)
        with col2:
            t = st.time_input("Time", value=now, step=60)
        col3, col4 = st.columns(2)
        with col3:
            temperature = st.number_input("Temperature (°C)", value=22.0, step=0.1, format="%.1f")
        with col4:
            humidity = st.number_input("Humidity (%)", min_value=0.0, max_value=100.0, value=40.0, step=0.5)
        metric_values = {}
        cols = st.columns(len(METRIC_FIELDS))
        for col, name in zip(cols, METRIC_FIELDS):
            with col:
                metric_values[name] = st.number_input(
                    f"{METRIC_LABELS[name]} (ppm)",
                    min_value=0.0,
                    value=0.0,
                    step=0.01,
                    format="%.2f",
                    key=f"reading_{name}",
                )
        submitted = st.form_submit_button("Submit reading")
        if submitted:
            reading = Reading(
                id=None,
                timestamp=datetime.combine(d, t),
                temperature=float(temperature),
                humidity=float(humidity),
                **{name: float(value) for name, value in metric_values.items()},
            )
            try:
                client.submit_reading(reading, st.session_state.get(TOKEN_KEY))
            except ApiError as e:
                st.error(str(e))
            else:
                st.success("Reading submitted.")
