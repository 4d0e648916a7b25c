"""
Layout helpers for the Streamlit application (page setup and sidebar filters).
"""

from __future__ import annotations

import datetime as dt
from typing import List, Optional, Tuple

import pandas as pd
import streamlit as st

from anomaly_dashboard.config import CATEGORIES, DATE_FIELDS
from anomaly_dashboard.data.dates import utc_days
from anomaly_dashboard.data.filters import DEFAULT_FILTERS, FilterState

ALL_CATEGORIES = "All Categories"
DATE_PRESETS = ["All", "30D", "6M", "1Y", "YTD", "Custom"]
FILTER_STATE_PREFIXES = ["anomaly_search", "anomaly_category", "anomaly_date_"]


def setup_page() -> None:
    """Set Streamlit page configuration."""
    st.set_page_config(
        page_title="GlitchWatch",
        layout="wide",
        page_icon=":crystal_ball:",
    )


def _as_date(value, fallback: pd.Timestamp) -> dt.date:
    """Date widget default: the value already held in session state, else ``fallback``."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    return fallback.date()


def preset_range(
    preset: str,
    first_day: Optional[pd.Timestamp],
    last_day: Optional[pd.Timestamp],
    today: Optional[pd.Timestamp] = None,
) -> Tuple[Optional[pd.Timestamp], Optional[pd.Timestamp]]:
    """Date bounds for a named preset, anchored on the latest record day."""
    if preset in ("All", "Custom"):
        return None, None
    today = today if today is not None else pd.Timestamp.now(tz="UTC").tz_localize(None).normalize()
    end = last_day if last_day is not None else today
    if preset == "30D":
        start = end - pd.Timedelta(days=29)
    elif preset == "6M":
        start = end - pd.DateOffset(months=6)
    elif preset == "1Y":
        start = end - pd.DateOffset(years=1)
    elif preset == "YTD":
        start = pd.Timestamp(year=end.year, month=1, day=1)
    else:
        return None, None
    return start, end


def _derive_date_range(days: pd.Series) -> Tuple[Optional[pd.Timestamp], Optional[pd.Timestamp]]:
    days = days.dropna().sort_values()
    first_day = days.iloc[0] if not days.empty else None
    last_day = days.iloc[-1] if not days.empty else None

    preset = st.sidebar.selectbox(
        "Date Preset",
        DATE_PRESETS,
        index=0,
        key="anomaly_date_preset",
        help="Choose a preset or select Custom to pick the range yourself.",
    )
    if preset != "Custom":
        return preset_range(preset, first_day, last_day)

    today = pd.Timestamp.now(tz="UTC").tz_localize(None).normalize()
    col_start, col_end = st.sidebar.columns(2)
    with col_start:
        start_input = st.date_input(
            "Start",
            value=_as_date(st.session_state.get("anomaly_date_start"), first_day if first_day is not None else today),
            key="anomaly_date_start",
        )
    with col_end:
        end_input = st.date_input(
            "End",
            value=_as_date(st.session_state.get("anomaly_date_end"), last_day if last_day is not None else today),
            key="anomaly_date_end",
        )
    start = pd.Timestamp(start_input)
    end = pd.Timestamp(end_input)
    if start > end:
        st.sidebar.warning("Start date must be before or equal to End date. Adjusting range.")
        start, end = end, start
    return start, end


def sidebar_filters_ui(records: pd.DataFrame, defaults: FilterState = DEFAULT_FILTERS) -> FilterState:
    """
    Render the sidebar filter controls and return the selected values.
    """
    st.sidebar.header("Filters")

    search_text = st.sidebar.text_input(
        "Search Anomalies",
        value=defaults.search_text,
        key="anomaly_search",
        help="Matches category, description or location (case-insensitive).",
    )

    # Curated menu only; other categories still show in the table and charts
    options = [ALL_CATEGORIES] + CATEGORIES
    default_category = defaults.category if defaults.category in options else ALL_CATEGORIES
    category_choice = st.sidebar.selectbox(
        "Filter by Category",
        options=options,
        index=options.index(default_category),
        key="anomaly_category",
    )
    category = None if category_choice == ALL_CATEGORIES else category_choice

    date_labels = list(DATE_FIELDS.keys())
    date_field_label = st.sidebar.radio(
        "Date Source",
        options=date_labels,
        index=list(DATE_FIELDS.values()).index(defaults.date_field) if defaults.date_field in DATE_FIELDS.values() else 0,
        key="anomaly_date_field",
        horizontal=True,
    )
    date_field = DATE_FIELDS[date_field_label]

    if date_field in records.columns and not records.empty:
        days = utc_days(records[date_field])
    else:
        days = pd.Series(dtype="datetime64[ns]")
    date_range = _derive_date_range(days)

    if st.sidebar.button("Reset Filters", key="anomaly_reset_filters", type="primary"):
        _clear_state_prefixes(FILTER_STATE_PREFIXES)
        st.rerun()

    return FilterState(
        search_text=search_text,
        category=category,
        date_range=date_range,
        date_field=date_field,
    )


def _clear_state_prefixes(prefixes: List[str]) -> None:
    for prefix in prefixes:
        for key in list(st.session_state.keys()):
            if key.startswith(prefix):
                del st.session_state[key]
