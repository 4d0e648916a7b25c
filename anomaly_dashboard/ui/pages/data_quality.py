from __future__ import annotations

from typing import List

import pandas as pd
import streamlit as st

from anomaly_dashboard.config import CATEGORIES
from anomaly_dashboard.data.dates import parse_timestamps
from anomaly_dashboard.ui.components.kpi import KpiCard, render_kpi_cards
from anomaly_dashboard.ui.pages.context import PageContext


def _percentage_missing(series: pd.Series) -> float:
    total = len(series)
    if total == 0:
        return 0.0
    return float(series.isna().sum() / total * 100)


def _percentage_unparsed(series: pd.Series) -> float:
    total = len(series)
    if total == 0:
        return 0.0
    present = series.notna()
    unparsed = present & parse_timestamps(series).isna()
    return float(unparsed.sum() / total * 100)


def compute_quality_metrics(df: pd.DataFrame) -> List[KpiCard]:
    empty = pd.Series(dtype=object)
    missing_dates = _percentage_missing(df.get("date_reported", empty))
    unparsed_dates = _percentage_unparsed(df.get("date_reported", empty))
    missing_source = _percentage_missing(df.get("source_link", empty))
    categories = df.get("category", empty)
    uncurated = float((categories.notna() & ~categories.isin(CATEGORIES)).mean() * 100) if len(categories) else 0.0
    return [
        KpiCard(label="Missing Report Date", value=missing_dates, value_display=f"{missing_dates:.1f}%"),
        KpiCard(label="Unparseable Report Date", value=unparsed_dates, value_display=f"{unparsed_dates:.1f}%"),
        KpiCard(label="Missing Source Link", value=missing_source, value_display=f"{missing_source:.1f}%"),
        KpiCard(
            label="Uncurated Categories",
            value=uncurated,
            value_display=f"{uncurated:.1f}%",
            help_text="Shown and counted, but not offered in the category filter.",
        ),
    ]


def render(df: pd.DataFrame, context: PageContext) -> None:
    st.subheader("Data Quality")
    records = context.records
    if records.empty:
        st.info("No diagnostics available yet.")
        return

    render_kpi_cards(compute_quality_metrics(records), columns=4)

    st.markdown("#### Load Diagnostics")
    diagnostics = records.attrs.get("diagnostics", {})
    if diagnostics:
        for key, value in diagnostics.items():
            st.write(f"- **{key.replace('_', ' ').title()}**: {value}")
    else:
        st.info("No diagnostics metadata available.")

    st.markdown("#### Definitions")
    st.write(
        """
        - **Daily buckets** use the UTC calendar day of the selected date source.
        - **Slash dates** are read day-first (`03/04/2024` is 3 April); month-first is tried only when that fails (`1/15/2024`).
        - **Unparseable dates** keep the record in the table and category counts, but out of the trend and any date-range filter.
        - **Descriptions** have their leading `Incident <number>:` prefix removed.
        """
    )
