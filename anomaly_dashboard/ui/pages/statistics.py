from __future__ import annotations

import pandas as pd
import streamlit as st

from anomaly_dashboard.data.aggregate import AggregateView, category_breakdown, daily_frame
from anomaly_dashboard.ui.components.charts import category_bar, category_pie, render_plotly, trend_line
from anomaly_dashboard.ui.components.formatting import format_percent
from anomaly_dashboard.ui.components.kpi import KpiCard, render_kpi_cards
from anomaly_dashboard.ui.pages.context import PageContext

GRANULARITY_OPTIONS = {
    "Daily": "D",
    "Weekly": "W",
    "Monthly": "MS",
}


def _kpis(view: AggregateView, breakdown: pd.DataFrame) -> list[KpiCard]:
    top = breakdown.iloc[0] if not breakdown.empty else None
    return [
        KpiCard(label="Total Anomalies", value=view.total_count),
        KpiCard(label="Categories", value=len(view.category_counts)),
        KpiCard(
            label="Most Reported",
            value_display=str(top["Category"]) if top is not None else "–",
            help_text=f"{format_percent(top['Share'], 0)} of filtered reports" if top is not None else None,
        ),
    ]


def render(df: pd.DataFrame, context: PageContext) -> None:
    st.subheader("Statistics")
    if df.empty:
        st.info("No anomalies to summarize for the current filters.")
        return

    view = context.state.aggregate()
    breakdown = category_breakdown(view, sort_by="count")
    render_kpi_cards(_kpis(view, breakdown), columns=3)

    col_bar, col_pie = st.columns(2)
    with col_bar:
        render_plotly(category_bar(breakdown))
    with col_pie:
        render_plotly(category_pie(breakdown))

    granularity_label = st.radio(
        "Trend Granularity",
        options=list(GRANULARITY_OPTIONS.keys()),
        index=0,
        horizontal=True,
        key="anomaly_trend_granularity",
    )
    trend = daily_frame(view, freq=GRANULARITY_OPTIONS[granularity_label])
    if trend.empty:
        st.info("No parseable dates in the filtered reports.")
    else:
        render_plotly(trend_line(trend))
    if view.undated_count:
        st.caption(f"{view.undated_count} report(s) have no parseable date and are left out of the trend.")

    st.dataframe(
        breakdown,
        width="stretch",
        hide_index=True,
        column_config={"Share": st.column_config.NumberColumn("Share", format="%.1f%%")},
    )
