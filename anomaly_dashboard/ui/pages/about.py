from __future__ import annotations

import pandas as pd
import streamlit as st

from anomaly_dashboard.ui.pages.context import PageContext

FEATURES = [
    (
        "Comprehensive Data Tracking",
        "Anomaly monitoring with detailed categorization and search across every report.",
    ),
    (
        "Interactive Visualizations",
        "Charts that break reports down by category and by day.",
    ),
    (
        "Anomaly Classification",
        "A fixed set of categories for identifying and grouping unusual events.",
    ),
]


def render(df: pd.DataFrame, context: PageContext) -> None:
    st.subheader("GlitchWatch")
    st.markdown("**Anomaly Tracking & Analysis Platform**")
    st.write(
        "GlitchWatch monitors and visualizes reported anomalies across categories, "
        "with tools to search, summarize and export the reports."
    )
    cols = st.columns(len(FEATURES))
    for col, (title, description) in zip(cols, FEATURES):
        with col:
            st.markdown(f"#### {title}")
            st.caption(description)
