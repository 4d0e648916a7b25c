from __future__ import annotations

import pandas as pd
import streamlit as st

from anomaly_dashboard.data.models import AnomalyRecord
from anomaly_dashboard.ui.components.exports import render_export_buttons
from anomaly_dashboard.ui.components.formatting import format_number, format_timestamp
from anomaly_dashboard.ui.components.tables import render_records_table
from anomaly_dashboard.ui.pages.context import PageContext


def _render_detail(record: AnomalyRecord) -> None:
    st.markdown("#### Anomaly Details")
    if record.image_link:
        st.image(record.image_link, caption=f"Visual documentation of {record.category} anomaly", width="stretch")
    st.markdown(f"**Category:** {record.category or '–'}")
    st.markdown(f"**Location:** {record.location or '–'}")
    st.markdown(f"**Reported:** {format_timestamp(record.date_reported)}")
    st.markdown("**Description:**")
    st.write(record.description or "")
    if record.updated_resume:
        st.markdown("**Resume:**")
        st.write(record.updated_resume)
    if record.source_link:
        st.markdown(f"[View Source]({record.source_link})")


def render(df: pd.DataFrame, context: PageContext) -> None:
    st.subheader("Anomalies Database")
    state = context.state

    st.caption(
        f"Showing {format_number(len(df), 0)} of {format_number(len(state.records), 0)} anomalies."
    )
    render_export_buttons(state.csv_export(), state.pdf_table())

    selected_id = render_records_table(df)
    if selected_id is not None:
        state.select(selected_id)
    else:
        state.clear_selection()

    record = state.selected
    if record is not None:
        with st.container(border=True):
            _render_detail(record)
            if st.button("Close", key="anomaly_detail_close"):
                state.clear_selection()
                st.session_state.pop("anomaly_table", None)
                st.rerun()
    else:
        st.caption("Select a row to see the full report.")
