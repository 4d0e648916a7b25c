"""
Reusable helpers for rendering the anomaly table with consistent configuration.
"""

from __future__ import annotations

from typing import Any, List, Optional

import pandas as pd
import streamlit as st

from anomaly_dashboard.config import TABLE_COLUMNS, ColumnConfig


def table_frame(df: pd.DataFrame, columns: List[ColumnConfig] = TABLE_COLUMNS) -> pd.DataFrame:
    fields = [col.field for col in columns]
    return df.reindex(columns=fields).reset_index(drop=True)


def render_records_table(
    df: pd.DataFrame,
    height: int = 500,
    key: str = "anomaly_table",
) -> Optional[Any]:
    """Render the records and return the id of the row the user selected, if any."""
    if df.empty:
        st.info("No anomalies match the current filters.")
        return None

    display_df = table_frame(df)
    column_config = {col.field: st.column_config.TextColumn(col.header) for col in TABLE_COLUMNS}
    column_config["source_link"] = st.column_config.LinkColumn("Source Link", display_text="View Source")

    event = st.dataframe(
        display_df,
        width="stretch",
        height=height,
        hide_index=True,
        column_config=column_config,
        on_select="rerun",
        selection_mode="single-row",
        key=key,
    )
    rows = list(getattr(getattr(event, "selection", None), "rows", []) or [])
    if not rows or rows[0] >= len(display_df):
        return None
    return display_df.iloc[rows[0]]["id"]
