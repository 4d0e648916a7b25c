"""
Plotly figures for the statistics tab: category distribution, category share
and the report trend.
"""

from __future__ import annotations

from typing import Dict, Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from anomaly_dashboard.config import CATEGORIES

TEMPLATE = "plotly_white"
CATEGORY_COLORS: Dict[str, str] = dict(zip(CATEGORIES, ["#6a3d9a", "#1f78b4", "#e31a1c"]))
OTHER_COLOR = "#9e9e9e"
TREND_COLOR = "#6a3d9a"


def _color_map(categories: pd.Series) -> Dict[str, str]:
    return {name: CATEGORY_COLORS.get(name, OTHER_COLOR) for name in categories.astype(str)}


def _style(fig: go.Figure, title: Optional[str], yaxis_title: Optional[str] = None) -> go.Figure:
    fig.update_layout(
        template=TEMPLATE,
        title=title,
        showlegend=False,
        margin=dict(l=40, r=20, t=60, b=40),
    )
    if yaxis_title:
        fig.update_yaxes(title=yaxis_title, rangemode="tozero")
    fig.update_xaxes(showgrid=False, title=None)
    return fig


def render_plotly(fig: go.Figure) -> None:
    st.plotly_chart(fig, width="stretch", config={"displayModeBar": False})


def category_bar(breakdown: pd.DataFrame, title: str = "Anomaly Distribution") -> go.Figure:
    """Bar per category with the report count printed above it."""
    fig = px.bar(
        breakdown,
        x="Category",
        y="Count",
        color="Category",
        color_discrete_map=_color_map(breakdown["Category"]),
        text_auto=True,
    )
    fig.update_traces(textposition="outside", cliponaxis=False)
    return _style(fig, title, yaxis_title="Reports")


def category_pie(breakdown: pd.DataFrame, title: str = "Category Breakdown") -> go.Figure:
    fig = px.pie(
        breakdown,
        names="Category",
        values="Count",
        color="Category",
        color_discrete_map=_color_map(breakdown["Category"]),
    )
    # whole percentages on the slices, exact counts on hover
    fig.update_traces(texttemplate="%{percent:.0%}", hovertemplate="%{label}: %{value}<extra></extra>")
    fig.update_layout(template=TEMPLATE, title=title, margin=dict(l=20, r=20, t=60, b=20))
    return fig


def trend_line(trend: pd.DataFrame, title: str = "Reports over Time (UTC)") -> go.Figure:
    fig = px.line(trend, x="date", y="count", markers=True)
    fig.update_traces(line_color=TREND_COLOR)
    fig.update_layout(hovermode="x unified")
    return _style(fig, title, yaxis_title="Reports")
