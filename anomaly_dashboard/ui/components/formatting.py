"""
Utility helpers for formatting counts, percentages and timestamps.
"""

from __future__ import annotations

from typing import Any, Optional

import pandas as pd

from anomaly_dashboard.data.dates import parse_timestamps


def format_number(value: Optional[float], decimals: int = 0) -> str:
    if value is None:
        return "–"
    try:
        return f"{value:,.{decimals}f}"
    except (TypeError, ValueError):
        return "–"


def format_percent(value: Optional[float], decimals: int = 1) -> str:
    if value is None:
        return "–"
    try:
        return f"{value:.{decimals}f}%"
    except (TypeError, ValueError):
        return "–"


def format_timestamp(value: Any, fmt: str = "%Y-%m-%d %H:%M UTC") -> str:
    """Display form of a stored timestamp; falls back to the raw text when it does not parse."""
    if value is None:
        return "–"
    parsed = parse_timestamps(pd.Series([value], dtype=object)).iloc[0]
    if pd.isna(parsed):
        return str(value)
    return parsed.strftime(fmt)
