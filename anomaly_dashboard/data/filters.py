"""
Filter utilities that apply the dashboard filters to the normalized records.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from anomaly_dashboard.data.dates import to_utc_day, utc_days

SEARCH_COLUMNS: List[str] = ["category", "description", "location"]

DateBound = Optional[Any]


@dataclass(frozen=True)
class FilterState:
    search_text: str = ""
    category: Optional[str] = None
    date_range: Tuple[DateBound, DateBound] = field(default=(None, None))
    date_field: str = "date_reported"

    def with_changes(self, **changes: Any) -> "FilterState":
        return replace(self, **changes)


DEFAULT_FILTERS = FilterState()


def _lowered_text(df: pd.DataFrame, column: str) -> pd.Series:
    if column not in df.columns:
        return pd.Series("", index=df.index, dtype=object)
    series = df[column].astype(object)
    return series.where(series.notna(), "").astype(str).str.lower()


def _category_mask(df: pd.DataFrame, category: Optional[str]) -> pd.Series:
    if not category or "category" not in df.columns:
        return pd.Series(True, index=df.index)
    return df["category"].astype(object).eq(category).fillna(False).astype(bool)


def _search_mask(df: pd.DataFrame, search_text: str) -> pd.Series:
    needle = (search_text or "").lower()
    if not needle:
        return pd.Series(True, index=df.index)
    mask = pd.Series(False, index=df.index)
    for column in SEARCH_COLUMNS:
        mask |= _lowered_text(df, column).str.contains(needle, regex=False)
    return mask


def _date_mask(df: pd.DataFrame, filters: FilterState) -> pd.Series:
    start = to_utc_day(filters.date_range[0])
    end = to_utc_day(filters.date_range[1])
    if start is None and end is None:
        return pd.Series(True, index=df.index)
    if filters.date_field not in df.columns:
        return pd.Series(False, index=df.index)

    days = utc_days(df[filters.date_field])
    # NaT compares False, so unparseable dates drop out here
    mask = days.notna()
    if start is not None:
        mask &= days >= start
    if end is not None:
        mask &= days <= end
    return mask.fillna(False).astype(bool)


def apply_filters(df: pd.DataFrame, filters: FilterState) -> pd.DataFrame:
    """
    Return the rows matching the category, search text and date range filters.

    The result keeps the input's relative row order. Missing text fields match
    as empty strings and unparseable dates only matter when a date bound is set.
    """
    if df.empty:
        return df
    mask = (
        _category_mask(df, filters.category)
        & _search_mask(df, filters.search_text)
        & _date_mask(df, filters)
    )
    filtered = df[mask]
    filtered.attrs = {**df.attrs, "applied_filters": serialize_filters(filters)}
    return filtered


def _bound_to_json(value: DateBound) -> Optional[str]:
    day = to_utc_day(value)
    return day.date().isoformat() if day is not None else None


def serialize_filters(filters: FilterState) -> Dict[str, Any]:
    """
    Convert the FilterState dataclass to a JSON-serialisable dictionary to be
    stored in session_state or used for logging/debugging.
    """
    return {
        "search_text": filters.search_text,
        "category": filters.category,
        "date_range": tuple(_bound_to_json(v) for v in filters.date_range),
        "date_field": filters.date_field,
    }
