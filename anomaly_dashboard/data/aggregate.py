"""
Aggregation helpers that derive category and daily counts from a record set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pandas as pd

from anomaly_dashboard.data.dates import day_keys
from anomaly_dashboard.data.models import UNCATEGORIZED


@dataclass(frozen=True)
class DailyCount:
    date: str
    count: int


@dataclass(frozen=True)
class AggregateView:
    total_count: int = 0
    category_counts: Dict[str, int] = field(default_factory=dict)
    daily_counts: List[DailyCount] = field(default_factory=list)
    undated_count: int = 0

    def category_share(self, category: str) -> float:
        return share(self.category_counts.get(category, 0), self.total_count)

    def daily_share(self, day: str) -> float:
        count = next((item.count for item in self.daily_counts if item.date == day), 0)
        return share(count, self.total_count)


def share(count: int, total: int) -> float:
    if not total:
        return 0.0
    return count / total


def _category_counts(df: pd.DataFrame) -> Dict[str, int]:
    if "category" not in df.columns:
        return {UNCATEGORIZED: len(df)} if len(df) else {}
    categories = df["category"].astype(object)
    categories = categories.where(categories.notna(), UNCATEGORIZED)
    counts = categories.value_counts(sort=False, dropna=False)
    return {key: int(value) for key, value in counts.items()}


def _daily_counts(df: pd.DataFrame, date_field: str) -> List[DailyCount]:
    if date_field not in df.columns or df.empty:
        return []
    keys = day_keys(df[date_field]).dropna()
    counts = keys.value_counts().sort_index()
    return [DailyCount(date=str(day), count=int(count)) for day, count in counts.items()]


def aggregate(df: pd.DataFrame, date_field: str = "date_reported") -> AggregateView:
    """
    Tally the record set by category and by UTC calendar day.

    Every record counts towards a category; records whose date does not parse
    are left out of the daily series and reported as ``undated_count``.
    """
    total = int(len(df))
    daily = _daily_counts(df, date_field)
    return AggregateView(
        total_count=total,
        category_counts=_category_counts(df),
        daily_counts=daily,
        undated_count=total - sum(item.count for item in daily),
    )


def category_breakdown(view: AggregateView, sort_by: str = "count") -> pd.DataFrame:
    """Presentation table with columns Category, Count, Share (0-100)."""
    rows = [
        {
            "Category": str(category),
            "Count": count,
            "Share": share(count, view.total_count) * 100,
        }
        for category, count in view.category_counts.items()
    ]
    table = pd.DataFrame(rows, columns=["Category", "Count", "Share"])
    if sort_by == "category":
        return table.sort_values("Category", kind="mergesort").reset_index(drop=True)
    return table.sort_values(
        ["Count", "Category"], ascending=[False, True], kind="mergesort"
    ).reset_index(drop=True)


def daily_frame(view: AggregateView, freq: Optional[str] = None) -> pd.DataFrame:
    """Daily counts as a frame with a datetime ``date`` column, optionally resampled."""
    if not view.daily_counts:
        return pd.DataFrame(columns=["date", "count"])
    frame = pd.DataFrame(
        {
            "date": pd.to_datetime([item.date for item in view.daily_counts]),
            "count": [item.count for item in view.daily_counts],
        }
    )
    if freq and freq != "D":
        frame = frame.set_index("date").resample(freq).sum().reset_index()
    return frame
