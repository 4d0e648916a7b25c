"""
Tests for category and daily aggregation.
Run with: pytest tests/test_aggregate.py -v
"""

import pandas as pd

from anomaly_dashboard.data.aggregate import (
    AggregateView,
    DailyCount,
    aggregate,
    category_breakdown,
    daily_frame,
    share,
)
from anomaly_dashboard.data.filters import FilterState, apply_filters
from anomaly_dashboard.data.models import UNCATEGORIZED, empty_records
from anomaly_dashboard.data.normalize import normalize
from tests.factories import raw_row


def _records(*categories):
    return normalize([raw_row(ID=i, Category=c) for i, c in enumerate(categories, start=1)])


def test_counts_per_category():
    view = aggregate(_records("A", "A", "B"))
    assert view.total_count == 3
    assert view.category_counts == {"A": 2, "B": 1}


def test_missing_category_still_counted():
    view = aggregate(_records("A", None, None))
    assert view.category_counts == {"A": 1, UNCATEGORIZED: 2}
    assert sum(view.category_counts.values()) == view.total_count


def test_counts_sum_to_total_after_filtering(raw_rows):
    records = normalize(raw_rows)
    for filters in (
        FilterState(),
        FilterState(search_text="e"),
        FilterState(category="Time Slip"),
        FilterState(date_range=("2024-01-01", "2024-01-31")),
    ):
        view = aggregate(apply_filters(records, filters))
        assert sum(view.category_counts.values()) == view.total_count


def test_empty_record_set():
    view = aggregate(empty_records())
    assert view == AggregateView(total_count=0, category_counts={}, daily_counts=[], undated_count=0)


def test_daily_counts_sorted_by_utc_day():
    df = normalize([
        raw_row(ID=1, Date_Reported="2024-03-02T09:00:00Z"),
        # 01:00 at UTC+2 is still March 1st in UTC
        raw_row(ID=2, Date_Reported="2024-03-02T01:00:00+02:00"),
        raw_row(ID=3, Date_Reported="2024-03-01"),
        raw_row(ID=4, Date_Reported="2024-02-28T23:59:59Z"),
    ])
    view = aggregate(df)
    assert view.daily_counts == [
        DailyCount("2024-02-28", 1),
        DailyCount("2024-03-01", 2),
        DailyCount("2024-03-02", 1),
    ]


def test_unparseable_dates_left_out_of_daily_counts(raw_rows):
    view = aggregate(normalize(raw_rows))
    assert view.undated_count == 1
    assert sum(item.count for item in view.daily_counts) == view.total_count - 1
    # still present in the category tally
    assert view.category_counts["Doppelganger"] == 1


def test_daily_counts_by_created_at():
    df = normalize([
        raw_row(ID=1, Date_Reported="2024-01-01", created_at="2024-06-01T10:00:00Z"),
        raw_row(ID=2, Date_Reported="2024-01-01", created_at="2024-06-01T12:00:00Z"),
    ])
    view = aggregate(df, date_field="created_at")
    assert view.daily_counts == [DailyCount("2024-06-01", 2)]


def test_aggregate_is_deterministic(raw_rows):
    records = normalize(raw_rows)
    assert aggregate(records) == aggregate(records.copy())


# ============================================================================
# Shares and presentation tables
# ============================================================================


def test_share_of_zero_total_is_zero():
    assert share(0, 0) == 0.0
    assert AggregateView().category_share("A") == 0.0


def test_category_and_daily_share():
    view = AggregateView(
        total_count=4,
        category_counts={"A": 3, "B": 1},
        daily_counts=[DailyCount("2024-01-01", 2)],
    )
    assert view.category_share("A") == 0.75
    assert view.category_share("missing") == 0.0
    assert view.daily_share("2024-01-01") == 0.5


def test_category_breakdown_sorted_by_count_then_name():
    view = aggregate(_records("B", "C", "C", "A"))
    table = category_breakdown(view)
    assert table["Category"].tolist() == ["C", "A", "B"]
    assert table["Count"].tolist() == [2, 1, 1]
    assert table["Share"].tolist() == [50.0, 25.0, 25.0]


def test_category_breakdown_alphabetical():
    table = category_breakdown(aggregate(_records("B", "C", "C", "A")), sort_by="category")
    assert table["Category"].tolist() == ["A", "B", "C"]


def test_daily_frame_resamples_weekly():
    view = AggregateView(
        total_count=3,
        daily_counts=[
            DailyCount("2024-01-01", 1),
            DailyCount("2024-01-02", 1),
            DailyCount("2024-01-10", 1),
        ],
    )
    daily = daily_frame(view)
    assert daily["count"].tolist() == [1, 1, 1]
    weekly = daily_frame(view, freq="W")
    assert weekly["count"].tolist() == [2, 1]
    assert pd.api.types.is_datetime64_any_dtype(weekly["date"])


def test_daily_frame_empty():
    assert daily_frame(AggregateView()).empty
