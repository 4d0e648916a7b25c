"""
Tests for the view state: load lifecycle, filtering on change and selection.
Run with: pytest tests/test_state.py -v
"""

import pandas as pd
import pytest

from anomaly_dashboard.config import LOAD_ERROR_MESSAGE
from anomaly_dashboard.data.filters import FilterState
from anomaly_dashboard.data.loader import FetchFailure
from anomaly_dashboard.state import LoadStatus, ViewState
from tests.factories import raw_row


def _failing_fetch():
    raise FetchFailure("store unreachable")


@pytest.fixture
def ready_state(raw_rows):
    state = ViewState()
    state.load(lambda: raw_rows)
    return state


# ============================================================================
# Load lifecycle
# ============================================================================


def test_starts_loading_and_empty():
    state = ViewState()
    assert state.status is LoadStatus.LOADING
    assert state.records.empty
    assert state.filtered.empty
    assert state.selected is None


def test_successful_load_is_ready(ready_state, raw_rows):
    assert ready_state.status is LoadStatus.READY
    assert ready_state.error is None
    assert len(ready_state.records) == len(raw_rows)
    assert ready_state.records.loc[0, "description"] == "clock reversed"
    assert ready_state.filtered["id"].tolist() == [1, 2, 3, 4]


def test_failed_load_surfaces_message():
    state = ViewState()
    assert state.load(_failing_fetch) is LoadStatus.ERROR
    assert state.error == LOAD_ERROR_MESSAGE
    assert state.records.empty


def test_unwrapped_fetch_error_still_surfaces_message():
    def broken_fetch():
        raise ValueError("bad payload")

    state = ViewState()
    assert state.load(broken_fetch) is LoadStatus.ERROR
    assert state.error == LOAD_ERROR_MESSAGE
    assert not state.has_loaded


def test_failure_keeps_last_good_records(ready_state):
    ready_state.update_filters(category="Time Slip")
    ready_state.load(_failing_fetch)
    assert ready_state.status is LoadStatus.ERROR
    assert len(ready_state.records) == 4
    assert ready_state.filtered["id"].tolist() == [1]


def test_retry_reenters_loading(raw_rows):
    state = ViewState()
    state.load(_failing_fetch)
    token = state.begin_load()
    assert state.status is LoadStatus.LOADING
    assert state.error is None
    assert state.complete_load(token, raw_rows)
    assert state.status is LoadStatus.READY


def test_stale_result_is_discarded(raw_rows):
    state = ViewState()
    first = state.begin_load()
    second = state.begin_load()
    assert not state.complete_load(first, raw_rows)
    assert state.records.empty
    assert state.status is LoadStatus.LOADING
    assert state.complete_load(second, raw_rows[:1])
    assert len(state.records) == 1


def test_stale_failure_is_discarded(raw_rows):
    state = ViewState()
    first = state.begin_load()
    second = state.begin_load()
    state.complete_load(second, raw_rows)
    assert not state.fail_load(first, FetchFailure("late"))
    assert state.status is LoadStatus.READY


def test_results_after_close_are_ignored(raw_rows):
    state = ViewState()
    token = state.begin_load()
    state.close()
    assert not state.complete_load(token, raw_rows)
    assert not state.fail_load(token, FetchFailure("late"))
    assert state.records.empty


def test_reload_replaces_records_wholesale(ready_state):
    ready_state.load(lambda: [raw_row(ID=10, Category="Reality Shift")])
    assert ready_state.records["id"].tolist() == [10]
    assert ready_state.filtered["id"].tolist() == [10]


def test_keeps_frame_diagnostics(raw_rows):
    frame = pd.DataFrame(raw_rows)
    frame.attrs["diagnostics"] = {"dataframe_row_count": 4}
    state = ViewState()
    state.load(lambda: frame)
    assert state.records.attrs["diagnostics"] == {"dataframe_row_count": 4}


# ============================================================================
# Filters
# ============================================================================


def test_filter_change_recomputes(ready_state):
    ready_state.update_filters(search_text="berlin")
    assert ready_state.filtered["id"].tolist() == [2]
    ready_state.update_filters(search_text="")
    assert len(ready_state.filtered) == 4


def test_set_and_reset_filters(ready_state):
    ready_state.set_filters(FilterState(category="Mass Memory Discrepancy"))
    assert ready_state.filtered["id"].tolist() == [3]
    ready_state.reset_filters()
    assert len(ready_state.filtered) == 4


def test_aggregate_and_exports_follow_filtered_set(ready_state):
    ready_state.update_filters(category="Time Slip")
    view = ready_state.aggregate()
    assert view.total_count == 1
    assert view.category_counts == {"Time Slip": 1}
    assert len(ready_state.pdf_table().rows) == 1
    assert ready_state.csv_export().count("\r\n") == 2


def test_aggregate_uses_active_date_field(raw_rows):
    rows = [dict(row, created_at="2024-09-09T00:00:00Z") for row in raw_rows]
    state = ViewState()
    state.load(lambda: rows)
    state.update_filters(date_field="created_at")
    assert [item.date for item in state.aggregate().daily_counts] == ["2024-09-09"]


# ============================================================================
# Selection
# ============================================================================


def test_select_returns_record(ready_state):
    record = ready_state.select(2)
    assert record is not None
    assert record.category == "Reality Shift"
    assert ready_state.selected == record


def test_selection_independent_of_filters(ready_state):
    ready_state.update_filters(category="Time Slip")
    record = ready_state.select(3)
    assert record is not None
    assert record.category == "Mass Memory Discrepancy"
    assert len(ready_state.records) == 4
    assert ready_state.filtered["id"].tolist() == [1]


def test_unknown_selection_resolves_to_none(ready_state):
    assert ready_state.select(999) is None


def test_selection_dropped_by_reload(ready_state):
    ready_state.select(4)
    ready_state.load(lambda: [raw_row(ID=1)])
    assert ready_state.selected is None


def test_clear_selection(ready_state):
    ready_state.select(1)
    ready_state.clear_selection()
    assert ready_state.selected is None
