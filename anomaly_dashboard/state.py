"""
View state for the dashboard: the loaded records, the active filters, the
filtered set, and the record selected for the detail panel.

The engine functions in ``anomaly_dashboard.data`` stay pure; this container
owns the only mutable state and re-runs them whenever an input changes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

import pandas as pd

from anomaly_dashboard.config import LOAD_ERROR_MESSAGE
from anomaly_dashboard.data.aggregate import AggregateView, aggregate
from anomaly_dashboard.data.export import PdfTable, to_csv, to_pdf_table
from anomaly_dashboard.data.filters import DEFAULT_FILTERS, FilterState, apply_filters
from anomaly_dashboard.data.models import AnomalyRecord, empty_records
from anomaly_dashboard.data.normalize import RawRecords, normalize

logger = logging.getLogger(__name__)


class LoadStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


@dataclass
class ViewState:
    filters: FilterState = DEFAULT_FILTERS
    records: pd.DataFrame = field(default_factory=empty_records)
    filtered: pd.DataFrame = field(default_factory=empty_records)
    status: LoadStatus = LoadStatus.LOADING
    error: Optional[str] = None
    selected_id: Optional[Any] = None
    has_loaded: bool = False
    _generation: int = 0
    _closed: bool = False

    def begin_load(self) -> int:
        """Enter LOADING and return the token the matching result must present."""
        self._generation += 1
        self.status = LoadStatus.LOADING
        self.error = None
        return self._generation

    def _accepts(self, token: int) -> bool:
        return not self._closed and token == self._generation

    def complete_load(self, token: int, raw: RawRecords) -> bool:
        if not self._accepts(token):
            logger.info("Discarding stale anomaly load result (token %s)", token)
            return False
        records = normalize(raw)
        if isinstance(raw, pd.DataFrame):
            records.attrs = dict(raw.attrs)
        self.records = records
        self.has_loaded = True
        self.status = LoadStatus.READY
        self._refilter()
        return True

    def fail_load(self, token: int, error: BaseException) -> bool:
        if not self._accepts(token):
            return False
        logger.warning("Anomaly load failed: %s", error, exc_info=error)
        # Last-good records and filtered set stay in place
        self.status = LoadStatus.ERROR
        self.error = LOAD_ERROR_MESSAGE
        return True

    def load(self, fetch: Callable[[], RawRecords]) -> LoadStatus:
        token = self.begin_load()
        try:
            raw = fetch()
        except Exception as exc:
            # wrapped or not, any fetch error ends in ERROR
            self.fail_load(token, exc)
        else:
            self.complete_load(token, raw)
        return self.status

    def close(self) -> None:
        """Tear down: any load result arriving afterwards is ignored."""
        self._closed = True

    def _refilter(self) -> None:
        self.filtered = apply_filters(self.records, self.filters)

    def set_filters(self, filters: FilterState) -> pd.DataFrame:
        self.filters = filters
        self._refilter()
        return self.filtered

    def update_filters(self, **changes: Any) -> pd.DataFrame:
        return self.set_filters(self.filters.with_changes(**changes))

    def reset_filters(self) -> pd.DataFrame:
        return self.set_filters(DEFAULT_FILTERS)

    def select(self, record_id: Any) -> Optional[AnomalyRecord]:
        self.selected_id = record_id
        return self.selected

    def clear_selection(self) -> None:
        self.selected_id = None

    @property
    def selected(self) -> Optional[AnomalyRecord]:
        if self.selected_id is None or self.records.empty:
            return None
        matches = self.records[self.records["id"].astype(object).eq(self.selected_id)]
        if matches.empty:
            return None
        return AnomalyRecord.from_row(matches.iloc[0])

    def aggregate(self) -> AggregateView:
        return aggregate(self.filtered, date_field=self.filters.date_field)

    def csv_export(self) -> str:
        return to_csv(self.filtered)

    def pdf_table(self) -> PdfTable:
        return to_pdf_table(self.filtered)
