"""
Export encoders for the currently filtered record set.

Both encodings share ``EXPORT_COLUMNS`` so the CSV and PDF downloads always
carry the same content. Nothing here touches the filesystem.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Union

import pandas as pd

from anomaly_dashboard.config import EXPORT_COLUMNS
from anomaly_dashboard.data.models import AnomalyRecord, is_missing

Records = Union[pd.DataFrame, Iterable[Union[AnomalyRecord, Mapping[str, Any]]]]


@dataclass(frozen=True)
class PdfTable:
    headers: List[str] = field(default_factory=list)
    rows: List[List[str]] = field(default_factory=list)


def _cell(value: Any) -> str:
    if is_missing(value):
        return ""
    return str(value)


def _as_frame(records: Records) -> pd.DataFrame:
    if isinstance(records, pd.DataFrame):
        return records
    return pd.DataFrame(
        [r.to_dict() if isinstance(r, AnomalyRecord) else dict(r) for r in records]
    )


def export_frame(records: Records) -> pd.DataFrame:
    """Project records onto the export columns, renamed to their display headers."""
    df = _as_frame(records)
    fields = [col.field for col in EXPORT_COLUMNS]
    projected = df.reindex(columns=fields)
    projected = projected.apply(lambda series: series.map(_cell)) if len(projected) else projected
    return projected.rename(columns={col.field: col.header for col in EXPORT_COLUMNS}).reset_index(drop=True)


def to_csv(records: Records) -> str:
    """Encode records as CSV text: a header row plus one quoted-as-needed row per record.

    Rows end in CRLF so that a lone CR or LF inside a field also gets quoted.
    """
    return export_frame(records).to_csv(index=False, lineterminator="\r\n", quoting=csv.QUOTE_MINIMAL)


def to_pdf_table(records: Records) -> PdfTable:
    frame = export_frame(records)
    return PdfTable(
        headers=[col.header for col in EXPORT_COLUMNS],
        rows=[[_cell(value) for value in row] for row in frame.itertuples(index=False, name=None)],
    )
