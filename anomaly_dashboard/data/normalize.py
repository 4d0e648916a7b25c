"""
Record normalization: map store columns onto the canonical record shape and
strip the boilerplate incident prefix from descriptions.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, Union

import pandas as pd

from anomaly_dashboard.data.models import CANONICAL_COLUMNS, FIELD_ALIASES

# A run of leading prefixes is stripped in one pass so normalize() stays idempotent.
INCIDENT_PREFIX = re.compile(r"^(?:Incident \d+?: )+")

RawRecords = Union[pd.DataFrame, Iterable[Mapping[str, Any]]]


def strip_incident_prefix(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    return INCIDENT_PREFIX.sub("", value, count=1)


def _canonical_name(column: Any) -> Any:
    if isinstance(column, str):
        return FIELD_ALIASES.get(column, FIELD_ALIASES.get(column.strip(), column))
    return column


def normalize(raw: RawRecords) -> pd.DataFrame:
    """
    Clean raw store rows into the canonical record frame.

    Input order and length are preserved and the input is never mutated. Only
    the description changes value; dates stay as their original text.
    """
    if isinstance(raw, pd.DataFrame):
        df = raw.copy()
    else:
        df = pd.DataFrame([dict(row) for row in raw])

    renamed = {col: _canonical_name(col) for col in df.columns}
    df = df.rename(columns=renamed)
    # Two aliases for the same field: first one wins
    df = df.loc[:, ~df.columns.duplicated()]

    for name in CANONICAL_COLUMNS:
        if name not in df.columns:
            df[name] = pd.Series([None] * len(df), index=df.index, dtype=object)

    extras = [col for col in df.columns if col not in CANONICAL_COLUMNS]
    df = df[CANONICAL_COLUMNS + extras].reset_index(drop=True)

    df["description"] = df["description"].map(strip_incident_prefix).astype(object)
    return df
