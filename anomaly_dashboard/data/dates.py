"""
Lazy timestamp parsing for record date fields.

Dates stay as text on the records; the filter and aggregation paths parse them
on demand. Anything that does not parse becomes NaT and is never raised.
"""

from __future__ import annotations

from typing import Any, List, Optional

import pandas as pd

from anomaly_dashboard.data.models import is_missing

FALLBACK_PATTERNS: List[str] = [
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d",
    "%d-%m-%Y %H:%M:%S",
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y",
    # month-first only once day-first has failed, e.g. 1/15/2024
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y",
    "%B %d, %Y",
    "%b %d, %Y",
]

DAY_FORMAT = "%Y-%m-%d"


def _as_text(value: Any) -> Any:
    if is_missing(value):
        return None
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if isinstance(value, str):
        return value.strip() or None
    # Bare numbers are not timestamps
    return None


def parse_timestamps(series: pd.Series) -> pd.Series:
    """Parse a column of timestamp text into tz-aware UTC datetimes (NaT on failure)."""
    raw = series.astype(object).map(_as_text).astype(object)
    parsed = pd.to_datetime(raw, errors="coerce", utc=True, format="ISO8601")
    remaining_mask = parsed.isna() & raw.notna()

    for fmt in FALLBACK_PATTERNS:
        if not remaining_mask.any():
            break
        attempt = pd.to_datetime(raw[remaining_mask], format=fmt, errors="coerce", utc=True)
        success_mask = attempt.notna()
        parsed.loc[success_mask.index[success_mask]] = attempt[success_mask]
        remaining_mask = parsed.isna() & raw.notna()

    return parsed


def day_keys(series: pd.Series) -> pd.Series:
    """UTC calendar day of each timestamp as a ``YYYY-MM-DD`` string (NaN when unparseable)."""
    return parse_timestamps(series).dt.strftime(DAY_FORMAT)


def utc_days(series: pd.Series) -> pd.Series:
    """UTC calendar day of each timestamp as a naive midnight Timestamp."""
    return parse_timestamps(series).dt.tz_localize(None).dt.normalize()


def to_utc_day(value: Any) -> Optional[pd.Timestamp]:
    """Coerce a date bound (date, datetime, Timestamp or text) to a naive UTC midnight."""
    if is_missing(value):
        return None
    try:
        ts = pd.Timestamp(value)
    except (TypeError, ValueError):
        return None
    if ts is pd.NaT:
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts.normalize()
