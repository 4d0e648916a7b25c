"""
Canonical record shape shared by the loader, the engine and the UI.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

CANONICAL_COLUMNS: List[str] = [
    "id",
    "category",
    "description",
    "location",
    "date_reported",
    "source_link",
    "image_link",
    "updated_resume",
    "created_at",
]

# Store column names -> canonical names. Canonical names map to themselves.
FIELD_ALIASES: Dict[str, str] = {
    "ID": "id",
    "Id": "id",
    "Category": "category",
    "Description": "description",
    "Location": "location",
    "Date_Reported": "date_reported",
    "Date Reported": "date_reported",
    "Source_Link": "source_link",
    "Image_Link": "image_link",
    "Updated_Resume": "updated_resume",
    "Created_At": "created_at",
    **{name: name for name in CANONICAL_COLUMNS},
}

UNCATEGORIZED = "Uncategorized"


def is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # list-like values
        return False


def _optional(value: Any) -> Any:
    return None if is_missing(value) else value


@dataclass(frozen=True)
class AnomalyRecord:
    id: Any
    category: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    date_reported: Optional[str] = None
    source_link: Optional[str] = None
    image_link: Optional[str] = None
    updated_resume: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "AnomalyRecord":
        """Build a record from a normalized row (dict or pandas Series)."""
        return cls(**{name: _optional(row.get(name)) for name in CANONICAL_COLUMNS})

    def to_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in CANONICAL_COLUMNS}


def empty_records() -> pd.DataFrame:
    return pd.DataFrame({name: pd.Series(dtype=object) for name in CANONICAL_COLUMNS})
