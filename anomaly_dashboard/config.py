"""
Application-wide configuration constants.
"""

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class TabConfig:
    key: str
    label: str


@dataclass(frozen=True)
class ColumnConfig:
    field: str
    header: str


# Ordered tab definitions for the dashboard
TABS: List[TabConfig] = [
    TabConfig("records", "Anomalies"),
    TabConfig("statistics", "Statistics"),
    TabConfig("data_quality", "Data Quality"),
    TabConfig("about", "About"),
]

# Curated filter menu; records may carry categories outside this list.
CATEGORIES: List[str] = [
    "Time Slip",
    "Reality Shift",
    "Mass Memory Discrepancy",
]

TABLE_COLUMNS: List[ColumnConfig] = [
    ColumnConfig("id", "ID"),
    ColumnConfig("category", "Category"),
    ColumnConfig("description", "Description"),
    ColumnConfig("location", "Location"),
    ColumnConfig("date_reported", "Reported On"),
    ColumnConfig("source_link", "Source Link"),
]

# Shared by the CSV and PDF exports so both agree on content.
EXPORT_COLUMNS: List[ColumnConfig] = [
    ColumnConfig("category", "Category"),
    ColumnConfig("description", "Description"),
    ColumnConfig("location", "Location"),
    ColumnConfig("date_reported", "Date Reported"),
    ColumnConfig("source_link", "Source Link"),
]

CSV_FILE_NAME = "anomalies.csv"
PDF_FILE_NAME = "anomalies.pdf"

DEFAULT_SHEET_NAME = "Anomalie1"

DATE_FIELDS = {
    "Reported date": "date_reported",
    "Created at": "created_at",
}

LOAD_ERROR_MESSAGE = "Failed to load anomalies. Please try again later."
