"""Builders for raw store rows shaped like the anomaly spreadsheet."""


def raw_row(**overrides) -> dict:
    """Generate a raw store row for testing."""
    row = {
        "ID": 1,
        "Category": "Time Slip",
        "Description": "Incident 12: clock reversed",
        "Location": "Paris",
        "Date_Reported": "2024-01-15T10:00:00Z",
        "Source_Link": "https://example.com/1",
    }
    row.update(overrides)
    return row
