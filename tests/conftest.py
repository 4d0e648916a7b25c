"""
Shared fixtures: raw store rows shaped like the anomaly spreadsheet.
"""

import pytest

from tests.factories import raw_row


@pytest.fixture
def raw_rows():
    return [
        raw_row(),
        raw_row(
            ID=2,
            Category="Reality Shift",
            Description="Incident 7: street layout changed overnight",
            Location="Berlin",
            Date_Reported="2024-02-01T08:30:00Z",
            Source_Link="https://example.com/2",
        ),
        raw_row(
            ID=3,
            Category="Mass Memory Discrepancy",
            Description="Logo remembered differently",
            Location="Online",
            Date_Reported="2024-01-15T22:00:00Z",
            Source_Link=None,
        ),
        raw_row(
            ID=4,
            Category="Doppelganger",
            Description="Incident 99: met myself at the station",
            Location=None,
            Date_Reported="sometime last spring",
            Source_Link="https://example.com/4",
        ),
    ]
