"""
Tests for the pure helpers behind the sidebar presets and the data quality page.
Run with: pytest tests/test_ui_helpers.py -v
"""

import pandas as pd
import pytest

from anomaly_dashboard.data.normalize import normalize
from anomaly_dashboard.data.aggregate import aggregate, category_breakdown
from anomaly_dashboard.ui.components.charts import OTHER_COLOR, category_bar, category_pie
from anomaly_dashboard.ui.components.formatting import format_number, format_percent
from anomaly_dashboard.ui.layout import preset_range
from anomaly_dashboard.ui.pages.data_quality import compute_quality_metrics

LAST_DAY = pd.Timestamp("2024-08-20")


@pytest.mark.parametrize("preset", ["All", "Custom", "unknown"])
def test_unbounded_presets(preset):
    assert preset_range(preset, pd.Timestamp("2024-01-01"), LAST_DAY) == (None, None)


def test_thirty_day_preset_is_inclusive():
    start, end = preset_range("30D", None, LAST_DAY)
    assert end == LAST_DAY
    assert (end - start).days == 29


def test_year_to_date_preset():
    assert preset_range("YTD", None, LAST_DAY) == (pd.Timestamp("2024-01-01"), LAST_DAY)


def test_preset_without_records_anchors_on_today():
    today = pd.Timestamp("2025-03-15")
    assert preset_range("6M", None, None, today=today) == (pd.Timestamp("2024-09-15"), today)


def test_quality_metrics(raw_rows):
    cards = {card.label: card.value for card in compute_quality_metrics(normalize(raw_rows))}
    assert cards["Missing Report Date"] == 0.0
    assert cards["Unparseable Report Date"] == 25.0
    assert cards["Missing Source Link"] == 25.0
    assert cards["Uncurated Categories"] == 25.0


def test_quality_metrics_of_empty_frame():
    cards = compute_quality_metrics(pd.DataFrame())
    assert all(card.value == 0.0 for card in cards)


def test_formatting_helpers():
    assert format_number(1234) == "1,234"
    assert format_number(None) == "–"
    assert format_percent(25) == "25.0%"


def test_uncurated_categories_are_drawn_in_neutral_color(raw_rows):
    breakdown = category_breakdown(aggregate(normalize(raw_rows)))
    bar = category_bar(breakdown)
    colors = {trace.name: trace.marker.color for trace in bar.data}
    assert colors["Doppelganger"] == OTHER_COLOR
    assert len(set(colors.values())) == 4
    assert category_pie(breakdown).data[0].type == "pie"


def test_chart_and_table_stretch_to_container(raw_rows, monkeypatch):
    from anomaly_dashboard.ui.components import charts, tables

    seen = {}
    monkeypatch.setattr(charts.st, "plotly_chart", lambda fig, **kwargs: seen.setdefault("chart", kwargs))
    monkeypatch.setattr(tables.st, "dataframe", lambda df, **kwargs: seen.setdefault("table", kwargs))
    charts.render_plotly(category_pie(category_breakdown(aggregate(normalize(raw_rows)))))
    assert tables.render_records_table(normalize(raw_rows)) is None
    for kwargs in seen.values():
        assert kwargs["width"] == "stretch"
        assert "use_container_width" not in kwargs
