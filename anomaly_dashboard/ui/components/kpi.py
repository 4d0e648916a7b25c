from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import streamlit as st

from anomaly_dashboard.ui.components.formatting import format_number


@dataclass(frozen=True)
class KpiCard:
    """One headline figure; ``value_display`` overrides the formatted number."""

    label: str
    value: Optional[float] = None
    value_display: Optional[str] = None
    help_text: Optional[str] = None

    @property
    def display(self) -> str:
        if self.value_display is not None:
            return self.value_display
        return format_number(self.value)


def render_kpi_cards(cards: Sequence[KpiCard], columns: int = 3) -> None:
    if not cards:
        return
    per_row = max(columns, 1)
    for start in range(0, len(cards), per_row):
        chunk = cards[start:start + per_row]
        for slot, card in zip(st.columns(per_row), chunk):
            with slot.container(border=True):
                st.metric(label=card.label, value=card.display, help=card.help_text)
