from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from anomaly_dashboard.state import ViewState


@dataclass
class PageContext:
    state: ViewState

    @property
    def records(self) -> pd.DataFrame:
        return self.state.records
