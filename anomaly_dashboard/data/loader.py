"""
Fetch the raw anomaly rows from the Google Sheets store.

Settings come from the environment first and ``st.secrets`` second:
``SPREADSHEET_ID``, ``SHEET_NAMES`` (or ``SHEET_NAME``) and
``GOOGLE_APPLICATION_CREDENTIALS``. Any failure to reach or read the store is
raised as ``FetchFailure``.
"""

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import gspread
import pandas as pd
import streamlit as st
from dotenv import load_dotenv
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials

from anomaly_dashboard.config import DEFAULT_SHEET_NAME

# Local dev: pick up .env without overriding the real environment
load_dotenv()

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets.readonly",
    "https://www.googleapis.com/auth/drive.readonly",
]
DEFAULT_CREDENTIALS_FILE = "google-credentials.json"

# Placeholder cells the sheet editors use for "no value"
SENTINELS = frozenset({"", "None", "none", "N/A", "n/a", "NA", "na", "null", "Null", "undefined", "-", "—"})


class FetchFailure(RuntimeError):
    """The remote store could not be reached or returned an error."""


@dataclass(frozen=True)
class SheetSettings:
    spreadsheet_id: str
    sheet_names: Tuple[str, ...]
    credentials_file: str


def _is_sentinel(value: Any) -> bool:
    return isinstance(value, str) and value.strip() in SENTINELS


def normalize_sentinels(df: pd.DataFrame) -> pd.DataFrame:
    """Blank out placeholder cells in place; per-column counts go to ``attrs['sentinel_replacements']``."""
    counts: Dict[str, int] = {}
    for col in df.select_dtypes(include=["object", "string"]).columns:
        hits = df[col].map(_is_sentinel).astype(bool)
        if hits.any():
            df.loc[hits, col] = None
            counts[col] = int(hits.sum())
    if counts:
        df.attrs["sentinel_replacements"] = {**df.attrs.get("sentinel_replacements", {}), **counts}
    return df


def _setting(name: str) -> Any:
    value = os.getenv(name)
    if value:
        return value
    try:
        secrets = getattr(st, "secrets", None)
        if secrets:
            return secrets.get(name)  # type: ignore[union-attr]
    except Exception:
        # st.secrets raises outside the Streamlit runtime when no secrets file exists
        return None
    return None


def parse_list(raw: Any) -> Optional[List[str]]:
    """Sheet names from a TOML array, a JSON array string, or comma-separated text."""
    if raw is None:
        return None
    if isinstance(raw, str):
        text = raw.strip()
        if text.startswith("[") and text.endswith("]"):
            try:
                raw = json.loads(text)
            except ValueError:
                raw = text.strip("[]").split(",")
        else:
            raw = text.split(",")
    names = [str(item).strip() for item in raw]
    return [name for name in names if name] or None


def resolve_settings() -> SheetSettings:
    spreadsheet_id = _setting("SPREADSHEET_ID")
    if not spreadsheet_id:
        raise FetchFailure("SPREADSHEET_ID env var missing (env or secrets).")

    sheet_names = parse_list(_setting("SHEET_NAMES")) or parse_list(_setting("SHEET_NAME")) or [DEFAULT_SHEET_NAME]

    credentials_file = str(_setting("GOOGLE_APPLICATION_CREDENTIALS") or DEFAULT_CREDENTIALS_FILE)
    if not os.path.exists(credentials_file):
        raise FetchFailure(f"Service account file not found: {credentials_file}")
    return SheetSettings(str(spreadsheet_id), tuple(sheet_names), credentials_file)


def fetch_frame(client: Any, spreadsheet_id: str, sheet_names: Tuple[str, ...]) -> pd.DataFrame:
    """Read every named worksheet through a gspread client into one raw frame.

    Rows keep the store's column names plus a ``data_source`` column naming the
    worksheet. Load diagnostics are attached to ``df.attrs['diagnostics']``.
    """
    frames: List[pd.DataFrame] = []
    try:
        spreadsheet = client.open_by_key(spreadsheet_id)
        for name in sheet_names:
            rows = spreadsheet.worksheet(name).get_all_records()
            if rows:
                frames.append(pd.DataFrame(rows).assign(data_source=name))
    except (gspread.exceptions.GSpreadException, GoogleAuthError, OSError) as exc:
        raise FetchFailure(f"Could not read spreadsheet {spreadsheet_id}: {exc}") from exc

    df = normalize_sentinels(pd.concat(frames, ignore_index=True, sort=False)) if frames else pd.DataFrame()
    df.attrs["diagnostics"] = {
        "dataframe_row_count": len(df),
        "sentinel_replacements": df.attrs.get("sentinel_replacements", {}),
        "sheet_names": list(sheet_names),
    }
    logger.info("Loaded %d anomaly rows from %d sheet(s)", len(df), len(sheet_names))
    return df


def load_records() -> pd.DataFrame:
    """Resolve settings and return the (cached) raw frame."""
    from anomaly_dashboard.bootstrap_env import ensure_env
    ensure_env()

    settings = resolve_settings()
    return _load_records_impl(settings.spreadsheet_id, settings.sheet_names, settings.credentials_file)


def clear_cache() -> None:
    _load_records_impl.clear()  # type: ignore[attr-defined]


@st.cache_data(show_spinner=False, ttl=600)
def _load_records_impl(spreadsheet_id: str, sheet_names: Tuple[str, ...], credentials_file: str) -> pd.DataFrame:
    try:
        credentials = Credentials.from_service_account_file(credentials_file, scopes=SCOPES)
        client = gspread.authorize(credentials)
    except (GoogleAuthError, OSError, ValueError) as exc:
        raise FetchFailure(f"Could not authorize with {credentials_file}: {exc}") from exc
    return fetch_frame(client, spreadsheet_id, sheet_names)
