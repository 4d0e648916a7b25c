"""
Bootstrap environment for Streamlit Cloud & local dev:
- Flatten st.secrets into uppercase os.environ keys (nested -> PREFIX_CHILD)
- If GOOGLE_CREDENTIALS_JSON is provided in secrets (dict or JSON string),
  write it to a temp file and set GOOGLE_APPLICATION_CREDENTIALS
- Finally, load .env (without overriding existing env vars)
"""

from __future__ import annotations

import json
import os
import re
import tempfile
from typing import Any, Iterator, Mapping, Optional, Tuple

import streamlit as st
from dotenv import load_dotenv

CREDENTIALS_FILE_NAME = "anomaly-dashboard-google-credentials.json"


def _sanitize_key(key: str) -> str:
    return re.sub(r"[^A-Za-z0-9_]", "_", key.upper())


def _flatten_secrets(prefix: str, val: Any) -> Iterator[Tuple[str, str]]:
    if isinstance(val, Mapping):
        for k, v in val.items():
            yield from _flatten_secrets(f"{prefix}_{k}", v)
    else:
        yield _sanitize_key(prefix), str(val)


def _secrets_dict() -> dict:
    """Return st.secrets as a plain dict, or {} outside the Streamlit runtime."""
    try:
        items = getattr(st, "secrets", None)
        if not items:
            return {}
        try:
            return items.to_dict()  # type: ignore[attr-defined]
        except AttributeError:
            return dict(items)
    except Exception:
        # Ignore in non-Streamlit or if secrets unavailable
        return {}


def bridge_secrets(secrets: Mapping[str, Any], environ=os.environ) -> None:
    for key, value in secrets.items():
        if isinstance(value, Mapping):
            for flat_k, flat_v in _flatten_secrets(key, value):
                environ.setdefault(flat_k, flat_v)
        else:
            environ.setdefault(_sanitize_key(key), str(value))


def _repair_private_key(text: str) -> str:
    """Escape raw newlines inside ``private_key``; TOML multi-line strings keep them literal."""

    def _escape(match: re.Match) -> str:
        key = match.group(1).replace("\r\n", "\\n").replace("\n", "\\n")
        return f'"private_key": "{key}"'

    return re.sub(r'"private_key"\s*:\s*"(.*?)"', _escape, text, flags=re.DOTALL)


def _as_json_text(value: Any) -> Optional[str]:
    """Serialized service account JSON, or None when ``value`` is not JSON."""
    if isinstance(value, Mapping):
        return json.dumps(dict(value))
    text = str(value).strip()
    if not text.startswith("{"):
        return None
    for candidate in (text, _repair_private_key(text)):
        try:
            json.loads(candidate)
        except ValueError:
            continue
        return candidate
    return None


def _credentials_json(secrets: Mapping[str, Any], existing_path: Optional[str]) -> Optional[str]:
    # GOOGLE_APPLICATION_CREDENTIALS may carry the JSON content itself
    if existing_path and not os.path.exists(existing_path):
        inline = _as_json_text(existing_path)
        if inline:
            return inline
    creds = secrets.get("GOOGLE_CREDENTIALS_JSON")
    return _as_json_text(creds) if creds else None


def materialize_google_credentials(secrets: Mapping[str, Any], environ=os.environ) -> Optional[str]:
    """Create a temp service account file from secrets if needed.

    Priority:
    1) If GOOGLE_APPLICATION_CREDENTIALS already set and exists -> keep
    2) Else if inline JSON is available -> write to the temp dir and set env
    3) Else do nothing (loader reports a clear error if creds are missing)
    """
    existing_path = environ.get("GOOGLE_APPLICATION_CREDENTIALS")
    if existing_path and os.path.exists(existing_path):
        return existing_path

    json_text = _credentials_json(secrets, existing_path)
    if not json_text:
        return None
    tmp_path = os.path.join(tempfile.gettempdir(), CREDENTIALS_FILE_NAME)
    with open(tmp_path, "w", encoding="utf-8") as f:
        f.write(json_text)
    environ["GOOGLE_APPLICATION_CREDENTIALS"] = tmp_path
    return tmp_path


def ensure_env() -> None:
    """Idempotent: make sure env vars and creds are available.
    Safe to call multiple times, both inside and outside Streamlit runtime.
    """
    secrets = _secrets_dict()
    bridge_secrets(secrets)
    materialize_google_credentials(secrets)
    # load_dotenv will not override existing env vars by default
    load_dotenv()


# Execute on import for Streamlit main process, but also allow explicit calls elsewhere.
ensure_env()
