from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parent
DEFAULT_REFERENCE_SOURCE = str(REPO_ROOT / "data" / "order_entry_tool_doors.csv")
DEFAULT_REFERENCE_TIMEOUT_S = 10.0
DEFAULT_EXPORT_TIMEOUT_S = 5.0

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    reference_source: str = DEFAULT_REFERENCE_SOURCE
    reference_timeout_s: float = DEFAULT_REFERENCE_TIMEOUT_S
    order_export_url: Optional[str] = None
    order_export_timeout_s: float = DEFAULT_EXPORT_TIMEOUT_S
    log_level: str = "INFO"


def _read_secret_or_env_str(key: str, secrets: Optional[Mapping[str, Any]] = None) -> str:
    """
    Read a configuration value from Streamlit Secrets (preferred) or environment variables.

    `secrets` is passed in by the app so this module stays importable without Streamlit.
    Returns a stripped string; returns "" when missing.
    """
    val: object = ""
    if secrets is not None:
        try:
            val = secrets.get(key, "")
        except Exception:
            # st.secrets raises when no secrets.toml exists.
            val = ""
    if not val:
        val = os.environ.get(key, "")
    if isinstance(val, str):
        return val.strip()
    return str(val).strip() if val is not None else ""


def _positive_float(key: str, raw: str, default: float) -> float:
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r (not a number); using %s", key, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r (must be positive); using %s", key, raw, default)
        return default
    return value


def load_settings(
    secrets: Optional[Mapping[str, Any]] = None,
    *,
    dotenv_path: Optional[Path] = None,
) -> Settings:
    """
    Resolve settings from Streamlit secrets, then environment, then a `.env` file.

    `.env` never overrides variables that are already set in the environment.
    """
    load_dotenv(dotenv_path or (REPO_ROOT / ".env"), override=False)

    def get(key: str) -> str:
        return _read_secret_or_env_str(key, secrets)

    source = get("DOOR_REFERENCE_SOURCE") or DEFAULT_REFERENCE_SOURCE
    export_url = get("ORDER_EXPORT_URL") or None
    return Settings(
        reference_source=source,
        reference_timeout_s=_positive_float(
            "REFERENCE_DATA_TIMEOUT_S", get("REFERENCE_DATA_TIMEOUT_S"), DEFAULT_REFERENCE_TIMEOUT_S
        ),
        order_export_url=export_url,
        order_export_timeout_s=_positive_float(
            "ORDER_EXPORT_TIMEOUT_S", get("ORDER_EXPORT_TIMEOUT_S"), DEFAULT_EXPORT_TIMEOUT_S
        ),
        log_level=(get("LOG_LEVEL") or "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging once for the app and scripts.

    Streamlit re-executes the script on every interaction; `basicConfig` is a no-op
    after the first call, so handlers are not stacked.
    """
    numeric = logging.getLevelName(str(level).upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO
    logging.basicConfig(level=numeric, format=_LOG_FORMAT)
    logging.getLogger().setLevel(numeric)
