"""
Configuration for the cold calling dashboard
Values come from the environment, then Streamlit secrets, then defaults
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path

import streamlit as st

DEFAULT_CSV_SOURCE = "data.csv"
DEFAULT_STATE_DB = "cold_call_state.db"
DEFAULT_FETCH_TIMEOUT = 15.0
DEFAULT_LOG_DIR = "logs/cold_call_dashboard"

TRUTHY = {"true", "yes", "y", "1", "on"}


def get_setting(name: str, default: str = "") -> str:
    value = os.getenv(name)
    if value:
        return value
    # st.secrets raises when no secrets.toml exists
    try:
        value = st.secrets.get(name, None)
    except Exception:
        value = None
    return str(value) if value else default


@dataclass(frozen=True)
class Settings:
    csv_source: str = DEFAULT_CSV_SOURCE
    state_db: str = DEFAULT_STATE_DB
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    use_sample: bool = False
    log_level: str = "INFO"


def load_settings() -> Settings:
    try:
        timeout = float(get_setting("COLD_CALL_FETCH_TIMEOUT", str(DEFAULT_FETCH_TIMEOUT)))
    except ValueError:
        timeout = DEFAULT_FETCH_TIMEOUT
    return Settings(
        csv_source=get_setting("COLD_CALL_CSV_SOURCE", DEFAULT_CSV_SOURCE),
        state_db=get_setting("COLD_CALL_STATE_DB", DEFAULT_STATE_DB),
        fetch_timeout=timeout,
        use_sample=get_setting("COLD_CALL_USE_SAMPLE").strip().lower() in TRUTHY,
        log_level=get_setting("LOG_LEVEL", "INFO").upper(),
    )


def setup_logging(level: str = "INFO") -> None:
    log_dir = Path(get_setting("COLD_CALL_LOG_DIR", DEFAULT_LOG_DIR))
    log_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(levelname)s: %(message)s",
        handlers=[
            logging.FileHandler(log_dir / "app.log"),
            logging.StreamHandler()
        ],
    )
