"""Configuration settings for the calendar heatmap."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

# Streamlit is optional; use it when available to read secrets
try:  # pragma: no cover - optional dependency in non-Streamlit contexts
    import streamlit as st  # type: ignore
except Exception:  # pragma: no cover
    st = None  # type: ignore[assignment]


def get_setting(name: str, default: Any = None) -> Any:
    """Resolve a setting from Streamlit secrets, then the environment, then ``default``."""

    if st is not None:
        try:
            value = st.secrets.get(name)
        except Exception:
            # No secrets.toml outside a configured Streamlit app.
            value = None
        if value not in (None, ""):
            return value
    value = os.getenv(name)
    if value not in (None, ""):
        return value
    return default


# Project structure
BASE_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = BASE_DIR / "data"
EXPORT_DIR = BASE_DIR / "exports"

# Display
DEFAULT_CURRENCY = str(get_setting("CALENDAR_CURRENCY", "USD")).upper()
DEFAULT_PERIOD_LABEL = "All time"

# Scaling
PERCENTILE = 0.8
MIN_CELL_OPACITY = 0.1
LEGEND_STOPS = (0, 0.25, 0.5, 0.75, 1)

# Vector export geometry
SVG_DEFAULT_WIDTH = int(get_setting("CALENDAR_SVG_WIDTH", 2500))
SVG_MIN_HEIGHT = 1000
PNG_SCALE = 2

# LLM settings
LLM_MODEL = str(get_setting("LLM_MODEL", "gpt-4o-mini"))

LOG_LEVEL = str(get_setting("LOG_LEVEL", "INFO")).upper()


def configure_logging(level: str | None = None) -> None:
    """Install a basic root handler; entry points call this, the library never does."""

    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
