"""Settings for the emotion analytics service and CLI.

Values come from the environment (optionally via a local .env file), with
defaults that work for a single user running everything from this folder.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

log = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent


def _int(env_value: str | None, default: int = 0) -> int:
    """Safely convert an environment variable to int."""
    try:
        return int(env_value) if env_value else default
    except ValueError:
        log.warning("Ignoring non-integer setting %r; using %d.", env_value, default)
        return default


DATA_PATH = Path(os.getenv("EMOTION_DATA_PATH", str(BASE_DIR / "emotion_data.json")))
OUTPUT_DIR = os.getenv("ANALYTICS_OUTPUT_DIR", "emotion_analytics")

DEFAULT_PRESET = os.getenv("DEFAULT_PRESET", "month")
AUTO_REFRESH_SECONDS = _int(os.getenv("AUTO_REFRESH_SECONDS"), 60)  # 0 disables

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
