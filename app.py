"""FastAPI service for the Emotion Journal analytics.

Serves JSON analytics computed locally from the user's exported emotion
data.  A single AnalyticsEngine is built from the data file on first use
and re-read periodically by an auto-refresh loop.

Deployment: uvicorn app:app --host 127.0.0.1 --port 8204
"""

from __future__ import annotations

import asyncio
import json
import logging
import threading
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

import config
from analytics import calculate_pattern, create_time_range, generate_chart_data, load_journal_data, resolve_preset
from analytics_engine import AnalyticsConfig, AnalyticsEngine
from emotion_models import AnalyticsSummary, PatternType, TimeRange

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------
DATA_PATH = config.DATA_PATH
AUTO_REFRESH_SECONDS = config.AUTO_REFRESH_SECONDS

# ---------------------------------------------------------------------------
# Engine state (one engine per process, guarded by a lock)
# ---------------------------------------------------------------------------
_state_lock = threading.Lock()
_state: dict[str, Any] = {
    "engine": None,
}


def _load_data() -> tuple[list, list]:
    logs, entries, _ = load_journal_data(str(DATA_PATH))
    return logs, entries


def _build_engine() -> AnalyticsEngine:
    """Load the data file and construct a fresh engine around it."""
    try:
        logs, entries, preferences = load_journal_data(str(DATA_PATH))
    except FileNotFoundError:
        raise HTTPException(status_code=503, detail="Data file not found")
    except json.JSONDecodeError:
        raise HTTPException(status_code=500, detail=f"Invalid JSON in {DATA_PATH.name}")
    logger.info("Loaded %d emotion logs and %d journal entries.", len(logs), len(entries))
    return AnalyticsEngine(logs, entries, preferences=preferences, loader=_load_data)


def _get_engine() -> AnalyticsEngine:
    """Return the process engine, building it on first use."""
    with _state_lock:
        if _state["engine"] is None:
            _state["engine"] = _build_engine()
        return _state["engine"]


def _refresh_engine() -> AnalyticsEngine:
    """Re-read the data file and regenerate the held result."""
    engine = _get_engine()
    with _state_lock:
        try:
            engine.refresh_data()
            if engine.current_result is None:
                engine.generate_analytics()
        except FileNotFoundError:
            raise HTTPException(status_code=503, detail="Data file not found")
        except json.JSONDecodeError:
            raise HTTPException(status_code=500, detail=f"Invalid JSON in {DATA_PATH.name}")
    return engine


def _refresh_if_built() -> None:
    """Refresh the engine when one has been built; otherwise do nothing."""
    with _state_lock:
        engine = _state["engine"]
    if engine is not None:
        _refresh_engine()


async def _auto_refresh_loop(interval: float) -> None:
    """Refresh the engine every *interval* seconds until cancelled.

    The refresh takes the state lock and re-reads the data file, so it runs
    in a worker thread to keep the event loop free.
    """
    while True:
        await asyncio.sleep(interval)
        try:
            await asyncio.to_thread(_refresh_if_built)
        except HTTPException as e:
            logger.warning("Auto-refresh skipped: %s", e.detail)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    task = None
    if AUTO_REFRESH_SECONDS > 0:
        task = asyncio.create_task(_auto_refresh_loop(AUTO_REFRESH_SECONDS))
    try:
        yield
    finally:
        if task is not None:
            task.cancel()


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Emotion Journal Analytics",
    root_path="/emotion_analytics",
    lifespan=lifespan,
)


class PreferencesUpdate(BaseModel):
    default_preset: str | None = None
    enabled_insights: list[str] | None = None


def _resolve_range(
    preset: str | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
) -> TimeRange | None:
    """Turn query parameters into a TimeRange, or None for the default."""
    if (start is None) != (end is None):
        raise HTTPException(status_code=400, detail="start and end must be given together")
    try:
        if start is not None:
            return create_time_range(start, end)
        if preset is not None:
            return resolve_preset(preset)
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return None


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
@app.get("/health")
@app.get("/healthz")
def healthz():
    return {"status": "ok"}


@app.get("/api/analytics")
def api_analytics(
    preset: str | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
):
    """Generate analytics for a preset, an explicit window, or the default."""
    time_range = _resolve_range(preset, start, end)
    engine = _get_engine()
    with _state_lock:
        result = engine.generate_analytics(AnalyticsConfig(time_range=time_range))
    return {"generated_at": datetime.now().isoformat(), **result.to_dict()}


@app.get("/api/refresh")
def api_refresh():
    """Force a reload of the data file and return the regeneration time."""
    _refresh_engine()
    return {
        "status": "refreshed",
        "generated_at": datetime.now().isoformat(),
    }


@app.get("/api/summary")
def api_summary(preset: str | None = None):
    """Return the dashboard summary; falls back to zeros rather than failing."""
    time_range = _resolve_range(preset)
    outcome = _get_engine().get_analytics_summary(time_range)
    payload = outcome.unwrap_or(AnalyticsSummary.zeroed()).to_dict()
    if not outcome.ok:
        payload["error"] = outcome.error
    return payload


@app.get("/api/charts/{pattern_type}")
def api_chart(pattern_type: str, preset: str | None = None):
    """Return chart data for a single pattern."""
    try:
        kind = PatternType(pattern_type)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown pattern type: {pattern_type}")
    engine = _get_engine()
    time_range = _resolve_range(preset) or engine.get_preferences().default_time_range
    pattern = calculate_pattern(kind, engine.emotion_logs, time_range)
    return {
        "pattern": pattern.to_dict(),
        "chart": generate_chart_data(pattern).to_dict(),
    }


@app.get("/api/preferences")
def api_get_preferences():
    return _get_engine().get_preferences().to_dict()


@app.patch("/api/preferences")
def api_update_preferences(update: PreferencesUpdate):
    """Merge preference changes; a new default window regenerates analytics."""
    changes: dict[str, Any] = {}
    if update.default_preset is not None:
        changes["default_time_range"] = _resolve_range(update.default_preset)
    if update.enabled_insights is not None:
        try:
            changes["enabled_insights"] = [PatternType(p) for p in update.enabled_insights]
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
    engine = _get_engine()
    with _state_lock:
        preferences = engine.update_preferences(changes)
    return preferences.to_dict()


@app.get("/api/freshness")
def api_freshness():
    return _get_engine().get_data_freshness().to_dict()
