"""Shared fixtures for emotion analytics tests."""

from __future__ import annotations

from datetime import date, timedelta
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from analytics_engine import AnalyticsEngine
from helpers import make_entry, make_log


# ── Sample data relative to today, so preset windows include it ──


def _days_ago(n: int) -> str:
    return (date.today() - timedelta(days=n)).isoformat()


@pytest.fixture()
def recent_logs():
    """Five logs over the last three days: four expressed, one suppressed."""
    return [
        make_log(_days_ago(2), "expressed", "happy", hour=9),
        make_log(_days_ago(2), "suppressed", "angry", hour=13),
        make_log(_days_ago(1), "expressed", "happy", hour=9),
        make_log(_days_ago(0), "expressed", "calm", hour=0),
        make_log(_days_ago(0), "expressed", "happy", hour=1),
    ]


@pytest.fixture()
def recent_entries():
    return [make_entry(_days_ago(1)), make_entry(_days_ago(0))]


@pytest.fixture()
def engine(recent_logs, recent_entries):
    return AnalyticsEngine(recent_logs, recent_entries)


@pytest.fixture()
def client(engine):
    """TestClient for app.py with an in-memory engine.

    Replaces the module-level engine state so no data file is needed, and
    disables the auto-refresh loop.
    """
    import app as app_module

    with (
        patch.object(app_module, "_state", {"engine": engine}),
        patch.object(app_module, "AUTO_REFRESH_SECONDS", 0),
    ):
        with TestClient(app_module.app) as tc:
            yield tc
