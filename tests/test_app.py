"""Tests for the FastAPI app (app.py) routes and engine state."""

from __future__ import annotations

import asyncio
import threading
import time
from unittest.mock import patch

from fastapi import HTTPException

from emotion_models import AccessorResult


# ── Health check ──────────────────────────────


class TestHealthCheck:
    def test_health_returns_200(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_healthz_returns_200(self, client):
        response = client.get("/healthz")
        assert response.status_code == 200


# ── Analytics ─────────────────────────────────


class TestApiAnalytics:
    def test_returns_200(self, client):
        response = client.get("/api/analytics")
        assert response.status_code == 200

    def test_content_type_is_json(self, client):
        response = client.get("/api/analytics")
        assert "application/json" in response.headers["content-type"]

    def test_payload_shape(self, client):
        data = client.get("/api/analytics").json()
        for key in ("generated_at", "patterns", "chart_data", "has_sufficient_data",
                    "time_range", "data_count", "insufficient_data_message"):
            assert key in data, f"Missing key: {key}"

    def test_default_window_holds_sample_logs(self, client):
        data = client.get("/api/analytics").json()
        assert data["has_sufficient_data"] is True
        assert data["data_count"]["emotion_logs"] == 5
        assert data["data_count"]["journal_entries"] == 2

    def test_pattern_types_are_strings(self, client):
        data = client.get("/api/analytics").json()
        assert [p["type"] for p in data["patterns"]] == [
            "expression-ratio", "common-emotions", "streak", "trend",
        ]
        assert set(data["chart_data"]) == {"expression-ratio", "common-emotions", "streak", "trend"}

    def test_preset(self, client):
        data = client.get("/api/analytics", params={"preset": "week"}).json()
        assert data["time_range"]["preset"] == "week"

    def test_unknown_preset_is_400(self, client):
        response = client.get("/api/analytics", params={"preset": "decade"})
        assert response.status_code == 400

    def test_custom_window(self, client):
        data = client.get("/api/analytics", params={
            "start": "2000-01-01T00:00:00", "end": "2000-01-31T00:00:00",
        }).json()
        assert data["data_count"]["emotion_logs"] == 0
        assert data["has_sufficient_data"] is False
        assert data["insufficient_data_message"]

    def test_end_before_start_is_400(self, client):
        response = client.get("/api/analytics", params={
            "start": "2024-03-02T00:00:00", "end": "2024-03-01T00:00:00",
        })
        assert response.status_code == 400

    def test_utc_start_with_naive_end(self, client):
        response = client.get("/api/analytics", params={
            "start": "2024-03-01T00:00:00Z", "end": "2024-03-31T00:00:00",
        })
        assert response.status_code == 200
        assert response.json()["time_range"]["start"].startswith("2024-0")

    def test_start_without_end_is_400(self, client):
        response = client.get("/api/analytics", params={"start": "2024-03-02T00:00:00"})
        assert response.status_code == 400


class TestApiRefresh:
    def test_response_has_status_refreshed(self, client):
        data = client.get("/api/refresh").json()
        assert data["status"] == "refreshed"
        assert "generated_at" in data

    def test_refresh_generates_result(self, client, engine):
        assert engine.current_result is None
        client.get("/api/refresh")
        assert engine.current_result is not None

    def test_refresh_calls_engine(self, client, engine):
        client.get("/api/analytics")
        with patch.object(engine, "refresh_data", wraps=engine.refresh_data) as mock_refresh:
            client.get("/api/refresh")
            assert mock_refresh.call_count == 1


# ── Summary, charts, preferences, freshness ──


class TestApiSummary:
    def test_summary_values(self, client):
        data = client.get("/api/summary").json()
        assert data["total_emotions"] == 5
        assert data["expressed_emotions"] == 4
        assert data["most_common_emotion"] == "happy"
        assert data["active_days"] == 3
        assert "error" not in data

    def test_failure_returns_zeroed_with_error(self, client, engine):
        with patch.object(engine, "get_analytics_summary", return_value=AccessorResult.failure("boom")):
            data = client.get("/api/summary").json()
        assert data["total_emotions"] == 0
        assert data["most_common_emotion"] is None
        assert data["error"] == "boom"


class TestApiChart:
    def test_expression_ratio_chart(self, client):
        data = client.get("/api/charts/expression-ratio").json()
        assert data["chart"]["labels"] == ["Expressed", "Suppressed"]
        assert data["chart"]["datasets"][0]["data"] == [4, 1]
        assert data["pattern"]["type"] == "expression-ratio"

    def test_unknown_pattern_is_404(self, client):
        response = client.get("/api/charts/mood-ring")
        assert response.status_code == 404


class TestApiPreferences:
    def test_get(self, client):
        data = client.get("/api/preferences").json()
        assert data["default_time_range"]["preset"] == "month"
        assert data["enabled_insights"] == ["expression-ratio", "common-emotions", "streak", "trend"]

    def test_patch_preset(self, client):
        data = client.patch("/api/preferences", json={"default_preset": "week"}).json()
        assert data["default_time_range"]["preset"] == "week"

    def test_patch_insights(self, client):
        client.patch("/api/preferences", json={"enabled_insights": ["streak"]})
        data = client.get("/api/analytics").json()
        assert [p["type"] for p in data["patterns"]] == ["streak"]

    def test_patch_unknown_insight_is_400(self, client):
        response = client.patch("/api/preferences", json={"enabled_insights": ["vibes"]})
        assert response.status_code == 400

    def test_patch_unknown_preset_is_400(self, client):
        response = client.patch("/api/preferences", json={"default_preset": "decade"})
        assert response.status_code == 400


class TestApiFreshness:
    def test_keys(self, client):
        data = client.get("/api/freshness").json()
        assert set(data) == {"last_emotion_log", "last_journal_entry", "last_analytics_view"}
        assert data["last_emotion_log"] is not None


# ── Auto-refresh ──────────────────────────────


class TestAutoRefresh:
    def _run_loop_until_refreshed(self):
        import app as app_module

        async def run():
            task = asyncio.create_task(app_module._auto_refresh_loop(0.01))
            for _ in range(200):
                if refresh_threads:
                    break
                await asyncio.sleep(0.01)
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        refresh_threads: list[int] = []
        with patch.object(
            app_module, "_refresh_engine",
            side_effect=lambda: refresh_threads.append(threading.get_ident()),
        ):
            asyncio.run(run())
        return refresh_threads

    def test_refresh_runs_off_the_event_loop(self, client):
        threads = self._run_loop_until_refreshed()
        assert threads
        assert threads[0] != threading.get_ident()

    def test_event_loop_stays_responsive_while_state_is_locked(self, client):
        import app as app_module

        async def run():
            task = asyncio.create_task(app_module._auto_refresh_loop(0.01))
            worst = 0.0
            last = time.monotonic()
            for _ in range(15):
                await asyncio.sleep(0.02)
                now = time.monotonic()
                worst = max(worst, now - last)
                last = now
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            return worst

        app_module._state_lock.acquire()
        timer = threading.Timer(0.5, app_module._state_lock.release)
        timer.start()
        try:
            worst = asyncio.run(run())
        finally:
            timer.join()
        assert worst < 0.25

    def test_http_errors_are_logged_not_raised(self, client, caplog):
        import app as app_module

        async def run():
            task = asyncio.create_task(app_module._auto_refresh_loop(0.01))
            await asyncio.sleep(0.1)
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        with patch.object(
            app_module, "_refresh_engine",
            side_effect=HTTPException(status_code=503, detail="Data file not found"),
        ):
            asyncio.run(run())
        assert "Auto-refresh skipped: Data file not found" in caplog.text


# ── Error handling ────────────────────────────


class TestDataFileErrors:
    def test_missing_file_is_503(self, client, tmp_path):
        import app as app_module

        with (
            patch.object(app_module, "_state", {"engine": None}),
            patch.object(app_module, "DATA_PATH", tmp_path / "missing.json"),
        ):
            response = client.get("/api/analytics")
        assert response.status_code == 503

    def test_invalid_json_is_500(self, client, tmp_path):
        import app as app_module

        bad = tmp_path / "emotion_data.json"
        bad.write_text("{oops", encoding="utf-8")
        with (
            patch.object(app_module, "_state", {"engine": None}),
            patch.object(app_module, "DATA_PATH", bad),
        ):
            response = client.get("/api/analytics")
        assert response.status_code == 500

    def test_engine_built_from_file(self, client, tmp_path):
        import app as app_module

        path = tmp_path / "emotion_data.json"
        path.write_text('{"logs": [], "journalEntries": []}', encoding="utf-8")
        state = {"engine": None}
        with (
            patch.object(app_module, "_state", state),
            patch.object(app_module, "DATA_PATH", path),
        ):
            data = client.get("/api/analytics").json()
        assert data["data_count"]["emotion_logs"] == 0
        assert state["engine"] is not None


# ── 404 for unknown routes ───────────────────


class TestUnknownRoute:
    def test_returns_404(self, client):
        assert client.get("/nonexistent").status_code == 404
