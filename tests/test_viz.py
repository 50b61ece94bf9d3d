"""Tests for emotion_viz.py chart rendering."""

from __future__ import annotations

import math
from datetime import date

import pytest

from analytics import PASTEL_COLORS
from analytics_engine import AnalyticsConfig, AnalyticsEngine
from emotion_models import ChartData, ChartDataset
from emotion_viz import chart_frame, main, render_pattern_charts
from helpers import day_range, make_logs_on_days

MARCH = day_range("2024-03-01", "2024-03-31")


def _result(logs):
    engine = AnalyticsEngine(logs)
    return engine.generate_analytics(AnalyticsConfig(time_range=MARCH), today=date(2024, 3, 6))


class TestChartFrame:
    def test_columns_line_up(self):
        chart = ChartData(
            labels=["Expressed", "Suppressed"],
            datasets=[ChartDataset("Emotions", [4, 1], ["#111111", "#222222"], ["#111111", "#222222"])],
        )
        df = chart_frame(chart)
        assert list(df.columns) == ["label", "value", "color"]
        assert df["value"].tolist() == [4, 1]
        assert df["color"].tolist() == ["#111111", "#222222"]

    def test_missing_colours_are_nan(self):
        chart = ChartData(
            labels=["w1", "w2"],
            datasets=[ChartDataset("Expression Ratio", [20, 40], [PASTEL_COLORS[2]], [PASTEL_COLORS[2]])],
        )
        colors = chart_frame(chart)["color"].tolist()
        assert colors[0] == PASTEL_COLORS[2]
        assert isinstance(colors[1], float) and math.isnan(colors[1])

    def test_no_datasets(self):
        assert chart_frame(ChartData()).empty


class TestRenderPatternCharts:
    def test_writes_one_png_per_pattern(self, tmp_path):
        result = _result(make_logs_on_days([("2024-03-04", 2, 1), ("2024-03-05", 1, 0)]))
        written = render_pattern_charts(result, str(tmp_path))
        names = sorted(p.rsplit("/", 1)[-1] for p in written)
        assert names == ["common-emotions.png", "expression-ratio.png", "streak.png", "trend.png"]
        for path in written:
            with open(path, "rb") as f:
                assert f.read(8) == b"\x89PNG\r\n\x1a\n"

    def test_empty_result_still_renders(self, tmp_path):
        written = render_pattern_charts(_result([]), str(tmp_path / "charts"))
        assert len(written) == 4


class TestMain:
    def test_missing_file_exits(self, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            main([str(tmp_path / "missing.json"), "-o", str(tmp_path)])
        assert exc_info.value.code == 2

    def test_invalid_json_exits(self, tmp_path):
        bad = tmp_path / "emotion_data.json"
        bad.write_text("{oops", encoding="utf-8")
        with pytest.raises(SystemExit) as exc_info:
            main([str(bad), "-o", str(tmp_path)])
        assert exc_info.value.code == 2
