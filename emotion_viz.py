"""Render analytics chart data to PNG images.

Each pattern's ChartData becomes one figure: bar charts for the expression
ratio, common emotions and streaks; weekly bars with a 4-week rolling
average for the trend.
"""

from __future__ import annotations

import argparse
import json
import logging
import os

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

import config
from analytics import load_journal_data, resolve_preset
from analytics_engine import AnalyticsConfig, AnalyticsEngine
from emotion_models import PRESETS, AnalyticsResult, ChartData, PatternType

logger = logging.getLogger(__name__)

_TITLES = {
    PatternType.EXPRESSION_RATIO: "Expressed vs Suppressed Emotions",
    PatternType.COMMON_EMOTIONS: "Most Common Emotions",
    PatternType.STREAK: "Expression Streaks",
    PatternType.TREND: "Weekly Expression Ratio",
}


def chart_frame(chart: ChartData) -> pd.DataFrame:
    """Flatten a chart's first dataset into a label/value/color frame.

    Labels past the end of the palette get no colour (NaN), matching
    the chart data itself.
    """
    if not chart.datasets:
        return pd.DataFrame(columns=["label", "value", "color"])
    dataset = chart.datasets[0]
    return pd.DataFrame({
        "label": chart.labels,
        "value": dataset.data,
        "color": pd.Series(dataset.background_color, dtype="object").reindex(range(len(chart.labels))),
    })


def _plot_bars(ax, df: pd.DataFrame, ylabel: str) -> None:
    ax.set_ylabel(ylabel, fontsize=12)
    if df.empty:
        return
    colors = df["color"].fillna("#cccccc").tolist()
    ax.bar(df["label"], df["value"], color=colors, edgecolor=colors)


def _plot_trend(ax, df: pd.DataFrame, color: str) -> None:
    ax.set_ylim(0, 100)
    if not df.empty:
        rolling = df["value"].astype(float).rolling(window=4, min_periods=1).mean()
        ax.bar(df["label"], df["value"], alpha=0.5, color=color, label="Weekly Ratio")
        ax.plot(df["label"], rolling, color="purple", linewidth=2, label="4-week Average")
        ax.legend()
    ax.grid(True, alpha=0.3)
    ax.set_ylabel("Expressed (%)", fontsize=12)
    ax.tick_params(axis="x", rotation=45)


def render_chart(pattern_type: PatternType, chart: ChartData, path: str) -> str:
    """Draw one chart and save it as a PNG.

    Args:
        pattern_type: Decides the chart kind and title.
        chart: Chart data from ``generate_chart_data``.
        path: Destination PNG path.

    Returns:
        The path written.
    """
    df = chart_frame(chart)
    sns.set_theme(style="whitegrid")
    fig, ax = plt.subplots(figsize=(10, 6))
    try:
        if pattern_type is PatternType.TREND:
            color = chart.datasets[0].border_color[0] if chart.datasets else "#DBCDF0"
            _plot_trend(ax, df, color)
        else:
            ylabel = chart.datasets[0].label if chart.datasets else ""
            _plot_bars(ax, df, ylabel)
        ax.set_title(_TITLES[pattern_type], fontsize=14, pad=20)
        fig.tight_layout()
        fig.savefig(path, dpi=150, bbox_inches="tight")
    finally:
        plt.close(fig)
    return path


def render_pattern_charts(result: AnalyticsResult, output_dir: str = "emotion_analytics") -> list[str]:
    """Write one PNG per chart in *result*; returns the paths written."""
    os.makedirs(output_dir, exist_ok=True)
    written = []
    for pattern_type, chart in result.chart_data.items():
        path = os.path.join(output_dir, f"{pattern_type.value}.png")
        written.append(render_chart(pattern_type, chart, path))
    logger.info("Rendered %d chart(s) to %s", len(written), output_dir)
    return written


def main(argv: list[str] | None = None) -> list[str]:
    parser = argparse.ArgumentParser(description="Render emotion analytics charts to PNG")
    parser.add_argument("data_file", nargs="?", default=str(config.DATA_PATH))
    parser.add_argument("--preset", "-p", choices=PRESETS, default=config.DEFAULT_PRESET)
    parser.add_argument("--output-dir", "-o", default=config.OUTPUT_DIR)
    args = parser.parse_args(argv)

    try:
        logs, entries, preferences = load_journal_data(args.data_file)
    except FileNotFoundError:
        parser.error(f"File not found: {args.data_file}")
    except json.JSONDecodeError as e:
        parser.error(f"'{args.data_file}' is not valid JSON ({e})")

    engine = AnalyticsEngine(logs, entries, preferences=preferences)
    result = engine.generate_analytics(AnalyticsConfig(time_range=resolve_preset(args.preset)))
    written = render_pattern_charts(result, args.output_dir)
    print(f"Charts have been saved to the '{args.output_dir}' directory:")
    for path in written:
        print(f"  {path}")
    return written


if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
    main()
