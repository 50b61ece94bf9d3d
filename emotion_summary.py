"""emotion_summary.py

Print an emotion journal summary for a time window and save the analytics
files (JSON result plus CSV tables).

Usage: python emotion_summary.py [data.json] [--preset month] [--output-dir DIR] [--no-save]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

import config
from analytics import load_journal_data, print_summary_report, resolve_preset, save_analytics_files
from analytics_engine import AnalyticsConfig, AnalyticsEngine
from emotion_models import PRESETS, AnalyticsSummary

logger = logging.getLogger(__name__)


def main(
    path: str | None = None,
    preset: str | None = None,
    output_dir: str | None = None,
    save: bool = True,
) -> None:
    """Load the data file, print the report and save the analytics files.

    Args:
        path: JSON export to read.  Defaults to ``config.DATA_PATH``.
        preset: Window to analyse.  Defaults to ``config.DEFAULT_PRESET``.
        output_dir: Where to save files.  Defaults to ``config.OUTPUT_DIR``.
        save: Whether to write the analytics files at all.

    Exits with status 1 when the data file is missing or not valid JSON.
    """
    path = path or str(config.DATA_PATH)
    try:
        logs, entries, preferences = load_journal_data(path)
    except FileNotFoundError:
        print(f"Error: File '{path}' not found.", file=sys.stderr)
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(f"Error: '{path}' is not valid JSON ({e}).", file=sys.stderr)
        sys.exit(1)

    engine = AnalyticsEngine(logs, entries, preferences=preferences)
    time_range = resolve_preset(preset or config.DEFAULT_PRESET)
    result = engine.generate_analytics(AnalyticsConfig(time_range=time_range))
    summary = engine.get_analytics_summary(time_range).unwrap_or(AnalyticsSummary.zeroed())

    print_summary_report(result, summary)

    if save:
        written = save_analytics_files(result, output_dir or config.OUTPUT_DIR)
        print("\nAnalytics data has been saved:")
        for i, file_path in enumerate(written, 1):
            print(f"{i}. {file_path}")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Summarise an emotion journal export")
    parser.add_argument("data_file", nargs="?", default=None,
                        help="Path to the exported JSON data (default: EMOTION_DATA_PATH)")
    parser.add_argument("--preset", "-p", choices=PRESETS, default=None,
                        help="Time window to analyse (default: DEFAULT_PRESET)")
    parser.add_argument("--output-dir", "-o", default=None,
                        help="Directory for analytics files (default: ANALYTICS_OUTPUT_DIR)")
    parser.add_argument("--no-save", dest="save", action="store_false",
                        help="Print the report without writing files")
    return parser.parse_args(argv)


if __name__ == "__main__":
    logging.basicConfig(level=config.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
    args = _parse_args()
    main(args.data_file, preset=args.preset, output_dir=args.output_dir, save=args.save)
