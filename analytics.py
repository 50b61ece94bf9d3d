"""Core data processing for emotion journal analytics.

Turns a user's emotion logs and journal entries into time-windowed
patterns (expression ratio, common emotions, streaks, weekly trend) and
chart-ready aggregates.  Everything here is a pure function over local
data.  Used by the analytics engine (analytics_engine.py), the web service
(app.py) and the CLI (emotion_summary.py).
"""

from __future__ import annotations

import csv
import json
import logging
import math
import os
from datetime import date, datetime, time, timedelta
from typing import Any

from emotion_models import (
    PRESETS,
    AnalyticsPreferences,
    AnalyticsResult,
    AnalyticsSummary,
    ChartData,
    ChartDataset,
    CommonEmotionsData,
    EmotionalPattern,
    EmotionCount,
    EmotionLog,
    ExpressionRatioData,
    JournalEntry,
    PatternType,
    StreakData,
    TimeRange,
    TrendData,
    WeekBucket,
    parse_datetime,
)

logger = logging.getLogger(__name__)

MIN_LOGS_FOR_INSIGHTS = 3
TREND_THRESHOLD = 0.1
TOP_EMOTIONS_LIMIT = 5

_PRESET_DAYS = {
    "week": 7,
    "month": 30,
    "quarter": 90,
    "year": 365,
}

PASTEL_COLORS = [
    "#C9E4DE",  # mint
    "#a0d2eb",  # blue
    "#DBCDF0",  # lavender
    "#fcded3",  # peach
    "#F2C6DE",  # pink
    "#ffeaa7",  # yellow
    "#f35d69",  # red
    "#ff964f",  # orange
]


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _parse_records(raw_records: Any, parser: Any, kind: str) -> list:
    """Parse a list of raw dicts with *parser*, skipping malformed ones.

    Args:
        raw_records: The raw JSON value; anything other than a list yields
            an empty result.
        parser: A ``from_dict`` classmethod.
        kind: Human-readable record name for the log message.

    Returns:
        List of parsed records in input order.
    """
    if not isinstance(raw_records, list):
        return []

    parsed = []
    skipped = 0
    for raw in raw_records:
        if not isinstance(raw, dict):
            skipped += 1
            continue
        try:
            parsed.append(parser(raw))
        except (KeyError, TypeError, ValueError, OverflowError):
            skipped += 1

    if skipped:
        logger.warning("Skipped %d malformed %s record(s).", skipped, kind)
    return parsed


def load_journal_data(
    path: str = "emotion_data.json",
) -> tuple[list[EmotionLog], list[JournalEntry], AnalyticsPreferences | None]:
    """Load emotion logs, journal entries and preferences from a JSON export.

    The file is either an object with "logs", "journalEntries" and an
    optional "analyticsPreferences" key, or a bare list of emotion logs
    (older exports carried no journal data).

    Args:
        path: Filesystem path to the JSON export.

    Returns:
        A 3-tuple of (emotion_logs, journal_entries, preferences), where
        preferences is None when absent or unreadable.

    Raises:
        FileNotFoundError: If the file at *path* does not exist.
        json.JSONDecodeError: If the file contains invalid JSON.
    """
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)

    if isinstance(raw, list):
        raw = {"logs": raw}
    elif not isinstance(raw, dict):
        logger.warning("Unexpected top-level JSON type %s in %s.", type(raw).__name__, path)
        return [], [], None

    raw_logs = raw.get("logs", [])
    logs = _parse_records(raw_logs, EmotionLog.from_dict, "emotion log")
    entries = _parse_records(
        raw.get("journalEntries", raw.get("journal_entries", [])),
        JournalEntry.from_dict,
        "journal entry",
    )

    if raw_logs and not logs:
        logger.warning(
            "Loaded %d log records but none were valid. "
            "The export format may have changed.",
            len(raw_logs),
        )

    preferences = None
    raw_prefs = raw.get("analyticsPreferences", raw.get("analytics_preferences"))
    if isinstance(raw_prefs, dict):
        try:
            preferences = AnalyticsPreferences.from_dict(raw_prefs)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Ignoring unreadable analytics preferences: %s", e)

    return logs, entries, preferences


# ---------------------------------------------------------------------------
# Time ranges and filtering
# ---------------------------------------------------------------------------

def create_time_range(
    start: datetime,
    end: datetime,
    preset: str | None = None,
) -> TimeRange:
    """Build a validated time range.

    Timezone-aware bounds are converted to naive local time first, so
    aware and naive inputs can be mixed.

    Raises:
        InvalidTimeRangeError: If *end* is before *start*.
        ValueError: If *preset* is not a known preset name.
        TypeError: If a bound is not a datetime, date, ISO string or
            epoch milliseconds.
    """
    return TimeRange(start=parse_datetime(start), end=parse_datetime(end), preset=preset)


def resolve_preset(preset: str, now: datetime | None = None) -> TimeRange:
    """Resolve a preset name to a concrete time range ending today.

    The range starts at local midnight *N* days before today and ends at
    the last microsecond of today, so entries logged today are included.

    Args:
        preset: One of "week" (7 days), "month" (30), "quarter" (90) or
            "year" (365).
        now: Reference "now".  Defaults to the current local time.

    Returns:
        The resolved TimeRange, tagged with *preset*.

    Raises:
        ValueError: If *preset* is unknown.
    """
    if preset not in _PRESET_DAYS:
        raise ValueError(f"Unknown time range preset: {preset!r}")
    today = (now or datetime.now()).date()
    start = datetime.combine(today - timedelta(days=_PRESET_DAYS[preset]), time.min)
    end = datetime.combine(today, time.max)
    return create_time_range(start, end, preset)


def get_preset_time_ranges(now: datetime | None = None) -> dict[str, TimeRange]:
    """Return every preset resolved against the same reference time."""
    return {name: resolve_preset(name, now) for name in PRESETS}


def _record_field(record: Any, *names: str) -> Any:
    for name in names:
        value = record.get(name) if isinstance(record, dict) else getattr(record, name, None)
        if value is not None:
            return value
    return None


def _effective_time_ms(record: Any) -> float | None:
    """Resolve the time a record belongs to, in epoch milliseconds.

    Resolution order: an explicit ``timestamp`` (ms), else ``date``, else
    the creation time.  An unparseable value counts as missing, so the
    next field is tried.

    Returns:
        Epoch milliseconds, or None when the record carries no usable time.
    """
    timestamp = _record_field(record, "timestamp")
    if timestamp is not None:
        try:
            return float(timestamp)
        except (TypeError, ValueError):
            pass

    for value in (_record_field(record, "date"), _record_field(record, "created_at", "createdAt")):
        if value is None:
            continue
        try:
            parsed = parse_datetime(value)
        except (TypeError, ValueError, OverflowError, OSError):
            continue
        if parsed is not None:
            return parsed.timestamp() * 1000
    return None


def filter_by_time_range(records: list, time_range: TimeRange) -> list:
    """Select records whose effective time lies inside *time_range*.

    Both bounds are inclusive.  Records without a usable time are
    excluded rather than treated as errors.  Relative order is preserved.

    Args:
        records: List (or tuple) of EmotionLog, JournalEntry, or raw dicts.
        time_range: Window to keep.

    Returns:
        A new list holding the matching records in input order.

    Raises:
        TypeError: If *records* is not a list or tuple.
    """
    if not isinstance(records, (list, tuple)):
        raise TypeError(f"Expected a list of records, got {type(records).__name__}")

    start_ms = time_range.start_ms
    end_ms = time_range.end_ms
    result = []
    for record in records:
        item_ms = _effective_time_ms(record)
        if item_ms is not None and start_ms <= item_ms <= end_ms:
            result.append(record)
    return result


# ---------------------------------------------------------------------------
# Pattern calculators
# ---------------------------------------------------------------------------

def _round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (0.5 -> 1)."""
    return int(math.floor(value + 0.5))


def _safe_div(num: float, den: float, default: float = 0.0) -> float:
    """Divide, returning *default* when the denominator is zero."""
    return num / den if den else default


def calculate_expression_ratio(logs: list[EmotionLog], time_range: TimeRange) -> EmotionalPattern:
    """Compute the share of emotions that were expressed rather than held back.

    Args:
        logs: Emotion logs to analyse; filtered to *time_range* first.
        time_range: Analysis window.

    Returns:
        An "expression-ratio" pattern whose data holds expressed,
        suppressed, total, ratio (0..1) and percentage (rounded ratio*100).
    """
    filtered = filter_by_time_range(logs, time_range)

    expressed = sum(1 for log in filtered if log.action == "expressed")
    suppressed = sum(1 for log in filtered if log.action == "suppressed")
    total = expressed + suppressed
    ratio = _safe_div(expressed, total)

    data = ExpressionRatioData(
        expressed=expressed,
        suppressed=suppressed,
        total=total,
        ratio=ratio,
        percentage=_round_half_up(ratio * 100),
    )

    if total == 0:
        insight = "No emotion logs found in this time period."
        encouragement = "Start logging your emotions to see patterns emerge over time."
    elif ratio >= 0.7:
        insight = (
            f"You expressed {data.percentage}% of your emotions - "
            "that's wonderful emotional awareness!"
        )
        encouragement = "Keep up this healthy pattern of emotional expression."
    elif ratio >= 0.5:
        insight = (
            f"You expressed {data.percentage}% of your emotions - "
            "you're building good emotional habits."
        )
        encouragement = "Notice what helps you feel safe to express your emotions."
    else:
        insight = (
            f"You expressed {data.percentage}% of your emotions. "
            "It's okay to take your time with emotional expression."
        )
        encouragement = "Every step toward emotional awareness is valuable, no matter how small."

    return EmotionalPattern(
        type=PatternType.EXPRESSION_RATIO,
        time_range=time_range,
        data=data,
        insight=insight,
        encouragement=encouragement,
    )


def count_emotions(logs: list[EmotionLog]) -> dict[str, int]:
    """Count logs per normalised (trimmed, lowercased) emotion text.

    Returns:
        Dict mapping emotion text to count, in first-seen order.
    """
    counts: dict[str, int] = {}
    for log in logs:
        emotion = log.text.strip().lower()
        counts[emotion] = counts.get(emotion, 0) + 1
    return counts


def rank_emotions(counts: dict[str, int], limit: int = TOP_EMOTIONS_LIMIT) -> list[EmotionCount]:
    """Return the *limit* most frequent emotions, most frequent first.

    The sort is stable, so emotions with equal counts keep the order in
    which they were first seen.
    """
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [EmotionCount(emotion=e, count=c) for e, c in ranked[:limit]]


def analyze_common_emotions(
    logs: list[EmotionLog],
    time_range: TimeRange,
    limit: int = TOP_EMOTIONS_LIMIT,
) -> EmotionalPattern:
    """Rank the emotions the user logged most often in the window.

    Args:
        logs: Emotion logs to analyse; filtered to *time_range* first.
        time_range: Analysis window.
        limit: Maximum number of emotions to return (default 5).

    Returns:
        A "common-emotions" pattern whose data holds the top emotions
        (descending by count), total_logs and unique_emotions.
    """
    filtered = filter_by_time_range(logs, time_range)
    counts = count_emotions(filtered)
    top = rank_emotions(counts, limit)

    data = CommonEmotionsData(
        emotions=top,
        total_logs=len(filtered),
        unique_emotions=len(counts),
    )

    if not top:
        insight = "No emotions logged in this time period."
        encouragement = "Start exploring your emotional landscape by logging how you feel."
    else:
        insight = (
            f'Your most frequent emotion was "{top[0].emotion}" ({top[0].count} times). '
            f"You logged {data.unique_emotions} different emotions."
        )
        encouragement = "Notice the variety in your emotional experience - each feeling has value."

    return EmotionalPattern(
        type=PatternType.COMMON_EMOTIONS,
        time_range=time_range,
        data=data,
        insight=insight,
        encouragement=encouragement,
    )


def _group_logs_by_day(logs: list[EmotionLog]) -> dict[date, list[EmotionLog]]:
    by_day: dict[date, list[EmotionLog]] = {}
    for log in logs:
        by_day.setdefault(log.logged_at.date(), []).append(log)
    return by_day


def _longest_run(days: list[date]) -> tuple[int, int]:
    """Walk sorted days and measure runs of consecutive calendar days.

    Args:
        days: Distinct dates sorted ascending.

    Returns:
        A (longest_streak, streak_count) tuple; (0, 0) for no days.
    """
    if not days:
        return 0, 0

    longest = 0
    count = 0
    run = 1
    for prev, curr in zip(days, days[1:]):
        if (curr - prev).days == 1:
            run += 1
        else:
            longest = max(longest, run)
            count += 1
            run = 1
    return max(longest, run), count + 1


def _streak_ending_on(days: set[date], today: date) -> int:
    """Count consecutive qualifying days walking backwards from *today*."""
    if today not in days:
        return 0
    streak = 0
    day = today
    while day in days:
        streak += 1
        day -= timedelta(days=1)
    return streak


def calculate_streaks(
    logs: list[EmotionLog],
    time_range: TimeRange,
    today: date | None = None,
) -> EmotionalPattern:
    """Detect runs of consecutive days with at least one expressed emotion.

    Days are local calendar days.  The current streak only counts when
    *today* itself has an expressed emotion.

    Args:
        logs: Emotion logs to analyse; filtered to *time_range* first.
        time_range: Analysis window.
        today: Local date treated as "today".  Defaults to the real date.

    Returns:
        A "streak" pattern whose data holds current_streak,
        longest_streak, streak_count, days_with_expressed and total_days.
    """
    filtered = filter_by_time_range(logs, time_range)
    by_day = _group_logs_by_day(filtered)

    qualifying = sorted(
        day for day, day_logs in by_day.items()
        if any(log.action == "expressed" for log in day_logs)
    )
    longest, streak_count = _longest_run(qualifying)
    current = _streak_ending_on(set(qualifying), today or date.today())

    data = StreakData(
        current_streak=current,
        longest_streak=longest,
        streak_count=streak_count,
        days_with_expressed=len(qualifying),
        total_days=len(by_day),
    )

    if data.days_with_expressed == 0:
        insight = "No days with expressed emotions found in this period."
        encouragement = "Each time you express an emotion, you're building emotional awareness."
    elif current > 0:
        insight = (
            f"You're on a {current}-day streak of emotional expression! "
            f"Your longest streak was {longest} days."
        )
        encouragement = "Consistency in emotional expression builds emotional intelligence over time."
    else:
        insight = (
            f"Your longest streak of emotional expression was {longest} days "
            f"across {streak_count} streaks."
        )
        encouragement = "Every streak, no matter how short, represents growth in emotional awareness."

    return EmotionalPattern(
        type=PatternType.STREAK,
        time_range=time_range,
        data=data,
        insight=insight,
        encouragement=encouragement,
    )


def week_start(moment: datetime) -> date:
    """Return the Sunday that starts the local week containing *moment*."""
    day = moment.date()
    return day - timedelta(days=(day.weekday() + 1) % 7)


def _build_weekly_buckets(logs: list[EmotionLog]) -> list[WeekBucket]:
    """Aggregate logs into Sunday-start week buckets, sorted by week.

    Any action other than "expressed" counts as suppressed.
    """
    weekly: dict[str, WeekBucket] = {}
    for log in logs:
        key = week_start(log.logged_at).isoformat()
        bucket = weekly.get(key)
        if bucket is None:
            bucket = weekly[key] = WeekBucket(week=key)
        bucket.total += 1
        if log.action == "expressed":
            bucket.expressed += 1
        else:
            bucket.suppressed += 1

    buckets = [weekly[k] for k in sorted(weekly)]
    for bucket in buckets:
        bucket.expression_ratio = _safe_div(bucket.expressed, bucket.total)
    return buckets


def classify_trend(ratios: list[float], threshold: float = TREND_THRESHOLD) -> str:
    """Classify a chronological series of weekly expression ratios.

    The earliest ``floor(n/2)`` weeks form the first half and the rest the
    second half.  The trend is "improving" when the second-half mean beats
    the first by more than *threshold*, "declining" when it trails by more
    than *threshold*, else "stable".  Fewer than two weeks is always
    "stable".
    """
    if len(ratios) < 2:
        return "stable"

    mid = len(ratios) // 2
    first_avg = sum(ratios[:mid]) / mid
    second_avg = sum(ratios[mid:]) / (len(ratios) - mid)

    if second_avg > first_avg + threshold:
        return "improving"
    if second_avg < first_avg - threshold:
        return "declining"
    return "stable"


def analyze_trends(logs: list[EmotionLog], time_range: TimeRange) -> EmotionalPattern:
    """Track the weekly expression ratio and classify its direction.

    Args:
        logs: Emotion logs to analyse; filtered to *time_range* first.
        time_range: Analysis window.

    Returns:
        A "trend" pattern whose data holds weekly_data (ascending by week
        start), trend_direction, total_weeks and average_expression_ratio.
    """
    filtered = filter_by_time_range(logs, time_range)
    weekly = _build_weekly_buckets(filtered)
    ratios = [w.expression_ratio for w in weekly]

    data = TrendData(
        weekly_data=weekly,
        trend_direction=classify_trend(ratios),
        total_weeks=len(weekly),
        average_expression_ratio=_safe_div(sum(ratios), len(ratios)),
    )

    if not weekly:
        insight = "Not enough data to identify trends yet."
        encouragement = "Keep logging emotions to see patterns emerge over time."
    elif data.trend_direction == "improving":
        insight = "Your emotional expression has been trending upward - great progress!"
        encouragement = "You're building stronger emotional awareness habits."
    elif data.trend_direction == "declining":
        insight = (
            "Your emotional expression has decreased recently. "
            "That's okay - emotional journeys have ups and downs."
        )
        encouragement = "Be gentle with yourself. Every small step toward emotional awareness counts."
    else:
        insight = (
            "Your emotional expression has been consistent, averaging "
            f"{_round_half_up(data.average_expression_ratio * 100)}% over {data.total_weeks} weeks."
        )
        encouragement = "Consistency in emotional awareness is a valuable foundation for growth."

    return EmotionalPattern(
        type=PatternType.TREND,
        time_range=time_range,
        data=data,
        insight=insight,
        encouragement=encouragement,
    )


_CALCULATORS = {
    PatternType.EXPRESSION_RATIO: calculate_expression_ratio,
    PatternType.COMMON_EMOTIONS: analyze_common_emotions,
    PatternType.STREAK: calculate_streaks,
    PatternType.TREND: analyze_trends,
}


def calculate_pattern(
    pattern_type: PatternType | str,
    logs: list[EmotionLog],
    time_range: TimeRange,
) -> EmotionalPattern:
    """Run the single calculator registered for *pattern_type*.

    Raises:
        ValueError: If *pattern_type* is not a known pattern type.
    """
    return _CALCULATORS[PatternType(pattern_type)](logs, time_range)


def generate_all_patterns(
    logs: list[EmotionLog],
    time_range: TimeRange,
    today: date | None = None,
) -> list[EmotionalPattern]:
    """Run all four calculators, in their canonical order, over one window."""
    return [
        calculate_expression_ratio(logs, time_range),
        analyze_common_emotions(logs, time_range),
        calculate_streaks(logs, time_range, today=today),
        analyze_trends(logs, time_range),
    ]


# ---------------------------------------------------------------------------
# Chart projection
# ---------------------------------------------------------------------------

def _single_dataset(label: str, values: list[float], colors: list[str]) -> list[ChartDataset]:
    return [ChartDataset(label=label, data=values, background_color=colors, border_color=list(colors))]


def generate_chart_data(pattern: EmotionalPattern) -> ChartData:
    """Project a pattern into labeled series for a bar or line chart.

    Colours come from the fixed 8-colour pastel palette by index.  More
    than eight categories are not wrapped: the overflow gets no colour.

    Args:
        pattern: Any calculator output.

    Returns:
        ChartData with one dataset whose values line up with the labels.
    """
    data = pattern.data
    p = PASTEL_COLORS

    if isinstance(data, ExpressionRatioData):
        return ChartData(
            labels=["Expressed", "Suppressed"],
            datasets=_single_dataset("Emotions", [data.expressed, data.suppressed], [p[0], p[3]]),
        )

    if isinstance(data, CommonEmotionsData):
        emotions = data.emotions[:TOP_EMOTIONS_LIMIT]
        return ChartData(
            labels=[e.emotion for e in emotions],
            datasets=_single_dataset("Frequency", [e.count for e in emotions], p[:len(emotions)]),
        )

    if isinstance(data, StreakData):
        return ChartData(
            labels=["Current Streak", "Longest Streak"],
            datasets=_single_dataset("Days", [data.current_streak, data.longest_streak], [p[1], p[4]]),
        )

    if isinstance(data, TrendData):
        return ChartData(
            labels=[w.week for w in data.weekly_data],
            datasets=_single_dataset(
                "Expression Ratio",
                [_round_half_up(w.expression_ratio * 100) for w in data.weekly_data],
                [p[2]],
            ),
        )

    return ChartData()


# ---------------------------------------------------------------------------
# Sufficiency and summaries
# ---------------------------------------------------------------------------

def has_sufficient_data(logs: list[EmotionLog], time_range: TimeRange) -> bool:
    """True when the window holds at least ``MIN_LOGS_FOR_INSIGHTS`` logs."""
    return len(filter_by_time_range(logs, time_range)) >= MIN_LOGS_FOR_INSIGHTS


def get_insufficient_data_message(logs: list[EmotionLog], time_range: TimeRange) -> str:
    """Return the encouraging message shown while data is still too thin."""
    count = len(filter_by_time_range(logs, time_range))
    if count == 0:
        return (
            "Start your emotional awareness journey by logging how you feel. "
            "Every emotion matters and contributes to understanding yourself better."
        )
    if count == 1:
        return (
            "You've taken the first step in emotional awareness! "
            "Keep logging your feelings to see patterns emerge over time."
        )
    return (
        "You're building emotional awareness! A few more emotion logs will "
        "help reveal meaningful patterns in your emotional journey."
    )


def count_active_days(logs: list[EmotionLog], entries: list[JournalEntry] = ()) -> int:
    """Count distinct local calendar days holding a log or a journal entry."""
    days = {log.logged_at.date() for log in logs}
    days.update(entry.date.date() for entry in entries)
    return len(days)


# ---------------------------------------------------------------------------
# CLI helpers (used by emotion_summary.py)
# ---------------------------------------------------------------------------

def save_analytics_files(
    result: AnalyticsResult,
    output_dir: str = "emotion_analytics",
) -> list[str]:
    """Write the analytics result as JSON plus flat CSV tables.

    Creates the output directory if it doesn't exist and writes
    analytics_result.json, patterns.csv and (if the trend pattern has any
    weeks) weekly_trend.csv.

    Args:
        result: A result produced by the analytics engine.
        output_dir: Directory path for output files.  Created if it
            doesn't exist.  Defaults to "emotion_analytics".

    Returns:
        The paths of the files written.
    """
    os.makedirs(output_dir, exist_ok=True)
    written = []

    path = os.path.join(output_dir, "analytics_result.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(result.to_dict(), f, indent=2)
    written.append(path)

    path = os.path.join(output_dir, "patterns.csv")
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=["type", "insight", "encouragement"])
        writer.writeheader()
        for p in result.patterns:
            writer.writerow({"type": p.type.value, "insight": p.insight, "encouragement": p.encouragement})
    written.append(path)

    trend = result.pattern(PatternType.TREND)
    if trend is not None and trend.data.weekly_data:
        path = os.path.join(output_dir, "weekly_trend.csv")
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(
                f,
                fieldnames=["week", "expressed", "suppressed", "total", "expression_ratio"],
            )
            writer.writeheader()
            for w in trend.data.weekly_data:
                writer.writerow({
                    "week": w.week,
                    "expressed": w.expressed,
                    "suppressed": w.suppressed,
                    "total": w.total,
                    "expression_ratio": round(w.expression_ratio, 4),
                })
        written.append(path)

    return written


def print_summary_report(result: AnalyticsResult, summary: AnalyticsSummary) -> None:
    """Print the CLI summary report to stdout.

    Args:
        result: Analytics result for the requested window.
        summary: Quick summary for the same window.
    """
    tr = result.time_range
    print(f"\n{'=' * 60}")
    print("Emotion Journal Summary")
    print(f"{'=' * 60}")
    label = f" ({tr.preset})" if tr.preset else ""
    print(f"Time Range{label}: {tr.start.strftime('%Y-%m-%d')} to {tr.end.strftime('%Y-%m-%d')}")
    print(f"Emotion Logs: {result.data_count.emotion_logs:,}")
    print(f"Journal Entries: {result.data_count.journal_entries:,}")
    print(f"Active Days: {result.data_count.total_days:,}")
    print(f"Expressed: {summary.expressed_emotions:,} of {summary.total_emotions:,} "
          f"({summary.expression_ratio * 100:.0f}%)")
    print(f"Current Streak: {summary.current_streak} days")
    if summary.most_common_emotion:
        print(f"Most Common Emotion: {summary.most_common_emotion}")

    if not result.has_sufficient_data:
        print(f"\n{result.insufficient_data_message}")

    if result.patterns:
        print(f"\n{'=' * 60}")
        print("Insights")
        print(f"{'=' * 60}")
        for p in result.patterns:
            print(f"[{p.type.value}] {p.insight}")
            print(f"    {p.encouragement}")

    print(f"{'=' * 60}")
