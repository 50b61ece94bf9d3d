"""Analytics engine: orchestrates the calculators over a user's history.

One ``AnalyticsEngine`` instance is the context for a single consumer.  It
holds references to the caller's emotion logs and journal entries, the
current preferences, and the most recent result.  Nothing here is a
module-level singleton; whoever needs an engine constructs and owns it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from datetime import date, datetime, time, timedelta
from typing import Any, Callable

from analytics import (
    calculate_streaks,
    count_active_days,
    count_emotions,
    create_time_range,
    filter_by_time_range,
    generate_all_patterns,
    generate_chart_data,
    get_insufficient_data_message,
    has_sufficient_data,
    rank_emotions,
    resolve_preset,
)
from emotion_models import (
    ALL_PATTERN_TYPES,
    AccessorResult,
    AnalyticsPreferences,
    AnalyticsResult,
    AnalyticsSummary,
    DataCount,
    DataFreshness,
    EmotionCount,
    EmotionLog,
    JournalEntry,
    PatternType,
    TimeRange,
)

logger = logging.getLogger(__name__)

Loader = Callable[[], tuple[list[EmotionLog], list[JournalEntry]]]

CURRENT_STREAK_WINDOW_DAYS = 7


@dataclass(frozen=True)
class AnalyticsConfig:
    """Per-call overrides for ``generate_analytics``.

    Any field left as None falls back to the engine's preferences.
    """

    time_range: TimeRange | None = None
    enabled_patterns: list[PatternType] | None = None
    include_journal_data: bool = True


def default_preferences(now: datetime | None = None) -> AnalyticsPreferences:
    """Month window, every insight enabled, last viewed now."""
    return AnalyticsPreferences(
        default_time_range=resolve_preset("month", now),
        enabled_insights=list(ALL_PATTERN_TYPES),
        last_viewed_insights=now or datetime.now(),
    )


class AnalyticsEngine:
    """Computes and holds emotion analytics for one user's local data.

    Args:
        emotion_logs: The caller's emotion log list.  Held by reference, so
            appends made by the caller are visible to later calls.
        journal_entries: The caller's journal entry list, also by reference.
        preferences: Starting preferences; defaults to
            ``default_preferences()``.
        loader: Optional callable returning fresh ``(logs, entries)``.
            ``refresh_data`` calls it to re-read the external store.
    """

    def __init__(
        self,
        emotion_logs: list[EmotionLog] | None = None,
        journal_entries: list[JournalEntry] | None = None,
        preferences: AnalyticsPreferences | None = None,
        loader: Loader | None = None,
    ) -> None:
        self._emotion_logs = emotion_logs if emotion_logs is not None else []
        self._journal_entries = journal_entries if journal_entries is not None else []
        self._preferences = preferences or default_preferences()
        self._loader = loader
        self._result: AnalyticsResult | None = None
        self._last_config = AnalyticsConfig()

    # -- state -------------------------------------------------------------

    @property
    def current_result(self) -> AnalyticsResult | None:
        return self._result

    @property
    def emotion_logs(self) -> list[EmotionLog]:
        return self._emotion_logs

    @property
    def journal_entries(self) -> list[JournalEntry]:
        return self._journal_entries

    def get_preferences(self) -> AnalyticsPreferences:
        return self._preferences

    def update_preferences(self, changes: dict[str, Any]) -> AnalyticsPreferences:
        """Merge partial preference changes and regenerate if needed.

        ``last_viewed_insights`` is always stamped with the current time.
        When ``default_time_range`` changes and a result is held, the
        result is regenerated with the default config so the new range
        takes effect.

        Args:
            changes: Mapping of AnalyticsPreferences field names to new values.

        Returns:
            The updated preferences.

        Raises:
            ValueError: If *changes* names an unknown preference.
            TypeError: If ``default_time_range`` is not a TimeRange.
        """
        known = {f.name for f in fields(AnalyticsPreferences)}
        unknown = set(changes) - known
        if unknown:
            raise ValueError(f"Unknown preference(s): {', '.join(sorted(unknown))}")

        if "default_time_range" in changes and not isinstance(changes["default_time_range"], TimeRange):
            raise TypeError(
                "default_time_range must be a TimeRange, got "
                f"{type(changes['default_time_range']).__name__}"
            )

        previous_range = self._preferences.default_time_range
        merged = dict(changes)
        if "enabled_insights" in merged:
            merged["enabled_insights"] = [PatternType(p) for p in merged["enabled_insights"]]
        merged["last_viewed_insights"] = datetime.now()
        self._preferences = replace(self._preferences, **merged)

        if self._preferences.default_time_range != previous_range and self._result is not None:
            logger.debug("Default time range changed; regenerating analytics.")
            self.generate_analytics(AnalyticsConfig())
        return self._preferences

    # -- generation --------------------------------------------------------

    def generate_analytics(
        self,
        config: AnalyticsConfig | None = None,
        today: date | None = None,
    ) -> AnalyticsResult:
        """Run every calculator over the resolved window and keep the result.

        Calculators always run; a window with fewer than three logs is
        flagged through ``has_sufficient_data`` and an encouraging
        ``insufficient_data_message`` rather than suppressed.

        Args:
            config: Overrides for time range, enabled patterns and journal
                inclusion.  Defaults to the preferences.
            today: Local date treated as "today" for the current streak.

        Returns:
            The new result, which replaces any previously held one.

        Raises:
            TypeError: If the held log or entry store is not a list.
        """
        config = config or AnalyticsConfig()
        time_range = config.time_range or self._preferences.default_time_range
        enabled = (
            config.enabled_patterns
            if config.enabled_patterns is not None
            else self._preferences.enabled_insights
        )

        logs = filter_by_time_range(self._emotion_logs, time_range)
        entries = (
            filter_by_time_range(self._journal_entries, time_range)
            if config.include_journal_data
            else []
        )
        sufficient = has_sufficient_data(logs, time_range)

        patterns = [
            p for p in generate_all_patterns(logs, time_range, today=today)
            if p.type in enabled
        ]
        chart_data = {p.type: generate_chart_data(p) for p in patterns}

        result = AnalyticsResult(
            patterns=patterns,
            chart_data=chart_data,
            has_sufficient_data=sufficient,
            insufficient_data_message=None if sufficient else get_insufficient_data_message(logs, time_range),
            time_range=time_range,
            data_count=DataCount(
                emotion_logs=len(logs),
                journal_entries=len(entries),
                total_days=count_active_days(logs, entries),
            ),
        )
        logger.debug(
            "Generated analytics for %s..%s: %d logs, %d entries, sufficient=%s",
            time_range.start.isoformat(), time_range.end.isoformat(),
            len(logs), len(entries), sufficient,
        )

        self._result = result
        self._last_config = config
        self._preferences = replace(self._preferences, last_viewed_insights=datetime.now())
        return result

    def generate_preset_analytics(self, preset: str) -> AnalyticsResult:
        """Generate analytics for a named window ("week", "month", ...)."""
        return self.generate_analytics(AnalyticsConfig(time_range=resolve_preset(preset)))

    def generate_custom_analytics(self, start: datetime, end: datetime) -> AnalyticsResult:
        """Generate analytics for an explicit window.

        Raises:
            InvalidTimeRangeError: If *end* is before *start*.
        """
        return self.generate_analytics(AnalyticsConfig(time_range=create_time_range(start, end)))

    def refresh_data(self) -> AnalyticsResult | None:
        """Re-read the external store and regenerate the held result.

        Without a loader the held references are already current, so only
        the regeneration happens.

        Returns:
            The regenerated result, or None when no result was held.
        """
        if self._loader is not None:
            self._emotion_logs, self._journal_entries = self._loader()
        if self._result is None:
            return None
        return self.generate_analytics(self._last_config)

    # -- quick accessors ---------------------------------------------------

    def _range_or_default(self, time_range: TimeRange | None) -> TimeRange:
        return time_range or self._preferences.default_time_range

    def get_expression_ratio(self, time_range: TimeRange | None = None) -> AccessorResult[float]:
        """Expressed share of all logs in the window, recomputed from raw data."""
        try:
            logs = filter_by_time_range(self._emotion_logs, self._range_or_default(time_range))
        except (TypeError, ValueError) as e:
            logger.error("Failed to get expression ratio: %s", e)
            return AccessorResult.failure(str(e))
        expressed = sum(1 for log in logs if log.action == "expressed")
        return AccessorResult.success(expressed / len(logs) if logs else 0.0)

    def get_common_emotions(
        self,
        time_range: TimeRange | None = None,
        limit: int = 5,
    ) -> AccessorResult[list[EmotionCount]]:
        """Most frequent emotions in the window, recomputed from raw data."""
        try:
            if limit < 0:
                raise ValueError(f"limit must be non-negative, got {limit}")
            logs = filter_by_time_range(self._emotion_logs, self._range_or_default(time_range))
        except (TypeError, ValueError) as e:
            logger.error("Failed to get common emotions: %s", e)
            return AccessorResult.failure(str(e))
        return AccessorResult.success(rank_emotions(count_emotions(logs), limit))

    def get_current_streak(self, today: date | None = None) -> AccessorResult[int]:
        """Live streak over the last week, recomputed from raw data.

        The window spans whole local days, from midnight seven days ago to
        the end of *today*.
        """
        day = today or date.today()
        try:
            window = create_time_range(
                datetime.combine(day - timedelta(days=CURRENT_STREAK_WINDOW_DAYS), time.min),
                datetime.combine(day, time.max),
            )
            pattern = calculate_streaks(self._emotion_logs, window, today=day)
        except (TypeError, ValueError) as e:
            logger.error("Failed to get current streak: %s", e)
            return AccessorResult.failure(str(e))
        return AccessorResult.success(pattern.data.current_streak)

    def get_analytics_summary(
        self,
        time_range: TimeRange | None = None,
        today: date | None = None,
    ) -> AccessorResult[AnalyticsSummary]:
        """Lightweight dashboard summary, recomputed from raw data."""
        try:
            logs = filter_by_time_range(self._emotion_logs, self._range_or_default(time_range))
        except (TypeError, ValueError) as e:
            logger.error("Failed to get analytics summary: %s", e)
            return AccessorResult.failure(str(e))

        streak = self.get_current_streak(today)
        if not streak.ok:
            return AccessorResult.failure(streak.error)

        expressed = sum(1 for log in logs if log.action == "expressed")
        top = rank_emotions(count_emotions(logs), 1)
        return AccessorResult.success(AnalyticsSummary(
            total_emotions=len(logs),
            expressed_emotions=expressed,
            expression_ratio=expressed / len(logs) if logs else 0.0,
            current_streak=streak.value,
            most_common_emotion=top[0].emotion if top else None,
            active_days=count_active_days(logs),
        ))

    # -- availability ------------------------------------------------------

    def has_analytics_data(self) -> bool:
        return len(self._emotion_logs) > 0

    def get_data_freshness(self) -> DataFreshness:
        """When the newest log and entry were written, and insights last viewed."""
        last_log = max((log.timestamp for log in self._emotion_logs), default=None)
        last_entry = max((e.updated_at for e in self._journal_entries), default=None)
        return DataFreshness(
            last_emotion_log=datetime.fromtimestamp(last_log / 1000) if last_log is not None else None,
            last_journal_entry=last_entry,
            last_analytics_view=self._preferences.last_viewed_insights,
        )
