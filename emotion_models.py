"""Data model for emotion journal analytics.

Plain dataclasses for the raw records (emotion logs, journal entries), the
time window they are analysed over, and every derived result the analytics
layer produces.  All result types expose ``to_dict()`` returning JSON-ready
plain data (datetimes as ISO strings, enums as their values).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, ClassVar, Generic, TypeVar, Union

T = TypeVar("T")

ACTIONS = ("expressed", "suppressed")
PRESETS = ("week", "month", "quarter", "year")


class InvalidTimeRangeError(ValueError):
    """Raised when a time range ends before it starts."""


class PatternType(str, Enum):
    EXPRESSION_RATIO = "expression-ratio"
    COMMON_EMOTIONS = "common-emotions"
    STREAK = "streak"
    TREND = "trend"


ALL_PATTERN_TYPES = [
    PatternType.EXPRESSION_RATIO,
    PatternType.COMMON_EMOTIONS,
    PatternType.STREAK,
    PatternType.TREND,
]


def _json_ready(items: list[tuple[str, Any]]) -> dict[str, Any]:
    """``asdict`` factory converting datetimes, dates and enums to plain values."""
    result = {}
    for key, value in items:
        if isinstance(value, (datetime, date)):
            value = value.isoformat()
        elif isinstance(value, Enum):
            value = value.value
        elif isinstance(value, list):
            value = [v.value if isinstance(v, Enum) else v for v in value]
        elif isinstance(value, dict):
            value = {
                (k.value if isinstance(k, Enum) else k): v for k, v in value.items()
            }
        result[key] = value
    return result


def parse_datetime(value: Any) -> datetime | None:
    """Parse a datetime from an ISO string, epoch milliseconds, or datetime.

    Args:
        value: ISO-8601 string (a trailing "Z" is accepted), int/float epoch
            milliseconds, a ``datetime`` or a ``date``.

    Returns:
        A naive local ``datetime``, or None if *value* is None or empty.

    Raises:
        ValueError: If a string cannot be parsed.
        TypeError: If *value* has an unsupported type.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _local_naive(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, bool):
        raise TypeError(f"Unsupported datetime value: {value!r}")
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return _local_naive(datetime.fromisoformat(text))
    raise TypeError(f"Unsupported datetime value: {value!r}")


def _local_naive(moment: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive ones pass through."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def _first(raw: dict, *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return default


# ---------------------------------------------------------------------------
# Raw records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EmotionLog:
    """One micro-emotion entry as submitted by the user."""

    id: str
    text: str
    action: str
    timestamp: int  # epoch milliseconds
    text_color: str | None = None
    quick_emotion: str | None = None

    @property
    def logged_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp / 1000)

    @classmethod
    def from_dict(cls, raw: dict) -> EmotionLog:
        """Build a log from a raw export dict (camelCase or snake_case keys).

        Raises:
            KeyError: If id, text, action or timestamp is missing.
            ValueError: If the action is not "expressed" or "suppressed",
                or the timestamp is not numeric.
        """
        action = raw["action"]
        if action not in ACTIONS:
            raise ValueError(f"Unknown emotion action: {action!r}")
        return cls(
            id=str(raw["id"]),
            text=str(raw["text"]),
            action=action,
            timestamp=int(float(raw["timestamp"])),
            text_color=_first(raw, "textColor", "text_color"),
            quick_emotion=_first(raw, "quickEmotion", "quick_emotion"),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self, dict_factory=_json_ready)


@dataclass(frozen=True)
class JournalEntry:
    """A longer journal entry tied to one calendar day."""

    id: str
    content: str
    date: datetime
    created_at: datetime
    updated_at: datetime
    linked_emotions: list[str] = field(default_factory=list)
    word_count: int = 0
    tags: list[str] = field(default_factory=list)
    day_of_year: int = 0

    @classmethod
    def from_dict(cls, raw: dict) -> JournalEntry:
        """Build an entry from a raw export dict (camelCase or snake_case keys).

        ``createdAt`` and ``updatedAt`` default to the entry date, and the
        word count is derived from the content when absent.

        Raises:
            KeyError: If id or date is missing.
            ValueError: If a date field cannot be parsed.
        """
        entry_date = parse_datetime(raw["date"])
        if entry_date is None:
            raise ValueError("Journal entry has an empty date")
        created_at = parse_datetime(_first(raw, "createdAt", "created_at")) or entry_date
        updated_at = parse_datetime(_first(raw, "updatedAt", "updated_at")) or created_at
        content = str(raw.get("content", ""))
        word_count = _first(raw, "wordCount", "word_count")
        return cls(
            id=str(raw["id"]),
            content=content,
            date=entry_date,
            created_at=created_at,
            updated_at=updated_at,
            linked_emotions=list(_first(raw, "linkedEmotions", "linked_emotions", default=[])),
            word_count=int(word_count) if word_count is not None else len(content.split()),
            tags=list(raw.get("tags") or []),
            day_of_year=int(_first(raw, "dayOfYear", "day_of_year",
                                   default=entry_date.timetuple().tm_yday)),
        )


# ---------------------------------------------------------------------------
# Time window
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TimeRange:
    """Inclusive ``[start, end]`` window with an optional preset name."""

    start: datetime
    end: datetime
    preset: str | None = None

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise InvalidTimeRangeError(
                f"Time range ends before it starts: {self.start.isoformat()} > {self.end.isoformat()}"
            )
        if self.preset is not None and self.preset not in PRESETS:
            raise ValueError(f"Unknown time range preset: {self.preset!r}")

    @property
    def start_ms(self) -> float:
        return self.start.timestamp() * 1000

    @property
    def end_ms(self) -> float:
        return self.end.timestamp() * 1000

    def to_dict(self) -> dict[str, Any]:
        return asdict(self, dict_factory=_json_ready)


# ---------------------------------------------------------------------------
# Pattern data (one variant per calculator)
# ---------------------------------------------------------------------------

@dataclass
class ExpressionRatioData:
    pattern_type: ClassVar[PatternType] = PatternType.EXPRESSION_RATIO

    expressed: int = 0
    suppressed: int = 0
    total: int = 0
    ratio: float = 0.0
    percentage: int = 0


@dataclass
class EmotionCount:
    emotion: str
    count: int


@dataclass
class CommonEmotionsData:
    pattern_type: ClassVar[PatternType] = PatternType.COMMON_EMOTIONS

    emotions: list[EmotionCount] = field(default_factory=list)
    total_logs: int = 0
    unique_emotions: int = 0


@dataclass
class StreakData:
    pattern_type: ClassVar[PatternType] = PatternType.STREAK

    current_streak: int = 0
    longest_streak: int = 0
    streak_count: int = 0
    days_with_expressed: int = 0
    total_days: int = 0


@dataclass
class WeekBucket:
    week: str  # ISO date of the Sunday the week starts on
    expressed: int = 0
    suppressed: int = 0
    total: int = 0
    expression_ratio: float = 0.0


@dataclass
class TrendData:
    pattern_type: ClassVar[PatternType] = PatternType.TREND

    weekly_data: list[WeekBucket] = field(default_factory=list)
    trend_direction: str = "stable"
    total_weeks: int = 0
    average_expression_ratio: float = 0.0


PatternData = Union[ExpressionRatioData, CommonEmotionsData, StreakData, TrendData]


@dataclass
class EmotionalPattern:
    """One derived view over a time window plus its narrative text."""

    type: PatternType
    time_range: TimeRange
    data: PatternData
    insight: str
    encouragement: str

    def __post_init__(self) -> None:
        if self.type is not self.data.pattern_type:
            raise ValueError(
                f"Pattern type {self.type.value!r} does not match data for "
                f"{self.data.pattern_type.value!r}"
            )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self, dict_factory=_json_ready)


# ---------------------------------------------------------------------------
# Chart data
# ---------------------------------------------------------------------------

@dataclass
class ChartDataset:
    label: str
    data: list[float]
    background_color: list[str]
    border_color: list[str]


@dataclass
class ChartData:
    labels: list[str] = field(default_factory=list)
    datasets: list[ChartDataset] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self, dict_factory=_json_ready)


# ---------------------------------------------------------------------------
# Engine state and outputs
# ---------------------------------------------------------------------------

@dataclass
class AnalyticsPreferences:
    default_time_range: TimeRange
    enabled_insights: list[PatternType] = field(default_factory=lambda: list(ALL_PATTERN_TYPES))
    last_viewed_insights: datetime = field(default_factory=datetime.now)

    @classmethod
    def from_dict(cls, raw: dict) -> AnalyticsPreferences:
        """Build preferences from a raw export dict.

        Raises:
            KeyError: If the default time range is missing.
            ValueError: If a date, preset or insight name is invalid.
        """
        raw_range = _first(raw, "defaultTimeRange", "default_time_range")
        if raw_range is None:
            raise KeyError("defaultTimeRange")
        time_range = TimeRange(
            start=parse_datetime(raw_range["start"]),
            end=parse_datetime(raw_range["end"]),
            preset=raw_range.get("preset"),
        )
        insights = _first(raw, "enabledInsights", "enabled_insights",
                          default=[p.value for p in ALL_PATTERN_TYPES])
        last_viewed = parse_datetime(_first(raw, "lastViewedInsights", "last_viewed_insights"))
        return cls(
            default_time_range=time_range,
            enabled_insights=[PatternType(name) for name in insights],
            last_viewed_insights=last_viewed or datetime.now(),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self, dict_factory=_json_ready)


@dataclass
class DataCount:
    emotion_logs: int = 0
    journal_entries: int = 0
    total_days: int = 0


@dataclass
class AnalyticsResult:
    """Everything one engine run produces; replaces the previous result."""

    patterns: list[EmotionalPattern]
    chart_data: dict[PatternType, ChartData]
    has_sufficient_data: bool
    time_range: TimeRange
    data_count: DataCount
    insufficient_data_message: str | None = None

    def pattern(self, pattern_type: PatternType) -> EmotionalPattern | None:
        for p in self.patterns:
            if p.type is pattern_type:
                return p
        return None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self, dict_factory=_json_ready)


@dataclass
class AnalyticsSummary:
    total_emotions: int
    expressed_emotions: int
    expression_ratio: float
    current_streak: int
    most_common_emotion: str | None
    active_days: int

    @classmethod
    def zeroed(cls) -> AnalyticsSummary:
        """The documented fallback shown when the summary cannot be computed."""
        return cls(
            total_emotions=0,
            expressed_emotions=0,
            expression_ratio=0.0,
            current_streak=0,
            most_common_emotion=None,
            active_days=0,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self, dict_factory=_json_ready)


@dataclass
class DataFreshness:
    last_emotion_log: datetime | None = None
    last_journal_entry: datetime | None = None
    last_analytics_view: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self, dict_factory=_json_ready)


@dataclass(frozen=True)
class AccessorResult(Generic[T]):
    """Value-or-error wrapper returned by the engine's quick accessors.

    The library never substitutes a default; callers choose their own
    fallback with ``unwrap_or``.
    """

    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> AccessorResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> AccessorResult[T]:
        return cls(error=error)

    def unwrap(self) -> T:
        if self.error is not None:
            raise ValueError(self.error)
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value if self.error is None else default
