"""Shared test helpers for emotion analytics tests.

Regular functions (not fixtures) that can be imported by any test module.
"""

from __future__ import annotations

import itertools
from datetime import datetime, time

from emotion_models import EmotionLog, JournalEntry, TimeRange

_ids = itertools.count(1)


def ms(moment: datetime) -> int:
    """Epoch milliseconds for a naive local datetime."""
    return int(moment.timestamp() * 1000)


def make_log(
    day: str,
    action: str = "expressed",
    text: str = "happy",
    hour: int = 10,
) -> EmotionLog:
    """Build one emotion log at *hour* local time on *day* (YYYY-MM-DD)."""
    moment = datetime.fromisoformat(f"{day}T{hour:02d}:00:00")
    return EmotionLog(id=f"log-{next(_ids)}", text=text, action=action, timestamp=ms(moment))


def make_logs_on_days(day_configs: list[tuple[str, int, int]]) -> list[EmotionLog]:
    """Build logs spanning multiple days.

    Args:
        day_configs: List of (date_str, num_expressed, num_suppressed) tuples.

    Returns:
        The logs in chronological order, one hour apart within each day.
    """
    logs = []
    for day, expressed, suppressed in day_configs:
        actions = ["expressed"] * expressed + ["suppressed"] * suppressed
        for hour, action in enumerate(actions, start=8):
            logs.append(make_log(day, action=action, hour=hour))
    return logs


def make_entry(day: str, content: str = "Felt calmer after a walk.") -> JournalEntry:
    moment = datetime.fromisoformat(f"{day}T20:00:00")
    return JournalEntry(
        id=f"entry-{next(_ids)}",
        content=content,
        date=moment,
        created_at=moment,
        updated_at=moment,
        word_count=len(content.split()),
    )


def day_range(first: str, last: str) -> TimeRange:
    """Whole local days from *first* through *last* inclusive."""
    return TimeRange(
        start=datetime.combine(datetime.fromisoformat(first).date(), time.min),
        end=datetime.combine(datetime.fromisoformat(last).date(), time.max),
    )
