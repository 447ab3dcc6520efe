"""Read-side views over a reconciled deadline set."""

from __future__ import annotations

from datetime import datetime, timedelta, tzinfo
from typing import Callable, Optional

from deadline_feed.schema import UNKNOWN_COURSE, DeadlineItem

_DEFAULT_TEXT = {
    "summary.no_upcoming": "No upcoming deadlines",
    "summary.next_due": "Next: {0}{1}, due {2} at {3}",
}

Translate = Callable[..., str]


def default_translate(key: str, *args) -> str:
    template = _DEFAULT_TEXT.get(key, key)
    return template.format(*args)


def active_deadlines(items: list[DeadlineItem]) -> list[DeadlineItem]:
    return sorted((item for item in items if not item.is_completed), key=lambda item: item.due_date)


def completed_deadlines(items: list[DeadlineItem]) -> list[DeadlineItem]:
    return sorted((item for item in items if item.is_completed), key=lambda item: item.due_date, reverse=True)


def filter_deadlines(items: list[DeadlineItem], course: Optional[str] = None, search: str = "") -> list[DeadlineItem]:
    """Keep items of ``course`` (if given) whose title or course contains ``search``."""

    needle = search.strip().lower()
    result = []
    for item in items:
        if course is not None and item.course != course:
            continue
        if needle and needle not in f"{item.title} {item.course}".lower():
            continue
        result.append(item)
    return result


def courses(items: list[DeadlineItem]) -> list[str]:
    """Sorted course labels with the unknown label last."""

    labels = {item.course for item in items}
    ordered = sorted(labels - {UNKNOWN_COURSE})
    if UNKNOWN_COURSE in labels:
        ordered.append(UNKNOWN_COURSE)
    return ordered


def _start_of_day(now: datetime, tz: Optional[tzinfo]) -> datetime:
    local = now.astimezone(tz)
    return local.replace(hour=0, minute=0, second=0, microsecond=0)


def due_today(items: list[DeadlineItem], now: datetime, tz: Optional[tzinfo] = None) -> list[DeadlineItem]:
    """Active items due on the same calendar day as ``now`` in ``tz``."""

    today = now.astimezone(tz).date()
    return [item for item in active_deadlines(items) if item.due_date.astimezone(tz).date() == today]


def due_within_week(items: list[DeadlineItem], now: datetime, tz: Optional[tzinfo] = None) -> list[DeadlineItem]:
    """Active items due after today through seven days from the start of today.

    Items due today are left to ``due_today``.
    """

    start = _start_of_day(now, tz)
    end = start + timedelta(days=7)
    today = start.date()
    return [
        item
        for item in active_deadlines(items)
        if start <= item.due_date <= end and item.due_date.astimezone(tz).date() != today
    ]


def next_due(items: list[DeadlineItem], now: datetime) -> Optional[DeadlineItem]:
    """Earliest active item that is not yet past due."""

    for item in active_deadlines(items):
        if item.due_date >= now:
            return item
    return None


def _relative(delta: timedelta) -> str:
    seconds = int(delta.total_seconds())
    future = seconds >= 0
    seconds = abs(seconds)
    for unit, size in (("day", 86400), ("hour", 3600), ("minute", 60)):
        if seconds >= size:
            count = seconds // size
            text = f"{count} {unit}{'' if count == 1 else 's'}"
            return f"in {text}" if future else f"{text} ago"
    return "now"


def next_due_summary(
    items: list[DeadlineItem],
    now: datetime,
    translate: Translate = default_translate,
    tz: Optional[tzinfo] = None,
) -> str:
    """One-line description of the earliest active deadline."""

    upcoming = active_deadlines(items)
    if not upcoming:
        return translate("summary.no_upcoming")

    item = upcoming[0]
    course_part = "" if item.course == UNKNOWN_COURSE else f"{item.course} "
    relative = _relative(item.due_date - now)
    time_text = item.due_date.astimezone(tz).strftime("%H:%M")
    return translate("summary.next_due", course_part, item.title, relative, time_text)
