"""iCalendar adapter producing deadline candidates."""

from __future__ import annotations

import enum
import logging
from datetime import datetime, timedelta
from typing import Iterable, Iterator, Optional

from deadline_feed.classifier import classify_course
from deadline_feed.dates import parse_date
from deadline_feed.schema import DeadlineItem, ParseReport, Property, RawEvent

logger = logging.getLogger(__name__)

PAST_WINDOW = timedelta(days=180)
FUTURE_WINDOW = timedelta(days=365)

_BEGIN_EVENT = "BEGIN:VEVENT"
_END_EVENT = "END:VEVENT"


class SkipReason(str, enum.Enum):
    MISSING_SUMMARY = "missing_summary"
    MISSING_DATE = "missing_date"
    UNPARSABLE_DATE = "unparsable_date"
    OUTSIDE_WINDOW = "outside_window"


def unfold_lines(text: str) -> list[str]:
    """Join folded continuation lines into logical lines."""

    unfolded: list[str] = []
    current = ""
    for line in text.splitlines():
        if line.startswith((" ", "\t")):
            current += line[1:]
            continue
        if current:
            unfolded.append(current)
        current = line
    if current:
        unfolded.append(current)
    return unfolded


def parse_property(line: str) -> Optional[Property]:
    """Split a logical line into name, parameters and value.

    Returns None for lines without an unquoted colon or without a name.
    """

    quoted = False
    colon = -1
    for index, char in enumerate(line):
        if char == '"':
            quoted = not quoted
        elif char == ":" and not quoted:
            colon = index
            break
    if colon < 0:
        return None

    left, value = line[:colon], line[colon + 1 :]
    name, _, params = left.partition(";")
    name = name.strip().upper()
    if not name:
        return None
    return Property(name=name, params=params, value=value)


def iter_raw_events(lines: Iterable[str]) -> Iterator[RawEvent]:
    """Yield one RawEvent per BEGIN:VEVENT/END:VEVENT block."""

    current: Optional[RawEvent] = None
    for line in lines:
        if line == _BEGIN_EVENT:
            current = RawEvent()
            continue
        if line == _END_EVENT:
            if current is not None:
                yield current
            current = None
            continue
        if current is None:
            continue

        prop = parse_property(line)
        if prop is not None:
            current.record(prop)


def _require_aware(now: datetime) -> None:
    if now.tzinfo is None or now.utcoffset() is None:
        raise ValueError("now must be a timezone-aware datetime")


def _skip(report: ParseReport, reason: SkipReason, summary: str) -> None:
    report.skipped[reason.value] = report.skipped.get(reason.value, 0) + 1
    logger.debug("Skipping event %r: %s", summary, reason.value)


def to_candidate(raw: RawEvent, now: datetime, report: Optional[ParseReport] = None) -> Optional[DeadlineItem]:
    """Convert a RawEvent into a DeadlineItem, or None when it must be skipped."""

    _require_aware(now)
    report = report if report is not None else ParseReport()
    summary = raw.summary.value.strip() if raw.summary else ""
    if not summary:
        _skip(report, SkipReason.MISSING_SUMMARY, summary)
        return None

    date_prop = raw.date_property()
    if date_prop is None:
        _skip(report, SkipReason.MISSING_DATE, summary)
        return None
    due_date = parse_date(date_prop.value, date_prop.params)
    if due_date is None:
        _skip(report, SkipReason.UNPARSABLE_DATE, summary)
        return None
    if not (now - PAST_WINDOW <= due_date <= now + FUTURE_WINDOW):
        _skip(report, SkipReason.OUTSIDE_WINDOW, summary)
        return None

    categories = raw.categories.value if raw.categories else None
    source_url = raw.url.value.strip() if raw.url else ""
    return DeadlineItem.create(
        title=summary,
        course=classify_course(summary, categories),
        due_date=due_date,
        source_url=source_url or None,
    )


def parse(text: str, now: datetime, report: Optional[ParseReport] = None) -> list[DeadlineItem]:
    """Parse feed text into deduplicated, windowed candidates sorted by due date.

    ``now`` must be timezone-aware.
    """

    _require_aware(now)
    report = report if report is not None else ParseReport()
    unique: dict[str, DeadlineItem] = {}
    for raw in iter_raw_events(unfold_lines(text)):
        report.events_seen += 1
        item = to_candidate(raw, now, report)
        if item is None:
            continue
        if item.id in unique:
            report.duplicates += 1
        unique[item.id] = item

    logger.debug(
        "Parsed %d events into %d candidates (%d duplicates)",
        report.events_seen,
        len(unique),
        report.duplicates,
    )
    return sorted(unique.values(), key=lambda item: item.due_date)
