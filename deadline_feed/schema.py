"""Core data schema for feed deadlines."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from deadline_feed.identity import make_id, make_stable_key

UNKNOWN_COURSE = "Unknown"


@dataclass(frozen=True)
class Property:
    """One parsed content line: upper-cased name, raw parameter string and value."""

    name: str
    params: str
    value: str


@dataclass
class RawEvent:
    """Properties collected inside one VEVENT block.

    Only the first occurrence of each consulted property is kept.
    """

    summary: Optional[Property] = None
    categories: Optional[Property] = None
    url: Optional[Property] = None
    due: Optional[Property] = None
    dtend: Optional[Property] = None
    dtstart: Optional[Property] = None

    _FIELDS = {
        "SUMMARY": "summary",
        "CATEGORIES": "categories",
        "URL": "url",
        "DUE": "due",
        "DTEND": "dtend",
        "DTSTART": "dtstart",
    }

    def record(self, prop: Property) -> None:
        attr = self._FIELDS.get(prop.name)
        if attr is None or getattr(self, attr) is not None:
            return
        setattr(self, attr, prop)

    def date_property(self) -> Optional[Property]:
        """Return DUE, else DTEND, else DTSTART."""

        return self.due or self.dtend or self.dtstart


@dataclass
class DeadlineItem:
    """Normalized deadline record used by all modules."""

    id: str
    title: str
    course: str
    due_date: datetime
    source_url: Optional[str] = None
    completed_at: Optional[datetime] = None
    notes: Optional[str] = None

    @classmethod
    def create(
        cls,
        title: str,
        course: str,
        due_date: datetime,
        source_url: Optional[str] = None,
    ) -> "DeadlineItem":
        return cls(
            id=make_id(title, course, due_date, source_url),
            title=title,
            course=course,
            due_date=due_date,
            source_url=source_url,
        )

    @property
    def stable_key(self) -> str:
        return make_stable_key(self.course, self.title, self.due_date)

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    def is_overdue(self, now: datetime) -> bool:
        return self.due_date < now

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "stable_key": self.stable_key,
            "title": self.title,
            "course": self.course,
            "due_date": self.due_date.isoformat(),
            "source_url": self.source_url,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class OverlayRecord:
    """Locally tracked user state for one key."""

    completed_at: Optional[datetime] = None
    note: Optional[str] = None


@dataclass
class ParseReport:
    """Outcome counters for one feed parse."""

    events_seen: int = 0
    skipped: dict = field(default_factory=dict)
    duplicates: int = 0
