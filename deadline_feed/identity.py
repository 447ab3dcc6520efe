"""Content-derived identifiers for deadlines."""

from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from typing import Optional


def _normalize(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def iso_instant(value: datetime) -> str:
    """Render an instant as a second-precision UTC ISO-8601 string."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def make_id(title: str, course: str, due_date: datetime, source_url: Optional[str]) -> str:
    """SHA-256 hex digest of the normalized title, course, instant and URL."""

    joined = "|".join(
        [
            _normalize(title),
            _normalize(course),
            iso_instant(due_date),
            _normalize(source_url),
        ]
    )
    return hashlib.sha256(joined.encode("utf-8")).hexdigest()


def make_stable_key(course: str, title: str, due_date: datetime) -> str:
    """Readable correlation key that ignores the source URL."""

    return "|".join([_normalize(course), _normalize(title), iso_instant(due_date)])
