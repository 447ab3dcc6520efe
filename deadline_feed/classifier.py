"""Course grouping heuristics."""

from __future__ import annotations

import re
from typing import Optional

from deadline_feed.schema import UNKNOWN_COURSE

_COURSE_CODE = re.compile(r"^[A-Za-z]{2,4}\s*\d{2,3}[A-Za-z]?$")
_SEPARATOR = " - "


def looks_like_course_code(text: str) -> bool:
    return bool(_COURSE_CODE.match(text))


def classify_course(summary: str, categories: Optional[str] = None) -> str:
    """Return the course label for an event.

    A non-empty CATEGORIES value always wins. Otherwise a summary shaped like
    ``"ECE 123 - Lab 4"`` yields its prefix, and anything else falls back to
    UNKNOWN_COURSE.
    """

    category = (categories or "").strip()
    if category:
        return category

    prefix, separator, _ = summary.strip().partition(_SEPARATOR)
    if separator and looks_like_course_code(prefix):
        return prefix
    return UNKNOWN_COURSE
