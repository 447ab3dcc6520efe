"""Normalize iCalendar date values to UTC instants."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

_UTC_GRAMMARS = (
    (re.compile(r"^\d{8}T\d{6}$"), "%Y%m%dT%H%M%S"),
    (re.compile(r"^\d{8}T\d{4}$"), "%Y%m%dT%H%M"),
)
_LOCAL_GRAMMARS = _UTC_GRAMMARS + ((re.compile(r"^\d{8}$"), "%Y%m%d"),)


def split_params(params: str) -> dict[str, str]:
    """Split a ``;``-separated parameter string into an upper-cased key mapping.

    Semicolons inside double quotes are kept, surrounding quotes are removed.
    """

    result: dict[str, str] = {}
    parts = []
    current = []
    quoted = False
    for char in params:
        if char == '"':
            quoted = not quoted
        if char == ";" and not quoted:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))

    for part in parts:
        if "=" not in part:
            continue
        key, value = part.split("=", 1)
        key = key.strip().upper()
        if key and key not in result:
            result[key] = value.strip().strip('"')
    return result


def resolve_timezone(tzid: str) -> Optional[tzinfo]:
    """Return the zone for ``tzid`` or None when it cannot be resolved."""

    try:
        return ZoneInfo(tzid)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown TZID %r, using system timezone", tzid)
        return None


def _match(text: str, grammars) -> Optional[datetime]:
    for pattern, fmt in grammars:
        if not pattern.match(text):
            continue
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def _localize(naive: datetime, zone: Optional[tzinfo]) -> datetime:
    if zone is None:
        # naive astimezone() interprets the value in the system timezone
        return naive.astimezone(timezone.utc)
    return naive.replace(tzinfo=zone).astimezone(timezone.utc)


def parse_date(value: str, params: str = "") -> Optional[datetime]:
    """Parse a DUE/DTEND/DTSTART value into an aware UTC datetime.

    Values ending in ``Z`` are UTC date-times with or without seconds. Other
    values are interpreted in their ``TZID`` zone, or the system timezone
    when there is none or it cannot be resolved, and may also be bare
    ``YYYYMMDD`` dates meaning midnight. Returns None when nothing matches.
    """

    text = value.strip()
    if not text:
        return None

    if text.endswith("Z"):
        parsed = _match(text[:-1], _UTC_GRAMMARS)
        if parsed is not None:
            return parsed.replace(tzinfo=timezone.utc)

    zone = None
    tzid = split_params(params).get("TZID")
    if tzid:
        zone = resolve_timezone(tzid)

    parsed = _match(text, _LOCAL_GRAMMARS)
    if parsed is None:
        return None
    return _localize(parsed, zone)
