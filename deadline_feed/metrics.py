"""Deadline set summary metrics."""

from __future__ import annotations

from collections import Counter
from datetime import datetime

from deadline_feed.schema import DeadlineItem


def compute_metrics(items: list[DeadlineItem], now: datetime) -> dict:
    """Compute totals, completion rate, overdue count and per-course counts."""

    if not items:
        return {
            "total": 0,
            "active": 0,
            "completed": 0,
            "overdue": 0,
            "completion_rate": 0.0,
            "courses": {},
        }

    completed = sum(1 for item in items if item.is_completed)
    overdue = sum(1 for item in items if not item.is_completed and item.is_overdue(now))
    by_course = Counter(item.course for item in items)

    return {
        "total": len(items),
        "active": len(items) - completed,
        "completed": completed,
        "overdue": overdue,
        "completion_rate": completed / len(items),
        "courses": dict(sorted(by_course.items())),
    }
