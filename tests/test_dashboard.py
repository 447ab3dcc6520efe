from datetime import datetime, timedelta, timezone

from deadline_feed.dashboard import (
    active_deadlines,
    completed_deadlines,
    courses,
    due_today,
    due_within_week,
    filter_deadlines,
    next_due,
    next_due_summary,
)
from deadline_feed.metrics import compute_metrics
from deadline_feed.schema import UNKNOWN_COURSE, DeadlineItem

NOW = datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc)


def sample_items():
    items = [
        DeadlineItem.create("CS246 - A1", "CS246", NOW + timedelta(hours=3)),
        DeadlineItem.create("ECE 105 - Lab 3", "ECE 105", NOW + timedelta(days=2)),
        DeadlineItem.create("Guest Lecture", UNKNOWN_COURSE, NOW + timedelta(days=10)),
        DeadlineItem.create("CS246 - A0", "CS246", NOW - timedelta(days=1)),
    ]
    items[3].completed_at = NOW - timedelta(days=2)
    return items


def test_active_and_completed_partitions():
    items = sample_items()
    assert [item.title for item in active_deadlines(items)] == ["CS246 - A1", "ECE 105 - Lab 3", "Guest Lecture"]
    assert [item.title for item in completed_deadlines(items)] == ["CS246 - A0"]


def test_filter_by_course_and_search():
    items = sample_items()
    assert [item.title for item in filter_deadlines(items, course="CS246")] == ["CS246 - A1", "CS246 - A0"]
    assert [item.title for item in filter_deadlines(items, search="lab")] == ["ECE 105 - Lab 3"]
    assert [item.title for item in filter_deadlines(items, course="CS246", search="a0")] == ["CS246 - A0"]
    assert filter_deadlines(items) == items


def test_courses_put_unknown_last():
    assert courses(sample_items()) == ["CS246", "ECE 105", UNKNOWN_COURSE]


def test_due_today_and_week():
    items = sample_items()
    assert [item.title for item in due_today(items, NOW, timezone.utc)] == ["CS246 - A1"]
    assert [item.title for item in due_within_week(items, NOW, timezone.utc)] == ["ECE 105 - Lab 3"]


def test_next_due_summary_default_and_custom_text():
    items = sample_items()
    assert next_due_summary(items, NOW, tz=timezone.utc) == "Next: CS246 CS246 - A1, due in 3 hours at 15:00"

    calls = []

    def translate(key, *args):
        calls.append((key, args))
        return key

    assert next_due_summary([items[3]], NOW, translate) == "summary.no_upcoming"
    assert calls == [("summary.no_upcoming", ())]


def test_next_due_summary_omits_unknown_course():
    item = DeadlineItem.create("Guest Lecture", UNKNOWN_COURSE, NOW + timedelta(days=1))
    assert next_due_summary([item], NOW, tz=timezone.utc) == "Next: Guest Lecture, due in 1 day at 12:00"


def test_compute_metrics():
    metrics = compute_metrics(sample_items(), NOW)
    assert metrics["total"] == 4
    assert metrics["active"] == 3
    assert metrics["completed"] == 1
    assert metrics["overdue"] == 0
    assert metrics["completion_rate"] == 0.25
    assert metrics["courses"] == {"CS246": 2, "ECE 105": 1, UNKNOWN_COURSE: 1}
    assert compute_metrics([], NOW)["total"] == 0


def test_next_due_skips_past_due_and_completed_items():
    items = sample_items()
    overdue = DeadlineItem.create("ECE 105 - Lab 2", "ECE 105", NOW - timedelta(hours=5))
    assert next_due([overdue, *items], NOW).title == "CS246 - A1"
    assert next_due([overdue, items[3]], NOW) is None
