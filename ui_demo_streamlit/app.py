"""Streamlit demo UI for deadline-feed."""

from __future__ import annotations

import asyncio
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from deadline_feed.config import load_settings
from deadline_feed.dashboard import (
    completed_deadlines,
    courses,
    due_today,
    due_within_week,
    filter_deadlines,
    next_due,
    next_due_summary,
)
from deadline_feed.errors import FeedError
from deadline_feed.metrics import compute_metrics
from deadline_feed.overlay_store import OverlayStore
from deadline_feed.refresh import RefreshCoordinator, utc_now
from deadline_feed.schema import UNKNOWN_COURSE, DeadlineItem

STATE_DIR = Path(".deadline-feed")
COMPLETED_PREVIEW = 5


def _fmt_due(item: DeadlineItem) -> str:
    return item.due_date.astimezone().strftime("%a %b %d, %H:%M")


def _display_course(course: str) -> str:
    return "Other" if course == UNKNOWN_COURSE else course


def _rows(items: list[DeadlineItem], now: datetime) -> list[dict[str, Any]]:
    return [
        {
            "course": _display_course(item.course),
            "title": item.title,
            "due": _fmt_due(item),
            "overdue": item.is_overdue(now) and not item.is_completed,
            "notes": item.notes or "",
        }
        for item in items
    ]


def build_view(
    deadlines: list[DeadlineItem],
    now: datetime,
    course: Optional[str] = None,
    search: str = "",
) -> dict[str, Any]:
    """Filter the deadline set and return a UI-friendly payload."""

    visible = filter_deadlines(deadlines, course=course, search=search)
    completed = completed_deadlines(visible)
    upcoming = next_due(visible, now)
    return {
        "summary": compute_metrics(deadlines, now),
        "next_due": next_due_summary([upcoming] if upcoming else [], now),
        "courses": courses(deadlines),
        "today": _rows(due_today(visible, now), now),
        "week": _rows(due_within_week(visible, now), now),
        "completed": _rows(completed[:COMPLETED_PREVIEW], now),
        "more_completed": max(0, len(completed) - COMPLETED_PREVIEW),
    }


def main() -> None:
    import streamlit as st

    st.set_page_config(page_title="Deadline Feed", layout="wide")
    st.title("Deadline Feed")

    if "coordinator" not in st.session_state:
        settings_path = STATE_DIR / "settings.json"
        st.session_state.coordinator = RefreshCoordinator(
            OverlayStore(STATE_DIR),
            load_settings(settings_path),
            settings_path=settings_path,
        )
    coordinator: RefreshCoordinator = st.session_state.coordinator

    with st.sidebar:
        st.header("Calendar")
        url = st.text_input("Feed URL", value=coordinator.settings.calendar_url)
        sync = st.button("Sync", type="primary")
        st.caption("Connected" if coordinator.settings.is_connected else "Not connected")

    if sync:
        try:
            with st.spinner("Syncing..."):
                asyncio.run(coordinator.refresh(url))
        except FeedError as exc:
            st.error(f"Sync failed: {exc}")

    deadlines = coordinator.deadlines
    if not deadlines:
        st.info("Enter a calendar feed URL in the sidebar and click **Sync**.")
        return

    now = utc_now()
    labels = courses(deadlines)
    selected = st.selectbox("Course", options=["All", *labels], format_func=_display_course)
    search = st.text_input("Search")
    view = build_view(deadlines, now, course=None if selected == "All" else selected, search=search)

    st.subheader(view["next_due"])
    summary = view["summary"]
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Total", summary["total"])
    c2.metric("Active", summary["active"])
    c3.metric("Overdue", summary["overdue"])
    c4.metric("Completed", f"{summary['completion_rate'] * 100:.0f}%")

    st.subheader("Due today")
    st.table(view["today"])
    st.subheader("Next 7 days")
    st.table(view["week"])

    st.subheader("Mark complete")
    by_label = {f"{_display_course(item.course)} - {item.title}": item.id for item in deadlines}
    choice = st.selectbox("Deadline", options=list(by_label))
    if st.button("Toggle completion"):
        coordinator.toggle_completion(by_label[choice])
    note = st.text_area("Notes", value=(coordinator.find(by_label[choice]).notes or ""))
    if st.button("Save note"):
        coordinator.update_notes(by_label[choice], note)

    st.subheader("Completed")
    st.table(view["completed"])
    if view["more_completed"]:
        st.caption(f"+{view['more_completed']} more completed")


if __name__ == "__main__":
    main()
