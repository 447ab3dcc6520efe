"""Demo script for deadline-feed."""

import sys
from datetime import datetime, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from deadline_feed.adapters import ics_adapter
from deadline_feed.dashboard import next_due_summary
from deadline_feed.metrics import compute_metrics
from deadline_feed.overlay_store import OverlayStore
from deadline_feed.reconcile import reconcile, toggle_completion
from deadline_feed.schema import ParseReport


def main() -> None:
    now = datetime(2024, 1, 10, tzinfo=timezone.utc)
    text = (Path(__file__).parent / "sample_feed.ics").read_text(encoding="utf-8")
    report = ParseReport()
    store = OverlayStore()

    deadlines = reconcile(ics_adapter.parse(text, now, report), store)
    deadlines = toggle_completion(deadlines, deadlines[0].id, store, now)

    for item in deadlines:
        mark = "x" if item.is_completed else " "
        print(f"[{mark}] {item.due_date:%Y-%m-%d %H:%M} {item.course:<10} {item.title}")
    print("Skipped:", report.skipped)
    print("Metrics:", compute_metrics(deadlines, now))
    print(next_due_summary(deadlines, now, tz=timezone.utc))


if __name__ == "__main__":
    main()
