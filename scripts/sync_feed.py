"""Refresh a calendar feed and print the merged deadline set as JSON."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from deadline_feed.config import load_settings
from deadline_feed.errors import FeedError
from deadline_feed.metrics import compute_metrics
from deadline_feed.overlay_store import OverlayStore
from deadline_feed.refresh import RefreshCoordinator, utc_now


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sync deadlines from an iCalendar feed")
    parser.add_argument("--url", help="Feed URL (defaults to the saved one)")
    parser.add_argument("--state-dir", default=".deadline-feed", help="Directory for settings and overlay files")
    parser.add_argument("--complete", metavar="ID", help="Toggle completion of a deadline after syncing")
    parser.add_argument("--note", nargs=2, metavar=("ID", "TEXT"), help="Set a note (empty text clears it)")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


async def _run(args: argparse.Namespace) -> dict:
    state_dir = Path(args.state_dir)
    settings_path = state_dir / "settings.json"
    coordinator = RefreshCoordinator(
        OverlayStore(state_dir),
        load_settings(settings_path),
        settings_path=settings_path,
    )
    await coordinator.refresh(args.url)
    if args.complete:
        coordinator.toggle_completion(args.complete)
    if args.note:
        coordinator.update_notes(args.note[0], args.note[1])

    return {
        "metrics": compute_metrics(coordinator.deadlines, utc_now()),
        "skipped": coordinator.last_report.skipped if coordinator.last_report else {},
        "deadlines": [item.to_dict() for item in coordinator.deadlines],
    }


def main() -> None:
    args = _build_parser().parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        report = asyncio.run(_run(args))
    except FeedError as exc:
        print(f"Sync failed: {exc}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(report, indent=2))


if __name__ == "__main__":
    main()
