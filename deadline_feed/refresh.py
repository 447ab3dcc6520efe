"""Fetch-then-parse refresh pipeline."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

from deadline_feed.adapters import ics_adapter
from deadline_feed.adapters.http_adapter import decode_feed, fetch_feed, validate_feed_url
from deadline_feed.config import FeedSettings, save_settings
from deadline_feed.overlay_store import OverlayStore
from deadline_feed.reconcile import reconcile, toggle_completion, update_notes
from deadline_feed.schema import DeadlineItem, ParseReport

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def build_deadlines(
    data: bytes, store: OverlayStore, now: datetime, report: Optional[ParseReport] = None
) -> list[DeadlineItem]:
    """Synchronous stage: decode, parse and merge with the overlay."""

    text = decode_feed(data)
    candidates = ics_adapter.parse(text, now, report)
    return reconcile(candidates, store)


class RefreshCoordinator:
    """Owns the current deadline set and applies refresh results.

    Every refresh takes a generation number when it starts. A result is only
    committed if no newer refresh has started in the meantime, and a failed
    refresh leaves the previous deadlines and settings untouched.
    """

    def __init__(
        self,
        store: OverlayStore,
        settings: FeedSettings,
        *,
        fetcher: Callable[..., bytes] = fetch_feed,
        clock: Callable[[], datetime] = utc_now,
        settings_path: str | Path | None = None,
    ) -> None:
        self.store = store
        self.settings = settings
        self.deadlines: list[DeadlineItem] = []
        self.last_report: Optional[ParseReport] = None
        self._fetcher = fetcher
        self._clock = clock
        self._settings_path = Path(settings_path) if settings_path is not None else None
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    async def refresh(self, url: Optional[str] = None) -> list[DeadlineItem]:
        """Fetch and parse the feed, returning the authoritative deadline set."""

        target = validate_feed_url(
            self.settings.calendar_url if url is None else url,
            allow_file=self.settings.allow_file_urls,
        )
        self._generation += 1
        generation = self._generation
        logger.info("Refresh %d started for %s", generation, target)

        try:
            data = await asyncio.to_thread(
                self._fetcher,
                target,
                timeout=self.settings.timeout_seconds,
                allow_file=self.settings.allow_file_urls,
            )
            now = self._clock()
            report = ParseReport()
            deadlines = build_deadlines(data, self.store, now, report)
        except Exception:
            logger.warning("Refresh %d failed", generation, exc_info=True)
            raise

        if generation != self._generation:
            logger.info("Discarding refresh %d, refresh %d started since", generation, self._generation)
            return self.deadlines

        self.deadlines = deadlines
        self.last_report = report
        self.settings.calendar_url = target
        self.settings.last_fetch_at = now
        if self._settings_path is not None:
            save_settings(self.settings, self._settings_path)
        logger.info("Refresh %d committed %d deadlines", generation, len(deadlines))
        return deadlines

    def toggle_completion(self, item_id: str) -> Optional[DeadlineItem]:
        self.deadlines = toggle_completion(self.deadlines, item_id, self.store, self._clock())
        return self.find(item_id)

    def update_notes(self, item_id: str, text: Optional[str]) -> Optional[DeadlineItem]:
        self.deadlines = update_notes(self.deadlines, item_id, text, self.store)
        return self.find(item_id)

    def find(self, item_id: str) -> Optional[DeadlineItem]:
        for item in self.deadlines:
            if item.id == item_id:
                return item
        return None
