"""Merge feed candidates with the local overlay."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

from deadline_feed.overlay_store import OverlayStore
from deadline_feed.schema import DeadlineItem


def reconcile(candidates: list[DeadlineItem], store: OverlayStore) -> list[DeadlineItem]:
    """Attach completion (looked up by stable key) and notes (looked up by id).

    The two lookups use different keys: when an item's source URL changes its
    completion survives but its note does not.
    """

    merged = []
    for item in candidates:
        merged.append(
            replace(
                item,
                completed_at=store.completed_at(item.stable_key),
                notes=store.note(item.id),
            )
        )
    return merged


def _index_of(items: list[DeadlineItem], item_id: str) -> Optional[int]:
    for index, item in enumerate(items):
        if item.id == item_id:
            return index
    return None


def toggle_completion(
    items: list[DeadlineItem], item_id: str, store: OverlayStore, now: datetime
) -> list[DeadlineItem]:
    """Flip completion for ``item_id`` and persist it by stable key."""

    index = _index_of(items, item_id)
    if index is None:
        return items

    item = items[index]
    completed_at = None if item.is_completed else now
    store.set_completed(item.stable_key, completed_at)

    updated = list(items)
    updated[index] = replace(item, completed_at=completed_at)
    return updated


def update_notes(
    items: list[DeadlineItem], item_id: str, text: Optional[str], store: OverlayStore
) -> list[DeadlineItem]:
    """Set or clear the note for ``item_id`` and persist it by id."""

    index = _index_of(items, item_id)
    if index is None:
        return items

    trimmed = (text or "").strip() or None
    store.set_note(item_id, trimmed)

    updated = list(items)
    updated[index] = replace(items[index], notes=trimmed)
    return updated
