"""Locally persisted completion and note overlay."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional

from deadline_feed.jsonio import dump_json_atomic, load_json_object
from deadline_feed.schema import OverlayRecord

logger = logging.getLogger(__name__)

COMPLETIONS_FILE = "completions.json"
NOTES_FILE = "notes.json"


def _load_completions(path: Path) -> dict[str, datetime]:
    completions = {}
    for key, raw in load_json_object(path).items():
        if raw is None:
            continue
        try:
            completions[str(key)] = datetime.fromisoformat(raw)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{path}: malformed timestamp for {key!r}") from exc
    return completions


def _load_notes(path: Path) -> dict[str, str]:
    notes = {}
    for key, raw in load_json_object(path).items():
        if not isinstance(raw, str):
            raise ValueError(f"{path}: note for {key!r} must be a string")
        notes[str(key)] = raw
    return notes


class OverlayStore:
    """Two keyed stores: completion timestamps and free-text notes.

    Mutations are serialized and flushed to disk before the in-memory
    snapshot is swapped, so lock-free readers only see committed state.
    With ``directory=None`` nothing is persisted.
    """

    def __init__(self, directory: str | Path | None = None) -> None:
        self._directory = Path(directory) if directory is not None else None
        self._write_lock = threading.Lock()
        if self._directory is None:
            self._completions: dict[str, datetime] = {}
            self._notes: dict[str, str] = {}
        else:
            self._completions = _load_completions(self._directory / COMPLETIONS_FILE)
            self._notes = _load_notes(self._directory / NOTES_FILE)

    def get(self, key: str) -> Optional[OverlayRecord]:
        completed_at = self._completions.get(key)
        note = self._notes.get(key)
        if completed_at is None and note is None:
            return None
        return OverlayRecord(completed_at=completed_at, note=note)

    def completed_at(self, key: str) -> Optional[datetime]:
        return self._completions.get(key)

    def note(self, key: str) -> Optional[str]:
        return self._notes.get(key)

    def set_completed(self, key: str, instant: Optional[datetime]) -> None:
        with self._write_lock:
            updated = dict(self._completions)
            if instant is None:
                updated.pop(key, None)
            else:
                updated[key] = instant
            if self._directory is not None:
                dump_json_atomic(
                    self._directory / COMPLETIONS_FILE,
                    {k: v.isoformat() for k, v in updated.items()},
                )
            self._completions = updated
        logger.debug("Completion for %r set to %s", key, instant)

    def set_note(self, key: str, text: Optional[str]) -> None:
        trimmed = (text or "").strip()
        with self._write_lock:
            updated = dict(self._notes)
            if trimmed:
                updated[key] = trimmed
            else:
                updated.pop(key, None)
            if self._directory is not None:
                dump_json_atomic(self._directory / NOTES_FILE, updated)
            self._notes = updated
        logger.debug("Note for %r %s", key, "updated" if trimmed else "cleared")
