"""Feed settings injected into each refresh."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from deadline_feed.adapters.http_adapter import is_valid_feed_url
from deadline_feed.jsonio import dump_json_atomic, load_json_object


@dataclass
class FeedSettings:
    """User configuration loaded once at startup."""

    calendar_url: str = ""
    reminder_hour: int = 20
    reminder_minute: int = 0
    last_fetch_at: Optional[datetime] = None
    allow_file_urls: bool = True
    timeout_seconds: float = 30.0

    @property
    def has_valid_url(self) -> bool:
        return is_valid_feed_url(self.calendar_url, allow_file=self.allow_file_urls)

    @property
    def is_connected(self) -> bool:
        return self.has_valid_url and self.last_fetch_at is not None


def load_settings(path: str | Path) -> FeedSettings:
    """Load settings from JSON; a missing file yields defaults."""

    path = Path(path)
    payload = load_json_object(path)
    defaults = FeedSettings()
    try:
        last_fetch_raw = payload.get("last_fetch_at")
        settings = FeedSettings(
            calendar_url=str(payload.get("calendar_url") or ""),
            reminder_hour=int(payload.get("reminder_hour", defaults.reminder_hour)),
            reminder_minute=int(payload.get("reminder_minute", defaults.reminder_minute)),
            last_fetch_at=datetime.fromisoformat(last_fetch_raw) if last_fetch_raw else None,
            allow_file_urls=bool(payload.get("allow_file_urls", defaults.allow_file_urls)),
            timeout_seconds=float(payload.get("timeout_seconds", defaults.timeout_seconds)),
        )
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{path}: malformed settings") from exc

    if not 0 <= settings.reminder_hour <= 23 or not 0 <= settings.reminder_minute <= 59:
        raise ValueError(f"{path}: reminder time out of range")
    return settings


def save_settings(settings: FeedSettings, path: str | Path) -> None:
    payload = asdict(settings)
    payload["last_fetch_at"] = settings.last_fetch_at.isoformat() if settings.last_fetch_at else None
    dump_json_atomic(Path(path), payload)
