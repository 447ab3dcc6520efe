import json
from datetime import datetime, timezone

import pytest

from deadline_feed.config import FeedSettings, load_settings, save_settings


def test_missing_file_yields_defaults(tmp_path):
    settings = load_settings(tmp_path / "settings.json")
    assert settings == FeedSettings()
    assert settings.reminder_hour == 20
    assert not settings.is_connected


def test_round_trip(tmp_path):
    path = tmp_path / "state" / "settings.json"
    settings = FeedSettings(
        calendar_url="https://learn.example.edu/cal.ics",
        reminder_hour=8,
        reminder_minute=15,
        last_fetch_at=datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc),
    )
    save_settings(settings, path)
    loaded = load_settings(path)
    assert loaded == settings
    assert loaded.is_connected


def test_invalid_url_is_not_connected():
    settings = FeedSettings(calendar_url="ftp://x", last_fetch_at=datetime.now(timezone.utc))
    assert not settings.has_valid_url
    assert not settings.is_connected


def test_malformed_settings_raise(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"reminder_hour": 25}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_settings(path)

    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ValueError):
        load_settings(path)

    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        load_settings(path)
