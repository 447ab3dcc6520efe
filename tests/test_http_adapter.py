from types import SimpleNamespace

import pytest
import requests

from deadline_feed.adapters.http_adapter import (
    decode_feed,
    fetch_feed,
    is_valid_feed_url,
    normalize_feed_url,
    validate_feed_url,
)
from deadline_feed.errors import InvalidInputURL, TransportFailure, UndecodableContent


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append((url, timeout))
        if self.error is not None:
            raise self.error
        return self.response


def test_url_validation():
    assert is_valid_feed_url(" https://learn.example.edu/cal.ics ")
    assert is_valid_feed_url("file:///tmp/cal.ics")
    assert not is_valid_feed_url("file:///tmp/cal.ics", allow_file=False)
    assert not is_valid_feed_url("ftp://example.edu/cal.ics")
    assert not is_valid_feed_url("https://")
    assert not is_valid_feed_url("")
    assert normalize_feed_url("webcal://example.edu/cal.ics") == "https://example.edu/cal.ics"


def test_invalid_url_raises_before_fetch():
    session = FakeSession()
    with pytest.raises(InvalidInputURL):
        fetch_feed("mailto:someone@example.edu", session=session)
    assert session.calls == []


def test_fetch_returns_body_on_success():
    session = FakeSession(SimpleNamespace(status_code=200, content=b"BEGIN:VCALENDAR"))
    assert fetch_feed("webcal://example.edu/cal.ics", session=session, timeout=5) == b"BEGIN:VCALENDAR"
    assert session.calls == [("https://example.edu/cal.ics", 5)]


def test_non_success_status_raises_transport_failure():
    session = FakeSession(SimpleNamespace(status_code=404, content=b"not found"))
    with pytest.raises(TransportFailure) as excinfo:
        fetch_feed("https://example.edu/cal.ics", session=session)
    assert excinfo.value.status_code == 404


def test_connection_error_raises_transport_failure():
    session = FakeSession(error=requests.ConnectionError("refused"))
    with pytest.raises(TransportFailure) as excinfo:
        fetch_feed("https://example.edu/cal.ics", session=session)
    assert excinfo.value.status_code is None


def test_file_urls(tmp_path):
    path = tmp_path / "my feed.ics"
    path.write_bytes(b"BEGIN:VCALENDAR\r\nEND:VCALENDAR\r\n")
    assert fetch_feed(path.as_uri()) == b"BEGIN:VCALENDAR\r\nEND:VCALENDAR\r\n"

    with pytest.raises(InvalidInputURL):
        fetch_feed(path.as_uri(), allow_file=False)
    with pytest.raises(TransportFailure):
        fetch_feed((tmp_path / "missing.ics").as_uri())


def test_decode_falls_back_to_latin1():
    assert decode_feed("SUMMARY:Café".encode("utf-8")) == "SUMMARY:Café"
    assert decode_feed(b"SUMMARY:Caf\xe9") == "SUMMARY:Café"


def test_decode_raises_when_no_encoding_fits():
    with pytest.raises(UndecodableContent):
        decode_feed(b"SUMMARY:Caf\xe9", encodings=("utf-8",))


def test_validate_returns_normalized_url():
    assert validate_feed_url("  https://example.edu/cal.ics\n") == "https://example.edu/cal.ics"
