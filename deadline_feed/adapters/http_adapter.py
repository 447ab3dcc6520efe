"""Feed retrieval over HTTP(S) or from local files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse
from urllib.request import url2pathname

import requests

from deadline_feed.errors import InvalidInputURL, TransportFailure, UndecodableContent

logger = logging.getLogger(__name__)

_HTTP_SCHEMES = {"http", "https"}
_HEADERS = {
    "Accept": "text/calendar, text/plain;q=0.9, */*;q=0.5",
    "Cache-Control": "no-cache",
    "User-Agent": "deadline-feed/0.1",
}


def normalize_feed_url(url: str) -> str:
    """Trim whitespace and rewrite webcal:// to https://."""

    url = (url or "").strip()
    if url.lower().startswith("webcal://"):
        url = "https://" + url[len("webcal://") :]
    return url


def is_valid_feed_url(url: str, allow_file: bool = True) -> bool:
    parsed = urlparse(normalize_feed_url(url))
    scheme = parsed.scheme.lower()
    if scheme in _HTTP_SCHEMES:
        return bool(parsed.netloc)
    if scheme == "file":
        return allow_file and bool(parsed.path)
    return False


def validate_feed_url(url: str, allow_file: bool = True) -> str:
    """Return the normalized URL or raise InvalidInputURL."""

    normalized = normalize_feed_url(url)
    if not is_valid_feed_url(normalized, allow_file=allow_file):
        raise InvalidInputURL(f"Unsupported feed URL: {url!r}")
    return normalized


def _read_file(url: str) -> bytes:
    path = Path(url2pathname(urlparse(url).path))
    try:
        return path.read_bytes()
    except OSError as exc:
        raise TransportFailure(f"Cannot read {path}: {exc}") from exc


def fetch_feed(
    url: str,
    *,
    session: Optional[requests.Session] = None,
    timeout: float = 30.0,
    allow_file: bool = True,
) -> bytes:
    """Retrieve the raw feed bytes."""

    url = validate_feed_url(url, allow_file=allow_file)
    if urlparse(url).scheme.lower() == "file":
        return _read_file(url)

    client = session or requests
    try:
        response = client.get(url, headers=_HEADERS, timeout=timeout)
    except requests.RequestException as exc:
        raise TransportFailure(f"Request to {url} failed: {exc}") from exc

    if not 200 <= response.status_code < 300:
        raise TransportFailure(
            f"Request to {url} returned HTTP {response.status_code}",
            status_code=response.status_code,
        )
    logger.debug("Fetched %d bytes from %s", len(response.content), url)
    return response.content


def decode_feed(data: bytes, encodings: tuple[str, ...] = ("utf-8", "latin-1")) -> str:
    """Decode feed bytes with the first encoding that accepts them."""

    for encoding in encodings:
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            logger.debug("Feed is not valid %s", encoding)
    raise UndecodableContent(f"Feed bytes are not valid {', '.join(encodings)}")
