"""Request-level errors raised by a feed refresh."""

from __future__ import annotations

from typing import Optional


class FeedError(Exception):
    """Base class for errors that abort a refresh."""


class InvalidInputURL(FeedError, ValueError):
    """The feed URL was rejected before any fetch was attempted."""


class TransportFailure(FeedError):
    """The feed could not be retrieved."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UndecodableContent(FeedError, ValueError):
    """The fetched bytes are not text in any accepted encoding."""
