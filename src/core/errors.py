"""Typed failures raised by the core and its adapters."""

from __future__ import annotations


class FrameDecodeError(ValueError):
    """A single inbound frame could not be decoded."""

    def __init__(self, message: str, raw: str) -> None:
        super().__init__(message)
        self.raw = raw


class SearchError(RuntimeError):
    """The title index failed to answer a query."""


class IndexUnavailableError(SearchError):
    """The on-disk index could not be opened (missing or corrupt)."""


class StartupError(RuntimeError):
    """A startup checkpoint failed; the bot cannot run."""


class SessionError(RuntimeError):
    """The chat connection failed and reconnect attempts are exhausted."""
