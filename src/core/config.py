"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SearchConfig:
    """Search and reply settings for the `!imdb` command."""

    title_base_url: str
    show_rating: bool = False
    result_limit: int = 10


@dataclass(frozen=True)
class SessionConfig:
    """Chat connection settings consumed by the session adapter."""

    url: str
    greeting: str
    reconnect_attempts: int = 3
    reconnect_delay_seconds: float = 2.0
