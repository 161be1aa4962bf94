"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to the WebSocket library or the index storage format.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


@dataclass(frozen=True)
class TextFrame:
    """A text frame as delivered by the transport."""

    text: str


@dataclass(frozen=True)
class BinaryFrame:
    """A binary frame as delivered by the transport."""

    data: bytes


InboundFrame = Union[TextFrame, BinaryFrame]


class EventKind(Enum):
    """Closed vocabulary of decoded chat events."""

    MESSAGE_POSTED = "message-posted"
    USER_JOINED = "user-joined"
    USER_LEFT = "user-left"
    UNRECOGNIZED = "unrecognized"
    IGNORED = "ignored"

    @property
    def is_membership_change(self) -> bool:
        return self in (EventKind.USER_JOINED, EventKind.USER_LEFT)


@dataclass(frozen=True)
class ChatMessage:
    """A posted chat message. `body` maps from the wire field `data`."""

    nick: str
    body: str


@dataclass(frozen=True)
class ChatEvent:
    """One decoded inbound frame."""

    kind: EventKind
    kind_token: str
    remainder: str
    message: Optional[ChatMessage] = None


@dataclass(frozen=True)
class SearchTrigger:
    """A recognized command extracted from a chat message."""

    prefix: str
    query: str
    nick: str


@dataclass(frozen=True)
class TitleQuery:
    """Name-only query request passed to the title index."""

    name: str
    limit: int = 10


@dataclass(frozen=True)
class TitleHit:
    """A single ranked title returned by the index."""

    title: str
    title_id: str
    year: Optional[int] = None
    kind: Optional[str] = None
    rating: Optional[float] = None
    votes: Optional[int] = None


@dataclass(frozen=True)
class SearchOutcome:
    """Best match for a query, or no match at all."""

    query: str
    best: Optional[TitleHit]

    @property
    def found(self) -> bool:
        return self.best is not None
