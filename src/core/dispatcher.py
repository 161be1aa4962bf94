"""Command dispatch for decoded chat events.

This module is integration-agnostic. The session adapter hands it one frame
at a time and sends whatever reply string comes back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from core.codec import decode
from core.errors import FrameDecodeError, IndexUnavailableError, SearchError
from core.models import ChatEvent, ChatMessage, EventKind, InboundFrame, SearchTrigger, TextFrame

LOGGER = logging.getLogger(__name__)

TriggerHandler = Callable[[SearchTrigger], Optional[str]]


@dataclass(frozen=True)
class TriggerRoute:
    """Maps a body prefix to the handler that answers it."""

    prefix: str
    handler: TriggerHandler


class CommandDispatcher:
    """Routes decoded events and isolates failures per frame."""

    def __init__(self, routes: Iterable[TriggerRoute]) -> None:
        # Order matters: the first matching prefix wins.
        self._routes = list(routes)

    def match(self, message: ChatMessage) -> Optional[tuple[TriggerRoute, SearchTrigger]]:
        """Return the first route whose prefix starts the message body."""

        for route in self._routes:
            if message.body.startswith(route.prefix):
                query = message.body[len(route.prefix):].strip()
                return route, SearchTrigger(prefix=route.prefix, query=query, nick=message.nick)
        return None

    def dispatch(self, event: ChatEvent) -> Optional[str]:
        """Return the reply text for an event, or None when nothing is sent."""

        if event.kind is EventKind.MESSAGE_POSTED and event.message is not None:
            message = event.message
            routed = self.match(message)
            if routed is None:
                LOGGER.debug("%s: %s", message.nick, message.body)
                return None
            route, trigger = routed
            LOGGER.info("Command %s from %s: %r", route.prefix, trigger.nick, trigger.query)
            return route.handler(trigger)

        if event.kind.is_membership_change:
            LOGGER.info("%s: %s", event.kind_token, event.remainder)
            return None

        if event.kind is EventKind.IGNORED:
            LOGGER.debug("Binary frame ignored")
            return None

        LOGGER.debug("Unrecognized frame %r: %s", event.kind_token, event.remainder)
        return None

    def handle_frame(self, frame: InboundFrame) -> Optional[str]:
        """Decode and dispatch one frame; never raises.

        A failure here drops only this frame. The caller keeps reading.
        """

        raw = frame.text if isinstance(frame, TextFrame) else f"<{len(frame.data)} bytes>"
        try:
            return self.dispatch(decode(frame))
        except FrameDecodeError as exc:
            LOGGER.warning("Dropping undecodable frame (%s): %r", exc, exc.raw)
        except IndexUnavailableError:
            LOGGER.error("Title index unavailable; rebuild it before serving searches", exc_info=True)
        except SearchError:
            LOGGER.exception("Search failed for frame %r", raw)
        except Exception:
            LOGGER.exception("Error while processing frame %r", raw)
        return None
