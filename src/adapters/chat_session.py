"""WebSocket chat session adapter.

Owns the single outbound connection. Every inbound message is mapped to a
core frame and handed to the dispatcher; replies go back on the same socket.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Union

from websockets.asyncio.client import connect as ws_connect
from websockets.exceptions import WebSocketException

from core.config import SessionConfig
from core.dispatcher import CommandDispatcher
from core.errors import SessionError
from core.models import BinaryFrame, InboundFrame, TextFrame

LOGGER = logging.getLogger(__name__)


def frame_from_message(message: Union[str, bytes]) -> InboundFrame:
    """Map a websockets message to a core frame."""

    if isinstance(message, str):
        return TextFrame(text=message)
    return BinaryFrame(data=bytes(message))


def build_auth_headers(token: str) -> dict[str, str]:
    return {"Cookie": f"jwt={token}"}


class ChatSession:
    """Connection lifecycle: handshake, greeting, receive loop, reconnect."""

    def __init__(
        self,
        config: SessionConfig,
        token: str,
        dispatcher: CommandDispatcher,
        connect=ws_connect,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if not token:
            raise ValueError("A chat token is required")
        self._config = config
        self._token = token
        self._dispatcher = dispatcher
        self._connect = connect
        self._sleep = sleep
        self._received = 0

    async def _serve_connection(self) -> None:
        async with self._connect(
            self._config.url,
            additional_headers=build_auth_headers(self._token),
        ) as websocket:
            LOGGER.info("Connected to %s", self._config.url)
            await websocket.send(self._config.greeting)
            # One frame at a time: dispatch finishes before the next recv.
            # The blocking search runs off the loop so keepalive pings still flow.
            async for message in websocket:
                self._received += 1
                reply = await asyncio.to_thread(
                    self._dispatcher.handle_frame,
                    frame_from_message(message),
                )
                if reply is not None:
                    await websocket.send(reply)

    async def run(self) -> None:
        """Serve until the connection is lost more often than allowed.

        A connection that delivered at least one frame resets the failure
        count, so only back-to-back failures use up reconnect attempts.
        """

        failures = 0
        while True:
            self._received = 0
            try:
                await self._serve_connection()
                reason = "closed by server"
            except (OSError, asyncio.TimeoutError, WebSocketException) as exc:
                reason = f"{type(exc).__name__}: {exc}"

            if self._received:
                failures = 0
            failures += 1
            if failures > self._config.reconnect_attempts:
                raise SessionError(f"Chat connection lost ({reason}) after {failures} attempt(s)")

            delay = self._config.reconnect_delay_seconds * 2 ** (failures - 1)
            LOGGER.warning("Chat connection lost (%s); reconnecting in %.1fs", reason, delay)
            await self._sleep(delay)
