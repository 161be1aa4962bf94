"""Inbound frame decoding (core domain).

Wire format for text frames is `<KIND> <REMAINDER>`. Only `MSG` carries a
structured payload; `JOIN`/`QUIT` carry a bare identifier.
"""

from __future__ import annotations

import json
import re
from typing import Tuple

from core.errors import FrameDecodeError
from core.models import BinaryFrame, ChatEvent, ChatMessage, EventKind, InboundFrame

_FIRST_WHITESPACE = re.compile(r"\s")

KIND_TOKENS = {
    "MSG": EventKind.MESSAGE_POSTED,
    "JOIN": EventKind.USER_JOINED,
    "QUIT": EventKind.USER_LEFT,
}


def split_frame(text: str) -> Tuple[str, str]:
    """Split a text frame into (kind_token, remainder) on the first whitespace."""

    parts = _FIRST_WHITESPACE.split(text, maxsplit=1)
    if len(parts) == 1:
        return parts[0], ""
    return parts[0], parts[1]


def parse_chat_message(remainder: str) -> ChatMessage:
    """Parse the JSON payload of a `MSG` frame.

    Extra fields (features, timestamp, ...) are ignored. Anything that is not
    an object with a non-empty string `nick` and a string `data` is rejected.
    """

    try:
        payload = json.loads(remainder)
    except json.JSONDecodeError as exc:
        raise FrameDecodeError(f"MSG payload is not valid JSON: {exc.msg}", remainder) from exc

    if not isinstance(payload, dict):
        raise FrameDecodeError("MSG payload is not a JSON object", remainder)

    nick = payload.get("nick")
    body = payload.get("data")
    if not isinstance(nick, str) or not nick:
        raise FrameDecodeError("MSG payload has no nick", remainder)
    if not isinstance(body, str):
        raise FrameDecodeError("MSG payload has no data", remainder)

    return ChatMessage(nick=nick, body=body)


def decode(frame: InboundFrame) -> ChatEvent:
    """Decode one inbound frame into a ChatEvent.

    Raises FrameDecodeError only for `MSG` frames with a bad payload.
    """

    if isinstance(frame, BinaryFrame):
        return ChatEvent(kind=EventKind.IGNORED, kind_token="", remainder="")

    kind_token, remainder = split_frame(frame.text)
    kind = KIND_TOKENS.get(kind_token, EventKind.UNRECOGNIZED)
    if kind is EventKind.MESSAGE_POSTED:
        return ChatEvent(
            kind=kind,
            kind_token=kind_token,
            remainder=remainder,
            message=parse_chat_message(remainder),
        )
    return ChatEvent(kind=kind, kind_token=kind_token, remainder=remainder)
