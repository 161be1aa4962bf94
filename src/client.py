"""Chat session factory for imdbot.

The token is read once here and passed into the session explicitly, so the
session itself never touches the environment.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv

from adapters.chat_session import ChatSession
from core.config import SessionConfig
from core.dispatcher import CommandDispatcher

TOKEN_ENV = "STRIMS_TOKEN"


def load_chat_token() -> str:
    """Read the chat token via python-dotenv to keep secrets out of the repo."""

    load_dotenv()
    token = os.getenv(TOKEN_ENV)

    # Fail fast before any network activity.
    if not token:
        raise RuntimeError(f"Missing {TOKEN_ENV} in environment")
    return token


def build_session(
    config: SessionConfig,
    dispatcher: CommandDispatcher,
    token: Optional[str] = None,
) -> ChatSession:
    """Create a ChatSession carrying the token (read from the environment if not given)."""

    if token is None:
        token = load_chat_token()
    logging.getLogger(__name__).info("Initializing chat session for %s", config.url)
    return ChatSession(config, token, dispatcher)
