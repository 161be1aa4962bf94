"""Application entry point for the imdbot chat bot."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from dotenv import load_dotenv

import settings
from adapters.imdb_download import ImdbDatasetDownloader
from adapters.imdb_index import SQLiteTitleIndex
from client import build_session, load_chat_token
from core.config import SearchConfig, SessionConfig
from core.dispatcher import CommandDispatcher, TriggerRoute
from core.search import SearchOrchestrator
from core.startup import StartupSequencer

NAME = "IMDBOT"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    # Secrets from .env must be visible before we collect redaction values.
    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/imdbot.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def build_dispatcher(index: SQLiteTitleIndex) -> CommandDispatcher:
    """Wire the trigger table. New commands are new routes."""

    orchestrator = SearchOrchestrator(
        index,
        SearchConfig(
            title_base_url=settings.TITLE_BASE_URL,
            show_rating=settings.SHOW_RATING,
            result_limit=settings.RESULT_LIMIT,
        ),
    )
    return CommandDispatcher(
        [
            TriggerRoute(prefix=settings.SEARCH_PREFIX, handler=orchestrator.respond),
        ]
    )


def _run(download: bool) -> None:
    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)

    logger.info("Starting imdbot")

    # A missing credential must fail before any download or index work.
    token = load_chat_token()

    index = SQLiteTitleIndex(settings.DATA_DIR, settings.INDEX_DIR)
    dataset = ImdbDatasetDownloader(settings.DATA_DIR, settings.DATASET_BASE_URL)

    if not index.exists():
        print("Building indices... This will take a while.")

    # Both checkpoints finish before any network connection to the chat.
    report = StartupSequencer(dataset, index).run(download=download)
    logger.info("Startup complete (downloaded=%s, built=%s)", report.downloaded, report.built)

    session = build_session(
        SessionConfig(
            url=settings.CHAT_URL,
            greeting=settings.GREETING,
            reconnect_attempts=settings.RECONNECT_ATTEMPTS,
            reconnect_delay_seconds=settings.RECONNECT_DELAY_SECONDS,
        ),
        build_dispatcher(index),
        token=token,
    )
    logger.info("Listening for chat messages...")
    asyncio.run(session.run())


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="imdbot", description="Strims IMDB Bot")
    parser.add_argument(
        "--download",
        action="store_true",
        help="download imdb index files",
    )

    args = parser.parse_args(argv)
    logger = logging.getLogger(__name__)
    try:
        _run(args.download)
    # StartupError, SessionError and the missing-token error are all RuntimeErrors.
    except RuntimeError as exc:
        logger.error("Fatal: %s", exc)
        raise SystemExit(1) from exc
    except KeyboardInterrupt:
        logger.info("Interrupted; shutting down")


if __name__ == "__main__":
    main()
