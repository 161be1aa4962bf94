"""Static configuration for imdbot.

All user-editable settings (chat endpoint, dataset paths, command prefix,
logging) live in a single JSON file for quick edits without touching Python.
"""

import json
import os

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.json")


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Chat connection. The auth token is never stored here; it comes from the
# STRIMS_TOKEN environment variable (see client.py).
_chat = _CONFIG.get("chat", {})
CHAT_URL = _chat.get("url", "wss://chat.strims.gg/ws")
GREETING = _chat.get("greeting", "Hello WebSocket")
# Reconnect policy: 0 means any connection loss is fatal.
RECONNECT_ATTEMPTS = int(_chat.get("reconnect_attempts", 3))
RECONNECT_DELAY_SECONDS = float(_chat.get("reconnect_delay_seconds", 2.0))

# Dataset and index directories are relative to the working directory.
_imdb = _CONFIG.get("imdb", {})
DATA_DIR = _imdb.get("data_dir", "./data/")
INDEX_DIR = _imdb.get("index_dir", "./index/")
DATASET_BASE_URL = _imdb.get("dataset_base_url", "https://datasets.imdbws.com/")
TITLE_BASE_URL = _imdb.get("title_base_url", "https://www.imdb.com/title/")
SHOW_RATING = bool(_imdb.get("show_rating", False))
RESULT_LIMIT = int(_imdb.get("result_limit", 10))

_commands = _CONFIG.get("commands", {})
SEARCH_PREFIX = _commands.get("search_prefix", "!imdb")

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
