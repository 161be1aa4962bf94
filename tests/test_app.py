from __future__ import annotations

import logging

import pytest

import app
import client
from core.errors import SessionError, StartupError
from core.models import TextFrame


def test_redacting_formatter_masks_secrets() -> None:
    formatter = app._RedactingFormatter(["s3cret"], fmt="%(message)s")
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "cookie jwt=%s", ("s3cret",), None)
    assert formatter.format(record) == "cookie jwt=***"


def test_collect_redaction_values(monkeypatch) -> None:
    monkeypatch.setenv("STRIMS_TOKEN", "tok")
    config = {"redact": {"enabled": True, "patterns": ["STRIMS_TOKEN", "UNSET_VAR_FOR_TEST"]}}
    monkeypatch.delenv("UNSET_VAR_FOR_TEST", raising=False)
    assert app._collect_redaction_values(config) == ["tok"]
    assert app._collect_redaction_values({}) == []


def test_fatal_startup_exits_non_zero(monkeypatch) -> None:
    def failing_run(download: bool) -> None:
        raise StartupError("Index build failed")

    monkeypatch.setattr(app, "_run", failing_run)
    with pytest.raises(SystemExit) as excinfo:
        app.main([])
    assert excinfo.value.code == 1


def test_download_flag_is_passed(monkeypatch) -> None:
    seen: list[bool] = []
    monkeypatch.setattr(app, "_run", seen.append)
    app.main(["--download"])
    app.main([])
    assert seen == [True, False]


def test_missing_token_is_fatal(monkeypatch) -> None:
    monkeypatch.setattr(client, "load_dotenv", lambda: None)
    monkeypatch.delenv("STRIMS_TOKEN", raising=False)
    with pytest.raises(RuntimeError, match="STRIMS_TOKEN"):
        client.load_chat_token()


def test_build_dispatcher_routes_search_prefix(monkeypatch) -> None:
    class EmptyIndex:
        def open(self):
            raise AssertionError("empty query must not open the index")

    monkeypatch.setattr(app.settings, "SEARCH_PREFIX", "!imdb")
    dispatcher = app.build_dispatcher(EmptyIndex())
    reply = dispatcher.handle_frame(TextFrame('MSG {"nick":"a","data":"!imdb"}'))
    assert reply == "No results for: "


def test_lost_session_exits_non_zero(monkeypatch) -> None:
    def failing_run(download: bool) -> None:
        raise SessionError("Chat connection lost")

    monkeypatch.setattr(app, "_run", failing_run)
    with pytest.raises(SystemExit) as excinfo:
        app.main([])
    assert excinfo.value.code == 1
