from __future__ import annotations

import pytest

from core.errors import StartupError
from core.startup import StartupSequencer


class FakeDataset:
    def __init__(self, error=None) -> None:
        self.calls = 0
        self._error = error

    def download_all(self) -> None:
        self.calls += 1
        if self._error is not None:
            raise self._error


class FakeIndex:
    def __init__(self, built: bool = False, error=None) -> None:
        self.built = built
        self.build_calls = 0
        self._error = error

    def exists(self) -> bool:
        return self.built

    def build(self) -> None:
        self.build_calls += 1
        if self._error is not None:
            raise self._error
        self.built = True

    def open(self):
        raise AssertionError("open is not used during startup")


def test_download_only_when_requested() -> None:
    dataset = FakeDataset()
    sequencer = StartupSequencer(dataset, FakeIndex(built=True))

    assert not sequencer.run(download=False).downloaded
    assert dataset.calls == 0

    assert sequencer.run(download=True).downloaded
    assert dataset.calls == 1


def test_index_built_once() -> None:
    index = FakeIndex(built=False)
    sequencer = StartupSequencer(FakeDataset(), index)

    first = sequencer.run(download=False)
    second = sequencer.run(download=False)

    assert first.built
    assert not second.built
    assert index.build_calls == 1


def test_existing_index_is_not_rebuilt_after_download() -> None:
    index = FakeIndex(built=True)
    report = StartupSequencer(FakeDataset(), index).run(download=True)
    assert report.downloaded and not report.built
    assert index.build_calls == 0


def test_download_failure_is_fatal_and_skips_index() -> None:
    index = FakeIndex(built=False)
    sequencer = StartupSequencer(FakeDataset(error=RuntimeError("404")), index)

    with pytest.raises(StartupError):
        sequencer.run(download=True)
    assert index.build_calls == 0


def test_build_failure_is_fatal() -> None:
    sequencer = StartupSequencer(FakeDataset(), FakeIndex(error=FileNotFoundError("data")))
    with pytest.raises(StartupError):
        sequencer.run(download=False)


def test_index_build_writes_nothing_to_stdout(capsys) -> None:
    StartupSequencer(FakeDataset(), FakeIndex(built=False)).run(download=False)
    assert capsys.readouterr().out == ""
