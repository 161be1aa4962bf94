"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for the dataset, index and search
adapters so that the core can be reused with different backends.
"""

from __future__ import annotations

from typing import List, Protocol

from core.models import TitleHit, TitleQuery


class DatasetPort(Protocol):
    """Bulk dataset refresh required by the startup sequencer."""

    def download_all(self) -> None:
        ...


class TitleSearcher(Protocol):
    """An opened, read-only index handle."""

    def search(self, query: TitleQuery) -> List[TitleHit]:
        ...

    def close(self) -> None:
        ...


class TitleIndexPort(Protocol):
    """Index lifecycle operations required by startup and search."""

    def exists(self) -> bool:
        ...

    def build(self) -> None:
        ...

    def open(self) -> TitleSearcher:
        ...
