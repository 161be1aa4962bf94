"""Startup checkpoints that must pass before the chat session opens.

The order is fixed:
1) Dataset checkpoint (only when the operator asked for a download)
2) Index checkpoint (build once if the index directory is missing)

Both are all-or-nothing; a failure at either one is fatal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from core.errors import StartupError
from core.ports import DatasetPort, TitleIndexPort

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class StartupReport:
    """What the sequencer actually did."""

    downloaded: bool
    built: bool


class StartupSequencer:
    """Runs the dataset and index checkpoints in order."""

    def __init__(self, dataset: DatasetPort, index: TitleIndexPort) -> None:
        self._dataset = dataset
        self._index = index

    def ensure_dataset(self, download: bool) -> bool:
        if not download:
            LOGGER.info("Dataset download not requested; using existing files")
            return False
        LOGGER.info("Downloading dataset files")
        try:
            self._dataset.download_all()
        except Exception as exc:
            raise StartupError(f"Dataset download failed: {exc}") from exc
        return True

    def ensure_index(self) -> bool:
        if self._index.exists():
            LOGGER.info("Title index present; skipping build")
            return False
        # Build is blocking and can take minutes on the full dataset.
        LOGGER.info("Building title index")
        try:
            self._index.build()
        except Exception as exc:
            raise StartupError(f"Index build failed: {exc}") from exc
        LOGGER.info("Title index built")
        return True

    def run(self, download: bool) -> StartupReport:
        downloaded = self.ensure_dataset(download)
        built = self.ensure_index()
        return StartupReport(downloaded=downloaded, built=built)
