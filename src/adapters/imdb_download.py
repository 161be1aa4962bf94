"""IMDb dataset download adapter.

Fetches the gzipped TSV dumps and writes them decompressed into the data
directory, replacing whatever was there before.
"""

from __future__ import annotations

import gzip
import logging
import os
import shutil
import urllib.error
import urllib.request
from pathlib import Path
from typing import Iterable

LOGGER = logging.getLogger(__name__)

DATASET_FILES = ("title.basics.tsv", "title.ratings.tsv")


class ImdbDatasetDownloader:
    """DatasetPort implementation backed by datasets.imdbws.com."""

    def __init__(
        self,
        data_dir: str,
        base_url: str,
        files: Iterable[str] = DATASET_FILES,
        timeout: float = 60.0,
    ) -> None:
        self._data_dir = Path(data_dir)
        self._base_url = base_url if base_url.endswith("/") else f"{base_url}/"
        self._files = list(files)
        self._timeout = timeout

    def _endpoint(self, name: str) -> str:
        return f"{self._base_url}{name}.gz"

    def download_all(self) -> None:
        """Download every dataset file; any failure aborts the whole refresh."""

        self._data_dir.mkdir(parents=True, exist_ok=True)
        for name in self._files:
            self.download(name)

    def download(self, name: str) -> Path:
        url = self._endpoint(name)
        target = self._data_dir / name
        partial = target.with_name(target.name + ".part")
        LOGGER.info("Downloading %s", url)
        request = urllib.request.Request(url, headers={"User-Agent": "imdbot"})
        # Blocking is fine here: downloads run before the chat session opens.
        try:
            with urllib.request.urlopen(request, timeout=self._timeout) as response:
                with gzip.GzipFile(fileobj=response) as stream, open(partial, "wb") as handle:
                    shutil.copyfileobj(stream, handle)
        except urllib.error.HTTPError as e:
            partial.unlink(missing_ok=True)
            raise RuntimeError(f"Dataset download error {e.code} for {url}") from e
        except BaseException:
            partial.unlink(missing_ok=True)
            raise
        os.replace(partial, target)
        LOGGER.info("Wrote %s", target)
        return target
