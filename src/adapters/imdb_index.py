"""SQLite title index adapter.

Implements the core TitleIndexPort on top of an SQLite database with an FTS5
table over primary and original titles. The database lives inside the index
directory; the directory's presence is what marks the index as built.
"""

from __future__ import annotations

import csv
import logging
import os
import re
import shutil
import sqlite3
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from core.errors import IndexUnavailableError
from core.models import TitleHit, TitleQuery

LOGGER = logging.getLogger(__name__)

BASICS_FILE = "title.basics.tsv"
RATINGS_FILE = "title.ratings.tsv"
DB_NAME = "titles.sqlite3"

# IMDb dumps use this marker for missing values.
NULL = "\\N"

_BATCH_SIZE = 50_000


def build_name_query(name: str) -> str:
    """Build a conservative FTS5 query from free text.

    Every word must appear; raw user syntax never reaches FTS5.
    """

    words = re.findall(r"\w+", (name or "").lower())[:10]
    return " ".join(f'"{word}"' for word in words)


def _nullable(value: str) -> Optional[str]:
    return None if value == NULL or value == "" else value


def _read_tsv(path: Path) -> Iterator[Dict[str, str]]:
    # The dumps contain bare quotes inside titles, so quoting is disabled.
    with open(path, "r", encoding="utf-8", newline="") as handle:
        yield from csv.DictReader(handle, delimiter="\t", quoting=csv.QUOTE_NONE)


def _load_ratings(path: Path) -> Dict[str, Tuple[float, int]]:
    if not path.exists():
        LOGGER.warning("Ratings file %s not found; building without ratings", path)
        return {}
    ratings: Dict[str, Tuple[float, int]] = {}
    for row in _read_tsv(path):
        ratings[row["tconst"]] = (float(row["averageRating"]), int(row["numVotes"]))
    return ratings


class SQLiteTitleSearcher:
    """Read-only handle returned by SQLiteTitleIndex.open()."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def search(self, query: TitleQuery) -> List[TitleHit]:
        """Return titles ranked best first: exact name, then bm25, then votes."""

        fts_query = build_name_query(query.name)
        if not fts_query:
            return []

        rows = self._conn.execute(
            """
            SELECT title, title_id, year, kind, rating, votes
            FROM (
                SELECT t.title, t.title_id, t.year, t.kind, t.rating, t.votes,
                       titles_fts.rank AS score,
                       (lower(t.title) = lower(?) OR lower(t.original_title) = lower(?)) AS exact
                FROM titles_fts
                JOIN titles t ON t.id = titles_fts.rowid
                WHERE titles_fts MATCH ?
            )
            ORDER BY exact DESC,
                     CASE WHEN exact THEN -COALESCE(votes, 0) ELSE 0 END,
                     score,
                     COALESCE(votes, 0) DESC
            LIMIT ?
            """,
            (query.name, query.name, fts_query, query.limit),
        ).fetchall()

        return [
            TitleHit(
                title=row["title"],
                title_id=row["title_id"],
                year=row["year"],
                kind=row["kind"],
                rating=row["rating"],
                votes=row["votes"],
            )
            for row in rows
        ]

    def close(self) -> None:
        self._conn.close()


class SQLiteTitleIndex:
    """Builds and opens the on-disk title index."""

    def __init__(self, data_dir: str, index_dir: str) -> None:
        self._data_dir = Path(data_dir)
        self._index_dir = Path(index_dir)

    @property
    def db_path(self) -> Path:
        return self._index_dir / DB_NAME

    def exists(self) -> bool:
        return self._index_dir.is_dir()

    def build(self) -> None:
        """Create the index from the dataset directory.

        The database is written to a sibling staging directory and moved into
        place at the end, so an interrupted build never leaves a half-built
        index that exists() would accept.
        """

        basics_path = self._data_dir / BASICS_FILE
        if not basics_path.exists():
            raise FileNotFoundError(f"Dataset file not found: {basics_path}")

        staging = self._index_dir.with_name(self._index_dir.name + ".building")
        if staging.exists():
            shutil.rmtree(staging)
        staging.mkdir(parents=True)

        ratings = _load_ratings(self._data_dir / RATINGS_FILE)
        conn = sqlite3.connect(staging / DB_NAME)
        try:
            self._create_schema(conn)
            count = self._insert_titles(conn, basics_path, ratings)
            conn.execute("INSERT INTO titles_fts(titles_fts) VALUES ('rebuild')")
            conn.commit()
        finally:
            conn.close()

        os.replace(staging, self._index_dir)
        LOGGER.info("Indexed %s titles into %s", count, self.db_path)

    def open(self) -> SQLiteTitleSearcher:
        """Open the index read-only."""

        if not self.db_path.exists():
            raise IndexUnavailableError(f"Title index not found: {self.db_path}")
        uri = f"{self.db_path.resolve().as_uri()}?mode=ro"
        try:
            conn = sqlite3.connect(uri, uri=True)
        except sqlite3.Error as exc:
            raise IndexUnavailableError(f"Title index could not be opened: {exc}") from exc
        conn.row_factory = sqlite3.Row
        return SQLiteTitleSearcher(conn)

    @staticmethod
    def _create_schema(conn: sqlite3.Connection) -> None:
        # titles holds one row per IMDb title; ratings are denormalized in so
        # a search never needs a second lookup.
        # Fields:
        # - title_id: IMDb tconst (tt...)
        # - title / original_title: display and original-language names
        # - kind: titleType (movie, tvSeries, ...)
        # - year: startYear, NULL when unknown
        # - rating / votes: from title.ratings, NULL when unrated
        conn.execute(
            """
            CREATE TABLE titles (
                id INTEGER PRIMARY KEY,
                title_id TEXT NOT NULL UNIQUE,
                title TEXT NOT NULL,
                original_title TEXT,
                kind TEXT,
                year INTEGER,
                rating REAL,
                votes INTEGER
            )
            """
        )
        conn.execute(
            """
            CREATE VIRTUAL TABLE titles_fts USING fts5(
                title,
                original_title,
                content='titles',
                content_rowid='id',
                tokenize='unicode61 remove_diacritics 2'
            )
            """
        )

    @staticmethod
    def _insert_titles(
        conn: sqlite3.Connection,
        basics_path: Path,
        ratings: Dict[str, Tuple[float, int]],
    ) -> int:
        count = 0
        batch: list[tuple] = []
        for row in _read_tsv(basics_path):
            if row.get("isAdult") == "1":
                continue
            title_id = row["tconst"]
            year = _nullable(row.get("startYear", NULL))
            rating, votes = ratings.get(title_id, (None, None))
            batch.append(
                (
                    title_id,
                    row["primaryTitle"],
                    _nullable(row.get("originalTitle", NULL)),
                    _nullable(row.get("titleType", NULL)),
                    int(year) if year else None,
                    rating,
                    votes,
                )
            )
            if len(batch) >= _BATCH_SIZE:
                count += SQLiteTitleIndex._flush(conn, batch)
                batch = []
        if batch:
            count += SQLiteTitleIndex._flush(conn, batch)
        return count

    @staticmethod
    def _flush(conn: sqlite3.Connection, batch: list[tuple]) -> int:
        conn.executemany(
            """
            INSERT OR IGNORE INTO titles (
                title_id, title, original_title, kind, year, rating, votes
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            batch,
        )
        return len(batch)
