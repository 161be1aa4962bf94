from __future__ import annotations

import pytest

from core.config import SearchConfig
from core.errors import IndexUnavailableError, SearchError
from core.models import SearchOutcome, SearchTrigger, TitleHit
from core.search import SearchOrchestrator, format_outcome

BASE = "https://www.imdb.com/title/"


class StaticSearcher:
    def __init__(self, hits) -> None:
        self.hits = hits
        self.closed = False

    def search(self, query):
        return self.hits

    def close(self) -> None:
        self.closed = True


class StaticIndex:
    def __init__(self, hits=None, open_error=None) -> None:
        self._hits = hits or []
        self._open_error = open_error
        self.open_calls = 0

    def exists(self) -> bool:
        return True

    def build(self) -> None:
        pass

    def open(self):
        self.open_calls += 1
        if self._open_error is not None:
            raise self._open_error
        return StaticSearcher(self._hits)


def test_search_returns_first_hit() -> None:
    hits = [TitleHit("Dune", "tt1160419"), TitleHit("Dune", "tt0087182")]
    outcome = SearchOrchestrator(StaticIndex(hits), SearchConfig(BASE)).search("dune")
    assert outcome.found
    assert outcome.best == hits[0]


def test_empty_query_skips_index() -> None:
    index = StaticIndex([TitleHit("Dune", "tt1160419")])
    outcome = SearchOrchestrator(index, SearchConfig(BASE)).search("   ")
    assert not outcome.found
    assert index.open_calls == 0


def test_index_opened_per_query() -> None:
    index = StaticIndex([TitleHit("Dune", "tt1160419")])
    orchestrator = SearchOrchestrator(index, SearchConfig(BASE))
    orchestrator.search("dune")
    orchestrator.search("alien")
    assert index.open_calls == 2


def test_open_failure_is_index_unavailable() -> None:
    index = StaticIndex(open_error=OSError("no such file"))
    with pytest.raises(IndexUnavailableError):
        SearchOrchestrator(index, SearchConfig(BASE)).search("dune")


def test_index_unavailable_is_a_search_error() -> None:
    assert issubclass(IndexUnavailableError, SearchError)


def test_format_outcome_variants() -> None:
    hit = TitleHit("Dune", "tt1160419", rating=8.0)
    assert format_outcome(SearchOutcome("dune", hit), SearchConfig(BASE)) == (
        "Found: Dune https://www.imdb.com/title/tt1160419"
    )
    assert format_outcome(SearchOutcome("dune", hit), SearchConfig(BASE, show_rating=True)) == (
        "Found: Dune https://www.imdb.com/title/tt1160419 (8.0/10)"
    )
    assert format_outcome(SearchOutcome("zzz", None), SearchConfig(BASE)) == "No results for: zzz"


def test_rating_is_optional() -> None:
    hit = TitleHit("Dune", "tt1160419")
    reply = format_outcome(SearchOutcome("dune", hit), SearchConfig(BASE, show_rating=True))
    assert reply == "Found: Dune https://www.imdb.com/title/tt1160419"


def test_respond_formats_reply() -> None:
    orchestrator = SearchOrchestrator(StaticIndex([TitleHit("Alien", "tt0078748")]), SearchConfig(BASE))
    reply = orchestrator.respond(SearchTrigger(prefix="!imdb", query="alien", nick="ripley"))
    assert reply == "Found: Alien https://www.imdb.com/title/tt0078748"
