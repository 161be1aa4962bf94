"""Search orchestration for the `!imdb` command (core domain)."""

from __future__ import annotations

import logging

from core.config import SearchConfig
from core.errors import IndexUnavailableError, SearchError
from core.models import SearchOutcome, SearchTrigger, TitleHit, TitleQuery
from core.ports import TitleIndexPort

LOGGER = logging.getLogger(__name__)


def format_found(hit: TitleHit, config: SearchConfig) -> str:
    """Return the channel reply for a matched title."""

    reply = f"Found: {hit.title} {config.title_base_url}{hit.title_id}"
    if config.show_rating and hit.rating is not None:
        reply = f"{reply} ({hit.rating:.1f}/10)"
    return reply


def format_no_results(query: str) -> str:
    return f"No results for: {query}"


def format_outcome(outcome: SearchOutcome, config: SearchConfig) -> str:
    if outcome.best is None:
        return format_no_results(outcome.query)
    return format_found(outcome.best, config)


class SearchOrchestrator:
    """Runs a name query against the index and keeps the best hit."""

    def __init__(self, index: TitleIndexPort, config: SearchConfig) -> None:
        self._index = index
        self._config = config

    def search(self, query: str) -> SearchOutcome:
        """Return the first-ranked title for `query`, or no result.

        The index is opened read-only for each call and closed afterwards.
        """

        query = query.strip()
        if not query:
            return SearchOutcome(query=query, best=None)

        LOGGER.info("Starting search with %r", query)
        try:
            searcher = self._index.open()
        except SearchError:
            raise
        except Exception as exc:
            raise IndexUnavailableError(f"Title index could not be opened: {exc}") from exc

        try:
            hits = searcher.search(TitleQuery(name=query, limit=self._config.result_limit))
        except SearchError:
            raise
        except Exception as exc:
            raise SearchError(f"Title search failed for {query!r}: {exc}") from exc
        finally:
            searcher.close()

        if not hits:
            return SearchOutcome(query=query, best=None)
        return SearchOutcome(query=query, best=hits[0])

    def respond(self, trigger: SearchTrigger) -> str:
        """Trigger handler: search and format the channel reply."""

        outcome = self.search(trigger.query)
        if outcome.best is None:
            LOGGER.info("No results for %r (requested by %s)", trigger.query, trigger.nick)
        else:
            LOGGER.info(
                "Found %s (%s) for %r (requested by %s)",
                outcome.best.title,
                outcome.best.title_id,
                trigger.query,
                trigger.nick,
            )
        return format_outcome(outcome, self._config)
