# src/services/search_session.py

"""Generation-tagged search session for one logical search box."""

import logging
from enum import Enum

from src.models.search import SearchOptions, SearchQuery, SearchResult
from src.services.search_orchestrator import SearchOrchestrator

logger = logging.getLogger("storefront_search.session")

_HISTORY_LIMIT = 64


class SessionState(str, Enum):
    IDLE = "idle"
    DISPATCHING = "dispatching"
    COMPLETED = "completed"
    SUPERSEDED = "superseded"


class SearchSession:
    """Delivers only the newest search's result.

    Every call to :meth:`search` takes the next generation number.
    When a call finishes after a newer one has started, it moves to
    ``SUPERSEDED`` and returns ``None``; its remote calls are left to
    finish but their output is never delivered.
    """

    def __init__(self, orchestrator: SearchOrchestrator) -> None:
        self.orchestrator = orchestrator
        self._generation = 0
        self._states: dict[int, SessionState] = {}
        self.last_result: SearchResult | None = None
        self.superseded_count = 0

    @property
    def generation(self) -> int:
        """Generation of the most recently issued search."""
        return self._generation

    @property
    def state(self) -> SessionState:
        """State of the most recently issued search."""
        return self._states.get(self._generation, SessionState.IDLE)

    def state_of(self, generation: int) -> SessionState:
        return self._states.get(generation, SessionState.IDLE)

    def _set_state(self, generation: int, state: SessionState) -> None:
        self._states[generation] = state
        if len(self._states) > _HISTORY_LIMIT:
            for old in sorted(self._states)[: -_HISTORY_LIMIT]:
                del self._states[old]

    async def search(
        self,
        term: str,
        min_price: float | None = None,
        max_price: float | None = None,
        category: str | None = None,
        sort_by: str | None = None,
        limit: int | None = None,
        refresh: bool = False,
    ) -> SearchResult | None:
        """Run a search; ``None`` means a newer search superseded it."""
        # No await between the increment and the read below
        self._generation += 1
        generation = self._generation
        self._set_state(generation, SessionState.DISPATCHING)

        options = SearchOptions.create(
            min_price=min_price,
            max_price=max_price,
            category=category,
            sort_by=sort_by,
            limit=limit,
        )
        query = SearchQuery.create(term, options, generation)
        result = await self.orchestrator.execute(query, refresh=refresh)

        if generation != self._generation:
            self._set_state(generation, SessionState.SUPERSEDED)
            self.superseded_count += 1
            logger.info(
                "Dropped result of generation %d for '%s' "
                "(current generation %d)",
                generation,
                query.term,
                self._generation,
            )
            return None

        self._set_state(generation, SessionState.COMPLETED)
        self.last_result = result
        return result
