# src/services/search_orchestrator.py

"""Orchestrates cached, federated product searches."""

import logging
import time

from src.config.settings import Settings
from src.filters.suggestions import SuggestionProvider
from src.models.search import SearchOptions, SearchQuery, SearchResult
from src.services.dispatcher import QueryDispatcher
from src.services.ranker import ResultMerger
from src.sources.registry import SourceRegistry
from src.storage.query_cache import CacheKey, ResultCache, make_key

logger = logging.getLogger("storefront_search.orchestrator")


class SearchOrchestrator:
    """Runs one search end to end: validate, cache, dispatch, merge.

    Collaborators are injected so tests can supply fake sources, a
    cache with a fake clock, or a short dispatch timeout.
    """

    def __init__(
        self,
        registry: SourceRegistry | None = None,
        cache: ResultCache | None = None,
        dispatcher: QueryDispatcher | None = None,
        suggestions: SuggestionProvider | None = None,
    ) -> None:
        self.settings = Settings()
        self.registry = registry or SourceRegistry.from_settings()
        self.query_cache = cache or ResultCache()
        self.dispatcher = dispatcher or QueryDispatcher()
        self.suggestions = suggestions or SuggestionProvider()
        self.merger = ResultMerger(
            source_rank=self.registry.rank,
            suggestions=self.suggestions,
        )
        self.cache_hits = 0
        self.cache_misses = 0

    # ── Cache control ────────────────────────────────────

    def cache_key(self, term: str, options: SearchOptions) -> CacheKey:
        enabled = (a.source_id for a in self.registry.list_enabled())
        return make_key(term, options, enabled)

    def invalidate(
        self,
        term: str,
        min_price: float | None = None,
        max_price: float | None = None,
        category: str | None = None,
        sort_by: str | None = None,
        limit: int | None = None,
    ) -> bool:
        """Drop the cached result for *term* with the given options."""
        options = SearchOptions.create(
            min_price=min_price,
            max_price=max_price,
            category=category,
            sort_by=sort_by,
            limit=limit,
        )
        return self.query_cache.invalidate(self.cache_key(term, options))

    def clear_cache(self) -> int:
        return self.query_cache.clear()

    # ── Search ───────────────────────────────────────────

    def _empty_result(self, query: SearchQuery) -> SearchResult:
        return SearchResult(
            query=query.term,
            suggestions=tuple(self.suggestions.popular_searches()),
        )

    async def execute(
        self,
        query: SearchQuery,
        refresh: bool = False,
    ) -> SearchResult:
        """Answer *query*, serving from cache when possible.

        Never raises for source failures: failed sources are listed in
        ``errors`` and the remaining ones still contribute.
        """
        if not query.is_valid:
            logger.debug(
                "Query '%s' below minimum length, skipping dispatch",
                query.term,
            )
            return self._empty_result(query)

        adapters = self.registry.list_enabled()
        key = make_key(
            query.term, query.options, (a.source_id for a in adapters)
        )

        if not refresh:
            cached = self.query_cache.get(key)
            if cached is not None and not (
                cached.partial and self.settings.RETRY_PARTIAL_RESULTS
            ):
                self.cache_hits += 1
                return cached
        self.cache_misses += 1

        start = time.perf_counter()
        outcomes = await self.dispatcher.dispatch(query, adapters)

        local = next((o for o in outcomes if o.is_local), None)
        remote = [o for o in outcomes if o is not local]
        result = self.merger.merge(
            query,
            local,
            remote,
            elapsed_ms=(time.perf_counter() - start) * 1000,
        )

        if any(o.ok for o in outcomes):
            self.query_cache.put(key, result)
        elif outcomes:
            logger.warning(
                "All %d sources failed for '%s'; result not cached",
                len(outcomes),
                query.term,
            )
        else:
            logger.warning("No sources enabled for '%s'", query.term)

        return result

    async def search(
        self,
        term: str,
        min_price: float | None = None,
        max_price: float | None = None,
        category: str | None = None,
        sort_by: str | None = None,
        limit: int | None = None,
        refresh: bool = False,
    ) -> SearchResult:
        """Search every enabled source for *term*.

        ``refresh=True`` bypasses the cache, e.g. to retry a result
        flagged ``partial``.
        """
        options = SearchOptions.create(
            min_price=min_price,
            max_price=max_price,
            category=category,
            sort_by=sort_by,
            limit=limit,
        )
        return await self.execute(
            SearchQuery.create(term, options), refresh=refresh
        )
