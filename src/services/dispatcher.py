# src/services/dispatcher.py

"""Concurrent fan-out of a query to every enabled source."""

import asyncio
import logging
import time

from src.config.settings import Settings
from src.models.product import ProductRecord
from src.models.search import SearchQuery, SourceOutcome
from src.sources.base_source import SourceAdapter
from src.sources.exceptions import SourceError, SourceTimeout

logger = logging.getLogger("storefront_search.dispatcher")

TIMEOUT_REASON = "timeout"
MALFORMED_REASON = "malformed payload"


def _checked_records(raw: object) -> list[ProductRecord]:
    """Accept only a list (or tuple) of ProductRecord instances."""
    if not isinstance(raw, (list, tuple)) or not all(
        isinstance(r, ProductRecord) for r in raw
    ):
        raise SourceError(MALFORMED_REASON)
    return list(raw)


class QueryDispatcher:
    """Run every adapter concurrently and collect one outcome each.

    Each call is bounded by the adapter's own timeout or the default
    budget.  A failing or slow adapter yields an error outcome and
    never aborts the others.  :meth:`dispatch` returns only after
    every adapter has settled.  There are no retries.
    """

    def __init__(self, default_timeout: float | None = None) -> None:
        self.default_timeout = (
            default_timeout
            if default_timeout is not None
            else Settings.SOURCE_TIMEOUT
        )

    async def _run_one(
        self,
        adapter: SourceAdapter,
        query: SearchQuery,
    ) -> SourceOutcome:
        timeout = adapter.timeout or self.default_timeout
        start = time.perf_counter()

        def elapsed() -> float:
            return (time.perf_counter() - start) * 1000

        try:
            raw = await asyncio.wait_for(
                adapter.query(query.term, query.options),
                timeout=timeout,
            )
            products = _checked_records(raw)
        except (asyncio.TimeoutError, SourceTimeout):
            logger.warning(
                "Source %s timed out after %.1fs for '%s'",
                adapter.source_id,
                timeout,
                query.term,
            )
            return SourceOutcome(
                source_id=adapter.source_id,
                error=TIMEOUT_REASON,
                elapsed_ms=elapsed(),
                is_local=adapter.is_local,
            )
        except SourceError as exc:
            logger.warning(
                "Source %s failed for '%s': %s",
                adapter.source_id,
                query.term,
                exc,
            )
            return SourceOutcome(
                source_id=adapter.source_id,
                error=str(exc) or type(exc).__name__,
                elapsed_ms=elapsed(),
                is_local=adapter.is_local,
            )
        except Exception as exc:
            logger.error(
                "Source %s raised for '%s': %s",
                adapter.source_id,
                query.term,
                exc,
                exc_info=exc,
            )
            return SourceOutcome(
                source_id=adapter.source_id,
                error=str(exc) or type(exc).__name__,
                elapsed_ms=elapsed(),
                is_local=adapter.is_local,
            )

        logger.debug(
            "Source %s returned %d records in %.0fms",
            adapter.source_id,
            len(products),
            elapsed(),
        )
        return SourceOutcome(
            source_id=adapter.source_id,
            products=products,
            elapsed_ms=elapsed(),
            is_local=adapter.is_local,
        )

    async def dispatch(
        self,
        query: SearchQuery,
        adapters: list[SourceAdapter],
    ) -> list[SourceOutcome]:
        """Query *adapters* concurrently; outcomes keep adapter order."""
        if not adapters:
            return []

        logger.info(
            "Dispatching '%s' to %d sources: %s",
            query.term,
            len(adapters),
            ", ".join(a.source_id for a in adapters),
        )
        outcomes: list[SourceOutcome] = list(
            await asyncio.gather(
                *(self._run_one(a, query) for a in adapters)
            )
        )

        failed = [o.source_id for o in outcomes if not o.ok]
        if failed:
            logger.info(
                "%d of %d sources failed for '%s': %s",
                len(failed),
                len(outcomes),
                query.term,
                ", ".join(failed),
            )
        return outcomes
