# src/sources/base_source.py

"""Abstract base class for all product sources."""

import logging
from abc import ABC, abstractmethod

from src.models.product import ProductRecord
from src.models.search import SearchOptions


class SourceAdapter(ABC):
    """A pluggable product source answering queries for one catalog.

    Subclasses set ``source_id`` and ``label`` and implement
    :meth:`query`.  The engine only relies on that async contract and
    a stable identifier; the transport is up to each adapter.
    """

    source_id: str = ""
    label: str = ""
    is_local: bool = False

    def __init__(
        self,
        enabled: bool = True,
        timeout: float | None = None,
    ) -> None:
        self.enabled = enabled
        self.timeout = timeout
        self.logger = logging.getLogger(
            f"storefront_search.sources.{self.source_id}"
        )

    @abstractmethod
    async def query(
        self, term: str, options: SearchOptions
    ) -> list[ProductRecord]:
        """Return canonical records for *term*.

        Raises:
            SourceError: The source could not produce an answer.
        """
        ...

    def __repr__(self) -> str:
        state = "enabled" if self.enabled else "disabled"
        return f"<{type(self).__name__} {self.source_id} ({state})>"
