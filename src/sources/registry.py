# src/sources/registry.py

"""Ordered registry of product sources."""

import importlib
import logging
from typing import Any

from src.config.settings import Settings
from src.sources.base_source import SourceAdapter
from src.sources.exceptions import SourceNotFoundError

logger = logging.getLogger("storefront_search.registry")


def _load_source_class(dotted_path: str) -> type[Any]:
    """Dynamically import a source class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[Any] = getattr(module, class_name)
    return cls


class SourceRegistry:
    """Holds the configured adapters in registration order.

    Registration order is dispatch order and the tie-break order used
    when ranking, so the local catalog is registered first.
    """

    def __init__(self, adapters: list[SourceAdapter] | None = None) -> None:
        self._adapters: dict[str, SourceAdapter] = {}
        for adapter in adapters or []:
            self.register(adapter)

    @classmethod
    def from_settings(
        cls,
        sources: list[dict[str, Any]] | None = None,
    ) -> "SourceRegistry":
        """Instantiate every adapter listed in ``AVAILABLE_SOURCES``."""
        registry = cls()
        for src in sources if sources is not None else Settings.AVAILABLE_SOURCES:
            source_cls = _load_source_class(src["adapter"])
            timeout = src.get("timeout")
            adapter: SourceAdapter = source_cls(
                enabled=bool(src.get("enabled", True)),
                timeout=float(timeout) if timeout is not None else None,
            )
            registry.register(adapter)
        return registry

    def register(self, adapter: SourceAdapter) -> None:
        if adapter.source_id in self._adapters:
            logger.warning(
                "Overwriting existing source registration: %s",
                adapter.source_id,
            )
        self._adapters[adapter.source_id] = adapter
        logger.info(
            "Registered source %s (enabled=%s)",
            adapter.source_id,
            adapter.enabled,
        )

    def get(self, source_id: str) -> SourceAdapter:
        try:
            return self._adapters[source_id]
        except KeyError:
            raise SourceNotFoundError(
                f"No source registered with id '{source_id}'. "
                f"Available: {list(self._adapters)}"
            ) from None

    def enable(self, source_id: str) -> None:
        self.get(source_id).enabled = True
        logger.info("Enabled source %s", source_id)

    def disable(self, source_id: str) -> None:
        self.get(source_id).enabled = False
        logger.info("Disabled source %s", source_id)

    def list_all(self) -> list[SourceAdapter]:
        return list(self._adapters.values())

    def list_enabled(self) -> list[SourceAdapter]:
        """Enabled adapters in registration order."""
        return [a for a in self._adapters.values() if a.enabled]

    def rank(self, source_id: str) -> int:
        """Registration index of *source_id* (unknown ids sort last)."""
        for idx, sid in enumerate(self._adapters):
            if sid == source_id:
                return idx
        return len(self._adapters)

    def __contains__(self, source_id: object) -> bool:
        return source_id in self._adapters

    def __len__(self) -> int:
        return len(self._adapters)
