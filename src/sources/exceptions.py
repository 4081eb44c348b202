# src/sources/exceptions.py

"""Source-level exceptions."""


class SourceError(Exception):
    """Raised when a source cannot answer a query (HTTP, payload, config)."""


class SourceTimeout(SourceError):
    """Raised when a source exceeds its time budget."""


class SourceNotFoundError(KeyError):
    """Raised when a source id is not registered."""
