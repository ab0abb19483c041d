"""Custom exception hierarchy."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..keyspace.queries import KeyQuery


class KeyslicerError(Exception):
    """Base exception for all library errors."""

    pass


class ConfigurationError(KeyslicerError):
    """Unsupported encoding or invalid partitioning configuration.

    Raised at construction time and never retried.
    """

    pass


class CountingError(KeyslicerError):
    """The injected counting function failed for a key query.

    Recoverable: nothing was committed for the failed query, so callers can
    re-propose a different budget or retry the whole partitioning call.
    """

    def __init__(
        self,
        message: str,
        query: KeyQuery | None = None,
        partition_id: int | None = None,
    ) -> None:
        super().__init__(message)
        self.query = query
        self.partition_id = partition_id
