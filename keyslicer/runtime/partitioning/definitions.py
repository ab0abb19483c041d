"""Partition assignment definitions.

This module defines the data structures produced by the parallel key
partitioner and the signature of the counting function it consumes.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from pydantic import BaseModel, ConfigDict, Field

from ...keyspace.queries import KeyQuery

CountFn = Callable[[KeyQuery], Awaitable[int]]
"""Async, side-effect-free document count for a key query."""


class PartitionAssignment(BaseModel):
    """Work assignment for one parallel worker.

    Attributes:
        partition_id: Worker id in ``[0, parallelism)``
        symbols: Leading key symbols owned by the worker, in alphabet order
        estimated_count: Documents matching ``symbols`` when partitioned
        query: Query that produced the count (None for an empty partition)
    """

    partition_id: int = Field(..., ge=0)
    symbols: tuple[str, ...] = ()
    estimated_count: int = Field(default=0, ge=0)
    query: KeyQuery | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_empty(self) -> bool:
        """True when the partition owns no symbols."""
        return not self.symbols
