"""Parallel key partitioning.

This module stripes the top-level alphabet of an encoding across a number of
workers and counts the documents each worker will own. ``partition_symbols``
does the work for any ordered symbol list; ``ParallelKeyPartitioner`` binds it
to a validated PartitionerConfig.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from datetime import datetime
from time import perf_counter

from ...core.config import PartitionerConfig
from ...core.enums import IDEncoding
from ...core.exceptions import ConfigurationError, CountingError
from ...keyspace.alphabets import SymbolAlphabet
from ...keyspace.queries import build_key_query
from ...utils.retry import retry_async
from .definitions import CountFn, PartitionAssignment
from .telemetry import (
    log_partition_complete,
    log_partition_count_error,
    log_partition_counted,
    log_partition_plan,
)


def assign_round_robin(symbols: Sequence[str], parallelism: int) -> list[list[str]]:
    """Distribute symbols round-robin across ``parallelism`` partitions.

    Symbol ``i`` goes to partition ``i % parallelism``. Identifier
    distributions are often skewed toward some leading characters, so striping
    evens out the expected load without knowing the distribution.

    Args:
        symbols: Ordered top-level alphabet
        parallelism: Number of partitions

    Returns:
        One symbol list per partition, indexed by partition id

    Raises:
        ConfigurationError: If parallelism is less than 1

    Examples:
        >>> assign_round_robin(["a", "b", "c", "d"], 2)
        [['a', 'c'], ['b', 'd']]
    """
    if parallelism < 1:
        raise ConfigurationError(f"parallelism must be >= 1, got {parallelism}")

    partitions: list[list[str]] = [[] for _ in range(parallelism)]
    for index, symbol in enumerate(symbols):
        partitions[index % parallelism].append(symbol)
    return partitions


async def partition_symbols(
    symbols: Sequence[str],
    parallelism: int,
    count_fn: CountFn,
    *,
    max_concurrency: int = 8,
    count_retries: int = 0,
    retry_delay: float = 0.5,
    start: datetime | None = None,
    end: datetime | None = None,
) -> list[PartitionAssignment]:
    """Stripe ``symbols`` across partitions and count each partition.

    Counting fans out concurrently, at most ``max_concurrency`` requests at a
    time. The first failing count cancels the others and fails the call; no
    partial result is returned.

    Args:
        symbols: Ordered top-level alphabet
        parallelism: Number of partitions
        count_fn: Async counting function for a key query
        max_concurrency: Upper bound on concurrent count requests
        count_retries: Extra attempts for each failing count
        retry_delay: Seconds before the first retry
        start: Optional start of a date range applied to every count
        end: Optional end of a date range applied to every count

    Returns:
        Exactly ``parallelism`` assignments, index = worker id

    Raises:
        ConfigurationError: If parallelism or max_concurrency is less than 1
        CountingError: If counting fails for any partition
    """
    if max_concurrency < 1:
        raise ConfigurationError(f"max_concurrency must be >= 1, got {max_concurrency}")

    started = perf_counter()
    partitions = assign_round_robin(symbols, parallelism)
    semaphore = asyncio.Semaphore(max_concurrency)

    async def _count(partition_id: int, keys: list[str]) -> PartitionAssignment:
        if not keys:
            return PartitionAssignment(partition_id=partition_id)

        query = build_key_query(keys, start=start, end=end)

        async def _attempt() -> int:
            # slot is held per attempt, never across a backoff sleep
            async with semaphore:
                return await count_fn(query)

        count_start = perf_counter()
        try:
            count = await retry_async(_attempt, retries=count_retries, delay=retry_delay)
        except Exception as e:
            log_partition_count_error(
                partition_id=partition_id,
                fragment=query.fragment,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise CountingError(
                f"Count failed for partition {partition_id} {query.fragment}: {e}",
                query=query,
                partition_id=partition_id,
            ) from e
        latency_ms = (perf_counter() - count_start) * 1000.0

        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            message = (
                f"Count for partition {partition_id} {query.fragment} must be a "
                f"non-negative integer, got {count!r}"
            )
            log_partition_count_error(
                partition_id=partition_id,
                fragment=query.fragment,
                error_type="InvalidCount",
                error_message=message,
            )
            raise CountingError(message, query=query, partition_id=partition_id)

        log_partition_counted(
            partition_id=partition_id,
            fragment=query.fragment,
            count=count,
            latency_ms=latency_ms,
        )
        return PartitionAssignment(
            partition_id=partition_id,
            symbols=tuple(keys),
            estimated_count=count,
            query=query,
        )

    tasks = [
        asyncio.create_task(_count(partition_id, keys))
        for partition_id, keys in enumerate(partitions)
    ]
    try:
        assignments = list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    log_partition_complete(
        assignments=assignments,
        total_latency_ms=(perf_counter() - started) * 1000.0,
    )
    return assignments


class ParallelKeyPartitioner:
    """Seeds per-worker key assignments for a parallel scan.

    The partitioner runs once at job start, producing one PartitionAssignment
    per worker id for the configured encoding (or its ``key_range``).
    """

    def __init__(self, config: PartitionerConfig, count_fn: CountFn) -> None:
        """Initialize partitioner.

        Args:
            config: Partitioning settings
            count_fn: Async counting function for a key query
        """
        self._config = config
        self._count_fn = count_fn

    @property
    def config(self) -> PartitionerConfig:
        return self._config

    @property
    def encoding(self) -> IDEncoding:
        return self._config.encoding

    @property
    def top_level_keys(self) -> SymbolAlphabet:
        return self._config.top_level_keys()

    async def partition(
        self,
        *,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[PartitionAssignment]:
        """Partition the keyspace and count every partition.

        Args:
            start: Optional start of a date range applied to every count
            end: Optional end of a date range applied to every count

        Returns:
            Exactly ``config.parallelism`` assignments, index = worker id

        Raises:
            CountingError: If counting fails for any partition
        """
        keys = self.top_level_keys
        log_partition_plan(
            encoding=self.encoding,
            parallelism=self._config.parallelism,
            total_symbols=len(keys),
        )
        return await partition_symbols(
            keys,
            self._config.parallelism,
            self._count_fn,
            max_concurrency=self._config.max_concurrency,
            count_retries=self._config.count_retries,
            retry_delay=self._config.retry_delay,
            start=start,
            end=end,
        )
