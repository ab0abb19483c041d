"""Structured logging for partitioning operations.

This module provides telemetry hooks for the parallel key partitioner,
emitting structured logs with the event name as message and the details in
``extra``.
"""

from __future__ import annotations

import logging

from ...core.enums import IDEncoding
from .definitions import PartitionAssignment

logger = logging.getLogger(__name__)


def log_partition_plan(
    *,
    encoding: IDEncoding,
    parallelism: int,
    total_symbols: int,
) -> None:
    """Log the round-robin distribution of symbols.

    Args:
        encoding: Identifier encoding being partitioned
        parallelism: Number of partitions
        total_symbols: Number of top-level symbols distributed
    """
    logger.info(
        "partition_plan_created",
        extra={
            "encoding": encoding.value,
            "parallelism": parallelism,
            "total_symbols": total_symbols,
            "empty_partitions": max(parallelism - total_symbols, 0),
        },
    )


def log_partition_counted(
    *,
    partition_id: int,
    fragment: str,
    count: int,
    latency_ms: float | None = None,
) -> None:
    """Log a completed count for one partition."""
    logger.debug(
        "partition_counted",
        extra={
            "partition_id": partition_id,
            "fragment": fragment,
            "count": count,
            "latency_ms": latency_ms,
        },
    )


def log_partition_count_error(
    *,
    partition_id: int,
    fragment: str,
    error_type: str,
    error_message: str,
) -> None:
    """Log a failed count for one partition.

    Args:
        partition_id: Partition whose count failed
        fragment: Key fragment that was being counted
        error_type: Type of error (e.g., "TimeoutError")
        error_message: Error message
    """
    logger.error(
        "partition_count_error",
        extra={
            "partition_id": partition_id,
            "fragment": fragment,
            "error_type": error_type,
            "error_message": error_message,
        },
    )


def log_partition_complete(
    *,
    assignments: list[PartitionAssignment],
    total_latency_ms: float | None = None,
) -> None:
    """Log completion of a partitioning call."""
    counts = [assignment.estimated_count for assignment in assignments]
    logger.info(
        "partition_complete",
        extra={
            "parallelism": len(assignments),
            "total_count": sum(counts),
            "max_count": max(counts, default=0),
            "min_count": min(counts, default=0),
            "total_latency_ms": total_latency_ms,
        },
    )
