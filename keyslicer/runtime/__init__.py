"""Runtime coordination of parallel scans."""

from .barrier import ProgressBarrier, wait_for_window
from .partitioning import (
    CountFn,
    ParallelKeyPartitioner,
    PartitionAssignment,
    assign_round_robin,
    partition_symbols,
)

__all__ = [
    "ProgressBarrier",
    "wait_for_window",
    "CountFn",
    "ParallelKeyPartitioner",
    "PartitionAssignment",
    "assign_round_robin",
    "partition_symbols",
]
