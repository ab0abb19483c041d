"""Parallel key partitioning.

Architecture:
    The partitioning layer consists of:
    - definitions.py: PartitionAssignment and the CountFn signature
    - partitioner.py: Round-robin striping and the concurrent count fan-out
    - telemetry.py: Structured logging

Usage:
    Build a PartitionerConfig for the identifier encoding and degree of
    parallelism, hand it to ParallelKeyPartitioner together with an async
    counting function, and await ``partition()`` once at job start.
"""

from __future__ import annotations

from .definitions import CountFn, PartitionAssignment
from .partitioner import ParallelKeyPartitioner, assign_round_robin, partition_symbols

__all__ = [
    "CountFn",
    "PartitionAssignment",
    "ParallelKeyPartitioner",
    "assign_round_robin",
    "partition_symbols",
]
