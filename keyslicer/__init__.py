"""Keyslicer - Keyspace partitioning for parallel index scans."""

from .core import (
    ConfigurationError,
    CountingError,
    FragmentStyle,
    IDEncoding,
    KeyslicerError,
    PartitionerConfig,
)
from .keyspace import (
    AlphabetChunker,
    ChunkProposal,
    KeyManager,
    KeyQuery,
    KeySplit,
    alphabet_classes,
    build_key_query,
    get_key_array,
)
from .runtime import (
    CountFn,
    ParallelKeyPartitioner,
    PartitionAssignment,
    ProgressBarrier,
    assign_round_robin,
    partition_symbols,
    wait_for_window,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    "IDEncoding",
    "FragmentStyle",
    "PartitionerConfig",
    "KeyslicerError",
    "ConfigurationError",
    "CountingError",
    # Keyspace
    "AlphabetChunker",
    "ChunkProposal",
    "KeyManager",
    "KeySplit",
    "KeyQuery",
    "alphabet_classes",
    "build_key_query",
    "get_key_array",
    # Runtime
    "CountFn",
    "ParallelKeyPartitioner",
    "PartitionAssignment",
    "ProgressBarrier",
    "assign_round_robin",
    "partition_symbols",
    "wait_for_window",
]
