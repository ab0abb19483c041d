"""Core components."""

from .enums import FragmentStyle, IDEncoding
from .exceptions import ConfigurationError, CountingError, KeyslicerError
from .config import PartitionerConfig

__all__ = [
    "IDEncoding",
    "FragmentStyle",
    "KeyslicerError",
    "ConfigurationError",
    "CountingError",
    "PartitionerConfig",
]
