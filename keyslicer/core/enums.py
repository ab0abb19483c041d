"""Core enumerations for identifier encodings and fragment rendering.

Architecture:
    This module defines the standardized enums used throughout the library.
    An IDEncoding fixes which symbol alphabets, in which order, make up the
    keyspace of a document identifier. A FragmentStyle tags how a chunker
    renders its slice of an alphabet into query syntax.

Design Decisions:
    - String enums: Allow easy serialization into job configuration
    - Legacy aliases: Older reader configs spell hex encodings differently

Key Types:
    - IDEncoding: base64, base64url, lower and upper hexadecimal
    - FragmentStyle: Contiguous range vs enumerated symbols

See Also:
    - keyspace.alphabets: Maps each IDEncoding to its alphabets
    - keyspace.chunkers: Renders fragments according to FragmentStyle
"""

from __future__ import annotations

from enum import Enum

from .exceptions import ConfigurationError

# Key type names used by older reader configurations
_LEGACY_ALIASES = {
    "hexadecimal": "hex-lower",
    "HEXADECIMAL": "hex-upper",
}


class IDEncoding(str, Enum):
    """Identifier encodings whose keyspace can be partitioned.

    Architecture:
        Each value maps deterministically to a fixed, ordered list of symbol
        alphabets (see keyspace.alphabets.alphabet_classes).
    """

    BASE64 = "base64"
    BASE64URL = "base64url"
    HEX_LOWER = "hex-lower"
    HEX_UPPER = "hex-upper"

    def __str__(self) -> str:
        """String representation returns the value."""
        return self.value

    @classmethod
    def from_value(cls, value: IDEncoding | str) -> IDEncoding:
        """Resolve an encoding from an enum member, canonical value or legacy alias.

        Args:
            value: Encoding member or string such as "base64url" or "hexadecimal"

        Returns:
            Matching IDEncoding

        Raises:
            ConfigurationError: If the value names no supported encoding

        Examples:
            >>> IDEncoding.from_value("hex-lower")
            <IDEncoding.HEX_LOWER: 'hex-lower'>
            >>> IDEncoding.from_value("HEXADECIMAL")
            <IDEncoding.HEX_UPPER: 'hex-upper'>
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = _LEGACY_ALIASES.get(value, value)
            try:
                return cls(normalized)
            except ValueError:
                pass
        raise ConfigurationError(f"Unsupported key encoding {value!r}")


class FragmentStyle(str, Enum):
    """How a chunker renders its slice of an alphabet.

    RANGE is for alphabets whose lexical order the index understands
    (letters, digits) and renders as "first-last". ENUMERATED is for symbol
    sets with no usable contiguous order and lists every symbol.
    """

    RANGE = "range"
    ENUMERATED = "enumerated"

    def __str__(self) -> str:
        """String representation returns the value."""
        return self.value
