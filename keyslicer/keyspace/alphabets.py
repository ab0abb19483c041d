"""Symbol alphabets for identifier encodings.

Every alphabet is an immutable, ordered tuple of single characters forming
one lexical class. An encoding's keyspace is the concatenation of its classes
in priority order: upper case, lower case, digits then specials for base64
variants; digits then letters for hexadecimal variants.
"""

from __future__ import annotations

import string

from ..core.enums import FragmentStyle, IDEncoding

SymbolAlphabet = tuple[str, ...]

UPPER_CASE: SymbolAlphabet = tuple(string.ascii_uppercase)
LOWER_CASE: SymbolAlphabet = tuple(string.ascii_lowercase)
DIGITS: SymbolAlphabet = tuple(string.digits)

HEX_LOWER: SymbolAlphabet = LOWER_CASE[:6]
HEX_UPPER: SymbolAlphabet = UPPER_CASE[:6]

BASE64URL_SPECIAL: SymbolAlphabet = ("-", "_")
BASE64_SPECIAL: SymbolAlphabet = (*BASE64URL_SPECIAL, "+", "/")

# Characters with a meaning inside a bracketed character class
_ESCAPED = {"+": "\\+", "-": "\\-"}

_ALPHABET_CLASSES: dict[IDEncoding, tuple[tuple[SymbolAlphabet, FragmentStyle], ...]] = {
    IDEncoding.BASE64: (
        (UPPER_CASE, FragmentStyle.RANGE),
        (LOWER_CASE, FragmentStyle.RANGE),
        (DIGITS, FragmentStyle.RANGE),
        (BASE64_SPECIAL, FragmentStyle.ENUMERATED),
    ),
    IDEncoding.BASE64URL: (
        (UPPER_CASE, FragmentStyle.RANGE),
        (LOWER_CASE, FragmentStyle.RANGE),
        (DIGITS, FragmentStyle.RANGE),
        (BASE64URL_SPECIAL, FragmentStyle.ENUMERATED),
    ),
    IDEncoding.HEX_LOWER: (
        (DIGITS, FragmentStyle.RANGE),
        (HEX_LOWER, FragmentStyle.RANGE),
    ),
    IDEncoding.HEX_UPPER: (
        (DIGITS, FragmentStyle.RANGE),
        (HEX_UPPER, FragmentStyle.RANGE),
    ),
}


def alphabet_classes(
    encoding: IDEncoding | str,
) -> tuple[tuple[SymbolAlphabet, FragmentStyle], ...]:
    """Return the ordered (alphabet, style) pairs for an encoding.

    Args:
        encoding: Encoding member, canonical value or legacy alias

    Returns:
        Alphabets in priority order, each tagged with its fragment style

    Raises:
        ConfigurationError: If the encoding is not supported
    """
    return _ALPHABET_CLASSES[IDEncoding.from_value(encoding)]


def get_key_array(encoding: IDEncoding | str) -> SymbolAlphabet:
    """Return the full top-level alphabet of an encoding.

    Examples:
        >>> "".join(get_key_array("hex-upper"))
        '0123456789ABCDEF'
        >>> len(get_key_array(IDEncoding.BASE64))
        66
    """
    return tuple(symbol for alphabet, _ in alphabet_classes(encoding) for symbol in alphabet)


def escape_symbol(char: str) -> str:
    """Escape a symbol for use inside a bracketed character class."""
    return _ESCAPED.get(char, char)


def render_symbol_set(symbols: SymbolAlphabet | list[str]) -> str:
    """Render symbols as a bracketed set, e.g. ``[ace]``; empty input gives ``""``."""
    if not symbols:
        return ""
    return "[" + "".join(escape_symbol(char) for char in symbols) + "]"
