"""Keyspace decomposition: alphabets, chunkers and the key manager.

Architecture:
    - alphabets.py: Symbol alphabets and the encoding -> alphabet tables
    - chunkers.py: Two-phase cursor over a single alphabet
    - key_manager.py: Budget arbitration across the alphabets of an encoding
    - queries.py: Key queries handed to the counting function
"""

from __future__ import annotations

from .alphabets import (
    BASE64_SPECIAL,
    BASE64URL_SPECIAL,
    DIGITS,
    HEX_LOWER,
    HEX_UPPER,
    LOWER_CASE,
    UPPER_CASE,
    SymbolAlphabet,
    alphabet_classes,
    escape_symbol,
    get_key_array,
    render_symbol_set,
)
from .chunkers import AlphabetChunker, ChunkProposal
from .key_manager import KeyManager, KeySplit
from .queries import KeyQuery, build_key_query

__all__ = [
    "SymbolAlphabet",
    "UPPER_CASE",
    "LOWER_CASE",
    "DIGITS",
    "HEX_LOWER",
    "HEX_UPPER",
    "BASE64_SPECIAL",
    "BASE64URL_SPECIAL",
    "alphabet_classes",
    "get_key_array",
    "escape_symbol",
    "render_symbol_set",
    "AlphabetChunker",
    "ChunkProposal",
    "KeyManager",
    "KeySplit",
    "KeyQuery",
    "build_key_query",
]
