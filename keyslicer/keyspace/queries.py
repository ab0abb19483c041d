"""Key queries handed to the counting collaborator."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .alphabets import render_symbol_set


class KeyQuery(BaseModel):
    """A set of leading key symbols, optionally bounded by a date range.

    The counting function receives this and embeds ``fragment`` (plus
    ``start``/``end`` when set) into its own query language.
    """

    keys: tuple[str, ...] = Field(..., min_length=1)
    start: datetime | None = None
    end: datetime | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("keys")
    @classmethod
    def validate_keys(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        """Validate every key is a non-empty string."""
        if any(not key for key in v):
            raise ValueError("keys must be non-empty strings")
        return v

    @model_validator(mode="after")
    def validate_range(self) -> KeyQuery:
        """Validate start precedes end when both are set."""
        if self.start is not None and self.end is not None and self.start > self.end:
            raise ValueError("start must be <= end")
        return self

    @property
    def fragment(self) -> str:
        """Bracketed set of the keys, e.g. ``[ace]``."""
        return render_symbol_set(self.keys)


def build_key_query(
    keys: Iterable[str],
    start: datetime | None = None,
    end: datetime | None = None,
) -> KeyQuery:
    """Build the count query selecting exactly ``keys``.

    Args:
        keys: Leading key symbols, rendered as an enumerated set
        start: Optional inclusive start of a date range
        end: Optional end of a date range

    Returns:
        KeyQuery for the counting function
    """
    return KeyQuery(keys=tuple(keys), start=start, end=end)
