"""Alphabet chunkers: cursors over one symbol alphabet.

A chunker hands out consecutive slices of its alphabet in two phases. ``propose``
computes a slice from the current cursor without moving it; ``commit`` is the
only mutator and consumes the proposed slice. Callers count documents matching
the proposed fragment first and commit only once the count is accepted, so a
failed or rejected count leaves the cursor where it was.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ..core.enums import FragmentStyle
from .alphabets import SymbolAlphabet, escape_symbol


@dataclass(frozen=True)
class ChunkProposal:
    """Speculative slice of an alphabet.

    Attributes:
        fragment: Rendered slice ("" when nothing is left)
        take: Number of symbols the slice covers
        start: Cursor position the slice was computed from
    """

    fragment: str = ""
    take: int = 0
    start: int = 0

    def __bool__(self) -> bool:
        return self.take > 0


def _render_range(symbols: Sequence[str]) -> str:
    return f"{symbols[0]}-{symbols[-1]}"


def _render_enumerated(symbols: Sequence[str]) -> str:
    return "".join(escape_symbol(char) for char in symbols)


_RENDERERS: dict[FragmentStyle, Callable[[Sequence[str]], str]] = {
    FragmentStyle.RANGE: _render_range,
    FragmentStyle.ENUMERATED: _render_enumerated,
}


class AlphabetChunker:
    """Stateful cursor over one ordered symbol alphabet.

    The rendering style is chosen by the caller at construction: RANGE for
    alphabets the index orders lexically, ENUMERATED for symbol classes that
    must be listed one by one.
    """

    def __init__(
        self,
        symbols: Sequence[str],
        style: FragmentStyle | str = FragmentStyle.RANGE,
    ) -> None:
        """Initialize chunker.

        Args:
            symbols: Ordered alphabet, one character per symbol
            style: Fragment rendering style

        Raises:
            ValueError: If the alphabet is empty
        """
        if not symbols:
            raise ValueError("Cannot chunk an empty alphabet")
        self._symbols: SymbolAlphabet = tuple(symbols)
        self._style = FragmentStyle(style)
        self._render = _RENDERERS[self._style]
        self._cursor = 0
        self._completed = False
        self._pending: ChunkProposal | None = None

    @property
    def symbols(self) -> SymbolAlphabet:
        return self._symbols

    @property
    def style(self) -> FragmentStyle:
        return self._style

    @property
    def cursor(self) -> int:
        """Index of the first symbol not yet committed."""
        return self._cursor

    @property
    def completed(self) -> bool:
        """True once every symbol has been committed. Never reverts."""
        return self._completed

    @property
    def pending_take(self) -> int:
        """Size of the proposal awaiting commit, 0 if there is none."""
        return self._pending.take if self._pending is not None else 0

    @property
    def remaining(self) -> int:
        return len(self._symbols) - self._cursor

    def propose(self, num_of_chars: int) -> ChunkProposal:
        """Propose the next slice of at most ``num_of_chars`` symbols.

        The proposal replaces any earlier uncommitted one. An empty proposal
        means the alphabet is exhausted (or the budget was not positive).

        Args:
            num_of_chars: Character budget for this slice

        Returns:
            ChunkProposal describing the slice
        """
        take = min(num_of_chars, self.remaining)
        if self._completed or take <= 0:
            self._pending = None
            return ChunkProposal(start=self._cursor)

        window = self._symbols[self._cursor : self._cursor + take]
        proposal = ChunkProposal(fragment=self._render(window), take=take, start=self._cursor)
        self._pending = proposal
        return proposal

    def commit(self, proposal: ChunkProposal | None = None) -> None:
        """Consume a proposed slice.

        Args:
            proposal: Proposal to commit (defaults to the pending one)

        Raises:
            ValueError: If the proposal was computed from another cursor position
        """
        if proposal is None:
            proposal = self._pending
        self._pending = None

        if not proposal:
            return
        if proposal.start != self._cursor:
            raise ValueError(
                f"Stale proposal: computed at position {proposal.start}, "
                f"cursor is at {self._cursor}"
            )

        self._cursor = min(self._cursor + proposal.take, len(self._symbols))
        if self._cursor >= len(self._symbols):
            self._completed = True

    def discard(self) -> None:
        """Drop the pending proposal without consuming anything."""
        self._pending = None

    def __repr__(self) -> str:
        return (
            f"AlphabetChunker({''.join(self._symbols)!r}, style={self._style.value}, "
            f"cursor={self._cursor}, completed={self._completed})"
        )
