"""Key manager composing one chunker per alphabet class of an encoding.

Architecture:
    The KeyManager turns an integer character budget into a single bracketed
    character-class fragment, e.g. ``[A-Za-c]``, by walking its chunkers in
    priority order and giving each whatever budget the previous ones left.

Design Decisions:
    - Two-phase split/commit: A split is speculative until the caller has
      counted the documents it matches. Only ``commit`` moves the cursors,
      and only for the chunkers that took part in the split.
    - The manager never invents symbols; it only arbitrates the budget.

See Also:
    - AlphabetChunker: Per-class cursor
    - ParallelKeyPartitioner: One-shot coarse partitioning of the same alphabet
"""

from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import IDEncoding
from .alphabets import alphabet_classes
from .chunkers import AlphabetChunker, ChunkProposal


@dataclass(frozen=True)
class KeySplit:
    """Result of a speculative split.

    Attributes:
        fragment: Bracketed character class, "" when the keyspace is exhausted
        proposals: (chunker index, proposal) for every participating chunker
    """

    fragment: str
    proposals: tuple[tuple[int, ChunkProposal], ...] = ()

    @property
    def take(self) -> int:
        """Total number of symbols the split covers."""
        return sum(proposal.take for _, proposal in self.proposals)

    def __bool__(self) -> bool:
        return bool(self.fragment)


class KeyManager:
    """Arbitrates a character budget across the alphabets of one encoding.

    A KeyManager belongs to a single scanning context; it is not safe to
    split or commit from several callers at once.
    """

    def __init__(self, encoding: IDEncoding | str) -> None:
        """Initialize key manager.

        Args:
            encoding: Identifier encoding of the keyspace

        Raises:
            ConfigurationError: If the encoding is not supported
        """
        self._encoding = IDEncoding.from_value(encoding)
        self._chunkers = tuple(
            AlphabetChunker(alphabet, style) for alphabet, style in alphabet_classes(self._encoding)
        )
        self._last_split: KeySplit | None = None

    @property
    def encoding(self) -> IDEncoding:
        return self._encoding

    @property
    def chunkers(self) -> tuple[AlphabetChunker, ...]:
        return self._chunkers

    @property
    def is_exhausted(self) -> bool:
        """True once every chunker has committed its whole alphabet."""
        return all(chunker.completed for chunker in self._chunkers)

    @property
    def remaining(self) -> int:
        """Number of symbols not yet committed."""
        return sum(chunker.remaining for chunker in self._chunkers)

    def propose(self, budget: int) -> KeySplit:
        """Propose a fragment covering up to ``budget`` symbols.

        Args:
            budget: Number of symbols the fragment may cover

        Returns:
            KeySplit with the fragment and participating proposals
        """
        remaining_budget = budget
        parts: list[str] = []
        proposals: list[tuple[int, ChunkProposal]] = []

        for index, chunker in enumerate(self._chunkers):
            if remaining_budget <= 0:
                break
            if chunker.completed:
                continue

            proposal = chunker.propose(remaining_budget)
            if not proposal:
                continue

            parts.append(proposal.fragment)
            proposals.append((index, proposal))
            remaining_budget -= proposal.take

        fragment = f"[{''.join(parts)}]" if parts else ""
        split = KeySplit(fragment=fragment, proposals=tuple(proposals))
        self._last_split = split
        return split

    def split(self, budget: int) -> str:
        """Return the fragment for the next ``budget`` symbols without consuming them.

        Examples:
            >>> manager = KeyManager("hex-lower")
            >>> manager.split(10)
            '[0-9]'
            >>> manager.commit()
            >>> manager.split(10)
            '[a-f]'
        """
        return self.propose(budget).fragment

    def commit(self, split: KeySplit | None = None) -> None:
        """Consume a split, advancing only the chunkers that took part in it.

        Args:
            split: Split to commit (defaults to the most recent one)
        """
        if split is None:
            split = self._last_split
        self._last_split = None

        if split is None:
            return
        for index, proposal in split.proposals:
            self._chunkers[index].commit(proposal)

    def discard(self) -> None:
        """Forget the most recent split so a later ``commit()`` is a no-op."""
        self._last_split = None
        for chunker in self._chunkers:
            chunker.discard()
