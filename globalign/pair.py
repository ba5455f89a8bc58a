"""Aligned sequences and the pairwise alignment profile."""

from __future__ import annotations

from enum import Enum
from functools import cached_property
from typing import Iterable, List, Optional, Tuple

from globalign.alphabet import Alphabet, Sequence

GAP = "-"


class Step(Enum):
    """What an aligned sequence contributes to one alignment column."""

    ELEMENT = "element"
    GAP = "gap"


class AlignedSequence:
    """A sequence laid out over alignment columns.

    Holds the original sequence and one ``Step`` per column, and maps in
    both directions between 1-based alignment columns and 1-based sequence
    positions.
    """

    def __init__(self, sequence: Sequence, steps: Iterable[Step]):
        self._sequence = sequence
        self._steps: Tuple[Step, ...] = tuple(steps)

        sequence_from_alignment: List[Optional[int]] = []
        alignment_from_sequence: List[int] = []
        for column, step in enumerate(self._steps, start=1):
            if step is Step.ELEMENT:
                alignment_from_sequence.append(column)
                sequence_from_alignment.append(len(alignment_from_sequence))
            elif step is Step.GAP:
                sequence_from_alignment.append(None)
            else:
                raise ValueError(f"Unknown alignment step {step!r}")

        if len(alignment_from_sequence) != len(sequence):
            raise ValueError(
                f"Steps place {len(alignment_from_sequence)} elements but sequence "
                f"{sequence.name!r} has {len(sequence)}"
            )
        self._sequence_from_alignment = sequence_from_alignment
        self._alignment_from_sequence = alignment_from_sequence

    @property
    def original(self) -> Sequence:
        return self._sequence

    @property
    def steps(self) -> Tuple[Step, ...]:
        return self._steps

    @property
    def alphabet(self) -> Alphabet:
        return self._sequence.alphabet

    def __len__(self) -> int:
        return len(self._steps)

    def __str__(self) -> str:
        return "".join(self.element_at(i) for i in range(1, len(self) + 1))

    def __repr__(self) -> str:
        return f"AlignedSequence({self._sequence.name!r}, {str(self)!r})"

    def _check_column(self, alignment_index: int) -> None:
        if not 1 <= alignment_index <= len(self._steps):
            raise IndexError(f"Alignment index {alignment_index} outside 1..{len(self._steps)}")

    def is_gap(self, alignment_index: int) -> bool:
        self._check_column(alignment_index)
        return self._steps[alignment_index - 1] is Step.GAP

    def element_at(self, alignment_index: int) -> str:
        """Symbol in column *alignment_index*, or ``GAP``."""
        index = self.sequence_index_at(alignment_index)
        return GAP if index is None else self._sequence.element_at(index)

    def sequence_index_at(self, alignment_index: int) -> Optional[int]:
        """Sequence position in column *alignment_index*; ``None`` for a gap."""
        self._check_column(alignment_index)
        return self._sequence_from_alignment[alignment_index - 1]

    def alignment_index_at(self, sequence_index: int) -> int:
        """Column holding sequence position *sequence_index*."""
        if not 1 <= sequence_index <= len(self._alignment_from_sequence):
            raise IndexError(
                f"Sequence index {sequence_index} outside 1..{len(self._alignment_from_sequence)}"
            )
        return self._alignment_from_sequence[sequence_index - 1]

    @property
    def num_gaps(self) -> int:
        return len(self._steps) - len(self._alignment_from_sequence)

    @property
    def num_gap_runs(self) -> int:
        runs = 0
        previous = None
        for step in self._steps:
            if step is Step.GAP and previous is not Step.GAP:
                runs += 1
            previous = step
        return runs

    @property
    def start(self) -> Optional[int]:
        """First column holding an element, or ``None`` for an all-gap row."""
        return self._alignment_from_sequence[0] if self._alignment_from_sequence else None

    @property
    def end(self) -> Optional[int]:
        """Last column holding an element, or ``None`` for an all-gap row."""
        return self._alignment_from_sequence[-1] if self._alignment_from_sequence else None


def _check_sequence_id(sequence_id: int) -> None:
    if sequence_id not in (1, 2):
        raise IndexError(f"Sequence id must be 1 (query) or 2 (target), got {sequence_id!r}")


class SequencePair:
    """Result of a pairwise alignment: query and target over shared columns.

    Sequence id 1 is the query, 2 the target.  The identity and similarity
    counts are computed on first access and memoized; the computation is
    idempotent, so a pair may be read from several threads.

    The pair carries columns only.  The score and elapsed time of the
    alignment that produced it live on ``AlignmentResult`` (``score``,
    ``elapsed_ns``), which wraps the pair as ``result.pair``.
    """

    def __init__(self, query: AlignedSequence, target: AlignedSequence):
        if len(query) != len(target):
            raise ValueError(f"Aligned lengths differ: {len(query)} != {len(target)}")
        if query.alphabet != target.alphabet:
            raise ValueError(
                f"Alphabets differ: {query.alphabet.name!r} != {target.alphabet.name!r}"
            )
        for column, (qs, ts) in enumerate(zip(query.steps, target.steps), start=1):
            if qs is Step.GAP and ts is Step.GAP:
                raise ValueError(f"Column {column} is a gap in both sequences")
        self._aligned = (query, target)

    @classmethod
    def from_steps(
        cls,
        query: Sequence,
        target: Sequence,
        query_steps: Iterable[Step],
        target_steps: Iterable[Step],
    ) -> "SequencePair":
        return cls(AlignedSequence(query, query_steps), AlignedSequence(target, target_steps))

    def __len__(self) -> int:
        return len(self._aligned[0])

    def __iter__(self):
        return iter(self._aligned)

    def __repr__(self) -> str:
        return f"SequencePair(query={str(self.query)!r}, target={str(self.target)!r})"

    @property
    def query(self) -> AlignedSequence:
        return self._aligned[0]

    @property
    def target(self) -> AlignedSequence:
        return self._aligned[1]

    @property
    def alphabet(self) -> Alphabet:
        return self.query.alphabet

    def aligned_sequence(self, sequence_id: int) -> AlignedSequence:
        _check_sequence_id(sequence_id)
        return self._aligned[sequence_id - 1]

    def element_at(self, sequence_id: int, alignment_index: int) -> str:
        return self.aligned_sequence(sequence_id).element_at(alignment_index)

    def sequence_index_at(self, sequence_id: int, alignment_index: int) -> Optional[int]:
        return self.aligned_sequence(sequence_id).sequence_index_at(alignment_index)

    def alignment_index_at(self, sequence_id: int, sequence_index: int) -> int:
        return self.aligned_sequence(sequence_id).alignment_index_at(sequence_index)

    def column_at(self, alignment_index: int) -> Tuple[str, str]:
        """``(query_symbol, target_symbol)`` for one column."""
        return self.query.element_at(alignment_index), self.target.element_at(alignment_index)

    def element_in_query_at(self, alignment_index: int) -> str:
        return self.query.element_at(alignment_index)

    def element_in_target_at(self, alignment_index: int) -> str:
        return self.target.element_at(alignment_index)

    def index_in_query_at(self, alignment_index: int) -> Optional[int]:
        return self.query.sequence_index_at(alignment_index)

    def index_in_target_at(self, alignment_index: int) -> Optional[int]:
        return self.target.sequence_index_at(alignment_index)

    def index_in_query_for_target_at(self, target_index: int) -> Optional[int]:
        """Query position aligned to *target_index*; ``None`` if opposite a gap."""
        return self.query.sequence_index_at(self.target.alignment_index_at(target_index))

    def index_in_target_for_query_at(self, query_index: int) -> Optional[int]:
        """Target position aligned to *query_index*; ``None`` if opposite a gap."""
        return self.target.sequence_index_at(self.query.alignment_index_at(query_index))

    @cached_property
    def identity_count(self) -> int:
        """Columns whose two symbols are equal, ignoring case."""
        return sum(
            1 for i in range(1, len(self) + 1)
            if Alphabet.equal(self.element_in_query_at(i), self.element_in_target_at(i))
        )

    @cached_property
    def similarity_count(self) -> int:
        """Columns whose two symbols are equivalent in the shared alphabet."""
        alphabet = self.alphabet
        return sum(
            1 for i in range(1, len(self) + 1)
            if alphabet.equivalent(self.element_in_query_at(i), self.element_in_target_at(i))
        )
