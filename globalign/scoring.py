"""Scoring parameters: gap penalties and substitution matrices."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from numbers import Integral
from typing import TYPE_CHECKING, Iterable, Mapping, Optional, Tuple

import numpy as np

from globalign.alphabet import Alphabet

if TYPE_CHECKING:
    from globalign.pair import SequencePair


SCORE_DTYPE = np.int64


class GapModel(Enum):
    """How gap runs are charged."""

    LINEAR = "linear"
    AFFINE = "affine"


@dataclass(frozen=True)
class GapPenalty:
    """Gap costs for alignment.

    Penalties are stored as non-positive integers: ``GapPenalty(10, 1)`` and
    ``GapPenalty(-10, -1)`` are the same configuration.  Under the affine
    model a run of *k* gap columns costs ``open + k * extend``; under the
    linear model it costs ``k * extend`` and *open_penalty* is ignored.
    """

    open_penalty: int = -10
    extension_penalty: int = -1
    kind: GapModel = GapModel.AFFINE

    def __post_init__(self):
        for attr in ("open_penalty", "extension_penalty"):
            value = getattr(self, attr)
            if isinstance(value, bool) or not isinstance(value, Integral):
                raise TypeError(f"{attr} must be an integer, got {value!r}")
            object.__setattr__(self, attr, -abs(int(value)))
        object.__setattr__(self, "kind", GapModel(self.kind))

    @classmethod
    def linear(cls, extension_penalty: int = -1) -> "GapPenalty":
        return cls(open_penalty=0, extension_penalty=extension_penalty, kind=GapModel.LINEAR)

    @classmethod
    def affine(cls, open_penalty: int = -10, extension_penalty: int = -1) -> "GapPenalty":
        return cls(open_penalty=open_penalty, extension_penalty=extension_penalty, kind=GapModel.AFFINE)

    @property
    def is_affine(self) -> bool:
        return self.kind is GapModel.AFFINE

    def cost(self, length: int) -> int:
        """Total cost of a single gap run of *length* columns."""
        if length <= 0:
            return 0
        if self.is_affine:
            return self.open_penalty + length * self.extension_penalty
        return length * self.extension_penalty


class SubstitutionMatrix:
    """Integer substitution scores indexed by alphabet position.

    The table is stored read-only so a single matrix can be shared between
    aligners running on different threads.  It need not be symmetric:
    ``score(a, b)`` reads row *a* (query symbol), column *b* (target symbol).
    """

    def __init__(self, alphabet: Alphabet, matrix, name: str = ""):
        table = np.array(matrix)
        if table.shape != (len(alphabet), len(alphabet)):
            raise ValueError(
                f"Substitution matrix shape {table.shape} does not fit alphabet "
                f"{alphabet.name!r} of size {len(alphabet)}"
            )
        if table.size and not np.issubdtype(table.dtype, np.integer):
            if not np.array_equal(table, np.round(table)):
                raise ValueError("Substitution scores must be integers")
        self.alphabet = alphabet
        self.name = name
        self._table = table.astype(SCORE_DTYPE)
        self._table.setflags(write=False)

    @classmethod
    def identity(cls, alphabet: Alphabet, match: int = 1, mismatch: int = -1) -> "SubstitutionMatrix":
        """Match on the diagonal, mismatch everywhere else."""
        n = len(alphabet)
        table = np.full((n, n), mismatch, dtype=SCORE_DTYPE)
        np.fill_diagonal(table, match)
        return cls(alphabet, table, name=f"identity({match},{mismatch})")

    @classmethod
    def from_dict(
        cls,
        alphabet: Alphabet,
        scores: Mapping[Tuple[str, str], int],
        default: Optional[int] = None,
        name: str = "",
    ) -> "SubstitutionMatrix":
        """Build a matrix from ``{(a, b): score}`` pairs.

        Pairs absent from *scores* take *default*; with no default every pair
        of the alphabet must be present.
        """
        n = len(alphabet)
        table = np.zeros((n, n), dtype=SCORE_DTYPE)
        for a in alphabet:
            for b in alphabet:
                if (a, b) in scores:
                    table[alphabet.index(a), alphabet.index(b)] = scores[(a, b)]
                elif default is not None:
                    table[alphabet.index(a), alphabet.index(b)] = default
                else:
                    raise ValueError(f"No substitution score for pair ({a!r}, {b!r})")
        return cls(alphabet, table, name=name)

    @property
    def values(self) -> np.ndarray:
        return self._table

    @property
    def max_value(self) -> int:
        return int(self._table.max()) if self._table.size else 0

    @property
    def min_value(self) -> int:
        return int(self._table.min()) if self._table.size else 0

    def score(self, a: str, b: str) -> int:
        """Return the score for aligning *a* (query) against *b* (target)."""
        return int(self._table[self.alphabet.index(a), self.alphabet.index(b)])

    def encode(self, symbols: Iterable[str]) -> np.ndarray:
        """Map symbols to alphabet positions for table lookups."""
        return np.array([self.alphabet.index(s) for s in symbols], dtype=np.intp)

    def self_score(self, symbols: Iterable[str]) -> int:
        """Score of aligning *symbols* against themselves without gaps."""
        idx = self.encode(symbols)
        return int(self._table[idx, idx].sum())

    def __repr__(self) -> str:
        return f"SubstitutionMatrix(name={self.name!r}, alphabet={self.alphabet.name!r})"


def rescore(pair: "SequencePair", gap_penalty: GapPenalty, matrix: SubstitutionMatrix) -> int:
    """Recompute an alignment score by replaying its columns.

    Element/element columns add their substitution score; each gap column
    adds the extension penalty and, under the affine model, the first column
    of every run on either side also adds the open penalty.
    """
    total = 0
    prev_gap_side = None
    for index in range(1, len(pair) + 1):
        q_gap = pair.query.is_gap(index)
        t_gap = pair.target.is_gap(index)
        if not q_gap and not t_gap:
            total += matrix.score(pair.element_in_query_at(index), pair.element_in_target_at(index))
            prev_gap_side = None
            continue
        side = "target" if t_gap else "query"
        total += gap_penalty.extension_penalty
        if gap_penalty.is_affine and side != prev_gap_side:
            total += gap_penalty.open_penalty
        prev_gap_side = side
    return total
