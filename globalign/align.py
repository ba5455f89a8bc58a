"""Pairwise global alignment of two sequences by dynamic programming."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from globalign.alphabet import Sequence
from globalign.backtrack import traceback
from globalign.dp import fill
from globalign.errors import ConfigurationError
from globalign.pair import AlignedSequence, SequencePair
from globalign.scoring import GapPenalty, SubstitutionMatrix

logger = logging.getLogger(__name__)

SequenceLike = Union[Sequence, str]


@dataclass(frozen=True)
class AlignmentResult:
    """Stores the result of an alignment."""

    score: int
    pair: SequencePair
    elapsed_ns: int
    max_score: int
    min_score: int
    score_matrix: Optional[np.ndarray] = None

    @property
    def query(self) -> AlignedSequence:
        return self.pair.query

    @property
    def target(self) -> AlignedSequence:
        return self.pair.target

    @property
    def similarity(self) -> float:
        """Score rescaled to [0, 1] between ``min_score`` and ``max_score``."""
        if self.max_score == self.min_score:
            return 1.0
        return (self.score - self.min_score) / (self.max_score - self.min_score)

    @property
    def distance(self) -> float:
        return 1.0 - self.similarity


class NeedlemanWunsch:
    """Global pairwise aligner.

    The gap model (linear or affine) comes from *gap_penalty*.  The aligner
    keeps only its configuration, so one instance can align many pairs,
    including from several threads at once.

    With *store_score_matrix* the result carries the filled score matrix
    (affine matrices collapsed by elementwise max); otherwise the matrices
    are released as soon as traceback finishes.

    With *strict* (the default) a missing input, an alphabet mismatch or a
    string holding symbols outside the matrix alphabet raises
    ``ConfigurationError``.  Without it the alignment is skipped:
    a warning is logged and ``align`` returns ``None``.
    """

    def __init__(
        self,
        gap_penalty: Optional[GapPenalty] = None,
        substitution_matrix: Optional[SubstitutionMatrix] = None,
        store_score_matrix: bool = False,
        strict: bool = True,
    ):
        self.gap_penalty = gap_penalty
        self.substitution_matrix = substitution_matrix
        self.store_score_matrix = store_score_matrix
        self.strict = strict

    def __repr__(self) -> str:
        return (
            f"NeedlemanWunsch(gap_penalty={self.gap_penalty!r}, "
            f"substitution_matrix={self.substitution_matrix!r}, "
            f"store_score_matrix={self.store_score_matrix})"
        )

    def align(
        self,
        query: Optional[SequenceLike],
        target: Optional[SequenceLike],
    ) -> Optional[AlignmentResult]:
        """Align *query* against *target* end to end.

        Plain strings are read as sequences over the substitution matrix's
        alphabet.
        """
        problem = self._configuration_problem(query, target)
        if problem is not None:
            return self._skip(problem)

        gap_penalty = self.gap_penalty
        matrix = self.substitution_matrix
        try:
            q = self._as_sequence(query, "query")
            t = self._as_sequence(target, "target")
        except ValueError as exc:
            return self._skip(str(exc))
        if q.alphabet != matrix.alphabet or t.alphabet != matrix.alphabet:
            return self._skip(
                f"sequence alphabets {q.alphabet.name!r}/{t.alphabet.name!r} do not match "
                f"substitution matrix alphabet {matrix.alphabet.name!r}"
            )

        q_idx = matrix.encode(q)
        t_idx = matrix.encode(t)

        start = time.perf_counter_ns()
        matrices = fill(q_idx, t_idx, gap_penalty, matrix)
        sx, sy = traceback(matrices, q_idx, t_idx, gap_penalty, matrix)
        score = matrices.final_score()
        pair = SequencePair.from_steps(q, t, sx, sy)
        elapsed = time.perf_counter_ns() - start

        score_matrix = matrices.collapse() if self.store_score_matrix else None

        logger.debug(
            "Aligned %r (%d) x %r (%d) with %s gaps: score=%d, length=%d, %.3f ms",
            q.name, len(q), t.name, len(t), gap_penalty.kind.value,
            score, len(pair), elapsed / 1e6,
        )

        return AlignmentResult(
            score=score,
            pair=pair,
            elapsed_ns=elapsed,
            max_score=max(matrix.self_score(q), matrix.self_score(t)),
            min_score=gap_penalty.cost(len(q)) + gap_penalty.cost(len(t)),
            score_matrix=score_matrix,
        )

    def _configuration_problem(self, query, target) -> Optional[str]:
        missing = [
            name for name, value in (
                ("query", query),
                ("target", target),
                ("gap penalty", self.gap_penalty),
                ("substitution matrix", self.substitution_matrix),
            )
            if value is None
        ]
        if missing:
            return "missing " + ", ".join(missing)
        if isinstance(query, Sequence) and isinstance(target, Sequence) and query.alphabet != target.alphabet:
            return f"query alphabet {query.alphabet.name!r} differs from target alphabet {target.alphabet.name!r}"
        return None

    def _skip(self, problem: str) -> None:
        if self.strict:
            raise ConfigurationError(problem)
        logger.warning("Skipping alignment: %s", problem)
        return None

    def _as_sequence(self, value: SequenceLike, name: str) -> Sequence:
        if isinstance(value, Sequence):
            return value
        return Sequence(value, alphabet=self.substitution_matrix.alphabet, name=name)
