"""Score-matrix fill for global alignment (Needleman-Wunsch and Gotoh).

Matrices are ``(len(query) + 1) x (len(target) + 1)`` numpy ``int64``
arrays.  Each row is filled with vectorized operations; the horizontal
dependency inside a row, ``X[i][j] = max(A[j], X[i][j-1] + extend)``, is a
running maximum:

    X[i][j] = j * extend + max_{k <= j} (A[k] - k * extend)

which ``np.maximum.accumulate`` evaluates exactly for integers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from globalign.errors import NumericRangeError
from globalign.scoring import SCORE_DTYPE, GapPenalty, SubstitutionMatrix

_INFO = np.iinfo(SCORE_DTYPE)

# Unreachable-cell sentinel; leaves headroom for any number of additive
# penalties accepted by check_numeric_range.
NEG = int(_INFO.min // 4)

MAX_SAFE_SCORE = int(_INFO.max // 4)


@dataclass
class ScoreMatrices:
    """Filled DP matrices for one alignment.

    Linear mode only has ``m``.  Affine mode adds ``ix`` (query symbol
    against a gap) and ``iy`` (gap against a target symbol); ``m`` then holds
    scores of paths ending in a substitution.
    """

    m: np.ndarray
    ix: Optional[np.ndarray] = None
    iy: Optional[np.ndarray] = None

    @property
    def affine(self) -> bool:
        return self.ix is not None

    @property
    def shape(self):
        return self.m.shape

    def final_score(self) -> int:
        n, m = self.m.shape[0] - 1, self.m.shape[1] - 1
        if not self.affine:
            return int(self.m[n, m])
        return int(max(self.m[n, m], self.ix[n, m], self.iy[n, m]))

    def collapse(self) -> np.ndarray:
        """Single score matrix: the elementwise maximum over all states."""
        if not self.affine:
            return self.m
        return np.maximum(np.maximum(self.m, self.ix), self.iy)


def check_numeric_range(n: int, m: int, gap_penalty: GapPenalty, matrix: SubstitutionMatrix) -> None:
    """Fail fast when an alignment of this size could overflow the accumulator."""
    per_step = (
        abs(gap_penalty.open_penalty)
        + abs(gap_penalty.extension_penalty)
        + max(abs(matrix.max_value), abs(matrix.min_value))
    )
    bound = (n + m + 2) * per_step
    if bound > MAX_SAFE_SCORE:
        raise NumericRangeError(
            f"Scores for a {n} x {m} alignment may reach {bound}, "
            f"beyond the safe accumulator range of {MAX_SAFE_SCORE}"
        )


def fill(query: np.ndarray, target: np.ndarray, gap_penalty: GapPenalty,
         matrix: SubstitutionMatrix) -> ScoreMatrices:
    """Fill score matrices for encoded *query* and *target* under *gap_penalty*."""
    check_numeric_range(len(query), len(target), gap_penalty, matrix)
    if gap_penalty.is_affine:
        return fill_affine(query, target, gap_penalty, matrix)
    return fill_linear(query, target, gap_penalty, matrix)


def fill_linear(query: np.ndarray, target: np.ndarray, gap_penalty: GapPenalty,
                matrix: SubstitutionMatrix) -> ScoreMatrices:
    n, m = len(query), len(target)
    ext = gap_penalty.extension_penalty
    offsets = ext * np.arange(m + 1, dtype=SCORE_DTYPE)

    S = np.empty((n + 1, m + 1), dtype=SCORE_DTYPE)
    S[0, :] = offsets
    S[:, 0] = ext * np.arange(n + 1, dtype=SCORE_DTYPE)

    table = matrix.values
    best = np.empty(m + 1, dtype=SCORE_DTYPE)
    for i in range(1, n + 1):
        sub = table[query[i - 1], target]
        best[0] = S[i, 0]
        np.maximum(S[i - 1, 1:] + ext, S[i - 1, :-1] + sub, out=best[1:])
        S[i, :] = np.maximum.accumulate(best - offsets) + offsets

    return ScoreMatrices(m=S)


def fill_affine(query: np.ndarray, target: np.ndarray, gap_penalty: GapPenalty,
                matrix: SubstitutionMatrix) -> ScoreMatrices:
    n, m = len(query), len(target)
    gop = gap_penalty.open_penalty
    ext = gap_penalty.extension_penalty
    offsets = ext * np.arange(m + 1, dtype=SCORE_DTYPE)

    M = np.full((n + 1, m + 1), NEG, dtype=SCORE_DTYPE)
    Ix = np.full((n + 1, m + 1), NEG, dtype=SCORE_DTYPE)
    Iy = np.full((n + 1, m + 1), NEG, dtype=SCORE_DTYPE)

    M[0, 0] = 0
    Ix[:, 0] = gop + ext * np.arange(n + 1, dtype=SCORE_DTYPE)
    Iy[0, :] = gop + offsets

    table = matrix.values
    start = np.empty(m + 1, dtype=SCORE_DTYPE)
    for i in range(1, n + 1):
        sub = table[query[i - 1], target]
        prev_best = np.maximum(np.maximum(M[i - 1, :-1], Ix[i - 1, :-1]), Iy[i - 1, :-1])
        M[i, 1:] = prev_best + sub
        Ix[i, 1:] = np.maximum(M[i - 1, 1:] + gop, Ix[i - 1, 1:]) + ext
        # Iy[i][j] = max(M[i][j-1] + open, Iy[i][j-1]) + extend, as a running max
        start[0] = Iy[i, 0]
        start[1:] = M[i, :-1] + gop - offsets[:-1]
        Iy[i, :] = np.maximum.accumulate(start) + offsets

    return ScoreMatrices(m=M, ix=Ix, iy=Iy)
