"""Traceback of one optimal global alignment from filled score matrices.

Ties are broken by a fixed "highroad" precedence so identical inputs always
give the same alignment:

* affine, choosing a state at a cell: ``IX`` before ``M`` before ``IY``;
* affine, leaving a gap run: close the run only if that is strictly better,
  otherwise keep extending it (same rule for both gap states);
* linear: query symbol against a gap, then substitution, then gap against a
  target symbol.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Tuple

import numpy as np

from globalign.dp import ScoreMatrices
from globalign.errors import TracebackError
from globalign.pair import Step
from globalign.scoring import GapPenalty, SubstitutionMatrix

Steps = Tuple[List[Step], List[Step]]


class State(Enum):
    """Which move produced the current cell on the path."""

    M = "match"    # query symbol against target symbol
    IX = "ix"      # query symbol against a gap
    IY = "iy"      # gap against a target symbol


_QUERY_ONLY = (Step.ELEMENT, Step.GAP)
_TARGET_ONLY = (Step.GAP, Step.ELEMENT)
_BOTH = (Step.ELEMENT, Step.ELEMENT)


def traceback(matrices: ScoreMatrices, query: np.ndarray, target: np.ndarray,
              gap_penalty: GapPenalty, matrix: SubstitutionMatrix) -> Steps:
    """Recover query and target steps from (n, m) back to (0, 0)."""
    if matrices.affine:
        steps = _traceback_affine(matrices, query, target, gap_penalty, matrix)
    else:
        steps = _traceback_linear(matrices.m, query, target, gap_penalty, matrix)
    sx = [s for s, _ in steps]
    sy = [s for _, s in steps]
    sx.reverse()
    sy.reverse()
    return sx, sy


def best_state(matrices: ScoreMatrices, i: int, j: int) -> State:
    """State holding the maximum at (i, j), preferring IX, then M, then IY."""
    ix, m, iy = matrices.ix[i, j], matrices.m[i, j], matrices.iy[i, j]
    top = max(ix, m, iy)
    if ix == top:
        return State.IX
    if m == top:
        return State.M
    return State.IY


def _traceback_linear(S: np.ndarray, query, target, gap_penalty, matrix) -> List[Tuple[Step, Step]]:
    ext = gap_penalty.extension_penalty
    table = matrix.values
    steps = []
    i, j = S.shape[0] - 1, S.shape[1] - 1
    while i > 0 or j > 0:
        here = S[i, j]
        if i == 0:
            steps.append(_TARGET_ONLY)
            j -= 1
        elif j == 0 or here == S[i - 1, j] + ext:
            steps.append(_QUERY_ONLY)
            i -= 1
        elif here == S[i - 1, j - 1] + table[query[i - 1], target[j - 1]]:
            steps.append(_BOTH)
            i -= 1
            j -= 1
        elif here == S[i, j - 1] + ext:
            steps.append(_TARGET_ONLY)
            j -= 1
        else:
            raise TracebackError(f"No predecessor reproduces score {here} at cell ({i}, {j})")
    return steps


def _traceback_affine(mats: ScoreMatrices, query, target, gap_penalty, matrix) -> List[Tuple[Step, Step]]:
    M, Ix, Iy = mats.m, mats.ix, mats.iy
    gop = gap_penalty.open_penalty
    ext = gap_penalty.extension_penalty
    table = matrix.values
    steps = []
    i, j = M.shape[0] - 1, M.shape[1] - 1
    state = best_state(mats, i, j)

    while i > 0 or j > 0:
        if state is State.IX:
            if i == 0:
                raise TracebackError(f"Query gap state reached row 0 at column {j}")
            close, extend = M[i - 1, j] + gop, Ix[i - 1, j]
            if Ix[i, j] != max(close, extend) + ext:
                raise TracebackError(f"Ix[{i}][{j}] = {Ix[i, j]} does not follow from row {i - 1}")
            steps.append(_QUERY_ONLY)
            i -= 1
            state = State.M if close > extend else State.IX

        elif state is State.IY:
            if j == 0:
                raise TracebackError(f"Target gap state reached column 0 at row {i}")
            close, extend = M[i, j - 1] + gop, Iy[i, j - 1]
            if Iy[i, j] != max(close, extend) + ext:
                raise TracebackError(f"Iy[{i}][{j}] = {Iy[i, j]} does not follow from column {j - 1}")
            steps.append(_TARGET_ONLY)
            j -= 1
            state = State.M if close > extend else State.IY

        else:
            if i == 0 or j == 0:
                raise TracebackError(f"Substitution state reached border cell ({i}, {j})")
            prev = max(M[i - 1, j - 1], Ix[i - 1, j - 1], Iy[i - 1, j - 1])
            if M[i, j] != prev + table[query[i - 1], target[j - 1]]:
                raise TracebackError(f"M[{i}][{j}] = {M[i, j]} does not follow from ({i - 1}, {j - 1})")
            steps.append(_BOTH)
            i -= 1
            j -= 1
            state = best_state(mats, i, j)

    return steps
