"""Tests for the score-matrix fill."""

import numpy as np
import pytest

from globalign.alphabet import DNA, PROTEIN
from globalign.dp import NEG, ScoreMatrices, check_numeric_range, fill, fill_affine, fill_linear
from globalign.errors import NumericRangeError
from globalign.scoring import GapPenalty, SubstitutionMatrix


def _reference_linear(q, t, gap, matrix):
    """Cell-by-cell recurrence with Python integers."""
    ext = gap.extension_penalty
    n, m = len(q), len(t)
    S = [[0] * (m + 1) for _ in range(n + 1)]
    for i in range(1, n + 1):
        S[i][0] = S[i - 1][0] + ext
    for j in range(1, m + 1):
        S[0][j] = S[0][j - 1] + ext
    for i in range(1, n + 1):
        for j in range(1, m + 1):
            S[i][j] = max(
                S[i - 1][j] + ext,
                S[i][j - 1] + ext,
                S[i - 1][j - 1] + matrix.score(q[i - 1], t[j - 1]),
            )
    return S


def _reference_affine(q, t, gap, matrix):
    gop, ext = gap.open_penalty, gap.extension_penalty
    n, m = len(q), len(t)
    M = [[NEG] * (m + 1) for _ in range(n + 1)]
    Ix = [[NEG] * (m + 1) for _ in range(n + 1)]
    Iy = [[NEG] * (m + 1) for _ in range(n + 1)]
    M[0][0] = 0
    Ix[0][0] = Iy[0][0] = gop
    for i in range(1, n + 1):
        Ix[i][0] = Ix[i - 1][0] + ext
    for j in range(1, m + 1):
        Iy[0][j] = Iy[0][j - 1] + ext
    for i in range(1, n + 1):
        for j in range(1, m + 1):
            M[i][j] = max(M[i - 1][j - 1], Ix[i - 1][j - 1], Iy[i - 1][j - 1]) + matrix.score(q[i - 1], t[j - 1])
            Ix[i][j] = max(M[i - 1][j] + gop, Ix[i - 1][j]) + ext
            Iy[i][j] = max(M[i][j - 1] + gop, Iy[i][j - 1]) + ext
    return M, Ix, Iy


class TestLinearFill:
    def test_matches_reference_recurrence(self, random_pairs, dna_matrix):
        gap = GapPenalty.linear(-2)
        for q, t in random_pairs:
            mats = fill_linear(dna_matrix.encode(q), dna_matrix.encode(t), gap, dna_matrix)
            assert mats.m.tolist() == _reference_linear(q, t, gap, dna_matrix)

    def test_dimensions(self, dna_matrix, linear_gap):
        mats = fill_linear(dna_matrix.encode("ACG"), dna_matrix.encode("ACGTT"), linear_gap, dna_matrix)
        assert mats.shape == (4, 6)
        assert not mats.affine

    def test_borders(self, dna_matrix):
        gap = GapPenalty.linear(-3)
        mats = fill_linear(dna_matrix.encode("AC"), dna_matrix.encode("ACG"), gap, dna_matrix)
        assert mats.m[0].tolist() == [0, -3, -6, -9]
        assert mats.m[:, 0].tolist() == [0, -3, -6]

    def test_textbook_score(self, nucleotides, linear_gap):
        matrix = SubstitutionMatrix.identity(nucleotides, 1, -1)
        mats = fill_linear(matrix.encode("GCATGCU"), matrix.encode("GATTACA"), linear_gap, matrix)
        assert mats.final_score() == 0


class TestAffineFill:
    def test_matches_reference_recurrence(self, random_pairs, dna_matrix):
        gap = GapPenalty.affine(-5, -2)
        for q, t in random_pairs:
            mats = fill_affine(dna_matrix.encode(q), dna_matrix.encode(t), gap, dna_matrix)
            M, Ix, Iy = _reference_affine(q, t, gap, dna_matrix)
            assert mats.m.tolist() == M
            assert mats.ix.tolist() == Ix
            assert mats.iy.tolist() == Iy

    def test_asymmetric_matrix(self):
        matrix = SubstitutionMatrix.from_dict(DNA, {("A", "C"): 3, ("C", "A"): -4}, default=0)
        gap = GapPenalty.affine(-3, -1)
        q, t = "ACCA", "CAAC"
        mats = fill_affine(matrix.encode(q), matrix.encode(t), gap, matrix)
        M, Ix, Iy = _reference_affine(q, t, gap, matrix)
        assert mats.m.tolist() == M
        assert mats.ix.tolist() == Ix
        assert mats.iy.tolist() == Iy

    def test_border_initialisation(self, dna_matrix, affine_gap):
        mats = fill_affine(dna_matrix.encode("AC"), dna_matrix.encode("ACG"), affine_gap, dna_matrix)
        assert mats.m[0, 0] == 0
        assert mats.ix[0, 0] == mats.iy[0, 0] == -10
        assert mats.ix[:, 0].tolist() == [-10, -11, -12]
        assert mats.iy[0].tolist() == [-10, -11, -12, -13]
        assert (mats.m[1:, 0] == NEG).all()
        assert (mats.iy[1:, 0] == NEG).all()
        assert (mats.m[0, 1:] == NEG).all()
        assert (mats.ix[0, 1:] == NEG).all()

    def test_sentinel_never_wins(self, dna_matrix, affine_gap):
        mats = fill_affine(dna_matrix.encode("ACGTACGT"), dna_matrix.encode("TTGCA"), affine_gap, dna_matrix)
        assert mats.final_score() > NEG // 2

    def test_collapse_is_elementwise_max(self, dna_matrix, affine_gap):
        mats = fill_affine(dna_matrix.encode("ACGT"), dna_matrix.encode("AGT"), affine_gap, dna_matrix)
        collapsed = mats.collapse()
        assert collapsed.shape == (5, 4)
        assert np.array_equal(collapsed, np.maximum(np.maximum(mats.m, mats.ix), mats.iy))
        assert collapsed[0, 0] == 0
        assert collapsed[-1, -1] == mats.final_score()


class TestDispatch:
    def test_fill_picks_model(self, dna_matrix, linear_gap, affine_gap):
        q, t = dna_matrix.encode("ACGT"), dna_matrix.encode("ACT")
        assert not fill(q, t, linear_gap, dna_matrix).affine
        assert fill(q, t, affine_gap, dna_matrix).affine

    def test_linear_collapse_is_identity(self):
        m = np.zeros((2, 2), dtype=np.int64)
        assert ScoreMatrices(m=m).collapse() is m


class TestNumericRange:
    def test_ordinary_sizes_pass(self, affine_gap):
        matrix = SubstitutionMatrix.identity(PROTEIN, 11, -4)
        check_numeric_range(100_000, 100_000, affine_gap, matrix)

    def test_huge_scores_rejected(self, affine_gap):
        matrix = SubstitutionMatrix.identity(DNA, 10 ** 17, -1)
        with pytest.raises(NumericRangeError):
            check_numeric_range(100, 100, affine_gap, matrix)

    def test_fill_checks_before_allocating(self, dna_matrix):
        gap = GapPenalty.affine(-(10 ** 18), -1)
        with pytest.raises(NumericRangeError):
            fill(dna_matrix.encode("ACGT"), dna_matrix.encode("ACGT"), gap, dna_matrix)

    def test_range_error_is_overflow_error(self, affine_gap):
        matrix = SubstitutionMatrix.identity(DNA, 10 ** 17, -1)
        with pytest.raises(OverflowError):
            check_numeric_range(100, 100, affine_gap, matrix)
