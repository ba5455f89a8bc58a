"""Shared test fixtures for globalign tests."""

import random

import pytest

from globalign import (
    DNA,
    Alphabet,
    GapPenalty,
    NeedlemanWunsch,
    SubstitutionMatrix,
)


@pytest.fixture
def nucleotides():
    """Unambiguous nucleotide alphabet holding both T and U."""
    return Alphabet("nucleotide", "ACGTU")


@pytest.fixture
def dna_matrix():
    """+1 match / -1 mismatch over DNA."""
    return SubstitutionMatrix.identity(DNA, match=1, mismatch=-1)


@pytest.fixture
def linear_gap():
    return GapPenalty.linear(-1)


@pytest.fixture
def affine_gap():
    return GapPenalty.affine(-10, -1)


@pytest.fixture
def linear_aligner(linear_gap, dna_matrix):
    return NeedlemanWunsch(gap_penalty=linear_gap, substitution_matrix=dna_matrix)


@pytest.fixture
def affine_aligner(affine_gap, dna_matrix):
    return NeedlemanWunsch(gap_penalty=affine_gap, substitution_matrix=dna_matrix)


@pytest.fixture(params=["linear", "affine"])
def any_aligner(request, linear_aligner, affine_aligner):
    """Each gap model in turn."""
    return linear_aligner if request.param == "linear" else affine_aligner


@pytest.fixture
def simple_seq():
    """Short sequence aligned against itself."""
    return "ACGTACGTACGTACGT"


@pytest.fixture
def seq_with_insertion():
    """Query carries a 5-base insertion relative to target."""
    left, inserted, right = "ACGTTGCA", "TTTTT", "GGCATCAG"
    return left + inserted + right, left + right


@pytest.fixture
def random_pairs():
    """Seeded random DNA pairs of assorted lengths, including empty ones."""
    rng = random.Random(42)
    lengths = [(0, 0), (0, 7), (5, 0), (1, 1), (12, 9), (30, 33), (57, 41)]
    return [
        (
            "".join(rng.choice("ACGT") for _ in range(n)),
            "".join(rng.choice("ACGT") for _ in range(m)),
        )
        for n, m in lengths
    ]
