"""
Globalign: pairwise global sequence alignment (Needleman-Wunsch / Gotoh).

Linear or affine gap costs, integer substitution matrices, and a
deterministic "highroad" choice among equally scoring alignments.
"""

__version__ = "0.1.0"

from globalign.alphabet import Alphabet, Sequence, DNA, RNA, PROTEIN, get_alphabet
from globalign.scoring import GapModel, GapPenalty, SubstitutionMatrix, rescore
from globalign.pair import GAP, Step, AlignedSequence, SequencePair
from globalign.align import NeedlemanWunsch, AlignmentResult
from globalign.metrics import compute_metrics, AlignmentMetrics
from globalign.settings import AlignerSettings, build_aligner
from globalign.errors import (
    AlignmentError,
    ConfigurationError,
    NumericRangeError,
    TracebackError,
)

__all__ = [
    "NeedlemanWunsch",
    "AlignmentResult",
    "Alphabet",
    "Sequence",
    "DNA",
    "RNA",
    "PROTEIN",
    "get_alphabet",
    "GapModel",
    "GapPenalty",
    "SubstitutionMatrix",
    "rescore",
    "GAP",
    "Step",
    "AlignedSequence",
    "SequencePair",
    "compute_metrics",
    "AlignmentMetrics",
    "AlignerSettings",
    "build_aligner",
    "AlignmentError",
    "ConfigurationError",
    "NumericRangeError",
    "TracebackError",
]
