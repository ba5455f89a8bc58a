"""Summary statistics for a pairwise alignment."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Dict, Optional, Union

from globalign.pair import SequencePair

if TYPE_CHECKING:
    from globalign.align import AlignmentResult


@dataclass
class AlignmentMetrics:
    """Column counts and ratios for a single alignment."""

    # Basic metrics
    alignment_length: int = 0
    identicals: int = 0
    similars: int = 0
    mismatches: int = 0  # element/element columns that are not identical
    query_gaps: int = 0  # columns with a gap in the query row
    target_gaps: int = 0  # columns with a gap in the target row
    gap_openings: int = 0

    # Derived metrics
    identity: float = 0.0  # identicals / alignment_length
    similarity: float = 0.0  # similars / alignment_length
    gap_rate: float = 0.0  # (query_gaps + target_gaps) / alignment_length

    # Fraction of each sequence aligned opposite a symbol, not a gap
    query_coverage: float = 0.0
    target_coverage: float = 0.0

    score: Optional[int] = None

    def to_dict(self) -> Dict:
        """Convert metrics to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict) -> "AlignmentMetrics":
        """Create from dictionary."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


def compute_metrics(
    alignment: Union["AlignmentResult", SequencePair],
    score: Optional[int] = None,
) -> AlignmentMetrics:
    """Compute metrics for an alignment result or a bare sequence pair.

    The score is taken from *alignment* when it is an ``AlignmentResult``
    and *score* is not given.
    """
    if isinstance(alignment, SequencePair):
        pair = alignment
    else:
        pair = alignment.pair
        if score is None:
            score = alignment.score

    length = len(pair)
    query_gaps = pair.query.num_gaps
    target_gaps = pair.target.num_gaps
    aligned_columns = length - query_gaps - target_gaps
    identicals = pair.identity_count
    denom = max(length, 1)

    return AlignmentMetrics(
        alignment_length=length,
        identicals=identicals,
        similars=pair.similarity_count,
        mismatches=aligned_columns - identicals,
        query_gaps=query_gaps,
        target_gaps=target_gaps,
        gap_openings=pair.query.num_gap_runs + pair.target.num_gap_runs,
        identity=identicals / denom,
        similarity=pair.similarity_count / denom,
        gap_rate=(query_gaps + target_gaps) / denom,
        query_coverage=aligned_columns / max(len(pair.query.original), 1),
        target_coverage=aligned_columns / max(len(pair.target.original), 1),
        score=score,
    )
