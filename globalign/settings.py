"""Flat, dictionary-friendly aligner configuration."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping

from globalign.align import NeedlemanWunsch
from globalign.alphabet import get_alphabet
from globalign.scoring import GapModel, GapPenalty, SubstitutionMatrix

DEFAULT_SETTINGS: Dict[str, Any] = {
    # ==== GAP MODEL ====
    "gap_model": "affine",  # 'affine' or 'linear'
    "gap_open": -10,  # ignored by the linear model
    "gap_extend": -1,

    # ==== SUBSTITUTION SCORES ====
    "alphabet": "dna",  # 'dna', 'rna' or 'protein'
    "match": 1,
    "mismatch": -1,

    # ==== BEHAVIOUR ====
    "store_score_matrix": False,
    "strict": True,  # raise on missing inputs instead of skipping
}


@dataclass
class AlignerSettings:
    """Parameters for building a ``NeedlemanWunsch`` aligner."""

    gap_model: str = DEFAULT_SETTINGS["gap_model"]
    gap_open: int = DEFAULT_SETTINGS["gap_open"]
    gap_extend: int = DEFAULT_SETTINGS["gap_extend"]
    alphabet: str = DEFAULT_SETTINGS["alphabet"]
    match: int = DEFAULT_SETTINGS["match"]
    mismatch: int = DEFAULT_SETTINGS["mismatch"]
    store_score_matrix: bool = DEFAULT_SETTINGS["store_score_matrix"]
    strict: bool = DEFAULT_SETTINGS["strict"]

    def __post_init__(self):
        try:
            GapModel(self.gap_model)
        except ValueError:
            raise ValueError(
                f"gap_model must be one of {[m.value for m in GapModel]}, got {self.gap_model!r}"
            ) from None
        get_alphabet(self.alphabet)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AlignerSettings":
        """Create from a mapping; unknown keys are ignored."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def gap_penalty(self) -> GapPenalty:
        return GapPenalty(self.gap_open, self.gap_extend, GapModel(self.gap_model))

    def substitution_matrix(self) -> SubstitutionMatrix:
        return SubstitutionMatrix.identity(get_alphabet(self.alphabet), self.match, self.mismatch)


def build_aligner(settings: AlignerSettings | Mapping[str, Any] | None = None) -> NeedlemanWunsch:
    """Build an aligner from settings, a plain mapping, or the defaults."""
    if settings is None:
        settings = AlignerSettings()
    elif not isinstance(settings, AlignerSettings):
        settings = AlignerSettings.from_dict(settings)
    return NeedlemanWunsch(
        gap_penalty=settings.gap_penalty(),
        substitution_matrix=settings.substitution_matrix(),
        store_score_matrix=settings.store_score_matrix,
        strict=settings.strict,
    )
