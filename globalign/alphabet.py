"""Symbol alphabets and the immutable sequences aligned over them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterator, Mapping, Optional


@dataclass(frozen=True)
class Alphabet:
    """A named, case-insensitive set of symbols.

    *ambiguity* maps a symbol to the primitive symbols it stands for
    (IUPAC style, ``"R": "AG"``).  Symbols missing from the map stand for
    themselves.  Two symbols are *equivalent* when the primitive sets they
    stand for overlap.
    """

    name: str
    symbols: str
    ambiguity: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        symbols = self.symbols.upper()
        if len(set(symbols)) != len(symbols):
            raise ValueError(f"Alphabet {self.name!r} has duplicate symbols")
        ambiguity = {k.upper(): v.upper() for k, v in self.ambiguity.items()}
        unknown = set(ambiguity) - set(symbols)
        if unknown:
            raise ValueError(f"Ambiguity codes {sorted(unknown)} are not in alphabet {self.name!r}")
        object.__setattr__(self, "symbols", symbols)
        object.__setattr__(self, "ambiguity", ambiguity)
        object.__setattr__(self, "_index", {s: i for i, s in enumerate(symbols)})

    def __len__(self) -> int:
        return len(self.symbols)

    def __iter__(self) -> Iterator[str]:
        return iter(self.symbols)

    def __contains__(self, symbol: object) -> bool:
        return isinstance(symbol, str) and symbol.upper() in self._index

    def __hash__(self) -> int:
        return hash((self.name, self.symbols))

    def index(self, symbol: str) -> int:
        """Return the 0-based position of *symbol* (case-insensitive)."""
        try:
            return self._index[symbol.upper()]
        except KeyError:
            raise ValueError(f"Symbol {symbol!r} is not in alphabet {self.name!r}") from None

    def expand(self, symbol: str) -> FrozenSet[str]:
        """Primitive symbols that *symbol* stands for."""
        s = symbol.upper()
        return frozenset(self.ambiguity.get(s, s))

    @staticmethod
    def equal(a: Optional[str], b: Optional[str]) -> bool:
        """Case-insensitive symbol equality."""
        if a is None or b is None:
            return False
        return a.upper() == b.upper()

    def equivalent(self, a: Optional[str], b: Optional[str]) -> bool:
        """True when *a* and *b* are equal or share a primitive symbol."""
        if a is None or b is None or a not in self or b not in self:
            return False
        return self.equal(a, b) or bool(self.expand(a) & self.expand(b))


_NUCLEOTIDE_CODES = {
    "R": "AG", "Y": "CT", "S": "CG", "W": "AT", "K": "GT", "M": "AC",
    "B": "CGT", "D": "AGT", "H": "ACT", "V": "ACG", "N": "ACGT",
}

_AMINO_ACIDS = "ACDEFGHIKLMNPQRSTVWY"

DNA = Alphabet("dna", "ACGT" + "".join(_NUCLEOTIDE_CODES), _NUCLEOTIDE_CODES)

RNA = Alphabet(
    "rna",
    "ACGU" + "".join(_NUCLEOTIDE_CODES),
    {code: bases.replace("T", "U") for code, bases in _NUCLEOTIDE_CODES.items()},
)

PROTEIN = Alphabet(
    "protein",
    _AMINO_ACIDS + "BZJXUO*",
    {"B": "DN", "Z": "EQ", "J": "IL", "X": _AMINO_ACIDS},
)

ALPHABETS: Dict[str, Alphabet] = {a.name: a for a in (DNA, RNA, PROTEIN)}


def get_alphabet(name: str) -> Alphabet:
    """Look up a built-in alphabet by name (``dna``, ``rna`` or ``protein``)."""
    try:
        return ALPHABETS[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown alphabet {name!r}; expected one of {sorted(ALPHABETS)}") from None


@dataclass(frozen=True)
class Sequence:
    """A named biological sequence over an alphabet, indexed from 1."""

    seq: str
    alphabet: Alphabet = DNA
    name: str = ""

    def __post_init__(self):
        unknown = sorted({ch for ch in self.seq if ch not in self.alphabet})
        if unknown:
            raise ValueError(
                f"Sequence {self.name!r} has symbols {unknown} outside alphabet {self.alphabet.name!r}"
            )

    def __len__(self) -> int:
        return len(self.seq)

    def __iter__(self) -> Iterator[str]:
        return iter(self.seq)

    def __str__(self) -> str:
        return self.seq

    def element_at(self, index: int) -> str:
        """Return the symbol at 1-based *index*."""
        if not 1 <= index <= len(self.seq):
            raise IndexError(f"Sequence index {index} outside 1..{len(self.seq)}")
        return self.seq[index - 1]
