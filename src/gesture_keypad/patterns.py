"""Gesture pattern → input symbol lookup.

A finished gesture pattern such as "UL" or "R" decodes to one keypad
symbol: a digit, delete, or the block separator. The default layout
arranges the digits like a phone keypad around the four directions:

    UL=1   U=2   UR=3
    LU=4   L=5   LD=6
    RU=7   R=8   RD=9
    DL=DEL D=0   DR=.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SymbolKind(Enum):
    DIGIT = "digit"
    DELETE = "delete"
    SEPARATOR = "separator"
    INVALID = "invalid"


@dataclass(frozen=True)
class Symbol:
    """Decoded meaning of a gesture pattern."""
    kind: SymbolKind
    digit: Optional[int] = None

    @classmethod
    def digit_of(cls, value: int) -> Symbol:
        if not 0 <= value <= 9:
            raise ValueError(f"digit out of range: {value!r}")
        return cls(SymbolKind.DIGIT, value)

    @property
    def is_valid(self) -> bool:
        return self.kind is not SymbolKind.INVALID

    @property
    def glyph(self) -> str:
        """Text shown for the symbol in a pending-input preview."""
        if self.kind is SymbolKind.DIGIT:
            return str(self.digit)
        if self.kind is SymbolKind.DELETE:
            return "DEL"
        if self.kind is SymbolKind.SEPARATOR:
            return "."
        return ""

    @property
    def label(self) -> str:
        """Name used in config files and metrics ("0"-"9", "delete", "separator")."""
        if self.kind is SymbolKind.DIGIT:
            return str(self.digit)
        return self.kind.value

    @classmethod
    def from_label(cls, label) -> Symbol:
        text = str(label).strip().lower()
        if text == "delete":
            return DELETE
        if text == "separator":
            return SEPARATOR
        if len(text) == 1 and text.isdigit():
            return cls.digit_of(int(text))
        raise ValueError(f"unknown symbol label: {label!r}")


DELETE = Symbol(SymbolKind.DELETE)
SEPARATOR = Symbol(SymbolKind.SEPARATOR)
INVALID = Symbol(SymbolKind.INVALID)

DEFAULT_PATTERNS: dict[str, str] = {
    "UL": "1",
    "U": "2",
    "UR": "3",
    "LU": "4",
    "L": "5",
    "LD": "6",
    "RU": "7",
    "R": "8",
    "RD": "9",
    "DL": "delete",
    "D": "0",
    "DR": "separator",
}

_PATTERN_LETTERS = frozenset("UDLR")


class GesturePatternMap:
    """Stateless lookup from gesture pattern to Symbol.

    Unknown, empty, or over-long patterns decode to INVALID.
    """

    MAX_PATTERN_LENGTH = 2

    def __init__(self, table: Optional[dict[str, Symbol]] = None):
        self._table: dict[str, Symbol] = {}
        for pattern, symbol in (table or {}).items():
            self._add(pattern, symbol)

    def _add(self, pattern: str, symbol: Symbol):
        if (
            not pattern
            or len(pattern) > self.MAX_PATTERN_LENGTH
            or not set(pattern) <= _PATTERN_LETTERS
        ):
            raise ValueError(f"invalid gesture pattern: {pattern!r}")
        if not symbol.is_valid:
            raise ValueError(f"pattern {pattern!r} cannot map to an invalid symbol")
        self._table[pattern] = symbol

    def lookup(self, pattern: str) -> Symbol:
        return self._table.get(pattern, INVALID)

    __call__ = lookup

    def pattern_for(self, symbol: Symbol) -> Optional[str]:
        """Reverse lookup: first pattern producing `symbol`, or None."""
        for pattern, sym in self._table.items():
            if sym == symbol:
                return pattern
        return None

    @property
    def patterns(self) -> list[str]:
        return list(self._table.keys())

    def to_dict(self) -> dict[str, str]:
        return {p: s.label for p, s in self._table.items()}

    @classmethod
    def from_dict(cls, data: dict) -> GesturePatternMap:
        """Build a map from {pattern: label}, e.g. {"UL": "1", "DL": "delete"}."""
        return cls({str(p).upper(): Symbol.from_label(label) for p, label in data.items()})

    @classmethod
    def with_defaults(cls) -> GesturePatternMap:
        return cls.from_dict(DEFAULT_PATTERNS)

    def __len__(self) -> int:
        return len(self._table)
