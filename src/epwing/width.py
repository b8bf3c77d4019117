from __future__ import annotations

import unicodedata
from typing import Protocol

__all__ = ["TextWidthService", "UnicodeWidthService", "char_width", "decompose_compatible"]

_WIDE_CLASSES = {"F", "W"}
_ZERO_WIDTH_CATEGORIES = {"Cc", "Cf", "Cs", "Co", "Cn"}


class TextWidthService(Protocol):
    def width(self, ch: str, is_cjk: bool) -> int | None: ...

    def decompose_compatible(self, ch: str) -> str: ...


def char_width(ch: str, is_cjk: bool = False) -> int | None:
    """
    Display width in columns, or None for control and unassigned characters.

    Ambiguous-width characters count as wide only in an East Asian context.
    """
    if unicodedata.category(ch) in _ZERO_WIDTH_CATEGORIES:
        return None
    if unicodedata.combining(ch):
        return 0
    east_asian = unicodedata.east_asian_width(ch)
    if east_asian in _WIDE_CLASSES:
        return 2
    if east_asian == "A" and is_cjk:
        return 2
    return 1


def decompose_compatible(ch: str) -> str:
    """
    Return the last scalar of the compatibility decomposition of ``ch``.

    This is only an approximation of a half-width mapping: voiced kana
    decompose to base + combining mark and keep just the mark.
    """
    decomposed = unicodedata.normalize("NFKD", ch)
    if not decomposed:
        return ch
    return decomposed[-1]


class UnicodeWidthService:
    """Width service backed by the interpreter's unicodedata tables."""

    def width(self, ch: str, is_cjk: bool) -> int | None:
        return char_width(ch, is_cjk)

    def decompose_compatible(self, ch: str) -> str:
        return decompose_compatible(ch)
