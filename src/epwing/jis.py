"""JIS X 0208 lookups for the double-byte codes used in subbook text."""

from __future__ import annotations

from typing import Protocol

__all__ = ["CodepointResolver", "decode_codepoint"]

_EUC_OFFSET = 0x8080
_ROW_MIN = 0x21
_ROW_MAX = 0x7E


class CodepointResolver(Protocol):
    def __call__(self, code: int) -> str | None: ...


def decode_codepoint(code: int) -> str | None:
    """
    Map a 16-bit JIS X 0208 code to a single character.

    Codes outside the 94x94 grid (gaiji live in the high-bit ranges) and
    unassigned cells return None.
    """
    high = (code >> 8) & 0xFF
    low = code & 0xFF
    if not (_ROW_MIN <= high <= _ROW_MAX and _ROW_MIN <= low <= _ROW_MAX):
        return None
    raw = (code | _EUC_OFFSET).to_bytes(2, "big")
    try:
        decoded = raw.decode("euc_jp")
    except UnicodeDecodeError:
        return None
    if len(decoded) != 1:
        return None
    return decoded
