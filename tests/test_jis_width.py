from __future__ import annotations

import pytest

from epwing.jis import decode_codepoint
from epwing.width import UnicodeWidthService, char_width, decompose_compatible


@pytest.mark.parametrize(
    "code, expected",
    [
        (0x2422, "あ"),
        (0x2341, "Ａ"),
        (0x2330, "０"),
        (0x3021, "亜"),
        (0x2121, "　"),
    ],
)
def test_decode_codepoint(code: int, expected: str) -> None:
    assert decode_codepoint(code) == expected


@pytest.mark.parametrize("code", [0x0000, 0x2020, 0x217F, 0xA121, 0xB021, 0xFFFF, 0x1F02])
def test_codes_outside_jis_grid_are_unresolved(code: int) -> None:
    assert decode_codepoint(code) is None


def test_char_width() -> None:
    assert char_width("あ") == 2
    assert char_width("Ａ") == 2
    assert char_width("A") == 1
    assert char_width("\x07") is None
    assert char_width("±") == 1
    assert char_width("±", is_cjk=True) == 2


def test_decompose_compatible() -> None:
    assert decompose_compatible("Ａ") == "A"
    assert decompose_compatible("あ") == "あ"
    assert decompose_compatible("が") == "\u3099"


def test_unicode_width_service_delegates() -> None:
    service = UnicodeWidthService()

    assert service.width("±", True) == 2
    assert service.decompose_compatible("１") == "1"
