from __future__ import annotations

from enum import IntEnum
from typing import BinaryIO

from .errors import InvalidControlCodeError
from .jis import CodepointResolver, decode_codepoint
from .logging_utils import debug_log
from .stream import read_be_u16, read_u8, tell
from .text import Text, TextBuilder
from .width import TextWidthService, UnicodeWidthService

__all__ = ["ESCAPE", "ControlCode", "TextDecoder", "read_text"]

ESCAPE = 0x1F


class ControlCode(IntEnum):
    START_TEXT = 0x02
    END_TEXT = 0x03
    START_NARROW = 0x04
    END_NARROW = 0x05
    NEWLINE = 0x0A
    BEGIN_KEYWORD = 0x41
    END_KEYWORD = 0x61


_CONTROL_CODES = {code.value for code in ControlCode}


class TextDecoder:
    """
    Byte-level decoder for subbook text.

    Text is a run of big-endian JIS X 0208 codes interleaved with
    ``0x1f``-prefixed control sequences. Decoding stops at End Text, or at
    a Begin Keyword that repeats the first keyword seen, which marks the
    start of the next entry in a packed page.
    """

    def __init__(
        self,
        resolver: CodepointResolver | None = None,
        width_service: TextWidthService | None = None,
    ) -> None:
        self.resolver = resolver or decode_codepoint
        self.width_service = width_service or UnicodeWidthService()

    def decode(self, stream: BinaryIO) -> Text:
        builder = TextBuilder()
        is_narrow = False
        delimiter_keyword: int | None = None
        started_at = tell(stream)

        while True:
            byte = read_u8(stream)
            if byte == ESCAPE:
                code = read_u8(stream)
                if code not in _CONTROL_CODES:
                    position = tell(stream)
                    raise InvalidControlCodeError(
                        code, position - 2 if position is not None else None
                    )
                control = ControlCode(code)
                if control is ControlCode.END_TEXT:
                    break
                if control is ControlCode.START_NARROW:
                    is_narrow = True
                elif control is ControlCode.END_NARROW:
                    is_narrow = False
                elif control is ControlCode.NEWLINE:
                    builder.push_newline()
                elif control is ControlCode.BEGIN_KEYWORD:
                    keyword = read_be_u16(stream)
                    if delimiter_keyword == keyword:
                        debug_log(f"keyword {keyword:#06x} repeated, next entry reached")
                        break
                    if delimiter_keyword is None:
                        delimiter_keyword = keyword
                # START_TEXT and END_KEYWORD carry no state.
                continue

            other = read_u8(stream)
            codepoint = (byte << 8) | other
            ch = self.resolver(codepoint)
            if ch is None:
                builder.push_custom(codepoint)
                continue
            if is_narrow and self.width_service.width(ch, True) == 2:
                # Approximation: any compatibility decomposition is taken,
                # not only the half-width form.
                ch = self.width_service.decompose_compatible(ch)
            builder.push_char(ch)

        text = builder.build()
        if started_at is not None:
            debug_log(f"decoded {len(text)} elements from offset {started_at:#x}")
        return text


def read_text(stream: BinaryIO) -> Text:
    """Decode one entry with the default JIS X 0208 and width tables."""
    return TextDecoder().decode(stream)
