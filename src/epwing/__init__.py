from .decoder import ControlCode, TextDecoder, read_text
from .errors import (
    InvalidControlCodeError,
    InvalidEncodingError,
    SubbookError,
    SubbookIOError,
)
from .gaiji import GaijiMap, load_gaiji_map
from .indices import IndexLocation, Indices, read_indices
from .jis import decode_codepoint
from .subbook import PAGE_SIZE, Subbook
from .text import (
    CustomCharacter,
    Newline,
    Text,
    TextElement,
    UnicodeString,
    deserialize_text,
    serialize_text,
    to_plaintext,
)
from .width import UnicodeWidthService

__all__ = [
    "Subbook",
    "PAGE_SIZE",
    "IndexLocation",
    "Indices",
    "read_indices",
    "TextDecoder",
    "ControlCode",
    "read_text",
    "Text",
    "TextElement",
    "UnicodeString",
    "CustomCharacter",
    "Newline",
    "to_plaintext",
    "serialize_text",
    "deserialize_text",
    "decode_codepoint",
    "UnicodeWidthService",
    "GaijiMap",
    "load_gaiji_map",
    "SubbookError",
    "SubbookIOError",
    "InvalidEncodingError",
    "InvalidControlCodeError",
]
