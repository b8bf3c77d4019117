from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

from .decoder import TextDecoder
from .errors import SubbookIOError
from .indices import IndexLocation, Indices, read_indices
from .jis import CodepointResolver
from .logging_utils import debug_log
from .stream import seek_to
from .text import Text
from .width import TextWidthService

__all__ = ["PAGE_SIZE", "MAX_PAGE_OFFSET", "Subbook", "page_offset"]

PAGE_SIZE = 0x800
MAX_PAGE_OFFSET = 0xFFFF


def page_offset(page: int, offset: int) -> int:
    """Absolute byte position of ``offset`` within 1-based ``page``."""
    if page < 1:
        raise ValueError(f"Page numbers start at 1, got {page}")
    if not 0 <= offset <= MAX_PAGE_OFFSET:
        raise ValueError(f"Offset must be within 0..{MAX_PAGE_OFFSET:#x}, got {offset}")
    return (page - 1) * PAGE_SIZE + offset


class Subbook:
    """
    One dictionary volume backed by a seekable binary stream.

    The index table is parsed once when the subbook is opened. Every text
    request seeks the owned stream and decodes from scratch, so a single
    instance must not serve concurrent reads.
    """

    def __init__(
        self,
        stream: BinaryIO,
        indices: Indices,
        *,
        decoder: TextDecoder | None = None,
    ) -> None:
        self._stream = stream
        self._indices = indices
        self._decoder = decoder or TextDecoder()

    @classmethod
    def open(
        cls,
        stream: BinaryIO,
        *,
        resolver: CodepointResolver | None = None,
        width_service: TextWidthService | None = None,
    ) -> "Subbook":
        indices = read_indices(stream)
        decoder = TextDecoder(resolver=resolver, width_service=width_service)
        return cls(stream, indices, decoder=decoder)

    @classmethod
    def from_path(
        cls,
        path: str | Path,
        *,
        resolver: CodepointResolver | None = None,
        width_service: TextWidthService | None = None,
    ) -> "Subbook":
        try:
            stream = open(path, "rb")
        except OSError as exc:
            raise SubbookIOError(f"Cannot open subbook {path}: {exc}") from exc
        try:
            return cls.open(stream, resolver=resolver, width_service=width_service)
        except BaseException:
            stream.close()
            raise

    @property
    def indices(self) -> Indices:
        return self._indices

    def read_text(self, page: int, offset: int) -> Text:
        position = page_offset(page, offset)
        debug_log(f"reading text at page {page} offset {offset:#x} ({position:#x})")
        seek_to(self._stream, position)
        return self._decoder.decode(self._stream)

    def read_section(self, location: IndexLocation | None) -> Text | None:
        if location is None:
            return None
        return self.read_text(location.page, 0)

    def read_menu(self) -> Text | None:
        return self.read_section(self._indices.menu)

    def read_copyright(self) -> Text | None:
        return self.read_section(self._indices.copyright)

    def close(self) -> None:
        self._stream.close()

    @property
    def closed(self) -> bool:
        return bool(getattr(self._stream, "closed", False))

    def __enter__(self) -> "Subbook":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Subbook(stream=..., indices={self._indices!r})"
