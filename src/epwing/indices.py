from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO

from .logging_utils import debug_log
from .stream import read_be_u32, read_u8, seek_to

__all__ = [
    "IndexLocation",
    "Indices",
    "read_indices",
    "INDEX_COUNT_OFFSET",
    "GLOBAL_AVAILABILITY_OFFSET",
    "INDEX_TABLE_OFFSET",
    "INDEX_ENTRY_SIZE",
    "SECTION_MENU",
    "SECTION_COPYRIGHT",
]

INDEX_COUNT_OFFSET = 1
GLOBAL_AVAILABILITY_OFFSET = 4
INDEX_TABLE_OFFSET = 16
INDEX_ENTRY_SIZE = 16

# Field offsets within a single index entry.
_ENTRY_ID = 0
_ENTRY_START_PAGE = 2
_ENTRY_PAGE_COUNT = 6
_ENTRY_AVAILABILITY = 10

SECTION_MENU = 0x01
SECTION_COPYRIGHT = 0x02


@dataclass(frozen=True, slots=True)
class IndexLocation:
    """A section's 1-based start page and its length in pages."""

    page: int
    length: int


@dataclass(frozen=True, slots=True)
class Indices:
    menu: IndexLocation | None = None
    copyright: IndexLocation | None = None


def read_indices(stream: BinaryIO) -> Indices:
    """
    Parse the index table at the start of a subbook.

    Every field is read at its absolute offset, so the stream position on
    entry does not matter. Unknown section ids are ignored; when an id is
    repeated the later entry wins. Both availability flags are read so a
    truncated header still fails, but neither is used.
    """
    seek_to(stream, INDEX_COUNT_OFFSET)
    n_indices = read_u8(stream)

    seek_to(stream, GLOBAL_AVAILABILITY_OFFSET)
    global_avail = read_u8(stream)
    debug_log(f"index table: {n_indices} entries, global availability {global_avail:#04x}")

    menu: IndexLocation | None = None
    copyright_location: IndexLocation | None = None

    for i in range(n_indices):
        base = INDEX_TABLE_OFFSET + i * INDEX_ENTRY_SIZE

        seek_to(stream, base + _ENTRY_ID)
        index_id = read_u8(stream)
        seek_to(stream, base + _ENTRY_START_PAGE)
        start_page = read_be_u32(stream)
        seek_to(stream, base + _ENTRY_PAGE_COUNT)
        page_count = read_be_u32(stream)
        seek_to(stream, base + _ENTRY_AVAILABILITY)
        avail = read_u8(stream)

        debug_log(
            f"index entry {i}: id={index_id:#04x} start={start_page} "
            f"pages={page_count} availability={avail:#04x}"
        )

        location = IndexLocation(page=start_page, length=page_count)
        if index_id == SECTION_MENU:
            menu = location
        elif index_id == SECTION_COPYRIGHT:
            copyright_location = location

    return Indices(menu=menu, copyright=copyright_location)
