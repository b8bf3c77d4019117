"""Seek/read helpers that turn stream failures into SubbookIOError."""

from __future__ import annotations

import io
import struct
from typing import BinaryIO

from .errors import SubbookIOError

__all__ = ["seek_to", "tell", "read_exact", "read_u8", "read_be_u16", "read_be_u32"]

_U16 = struct.Struct(">H")
_U32 = struct.Struct(">I")


def seek_to(stream: BinaryIO, offset: int) -> None:
    try:
        stream.seek(offset, io.SEEK_SET)
    except (OSError, ValueError) as exc:
        raise SubbookIOError(f"Cannot seek to offset {offset:#x}: {exc}") from exc


def tell(stream: BinaryIO) -> int | None:
    try:
        return stream.tell()
    except (OSError, ValueError):
        return None


def read_exact(stream: BinaryIO, size: int) -> bytes:
    try:
        data = stream.read(size)
    except (OSError, ValueError) as exc:
        raise SubbookIOError(f"Read of {size} bytes failed: {exc}") from exc
    if data is None or len(data) != size:
        got = 0 if data is None else len(data)
        position = tell(stream)
        where = f" near offset {position:#x}" if position is not None else ""
        raise SubbookIOError(f"Unexpected end of stream{where}: wanted {size} bytes, got {got}")
    return data


def read_u8(stream: BinaryIO) -> int:
    return read_exact(stream, 1)[0]


def read_be_u16(stream: BinaryIO) -> int:
    return _U16.unpack(read_exact(stream, 2))[0]


def read_be_u32(stream: BinaryIO) -> int:
    return _U32.unpack(read_exact(stream, 4))[0]
