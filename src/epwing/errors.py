from __future__ import annotations

__all__ = [
    "SubbookError",
    "SubbookIOError",
    "InvalidEncodingError",
    "InvalidControlCodeError",
]


class SubbookError(RuntimeError):
    """Base class for failures while reading a subbook."""


class SubbookIOError(SubbookError):
    """Raised when the underlying stream fails, ends early, or cannot seek."""


class InvalidEncodingError(SubbookError):
    """Reserved for malformed text encodings; nothing raises it yet."""


class InvalidControlCodeError(SubbookError):
    """Raised when an escape sequence uses an unknown control byte."""

    def __init__(self, code: int, offset: int | None = None) -> None:
        self.code = code
        self.offset = offset
        location = f" at offset {offset:#x}" if offset is not None else ""
        super().__init__(f"Invalid control code {code:#04x}{location}")
