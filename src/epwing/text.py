from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, Iterator, Mapping, Union

if TYPE_CHECKING:
    from .gaiji import GaijiMap

__all__ = [
    "UnicodeString",
    "CustomCharacter",
    "Newline",
    "TextElement",
    "Text",
    "TextBuilder",
    "to_plaintext",
    "serialize_text",
    "deserialize_text",
]


@dataclass(frozen=True, slots=True)
class UnicodeString:
    text: str


@dataclass(frozen=True, slots=True)
class CustomCharacter:
    """A raw double-byte code with no Unicode mapping (usually gaiji)."""

    code: int


@dataclass(frozen=True, slots=True)
class Newline:
    pass


TextElement = Union[UnicodeString, CustomCharacter, Newline]


@dataclass(frozen=True, slots=True)
class Text:
    """
    Decoded text in stream order.

    Adjacent characters are always coalesced, so two UnicodeString
    elements never sit next to each other.
    """

    elements: tuple[TextElement, ...] = ()

    def __iter__(self) -> Iterator[TextElement]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)

    def __getitem__(self, index: int) -> TextElement:
        return self.elements[index]

    def to_plaintext(self, gaiji: "GaijiMap | None" = None) -> str:
        return to_plaintext(self, gaiji)


@dataclass
class TextBuilder:
    """Collects elements while keeping an open run of decoded characters."""

    _elements: list[TextElement] = field(default_factory=list)
    _pending: list[str] = field(default_factory=list)

    def push_char(self, ch: str) -> None:
        self._pending.append(ch)

    def push_str(self, text: str) -> None:
        if text:
            self._pending.append(text)

    def push_custom(self, code: int) -> None:
        self._flush()
        self._elements.append(CustomCharacter(code))

    def push_newline(self) -> None:
        self._flush()
        self._elements.append(Newline())

    def _flush(self) -> None:
        if self._pending:
            self._elements.append(UnicodeString("".join(self._pending)))
            self._pending.clear()

    def build(self) -> Text:
        self._flush()
        return Text(tuple(self._elements))


def to_plaintext(text: Iterable[TextElement], gaiji: "GaijiMap | None" = None) -> str:
    """
    Flatten text for display.

    Custom characters have no plain-text form and are dropped unless
    ``gaiji`` supplies a replacement for their code.
    """
    out: list[str] = []
    for elem in text:
        if isinstance(elem, UnicodeString):
            out.append(elem.text)
        elif isinstance(elem, Newline):
            out.append("\n")
        elif isinstance(elem, CustomCharacter):
            if gaiji is not None:
                replacement = gaiji.lookup(elem.code)
                if replacement is not None:
                    out.append(replacement)
        else:
            raise TypeError(f"Unsupported text element: {elem!r}")
    return "".join(out)


def serialize_text(text: Iterable[TextElement]) -> list[dict[str, object]]:
    payload: list[dict[str, object]] = []
    for elem in text:
        if isinstance(elem, UnicodeString):
            payload.append({"type": "string", "text": elem.text})
        elif isinstance(elem, CustomCharacter):
            payload.append({"type": "custom", "code": elem.code})
        elif isinstance(elem, Newline):
            payload.append({"type": "newline"})
        else:
            raise TypeError(f"Unsupported text element: {elem!r}")
    return payload


def deserialize_text(data: Iterable[Mapping[str, object]]) -> Text:
    builder = TextBuilder()
    for entry in data:
        if not isinstance(entry, Mapping):
            continue
        kind = entry.get("type")
        if kind == "string":
            value = entry.get("text")
            if isinstance(value, str):
                builder.push_str(value)
        elif kind == "custom":
            code = entry.get("code")
            if isinstance(code, int) and 0 <= code <= 0xFFFF:
                builder.push_custom(code)
        elif kind == "newline":
            builder.push_newline()
    return builder.build()
