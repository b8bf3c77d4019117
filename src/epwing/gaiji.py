"""EBWin-style gaiji maps: replacements for custom characters."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path

__all__ = [
    "GAIJI_MAP_ENV",
    "GaijiMap",
    "GaijiMapError",
    "default_gaiji_map_path",
    "load_gaiji_map",
    "parse_gaiji_map",
]

GAIJI_MAP_ENV = "EPWING_GAIJI_MAP"
GAIJI_MAP_ENCODING = "cp932"

_FIELD_SPLIT = re.compile(r"[ \t]+")


class GaijiMapError(ValueError):
    """Raised when a gaiji map line cannot be parsed."""


@dataclass(slots=True)
class GaijiMap:
    wide: dict[int, str] = field(default_factory=dict)
    narrow: dict[int, str] = field(default_factory=dict)

    def lookup(self, code: int) -> str | None:
        """
        Replacement text for ``code``, or None.

        Narrow and wide gaiji can share codes; the wide entry wins, even for
        a character decoded in narrow mode.
        """
        if code in self.wide:
            return self.wide[code]
        return self.narrow.get(code)

    def __len__(self) -> int:
        return len(self.wide) + len(self.narrow)


def default_gaiji_map_path() -> Path | None:
    env_path = os.environ.get(GAIJI_MAP_ENV)
    if env_path:
        return Path(env_path).expanduser()
    return None


def _parse_code(token: str, line_no: int) -> int:
    try:
        value = int(token, 16)
    except ValueError as exc:
        raise GaijiMapError(f"line {line_no}: invalid code {token!r}") from exc
    if not 0 <= value <= 0xFFFF:
        raise GaijiMapError(f"line {line_no}: code {token!r} is out of range")
    return value


def parse_gaiji_map(lines: list[str] | str) -> GaijiMap:
    """
    Parse map lines of the form ``hA121 u00E9`` (narrow) or ``zB021 u2460`` (wide).

    Targets written as ``-`` or as comma-separated sequences have no single
    replacement and are skipped, as are mappings to a plain space.
    """
    if isinstance(lines, str):
        lines = lines.splitlines()
    gaiji = GaijiMap()
    for line_no, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        parts = _FIELD_SPLIT.split(line.strip())
        if len(parts) < 2:
            continue
        source, target = parts[0], parts[1]
        if target == "-" or "," in target:
            continue
        kind = source[:1].lower()
        if kind not in {"h", "z"}:
            raise GaijiMapError(f"line {line_no}: expected h/z prefix, got {source!r}")
        code = _parse_code(source[1:], line_no)
        if target[:1].lower() != "u":
            raise GaijiMapError(f"line {line_no}: expected uXXXX target, got {target!r}")
        try:
            scalar = int(target[1:], 16)
        except ValueError as exc:
            raise GaijiMapError(f"line {line_no}: invalid target {target!r}") from exc
        if scalar == 0x20:
            continue
        try:
            replacement = chr(scalar)
        except (ValueError, OverflowError) as exc:
            raise GaijiMapError(f"line {line_no}: target {target!r} is not a code point") from exc
        if kind == "z":
            gaiji.wide[code] = replacement
        else:
            gaiji.narrow[code] = replacement
    return gaiji


def load_gaiji_map(path: str | Path) -> GaijiMap:
    text = Path(path).read_text(encoding=GAIJI_MAP_ENCODING)
    return parse_gaiji_map(text)
