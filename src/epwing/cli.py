from __future__ import annotations

import argparse
import json
import sys
from importlib import metadata
from pathlib import Path

import tomllib
from rich.console import Console
from rich.table import Table

from .errors import SubbookError
from .gaiji import GaijiMap, GaijiMapError, default_gaiji_map_path, load_gaiji_map
from .indices import IndexLocation
from .logging_utils import set_debug_logging
from .subbook import PAGE_SIZE, Subbook
from .text import Text, serialize_text


def _read_local_version() -> str | None:
    try:
        pyproject_path = Path(__file__).resolve().parents[2] / "pyproject.toml"
    except IndexError:  # pragma: no cover
        return None
    try:
        with pyproject_path.open("rb") as fh:
            data = tomllib.load(fh)
    except (FileNotFoundError, tomllib.TOMLDecodeError):
        return None
    return data.get("project", {}).get("version")


try:
    __version__ = metadata.version("epwing")
except metadata.PackageNotFoundError:
    __version__ = _read_local_version() or "0.0.0+unknown"


def _add_version_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"epwing {__version__}",
    )


def _int_auto(value: str) -> int:
    try:
        return int(value, 0)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from exc


def _add_common_arguments(parser: argparse.ArgumentParser, *, text_output: bool = True) -> None:
    parser.add_argument("honmon", help="Path to the subbook text file (HONMON).")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print decoded elements as JSON instead of plain text.",
    )
    if text_output:
        parser.add_argument(
            "--gaiji-map",
            help=(
                "EBWin-style gaiji map used to render custom characters "
                "(default: $EPWING_GAIJI_MAP)."
            ),
        )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable verbose debug logging (index entries, seek offsets).",
    )


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Read text from EB/EPWING subbooks.")
    _add_version_flag(ap)
    subparsers = ap.add_subparsers(dest="command")

    indices = subparsers.add_parser("indices", help="List the sections found in the index table.")
    _add_common_arguments(indices, text_output=False)

    text = subparsers.add_parser("text", help="Decode the entry at PAGE/OFFSET.")
    _add_common_arguments(text)
    text.add_argument("page", type=_int_auto, help="1-based page number.")
    text.add_argument("offset", type=_int_auto, help="Byte offset within the page (hex accepted).")

    menu = subparsers.add_parser("menu", help="Decode the menu section.")
    _add_common_arguments(menu)

    copyright_parser = subparsers.add_parser("copyright", help="Decode the copyright section.")
    _add_common_arguments(copyright_parser)

    return ap


def _resolve_gaiji(args: argparse.Namespace) -> GaijiMap | None:
    raw_path = getattr(args, "gaiji_map", None)
    path = Path(raw_path).expanduser() if raw_path else default_gaiji_map_path()
    if path is None:
        return None
    try:
        return load_gaiji_map(path)
    except OSError as exc:
        raise SystemExit(f"Cannot read gaiji map {path}: {exc}") from exc
    except GaijiMapError as exc:
        raise SystemExit(f"Invalid gaiji map {path}: {exc}") from exc


def _open_subbook(path: str) -> Subbook:
    try:
        return Subbook.from_path(path)
    except SubbookError as exc:
        raise SystemExit(str(exc)) from exc


def _location_payload(location: IndexLocation | None) -> dict[str, int] | None:
    if location is None:
        return None
    return {"page": location.page, "length": location.length}


def _emit_text(text: Text, args: argparse.Namespace) -> None:
    if args.json:
        print(json.dumps(serialize_text(text), ensure_ascii=False, indent=2))
        return
    print(text.to_plaintext(_resolve_gaiji(args)))


def _run_indices(args: argparse.Namespace) -> int:
    with _open_subbook(args.honmon) as subbook:
        indices = subbook.indices
    sections = (("menu", indices.menu), ("copyright", indices.copyright))
    if args.json:
        payload = {name: _location_payload(location) for name, location in sections}
        print(json.dumps(payload, indent=2))
        return 0
    table = Table(title=Path(args.honmon).name)
    table.add_column("Section")
    table.add_column("Page", justify="right")
    table.add_column("Pages", justify="right")
    table.add_column("Offset", justify="right")
    for name, location in sections:
        if location is None:
            table.add_row(name, "-", "-", "-")
            continue
        offset = (location.page - 1) * PAGE_SIZE if location.page >= 1 else 0
        table.add_row(name, str(location.page), str(location.length), f"{offset:#x}")
    Console().print(table)
    return 0


def _run_text(args: argparse.Namespace) -> int:
    with _open_subbook(args.honmon) as subbook:
        try:
            text = subbook.read_text(args.page, args.offset)
        except (SubbookError, ValueError) as exc:
            raise SystemExit(str(exc)) from exc
    _emit_text(text, args)
    return 0


def _run_section(args: argparse.Namespace) -> int:
    with _open_subbook(args.honmon) as subbook:
        try:
            if args.command == "menu":
                text = subbook.read_menu()
            else:
                text = subbook.read_copyright()
        except (SubbookError, ValueError) as exc:
            raise SystemExit(str(exc)) from exc
    if text is None:
        raise SystemExit(f"No {args.command} section in {args.honmon}")
    _emit_text(text, args)
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    if not argv:
        parser.print_help()
        return 0

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 0

    set_debug_logging(bool(getattr(args, "debug", False)))
    if args.command == "indices":
        return _run_indices(args)
    if args.command == "text":
        return _run_text(args)
    return _run_section(args)


if __name__ == "__main__":
    raise SystemExit(main())
