from __future__ import annotations

import json
import struct
from pathlib import Path

import pytest

import epwing.cli as cli
from epwing.subbook import PAGE_SIZE


def _write_honmon(path: Path, *, with_copyright: bool = False) -> Path:
    data = bytearray(PAGE_SIZE * 4)
    entries = [(0x01, 2, 1)]
    if with_copyright:
        entries.append((0x02, 4, 1))
    data[1] = len(entries)
    for i, (index_id, start, count) in enumerate(entries):
        struct.pack_into(">BBIIB", data, 16 + i * 16, index_id, 0, start, count, 0x01)
    menu = b"\x1f\x02\x24\x22\x1f\x0a\xb0\x21\x24\x24\x1f\x03"
    data[PAGE_SIZE : PAGE_SIZE + len(menu)] = menu
    entry = b"\x1f\x41\x00\x07\x23\x41\x1f\x61\x1f\x41\x00\x07"
    data[0x1010 : 0x1010 + len(entry)] = entry
    path.write_bytes(bytes(data))
    return path


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("EPWING_GAIJI_MAP", raising=False)
    monkeypatch.setattr("epwing.logging_utils._DEBUG_LOG", False)


def test_no_arguments_prints_help(capsys) -> None:
    assert cli.main([]) == 0
    assert "usage" in capsys.readouterr().out


def test_text_command_prints_plaintext(tmp_path: Path, capsys) -> None:
    honmon = _write_honmon(tmp_path / "HONMON")

    assert cli.main(["text", str(honmon), "3", "0x10"]) == 0

    assert capsys.readouterr().out == "Ａ\n"


def test_menu_command_skips_custom_characters(tmp_path: Path, capsys) -> None:
    honmon = _write_honmon(tmp_path / "HONMON")

    assert cli.main(["menu", str(honmon)]) == 0

    assert capsys.readouterr().out == "あ\nい\n"


def test_menu_command_uses_gaiji_map_from_environment(tmp_path: Path, monkeypatch, capsys) -> None:
    honmon = _write_honmon(tmp_path / "HONMON")
    gaiji_map = tmp_path / "BOOK.map"
    gaiji_map.write_text("zB021\tu2460\n", encoding="cp932")
    monkeypatch.setenv("EPWING_GAIJI_MAP", str(gaiji_map))

    assert cli.main(["menu", str(honmon)]) == 0

    assert capsys.readouterr().out == "あ\n①い\n"


def test_menu_command_json_output(tmp_path: Path, capsys) -> None:
    honmon = _write_honmon(tmp_path / "HONMON")

    assert cli.main(["menu", str(honmon), "--json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload == [
        {"type": "string", "text": "あ"},
        {"type": "newline"},
        {"type": "custom", "code": 0xB021},
        {"type": "string", "text": "い"},
    ]


def test_missing_copyright_section_exits(tmp_path: Path) -> None:
    honmon = _write_honmon(tmp_path / "HONMON")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["copyright", str(honmon)])
    assert "No copyright section" in str(excinfo.value)


def test_indices_command_json(tmp_path: Path, capsys) -> None:
    honmon = _write_honmon(tmp_path / "HONMON", with_copyright=True)

    assert cli.main(["indices", str(honmon), "--json"]) == 0

    payload = json.loads(capsys.readouterr().out)
    assert payload == {
        "menu": {"page": 2, "length": 1},
        "copyright": {"page": 4, "length": 1},
    }


def test_indices_command_table(tmp_path: Path, capsys) -> None:
    honmon = _write_honmon(tmp_path / "HONMON")

    assert cli.main(["indices", str(honmon)]) == 0

    out = capsys.readouterr().out
    assert "menu" in out
    assert "0x800" in out
    assert "copyright" in out


def test_text_command_reports_bad_page(tmp_path: Path) -> None:
    honmon = _write_honmon(tmp_path / "HONMON")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["text", str(honmon), "0", "0"])
    assert "Page numbers start at 1" in str(excinfo.value)


def test_missing_honmon_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["menu", str(tmp_path / "missing")])
    assert "Cannot open subbook" in str(excinfo.value)


def test_invalid_gaiji_map_exits(tmp_path: Path) -> None:
    honmon = _write_honmon(tmp_path / "HONMON")
    gaiji_map = tmp_path / "BOOK.map"
    gaiji_map.write_text("qB021\tu2460\n", encoding="cp932")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["menu", str(honmon), "--gaiji-map", str(gaiji_map)])
    assert "Invalid gaiji map" in str(excinfo.value)


def test_debug_flag_logs_seek_offsets(tmp_path: Path, capsys) -> None:
    honmon = _write_honmon(tmp_path / "HONMON")

    assert cli.main(["text", str(honmon), "3", "16", "--debug"]) == 0

    captured = capsys.readouterr()
    assert "[epwing debug] reading text at page 3 offset 0x10 (0x1010)" in captured.err
    assert captured.out == "Ａ\n"


@pytest.mark.parametrize(
    "argv",
    [
        ["indices", "--json", "--debug"],
        ["menu", "--json", "--debug"],
        ["text", "3", "0x10", "--json", "--debug"],
    ],
)
def test_debug_output_keeps_json_parseable(tmp_path: Path, capsys, argv: list[str]) -> None:
    honmon = _write_honmon(tmp_path / "HONMON")
    command, *rest = argv

    assert cli.main([command, str(honmon), *rest]) == 0

    captured = capsys.readouterr()
    assert json.loads(captured.out)
    assert "[epwing debug] index table: 1 entries" in captured.err
