from __future__ import annotations

from pathlib import Path

from openpyxl import Workbook as OpenpyxlBook
import pytest

from xlbridge import cli
from xlbridge.cli import build_parser, main


def _write_book(path: Path) -> Path:
    book = OpenpyxlBook()
    data = book.active
    data.title = "Data"
    for row in range(1, 11):
        for column in range(1, 4):
            data.cell(row=row, column=column, value=row * column)
    notes = book.create_sheet("Notes")
    notes["A1"] = "todo"
    book.save(path)
    return path


def test_parser_requires_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_info_lists_sheets(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write_book(tmp_path / "book.xlsx")
    assert main(["info", str(path)]) == 0
    assert capsys.readouterr().out.splitlines() == [
        "backend: openpyxl",
        "sheet: Data A1:C10",
        "sheet: Notes A1:A1",
    ]


def test_pages_skips_known_ranges(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = _write_book(tmp_path / "book.xlsx")
    exit_code = main(
        [
            "pages",
            str(path),
            "--sheet",
            "Data",
            "--page-size",
            "9",
            "--known",
            "$A$1:$C$3",
        ]
    )
    assert exit_code == 0
    assert capsys.readouterr().out.splitlines() == [
        "backend: openpyxl",
        "A4:C6",
        "A7:C9",
        "A10:C10",
    ]


def test_pages_uses_configured_page_size(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("XLBRIDGE_PAGE_SIZE", "15")
    path = _write_book(tmp_path / "book.xlsx")
    assert main(["pages", str(path), "--sheet", "Data"]) == 0
    assert capsys.readouterr().out.splitlines()[1:] == ["A1:C5", "A6:C10"]


def test_missing_sheet_returns_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = _write_book(tmp_path / "book.xlsx")
    assert main(["pages", str(path), "--sheet", "Missing"]) == 1
    assert capsys.readouterr().out.splitlines() == ["backend: openpyxl"]


def test_unsupported_extension_returns_error(tmp_path: Path) -> None:
    assert main(["info", str(tmp_path / "book.csv")]) == 1


def test_global_flags_update_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("XLBRIDGE_DISABLE_LIVE")
    args = build_parser().parse_args(
        ["--log-level", "DEBUG", "--no-live", "--visible", "info", "book.xlsx"]
    )
    config = cli._build_config(args)
    assert config.log_level == "DEBUG"
    assert config.live_backend is False
    assert config.visible is True
