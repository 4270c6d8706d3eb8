from __future__ import annotations

from pathlib import Path

import pytest

from xlbridge.errors import InvalidFormatError, IOFailureError
from xlbridge.io import PathPolicy, file_is_not_writable, resolve_workbook_path


def test_resolve_without_policy(tmp_path: Path) -> None:
    path = tmp_path / "book.xlsx"
    assert resolve_workbook_path(str(path), policy=None) == path.resolve()


@pytest.mark.parametrize("name", ["book.xlsm", "template.XLTX", "macro.xltm"])
def test_resolve_accepts_workbook_suffixes(tmp_path: Path, name: str) -> None:
    assert resolve_workbook_path(tmp_path / name, policy=None).name == name


@pytest.mark.parametrize("name", ["book.xls", "notes.csv", "no_suffix"])
def test_resolve_rejects_other_suffixes(tmp_path: Path, name: str) -> None:
    with pytest.raises(InvalidFormatError):
        resolve_workbook_path(tmp_path / name, policy=None)


def test_policy_resolves_relative_paths(tmp_path: Path) -> None:
    policy = PathPolicy(root=tmp_path)
    resolved = resolve_workbook_path("reports/q1.xlsx", policy=policy)
    assert resolved == (tmp_path / "reports" / "q1.xlsx").resolve()


def test_policy_rejects_escape(tmp_path: Path) -> None:
    policy = PathPolicy(root=tmp_path / "root")
    with pytest.raises(IOFailureError):
        resolve_workbook_path(tmp_path / "elsewhere.xlsx", policy=policy)
    with pytest.raises(IOFailureError):
        resolve_workbook_path("../outside.xlsx", policy=policy)


def test_policy_deny_globs(tmp_path: Path) -> None:
    policy = PathPolicy(root=tmp_path, deny_globs=["secret_*.xlsx"])
    with pytest.raises(IOFailureError):
        policy.ensure_allowed(tmp_path / "secret_salaries.xlsx")
    assert policy.ensure_allowed(tmp_path / "public.xlsx").name == "public.xlsx"


def test_file_is_not_writable(tmp_path: Path) -> None:
    path = tmp_path / "book.xlsx"
    assert file_is_not_writable(path) is False
    path.write_bytes(b"data")
    assert file_is_not_writable(path) is False
