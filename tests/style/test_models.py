from __future__ import annotations

from pydantic import ValidationError
import pytest

from xlbridge.errors import InvalidFormatError
from xlbridge.style.models import (
    Border,
    CellStyle,
    FillStyle,
    FontStyle,
    decimal_places_from_format,
    decimal_places_to_format,
    from_native_hex,
    normalize_color,
    to_native_hex,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("ff0000", "#FF0000"),
        ("#00ff00", "#00FF00"),
        ("FF1F3864", "#1F3864"),
        ("#801F3864", "#1F3864"),
    ],
)
def test_normalize_color(raw: str, expected: str) -> None:
    assert normalize_color(raw) == expected


@pytest.mark.parametrize("raw", ["", "red", "#12345", "#GG0000", "1234567"])
def test_normalize_color_rejects_invalid(raw: str) -> None:
    with pytest.raises(InvalidFormatError):
        normalize_color(raw)


def test_native_hex_helpers() -> None:
    assert to_native_hex("#1f3864") == "1F3864"
    assert from_native_hex("1F3864") == "#1F3864"
    assert from_native_hex("FF1F3864") == "#1F3864"
    assert from_native_hex(None) is None
    assert from_native_hex("") is None
    assert from_native_hex(12) is None


def test_models_normalize_colors() -> None:
    font = FontStyle(color="ff0000")
    border = Border(type="left", style="dash", color="00ff00")
    fill = FillStyle(type="pattern", pattern="solid", colors=("0000ff",))
    assert font.color == "#FF0000"
    assert border.color == "#00FF00"
    assert fill.colors == ("#0000FF",)


def test_models_reject_unknown_vocabulary() -> None:
    with pytest.raises(ValidationError):
        Border(type="middle")
    with pytest.raises(ValidationError):
        FontStyle(underline="wavy")
    with pytest.raises(ValidationError):
        FillStyle(pattern="polkaDot")


def test_models_are_frozen() -> None:
    font = FontStyle(bold=True)
    with pytest.raises(ValidationError):
        font.bold = False  # type: ignore[misc]


def test_cell_style_defaults_are_absent() -> None:
    style = CellStyle()
    assert style.is_empty()
    assert style.effective_number_format() is None


def test_cell_style_effective_number_format() -> None:
    assert CellStyle(decimal_places=2).effective_number_format() == "0.00"
    assert CellStyle(decimal_places=0).effective_number_format() == "0"
    styled = CellStyle(number_format="#,##0", decimal_places=2)
    assert styled.effective_number_format() == "#,##0"
    assert not styled.is_empty()


def test_decimal_places_roundtrip() -> None:
    assert decimal_places_to_format(3) == "0.000"
    assert decimal_places_from_format("0.000") == 3
    assert decimal_places_from_format("0") == 0
    assert decimal_places_from_format("#,##0.00") is None
    assert decimal_places_from_format(None) is None
