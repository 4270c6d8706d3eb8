from __future__ import annotations

from openpyxl import Workbook
from openpyxl.styles import Border as OpenpyxlBorder
from openpyxl.styles import Color, Font, GradientFill, PatternFill, Side
import pytest

from xlbridge.style.models import Border, CellStyle, FillStyle, FontStyle
from xlbridge.style.openpyxl_codec import (
    BORDER_STYLE_TO_OPENPYXL,
    FILL_PATTERN_TO_OPENPYXL,
    apply_cell_style,
    border_style_from_openpyxl,
    borders_from_openpyxl,
    borders_to_openpyxl,
    fill_from_openpyxl,
    fill_pattern_from_openpyxl,
    fill_to_openpyxl,
    font_from_openpyxl,
    font_to_openpyxl,
    read_cell_style,
    to_argb,
    underline_from_openpyxl,
    vert_align_from_openpyxl,
)
from xlbridge.style.types import BORDER_LINE_STYLES, FILL_PATTERNS


def test_every_neutral_constant_has_native_code() -> None:
    assert set(BORDER_STYLE_TO_OPENPYXL) == set(BORDER_LINE_STYLES)
    assert set(FILL_PATTERN_TO_OPENPYXL) == set(FILL_PATTERNS)


@pytest.mark.parametrize(
    ("native", "expected"),
    [
        ("thin", "continuous"),
        ("dashed", "dash"),
        ("dotted", "dot"),
        ("double", "double"),
        ("medium", "continuous"),
        ("mediumDashed", "dash"),
        ("somethingNew", "continuous"),
    ],
)
def test_border_style_from_openpyxl(native: str, expected: str) -> None:
    assert border_style_from_openpyxl(native) == expected


def test_unknown_native_codes_fall_back_to_defaults() -> None:
    assert fill_pattern_from_openpyxl("unknownPattern") == "none"
    assert fill_pattern_from_openpyxl(None) == "none"
    assert underline_from_openpyxl("wavy") == "single"
    assert vert_align_from_openpyxl("middle") == "baseline"


def test_to_argb() -> None:
    assert to_argb("#1f3864") == "FF1F3864"


def test_font_merge_keeps_unrelated_attributes() -> None:
    base = Font(name="Meiryo", size=14, italic=True)
    merged = font_to_openpyxl(FontStyle(color="#FF0000"), base)
    assert merged.name == "Meiryo"
    assert merged.size == 14
    assert merged.italic is True
    assert merged.color.rgb == "FFFF0000"
    assert base.color is None


def test_font_from_openpyxl_records_only_true_booleans() -> None:
    font = Font(bold=True, italic=False, size=11, vertAlign="superscript")
    style = font_from_openpyxl(font)
    assert style == FontStyle(bold=True, size=11.0, vert_align="superscript")


def test_font_from_openpyxl_skips_theme_colors() -> None:
    font = Font(bold=True, color=Color(theme=1))
    assert font_from_openpyxl(font) == FontStyle(bold=True)


def test_borders_to_openpyxl_merges_and_maps_diagonals() -> None:
    base = OpenpyxlBorder(top=Side(style="thick"))
    merged = borders_to_openpyxl(
        (
            Border(type="left", style="dash", color="#00FF00"),
            Border(type="diagonalUp", style="dot"),
        ),
        base,
    )
    assert merged.top.style == "thick"
    assert merged.left.style == "dashed"
    assert merged.left.color.rgb == "FF00FF00"
    assert merged.diagonal.style == "dotted"
    assert merged.diagonalUp is True


def test_borders_from_openpyxl_skips_unset_sides() -> None:
    border = OpenpyxlBorder(
        left=Side(style="thin", color="FF123456"),
        diagonal=Side(style="double"),
        diagonalDown=True,
    )
    assert borders_from_openpyxl(border) == (
        Border(type="left", style="continuous", color="#123456"),
        Border(type="diagonalDown", style="double"),
    )
    assert borders_from_openpyxl(OpenpyxlBorder()) is None


def test_fill_to_openpyxl_pattern() -> None:
    fill = fill_to_openpyxl(
        FillStyle(type="pattern", pattern="darkGrid", colors=("#112233",))
    )
    assert isinstance(fill, PatternFill)
    assert fill.fill_type == "darkGrid"
    assert fill.fgColor.rgb == "FF112233"


def test_fill_to_openpyxl_color_only_means_solid() -> None:
    fill = fill_to_openpyxl(FillStyle(colors=("#FFFF00",)))
    assert isinstance(fill, PatternFill)
    assert fill.fill_type == "solid"


def test_fill_to_openpyxl_none_pattern_clears_fill() -> None:
    fill = fill_to_openpyxl(FillStyle(type="pattern", pattern="none"))
    assert isinstance(fill, PatternFill)
    assert fill.fill_type is None


@pytest.mark.parametrize(
    ("shading", "degree"),
    [("horizontal", 90.0), ("vertical", 0.0), ("diagonalUp", 45.0)],
)
def test_linear_gradient_roundtrip(shading: str, degree: float) -> None:
    style = FillStyle(
        type="gradient", shading=shading, colors=("#FF0000", "#0000FF")
    )
    fill = fill_to_openpyxl(style)
    assert isinstance(fill, GradientFill)
    assert fill.type == "linear"
    assert fill.degree == degree
    assert fill_from_openpyxl(fill) == style


def test_path_gradient_roundtrip() -> None:
    style = FillStyle(
        type="gradient", shading="fromCenter", colors=("#FFFFFF", "#000000")
    )
    fill = fill_to_openpyxl(style)
    assert isinstance(fill, GradientFill)
    assert fill.type == "path"
    assert fill_from_openpyxl(fill) == style


def test_empty_pattern_fill_reads_as_absent() -> None:
    assert fill_from_openpyxl(PatternFill()) is None


def test_apply_cell_style_bold_only_round_trip() -> None:
    book = Workbook()
    cell = book.active["A1"]
    cell.font = Font(name="Arial", size=12)
    apply_cell_style(cell, CellStyle(font=FontStyle(bold=True)))
    style = read_cell_style(cell)
    assert cell.font.name == "Arial"
    assert style.font is not None
    assert style.font.bold is True
    assert style.font.size == 12.0
    assert style.fill is None
    assert style.borders is None


def test_apply_cell_style_decimal_places() -> None:
    book = Workbook()
    cell = book.active["B2"]
    apply_cell_style(cell, CellStyle(decimal_places=2))
    assert cell.number_format == "0.00"
    assert read_cell_style(cell).decimal_places == 2


def test_read_cell_style_of_plain_cell_has_no_number_format() -> None:
    book = Workbook()
    style = read_cell_style(book.active["C3"])
    assert style.number_format is None
    assert style.fill is None


def test_bold_only_font_round_trip_leaves_other_fields_absent() -> None:
    native = font_to_openpyxl(FontStyle(bold=True))
    assert font_from_openpyxl(native) == FontStyle(bold=True)
