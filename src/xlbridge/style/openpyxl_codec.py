"""Neutral style vocabulary <-> openpyxl style objects.

Fonts and borders are merged onto the cell's current objects so a partial
style only touches the attributes it sets. openpyxl has no way to change part
of a fill, so a fill is always written as a whole new object.
"""

from __future__ import annotations

from copy import copy
from typing import Any, Final

from openpyxl.styles import Border as OpenpyxlBorder
from openpyxl.styles import Font, GradientFill, PatternFill, Side

from .models import (
    Border,
    CellStyle,
    FillStyle,
    FontStyle,
    decimal_places_from_format,
    from_native_hex,
    to_native_hex,
)
from .types import (
    DEFAULT_BORDER_LINE_STYLE,
    DEFAULT_FILL_PATTERN,
    DEFAULT_FILL_SHADING,
    DEFAULT_FONT_UNDERLINE,
    DEFAULT_FONT_VERT_ALIGN,
    BorderLineStyle,
    FillPattern,
    FillShading,
    FontUnderline,
    FontVertAlign,
)

# Ordered pairs of (neutral border style, openpyxl Side.style).
# Single source of truth for both directions.
_BORDER_STYLE_ENTRIES: Final[tuple[tuple[BorderLineStyle, str | None], ...]] = (
    ("none", None),
    ("continuous", "thin"),
    ("dash", "dashed"),
    ("dot", "dotted"),
    ("double", "double"),
    ("dashDot", "dashDot"),
    ("dashDotDot", "dashDotDot"),
    ("slantDashDot", "slantDashDot"),
    ("mediumDashDot", "mediumDashDot"),
    ("mediumDashDotDot", "mediumDashDotDot"),
)
# Native styles with no neutral name of their own.
_BORDER_STYLE_ALIASES: Final[dict[str, BorderLineStyle]] = {
    "hair": "continuous",
    "medium": "continuous",
    "thick": "continuous",
    "mediumDashed": "dash",
}

_FILL_PATTERN_ENTRIES: Final[tuple[tuple[FillPattern, str | None], ...]] = (
    ("none", None),
    ("solid", "solid"),
    ("mediumGray", "mediumGray"),
    ("darkGray", "darkGray"),
    ("lightGray", "lightGray"),
    ("darkHorizontal", "darkHorizontal"),
    ("darkVertical", "darkVertical"),
    ("darkDown", "darkDown"),
    ("darkUp", "darkUp"),
    ("darkGrid", "darkGrid"),
    ("darkTrellis", "darkTrellis"),
    ("lightHorizontal", "lightHorizontal"),
    ("lightVertical", "lightVertical"),
    ("lightDown", "lightDown"),
    ("lightUp", "lightUp"),
    ("lightGrid", "lightGrid"),
    ("lightTrellis", "lightTrellis"),
    ("gray125", "gray125"),
    ("gray0625", "gray0625"),
)

# (neutral shading, GradientFill.type, degree for linear fills)
_SHADING_ENTRIES: Final[tuple[tuple[FillShading, str, float], ...]] = (
    ("horizontal", "linear", 90.0),
    ("vertical", "linear", 0.0),
    ("diagonalUp", "linear", 45.0),
    ("diagonalDown", "linear", 135.0),
    ("fromCenter", "path", 0.0),
    ("fromCorner", "path", 0.0),
)

_UNDERLINE_ENTRIES: Final[tuple[tuple[FontUnderline, str | None], ...]] = (
    ("none", None),
    ("single", "single"),
    ("double", "double"),
    ("singleAccounting", "singleAccounting"),
    ("doubleAccounting", "doubleAccounting"),
)

_VERT_ALIGN_ENTRIES: Final[tuple[tuple[FontVertAlign, str], ...]] = (
    ("baseline", "baseline"),
    ("superscript", "superscript"),
    ("subscript", "subscript"),
)

BORDER_STYLE_TO_OPENPYXL: Final[dict[BorderLineStyle, str | None]] = dict(
    _BORDER_STYLE_ENTRIES
)
BORDER_STYLE_FROM_OPENPYXL: Final[dict[str, BorderLineStyle]] = {
    **{native: neutral for neutral, native in _BORDER_STYLE_ENTRIES if native},
    **_BORDER_STYLE_ALIASES,
}
FILL_PATTERN_TO_OPENPYXL: Final[dict[FillPattern, str | None]] = dict(
    _FILL_PATTERN_ENTRIES
)
FILL_PATTERN_FROM_OPENPYXL: Final[dict[str, FillPattern]] = {
    native: neutral for neutral, native in _FILL_PATTERN_ENTRIES if native
}
SHADING_TO_OPENPYXL: Final[dict[FillShading, tuple[str, float]]] = {
    neutral: (kind, degree) for neutral, kind, degree in _SHADING_ENTRIES
}
SHADING_FROM_OPENPYXL_DEGREE: Final[dict[float, FillShading]] = {
    degree: neutral for neutral, kind, degree in _SHADING_ENTRIES if kind == "linear"
}
UNDERLINE_TO_OPENPYXL: Final[dict[FontUnderline, str | None]] = dict(
    _UNDERLINE_ENTRIES
)
UNDERLINE_FROM_OPENPYXL: Final[dict[str, FontUnderline]] = {
    native: neutral for neutral, native in _UNDERLINE_ENTRIES if native
}
VERT_ALIGN_TO_OPENPYXL: Final[dict[FontVertAlign, str]] = dict(_VERT_ALIGN_ENTRIES)
VERT_ALIGN_FROM_OPENPYXL: Final[dict[str, FontVertAlign]] = {
    native: neutral for neutral, native in _VERT_ALIGN_ENTRIES
}

_SIDE_ATTRIBUTES: Final[tuple[str, ...]] = ("left", "right", "top", "bottom")


def border_style_from_openpyxl(value: str) -> BorderLineStyle:
    """Map an openpyxl side style to the neutral name (unknown -> continuous)."""
    return BORDER_STYLE_FROM_OPENPYXL.get(value, DEFAULT_BORDER_LINE_STYLE)


def fill_pattern_from_openpyxl(value: str | None) -> FillPattern:
    """Map an openpyxl pattern type to the neutral name (unknown -> none)."""
    if value is None:
        return DEFAULT_FILL_PATTERN
    return FILL_PATTERN_FROM_OPENPYXL.get(value, DEFAULT_FILL_PATTERN)


def underline_from_openpyxl(value: str) -> FontUnderline:
    """Map an openpyxl underline value (unknown -> single)."""
    return UNDERLINE_FROM_OPENPYXL.get(value, DEFAULT_FONT_UNDERLINE)


def vert_align_from_openpyxl(value: str) -> FontVertAlign:
    """Map an openpyxl vertAlign value (unknown -> baseline)."""
    return VERT_ALIGN_FROM_OPENPYXL.get(value, DEFAULT_FONT_VERT_ALIGN)


def shading_from_gradient(fill: GradientFill) -> FillShading:
    """Recover the neutral shading direction of a gradient fill."""
    if fill.type == "path":
        if fill.left == 0.5 and fill.top == 0.5:
            return "fromCenter"
        return "fromCorner"
    degree = float(fill.degree or 0)
    return SHADING_FROM_OPENPYXL_DEGREE.get(degree, DEFAULT_FILL_SHADING)


def to_argb(color: str) -> str:
    """Return the opaque ``AARRGGBB`` form openpyxl stores."""
    return f"FF{to_native_hex(color)}"


def color_from_openpyxl(color: object) -> str | None:
    """Return ``#RRGGBB`` for an RGB openpyxl colour, ``None`` for theme/indexed."""
    if color is None:
        return None
    if getattr(color, "type", "rgb") != "rgb":
        return None
    return from_native_hex(getattr(color, "rgb", None))


def font_to_openpyxl(style: FontStyle, base: Font | None = None) -> Font:
    """Build an openpyxl Font from ``style`` merged onto ``base``."""
    font = copy(base) if base is not None else Font()
    if style.bold is not None:
        font.bold = style.bold
    if style.italic is not None:
        font.italic = style.italic
    if style.underline is not None:
        font.underline = UNDERLINE_TO_OPENPYXL[style.underline]
    if style.size is not None:
        font.size = style.size
    if style.strike is not None:
        font.strike = style.strike
    if style.color is not None:
        font.color = to_argb(style.color)
    if style.vert_align is not None:
        font.vertAlign = VERT_ALIGN_TO_OPENPYXL[style.vert_align]
    return font


def font_from_openpyxl(font: Font | None) -> FontStyle | None:
    """Convert an openpyxl Font; booleans are recorded only when true."""
    if font is None:
        return None
    values: dict[str, Any] = {}
    if font.bold:
        values["bold"] = True
    if font.italic:
        values["italic"] = True
    if font.strike:
        values["strike"] = True
    if font.underline:
        values["underline"] = underline_from_openpyxl(font.underline)
    if font.size is not None:
        values["size"] = float(font.size)
    color = color_from_openpyxl(font.color)
    if color is not None:
        values["color"] = color
    if font.vertAlign:
        values["vert_align"] = vert_align_from_openpyxl(font.vertAlign)
    if not values:
        return None
    return FontStyle(**values)


def side_to_openpyxl(border: Border) -> Side:
    """Build an openpyxl Side for one neutral border."""
    native_style = BORDER_STYLE_TO_OPENPYXL[border.style or DEFAULT_BORDER_LINE_STYLE]
    if native_style is None:
        return Side()
    color = to_argb(border.color) if border.color else None
    return Side(style=native_style, color=color)


def borders_to_openpyxl(
    borders: tuple[Border, ...], base: OpenpyxlBorder | None = None
) -> OpenpyxlBorder:
    """Merge neutral borders onto ``base``; sides not listed keep their state."""
    result = copy(base) if base is not None else OpenpyxlBorder()
    for border in borders:
        side = side_to_openpyxl(border)
        if border.type in _SIDE_ATTRIBUTES:
            setattr(result, border.type, side)
        elif border.type == "diagonalDown":
            result.diagonal = side
            result.diagonalDown = side.style is not None
        else:
            result.diagonal = side
            result.diagonalUp = side.style is not None
    return result


def borders_from_openpyxl(border: OpenpyxlBorder | None) -> tuple[Border, ...] | None:
    """Convert an openpyxl Border to neutral edges, skipping unset sides."""
    if border is None:
        return None
    result: list[Border] = []
    for attribute in _SIDE_ATTRIBUTES:
        side = getattr(border, attribute, None)
        if side is None or side.style is None:
            continue
        result.append(
            Border(
                type=attribute,  # type: ignore[arg-type]
                style=border_style_from_openpyxl(side.style),
                color=color_from_openpyxl(side.color),
            )
        )
    diagonal = border.diagonal
    if diagonal is not None and diagonal.style is not None:
        style = border_style_from_openpyxl(diagonal.style)
        color = color_from_openpyxl(diagonal.color)
        if border.diagonalDown:
            result.append(Border(type="diagonalDown", style=style, color=color))
        if border.diagonalUp:
            result.append(Border(type="diagonalUp", style=style, color=color))
    return tuple(result) or None


def fill_to_openpyxl(style: FillStyle) -> PatternFill | GradientFill:
    """Build a replacement fill object for a neutral fill."""
    colors = [to_argb(color) for color in style.colors or ()]
    if style.type == "gradient" or (style.type is None and style.shading is not None):
        kind, degree = SHADING_TO_OPENPYXL[style.shading or DEFAULT_FILL_SHADING]
        stops = colors if len(colors) >= 2 else (colors * 2 or ["FFFFFFFF", "FFFFFFFF"])
        if kind == "path":
            inset = 0.5 if style.shading == "fromCenter" else 0.0
            return GradientFill(
                type="path",
                left=inset,
                right=inset,
                top=inset,
                bottom=inset,
                stop=stops,
            )
        return GradientFill(type="linear", degree=degree, stop=stops)
    pattern = style.pattern
    if pattern is None:
        pattern = "solid" if colors else DEFAULT_FILL_PATTERN
    native_pattern = FILL_PATTERN_TO_OPENPYXL[pattern]
    if native_pattern is None:
        return PatternFill(fill_type=None)
    if not colors:
        return PatternFill(fill_type=native_pattern)
    return PatternFill(
        fill_type=native_pattern,
        start_color=colors[0],
        end_color=colors[-1],
    )


def fill_from_openpyxl(fill: object) -> FillStyle | None:
    """Convert an openpyxl fill; an empty pattern fill is reported as absent."""
    if isinstance(fill, GradientFill):
        stop_colors = [color_from_openpyxl(stop.color) for stop in fill.stop]
        return FillStyle(
            type="gradient",
            colors=tuple(color for color in stop_colors if color) or None,
            shading=shading_from_gradient(fill),
        )
    if isinstance(fill, PatternFill):
        if fill.fill_type is None:
            return None
        color = color_from_openpyxl(fill.fgColor)
        return FillStyle(
            type="pattern",
            pattern=fill_pattern_from_openpyxl(fill.fill_type),
            colors=(color,) if color else None,
        )
    return None


def read_cell_style(cell: Any) -> CellStyle:
    """Read the neutral style of an openpyxl cell."""
    number_format = cell.number_format
    if number_format == "General":
        number_format = None
    return CellStyle(
        borders=borders_from_openpyxl(cell.border),
        font=font_from_openpyxl(cell.font),
        fill=fill_from_openpyxl(copy(cell.fill)),
        number_format=number_format,
        decimal_places=decimal_places_from_format(number_format),
    )


def apply_cell_style(cell: Any, style: CellStyle) -> None:
    """Apply only the set fields of ``style`` to an openpyxl cell."""
    if style.font is not None:
        cell.font = font_to_openpyxl(style.font, cell.font)
    if style.borders:
        cell.border = borders_to_openpyxl(style.borders, cell.border)
    if style.fill is not None:
        cell.fill = fill_to_openpyxl(style.fill)
    number_format = style.effective_number_format()
    if number_format is not None:
        cell.number_format = number_format


__all__ = [
    "BORDER_STYLE_FROM_OPENPYXL",
    "BORDER_STYLE_TO_OPENPYXL",
    "FILL_PATTERN_FROM_OPENPYXL",
    "FILL_PATTERN_TO_OPENPYXL",
    "SHADING_TO_OPENPYXL",
    "UNDERLINE_FROM_OPENPYXL",
    "UNDERLINE_TO_OPENPYXL",
    "VERT_ALIGN_FROM_OPENPYXL",
    "VERT_ALIGN_TO_OPENPYXL",
    "apply_cell_style",
    "border_style_from_openpyxl",
    "borders_from_openpyxl",
    "borders_to_openpyxl",
    "color_from_openpyxl",
    "fill_from_openpyxl",
    "fill_pattern_from_openpyxl",
    "fill_to_openpyxl",
    "font_from_openpyxl",
    "font_to_openpyxl",
    "read_cell_style",
    "shading_from_gradient",
    "to_argb",
    "underline_from_openpyxl",
    "vert_align_from_openpyxl",
]
