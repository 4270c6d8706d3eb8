"""Neutral style vocabulary <-> Excel COM constants.

The tables mirror the ``XlLineStyle``, ``XlBorderWeight``, ``XlBordersIndex``,
``XlPattern`` and ``XlUnderlineStyle`` enumerations. Colours cross the COM
boundary as BGR integers (``red + green * 256 + blue * 65536``).
"""

from __future__ import annotations

import logging
from typing import Any, Final

from .models import (
    Border,
    CellStyle,
    FillStyle,
    FontStyle,
    decimal_places_from_format,
    to_native_hex,
)
from .types import (
    DEFAULT_BORDER_LINE_STYLE,
    DEFAULT_FILL_PATTERN,
    DEFAULT_FILL_SHADING,
    DEFAULT_FONT_UNDERLINE,
    BorderLineStyle,
    BorderType,
    FillPattern,
    FillShading,
    FontUnderline,
)

logger = logging.getLogger(__name__)

XL_NONE: Final[int] = -4142
XL_THIN: Final[int] = 2
XL_MEDIUM: Final[int] = -4138
XL_PATTERN_LINEAR_GRADIENT: Final[int] = 4000
XL_PATTERN_RECTANGULAR_GRADIENT: Final[int] = 4001

# Ordered pairs of (neutral border type, XlBordersIndex).
_BORDER_INDEX_ENTRIES: Final[tuple[tuple[BorderType, int], ...]] = (
    ("left", 7),
    ("top", 8),
    ("bottom", 9),
    ("right", 10),
    ("diagonalDown", 5),
    ("diagonalUp", 6),
)

# (neutral border style, XlLineStyle, XlBorderWeight)
_BORDER_STYLE_ENTRIES: Final[tuple[tuple[BorderLineStyle, int, int], ...]] = (
    ("none", XL_NONE, XL_THIN),
    ("continuous", 1, XL_THIN),
    ("dash", -4115, XL_THIN),
    ("dot", -4118, XL_THIN),
    ("double", -4119, 4),
    ("dashDot", 4, XL_THIN),
    ("dashDotDot", 5, XL_THIN),
    ("slantDashDot", 13, XL_MEDIUM),
    ("mediumDashDot", 4, XL_MEDIUM),
    ("mediumDashDotDot", 5, XL_MEDIUM),
)

_FILL_PATTERN_ENTRIES: Final[tuple[tuple[FillPattern, int], ...]] = (
    ("none", XL_NONE),
    ("solid", 1),
    ("mediumGray", -4125),
    ("darkGray", -4126),
    ("lightGray", -4124),
    ("darkHorizontal", -4128),
    ("darkVertical", -4166),
    ("darkDown", -4121),
    ("darkUp", -4162),
    ("darkGrid", 9),
    ("darkTrellis", 10),
    ("lightHorizontal", 11),
    ("lightVertical", 12),
    ("lightDown", 13),
    ("lightUp", 14),
    ("lightGrid", 15),
    ("lightTrellis", 16),
    ("gray125", 17),
    ("gray0625", 18),
)

# (neutral shading, XlPattern gradient kind, linear degree)
_SHADING_ENTRIES: Final[tuple[tuple[FillShading, int, float], ...]] = (
    ("horizontal", XL_PATTERN_LINEAR_GRADIENT, 90.0),
    ("vertical", XL_PATTERN_LINEAR_GRADIENT, 0.0),
    ("diagonalUp", XL_PATTERN_LINEAR_GRADIENT, 45.0),
    ("diagonalDown", XL_PATTERN_LINEAR_GRADIENT, 135.0),
    ("fromCenter", XL_PATTERN_RECTANGULAR_GRADIENT, 0.0),
    ("fromCorner", XL_PATTERN_RECTANGULAR_GRADIENT, 0.0),
)

_UNDERLINE_ENTRIES: Final[tuple[tuple[FontUnderline, int], ...]] = (
    ("none", XL_NONE),
    ("single", 2),
    ("double", -4119),
    ("singleAccounting", 4),
    ("doubleAccounting", 5),
)

BORDER_INDEX_TO_COM: Final[dict[BorderType, int]] = dict(_BORDER_INDEX_ENTRIES)
BORDER_STYLE_TO_COM: Final[dict[BorderLineStyle, tuple[int, int]]] = {
    neutral: (line_style, weight)
    for neutral, line_style, weight in _BORDER_STYLE_ENTRIES
}
BORDER_STYLE_FROM_COM: Final[dict[tuple[int, int], BorderLineStyle]] = {
    (line_style, weight): neutral
    for neutral, line_style, weight in _BORDER_STYLE_ENTRIES
}
# Reversed so the first entry for a line style wins.
BORDER_LINE_FROM_COM: Final[dict[int, BorderLineStyle]] = {
    line_style: neutral
    for neutral, line_style, _weight in reversed(_BORDER_STYLE_ENTRIES)
}
FILL_PATTERN_TO_COM: Final[dict[FillPattern, int]] = dict(_FILL_PATTERN_ENTRIES)
FILL_PATTERN_FROM_COM: Final[dict[int, FillPattern]] = {
    native: neutral for neutral, native in _FILL_PATTERN_ENTRIES
}
SHADING_TO_COM: Final[dict[FillShading, tuple[int, float]]] = {
    neutral: (kind, degree) for neutral, kind, degree in _SHADING_ENTRIES
}
SHADING_FROM_COM_DEGREE: Final[dict[float, FillShading]] = {
    degree: neutral
    for neutral, kind, degree in _SHADING_ENTRIES
    if kind == XL_PATTERN_LINEAR_GRADIENT
}
UNDERLINE_TO_COM: Final[dict[FontUnderline, int]] = dict(_UNDERLINE_ENTRIES)
UNDERLINE_FROM_COM: Final[dict[int, FontUnderline]] = {
    native: neutral for neutral, native in _UNDERLINE_ENTRIES
}


def hex_to_com_color(color: str) -> int:
    """Convert ``#RRGGBB`` to the Excel COM BGR integer."""
    rgb = to_native_hex(color)
    red = int(rgb[0:2], 16)
    green = int(rgb[2:4], 16)
    blue = int(rgb[4:6], 16)
    return red + green * 256 + blue * 65_536


def com_color_to_hex(value: object) -> str | None:
    """Convert an Excel COM BGR integer to ``#RRGGBB``.

    Mixed-format ranges report ``None`` and automatic colours report a
    negative number; both yield ``None``.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    number = int(value)
    if number < 0 or number > 0xFFFFFF:
        return None
    red = number & 0xFF
    green = (number >> 8) & 0xFF
    blue = (number >> 16) & 0xFF
    return f"#{red:02X}{green:02X}{blue:02X}"


def border_style_from_com(
    line_style: int, weight: int | None = None
) -> BorderLineStyle:
    """Map XlLineStyle (and weight) to the neutral name (unknown -> continuous)."""
    if weight is not None:
        exact = BORDER_STYLE_FROM_COM.get((line_style, weight))
        if exact is not None:
            return exact
    return BORDER_LINE_FROM_COM.get(line_style, DEFAULT_BORDER_LINE_STYLE)


def fill_pattern_from_com(value: int) -> FillPattern:
    """Map XlPattern to the neutral pattern (unknown -> none)."""
    return FILL_PATTERN_FROM_COM.get(value, DEFAULT_FILL_PATTERN)


def underline_from_com(value: int) -> FontUnderline:
    """Map XlUnderlineStyle to the neutral underline (unknown -> single)."""
    return UNDERLINE_FROM_COM.get(value, DEFAULT_FONT_UNDERLINE)


def apply_font(font_api: Any, style: FontStyle) -> None:
    """Set the COM font properties matching the set fields of ``style``."""
    if style.bold is not None:
        font_api.Bold = style.bold
    if style.italic is not None:
        font_api.Italic = style.italic
    if style.underline is not None:
        font_api.Underline = UNDERLINE_TO_COM[style.underline]
    if style.size is not None:
        font_api.Size = style.size
    if style.strike is not None:
        font_api.Strikethrough = style.strike
    if style.color is not None:
        font_api.Color = hex_to_com_color(style.color)
    if style.vert_align is not None:
        font_api.Superscript = style.vert_align == "superscript"
        font_api.Subscript = style.vert_align == "subscript"


def read_font(font_api: Any) -> FontStyle | None:
    """Read a COM font; booleans are recorded only when true."""
    values: dict[str, Any] = {}
    if font_api.Bold is True:
        values["bold"] = True
    if font_api.Italic is True:
        values["italic"] = True
    if font_api.Strikethrough is True:
        values["strike"] = True
    underline = font_api.Underline
    if isinstance(underline, int) and underline != XL_NONE:
        values["underline"] = underline_from_com(underline)
    size = font_api.Size
    if isinstance(size, (int, float)) and size > 0:
        values["size"] = float(size)
    color = com_color_to_hex(font_api.Color)
    if color is not None:
        values["color"] = color
    if font_api.Superscript is True:
        values["vert_align"] = "superscript"
    elif font_api.Subscript is True:
        values["vert_align"] = "subscript"
    if not values:
        return None
    return FontStyle(**values)


def apply_borders(range_api: Any, borders: tuple[Border, ...]) -> None:
    """Set each listed border edge through ``Range.Borders(index)``."""
    for border in borders:
        edge = range_api.Borders(BORDER_INDEX_TO_COM[border.type])
        neutral = border.style or DEFAULT_BORDER_LINE_STYLE
        line_style, weight = BORDER_STYLE_TO_COM[neutral]
        edge.LineStyle = line_style
        if line_style == XL_NONE:
            continue
        edge.Weight = weight
        if border.color is not None:
            edge.Color = hex_to_com_color(border.color)


def read_borders(range_api: Any) -> tuple[Border, ...] | None:
    """Read every edge whose line style is not ``xlNone``."""
    result: list[Border] = []
    for border_type, index in _BORDER_INDEX_ENTRIES:
        edge = range_api.Borders(index)
        line_style = edge.LineStyle
        if not isinstance(line_style, int) or line_style == XL_NONE:
            continue
        result.append(
            Border(
                type=border_type,
                style=border_style_from_com(line_style, edge.Weight),
                color=com_color_to_hex(edge.Color),
            )
        )
    return tuple(result) or None


def apply_fill(interior_api: Any, style: FillStyle) -> None:
    """Write a neutral fill to ``Range.Interior``."""
    colors = [hex_to_com_color(color) for color in style.colors or ()]
    if style.type == "gradient" or (style.type is None and style.shading is not None):
        shading = style.shading or DEFAULT_FILL_SHADING
        kind, degree = SHADING_TO_COM[shading]
        interior_api.Pattern = kind
        gradient = interior_api.Gradient
        if kind == XL_PATTERN_LINEAR_GRADIENT:
            gradient.Degree = degree
        elif shading == "fromCenter":
            gradient.RectangleLeft = 0.5
            gradient.RectangleRight = 0.5
            gradient.RectangleTop = 0.5
            gradient.RectangleBottom = 0.5
        if colors:
            stops = colors if len(colors) >= 2 else colors * 2
            gradient.ColorStops.Clear()
            last = len(stops) - 1
            for position, color in enumerate(stops):
                gradient.ColorStops.Add(position / last).Color = color
        return
    pattern = style.pattern
    if pattern is None:
        pattern = "solid" if colors else DEFAULT_FILL_PATTERN
    interior_api.Pattern = FILL_PATTERN_TO_COM[pattern]
    if pattern == "none" or not colors:
        return
    if pattern == "solid":
        interior_api.Color = colors[0]
    else:
        interior_api.PatternColor = colors[0]


def read_fill(interior_api: Any) -> FillStyle | None:
    """Read ``Range.Interior``; ``xlNone`` reports no fill."""
    pattern = interior_api.Pattern
    if not isinstance(pattern, int) or pattern == XL_NONE:
        return None
    if pattern in (XL_PATTERN_LINEAR_GRADIENT, XL_PATTERN_RECTANGULAR_GRADIENT):
        return _read_gradient(interior_api.Gradient, pattern)
    neutral = fill_pattern_from_com(pattern)
    if neutral == "none":
        return None
    source = interior_api.Color if neutral == "solid" else interior_api.PatternColor
    color = com_color_to_hex(source)
    return FillStyle(
        type="pattern",
        pattern=neutral,
        colors=(color,) if color else None,
    )


def _read_gradient(gradient: Any, kind: int) -> FillStyle:
    if kind == XL_PATTERN_RECTANGULAR_GRADIENT:
        shading: FillShading = (
            "fromCenter" if gradient.RectangleLeft == 0.5 else "fromCorner"
        )
    else:
        degree = float(gradient.Degree or 0)
        shading = SHADING_FROM_COM_DEGREE.get(degree, DEFAULT_FILL_SHADING)
    colors: list[str] = []
    stops = gradient.ColorStops
    for index in range(1, stops.Count + 1):
        color = com_color_to_hex(stops.Item(index).Color)
        if color is not None:
            colors.append(color)
    return FillStyle(type="gradient", colors=tuple(colors) or None, shading=shading)


def read_range_style(range_api: Any) -> CellStyle:
    """Read the neutral style of a COM range (normally a single cell)."""
    number_format = range_api.NumberFormat
    if not isinstance(number_format, str) or number_format == "General":
        number_format = None
    return CellStyle(
        borders=read_borders(range_api),
        font=read_font(range_api.Font),
        fill=read_fill(range_api.Interior),
        number_format=number_format,
        decimal_places=decimal_places_from_format(number_format),
    )


def apply_range_style(range_api: Any, style: CellStyle) -> None:
    """Apply only the set fields of ``style`` to a COM range."""
    if style.font is not None:
        apply_font(range_api.Font, style.font)
    if style.borders:
        apply_borders(range_api, style.borders)
    if style.fill is not None:
        apply_fill(range_api.Interior, style.fill)
    number_format = style.effective_number_format()
    if number_format is not None:
        range_api.NumberFormat = number_format
    logger.debug("Applied style to %s", getattr(range_api, "Address", "range"))


__all__ = [
    "BORDER_INDEX_TO_COM",
    "BORDER_LINE_FROM_COM",
    "BORDER_STYLE_FROM_COM",
    "BORDER_STYLE_TO_COM",
    "FILL_PATTERN_FROM_COM",
    "FILL_PATTERN_TO_COM",
    "SHADING_TO_COM",
    "UNDERLINE_FROM_COM",
    "UNDERLINE_TO_COM",
    "XL_NONE",
    "apply_borders",
    "apply_fill",
    "apply_font",
    "apply_range_style",
    "border_style_from_com",
    "com_color_to_hex",
    "fill_pattern_from_com",
    "hex_to_com_color",
    "read_borders",
    "read_fill",
    "read_font",
    "read_range_style",
    "underline_from_com",
]
