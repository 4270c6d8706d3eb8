from __future__ import annotations

from typing import Final, Literal

BorderType = Literal[
    "left",
    "right",
    "top",
    "bottom",
    "diagonalDown",
    "diagonalUp",
]
BorderLineStyle = Literal[
    "none",
    "continuous",
    "dash",
    "dot",
    "double",
    "dashDot",
    "dashDotDot",
    "slantDashDot",
    "mediumDashDot",
    "mediumDashDotDot",
]
FontUnderline = Literal[
    "none",
    "single",
    "double",
    "singleAccounting",
    "doubleAccounting",
]
FontVertAlign = Literal["baseline", "superscript", "subscript"]
FillType = Literal["gradient", "pattern"]
FillPattern = Literal[
    "none",
    "solid",
    "mediumGray",
    "darkGray",
    "lightGray",
    "darkHorizontal",
    "darkVertical",
    "darkDown",
    "darkUp",
    "darkGrid",
    "darkTrellis",
    "lightHorizontal",
    "lightVertical",
    "lightDown",
    "lightUp",
    "lightGrid",
    "lightTrellis",
    "gray125",
    "gray0625",
]
FillShading = Literal[
    "horizontal",
    "vertical",
    "diagonalDown",
    "diagonalUp",
    "fromCenter",
    "fromCorner",
]

BORDER_TYPES: Final[tuple[BorderType, ...]] = (
    "left",
    "right",
    "top",
    "bottom",
    "diagonalDown",
    "diagonalUp",
)
BORDER_LINE_STYLES: Final[tuple[BorderLineStyle, ...]] = (
    "none",
    "continuous",
    "dash",
    "dot",
    "double",
    "dashDot",
    "dashDotDot",
    "slantDashDot",
    "mediumDashDot",
    "mediumDashDotDot",
)
FONT_UNDERLINES: Final[tuple[FontUnderline, ...]] = (
    "none",
    "single",
    "double",
    "singleAccounting",
    "doubleAccounting",
)
FONT_VERT_ALIGNS: Final[tuple[FontVertAlign, ...]] = (
    "baseline",
    "superscript",
    "subscript",
)
FILL_TYPES: Final[tuple[FillType, ...]] = ("gradient", "pattern")
FILL_PATTERNS: Final[tuple[FillPattern, ...]] = (
    "none",
    "solid",
    "mediumGray",
    "darkGray",
    "lightGray",
    "darkHorizontal",
    "darkVertical",
    "darkDown",
    "darkUp",
    "darkGrid",
    "darkTrellis",
    "lightHorizontal",
    "lightVertical",
    "lightDown",
    "lightUp",
    "lightGrid",
    "lightTrellis",
    "gray125",
    "gray0625",
)
FILL_SHADINGS: Final[tuple[FillShading, ...]] = (
    "horizontal",
    "vertical",
    "diagonalDown",
    "diagonalUp",
    "fromCenter",
    "fromCorner",
)

# Fallbacks used when a native code has no neutral counterpart.
DEFAULT_BORDER_LINE_STYLE: Final[BorderLineStyle] = "continuous"
DEFAULT_FILL_PATTERN: Final[FillPattern] = "none"
DEFAULT_FILL_SHADING: Final[FillShading] = "horizontal"
DEFAULT_FONT_UNDERLINE: Final[FontUnderline] = "single"
DEFAULT_FONT_VERT_ALIGN: Final[FontVertAlign] = "baseline"
