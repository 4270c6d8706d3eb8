from __future__ import annotations

from .models import (
    Border,
    CellStyle,
    FillStyle,
    FontStyle,
    from_native_hex,
    normalize_color,
    to_native_hex,
)
from .types import (
    BorderLineStyle,
    BorderType,
    FillPattern,
    FillShading,
    FillType,
    FontUnderline,
    FontVertAlign,
)

__all__ = [
    "Border",
    "BorderLineStyle",
    "BorderType",
    "CellStyle",
    "FillPattern",
    "FillShading",
    "FillStyle",
    "FillType",
    "FontStyle",
    "FontUnderline",
    "FontVertAlign",
    "from_native_hex",
    "normalize_color",
    "to_native_hex",
]
