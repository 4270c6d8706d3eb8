from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

from xlbridge.errors import InvalidFormatError

from .types import (
    BorderLineStyle,
    BorderType,
    FillPattern,
    FillShading,
    FillType,
    FontUnderline,
    FontVertAlign,
)

_HEX_COLOR_PATTERN = re.compile(r"^#?(?:[0-9A-Fa-f]{6}|[0-9A-Fa-f]{8})$")
_DECIMAL_FORMAT_PATTERN = re.compile(r"^0(?:\.(0+))?$")


class Border(BaseModel):
    """One border edge or diagonal of a cell."""

    model_config = ConfigDict(frozen=True)

    type: BorderType
    style: BorderLineStyle | None = None
    color: str | None = None

    @field_validator("color")
    @classmethod
    def _validate_color(cls, value: str | None) -> str | None:
        return None if value is None else normalize_color(value)


class FontStyle(BaseModel):
    """Font attributes. Every field is optional; ``None`` means unspecified."""

    model_config = ConfigDict(frozen=True)

    bold: bool | None = None
    italic: bool | None = None
    underline: FontUnderline | None = None
    size: float | None = Field(default=None, gt=0)
    strike: bool | None = None
    color: str | None = None
    vert_align: FontVertAlign | None = None

    @field_validator("color")
    @classmethod
    def _validate_color(cls, value: str | None) -> str | None:
        return None if value is None else normalize_color(value)


class FillStyle(BaseModel):
    """Cell background.

    ``colors`` holds the pattern foreground for pattern fills and the stop
    colours, in order, for gradient fills.
    """

    model_config = ConfigDict(frozen=True)

    type: FillType | None = None
    pattern: FillPattern | None = None
    colors: tuple[str, ...] | None = None
    shading: FillShading | None = None

    @field_validator("colors")
    @classmethod
    def _validate_colors(cls, value: tuple[str, ...] | None) -> tuple[str, ...] | None:
        if value is None:
            return None
        return tuple(normalize_color(color) for color in value)


class CellStyle(BaseModel):
    """Backend-neutral cell style.

    Absent fields are left untouched when the style is applied, so a style
    carrying only ``font.color`` changes nothing but the font colour.
    """

    model_config = ConfigDict(frozen=True)

    borders: tuple[Border, ...] | None = None
    font: FontStyle | None = None
    fill: FillStyle | None = None
    number_format: str | None = None
    decimal_places: int | None = Field(default=None, ge=0, le=30)

    def is_empty(self) -> bool:
        """Return True when no attribute is specified."""
        return (
            not self.borders
            and self.font is None
            and self.fill is None
            and self.number_format is None
            and self.decimal_places is None
        )

    def effective_number_format(self) -> str | None:
        """Return the number format to write, derived from decimal places if needed."""
        if self.number_format:
            return self.number_format
        if self.decimal_places is not None:
            return decimal_places_to_format(self.decimal_places)
        return None


def normalize_color(value: str) -> str:
    """Normalize ``RRGGBB``/``#RRGGBB``/``AARRGGBB`` input to ``#RRGGBB``.

    An alpha channel, when present, is dropped.

    Raises:
        InvalidFormatError: When the text is not a 6 or 8 digit hex colour.
    """
    text = value.strip().upper()
    if not _HEX_COLOR_PATTERN.match(text):
        raise InvalidFormatError(
            "Invalid color format. Use 'RRGGBB', 'AARRGGBB', "
            "'#RRGGBB', or '#AARRGGBB'."
        )
    digits = text.lstrip("#")
    return f"#{digits[-6:]}"


def to_native_hex(color: str) -> str:
    """Return the bare ``RRGGBB`` form of a colour."""
    return normalize_color(color).lstrip("#")


def from_native_hex(value: object) -> str | None:
    """Convert a bare 6 or 8 digit native hex string to ``#RRGGBB``.

    Returns ``None`` for anything that is not such a string, which covers
    theme and indexed colours a backend cannot resolve to RGB.
    """
    if not isinstance(value, str) or not value:
        return None
    try:
        return normalize_color(value)
    except InvalidFormatError:
        return None


def decimal_places_to_format(places: int) -> str:
    """Return the ``0.00``-style number format for a decimal-places hint."""
    if places <= 0:
        return "0"
    return "0." + "0" * places


def decimal_places_from_format(number_format: str | None) -> int | None:
    """Recover a decimal-places hint from a ``0.00``-style format."""
    if not number_format:
        return None
    match = _DECIMAL_FORMAT_PATTERN.match(number_format)
    if match is None:
        return None
    fraction = match.group(1)
    return len(fraction) if fraction else 0


__all__ = [
    "Border",
    "CellStyle",
    "FillStyle",
    "FontStyle",
    "decimal_places_from_format",
    "decimal_places_to_format",
    "from_native_hex",
    "normalize_color",
    "to_native_hex",
]
