from __future__ import annotations

from .a1 import (
    CellRange,
    cell_name_to_coordinates,
    column_index_to_label,
    column_label_to_index,
    coordinates_to_cell_name,
    format_range,
    iter_range_cells,
    normalize_range,
    parse_range,
    range_cell_count,
    strip_sheet_prefix,
)

__all__ = [
    "CellRange",
    "cell_name_to_coordinates",
    "column_index_to_label",
    "column_label_to_index",
    "coordinates_to_cell_name",
    "format_range",
    "iter_range_cells",
    "normalize_range",
    "parse_range",
    "range_cell_count",
    "strip_sheet_prefix",
]
