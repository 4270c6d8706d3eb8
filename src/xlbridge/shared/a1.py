from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
import re

from xlbridge.errors import InvalidFormatError

MAX_COLUMNS = 16_384
MAX_ROWS = 1_048_576

_CELL_PATTERN = re.compile(r"^\$?([A-Z]+)\$?([0-9]+)$")
_RANGE_PATTERN = re.compile(r"^(\$?[A-Z]+\$?[0-9]+)(?::(\$?[A-Z]+\$?[0-9]+))?$")
_COLUMN_LABEL_PATTERN = re.compile(r"^[A-Z]+$")


@dataclass(frozen=True)
class CellRange:
    """Rectangular cell range in 1-based coordinates.

    Attributes:
        start_col: Left column.
        start_row: Top row.
        end_col: Right column.
        end_row: Bottom row.
    """

    start_col: int
    start_row: int
    end_col: int
    end_row: int

    def __post_init__(self) -> None:
        if self.start_col > self.end_col or self.start_row > self.end_row:
            raise InvalidFormatError(
                "Range corners out of order: "
                f"({self.start_col},{self.start_row})-({self.end_col},{self.end_row})"
            )
        _check_bounds(self.start_col, self.start_row)
        _check_bounds(self.end_col, self.end_row)

    @property
    def column_count(self) -> int:
        return self.end_col - self.start_col + 1

    @property
    def row_count(self) -> int:
        return self.end_row - self.start_row + 1

    @property
    def start_cell(self) -> str:
        return coordinates_to_cell_name(self.start_col, self.start_row)

    @property
    def end_cell(self) -> str:
        return coordinates_to_cell_name(self.end_col, self.end_row)

    def __str__(self) -> str:
        return f"{self.start_cell}:{self.end_cell}"


def column_label_to_index(label: str) -> int:
    """Convert Excel-style column label (A/AA) to 1-based index."""
    if not _COLUMN_LABEL_PATTERN.match(label):
        raise InvalidFormatError(f"Invalid column label: {label}")
    index = 0
    for char in label:
        index = index * 26 + (ord(char) - ord("A") + 1)
    if index > MAX_COLUMNS:
        raise InvalidFormatError(f"Column out of range: {label}")
    return index


def column_index_to_label(index: int) -> str:
    """Convert 1-based column index to Excel-style column label."""
    if index < 1 or index > MAX_COLUMNS:
        raise InvalidFormatError(f"Column index out of range: {index}")
    chunks: list[str] = []
    current = index
    while current > 0:
        current -= 1
        chunks.append(chr(ord("A") + (current % 26)))
        current //= 26
    return "".join(reversed(chunks))


def cell_name_to_coordinates(cell: str) -> tuple[int, int]:
    """Split A1 notation into 1-based (column, row), accepting ``$`` markers."""
    match = _CELL_PATTERN.match(cell)
    if match is None:
        raise InvalidFormatError(f"Invalid cell reference: {cell}")
    column_label, row_text = match.groups()
    column = column_label_to_index(column_label)
    row = int(row_text)
    _check_bounds(column, row)
    return column, row


def coordinates_to_cell_name(column: int, row: int) -> str:
    """Format 1-based (column, row) as A1 notation."""
    _check_bounds(column, row)
    return f"{column_index_to_label(column)}{row}"


def parse_range(range_ref: str) -> CellRange:
    """Parse ``A1`` or ``A1:C10`` (optionally with ``$`` markers) into a CellRange.

    A bare cell is a 1x1 range. Corners given in reverse order are swapped so
    the result always has start <= end.

    Raises:
        InvalidFormatError: When the text does not match the grammar or lies
            outside the sheet bounds.
    """
    match = _RANGE_PATTERN.match(range_ref)
    if match is None:
        raise InvalidFormatError(f"Invalid range format: {range_ref!r}")
    first, second = match.groups()
    start_col, start_row = cell_name_to_coordinates(first)
    if second is None:
        return CellRange(start_col, start_row, start_col, start_row)
    end_col, end_row = cell_name_to_coordinates(second)
    return CellRange(
        min(start_col, end_col),
        min(start_row, end_row),
        max(start_col, end_col),
        max(start_row, end_row),
    )


def format_range(start_col: int, start_row: int, end_col: int, end_row: int) -> str:
    """Format corner coordinates as normalized ``A1:C10`` notation."""
    return str(CellRange(start_col, start_row, end_col, end_row))


def normalize_range(range_ref: str) -> str:
    """Return canonical notation without ``$`` markers, or the input on failure."""
    try:
        return str(parse_range(range_ref))
    except InvalidFormatError:
        return range_ref


def strip_sheet_prefix(range_ref: str) -> str:
    """Drop a ``Sheet!`` or ``'My Sheet'!`` qualifier from a range reference."""
    if "!" not in range_ref:
        return range_ref
    return range_ref.rsplit("!", maxsplit=1)[1]


def iter_range_cells(cell_range: CellRange) -> Iterator[tuple[int, int]]:
    """Yield (column, row) pairs row-major."""
    for row in range(cell_range.start_row, cell_range.end_row + 1):
        for column in range(cell_range.start_col, cell_range.end_col + 1):
            yield column, row


def range_cell_count(range_ref: str) -> int:
    """Return the number of cells represented by an A1 range."""
    parsed = parse_range(range_ref)
    return parsed.column_count * parsed.row_count


def _check_bounds(column: int, row: int) -> None:
    if column < 1 or column > MAX_COLUMNS:
        raise InvalidFormatError(f"Column index out of range: {column}")
    if row < 1 or row > MAX_ROWS:
        raise InvalidFormatError(f"Row index out of range: {row}")
