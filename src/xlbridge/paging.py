"""Split a worksheet area into bounded pages for incremental reading.

Pages are identified by their normalized range string. Callers remember which
strings they already consumed and ask for the remainder on the next call;
nothing here keeps state between calls.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
import logging
from typing import Protocol, runtime_checkable

from .config import DEFAULT_PAGE_SIZE
from .errors import InvalidFormatError
from .shared.a1 import format_range, normalize_range, parse_range, strip_sheet_prefix

logger = logging.getLogger(__name__)


@runtime_checkable
class PagingStrategy(Protocol):
    """Computes the ordered page list of one worksheet."""

    def calculate_paging_ranges(self) -> list[str]: ...


class DimensionSource(Protocol):
    """Worksheet view needed for fixed-size paging."""

    def get_dimension(self) -> str: ...


class PrintAreaSource(Protocol):
    """Worksheet view needed for print-area paging (live backend only)."""

    def get_print_area(self) -> str: ...

    def get_horizontal_page_breaks(self) -> list[int]: ...


def resolve_page_size(page_size: int | None, default: int = DEFAULT_PAGE_SIZE) -> int:
    """Return ``page_size``, or ``default`` when it is missing or not positive.

    A non-positive ``default`` falls back to ``DEFAULT_PAGE_SIZE``.
    """
    if page_size is None or page_size <= 0:
        return default if default > 0 else DEFAULT_PAGE_SIZE
    return page_size


def calculate_fixed_size_ranges(dimension: str, page_size: int | None) -> list[str]:
    """Split ``dimension`` into full-width pages of at most ``page_size`` cells.

    At least one row goes on each page even when the area is wider than the
    budget.

    Args:
        dimension: Used range such as ``A1:C10``.
        page_size: Cell budget per page; ``None`` or ``<= 0`` means 5000.

    Returns:
        Page ranges in row order, or ``[]`` when the dimension is empty or
        unparsable.
    """
    if not dimension:
        return []
    try:
        area = parse_range(strip_sheet_prefix(dimension))
    except InvalidFormatError:
        logger.warning("Cannot page unparsable dimension %r", dimension)
        return []
    rows_per_page = max(1, resolve_page_size(page_size) // area.column_count)
    ranges: list[str] = []
    for start_row in range(area.start_row, area.end_row + 1, rows_per_page):
        end_row = min(start_row + rows_per_page - 1, area.end_row)
        ranges.append(format_range(area.start_col, start_row, area.end_col, end_row))
    return ranges


def calculate_ranges_from_breaks(print_area: str, breaks: Iterable[int]) -> list[str]:
    """Split a print area at horizontal page-break rows.

    A break at row ``r`` strictly inside ``(start_row, end_row]`` ends the
    current page at ``r - 1``. Other breaks are ignored. Only the first area
    of a multi-area print range is paged.

    Returns:
        Page ranges in row order, or ``[]`` when the print area is unparsable.
    """
    first_area = _first_area(print_area)
    if not first_area:
        return []
    try:
        area = parse_range(strip_sheet_prefix(first_area))
    except InvalidFormatError:
        logger.warning("Cannot page unparsable print area %r", print_area)
        return []
    ranges: list[str] = []
    current = area.start_row
    for break_row in sorted(set(breaks)):
        if break_row <= current or break_row > area.end_row:
            continue
        ranges.append(
            format_range(area.start_col, current, area.end_col, break_row - 1)
        )
        current = break_row
    ranges.append(format_range(area.start_col, current, area.end_col, area.end_row))
    return ranges


class FixedSizePagingStrategy:
    """Pages the worksheet's used dimension by a cell budget."""

    def __init__(self, page_size: int | None, worksheet: DimensionSource) -> None:
        self.page_size = resolve_page_size(page_size)
        self.worksheet = worksheet

    def calculate_paging_ranges(self) -> list[str]:
        try:
            dimension = self.worksheet.get_dimension()
        except Exception as exc:
            logger.warning("Failed to read sheet dimension for paging. (%r)", exc)
            return []
        return calculate_fixed_size_ranges(dimension, self.page_size)


class PrintAreaPagingStrategy:
    """Pages the print area along the sheet's horizontal page breaks."""

    def __init__(self, worksheet: PrintAreaSource) -> None:
        self.worksheet = worksheet

    def calculate_paging_ranges(self) -> list[str]:
        try:
            print_area = self.worksheet.get_print_area()
            breaks = self.worksheet.get_horizontal_page_breaks()
        except Exception as exc:
            logger.warning("Failed to read print area or page breaks. (%r)", exc)
            return []
        return calculate_ranges_from_breaks(print_area, breaks)


class _LiveWorksheet(DimensionSource, PrintAreaSource, Protocol):
    pass


def select_live_paging_strategy(
    page_size: int | None, worksheet: _LiveWorksheet
) -> PagingStrategy:
    """Use print-area paging when the sheet has a print area, else fixed-size."""
    try:
        print_area = worksheet.get_print_area()
    except Exception as exc:
        logger.warning("Failed to read print area; using fixed-size paging. (%r)", exc)
        print_area = ""
    if print_area:
        return PrintAreaPagingStrategy(worksheet)
    return FixedSizePagingStrategy(page_size, worksheet)


def find_next_range(all_ranges: Sequence[str], current: str) -> str:
    """Return the range after the first exact match of ``current``, else ``""``."""
    for index, candidate in enumerate(all_ranges):
        if candidate == current:
            if index + 1 < len(all_ranges):
                return all_ranges[index + 1]
            return ""
    return ""


def filter_remaining_paging_ranges(
    all_ranges: list[str], known: Iterable[str]
) -> list[str]:
    """Drop ranges whose normalized form appears in ``known``; order is kept.

    An empty ``known`` returns ``all_ranges`` itself.
    """
    known_normalized = {normalize_range(item) for item in known}
    if not known_normalized:
        return all_ranges
    return [
        candidate
        for candidate in all_ranges
        if normalize_range(candidate) not in known_normalized
    ]


class PagingRangeService:
    """Stateless helpers over the page list produced by one strategy."""

    def __init__(self, strategy: PagingStrategy) -> None:
        self.strategy = strategy

    def get_paging_ranges(self) -> list[str]:
        return self.strategy.calculate_paging_ranges()

    def find_next_range(self, all_ranges: Sequence[str], current: str) -> str:
        return find_next_range(all_ranges, current)

    def filter_remaining_paging_ranges(
        self, all_ranges: list[str], known: Iterable[str]
    ) -> list[str]:
        return filter_remaining_paging_ranges(all_ranges, known)


def _first_area(print_area: str) -> str:
    """Return the first comma-separated area, honouring quoted sheet names."""
    in_quotes = False
    for index, char in enumerate(print_area):
        if char == "'":
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            return print_area[:index].strip()
    return print_area.strip()


__all__ = [
    "FixedSizePagingStrategy",
    "PagingRangeService",
    "PagingStrategy",
    "PrintAreaPagingStrategy",
    "calculate_fixed_size_ranges",
    "calculate_ranges_from_breaks",
    "filter_remaining_paging_ranges",
    "find_next_range",
    "resolve_page_size",
    "select_live_paging_strategy",
]
