from __future__ import annotations

import logging

import pytest

from xlbridge.config import DEFAULT_PAGE_SIZE
from xlbridge.paging import (
    FixedSizePagingStrategy,
    PagingRangeService,
    PagingStrategy,
    PrintAreaPagingStrategy,
    calculate_fixed_size_ranges,
    calculate_ranges_from_breaks,
    filter_remaining_paging_ranges,
    find_next_range,
    resolve_page_size,
    select_live_paging_strategy,
)


class _DimensionSheet:
    def __init__(self, dimension: str) -> None:
        self.dimension = dimension

    def get_dimension(self) -> str:
        return self.dimension


class _LiveSheet(_DimensionSheet):
    def __init__(
        self, dimension: str, print_area: str = "", breaks: list[int] | None = None
    ) -> None:
        super().__init__(dimension)
        self.print_area = print_area
        self.breaks = breaks or []

    def get_print_area(self) -> str:
        return self.print_area

    def get_horizontal_page_breaks(self) -> list[int]:
        return self.breaks


class _BrokenSheet:
    def get_dimension(self) -> str:
        raise RuntimeError("COM call failed")

    def get_print_area(self) -> str:
        raise RuntimeError("COM call failed")

    def get_horizontal_page_breaks(self) -> list[int]:
        raise RuntimeError("COM call failed")


def test_fixed_size_splits_rows_by_budget() -> None:
    assert calculate_fixed_size_ranges("A1:C10", 9) == [
        "A1:C3",
        "A4:C6",
        "A7:C9",
        "A10:C10",
    ]


def test_fixed_size_keeps_at_least_one_row_per_page() -> None:
    assert calculate_fixed_size_ranges("A1:E3", 2) == ["A1:E1", "A2:E2", "A3:E3"]


@pytest.mark.parametrize("dimension", ["", "not-a-range", "A1:"])
def test_fixed_size_empty_or_unparsable_dimension(dimension: str) -> None:
    assert calculate_fixed_size_ranges(dimension, 10) == []


def test_fixed_size_uses_default_for_missing_page_size() -> None:
    assert resolve_page_size(None) == DEFAULT_PAGE_SIZE
    assert resolve_page_size(0) == DEFAULT_PAGE_SIZE
    assert resolve_page_size(-3) == DEFAULT_PAGE_SIZE
    assert calculate_fixed_size_ranges("$B$2:$C$4", None) == ["B2:C4"]


def test_resolve_page_size_uses_given_default() -> None:
    assert resolve_page_size(None, 3) == 3
    assert resolve_page_size(0, 3) == 3
    assert resolve_page_size(7, 3) == 7
    assert resolve_page_size(None, 0) == DEFAULT_PAGE_SIZE
    assert resolve_page_size(0, -1) == DEFAULT_PAGE_SIZE


def test_fixed_size_strategy_reads_dimension() -> None:
    strategy = FixedSizePagingStrategy(9, _DimensionSheet("A1:C10"))
    assert isinstance(strategy, PagingStrategy)
    assert strategy.calculate_paging_ranges()[-1] == "A10:C10"


def test_fixed_size_strategy_degrades_to_empty_list(
    caplog: pytest.LogCaptureFixture,
) -> None:
    strategy = FixedSizePagingStrategy(10, _BrokenSheet())
    with caplog.at_level(logging.WARNING):
        assert strategy.calculate_paging_ranges() == []
    assert "dimension" in caplog.text


def test_breaks_split_print_area() -> None:
    assert calculate_ranges_from_breaks("A1:C10", [4, 8]) == [
        "A1:C3",
        "A4:C7",
        "A8:C10",
    ]


def test_breaks_outside_area_are_ignored() -> None:
    assert calculate_ranges_from_breaks("$A$2:$C$10", [1, 2, 11, 6, 6]) == [
        "A2:C5",
        "A6:C10",
    ]


def test_no_breaks_means_single_page() -> None:
    assert calculate_ranges_from_breaks("Sheet1!$A$1:$D$20", []) == ["A1:D20"]


def test_only_first_print_area_is_paged() -> None:
    print_area = "'My, Sheet'!$A$1:$B$4,'My, Sheet'!$D$1:$E$4"
    assert calculate_ranges_from_breaks(print_area, [3]) == ["A1:B2", "A3:B4"]


def test_break_at_last_row_gives_single_row_page() -> None:
    assert calculate_ranges_from_breaks("A1:C10", [10]) == ["A1:C9", "A10:C10"]


def test_print_area_strategy_degrades_to_empty_list() -> None:
    assert PrintAreaPagingStrategy(_BrokenSheet()).calculate_paging_ranges() == []


def test_live_selection_prefers_print_area() -> None:
    sheet = _LiveSheet("A1:C10", print_area="$A$1:$C$10", breaks=[5])
    strategy = select_live_paging_strategy(100, sheet)
    assert isinstance(strategy, PrintAreaPagingStrategy)
    assert strategy.calculate_paging_ranges() == ["A1:C4", "A5:C10"]


def test_live_selection_without_print_area_is_fixed_size() -> None:
    strategy = select_live_paging_strategy(9, _LiveSheet("A1:C10"))
    assert isinstance(strategy, FixedSizePagingStrategy)
    assert len(strategy.calculate_paging_ranges()) == 4


def test_live_selection_falls_back_when_print_area_fails() -> None:
    strategy = select_live_paging_strategy(9, _BrokenSheet())
    assert isinstance(strategy, FixedSizePagingStrategy)


def test_find_next_range() -> None:
    ranges = ["A1:A10", "A11:A20", "A21:A30"]
    assert find_next_range(ranges, "A1:A10") == "A11:A20"
    assert find_next_range(ranges, "A21:A30") == ""
    assert find_next_range(ranges, "B1:B10") == ""
    assert find_next_range([], "A1:A10") == ""


def test_filter_remaining_with_no_known_returns_input() -> None:
    ranges = ["A1:A10", "A11:A20"]
    assert filter_remaining_paging_ranges(ranges, []) is ranges


def test_filter_remaining_drops_known_ranges() -> None:
    assert filter_remaining_paging_ranges(["A1:A10"], ["A1:A10"]) == []
    assert filter_remaining_paging_ranges(
        ["A1:A10", "A11:A20", "A21:A30"], ["$A$1:$A$10", "A21:A30"]
    ) == ["A11:A20"]


def test_paging_range_service_delegates() -> None:
    service = PagingRangeService(FixedSizePagingStrategy(9, _DimensionSheet("A1:C10")))
    ranges = service.get_paging_ranges()
    assert service.find_next_range(ranges, "A4:C6") == "A7:C9"
    assert service.filter_remaining_paging_ranges(ranges, ["A1:C3"]) == [
        "A4:C6",
        "A7:C9",
        "A10:C10",
    ]
