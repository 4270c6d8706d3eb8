from __future__ import annotations

import pytest

from xlbridge.backends.chart_types import (
    normalize_chart_type,
    resolve_chart_type_id,
)
from xlbridge.backends.rules import (
    ensure_conditional_format_type,
    ensure_validation_type,
    resolve_cell_operator,
    split_list_items,
    validation_operator,
)
from xlbridge.errors import UnsupportedOperationError


@pytest.mark.parametrize(
    ("criteria", "has_second", "expected"),
    [
        (">", False, "greaterThan"),
        ("greater than or equal to", False, "greaterThanOrEqual"),
        ("<>", False, "notEqual"),
        ("lessThan", False, "lessThan"),
        ("", False, "equal"),
        ("unknown", False, "equal"),
        ("", True, "between"),
        ("not between", True, "notBetween"),
        (">", True, "between"),
    ],
)
def test_resolve_cell_operator(criteria: str, has_second: bool, expected: str) -> None:
    assert resolve_cell_operator(criteria, has_second) == expected


def test_unsupported_rule_types_raise() -> None:
    assert ensure_validation_type("list") == "list"
    assert ensure_conditional_format_type("dataBar") == "dataBar"
    with pytest.raises(UnsupportedOperationError):
        ensure_validation_type("textLength")
    with pytest.raises(UnsupportedOperationError):
        ensure_conditional_format_type("iconSet")


def test_validation_operator_and_list_items() -> None:
    assert validation_operator("10") == "between"
    assert validation_operator("") == "greaterThanOrEqual"
    assert split_list_items("Yes, No ,Maybe") == ["Yes", "No", "Maybe"]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("col", "col"),
        ("Column", "col"),
        ("line", "line"),
        ("xy_scatter", "scatter"),
        ("radar", "col"),
        ("", "col"),
    ],
)
def test_normalize_chart_type(raw: str, expected: str) -> None:
    assert normalize_chart_type(raw) == expected


def test_resolve_chart_type_id() -> None:
    assert resolve_chart_type_id("col") == 51
    assert resolve_chart_type_id("pie") == 5
    assert resolve_chart_type_id("scatter") == -4169
