"""Vocabulary for data validation and conditional formatting rules."""

from __future__ import annotations

from typing import Final

from xlbridge.errors import UnsupportedOperationError

# Ordered rows of (validation type, Excel COM XlDVType).
_VALIDATION_TYPE_ENTRIES: Final[tuple[tuple[str, int], ...]] = (
    ("list", 3),
    ("whole", 1),
    ("decimal", 2),
)

# Ordered rows of (operator, Excel COM XlFormatConditionOperator).
# Operator names follow the spreadsheet XML ``cellIs`` vocabulary.
_CELL_OPERATOR_ENTRIES: Final[tuple[tuple[str, int], ...]] = (
    ("between", 1),
    ("notBetween", 2),
    ("equal", 3),
    ("notEqual", 4),
    ("greaterThan", 5),
    ("lessThan", 6),
    ("greaterThanOrEqual", 7),
    ("lessThanOrEqual", 8),
)

CRITERIA_ALIASES: Final[dict[str, str]] = {
    "not between": "notBetween",
    "equal to": "equal",
    "==": "equal",
    "=": "equal",
    "not equal to": "notEqual",
    "!=": "notEqual",
    "<>": "notEqual",
    "greater than": "greaterThan",
    ">": "greaterThan",
    "less than": "lessThan",
    "<": "lessThan",
    "greater than or equal to": "greaterThanOrEqual",
    ">=": "greaterThanOrEqual",
    "less than or equal to": "lessThanOrEqual",
    "<=": "lessThanOrEqual",
}

VALIDATION_TYPE_TO_COM: Final[dict[str, int]] = dict(_VALIDATION_TYPE_ENTRIES)
SUPPORTED_VALIDATION_TYPES: Final[tuple[str, ...]] = tuple(
    name for name, _ in _VALIDATION_TYPE_ENTRIES
)
CELL_OPERATOR_TO_COM: Final[dict[str, int]] = dict(_CELL_OPERATOR_ENTRIES)
RANGE_OPERATORS: Final[frozenset[str]] = frozenset({"between", "notBetween"})

SUPPORTED_CONDITIONAL_FORMAT_TYPES: Final[tuple[str, ...]] = (
    "cell",
    "top",
    "duplicate",
    "colorScale",
    "dataBar",
)

XL_VALID_ALERT_STOP: Final[int] = 1
XL_CELL_VALUE: Final[int] = 1
XL_TOP10_TOP: Final[int] = 1
XL_DUPLICATE: Final[int] = 1
XL_CONDITION_VALUE_NUMBER: Final[int] = 0
XL_COLOR_SCALE_TWO_COLOR: Final[int] = 2

COLOR_SCALE_MIN_COLOR: Final[str] = "#F8696B"
COLOR_SCALE_MAX_COLOR: Final[str] = "#63BE7B"
DATA_BAR_COLOR: Final[str] = "#638EC6"


def ensure_validation_type(validation_type: str) -> str:
    """Return ``validation_type`` if supported.

    Raises:
        UnsupportedOperationError: For anything but list, whole or decimal.
    """
    if validation_type not in VALIDATION_TYPE_TO_COM:
        raise UnsupportedOperationError(
            f"Unsupported validation type: {validation_type}"
        )
    return validation_type


def ensure_conditional_format_type(rule_type: str) -> str:
    """Return ``rule_type`` if supported, else raise UnsupportedOperationError."""
    if rule_type not in SUPPORTED_CONDITIONAL_FORMAT_TYPES:
        raise UnsupportedOperationError(
            f"Unsupported conditional format type: {rule_type}"
        )
    return rule_type


def resolve_cell_operator(criteria: str, has_second_value: bool) -> str:
    """Map free-form criteria text to a ``cellIs`` operator name.

    A second value forces a range operator; empty or unknown criteria fall
    back to ``between`` or ``equal``.
    """
    text = criteria.strip()
    operator = CRITERIA_ALIASES.get(text, text)
    if operator not in CELL_OPERATOR_TO_COM:
        operator = "between" if has_second_value else "equal"
    if has_second_value and operator not in RANGE_OPERATORS:
        operator = "between"
    return operator


def validation_operator(formula2: str) -> str:
    """Numeric validations check a range when an upper bound is given."""
    return "between" if formula2 else "greaterThanOrEqual"


def split_list_items(formula1: str) -> list[str]:
    """Split a comma-separated list validation source."""
    return [item.strip() for item in formula1.split(",")]


__all__ = [
    "CELL_OPERATOR_TO_COM",
    "COLOR_SCALE_MAX_COLOR",
    "COLOR_SCALE_MIN_COLOR",
    "CRITERIA_ALIASES",
    "DATA_BAR_COLOR",
    "RANGE_OPERATORS",
    "SUPPORTED_CONDITIONAL_FORMAT_TYPES",
    "SUPPORTED_VALIDATION_TYPES",
    "VALIDATION_TYPE_TO_COM",
    "ensure_conditional_format_type",
    "ensure_validation_type",
    "resolve_cell_operator",
    "split_list_items",
    "validation_operator",
]
