from __future__ import annotations

from typing import Final

# Explicit ordered rows of (chart_type, Excel COM ChartType ID, openpyxl chart class).
# This is the single source of truth; every mapping below is derived from it.
_CHART_TYPE_ENTRIES: Final[tuple[tuple[str, int, str], ...]] = (
    ("col", 51, "BarChart"),
    ("bar", 57, "BarChart"),
    ("line", 4, "LineChart"),
    ("pie", 5, "PieChart"),
    ("area", 1, "AreaChart"),
    ("scatter", -4169, "ScatterChart"),
)

DEFAULT_CHART_TYPE: Final[str] = "col"

SUPPORTED_CHART_TYPES: Final[tuple[str, ...]] = tuple(
    name for name, _, _ in _CHART_TYPE_ENTRIES
)
CHART_TYPE_TO_COM_ID: Final[dict[str, int]] = {
    name: com_id for name, com_id, _ in _CHART_TYPE_ENTRIES
}
CHART_TYPE_TO_OPENPYXL_CLASS: Final[dict[str, str]] = {
    name: class_name for name, _, class_name in _CHART_TYPE_ENTRIES
}

CHART_TYPE_ALIASES: Final[dict[str, str]] = {
    "column": "col",
    "column_clustered": "col",
    "bar_clustered": "bar",
    "xy_scatter": "scatter",
}

SUPPORTED_CHART_TYPES_SET: Final[frozenset[str]] = frozenset(SUPPORTED_CHART_TYPES)


def normalize_chart_type(chart_type: str) -> str:
    """Normalize chart type input to a canonical key.

    Unknown or empty values fall back to a clustered column chart.

    Args:
        chart_type: Raw chart type value.

    Returns:
        Canonical chart type key.
    """
    candidate = chart_type.strip().lower()
    canonical = CHART_TYPE_ALIASES.get(candidate, candidate)
    if canonical in SUPPORTED_CHART_TYPES_SET:
        return canonical
    return DEFAULT_CHART_TYPE


def resolve_chart_type_id(chart_type: str) -> int:
    """Resolve a chart type to its Excel COM ChartType ID."""
    return CHART_TYPE_TO_COM_ID[normalize_chart_type(chart_type)]


__all__ = [
    "CHART_TYPE_ALIASES",
    "CHART_TYPE_TO_COM_ID",
    "CHART_TYPE_TO_OPENPYXL_CLASS",
    "DEFAULT_CHART_TYPE",
    "SUPPORTED_CHART_TYPES",
    "normalize_chart_type",
    "resolve_chart_type_id",
]
