from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from xlbridge.errors import InvalidFormatError

from .base import format_cell_value


@dataclass(frozen=True)
class TextReplacement:
    """Result of replacing inside one cell text."""

    text: str
    matched: bool


def replace_in_text(
    value: str,
    find: str,
    replace: str,
    *,
    match_case: bool,
    match_entire_cell: bool,
) -> TextReplacement:
    """Replace ``find`` in ``value``.

    Without ``match_case`` both modes compare ``str.lower()`` forms. Whole-cell
    mode swaps the full text for ``replace``. Substring mode replaces every
    non-overlapping occurrence left to right; scanning resumes after the
    inserted text, so a replacement that contains ``find`` is never rescanned.
    The replacement is inserted literally.

    Raises:
        InvalidFormatError: If ``find`` is empty.
    """
    if not find:
        raise InvalidFormatError("Search text must not be empty.")
    if match_entire_cell:
        if match_case:
            matched = value == find
        else:
            matched = value.lower() == find.lower()
        return TextReplacement(replace if matched else value, matched)
    if match_case:
        if find not in value:
            return TextReplacement(value, False)
        return TextReplacement(value.replace(find, replace), True)

    needle = find.lower()
    width = len(find)
    parts: list[str] = []
    start = 0
    index = 0
    while index + width <= len(value):
        if value[index : index + width].lower() == needle:
            parts.append(value[start:index])
            parts.append(replace)
            index += width
            start = index
        else:
            index += 1
    if not parts:
        return TextReplacement(value, False)
    parts.append(value[start:])
    return TextReplacement("".join(parts), True)


def replace_in_cells(
    cells: Iterable[tuple[str, object]],
    find: str,
    replace: str,
    *,
    match_case: bool,
    match_entire_cell: bool,
) -> tuple[dict[str, str], int]:
    """Run :func:`replace_in_text` over ``(cell, value)`` pairs.

    Each value is matched through its displayed text, so numbers, booleans
    and dates take part as well as strings. Empty cells are skipped.

    Returns:
        The new text of every changed cell and the number of changed cells.
    """
    changes: dict[str, str] = {}
    for cell, value in cells:
        text = format_cell_value(value)
        if not text:
            continue
        result = replace_in_text(
            text,
            find,
            replace,
            match_case=match_case,
            match_entire_cell=match_entire_cell,
        )
        if result.matched:
            changes[cell] = result.text
    return changes, len(changes)


__all__ = ["TextReplacement", "replace_in_cells", "replace_in_text"]
