"""Document and worksheet capabilities shared by every backend.

Callers depend on :class:`Workbook` and :class:`Worksheet` only. Each backend
module provides one concrete class per protocol.
"""

from __future__ import annotations

from datetime import date, datetime, time
from types import TracebackType
from typing import Any, Literal, Protocol, runtime_checkable

from pydantic import BaseModel

from xlbridge.paging import PagingStrategy
from xlbridge.style.models import CellStyle

BackendName = Literal["xlwings", "openpyxl"]

DEFAULT_TABLE_STYLE = "TableStyleMedium2"


class Table(BaseModel):
    """A table (list object) on a worksheet."""

    name: str
    range: str


class PivotTable(BaseModel):
    """A pivot table on a worksheet."""

    name: str
    range: str


class Comment(BaseModel):
    """A cell comment."""

    cell: str
    author: str
    text: str


class DefinedName(BaseModel):
    """A workbook defined name. ``scope`` is a sheet name or ``None`` for global."""

    name: str
    refers_to: str
    scope: str | None = None


def format_cell_value(value: object) -> str:
    """Render a cell value as text the way the spreadsheet displays it."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return str(value)


@runtime_checkable
class Worksheet(Protocol):
    """Per-sheet capability. Instances hold a backend handle until released.

    Concrete classes subclass this protocol to inherit the context-manager
    methods, so ``with workbook.find_sheet("Sheet1") as sheet:`` always
    releases the handle.
    """

    def release(self) -> None:
        """Free the backend handle. Calling it again does nothing."""

    @property
    def name(self) -> str: ...

    def get_tables(self) -> list[Table]: ...

    def get_pivot_tables(self) -> list[PivotTable]: ...

    def add_table(self, table_range: str, table_name: str) -> None: ...

    def set_value(self, cell: str, value: Any) -> None: ...

    def set_formula(self, cell: str, formula: str) -> None: ...

    def get_value(self, cell: str) -> str: ...

    def get_formula(self, cell: str) -> str: ...

    def get_dimension(self) -> str: ...

    def get_paging_strategy(self, page_size: int | None = None) -> PagingStrategy: ...

    def capture_picture(self, capture_range: str) -> str: ...

    def get_cell_style(self, cell: str) -> CellStyle: ...

    def set_cell_style(self, cell: str, style: CellStyle) -> None: ...

    def merge_cells(self, merge_range: str) -> None: ...

    def unmerge_cells(self, merge_range: str) -> None: ...

    def set_column_width(self, start_col: str, end_col: str, width: float) -> None: ...

    def set_row_height(self, row: int, height: float) -> None: ...

    def insert_rows(self, row: int, count: int) -> None: ...

    def delete_rows(self, row: int, count: int) -> None: ...

    def insert_columns(self, column: str, count: int) -> None: ...

    def delete_columns(self, column: str, count: int) -> None: ...

    def add_chart(
        self, position: str, chart_type: str, data_range: str, title: str
    ) -> None: ...

    def freeze_panes(self, cell: str) -> None: ...

    def add_data_validation(
        self,
        validation_range: str,
        validation_type: str,
        formula1: str,
        formula2: str = "",
        allow_blank: bool = True,
    ) -> None: ...

    def find_replace(
        self,
        search_range: str,
        find: str,
        replace: str,
        match_case: bool = False,
        match_entire_cell: bool = False,
    ) -> int: ...

    def add_comment(self, cell: str, author: str, text: str) -> None: ...

    def get_comments(self) -> list[Comment]: ...

    def add_hyperlink(self, cell: str, url: str, display: str = "") -> None: ...

    def set_conditional_format(
        self,
        format_range: str,
        rule_type: str,
        criteria: str = "",
        value: str = "",
        value2: str = "",
        font_color: str = "",
        bg_color: str = "",
    ) -> None: ...

    def __enter__(self) -> Worksheet:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()


@runtime_checkable
class Workbook(Protocol):
    """Document capability."""

    @property
    def backend_name(self) -> BackendName: ...

    def get_sheets(self) -> list[Worksheet]: ...

    def find_sheet(self, sheet_name: str) -> Worksheet: ...

    def create_new_sheet(self, sheet_name: str) -> None: ...

    def copy_sheet(self, src_sheet_name: str, dest_sheet_name: str) -> None: ...

    def delete_sheet(self, sheet_name: str) -> None: ...

    def rename_sheet(self, old_name: str, new_name: str) -> None: ...

    def set_defined_name(
        self, name: str, refers_to: str, scope: str | None = None
    ) -> None: ...

    def get_defined_names(self) -> list[DefinedName]: ...

    def save(self) -> None: ...


__all__ = [
    "DEFAULT_TABLE_STYLE",
    "BackendName",
    "Comment",
    "DefinedName",
    "PivotTable",
    "Table",
    "Workbook",
    "Worksheet",
    "format_cell_value",
]
