from __future__ import annotations

from .apartment import ComApartment
from .base import (
    DEFAULT_TABLE_STYLE,
    BackendName,
    Comment,
    DefinedName,
    PivotTable,
    Table,
    Workbook,
    Worksheet,
)
from .openpyxl_backend import (
    OpenpyxlWorkbook,
    OpenpyxlWorksheet,
    new_openpyxl_workbook,
    open_openpyxl_workbook,
)
from .xlwings_backend import XlwingsWorkbook, XlwingsWorksheet, open_xlwings_workbook

__all__ = [
    "DEFAULT_TABLE_STYLE",
    "BackendName",
    "ComApartment",
    "Comment",
    "DefinedName",
    "OpenpyxlWorkbook",
    "OpenpyxlWorksheet",
    "PivotTable",
    "Table",
    "Workbook",
    "Worksheet",
    "XlwingsWorkbook",
    "XlwingsWorksheet",
    "new_openpyxl_workbook",
    "open_openpyxl_workbook",
    "open_xlwings_workbook",
]
