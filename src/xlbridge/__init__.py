"""Backend-agnostic spreadsheet editing over Excel (xlwings) or openpyxl."""

from __future__ import annotations

from .backends.base import (
    BackendName,
    Comment,
    DefinedName,
    PivotTable,
    Table,
    Workbook,
    Worksheet,
)
from .config import DEFAULT_PAGE_SIZE, BridgeConfig
from .errors import (
    BackendUnavailableError,
    InvalidFormatError,
    IOFailureError,
    NotFoundError,
    UnsupportedOperationError,
    XlBridgeError,
)
from .io import PathPolicy
from .paging import (
    FixedSizePagingStrategy,
    PagingRangeService,
    PagingStrategy,
    PrintAreaPagingStrategy,
)
from .selector import open_file, open_sheet, open_workbook
from .shared.a1 import CellRange, normalize_range, parse_range
from .style.models import Border, CellStyle, FillStyle, FontStyle

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "BackendName",
    "BackendUnavailableError",
    "Border",
    "BridgeConfig",
    "CellRange",
    "CellStyle",
    "Comment",
    "DefinedName",
    "FillStyle",
    "FixedSizePagingStrategy",
    "FontStyle",
    "IOFailureError",
    "InvalidFormatError",
    "NotFoundError",
    "PagingRangeService",
    "PagingStrategy",
    "PathPolicy",
    "PivotTable",
    "PrintAreaPagingStrategy",
    "Table",
    "UnsupportedOperationError",
    "Workbook",
    "Worksheet",
    "XlBridgeError",
    "normalize_range",
    "open_file",
    "open_sheet",
    "open_workbook",
    "parse_range",
]
