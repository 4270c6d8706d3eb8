"""Direct-file backend built on openpyxl.

No host application is needed. openpyxl does not evaluate formulas, so
``get_value`` on a formula cell returns the value cached by the application
that last saved the file, or the formula text when there is none.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
import logging
from pathlib import Path
from typing import Any, cast
import warnings
from zipfile import BadZipFile

from openpyxl import Workbook as OpenpyxlBook
from openpyxl import load_workbook
from openpyxl.chart import (
    AreaChart,
    BarChart,
    LineChart,
    PieChart,
    Reference,
    ScatterChart,
)
from openpyxl.comments import Comment as OpenpyxlComment
from openpyxl.formatting.rule import (
    CellIsRule,
    ColorScaleRule,
    DataBarRule,
    Rule,
)
from openpyxl.styles import Font, PatternFill
from openpyxl.styles.differential import DifferentialStyle
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.workbook.defined_name import DefinedName as OpenpyxlDefinedName
from openpyxl.worksheet.datavalidation import DataValidation
from openpyxl.worksheet.hyperlink import Hyperlink
from openpyxl.worksheet.table import Table as OpenpyxlTable
from openpyxl.worksheet.table import TableStyleInfo

from xlbridge.errors import (
    BackendUnavailableError,
    InvalidFormatError,
    IOFailureError,
    NotFoundError,
    UnsupportedOperationError,
)
from xlbridge.config import DEFAULT_PAGE_SIZE
from xlbridge.paging import (
    FixedSizePagingStrategy,
    PagingStrategy,
    resolve_page_size,
)
from xlbridge.shared.a1 import (
    cell_name_to_coordinates,
    column_index_to_label,
    column_label_to_index,
    iter_range_cells,
    normalize_range,
    parse_range,
    strip_sheet_prefix,
)
from xlbridge.style.models import CellStyle
from xlbridge.style.openpyxl_codec import apply_cell_style, read_cell_style, to_argb

from .base import (
    DEFAULT_TABLE_STYLE,
    BackendName,
    Comment,
    DefinedName,
    PivotTable,
    Table,
    Worksheet,
    format_cell_value,
)
from .chart_types import CHART_TYPE_TO_OPENPYXL_CLASS, normalize_chart_type
from .rules import (
    COLOR_SCALE_MAX_COLOR,
    COLOR_SCALE_MIN_COLOR,
    DATA_BAR_COLOR,
    RANGE_OPERATORS,
    ensure_conditional_format_type,
    ensure_validation_type,
    resolve_cell_operator,
    split_list_items,
    validation_operator,
)
from .text_replace import replace_in_cells

logger = logging.getLogger(__name__)

_CHART_CLASSES: dict[str, Any] = {
    cls.__name__: cls
    for cls in (AreaChart, BarChart, LineChart, PieChart, ScatterChart)
}


@contextmanager
def _quiet_openpyxl() -> Iterator[None]:
    """Silence openpyxl warnings about workbook parts it drops on load."""
    with warnings.catch_warnings():
        warnings.filterwarnings(
            "ignore",
            message="Unknown extension is not supported and will be removed",
            category=UserWarning,
            module="openpyxl",
        )
        warnings.filterwarnings(
            "ignore",
            message=(
                "Conditional Formatting extension is not supported "
                "and will be removed"
            ),
            category=UserWarning,
            module="openpyxl",
        )
        warnings.filterwarnings(
            "ignore",
            message="Cannot parse header or footer so it will be ignored",
            category=UserWarning,
            module="openpyxl",
        )
        yield


def _load_book(file_path: Path, *, data_only: bool) -> OpenpyxlBook:
    keep_vba = file_path.suffix.lower() == ".xlsm"
    with _quiet_openpyxl():
        return load_workbook(file_path, data_only=data_only, keep_vba=keep_vba)


def open_openpyxl_workbook(
    file_path: Path, *, default_page_size: int = DEFAULT_PAGE_SIZE
) -> OpenpyxlWorkbook:
    """Load an existing workbook file.

    Raises:
        FileNotFoundError: When the file does not exist.
        IOFailureError: When the file cannot be read as a workbook.
    """
    try:
        book = _load_book(file_path, data_only=False)
    except FileNotFoundError:
        raise
    except (InvalidFileException, BadZipFile, KeyError, OSError) as exc:
        raise IOFailureError(f"Failed to open workbook: {file_path} ({exc})") from exc
    logger.debug("Opened %s with openpyxl", file_path)
    return OpenpyxlWorkbook(
        book, file_path, from_file=True, default_page_size=default_page_size
    )


def new_openpyxl_workbook(
    file_path: Path, *, default_page_size: int = DEFAULT_PAGE_SIZE
) -> OpenpyxlWorkbook:
    """Create an empty in-memory workbook that ``save()`` writes to ``file_path``."""
    logger.debug("Created new in-memory workbook bound to %s", file_path)
    return OpenpyxlWorkbook(
        OpenpyxlBook(), file_path, from_file=False, default_page_size=default_page_size
    )


class OpenpyxlWorkbook:
    """Document capability over an ``openpyxl.Workbook``.

    Values cached by the last calculating application are read from the file
    on disk. They are trusted for a formula cell only while the cell at the
    same coordinate on disk holds the same formula and no sheet has been
    renamed, removed or had rows or columns shifted since the last load or
    save.
    """

    def __init__(
        self,
        book: OpenpyxlBook,
        path: Path,
        *,
        from_file: bool,
        default_page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self.book = book
        self.path = path
        self.default_page_size = default_page_size
        self._from_file = from_file
        self._layout_changed = False
        self._cached_book: OpenpyxlBook | None = None
        self._formula_book: OpenpyxlBook | None = None

    @property
    def backend_name(self) -> BackendName:
        return "openpyxl"

    def get_sheets(self) -> list[Worksheet]:
        return [OpenpyxlWorksheet(self, sheet) for sheet in self.book.worksheets]

    def find_sheet(self, sheet_name: str) -> OpenpyxlWorksheet:
        return OpenpyxlWorksheet(self, self._sheet(sheet_name))

    def create_new_sheet(self, sheet_name: str) -> None:
        self._ensure_new_name(sheet_name)
        self.book.create_sheet(title=sheet_name)

    def copy_sheet(self, src_sheet_name: str, dest_sheet_name: str) -> None:
        """Copy a sheet and place the copy right after its source."""
        source = self._sheet(src_sheet_name)
        self._ensure_new_name(dest_sheet_name)
        copied = self.book.copy_worksheet(source)
        copied.title = dest_sheet_name
        target_index = self.book.index(source) + 1
        self.book.move_sheet(copied, offset=target_index - self.book.index(copied))

    def delete_sheet(self, sheet_name: str) -> None:
        self.book.remove(self._sheet(sheet_name))
        self.mark_layout_changed()

    def rename_sheet(self, old_name: str, new_name: str) -> None:
        sheet = self._sheet(old_name)
        if old_name == new_name:
            return
        self._ensure_new_name(new_name)
        sheet.title = new_name
        self.mark_layout_changed()

    def set_defined_name(
        self, name: str, refers_to: str, scope: str | None = None
    ) -> None:
        """Create or replace a defined name, globally or on sheet ``scope``."""
        definition = OpenpyxlDefinedName(name, attr_text=refers_to.removeprefix("="))
        if scope:
            self._sheet(scope).defined_names[name] = definition
        else:
            self.book.defined_names[name] = definition

    def get_defined_names(self) -> list[DefinedName]:
        result = [
            DefinedName(name=name, refers_to=f"={definition.attr_text}")
            for name, definition in self.book.defined_names.items()
        ]
        for sheet in self.book.worksheets:
            for name, definition in sheet.defined_names.items():
                result.append(
                    DefinedName(
                        name=name,
                        refers_to=f"={definition.attr_text}",
                        scope=sheet.title,
                    )
                )
        return result

    def save(self) -> None:
        try:
            self.book.save(self.path)
        except OSError as exc:
            raise IOFailureError(
                f"Failed to save workbook: {self.path} ({exc})"
            ) from exc
        self._from_file = True
        self._layout_changed = False
        self._drop_disk_copies()
        logger.debug("Saved %s", self.path)

    def close(self) -> None:
        self.book.close()
        self._drop_disk_copies()

    def cached_value(self, sheet_name: str, cell: str, formula: str) -> object | None:
        """Return the value the saving application cached for a formula cell.

        Args:
            sheet_name: Sheet holding the cell.
            cell: Cell coordinate.
            formula: The cell's current formula text, with leading ``=``.

        Returns:
            The cached value, or ``None`` when the file holds none or the cell
            on disk no longer matches the workbook in memory.
        """
        if self._layout_changed or not self._from_file or not self.path.exists():
            return None
        if self._cached_book is None or self._formula_book is None:
            try:
                self._cached_book = _load_book(self.path, data_only=True)
                self._formula_book = _load_book(self.path, data_only=False)
            except (InvalidFileException, BadZipFile, KeyError, OSError) as exc:
                logger.debug("Cached values unavailable for %s. (%r)", self.path, exc)
                self._drop_disk_copies()
                return None
        if sheet_name not in self._formula_book.sheetnames:
            return None
        on_disk = self._formula_book[sheet_name][cell]
        if not _is_formula_cell(on_disk) or _formula_text(on_disk.value) != formula:
            return None
        return self._cached_book[sheet_name][cell].value

    def mark_layout_changed(self) -> None:
        """Stop trusting disk coordinates after sheets or cells moved."""
        self._layout_changed = True
        self._drop_disk_copies()

    def _drop_disk_copies(self) -> None:
        for book in (self._cached_book, self._formula_book):
            if book is not None:
                book.close()
        self._cached_book = None
        self._formula_book = None

    def _sheet(self, sheet_name: str) -> Any:
        if sheet_name not in self.book.sheetnames:
            raise NotFoundError(f"Sheet not found: {sheet_name}")
        return self.book[sheet_name]

    def _ensure_new_name(self, sheet_name: str) -> None:
        if sheet_name in self.book.sheetnames:
            raise InvalidFormatError(f"Sheet already exists: {sheet_name}")


class OpenpyxlWorksheet(Worksheet):
    """Worksheet capability over an openpyxl worksheet.

    Using the worksheet after ``release`` raises
    :class:`BackendUnavailableError`, as the live backend does.
    """

    def __init__(self, workbook: OpenpyxlWorkbook, sheet: Any) -> None:
        self._workbook = workbook
        self._sheet: Any | None = sheet
        self._name = cast(str, sheet.title)

    @property
    def sheet(self) -> Any:
        if self._sheet is None:
            raise BackendUnavailableError(f"Worksheet released: {self._name}")
        return self._sheet

    def release(self) -> None:
        if self._sheet is not None:
            self._name = cast(str, self._sheet.title)
        self._sheet = None

    @property
    def name(self) -> str:
        if self._sheet is None:
            return self._name
        return cast(str, self._sheet.title)

    def get_tables(self) -> list[Table]:
        return [
            Table(name=table.displayName, range=normalize_range(table.ref))
            for table in self.sheet.tables.values()
        ]

    def get_pivot_tables(self) -> list[PivotTable]:
        return [
            PivotTable(name=pivot.name, range=normalize_range(pivot.location.ref))
            for pivot in getattr(self.sheet, "_pivots", [])
        ]

    def add_table(self, table_range: str, table_name: str) -> None:
        table = OpenpyxlTable(displayName=table_name, ref=str(parse_range(table_range)))
        table.tableStyleInfo = TableStyleInfo(
            name=DEFAULT_TABLE_STYLE,
            showFirstColumn=False,
            showLastColumn=False,
            showRowStripes=True,
            showColumnStripes=True,
        )
        try:
            self.sheet.add_table(table)
        except ValueError as exc:
            raise InvalidFormatError(str(exc)) from exc

    def set_value(self, cell: str, value: Any) -> None:
        self._cell(cell).value = value

    def set_formula(self, cell: str, formula: str) -> None:
        text = formula if formula.startswith("=") else f"={formula}"
        self._cell(cell).value = text

    def get_value(self, cell: str) -> str:
        target = self._existing_cell(cell)
        if target is None:
            return ""
        if not _is_formula_cell(target):
            return format_cell_value(target.value)
        formula = _formula_text(target.value)
        cached = self._workbook.cached_value(self.name, target.coordinate, formula)
        if cached is not None:
            return format_cell_value(cached)
        return formula

    def get_formula(self, cell: str) -> str:
        target = self._existing_cell(cell)
        if target is not None and _is_formula_cell(target):
            return _formula_text(target.value)
        return self.get_value(cell)

    def get_dimension(self) -> str:
        return cast(str, self.sheet.calculate_dimension())

    def get_paging_strategy(self, page_size: int | None = None) -> PagingStrategy:
        return FixedSizePagingStrategy(
            resolve_page_size(page_size, self._workbook.default_page_size), self
        )

    def capture_picture(self, capture_range: str) -> str:
        raise UnsupportedOperationError(
            "capture_picture is not supported by the openpyxl backend."
        )

    def get_cell_style(self, cell: str) -> CellStyle:
        target = self._existing_cell(cell)
        if target is None:
            return CellStyle()
        return read_cell_style(target)

    def set_cell_style(self, cell: str, style: CellStyle) -> None:
        apply_cell_style(self._cell(cell), style)

    def merge_cells(self, merge_range: str) -> None:
        self.sheet.merge_cells(str(parse_range(merge_range)))

    def unmerge_cells(self, merge_range: str) -> None:
        try:
            self.sheet.unmerge_cells(str(parse_range(merge_range)))
        except ValueError as exc:
            raise NotFoundError(f"Range is not merged: {merge_range}") from exc

    def set_column_width(self, start_col: str, end_col: str, width: float) -> None:
        first = column_label_to_index(start_col)
        last = column_label_to_index(end_col)
        for index in range(min(first, last), max(first, last) + 1):
            self.sheet.column_dimensions[column_index_to_label(index)].width = width

    def set_row_height(self, row: int, height: float) -> None:
        self.sheet.row_dimensions[row].height = height

    def insert_rows(self, row: int, count: int) -> None:
        self.sheet.insert_rows(row, amount=count)
        self._workbook.mark_layout_changed()

    def delete_rows(self, row: int, count: int) -> None:
        self.sheet.delete_rows(row, amount=count)
        self._workbook.mark_layout_changed()

    def insert_columns(self, column: str, count: int) -> None:
        self.sheet.insert_cols(column_label_to_index(column), amount=count)
        self._workbook.mark_layout_changed()

    def delete_columns(self, column: str, count: int) -> None:
        self.sheet.delete_cols(column_label_to_index(column), amount=count)
        self._workbook.mark_layout_changed()

    def add_chart(
        self, position: str, chart_type: str, data_range: str, title: str
    ) -> None:
        cell_name_to_coordinates(position)
        source = self.sheet
        if "!" in data_range:
            sheet_name = data_range.rsplit("!", maxsplit=1)[0].strip("'")
            source = self._workbook._sheet(sheet_name)
        area = parse_range(strip_sheet_prefix(data_range))
        chart = _new_chart(chart_type)
        if title:
            chart.title = title
        chart.add_data(
            Reference(
                source,
                min_col=area.start_col,
                min_row=area.start_row,
                max_col=area.end_col,
                max_row=area.end_row,
            ),
            titles_from_data=False,
        )
        self.sheet.add_chart(chart, position)

    def freeze_panes(self, cell: str) -> None:
        cell_name_to_coordinates(cell)
        self.sheet.freeze_panes = cell

    def add_data_validation(
        self,
        validation_range: str,
        validation_type: str,
        formula1: str,
        formula2: str = "",
        allow_blank: bool = True,
    ) -> None:
        target = str(parse_range(validation_range))
        if ensure_validation_type(validation_type) == "list":
            validation = DataValidation(
                type="list",
                formula1=_list_source(formula1),
                allow_blank=allow_blank,
            )
        else:
            validation = DataValidation(
                type=validation_type,
                operator=validation_operator(formula2),
                formula1=formula1,
                formula2=formula2 or None,
                allow_blank=allow_blank,
            )
        validation.add(target)
        self.sheet.add_data_validation(validation)

    def find_replace(
        self,
        search_range: str,
        find: str,
        replace: str,
        match_case: bool = False,
        match_entire_cell: bool = False,
    ) -> int:
        area = parse_range(search_range or self.get_dimension())
        cells: list[tuple[str, object]] = []
        for column, row in iter_range_cells(area):
            if row > self.sheet.max_row or column > self.sheet.max_column:
                continue
            target = self.sheet.cell(row=row, column=column)
            if _is_formula_cell(target):
                continue
            cells.append((target.coordinate, target.value))
        changes, count = replace_in_cells(
            cells,
            find,
            replace,
            match_case=match_case,
            match_entire_cell=match_entire_cell,
        )
        for coordinate, text in changes.items():
            self.sheet[coordinate].value = text
        return count

    def add_comment(self, cell: str, author: str, text: str) -> None:
        self._cell(cell).comment = OpenpyxlComment(text, author)

    def get_comments(self) -> list[Comment]:
        result: list[Comment] = []
        for row in self.sheet.iter_rows():
            for target in row:
                comment = target.comment
                if comment is None:
                    continue
                result.append(
                    Comment(
                        cell=target.coordinate,
                        author=comment.author or "",
                        text=comment.text or "",
                    )
                )
        return result

    def add_hyperlink(self, cell: str, url: str, display: str = "") -> None:
        """Link ``cell`` to a URL, or to a ``Sheet!A1`` location inside the book."""
        target = self._cell(cell)
        if "!" in url and not url.startswith("http"):
            link = Hyperlink(ref=cell, location=url.removeprefix("#"))
        else:
            link = Hyperlink(ref=cell, target=url)
        if display:
            link.display = display
        target.hyperlink = link
        if display:
            target.value = display

    def set_conditional_format(
        self,
        format_range: str,
        rule_type: str,
        criteria: str = "",
        value: str = "",
        value2: str = "",
        font_color: str = "",
        bg_color: str = "",
    ) -> None:
        target = str(parse_range(format_range))
        ensure_conditional_format_type(rule_type)
        font = Font(color=to_argb(font_color)) if font_color else None
        fill = (
            PatternFill(fill_type="solid", bgColor=to_argb(bg_color))
            if bg_color
            else None
        )
        if rule_type == "cell":
            rule = _cell_rule(criteria, value, value2, font, fill)
        elif rule_type == "top":
            rule = Rule(
                type="top10",
                rank=int(value) if value else 10,
                percent=criteria.strip() == "%",
                dxf=DifferentialStyle(font=font, fill=fill),
            )
        elif rule_type == "duplicate":
            rule = Rule(
                type="duplicateValues", dxf=DifferentialStyle(font=font, fill=fill)
            )
        elif rule_type == "colorScale":
            rule = ColorScaleRule(
                start_type="num" if value else "min",
                start_value=value or None,
                start_color=to_argb(COLOR_SCALE_MIN_COLOR),
                end_type="num" if value2 else "max",
                end_value=value2 or None,
                end_color=to_argb(bg_color or COLOR_SCALE_MAX_COLOR),
            )
        else:
            rule = DataBarRule(
                start_type="num" if value else "min",
                start_value=value or None,
                end_type="num" if value2 else "max",
                end_value=value2 or None,
                color=to_argb(bg_color or DATA_BAR_COLOR),
            )
        self.sheet.conditional_formatting.add(target, rule)

    def _cell(self, cell: str) -> Any:
        column, row = cell_name_to_coordinates(cell)
        return self.sheet.cell(row=row, column=column)

    def _existing_cell(self, cell: str) -> Any | None:
        """Look up a cell without growing the used area."""
        column, row = cell_name_to_coordinates(cell)
        if row > self.sheet.max_row or column > self.sheet.max_column:
            return None
        return self.sheet.cell(row=row, column=column)


def _cell_rule(
    criteria: str,
    value: str,
    value2: str,
    font: Font | None,
    fill: PatternFill | None,
) -> Rule:
    operator = resolve_cell_operator(criteria, bool(value2))
    formula = [value, value2] if operator in RANGE_OPERATORS else [value]
    return CellIsRule(operator=operator, formula=formula, font=font, fill=fill)


def _new_chart(chart_type: str) -> Any:
    key = normalize_chart_type(chart_type)
    chart = _CHART_CLASSES[CHART_TYPE_TO_OPENPYXL_CLASS[key]]()
    if isinstance(chart, BarChart):
        chart.type = key
    return chart


def _list_source(formula1: str) -> str:
    """Quote a comma-separated item list; pass ``=A1:A5`` references through."""
    if formula1.startswith("="):
        return formula1[1:]
    return '"' + ",".join(split_list_items(formula1)) + '"'


def _is_formula_cell(cell: Any) -> bool:
    return cell.data_type == "f"


def _formula_text(value: object) -> str:
    text = getattr(value, "text", value)
    formula = "" if text is None else str(text)
    return formula if formula.startswith("=") else f"={formula}"


__all__ = [
    "OpenpyxlWorkbook",
    "OpenpyxlWorksheet",
    "new_openpyxl_workbook",
    "open_openpyxl_workbook",
]
