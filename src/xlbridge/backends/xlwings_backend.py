"""Live-automation backend built on xlwings (Excel over COM).

Every call goes through the running Excel instance, so values read back are
the ones Excel calculated. The acquiring thread is bound to a COM apartment
for the lifetime of the workbook.
"""

from __future__ import annotations

import base64
import logging
from pathlib import Path
import tempfile
from typing import Any, cast

import xlwings as xw

from xlbridge.errors import (
    BackendUnavailableError,
    InvalidFormatError,
    IOFailureError,
    NotFoundError,
    UnsupportedOperationError,
)
from xlbridge.config import DEFAULT_PAGE_SIZE
from xlbridge.paging import (
    PagingStrategy,
    resolve_page_size,
    select_live_paging_strategy,
)
from xlbridge.shared.a1 import (
    cell_name_to_coordinates,
    column_index_to_label,
    column_label_to_index,
    coordinates_to_cell_name,
    normalize_range,
    parse_range,
    strip_sheet_prefix,
)
from xlbridge.style.com_codec import (
    apply_range_style,
    hex_to_com_color,
    read_range_style,
)
from xlbridge.style.models import CellStyle

from .apartment import ComApartment
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
from .chart_types import resolve_chart_type_id
from .rules import (
    CELL_OPERATOR_TO_COM,
    COLOR_SCALE_MAX_COLOR,
    COLOR_SCALE_MIN_COLOR,
    DATA_BAR_COLOR,
    RANGE_OPERATORS,
    VALIDATION_TYPE_TO_COM,
    XL_CELL_VALUE,
    XL_COLOR_SCALE_TWO_COLOR,
    XL_CONDITION_VALUE_NUMBER,
    XL_DUPLICATE,
    XL_TOP10_TOP,
    XL_VALID_ALERT_STOP,
    ensure_conditional_format_type,
    ensure_validation_type,
    resolve_cell_operator,
    split_list_items,
    validation_operator,
)
from .text_replace import replace_in_cells

logger = logging.getLogger(__name__)

_CHART_WIDTH = 360.0
_CHART_HEIGHT = 220.0


def _find_open_workbook(file_path: Path) -> xw.Book | None:
    """Return an existing workbook if already open in Excel.

    Args:
        file_path: Workbook path to search for.

    Returns:
        Existing xlwings workbook if open; otherwise None.
    """
    try:
        for app in xw.apps:
            for wb in app.books:
                try:
                    if Path(wb.fullname).resolve() == file_path.resolve():
                        return wb
                except Exception:
                    continue
    except Exception:
        return None
    return None


def open_xlwings_workbook(
    file_path: Path,
    *,
    visible: bool = False,
    apartment: ComApartment | None = None,
    default_page_size: int = DEFAULT_PAGE_SIZE,
) -> XlwingsWorkbook:
    """Attach to ``file_path`` in a running Excel, or open it in a new instance.

    An instance started here is owned by the returned workbook and is quit by
    :meth:`XlwingsWorkbook.close`. An attached workbook is left open.

    Raises:
        BackendUnavailableError: When Excel cannot be reached or the file
            cannot be opened by it.
    """
    apartment = (apartment or ComApartment()).acquire()
    existing = _find_open_workbook(file_path)
    if existing is not None:
        logger.debug("Attached to open workbook %s", file_path)
        return XlwingsWorkbook(
            existing, apartment=apartment, default_page_size=default_page_size
        )

    app = None
    try:
        app = xw.App(add_book=False, visible=visible)
        app.display_alerts = False
        book = app.books.open(str(file_path))
    except Exception as exc:
        if app is not None:
            try:
                app.quit()
            except Exception as quit_exc:
                logger.debug("Failed to quit Excel. (%r)", quit_exc)
        apartment.release()
        raise BackendUnavailableError(
            f"Excel could not open {file_path} ({exc!r})"
        ) from exc
    logger.debug("Opened %s in a new Excel instance", file_path)
    return XlwingsWorkbook(
        book, app=app, apartment=apartment, default_page_size=default_page_size
    )


class XlwingsWorkbook:
    """Document capability over an ``xlwings.Book``."""

    def __init__(
        self,
        book: xw.Book,
        *,
        app: xw.App | None = None,
        apartment: ComApartment | None = None,
        default_page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self.book = book
        self.default_page_size = default_page_size
        self._app = app
        self._apartment = apartment
        self._closed = False

    @property
    def backend_name(self) -> BackendName:
        return "xlwings"

    def get_sheets(self) -> list[Worksheet]:
        return [XlwingsWorksheet(self, sheet) for sheet in self.book.sheets]

    def find_sheet(self, sheet_name: str) -> XlwingsWorksheet:
        return XlwingsWorksheet(self, self.sheet(sheet_name))

    def create_new_sheet(self, sheet_name: str) -> None:
        self._ensure_new_name(sheet_name)
        sheets = self.book.sheets
        sheets.add(name=sheet_name, after=sheets[len(sheets) - 1])

    def copy_sheet(self, src_sheet_name: str, dest_sheet_name: str) -> None:
        source = self.sheet(src_sheet_name)
        self._ensure_new_name(dest_sheet_name)
        source.copy(after=source, name=dest_sheet_name)

    def delete_sheet(self, sheet_name: str) -> None:
        self.sheet(sheet_name).delete()

    def rename_sheet(self, old_name: str, new_name: str) -> None:
        sheet = self.sheet(old_name)
        if old_name == new_name:
            return
        self._ensure_new_name(new_name)
        sheet.name = new_name

    def set_defined_name(
        self, name: str, refers_to: str, scope: str | None = None
    ) -> None:
        formula = refers_to if refers_to.startswith("=") else f"={refers_to}"
        names = self.sheet(scope).names if scope else self.book.names
        names.add(name, formula)

    def get_defined_names(self) -> list[DefinedName]:
        """List defined names. Sheet-level names come back as ``Sheet!Name``."""
        result: list[DefinedName] = []
        for defined in self.book.names:
            full_name = cast(str, defined.name)
            scope: str | None = None
            name = full_name
            if "!" in full_name:
                prefix, name = full_name.rsplit("!", maxsplit=1)
                scope = prefix.strip("'")
            result.append(
                DefinedName(name=name, refers_to=defined.refers_to, scope=scope)
            )
        return result

    def save(self) -> None:
        try:
            self.book.save()
        except Exception as exc:
            raise IOFailureError(f"Failed to save workbook: {exc!r}") from exc
        logger.debug("Saved %s", self.book.name)

    def close(self) -> None:
        """Close an owned Excel instance and release the COM apartment."""
        if self._closed:
            return
        self._closed = True
        try:
            if self._app is not None:
                try:
                    self.book.close()
                except Exception as exc:
                    logger.debug("Failed to close workbook. (%r)", exc)
                try:
                    self._app.quit()
                except Exception as exc:
                    logger.debug("Failed to quit Excel. (%r)", exc)
        finally:
            if self._apartment is not None:
                self._apartment.release()

    def sheet(self, sheet_name: str) -> xw.Sheet:
        """Return the xlwings sheet called ``sheet_name``."""
        for sheet in self.book.sheets:
            if sheet.name == sheet_name:
                return sheet
        raise NotFoundError(f"Sheet not found: {sheet_name}")

    def _ensure_new_name(self, sheet_name: str) -> None:
        if any(sheet.name == sheet_name for sheet in self.book.sheets):
            raise InvalidFormatError(f"Sheet already exists: {sheet_name}")


class XlwingsWorksheet(Worksheet):
    """Worksheet capability over an xlwings sheet.

    ``release`` drops the COM reference; using the worksheet afterwards
    raises :class:`BackendUnavailableError`.
    """

    def __init__(self, workbook: XlwingsWorkbook, sheet: xw.Sheet) -> None:
        self._workbook = workbook
        self._sheet: xw.Sheet | None = sheet
        self._name = cast(str, sheet.name)

    @property
    def sheet(self) -> xw.Sheet:
        if self._sheet is None:
            raise BackendUnavailableError(f"Worksheet released: {self._name}")
        return self._sheet

    @property
    def _api(self) -> Any:
        return self.sheet.api

    def release(self) -> None:
        self._sheet = None

    @property
    def name(self) -> str:
        return self._name

    def get_tables(self) -> list[Table]:
        return [
            Table(name=table.name, range=normalize_range(table.range.address))
            for table in self.sheet.tables
        ]

    def get_pivot_tables(self) -> list[PivotTable]:
        pivots = self._api.PivotTables()
        result: list[PivotTable] = []
        for index in range(1, int(pivots.Count) + 1):
            pivot = pivots.Item(index)
            result.append(
                PivotTable(
                    name=pivot.Name,
                    range=normalize_range(pivot.TableRange2.Address),
                )
            )
        return result

    def add_table(self, table_range: str, table_name: str) -> None:
        self.sheet.tables.add(
            source=self._range(table_range),
            name=table_name,
            table_style_name=DEFAULT_TABLE_STYLE,
        )

    def set_value(self, cell: str, value: Any) -> None:
        self._cell(cell).value = value

    def set_formula(self, cell: str, formula: str) -> None:
        self._cell(cell).formula = formula if formula.startswith("=") else f"={formula}"

    def get_value(self, cell: str) -> str:
        return format_cell_value(self._cell(cell).value)

    def get_formula(self, cell: str) -> str:
        formula = self._cell(cell).formula
        if isinstance(formula, str) and formula.startswith("="):
            return formula
        return self.get_value(cell)

    def get_dimension(self) -> str:
        return normalize_range(self.sheet.used_range.address)

    def get_print_area(self) -> str:
        return cast(str, self._api.PageSetup.PrintArea or "")

    def get_horizontal_page_breaks(self) -> list[int]:
        breaks = self._api.HPageBreaks
        return [
            int(breaks.Item(index).Location.Row)
            for index in range(1, int(breaks.Count) + 1)
        ]

    def get_paging_strategy(self, page_size: int | None = None) -> PagingStrategy:
        return select_live_paging_strategy(
            resolve_page_size(page_size, self._workbook.default_page_size), self
        )

    def capture_picture(self, capture_range: str) -> str:
        """Render a range to PNG and return it base64-encoded."""
        target = self._range(capture_range)
        with tempfile.TemporaryDirectory(prefix="xlbridge_capture_") as tmp_dir:
            png_path = Path(tmp_dir) / "capture.png"
            try:
                target.to_png(png_path)
            except ImportError as exc:
                raise UnsupportedOperationError(
                    "capture_picture requires Pillow to be installed."
                ) from exc
            data = png_path.read_bytes()
        return base64.b64encode(data).decode("ascii")

    def get_cell_style(self, cell: str) -> CellStyle:
        return read_range_style(self._cell(cell).api)

    def set_cell_style(self, cell: str, style: CellStyle) -> None:
        apply_range_style(self._cell(cell).api, style)

    def merge_cells(self, merge_range: str) -> None:
        self._range(merge_range).merge()

    def unmerge_cells(self, merge_range: str) -> None:
        target = self._range(merge_range)
        if not target.merge_cells:
            raise NotFoundError(f"Range is not merged: {merge_range}")
        target.unmerge()

    def set_column_width(self, start_col: str, end_col: str, width: float) -> None:
        first = column_label_to_index(start_col)
        last = column_label_to_index(end_col)
        for index in range(min(first, last), max(first, last) + 1):
            self._api.Columns(index).ColumnWidth = width

    def set_row_height(self, row: int, height: float) -> None:
        self._api.Rows(row).RowHeight = height

    def insert_rows(self, row: int, count: int) -> None:
        self._api.Rows(f"{row}:{row + count - 1}").Insert()

    def delete_rows(self, row: int, count: int) -> None:
        self._api.Rows(f"{row}:{row + count - 1}").Delete()

    def insert_columns(self, column: str, count: int) -> None:
        self._api.Columns(_column_span(column, count)).Insert()

    def delete_columns(self, column: str, count: int) -> None:
        self._api.Columns(_column_span(column, count)).Delete()

    def add_chart(
        self, position: str, chart_type: str, data_range: str, title: str
    ) -> None:
        anchor = self._cell(position)
        source = self.sheet
        if "!" in data_range:
            sheet_name = data_range.rsplit("!", maxsplit=1)[0].strip("'")
            source = self._workbook.sheet(sheet_name)
        area = parse_range(strip_sheet_prefix(data_range))
        chart_object = self._api.ChartObjects().Add(
            anchor.left, anchor.top, _CHART_WIDTH, _CHART_HEIGHT
        )
        chart = chart_object.Chart
        chart.ChartType = resolve_chart_type_id(chart_type)
        chart.SetSourceData(source.range(str(area)).api)
        if title:
            chart.HasTitle = True
            chart.ChartTitle.Text = title

    def freeze_panes(self, cell: str) -> None:
        column, row = cell_name_to_coordinates(cell)
        self.sheet.activate()
        window = self.sheet.book.app.api.ActiveWindow
        window.FreezePanes = False
        if column == 1 and row == 1:
            return
        window.SplitColumn = column - 1
        window.SplitRow = row - 1
        window.FreezePanes = True

    def add_data_validation(
        self,
        validation_range: str,
        validation_type: str,
        formula1: str,
        formula2: str = "",
        allow_blank: bool = True,
    ) -> None:
        ensure_validation_type(validation_type)
        validation = self._range(validation_range).api.Validation
        validation.Delete()
        if validation_type == "list":
            source = (
                formula1
                if formula1.startswith("=")
                else ",".join(split_list_items(formula1))
            )
            validation.Add(
                VALIDATION_TYPE_TO_COM["list"],
                XL_VALID_ALERT_STOP,
                CELL_OPERATOR_TO_COM["between"],
                source,
            )
        else:
            operator = CELL_OPERATOR_TO_COM[validation_operator(formula2)]
            args: list[Any] = [
                VALIDATION_TYPE_TO_COM[validation_type],
                XL_VALID_ALERT_STOP,
                operator,
                formula1,
            ]
            if formula2:
                args.append(formula2)
            validation.Add(*args)
        validation.IgnoreBlank = allow_blank

    def find_replace(
        self,
        search_range: str,
        find: str,
        replace: str,
        match_case: bool = False,
        match_entire_cell: bool = False,
    ) -> int:
        area = parse_range(search_range or self.get_dimension())
        target = self.sheet.range(str(area))
        values = _as_grid(target.value, area.row_count)
        formulas = _as_grid(target.formula, area.row_count)
        cells: list[tuple[str, object]] = []
        for row_offset, row_values in enumerate(values):
            for col_offset, value in enumerate(row_values):
                formula = formulas[row_offset][col_offset]
                if isinstance(formula, str) and formula.startswith("="):
                    continue
                coordinate = coordinates_to_cell_name(
                    area.start_col + col_offset, area.start_row + row_offset
                )
                cells.append((coordinate, value))
        changes, count = replace_in_cells(
            cells,
            find,
            replace,
            match_case=match_case,
            match_entire_cell=match_entire_cell,
        )
        for coordinate, text in changes.items():
            self.sheet.range(coordinate).value = text
        return count

    def add_comment(self, cell: str, author: str, text: str) -> None:
        """Attach a note to ``cell``.

        Excel stamps notes with its own user name, so ``author`` is not stored.
        """
        target = self._cell(cell).api
        target.ClearComments()
        target.AddComment(text)
        logger.debug("Comment author %r replaced by the Excel user name", author)

    def get_comments(self) -> list[Comment]:
        comments = self._api.Comments
        result: list[Comment] = []
        for index in range(1, int(comments.Count) + 1):
            comment = comments.Item(index)
            result.append(
                Comment(
                    cell=str(comment.Parent.Address).replace("$", ""),
                    author=comment.Author or "",
                    text=comment.Text() or "",
                )
            )
        return result

    def add_hyperlink(self, cell: str, url: str, display: str = "") -> None:
        """Link ``cell`` to a URL, or to a ``Sheet!A1`` location inside the book."""
        anchor = self._cell(cell).api
        if "!" in url and not url.startswith("http"):
            address, sub_address = "", url.removeprefix("#")
        else:
            address, sub_address = url, ""
        self._api.Hyperlinks.Add(
            Anchor=anchor,
            Address=address,
            SubAddress=sub_address,
            TextToDisplay=display or url,
        )

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
        ensure_conditional_format_type(rule_type)
        conditions = self._range(format_range).api.FormatConditions
        if rule_type == "colorScale":
            condition = conditions.AddColorScale(XL_COLOR_SCALE_TWO_COLOR)
            low = condition.ColorScaleCriteria(1)
            high = condition.ColorScaleCriteria(2)
            if value:
                low.Type = XL_CONDITION_VALUE_NUMBER
                low.Value = value
            if value2:
                high.Type = XL_CONDITION_VALUE_NUMBER
                high.Value = value2
            low.FormatColor.Color = hex_to_com_color(COLOR_SCALE_MIN_COLOR)
            high.FormatColor.Color = hex_to_com_color(bg_color or COLOR_SCALE_MAX_COLOR)
            return
        if rule_type == "dataBar":
            condition = conditions.AddDatabar()
            if value:
                condition.MinPoint.Modify(XL_CONDITION_VALUE_NUMBER, value)
            if value2:
                condition.MaxPoint.Modify(XL_CONDITION_VALUE_NUMBER, value2)
            condition.BarColor.Color = hex_to_com_color(bg_color or DATA_BAR_COLOR)
            return

        if rule_type == "cell":
            operator = resolve_cell_operator(criteria, bool(value2))
            formulas = [value, value2] if operator in RANGE_OPERATORS else [value]
            condition = conditions.Add(
                XL_CELL_VALUE, CELL_OPERATOR_TO_COM[operator], *formulas
            )
        elif rule_type == "top":
            condition = conditions.AddTop10()
            condition.TopBottom = XL_TOP10_TOP
            condition.Rank = int(value) if value else 10
            condition.Percent = criteria.strip() == "%"
        else:
            condition = conditions.AddUniqueValues()
            condition.DupeUnique = XL_DUPLICATE
        if font_color:
            condition.Font.Color = hex_to_com_color(font_color)
        if bg_color:
            condition.Interior.Color = hex_to_com_color(bg_color)

    def _cell(self, cell: str) -> xw.Range:
        cell_name_to_coordinates(cell)
        return self.sheet.range(cell)

    def _range(self, range_ref: str) -> xw.Range:
        return self.sheet.range(str(parse_range(range_ref)))


def _column_span(column: str, count: int) -> str:
    first = column_label_to_index(column)
    return f"{column_index_to_label(first)}:{column_index_to_label(first + count - 1)}"


def _as_grid(data: object, row_count: int) -> list[list[object]]:
    """Shape a COM range read (scalar, flat row/column, or nested) as rows."""
    if not isinstance(data, (list, tuple)):
        return [[data]]
    if data and isinstance(data[0], (list, tuple)):
        return [list(row) for row in data]
    if row_count == 1:
        return [list(data)]
    return [[item] for item in data]


__all__ = [
    "XlwingsWorkbook",
    "XlwingsWorksheet",
    "open_xlwings_workbook",
]
