"""Access to the Excel application itself rather than a single workbook."""

from __future__ import annotations

from collections.abc import Sequence
import logging
from pathlib import Path
from types import TracebackType

from pydantic import BaseModel
import xlwings as xw

from .backends.apartment import ComApartment
from .errors import BackendUnavailableError, IOFailureError, XlBridgeError

logger = logging.getLogger(__name__)


class WorkbookInfo(BaseModel):
    """A workbook currently open in Excel."""

    name: str
    full_path: str
    saved: bool


class ExcelApp:
    """Handle on a running Excel instance.

    The instance is left running on :meth:`release`; only the COM apartment
    is given back.
    """

    def __init__(self, app: xw.App, apartment: ComApartment | None = None) -> None:
        self.app = app
        self._apartment = apartment
        self._released = False

    def list_workbooks(self) -> list[WorkbookInfo]:
        result: list[WorkbookInfo] = []
        for book in self.app.books:
            try:
                result.append(
                    WorkbookInfo(
                        name=book.name,
                        full_path=book.fullname,
                        saved=bool(book.api.Saved),
                    )
                )
            except Exception as exc:
                logger.debug("Skipping unreadable workbook. (%r)", exc)
        return result

    def open_workbook(self, path: Path) -> None:
        """Open ``path`` in Excel and show the application window."""
        try:
            self.app.books.open(str(path))
        except Exception as exc:
            raise IOFailureError(f"Excel failed to open {path} ({exc!r})") from exc
        self.app.visible = True

    def create_workbook(self, path: Path) -> None:
        """Create a blank workbook in Excel and save it as ``path``."""
        try:
            book = self.app.books.add()
            book.save(str(path))
        except Exception as exc:
            raise IOFailureError(
                f"Excel failed to create workbook {path} ({exc!r})"
            ) from exc
        self.app.visible = True

    def run_macro(self, macro_name: str, args: Sequence[str] = ()) -> str:
        """Run a VBA macro via ``Application.Run`` and return its result as text.

        Args:
            macro_name: Macro name, optionally qualified as ``Book.xlsm!Macro``.
            args: Positional string arguments passed to the macro.

        Returns:
            The macro's return value formatted as text, or ``""`` for none.

        Raises:
            XlBridgeError: When Excel reports a failure running the macro.
        """
        try:
            result = self.app.api.Run(macro_name, *args)
        except Exception as exc:
            raise XlBridgeError(
                f"Failed to run macro '{macro_name}' ({exc!r})"
            ) from exc
        if result is None:
            return ""
        return str(result)

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        if self._apartment is not None:
            self._apartment.release()

    def __enter__(self) -> ExcelApp:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()


def connect_excel_app(*, apartment: ComApartment | None = None) -> ExcelApp:
    """Attach to the active Excel instance, or launch a visible one.

    Raises:
        BackendUnavailableError: When Excel is not installed or unreachable.
    """
    apartment = (apartment or ComApartment()).acquire()
    try:
        if xw.apps.count:
            app = xw.apps.active
            logger.debug("Attached to running Excel (pid=%s)", app.pid)
        else:
            app = xw.App(add_book=False, visible=True)
            logger.debug("Launched Excel (pid=%s)", app.pid)
    except Exception as exc:
        apartment.release()
        raise BackendUnavailableError(f"Excel is not available ({exc!r})") from exc
    return ExcelApp(app, apartment)


__all__ = ["ExcelApp", "WorkbookInfo", "connect_excel_app"]
