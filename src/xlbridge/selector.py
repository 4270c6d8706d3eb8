"""Pick a backend for a workbook path.

The live Excel backend is tried first so callers see calculated values and
can capture pictures; when Excel is unavailable the openpyxl backend edits the
file directly.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
import logging
from pathlib import Path

from .backends.base import Workbook, Worksheet
from .backends.openpyxl_backend import new_openpyxl_workbook, open_openpyxl_workbook
from .backends.xlwings_backend import open_xlwings_workbook
from .config import BridgeConfig
from .io import file_is_not_writable, resolve_workbook_path

logger = logging.getLogger(__name__)

ReleaseFn = Callable[[], None]


def open_file(
    path: Path | str, config: BridgeConfig | None = None
) -> tuple[Workbook, ReleaseFn]:
    """Open a workbook with the best available backend.

    Args:
        path: Workbook path. A missing file yields a new, empty workbook that
            ``save()`` writes to this path.
        config: Runtime configuration; read from the environment when omitted.

    Returns:
        The workbook and a function that releases it. Call the function exactly
        once when done, or use :func:`open_workbook` instead.

    Raises:
        InvalidFormatError: If the path does not name a workbook file.
        IOFailureError: If the path is rejected by the configured policy or the
            file exists but cannot be read.
    """
    config = config or BridgeConfig.from_env()
    file_path = resolve_workbook_path(path, policy=config.policy)

    if config.live_backend:
        try:
            live = open_xlwings_workbook(
                file_path,
                visible=config.visible,
                default_page_size=config.default_page_size,
            )
        except Exception as exc:
            logger.debug(
                "Live backend unavailable for %s; using openpyxl. (%r)", file_path, exc
            )
        else:
            logger.info("Opened %s with xlwings", file_path.name)
            return live, live.close

    try:
        workbook = open_openpyxl_workbook(
            file_path, default_page_size=config.default_page_size
        )
    except FileNotFoundError:
        workbook = new_openpyxl_workbook(
            file_path, default_page_size=config.default_page_size
        )
        logger.info("Created new workbook for %s", file_path.name)
    else:
        logger.info("Opened %s with openpyxl", file_path.name)
    if file_is_not_writable(file_path):
        logger.warning("%s is not writable; save() will fail.", file_path)
    return workbook, workbook.close


@contextmanager
def open_workbook(
    path: Path | str, config: BridgeConfig | None = None
) -> Iterator[Workbook]:
    """Context-manager form of :func:`open_file` that always releases."""
    workbook, release = open_file(path, config)
    try:
        yield workbook
    finally:
        release()


@contextmanager
def open_sheet(workbook: Workbook, sheet_name: str) -> Iterator[Worksheet]:
    """Yield a worksheet and release its handle on every exit path."""
    sheet = workbook.find_sheet(sheet_name)
    try:
        yield sheet
    finally:
        sheet.release()


__all__ = ["ReleaseFn", "open_file", "open_sheet", "open_workbook"]
