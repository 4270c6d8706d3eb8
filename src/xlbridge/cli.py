from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .config import BridgeConfig
from .errors import XlBridgeError
from .paging import PagingRangeService
from .selector import open_sheet, open_workbook

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="xlbridge", description="Inspect workbooks through xlbridge backends."
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    )
    parser.add_argument("--log-file", type=Path, help="Optional log file path.")
    parser.add_argument(
        "--no-live",
        action="store_true",
        help="Skip Excel and use the openpyxl backend directly.",
    )
    parser.add_argument(
        "--visible",
        action="store_true",
        help="Show Excel when it is launched for the live backend.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    info = subparsers.add_parser("info", help="Show the backend and sheet list.")
    info.add_argument("path", type=Path, help="Workbook path.")

    pages = subparsers.add_parser("pages", help="List remaining paging ranges.")
    pages.add_argument("path", type=Path, help="Workbook path.")
    pages.add_argument("--sheet", required=True, help="Sheet name.")
    pages.add_argument("--page-size", type=int, default=None, help="Cells per page.")
    pages.add_argument(
        "--known",
        action="append",
        default=[],
        help="Range already read (can be specified multiple times).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the CLI entrypoint.

    Args:
        argv: Optional CLI arguments for testing.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    config = _build_config(args)
    _configure_logging(config)
    try:
        if args.command == "info":
            _run_info(args.path, config)
        else:
            _run_pages(args, config)
    except XlBridgeError as exc:
        logger.error("%s", exc)
        return 1
    return 0


def _build_config(args: argparse.Namespace) -> BridgeConfig:
    config = BridgeConfig.from_env()
    updates: dict[str, object] = {}
    if args.log_level:
        updates["log_level"] = args.log_level
    if args.log_file is not None:
        updates["log_file"] = args.log_file
    if args.no_live:
        updates["live_backend"] = False
    if args.visible:
        updates["visible"] = True
    return config.model_copy(update=updates)


def _run_info(path: Path, config: BridgeConfig) -> None:
    with open_workbook(path, config) as workbook:
        print(f"backend: {workbook.backend_name}")
        for sheet in workbook.get_sheets():
            with sheet:
                print(f"sheet: {sheet.name} {sheet.get_dimension()}")


def _run_pages(args: argparse.Namespace, config: BridgeConfig) -> None:
    with open_workbook(args.path, config) as workbook:
        print(f"backend: {workbook.backend_name}")
        with open_sheet(workbook, args.sheet) as sheet:
            service = PagingRangeService(sheet.get_paging_strategy(args.page_size))
            ranges = service.get_paging_ranges()
            for remaining in service.filter_remaining_paging_ranges(
                ranges, args.known
            ):
                print(remaining)


def _configure_logging(config: BridgeConfig) -> None:
    """Configure logging for the CLI process.

    Args:
        config: Runtime configuration.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.log_file is not None:
        handlers.append(logging.FileHandler(config.log_file))
    logging.basicConfig(
        level=config.log_level.upper(),
        handlers=handlers,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


__all__ = ["build_parser", "main"]
