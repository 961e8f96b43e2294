"""Console entry point: resolve one book's detail view or list the inventory."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List, Optional, Sequence, TextIO

from ..adapters.storage_local import StorageLocal
from ..domain.entities import FetchStage
from ..domain.pricing import PRICE_FILTERS
from ..utils import logging as logging_utils
from ..viewmodels.detail_vm import DetailViewState
from ..viewmodels.settings_vm import SettingsVM
from .controller import AppController

log = logging.getLogger(__name__)


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="elfbooks", description="Elf Book Catalog tools.")
    parser.add_argument(
        "--settings-dir",
        default=".",
        help="Directory holding user_settings.json (default: current directory).",
    )
    parser.add_argument("--base-url", help="Override the catalog service base URL.")
    parser.add_argument("--timeout", type=float, help="Request timeout in seconds (fractions allowed).")
    parser.add_argument("--debug", action="store_true", help="Enable DEBUG logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", help="Resolve a book's detail and similar books.")
    show.add_argument("book_id")
    show.add_argument("--title", default="", help="Fallback title for the similar-books search.")

    books = sub.add_parser("books", help="List the stored inventory.")
    books.add_argument("--price", choices=PRICE_FILTERS, default="all")
    return parser.parse_args(argv)


def _load_settings(args: argparse.Namespace) -> SettingsVM:
    settings = SettingsVM()
    persisted = StorageLocal(args.settings_dir).load_user_settings()
    if persisted:
        settings.apply_dict(persisted)
    if args.base_url:
        settings.catalog_base_url = args.base_url
    if args.timeout is not None:
        settings.request_timeout_s = args.timeout
    if args.debug:
        settings.debug_logging = True
    return settings


def render_state(state: DetailViewState, out: TextIO) -> None:
    if state.detail is not None:
        detail = state.detail
        out.write(f"{detail.title} [{detail.id}]\n")
        if detail.subtitle:
            out.write(f"  {detail.subtitle}\n")
        for label, value in (
            ("Authors", detail.authors),
            ("Publisher", detail.publisher),
            ("Year", detail.year),
            ("Pages", detail.pages),
            ("Price", detail.price),
            ("Rating", detail.rating),
        ):
            if value:
                out.write(f"  {label}: {value}\n")
    if state.error_primary:
        out.write(f"Error: {state.error_primary}\n")
    if state.similar:
        out.write("Similar books:\n")
        for entry in state.similar:
            price = f" ({entry.price_display})" if entry.price_display else ""
            out.write(f"  - {entry.title} [{entry.id}]{price}\n")
    if state.error_secondary:
        out.write(f"Similar books: {state.error_secondary}\n")


async def _show(controller: AppController, book_id: str, title: str) -> DetailViewState:
    detail_vm = controller.build_detail_vm()
    try:
        detail_vm.request_open(book_id, title)
        await detail_vm.wait()
        return detail_vm.state
    finally:
        detail_vm.dismiss()
        await controller.aclose()


def _list_books(settings: SettingsVM, bucket: str, out: TextIO) -> int:
    controller = AppController(settings)
    inventory = controller.build_inventory_vm(StorageLocal(settings.storage_dir))
    inventory.load()
    inventory.set_price_filter(bucket)
    for book in inventory.visible_books():
        price = book.price_display or "-"
        out.write(f"{book.id}\t{price}\t{book.title}\n")
    return 0


def main(argv: Optional[List[str]] = None, out: TextIO = sys.stdout) -> int:
    """CLI entrypoint; returns the process exit code."""
    logging_utils.configure_root()
    args = _parse_args(argv)
    try:
        settings = _load_settings(args)
    except ValueError as exc:
        log.error("Invalid settings: %s", exc)
        return 2
    logging_utils.apply_preferences(settings.debug_logging)

    if args.command == "books":
        return _list_books(settings, args.price, out)

    controller = AppController(settings)
    state = asyncio.run(_show(controller, args.book_id, args.title))
    render_state(state, out)
    log.debug("book[%s]: finished in stage %s", args.book_id, state.stage.value)
    return 0 if state.stage is FetchStage.READY else 1


if __name__ == "__main__":
    sys.exit(main())
