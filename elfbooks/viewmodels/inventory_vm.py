from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from ..domain.entities import BookId, BookSummary
from ..domain.ports import KeyValueStore
from ..domain.pricing import PRICE_FILTERS, format_price, matches_price_filter

log = logging.getLogger(__name__)

BOOKS_KEY = "books"
PLACEHOLDER_IMAGE = "https://via.placeholder.com/150x200"

BookRecord = Union[BookSummary, Mapping[str, Any]]


class InventoryVM:
    """Catalog grid state: book list, exclusive selection, price filter.

    Every mutation is written through to the injected store under
    ``BOOKS_KEY``; selection is UI state and is never persisted.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        on_select: Optional[Callable[[BookSummary], None]] = None,
        on_changed: Optional[Callable[[List[BookSummary]], None]] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self.on_select = on_select
        self.on_changed = on_changed
        self._clock = clock
        self.books: List[BookSummary] = []
        self.selected_id: Optional[BookId] = None
        self.price_filter: str = "all"

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def load(self, seed: Iterable[BookRecord] = ()) -> List[BookSummary]:
        """Restore the inventory, falling back to ``seed`` if nothing usable is stored."""
        try:
            stored = self._store.load(BOOKS_KEY)
        except ValueError as exc:
            log.warning("Stored inventory is unreadable, using seed data: %s", exc)
            stored = None

        books = self._parse_records(stored) if isinstance(stored, list) else None
        if books is None:
            books = self._parse_records(list(seed)) or []
            self.books = books
            self._persist()
        else:
            self.books = books
        self.selected_id = None
        self._notify()
        return list(self.books)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def select(self, book_id: BookId) -> Optional[BookSummary]:
        """Toggle selection of ``book_id``; at most one book is selected."""
        book = self.find(book_id)
        if book is None or self.selected_id == book_id:
            self.selected_id = None
            return None
        self.selected_id = book_id
        if self.on_select:
            self.on_select(book)
        return book

    def selected(self) -> Optional[BookSummary]:
        if self.selected_id is None:
            return None
        return self.find(self.selected_id)

    def find(self, book_id: BookId) -> Optional[BookSummary]:
        for book in self.books:
            if book.id == book_id:
                return book
        return None

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------
    def add(
        self,
        title: str,
        *,
        author: str = "",
        detail_url: str = "",
        image_url: str = "",
        price: Any = None,
    ) -> BookSummary:
        book = BookSummary(
            id=self._next_id(),
            title=self._require_title(title),
            author=(author or "").strip() or None,
            detail_url=(detail_url or "").strip() or None,
            image_url=(image_url or "").strip() or PLACEHOLDER_IMAGE,
            price_display=format_price(price),
        )
        self.books.append(book)
        self._persist()
        self._notify()
        return book

    def update_selected(
        self,
        title: str,
        *,
        author: str = "",
        detail_url: str = "",
        image_url: str = "",
        price: Any = None,
    ) -> BookSummary:
        """Edit the selected book; a blank image or price keeps the old value."""
        current = self.selected()
        if current is None:
            raise ValueError("Please select a book to update.")
        updated = replace(
            current,
            title=self._require_title(title),
            author=(author or "").strip() or None,
            detail_url=(detail_url or "").strip() or None,
            image_url=(image_url or "").strip() or current.image_url or PLACEHOLDER_IMAGE,
            price_display=format_price(price) or current.price_display,
        )
        self.books = [updated if book.id == current.id else book for book in self.books]
        self.selected_id = None
        self._persist()
        self._notify()
        return updated

    def delete_selected(self) -> Optional[BookSummary]:
        current = self.selected()
        if current is None:
            return None
        self.books = [book for book in self.books if book.id != current.id]
        self.selected_id = None
        self._persist()
        self._notify()
        return current

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------
    def set_price_filter(self, bucket: str) -> None:
        if bucket not in PRICE_FILTERS:
            raise ValueError(f"Unknown price filter '{bucket}'.")
        self.price_filter = bucket
        self._notify()

    def visible_books(self) -> List[BookSummary]:
        return [
            book
            for book in self.books
            if matches_price_filter(book.price_display, self.price_filter)
        ]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _next_id(self) -> BookId:
        candidate = int(self._clock() * 1000)
        taken = {book.id for book in self.books}
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    @staticmethod
    def _require_title(title: str) -> str:
        cleaned = (title or "").strip()
        if not cleaned:
            raise ValueError("Title is required.")
        return cleaned

    @staticmethod
    def _parse_records(records: List[Any]) -> Optional[List[BookSummary]]:
        books: List[BookSummary] = []
        for record in records:
            if isinstance(record, BookSummary):
                books.append(record)
                continue
            if not isinstance(record, Mapping):
                return None
            book_id = record.get("isbn13", record.get("id"))
            if book_id is None or not str(book_id).strip():
                return None
            books.append(
                BookSummary(
                    id=str(book_id),
                    title=str(record.get("title") or ""),
                    author=record.get("author") or None,
                    detail_url=record.get("url", record.get("detailUrl")) or None,
                    image_url=record.get("image", record.get("imageUrl")) or None,
                    price_display=record.get("price", record.get("priceDisplay")) or None,
                )
            )
        return books

    @staticmethod
    def _to_record(book: BookSummary) -> Dict[str, Any]:
        record: Dict[str, Any] = {"isbn13": book.id, "title": book.title}
        if book.author:
            record["author"] = book.author
        if book.detail_url:
            record["url"] = book.detail_url
        if book.image_url:
            record["image"] = book.image_url
        if book.price_display:
            record["price"] = book.price_display
        return record

    def _persist(self) -> None:
        if self.books:
            self._store.save(BOOKS_KEY, [self._to_record(book) for book in self.books])
        else:
            self._store.remove(BOOKS_KEY)

    def _notify(self) -> None:
        if self.on_changed:
            self.on_changed(self.visible_books())


__all__ = ["BOOKS_KEY", "InventoryVM", "PLACEHOLDER_IMAGE"]
