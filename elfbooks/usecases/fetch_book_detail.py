from __future__ import annotations
from dataclasses import dataclass

from elfbooks.domain.entities import BookDetail, BookId
from elfbooks.domain.ports import CatalogPort, UseCaseError
from elfbooks.usecases.error_mapping import PRIMARY_UNKNOWN, map_primary_error


@dataclass
class FetchBookDetail:
    catalog: CatalogPort

    async def __call__(self, book_id: BookId) -> BookDetail:
        """Fetch the full record for ``book_id`` (the primary lookup)."""
        if not str(book_id or "").strip():
            raise UseCaseError(PRIMARY_UNKNOWN, "Book id must not be empty.")
        try:
            return await self.catalog.get_book(book_id)
        except Exception as exc:
            raise map_primary_error(exc) from exc
