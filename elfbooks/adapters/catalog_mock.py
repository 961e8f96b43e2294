from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from elfbooks.domain.entities import BookDetail, BookId, SimilarBookSummary
from elfbooks.domain.ports import CatalogPort

from .api_errors import CatalogLookupError


@dataclass
class CatalogMock(CatalogPort):
    """Offline substitute for ``CatalogRestAdapter`` with deterministic responses.

    Unknown book ids answer like the live service does for a missing record
    (error code ``"1"``); unknown queries return no hits.
    """

    books: Dict[BookId, BookDetail] = field(default_factory=dict)
    searches: Dict[str, List[SimilarBookSummary]] = field(default_factory=dict)
    calls: List[Tuple[str, str]] = field(default_factory=list)

    # ---------- CatalogPort ----------

    async def get_book(self, book_id: BookId) -> BookDetail:
        self.calls.append(("get_book", book_id))
        detail = self.books.get(book_id)
        if detail is None:
            raise CatalogLookupError(
                f"book[{book_id}]: catalog error code 1",
                code=CatalogLookupError.NOT_FOUND,
                context=f"book[{book_id}]",
            )
        return detail

    async def search(self, query: str) -> List[SimilarBookSummary]:
        self.calls.append(("search", query))
        return list(self.searches.get(query, []))

    # ---------- Helpers ----------

    def add_book(self, detail: BookDetail) -> None:
        self.books[detail.id] = detail

    def add_search(self, query: str, results: List[SimilarBookSummary]) -> None:
        self.searches[query] = list(results)

    def queries(self) -> List[str]:
        return [arg for name, arg in self.calls if name == "search"]
