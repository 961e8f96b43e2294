from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Tuple

from elfbooks.domain.entities import BookDetail, SimilarBookSummary


class GatedCatalog:
    """Catalog double whose calls block until the test releases them.

    Each call parks on a future keyed by ``(method, argument)``; the test
    resolves it with ``release``/``fail`` in whatever order it wants.
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[str, str]] = []
        self._gates: Dict[Tuple[str, str], asyncio.Future[Any]] = {}

    def _gate(self, key: Tuple[str, str]) -> asyncio.Future[Any]:
        gate = self._gates.get(key)
        if gate is None:
            gate = asyncio.get_running_loop().create_future()
            self._gates[key] = gate
        return gate

    async def get_book(self, book_id: str) -> BookDetail:
        key = ("get_book", book_id)
        self.calls.append(key)
        return await self._gate(key)

    async def search(self, query: str) -> List[SimilarBookSummary]:
        key = ("search", query)
        self.calls.append(key)
        return await self._gate(key)

    def release(self, method: str, arg: str, value: Any) -> None:
        gate = self._gate((method, arg))
        if not gate.done():  # a cancelled caller never sees late responses
            gate.set_result(value)

    def fail(self, method: str, arg: str, exc: BaseException) -> None:
        gate = self._gate((method, arg))
        if not gate.done():
            gate.set_exception(exc)

    def pending(self, method: str, arg: str) -> bool:
        gate = self._gates.get((method, arg))
        return gate is not None and not gate.done()

    def was_cancelled(self, method: str, arg: str) -> bool:
        gate = self._gates.get((method, arg))
        return gate is not None and gate.cancelled()


async def settle() -> None:
    """Let every ready callback on the loop run (a few scheduler passes)."""
    for _ in range(5):
        await asyncio.sleep(0)


def make_detail(book_id: str, title: str = "", authors: str | None = None, **extra: Any) -> BookDetail:
    return BookDetail(id=book_id, title=title, authors=authors, **extra)


def make_hits(*ids: str) -> List[SimilarBookSummary]:
    return [SimilarBookSummary(id=book_id, title=f"Book {book_id}") for book_id in ids]


__all__ = ["GatedCatalog", "make_detail", "make_hits", "settle"]
