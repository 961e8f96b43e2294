from __future__ import annotations
from typing import Any, Dict, List, Optional, Protocol

from .entities import BookDetail, BookId, SimilarBookSummary


# ---- Error model ----
class UseCaseError(Exception):
    """Base class for use case level errors (user-presentable)."""

    def __init__(self, code: str, message: str, meta: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.meta = meta


# ---- Ports (Hexagonal boundaries) ----
class CatalogPort(Protocol):
    """Lookups against the remote book catalog service.

    Both calls are coroutines so a caller can cancel them mid-flight.
    Application-level error payloads are raised, never returned.
    """

    async def get_book(self, book_id: BookId) -> BookDetail: ...
    async def search(self, query: str) -> List[SimilarBookSummary]: ...  # query is URL-encoded


class KeyValueStore(Protocol):
    """Persistence for JSON-compatible values under string keys."""

    def load(self, key: str) -> Any: ...  # None when the key is missing
    def save(self, key: str, value: Any) -> None: ...
    def remove(self, key: str) -> None: ...


class SettingsStore(Protocol):
    """Persistence for the flat user settings mapping."""

    def save_user_settings(self, payload: Dict[str, Any]) -> None: ...
    def load_user_settings(self) -> Optional[Dict[str, Any]]: ...
