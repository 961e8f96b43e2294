from __future__ import annotations

"""Domain value objects shared across adapters, use-cases, and view models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional, Tuple

BookId = str


@dataclass(frozen=True)
class BookSummary:
    """Inventory entry as shown in the catalog grid."""

    id: BookId
    """Stable identifier (ISBN-13 for catalog books, timestamp for manual entries)."""
    title: str
    price_display: Optional[str] = None
    """Formatted price string, e.g. ``$31.19``; parsed only for filtering."""
    image_url: Optional[str] = None
    detail_url: Optional[str] = None
    author: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise ValueError("BookSummary.id must be a non-empty string.")


@dataclass(frozen=True)
class BookDetail:
    """Full catalog record returned by a successful primary lookup."""

    id: BookId
    title: str
    subtitle: Optional[str] = None
    authors: Optional[str] = None
    """Comma-separated author names exactly as the catalog reports them."""
    publisher: Optional[str] = None
    year: Optional[str] = None
    pages: Optional[str] = None
    language: Optional[str] = None
    isbn10: Optional[str] = None
    price: Optional[str] = None
    rating: Optional[str] = None
    description: Optional[str] = None
    sample_links: Mapping[str, str] = field(default_factory=dict)
    """Sample chapter links keyed by their label."""
    canonical_url: Optional[str] = None
    image_url: Optional[str] = None


@dataclass(frozen=True)
class SimilarBookSummary:
    """Compact search hit shown in the similar-books strip."""

    id: BookId
    title: str
    image_url: Optional[str] = None
    price_display: Optional[str] = None


class FetchStage(str, Enum):
    """Lifecycle of one detail subscription."""

    IDLE = "idle"
    LOADING_PRIMARY = "loading_primary"
    LOADING_SECONDARY = "loading_secondary"
    READY = "ready"
    PRIMARY_FAILED = "primary_failed"
    SECONDARY_FAILED = "secondary_failed"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STAGES


_TERMINAL_STAGES = frozenset(
    {FetchStage.READY, FetchStage.PRIMARY_FAILED, FetchStage.SECONDARY_FAILED}
)


@dataclass(frozen=True)
class StageEvent:
    """Single stage transition emitted by the detail orchestrator."""

    stage: FetchStage
    book_id: BookId
    detail: Optional[BookDetail] = None
    """Primary record; present from ``LOADING_SECONDARY`` onwards."""
    similar: Tuple[SimilarBookSummary, ...] = ()
    error_code: Optional[str] = None
    error_message: Optional[str] = None
