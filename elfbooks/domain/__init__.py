"""Domain package exports for value objects and pure catalog helpers."""

from .entities import (
    BookDetail,
    BookId,
    BookSummary,
    FetchStage,
    SimilarBookSummary,
    StageEvent,
)
from .similar import MAX_SIMILAR_BOOKS, derive_similar_query, select_similar

__all__ = [
    "BookDetail",
    "BookId",
    "BookSummary",
    "FetchStage",
    "MAX_SIMILAR_BOOKS",
    "SimilarBookSummary",
    "StageEvent",
    "derive_similar_query",
    "select_similar",
]
