"""Pure helpers for the similar-books stage of the detail pipeline."""

from __future__ import annotations

from typing import Iterable, List, Optional
from urllib.parse import quote

from .entities import BookDetail, BookId, SimilarBookSummary

MAX_SIMILAR_BOOKS = 6

# Matches the character set browsers leave unescaped in URI components.
_QUERY_SAFE_CHARS = "!*'()"


def encode_query(text: str) -> str:
    return quote(text, safe=_QUERY_SAFE_CHARS)


def author_surname(authors: Optional[str]) -> str:
    """Return the last name token of the first comma-separated author."""
    if not authors or not authors.strip():
        return ""
    first_author = authors.split(",", 1)[0].strip()
    tokens = first_author.split()
    return tokens[-1] if tokens else ""


def derive_similar_query(detail: BookDetail, fallback_title: str) -> str:
    """Build the URL-encoded search query used to find related books.

    The first author's surname wins. Without a usable author the detail
    title is used, then ``fallback_title`` when the title is blank.
    """
    surname = author_surname(detail.authors)
    if surname:
        return encode_query(surname)
    title = (detail.title or "").strip()
    if not title:
        title = (fallback_title or "").strip()
    return encode_query(title)


def select_similar(
    results: Iterable[SimilarBookSummary],
    exclude_id: BookId,
    limit: int = MAX_SIMILAR_BOOKS,
) -> List[SimilarBookSummary]:
    """Drop the viewed book and keep the first ``limit`` hits in input order."""
    selected: List[SimilarBookSummary] = []
    for entry in results:
        if entry.id == exclude_id:
            continue
        selected.append(entry)
        if len(selected) >= limit:
            break
    return selected


__all__ = [
    "MAX_SIMILAR_BOOKS",
    "author_surname",
    "derive_similar_query",
    "encode_query",
    "select_similar",
]
