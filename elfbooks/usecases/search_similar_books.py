from __future__ import annotations
from dataclasses import dataclass
from typing import List

from elfbooks.domain.entities import BookId, SimilarBookSummary
from elfbooks.domain.ports import CatalogPort
from elfbooks.domain.similar import MAX_SIMILAR_BOOKS, select_similar
from elfbooks.usecases.error_mapping import map_secondary_error


@dataclass
class SearchSimilarBooks:
    catalog: CatalogPort
    limit: int = MAX_SIMILAR_BOOKS

    async def __call__(self, query: str, exclude_id: BookId) -> List[SimilarBookSummary]:
        """Run the related-books search and trim it for display.

        ``query`` must already be URL-encoded. The viewed book is removed and
        at most ``limit`` hits are kept in catalog order.
        """
        try:
            results = await self.catalog.search(query)
        except Exception as exc:
            raise map_secondary_error(exc) from exc
        return select_similar(results, exclude_id, limit=min(self.limit, MAX_SIMILAR_BOOKS))
