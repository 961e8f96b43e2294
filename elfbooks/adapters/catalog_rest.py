from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote

import httpx

from elfbooks.domain.entities import BookDetail, BookId, SimilarBookSummary
from elfbooks.domain.ports import CatalogPort

from .api_errors import (
    ApiClientError,
    ApiError,
    ApiServerError,
    CatalogLookupError,
    describe_failure,
    normalize_error_code,
    payload_detail,
    read_error_payload,
)
from .http_client import HttpConfig, RetryingClient

log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.itbook.store/1.0"


class CatalogRestAdapter(CatalogPort):
    """REST adapter for the book catalog's ``/books`` and ``/search`` endpoints."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        request_timeout_s: float = 10,
        retries: int = 2,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not base_url or not str(base_url).strip():
            raise ValueError("CatalogRestAdapter requires a base URL")
        self.base_url = str(base_url).strip().rstrip("/")
        self.cfg = HttpConfig(request_timeout_s=request_timeout_s, retries=retries)
        self.http = RetryingClient(self.cfg, transport=transport)

    async def get_book(self, book_id: BookId) -> BookDetail:
        ctx = f"book[{book_id}]"
        url = f"{self.base_url}/books/{quote(str(book_id), safe='')}"
        payload = await self._get_json(url, ctx)
        return self._to_detail(payload, book_id)

    async def search(self, query: str) -> List[SimilarBookSummary]:
        ctx = f"search[{query}]"
        url = f"{self.base_url}/search/{query}"
        payload = await self._get_json(url, ctx)
        return self._to_similar(payload)

    async def aclose(self) -> None:
        await self.http.aclose()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    async def _get_json(self, url: str, ctx: str) -> Dict[str, Any]:
        resp = await self.http.get(url)
        self._ensure_ok(resp, ctx)
        data = self._json_any(resp, ctx)
        if not isinstance(data, dict):
            raise ApiError(f"{ctx}: expected object response", payload=data, context=ctx)
        code = normalize_error_code(data.get("error"))
        if code != "0":
            log.debug("%s: catalog returned error code %s", ctx, code)
            raise CatalogLookupError(
                f"{ctx}: catalog error code {code}",
                code=code,
                payload=data,
                context=ctx,
            )
        return data

    @staticmethod
    def _ensure_ok(resp: httpx.Response, ctx: str) -> None:
        if 200 <= resp.status_code < 300:
            return
        status = resp.status_code
        payload = read_error_payload(resp)
        message = describe_failure(ctx, status, payload)
        hint = payload_detail(payload)
        if 400 <= status < 500:
            raise ApiClientError(
                message,
                status=status,
                hint=hint,
                payload=payload,
                context=ctx,
            )
        if 500 <= status < 600:
            raise ApiServerError(
                message,
                status=status,
                hint=hint,
                payload=payload,
                context=ctx,
            )
        raise ApiError(message, status=status, payload=payload, context=ctx)

    @staticmethod
    def _json_any(resp: httpx.Response, ctx: str) -> Any:
        try:
            return resp.json()
        except ValueError as exc:
            snippet = resp.text[:400]
            raise ApiError(f"{ctx}: invalid JSON response: {snippet}", context=ctx) from exc

    @staticmethod
    def _text(payload: Mapping[str, Any], *keys: str) -> Optional[str]:
        for key in keys:
            value = payload.get(key)
            if value is None or isinstance(value, (dict, list)):
                continue
            text = str(value).strip()
            if text:
                return text
        return None

    @staticmethod
    def _links(raw: Any) -> Dict[str, str]:
        if not isinstance(raw, Mapping):
            return {}
        links: Dict[str, str] = {}
        for label, url in raw.items():
            if isinstance(url, str) and url.strip():
                links[str(label)] = url.strip()
        return links

    @classmethod
    def _to_detail(cls, payload: Mapping[str, Any], book_id: BookId) -> BookDetail:
        text = cls._text
        return BookDetail(
            id=text(payload, "isbn13", "id") or str(book_id),
            title=text(payload, "title") or "",
            subtitle=text(payload, "subtitle"),
            authors=text(payload, "authors"),
            publisher=text(payload, "publisher"),
            year=text(payload, "year"),
            pages=text(payload, "pages"),
            language=text(payload, "language"),
            isbn10=text(payload, "isbn10"),
            price=text(payload, "price"),
            rating=text(payload, "rating"),
            description=text(payload, "desc", "description"),
            sample_links=cls._links(payload.get("pdf", payload.get("sampleLinks"))),
            canonical_url=text(payload, "url", "canonicalUrl"),
            image_url=text(payload, "image", "imageUrl"),
        )

    @classmethod
    def _to_similar(cls, payload: Mapping[str, Any]) -> List[SimilarBookSummary]:
        raw_books = payload.get("books")
        if not isinstance(raw_books, list):
            return []
        results: List[SimilarBookSummary] = []
        for entry in raw_books:
            if not isinstance(entry, Mapping):
                continue
            entry_id = cls._text(entry, "isbn13", "id")
            if not entry_id:
                continue
            results.append(
                SimilarBookSummary(
                    id=entry_id,
                    title=cls._text(entry, "title") or "",
                    image_url=cls._text(entry, "image", "imageUrl"),
                    price_display=cls._text(entry, "price", "priceDisplay"),
                )
            )
        return results


__all__ = ["CatalogRestAdapter", "DEFAULT_BASE_URL"]
