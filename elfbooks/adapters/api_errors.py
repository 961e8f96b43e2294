"""Typed failures raised by the catalog adapter.

The catalog answers every lookup with HTTP 200 and an ``error`` field in the
body, so two failure families exist: transport/HTTP failures
(``ApiClientError``, ``ApiServerError``, ``ApiTimeoutError``) and lookups the
service itself rejected (``CatalogLookupError``). Use cases translate both into
``UseCaseError`` via ``elfbooks.usecases.error_mapping``.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

_DETAIL_LIMIT = 200
_DETAIL_KEYS = ("error", "message", "detail", "hint")


class ApiError(RuntimeError):
    """Base class for catalog adapter failures.

    ``hint`` holds the short server-supplied explanation, when the response
    carried one, so it can travel with the mapped use-case error.
    """

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        code: Optional[str] = None,
        hint: Optional[str] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.code = code
        self.hint = hint
        self.payload = payload
        self.context = context


class ApiClientError(ApiError):
    """HTTP 4xx from the catalog service."""


class ApiServerError(ApiError):
    """HTTP 5xx from the catalog service."""


class ApiTimeoutError(ApiError):
    """The catalog could not be reached: timeout, refused or dropped connection."""


class CatalogLookupError(ApiError):
    """HTTP 200 whose body carries a non-zero ``error`` code."""

    NOT_FOUND = "1"

    def __init__(
        self,
        message: str,
        *,
        code: str,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            status=200,
            code=code,
            hint=payload_detail(payload),
            payload=payload,
            context=context,
        )

    @property
    def not_found(self) -> bool:
        return self.code == self.NOT_FOUND


def normalize_error_code(value: Any) -> str:
    """Return the payload error code as text; absent or blank means ``"0"``."""
    if value is None:
        return "0"
    text = str(value).strip()
    return text or "0"


def read_error_payload(resp: Any) -> Any:
    """Decoded JSON body of a failed response, else a short text snippet."""
    try:
        return resp.json()
    except ValueError:
        snippet = (getattr(resp, "text", "") or "").strip()
        return snippet[:400] or None


def payload_detail(payload: Any) -> Optional[str]:
    """Pull a one-line explanation out of an error body.

    Plain-text bodies are used as-is. Objects contribute the first non-blank
    string under ``error``/``message``/``detail``/``hint``; bare numeric
    ``error`` codes say nothing useful and are skipped.
    """
    if isinstance(payload, str):
        text = payload.strip()
        return text[:_DETAIL_LIMIT] or None
    if isinstance(payload, Mapping):
        for key in _DETAIL_KEYS:
            value = payload.get(key)
            if not isinstance(value, str):
                continue
            text = value.strip()
            if text and not text.isdigit():
                return text[:_DETAIL_LIMIT]
    return None


def describe_failure(ctx: str, status: int, payload: Any) -> str:
    detail = payload_detail(payload)
    if detail:
        return f"{ctx}: {detail} (HTTP {status})"
    return f"{ctx}: HTTP {status}"


__all__ = [
    "ApiClientError",
    "ApiError",
    "ApiServerError",
    "ApiTimeoutError",
    "CatalogLookupError",
    "describe_failure",
    "normalize_error_code",
    "payload_detail",
    "read_error_payload",
]
