"""Translate adapter errors into user-facing UseCaseError instances."""

from __future__ import annotations

from typing import Any, Dict, Optional

from elfbooks.adapters.api_errors import (
    ApiClientError,
    ApiError,
    ApiServerError,
    ApiTimeoutError,
    CatalogLookupError,
)
from elfbooks.domain.ports import UseCaseError

PRIMARY_NOT_FOUND = "PRIMARY_NOT_FOUND"
PRIMARY_UNKNOWN = "PRIMARY_UNKNOWN"
SECONDARY_FAILED = "SECONDARY_FAILED"

PRIMARY_NOT_FOUND_MESSAGE = "Book not found."
PRIMARY_UNKNOWN_MESSAGE = "Could not load book details."
SECONDARY_FAILED_MESSAGE = "Could not load similar books."


def map_api_error(
    exc: Exception,
    *,
    default_code: str,
    default_message: Optional[str] = None,
) -> UseCaseError:
    """Map adapter exceptions to stable UseCaseError codes.

    Args:
        exc: Exception raised by an adapter or use case.
        default_code: Code used when the exception carries no better one.
        default_message: Message used for unrecognized exceptions.

    Returns:
        A ``UseCaseError``; existing ones are passed through unchanged. When
        the adapter captured a server explanation it is kept in
        ``meta["hint"]``.
    """
    if isinstance(exc, UseCaseError):
        return exc
    hint = exc.hint if isinstance(exc, ApiError) else None
    meta: Dict[str, Any] = {"hint": hint} if hint else {}
    if isinstance(exc, CatalogLookupError):
        meta["catalog_code"] = exc.code
        return UseCaseError("CATALOG_ERROR", f"Catalog reported error code {exc.code}.", meta=meta)
    if isinstance(exc, ApiTimeoutError):
        return UseCaseError("REQUEST_TIMEOUT", "Catalog unreachable. Check connection.", meta=meta)
    if isinstance(exc, ApiClientError):
        label = f"Request failed (HTTP {exc.status})" if exc.status else "Request failed"
        message = f"{label}: {hint}" if hint else f"{label}."
        return UseCaseError("REQUEST_FAILED", message, meta=meta)
    if isinstance(exc, ApiServerError):
        return UseCaseError("SERVER_ERROR", "Catalog service error, try again.", meta=meta)
    if isinstance(exc, ApiError):
        return UseCaseError("API_ERROR", str(exc), meta=meta)

    message = default_message or str(exc) or "Unexpected error."
    return UseCaseError(default_code, message)


def _stage_error(code: str, message: str, exc: Exception) -> UseCaseError:
    cause = map_api_error(exc, default_code=code)
    meta: Dict[str, Any] = {"cause": cause.code}
    hint = (cause.meta or {}).get("hint")
    if hint:
        meta["hint"] = hint
    return UseCaseError(code, message, meta=meta)


def map_primary_error(exc: Exception) -> UseCaseError:
    """Collapse any primary lookup failure into not-found or unknown."""
    if isinstance(exc, CatalogLookupError) and exc.not_found:
        return UseCaseError(
            PRIMARY_NOT_FOUND,
            PRIMARY_NOT_FOUND_MESSAGE,
            meta={"catalog_code": exc.code},
        )
    if isinstance(exc, UseCaseError) and exc.code in (PRIMARY_NOT_FOUND, PRIMARY_UNKNOWN):
        return exc
    return _stage_error(PRIMARY_UNKNOWN, PRIMARY_UNKNOWN_MESSAGE, exc)


def map_secondary_error(exc: Exception) -> UseCaseError:
    """Collapse any similar-books failure into one generic error."""
    if isinstance(exc, UseCaseError) and exc.code == SECONDARY_FAILED:
        return exc
    return _stage_error(SECONDARY_FAILED, SECONDARY_FAILED_MESSAGE, exc)


def describe_cause(err: UseCaseError) -> str:
    """Short ``cause: hint`` text for log lines."""
    meta = err.meta or {}
    cause = meta.get("cause") or meta.get("catalog_code") or err.code
    hint = meta.get("hint")
    return f"{cause}: {hint}" if hint else str(cause)


__all__ = [
    "PRIMARY_NOT_FOUND",
    "PRIMARY_NOT_FOUND_MESSAGE",
    "PRIMARY_UNKNOWN",
    "PRIMARY_UNKNOWN_MESSAGE",
    "SECONDARY_FAILED",
    "SECONDARY_FAILED_MESSAGE",
    "describe_cause",
    "map_api_error",
    "map_primary_error",
    "map_secondary_error",
]
