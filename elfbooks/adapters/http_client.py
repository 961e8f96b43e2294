"""Shared HTTP transport utilities for the catalog adapter.

This module provides a thin wrapper around ``httpx.AsyncClient`` so adapter
implementations share one timeout policy and retry behavior.

Dependencies:
    - ``httpx`` for asynchronous network I/O.
    - ``elfbooks.adapters.api_errors`` for typed transport failures.

Call context:
    - Constructed by ``elfbooks/adapters/catalog_rest.py``.
    - Used only inside adapter methods; use cases interact through ports.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

import httpx

from elfbooks.adapters.api_errors import ApiError, ApiTimeoutError

log = logging.getLogger(__name__)


@dataclass
class HttpConfig:
    """Timeout and retry configuration for adapter HTTP calls.

    Attributes:
        request_timeout_s: Timeout in seconds for JSON API calls.
        retries: Number of retry attempts after the initial request.
    """
    request_timeout_s: float = 10
    retries: int = 2


class RetryingClient:
    """Shared ``httpx.AsyncClient`` wrapper with retry loops.

    This class is intentionally transport-only. Callers provide endpoint URLs and
    decide how to map non-2xx responses into domain/use-case errors. Task
    cancellation is never retried; ``asyncio.CancelledError`` passes straight
    through to the caller.
    """

    def __init__(
        self,
        cfg: HttpConfig,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Create a retry-enabled client.

        Args:
            cfg: Shared timeout and retry settings.
            transport: Optional transport override (``httpx.MockTransport`` in tests).

        Side Effects:
            Creates a persistent ``httpx.AsyncClient``; release it with ``aclose``.
        """
        self.cfg = cfg
        self.client = httpx.AsyncClient(
            timeout=cfg.request_timeout_s,
            transport=transport,
            follow_redirects=True,
        )

    @staticmethod
    def _headers(accept: str = "application/json") -> Dict[str, str]:
        return {"Accept": accept}

    async def get(
        self,
        url: str,
        *,
        accept: str = "application/json",
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        """Send a GET request with retries on timeout/connectivity failures.

        Args:
            url: Absolute endpoint URL.
            accept: ``Accept`` header value.
            timeout: Optional timeout override in seconds.

        Returns:
            ``httpx.Response`` from the first successful attempt.

        Raises:
            ApiTimeoutError: If all attempts fail with timeout/connection errors.
            ApiError: For any other transport failure.
        """
        context = f"GET {url}"
        last_err: ApiTimeoutError | None = None
        attempts = self.cfg.retries + 1
        for attempt in range(attempts):
            try:
                return await self.client.get(
                    url,
                    headers=self._headers(accept=accept),
                    timeout=timeout or self.cfg.request_timeout_s,
                )
            except httpx.TimeoutException as exc:
                log.debug("%s attempt %d/%d timed out: %s", context, attempt + 1, attempts, exc)
                last_err = ApiTimeoutError(f"Timed out contacting {url}", context=context)
            except httpx.NetworkError as exc:
                log.debug("%s attempt %d/%d failed: %s", context, attempt + 1, attempts, exc)
                reason = str(exc) or exc.__class__.__name__
                last_err = ApiTimeoutError(f"Could not connect to {url}: {reason}", context=context)
            except httpx.HTTPError as exc:
                raise ApiError(str(exc) or exc.__class__.__name__, context=context) from exc
        raise last_err

    async def aclose(self) -> None:
        await self.client.aclose()


__all__ = ["HttpConfig", "RetryingClient"]
