from __future__ import annotations

"""Two-stage detail lookup (record, then similar books) with cancellation."""

import asyncio
import logging
from typing import Callable, Optional

from elfbooks.domain.entities import BookDetail, BookId, FetchStage, StageEvent
from elfbooks.domain.ports import UseCaseError
from elfbooks.domain.similar import derive_similar_query
from elfbooks.usecases.error_mapping import describe_cause, map_primary_error, map_secondary_error
from elfbooks.usecases.fetch_book_detail import FetchBookDetail
from elfbooks.usecases.search_similar_books import SearchSimilarBooks

log = logging.getLogger(__name__)

StageCallback = Callable[[StageEvent], None]


class LivenessToken:
    """Per-subscription flag; once revoked no further events may be delivered."""

    __slots__ = ("_alive",)

    def __init__(self) -> None:
        self._alive = True

    @property
    def alive(self) -> bool:
        return self._alive

    def revoke(self) -> None:
        self._alive = False


class DetailSubscription:
    """Handle for one open detail view returned by ``DetailFetchOrchestrator.open``."""

    def __init__(self, book_id: BookId, on_event: StageCallback) -> None:
        self.book_id = book_id
        self.stage = FetchStage.IDLE
        self._token = LivenessToken()
        self._on_event = on_event
        self._task: Optional[asyncio.Task[None]] = None

    @property
    def active(self) -> bool:
        return self._token.alive

    def deliver(self, event: StageEvent) -> bool:
        """Forward ``event`` to the subscriber unless the token was revoked.

        Returns ``False`` when the event was dropped.
        """
        if not self._token.alive:
            return False
        self.stage = event.stage
        self._on_event(event)
        return True

    def close(self) -> None:
        """Cancel in-flight requests; no event is delivered after this returns."""
        if not self._token.alive:
            return
        self._token.revoke()
        if self._task is not None and not self._task.done():
            self._task.cancel()

    async def wait(self) -> None:
        """Wait until the pipeline task finished, failed, or was cancelled."""
        if self._task is None:
            return
        await asyncio.wait({self._task})

    def _attach(self, task: asyncio.Task[None]) -> None:
        self._task = task


class DetailFetchOrchestrator:
    """Runs the primary lookup, derives the similar-books query, runs the search.

    Stage order per subscription::

        LOADING_PRIMARY -> PRIMARY_FAILED
                        -> LOADING_SECONDARY -> READY
                                             -> SECONDARY_FAILED

    Each subscription runs as its own ``asyncio`` task. Closing the
    subscription cancels the task and revokes its liveness token, so late
    responses are dropped at the delivery boundary.
    """

    def __init__(
        self,
        uc_fetch_detail: FetchBookDetail,
        uc_search_similar: SearchSimilarBooks,
    ) -> None:
        self.uc_fetch_detail = uc_fetch_detail
        self.uc_search_similar = uc_search_similar

    def open(
        self,
        book_id: BookId,
        fallback_title: str,
        on_event: StageCallback,
    ) -> DetailSubscription:
        """Start resolving ``book_id``; must be called from a running event loop.

        ``LOADING_PRIMARY`` is delivered before this method returns.
        """
        loop = asyncio.get_running_loop()
        subscription = DetailSubscription(book_id, on_event)
        subscription.deliver(StageEvent(stage=FetchStage.LOADING_PRIMARY, book_id=book_id))
        task = loop.create_task(
            self._run(subscription, fallback_title),
            name=f"book-detail:{book_id}",
        )
        subscription._attach(task)
        return subscription

    async def _run(self, subscription: DetailSubscription, fallback_title: str) -> None:
        book_id = subscription.book_id
        try:
            detail = await self.uc_fetch_detail(book_id)
        except Exception as exc:
            self._fail_primary(subscription, map_primary_error(exc))
            return

        delivered = subscription.deliver(
            StageEvent(stage=FetchStage.LOADING_SECONDARY, book_id=book_id, detail=detail)
        )
        if not delivered or not subscription.active:
            return

        query = derive_similar_query(detail, fallback_title)
        if not query:
            log.debug("book[%s]: no title or author to search by", book_id)
            subscription.deliver(
                StageEvent(stage=FetchStage.READY, book_id=book_id, detail=detail)
            )
            return

        log.debug("book[%s]: searching similar books for %r", book_id, query)
        try:
            similar = await self.uc_search_similar(query, book_id)
        except Exception as exc:
            self._fail_secondary(subscription, detail, map_secondary_error(exc))
            return

        subscription.deliver(
            StageEvent(
                stage=FetchStage.READY,
                book_id=book_id,
                detail=detail,
                similar=tuple(similar),
            )
        )

    @staticmethod
    def _fail_primary(subscription: DetailSubscription, err: UseCaseError) -> None:
        if not subscription.active:
            return
        log.warning(
            "book[%s]: detail lookup failed (%s)", subscription.book_id, describe_cause(err)
        )
        subscription.deliver(
            StageEvent(
                stage=FetchStage.PRIMARY_FAILED,
                book_id=subscription.book_id,
                error_code=err.code,
                error_message=err.message,
            )
        )

    @staticmethod
    def _fail_secondary(
        subscription: DetailSubscription, detail: BookDetail, err: UseCaseError
    ) -> None:
        if not subscription.active:
            return
        log.warning(
            "book[%s]: similar books lookup failed (%s)",
            subscription.book_id,
            describe_cause(err),
        )
        subscription.deliver(
            StageEvent(
                stage=FetchStage.SECONDARY_FAILED,
                book_id=subscription.book_id,
                detail=detail,
                error_code=err.code,
                error_message=err.message,
            )
        )


__all__ = ["DetailFetchOrchestrator", "DetailSubscription", "LivenessToken", "StageCallback"]
