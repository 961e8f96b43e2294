"""View state for the book detail panel.

Call context:
    ``InventoryVM.on_select`` is bound to :meth:`DetailVM.open_summary` by the
    app controller; the presentation layer subscribes to ``on_state_changed``
    and renders whatever :class:`DetailViewState` it receives.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, Optional, Tuple

from ..domain.entities import (
    BookDetail,
    BookId,
    BookSummary,
    FetchStage,
    SimilarBookSummary,
    StageEvent,
)
from ..usecases.detail_fetch_orchestrator import DetailFetchOrchestrator, DetailSubscription

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetailViewState:
    """Immutable snapshot of the detail panel handed to the view."""

    is_open: bool = False
    book_id: Optional[BookId] = None
    stage: FetchStage = FetchStage.IDLE
    detail: Optional[BookDetail] = None
    similar: Tuple[SimilarBookSummary, ...] = ()
    error_primary: Optional[str] = None
    error_secondary: Optional[str] = None


CLOSED = DetailViewState()


class DetailVM:
    """Open/dismiss state machine in front of :class:`DetailFetchOrchestrator`.

    Only the live subscription may change the state. Every ``request_open``
    and ``dismiss`` bumps a generation counter, and events stamped with an
    older generation are dropped.
    """

    def __init__(
        self,
        orchestrator: DetailFetchOrchestrator,
        *,
        on_state_changed: Optional[Callable[[DetailViewState], None]] = None,
    ) -> None:
        self._orchestrator = orchestrator
        self.on_state_changed = on_state_changed
        self.state: DetailViewState = CLOSED
        self._subscription: Optional[DetailSubscription] = None
        self._generation = 0

    @property
    def is_open(self) -> bool:
        return self.state.is_open

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def request_open(self, book_id: BookId, fallback_title: str = "") -> None:
        """Show the detail panel for ``book_id``, superseding any open one."""
        self._close_subscription()
        self._generation += 1
        generation = self._generation
        self._set_state(
            DetailViewState(is_open=True, book_id=book_id, stage=FetchStage.LOADING_PRIMARY)
        )
        try:
            self._subscription = self._orchestrator.open(
                book_id,
                fallback_title,
                lambda event: self._on_stage_event(generation, event),
            )
        except Exception:
            self._generation += 1
            self._set_state(CLOSED)
            raise

    def open_summary(self, summary: BookSummary) -> None:
        self.request_open(summary.id, summary.title)

    def dismiss(self) -> None:
        """Close the panel and drop its data; a no-op when already closed."""
        if not self.state.is_open and self._subscription is None:
            return
        self._close_subscription()
        self._generation += 1
        self._set_state(CLOSED)

    async def wait(self) -> None:
        """Wait for the live subscription's pipeline to settle."""
        if self._subscription is not None:
            await self._subscription.wait()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _close_subscription(self) -> None:
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            subscription.close()

    def _on_stage_event(self, generation: int, event: StageEvent) -> None:
        if generation != self._generation:
            return
        if event.book_id != self.state.book_id:
            return
        self._set_state(self._reduce(self.state, event))

    @staticmethod
    def _reduce(state: DetailViewState, event: StageEvent) -> DetailViewState:
        stage = event.stage
        if stage is FetchStage.LOADING_PRIMARY:
            return replace(
                state,
                stage=stage,
                detail=None,
                similar=(),
                error_primary=None,
                error_secondary=None,
            )
        if stage is FetchStage.LOADING_SECONDARY:
            return replace(state, stage=stage, detail=event.detail)
        if stage is FetchStage.READY:
            return replace(state, stage=stage, detail=event.detail, similar=event.similar)
        if stage is FetchStage.PRIMARY_FAILED:
            return replace(
                state,
                stage=stage,
                detail=None,
                similar=(),
                error_primary=event.error_message,
            )
        if stage is FetchStage.SECONDARY_FAILED:
            return replace(
                state,
                stage=stage,
                detail=event.detail or state.detail,
                similar=(),
                error_secondary=event.error_message,
            )
        return replace(state, stage=stage)

    def _set_state(self, state: DetailViewState) -> None:
        if state == self.state:
            return
        log.debug("detail view: %s -> %s", self.state.stage.value, state.stage.value)
        self.state = state
        if self.on_state_changed:
            self.on_state_changed(state)


__all__ = ["CLOSED", "DetailVM", "DetailViewState"]
