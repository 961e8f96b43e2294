"""Adapter and use-case wiring for the catalog runtime.

This module owns lazy construction of the catalog REST adapter and the
detail pipeline objects that depend on values in
:class:`elfbooks.viewmodels.settings_vm.SettingsVM`.
"""

from __future__ import annotations

from typing import Callable, Optional

import httpx

from ..adapters.catalog_rest import CatalogRestAdapter
from ..domain.ports import CatalogPort, KeyValueStore
from ..usecases.detail_fetch_orchestrator import DetailFetchOrchestrator
from ..usecases.fetch_book_detail import FetchBookDetail
from ..usecases.search_similar_books import SearchSimilarBooks
from ..viewmodels.detail_vm import DetailViewState, DetailVM
from ..viewmodels.inventory_vm import InventoryVM
from ..viewmodels.settings_vm import SettingsVM


class AppController:
    """Create and cache runtime adapters/use-cases from settings state.

    Call chain:
        ``elfbooks.app.main`` creates one instance, then asks it for the
        detail and inventory viewmodels. Those share one orchestrator.
    """

    def __init__(
        self,
        settings_vm: SettingsVM,
        *,
        catalog: Optional[CatalogPort] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize controller with settings-backed lazy dependencies.

        Args:
            settings_vm: Settings holding the catalog URL and timeouts.
            catalog: Optional prebuilt catalog port (offline mocks in tests).
            transport: Optional ``httpx`` transport for the REST adapter.
        """
        self.settings_vm = settings_vm
        self._injected_catalog = catalog
        self._transport = transport
        self._catalog: Optional[CatalogPort] = catalog
        self.uc_fetch_detail: Optional[FetchBookDetail] = None
        self.uc_search_similar: Optional[SearchSimilarBooks] = None
        self.orchestrator: Optional[DetailFetchOrchestrator] = None

    @property
    def catalog(self) -> Optional[CatalogPort]:
        """Return the cached catalog port used by both lookup stages."""
        return self._catalog

    def reset(self) -> None:
        """Drop cached adapters and use-cases so settings changes take effect.

        Callers holding a REST adapter should ``aclose`` it first.
        """
        self._catalog = self._injected_catalog
        self.uc_fetch_detail = None
        self.uc_search_similar = None
        self.orchestrator = None

    def ensure_ready(self) -> DetailFetchOrchestrator:
        """Build the adapter, both use cases and the orchestrator on first use."""
        if self.orchestrator is not None:
            return self.orchestrator

        if self._catalog is None:
            self._catalog = CatalogRestAdapter(
                self.settings_vm.catalog_base_url,
                request_timeout_s=self.settings_vm.request_timeout_s,
                retries=self.settings_vm.retries,
                transport=self._transport,
            )
        self.uc_fetch_detail = FetchBookDetail(self._catalog)
        self.uc_search_similar = SearchSimilarBooks(self._catalog)
        self.orchestrator = DetailFetchOrchestrator(
            self.uc_fetch_detail, self.uc_search_similar
        )
        return self.orchestrator

    def build_detail_vm(
        self, on_state_changed: Optional[Callable[[DetailViewState], None]] = None
    ) -> DetailVM:
        return DetailVM(self.ensure_ready(), on_state_changed=on_state_changed)

    def build_inventory_vm(
        self, store: KeyValueStore, detail_vm: Optional[DetailVM] = None
    ) -> InventoryVM:
        """Create the inventory; selecting a book opens it in ``detail_vm``."""
        on_select = detail_vm.open_summary if detail_vm is not None else None
        return InventoryVM(store, on_select=on_select)

    async def aclose(self) -> None:
        """Release the HTTP client of a controller-built REST adapter."""
        catalog = self._catalog
        if isinstance(catalog, CatalogRestAdapter) and catalog is not self._injected_catalog:
            await catalog.aclose()
        self.reset()
