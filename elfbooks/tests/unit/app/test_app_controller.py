from __future__ import annotations

import asyncio

import httpx

from elfbooks.adapters.catalog_mock import CatalogMock
from elfbooks.adapters.catalog_rest import CatalogRestAdapter
from elfbooks.adapters.storage_local import MemoryStore
from elfbooks.app.controller import AppController
from elfbooks.domain.entities import BookDetail, FetchStage
from elfbooks.viewmodels.settings_vm import SettingsVM


def test_controller_ensure_ready_wires_usecases() -> None:
    settings = SettingsVM()
    settings.catalog_base_url = "http://catalog.local/1.0"
    settings.request_timeout_s = 3
    settings.retries = 1

    controller = AppController(settings)
    orchestrator = controller.ensure_ready()

    assert isinstance(controller.catalog, CatalogRestAdapter)
    assert controller.catalog.base_url == "http://catalog.local/1.0"
    assert controller.catalog.cfg.request_timeout_s == 3
    assert controller.catalog.cfg.retries == 1
    assert controller.uc_fetch_detail is not None
    assert controller.uc_search_similar is not None
    assert controller.ensure_ready() is orchestrator

    asyncio.run(controller.aclose())
    assert controller.orchestrator is None
    assert controller.catalog is None


def test_reset_keeps_injected_catalog() -> None:
    catalog = CatalogMock()
    controller = AppController(SettingsVM(), catalog=catalog)
    first = controller.ensure_ready()

    controller.reset()

    assert controller.ensure_ready() is not first
    assert controller.catalog is catalog


def test_inventory_selection_opens_detail_view() -> None:
    catalog = CatalogMock()
    catalog.add_book(BookDetail(id="9780134757599", title="Refactoring", authors="Martin Fowler"))
    controller = AppController(SettingsVM(), catalog=catalog)

    async def scenario():
        detail_vm = controller.build_detail_vm()
        inventory = controller.build_inventory_vm(MemoryStore(), detail_vm)
        inventory.load([{"isbn13": "9780134757599", "title": "Refactoring"}])
        inventory.select("9780134757599")
        await detail_vm.wait()
        return detail_vm.state

    state = asyncio.run(scenario())

    assert state.stage is FetchStage.READY
    assert state.detail is not None and state.detail.authors == "Martin Fowler"
    assert catalog.queries() == ["Fowler"]


def test_controller_uses_injected_transport() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/books/42"):
            return httpx.Response(200, json={"error": "0", "isbn13": "42", "title": "Answers"})
        return httpx.Response(200, json={"error": "0", "books": [{"isbn13": "43", "title": "More"}]})

    controller = AppController(SettingsVM(), transport=httpx.MockTransport(handler))

    async def scenario():
        detail_vm = controller.build_detail_vm()
        detail_vm.request_open("42", "Answers")
        await detail_vm.wait()
        state = detail_vm.state
        await controller.aclose()
        return state

    state = asyncio.run(scenario())

    assert state.stage is FetchStage.READY
    assert [hit.id for hit in state.similar] == ["43"]
