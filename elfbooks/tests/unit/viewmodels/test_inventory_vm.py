from __future__ import annotations

from typing import List

import pytest

from elfbooks.adapters.storage_local import MemoryStore, StorageLocal
from elfbooks.domain.entities import BookSummary
from elfbooks.viewmodels.inventory_vm import BOOKS_KEY, PLACEHOLDER_IMAGE, InventoryVM

SEED = [
    {"isbn13": "9781617294136", "title": "Securing DevOps", "price": "$26.98", "image": "a.png"},
    {"isbn13": "9781484206485", "title": "Pro Git", "price": "$0.00"},
    {"isbn13": "9781484211830", "title": "The Joy of PHP", "price": "$15.00"},
    {"isbn13": "1", "title": "Unpriced"},
]


def _vm(store=None, **kwargs) -> InventoryVM:
    clock = iter([1700000000.000, 1700000000.000, 1700000001.5])
    return InventoryVM(store or MemoryStore(), clock=lambda: next(clock), **kwargs)


def test_load_uses_seed_and_persists_it() -> None:
    store = MemoryStore()
    vm = _vm(store)

    books = vm.load(SEED)

    assert [book.id for book in books] == ["9781617294136", "9781484206485", "9781484211830", "1"]
    assert store.load(BOOKS_KEY)[0] == {
        "isbn13": "9781617294136",
        "title": "Securing DevOps",
        "image": "a.png",
        "price": "$26.98",
    }


def test_load_prefers_stored_books_over_seed() -> None:
    store = MemoryStore({BOOKS_KEY: [{"isbn13": "stored", "title": "From storage"}]})
    vm = _vm(store)

    books = vm.load(SEED)

    assert [book.id for book in books] == ["stored"]


def test_load_falls_back_to_seed_when_storage_is_corrupt(tmp_path) -> None:
    (tmp_path / "books.json").write_text("[{broken", encoding="utf-8")
    vm = _vm(StorageLocal(str(tmp_path)))

    books = vm.load(SEED[:1])

    assert [book.id for book in books] == ["9781617294136"]


def test_load_falls_back_when_records_are_malformed() -> None:
    store = MemoryStore({BOOKS_KEY: [{"title": "no id"}]})
    vm = _vm(store)

    assert [book.id for book in vm.load(SEED[:2])] == ["9781617294136", "9781484206485"]


def test_select_toggles_exclusive_selection_and_notifies() -> None:
    picked: List[BookSummary] = []
    vm = _vm(on_select=picked.append)
    vm.load(SEED)

    vm.select("9781484206485")
    assert vm.selected_id == "9781484206485"
    vm.select("1")
    assert vm.selected_id == "1"
    vm.select("1")
    assert vm.selected_id is None
    vm.select("unknown")

    assert [book.id for book in picked] == ["9781484206485", "1"]
    assert vm.selected() is None


def test_add_formats_price_and_defaults_image() -> None:
    store = MemoryStore()
    vm = _vm(store)
    vm.load([])

    first = vm.add("  Elf Lore ", author="Galadriel", price="12.5")
    second = vm.add("Second", price="")

    assert first.id == "1700000000000"
    assert second.id == "1700000000001"
    assert first.title == "Elf Lore"
    assert first.price_display == "$12.50"
    assert first.image_url == PLACEHOLDER_IMAGE
    assert second.price_display is None
    assert [record["isbn13"] for record in store.load(BOOKS_KEY)] == [first.id, second.id]


def test_add_requires_title() -> None:
    vm = _vm()
    vm.load([])

    with pytest.raises(ValueError):
        vm.add("   ")


def test_update_selected_keeps_image_and_price_when_blank() -> None:
    vm = _vm()
    vm.load(SEED)
    vm.select("9781617294136")

    updated = vm.update_selected("Securing DevOps 2e", author="Julien Vehent", image_url="", price="")

    assert updated.image_url == "a.png"
    assert updated.price_display == "$26.98"
    assert updated.author == "Julien Vehent"
    assert vm.selected_id is None
    assert vm.find("9781617294136").title == "Securing DevOps 2e"


def test_update_without_selection_is_rejected() -> None:
    vm = _vm()
    vm.load(SEED)

    with pytest.raises(ValueError):
        vm.update_selected("Anything")


def test_delete_selected_removes_and_clears_storage_when_empty() -> None:
    store = MemoryStore()
    vm = _vm(store)
    vm.load(SEED[:1])

    assert vm.delete_selected() is None
    vm.select("9781617294136")
    removed = vm.delete_selected()

    assert removed is not None and removed.id == "9781617294136"
    assert vm.books == []
    assert store.load(BOOKS_KEY) is None


@pytest.mark.parametrize(
    ("bucket", "expected"),
    [
        ("all", ["9781617294136", "9781484206485", "9781484211830", "1"]),
        ("lt10", ["9781484206485"]),
        ("10to20", ["9781484211830"]),
        ("gt20", ["9781617294136"]),
    ],
)
def test_price_filter(bucket: str, expected: List[str]) -> None:
    vm = _vm()
    vm.load(SEED)

    vm.set_price_filter(bucket)

    assert [book.id for book in vm.visible_books()] == expected


def test_unknown_price_filter_rejected() -> None:
    vm = _vm()

    with pytest.raises(ValueError):
        vm.set_price_filter("cheap")
