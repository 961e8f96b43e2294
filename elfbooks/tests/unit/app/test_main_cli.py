from __future__ import annotations

import io
import json

import pytest

from elfbooks.adapters.catalog_mock import CatalogMock
from elfbooks.app import main as main_module
from elfbooks.app.controller import AppController
from elfbooks.domain.entities import BookDetail
from elfbooks.tests.unit.helpers import make_hits


@pytest.fixture
def catalog(monkeypatch) -> CatalogMock:
    mock = CatalogMock()
    monkeypatch.setattr(
        main_module,
        "AppController",
        lambda settings: AppController(settings, catalog=mock),
    )
    return mock


def test_show_prints_detail_and_similar_books(catalog, tmp_path) -> None:
    catalog.add_book(
        BookDetail(id="9780134757599", title="Refactoring", authors="Martin Fowler", price="$47.99")
    )
    catalog.add_search("Fowler", make_hits("9780134757599", "111"))
    out = io.StringIO()

    code = main_module.main(["--settings-dir", str(tmp_path), "show", "9780134757599"], out=out)

    text = out.getvalue()
    assert code == 0
    assert "Refactoring [9780134757599]" in text
    assert "Authors: Martin Fowler" in text
    assert "Book 111 [111]" in text


def test_show_not_found_exits_nonzero(catalog, tmp_path) -> None:
    out = io.StringIO()

    code = main_module.main(["--settings-dir", str(tmp_path), "show", "missing"], out=out)

    assert code == 1
    assert "Error: Book not found." in out.getvalue()


def test_show_reads_persisted_settings(catalog, tmp_path) -> None:
    (tmp_path / "user_settings.json").write_text(
        json.dumps({"catalog_base_url": "http://catalog.local/1.0", "retries": 0}),
        encoding="utf-8",
    )
    catalog.add_book(BookDetail(id="1", title="One"))

    code = main_module.main(["--settings-dir", str(tmp_path), "show", "1"], out=io.StringIO())

    assert code == 0


def test_books_lists_filtered_inventory(tmp_path) -> None:
    (tmp_path / "books.json").write_text(
        json.dumps(
            [
                {"isbn13": "1", "title": "Cheap", "price": "$5.00"},
                {"isbn13": "2", "title": "Pricey", "price": "$45.00"},
            ]
        ),
        encoding="utf-8",
    )
    (tmp_path / "user_settings.json").write_text(
        json.dumps({"storage_dir": str(tmp_path)}), encoding="utf-8"
    )
    out = io.StringIO()

    code = main_module.main(["--settings-dir", str(tmp_path), "books", "--price", "gt20"], out=out)

    assert code == 0
    assert out.getvalue() == "2\t$45.00\tPricey\n"


def test_invalid_timeout_exits_with_usage_code(catalog, tmp_path) -> None:
    code = main_module.main(
        ["--settings-dir", str(tmp_path), "--timeout", "0", "show", "1"], out=io.StringIO()
    )

    assert code == 2
    assert catalog.calls == []


def test_fractional_timeout_override_is_accepted(monkeypatch, tmp_path) -> None:
    seen = []
    mock = CatalogMock()
    mock.add_book(BookDetail(id="1", title="One"))

    def build(settings):
        seen.append(settings.request_timeout_s)
        return AppController(settings, catalog=mock)

    monkeypatch.setattr(main_module, "AppController", build)

    code = main_module.main(
        ["--settings-dir", str(tmp_path), "--timeout", "0.5", "show", "1"], out=io.StringIO()
    )

    assert code == 0
    assert seen == [0.5]
