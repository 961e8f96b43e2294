from __future__ import annotations

import pytest

from elfbooks.adapters.storage_local import StorageLocal
from elfbooks.viewmodels.settings_vm import SettingsConfig, SettingsVM


def test_defaults_point_at_public_catalog() -> None:
    vm = SettingsVM()

    assert vm.catalog_base_url == "https://api.itbook.store/1.0"
    assert vm.request_timeout_s == 10
    assert vm.retries == 2


def test_apply_and_persist_round_trip(tmp_path) -> None:
    vm = SettingsVM()
    vm.apply_dict(
        {
            "catalog_base_url": "http://localhost:8080/1.0/",
            "request_timeout_s": "5",
            "retries": 0,
            "storage_dir": str(tmp_path),
            "debug_logging": "yes",
        }
    )
    storage = StorageLocal(str(tmp_path))
    storage.save_user_settings(vm.to_dict())

    restored = SettingsVM()
    restored.apply_dict(storage.load_user_settings())

    assert restored.catalog_base_url == "http://localhost:8080/1.0"
    assert restored.request_timeout_s == 5
    assert restored.retries == 0
    assert restored.debug_logging is True
    assert restored.config == SettingsConfig(
        catalog_base_url="http://localhost:8080/1.0",
        request_timeout_s=5,
        retries=0,
        storage_dir=str(tmp_path),
    )


@pytest.mark.parametrize(
    "payload",
    [
        {"catalog_base_url": "ftp://catalog"},
        {"request_timeout_s": 0},
        {"request_timeout_s": "soon"},
        {"request_timeout_s": "nan"},
        {"request_timeout_s": -0.5},
        {"request_timeout_s": False},
        {"retries": -1},
        {"retries": True},
        {"box_urls": {}},
    ],
)
def test_invalid_settings_rejected(payload) -> None:
    vm = SettingsVM()

    with pytest.raises(ValueError):
        vm.apply_dict(payload)


def test_blank_storage_dir_defaults_to_cwd() -> None:
    vm = SettingsVM()
    vm.storage_dir = "   "

    assert vm.storage_dir == "."


def test_fractional_timeout_is_kept() -> None:
    vm = SettingsVM()
    vm.apply_dict({"request_timeout_s": "0.5"})

    assert vm.request_timeout_s == 0.5
    assert vm.to_dict()["request_timeout_s"] == 0.5
