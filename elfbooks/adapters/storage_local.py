from __future__ import annotations
import json, os, re
from typing import Any, Dict, Optional
from elfbooks.domain.ports import KeyValueStore, SettingsStore

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class StorageLocal(KeyValueStore, SettingsStore):
    """Local filesystem storage: one JSON document per key plus user settings."""

    SETTINGS_FILE = "user_settings.json"

    def __init__(self, root_dir: str = ".") -> None:
        self.root = root_dir

    # ---- Key/value documents (JSON) ----
    def load(self, key: str) -> Any:
        path = self._key_path(key)
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def save(self, key: str, value: Any) -> None:
        os.makedirs(self.root, exist_ok=True)
        path = self._key_path(key)
        tmp_path = f"{path}.tmp"
        # write to a sibling file first so a crash never leaves half a document
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(value, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, path)

    def remove(self, key: str) -> None:
        path = self._key_path(key)
        if os.path.exists(path):
            os.remove(path)

    # ---- User settings (JSON) ----
    def save_user_settings(self, payload: Dict[str, Any]) -> None:
        os.makedirs(self.root, exist_ok=True)
        path = os.path.join(self.root, self.SETTINGS_FILE)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)

    def load_user_settings(self) -> Optional[Dict[str, Any]]:
        path = os.path.join(self.root, self.SETTINGS_FILE)
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a JSON object")
        return data

    def _key_path(self, key: str) -> str:
        if not isinstance(key, str) or not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return os.path.join(self.root, f"{key}.json")


class MemoryStore(KeyValueStore):
    """In-process key/value store; values are JSON round-tripped like on disk."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.save(key, value)

    def load(self, key: str) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def save(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)
