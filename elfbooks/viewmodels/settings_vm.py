from __future__ import annotations

import math
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Mapping, Optional

from ..adapters.catalog_rest import DEFAULT_BASE_URL
from ..utils.logging import env_forces_debug


@dataclass
class SettingsConfig:
    """Typed runtime settings that persist via StorageLocal."""

    catalog_base_url: str = DEFAULT_BASE_URL
    request_timeout_s: float = 10.0
    retries: int = 2
    storage_dir: str = "."


def _default_debug_logging() -> bool:
    return env_forces_debug()


class SettingsVM:
    """Keeps app settings state and validation, no I/O here."""

    def __init__(self, *, config: Optional[SettingsConfig] = None) -> None:
        self.config = config or SettingsConfig()
        self.debug_logging: bool = _default_debug_logging()

    # ------------------------------------------------------------------
    # Properties bridging to the typed config
    # ------------------------------------------------------------------
    @property
    def catalog_base_url(self) -> str:
        return self.config.catalog_base_url

    @catalog_base_url.setter
    def catalog_base_url(self, value: str) -> None:
        self.config = replace(self.config, catalog_base_url=self._coerce_url(value))

    @property
    def request_timeout_s(self) -> float:
        return self.config.request_timeout_s

    @request_timeout_s.setter
    def request_timeout_s(self, value: float) -> None:
        self.config = replace(self.config, request_timeout_s=self._coerce_timeout(value))

    @property
    def retries(self) -> int:
        return self.config.retries

    @retries.setter
    def retries(self, value: int) -> None:
        self.config = replace(self.config, retries=self._coerce_int("retries", value, minimum=0))

    @property
    def storage_dir(self) -> str:
        return self.config.storage_dir

    @storage_dir.setter
    def storage_dir(self, value: str) -> None:
        text = str(value or "").strip()
        self.config = replace(self.config, storage_dir=text or ".")

    # ------------------------------------------------------------------
    def apply_dict(self, payload: Mapping[str, Any]) -> None:
        """Apply persisted settings to the view-model."""

        if not isinstance(payload, Mapping):
            raise ValueError("Settings payload must be a mapping of flat keys.")

        allowed_keys = {*SettingsConfig.__annotations__.keys(), "debug_logging"}
        unknown = sorted(set(payload) - allowed_keys)
        if unknown:
            raise ValueError(f"Unknown settings keys: {', '.join(unknown)}")

        if "catalog_base_url" in payload:
            self.catalog_base_url = payload["catalog_base_url"]
        if "request_timeout_s" in payload:
            self.request_timeout_s = payload["request_timeout_s"]
        if "retries" in payload:
            self.retries = payload["retries"]
        if "storage_dir" in payload:
            self.storage_dir = payload["storage_dir"]
        if "debug_logging" in payload:
            self.debug_logging = self._coerce_bool(payload["debug_logging"])

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self.config)
        data["debug_logging"] = self.debug_logging
        return data

    # ------------------------------------------------------------------
    @staticmethod
    def _coerce_url(value: Any) -> str:
        text = str(value or "").strip().rstrip("/")
        if not text.startswith(("http://", "https://")):
            raise ValueError(f"catalog_base_url must be an http(s) URL, got {value!r}.")
        return text

    @staticmethod
    def _coerce_timeout(value: Any) -> float:
        if isinstance(value, bool):
            raise ValueError("request_timeout_s must be a number of seconds.")
        try:
            seconds = float(value)
        except (TypeError, ValueError) as exc:
            raise ValueError("request_timeout_s must be a number of seconds.") from exc
        if not math.isfinite(seconds) or seconds <= 0:
            raise ValueError("request_timeout_s must be > 0 seconds.")
        return seconds

    @staticmethod
    def _coerce_int(name: str, value: Any, *, minimum: int) -> int:
        if isinstance(value, bool):
            raise ValueError(f"{name} must be an integer.")
        try:
            coerced = int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{name} must be an integer.") from exc
        if coerced < minimum:
            raise ValueError(f"{name} must be >= {minimum}.")
        return coerced

    @staticmethod
    def _coerce_bool(value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "on"}
        return bool(value)


__all__ = ["SettingsConfig", "SettingsVM"]
