"""Root logger setup for the elfbooks CLI and tests.

Two environment variables outrank the persisted ``debug_logging`` setting:
``ELFBOOKS_LOG_LEVEL`` (a level name such as ``warning`` or a number) and
``ELFBOOKS_DEBUG`` (truthy means DEBUG). An unparseable level falls back to
INFO rather than aborting start-up.
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Union

LEVEL_ENV = "ELFBOOKS_LOG_LEVEL"
DEBUG_ENV = "ELFBOOKS_DEBUG"

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%H:%M:%S"
_TRUTHY = frozenset({"1", "true", "yes", "on"})


def parse_level(value: Union[str, int, None], fallback: int) -> int:
    """Turn ``"debug"``, ``"10"`` or ``10`` into a level number."""
    if isinstance(value, int):
        return value
    text = (value or "").strip()
    if not text:
        return fallback
    try:
        return int(text)
    except ValueError:
        pass
    level = logging.getLevelName(text.upper())
    return level if isinstance(level, int) else fallback


def env_level() -> Optional[int]:
    """Level forced by the environment, or None when nothing is set."""
    raw = os.getenv(LEVEL_ENV)
    if raw and raw.strip():
        return parse_level(raw, logging.INFO)
    if (os.getenv(DEBUG_ENV) or "").strip().lower() in _TRUTHY:
        return logging.DEBUG
    return None


def configure_root(default_level: Union[str, int] = logging.INFO) -> int:
    """Install the compact console handler once and set the root level."""
    forced = env_level()
    effective = forced if forced is not None else parse_level(default_level, logging.INFO)

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=effective, format=_FORMAT, datefmt=_DATEFMT)
    root.setLevel(effective)
    return effective


def apply_preferences(debug_enabled: bool) -> int:
    """Apply the persisted debug preference unless the environment overrides it."""
    forced = env_level()
    if forced is not None:
        level = forced
    else:
        level = logging.DEBUG if debug_enabled else logging.INFO
    logging.getLogger().setLevel(level)
    return level


def env_forces_debug() -> bool:
    forced = env_level()
    return forced is not None and forced <= logging.DEBUG
