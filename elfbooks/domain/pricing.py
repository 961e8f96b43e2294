from __future__ import annotations

import re
from typing import Any, Optional

PRICE_FILTERS: tuple[str, ...] = ("all", "lt10", "10to20", "gt20")

_NON_NUMERIC = re.compile(r"[^0-9.]")


def parse_price(value: Any) -> Optional[float]:
    """Extract a float from display strings like ``$31.19``; None if unparseable."""
    if value is None:
        return None
    cleaned = _NON_NUMERIC.sub("", str(value))
    if not cleaned:
        return None
    # Keep the leading numeric prefix when stray dots follow it ("1.2.3" -> 1.2).
    match = re.match(r"\d*\.?\d*", cleaned)
    text = match.group(0) if match else ""
    if not text or text == ".":
        return None
    try:
        return float(text)
    except ValueError:
        return None


def format_price(value: Any) -> Optional[str]:
    """Format user input as ``$X.YY``; blank or non-numeric input yields None."""
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        amount = float(text)
    except ValueError:
        amount = parse_price(text)
        if amount is None:
            return None
    return f"${amount:.2f}"


def matches_price_filter(price_display: Optional[str], bucket: str) -> bool:
    """Return True when the price falls into ``bucket``.

    Books without a parseable price only match ``all``.
    """
    if bucket not in PRICE_FILTERS:
        raise ValueError(f"Unknown price filter '{bucket}'.")
    if bucket == "all":
        return True
    amount = parse_price(price_display)
    if amount is None:
        return False
    if bucket == "lt10":
        return amount < 10
    if bucket == "10to20":
        return 10 <= amount <= 20
    return amount > 20


__all__ = ["PRICE_FILTERS", "format_price", "matches_price_filter", "parse_price"]
