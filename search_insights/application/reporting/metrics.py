"""Display formatting for engine metrics."""

from __future__ import annotations

import math

PLACEHOLDER = "-"
CURRENCY_CODES: dict[str, str] = {
    "$": "USD",
    "£": "GBP",
    "€": "EUR",
    "₹": "INR",
    "¥": "JPY",
}


def _is_displayable(value: float | None) -> bool:
    return value is not None and math.isfinite(value)


def currency_code(symbol: str) -> str:
    return CURRENCY_CODES.get(symbol, "USD")


def format_currency(value: float | None, symbol: str = "$") -> str:
    if not _is_displayable(value):
        return PLACEHOLDER
    display_symbol = symbol if symbol in CURRENCY_CODES else "$"
    sign = "-" if value < 0 else ""
    return f"{sign}{display_symbol}{abs(value):,.2f}"


def format_number(value: float | None) -> str:
    if not _is_displayable(value):
        return PLACEHOLDER
    text = f"{value:,.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def format_percent(value: float | None) -> str:
    """Render a ratio such as ``0.0523`` as ``5.23%``."""
    if not _is_displayable(value):
        return PLACEHOLDER
    return f"{value * 100:.2f}%"


def format_roas(value: float | None) -> str:
    # Zero-spend rows carry an infinite ROAS.
    if not _is_displayable(value):
        return PLACEHOLDER
    return f"{value:.2f}"
