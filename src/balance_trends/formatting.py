# Balance Trends - Balance aggregation engine for financial dashboards
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Number and date formatting capability.

The axis planner and the series binder never format values themselves:
they receive a ``Formatter`` and call it. ``DefaultFormatter`` is a
locale-neutral implementation (comma thousands separator, strftime date
patterns, configurable timezone) good enough for the CLI and tests; a UI
can inject its own locale-aware implementation.
"""

from typing import Optional, Protocol

from .periods import from_timestamp_ms

_CURRENCY_SYMBOLS: dict[str, str] = {
    "EUR": "€",
    "USD": "$",
    "GBP": "£",
    "JPY": "¥",
    "CNY": "¥",
    "CHF": "CHF",
    "CAD": "CA$",
    "AUD": "A$",
    "INR": "₹",
    "KRW": "₩",
}


class Formatter(Protocol):
    """What the planner and binder need from a locale formatting layer."""

    def format_number(
        self,
        value: float,
        min_fraction_digits: Optional[int] = None,
        max_fraction_digits: Optional[int] = None,
    ) -> str: ...

    def format_date(self, timestamp: int, pattern: str) -> str: ...


class DefaultFormatter:
    """Locale-neutral Formatter.

    Numbers use ',' as thousands separator and '.' as decimal point.
    Trailing fraction zeros are dropped down to ``min_fraction_digits``
    (default 0); at most ``max_fraction_digits`` (default 3) are kept.
    Dates are rendered with ``strftime`` patterns in ``timezone``.
    """

    def __init__(self, timezone: Optional[str] = "UTC"):
        self.timezone = timezone

    def format_number(
        self,
        value: float,
        min_fraction_digits: Optional[int] = None,
        max_fraction_digits: Optional[int] = None,
    ) -> str:
        max_digits = 3 if max_fraction_digits is None else max(0, max_fraction_digits)
        min_digits = 0 if min_fraction_digits is None else max(0, min_fraction_digits)
        min_digits = min(min_digits, max_digits)

        text = f"{float(value):,.{max_digits}f}"
        if max_digits > min_digits:
            integer, _, fraction = text.partition(".")
            fraction = fraction.rstrip("0")
            if len(fraction) < min_digits:
                fraction = fraction.ljust(min_digits, "0")
            text = f"{integer}.{fraction}" if fraction else integer

        # "-0" and "-0.00" read as zero
        if text.startswith("-") and not any(c in "123456789" for c in text):
            text = text[1:]
        return text

    def format_date(self, timestamp: int, pattern: str) -> str:
        return from_timestamp_ms(timestamp, self.timezone).strftime(pattern)


def currency_symbol(currency: Optional[str], symbol: Optional[str] = None) -> str:
    """Symbol to show next to amounts for a book.

    An explicit book symbol wins; otherwise the ISO code is looked up in a
    small table and falls back to the code itself ('' when unknown).
    """
    if symbol:
        return symbol
    if not currency:
        return ""
    code = currency.strip().upper()
    return _CURRENCY_SYMBOLS.get(code, code)
