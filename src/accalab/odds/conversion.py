"""Conversions between American and decimal prices.

Decimal is the form used for probability and multi-leg composition; American
is the form used for display and for the combined-price range filter. American
prices do not multiply across legs, so every composition goes through decimal.
"""

from __future__ import annotations

from collections.abc import Iterable

from accalab.config import get_settings

settings = get_settings()

#: Returned by :func:`compose_prices` for an empty leg list. Not a real price.
NO_PRICE = 0


def american_to_decimal(american: int) -> float:
    """Convert an American price to decimal, e.g. ``+150 -> 2.5``, ``-200 -> 1.5``."""

    if american == 0:
        raise ValueError("American price 0 is not a valid price.")
    return 1 + (american / 100) if american > 0 else 1 + (100 / abs(american))


def decimal_to_american(decimal: float) -> int:
    """Convert a decimal price to the nearest American integer.

    Prices of 2.0 and above come back positive, shorter prices negative.
    """

    if decimal <= 1:
        raise ValueError(f"Decimal price {decimal!r} must be greater than 1.0.")
    if decimal >= 2.0:
        return round((decimal - 1) * 100)
    return round(-100 / (decimal - 1))


def implied_probability(decimal: float) -> float:
    return 1 / decimal


def american_to_probability(american: int) -> float:
    """Implied probability straight from an American price."""

    if american > 0:
        return 100 / (american + 100)
    return abs(american) / (abs(american) + 100)


def compose_prices(american_prices: Iterable[int]) -> int:
    """Combine leg prices into a single American accumulator price.

    Returns :data:`NO_PRICE` when there are no legs.
    """

    prices = list(american_prices)
    if not prices:
        return NO_PRICE
    decimal = 1.0
    for price in prices:
        decimal *= american_to_decimal(price)
    return decimal_to_american(decimal)


def in_range(american: int, low: int = settings.price_low, high: int = settings.price_high) -> bool:
    return low <= american <= high


def format_american_odds(american: int) -> str:
    return f"+{american}" if american > 0 else str(american)


def format_probability(probability: float) -> str:
    """Whole-percent label, rounding halves up: ``0.125 -> "13%"``."""

    return f"{int(probability * 100 + 0.5)}%"
