"""Formatting utilities for currency amounts in generated text."""

from __future__ import annotations

import math
from typing import Optional, Union

from ...settings import get_currency_symbol


def round_amount(amount: Union[float, int]) -> int:
    """Round to the nearest whole currency unit, halves rounding up.

    Example:
        >>> round_amount(2.5)
        3
        >>> round_amount(-2.5)
        -2
    """
    if amount is None or (isinstance(amount, float) and math.isnan(amount)):
        return 0
    return int(math.floor(float(amount) + 0.5))


def format_currency(
    amount: Union[float, int],
    symbol: Optional[str] = None,
    decimals: int = 0,
) -> str:
    """Format a currency amount with thousands separators.

    Whole units are used by default since every figure in a suggestion or
    insight is rounded before display.

    Args:
        amount: The amount to format
        symbol: Currency symbol; the configured currency's symbol when omitted
        decimals: Number of decimal places

    Returns:
        Formatted string (e.g. "₱1,235")

    Example:
        >>> format_currency(1234.56, symbol='$')
        '$1,235'
        >>> format_currency(1234.56, symbol='$', decimals=2)
        '$1,234.56'
    """
    symbol = get_currency_symbol() if symbol is None else symbol
    if decimals == 0:
        return f"{symbol}{round_amount(amount):,}"
    return f"{symbol}{amount:,.{decimals}f}"


def format_percent(value: float) -> str:
    return f"{value:.1f}%"
