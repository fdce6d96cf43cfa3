"""Common utilities shared across the rule engines.

This module provides currency formatting and rounding used by the
suggestion, insight and assistant text builders.
"""

from .formatting import format_currency, format_percent, round_amount

__all__ = [
    'format_currency',
    'format_percent',
    'round_amount',
]
