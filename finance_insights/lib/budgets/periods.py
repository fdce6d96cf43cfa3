"""Budget window end-date calculation."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any

import pandas as pd

from ...finance_analytics import parse_date

logger = logging.getLogger(__name__)


def _month_end(stamp: pd.Timestamp) -> date:
    return (stamp + pd.offsets.MonthEnd(0)).date()


def calculate_end_date(start_date: Any, period: str, custom_end_date: Any = None) -> date:
    """Compute the inclusive end date of a budget window.

    Args:
        start_date: First day of the window (date or ISO string)
        period: One of weekly, monthly, quarterly, yearly, custom
        custom_end_date: Explicit end date, only used for ``custom``

    Returns:
        The last day covered by the budget

    Raises:
        ValueError: If ``start_date`` can't be parsed

    Example:
        >>> calculate_end_date(date(2024, 1, 1), 'weekly')
        datetime.date(2024, 1, 7)
        >>> calculate_end_date(date(2024, 2, 1), 'monthly')
        datetime.date(2024, 2, 29)
        >>> calculate_end_date(date(2024, 1, 15), 'quarterly')
        datetime.date(2024, 3, 31)
    """
    start = parse_date(start_date)
    if start is None:
        raise ValueError(f"Invalid budget start date: {start_date!r}")

    if period == 'weekly':
        return (start + timedelta(days=6)).date()
    if period == 'monthly':
        return _month_end(start)
    if period == 'quarterly':
        # Last day of the second month after the start month.
        return _month_end(start + pd.DateOffset(months=2))
    if period == 'yearly':
        first_of_month = date(start.year + 1, start.month, 1)
        return first_of_month + timedelta(days=start.day - 2)
    if period == 'custom':
        custom_end = parse_date(custom_end_date)
        if custom_end is not None:
            return custom_end.date()

    logger.debug("No explicit end for period %r; using end of start month", period)
    return _month_end(start)
