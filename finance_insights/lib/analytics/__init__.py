"""Analytics utilities for financial calculations.

This module provides salary detection and the category, monthly and daily
rollups used across the dashboards and rule engines.
"""

from .salary import (
    DEFAULT_SALARY_KEYWORDS,
    SalaryDetector,
    growth_rate,
    salary_by_month,
    salary_profile,
    salary_rows,
)
from .trends import (
    category_totals,
    daily_spending,
    expense_change_percent,
    monthly_breakdown,
    monthly_expense_totals,
    trend_deltas,
)

__all__ = [
    # Salary
    'DEFAULT_SALARY_KEYWORDS',
    'SalaryDetector',
    'growth_rate',
    'salary_by_month',
    'salary_profile',
    'salary_rows',
    # Trends
    'category_totals',
    'daily_spending',
    'expense_change_percent',
    'monthly_breakdown',
    'monthly_expense_totals',
    'trend_deltas',
]
