"""Budget-specific utilities and business logic.

This module provides all budget-related functionality including:
- Budget window end-date calculation
- Spending reconciliation and status banding
- Overview counts for budget pages
"""

from .periods import calculate_end_date
from .reconciliation import (
    budget_overview,
    budget_percentage,
    budget_status,
    evaluate_budget,
    reconcile,
)

__all__ = [
    # Periods
    'calculate_end_date',
    # Reconciliation
    'budget_overview',
    'budget_percentage',
    'budget_status',
    'evaluate_budget',
    'reconcile',
]
