"""Budget reconciliation: spending status per budget.

A budget is measured against expense transactions of its category dated
inside ``[start_date, end_date]`` (both ends inclusive).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from ...finance_analytics import FinanceAnalytics, TransactionsInput, as_mapping, parse_date, to_float
from ...models import AT_RISK, BUDGET_STATUSES, EXCEEDED, ON_TRACK, Budget, BudgetStatus
from ...settings import Thresholds, load_thresholds

logger = logging.getLogger(__name__)


def budget_percentage(spent: float, limit_amount: float) -> float:
    """Share of the limit used; 0 for a zero or negative limit."""
    return (spent / limit_amount * 100) if limit_amount > 0 else 0.0


def budget_status(percentage: float, thresholds: Optional[Thresholds] = None) -> str:
    """Band a percentage into on-track / at-risk / exceeded.

    The lower bound of each band is inclusive: exactly 80 is at-risk and
    exactly 100 is exceeded.

    Example:
        >>> budget_status(79.99), budget_status(80), budget_status(100)
        ('on-track', 'at-risk', 'exceeded')
    """
    thresholds = thresholds or Thresholds()
    if percentage >= thresholds.budget_exceeded_percent:
        return EXCEEDED
    if percentage >= thresholds.budget_at_risk_percent:
        return AT_RISK
    return ON_TRACK


def evaluate_budget(
    budget: Union[Budget, Mapping[str, Any]],
    analytics: FinanceAnalytics,
    thresholds: Optional[Thresholds] = None,
) -> BudgetStatus:
    """Compute spent / remaining / percentage / status for one budget."""
    data = as_mapping(budget)
    limit_amount = to_float(data.get('limit_amount'))
    start = parse_date(data.get('start_date'))
    end = parse_date(data.get('end_date'))

    spent = 0.0
    if start is None or end is None:
        logger.debug("Budget %s has an unreadable window; no spending attributed", data.get('id'))
    else:
        expenses = analytics.expense_rows()
        selected = expenses[
            (expenses['Category Id'] == data.get('category_id'))
            & (expenses['Transaction Date'] >= start)
            & (expenses['Transaction Date'] <= end)
        ]
        spent = float(selected['Amount'].abs().sum())

    percentage = budget_percentage(spent, limit_amount)
    return BudgetStatus(
        budget_id=data.get('id'),
        name=data.get('name') or '',
        category_id=data.get('category_id'),
        limit_amount=limit_amount,
        spent=spent,
        remaining=limit_amount - spent,
        percentage=percentage,
        status=budget_status(percentage, thresholds),
    )


def reconcile(
    budgets: Iterable[Union[Budget, Mapping[str, Any]]],
    transactions: TransactionsInput,
    thresholds: Optional[Thresholds] = None,
    categories: Optional[Sequence[Any]] = None,
) -> List[BudgetStatus]:
    """Evaluate every budget against the same transaction snapshot.

    Args:
        budgets: Budget definitions
        transactions: Transaction records, a frame, or a ``FinanceAnalytics``
        thresholds: Banding thresholds; loaded from configuration when omitted

    Returns:
        One BudgetStatus per budget, in input order. ``remaining`` is not
        clamped, so overspend shows as a negative number.
    """
    thresholds = thresholds or load_thresholds()
    analytics = FinanceAnalytics.ensure(transactions, categories)
    return [evaluate_budget(budget, analytics, thresholds) for budget in budgets or []]


def budget_overview(statuses: Sequence[BudgetStatus]) -> Dict[str, float]:
    """Counts per status plus total limit and spend across ``statuses``."""
    overview: Dict[str, float] = {status: 0 for status in BUDGET_STATUSES}
    for item in statuses:
        overview[item.status] = overview.get(item.status, 0) + 1
    overview['total'] = len(statuses)
    overview['total_limit'] = float(sum(item.limit_amount for item in statuses))
    overview['total_spent'] = float(sum(item.spent for item in statuses))
    return overview
