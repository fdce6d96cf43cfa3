"""Category, monthly and daily rollups used by the dashboards and rule engines."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

from ...finance_analytics import FinanceAnalytics, TransactionsInput
from ...models import CategoryTotal, MonthlyRollup, TrendDelta


def _percent_change(current: float, previous: float) -> float:
    return ((current - previous) / previous) * 100 if previous > 0 else 0.0


def category_totals(transactions: TransactionsInput, categories: Optional[Sequence] = None) -> List[CategoryTotal]:
    """Expense totals per category, largest first.

    Amounts are summed as absolute values; ``percentage`` is each category's
    share of the summed total (0 when there is no spend). Ties keep the
    order in which categories first appear.

    Example:
        >>> rows = [
        ...     {'amount': -30000, 'type': 'expense', 'date': '2024-06-05', 'category_name': 'Food'},
        ...     {'amount': -5000, 'type': 'expense', 'date': '2024-06-06', 'category_name': 'Transport'},
        ... ]
        >>> totals = category_totals(rows)
        >>> totals[0].name, totals[0].amount
        ('Food', 30000.0)
    """
    analytics = FinanceAnalytics.ensure(transactions, categories)
    expenses = analytics.expense_rows().copy()
    if expenses.empty:
        return []

    expenses['Abs Amount'] = expenses['Amount'].abs()
    grouped = expenses.groupby('Category', sort=False).agg(
        amount=('Abs Amount', 'sum'),
        count=('Abs Amount', 'size'),
        category_id=('Category Id', 'first'),
    )
    grouped = grouped.sort_values('amount', ascending=False, kind='mergesort')
    total = float(grouped['amount'].sum())

    results = []
    for name, row in grouped.iterrows():
        amount = float(row['amount'])
        category_id = row['category_id']
        results.append(CategoryTotal(
            name=str(name),
            category_id=None if pd.isna(category_id) else category_id,
            amount=amount,
            count=int(row['count']),
            percentage=(amount / total * 100) if total > 0 else 0.0,
        ))
    return results


def monthly_breakdown(transactions: TransactionsInput, categories: Optional[Sequence] = None) -> List[MonthlyRollup]:
    """One rollup per month that has dated transactions, oldest first."""
    analytics = FinanceAnalytics.ensure(transactions, categories)
    rows = []
    for key in analytics.months():
        scoped = analytics.data[analytics.data['Month Key'] == key]
        summary = analytics.summarize(scoped)
        rows.append(MonthlyRollup(
            month=key,
            income=summary.income,
            expenses=summary.expenses,
            savings=summary.savings,
            savings_rate=summary.savings_rate,
        ))
    return rows


def trend_deltas(breakdown: Sequence[MonthlyRollup]) -> TrendDelta:
    """Percent change between the last two rollups in ``breakdown``.

    A change is reported as 0 when the previous month's value is not
    positive, so a first month or a month after a loss never divides by zero.
    """
    if not breakdown:
        return TrendDelta()
    current = breakdown[-1]
    previous = breakdown[-2] if len(breakdown) > 1 else MonthlyRollup('', 0.0, 0.0, 0.0, 0.0)
    return TrendDelta(
        income_change=_percent_change(current.income, previous.income),
        expense_change=_percent_change(current.expenses, previous.expenses),
        savings_change=_percent_change(current.savings, previous.savings),
    )


def daily_spending(
    transactions: TransactionsInput,
    as_of: Optional[date] = None,
    days: int = 15,
    categories: Optional[Sequence] = None,
) -> Dict[str, float]:
    """Expense totals per ISO day over the ``days`` ending at ``as_of``."""
    analytics = FinanceAnalytics.ensure(transactions, categories)
    end = pd.Timestamp(as_of or date.today()).normalize()
    start = end - timedelta(days=days - 1)
    expenses = analytics.expense_rows()
    window = expenses[(expenses['Transaction Date'] >= start) & (expenses['Transaction Date'] <= end)]
    if window.empty:
        return {}
    totals = window['Amount'].abs().groupby(window['Transaction Date'].dt.strftime('%Y-%m-%d')).sum()
    return {str(k): float(v) for k, v in totals.sort_index().items()}


def monthly_expense_totals(
    transactions: TransactionsInput,
    as_of: Optional[date] = None,
    categories: Optional[Sequence] = None,
) -> Tuple[float, float]:
    """Expense totals for ``as_of``'s month and the month before it."""
    analytics = FinanceAnalytics.ensure(transactions, categories)
    current = pd.Period(pd.Timestamp(as_of or date.today()), freq='M')
    previous = current - 1
    expenses = analytics.expense_rows()
    current_total = float(expenses.loc[expenses['Month Key'] == str(current), 'Amount'].abs().sum())
    previous_total = float(expenses.loc[expenses['Month Key'] == str(previous), 'Amount'].abs().sum())
    return current_total, previous_total


def expense_change_percent(
    transactions: TransactionsInput,
    as_of: Optional[date] = None,
    categories: Optional[Sequence] = None,
) -> Optional[float]:
    """Month-over-month change of expense totals for ``as_of``'s month.

    Returns ``None`` when the previous month has no spend to compare against.
    """
    current_total, previous_total = monthly_expense_totals(transactions, as_of, categories)
    if previous_total <= 0:
        return None
    return (current_total - previous_total) / previous_total * 100
