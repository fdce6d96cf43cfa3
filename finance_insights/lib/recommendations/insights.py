"""Rule-based insights for the insights tab.

Insights are observations rather than actions: each one states what the
numbers show and carries a short recommendation. Which rules run is gated by
the ``insights`` toggles in :class:`AIPreferences`.
"""

from __future__ import annotations

from datetime import date
from typing import Any, List, Optional, Sequence

from ...finance_analytics import FinanceAnalytics, TransactionsInput, as_mapping, to_float
from ...models import (
    AIPreferences,
    BudgetStatus,
    CategoryTotal,
    Icon,
    Insight,
    PeriodAggregate,
    SalaryProfile,
)
from ...settings import Thresholds, load_thresholds
from ..analytics.trends import monthly_expense_totals
from ..common.formatting import format_currency, format_percent
from .suggestions import total_balance


def _salary_insight(salary: Optional[SalaryProfile], thresholds: Thresholds) -> Optional[dict]:
    if salary is None or salary.monthly_average <= 0:
        return None
    growth = salary.growth_rate_percent
    if growth > 0:
        trend = f"Your salary has grown by {format_percent(growth)} over time."
    elif growth < 0:
        trend = f"Your salary has decreased by {format_percent(abs(growth))} recently."
    else:
        trend = 'Your salary has remained stable.'
    rate = thresholds.recommended_savings_rate
    return dict(
        kind='salary_insight',
        title='Salary Analysis',
        description=(
            f"Your average monthly salary is {format_currency(salary.monthly_average)} based on "
            f"{salary.months_observed} months of data. {trend}"
        ),
        impact='info',
        category='Salary',
        icon=Icon.CALCULATOR,
        actions=['View Salary Trends', 'Optimize Savings'],
        recommendation=(
            f"Based on your salary, aim to save {format_currency(salary.monthly_average * rate / 100)} "
            f"monthly ({rate:g}% rule)."
        ),
    )


def _savings_insight(aggregate: PeriodAggregate, thresholds: Thresholds) -> Optional[dict]:
    rate = thresholds.recommended_savings_rate
    if aggregate.income <= 0 or aggregate.savings_rate >= rate:
        return None
    shortfall = aggregate.income * rate / 100 - aggregate.savings
    return dict(
        kind='spending_alert',
        title='Savings Rate Below Target',
        description=(
            f"Your current savings rate is {format_percent(aggregate.savings_rate)}. Financial experts "
            f"recommend saving at least {rate:g}% of your income for long-term financial health."
        ),
        impact='high',
        category='Savings',
        icon=Icon.ALERT,
        actions=['Create Savings Plan', 'View Tips'],
        recommendation=(
            f"Try to save an additional {format_currency(shortfall)} monthly to reach the {rate:g}% target."
        ),
    )


def _category_insight(
    aggregate: PeriodAggregate,
    category_totals: Sequence[CategoryTotal],
    thresholds: Thresholds,
) -> Optional[dict]:
    if not category_totals or aggregate.expenses <= 0:
        return None
    top = category_totals[0]
    share = top.amount / aggregate.expenses * 100
    if share <= thresholds.category_share_high:
        return None
    return dict(
        kind='spending_alert',
        title=f"High {top.name} Spending",
        description=(
            f"{top.name} makes up {format_percent(share)} of your total expenses "
            f"({format_currency(top.amount)}). This might be an area for optimization."
        ),
        impact='medium',
        category=top.name,
        icon=Icon.ALERT,
        actions=['Set Budget', 'View Details'],
        recommendation=(
            f"Consider reducing {top.name} spending by 10-15% to free up "
            f"{format_currency(top.amount * 0.125)} monthly."
        ),
    )


def _goals_insight(goals: Sequence[Any]) -> Optional[dict]:
    halfway = 0
    for goal in goals or []:
        data = as_mapping(goal)
        target = to_float(data.get('target_amount'))
        if target > 0 and to_float(data.get('current_amount')) / target * 100 >= 50:
            halfway += 1
    if not halfway:
        return None
    return dict(
        kind='goal_progress',
        title='Goals On Track!',
        description=(
            f"You're making excellent progress on {halfway} of your financial goals. Keep up the momentum!"
        ),
        impact='positive',
        category='Goals',
        icon=Icon.CHECK,
        actions=['View Progress', 'Adjust Timeline'],
        recommendation='Consider increasing contributions to accelerate your timeline or set new stretch goals.',
    )


def _budget_insight(budget_statuses: Sequence[BudgetStatus], thresholds: Thresholds) -> Optional[dict]:
    exceeded = [s for s in budget_statuses or [] if s.percentage > thresholds.budget_exceeded_percent]
    if not exceeded:
        return None
    plural = 's' if len(exceeded) > 1 else ''
    return dict(
        kind='budget_alert',
        title='Budget Alert!',
        description=(
            f"You've exceeded {len(exceeded)} budget{plural}. Time to review and adjust your "
            f"spending in these categories."
        ),
        impact='high',
        category='Budgeting',
        icon=Icon.ALERT,
        actions=['View Budgets', 'Adjust Limits'],
        recommendation=(
            'Review your spending patterns and consider increasing budget limits or reducing '
            'expenses in these categories.'
        ),
    )


def _investment_insight(aggregate: PeriodAggregate, wallets: Sequence[Any], thresholds: Thresholds) -> Optional[dict]:
    balance = total_balance(wallets)
    if aggregate.savings_rate <= thresholds.investment_savings_rate or balance <= thresholds.investment_balance_floor:
        return None
    return dict(
        kind='investment_opportunity',
        title='Investment Opportunity!',
        description=(
            f"With a {format_percent(aggregate.savings_rate)} savings rate and {format_currency(balance)} "
            f"balance, you're in a great position to start investing for long-term growth."
        ),
        impact='positive',
        category='Investments',
        icon=Icon.TRENDING_UP,
        actions=['Explore Options', 'Risk Assessment'],
        recommendation=(
            'Consider investing 10-20% of your balance in diversified funds or index funds '
            'for long-term wealth building.'
        ),
    )


def _trend_insight(
    analytics: Optional[FinanceAnalytics],
    as_of: Optional[date],
    thresholds: Thresholds,
) -> Optional[dict]:
    if analytics is None or len(analytics.expense_rows()) <= thresholds.trend_min_expense_count:
        return None
    current, previous = monthly_expense_totals(analytics, as_of)
    if previous <= 0:
        return None
    change = (current - previous) / previous * 100
    if abs(change) <= thresholds.trend_change_percent:
        return None
    rising = change > 0
    return dict(
        kind='spending_trend',
        title=f"Spending {'Increased' if rising else 'Decreased'}",
        description=(
            f"Your spending this month is {format_percent(abs(change))} {'higher' if rising else 'lower'} "
            f"than last month ({format_currency(abs(current - previous))} difference)."
        ),
        impact='medium' if rising else 'positive',
        category='Trends',
        icon=Icon.TRENDING_UP if rising else Icon.TRENDING_DOWN,
        actions=['Compare Details', 'Set Alert'],
        recommendation=(
            'Review recent transactions to identify any unusual expenses or spending patterns.'
            if rising
            else 'Great job on reducing expenses! Consider allocating the savings to your goals.'
        ),
    )


def generate_insights(
    aggregate: PeriodAggregate,
    salary_profile: Optional[SalaryProfile],
    budget_statuses: Sequence[BudgetStatus],
    goals: Sequence[Any],
    wallets: Sequence[Any],
    category_totals: Sequence[CategoryTotal],
    preferences: Optional[AIPreferences] = None,
    transactions: TransactionsInput = None,
    as_of: Optional[date] = None,
    thresholds: Optional[Thresholds] = None,
) -> List[Insight]:
    """Build the insight list for a snapshot.

    ``transactions`` is only needed for the month-over-month spending trend;
    without it that rule is skipped.
    """
    thresholds = thresholds or load_thresholds()
    toggles = (preferences or AIPreferences()).insights

    if not aggregate.has_transactions:
        return [Insight(
            id=1,
            kind='getting_started',
            title='Welcome to AI Insights!',
            description=(
                'Start by adding transactions to unlock personalized financial insights '
                'and smart recommendations.'
            ),
            impact='info',
            category='Getting Started',
            icon=Icon.LIGHTBULB,
            actions=['Add Transaction', 'Import Data'],
        )]

    analytics = FinanceAnalytics.ensure(transactions) if transactions is not None else None
    candidates = []
    if toggles.saving:
        candidates.append(_salary_insight(salary_profile, thresholds))
        candidates.append(_savings_insight(aggregate, thresholds))
    if toggles.spending:
        candidates.append(_category_insight(aggregate, category_totals, thresholds))
    if toggles.saving:
        candidates.append(_goals_insight(goals))
    if toggles.spending:
        candidates.append(_budget_insight(budget_statuses, thresholds))
    if toggles.investment:
        candidates.append(_investment_insight(aggregate, wallets, thresholds))
    if toggles.spending:
        candidates.append(_trend_insight(analytics, as_of, thresholds))

    fields = [c for c in candidates if c is not None]
    return [Insight(id=index, **data) for index, data in enumerate(fields, start=1)]
