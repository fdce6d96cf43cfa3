"""Smart suggestion generator.

Each rule below is evaluated independently against the current snapshot and
appends at most one candidate. Insertion order is the ranking; the list is
truncated to ``Thresholds.max_suggestions``. An empty transaction history
short-circuits to a single "get started" suggestion.
"""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

from ...finance_analytics import as_mapping, to_float
from ...models import (
    AIPreferences,
    BudgetStatus,
    CategoryTotal,
    Icon,
    PeriodAggregate,
    SalaryProfile,
    Suggestion,
)
from ...settings import Thresholds, load_thresholds
from ..common.formatting import format_currency, format_percent, round_amount


def _format_number(value: float) -> str:
    return f"{value:g}"


def total_balance(wallets: Sequence[Any]) -> float:
    return float(sum(to_float(as_mapping(wallet).get('balance')) for wallet in wallets or []))


def has_emergency_goal(goals: Sequence[Any]) -> bool:
    return any('emergency' in str(as_mapping(goal).get('name') or '').lower() for goal in goals or [])


def _get_started(suggestion_id: int) -> Suggestion:
    return Suggestion(
        id=suggestion_id,
        title='Start Your Financial Journey',
        description=(
            'Begin by adding your first transaction to unlock personalized insights '
            'and AI-powered recommendations.'
        ),
        priority='high',
        effort='low',
        category='Getting Started',
        icon=Icon.PLUS,
        primary_action='Add Transaction',
        secondary_action='Import Data',
        timeframe='Now',
        impact=90,
    )


def _salary_gap(
    suggestion_id: int,
    aggregate: PeriodAggregate,
    salary: Optional[SalaryProfile],
    savings_target: float,
) -> Optional[Suggestion]:
    if salary is None or salary.monthly_average <= 0:
        return None
    recommended = salary.monthly_average * (savings_target / 100)
    if aggregate.savings >= recommended:
        return None

    shortfall = recommended - aggregate.savings
    return Suggestion(
        id=suggestion_id,
        title='Optimize Salary-Based Savings',
        description=(
            f"Based on your average monthly salary of {format_currency(salary.monthly_average)}, "
            f"you should save {format_currency(recommended)} monthly. You need "
            f"{format_currency(shortfall)} more to reach your {_format_number(savings_target)}% target."
        ),
        priority='high' if aggregate.savings_rate < 10 else 'medium',
        effort='medium',
        category='Salary Optimization',
        icon=Icon.CALCULATOR,
        potential_savings=round_amount(shortfall),
        primary_action='Create Salary-Based Plan',
        secondary_action='Learn More',
        timeframe='Monthly',
        impact=90,
    )


def _savings_gap(suggestion_id: int, aggregate: PeriodAggregate, savings_target: float) -> Optional[Suggestion]:
    if aggregate.income <= 0:
        return None
    recommended = aggregate.income * (savings_target / 100)
    if aggregate.savings >= recommended:
        return None

    shortfall = recommended - aggregate.savings
    return Suggestion(
        id=suggestion_id,
        title='Boost Your Savings Rate',
        description=(
            f"Your current savings rate is {format_percent(aggregate.savings_rate)}. "
            f"Save an additional {format_currency(shortfall)} monthly to reach your "
            f"{_format_number(savings_target)}% target."
        ),
        priority='high' if aggregate.savings_rate < 10 else 'medium',
        effort='medium',
        category='Savings',
        icon=Icon.PIGGY_BANK,
        potential_savings=round_amount(shortfall),
        primary_action='Create Savings Plan',
        secondary_action='Learn More',
        timeframe='Monthly',
        impact=85,
    )


def _top_category(
    suggestion_id: int,
    aggregate: PeriodAggregate,
    category_totals: Sequence[CategoryTotal],
    budget_statuses: Sequence[BudgetStatus],
    thresholds: Thresholds,
) -> Optional[Suggestion]:
    if not category_totals:
        return None
    top = category_totals[0]
    share = (top.amount / aggregate.expenses * 100) if aggregate.expenses > 0 else top.percentage
    if share <= thresholds.category_share_threshold or top.amount <= thresholds.category_amount_floor:
        return None

    potential = round_amount(top.amount * thresholds.category_reduction_rate)
    is_food = 'food' in top.name.lower()
    budgeted = top.category_id is not None and any(
        status.category_id == top.category_id for status in budget_statuses or []
    )
    high = share > thresholds.category_share_high
    return Suggestion(
        id=suggestion_id,
        title=f"Optimize {top.name} Spending",
        description=(
            f"{top.name} accounts for {format_percent(share)} of your expenses "
            f"({format_currency(top.amount)}). Reduce by "
            f"{_format_number(thresholds.category_reduction_rate * 100)}% to save "
            f"{format_currency(potential)} monthly."
        ),
        priority='high' if high else 'medium',
        effort='low' if is_food else 'medium',
        category=top.name,
        icon=Icon.DOLLAR if is_food else Icon.CREDIT_CARD,
        potential_savings=potential,
        primary_action='Review Category Budget' if budgeted else 'Set Category Budget',
        secondary_action='View Details',
        timeframe='Monthly',
        impact=80 if high else 65,
    )


def _first_goal(suggestion_id: int, goals: Sequence[Any]) -> Optional[Suggestion]:
    if goals:
        return None
    return Suggestion(
        id=suggestion_id,
        title='Set Your First Financial Goal',
        description=(
            'Goals provide direction and motivation. Start with an emergency fund or a '
            'specific savings target to track your progress.'
        ),
        priority='medium',
        effort='low',
        category='Planning',
        icon=Icon.TARGET,
        primary_action='Create Goal',
        secondary_action='See Templates',
        timeframe='Today',
        impact=75,
    )


def _emergency_fund(
    suggestion_id: int,
    aggregate: PeriodAggregate,
    goals: Sequence[Any],
    thresholds: Thresholds,
) -> Optional[Suggestion]:
    if has_emergency_goal(goals) or aggregate.expenses <= 0:
        return None
    fund = aggregate.expenses * thresholds.emergency_fund_months
    monthly = fund / thresholds.emergency_fund_horizon_months
    return Suggestion(
        id=suggestion_id,
        title='Build Emergency Fund',
        description=(
            f"Create a safety net of {format_currency(fund)} "
            f"({_format_number(thresholds.emergency_fund_months)} months expenses). "
            f"Start with {format_currency(monthly)} monthly."
        ),
        priority='high',
        effort='medium',
        category='Emergency Planning',
        icon=Icon.SHIELD,
        potential_savings=round_amount(monthly),
        primary_action='Start Emergency Fund',
        secondary_action='Learn More',
        timeframe=f"{_format_number(thresholds.emergency_fund_horizon_months)} months",
        impact=90,
    )


def _investment(
    suggestion_id: int,
    aggregate: PeriodAggregate,
    wallets: Sequence[Any],
    thresholds: Thresholds,
) -> Optional[Suggestion]:
    balance = total_balance(wallets)
    if aggregate.savings_rate <= thresholds.investment_savings_rate or balance <= thresholds.investment_balance_floor:
        return None
    return Suggestion(
        id=suggestion_id,
        title='Investment Opportunity',
        description=(
            f"With {format_percent(aggregate.savings_rate)} savings rate and "
            f"{format_currency(balance)} balance, consider investing for long-term growth."
        ),
        priority='medium',
        effort='medium',
        category='Investments',
        icon=Icon.TRENDING_UP,
        primary_action='Explore Investments',
        secondary_action='Risk Assessment',
        timeframe='Next month',
        impact=80,
    )


def generate_suggestions(
    aggregate: PeriodAggregate,
    salary_profile: Optional[SalaryProfile],
    budget_statuses: Sequence[BudgetStatus],
    goals: Sequence[Any],
    wallets: Sequence[Any],
    category_totals: Sequence[CategoryTotal],
    preferences: Optional[AIPreferences] = None,
    thresholds: Optional[Thresholds] = None,
) -> List[Suggestion]:
    """Build the ranked suggestion list for a snapshot.

    Args:
        aggregate: Income/expense totals the gaps are measured against
        salary_profile: Detected salary profile, if any
        budget_statuses: Reconciled budgets; used to label the category action
        goals: Goal records (only names and count are read)
        wallets: Wallet records (balances are summed)
        category_totals: Expense totals per category, largest first
        preferences: Supplies the savings target percentage
        thresholds: Rule constants; loaded from configuration when omitted

    Returns:
        At most ``thresholds.max_suggestions`` suggestions with ids from 1.

    Example:
        >>> generate_suggestions(PeriodAggregate(), None, [], [], [], [])[0].title
        'Start Your Financial Journey'
    """
    thresholds = thresholds or load_thresholds()
    preferences = preferences or AIPreferences()
    savings_target = to_float(preferences.personalization.savings_target)

    if not aggregate.has_transactions:
        return [_get_started(1)]

    rules = [
        lambda i: _salary_gap(i, aggregate, salary_profile, savings_target),
        lambda i: _savings_gap(i, aggregate, savings_target),
        lambda i: _top_category(i, aggregate, category_totals, budget_statuses, thresholds),
        lambda i: _first_goal(i, goals),
        lambda i: _emergency_fund(i, aggregate, goals, thresholds),
        lambda i: _investment(i, aggregate, wallets, thresholds),
    ]

    suggestions: List[Suggestion] = []
    for rule in rules:
        suggestion = rule(len(suggestions) + 1)
        if suggestion is not None:
            suggestions.append(suggestion)
    return suggestions[:thresholds.max_suggestions]
