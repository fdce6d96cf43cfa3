"""One-way pipeline from input records to every derived record.

``build_snapshot`` prepares the transaction frame once and feeds it through
the aggregator, the budget and goal evaluators, the health scorer and the
suggestion/insight generators. Nothing is cached between calls; callers
rebuild the snapshot whenever an input collection changes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from .finance_analytics import FinanceAnalytics, TransactionsInput
from .lib.analytics import category_totals, monthly_breakdown, salary_profile, trend_deltas
from .lib.analytics.salary import SalaryDetector
from .lib.budgets import budget_overview, reconcile
from .lib.goals import evaluate_goals
from .lib.health import health_components, health_score
from .lib.recommendations import generate_insights, generate_suggestions, total_balance
from .models import (
    AIPreferences,
    BudgetStatus,
    CategoryTotal,
    GoalProgress,
    Insight,
    MonthlyRollup,
    PeriodAggregate,
    SalaryProfile,
    Suggestion,
    TrendDelta,
)
from .settings import Thresholds, load_thresholds

logger = logging.getLogger(__name__)


@dataclass
class FinancialSnapshot:
    """Every derived record for one set of inputs."""

    as_of: date
    totals: PeriodAggregate
    current_month: PeriodAggregate
    salary_profile: SalaryProfile
    budget_statuses: List[BudgetStatus]
    budget_overview: Dict[str, float]
    goal_progress: List[GoalProgress]
    health_score: int
    health_components: Dict[str, int]
    category_totals: List[CategoryTotal]
    monthly_breakdown: List[MonthlyRollup]
    trend: TrendDelta
    total_balance: float
    wallet_count: int
    goal_count: int
    suggestions: List[Suggestion] = field(default_factory=list)
    insights: List[Insight] = field(default_factory=list)


def build_snapshot(
    transactions: TransactionsInput,
    wallets: Optional[Sequence[Any]] = None,
    goals: Optional[Sequence[Any]] = None,
    budgets: Optional[Sequence[Any]] = None,
    categories: Optional[Sequence[Any]] = None,
    preferences: Optional[AIPreferences] = None,
    thresholds: Optional[Thresholds] = None,
    as_of: Optional[date] = None,
) -> FinancialSnapshot:
    """Run the full derived-metrics pipeline.

    Args:
        transactions: Transaction records or a prepared frame
        wallets: Wallet records
        goals: Goal records
        budgets: Budget records
        categories: Category records used to label transactions
        preferences: Generator and assistant preferences (defaults when omitted)
        thresholds: Rule constants; loaded from configuration when omitted
        as_of: Reference date for month windows and goal deadlines (today when omitted)

    Returns:
        FinancialSnapshot. The health score and suggestions use all-time
        totals; ``current_month`` is the aggregate for ``as_of``'s month.

    Example:
        >>> snap = build_snapshot([], as_of=date(2024, 6, 30))
        >>> snap.suggestions[0].title
        'Start Your Financial Journey'
    """
    thresholds = thresholds or load_thresholds()
    preferences = preferences or AIPreferences()
    as_of = as_of or date.today()
    wallets = list(wallets or [])
    goals = list(goals or [])
    budgets = list(budgets or [])

    analytics = FinanceAnalytics.ensure(transactions, categories)
    logger.debug(
        "Building snapshot as of %s: %d transactions, %d budgets, %d goals",
        as_of, len(analytics.data), len(budgets), len(goals),
    )

    totals = analytics.summarize()
    current_month = analytics.calculate_monthly_summary(as_of.year, as_of.month)
    salary = salary_profile(analytics, as_of=as_of, detector=SalaryDetector.from_config(thresholds))
    statuses = reconcile(budgets, analytics, thresholds)
    progress = evaluate_goals(goals, as_of=as_of, thresholds=thresholds)
    components = health_components(totals.savings_rate, goals, wallets, statuses, salary)
    categories_ranked = category_totals(analytics)
    breakdown = monthly_breakdown(analytics)

    suggestions = generate_suggestions(
        totals, salary, statuses, goals, wallets, categories_ranked, preferences, thresholds,
    )
    insights = generate_insights(
        totals, salary, statuses, goals, wallets, categories_ranked, preferences,
        transactions=analytics, as_of=as_of, thresholds=thresholds,
    )

    return FinancialSnapshot(
        as_of=as_of,
        totals=totals,
        current_month=current_month,
        salary_profile=salary,
        budget_statuses=statuses,
        budget_overview=budget_overview(statuses),
        goal_progress=progress,
        health_score=health_score(totals.savings_rate, goals, wallets, statuses, salary),
        health_components=components,
        category_totals=categories_ranked,
        monthly_breakdown=breakdown,
        trend=trend_deltas(breakdown),
        total_balance=total_balance(wallets),
        wallet_count=len(wallets),
        goal_count=len(goals),
        suggestions=suggestions,
        insights=insights,
    )
