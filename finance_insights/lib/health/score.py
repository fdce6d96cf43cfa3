"""Financial health score.

The score starts at 70 and is nudged up or down by savings rate, average
goal progress, wallet count, budget adherence and salary stability, then
clamped to ``[0, 100]``. It is a heuristic signal, not a validated metric.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import numpy as np

from ...finance_analytics import as_mapping, to_float
from ...models import BudgetStatus, SalaryProfile

BASE_SCORE = 70


def average_goal_progress(goals: Sequence[Any]) -> float:
    """Mean of current/target × 100 across goals; 0 when there are none.

    A goal with a non-positive target contributes 0 instead of dividing by zero.
    """
    total = 0.0
    for goal in goals or []:
        data = as_mapping(goal)
        target = to_float(data.get('target_amount'))
        current = to_float(data.get('current_amount'))
        total += (current / target * 100) if target > 0 else 0.0
    return total / (len(goals or []) or 1)


def budget_adherence(budget_statuses: Sequence[BudgetStatus]) -> float:
    """Share of budgets at or under 100% used; 0 when there are none."""
    statuses = budget_statuses or []
    within = sum(1 for status in statuses if status.percentage <= 100)
    return within / (len(statuses) or 1)


def health_components(
    savings_rate: float,
    goals: Sequence[Any],
    wallets: Sequence[Any],
    budget_statuses: Sequence[BudgetStatus],
    salary_profile: Optional[SalaryProfile],
) -> Dict[str, int]:
    """Named adjustments that add up to the unclamped score."""
    components = {'base': BASE_SCORE}

    if savings_rate > 20:
        components['savings'] = 10
    elif savings_rate < 10:
        components['savings'] = -10
    else:
        components['savings'] = 0

    goal_progress = average_goal_progress(goals)
    if goal_progress > 50:
        components['goals'] = 5
    elif goal_progress < 20:
        components['goals'] = -5
    else:
        components['goals'] = 0

    components['wallets'] = 5 if len(wallets or []) >= 3 else 0

    adherence = budget_adherence(budget_statuses)
    if adherence > 0.8:
        components['budgets'] = 10
    elif adherence < 0.5:
        components['budgets'] = -10
    else:
        components['budgets'] = 0

    months = salary_profile.months_observed if salary_profile else 0
    growth = salary_profile.growth_rate_percent if salary_profile else 0.0
    components['salary_stability'] = 5 if months >= 3 else 0
    components['salary_growth'] = 3 if growth > 0 else 0

    return components


def health_score(
    savings_rate: float,
    goals: Sequence[Any],
    wallets: Sequence[Any],
    budget_statuses: Sequence[BudgetStatus],
    salary_profile: Optional[SalaryProfile] = None,
) -> int:
    """Composite financial health score in ``[0, 100]``.

    Example:
        >>> health_score(40.0, [], [], [], None)
        65
    """
    components = health_components(savings_rate, goals, wallets, budget_statuses, salary_profile)
    return int(np.clip(sum(components.values()), 0, 100))
