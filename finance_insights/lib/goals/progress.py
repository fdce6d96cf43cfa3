"""Goal progress evaluation."""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Iterable, List, Mapping, Optional, Union

import pandas as pd

from ...finance_analytics import as_mapping, parse_date, to_float
from ...models import (
    GOAL_COMPLETED,
    GOAL_NEARLY_COMPLETE,
    GOAL_ON_TRACK,
    GOAL_URGENT,
    Goal,
    GoalProgress,
)
from ...settings import Thresholds

SECONDS_PER_DAY = 24 * 60 * 60


def progress_percent(current_amount: float, target_amount: float) -> float:
    """Percent of target reached, unclamped; 0 for a non-positive target."""
    return (current_amount / target_amount * 100) if target_amount > 0 else 0.0


def days_left(target_date: Any, as_of: Union[date, datetime, None] = None) -> Optional[int]:
    """Whole days until ``target_date``, rounded up; zero or negative is overdue."""
    target = parse_date(target_date)
    if target is None:
        return None
    reference = pd.Timestamp(as_of if as_of is not None else datetime.now())
    if reference.tzinfo is not None:
        reference = reference.tz_convert(None)
    return int(math.ceil((target - reference).total_seconds() / SECONDS_PER_DAY))


def goal_status(progress: float, remaining_days: Optional[int], thresholds: Optional[Thresholds] = None) -> str:
    """Classify a goal; completion is checked before urgency."""
    thresholds = thresholds or Thresholds()
    if progress >= 100:
        return GOAL_COMPLETED
    if progress >= thresholds.goal_nearly_complete_percent:
        return GOAL_NEARLY_COMPLETE
    if remaining_days is not None and remaining_days < thresholds.goal_urgent_days:
        return GOAL_URGENT
    return GOAL_ON_TRACK


def evaluate_goal(
    goal: Union[Goal, Mapping[str, Any]],
    as_of: Union[date, datetime, None] = None,
    thresholds: Optional[Thresholds] = None,
) -> GoalProgress:
    """Progress percent, days left and status tag for one goal.

    Example:
        >>> g = Goal('g1', 'Laptop', target_amount=1000, current_amount=1000, target_date='2024-01-01')
        >>> evaluate_goal(g, as_of=date(2024, 1, 6)).status_tag
        'completed'
    """
    data = as_mapping(goal)
    target_amount = to_float(data.get('target_amount'))
    current_amount = to_float(data.get('current_amount'))
    progress = progress_percent(current_amount, target_amount)
    remaining_days = days_left(data.get('target_date'), as_of)

    return GoalProgress(
        goal_id=data.get('id'),
        name=data.get('name') or '',
        progress_percent=progress,
        days_left=remaining_days,
        status_tag=goal_status(progress, remaining_days, thresholds),
        remaining_amount=target_amount - current_amount,
    )


def evaluate_goals(
    goals: Iterable[Union[Goal, Mapping[str, Any]]],
    as_of: Union[date, datetime, None] = None,
    thresholds: Optional[Thresholds] = None,
) -> List[GoalProgress]:
    return [evaluate_goal(goal, as_of, thresholds) for goal in goals or []]
