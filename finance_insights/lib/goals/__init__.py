"""Goal progress utilities."""

from .progress import (
    days_left,
    evaluate_goal,
    evaluate_goals,
    goal_status,
    progress_percent,
)

__all__ = [
    'days_left',
    'evaluate_goal',
    'evaluate_goals',
    'goal_status',
    'progress_percent',
]
