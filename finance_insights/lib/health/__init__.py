"""Financial health scoring."""

from .score import BASE_SCORE, average_goal_progress, budget_adherence, health_components, health_score

__all__ = [
    'BASE_SCORE',
    'average_goal_progress',
    'budget_adherence',
    'health_components',
    'health_score',
]
