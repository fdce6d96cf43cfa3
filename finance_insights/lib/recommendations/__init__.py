"""Smart suggestions and rule-based insights."""

from .insights import generate_insights
from .suggestions import generate_suggestions, has_emergency_goal, total_balance

__all__ = [
    'generate_insights',
    'generate_suggestions',
    'has_emergency_goal',
    'total_balance',
]
