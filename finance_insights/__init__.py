"""Top-level package for the finance insights engine.

This package turns already-fetched personal finance records (transactions,
wallets, categories, budgets and goals) into derived records. The primary
modules are:

* ``finance_analytics`` - transaction frame preparation and period aggregates
* ``lib`` - salary detection, budgets, goals, health score, suggestions
* ``snapshot`` - the one-way pipeline that builds every derived record
* ``assistant`` - the AI chat collaborator and its template fallback

Typical use::

    from finance_insights import build_snapshot

    snapshot = build_snapshot(transactions, wallets, goals, budgets, categories)
    snapshot.health_score
"""

from .assistant import FinancialAssistant, build_financial_context  # noqa: F401
from .finance_analytics import FinanceAnalytics, aggregate, aggregate_all  # noqa: F401
from .lib.budgets import calculate_end_date, reconcile  # noqa: F401
from .lib.goals import evaluate_goal, evaluate_goals  # noqa: F401
from .lib.health import health_score  # noqa: F401
from .lib.recommendations import generate_insights, generate_suggestions  # noqa: F401
from .lib.analytics import SalaryDetector, salary_profile  # noqa: F401
from .models import AIPreferences  # noqa: F401
from .settings import Thresholds, load_thresholds  # noqa: F401
from .snapshot import FinancialSnapshot, build_snapshot  # noqa: F401

__version__ = '0.1.0'
