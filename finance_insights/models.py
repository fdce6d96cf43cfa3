"""Records consumed and produced by the insights engine.

Input records (transactions, wallets, categories, budgets, goals) are owned
by the persistence layer and only read here. Derived records are rebuilt on
every evaluation and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Union

DateLike = Union[date, str, None]

INCOME = 'income'
EXPENSE = 'expense'

ON_TRACK = 'on-track'
AT_RISK = 'at-risk'
EXCEEDED = 'exceeded'
BUDGET_STATUSES = (ON_TRACK, AT_RISK, EXCEEDED)

BUDGET_PERIODS = ('weekly', 'monthly', 'quarterly', 'yearly', 'custom')
WALLET_TYPES = ('cash', 'bank', 'digital', 'savings')

GOAL_COMPLETED = 'completed'
GOAL_NEARLY_COMPLETE = 'nearly_complete'
GOAL_URGENT = 'urgent'
GOAL_ON_TRACK = 'on_track'

UNCATEGORIZED_LABEL = 'Others'


class Icon(str, Enum):
    """Symbolic icon tags; resolved to assets by the presentation layer."""

    CALCULATOR = 'calculator'
    PIGGY_BANK = 'piggy_bank'
    CREDIT_CARD = 'credit_card'
    DOLLAR = 'dollar'
    TARGET = 'target'
    SHIELD = 'shield'
    TRENDING_UP = 'trending_up'
    TRENDING_DOWN = 'trending_down'
    PLUS = 'plus'
    LIGHTBULB = 'lightbulb'
    ALERT = 'alert'
    CHECK = 'check'


# --------------------
# Input records
# --------------------
@dataclass
class Transaction:
    id: str
    wallet_id: Optional[str]
    category_id: Optional[str]
    description: str
    amount: float
    type: str
    date: DateLike
    notes: Optional[str] = None
    category_name: Optional[str] = None


@dataclass
class Wallet:
    id: str
    name: str
    type: str = 'cash'
    balance: float = 0.0
    color: Optional[str] = None


@dataclass
class Category:
    id: str
    name: str
    type: str = EXPENSE
    color: Optional[str] = None
    icon: Optional[str] = None


@dataclass
class Budget:
    id: str
    category_id: Optional[str]
    name: str
    limit_amount: float
    period: str
    start_date: DateLike
    end_date: DateLike


@dataclass
class Goal:
    id: str
    name: str
    target_amount: float
    current_amount: float = 0.0
    target_date: DateLike = None
    category: Optional[str] = None
    priority: str = 'medium'
    status: str = 'active'


# --------------------
# Derived records
# --------------------
@dataclass
class PeriodAggregate:
    income: float = 0.0
    expenses: float = 0.0
    savings: float = 0.0
    savings_rate: float = 0.0
    # None when the aggregate was built from totals alone
    transaction_count: Optional[int] = None

    @property
    def has_transactions(self) -> bool:
        """True unless the history is known (or can be seen) to be empty."""
        if self.transaction_count is not None:
            return self.transaction_count > 0
        return bool(self.income or self.expenses)

    @classmethod
    def from_totals(
        cls, income: float, expenses: float, transaction_count: Optional[int] = None,
    ) -> 'PeriodAggregate':
        savings = income - expenses
        savings_rate = (savings / income * 100) if income > 0 else 0.0
        return cls(
            income=income,
            expenses=expenses,
            savings=savings,
            savings_rate=savings_rate,
            transaction_count=transaction_count,
        )


@dataclass
class MonthlyAmount:
    month: str
    amount: float


@dataclass
class SalaryProfile:
    monthly_average: float = 0.0
    months_observed: int = 0
    growth_rate_percent: float = 0.0
    current_month_amount: float = 0.0
    last_6_months: List[MonthlyAmount] = field(default_factory=list)
    total_amount: float = 0.0
    by_month: Dict[str, float] = field(default_factory=dict)

    @property
    def is_stable(self) -> bool:
        return self.months_observed >= 3


@dataclass
class BudgetStatus:
    budget_id: str
    name: str
    category_id: Optional[str]
    limit_amount: float
    spent: float
    remaining: float
    percentage: float
    status: str


@dataclass
class GoalProgress:
    goal_id: str
    name: str
    progress_percent: float
    days_left: Optional[int]
    status_tag: str
    remaining_amount: float


@dataclass
class CategoryTotal:
    name: str
    category_id: Optional[str]
    amount: float
    count: int
    percentage: float


@dataclass
class MonthlyRollup:
    month: str
    income: float
    expenses: float
    savings: float
    savings_rate: float


@dataclass
class TrendDelta:
    income_change: float = 0.0
    expense_change: float = 0.0
    savings_change: float = 0.0


@dataclass
class Suggestion:
    id: int
    title: str
    description: str
    priority: str
    effort: str
    category: str
    icon: Icon
    potential_savings: Optional[int] = None
    primary_action: Optional[str] = None
    secondary_action: Optional[str] = None
    timeframe: Optional[str] = None
    impact: Optional[int] = None


@dataclass
class Insight:
    id: int
    kind: str
    title: str
    description: str
    impact: str
    category: str
    icon: Icon
    actions: List[str] = field(default_factory=list)
    recommendation: Optional[str] = None


# --------------------
# Preferences
# --------------------
@dataclass
class DataAccess:
    transactions: bool = True
    wallets: bool = True
    goals: bool = True
    budgets: bool = True
    categories: bool = True
    personal_info: bool = False


@dataclass
class InsightToggles:
    spending: bool = True
    saving: bool = True
    investment: bool = True
    debt: bool = True


@dataclass
class Personalization:
    risk_tolerance: str = 'medium'
    financial_goals: List[str] = field(default_factory=lambda: ['Emergency Fund', 'Retirement', 'Vacation'])
    savings_target: float = 20.0


@dataclass
class AIPreferences:
    """Explicit preference struct handed to the generators and the assistant."""

    data_access: DataAccess = field(default_factory=DataAccess)
    insights: InsightToggles = field(default_factory=InsightToggles)
    personalization: Personalization = field(default_factory=Personalization)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'AIPreferences':
        """Build preferences from a stored settings blob, ignoring unknown keys."""
        data = data or {}

        def _pick(section: Any, klass: type) -> Any:
            if not isinstance(section, dict):
                return klass()
            allowed = klass.__dataclass_fields__.keys()
            return klass(**{k: v for k, v in section.items() if k in allowed})

        return cls(
            data_access=_pick(data.get('data_access'), DataAccess),
            insights=_pick(data.get('insights'), InsightToggles),
            personalization=_pick(data.get('personalization'), Personalization),
        )
