"""Salary detection and salary profile calculation.

Salary is identified heuristically: an income transaction counts as salary
when its description or category name contains one of a fixed set of
keywords, or when its amount reaches a currency-dependent floor. The
predicate lives in :class:`SalaryDetector` so the keyword list and floor can
be tuned without touching the aggregation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional, Sequence, Tuple

import pandas as pd

from ...config import get_keywords
from ...finance_analytics import FinanceAnalytics, TransactionsInput
from ...models import MonthlyAmount, SalaryProfile
from ...settings import Thresholds, load_thresholds

DEFAULT_SALARY_KEYWORDS: Tuple[str, ...] = (
    'salary',
    'wage',
    'payroll',
    'income',
    'pay',
    'compensation',
    'earnings',
    'monthly pay',
    'bi-weekly pay',
    'weekly pay',
    'job',
    'work',
    'employment',
)

TREND_WINDOW_MONTHS = 6


@dataclass
class SalaryDetector:
    """Keyword + magnitude predicate for salary-like income."""

    keywords: Sequence[str] = field(default_factory=lambda: DEFAULT_SALARY_KEYWORDS)
    amount_floor: float = 10000.0

    @classmethod
    def from_config(cls, thresholds: Optional[Thresholds] = None) -> 'SalaryDetector':
        thresholds = thresholds or load_thresholds()
        keywords = get_keywords('salary') or list(DEFAULT_SALARY_KEYWORDS)
        return cls(keywords=keywords, amount_floor=thresholds.salary_amount_floor)

    @property
    def pattern(self) -> Optional[str]:
        words = [re.escape(k.lower()) for k in self.keywords if k]
        return '|'.join(words) if words else None

    def matches(self, description: Any, category: Any, amount: float) -> bool:
        """Classify a single income transaction.

        Example:
            >>> SalaryDetector().matches('ACME Payroll', 'Others', 1200)
            True
            >>> SalaryDetector().matches('Gift from mom', 'Others', 500)
            False
        """
        text = f"{description or ''}".lower()
        cat = f"{category or ''}".lower()
        if any(k.lower() in text or k.lower() in cat for k in self.keywords if k):
            return True
        return float(amount) >= self.amount_floor

    def mask(self, income: pd.DataFrame) -> pd.Series:
        """Vectorized :meth:`matches` over income rows of a prepared frame."""
        if income.empty:
            return pd.Series(False, index=income.index, dtype=bool)
        pattern = self.pattern
        by_amount = income['Amount'] >= self.amount_floor
        if pattern is None:
            return by_amount
        desc = income['Description'].str.lower()
        cat = income['Category'].str.lower()
        by_keyword = desc.str.contains(pattern, regex=True, na=False) | cat.str.contains(pattern, regex=True, na=False)
        return by_keyword | by_amount


def salary_rows(analytics: FinanceAnalytics, detector: Optional[SalaryDetector] = None) -> pd.DataFrame:
    """Income rows the detector classifies as salary."""
    detector = detector or SalaryDetector.from_config()
    income = analytics.income_rows()
    return income[detector.mask(income)]


def salary_by_month(analytics: FinanceAnalytics, detector: Optional[SalaryDetector] = None) -> pd.Series:
    """Salary totals keyed by ``YYYY-MM``; undated rows can't be keyed and are dropped."""
    rows = salary_rows(analytics, detector).dropna(subset=['Month Key'])
    if rows.empty:
        return pd.Series(dtype=float)
    return rows.groupby('Month Key')['Amount'].sum().sort_index()


def growth_rate(amounts: Sequence[float]) -> float:
    """Percent change between the first and last positive amounts.

    Example:
        >>> growth_rate([0, 40000, 0, 44000])
        10.0
        >>> growth_rate([0, 0, 45000])
        0.0
    """
    observed = [a for a in amounts if a > 0]
    if len(observed) < 2:
        return 0.0
    first, last = observed[0], observed[-1]
    return ((last - first) / first) * 100 if first > 0 else 0.0


def salary_profile(
    transactions: TransactionsInput,
    as_of: Optional[date] = None,
    detector: Optional[SalaryDetector] = None,
    categories: Optional[Sequence[Any]] = None,
) -> SalaryProfile:
    """Summarize salary-like income.

    Args:
        transactions: Transaction records, a frame, or a ``FinanceAnalytics``
        as_of: Reference date for the trailing window (today when omitted)
        detector: Salary predicate; built from configuration when omitted
        categories: Category records used to resolve category names

    Returns:
        SalaryProfile with the monthly average over months that had salary,
        the trailing six-month series ending at ``as_of``'s month and the
        growth rate across that window.
    """
    analytics = FinanceAnalytics.ensure(transactions, categories)
    monthly = salary_by_month(analytics, detector)

    by_month = {str(k): float(v) for k, v in monthly.items()}
    total = float(sum(by_month.values()))
    months_observed = len(by_month)
    average = total / months_observed if months_observed else 0.0

    current = pd.Period(pd.Timestamp(as_of or date.today()), freq='M')
    window = []
    for offset in range(TREND_WINDOW_MONTHS - 1, -1, -1):
        period = current - offset
        window.append(MonthlyAmount(month=period.strftime('%b %Y'), amount=by_month.get(str(period), 0.0)))

    return SalaryProfile(
        monthly_average=average,
        months_observed=months_observed,
        growth_rate_percent=growth_rate([entry.amount for entry in window]),
        current_month_amount=by_month.get(str(current), 0.0),
        last_6_months=window,
        total_amount=total,
        by_month=by_month,
    )
