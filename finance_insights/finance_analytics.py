"""Transaction frame preparation and period aggregation.

This module turns raw transaction records into a normalized pandas frame
once, and provides the income/expense reductions every other component is
built on.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd

from .models import (
    EXPENSE,
    INCOME,
    UNCATEGORIZED_LABEL,
    Category,
    PeriodAggregate,
    Transaction,
)

logger = logging.getLogger(__name__)

FRAME_COLUMNS = [
    'Id',
    'Wallet Id',
    'Category Id',
    'Category',
    'Description',
    'Amount',
    'Type',
    'Transaction Date',
]

TransactionsInput = Union[pd.DataFrame, Iterable[Union[Transaction, Mapping[str, Any]]], None]


def as_mapping(record: Any) -> Dict[str, Any]:
    """Return a plain dict for a dataclass instance or mapping record."""
    if record is None:
        return {}
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        return dataclasses.asdict(record)
    if isinstance(record, Mapping):
        return dict(record)
    return dict(vars(record))


def parse_date(value: Any) -> Optional[pd.Timestamp]:
    """Parse a calendar date, returning ``None`` when it can't be read.

    Timezone-aware values are converted to naive UTC and every result is
    normalized to midnight so inclusive date windows cover the whole day.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        stamp = pd.Timestamp(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if pd.isna(stamp):
        return None
    if stamp.tzinfo is not None:
        stamp = stamp.tz_convert(None)
    return stamp.normalize()


def to_float(value: Any) -> float:
    """Coerce a numeric field, treating missing or unreadable values as 0."""
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if pd.isna(result) else result


def _category_lookup(categories: Optional[Iterable[Any]]) -> Dict[Any, str]:
    lookup: Dict[Any, str] = {}
    for category in categories or []:
        data = as_mapping(category)
        if data.get('id') is not None and data.get('name'):
            lookup[data['id']] = str(data['name'])
    return lookup


def _category_name(data: Mapping[str, Any], lookup: Mapping[Any, str]) -> str:
    name = data.get('category_name')
    nested = data.get('categories')
    if not name and isinstance(nested, Mapping):
        name = nested.get('name')
    if not name:
        name = lookup.get(data.get('category_id'))
    return str(name) if name else UNCATEGORIZED_LABEL


def transactions_frame(
    transactions: TransactionsInput,
    categories: Optional[Iterable[Union[Category, Mapping[str, Any]]]] = None,
) -> pd.DataFrame:
    """Build the raw (unprepared) frame from transaction records."""
    if isinstance(transactions, pd.DataFrame):
        return transactions.copy()

    lookup = _category_lookup(categories)
    rows = []
    for record in transactions or []:
        data = as_mapping(record)
        rows.append({
            'Id': data.get('id'),
            'Wallet Id': data.get('wallet_id'),
            'Category Id': data.get('category_id'),
            'Category': _category_name(data, lookup),
            'Description': data.get('description'),
            'Amount': data.get('amount'),
            'Type': data.get('type'),
            'Transaction Date': data.get('date'),
        })
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


class FinanceAnalytics:
    """Normalized transaction data plus the reductions built on top of it."""

    def __init__(
        self,
        transactions: TransactionsInput = None,
        categories: Optional[Iterable[Union[Category, Mapping[str, Any]]]] = None,
    ):
        """Initialize with transaction records or an already-built frame."""
        self.data = transactions_frame(transactions, categories)
        self._prepare_data()

    @classmethod
    def ensure(cls, source: Union['FinanceAnalytics', TransactionsInput], categories=None) -> 'FinanceAnalytics':
        if isinstance(source, cls):
            return source
        return cls(source, categories)

    def _prepare_data(self) -> None:
        """Prepare data for analysis.

        Type is lower-cased. A missing or blank type is inferred from the
        amount's sign; any other value (e.g. ``transfer``) is kept as-is, so
        the row counts toward neither income nor expenses.
        """
        for column in FRAME_COLUMNS:
            if column not in self.data.columns:
                self.data[column] = None

        self.data['Transaction Date'] = pd.to_datetime(
            self.data['Transaction Date'].map(parse_date)
        )
        unparsed = int(self.data['Transaction Date'].isna().sum())
        if unparsed:
            logger.debug("%d transaction(s) have no readable date; excluded from dated windows", unparsed)

        # Ensure Amount is numeric
        self.data['Amount'] = pd.to_numeric(self.data['Amount'], errors='coerce').fillna(0.0).astype(float)

        self.data['Category'] = (
            self.data['Category'].fillna(UNCATEGORIZED_LABEL).astype(str)
        )
        self.data['Description'] = self.data['Description'].fillna('').astype(str)

        # Only records without a type fall back to the sign convention
        lowered_type = self.data['Type'].fillna('').astype(str).str.strip().str.lower()
        inferred = np.where(self.data['Amount'] >= 0, INCOME, EXPENSE)
        self.data['Type'] = np.where(lowered_type == '', inferred, lowered_type)

        self.data['Year'] = self.data['Transaction Date'].dt.year
        self.data['Month'] = self.data['Transaction Date'].dt.month
        self.data['Month Key'] = self.data['Transaction Date'].dt.strftime('%Y-%m')

    @property
    def empty(self) -> bool:
        return self.data.empty

    def income_rows(self, df: Optional[pd.DataFrame] = None) -> pd.DataFrame:
        source = df if df is not None else self.data
        return source[source['Type'] == INCOME]

    def expense_rows(self, df: Optional[pd.DataFrame] = None) -> pd.DataFrame:
        source = df if df is not None else self.data
        return source[source['Type'] == EXPENSE]

    def summarize(self, df: Optional[pd.DataFrame] = None) -> PeriodAggregate:
        """Reduce a frame to income, expenses, savings and savings rate.

        Expenses are normalized with ``abs`` after summing, so sign
        conventions in the source records don't matter.
        """
        source = df if df is not None else self.data
        income = float(self.income_rows(source)['Amount'].sum())
        expenses = abs(float(self.expense_rows(source)['Amount'].sum()))
        return PeriodAggregate.from_totals(income, expenses, len(source))

    def month_rows(self, year: int, month: int) -> pd.DataFrame:
        return self.data[(self.data['Year'] == year) & (self.data['Month'] == month)]

    def calculate_monthly_summary(self, year: int, month: int) -> PeriodAggregate:
        """Calculate the aggregate for one calendar month."""
        return self.summarize(self.month_rows(year, month))

    def calculate_period_summary(self, start_date: Any = None, end_date: Any = None) -> PeriodAggregate:
        """Calculate the aggregate for an inclusive date range (all rows when open)."""
        return self.summarize(self._filter_by_date_range(start_date, end_date))

    def months(self) -> List[str]:
        """Sorted ``YYYY-MM`` keys of every month with at least one dated row."""
        keys = self.data['Month Key'].dropna().unique().tolist()
        return sorted(keys)

    def _filter_by_date_range(self, start_date: Any = None, end_date: Any = None) -> pd.DataFrame:
        """Filter data by date range."""
        data = self.data

        if start_date is not None:
            start = parse_date(start_date)
            if start is None:
                return data.iloc[0:0]
            data = data[data['Transaction Date'] >= start]

        if end_date is not None:
            end = parse_date(end_date)
            if end is None:
                return data.iloc[0:0]
            data = data[data['Transaction Date'] <= end]

        return data


def aggregate(
    transactions: TransactionsInput,
    month: int,
    year: int,
    categories: Optional[Sequence[Any]] = None,
) -> PeriodAggregate:
    """Income, expenses, savings and savings rate for one calendar month."""
    return FinanceAnalytics.ensure(transactions, categories).calculate_monthly_summary(year, month)


def aggregate_all(transactions: TransactionsInput, categories: Optional[Sequence[Any]] = None) -> PeriodAggregate:
    """Same reduction as :func:`aggregate` over every transaction, dated or not."""
    return FinanceAnalytics.ensure(transactions, categories).summarize()
