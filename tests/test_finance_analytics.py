import pandas as pd
import pytest

from finance_insights.finance_analytics import FinanceAnalytics, aggregate, aggregate_all, parse_date
from finance_insights.models import Category, Transaction


def _txn(id, amount, type, date, category_id=None, description='', **extra):
    return dict(
        id=id,
        wallet_id='w1',
        category_id=category_id,
        description=description,
        amount=amount,
        type=type,
        date=date,
        **extra,
    )


def sample_transactions():
    return [
        _txn('t1', 50000, 'income', '2024-06-01', description='June salary'),
        _txn('t2', -30000, 'expense', '2024-06-05', category_id='food', description='Groceries'),
    ]


def test_monthly_aggregate_matches_income_and_expense_totals():
    result = aggregate(sample_transactions(), month=6, year=2024)

    assert result.income == 50000
    assert result.expenses == 30000
    assert result.savings == 20000
    assert result.savings_rate == pytest.approx(40.0)
    assert result.transaction_count == 2


def test_aggregate_ignores_other_months():
    rows = sample_transactions() + [_txn('t3', 1000, 'income', '2024-07-01')]
    result = aggregate(rows, month=6, year=2024)
    assert result.income == 50000


def test_aggregate_is_additive_over_partitions():
    rows = sample_transactions() + [
        _txn('t3', 2500, 'income', '2024-06-10'),
        _txn('t4', -700, 'expense', '2024-06-11'),
        _txn('t5', 400, 'expense', '2024-06-12'),
    ]
    left, right = rows[:2], rows[2:]

    whole = aggregate(rows, 6, 2024)
    a = aggregate(left, 6, 2024)
    b = aggregate(right, 6, 2024)

    assert whole.income == pytest.approx(a.income + b.income)
    # expenses are normalized after summing, so mixed signs within one side still add up
    assert whole.expenses == pytest.approx(abs(-30000 - 700 + 400))


def test_expense_sign_convention_does_not_matter():
    positive = [_txn('t1', 1000, 'income', '2024-06-01'), _txn('t2', 250, 'expense', '2024-06-02')]
    negative = [_txn('t1', 1000, 'income', '2024-06-01'), _txn('t2', -250, 'expense', '2024-06-02')]
    assert aggregate(positive, 6, 2024).expenses == aggregate(negative, 6, 2024).expenses == 250


def test_zero_income_has_zero_savings_rate():
    rows = [_txn('t1', -500, 'expense', '2024-06-01')]
    result = aggregate(rows, 6, 2024)
    assert result.savings == -500
    assert result.savings_rate == 0


def test_empty_input_is_all_zero():
    result = aggregate([], 6, 2024)
    assert (result.income, result.expenses, result.savings, result.savings_rate) == (0, 0, 0, 0)


def test_malformed_dates_are_excluded_from_month_but_kept_in_totals():
    rows = sample_transactions() + [_txn('t3', 999, 'income', 'not a date')]

    assert aggregate(rows, 6, 2024).income == 50000
    assert aggregate_all(rows).income == 50999


def test_dataclass_records_are_accepted():
    rows = [
        Transaction('t1', 'w1', 'c1', 'Salary', 1000, 'income', '2024-06-01'),
        Transaction('t2', 'w1', 'c2', 'Lunch', -200, 'expense', '2024-06-02'),
    ]
    assert aggregate(rows, 6, 2024).savings == 800


def test_category_names_resolve_from_lookup_nested_or_others():
    categories = [Category('food', 'Food')]
    rows = [
        _txn('t1', -10, 'expense', '2024-06-01', category_id='food'),
        _txn('t2', -20, 'expense', '2024-06-01', category_id='gone'),
        _txn('t3', -30, 'expense', '2024-06-01', category_id='x', categories={'name': 'Transport'}),
    ]
    analytics = FinanceAnalytics(rows, categories)
    assert analytics.data['Category'].tolist() == ['Food', 'Others', 'Transport']


def test_missing_type_is_inferred_from_sign():
    rows = [_txn('t1', 100, None, '2024-06-01'), _txn('t2', -40, '', '2024-06-01')]
    analytics = FinanceAnalytics(rows)
    assert analytics.data['Type'].tolist() == ['income', 'expense']


def test_unknown_type_counts_toward_neither_total():
    rows = sample_transactions() + [_txn('t3', 5000, 'Transfer', '2024-06-03'), _txn('t4', -700, 'refund', '2024-06-04')]
    analytics = FinanceAnalytics(rows)
    assert analytics.data['Type'].tolist()[-2:] == ['transfer', 'refund']

    summary = analytics.summarize()
    assert summary.income == 50000
    assert summary.expenses == 30000


def test_period_summary_is_inclusive():
    analytics = FinanceAnalytics(sample_transactions())
    summary = analytics.calculate_period_summary('2024-06-01', '2024-06-05')
    assert summary.income == 50000
    assert summary.expenses == 30000


def test_months_lists_dated_months_only():
    rows = sample_transactions() + [_txn('t3', 1, 'income', '2024-04-03'), _txn('t4', 1, 'income', None)]
    assert FinanceAnalytics(rows).months() == ['2024-04', '2024-06']


def test_parse_date_handles_bad_and_aware_values():
    assert parse_date('') is None
    assert parse_date('2024-13-45') is None
    assert parse_date('2024-06-05T23:30:00+00:00') == pd.Timestamp('2024-06-05')
