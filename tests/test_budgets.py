from datetime import date

import pytest

from finance_insights.lib.budgets import (
    budget_overview,
    budget_percentage,
    budget_status,
    calculate_end_date,
    reconcile,
)
from finance_insights.models import Budget
from finance_insights.settings import Thresholds


def _expense(amount, date, category_id='food'):
    return {'amount': -amount, 'type': 'expense', 'date': date, 'category_id': category_id}


def _budget(limit_amount, start='2024-06-01', end='2024-06-30', category_id='food', id='b1'):
    return Budget(
        id=id,
        category_id=category_id,
        name=f'Budget {id}',
        limit_amount=limit_amount,
        period='monthly',
        start_date=start,
        end_date=end,
    )


def test_budget_scenario_overspend():
    transactions = [
        {'amount': 50000, 'type': 'income', 'date': '2024-06-01', 'category_id': 'salary'},
        _expense(30000, '2024-06-05'),
    ]
    [status] = reconcile([_budget(25000)], transactions, Thresholds())

    assert status.spent == 30000
    assert status.remaining == -5000
    assert status.percentage == pytest.approx(120)
    assert status.status == 'exceeded'


@pytest.mark.parametrize(
    'spent, expected',
    [(800, 'at-risk'), (1000, 'exceeded'), (799.99, 'on-track')],
)
def test_status_bands(spent, expected):
    [status] = reconcile([_budget(1000)], [_expense(spent, '2024-06-10')], Thresholds())
    assert status.status == expected


def test_band_boundaries():
    assert budget_percentage(800, 1000) == 80
    assert budget_status(80) == 'at-risk'
    assert budget_status(100) == 'exceeded'
    assert budget_status(79.99) == 'on-track'


def test_zero_limit_budget_is_safe():
    [status] = reconcile([_budget(0)], [_expense(500, '2024-06-10')], Thresholds())
    assert status.percentage == 0
    assert status.status == 'on-track'
    assert status.remaining == -500


def test_window_is_inclusive_and_category_scoped():
    transactions = [
        _expense(100, '2024-06-01'),
        _expense(200, '2024-06-30'),
        _expense(400, '2024-07-01'),
        _expense(800, '2024-06-15', category_id='transport'),
        {'amount': 1600, 'type': 'income', 'date': '2024-06-15', 'category_id': 'food'},
    ]
    [status] = reconcile([_budget(1000)], transactions, Thresholds())
    assert status.spent == 300


def test_percentage_never_drops_as_spending_grows():
    order = {'on-track': 0, 'at-risk': 1, 'exceeded': 2}
    previous = None
    for amount in range(0, 1500, 50):
        [status] = reconcile([_budget(1000)], [_expense(amount, '2024-06-10')], Thresholds())
        if previous is not None:
            assert status.percentage >= previous.percentage
            assert order[status.status] >= order[previous.status]
        previous = status


def test_unreadable_window_selects_nothing():
    [status] = reconcile([_budget(1000, start='garbage')], [_expense(500, '2024-06-10')], Thresholds())
    assert status.spent == 0
    assert status.status == 'on-track'


def test_reconcile_preserves_order_and_handles_empty_inputs():
    budgets = [_budget(100, id='b2'), _budget(100, id='b1', category_id='other')]
    statuses = reconcile(budgets, [], Thresholds())
    assert [s.budget_id for s in statuses] == ['b2', 'b1']
    assert reconcile([], [_expense(1, '2024-06-01')], Thresholds()) == []


def test_budget_overview_counts():
    transactions = [_expense(900, '2024-06-10'), _expense(50, '2024-06-10', category_id='fun')]
    statuses = reconcile(
        [_budget(1000), _budget(40, id='b2', category_id='fun'), _budget(500, id='b3', category_id='none')],
        transactions,
        Thresholds(),
    )
    overview = budget_overview(statuses)
    assert overview['at-risk'] == 1
    assert overview['exceeded'] == 1
    assert overview['on-track'] == 1
    assert overview['total'] == 3
    assert overview['total_limit'] == 1540
    assert overview['total_spent'] == 950


def test_custom_thresholds_change_bands():
    thresholds = Thresholds().with_overrides(budget_at_risk_percent=50)
    assert budget_status(60, thresholds) == 'at-risk'


@pytest.mark.parametrize(
    'start, period, expected',
    [
        (date(2024, 1, 1), 'weekly', date(2024, 1, 7)),
        (date(2024, 2, 1), 'monthly', date(2024, 2, 29)),
        (date(2023, 2, 10), 'monthly', date(2023, 2, 28)),
        (date(2024, 1, 15), 'quarterly', date(2024, 3, 31)),
        (date(2024, 11, 30), 'quarterly', date(2025, 1, 31)),
        (date(2024, 1, 15), 'yearly', date(2025, 1, 14)),
        (date(2024, 3, 1), 'yearly', date(2025, 2, 28)),
        ('2024-06-10', 'custom', date(2024, 6, 30)),
        ('2024-06-10', 'fortnightly', date(2024, 6, 30)),
    ],
)
def test_calculate_end_date(start, period, expected):
    assert calculate_end_date(start, period) == expected


def test_custom_period_uses_explicit_end():
    assert calculate_end_date('2024-06-10', 'custom', '2024-08-01') == date(2024, 8, 1)


def test_invalid_start_date_raises():
    with pytest.raises(ValueError):
        calculate_end_date('not a date', 'monthly')
