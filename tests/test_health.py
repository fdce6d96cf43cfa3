import itertools

from finance_insights.lib.health import budget_adherence, health_components, health_score
from finance_insights.models import BudgetStatus, Goal, SalaryProfile, Wallet


def _status(percentage):
    return BudgetStatus('b', 'Budget', 'c', 100, percentage, 100 - percentage, percentage, 'on-track')


def _goal(current, target=100):
    return Goal('g', 'Goal', target_amount=target, current_amount=current)


def test_empty_inputs_score():
    # base 70, +10 savings, -5 goals (none), -10 budgets (none)
    assert health_score(40.0, [], [], [], None) == 65


def test_components_add_up():
    wallets = [Wallet('w1', 'Cash'), Wallet('w2', 'Bank'), Wallet('w3', 'E-wallet')]
    salary = SalaryProfile(monthly_average=40000, months_observed=4, growth_rate_percent=5)
    components = health_components(15.0, [_goal(60)], wallets, [_status(50)], salary)

    assert components == {
        'base': 70,
        'savings': 0,
        'goals': 5,
        'wallets': 5,
        'budgets': 10,
        'salary_stability': 5,
        'salary_growth': 3,
    }
    assert health_score(15.0, [_goal(60)], wallets, [_status(50)], salary) == 98


def test_score_is_clamped_to_100():
    wallets = [Wallet(str(i), 'w') for i in range(3)]
    salary = SalaryProfile(monthly_average=1, months_observed=6, growth_rate_percent=10)
    assert health_score(50.0, [_goal(90)], wallets, [_status(10)], salary) == 100


def test_score_bounds_over_input_grid():
    rates = [-500.0, 0.0, 15.0, 99.0]
    goal_sets = [[], [_goal(0)], [_goal(100)], [_goal(10, target=0)]]
    wallet_sets = [[], [Wallet(str(i), 'w') for i in range(4)]]
    budget_sets = [[], [_status(150)], [_status(10), _status(150)], [_status(10)]]
    salaries = [None, SalaryProfile(months_observed=5, growth_rate_percent=-3)]

    for rate, goals, wallets, budgets, salary in itertools.product(rates, goal_sets, wallet_sets, budget_sets, salaries):
        score = health_score(rate, goals, wallets, budgets, salary)
        assert 0 <= score <= 100


def test_budget_adherence_guards_empty_list():
    assert budget_adherence([]) == 0
    assert budget_adherence([_status(100), _status(101)]) == 0.5
