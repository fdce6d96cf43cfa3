import math

from finance_insights.lib.common import format_currency, format_percent, round_amount


def test_round_amount_rounds_halves_up():
    assert round_amount(2.5) == 3
    assert round_amount(3.5) == 4
    assert round_amount(-2.5) == -2
    assert round_amount(1234.49) == 1234
    assert round_amount(math.nan) == 0


def test_format_currency():
    assert format_currency(1234.56, symbol='$') == '$1,235'
    assert format_currency(1234.56, symbol='$', decimals=2) == '$1,234.56'
    assert format_currency(1500000, symbol='₱') == '₱1,500,000'


def test_format_percent():
    assert format_percent(12.345) == '12.3%'
    assert format_percent(0) == '0.0%'
