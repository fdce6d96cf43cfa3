import logging

import pytest

from finance_insights.config import get_config_value, get_keywords, load_config
from finance_insights.models import AIPreferences
from finance_insights.settings import (
    DEFAULT_AI_MODEL,
    Thresholds,
    get_currency_code,
    get_currency_symbol,
    load_ai_settings,
    load_thresholds,
)


def test_bundled_defaults_match_dataclass_defaults():
    assert load_thresholds(environ={}) == Thresholds()


def test_environment_overrides_thresholds():
    thresholds = load_thresholds(environ={
        'FINSIGHT_SALARY_AMOUNT_FLOOR': '500',
        'FINSIGHT_MAX_SUGGESTIONS': '3',
    })
    assert thresholds.salary_amount_floor == 500.0
    assert thresholds.max_suggestions == 3
    assert isinstance(thresholds.max_suggestions, int)


def test_invalid_override_is_ignored(caplog):
    with caplog.at_level(logging.WARNING, logger='finance_insights.settings'):
        thresholds = load_thresholds(environ={'FINSIGHT_INVESTMENT_BALANCE_FLOOR': 'lots'})
    assert thresholds.investment_balance_floor == 50000
    assert 'FINSIGHT_INVESTMENT_BALANCE_FLOOR' in caplog.text


def test_ai_settings_from_environment():
    settings = load_ai_settings(environ={'GROQ_API_KEY': 'abc', 'FINSIGHT_AI_TIMEOUT': 'soon'})
    assert settings.enabled
    assert settings.model == DEFAULT_AI_MODEL
    assert settings.timeout == 30.0
    assert not load_ai_settings(environ={}).enabled


def test_currency_symbols():
    assert get_currency_code(environ={}) == 'PHP'
    assert get_currency_code(environ={'FINSIGHT_CURRENCY': 'USD'}) == 'USD'
    assert get_currency_symbol('PHP') == '₱'
    assert get_currency_symbol('USD') == '$'
    assert get_currency_symbol('XYZ') == 'XYZ'


def test_config_loader():
    assert load_config('insights')['thresholds']['max_suggestions'] == 6
    assert get_config_value('insights', 'thresholds', 'missing', default=7) == 7
    assert get_config_value('nope', 'x', default='d') == 'd'
    assert get_config_value('insights', 'currency', 'code', 'deeper', default='d') == 'd'
    with pytest.raises(FileNotFoundError):
        load_config('nope')


def test_keywords_are_normalized_per_section():
    assert 'salary' in get_keywords('salary')
    assert 'what if' in get_keywords('hypothetical')
    assert all(word == word.strip().lower() for word in get_keywords('salary'))
    with pytest.raises(ValueError):
        get_keywords('thresholds')


def test_preferences_from_dict_ignores_unknown_keys():
    preferences = AIPreferences.from_dict({
        'data_access': {'wallets': False, 'bogus': True},
        'personalization': 'not a dict',
    })
    assert preferences.data_access.wallets is False
    assert preferences.data_access.transactions is True
    assert preferences.personalization.savings_target == 20.0
    assert AIPreferences.from_dict(None) == AIPreferences()
