"""Settings for the insights engine.

Numeric thresholds default to the bundled ``config/insights.json`` values and
can be overridden per field with ``FINSIGHT_<FIELD>`` environment variables,
e.g. ``FINSIGHT_SALARY_AMOUNT_FLOOR=500``. The AI collaborator is configured
from ``GROQ_API_KEY`` and ``FINSIGHT_AI_*`` (a ``.env`` file is honoured).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .config import get_config_value

logger = logging.getLogger(__name__)

ENV_PREFIX = 'FINSIGHT_'

DEFAULT_AI_BASE_URL = 'https://api.groq.com/openai/v1'
DEFAULT_AI_MODEL = 'llama-3.3-70b-versatile'
DEFAULT_AI_TIMEOUT = 30.0


@dataclass(frozen=True)
class Thresholds:
    """Currency- and policy-dependent constants used by the rule engines."""

    salary_amount_floor: float = 10000.0
    investment_balance_floor: float = 50000.0
    investment_savings_rate: float = 25.0
    category_share_threshold: float = 30.0
    category_share_high: float = 40.0
    category_amount_floor: float = 1000.0
    category_reduction_rate: float = 0.15
    emergency_fund_months: float = 3.0
    emergency_fund_horizon_months: float = 12.0
    max_suggestions: int = 6
    budget_at_risk_percent: float = 80.0
    budget_exceeded_percent: float = 100.0
    goal_nearly_complete_percent: float = 90.0
    goal_urgent_days: int = 30
    recommended_savings_rate: float = 20.0
    trend_change_percent: float = 15.0
    trend_min_expense_count: int = 10

    def with_overrides(self, **overrides: Any) -> 'Thresholds':
        return replace(self, **overrides)


@dataclass(frozen=True)
class AISettings:
    api_key: Optional[str] = None
    model: str = DEFAULT_AI_MODEL
    base_url: str = DEFAULT_AI_BASE_URL
    timeout: float = DEFAULT_AI_TIMEOUT

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)


def _coerce(raw: Any, target: Any) -> Any:
    if isinstance(target, int) and not isinstance(target, bool):
        return int(float(raw))
    return float(raw)


def load_thresholds(environ: Optional[Dict[str, str]] = None) -> Thresholds:
    """Build :class:`Thresholds` from JSON defaults and environment overrides.

    Invalid values are logged and ignored so a bad override never prevents
    the engine from running.
    """
    env = os.environ if environ is None else environ
    json_values = get_config_value('insights', 'thresholds', default={}) or {}
    base = Thresholds()
    values: Dict[str, Any] = {}

    for field in fields(Thresholds):
        default = getattr(base, field.name)
        value = default
        if field.name in json_values:
            try:
                value = _coerce(json_values[field.name], default)
            except (TypeError, ValueError):
                logger.warning("Ignoring invalid config value for %s: %r", field.name, json_values[field.name])
        env_key = f"{ENV_PREFIX}{field.name.upper()}"
        if env_key in env:
            try:
                value = _coerce(env[env_key], default)
            except (TypeError, ValueError):
                logger.warning("Ignoring invalid override %s=%r", env_key, env[env_key])
        values[field.name] = value

    return Thresholds(**values)


def get_currency_code(environ: Optional[Dict[str, str]] = None) -> str:
    env = os.environ if environ is None else environ
    return env.get(f'{ENV_PREFIX}CURRENCY') or get_config_value('insights', 'currency', 'code', default='PHP')


def get_currency_symbol(code: Optional[str] = None) -> str:
    """Symbol for ``code`` (or the configured currency); the code itself if unknown."""
    code = code or get_currency_code()
    symbols = get_config_value('insights', 'currency', 'symbols', default={}) or {}
    return symbols.get(code, code)


def load_ai_settings(environ: Optional[Dict[str, str]] = None) -> AISettings:
    """Read AI collaborator settings, loading a ``.env`` file first."""
    if environ is None:
        load_dotenv()
        environ = dict(os.environ)

    timeout = DEFAULT_AI_TIMEOUT
    raw_timeout = environ.get(f'{ENV_PREFIX}AI_TIMEOUT')
    if raw_timeout:
        try:
            timeout = float(raw_timeout)
        except ValueError:
            logger.warning("Ignoring invalid override %sAI_TIMEOUT=%r", ENV_PREFIX, raw_timeout)

    return AISettings(
        api_key=environ.get('GROQ_API_KEY') or None,
        model=environ.get(f'{ENV_PREFIX}AI_MODEL', DEFAULT_AI_MODEL),
        base_url=environ.get(f'{ENV_PREFIX}AI_BASE_URL', DEFAULT_AI_BASE_URL),
        timeout=timeout,
    )
