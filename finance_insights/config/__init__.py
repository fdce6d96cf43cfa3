"""Bundled configuration files and loaders.

Defaults for thresholds, salary keywords and currency live in JSON files
next to this module so they can be tuned without code changes. Environment
overrides are applied on top of them by :mod:`finance_insights.settings`.
"""

from .defaults import (
    KEYWORD_SECTIONS,
    get_config_value,
    get_keywords,
    load_config,
)

__all__ = [
    'KEYWORD_SECTIONS',
    'load_config',
    'get_config_value',
    'get_keywords',
]
