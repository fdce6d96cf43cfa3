"""Access to the JSON defaults shipped inside this package."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

CONFIG_DIR = Path(__file__).parent
INSIGHTS_CONFIG = 'insights'

# Sections of the insights config that carry a ``keywords`` list
KEYWORD_SECTIONS = ('salary', 'hypothetical')


def load_config(config_name: str = INSIGHTS_CONFIG) -> Dict[str, Any]:
    """Read ``<config_name>.json`` from this directory.

    An unknown name raises ``FileNotFoundError``; malformed JSON propagates
    as ``json.JSONDecodeError``.
    """
    path = CONFIG_DIR / f"{config_name}.json"
    if not path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {path}")
    return json.loads(path.read_text(encoding='utf-8'))


def get_config_value(config_name: str, *keys: str, default: Any = None) -> Any:
    """Follow ``keys`` into a config file, or return ``default`` at the first gap.

    Example:
        >>> get_config_value('insights', 'currency', 'code')
        'PHP'
    """
    try:
        node = load_config(config_name)
    except FileNotFoundError:
        return default
    for key in keys:
        if not isinstance(node, dict) or key not in node:
            return default
        node = node[key]
    return node


def get_keywords(section: str) -> List[str]:
    """Lower-cased keywords under ``<section>.keywords`` of the insights config.

    Blank and non-string entries are dropped. A missing section gives an
    empty list, so callers can fall back to their built-in defaults.

    Example:
        >>> 'payroll' in get_keywords('salary')
        True
    """
    if section not in KEYWORD_SECTIONS:
        raise ValueError(f"Unknown keyword section: {section!r}")
    values = get_config_value(INSIGHTS_CONFIG, section, 'keywords', default=[])
    if not isinstance(values, list):
        return []
    return [value.strip().lower() for value in values if isinstance(value, str) and value.strip()]
