#!/usr/bin/env python3
"""Lightweight validator for the bundled insights JSON configuration."""

from __future__ import annotations

import json
import sys
from dataclasses import fields
from pathlib import Path
from typing import List

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from finance_insights.config import KEYWORD_SECTIONS  # noqa: E402
from finance_insights.settings import Thresholds  # noqa: E402

CONFIG_DIR = ROOT / "finance_insights" / "config"


def validate_config(path: Path) -> List[str]:
    with path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)

    errors = []

    thresholds = data.get("thresholds")
    if not isinstance(thresholds, dict):
        errors.append("missing 'thresholds' block")
    else:
        known = {field.name for field in fields(Thresholds)}
        for key, value in thresholds.items():
            if key not in known:
                errors.append(f"thresholds.{key} is not a known threshold")
            elif isinstance(value, bool) or not isinstance(value, (int, float)):
                errors.append(f"thresholds.{key} must be a number")
            elif value < 0:
                errors.append(f"thresholds.{key} must not be negative")

    for section in KEYWORD_SECTIONS:
        keywords = data.get(section, {}).get("keywords")
        if not isinstance(keywords, list) or not all(isinstance(k, str) and k for k in keywords):
            errors.append(f"{section}.keywords must be a list of non-empty strings")

    currency = data.get("currency", {})
    symbols = currency.get("symbols")
    if not isinstance(symbols, dict):
        errors.append("currency.symbols must be a dictionary")
    elif currency.get("code") not in symbols:
        errors.append(f"currency.code {currency.get('code')!r} has no symbol")

    return errors


def main() -> int:
    paths = sorted(CONFIG_DIR.glob("*.json"))
    if not paths:
        print(f"No configuration files found in: {CONFIG_DIR}")
        return 1

    issues = []
    for path in paths:
        try:
            errors = validate_config(path)
        except json.JSONDecodeError as e:
            errors = [f"invalid JSON: {e}"]
        issues.extend((path.name, message) for message in errors)

    if issues:
        print("Configuration validation failed:")
        for filename, message in issues:
            print(f"  - {filename}: {message}")
        return 1

    print("All configuration files validated successfully.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
