from __future__ import annotations

import math
import re
from typing import Any

from parlay_picker.modeling.types import StatCategory

NON_ALNUM = re.compile(r"[^a-z0-9]")

# Normalized category labels -> StatCategory.
CATEGORY_ALIASES: dict[str, StatCategory] = {
    "points": StatCategory.POINTS,
    "pts": StatCategory.POINTS,
    "p": StatCategory.POINTS,
    "threes": StatCategory.THREES,
    "3pointers": StatCategory.THREES,
    "3ptmade": StatCategory.THREES,
    "fg3m": StatCategory.THREES,
    "3": StatCategory.THREES,
    "assists": StatCategory.ASSISTS,
    "ast": StatCategory.ASSISTS,
    "a": StatCategory.ASSISTS,
    "rebounds": StatCategory.REBOUNDS,
    "reb": StatCategory.REBOUNDS,
    "r": StatCategory.REBOUNDS,
}

# Lowercase column names some normalized feeds use instead of box-score keys.
_FALLBACK_KEYS: dict[StatCategory, str] = {
    StatCategory.POINTS: "points",
    StatCategory.THREES: "fg3m",
    StatCategory.ASSISTS: "assists",
    StatCategory.REBOUNDS: "rebounds",
}


def normalize_category_label(raw: str) -> str:
    return NON_ALNUM.sub("", (raw or "").strip().lower())


def parse_category(raw: str | StatCategory) -> StatCategory:
    if isinstance(raw, StatCategory):
        return raw
    category = CATEGORY_ALIASES.get(normalize_category_label(raw))
    if category is None:
        raise ValueError(f"Unknown stat category: {raw!r}")
    return category


def _to_float(value: Any) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        value = float(value)
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
        return value if math.isfinite(value) else None
    return None


def stat_value(category: StatCategory, stats: dict[str, Any]) -> float | None:
    value = stats.get(category.stat_key)
    if value is None:
        value = stats.get(_FALLBACK_KEYS[category])
    return _to_float(value)
