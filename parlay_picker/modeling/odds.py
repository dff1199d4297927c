"""American odds conversions and independent-leg parlay pricing.

American odds are quoted relative to a 100 unit stake: ``+150`` returns 150
profit on 100 staked, ``-150`` needs 150 staked to profit 100. Conversions to
odds truncate toward zero, so a 52.4% leg prices at ``-110`` and a 12.5%
three-leg parlay at ``+700``.
"""
from __future__ import annotations

import math
from typing import Iterable

MISSING_VALUE = "—"


def _check_probability(p: float, *, open_interval: bool) -> float:
    p = float(p)
    if not math.isfinite(p):
        raise ValueError(f"probability must be finite, got {p!r}")
    if open_interval and not 0.0 < p < 1.0:
        raise ValueError(f"probability must be in (0, 1), got {p}")
    if not open_interval and not 0.0 <= p <= 1.0:
        raise ValueError(f"probability must be in [0, 1], got {p}")
    return p


def _check_american(odds: float) -> float:
    odds = float(odds)
    if not math.isfinite(odds) or abs(odds) < 100:
        raise ValueError(f"invalid American odds: {odds!r}")
    return odds


def probability_to_american_odds(p: float) -> int:
    p = _check_probability(p, open_interval=True)
    if p >= 0.5:
        return int(-100 * p / (1 - p))
    return int(100 * (1 - p) / p)


def american_odds_to_probability(odds: float) -> float:
    odds = _check_american(odds)
    if odds < 0:
        return -odds / (-odds + 100.0)
    return 100.0 / (odds + 100.0)


def american_to_decimal(odds: float) -> float:
    odds = _check_american(odds)
    if odds > 0:
        return 1.0 + odds / 100.0
    return 1.0 + 100.0 / abs(odds)


def decimal_to_american(decimal: float) -> int:
    decimal = float(decimal)
    if not math.isfinite(decimal) or decimal <= 1.0:
        raise ValueError(f"decimal odds must be greater than 1.0, got {decimal!r}")
    if decimal >= 2.0:
        return int(round((decimal - 1.0) * 100.0))
    return int(round(-100.0 / (decimal - 1.0)))


def payout(stake: float, odds: float) -> float:
    """Profit returned on a winning ``stake`` at American ``odds``."""
    return float(stake) * (american_to_decimal(odds) - 1.0)


def combined_probability(probabilities: Iterable[float]) -> float:
    values = [_check_probability(p, open_interval=False) for p in probabilities]
    if not values:
        raise ValueError("at least one leg probability is required")
    return math.prod(values)


def format_american_odds(odds: int | None) -> str:
    if odds is None:
        return MISSING_VALUE
    return f"+{odds}" if odds > 0 else f"{odds}"


def format_probability(p: float | None) -> str:
    if p is None:
        return MISSING_VALUE
    return f"{p * 100:.1f}%"
