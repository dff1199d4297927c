from __future__ import annotations

import math
import statistics
from typing import Sequence

from parlay_picker.modeling.types import OverUnder


def normal_cdf(z: float) -> float:
    return 0.5 * (1.0 + math.erf(z / math.sqrt(2.0)))


def probability_over(line: float, mean: float, std: float, *, min_std: float = 0.5) -> float:
    if std <= 0:
        std = min_std
    std = max(std, min_std)
    z = (line - mean) / std
    return 1.0 - normal_cdf(z)


def confidence_from_probability(prob_over: float) -> float:
    if not math.isfinite(prob_over):
        return 0.5
    return max(prob_over, 1.0 - prob_over)


def clamp_probability(p: float, *, floor: float = 0.01, ceiling: float = 0.99) -> float:
    return min(ceiling, max(floor, p))


def blended_side_probability(
    values: Sequence[float],
    line: float,
    side: OverUnder,
    *,
    stabilization_games: float = 10.0,
    floor: float = 0.01,
    ceiling: float = 0.99,
) -> float | None:
    """Probability that a game lands on ``side`` of ``line``.

    Blends a Beta(1,1) smoothed empirical hit rate with a normal approximation
    around the sample mean; the empirical share grows with sample size.
    """
    if not values:
        return None
    mean = statistics.mean(values)
    std = statistics.pstdev(values) if len(values) > 1 else 0.0

    prob_normal = probability_over(line, mean, std)
    if side is OverUnder.OVER:
        wins = sum(1 for value in values if value > line)
    else:
        wins = sum(1 for value in values if value < line)
        prob_normal = 1.0 - prob_normal
    prob_empirical = (wins + 1.0) / (len(values) + 2.0)

    weight = min(1.0, len(values) / max(1.0, stabilization_games))
    prob = prob_empirical * weight + prob_normal * (1.0 - weight)
    return clamp_probability(prob, floor=floor, ceiling=ceiling)
