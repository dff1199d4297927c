"""Exhaustive N-leg parlay enumeration over a pool of candidate selections."""
from __future__ import annotations

import math
from itertools import combinations
from typing import Iterable, Sequence

from parlay_picker.core.errors import PropUnavailableError
from parlay_picker.modeling.odds import combined_probability, probability_to_american_odds
from parlay_picker.modeling.types import (
    GeneratedParlay,
    OverUnder,
    ParlayLeg,
    PlayerPropData,
    SelectedPlayerProp,
    StatCategory,
)

SIDES = (OverUnder.OVER, OverUnder.UNDER)


def make_selection(
    player: PlayerPropData,
    category: StatCategory,
    side: OverUnder,
) -> SelectedPlayerProp:
    line = player.line(category, side)
    if line is None:
        raise PropUnavailableError(f"No {category.value} line for {player.full_name}")
    probability = player.prop_odds(category).probability_for(side)
    if probability is None or not math.isfinite(probability) or not 0.0 < probability < 1.0:
        raise PropUnavailableError(
            f"No usable {side.label} probability for {player.full_name} {category.value}"
        )
    odds = player.prop_odds(category).odds_for(side)
    if odds is None:
        odds = probability_to_american_odds(probability)
    return SelectedPlayerProp(
        player_id=player.player_id,
        player_name=player.full_name,
        abbreviation=player.abbreviation,
        category=category,
        line=line,
        over_under=side,
        probability=probability,
        odds=odds,
    )


def build_candidate_pool(
    players: Iterable[PlayerPropData],
    categories: Iterable[StatCategory] | None = None,
    sides: Iterable[OverUnder] | None = None,
) -> list[SelectedPlayerProp]:
    category_list = list(categories) if categories is not None else list(StatCategory)
    side_list = list(sides) if sides is not None else list(SIDES)
    pool: list[SelectedPlayerProp] = []
    for player in players:
        for category in StatCategory:
            if category not in category_list:
                continue
            for side in SIDES:
                if side not in side_list:
                    continue
                try:
                    pool.append(make_selection(player, category, side))
                except PropUnavailableError:
                    continue
    return pool


def _conflicts(legs: Sequence[SelectedPlayerProp], *, allow_same_player: bool) -> bool:
    seen_props: set[tuple[int, StatCategory]] = set()
    seen_players: set[int] = set()
    for leg in legs:
        prop_key = (leg.player_id, leg.category)
        if prop_key in seen_props:
            return True
        seen_props.add(prop_key)
        if not allow_same_player:
            if leg.player_id in seen_players:
                return True
            seen_players.add(leg.player_id)
    return False


def price_legs(legs: Sequence[SelectedPlayerProp | ParlayLeg], parlay_id: int = 1) -> GeneratedParlay:
    snapshot = tuple(
        leg if isinstance(leg, ParlayLeg) else ParlayLeg.from_selection(leg)
        for leg in legs
    )
    return GeneratedParlay(
        id=parlay_id,
        legs=snapshot,
        combined_probability=combined_probability(leg.probability for leg in snapshot),
    )


def generate_combinations(
    candidates: Sequence[SelectedPlayerProp],
    leg_count: int = 3,
    *,
    allow_same_player: bool = True,
    min_probability: float = 0.0,
    limit: int | None = None,
) -> list[GeneratedParlay]:
    """Every ``leg_count`` combination of ``candidates``, highest joint probability first.

    Combinations holding two legs on the same player and category are skipped.
    Ties keep enumeration order. Ids run 1..n in rank order.
    """
    if leg_count < 1:
        raise ValueError("leg_count must be at least 1")
    if len(candidates) < leg_count:
        return []

    scored: list[tuple[float, tuple[SelectedPlayerProp, ...]]] = []
    for combo in combinations(candidates, leg_count):
        if _conflicts(combo, allow_same_player=allow_same_player):
            continue
        probability = combined_probability(leg.probability for leg in combo)
        if probability < min_probability:
            continue
        scored.append((probability, combo))

    scored.sort(key=lambda item: item[0], reverse=True)
    if limit is not None:
        scored = scored[: max(0, limit)]

    return [
        GeneratedParlay(
            id=rank,
            legs=tuple(ParlayLeg.from_selection(leg) for leg in combo),
            combined_probability=probability,
        )
        for rank, (probability, combo) in enumerate(scored, start=1)
    ]
