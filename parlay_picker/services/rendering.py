from __future__ import annotations

from typing import Iterable

from parlay_picker.modeling.odds import format_american_odds, format_probability
from parlay_picker.modeling.types import (
    GeneratedParlay,
    OverUnder,
    PlayerPropData,
    SelectedPlayerProp,
    StatCategory,
)


def player_row(
    player: PlayerPropData,
    category: StatCategory,
    selected_ids: set[str] | None = None,
) -> dict:
    selected_ids = selected_ids or set()
    over_key = f"{player.player_id}-{category.value}-{OverUnder.OVER.label}"
    under_key = f"{player.player_id}-{category.value}-{OverUnder.UNDER.label}"
    return {
        "player_id": player.player_id,
        "full_name": player.full_name,
        "abbreviation": player.abbreviation,
        "category": category.value,
        "median": player.value(category),
        "median_string": player.median_value(category),
        "games_played": player.games_played,
        "over_line": player.over_line(category),
        "under_line": player.under_line(category),
        "over_odds": format_american_odds(player.over_odds(category)),
        "under_odds": format_american_odds(player.under_odds(category)),
        "over_prob": format_probability(player.over_prob(category)),
        "under_prob": format_probability(player.under_prob(category)),
        "is_over_selected": over_key in selected_ids,
        "is_under_selected": under_key in selected_ids,
    }


def render_player_rows(players: Iterable[PlayerPropData], category: StatCategory) -> str:
    lines = [f"Top Players - {category.display_name}"]
    for player in players:
        lines.append(
            f"{player.abbreviation:<18} {player.median_value(category):>6}  "
            f"Median ({player.games_played}G)  "
            f"{player.over_line(category):>7} ({format_american_odds(player.over_odds(category))})  "
            f"{player.under_line(category):>7} ({format_american_odds(player.under_odds(category))})"
        )
    return "\n".join(lines)


def render_selection(props: Iterable[SelectedPlayerProp], max_legs: int = 3) -> str:
    props = list(props)
    lines = [f"Your Parlay ({len(props)} of {max_legs})"]
    for prop in props:
        lines.append(
            f"  {prop.shorthand:<22} {format_american_odds(prop.odds):>6} {format_probability(prop.probability):>7}"
        )
    return "\n".join(lines)


def render_parlay_table(parlays: Iterable[GeneratedParlay], total: int | None = None) -> str:
    parlays = list(parlays)
    total = len(parlays) if total is None else total
    header = f"{'#':<5}{'Leg 1':<22}{'Leg 2':<22}{'Leg 3':<22}{'Prob':>8}{'Odds':>8}"
    lines = [f"All 3-Leg Parlays ({total} combinations)", header, "-" * len(header)]
    for rank, parlay in enumerate(parlays, start=1):
        legs = [leg.shorthand for leg in parlay.legs] + [""] * (3 - len(parlay.legs))
        lines.append(
            f"{rank:<5}{legs[0]:<22}{legs[1]:<22}{legs[2]:<22}"
            f"{parlay.probability_string:>8}{parlay.odds_string:>8}"
        )
    return "\n".join(lines)


def render_parlay_card(parlay: GeneratedParlay) -> str:
    lines = [
        f"Parlay #{parlay.id}  {parlay.odds_string}",
        f"Combined Probability  {parlay.probability_string}",
    ]
    for leg in parlay.legs:
        arrow = "^" if leg.over_under is OverUnder.OVER else "v"
        lines.append(f"  {arrow} {leg.shorthand:<22} {format_probability(leg.probability):>7}")
    return "\n".join(lines)
