from __future__ import annotations

import math
import zlib
from typing import Iterable

import pandas as pd

from parlay_picker.modeling.name_utils import abbreviate_player_name, normalize_player_name
from parlay_picker.modeling.probability import blended_side_probability
from parlay_picker.modeling.stat_mappings import stat_value
from parlay_picker.modeling.types import (
    LINE_OFFSET,
    OverUnder,
    PlayerGameLog,
    PlayerPropData,
    PropOdds,
    StatCategory,
)

CATEGORY_COLUMNS = [category.value for category in StatCategory]


def _player_id(key: str) -> int:
    try:
        return int(key)
    except ValueError:
        return zlib.crc32(key.encode("utf-8"))


def _median_or_none(series: pd.Series) -> float | None:
    value = pd.to_numeric(series, errors="coerce").median(skipna=True)
    if value is None or not math.isfinite(float(value)):
        return None
    return float(value)


def game_logs_frame(game_logs: Iterable[PlayerGameLog]) -> pd.DataFrame:
    rows = []
    for log in game_logs:
        key = log.player_id or normalize_player_name(log.player_name)
        if not key:
            continue
        row = {
            "player_key": str(key),
            "player_name": log.player_name,
            "game_date": log.game_date,
        }
        for category in StatCategory:
            row[category.value] = stat_value(category, log.stats)
        rows.append(row)
    frame = pd.DataFrame(rows, columns=["player_key", "player_name", "game_date", *CATEGORY_COLUMNS])
    frame["game_date"] = pd.to_datetime(frame["game_date"], errors="coerce")
    for column in CATEGORY_COLUMNS:
        frame[column] = pd.to_numeric(frame[column], errors="coerce")
    return frame


def _price_category(
    values: list[float],
    median: float,
    *,
    stabilization_games: float,
    floor: float,
    ceiling: float,
) -> PropOdds:
    over_prob = blended_side_probability(
        values,
        median + LINE_OFFSET,
        OverUnder.OVER,
        stabilization_games=stabilization_games,
        floor=floor,
        ceiling=ceiling,
    )
    under_prob = blended_side_probability(
        values,
        median - LINE_OFFSET,
        OverUnder.UNDER,
        stabilization_games=stabilization_games,
        floor=floor,
        ceiling=ceiling,
    )
    return PropOdds.from_probabilities(over_prob, under_prob)


def build_player_props(
    game_logs: Iterable[PlayerGameLog],
    *,
    min_games: int = 5,
    last_n_games: int | None = None,
    stabilization_games: float = 10.0,
    probability_floor: float = 0.01,
    probability_ceiling: float = 0.99,
) -> list[PlayerPropData]:
    """Summarize game logs into one stat record per player.

    Only the most recent ``last_n_games`` per player are used. Medians ignore
    games where the stat is missing; ``games_played`` counts every kept game.
    """
    frame = game_logs_frame(game_logs)
    if frame.empty:
        return []

    frame = frame.sort_values(["player_key", "game_date"], na_position="first", kind="mergesort")
    if last_n_games is not None and last_n_games > 0:
        frame = frame.groupby("player_key", sort=False).tail(last_n_games)

    players: list[PlayerPropData] = []
    for player_key, group in frame.groupby("player_key", sort=True):
        games_played = len(group)
        if games_played < min_games:
            continue
        names = group["player_name"].dropna()
        full_name = str(names.iloc[-1]) if not names.empty else str(player_key)

        medians: dict[StatCategory, float | None] = {}
        odds: dict[StatCategory, PropOdds] = {}
        for category in StatCategory:
            median = _median_or_none(group[category.value])
            medians[category] = median
            if median is None:
                continue
            values = group[category.value].dropna().astype(float).tolist()
            odds[category] = _price_category(
                values,
                median,
                stabilization_games=stabilization_games,
                floor=probability_floor,
                ceiling=probability_ceiling,
            )

        players.append(
            PlayerPropData(
                player_id=_player_id(str(player_key)),
                full_name=full_name,
                abbreviation=abbreviate_player_name(full_name),
                points_median=medians[StatCategory.POINTS],
                threes_median=medians[StatCategory.THREES],
                assists_median=medians[StatCategory.ASSISTS],
                rebounds_median=medians[StatCategory.REBOUNDS],
                games_played=games_played,
                odds=odds,
            )
        )
    return sorted(players, key=lambda player: player.full_name)


def top_players(
    players: Iterable[PlayerPropData],
    category: StatCategory,
    limit: int = 10,
) -> list[PlayerPropData]:
    ranked = [player for player in players if player.value(category) is not None]
    ranked.sort(key=lambda player: (-(player.value(category) or 0.0), player.full_name))
    return ranked[: max(0, limit)]
