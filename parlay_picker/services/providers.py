"""Sources of player stat records for the parlay builder.

Every provider exposes ``fetch_player_stats()`` returning ``PlayerPropData``
records. Failures surface as ``StatsUnavailableError`` so callers can show a
single error message regardless of the source.
"""
from __future__ import annotations

import json
import logging
import math
from datetime import date
from pathlib import Path
from typing import Any, Iterable, Protocol

from parlay_picker.clients.logging import log_validation
from parlay_picker.clients.nba_stats import fetch_player_gamelogs
from parlay_picker.collectors.nba_stats import extract_result_rows, normalize_player_gamelogs
from parlay_picker.collectors.validators import (
    validate_nba_stats_response,
    validate_player_stats_payload,
)
from parlay_picker.core.config import Settings
from parlay_picker.core.errors import StatsUnavailableError
from parlay_picker.modeling.game_logs import (
    dedupe_game_logs,
    discover_game_log_files,
    game_log_from_row,
    load_game_logs,
)
from parlay_picker.modeling.medians import build_player_props
from parlay_picker.modeling.name_utils import abbreviate_player_name
from parlay_picker.modeling.stat_mappings import parse_category
from parlay_picker.modeling.types import PlayerPropData, PropOdds, StatCategory

logger = logging.getLogger(__name__)


class StatsProvider(Protocol):
    name: str

    def fetch_player_stats(self) -> list[PlayerPropData]:
        ...


def current_season(today: date | None = None) -> str:
    now = today or date.today()
    start_year = now.year if now.month >= 10 else now.year - 1
    return f"{start_year}-{str(start_year + 1)[-2:]}"


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    number = float(value)
    # NaN/inf medians or probabilities count as missing
    return number if math.isfinite(number) else None


def _optional_int(value: Any) -> int | None:
    number = _optional_float(value)
    return None if number is None else int(number)


def _prop_odds(raw: dict[str, Any]) -> PropOdds:
    over_odds = _optional_int(raw.get("over_odds"))
    under_odds = _optional_int(raw.get("under_odds"))
    base = PropOdds.from_american(over_odds, under_odds)
    over_prob = _optional_float(raw.get("over_prob"))
    under_prob = _optional_float(raw.get("under_prob"))
    return PropOdds(
        over_odds=over_odds,
        under_odds=under_odds,
        over_prob=over_prob if over_prob is not None else base.over_prob,
        under_prob=under_prob if under_prob is not None else base.under_prob,
    )


def player_from_record(record: dict[str, Any]) -> PlayerPropData:
    """Build a stat record from its JSON form.

    Odds may be given per category under ``odds`` or flat on the record; flat
    pricing applies to every category without its own entry.
    """
    full_name = str(record["full_name"]).strip()
    odds: dict[StatCategory, PropOdds] = {}
    for raw_category, raw_odds in (record.get("odds") or {}).items():
        if isinstance(raw_odds, dict):
            odds[parse_category(raw_category)] = _prop_odds(raw_odds)
    if any(record.get(key) is not None for key in ("over_odds", "under_odds", "over_prob", "under_prob")):
        flat = _prop_odds(record)
        for category in StatCategory:
            odds.setdefault(category, flat)

    return PlayerPropData(
        player_id=int(record["player_id"]),
        full_name=full_name,
        abbreviation=str(record.get("abbreviation") or abbreviate_player_name(full_name)),
        points_median=_optional_float(record.get("points_median")),
        threes_median=_optional_float(record.get("threes_median")),
        assists_median=_optional_float(record.get("assists_median")),
        rebounds_median=_optional_float(record.get("rebounds_median")),
        games_played=int(record.get("games_played") or 0),
        odds=odds,
    )


def players_from_payload(payload: Any, *, source: str = "json") -> list[PlayerPropData]:
    result = validate_player_stats_payload(payload)
    log_validation(source, valid=result.valid, errors=result.errors, warnings=result.warnings)
    for warning in result.warnings:
        logger.warning("%s: %s", source, warning)
    if not result.valid:
        raise StatsUnavailableError(f"Invalid player stats payload: {'; '.join(result.errors)}")

    records = payload.get("players") if isinstance(payload, dict) else payload
    players: list[PlayerPropData] = []
    for record in records:
        if not isinstance(record, dict):
            continue
        try:
            players.append(player_from_record(record))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping player record %r: %s", record.get("player_id"), exc)
    return players


class JsonStatsProvider:
    name = "json"

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def fetch_player_stats(self) -> list[PlayerPropData]:
        if not self.path.exists():
            raise StatsUnavailableError(f"Player stats file not found: {self.path}")
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise StatsUnavailableError(f"Player stats file is not valid JSON: {exc}") from exc
        return players_from_payload(payload, source=self.name)


class GameLogStatsProvider:
    name = "gamelogs"

    def __init__(
        self,
        paths: Iterable[str | Path],
        *,
        min_games: int = 5,
        last_n_games: int | None = None,
        stabilization_games: float = 10.0,
        probability_floor: float = 0.01,
        probability_ceiling: float = 0.99,
    ) -> None:
        self.paths = [Path(path) for path in paths]
        self.min_games = min_games
        self.last_n_games = last_n_games
        self.stabilization_games = stabilization_games
        self.probability_floor = probability_floor
        self.probability_ceiling = probability_ceiling

    def fetch_player_stats(self) -> list[PlayerPropData]:
        if not self.paths:
            raise StatsUnavailableError("No game log files found")
        try:
            logs = dedupe_game_logs(load_game_logs(self.paths))
        except ValueError as exc:
            raise StatsUnavailableError(f"Invalid game log file: {exc}") from exc
        return build_player_props(
            logs,
            min_games=self.min_games,
            last_n_games=self.last_n_games,
            stabilization_games=self.stabilization_games,
            probability_floor=self.probability_floor,
            probability_ceiling=self.probability_ceiling,
        )


class NbaStatsProvider:
    name = "nba_stats"

    def __init__(
        self,
        *,
        season: str,
        season_type: str = "Regular Season",
        min_games: int = 5,
        last_n_games: int | None = None,
        stabilization_games: float = 10.0,
        probability_floor: float = 0.01,
        probability_ceiling: float = 0.99,
    ) -> None:
        self.season = season
        self.season_type = season_type
        self.min_games = min_games
        self.last_n_games = last_n_games
        self.stabilization_games = stabilization_games
        self.probability_floor = probability_floor
        self.probability_ceiling = probability_ceiling

    def fetch_rows(self) -> list[dict[str, Any]]:
        payload = fetch_player_gamelogs(season=self.season, season_type=self.season_type)
        result = validate_nba_stats_response(payload)
        log_validation(self.name, valid=result.valid, errors=result.errors, warnings=result.warnings)
        if not result.valid:
            raise StatsUnavailableError(f"Invalid NBA stats payload: {'; '.join(result.errors)}")
        rows = extract_result_rows(payload, "PlayerGameLogs")
        return normalize_player_gamelogs(rows, season=self.season, season_type=self.season_type)

    def fetch_player_stats(self) -> list[PlayerPropData]:
        logs = dedupe_game_logs(game_log_from_row(row) for row in self.fetch_rows())
        return build_player_props(
            logs,
            min_games=self.min_games,
            last_n_games=self.last_n_games,
            stabilization_games=self.stabilization_games,
            probability_floor=self.probability_floor,
            probability_ceiling=self.probability_ceiling,
        )


def get_stats_provider(config: Settings) -> StatsProvider:
    source = (config.stats_source or "json").strip().lower()
    pricing = {
        "min_games": config.min_games,
        "last_n_games": config.last_n_games,
        "stabilization_games": config.stabilization_games,
        "probability_floor": config.probability_floor,
        "probability_ceiling": config.probability_ceiling,
    }
    if source == "json":
        return JsonStatsProvider(config.player_stats_path)
    if source in {"gamelogs", "game_logs", "jsonl"}:
        return GameLogStatsProvider(discover_game_log_files(config.game_logs_dir), **pricing)
    if source in {"nba_stats", "nba", "live"}:
        return NbaStatsProvider(
            season=config.nba_season or current_season(),
            season_type=config.nba_season_type,
            **pricing,
        )
    raise ValueError(f"Unknown stats source: {config.stats_source!r}")
