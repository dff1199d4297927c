"""Turn stats.nba.com ``resultSets`` payloads into game-log rows."""
from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable

# normalized key -> stats.nba.com header
IDENTITY_COLUMNS = {
    "player_id": "PLAYER_ID",
    "player_name": "PLAYER_NAME",
    "team_abbreviation": "TEAM_ABBREVIATION",
    "game_id": "GAME_ID",
    "matchup": "MATCHUP",
}
_DATE_FORMATS = ("%b %d, %Y", "%Y-%m-%d")


def _result_sets(payload: dict[str, Any]) -> list[dict[str, Any]]:
    many = payload.get("resultSets")
    if isinstance(many, list):
        return [item for item in many if isinstance(item, dict)]
    single = payload.get("resultSet")
    return [single] if isinstance(single, dict) else []


def _zip_rows(headers: list[str], rows: Iterable[Any]) -> list[dict[str, Any]]:
    return [dict(zip(headers, row)) for row in rows if isinstance(row, (list, tuple))]


def parse_stats_payload(payload: dict[str, Any]) -> list[dict[str, Any]]:
    return [
        {"name": result.get("name"), "rows": _zip_rows(result.get("headers") or [], result.get("rowSet") or [])}
        for result in _result_sets(payload)
    ]


def extract_result_rows(payload: dict[str, Any], result_name: str) -> list[dict[str, Any]]:
    return next((result["rows"] for result in parse_stats_payload(payload) if result["name"] == result_name), [])


def _iso_game_date(raw: Any) -> str | None:
    if not isinstance(raw, str):
        return None
    try:
        return datetime.fromisoformat(raw.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt).date().isoformat()
        except ValueError:
            continue
    return None


def normalize_player_gamelogs(
    rows: Iterable[dict[str, Any]],
    *,
    season: str | None = None,
    season_type: str | None = None,
) -> list[dict[str, Any]]:
    """One JSONL-ready record per row; the raw box score stays under ``stats``."""
    normalized = []
    for row in rows:
        record = {key: row.get(column) for key, column in IDENTITY_COLUMNS.items()}
        record.update(
            game_date=_iso_game_date(row.get("GAME_DATE")),
            season=season,
            season_type=season_type,
            stats=row,
        )
        normalized.append(record)
    return normalized


def write_jsonl(rows: Iterable[dict[str, Any]], path: str | Path) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open("w", encoding="utf-8") as handle:
        handle.writelines(json.dumps(row, separators=(",", ":"), ensure_ascii=False) + "\n" for row in rows)
    return target
