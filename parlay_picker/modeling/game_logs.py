"""Player game logs stored as ``nba_player_gamelogs_<season>.jsonl`` files."""
from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any, Iterable, Iterator

from parlay_picker.modeling.name_utils import normalize_player_name
from parlay_picker.modeling.types import PlayerGameLog

GAME_LOG_PATTERN = "nba_player_gamelogs_*.jsonl"


def _iter_jsonl(path: Path) -> Iterator[dict[str, Any]]:
    """Rows of a JSONL file; a line that isn't a JSON object raises ``ValueError``."""
    if not path.exists():
        return
    with path.open("r", encoding="utf-8") as handle:
        for lineno, raw in enumerate(handle, start=1):
            if not raw.strip():
                continue
            try:
                row = json.loads(raw)
            except json.JSONDecodeError as exc:
                raise ValueError(f"{path}:{lineno}: {exc.msg}") from exc
            if not isinstance(row, dict):
                raise ValueError(f"{path}:{lineno}: expected a JSON object")
            yield row


def _to_date(value: Any) -> date | None:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        return None


def game_log_from_row(row: dict[str, Any]) -> PlayerGameLog:
    raw_id = row.get("player_id")
    return PlayerGameLog(
        player_id=str(raw_id) if raw_id else None,
        player_name=row.get("player_name"),
        game_date=_to_date(row.get("game_date")),
        stats=row.get("stats") or {},
    )


def load_game_logs(paths: Iterable[str | Path]) -> list[PlayerGameLog]:
    return [game_log_from_row(row) for path in paths for row in _iter_jsonl(Path(path))]


def discover_game_log_files(directory: str | Path = "data/official") -> list[Path]:
    root = Path(directory)
    return sorted(root.glob(GAME_LOG_PATTERN)) if root.is_dir() else []


def _player_key(log: PlayerGameLog) -> str:
    return log.player_id or normalize_player_name(log.player_name)


def dedupe_game_logs(logs: Iterable[PlayerGameLog]) -> list[PlayerGameLog]:
    """First log wins per (player, game date); logs with no player identity are dropped."""
    kept: dict[tuple[str, date | None], PlayerGameLog] = {}
    for log in logs:
        key = _player_key(log)
        if key:
            kept.setdefault((key, log.game_date), log)
    return list(kept.values())
