import json
from datetime import date

import pytest

from parlay_picker.modeling.game_logs import (
    dedupe_game_logs,
    discover_game_log_files,
    game_log_from_row,
    load_game_logs,
)


def _write_jsonl(path, rows):
    path.write_text("\n".join(json.dumps(row) for row in rows) + "\n\n", encoding="utf-8")


def test_game_log_from_row_parses_dates_and_ids():
    log = game_log_from_row({"player_id": 23, "player_name": "A B", "game_date": "2025-01-02", "stats": {"PTS": 9}})
    assert log.player_id == "23"
    assert log.game_date == date(2025, 1, 2)
    assert log.stats == {"PTS": 9}

    bad = game_log_from_row({"player_name": "A B", "game_date": "not-a-date"})
    assert bad.player_id is None
    assert bad.game_date is None
    assert bad.stats == {}


def test_load_and_discover_game_logs(tmp_path):
    first = tmp_path / "nba_player_gamelogs_2024-25.jsonl"
    _write_jsonl(first, [{"player_id": 1, "player_name": "A B", "game_date": "2025-01-01", "stats": {"PTS": 10}}])
    (tmp_path / "other.jsonl").write_text("", encoding="utf-8")

    files = discover_game_log_files(tmp_path)
    assert files == [first]
    logs = load_game_logs(files + [tmp_path / "missing.jsonl"])
    assert len(logs) == 1
    assert discover_game_log_files(tmp_path / "nope") == []


def test_dedupe_keeps_first_log_per_player_and_date():
    rows = [
        {"player_id": 1, "player_name": "A B", "game_date": "2025-01-01", "stats": {"PTS": 10}},
        {"player_id": 1, "player_name": "A B", "game_date": "2025-01-01", "stats": {"PTS": 99}},
        {"player_id": 1, "player_name": "A B", "game_date": "2025-01-02", "stats": {"PTS": 12}},
        {"player_name": "", "game_date": "2025-01-02", "stats": {}},
    ]
    logs = dedupe_game_logs(game_log_from_row(row) for row in rows)
    assert [log.stats["PTS"] for log in logs] == [10, 12]


def test_load_game_logs_reports_bad_line_number(tmp_path):
    path = tmp_path / "nba_player_gamelogs_2024-25.jsonl"
    path.write_text('{"player_id": 1}\n\n"just a string"\n', encoding="utf-8")
    with pytest.raises(ValueError, match=":3: expected a JSON object"):
        load_game_logs([path])
