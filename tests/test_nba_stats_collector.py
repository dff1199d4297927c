import json

import pytest

from parlay_picker.clients import nba_stats as nba_stats_client
from parlay_picker.collectors.nba_stats import (
    extract_result_rows,
    normalize_player_gamelogs,
    parse_stats_payload,
    write_jsonl,
)
from parlay_picker.core.errors import StatsUnavailableError

PAYLOAD = {
    "resultSets": [
        {
            "name": "PlayerGameLogs",
            "headers": ["PLAYER_ID", "PLAYER_NAME", "GAME_DATE", "PTS", "FG3M", "AST", "REB"],
            "rowSet": [
                [2544, "LeBron James", "2025-01-15T00:00:00", 28, 2, 9, 7],
                [201939, "Stephen Curry", "JAN 14, 2025", 31, 6, 5, 4],
                "garbage",
            ],
        }
    ]
}


def test_parse_and_extract_rows():
    parsed = parse_stats_payload(PAYLOAD)
    assert parsed[0]["name"] == "PlayerGameLogs"
    rows = extract_result_rows(PAYLOAD, "PlayerGameLogs")
    assert len(rows) == 2
    assert rows[0]["PTS"] == 28
    assert extract_result_rows(PAYLOAD, "Missing") == []
    assert parse_stats_payload({}) == []


def test_normalize_player_gamelogs_iso_dates():
    rows = normalize_player_gamelogs(extract_result_rows(PAYLOAD, "PlayerGameLogs"), season="2024-25")
    assert rows[0]["game_date"] == "2025-01-15"
    assert rows[1]["game_date"] == "2025-01-14"
    assert rows[0]["season"] == "2024-25"
    assert rows[1]["stats"]["FG3M"] == 6


def test_write_jsonl(tmp_path):
    path = write_jsonl([{"a": 1}, {"b": "é"}], tmp_path / "out" / "rows.jsonl")
    lines = path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line) for line in lines] == [{"a": 1}, {"b": "é"}]


class _FakeResponse:
    status_code = 200

    def __init__(self, payload):
        self._payload = payload

    def raise_for_status(self):
        return None

    def json(self):
        return self._payload


def test_fetch_player_gamelogs_retries_then_succeeds(monkeypatch):
    calls = []

    def fake_get(url, **kwargs):
        calls.append((url, kwargs["params"]))
        if len(calls) == 1:
            raise ConnectionError("reset")
        return _FakeResponse(PAYLOAD)

    monkeypatch.setattr(nba_stats_client.curl_requests, "get", fake_get)
    monkeypatch.setattr(nba_stats_client.settings, "nba_stats_max_retries", 3)
    monkeypatch.setattr(nba_stats_client.time, "sleep", lambda _: None)

    payload = nba_stats_client.fetch_player_gamelogs(season="2024-25", date_from="2025-01-01")
    assert payload is PAYLOAD
    assert len(calls) == 2
    assert calls[0][0].endswith("/playergamelogs")
    assert calls[0][1]["Season"] == "2024-25"
    assert calls[0][1]["DateFrom"] == "01/01/2025"


def test_fetch_player_gamelogs_raises_after_last_attempt(monkeypatch):
    def fake_get(url, **kwargs):
        raise TimeoutError("slow")

    monkeypatch.setattr(nba_stats_client.curl_requests, "get", fake_get)
    monkeypatch.setattr(nba_stats_client.settings, "nba_stats_max_retries", 2)
    monkeypatch.setattr(nba_stats_client.time, "sleep", lambda _: None)

    with pytest.raises(StatsUnavailableError):
        nba_stats_client.fetch_player_gamelogs(season="2024-25")
