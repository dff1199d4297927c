import json

import pytest

from parlay_picker.clients import logging as collection_logging


@pytest.fixture
def log_path(tmp_path):
    path = tmp_path / "logs" / "events.jsonl"
    collection_logging.set_log_path(path)
    yield path
    collection_logging.set_log_path(None)


def test_events_are_written_as_json_lines(log_path):
    collection_logging.log_request_start("nba_stats", "https://example.test", attempt=1)
    collection_logging.log_stats_loaded("json", players=12, elapsed_ms=5.0)
    lines = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert [line["event"] for line in lines] == ["request_start", "stats_loaded"]
    assert lines[1]["players"] == 12
    assert lines[1]["elapsed_ms"] == 5.0
    assert "ts" in lines[0]


def test_disabled_log_path_writes_nothing(tmp_path):
    collection_logging.set_log_path(None)
    collection_logging.log_parlays_generated(candidates=3, combinations=1, elapsed_ms=1.0)
    assert list(tmp_path.iterdir()) == []


def test_health_report_summarizes_sources(log_path):
    collection_logging.log_request_end("nba_stats", "u", status_code=200, elapsed_ms=100.0, attempt=1)
    collection_logging.log_request_end("nba_stats", "u", status_code=200, elapsed_ms=300.0, attempt=1)
    collection_logging.log_request_error("nba_stats", "u", error="timeout", attempt=2)
    collection_logging.log_validation("json", valid=False, errors=["bad"])
    collection_logging.log_stats_loaded("json", players=0, elapsed_ms=1.0, error="missing file")
    collection_logging.log_parlays_generated(candidates=80, combinations=79040, elapsed_ms=250.0)
    with log_path.open("a", encoding="utf-8") as handle:
        handle.write("not json\n")

    report = collection_logging.generate_health_report(log_path)
    nba = report["sources"]["nba_stats"]
    assert nba["requests"] == 2
    assert nba["errors"] == 1
    assert nba["avg_elapsed_ms"] == 200.0
    assert nba["last_error"] == "timeout"
    assert nba["error_rate"] == pytest.approx(0.333)

    json_source = report["sources"]["json"]
    assert json_source["validation_failures"] == 1
    assert json_source["stats_loads"] == 1
    assert json_source["last_error"] == "missing file"
    assert report["sources"]["builder"]["parlay_runs"] == 1


def test_health_report_missing_file(tmp_path):
    report = collection_logging.generate_health_report(tmp_path / "missing.jsonl")
    assert report["error"] == "Log file not found"
