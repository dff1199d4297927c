"""JSONL event log for stats loading and parlay generation.

Each call appends one JSON object to the file set with ``set_log_path``. Nothing
is written until a path is set, so library use and tests stay silent.
``generate_health_report`` folds the file back into per-source counters.
"""
from __future__ import annotations

import json
import threading
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator

_EVENT_FILE: Path | None = None
_WRITE_LOCK = threading.Lock()


def set_log_path(path: str | Path | None) -> None:
    global _EVENT_FILE  # noqa: PLW0603
    _EVENT_FILE = Path(path) if path is not None else None
    if _EVENT_FILE is not None:
        _EVENT_FILE.parent.mkdir(parents=True, exist_ok=True)


def record_event(event: str, source: str, **fields: Any) -> None:
    if _EVENT_FILE is None:
        return
    payload = {"ts": datetime.now(timezone.utc).isoformat(), "event": event, "source": source, **fields}
    encoded = json.dumps(payload, default=str)
    with _WRITE_LOCK, _EVENT_FILE.open("a", encoding="utf-8") as handle:
        handle.write(encoded + "\n")


def _ms(value: float) -> float:
    return round(value, 1)


# Upstream HTTP
def log_request_start(source: str, url: str, attempt: int = 1) -> None:
    record_event("request_start", source, url=url, attempt=attempt)


def log_request_end(source: str, url: str, *, status_code: int, elapsed_ms: float, attempt: int) -> None:
    record_event("request_end", source, url=url, status_code=status_code, elapsed_ms=_ms(elapsed_ms), attempt=attempt)


def log_request_error(source: str, url: str, *, error: str, attempt: int) -> None:
    record_event("request_error", source, url=url, error=error, attempt=attempt)


# Payload checks
def log_validation(
    source: str,
    *,
    valid: bool,
    errors: list[str] | None = None,
    warnings: list[str] | None = None,
) -> None:
    record_event("validation", source, valid=valid, errors=list(errors or []), warnings=list(warnings or []))


# Builder
def log_stats_loaded(source: str, *, players: int, elapsed_ms: float, error: str | None = None) -> None:
    record_event("stats_loaded", source, players=players, elapsed_ms=_ms(elapsed_ms), error=error)


def log_parlays_generated(*, candidates: int, combinations: int, elapsed_ms: float) -> None:
    record_event(
        "parlays_generated",
        "builder",
        candidates=candidates,
        combinations=combinations,
        elapsed_ms=_ms(elapsed_ms),
    )


def log_run_summary(
    source: str,
    *,
    duration_seconds: float,
    counts: dict[str, int],
    errors: list[str] | None = None,
) -> None:
    record_event(
        "run_summary",
        source,
        duration_seconds=round(duration_seconds, 2),
        counts=counts,
        errors=list(errors or []),
    )


def _read_events(path: Path, since: float) -> Iterator[dict[str, Any]]:
    with path.open("r", encoding="utf-8") as handle:
        for raw in handle:
            raw = raw.strip()
            if not raw:
                continue
            try:
                entry = json.loads(raw)
                stamp = datetime.fromisoformat(entry["ts"]).timestamp()
            except (json.JSONDecodeError, KeyError, TypeError, ValueError):
                continue
            if stamp >= since:
                yield entry


def _empty_counters() -> dict[str, Any]:
    return {
        "requests": 0,
        "errors": 0,
        "validation_failures": 0,
        "stats_loads": 0,
        "parlay_runs": 0,
        "total_elapsed_ms": 0.0,
        "last_error": None,
    }


def generate_health_report(log_path: str | Path, hours: int = 24) -> dict[str, Any]:
    """Per-source counters for events logged in the last ``hours``."""
    path = Path(log_path)
    if not path.exists():
        return {"error": "Log file not found", "path": str(path)}

    sources: dict[str, dict[str, Any]] = {}
    for entry in _read_events(path, since=time.time() - hours * 3600):
        counters = sources.setdefault(entry.get("source", "unknown"), _empty_counters())
        kind = entry.get("event")
        if kind == "request_end":
            counters["requests"] += 1
            counters["total_elapsed_ms"] += entry.get("elapsed_ms", 0)
        elif kind == "validation" and not entry.get("valid"):
            counters["validation_failures"] += 1
        elif kind == "stats_loaded":
            counters["stats_loads"] += 1
        elif kind == "parlays_generated":
            counters["parlay_runs"] += 1

        failure = entry.get("error") if kind in {"request_error", "stats_loaded"} else None
        if failure:
            counters["errors"] += 1
            counters["last_error"] = failure

    for counters in sources.values():
        requests = counters["requests"]
        attempts = requests + counters["errors"]
        counters["avg_elapsed_ms"] = round(counters["total_elapsed_ms"] / requests, 1) if requests else 0
        counters["error_rate"] = round(counters["errors"] / attempts, 3) if attempts else 0

    return {"hours": hours, "sources": sources}
