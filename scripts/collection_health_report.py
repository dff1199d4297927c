"""Summarize the structured event log.

Usage:
    python -m scripts.collection_health_report [--log-path logs/collection.jsonl] [--hours 24] [--json]
"""
from __future__ import annotations

import argparse
import json
import sys

from parlay_picker.clients.logging import generate_health_report
from parlay_picker.core.config import settings

ERROR_RATE_ALERT = 0.3


def _format_source(name: str, counters: dict) -> str:
    return (
        f"{name:<12} requests={counters['requests']:<5} errors={counters['errors']:<4} "
        f"invalid={counters['validation_failures']:<3} loads={counters['stats_loads']:<3} "
        f"parlay_runs={counters['parlay_runs']:<3} avg_ms={counters['avg_elapsed_ms']}"
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Stats load and parlay generation health report")
    parser.add_argument("--log-path", default=settings.collection_log_path)
    parser.add_argument("--hours", type=int, default=24)
    parser.add_argument("--json", action="store_true", help="Print the raw report as JSON.")
    args = parser.parse_args()

    report = generate_health_report(args.log_path, hours=args.hours)
    if "error" in report:
        print(f"{report['error']}: {report['path']}", file=sys.stderr)
        sys.exit(1)

    sources = report["sources"]
    if args.json:
        print(json.dumps(report, indent=2))
    else:
        print(f"Events in the last {args.hours}h")
        for name in sorted(sources):
            print(_format_source(name, sources[name]))

    for name, counters in sources.items():
        if counters["error_rate"] > ERROR_RATE_ALERT:
            print(f"WARNING: {name} error rate {counters['error_rate']:.1%} (last: {counters['last_error']})", file=sys.stderr)


if __name__ == "__main__":
    main()
