import argparse
import sys
import time
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from parlay_picker.clients.logging import log_run_summary, set_log_path  # noqa: E402
from parlay_picker.collectors.nba_stats import write_jsonl  # noqa: E402
from parlay_picker.core.config import settings  # noqa: E402
from parlay_picker.services.providers import NbaStatsProvider, current_season  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description="Fetch NBA player game logs into a JSONL file.")
    parser.add_argument("--season", default=None, help="Season like 2025-26")
    parser.add_argument("--season-type", default=settings.nba_season_type)
    parser.add_argument(
        "--output-dir",
        default=settings.game_logs_dir,
        help="Directory for nba_player_gamelogs_<season>.jsonl.",
    )
    args = parser.parse_args()

    started = time.monotonic()
    set_log_path(settings.collection_log_path)

    season = args.season or settings.nba_season or current_season()
    provider = NbaStatsProvider(season=season, season_type=args.season_type)
    rows = provider.fetch_rows()
    output = write_jsonl(rows, Path(args.output_dir) / f"nba_player_gamelogs_{season}.jsonl")

    log_run_summary(
        "nba_stats",
        duration_seconds=time.monotonic() - started,
        counts={"rows_fetched": len(rows)},
    )
    print({"season": season, "rows": len(rows), "output": str(output)})


if __name__ == "__main__":
    main()
