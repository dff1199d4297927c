import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from parlay_picker.core.config import settings  # noqa: E402
from parlay_picker.modeling.game_logs import discover_game_log_files  # noqa: E402
from parlay_picker.modeling.types import StatCategory  # noqa: E402
from parlay_picker.services.builder import PropsBuilder  # noqa: E402
from parlay_picker.services.providers import (  # noqa: E402
    GameLogStatsProvider,
    JsonStatsProvider,
    get_stats_provider,
)
from parlay_picker.services.rendering import render_parlay_table, render_player_rows  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description="Print every 3-leg player prop parlay, highest probability first.")
    parser.add_argument("--player-stats", default=None, help="JSON file of player stat records.")
    parser.add_argument("--game-logs-dir", default=None, help="Directory of nba_player_gamelogs_*.jsonl files.")
    parser.add_argument("--top", type=int, default=25, help="Number of parlays to show.")
    parser.add_argument("--min-probability", type=float, default=0.0)
    parser.add_argument(
        "--show-players",
        action="store_true",
        help="Print the top players per category before the parlay table.",
    )
    args = parser.parse_args()

    if args.player_stats:
        provider = JsonStatsProvider(args.player_stats)
    elif args.game_logs_dir:
        provider = GameLogStatsProvider(
            discover_game_log_files(args.game_logs_dir),
            min_games=settings.min_games,
            last_n_games=settings.last_n_games,
            stabilization_games=settings.stabilization_games,
            probability_floor=settings.probability_floor,
            probability_ceiling=settings.probability_ceiling,
        )
    else:
        provider = get_stats_provider(settings)

    builder = PropsBuilder(max_legs=settings.max_legs, top_players_limit=settings.top_players_limit)
    if not builder.load_player_stats(provider):
        print(builder.error_message)
        sys.exit(1)

    if args.show_players:
        for category in StatCategory:
            builder.set_category(category)
            print(render_player_rows(builder.top_players, category))
            print()

    parlays = builder.generate_all_combinations(min_probability=args.min_probability)
    print(render_parlay_table(parlays[: args.top], total=len(parlays)))


if __name__ == "__main__":
    main()
