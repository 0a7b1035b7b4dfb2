"""
Command-line interface for the weekly stats feed.

Usage:
    python -m fantasy_feed.cli
    python -m fantasy_feed.cli --season 2024
    python -m fantasy_feed.cli --config export.yaml --output-name weekly_stats.json
    SEASON=2023 python -m fantasy_feed.cli --no-injuries

Season precedence: --season (or config file `season`) > SEASON env var >
min(current year, most recent season).

Options:
    --season: Season year (optional)
    --config: JSON or YAML config file (optional)
    --data-dir: Output directory (default: "data")
    --output-name: File name, may contain {season} (default: player_stats_{season}.json)
    --cache-dir: Read <table>_<season>.parquet from here before hitting the network
    --player-source: stats_player (default) or weekly
    --injury-join: id_then_name (default), id or name
    --no-injuries / --no-defense / --rosters: toggle optional sources
    --count-fumbles-forced: Score forced fumbles for DEF
    --no-log: Skip the run log
    --quiet: Only print errors
"""
from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from .config import ExportConfig, INJURY_JOIN_POLICIES, PLAYER_STATS_SOURCES, load_export_config
from .pipeline import run_export


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Export weekly NFL fantasy stats to JSON.")
    parser.add_argument("--season", type=int, default=None, help="Season year, e.g. 2024")
    parser.add_argument("--config", type=str, default=None, help="JSON or YAML config file")
    parser.add_argument("--data-dir", type=str, default=None, help="Output directory (default: data)")
    parser.add_argument(
        "--output-name",
        type=str,
        default=None,
        help="Output file name; {season} is substituted (default: player_stats_{season}.json)",
    )
    parser.add_argument("--cache-dir", type=str, default=None, help="Directory of cached provider parquet files")
    parser.add_argument("--player-source", choices=PLAYER_STATS_SOURCES, default=None)
    parser.add_argument("--injury-join", choices=INJURY_JOIN_POLICIES, default=None)
    parser.add_argument("--no-injuries", action="store_true", help="Skip the injury report join")
    parser.add_argument("--no-defense", action="store_true", help="Skip team defense records")
    parser.add_argument("--rosters", action="store_true", help="Backfill headshots/positions from rosters")
    parser.add_argument("--count-fumbles-forced", action="store_true", help="Score forced fumbles for DEF")
    parser.add_argument("--no-log", action="store_true", help="Do not write the run log")
    parser.add_argument("--quiet", action="store_true", help="Only print errors")
    return parser


def config_from_args(args: argparse.Namespace) -> ExportConfig:
    config = load_export_config(args.config) if args.config else ExportConfig()
    return config.with_overrides(**{
        "season": args.season,
        "verbose": False if args.quiet else None,
        "output.data_dir": args.data_dir,
        "output.name_template": args.output_name,
        "output.write_log": False if args.no_log else None,
        "sources.cache_dir": args.cache_dir,
        "sources.player_stats_source": args.player_source,
        "sources.injury_join": args.injury_join,
        "sources.injuries": False if args.no_injuries else None,
        "sources.team_defense": False if args.no_defense else None,
        "sources.rosters": True if args.rosters else None,
        "scoring.count_fumbles_forced": True if args.count_fumbles_forced else None,
    })


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
        run_export(config)
    except Exception as e:
        print(f"  ✗ weekly stats export: FAILED - {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
