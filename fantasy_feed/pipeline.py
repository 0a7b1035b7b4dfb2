"""
Weekly stats export pipeline.

Stages:
1. Resolve the season
2. Load provider tables
3. Build player and team defense records
4. Write the JSON feed (and its run log)

Nothing is written unless every stage succeeds.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import ExportConfig
from .io.json_writer import emit_run_log, output_path, write_records_json
from .io.sources import SeasonTables, load_season_tables
from .schemas import project_frame
from .season import resolve_season
from .transform.defense import build_team_defense, points_allowed_from_schedules
from .transform.injuries import attach_injury_status
from .transform.players import backfill_from_rosters, prepare_player_stats


@dataclass
class ExportResult:
    season: int
    output_path: Path
    player_records: int
    defense_records: int
    log_path: Optional[Path] = None


def build_player_records(tables: SeasonTables, config: ExportConfig) -> List[Dict[str, Any]]:
    players = prepare_player_stats(tables.player_stats)

    if config.sources.rosters and tables.rosters is not None:
        players = backfill_from_rosters(players, tables.rosters)

    if config.sources.injuries:
        players = attach_injury_status(players, tables.injuries, policy=config.sources.injury_join)

    return project_frame(players)


def build_defense_records(tables: SeasonTables, config: ExportConfig) -> List[Dict[str, Any]]:
    if not config.sources.team_defense:
        return []
    if tables.team_stats is None:
        raise ValueError(f"Team stats are required for DEF records ({tables.season})")

    points_allowed = None
    if tables.schedules is not None:
        points_allowed = points_allowed_from_schedules(tables.schedules)

    defense = build_team_defense(
        tables.team_stats,
        points_allowed,
        count_fumbles_forced=config.scoring.count_fumbles_forced,
    )
    return project_frame(defense)


def build_feed(tables: SeasonTables, config: ExportConfig) -> List[Dict[str, Any]]:
    """Players first, then team defenses."""
    return build_player_records(tables, config) + build_defense_records(tables, config)


def run_export(
    config: ExportConfig,
    tables: Optional[SeasonTables] = None,
) -> ExportResult:
    """
    Run the full export for the configured season.

    Parameters
    ----------
    config : ExportConfig
        Run configuration; config.season overrides the SEASON env variable
    tables : SeasonTables, optional
        Pre-loaded provider tables (skips the network)

    Returns
    -------
    ExportResult
    """
    verbose = config.verbose
    season = tables.season if tables is not None else resolve_season(config.season)

    if tables is None:
        if verbose:
            print(f"Loading official weekly stats for season: {season}")
        tables = load_season_tables(season, config)

    players = build_player_records(tables, config)
    if verbose:
        print(f"  ✓ player records: {len(players)}")

    defenses = build_defense_records(tables, config)
    if verbose and config.sources.team_defense:
        print(f"  ✓ DEF records: {len(defenses)}")

    path = write_records_json(players + defenses, output_path(season, config), indent=config.output.indent)

    log_path = None
    if config.output.write_log:
        injuries_rows = len(tables.injuries) if tables.injuries is not None else None
        log_path = emit_run_log(season, path, len(players), len(defenses), config, injuries_rows)

    if verbose:
        print(f"Success! JSON exported → {path}")

    return ExportResult(
        season=season,
        output_path=path,
        player_records=len(players),
        defense_records=len(defenses),
        log_path=log_path,
    )
