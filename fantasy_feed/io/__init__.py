"""
Provider loading and feed output.

Responsibilities:
- Load season-scoped nflverse tables (player stats, team stats, schedules, injuries, rosters)
- Validate required columns and join keys
- Write the JSON feed and its run log
"""

from .sources import (
    SeasonTables,
    safe_rename,
    load_player_stats,
    load_team_stats,
    load_schedules,
    load_injuries,
    load_rosters,
    load_season_tables,
)

from .validation import validate_required_columns, validate_unique_keys

from .json_writer import output_path, write_records_json, emit_run_log

__all__ = [
    "SeasonTables",
    "safe_rename",
    "load_player_stats",
    "load_team_stats",
    "load_schedules",
    "load_injuries",
    "load_rosters",
    "load_season_tables",
    "validate_required_columns",
    "validate_unique_keys",
    "output_path",
    "write_records_json",
    "emit_run_log",
]
