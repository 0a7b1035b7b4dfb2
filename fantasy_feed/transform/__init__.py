"""
Transform stage: player preparation, injury enrichment and team defense records.
"""

from .players import prepare_player_stats, backfill_from_rosters, fill_counters
from .injuries import attach_injury_status, normalize_name_key, prepare_injuries
from .defense import points_allowed_from_schedules, build_team_defense

__all__ = [
    "prepare_player_stats",
    "backfill_from_rosters",
    "fill_counters",
    "attach_injury_status",
    "normalize_name_key",
    "prepare_injuries",
    "points_allowed_from_schedules",
    "build_team_defense",
]
