"""
Season-scoped loaders for nflverse provider tables.

Tables:
- player_stats: (season, week, player_id) weekly player box scores incl. kicking
- team_stats:   (season, week, team) weekly team box scores incl. defense
- schedules:    (season, game_id) games with final scores
- injuries:     (season, week, team, gsis_id) injury / practice reports
- rosters:      (season, week, team, gsis_id) weekly rosters

Data sources:
- nflverse-data GitHub releases (stats_player, stats_team parquet files)
- nfl_data_py: weekly data, schedules, injuries, rosters

Every loader reads <cache_dir>/<table>_<season>.parquet instead of the network
when that file exists.
"""
from __future__ import annotations

import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd

from ..config import ExportConfig


NFLVERSE_STATS_PLAYER_URL = (
    "https://github.com/nflverse/nflverse-data/releases/download/"
    "stats_player/stats_player_week_{season}.parquet"
)
NFLVERSE_STATS_TEAM_URL = (
    "https://github.com/nflverse/nflverse-data/releases/download/"
    "stats_team/stats_team_week_{season}.parquet"
)

INJURY_COLUMNS: List[str] = [
    "season", "week", "team", "player_id", "player_name", "position",
    "report_status", "practice_status", "date_modified",
]


@dataclass
class SeasonTables:
    """Provider tables loaded for one season."""

    season: int
    player_stats: pd.DataFrame
    team_stats: Optional[pd.DataFrame] = None
    schedules: Optional[pd.DataFrame] = None
    injuries: Optional[pd.DataFrame] = None
    rosters: Optional[pd.DataFrame] = None


def safe_rename(df: pd.DataFrame, column_map: Dict[str, str]) -> pd.DataFrame:
    """
    Rename provider columns, tolerating schema drift between nflverse releases.

    Parameters
    ----------
    df : pd.DataFrame
        Source DataFrame to rename columns
    column_map : dict
        Mapping of {source_column: target_column}. When multiple source columns
        map to the same target, only the first one found (in map order) is kept.

    Returns
    -------
    pd.DataFrame
        DataFrame with renamed columns, no duplicates guaranteed

    Examples
    --------
    >>> df = pd.DataFrame({'team': ['KC'], 'recent_team': ['BUF']})
    >>> list(safe_rename(df, {'team': 'team', 'recent_team': 'team'}).columns)
    ['team']
    """
    df = df.copy()

    target_to_sources: Dict[str, List[str]] = {}
    for src, tgt in column_map.items():
        target_to_sources.setdefault(tgt, []).append(src)

    columns_to_drop = []
    columns_to_rename = {}

    for target, sources in target_to_sources.items():
        existing_sources = [s for s in sources if s in df.columns]
        if not existing_sources:
            continue

        primary_source = existing_sources[0]
        columns_to_rename[primary_source] = target
        columns_to_drop.extend(existing_sources[1:])

        # An unmapped column already named like the target would collide
        if target in df.columns and target not in sources:
            columns_to_drop.append(target)

    if columns_to_drop:
        df = df.drop(columns=columns_to_drop)
    if columns_to_rename:
        df = df.rename(columns=columns_to_rename)

    if df.columns.duplicated().any():
        df = df.loc[:, ~df.columns.duplicated()]

    return df


def _cached_path(cache_dir: Optional[Path | str], table: str, season: int) -> Optional[Path]:
    if cache_dir is None:
        return None
    path = Path(cache_dir) / f"{table}_{season}.parquet"
    return path if path.exists() else None


def _fetch_from_provider(table: str, season: int, source: str = "stats_player") -> pd.DataFrame:
    """Download one provider table for a season."""
    if table == "player_stats" and source == "stats_player":
        return pd.read_parquet(NFLVERSE_STATS_PLAYER_URL.format(season=season))
    if table == "team_stats":
        return pd.read_parquet(NFLVERSE_STATS_TEAM_URL.format(season=season))

    import nfl_data_py as nfl

    if table == "player_stats":
        return nfl.import_weekly_data(years=[season])
    if table == "schedules":
        return nfl.import_schedules(years=[season])
    if table == "injuries":
        return nfl.import_injuries(years=[season])
    if table == "rosters":
        return nfl.import_weekly_rosters(years=[season])
    raise ValueError(f"Unknown provider table: {table}")


def _load_table(
    table: str,
    season: int,
    cache_dir: Optional[Path | str] = None,
    source: str = "stats_player",
) -> pd.DataFrame:
    cached = _cached_path(cache_dir, table, season)

    try:
        if cached is not None:
            df = pd.read_parquet(cached)
        else:
            df = _fetch_from_provider(table, season, source)
    except Exception as e:
        raise ValueError(f"Failed to load {table} for {season}: {e}")

    if df is None:
        raise ValueError(f"Failed to load {table} for {season}: provider returned nothing")
    return df


def load_player_stats(
    season: int,
    source: str = "stats_player",
    cache_dir: Optional[Path | str] = None,
) -> pd.DataFrame:
    """
    Load official weekly player stats for a season.

    Raises
    ------
    ValueError
        If the table cannot be loaded or is empty. The run cannot continue
        without it.
    """
    df = _load_table("player_stats", season, cache_dir, source)
    if len(df) == 0:
        raise ValueError(f"No weekly player stats available for {season}")
    return df


def load_team_stats(season: int, cache_dir: Optional[Path | str] = None) -> pd.DataFrame:
    """Load official weekly team stats (defense and special teams) for a season."""
    df = _load_table("team_stats", season, cache_dir)
    if len(df) == 0:
        raise ValueError(f"No weekly team stats available for {season}")
    return df


def load_schedules(season: int, cache_dir: Optional[Path | str] = None) -> pd.DataFrame:
    """Load the season's schedule with final scores."""
    return _load_table("schedules", season, cache_dir)


def load_rosters(season: int, cache_dir: Optional[Path | str] = None) -> pd.DataFrame:
    """Load weekly rosters for a season."""
    return _load_table("rosters", season, cache_dir)


def load_injuries(season: int, cache_dir: Optional[Path | str] = None) -> pd.DataFrame:
    """
    Load injury reports for a season.

    Injury data only enriches player records, so a failed load is not fatal:
    a UserWarning is emitted and an empty frame with the expected columns is
    returned, which leaves every player "Healthy" / "Full".
    """
    try:
        df = _load_table("injuries", season, cache_dir)
    except ValueError as e:
        warnings.warn(
            f"Injury data unavailable for {season} ({e}). "
            "All players will default to Healthy/Full.",
            UserWarning,
        )
        return pd.DataFrame(columns=INJURY_COLUMNS)

    if len(df) == 0:
        return pd.DataFrame(columns=INJURY_COLUMNS)
    return df


def load_season_tables(season: int, config: ExportConfig) -> SeasonTables:
    """Load the tables the configuration needs, primary table first."""
    sources = config.sources
    cache_dir = sources.cache_dir

    tables = SeasonTables(
        season=season,
        player_stats=load_player_stats(season, sources.player_stats_source, cache_dir),
    )

    if sources.team_defense:
        tables.team_stats = load_team_stats(season, cache_dir)
        tables.schedules = load_schedules(season, cache_dir)

    if sources.injuries:
        tables.injuries = load_injuries(season, cache_dir)

    if sources.rosters:
        tables.rosters = load_rosters(season, cache_dir)

    return tables
