"""
Team defense (DEF) records.

Team defenses are not provider rows: they are synthesized from the weekly team
stats, with points allowed taken from the official schedule scores.
"""
from __future__ import annotations

import pandas as pd

from ..io.sources import safe_rename
from ..io.validation import validate_required_columns, validate_unique_keys
from ..scoring import defense_points
from .players import fill_counters


SCHEDULE_REQUIRED = ["season", "week", "game_type", "home_team", "away_team", "home_score", "away_score"]

TEAM_STATS_COLUMN_MAP = {
    "season": "season",
    "week": "week",
    "team": "team",
    "recent_team": "team",
    "opponent_team": "opponent_team",
    "def_sacks": "sacks",
    "def_interceptions": "interceptions",
    "def_fumbles_forced": "fumbles_forced",
    "fumble_recovery_opp": "fumbles_recovered",
    "fumble_recovery_own": "fumbles_recovered",
    "def_tds": "def_tds",
    "special_teams_tds": "special_teams_tds",
    "def_safeties": "safeties",
}

DEFENSE_COLUMNS = [
    "season", "week", "player_id", "player_name", "position", "team", "opponent_team",
    "sacks", "interceptions", "fumbles_forced", "fumbles_recovered", "defensive_tds",
    "safeties", "points_allowed", "fantasy_points_ppr",
]


def points_allowed_from_schedules(schedules: pd.DataFrame) -> pd.DataFrame:
    """
    Points allowed per team-game from official schedule scores.

    Only completed regular season games are used. The home team allows the
    away score and the away team allows the home score.

    Returns
    -------
    pd.DataFrame
        Columns: season, week, team, schedule_opponent, points_allowed
    """
    validate_required_columns(schedules, SCHEDULE_REQUIRED, table_name="schedules")

    games = schedules[
        (schedules["game_type"] == "REG")
        & schedules["home_score"].notna()
        & schedules["away_score"].notna()
    ]

    home = pd.DataFrame({
        "season": games["season"],
        "week": games["week"],
        "team": games["home_team"],
        "schedule_opponent": games["away_team"],
        "points_allowed": games["away_score"],
    })
    away = pd.DataFrame({
        "season": games["season"],
        "week": games["week"],
        "team": games["away_team"],
        "schedule_opponent": games["home_team"],
        "points_allowed": games["home_score"],
    })

    result = pd.concat([home, away], ignore_index=True)
    result["season"] = result["season"].astype(int)
    result["week"] = result["week"].astype(int)
    result["points_allowed"] = pd.to_numeric(result["points_allowed"]).astype(int)

    validate_unique_keys(result, ["season", "week", "team"], table_name="points_allowed")
    return result.sort_values(["season", "week", "team"]).reset_index(drop=True)


def build_team_defense(
    team_stats: pd.DataFrame,
    points_allowed: pd.DataFrame | None = None,
    count_fumbles_forced: bool = False,
) -> pd.DataFrame:
    """
    Build one DEF row per (season, week, team).

    Parameters
    ----------
    team_stats : pd.DataFrame
        nflverse weekly team stats
    points_allowed : pd.DataFrame, optional
        Output of points_allowed_from_schedules; missing games leave
        points_allowed null, which scores the -4 points-allowed floor
    count_fumbles_forced : bool
        Score forced fumbles (+1 each) and keep the fumbles_forced field

    Returns
    -------
    pd.DataFrame
        DEFENSE_COLUMNS (fumbles_forced only when scored)
    """
    df = safe_rename(team_stats, TEAM_STATS_COLUMN_MAP)
    validate_required_columns(df, ["season", "week", "team"], table_name="team_stats")

    df = df[df["week"].notna() & df["team"].notna()].copy()
    df["season"] = df["season"].astype(int)
    df["week"] = df["week"].astype(int)
    validate_unique_keys(df, ["season", "week", "team"], table_name="team_stats")

    if points_allowed is not None and not points_allowed.empty:
        df = df.merge(
            points_allowed[["season", "week", "team", "schedule_opponent", "points_allowed"]],
            on=["season", "week", "team"],
            how="left",
            validate="one_to_one",
        )
        if "opponent_team" in df.columns:
            df["opponent_team"] = df["opponent_team"].where(
                df["opponent_team"].notna(), df["schedule_opponent"]
            )
        else:
            df["opponent_team"] = df["schedule_opponent"]
        df = df.drop(columns=["schedule_opponent"])
    else:
        df["points_allowed"] = pd.NA

    if "opponent_team" not in df.columns:
        df["opponent_team"] = pd.NA

    counters = ["sacks", "interceptions", "fumbles_forced", "fumbles_recovered",
                "def_tds", "special_teams_tds", "safeties"]
    for col in counters:
        if col not in df.columns:
            df[col] = 0
    df = fill_counters(df, counters)

    df["defensive_tds"] = df["def_tds"] + df["special_teams_tds"]
    df["player_id"] = "DEF_" + df["team"].astype(str)
    df["player_name"] = df["team"].astype(str) + " DEF"
    df["position"] = "DEF"
    df["points_allowed"] = pd.to_numeric(df["points_allowed"], errors="coerce").astype("Int64")
    df["fantasy_points_ppr"] = defense_points(df, count_fumbles_forced=count_fumbles_forced)

    columns = [c for c in DEFENSE_COLUMNS if count_fumbles_forced or c != "fumbles_forced"]
    return df[columns].sort_values(["season", "week", "team"]).reset_index(drop=True)
