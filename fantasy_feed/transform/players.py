"""
Player-week preparation: provider columns to feed columns, default fill,
kicker scoring and roster backfill.
"""
from __future__ import annotations

from typing import List

import numpy as np
import pandas as pd

from ..io.sources import safe_rename
from ..io.validation import validate_required_columns, validate_unique_keys
from ..schemas import COUNTER_FIELDS
from ..scoring import apply_kicker_scoring


# First matching source wins (see safe_rename)
PLAYER_COLUMN_MAP = {
    "player_id": "player_id",
    "player_name": "player_name",
    "player_display_name": "player_display_name",
    "position": "position",
    "team": "team",
    "recent_team": "team",
    "opponent_team": "opponent_team",
    "headshot_url": "headshot_url",
    "fg_made_0_19": "fg_0_19",
    "fg_made_20_29": "fg_20_29",
    "fg_made_30_39": "fg_30_39",
    "fg_made_40_49": "fg_40_49",
    "fg_made_50_59": "fg_50_59",
    "fg_made_60_": "fg_60p",
}

FUMBLE_COMPONENTS = ("rushing_fumbles", "receiving_fumbles", "sack_fumbles")

REQUIRED_PLAYER_COLUMNS = ["season", "week", "player_id", "position"]


def fill_counters(df: pd.DataFrame, columns: List[str] | None = None) -> pd.DataFrame:
    """
    Treat missing numeric counters as zero.

    Counters whose values are all whole numbers are cast to int64 so the feed
    writes 3, not 3.0.
    """
    df = df.copy()
    columns = list(columns) if columns is not None else [c for c in COUNTER_FIELDS if c in df.columns]
    for col in columns:
        values = pd.to_numeric(df[col], errors="coerce").fillna(0)
        if len(values) and np.all(np.mod(values, 1) == 0):
            values = values.astype("int64")
        df[col] = values
    return df


def prepare_player_stats(weekly: pd.DataFrame) -> pd.DataFrame:
    """
    Turn provider weekly player stats into scored player-week rows.

    Parameters
    ----------
    weekly : pd.DataFrame
        nflverse weekly player stats (stats_player or legacy weekly schema)

    Returns
    -------
    pd.DataFrame
        One row per (season, week, player_id) with:
        - base identity columns (team, opponent_team, headshot_url, ...)
        - fg_0_19 ... fg_60p kicking distance buckets
        - fumbles (derived from fumble components when absent)
        - fantasy_points_ppr (kicker formula for K, provider value otherwise)
    """
    df = safe_rename(weekly, PLAYER_COLUMN_MAP)
    validate_required_columns(df, REQUIRED_PLAYER_COLUMNS, table_name="player_stats")

    df = df[df["week"].notna() & df["player_id"].notna()].copy()
    validate_unique_keys(df, ["season", "week", "player_id"], table_name="player_stats")

    if "fumbles" not in df.columns:
        components = [c for c in FUMBLE_COMPONENTS if c in df.columns]
        if components:
            df["fumbles"] = df[components].apply(pd.to_numeric, errors="coerce").fillna(0).sum(axis=1)

    df = apply_kicker_scoring(df)
    df = fill_counters(df)

    df["season"] = df["season"].astype(int)
    df["week"] = df["week"].astype(int)
    return df.reset_index(drop=True)


ROSTER_COLUMN_MAP = {
    "gsis_id": "player_id",
    "player_id": "player_id",
    "headshot_url": "headshot_url",
    "position": "position",
    "team": "team",
    "season": "season",
    "week": "week",
}
ROSTER_BACKFILL_COLUMNS = ("headshot_url", "position", "team")


def backfill_from_rosters(players: pd.DataFrame, rosters: pd.DataFrame) -> pd.DataFrame:
    """
    Fill missing headshot_url / position / team from weekly rosters.

    Joined on (season, week, player_id); never overwrites provider values and
    never changes the row count.
    """
    if rosters is None or rosters.empty:
        return players

    roster = safe_rename(rosters, ROSTER_COLUMN_MAP)
    validate_required_columns(roster, ["season", "week", "player_id"], table_name="rosters")

    fill_cols = [c for c in ROSTER_BACKFILL_COLUMNS if c in roster.columns]
    if not fill_cols:
        return players

    roster = roster[roster["player_id"].notna() & roster["week"].notna()]
    roster = roster[["season", "week", "player_id"] + fill_cols].copy()
    roster["season"] = roster["season"].astype(int)
    roster["week"] = roster["week"].astype(int)
    roster = roster.drop_duplicates(["season", "week", "player_id"], keep="last")

    merged = players.merge(
        roster.rename(columns={c: f"{c}_roster" for c in fill_cols}),
        on=["season", "week", "player_id"],
        how="left",
        validate="many_to_one",
    )
    for col in fill_cols:
        if col in merged.columns:
            merged[col] = merged[col].where(merged[col].notna(), merged[f"{col}_roster"])
        else:
            merged[col] = merged[f"{col}_roster"]
        merged = merged.drop(columns=[f"{col}_roster"])

    return merged
