"""
Sleeper fantasy scoring for kickers and team defenses.

Skill-position points come straight from the provider's PPR column; only
kickers and defenses are scored here.
"""
from __future__ import annotations

from typing import Dict, Optional

import numpy as np
import pandas as pd


KICKER_POINTS: Dict[str, float] = {
    "fg_0_19": 3,
    "fg_20_29": 3,
    "fg_30_39": 3,
    "fg_40_49": 4,
    "fg_50_59": 5,
    "fg_60p": 5,
    "pat_made": 1,
    "fg_missed": -1,
    "pat_missed": -1,
}

DEFENSE_POINTS: Dict[str, float] = {
    "sacks": 1,
    "interceptions": 2,
    "fumbles_recovered": 2,
    "defensive_tds": 6,
    "safeties": 2,
}

FUMBLE_FORCED_POINTS = 1

# (upper bound inclusive, points); anything above the last bound scores -4
POINTS_ALLOWED_TIERS = (
    (0, 10),
    (6, 7),
    (13, 4),
    (20, 1),
    (27, 0),
    (34, -1),
)
POINTS_ALLOWED_FLOOR = -4


def _counter(df: pd.DataFrame, col: str) -> pd.Series:
    if col not in df.columns:
        return pd.Series(0.0, index=df.index)
    return pd.to_numeric(df[col], errors="coerce").fillna(0)


def points_allowed_bucket(points_allowed: Optional[float]) -> int:
    """
    Points-allowed tier for a single game.

    >>> points_allowed_bucket(0), points_allowed_bucket(6), points_allowed_bucket(35)
    (10, 7, -4)

    A missing value (postseason or unscored game) falls through to the floor.
    """
    if points_allowed is None or pd.isna(points_allowed):
        return POINTS_ALLOWED_FLOOR
    for upper, points in POINTS_ALLOWED_TIERS:
        if points_allowed <= upper:
            return points
    return POINTS_ALLOWED_FLOOR


def points_allowed_bucket_series(points_allowed: pd.Series) -> pd.Series:
    """Vectorised points_allowed_bucket; NaN matches no tier and scores the floor."""
    values = pd.to_numeric(points_allowed, errors="coerce").astype("float64").to_numpy()
    conditions = [values <= upper for upper, _ in POINTS_ALLOWED_TIERS]
    choices = [points for _, points in POINTS_ALLOWED_TIERS]
    return pd.Series(
        np.select(conditions, choices, default=POINTS_ALLOWED_FLOOR),
        index=points_allowed.index,
    ).astype(int)


def kicker_points(df: pd.DataFrame) -> pd.Series:
    """
    Sleeper kicker points for every row of `df`.

    Missing kicking counters count as zero.
    """
    total = pd.Series(0.0, index=df.index)
    for col, weight in KICKER_POINTS.items():
        total = total + weight * _counter(df, col)
    return total


def defense_points(df: pd.DataFrame, count_fumbles_forced: bool = False) -> pd.Series:
    """
    Sleeper team defense points.

    Expects the defense record columns (sacks, interceptions, fumbles_recovered,
    defensive_tds, safeties, points_allowed). `defensive_tds` already includes
    special teams touchdowns.
    """
    total = pd.Series(0.0, index=df.index)
    for col, weight in DEFENSE_POINTS.items():
        total = total + weight * _counter(df, col)
    if count_fumbles_forced:
        total = total + FUMBLE_FORCED_POINTS * _counter(df, "fumbles_forced")

    if "points_allowed" in df.columns:
        total = total + points_allowed_bucket_series(df["points_allowed"])
    return total


def apply_kicker_scoring(df: pd.DataFrame) -> pd.DataFrame:
    """
    Overwrite fantasy_points_ppr with kicker points for position == "K".

    Other rows keep the provider's value; a missing value becomes 0.
    """
    df = df.copy()
    if "fantasy_points_ppr" not in df.columns:
        df["fantasy_points_ppr"] = 0.0
    df["fantasy_points_ppr"] = pd.to_numeric(df["fantasy_points_ppr"], errors="coerce")

    if "position" in df.columns:
        is_kicker = df["position"] == "K"
        if is_kicker.any():
            df.loc[is_kicker, "fantasy_points_ppr"] = kicker_points(df.loc[is_kicker])

    df["fantasy_points_ppr"] = df["fantasy_points_ppr"].fillna(0)
    return df
