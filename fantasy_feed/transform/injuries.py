"""
Injury report enrichment for player-week rows.

nflverse injury reports carry gsis ids and free-text full names. Records are
matched on the id first; the normalized-name join is best-effort enrichment
for rows the id join could not match, and name keys that are ambiguous within
(season, week, team, position) are never used.
"""
from __future__ import annotations

import warnings

import pandas as pd

from ..io.sources import safe_rename


DEFAULT_REPORT_STATUS = "Healthy"
DEFAULT_PRACTICE_STATUS = "Full"
STATUS_COLUMNS = ["report_status", "practice_status"]

ID_KEYS = ["season", "week", "player_id"]
NAME_KEYS = ["season", "week", "team", "position", "name_key"]

INJURY_COLUMN_MAP = {
    "gsis_id": "player_id",
    "player_id": "player_id",
    "full_name": "full_name",
    "player_name": "full_name",
    "team": "team",
    "position": "position",
    "season": "season",
    "week": "week",
    "report_status": "report_status",
    "practice_status": "practice_status",
    "date_modified": "date_modified",
}


def normalize_name_key(names: pd.Series) -> pd.Series:
    """
    Lowercase and strip every non-alphabetic character.

    >>> normalize_name_key(pd.Series(["Ja'Marr Chase", "D.J. Moore"])).tolist()
    ['jamarrchase', 'djmoore']
    """
    return names.astype("string").str.lower().str.replace(r"[^a-z]", "", regex=True)


def prepare_injuries(injuries: pd.DataFrame) -> pd.DataFrame:
    """
    Reduce injury reports to one row per player-week.

    When a player has several reports in a week the most recently modified
    one wins.
    """
    df = safe_rename(injuries, INJURY_COLUMN_MAP)
    columns = ["season", "week", "team", "position", "player_id", "full_name",
               "report_status", "practice_status", "date_modified"]
    for col in columns:
        if col not in df.columns:
            df[col] = pd.NA
    df = df[columns].copy()

    df = df[df["season"].notna() & df["week"].notna()].copy()
    df["season"] = df["season"].astype(int)
    df["week"] = df["week"].astype(int)
    df["name_key"] = normalize_name_key(df["full_name"])

    if df["date_modified"].notna().any():
        df = df.assign(_modified=pd.to_datetime(df["date_modified"], errors="coerce", utc=True))
        df = df.sort_values("_modified", kind="stable", na_position="first").drop(columns="_modified")

    with_id = df[df["player_id"].notna()].drop_duplicates(ID_KEYS, keep="last")
    without_id = df[df["player_id"].isna()]
    return pd.concat([with_id, without_id], ignore_index=True)


def _join_on_id(players: pd.DataFrame, reports: pd.DataFrame) -> pd.DataFrame:
    lookup = reports[reports["player_id"].notna()][ID_KEYS + STATUS_COLUMNS]
    return players.merge(lookup, on=ID_KEYS, how="left", validate="many_to_one")


def _join_on_name(players: pd.DataFrame, reports: pd.DataFrame) -> pd.DataFrame:
    """Fill status columns still missing on `players` from the name join."""
    lookup = reports[
        reports["name_key"].notna()
        & (reports["name_key"] != "")
        & reports["team"].notna()
        & reports["position"].notna()
    ]
    lookup = lookup[NAME_KEYS + STATUS_COLUMNS]

    # One player can show up as both an id row and a duplicate name row; only
    # distinct players sharing a key make it ambiguous.
    lookup = lookup.drop_duplicates(NAME_KEYS + STATUS_COLUMNS, keep="last")
    ambiguous = lookup.duplicated(NAME_KEYS, keep=False)
    if ambiguous.any():
        warnings.warn(
            f"{int(lookup.loc[ambiguous, NAME_KEYS].drop_duplicates().shape[0])} injury name keys "
            "match more than one report and were skipped.",
            UserWarning,
        )
        lookup = lookup[~ambiguous]

    merged = players.merge(
        lookup.rename(columns={c: f"{c}_by_name" for c in STATUS_COLUMNS}),
        on=NAME_KEYS,
        how="left",
        validate="many_to_one",
    )
    for col in STATUS_COLUMNS:
        by_name = f"{col}_by_name"
        if col in merged.columns:
            merged[col] = merged[col].where(merged[col].notna(), merged[by_name])
        else:
            merged[col] = merged[by_name]
        merged = merged.drop(columns=[by_name])
    return merged


def attach_injury_status(
    players: pd.DataFrame,
    injuries: pd.DataFrame | None,
    policy: str = "id_then_name",
) -> pd.DataFrame:
    """
    Attach report_status / practice_status to player-week rows.

    Parameters
    ----------
    players : pd.DataFrame
        Prepared player-week rows (season, week, player_id, team, position, ...)
    injuries : pd.DataFrame or None
        Raw nflverse injury reports; None or empty leaves everyone healthy
    policy : str
        "id", "name" or "id_then_name"

    Returns
    -------
    pd.DataFrame
        `players` with the two status columns, defaults filled, same row count.
    """
    if policy not in ("id", "name", "id_then_name"):
        raise ValueError(f"Unsupported injury join policy: {policy}")

    result = players.drop(columns=[c for c in STATUS_COLUMNS if c in players.columns])

    if injuries is not None and len(injuries) > 0:
        reports = prepare_injuries(injuries)
        name_source = "player_display_name" if "player_display_name" in result.columns else "player_name"

        if policy in ("id", "id_then_name"):
            result = _join_on_id(result, reports)

        name_join_ready = {name_source, "team", "position"} <= set(result.columns)
        if policy in ("name", "id_then_name") and name_join_ready:
            result = result.assign(name_key=normalize_name_key(result[name_source]))
            result = _join_on_name(result, reports).drop(columns=["name_key"])

    for col in STATUS_COLUMNS:
        if col not in result.columns:
            result[col] = pd.NA

    result["report_status"] = result["report_status"].fillna(DEFAULT_REPORT_STATUS)
    result["practice_status"] = result["practice_status"].fillna(DEFAULT_PRACTICE_STATUS)

    if len(result) != len(players):
        raise ValueError(
            f"Injury join changed row count: expected {len(players)} rows, got {len(result)}."
        )
    return result
