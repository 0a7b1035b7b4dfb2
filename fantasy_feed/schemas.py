"""
Record shapes for the weekly stats feed.

Records in the feed are not schema-uniform: each position carries the shared
base fields plus its own stat fields. Each position tag gets one RecordSchema
holding its explicit field tuple, and projection keeps only those fields that
the provider actually delivered.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Tuple

import pandas as pd


BASE_FIELDS: Tuple[str, ...] = (
    "season",
    "week",
    "player_id",
    "player_name",
    "position",
    "team",
    "opponent_team",
    "headshot_url",
    "fantasy_points_ppr",
    "report_status",
    "practice_status",
)

PASSING_FIELDS: Tuple[str, ...] = (
    "completions",
    "attempts",
    "passing_yards",
    "passing_tds",
    "passing_interceptions",
)
RUSHING_FIELDS: Tuple[str, ...] = ("carries", "rushing_yards", "rushing_tds")
RECEIVING_FIELDS: Tuple[str, ...] = ("receptions", "targets", "receiving_yards", "receiving_tds")

KICKING_FIELDS: Tuple[str, ...] = (
    "fg_made",
    "fg_att",
    "fg_missed",
    "fg_0_19",
    "fg_20_29",
    "fg_30_39",
    "fg_40_49",
    "fg_50_59",
    "fg_60p",
    "pat_made",
    "pat_att",
    "pat_missed",
)

DEFENSE_FIELDS: Tuple[str, ...] = (
    "sacks",
    "interceptions",
    "fumbles_forced",
    "fumbles_recovered",
    "defensive_tds",
    "safeties",
    "points_allowed",
)


@dataclass(frozen=True)
class RecordSchema:
    """Field set for one position tag."""

    position: str
    stat_fields: Tuple[str, ...] = ()

    @property
    def fields(self) -> Tuple[str, ...]:
        return BASE_FIELDS + tuple(f for f in self.stat_fields if f not in BASE_FIELDS)

    def allows(self, field_name: str) -> bool:
        return field_name in self.fields

    def project(self, row: Mapping[str, Any], available: Iterable[str] | None = None) -> Dict[str, Any]:
        """
        Keep the schema's fields that exist on `row` (or in `available`).

        Field order follows the schema, not the source row.
        """
        present = set(available) if available is not None else set(row.keys())
        return {f: row[f] for f in self.fields if f in present and f in row}


POSITION_SCHEMAS: Dict[str, RecordSchema] = {
    "QB": RecordSchema("QB", PASSING_FIELDS + RUSHING_FIELDS + ("fumbles",)),
    "RB": RecordSchema(
        "RB",
        RUSHING_FIELDS + ("receptions", "targets", "receiving_yards", "receiving_tds", "fumbles"),
    ),
    "WR": RecordSchema("WR", RECEIVING_FIELDS + RUSHING_FIELDS + ("fumbles",)),
    "TE": RecordSchema("TE", RECEIVING_FIELDS + RUSHING_FIELDS + ("fumbles",)),
    "K": RecordSchema("K", KICKING_FIELDS),
    "DEF": RecordSchema("DEF", DEFENSE_FIELDS),
}

# Every stat field any schema can carry; these are the numeric counters that
# default to zero.
COUNTER_FIELDS: Tuple[str, ...] = tuple(
    dict.fromkeys(
        f
        for schema in POSITION_SCHEMAS.values()
        for f in schema.stat_fields
        if f != "points_allowed"
    )
)


def schema_for(position: Any) -> RecordSchema:
    """Return the schema for a position code; unknown codes keep base fields only."""
    if isinstance(position, str) and position in POSITION_SCHEMAS:
        return POSITION_SCHEMAS[position]
    return RecordSchema(str(position) if position is not None else "", ())


def project_frame(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """
    Project every row of a frame onto its position's schema.

    The frame must carry a `position` column. Columns missing from the frame
    are never added to a record.
    """
    if df.empty:
        return []
    if "position" not in df.columns:
        raise ValueError("project_frame: missing required columns: ['position']")

    available = set(df.columns)
    records: List[Dict[str, Any]] = []
    for row in df.to_dict(orient="records"):
        schema = schema_for(row.get("position"))
        records.append(schema.project(row, available))
    return records
