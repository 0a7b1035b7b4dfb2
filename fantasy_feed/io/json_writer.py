"""
JSON output for the weekly stats feed.

The feed is a single pretty-printed UTF-8 JSON array. Records are not
schema-uniform; missing values are written as null.
"""
from __future__ import annotations

import json
import math
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from ..config import ExportConfig


def output_path(season: int, config: ExportConfig) -> Path:
    """<data_dir>/<name_template formatted with season>"""
    name = config.output.name_template.format(season=season)
    return Path(config.output.data_dir) / name


def to_json_value(value: Any) -> Any:
    """Convert pandas/numpy scalars to JSON-native values (NaN/NA -> None)."""
    if value is None:
        return None
    if isinstance(value, (np.bool_, bool)):
        return bool(value)
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, (np.floating, float)):
        value = float(value)
        if math.isnan(value) or math.isinf(value):
            return None
        return value
    if isinstance(value, pd.Timestamp):
        return None if pd.isna(value) else value.isoformat()
    if value is pd.NA or value is pd.NaT:
        return None
    return value


def _clean_record(record: Dict[str, Any]) -> Dict[str, Any]:
    return {str(k): to_json_value(v) for k, v in record.items()}


def write_records_json(
    records: Iterable[Dict[str, Any]],
    path: Path | str,
    indent: int = 2,
) -> Path:
    """
    Write records as a JSON array, creating the parent directory if needed.

    The file is written to a temporary sibling first and moved into place, so
    an existing feed is never left half-written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    payload: List[Dict[str, Any]] = [_clean_record(r) for r in records]

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=indent, ensure_ascii=False, allow_nan=False)
            f.write("\n")
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    return path


def emit_run_log(
    season: int,
    feed_path: Path | str,
    player_count: int,
    defense_count: int,
    config: ExportConfig,
    injuries_rows: Optional[int] = None,
) -> Path:
    """Emit a JSON log for an export run under <data_dir>/_logs/."""
    feed_path = Path(feed_path)
    log_dir = Path(config.output.data_dir) / "_logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / f"{feed_path.stem}.json"

    log_data = {
        "season": season,
        "output_path": str(feed_path),
        "player_records": player_count,
        "defense_records": defense_count,
        "player_stats_source": config.sources.player_stats_source,
        "injuries": config.sources.injuries,
        "injuries_rows": injuries_rows,
        "injury_join": config.sources.injury_join,
        "team_defense": config.sources.team_defense,
        "rosters": config.sources.rosters,
        "exported_at_utc": datetime.now(timezone.utc).isoformat(),
    }

    with log_path.open("w", encoding="utf-8") as f:
        json.dump(log_data, f, indent=2)

    return log_path
