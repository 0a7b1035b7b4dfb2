"""
Tests for fantasy_feed.io.json_writer.
"""
from __future__ import annotations

import json

import numpy as np
import pandas as pd

from fantasy_feed.config import ExportConfig
from fantasy_feed.io.json_writer import (
    emit_run_log,
    output_path,
    to_json_value,
    write_records_json,
)


def test_output_path_season_suffixed_default():
    assert output_path(2024, ExportConfig()).as_posix() == "data/player_stats_2024.json"


def test_output_path_static_name():
    config = ExportConfig.from_dict({"output": {"name_template": "weekly_stats.json", "data_dir": "out"}})

    assert output_path(2024, config).as_posix() == "out/weekly_stats.json"


def test_to_json_value_converts_numpy_and_missing():
    assert to_json_value(np.int64(3)) == 3
    assert type(to_json_value(np.int64(3))) is int
    assert to_json_value(np.float64(1.5)) == 1.5
    assert to_json_value(np.bool_(True)) is True
    assert to_json_value(np.nan) is None
    assert to_json_value(pd.NA) is None
    assert to_json_value(None) is None
    assert to_json_value("KC") == "KC"


def test_write_records_json_creates_directory_and_nulls(tmp_path):
    path = tmp_path / "data" / "player_stats_2024.json"
    records = [
        {"player_id": "00-1", "week": np.int64(1), "headshot_url": np.nan, "fantasy_points_ppr": 12.5},
        {"player_id": "DEF_KC", "week": 1, "points_allowed": pd.NA, "fantasy_points_ppr": 7},
    ]

    written = write_records_json(records, path)

    assert written == path
    text = path.read_text(encoding="utf-8")
    assert text.startswith("[\n  {")
    parsed = json.loads(text)
    assert parsed[0] == {"player_id": "00-1", "week": 1, "headshot_url": None, "fantasy_points_ppr": 12.5}
    assert parsed[1]["points_allowed"] is None


def test_write_records_json_single_record_stays_array(tmp_path):
    path = tmp_path / "weekly_stats.json"

    write_records_json([{"player_id": "00-1"}], path)

    assert json.loads(path.read_text()) == [{"player_id": "00-1"}]


def test_write_records_json_keeps_utf8(tmp_path):
    path = tmp_path / "weekly_stats.json"

    write_records_json([{"player_name": "Ka'imi Fairbairn", "note": "→"}], path)

    assert "→" in path.read_text(encoding="utf-8")


def test_write_records_json_leaves_no_temp_files(tmp_path):
    path = tmp_path / "weekly_stats.json"

    write_records_json([], path)

    assert json.loads(path.read_text()) == []
    assert [p.name for p in tmp_path.iterdir()] == ["weekly_stats.json"]


def test_emit_run_log(tmp_path):
    config = ExportConfig.from_dict({"output": {"data_dir": str(tmp_path)}})
    feed = tmp_path / "player_stats_2024.json"

    log_path = emit_run_log(2024, feed, 10, 2, config, injuries_rows=0)

    assert log_path == tmp_path / "_logs" / "player_stats_2024.json"
    log = json.loads(log_path.read_text())
    assert log["season"] == 2024
    assert log["player_records"] == 10
    assert log["defense_records"] == 2
    assert log["injuries_rows"] == 0
    assert "exported_at_utc" in log


def test_emit_run_log_is_utf8(tmp_path):
    data_dir = tmp_path / "données"
    config = ExportConfig.from_dict({"output": {"data_dir": str(data_dir)}})

    log_path = emit_run_log(2024, data_dir / "player_stats_2024.json", 1, 0, config)

    log = json.loads(log_path.read_text(encoding="utf-8"))
    assert log["output_path"].endswith("player_stats_2024.json")
    assert "données" in log["output_path"]
