"""
Tests for fantasy_feed.transform.injuries.

Covers the id join, the normalized-name fallback, ambiguous names and the
Healthy/Full defaults.
"""
from __future__ import annotations

import pandas as pd
import pytest

from fantasy_feed.io.sources import INJURY_COLUMNS
from fantasy_feed.transform.injuries import (
    attach_injury_status,
    normalize_name_key,
    prepare_injuries,
)


def _players():
    return pd.DataFrame(
        {
            "season": [2024, 2024, 2024],
            "week": [5, 5, 5],
            "player_id": ["00-0035676", "00-0036900", "00-0034796"],
            "player_name": ["A.St. Brown", "J.Chase", "L.Jackson"],
            "player_display_name": ["Amon-Ra St. Brown", "Ja'Marr Chase", "Lamar Jackson"],
            "position": ["WR", "WR", "QB"],
            "team": ["DET", "CIN", "BAL"],
        }
    )


def _injuries(**overrides):
    data = {
        "season": [2024, 2024],
        "game_type": ["REG", "REG"],
        "team": ["DET", "CIN"],
        "week": [5, 5],
        "gsis_id": ["00-0035676", None],
        "position": ["WR", "WR"],
        "full_name": ["Amon-Ra St. Brown", "Ja'Marr  Chase"],
        "report_status": ["Questionable", None],
        "practice_status": ["Limited Participation in Practice", "Did Not Participate In Practice"],
        "date_modified": ["2024-10-04T20:00:00Z", "2024-10-04T20:00:00Z"],
    }
    data.update(overrides)
    return pd.DataFrame(data)


# ---------- Name key ----------


def test_normalize_name_key_strips_non_letters():
    names = pd.Series(["Amon-Ra St. Brown", "Ja'Marr Chase", "D.K. Metcalf", None])

    result = normalize_name_key(names)

    assert result.tolist()[:3] == ["amonrastbrown", "jamarrchase", "dkmetcalf"]
    assert pd.isna(result.iloc[3])


def test_normalize_name_key_keeps_suffix_letters():
    """Suffixes survive normalization, so 'Jr.' vs no suffix does not match."""
    result = normalize_name_key(pd.Series(["Marvin Harrison Jr.", "Marvin Harrison"]))

    assert result.iloc[0] != result.iloc[1]


# ---------- prepare_injuries ----------


def test_prepare_injuries_keeps_latest_report_per_player_week():
    raw = pd.DataFrame(
        {
            "season": [2024, 2024],
            "week": [5, 5],
            "team": ["DET", "DET"],
            "gsis_id": ["00-0035676", "00-0035676"],
            "position": ["WR", "WR"],
            "full_name": ["Amon-Ra St. Brown", "Amon-Ra St. Brown"],
            "report_status": ["Out", "Questionable"],
            "practice_status": ["Did Not Participate In Practice", "Limited Participation in Practice"],
            "date_modified": ["2024-10-05T10:00:00Z", "2024-10-03T10:00:00Z"],
        }
    )

    result = prepare_injuries(raw)

    assert len(result) == 1
    assert result["report_status"].iloc[0] == "Out"
    assert result["player_id"].iloc[0] == "00-0035676"


# ---------- attach_injury_status ----------


def test_id_then_name_uses_both_joins():
    result = attach_injury_status(_players(), _injuries()).set_index("player_id")

    assert result.loc["00-0035676", "report_status"] == "Questionable"
    assert result.loc["00-0035676", "practice_status"] == "Limited Participation in Practice"
    # No gsis id on the report: matched by normalized name
    assert result.loc["00-0036900", "practice_status"] == "Did Not Participate In Practice"
    assert result.loc["00-0036900", "report_status"] == "Healthy"
    # No report at all
    assert result.loc["00-0034796", "report_status"] == "Healthy"
    assert result.loc["00-0034796", "practice_status"] == "Full"


def test_id_policy_skips_name_matches():
    result = attach_injury_status(_players(), _injuries(), policy="id").set_index("player_id")

    assert result.loc["00-0035676", "report_status"] == "Questionable"
    assert result.loc["00-0036900", "practice_status"] == "Full"


def test_name_policy_requires_team_and_position_match():
    injuries = _injuries(gsis_id=[None, None], team=["DET", "PIT"])

    result = attach_injury_status(_players(), injuries, policy="name").set_index("player_id")

    assert result.loc["00-0035676", "report_status"] == "Questionable"
    # Same name, different team: not a match
    assert result.loc["00-0036900", "practice_status"] == "Full"


def test_ambiguous_name_keys_are_skipped_with_warning():
    injuries = pd.DataFrame(
        {
            "season": [2024, 2024],
            "week": [5, 5],
            "team": ["CIN", "CIN"],
            "gsis_id": [None, None],
            "position": ["WR", "WR"],
            "full_name": ["Ja'Marr Chase", "JaMarr Chase"],
            "report_status": ["Out", "Doubtful"],
            "practice_status": ["Did Not Participate In Practice", "Limited Participation in Practice"],
        }
    )

    with pytest.warns(UserWarning, match="match more than one report"):
        result = attach_injury_status(_players(), injuries, policy="name")

    chase = result.set_index("player_id").loc["00-0036900"]
    assert chase["report_status"] == "Healthy"
    assert chase["practice_status"] == "Full"


def test_missing_injuries_default_everyone_healthy():
    for injuries in (None, pd.DataFrame(columns=INJURY_COLUMNS)):
        result = attach_injury_status(_players(), injuries)

        assert (result["report_status"] == "Healthy").all()
        assert (result["practice_status"] == "Full").all()


def test_join_never_changes_row_count():
    injuries = pd.concat([_injuries()] * 3, ignore_index=True)

    result = attach_injury_status(_players(), injuries)

    assert len(result) == len(_players())


def test_falls_back_to_player_name_without_display_name():
    players = _players().drop(columns=["player_display_name"])
    players["player_name"] = ["Amon-Ra St. Brown", "Ja'Marr Chase", "Lamar Jackson"]

    result = attach_injury_status(players, _injuries(), policy="name").set_index("player_id")

    assert result.loc["00-0036900", "practice_status"] == "Did Not Participate In Practice"


def test_unknown_policy_rejected():
    with pytest.raises(ValueError, match="Unsupported injury join policy"):
        attach_injury_status(_players(), _injuries(), policy="fuzzy")


@pytest.mark.filterwarnings("error:A value is trying to be set on a copy")
def test_prepare_injuries_drops_rows_without_week_cleanly():
    raw = _injuries(week=[5, None], gsis_id=["00-0035676", "00-0036900"])

    result = prepare_injuries(raw)

    assert result["player_id"].tolist() == ["00-0035676"]
    assert result["week"].tolist() == [5]
    assert raw["week"].isna().sum() == 1
