"""
Season resolution.

Precedence: explicit override > SEASON environment variable > computed
default, min(current calendar year, most recent season the provider publishes).
"""
from __future__ import annotations

import os
from datetime import date, timedelta
from typing import Mapping, Optional

SEASON_ENV_VAR = "SEASON"


def _labor_day(year: int) -> date:
    """First Monday in September."""
    first = date(year, 9, 1)
    return first + timedelta(days=(7 - first.weekday()) % 7)


def most_recent_season(today: Optional[date] = None, roster: bool = False) -> int:
    """
    Most recent NFL season with published data as of `today`.

    The regular season opens on the Thursday after Labor Day; before that the
    previous season is the latest. Rosters for the upcoming season are
    published from March, so `roster=True` rolls over earlier.
    """
    today = today or date.today()
    if roster:
        return today.year if today.month >= 3 else today.year - 1

    season_opener = _labor_day(today.year) + timedelta(days=3)
    return today.year if today >= season_opener else today.year - 1


def resolve_season(
    explicit: Optional[int] = None,
    environ: Optional[Mapping[str, str]] = None,
    today: Optional[date] = None,
) -> int:
    """
    Pick the season to export.

    Parameters
    ----------
    explicit : int, optional
        Season given on the command line or in a config file
    environ : Mapping[str, str], optional
        Environment to read SEASON from (defaults to os.environ)
    today : date, optional
        Reference date for the computed default

    Raises
    ------
    ValueError
        If SEASON is set but is not an integer
    """
    if explicit is not None:
        return int(explicit)

    env = os.environ if environ is None else environ
    raw = env.get(SEASON_ENV_VAR)
    if raw is not None and raw.strip() != "":
        try:
            return int(raw.strip())
        except ValueError:
            raise ValueError(f"{SEASON_ENV_VAR} must be an integer season, got {raw!r}")

    today = today or date.today()
    return min(today.year, most_recent_season(today))
