# fantasy_feed/config.py

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Optional
import json
import pathlib

import yaml


PLAYER_STATS_SOURCES = ("stats_player", "weekly")
INJURY_JOIN_POLICIES = ("id_then_name", "id", "name")


@dataclass
class SourcesConfig:
    injuries: bool = True
    team_defense: bool = True
    rosters: bool = False  # backfill headshot/position/team from weekly rosters
    player_stats_source: str = "stats_player"  # "stats_player" or "weekly"
    injury_join: str = "id_then_name"  # "id_then_name", "id" or "name"
    cache_dir: Optional[str] = None  # read <table>_<season>.parquet from here first


@dataclass
class ScoringConfig:
    count_fumbles_forced: bool = False


@dataclass
class OutputConfig:
    data_dir: str = "data"
    name_template: str = "player_stats_{season}.json"
    indent: int = 2
    write_log: bool = True


@dataclass
class ExportConfig:
    season: Optional[int] = None
    sources: SourcesConfig = field(default_factory=SourcesConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    verbose: bool = True

    def __post_init__(self) -> None:
        if self.sources.player_stats_source not in PLAYER_STATS_SOURCES:
            raise ValueError(
                f"Unsupported player_stats_source '{self.sources.player_stats_source}'. "
                f"Must be one of: {', '.join(PLAYER_STATS_SOURCES)}"
            )
        if self.sources.injury_join not in INJURY_JOIN_POLICIES:
            raise ValueError(
                f"Unsupported injury_join '{self.sources.injury_join}'. "
                f"Must be one of: {', '.join(INJURY_JOIN_POLICIES)}"
            )

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "ExportConfig":
        data = dict(data or {})
        _reject_unknown("config", data, {f.name for f in fields(ExportConfig)})

        sources = _section(SourcesConfig, data.get("sources"), "sources")
        scoring = _section(ScoringConfig, data.get("scoring"), "scoring")
        output = _section(OutputConfig, data.get("output"), "output")

        season = data.get("season")
        return ExportConfig(
            season=int(season) if season is not None else None,
            sources=sources,
            scoring=scoring,
            output=output,
            verbose=bool(data.get("verbose", True)),
        )

    def with_overrides(self, **overrides: Any) -> "ExportConfig":
        """
        Return a copy with dotted-key overrides applied, skipping None values.

        >>> ExportConfig().with_overrides(**{"output.data_dir": "out"}).output.data_dir
        'out'
        """
        cfg = self
        for key, value in overrides.items():
            if value is None:
                continue
            if "." in key:
                section_name, attr = key.split(".", 1)
                section = getattr(cfg, section_name)
                cfg = replace(cfg, **{section_name: replace(section, **{attr: value})})
            else:
                cfg = replace(cfg, **{key: value})
        return cfg


def _reject_unknown(name: str, data: Dict[str, Any], allowed: set) -> None:
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ValueError(f"Unknown keys in {name}: {unknown}")


def _section(cls, raw: Optional[Dict[str, Any]], name: str):
    raw = dict(raw or {})
    _reject_unknown(name, raw, {f.name for f in fields(cls)})
    return cls(**raw)


def _load_json(path: pathlib.Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _load_yaml(path: pathlib.Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_export_config(path: str | pathlib.Path) -> ExportConfig:
    """
    Load an ExportConfig from a JSON or YAML file.

    Expected top-level keys (all optional):
    - season
    - sources: {injuries, team_defense, rosters, player_stats_source, injury_join, cache_dir}
    - scoring: {count_fumbles_forced}
    - output:  {data_dir, name_template, indent, write_log}
    - verbose
    """
    p = pathlib.Path(path)
    if not p.exists():
        raise FileNotFoundError(p)

    if p.suffix.lower() in {".json"}:
        raw = _load_json(p)
    elif p.suffix.lower() in {".yaml", ".yml"}:
        raw = _load_yaml(p)
    else:
        raise ValueError(f"Unsupported config extension: {p.suffix}")

    return ExportConfig.from_dict(raw)
