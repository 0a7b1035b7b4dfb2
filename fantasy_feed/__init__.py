"""
fantasy_feed

Builds the weekly fantasy stats feed consumed by the mobile app:
- Season resolution and run configuration (fantasy_feed.season, fantasy_feed.config)
- nflverse table loading and JSON output under fantasy_feed.io
- Joins, scoring and per-position projection under fantasy_feed.transform
"""
__all__ = ["config", "io", "pipeline", "schemas", "scoring", "season", "transform"]

__version__ = "0.3.0"
