#!/usr/bin/env python
"""
Generate the weekly stats JSON feed for the app.

Usage:
    python scripts/generate_weekly_stats.py
    python scripts/generate_weekly_stats.py --season 2024 --output-name weekly_stats.json

See fantasy_feed.cli for all options.
"""
from __future__ import annotations

import sys

from fantasy_feed.cli import main


if __name__ == "__main__":
    sys.exit(main())
