"""
Configuration for the sizhu calendar engine.

Values are plain module constants. A few can be overridden from the
environment so a deployment can point at its own ephemeris files or a
pre-generated solar term table.
"""

import os
from pathlib import Path
from typing import Optional

# Inclusive range of Gregorian years covered by the solar term table.
MIN_SUPPORTED_YEAR = 1900
MAX_SUPPORTED_YEAR = 2099

# Wall-clock zone of every timestamp in the table (China Standard Time).
UTC_OFFSET_HOURS = 8

# Swiss Ephemeris data files. Without them swisseph falls back to its
# built-in Moshier theory, which is accurate to well under a second here.
EPHE_PATH = os.environ.get(
    "SIZHU_EPHE_PATH", str(Path(__file__).parent.parent / "ephe")
)

# Optional JSON dump produced by `python -m sizhu.ephemeris --out ...`.
# When unset the table is generated on first use.
JIEQI_TABLE_PATH: Optional[str] = os.environ.get("SIZHU_JIEQI_TABLE") or None

LOG_LEVEL = os.environ.get("SIZHU_LOG_LEVEL", "WARNING").upper()

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"
