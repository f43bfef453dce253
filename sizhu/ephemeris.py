"""
Raw solar term table source.

Produces the per-year rows the year table is built from: the 24 solar
term instants, the Li Chun instant and the Lunar New Year date, all as
UTC+8 wall-clock strings. Term instants come from Swiss Ephemeris and
the Lunar New Year from lunar_python. Rows can also be read back from
a JSON dump of a previous run.

Usage:
    python -m sizhu.ephemeris --start 1900 --end 2099 --out data/jieqi_1900_2099.json
"""

import argparse
import json
import logging
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Union

import swisseph as swe
from lunar_python import Lunar

from sizhu import settings
from sizhu.terms import SolarTerm

logger = logging.getLogger(__name__)

# Point Swiss Ephemeris to data files
swe.set_ephe_path(settings.EPHE_PATH)

_FLAGS = swe.FLG_SWIEPH

_LOCAL_OFFSET_DAYS = settings.UTC_OFFSET_HOURS / 24.0


# ============================================================
# TIME CONVERSION
# ============================================================

def local_midnight_jd(day: date) -> float:
    """Julian Day (UT) of local midnight opening the given calendar day."""
    return swe.julday(day.year, day.month, day.day, 0.0) - _LOCAL_OFFSET_DAYS


def jd_to_local(jd: float) -> datetime:
    """Convert a Julian Day (UT) to a naive local datetime, rounded to the second."""
    y, m, d, hours = swe.revjul(jd + _LOCAL_OFFSET_DAYS)
    moment = datetime(y, m, d) + timedelta(hours=hours)
    return (moment + timedelta(microseconds=500000)).replace(microsecond=0)


# ============================================================
# SOLAR TERMS
# ============================================================

def term_crossings(year: int) -> list[tuple[float, SolarTerm]]:
    """
    Find all 24 solar term crossings inside a Gregorian year.

    The year is bounded by local midnight on January 1st, so a crossing in
    the first hours of the local new year belongs to the new year.

    Returns:
        (jd, term) pairs in chronological order, Xiao Han first.
    """
    jd_start = local_midnight_jd(date(year, 1, 1))
    jd_end = local_midnight_jd(date(year + 1, 1, 1))

    crossings = []
    for term in SolarTerm:
        jd_cross = swe.solcross_ut(float(term.longitude), jd_start, _FLAGS)
        if not jd_start <= jd_cross < jd_end:
            raise ValueError(f"{term.pinyin} crossing for {year} fell outside the year: JD {jd_cross}")
        crossings.append((jd_cross, term))

    crossings.sort(key=lambda x: x[0])
    return crossings


# ============================================================
# LUNAR NEW YEAR
# ============================================================

def lunar_new_year(year: int) -> date:
    """Gregorian date of the first day of the lunar year starting in the given year."""
    solar = Lunar.fromYmd(year, 1, 1).getSolar()
    return date(solar.getYear(), solar.getMonth(), solar.getDay())


# ============================================================
# TABLE ROWS
# ============================================================

def year_row(year: int) -> dict:
    """
    Compute the raw table row for one Gregorian year.

    Returns:
        dict with 'year', 'lichun_time', 'lunar_new_year' and 'jieqi'
        (24 dicts with 'name' and 'time'), all times as strings.
    """
    crossings = term_crossings(year)
    lichun_jd = next(jd for jd, term in crossings if term is SolarTerm.LI_CHUN)

    return {
        "year": year,
        "lichun_time": jd_to_local(lichun_jd).strftime(settings.TIMESTAMP_FORMAT),
        "lunar_new_year": lunar_new_year(year).strftime(settings.DATE_FORMAT),
        "jieqi": [
            {"name": term.chinese, "time": jd_to_local(jd).strftime(settings.TIMESTAMP_FORMAT)}
            for jd, term in crossings
        ],
    }


def generate_rows(start: int = settings.MIN_SUPPORTED_YEAR,
                  end: int = settings.MAX_SUPPORTED_YEAR) -> list[dict]:
    """Generate raw rows for every year in [start, end]."""
    logger.info("Generating solar term rows for %d-%d", start, end)
    return [year_row(year) for year in range(start, end + 1)]


def load_rows(path: Union[str, Path]) -> list[dict]:
    """Load raw rows from a JSON dump written by this module's CLI."""
    with open(path, encoding="utf-8") as f:
        rows = json.load(f)
    if not isinstance(rows, list):
        raise ValueError(f"Expected a list of year rows in {path}")
    return rows


def default_rows() -> list[dict]:
    """Rows for the configured table: the JSON dump if one is set, else generated."""
    if settings.JIEQI_TABLE_PATH:
        logger.info("Loading solar term rows from %s", settings.JIEQI_TABLE_PATH)
        return load_rows(settings.JIEQI_TABLE_PATH)
    return generate_rows()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Dump the solar term table as JSON.")
    parser.add_argument("--start", type=int, default=settings.MIN_SUPPORTED_YEAR)
    parser.add_argument("--end", type=int, default=settings.MAX_SUPPORTED_YEAR)
    parser.add_argument("--out", required=True, help="output JSON path")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.LOG_LEVEL)
    rows = generate_rows(args.start, args.end)

    out_path = Path(args.out)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(rows, f, ensure_ascii=False, indent=2)

    print(out_path)


if __name__ == "__main__":
    main()
