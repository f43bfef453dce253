"""
CLI wrapper for the pillar and solar term queries.

Usage:
    python -m sizhu.run "1985-04-21 08:00:00"
    python -m sizhu.run 2024-01-28 --json
    python -m sizhu.run "1990-03-15 10:30" --longitude 108.37
    python -m sizhu.run --nayin-table
    python -m sizhu.run "2024-01-28 12:00" --verify
"""

import argparse
import json
import logging
import sys
from datetime import datetime, timedelta
from typing import Optional

from lunar_python import Solar

from sizhu import settings
from sizhu.cycle import CYCLE_LENGTH, cycle_index, ganzhi, nayin, nayin_by_year
from sizhu.pillars import Pillars, lunar_new_year_offset, pillars, term_context
from sizhu.table import year_record

DEFAULT_INPUT = "2026-02-04 00:00:00"

INPUT_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M", "%Y-%m-%d")


def parse_input_datetime(value: str) -> datetime:
    """Parse YYYY-MM-DD or YYYY-MM-DD HH:MM[:SS]."""
    for fmt in INPUT_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt)
        except ValueError:
            continue
    raise ValueError(f"Invalid input '{value}'. Use YYYY-MM-DD or YYYY-MM-DD HH:MM[:SS].")


def lmt_correction(longitude: float, standard_meridian: float = 120.0) -> float:
    """
    Minutes to add to a clock reading to get Local Mean Time.

    The year table is kept in UTC+8 wall-clock time. Passing the birth
    place's longitude shifts the query moment by 4 minutes per degree
    east (positive) or west (negative) of the clock's meridian before any
    pillar is computed.
    """
    return (longitude - standard_meridian) * 4.0


def apply_lmt(clock_time: datetime, longitude: float,
              standard_meridian: float = 120.0) -> datetime:
    """Convert clock time to Local Mean Time, to the whole second."""
    correction = timedelta(minutes=lmt_correction(longitude, standard_meridian))
    return clock_time + timedelta(seconds=round(correction.total_seconds()))


def nayin_table() -> list[str]:
    lines = ["--- 60甲子纳音五行对照表 ---", f"{'序号':<4} {'干支':<4} {'纳音五行':<8}"]
    for i in range(CYCLE_LENGTH):
        lines.append(f"{i + 1:<4} {ganzhi(i)} {nayin(i):<8}")
    return lines


def lunar_cross_check(moment: datetime) -> dict:
    """
    Read the same moment through lunar_python.

    lunar_python carries its own solar term almanac and starts the day
    stem of the Zi hour differently, so moments within minutes of a Jie
    term or after 23:00 can legitimately disagree.
    """
    solar = Solar.fromYmdHms(moment.year, moment.month, moment.day,
                             moment.hour, moment.minute, moment.second)
    lunar = solar.getLunar()
    eight_char = lunar.getEightChar()
    return {
        "lunar_date": lunar.toString(),
        "pillars": [eight_char.getYear(), eight_char.getMonth(),
                    eight_char.getDay(), eight_char.getTime()],
    }


def cross_check_matches(bazi: Optional[Pillars], check: dict) -> bool:
    if bazi is None:
        return False
    return [bazi.year, bazi.month, bazi.day, bazi.hour] == check["pillars"]


def query(moment: datetime, verify: bool = False) -> dict:
    """Collect everything known about a moment into a JSON-friendly dict."""
    result = {"input": moment.strftime(settings.TIMESTAMP_FORMAT)}

    record = year_record(moment.year)
    if record is not None:
        result["year"] = {
            "gregorian": record.year,
            "lunar_new_year": record.lunar_new_year.isoformat(),
            "lichun": record.lichun_time.strftime(settings.TIMESTAMP_FORMAT),
            "lunar_new_year_offset_days": lunar_new_year_offset(moment),
            "ganzhi": ganzhi(cycle_index(record.year)),
            "nayin": nayin_by_year(record.year),
        }

    bazi = pillars(moment)
    result["pillars"] = bazi.to_dict() if bazi is not None else None

    ctx = term_context(moment)
    result["jieqi"] = ctx.to_dict() if ctx is not None else None

    if verify:
        check = lunar_cross_check(moment)
        check["matches"] = cross_check_matches(bazi, check)
        result["lunar_check"] = check
    return result


def print_report(moment: datetime, verify: bool = False) -> None:
    print(f"Input datetime: {moment}")

    record = year_record(moment.year)
    if record is not None:
        offset = lunar_new_year_offset(moment)
        print(f"Gregorian year: {record.year}")
        print(f"Lunar New Year (table): {record.lunar_new_year}")
        print(f"LiChun (table): {record.lichun_time}")
        print(f"Day offset from Lunar New Year (table): {offset:+d} day(s)")

    bazi = pillars(moment)
    if bazi is not None:
        print(f"BaZi: {bazi}")
        print(f"Year Nayin: {bazi.year_nayin}")
    else:
        print("BaZi: unavailable for this input")

    ctx = term_context(moment)
    if ctx is not None:
        print(f"JieQi context: {ctx}")
    else:
        print("JieQi context: unavailable for this input")

    if verify:
        check = lunar_cross_check(moment)
        year, month, day, hour = check["pillars"]
        print(f"Lunar date (lunar_python): {check['lunar_date']}")
        print(f"BaZi (lunar_python): {year}年 {month}月 {day}日 {hour}时")
        print(f"Cross-check: {'match' if cross_check_matches(bazi, check) else 'MISMATCH'}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Compute BaZi pillars and solar term context.")
    parser.add_argument("datetime", nargs="?", default=DEFAULT_INPUT,
                        help="YYYY-MM-DD or YYYY-MM-DD HH:MM[:SS] (local time)")
    parser.add_argument("--longitude", type=float, default=None,
                        help="apply Local Mean Time correction for this longitude")
    parser.add_argument("--meridian", type=float, default=120.0,
                        help="standard meridian of the clock time (default 120)")
    parser.add_argument("--json", action="store_true", dest="as_json")
    parser.add_argument("--nayin-table", action="store_true", dest="nayin_table")
    parser.add_argument("--verify", action="store_true",
                        help="cross-check the pillars against lunar_python")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.LOG_LEVEL)

    if args.nayin_table:
        print("\n".join(nayin_table()))
        return 0

    try:
        moment = parse_input_datetime(args.datetime)
    except ValueError as e:
        print(e, file=sys.stderr)
        return 2

    if args.longitude is not None:
        moment = apply_lmt(moment, args.longitude, args.meridian)

    if not settings.MIN_SUPPORTED_YEAR <= moment.year <= settings.MAX_SUPPORTED_YEAR:
        print(f"Year out of supported table range "
              f"({settings.MIN_SUPPORTED_YEAR}..={settings.MAX_SUPPORTED_YEAR}): {moment.year}",
              file=sys.stderr)
        return 2

    if args.as_json:
        print(json.dumps(query(moment, verify=args.verify), ensure_ascii=False, indent=2))
    else:
        print_report(moment, verify=args.verify)
    return 0


if __name__ == "__main__":
    sys.exit(main())
