"""
Year table: parsed solar term data, one record per supported year.

The raw rows come from a source callable (see sizhu.ephemeris). They are
parsed once, on first use, into immutable YearRecords. If any row is
malformed the whole table is unavailable; the outcome is cached for the
lifetime of the YearTable and never retried.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Iterable, Optional

from sizhu import settings
from sizhu.ephemeris import default_rows
from sizhu.terms import SolarTerm

logger = logging.getLogger(__name__)

TERMS_PER_YEAR = 24


# ============================================================
# RECORDS
# ============================================================

@dataclass(frozen=True)
class TermInstant:
    term: SolarTerm
    time: datetime

    @property
    def name(self) -> str:
        return self.term.chinese


@dataclass(frozen=True)
class YearRecord:
    year: int
    lichun_time: datetime
    lunar_new_year: date
    terms: tuple  # exactly 24 TermInstants

    def jie_terms(self) -> tuple:
        """The twelve month-boundary terms of this year."""
        return tuple(t for t in self.terms if t.term.is_jie)


# ============================================================
# PARSING
# ============================================================

def parse_timestamp(value: str) -> datetime:
    return datetime.strptime(value, settings.TIMESTAMP_FORMAT)


def parse_row(row: dict) -> YearRecord:
    """
    Parse one raw row into a YearRecord.

    Raises:
        ValueError: on an unparsable timestamp, an unknown term name, a
            term count other than 24 or a term listed twice.
        KeyError / TypeError: on a row missing required fields.
    """
    year = int(row["year"])
    lichun_time = parse_timestamp(row["lichun_time"])
    lunar_new_year = datetime.strptime(row["lunar_new_year"], settings.DATE_FORMAT).date()

    terms = tuple(
        TermInstant(SolarTerm.from_name(jq["name"]), parse_timestamp(jq["time"]))
        for jq in row["jieqi"]
    )
    if len(terms) != TERMS_PER_YEAR:
        raise ValueError(f"{year}: expected {TERMS_PER_YEAR} solar terms, got {len(terms)}")
    missing = set(SolarTerm) - {t.term for t in terms}
    if missing:
        names = ", ".join(sorted(t.chinese for t in missing))
        raise ValueError(f"{year}: duplicated solar terms, missing {names}")

    return YearRecord(year=year, lichun_time=lichun_time,
                      lunar_new_year=lunar_new_year, terms=terms)


def build_year_table(rows: Iterable[dict],
                     min_year: int = settings.MIN_SUPPORTED_YEAR,
                     max_year: int = settings.MAX_SUPPORTED_YEAR) -> Optional[tuple]:
    """
    Parse every raw row into a table indexed by (year - min_year).

    Pure and all-or-nothing: returns None if any row fails to parse or
    the rows do not cover [min_year, max_year] exactly once, in order.
    """
    records = []
    try:
        for row in rows:
            records.append(parse_row(row))
    except (KeyError, TypeError, ValueError) as e:
        logger.error("Solar term table rejected at row %d: %s", len(records), e)
        return None

    expected = list(range(min_year, max_year + 1))
    got = [r.year for r in records]
    if got != expected:
        logger.error("Solar term table covers %s..%s (%d rows), expected %d..%d",
                     got[0] if got else None, got[-1] if got else None,
                     len(got), min_year, max_year)
        return None

    return tuple(records)


# ============================================================
# LAZY TABLE
# ============================================================

class YearTable:
    """
    Build-once, read-many view over a raw row source.

    The first caller builds the table under a lock; later callers read
    the cached result. A failed build stays failed.
    """

    def __init__(self, source: Callable[[], Iterable[dict]],
                 min_year: int = settings.MIN_SUPPORTED_YEAR,
                 max_year: int = settings.MAX_SUPPORTED_YEAR):
        self.source = source
        self.min_year = min_year
        self.max_year = max_year
        self._lock = threading.Lock()
        self._built = False
        self._records: Optional[tuple] = None

    def _build(self) -> Optional[tuple]:
        try:
            rows = self.source()
        except Exception:
            logger.exception("Solar term source failed")
            return None

        records = build_year_table(rows, self.min_year, self.max_year)
        if records is not None:
            logger.info("Solar term table built: %d years (%d-%d)",
                        len(records), self.min_year, self.max_year)
        return records

    @property
    def records(self) -> Optional[tuple]:
        """All parsed records, or None if the table could not be built."""
        if not self._built:
            with self._lock:
                if not self._built:
                    self._records = self._build()
                    self._built = True
        return self._records

    @property
    def available(self) -> bool:
        return self.records is not None

    def supports(self, year: int) -> bool:
        return self.min_year <= year <= self.max_year

    def record(self, year: int) -> Optional[YearRecord]:
        """Return the record for a Gregorian year, or None if unavailable."""
        if not self.supports(year):
            return None
        records = self.records
        if records is None:
            return None
        row = records[year - self.min_year]
        assert row.year == year
        return row


# Process-wide table over the configured source.
DEFAULT_TABLE = YearTable(default_rows)


def year_record(year: int, table: Optional[YearTable] = None) -> Optional[YearRecord]:
    """Return the parsed record for a year from the given (or default) table."""
    return (table or DEFAULT_TABLE).record(year)
