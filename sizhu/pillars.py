"""
Four Pillars (四柱八字) and solar term context for a naive local moment.

Pillar rules:
- Year:  the BaZi year starts at Li Chun, not January 1st or Lunar New Year.
- Month: the latest Jie term at or before the moment picks the month.
- Day:   a continuous 60-day count anchored at 1900-01-01 (Jia Xu).
- Hour:  two-hour shi chen blocks, Zi hour spanning 23:00-00:59.

Every operation returns None when the table has no data for the moment.
Nothing is ever partially filled in.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from sizhu.cycle import CYCLE_LENGTH, Pillar, cycle_index, make_pillar, nayin
from sizhu.table import DEFAULT_TABLE, TermInstant, YearTable

# Day pillar anchor: 1900-01-01 was Jia Xu, cycle index 10.
DAY_EPOCH = date(1900, 1, 1)
DAY_EPOCH_INDEX = 10

# Month ordinal 0 (Li Chun) is the Yin branch.
MONTH_BRANCH_OFFSET = 2

SECONDS_PER_DAY = 86400
SECONDS_PER_HOUR = 3600


# ============================================================
# RESULT VALUES
# ============================================================

@dataclass(frozen=True)
class Pillars:
    year: str
    month: str
    day: str
    hour: str
    year_index: int
    month_index: int  # 0 = Yin month (Li Chun)
    day_index: int
    hour_branch_index: int
    columns: tuple[Pillar, ...]  # year, month, day, hour

    def __str__(self):
        return f"{self.year}年 {self.month}月 {self.day}日 {self.hour}时"

    @property
    def year_nayin(self) -> str:
        return nayin(self.year_index)

    @property
    def day_nayin(self) -> str:
        return nayin(self.day_index)

    def to_dict(self):
        return {
            "year": self.year,
            "month": self.month,
            "day": self.day,
            "hour": self.hour,
            "year_nayin": self.year_nayin,
            "day_nayin": self.day_nayin,
            "columns": [p.to_dict() for p in self.columns],
            "description": str(self),
        }


def _days_hours(seconds: int) -> tuple[int, int]:
    return seconds // SECONDS_PER_DAY, (seconds % SECONDS_PER_DAY) // SECONDS_PER_HOUR


@dataclass(frozen=True)
class JieQiContext:
    prev: TermInstant
    next: TermInstant
    diff_prev_seconds: int
    diff_next_seconds: int

    @property
    def prev_name(self) -> str:
        return self.prev.name

    @property
    def next_name(self) -> str:
        return self.next.name

    @property
    def prev_time(self) -> datetime:
        return self.prev.time

    @property
    def next_time(self) -> datetime:
        return self.next.time

    @property
    def since_prev(self) -> tuple[int, int]:
        """(days, hours) elapsed since the previous term."""
        return _days_hours(self.diff_prev_seconds)

    @property
    def until_next(self) -> tuple[int, int]:
        """(days, hours) remaining until the next term."""
        return _days_hours(self.diff_next_seconds)

    def __str__(self):
        prev_days, prev_hours = self.since_prev
        next_days, next_hours = self.until_next
        return (
            f"前气: {self.prev_name} ({self.prev_time}, 距今 {prev_days}天{prev_hours}小时), "
            f"后气: {self.next_name} ({self.next_time}, 距今 {next_days}天{next_hours}小时)"
        )

    def to_dict(self):
        return {
            "prev": {"name": self.prev_name, "pinyin": self.prev.term.pinyin,
                     "time": self.prev_time.isoformat(sep=" ")},
            "next": {"name": self.next_name, "pinyin": self.next.term.pinyin,
                     "time": self.next_time.isoformat(sep=" ")},
            "diff_prev_seconds": self.diff_prev_seconds,
            "diff_next_seconds": self.diff_next_seconds,
        }


# ============================================================
# SOLAR TERM WINDOW
# ============================================================

def _window_terms(year: int, table: YearTable) -> list[TermInstant]:
    """
    Terms of the given year and its two neighbours.

    The neighbours bridge year ends: early January falls in the month that
    opened with the previous December's Da Xue.
    """
    terms = []
    for y in (year - 1, year, year + 1):
        record = table.record(y)
        if record is not None:
            terms.extend(record.terms)
    return terms


def term_context(moment: datetime, table: Optional[YearTable] = None) -> Optional[JieQiContext]:
    """
    Find the solar terms bracketing a moment.

    Args:
        moment: naive local datetime
        table: year table to read (defaults to the process-wide table)

    Returns:
        JieQiContext with the latest term at or before the moment and the
        earliest term after it, or None if either side is missing.
    """
    table = table or DEFAULT_TABLE
    terms = _window_terms(moment.year, table)

    before = [t for t in terms if t.time <= moment]
    after = [t for t in terms if t.time > moment]
    if not before or not after:
        return None

    prev = max(before, key=lambda t: t.time)
    nxt = min(after, key=lambda t: t.time)
    return JieQiContext(
        prev=prev,
        next=nxt,
        diff_prev_seconds=int((moment - prev.time).total_seconds()),
        diff_next_seconds=int((nxt.time - moment).total_seconds()),
    )


# ============================================================
# PILLAR STAGES
# ============================================================

def bazi_year(moment: datetime, table: Optional[YearTable] = None) -> Optional[int]:
    """Gregorian year whose cycle position names the moment's BaZi year."""
    record = (table or DEFAULT_TABLE).record(moment.year)
    if record is None:
        return None
    if moment < record.lichun_time:
        return moment.year - 1
    return moment.year


def month_ordinal(moment: datetime, table: Optional[YearTable] = None) -> Optional[int]:
    """
    BaZi month of a moment, 0 for the Yin month opened by Li Chun.

    Only the twelve Jie terms open months; the latest one at or before
    the moment wins.
    """
    jie = [t for t in _window_terms(moment.year, table or DEFAULT_TABLE)
           if t.term.is_jie and t.time <= moment]
    if not jie:
        return None
    return max(jie, key=lambda t: t.time).term.month_ordinal


def day_cycle_index(day: date) -> int:
    """Cycle position of a calendar day. Valid before the epoch as well."""
    return (DAY_EPOCH_INDEX + (day - DAY_EPOCH).days) % CYCLE_LENGTH


def hour_branch_index(hour: int) -> int:
    """Shi chen branch of a clock hour: 23 and 0 are Zi, 1 and 2 are Chou, ..."""
    return ((hour + 1) // 2) % 12


# ============================================================
# FOUR PILLARS
# ============================================================

def pillars(moment: datetime, table: Optional[YearTable] = None) -> Optional[Pillars]:
    """
    Compute the four pillars for a naive local moment.

    Args:
        moment: naive local datetime
        table: year table to read (defaults to the process-wide table)

    Returns:
        Pillars, or None if any stage lacks data.
    """
    table = table or DEFAULT_TABLE

    # 1. Year pillar, Li Chun boundary
    year = bazi_year(moment, table)
    if year is None:
        return None
    year_idx = cycle_index(year)

    # 2. Month pillar, latest Jie at or before the moment
    month_idx = month_ordinal(moment, table)
    if month_idx is None:
        return None
    # Month stem: (year stem * 2 + month index + 2) % 10
    m_stem_idx = ((year_idx % 10) * 2 + month_idx + 2) % 10
    m_branch_idx = (month_idx + MONTH_BRANCH_OFFSET) % 12

    # 3. Day pillar
    day_idx = day_cycle_index(moment.date())

    # 4. Hour pillar
    h_branch_idx = hour_branch_index(moment.hour)
    h_stem_idx = ((day_idx % 10) * 2 + h_branch_idx) % 10

    columns = (
        make_pillar(year_idx, year_idx, "year"),
        make_pillar(m_stem_idx, m_branch_idx, "month"),
        make_pillar(day_idx, day_idx, "day"),
        make_pillar(h_stem_idx, h_branch_idx, "hour"),
    )
    year_p, month_p, day_p, hour_p = columns

    return Pillars(
        year=str(year_p),
        month=str(month_p),
        day=str(day_p),
        hour=str(hour_p),
        year_index=year_idx,
        month_index=month_idx,
        day_index=day_idx,
        hour_branch_index=h_branch_idx,
        columns=columns,
    )


def lunar_new_year_offset(moment: datetime, table: Optional[YearTable] = None) -> Optional[int]:
    """Signed days from the year's Lunar New Year to the moment's date."""
    record = (table or DEFAULT_TABLE).record(moment.year)
    if record is None:
        return None
    return (moment.date() - record.lunar_new_year).days
