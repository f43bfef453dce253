from datetime import date, datetime, timedelta

import pytest

from sizhu.cycle import cycle_index, ganzhi
from sizhu.pillars import (
    bazi_year, day_cycle_index, hour_branch_index, lunar_new_year_offset,
    month_ordinal, pillars, term_context,
)
from sizhu.table import year_record


# ============================================================
# KNOWN CHARTS
# ============================================================

@pytest.mark.parametrize("moment, expected", [
    ("1985-04-21 08:00:00", "乙丑年 庚辰月 庚寅日 庚辰时"),
    ("2024-01-28 12:00:00", "癸卯年 乙丑月 辛卯日 甲午时"),
    ("1958-12-10 00:00:00", "戊戌年 甲子月 辛酉日 戊子时"),
    ("1992-01-08 08:00:00", "辛未年 辛丑月 癸未日 丙辰时"),
    ("1992-01-02 08:00:00", "辛未年 庚子月 丁丑日 甲辰时"),
    ("1996-11-22 12:00:00", "丙子年 己亥月 癸亥日 戊午时"),
    ("1990-12-30 08:00:00", "庚午年 戊子月 己巳日 戊辰时"),
])
def test_known_pillars(moment, expected):
    result = pillars(datetime.strptime(moment, "%Y-%m-%d %H:%M:%S"))
    assert str(result) == expected


def test_known_term_context():
    ctx = term_context(datetime(1985, 4, 21, 8))
    assert ctx.prev_name == "谷雨"
    assert ctx.next_name == "立夏"


def test_december_da_xue_opens_zi_month():
    moment = datetime(1958, 12, 10)
    ctx = term_context(moment)
    result = pillars(moment)
    assert ctx.prev_name == "大雪"
    assert result.month == "甲子"
    assert result.month_index == 10


def test_early_january_uses_previous_december_boundary():
    # Before Xiao Han the month is still the one Da Xue opened last year.
    assert month_ordinal(datetime(1992, 1, 2, 8)) == 10
    assert month_ordinal(datetime(1992, 1, 8, 8)) == 11


# ============================================================
# YEAR BOUNDARY
# ============================================================

@pytest.mark.parametrize("year", [1901, 1958, 1985, 2024, 2099])
def test_one_second_before_lichun_is_previous_year(year):
    lichun = year_record(year).lichun_time
    before = pillars(lichun - timedelta(seconds=1))
    at = pillars(lichun)

    assert bazi_year(lichun - timedelta(seconds=1)) == year - 1
    assert before.year == ganzhi(cycle_index(year - 1))
    assert before.month_index == 11
    assert at.year == ganzhi(cycle_index(year))
    assert at.month_index == 0


def test_lunar_new_year_is_not_the_year_boundary():
    # 2024-02-10 is Lunar New Year, but Li Chun (Feb 4) already started Jia Chen.
    assert pillars(datetime(2024, 2, 5, 12)).year == "甲辰"
    assert lunar_new_year_offset(datetime(2024, 2, 10, 12)) == 0
    assert lunar_new_year_offset(datetime(2024, 2, 5, 12)) == -5


# ============================================================
# DAY AND HOUR
# ============================================================

def test_day_epoch_anchor():
    assert day_cycle_index(date(1900, 1, 1)) == 10
    assert ganzhi(day_cycle_index(date(1900, 1, 1))) == "甲戌"
    assert ganzhi(day_cycle_index(date(2000, 1, 1))) == "戊午"


def test_day_index_steps_by_one_across_epoch():
    day = date(1899, 11, 1)
    prev = day_cycle_index(day)
    for _ in range(120):
        day += timedelta(days=1)
        current = day_cycle_index(day)
        assert current == (prev + 1) % 60
        assert 0 <= current < 60
        prev = current


def test_day_index_before_epoch_is_non_negative():
    assert day_cycle_index(date(1899, 12, 31)) == 9
    assert day_cycle_index(date(1800, 1, 1)) >= 0


@pytest.mark.parametrize("hour, branch", [
    (23, 0), (0, 0), (1, 1), (2, 1), (3, 2), (11, 6), (12, 6), (21, 11), (22, 11),
])
def test_hour_branch_windows(hour, branch):
    assert hour_branch_index(hour) == branch


def test_hour_stem_follows_day_stem():
    # Jia and Ji days start at Jia Zi; Yi and Geng days at Bing Zi.
    result = pillars(datetime(1985, 4, 21, 0, 30))
    assert result.day == "庚寅"
    assert result.hour == "丙子"


# ============================================================
# TERM CONTEXT INVARIANTS
# ============================================================

def test_term_context_brackets_the_moment():
    moment = datetime(1983, 11, 30, 3, 15, 7)
    for _ in range(120):
        ctx = term_context(moment)
        assert ctx.prev_time <= moment < ctx.next_time
        assert ctx.diff_prev_seconds >= 0
        assert ctx.diff_next_seconds > 0
        assert ctx.diff_prev_seconds == int((moment - ctx.prev_time).total_seconds())
        assert ctx.diff_next_seconds == int((ctx.next_time - moment).total_seconds())
        moment += timedelta(days=5, hours=7, minutes=13)


def test_term_context_exactly_at_term_counts_as_previous():
    term = year_record(2024).terms[5]
    ctx = term_context(term.time)
    assert ctx.prev == term
    assert ctx.diff_prev_seconds == 0


def test_term_context_breakdown_and_display():
    ctx = term_context(datetime(1985, 4, 21, 8))
    days, hours = ctx.since_prev
    assert days * 86400 + hours * 3600 <= ctx.diff_prev_seconds < (days * 86400 + (hours + 1) * 3600)
    text = str(ctx)
    assert text.startswith("前气: 谷雨 (")
    assert "后气: 立夏 (" in text


# ============================================================
# EDGES OF THE TABLE
# ============================================================

def test_unavailable_outside_table():
    assert pillars(datetime(1899, 6, 1)) is None
    assert pillars(datetime(2100, 6, 1)) is None
    assert term_context(datetime(2100, 6, 1)) is None
    assert lunar_new_year_offset(datetime(2100, 6, 1)) is None


def test_unavailable_at_first_days_of_table():
    # No Jie at or before 1900-01-01 exists in the table.
    assert pillars(datetime(1900, 1, 1, 12)) is None
    assert term_context(datetime(1900, 1, 1, 12)) is None


def test_unavailable_after_last_term_of_table():
    assert term_context(datetime(2099, 12, 31, 23)) is None
    assert pillars(datetime(2099, 12, 31, 23)) is not None


def test_pillars_to_dict():
    data = pillars(datetime(1985, 4, 21, 8)).to_dict()
    assert data["year"] == "乙丑"
    assert data["year_nayin"] == "海中金"
    assert data["description"] == "乙丑年 庚辰月 庚寅日 庚辰时"


def test_pillars_to_dict_columns():
    data = pillars(datetime(1985, 4, 21, 8)).to_dict()
    year, month, day, hour = data["columns"]

    assert year["position"] == "year"
    assert year["stem"] == {"chinese": "乙", "pinyin": "Yi", "element": "wood", "polarity": "yin"}
    assert year["branch"]["animal"] == "Ox"
    assert year["branch"]["element"] == "earth"
    assert year["combined"] == "Yi Chou"

    assert month["stem"]["chinese"] + month["branch"]["chinese"] == data["month"]
    assert day["stem"]["element"] == "metal"
    assert day["branch"]["animal"] == "Tiger"
    assert hour["position"] == "hour"
    assert hour["branch"]["pinyin"] == "Chen"
