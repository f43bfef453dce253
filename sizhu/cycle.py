"""
Sexagenary cycle (六十甲子) codec.

Maps Gregorian years to cycle positions, cycle positions to their
Heavenly Stem / Earthly Branch pair, and cycle positions to the
traditional Nayin (纳音) element tag.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


CYCLE_LENGTH = 60

# Year 4 CE was Jia Zi, the start of a cycle.
CYCLE_EPOCH_YEAR = 4


# ============================================================
# FUNDAMENTAL DATA STRUCTURES
# ============================================================

class Polarity(Enum):
    YANG = "yang"
    YIN = "yin"


class Element(Enum):
    WOOD = "wood"
    FIRE = "fire"
    EARTH = "earth"
    METAL = "metal"
    WATER = "water"


@dataclass(frozen=True)
class HeavenlyStem:
    chinese: str
    pinyin: str
    element: Element
    polarity: Polarity
    index: int  # 0-9 in the cycle

    def __str__(self):
        return self.chinese


@dataclass(frozen=True)
class EarthlyBranch:
    chinese: str
    pinyin: str
    animal: str
    element: Element
    polarity: Polarity
    index: int  # 0-11 in the cycle

    def __str__(self):
        return self.chinese


@dataclass(frozen=True)
class Pillar:
    stem: HeavenlyStem
    branch: EarthlyBranch
    position: str  # "year", "month", "day", "hour"

    def __str__(self):
        return self.stem.chinese + self.branch.chinese

    def to_dict(self):
        return {
            "position": self.position,
            "stem": {
                "chinese": self.stem.chinese,
                "pinyin": self.stem.pinyin,
                "element": self.stem.element.value,
                "polarity": self.stem.polarity.value,
            },
            "branch": {
                "chinese": self.branch.chinese,
                "pinyin": self.branch.pinyin,
                "animal": self.branch.animal,
                "element": self.branch.element.value,
                "polarity": self.branch.polarity.value,
            },
            "combined": f"{self.stem.pinyin} {self.branch.pinyin}",
        }


HEAVENLY_STEMS = (
    HeavenlyStem("甲", "Jia", Element.WOOD, Polarity.YANG, 0),
    HeavenlyStem("乙", "Yi", Element.WOOD, Polarity.YIN, 1),
    HeavenlyStem("丙", "Bing", Element.FIRE, Polarity.YANG, 2),
    HeavenlyStem("丁", "Ding", Element.FIRE, Polarity.YIN, 3),
    HeavenlyStem("戊", "Wu", Element.EARTH, Polarity.YANG, 4),
    HeavenlyStem("己", "Ji", Element.EARTH, Polarity.YIN, 5),
    HeavenlyStem("庚", "Geng", Element.METAL, Polarity.YANG, 6),
    HeavenlyStem("辛", "Xin", Element.METAL, Polarity.YIN, 7),
    HeavenlyStem("壬", "Ren", Element.WATER, Polarity.YANG, 8),
    HeavenlyStem("癸", "Gui", Element.WATER, Polarity.YIN, 9),
)

EARTHLY_BRANCHES = (
    EarthlyBranch("子", "Zi", "Rat", Element.WATER, Polarity.YANG, 0),
    EarthlyBranch("丑", "Chou", "Ox", Element.EARTH, Polarity.YIN, 1),
    EarthlyBranch("寅", "Yin", "Tiger", Element.WOOD, Polarity.YANG, 2),
    EarthlyBranch("卯", "Mao", "Rabbit", Element.WOOD, Polarity.YIN, 3),
    EarthlyBranch("辰", "Chen", "Dragon", Element.EARTH, Polarity.YANG, 4),
    EarthlyBranch("巳", "Si", "Snake", Element.FIRE, Polarity.YIN, 5),
    EarthlyBranch("午", "Wu", "Horse", Element.FIRE, Polarity.YANG, 6),
    EarthlyBranch("未", "Wei", "Goat", Element.EARTH, Polarity.YIN, 7),
    EarthlyBranch("申", "Shen", "Monkey", Element.METAL, Polarity.YANG, 8),
    EarthlyBranch("酉", "You", "Rooster", Element.METAL, Polarity.YIN, 9),
    EarthlyBranch("戌", "Xu", "Dog", Element.EARTH, Polarity.YANG, 10),
    EarthlyBranch("亥", "Hai", "Pig", Element.WATER, Polarity.YIN, 11),
)


# ============================================================
# NAYIN (纳音) TABLE
# ============================================================
#
# One entry per cycle position, Jia Zi first. Kept flat rather than
# derived from the pairwise grouping so each position reads directly.

NAYIN = (
    "海中金", "海中金", "炉中火", "炉中火", "大林木", "大林木",
    "路旁土", "路旁土", "剑锋金", "剑锋金", "山头火", "山头火",
    "涧下水", "涧下水", "城头土", "城头土", "白蜡金", "白蜡金",
    "杨柳木", "杨柳木", "泉中水", "泉中水", "屋上土", "屋上土",
    "霹雳火", "霹雳火", "松柏木", "松柏木", "长流水", "长流水",
    "沙中金", "沙中金", "山下火", "山下火", "平地木", "平地木",
    "壁上土", "壁上土", "金箔金", "金箔金", "覆灯火", "覆灯火",
    "天河水", "天河水", "大驿土", "大驿土", "钗钏金", "钗钏金",
    "桑柘木", "桑柘木", "大溪水", "大溪水", "沙中土", "沙中土",
    "天上火", "天上火", "石榴木", "石榴木", "大海水", "大海水",
)

assert len(NAYIN) == CYCLE_LENGTH


# ============================================================
# CODEC
# ============================================================

def cycle_index(year: int) -> int:
    """
    Position of a Gregorian year in the sexagenary cycle.

    The result is in [0, 60) for any year, including years before the epoch.

    Example:
        cycle_index(1984) == 0   # Jia Zi
        cycle_index(1985) == 1   # Yi Chou
    """
    return (year - CYCLE_EPOCH_YEAR) % CYCLE_LENGTH


def stem_branch(index: int) -> Optional[tuple[HeavenlyStem, EarthlyBranch]]:
    """Return the (stem, branch) pair at a cycle position, or None if out of range."""
    if not 0 <= index < CYCLE_LENGTH:
        return None
    return HEAVENLY_STEMS[index % 10], EARTHLY_BRANCHES[index % 12]


def nayin(index: int) -> Optional[str]:
    """Return the Nayin element tag at a cycle position, or None if out of range."""
    if not 0 <= index < CYCLE_LENGTH:
        return None
    return NAYIN[index]


def nayin_by_year(year: int) -> str:
    return NAYIN[cycle_index(year)]


def ganzhi(index: int) -> str:
    """Two-glyph stem-branch label, e.g. ganzhi(0) == "甲子"."""
    idx = index % CYCLE_LENGTH
    return HEAVENLY_STEMS[idx % 10].chinese + EARTHLY_BRANCHES[idx % 12].chinese


def make_pillar(stem_index: int, branch_index: int, position: str) -> Pillar:
    return Pillar(HEAVENLY_STEMS[stem_index % 10], EARTHLY_BRANCHES[branch_index % 12], position)
