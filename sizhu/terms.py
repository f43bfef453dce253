"""
The 24 solar terms (二十四节气).

Each term is defined by the Sun reaching a specific ecliptic longitude.
Twelve of them, the Jie (节), also mark BaZi month boundaries:

    Li Chun (315°)    → Yin (Tiger) month,   month ordinal 0
    Jing Zhe (345°)   → Mao (Rabbit) month,  month ordinal 1
    Qing Ming (15°)   → Chen (Dragon) month, month ordinal 2
    Li Xia (45°)      → Si (Snake) month,    month ordinal 3
    Mang Zhong (75°)  → Wu (Horse) month,    month ordinal 4
    Xiao Shu (105°)   → Wei (Goat) month,    month ordinal 5
    Li Qiu (135°)     → Shen (Monkey) month, month ordinal 6
    Bai Lu (165°)     → You (Rooster) month, month ordinal 7
    Han Lu (195°)     → Xu (Dog) month,      month ordinal 8
    Li Dong (225°)    → Hai (Pig) month,     month ordinal 9
    Da Xue (255°)     → Zi (Rat) month,      month ordinal 10
    Xiao Han (285°)   → Chou (Ox) month,     month ordinal 11

The other twelve are the Qi (中气) and never start a month.
"""

from enum import Enum
from typing import Optional


class SolarTerm(Enum):
    # (glyph, solar longitude, month ordinal or None for Qi terms)
    XIAO_HAN = ("小寒", 285, 11)
    DA_HAN = ("大寒", 300, None)
    LI_CHUN = ("立春", 315, 0)
    YU_SHUI = ("雨水", 330, None)
    JING_ZHE = ("惊蛰", 345, 1)
    CHUN_FEN = ("春分", 0, None)
    QING_MING = ("清明", 15, 2)
    GU_YU = ("谷雨", 30, None)
    LI_XIA = ("立夏", 45, 3)
    XIAO_MAN = ("小满", 60, None)
    MANG_ZHONG = ("芒种", 75, 4)
    XIA_ZHI = ("夏至", 90, None)
    XIAO_SHU = ("小暑", 105, 5)
    DA_SHU = ("大暑", 120, None)
    LI_QIU = ("立秋", 135, 6)
    CHU_SHU = ("处暑", 150, None)
    BAI_LU = ("白露", 165, 7)
    QIU_FEN = ("秋分", 180, None)
    HAN_LU = ("寒露", 195, 8)
    SHUANG_JIANG = ("霜降", 210, None)
    LI_DONG = ("立冬", 225, 9)
    XIAO_XUE = ("小雪", 240, None)
    DA_XUE = ("大雪", 255, 10)
    DONG_ZHI = ("冬至", 270, None)

    def __init__(self, chinese: str, longitude: int, month_ordinal: Optional[int]):
        self.chinese = chinese
        self.longitude = longitude
        self.month_ordinal = month_ordinal

    @property
    def is_jie(self) -> bool:
        """True for the twelve terms that open a BaZi month."""
        return self.month_ordinal is not None

    @property
    def pinyin(self) -> str:
        return self.name.replace("_", " ").title()

    def __str__(self):
        return self.chinese

    @classmethod
    def from_name(cls, name: str) -> "SolarTerm":
        """
        Resolve a raw table name to its term.

        Accepts the display glyph ("大雪"), the member name ("DA_XUE")
        or the spaced pinyin ("Da Xue"). Raises ValueError otherwise.
        """
        key = name.strip()
        term = _BY_GLYPH.get(key)
        if term is not None:
            return term
        try:
            return cls[key.upper().replace(" ", "_")]
        except KeyError:
            raise ValueError(f"Unknown solar term name: {name!r}") from None


_BY_GLYPH = {t.chinese: t for t in SolarTerm}

# Jie terms ordered by month ordinal (Li Chun first).
JIE_TERMS = tuple(sorted((t for t in SolarTerm if t.is_jie), key=lambda t: t.month_ordinal))
