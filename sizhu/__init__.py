"""Four Pillars (BaZi) and solar term lookup."""

from sizhu.cycle import cycle_index, nayin, stem_branch
from sizhu.pillars import pillars, term_context
from sizhu.table import year_record

__all__ = [
    "cycle_index",
    "nayin",
    "pillars",
    "stem_branch",
    "term_context",
    "year_record",
]
