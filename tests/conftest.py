import copy

import pytest

from sizhu.ephemeris import generate_rows
from sizhu.table import YearTable

SMALL_MIN_YEAR = 1984
SMALL_MAX_YEAR = 1986


@pytest.fixture(scope="session")
def small_rows():
    """Raw rows for 1984-1986, generated once per session."""
    return generate_rows(SMALL_MIN_YEAR, SMALL_MAX_YEAR)


@pytest.fixture
def make_table(small_rows):
    """Build a YearTable over a (possibly edited) copy of the small rows."""

    def _make(edit=None):
        rows = copy.deepcopy(small_rows)
        if edit is not None:
            edit(rows)
        calls = []

        def source():
            calls.append(1)
            return rows

        table = YearTable(source, SMALL_MIN_YEAR, SMALL_MAX_YEAR)
        table.calls = calls
        return table

    return _make
