# tests/conftest.py
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
TESTS = ROOT / "tests"

for p in (ROOT, TESTS):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

from piechart.animation import VirtualClock  # noqa: E402
from piechart.viz.pie import PieChart  # noqa: E402


# Fresh virtual clock per test; nothing runs until the test advances it.
@pytest.fixture
def clock() -> VirtualClock:
    return VirtualClock()


# Builds charts bound to the test's clock and unmounts them at teardown.
@pytest.fixture
def make_chart(clock):
    charts = []

    def _make(props):
        chart = PieChart(props, scheduler=clock)
        charts.append(chart)
        return chart

    yield _make
    for chart in charts:
        chart.unmount()
