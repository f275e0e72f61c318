# tests/test_geometry.py
import math
import pytest
from piechart.geometry import TAU, fmt_num, identity, make_accessor, on_circle, pie, sector


def _layout(values, *, r=0.0, R=10.0, center=(0.0, 0.0), accessor=None):
    data = [{"name": f"S{i}", "value": v} for i, v in enumerate(values)]
    return pie(center=center, r=r, R=R, data=data, accessor=accessor or identity("value"))


# fmt_num: two decimals, trailing zeros and negative zero stripped.
@pytest.mark.parametrize("v,expected", [(12.5, "12.5"), (3.0, "3"), (-0.001, "0"), (1.23456, "1.23"), (0, "0")])
def test_fmt_num(v, expected):
    assert fmt_num(v) == expected


# on_circle: angle 0 is straight up, a quarter turn is to the right.
def test_on_circle_orientation():
    x, y = on_circle(10, 0)
    assert abs(x) < 1e-9 and abs(y + 10) < 1e-9
    x, y = on_circle(10, math.pi / 2)
    assert abs(x - 10) < 1e-9 and abs(y) < 1e-9


# pie: one curve per item, in order, sweeping value/total of the circle and covering it exactly.
def test_pie_angles_proportional_and_complete():
    layout = _layout([10, 20])
    assert [c.index for c in layout.curves] == [0, 1]
    assert layout.total == 30
    first, second = layout.curves
    assert first.sector.start == 0
    assert abs(first.sector.end - TAU / 3) < 1e-9
    assert abs(second.sector.start - first.sector.end) < 1e-12
    assert abs(second.sector.end - TAU) < 1e-9


# Centroid sits at mid-angle / mid-radius.
def test_centroid_mid_angle_mid_radius():
    layout = _layout([10, 20], r=0, R=10)
    cx, cy = layout.curves[0].sector.centroid
    # mid angle pi/3, mid radius 5
    assert abs(cx - 5 * math.sin(math.pi / 3)) < 1e-9
    assert abs(cy + 5 * math.cos(math.pi / 3)) < 1e-9


# Paths: outer arc, line to the inner radius, inner arc back, closed; large-arc flag for > half.
def test_sector_path_shape_and_large_arc_flag():
    small, big = _layout([1, 3], r=5, R=10, center=(50, 50)).curves
    assert small.sector.path.startswith("M 50 40 A 10 10 0 0 1 ")
    assert " L " in small.sector.path and small.sector.path.endswith("Z")
    assert " A 5 5 0 0 0 " in small.sector.path
    assert big.sector.path.split(" A ")[1].startswith("10 10 0 1 1")


# A slice spanning the whole circle is drawn as two half arcs (plus the inner ring when r > 0).
def test_full_circle_sector_uses_two_half_arcs():
    s = sector(center=(0, 0), r=4, R=8, start=0, end=TAU)
    assert s.path.count("A 8 8 0 1 1") == 2
    assert s.path.count("A 4 4 0 1 0") == 2
    only = _layout([0, 5, 0], r=0, R=8).curves[1]
    assert only.sector.path.count("A 8 8 0 1 1") == 2
    assert "A 0 0" not in only.sector.path


# Non-numeric, missing and negative values count as 0; an all-zero total yields empty sectors.
def test_unusable_values_and_zero_total():
    layout = _layout(["x", None, -3, 6])
    assert [c.value for c in layout.curves] == [0, 0, 0, 6]
    assert abs(layout.curves[3].sector.end - TAU) < 1e-9

    empty = _layout([0, 0])
    assert all(c.sector.start == c.sector.end == 0 for c in empty.curves)
    assert len(empty.curves) == 2


# make_accessor: callables are used as-is, otherwise a key lookup (default "value").
def test_make_accessor():
    item = {"value": 1, "size": 7}
    assert make_accessor(None)(item) == 1
    assert make_accessor(None, "size")(item) == 7
    assert make_accessor(lambda it: it["size"] * 2)(item) == 14

    class Obj:
        value = 3
    assert make_accessor()(Obj()) == 3
