# piechart/geometry.py
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple

Point = Tuple[float, float]

TAU = 2 * math.pi
_FULL_TURN_EPS = 1e-9


def fmt_num(v: float) -> str:
    """Two-decimal SVG number without trailing zeros ("12.50" -> "12.5", "-0.00" -> "0")."""
    s = f"{float(v):.2f}".rstrip("0").rstrip(".")
    return "0" if s in ("", "-0") else s


def on_circle(r: float, angle: float) -> Point:
    # angle 0 is 12 o'clock, growing clockwise (SVG y axis points down)
    return (r * math.sin(angle), -r * math.cos(angle))


def _plus(a: Point, b: Point) -> Point:
    return (a[0] + b[0], a[1] + b[1])


def _xy(p: Point) -> str:
    return f"{fmt_num(p[0])} {fmt_num(p[1])}"


def identity(key: Any) -> Callable[[Any], Any]:
    """Accessor reading `key` from a mapping (or attribute of an object)."""
    def _get(item: Any) -> Any:
        if isinstance(item, dict):
            return item.get(key)
        return getattr(item, str(key), None)
    return _get


def make_accessor(accessor: Optional[Callable[[Any], Any]] = None, key: Any = "value") -> Callable[[Any], Any]:
    if callable(accessor):
        return accessor
    return identity(key if key is not None else "value")


def _value(item: Any, accessor: Callable[[Any], Any]) -> float:
    try:
        v = float(accessor(item))
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(v) or v < 0:
        return 0.0
    return v


@dataclass(frozen=True)
class Sector:
    path: str
    centroid: Point
    start: float
    end: float


@dataclass(frozen=True)
class Curve:
    item: Any
    index: int
    value: float
    sector: Sector


@dataclass(frozen=True)
class PieLayout:
    curves: List[Curve]
    total: float


def sector(*, center: Point, r: float, R: float, start: float, end: float) -> Sector:
    mid_angle = (start + end) / 2
    mid_radius = (r + R) / 2
    centroid = _plus(center, on_circle(mid_radius, mid_angle))

    if end - start >= TAU - _FULL_TURN_EPS:
        # a single arc cannot close on itself; draw the ring as two half arcs
        a = _plus(center, on_circle(R, start))
        a2 = _plus(center, on_circle(R, start + math.pi))
        parts = [
            f"M {_xy(a)}",
            f"A {fmt_num(R)} {fmt_num(R)} 0 1 1 {_xy(a2)}",
            f"A {fmt_num(R)} {fmt_num(R)} 0 1 1 {_xy(a)}",
        ]
        if r > 0:
            d = _plus(center, on_circle(r, start))
            d2 = _plus(center, on_circle(r, start + math.pi))
            parts += [
                f"M {_xy(d)}",
                f"A {fmt_num(r)} {fmt_num(r)} 0 1 0 {_xy(d2)}",
                f"A {fmt_num(r)} {fmt_num(r)} 0 1 0 {_xy(d)}",
            ]
        parts.append("Z")
        return Sector(path=" ".join(parts), centroid=centroid, start=start, end=end)

    a = _plus(center, on_circle(R, start))
    b = _plus(center, on_circle(R, end))
    c = _plus(center, on_circle(r, end))
    d = _plus(center, on_circle(r, start))
    large = 1 if end - start > math.pi else 0

    path = (
        f"M {_xy(a)} "
        f"A {fmt_num(R)} {fmt_num(R)} 0 {large} 1 {_xy(b)} "
        f"L {_xy(c)} "
        f"A {fmt_num(r)} {fmt_num(r)} 0 {large} 0 {_xy(d)} "
        f"Z"
    )
    return Sector(path=path, centroid=centroid, start=start, end=end)


def pie(
    *,
    center: Point,
    r: float,
    R: float,
    data: Sequence[Any],
    accessor: Callable[[Any], Any],
) -> PieLayout:
    """
    Lay out one sector per data item, in data order, each spanning
    value / total of the full turn. Unusable values count as 0; with a zero
    total every sector is empty.
    """
    values = [_value(item, accessor) for item in data]
    total = sum(values)
    scale = TAU / total if total > 0 else 0.0

    curves: List[Curve] = []
    angle = 0.0
    for i, (item, v) in enumerate(zip(data, values)):
        end = angle + v * scale
        curves.append(Curve(item=item, index=i, value=v,
                            sector=sector(center=center, r=r, R=R, start=angle, end=end)))
        angle = end
    return PieLayout(curves=curves, total=total)
