# piechart/colors.py
from __future__ import annotations
import colorsys
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, List, NamedTuple, Optional, Sequence, Union

DEFAULT_SEED = "#9ac7f7"

_HEX_PAT = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_RGB_PAT = re.compile(r"^rgba?\(\s*([^)]*)\)$", re.IGNORECASE)


class Rgb(NamedTuple):
    r: float
    g: float
    b: float


def _cut(x: float) -> int:
    return min(255, int(math.floor(abs(x))))


def parse_color(value: Any) -> Optional[Rgb]:
    """
    Accepts "#rgb", "#rrggbb", "rgb(r,g,b)", "rgba(r,g,b,a)", {"r","g","b"} maps
    and 3-item sequences. Returns None for anything else.
    """
    if value is None:
        return None
    if isinstance(value, Rgb):
        return value
    if isinstance(value, dict):
        try:
            return Rgb(float(value["r"]), float(value["g"]), float(value["b"]))
        except (KeyError, TypeError, ValueError):
            return None
    if isinstance(value, str):
        s = value.strip()
        m = _HEX_PAT.match(s)
        if m:
            h = m.group(1)
            if len(h) == 3:
                h = "".join(ch * 2 for ch in h)
            return Rgb(int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16))
        m = _RGB_PAT.match(s)
        if m:
            parts = [p.strip() for p in m.group(1).split(",")]
            try:
                return Rgb(float(parts[0]), float(parts[1]), float(parts[2]))
            except (IndexError, ValueError):
                return None
        return None
    if isinstance(value, (list, tuple)) and len(value) >= 3:
        try:
            return Rgb(float(value[0]), float(value[1]), float(value[2]))
        except (TypeError, ValueError):
            return None
    return None


def to_css(value: Any) -> str:
    """Format as "rgb(r,g,b)"; strings that do not parse are passed through untouched."""
    rgb = parse_color(value)
    if rgb is None:
        return str(value)
    return f"rgb({_cut(rgb.r)},{_cut(rgb.g)},{_cut(rgb.b)})"


def multiply(rgb: Rgb, factor: float) -> Rgb:
    return Rgb(_cut(rgb.r * factor), _cut(rgb.g * factor), _cut(rgb.b * factor))


def darken(rgb: Rgb) -> Rgb:
    return multiply(rgb, 0.8)


def darken_color(value: Any) -> str:
    rgb = parse_color(value)
    if rgb is None:
        return str(value)
    return to_css(darken(rgb))


def _rotate_hue(rgb: Rgb, turn: float) -> Rgb:
    h, l, s = colorsys.rgb_to_hls(rgb.r / 255.0, rgb.g / 255.0, rgb.b / 255.0)
    r, g, b = colorsys.hls_to_rgb((h + turn) % 1.0, l, s)
    return Rgb(_cut(r * 255), _cut(g * 255), _cut(b * 255))


def mix(seed: Any) -> List[Rgb]:
    """
    Ten-shade palette around a seed color: the seed and four hue rotations,
    followed by the darkened versions of the same five.
    """
    base = parse_color(seed) or parse_color(DEFAULT_SEED)
    hues = [base] + [_rotate_hue(base, k / 5.0) for k in range(1, 5)]
    return hues + [darken(h) for h in hues]


def cyclic(items: Sequence[Any], i: int) -> Any:
    return items[i % len(items)]


# ----------------------------
# Configured color variants
# ----------------------------

@dataclass(frozen=True)
class SolidColor:
    color: Any
    palette: Optional[Sequence[Any]] = None

    def color_at(self, i: int) -> Any:
        pal = self.palette or mix(self.color)
        return to_css(cyclic(pal, i))


@dataclass(frozen=True)
class PaletteSeed:
    """Mapping-shaped color prop ({"color": ...}); the nested color seeds the palette."""
    color: Any
    palette: Optional[Sequence[Any]] = None

    def color_at(self, i: int) -> Any:
        pal = self.palette or mix(self.color or DEFAULT_SEED)
        return to_css(cyclic(pal, i))


@dataclass(frozen=True)
class ColorList:
    colors: Sequence[Any]

    def color_at(self, i: int) -> Any:
        if i >= len(self.colors):
            return to_css(cyclic(mix(self.colors[i % len(self.colors)]), i))
        return self.colors[i]


ColorSpec = Union[SolidColor, PaletteSeed, ColorList]


def color_spec(value: Any, palette: Optional[Sequence[Any]] = None) -> ColorSpec:
    """Classify the raw color prop. An explicit palette only applies to single colors."""
    pal = list(palette) if isinstance(palette, (list, tuple)) and palette else None
    if isinstance(value, (list, tuple)) and value and parse_color(value) is None:
        return ColorList(list(value))
    if isinstance(value, dict) and "r" not in value:
        return PaletteSeed(value.get("color"), pal)
    if isinstance(value, (list, tuple)) and not value:
        value = None
    return SolidColor(value or DEFAULT_SEED, pal)


def color_fn(value: Any, palette: Optional[Sequence[Any]] = None) -> Callable[[int], Any]:
    return color_spec(value, palette).color_at


def stroke_for(fill: Any) -> str:
    return fill if isinstance(fill, str) else darken_color(fill)
