# piechart/options.py
from __future__ import annotations
import math
from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple
from piechart.geometry import fmt_num

DEFAULT_OPTIONS: Dict[str, Any] = {
    "margin": {"top": 20, "left": 20, "right": 20, "bottom": 20},
    "width": 600,
    "height": 600,
    "color": "#2980B9",
    "r": 100,
    "R": 200,
    "legend_position": "topLeft",
    "animate": {
        "enabled": False,
        "type": "oneByOne",
        "duration": 200,
        "fill_transition": 3,
    },
    "label": {
        "font_family": "Arial",
        "font_size": 14,
        "bold": True,
        "italic": False,
        "color": "#ECF0F1",
    },
}


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge dicts with 'explicit null clears default' semantics."""
    out = deepcopy(base) if base else {}
    for k, v in (override or {}).items():
        if v is None:
            out[k] = None
        elif isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _num(v: Any) -> Optional[float]:
    """Numeric value of v, or None for missing, bool, non-numeric and NaN input."""
    if v is None or isinstance(v, bool):
        return None
    try:
        f = float(v)
    except (TypeError, ValueError):
        return None
    if math.isnan(f):
        return None
    return f


def _point(v: Any) -> Optional[Tuple[float, float]]:
    if not isinstance(v, (list, tuple)) or len(v) < 2:
        return None
    x, y = _num(v[0]), _num(v[1])
    if x is None or y is None:
        return None
    return (x, y)


@dataclass(frozen=True)
class Margin:
    top: float = 0.0
    left: float = 0.0
    right: float = 0.0
    bottom: float = 0.0


@dataclass(frozen=True)
class AnimationConfig:
    enabled: bool = False
    type: str = "oneByOne"
    duration: float = 200.0
    fill_transition: float = 3.0


@dataclass(frozen=True)
class LabelStyle:
    font_family: str = "Arial"
    font_size: float = 14.0
    bold: bool = True
    italic: bool = False
    color: str = "#ECF0F1"


@dataclass(frozen=True)
class TextStyle:
    font_family: str
    font_size: float
    font_weight: str
    font_style: str
    fill: str

    def svg_attrs(self) -> Dict[str, str]:
        return {
            "font-family": self.font_family,
            "font-size": fmt_num(self.font_size),
            "font-weight": self.font_weight,
            "font-style": self.font_style,
            "fill": self.fill,
        }


@dataclass(frozen=True)
class ChartOptions:
    margin: Margin
    width: float
    height: float
    chart_width: float
    chart_height: float
    r: float
    R: float
    center: Tuple[float, float]
    legend_position: str
    animate: AnimationConfig
    label: LabelStyle
    color: Any
    palette: Any


def font_adapt(label: LabelStyle) -> TextStyle:
    return TextStyle(
        font_family=label.font_family,
        font_size=label.font_size,
        font_weight="bold" if label.bold else "normal",
        font_style="italic" if label.italic else "normal",
        fill=label.color,
    )


def _margin(raw: Any) -> Margin:
    m = raw if isinstance(raw, dict) else {}
    return Margin(
        top=_num(m.get("top")) or 0.0,
        left=_num(m.get("left")) or 0.0,
        right=_num(m.get("right")) or 0.0,
        bottom=_num(m.get("bottom")) or 0.0,
    )


def _animation(raw: Any) -> AnimationConfig:
    a = raw if isinstance(raw, dict) else {}
    base = AnimationConfig()
    duration = _num(a.get("duration"))
    fill_transition = _num(a.get("fill_transition"))
    return AnimationConfig(
        enabled=bool(a.get("enabled", base.enabled)),
        type=str(a.get("type") or base.type),
        duration=max(0.0, duration) if duration is not None else base.duration,
        fill_transition=fill_transition if fill_transition is not None else base.fill_transition,
    )


def _label(raw: Any) -> LabelStyle:
    lb = raw if isinstance(raw, dict) else {}
    base = LabelStyle()
    size = _num(lb.get("font_size"))
    return LabelStyle(
        font_family=str(lb.get("font_family") or base.font_family),
        font_size=size if size else base.font_size,
        bold=bool(lb.get("bold", base.bold)),
        italic=bool(lb.get("italic", base.italic)),
        color=str(lb.get("color") or base.color),
    )


def merged_options(props: Dict[str, Any]) -> Dict[str, Any]:
    user = props.get("options")
    return deep_merge(DEFAULT_OPTIONS, user if isinstance(user, dict) else {})


def resolve_options(props: Dict[str, Any]) -> ChartOptions:
    """
    Layer props over the static defaults.

    Shorthand props (r, R, center, color, palette) win over the nested options
    field by field. Radii fall back to values derived from the drawable area:
      x = chart_width / 2 - margin.left, y = chart_height / 2 - margin.top
      r -> radius / 2, R -> radius, where radius = min(x, y)
    r only needs to be numeric (0 is kept); R must be non-zero.
    Nothing here raises: unusable values silently fall back.
    """
    props = props or {}
    opts = merged_options(props)

    margin = _margin(opts.get("margin"))
    width = _num(opts.get("width")) or DEFAULT_OPTIONS["width"]
    height = _num(opts.get("height")) or DEFAULT_OPTIONS["height"]
    chart_width = width - margin.left - margin.right
    chart_height = height - margin.top - margin.bottom

    x = chart_width / 2 - margin.left
    y = chart_height / 2 - margin.top
    radius = min(x, y)

    r = _num(props.get("r"))
    if r is None:
        r = _num(opts.get("r"))
    if r is None:
        r = radius / 2

    R = _num(props.get("R")) or _num(opts.get("R")) or radius

    center = _point(props.get("center")) or _point(opts.get("center")) or (x, y)

    return ChartOptions(
        margin=margin,
        width=width,
        height=height,
        chart_width=chart_width,
        chart_height=chart_height,
        r=r,
        R=R,
        center=center,
        legend_position=str(opts.get("legend_position") or DEFAULT_OPTIONS["legend_position"]),
        animate=_animation(opts.get("animate")),
        label=_label(opts.get("label")),
        color=props.get("color") or opts.get("color"),
        palette=props.get("palette") or opts.get("palette"),
    )
