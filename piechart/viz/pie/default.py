# piechart/viz/pie/default.py
from __future__ import annotations
from dataclasses import dataclass
from functools import partial
from typing import Any, Dict, List, Optional, Set, Tuple

from dominate import svg
from dominate.util import text

from piechart import logging as plog
from piechart.animation import FRAME_MS, AnimatedValue, VirtualClock, sequence, timing
from piechart.colors import color_fn, darken_color, stroke_for, to_css
from piechart.geometry import fmt_num, identity, make_accessor, pie
from piechart.options import ChartOptions, font_adapt, resolve_options

ANIMATION_START_DELAY = 1000
DEFAULT_NO_DATA_MESSAGE = "No data available"
DEFAULT_MONO_INNER_FILL = "#fff"
SVG_NS = "http://www.w3.org/2000/svg"

_log = plog.get_logger("pie")
_name_of = identity("name")
_color_of = identity("color")


@dataclass(frozen=True)
class Slice:
    index: int
    name: str
    value: float
    path: str
    centroid: Tuple[float, float]
    fill: Any
    stroke: str


def _paint(c: Any) -> str:
    return c if isinstance(c, str) else to_css(c)


def _translate(x: float, y: float) -> str:
    return f"translate({fmt_num(x)},{fmt_num(y)})"


class PieChart:
    """
    Pie / donut chart over a list of data items (mappings with name, value, color).

    props:
      data                        list of items; None renders the no-data message
      options                     nested options, deep-merged over the defaults
      r, R, center, color, palette  shorthand overrides of the nested options
      accessor / accessor_key     how to read an item's value (default key "value")
      no_data_message             fallback text (default "No data available")
      mono_item_inner_fill_color  inner circle fill for a single item (default "#fff")

    With options.animate.enabled and more than one item, slices start fully
    transparent and fade in one after another, starting ANIMATION_START_DELAY ms
    after the first render. unmount() cancels all of it.
    """

    def __init__(self, props: Optional[Dict[str, Any]] = None, *, scheduler: Any = None):
        self.props: Dict[str, Any] = dict(props or {})
        self.scheduler = scheduler if scheduler is not None else VirtualClock()

        # per-index render handles and animation values, owned for the component's lifetime
        self._slice_handles: Dict[int, Any] = {}
        self._animation_values: Dict[int, AnimatedValue] = {}
        self._slice_fills: Dict[int, Any] = {}
        self._finished: Set[int] = set()

        self._start_task: Any = None
        self._timeline: Any = None
        self._started = False
        self._mounted = True

    # ----------------------------
    # props helpers
    # ----------------------------

    def _data(self) -> Optional[List[Any]]:
        data = self.props.get("data")
        if isinstance(data, tuple):
            return list(data)
        return data if isinstance(data, list) else None

    def _should_anim(self, options: Optional[ChartOptions] = None) -> bool:
        data = self._data()
        options = options or resolve_options(self.props)
        return bool(options.animate.enabled) and data is not None and len(data) > 1

    def color(self, i: int) -> Any:
        """Palette color for slice i; stable for a given index and configuration."""
        options = resolve_options(self.props)
        return color_fn(options.color, options.palette)(i)

    def _fill_for(self, item: Any, i: int) -> Any:
        explicit = _color_of(item)
        return to_css(explicit) if explicit else self.color(i)

    def slices(self) -> List[Slice]:
        """Derived slices for the current props; recomputed on every call."""
        data = self._data()
        if not data:
            return []
        options = resolve_options(self.props)
        layout = pie(
            center=options.center,
            r=options.r,
            R=options.R,
            data=data,
            accessor=make_accessor(self.props.get("accessor"), self.props.get("accessor_key", "value")),
        )
        out: List[Slice] = []
        for c in layout.curves:
            fill = self._fill_for(c.item, c.index)
            out.append(Slice(
                index=c.index,
                name=str(_name_of(c.item) or ""),
                value=c.value,
                path=c.sector.path,
                centroid=c.sector.centroid,
                fill=fill,
                stroke=stroke_for(fill),
            ))
        return out

    # ----------------------------
    # rendering
    # ----------------------------

    def render(self) -> Any:
        data = self._data()
        if data is None:
            return text(self.props.get("no_data_message") or DEFAULT_NO_DATA_MESSAGE)

        options = resolve_options(self.props)
        label_attrs = font_adapt(options.label).svg_attrs()
        animate = self._should_anim(options)

        root = svg.svg(width=fmt_num(options.width), height=fmt_num(options.height), xmlns=SVG_NS)
        with root:
            with svg.g(transform=_translate(options.margin.left, options.margin.top)):
                if len(data) == 1:
                    _log.debug("render: single item (donut)")
                    self._render_single(data[0], options, label_attrs)
                else:
                    _log.debug(f"render: {len(data)} slices, animate={animate}")
                    self._render_slices(options, label_attrs, animate)

        if animate:
            self._schedule_start()
        return root

    def _render_single(self, item: Any, options: ChartOptions, label_attrs: Dict[str, str]) -> None:
        cx, cy = options.center
        r, R = options.r, options.R
        outer_fill = _paint(self._fill_for(item, 0))
        inner_fill = self.props.get("mono_item_inner_fill_color") or DEFAULT_MONO_INNER_FILL
        # the donut outline is always the darkened outer fill, string or not
        stroke = darken_color(outer_fill)

        with svg.g(cls="pie-mono"):
            svg.circle(r=fmt_num(R), cx=fmt_num(cx), cy=fmt_num(cy), stroke=stroke, fill=outer_fill)
            svg.circle(r=fmt_num(r), cx=fmt_num(cx), cy=fmt_num(cy), stroke=stroke, fill=inner_fill)
            svg.text(
                str(_name_of(item) or ""),
                x=fmt_num(cx),
                y=fmt_num(cy - R + ((R - r) / 2)),
                **label_attrs,
                **{"text-anchor": "middle"},
            )

    def _render_slices(self, options: ChartOptions, label_attrs: Dict[str, str], animate: bool) -> None:
        margin = options.margin
        self._slice_handles.clear()

        for s in self.slices():
            attrs = {"fill": _paint(s.fill), "d": s.path}
            if animate:
                value = self._animation_value(s.index, s.fill)
                attrs["fill-opacity"] = fmt_num(value.interpolate([0, 1], [0, 1]).get_value())
            else:
                attrs["fill-opacity"] = "1"
                attrs["stroke"] = _paint(s.stroke)

            with svg.g(cls="pie-slice", **{"data-index": str(s.index)}):
                handle = svg.path(**attrs)
                with svg.g(transform=_translate(margin.left, margin.top)):
                    svg.text(
                        s.name,
                        x=fmt_num(s.centroid[0]),
                        y=fmt_num(s.centroid[1]),
                        **label_attrs,
                        **{"text-anchor": "middle"},
                    )
            self._slice_handles[s.index] = handle

    # ----------------------------
    # animation
    # ----------------------------

    @property
    def animation_values(self) -> Dict[int, AnimatedValue]:
        return dict(self._animation_values)

    @property
    def start_pending(self) -> bool:
        return self._start_task is not None

    def _animation_value(self, index: int, fill: Any) -> AnimatedValue:
        self._slice_fills[index] = fill
        value = self._animation_values.get(index)
        if value is None:
            value = AnimatedValue(0)
            value.add_listener(partial(self._on_value, index))
            self._animation_values[index] = value
        return value

    def _on_value(self, index: int, _raw: float) -> None:
        handle = self._slice_handles.get(index)
        if handle is None or index in self._finished:
            return
        value = self._animation_values.get(index)
        if value is None:
            return

        opacity = value.interpolate([0, 1], [0, 1], extrapolate="clamp").get_value()
        handle["fill"] = _paint(self._slice_fills.get(index, handle["fill"]))
        handle["fill-opacity"] = fmt_num(opacity)
        if opacity == 1:
            self._finished.add(index)

    def _schedule_start(self) -> None:
        if not self._mounted or self._started or self._start_task is not None:
            return
        _log.debug(f"animation start scheduled in {ANIMATION_START_DELAY} ms")
        self._start_task = self.scheduler.call_later(ANIMATION_START_DELAY, self._start_animation)

    def _start_animation(self) -> None:
        self._start_task = None
        if not self._mounted:
            return
        self._started = True
        duration = resolve_options(self.props).animate.duration
        values = [self._animation_values[i] for i in sorted(self._animation_values)]
        _log.debug(f"animation started: {len(values)} slice(s), {fmt_num(duration)} ms each")
        self._timeline = sequence([timing(v, to_value=1, duration=duration) for v in values])
        self._timeline.start(self.scheduler, self._on_animation_finished)

    def _on_animation_finished(self, finished: bool) -> None:
        self._timeline = None
        for value in self._animation_values.values():
            value.remove_all_listeners()
        _log.debug(f"animation {'finished' if finished else 'stopped'}; listeners removed")

    def settle(self) -> None:
        """Run a virtual-clock scheduler until the pending animation (if any) is done."""
        run = getattr(self.scheduler, "run_until_idle", None)
        if not callable(run):
            return
        data = self._data() or []
        # start delay plus one fade per slice, and a frame of slack
        budget = ANIMATION_START_DELAY + len(data) * resolve_options(self.props).animate.duration + FRAME_MS
        run(budget)

    def unmount(self) -> None:
        """Tear down: cancel the pending start and any running fade, then drop all handles."""
        self._mounted = False
        if self._start_task is not None:
            self._start_task.cancel()
            self._start_task = None
        if self._timeline is not None:
            self._timeline.stop()
            self._timeline = None
        for value in self._animation_values.values():
            value.remove_all_listeners()
        self._animation_values.clear()
        self._slice_handles.clear()
        self._slice_fills.clear()
        self._finished.clear()
