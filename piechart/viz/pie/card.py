# piechart/viz/pie/card.py
from __future__ import annotations
from typing import Any, Dict, List, Optional
from dominate import tags

from piechart.colors import to_css
from piechart.options import resolve_options
from .default import PieChart, Slice

# Pie card (title + chart + legend with value and percentage per slice)

_TOP_POSITIONS = {"topleft", "topright", "top"}


def _pct2(value: float, total: float) -> float:
    """Share of the pie total in percent, two decimals, kept within [0, 100]."""
    if total <= 0:
        return 0.0
    pct = min(100.0, max(0.0, float(value) * 100.0 / float(total)))
    # nudge so a share like 12.345 rounds up, not down through float error
    return round(pct + 1e-12, 2)


def _fmt_value(v: float) -> str:
    s = f"{float(v):.6g}"
    return s[:-2] if s.endswith(".0") else s


def render_legend(slices: List[Slice], *, position: str = "topLeft",
                  legend_labels: Optional[Dict[str, str]] = None) -> tags.div:
    legend_labels = legend_labels or {}
    total = sum(s.value for s in slices)
    legend = tags.div(_class=f"pie-legend legend-{position}")
    for s in slices:
        row = tags.div(_class="legend-row", **{"data-index": str(s.index)})
        swatch = tags.span(_class="legend-swatch")
        fill = s.fill if isinstance(s.fill, str) else to_css(s.fill)
        swatch["style"] = f"background:{fill}"
        row.add(swatch)
        row.add(tags.span(f"{legend_labels.get(s.name, s.name)}: ", _class="legend-text"))
        row.add(tags.span(_fmt_value(s.value), _class="legend-text"))
        row.add(tags.span(f" ({_pct2(s.value, total):.2f}%)", _class="legend-text"))
        legend.add(row)
    return legend


def render_pie_card(
    title: str,
    chart: PieChart,
    chart_node: Any,
    *,
    legend_labels: Optional[Dict[str, str]] = None,
) -> tags.div:
    """
    Card around an already rendered chart:
      - title:         card title
      - chart:         the PieChart that produced chart_node (slices feed the legend)
      - chart_node:    chart.render() output (SVG, or the no-data text)
      - legend_labels: map slice name -> legend text (default = the name)
    The legend goes above the chart for top* legend positions, below otherwise.
    No legend is drawn when there are no slices.
    """
    position = resolve_options(chart.props).legend_position
    slices = chart.slices()

    card = tags.div(_class="pie-card")
    card.add(tags.div(title, _class="pie-title"))

    wrap = tags.div(_class="pie-wrap")
    wrap.add(chart_node)

    if not slices:
        card.add(wrap)
        return card

    legend = render_legend(slices, position=position, legend_labels=legend_labels)
    if position.strip().lower() in _TOP_POSITIONS:
        card.add(legend)
        card.add(wrap)
    else:
        card.add(wrap)
        card.add(legend)
    return card
