# piechart/viz/pie/__init__.py
from __future__ import annotations
from typing import Any, Dict, Optional, Tuple
from .default import PieChart, Slice, ANIMATION_START_DELAY, DEFAULT_NO_DATA_MESSAGE
from .card import render_pie_card, render_legend

__all__ = [
    "PieChart",
    "Slice",
    "ANIMATION_START_DELAY",
    "DEFAULT_NO_DATA_MESSAGE",
    "render_pie_card",
    "render_legend",
    "render_pie_variant",
]


def render_pie_variant(
    title: str,
    props: Dict[str, Any],
    *,
    scheduler: Any = None,
    settle: bool = False,
    legend_labels: Optional[Dict[str, str]] = None,
    variant: Optional[str] = None,
) -> Tuple[PieChart, Any]:
    """
    Returns (chart, node). Variants:
      - "default": the bare SVG scene (or the no-data text)
      - "card":    HTML card with title, chart and legend
    Unknown variants fall back to "default". With settle=True a virtual-clock
    scheduler is run until the fade-in animation is over before returning.
    """
    v = (variant or "default").strip().lower()
    chart = PieChart(props, scheduler=scheduler)
    node = chart.render()
    if settle:
        chart.settle()

    if v == "card":
        return chart, render_pie_card(title, chart, node, legend_labels=legend_labels)
    return chart, node
