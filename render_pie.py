#!/usr/bin/env python3
# render_pie.py
import argparse
import os
import sys
from typing import Any, Dict, List, Optional

from dominate import document, tags
from dominate.util import raw

from piechart import logging as plog
from piechart.animation import VirtualClock
from piechart.chartloader import ChartLoader
from piechart.ingest import DataParser
from piechart.viz.pie import render_pie_variant

OUT_DIR = "results"
CSS_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data", "style.css")


def _load_style(path: str) -> Optional[str]:
    if not os.path.isfile(path):
        plog.log_debug(f"No stylesheet at {path}; writing unstyled HTML.")
        return None
    with open(path, "r", encoding="utf-8") as f:
        return "\n" + f.read() + "\n"


def _load_chart(args: argparse.Namespace) -> Dict[str, Any]:
    if args.config:
        plog.log_step("Loading chart:", args.config)
        chart = ChartLoader(args.config, strict=not args.lenient).load()
    else:
        chart = {"title": "Pie chart", "variant": None, "legend_labels": {}, "props": {}}

    if args.data:
        plog.log_step("Reading data:", args.data)
        accessor_key = str(chart["props"].get("accessor_key") or "value")
        chart["props"]["data"] = DataParser(accessor_key).parse(args.data)

    if args.title:
        chart["title"] = args.title
    if args.variant:
        chart["variant"] = args.variant.strip().lower()
    return chart


def _html(title: str, node: Any, style: Optional[str]) -> str:
    doc = document(title=title)
    if style:
        doc.head.add(tags.style(raw(style)))
    doc.add(node)
    return str(doc)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Render a pie / donut chart to SVG or HTML.")
    p.add_argument("-c", "--config", help="Path to the chart YAML file", metavar="file")
    p.add_argument("-d", "--data", help="JSON data list (overrides the chart's data)", metavar="file")
    p.add_argument("-o", "--output-file", default="pie.svg", metavar="outfile",
                   help="Output name inside the output dir; .svg or .html (default: pie.svg)")
    p.add_argument("--out-dir", default=OUT_DIR, help=f"Output directory (default: {OUT_DIR})")
    p.add_argument("--variant", choices=["default", "card"], help="Override the chart variant")
    p.add_argument("--title", help="Override the chart title")
    p.add_argument("--settle", action="store_true",
                   help="Play the fade-in animation to the end before exporting")
    p.add_argument("--lenient", action="store_true",
                   help="Only warn about non-fatal chart file problems")
    p.add_argument("-v", "--verbose", action="count", default=0,
                   help="Increase log verbosity (-v, -vv)")
    return p


def main(argv: Optional[List[str]] = None) -> str:
    args = build_parser().parse_args(argv)
    plog.setup_logging(args.verbose)

    if not args.config and not args.data:
        plog.log_err("Nothing to render: pass --config and/or --data.")
        raise SystemExit(2)

    chart_cfg = _load_chart(args)
    out_name = os.path.basename(args.output_file)
    as_html = os.path.splitext(out_name)[1].lower() in {".html", ".htm"}

    variant = chart_cfg.get("variant")
    plog.log_info(f"Chart '{chart_cfg['title']}', variant={variant or 'default'}, output={out_name}")
    if variant == "card" and not as_html:
        plog.log_warn("The card variant needs HTML output; exporting the bare SVG instead.")
        variant = "default"

    chart, node = render_pie_variant(
        chart_cfg["title"],
        chart_cfg["props"],
        scheduler=VirtualClock(),
        settle=args.settle,
        legend_labels=chart_cfg.get("legend_labels"),
        variant=variant,
    )
    plog.log_ok(f"Rendered {len(chart.slices())} slice(s).")

    os.makedirs(args.out_dir, exist_ok=True)
    out_path = os.path.join(args.out_dir, out_name)
    content = _html(chart_cfg["title"], node, _load_style(CSS_PATH)) if as_html else node.render()

    plog.log_step("Writing output:", out_path)
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(content)

    chart.unmount()
    plog.log_ok("Done.")
    return out_path


if __name__ == "__main__":
    try:
        main()
    except SystemExit:
        raise
    except Exception as e:
        plog.log_err(f"Error: {e}")
        sys.exit(1)
