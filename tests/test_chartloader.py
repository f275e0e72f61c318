# tests/test_chartloader.py
from __future__ import annotations
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict
import pytest
from piechart.chartloader import ChartLoader
from utility import examples_dir, write_yaml


# Standardized assertion message prefix for chart loader tests.
def _msg(label: str, text: str) -> str:
    return f"[CHART][{label}] {text}"


def _chart(**extra: Any) -> Dict[str, Any]:
    base: Dict[str, Any] = {"chart_version": "0.1", "data": [{"name": "A", "value": 1}, {"name": "B", "value": 2}]}
    base.update(extra)
    return base


# -------------------------
# Shipped examples
# -------------------------

# The card example pulls its data from the sibling JSON file and keeps props/options intact.
def test_loads_card_example():
    chart = ChartLoader(str(examples_dir() / "languages.yml")).load()
    assert chart["title"] == "Languages in the monorepo"
    assert chart["variant"] == "card"
    assert chart["legend_labels"] == {"Other": "Everything else"}

    props = chart["props"]
    assert len(props["data"]) == 5, _msg("languages", "expected 5 items from languages.json")
    assert props["options"]["animate"]["enabled"] is True
    assert props["options"]["legend_position"] == "bottomLeft"


# The single-item example loads inline data and shorthand props.
def test_loads_single_item_example():
    chart = ChartLoader(str(examples_dir() / "single.yml")).load()
    assert chart["variant"] is None
    assert chart["props"]["data"] == [{"name": "Up", "value": 100}]
    assert chart["props"]["mono_item_inner_fill_color"] == "#fdfdfd"


# -------------------------
# Fatal problems (strict and lenient)
# -------------------------

# One bad chart file per case; each must fail regardless of strictness.
@dataclass(frozen=True)
class BadCase:
    label: str
    content: Dict[str, Any]
    needle: str


BAD_CASES = [
    BadCase("no-version", {"data": []}, "chart_version"),
    BadCase("bad-version", _chart(chart_version="9.9"), "chart_version"),
    BadCase("props-not-map", _chart(props=[1, 2]), "props must be a mapping"),
    BadCase("options-not-map", _chart(props={"options": "big"}), "options must be a mapping"),
    BadCase("animate-not-map", _chart(props={"options": {"animate": True}}), "animate must be a mapping"),
    BadCase("center-shape", _chart(props={"center": [1, 2, 3]}), "center"),
    BadCase("nested-center-shape", _chart(props={"options": {"center": 5}}), "center"),
    BadCase("legend-labels", _chart(legend_labels=["x"]), "legend_labels"),
    BadCase("traversal", {"chart_version": "0.1", "data_file": "../outside.json"}, "within"),
    BadCase("extension", {"chart_version": "0.1", "data_file": "data.txt"}, ".json"),
    BadCase("missing-file", {"chart_version": "0.1", "data_file": "gone.json"}, "not found"),
]


@pytest.mark.parametrize("case", BAD_CASES, ids=lambda c: c.label)
@pytest.mark.parametrize("strict", [True, False], ids=["strict", "lenient"])
def test_fatal_problems_raise(case: BadCase, strict: bool, tmp_path: Path):
    (tmp_path / "data.txt").write_text("[]", encoding="utf-8")
    p = write_yaml(tmp_path, "chart.yml", case.content)
    with pytest.raises(ValueError) as ei:
        ChartLoader(str(p), strict=strict).load()
    assert case.needle in str(ei.value), _msg(case.label, f"unexpected error: {ei.value}")


# -------------------------
# Non-fatal problems
# -------------------------

# Unknown prop keys fail in strict mode and are dropped in lenient mode.
def test_unknown_prop_key_strict_vs_lenient(tmp_path: Path):
    p = write_yaml(tmp_path, "chart.yml", _chart(props={"radius": 5, "r": 10}))
    with pytest.raises(ValueError):
        ChartLoader(str(p)).load()

    props = ChartLoader(str(p), strict=False).load()["props"]
    assert "radius" not in props
    assert props["r"] == 10


# Unknown option keys are kept (the options resolver ignores them) but flagged.
def test_unknown_option_key_lenient_keeps_options(tmp_path: Path):
    p = write_yaml(tmp_path, "chart.yml", _chart(props={"options": {"glow": 1, "width": 300}}))
    with pytest.raises(ValueError):
        ChartLoader(str(p)).load()
    props = ChartLoader(str(p), strict=False).load()["props"]
    assert props["options"]["width"] == 300


# Unknown variants fall back to the default variant in lenient mode.
def test_unknown_variant_lenient(tmp_path: Path):
    p = write_yaml(tmp_path, "chart.yml", _chart(variant="Radar"))
    with pytest.raises(ValueError):
        ChartLoader(str(p)).load()
    assert ChartLoader(str(p), strict=False).load()["variant"] is None


# Inline data wins over data_file; lenient mode only warns about the conflict.
def test_inline_data_wins_over_data_file(tmp_path: Path):
    (tmp_path / "d.json").write_text(json.dumps([{"name": "File", "value": 1}]), encoding="utf-8")
    p = write_yaml(tmp_path, "chart.yml", _chart(data_file="d.json"))
    chart = ChartLoader(str(p), strict=False).load()
    assert [it["name"] for it in chart["props"]["data"]] == ["A", "B"]


# -------------------------
# Defaults
# -------------------------

# Title defaults to the file stem; no data leaves props["data"] unset (renders the no-data text).
def test_title_default_and_missing_data(tmp_path: Path):
    p = write_yaml(tmp_path, "sales_q3.yml", {"chart_version": "0.1", "variant": " CARD "})
    chart = ChartLoader(str(p)).load()
    assert chart["title"] == "sales_q3"
    assert chart["variant"] == "card"
    assert "data" not in chart["props"]
    assert chart["legend_labels"] == {}


# data_file entries are validated with the chart's accessor key.
def test_data_file_uses_accessor_key(tmp_path: Path):
    (tmp_path / "d.json").write_text(json.dumps({"data": [{"name": "A", "size": 4}]}), encoding="utf-8")
    p = write_yaml(tmp_path, "chart.yml", {"chart_version": "0.1", "data_file": "d.json",
                                           "props": {"accessor_key": "size"}})
    assert ChartLoader(str(p)).load()["props"]["data"] == [{"name": "A", "size": 4}]
