from __future__ import annotations
import os
from typing import Any, Dict, List, Optional
import yaml
from piechart import logging as plog
from piechart.ingest import DataParser
from piechart.options import DEFAULT_OPTIONS

_SUPPORTED_CHART_VERSIONS = {"0.1"}
_PROP_KEYS = {
    "options", "r", "R", "center", "color", "palette",
    "accessor_key", "no_data_message", "mono_item_inner_fill_color",
}
_OPTION_KEYS = set(DEFAULT_OPTIONS.keys()) | {"center", "palette"}
_VARIANTS = {"default", "card"}


class ChartLoader:
    """
    Loads a YAML chart file:
      chart_version: "0.1"
      title: "..."                       (optional, default: file stem)
      variant: "default" | "card"        (optional)
      data: [ {name, value, color?} ]    (inline data) or
      data_file: "relative/path.json"    (JSON list, see DataParser)
      legend_labels: { name: text }      (optional, card legend)
      props:
        options: { margin, width, height, color, r, R, legend_position, animate, label, ... }
        r, R, center, color, palette, accessor_key, no_data_message, mono_item_inner_fill_color

    Notes:
      - data_file must be a .json file inside the YAML file's directory.
      - inline data wins over data_file when both are given.
      - unknown prop/option keys only warn; wrong shapes are fatal.
    """

    def __init__(self, yaml_path: str, *, strict: bool = True):
        self.yaml_path = yaml_path
        self.strict = strict

    def _warn_or_raise(self, msg: str, *, fatal: bool = False) -> None:
        if fatal or self.strict:
            plog.log_err(msg)
            raise ValueError(msg)
        plog.log_warn(msg)

    def _normalize_props(self, raw_props: Any) -> Dict[str, Any]:
        if raw_props is None:
            return {}
        if not isinstance(raw_props, dict):
            self._warn_or_raise("props must be a mapping.", fatal=True)

        props: Dict[str, Any] = {}
        for k, v in raw_props.items():
            if k not in _PROP_KEYS:
                self._warn_or_raise(f"props: unknown key '{k}' ignored.", fatal=False)
                continue
            props[k] = v

        options = props.get("options")
        if options is not None:
            if not isinstance(options, dict):
                self._warn_or_raise("props.options must be a mapping.", fatal=True)
            for k in options:
                if k not in _OPTION_KEYS:
                    self._warn_or_raise(f"props.options: unknown key '{k}'.", fatal=False)
            animate = options.get("animate")
            if animate is not None and not isinstance(animate, dict):
                self._warn_or_raise("props.options.animate must be a mapping.", fatal=True)

        center = props.get("center")
        if center is None and isinstance(options, dict):
            center = options.get("center")
        if center is not None and (not isinstance(center, list) or len(center) != 2):
            self._warn_or_raise("center must be a list of two numbers [x, y].", fatal=True)

        return props

    def _safe_data_path(self, rel_path: Any) -> str:
        p = str(rel_path).strip()
        base_dir = os.path.dirname(os.path.abspath(self.yaml_path))
        abs_path = os.path.abspath(os.path.join(base_dir, p))

        # Prevent path traversal outside the chart directory
        if os.path.commonpath([base_dir, abs_path]) != base_dir:
            self._warn_or_raise("data_file must stay within the chart file's directory.", fatal=True)

        if os.path.splitext(abs_path)[1].lower() != ".json":
            self._warn_or_raise("data_file must point to a .json file.", fatal=True)

        if not os.path.isfile(abs_path):
            self._warn_or_raise(f"data_file not found: {p}", fatal=True)

        return abs_path

    def _load_data(self, raw: Dict[str, Any], accessor_key: str) -> Optional[List[Dict[str, Any]]]:
        parser = DataParser(accessor_key)
        inline = raw.get("data")
        data_file = raw.get("data_file")

        if inline is not None:
            if data_file:
                self._warn_or_raise("both data and data_file given; using inline data.", fatal=False)
            return parser.validate(inline, source=self.yaml_path)

        if data_file:
            path = self._safe_data_path(data_file)
            plog.log_step("Reading data:", path)
            return parser.parse(path)

        return None

    def load(self) -> Dict[str, Any]:
        with open(self.yaml_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        if not isinstance(raw, dict):
            self._warn_or_raise("Chart file must contain a mapping.", fatal=True)

        version = str(raw.get("chart_version", "")).strip()
        if version not in _SUPPORTED_CHART_VERSIONS:
            self._warn_or_raise(
                f"Unsupported or missing chart_version '{version}'. Supported: {sorted(_SUPPORTED_CHART_VERSIONS)}",
                fatal=True,
            )

        props = self._normalize_props(raw.get("props"))

        variant = raw.get("variant")
        variant = str(variant).strip().lower() if variant is not None and str(variant).strip() else None
        if variant is not None and variant not in _VARIANTS:
            self._warn_or_raise(f"Unknown variant '{variant}'; using 'default'.", fatal=False)
            variant = None

        legend_labels = raw.get("legend_labels") or {}
        if not isinstance(legend_labels, dict):
            self._warn_or_raise("legend_labels must be a mapping.", fatal=True)

        data = self._load_data(raw, str(props.get("accessor_key") or "value"))
        if data is not None:
            props["data"] = data

        title = raw.get("title") or os.path.splitext(os.path.basename(self.yaml_path))[0]

        return {
            "title": str(title),
            "variant": variant,
            "legend_labels": {str(k): str(v) for k, v in legend_labels.items()},
            "props": props,
        }
