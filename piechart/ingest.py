# piechart/ingest.py
from __future__ import annotations
import json
from typing import Any, Dict, List
from piechart import logging as plog

class DataParser:
    """
    Parse a JSON data list for a pie chart.
    Accepted shapes:
      - [ {name, value, color?}, ... ]
      - { "data": [ ... ] }
    Required behavior:
      - every entry is an object with a "name" key
      - the accessor key (default "value") must exist; its value may be null
      - "color", when present, must be a string, a list or an {r, g, b} object
    """

    def __init__(self, accessor_key: str = "value"):
        self.accessor_key = accessor_key or "value"

    def parse(self, json_path: str) -> List[Dict[str, Any]]:
        with open(json_path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        return self.validate(raw, source=json_path)

    def validate(self, raw: Any, *, source: str = "<data>") -> List[Dict[str, Any]]:
        if isinstance(raw, dict):
            if "data" not in raw:
                raise KeyError(f"{source}: object input needs a 'data' list")
            raw = raw["data"]

        if not isinstance(raw, list):
            raise TypeError(f"{source}: data must be a list, got {type(raw).__name__}")

        validated: List[Dict[str, Any]] = []
        for idx, entry in enumerate(raw):
            if not isinstance(entry, dict):
                raise TypeError(f"{source}: entry #{idx} is not an object")
            if "name" not in entry:
                raise KeyError(f"{source}: entry #{idx} missing required field 'name'")
            if self.accessor_key not in entry:
                raise KeyError(f"{source}: entry #{idx} missing required field '{self.accessor_key}'")

            color = entry.get("color")
            if color is not None and not isinstance(color, (str, list, dict)):
                raise TypeError(f"{source}: entry #{idx} has unsupported color {color!r}")

            validated.append(dict(entry))

        plog.log_debug(f"{source}: {len(validated)} item(s)")
        return validated
