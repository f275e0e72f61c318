# piechart/logging.py
from __future__ import annotations
import logging as _logging
import os
import sys

_ANSI = {
    "reset": "\x1b[0m",
    "green": "\x1b[32m",
    "yellow": "\x1b[33m",
    "red": "\x1b[31m",
    "cyan": "\x1b[36m",
    "gray": "\x1b[90m",
}

_MARKERS = {
    "ok": ("✓", "green"),
    "warn": ("⚠", "yellow"),
    "err": ("✖", "red"),
    "step": ("→", "cyan"),
}

_COLOR_ENABLED: bool = False
_ROOT = "piechart"
_LOGGER = _logging.getLogger(_ROOT)


def _supports_color() -> bool:
    return sys.stdout.isatty() and (os.environ.get("TERM") not in (None, "dumb"))


def c(text: str, color: str) -> str:
    if not _COLOR_ENABLED:
        return text
    return f"{_ANSI.get(color, '')}{text}{_ANSI['reset']}"


def marker(kind: str) -> str:
    sym, color = _MARKERS.get(kind, ("", "reset"))
    return c(sym, color)


def get_logger(area: str = "") -> _logging.Logger:
    """Child logger under the package root, e.g. get_logger("anim") -> piechart.anim."""
    area = (area or "").strip(".")
    return _LOGGER.getChild(area) if area else _LOGGER


def setup_logging(verbosity: int = 0, log_file: str | None = None) -> None:
    """
    Configure the package logger once for console (and optionally file) output.
    Verbosity: 0 -> WARNING, 1 -> INFO, 2+ -> DEBUG.
    Child loggers from get_logger() propagate here and need no handlers.
    """
    global _COLOR_ENABLED
    _COLOR_ENABLED = _supports_color()

    if verbosity >= 2:
        level = _logging.DEBUG
    elif verbosity == 1:
        level = _logging.INFO
    else:
        level = _logging.WARNING

    _LOGGER.handlers.clear()
    _LOGGER.setLevel(level)
    _LOGGER.propagate = False

    handlers: list[_logging.Handler] = [_logging.StreamHandler(stream=sys.stdout)]
    if log_file:
        handlers.append(_logging.FileHandler(log_file, encoding="utf-8"))

    for h in handlers:
        h.setLevel(level)
        h.setFormatter(_logging.Formatter("%(message)s"))
        _LOGGER.addHandler(h)


def log_info(msg: str) -> None:
    _LOGGER.info(msg)


def log_debug(msg: str) -> None:
    _LOGGER.debug(msg)


def log_warn(msg: str) -> None:
    _LOGGER.warning(f"{marker('warn')} {msg}")


def log_err(msg: str) -> None:
    _LOGGER.error(f"{marker('err')} {msg}")


def log_ok(msg: str) -> None:
    _LOGGER.info(f"{marker('ok')} {msg}")


def log_step(label: str, value: str = "") -> None:
    tail = f" {c(value, 'gray')}" if value else ""
    _LOGGER.info(f"{marker('step')} {label}{tail}")
