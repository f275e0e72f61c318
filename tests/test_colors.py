# tests/test_colors.py
from __future__ import annotations
import pytest
from piechart.colors import (
    ColorList,
    PaletteSeed,
    Rgb,
    SolidColor,
    color_fn,
    color_spec,
    darken_color,
    mix,
    parse_color,
    stroke_for,
    to_css,
)


# parse_color: hex (short and long), rgb()/rgba() strings, {r,g,b} maps and 3-sequences all parse.
@pytest.mark.parametrize("raw,expected", [
    ("#ffffff", Rgb(255, 255, 255)),
    ("#0f0", Rgb(0, 255, 0)),
    ("2980B9", Rgb(41, 128, 185)),
    ("rgb(10, 20, 30)", Rgb(10, 20, 30)),
    ("rgba(10,20,30,0.5)", Rgb(10, 20, 30)),
    ({"r": 1, "g": 2, "b": 3}, Rgb(1, 2, 3)),
    ((4, 5, 6), Rgb(4, 5, 6)),
])
def test_parse_color_accepted_forms(raw, expected):
    assert parse_color(raw) == expected


# parse_color: unknown names and junk return None instead of raising.
@pytest.mark.parametrize("raw", [None, "", "red", "#12345", {"r": 1}, [1, 2], 42])
def test_parse_color_rejects_junk(raw):
    assert parse_color(raw) is None


# to_css formats rgb() with floored, clamped channels; unparseable strings pass through.
def test_to_css_formatting_and_passthrough():
    assert to_css("#2980B9") == "rgb(41,128,185)"
    assert to_css({"r": 300.7, "g": 12.9, "b": -4}) == "rgb(255,12,4)"
    assert to_css("tomato") == "tomato"


# darken_color multiplies each channel by 0.8 (floored).
def test_darken_color():
    assert darken_color("#ffffff") == "rgb(204,204,204)"
    assert darken_color("rgb(41,128,185)") == "rgb(32,102,148)"


# mix: ten shades, seed first, second half is the darkened first half.
def test_mix_palette_shape():
    pal = mix("#2980B9")
    assert len(pal) == 10
    assert pal[0] == Rgb(41, 128, 185)
    assert len(set(pal[:5])) == 5
    assert to_css(pal[5]) == darken_color(pal[0])


# color_spec: lists become ColorList, {"color": ...} a PaletteSeed, everything else SolidColor.
def test_color_spec_variants():
    assert isinstance(color_spec(["#111111", "#222222"]), ColorList)
    assert isinstance(color_spec({"color": "#ff0000"}), PaletteSeed)
    assert isinstance(color_spec("#ff0000"), SolidColor)
    assert isinstance(color_spec(None), SolidColor)
    # an rgb map is a single color, not a seed wrapper
    assert isinstance(color_spec({"r": 1, "g": 2, "b": 3}), SolidColor)


# ColorList: in-bounds indexes return the entry untouched; overflow derives a shade from the wrapped entry.
def test_color_list_in_bounds_and_overflow():
    fn = color_fn(["#111111", "#222222"])
    assert fn(0) == "#111111"
    assert fn(1) == "#222222"
    # i=2 wraps to entry 0 and picks shade 2 of its palette
    assert fn(2) == to_css(mix("#111111")[2])
    assert fn(3) == to_css(mix("#222222")[3])


# SolidColor / PaletteSeed: i-th cyclic shade of the mixed palette; deterministic per index.
def test_single_color_cycles_palette_deterministically():
    fn = color_fn("#2980B9")
    pal = mix("#2980B9")
    assert fn(0) == to_css(pal[0])
    assert fn(11) == to_css(pal[1])
    assert [fn(i) for i in range(12)] == [fn(i) for i in range(12)]
    assert fn(0) != fn(1)

    seeded = color_fn({"color": "#2980B9"})
    assert [seeded(i) for i in range(5)] == [fn(i) for i in range(5)]


# Missing color falls back to the #9ac7f7 seed.
def test_missing_color_uses_default_seed():
    assert color_fn(None)(0) == to_css("#9ac7f7")
    assert color_fn({"color": None})(0) == to_css("#9ac7f7")


# An explicit palette replaces the mixed one for single colors (ignored for lists).
def test_explicit_palette():
    fn = color_fn("#2980B9", palette=["#000001", "#000002"])
    assert [fn(i) for i in range(4)] == ["rgb(0,0,1)", "rgb(0,0,2)", "rgb(0,0,1)", "rgb(0,0,2)"]
    assert color_fn(["#abcdef"], palette=["#000001"])(0) == "#abcdef"


# stroke_for: plain string fills stroke with the same color, other shapes are darkened.
def test_stroke_for():
    assert stroke_for("rgb(10,20,30)") == "rgb(10,20,30)"
    assert stroke_for({"r": 100, "g": 100, "b": 100}) == "rgb(80,80,80)"
