import math

import pytest

from d3_svg_math import scheme
from d3_svg_math.color import Hsl, Rgb, color, cubehelix, gray, hcl, hsl, lab, rgb


@pytest.mark.parametrize(
    "spec, expected",
    [
        ("#f00", "rgb(255, 0, 0)"),
        ("#4682b4", "rgb(70, 130, 180)"),
        ("steelblue", "rgb(70, 130, 180)"),
        ("rgb(10, 20, 30)", "rgb(10, 20, 30)"),
        ("rgb(100%, 0%, 50%)", "rgb(255, 0, 128)"),
        ("rgba(10,20,30,0.5)", "rgba(10, 20, 30, 0.5)"),
        ("hsl(120, 100%, 50%)", "rgb(0, 255, 0)"),
        ("  RED ", "rgb(255, 0, 0)"),
    ],
)
def test_parse_css_colors(spec, expected):
    assert str(color(spec)) == expected


def test_unparseable_color_is_none():
    assert color("not-a-color") is None
    assert math.isnan(rgb("not-a-color").r)


def test_transparent_has_zero_opacity():
    c = color("transparent")
    assert c.opacity == 0
    assert math.isnan(c.r)


def test_hex8_carries_alpha():
    c = color("#ff000080")
    assert c.opacity == pytest.approx(128 / 255)
    assert c.format_hex8() == "#ff000080"


def test_format_hex_clamps_channels():
    assert Rgb(300, -20, 127.6).format_hex() == "#ff0080"


def test_brighter_and_darker():
    base = rgb(100, 100, 100)
    assert base.darker().r == pytest.approx(70)
    assert base.brighter().r == pytest.approx(100 / 0.7)
    assert base.darker(2).g == pytest.approx(49)


def test_hsl_conversion():
    red = hsl("red")
    assert (red.h, red.s, red.l) == (0, 1, 0.5)
    white = hsl("white")
    assert math.isnan(white.h)
    assert white.l == 1
    assert Hsl(240, 1, 0.5).format_hex() == "#0000ff"
    assert hsl("steelblue").format_hsl().startswith("hsl(207")


def test_lab_and_hcl_round_trip():
    white = lab("white")
    assert white.l == pytest.approx(100, abs=1e-6)
    assert white.a == 0 and white.b == 0
    assert lab("steelblue").format_hex() == "#4682b4"
    assert hcl("steelblue").format_hex() == "#4682b4"
    assert cubehelix("steelblue").format_hex() == "#4682b4"
    assert gray(50).format_hex() == lab(50, 0, 0).format_hex()


def test_colors_compare_by_value():
    assert rgb("red") == Rgb(255, 0, 0)
    assert rgb("red") != Rgb(255, 0, 1)


def test_categorical_schemes():
    assert len(scheme.category10) == 10
    assert scheme.category10[0] == "#1f77b4"
    assert len(scheme.tableau10) == 10
    assert len(scheme.set3) == 12


def test_sequential_ramps_hit_their_endpoints():
    assert scheme.interpolate_blues(0) == "rgb(247, 251, 255)"
    assert scheme.interpolate_blues(1) == "rgb(8, 48, 107)"
    assert scheme.interpolate_rd_bu(0) == "rgb(103, 0, 31)"


def test_formula_ramps():
    assert scheme.interpolate_turbo(0) == "rgb(35, 23, 27)"
    assert scheme.interpolate_sinebow(0) == "rgb(255, 64, 64)"
    assert scheme.interpolate_rainbow(0) == scheme.interpolate_rainbow(1)
    assert set(scheme.SEQUENTIAL) >= {"blues", "turbo", "warm", "cool"}
    assert set(scheme.DIVERGING) == {"rd_bu", "br_bg", "pi_yg", "rd_yl_bu", "spectral"}


def test_schemes_are_exported_from_the_package():
    import d3_svg_math

    assert d3_svg_math.scheme is scheme
    assert d3_svg_math.tableau10 == scheme.tableau10
    assert d3_svg_math.CATEGORICAL["category10"] == scheme.category10
