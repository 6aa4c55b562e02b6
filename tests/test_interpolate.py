import math

import pytest

from d3_svg_math.color import rgb
from d3_svg_math.interpolate import (
    interpolate,
    interpolate_array,
    interpolate_basis,
    interpolate_basis_closed,
    interpolate_discrete,
    interpolate_hcl,
    interpolate_hsl,
    interpolate_hsl_long,
    interpolate_hue,
    interpolate_number,
    interpolate_object,
    interpolate_rgb,
    interpolate_round,
    interpolate_string,
    interpolate_transform_svg,
    interpolate_zoom,
    parse_svg_transform,
    piecewise,
    quantize,
)


def test_numbers_extrapolate():
    f = interpolate_number(10, 20)
    assert f(0.5) == 15
    assert f(-1) == 0
    assert f(2) == 30
    assert interpolate_round(0, 10)(0.25) == 3


def test_discrete_and_hue():
    f = interpolate_discrete(["a", "b", "c"])
    assert [f(0), f(0.5), f(0.99), f(1)] == ["a", "b", "c", "c"]
    assert interpolate_hue(350, 10)(0.5) == pytest.approx(0)
    assert interpolate_hue(10, 350)(0.25) == pytest.approx(5)


def test_basis_passes_through_endpoints():
    f = interpolate_basis([0, 10, 20])
    assert f(0) == pytest.approx(0)
    assert f(1) == pytest.approx(20)
    assert f(0.5) == pytest.approx(10)
    g = interpolate_basis_closed([0, 6, 0])
    assert g(0) == pytest.approx(1)
    assert g(1) == pytest.approx(g(0))


def test_rgb_interpolation():
    assert interpolate_rgb("red", "blue")(0.5) == "rgb(128, 0, 128)"
    assert interpolate_rgb("red", "blue")(0) == "rgb(255, 0, 0)"
    gamma = interpolate_rgb("black", "white", gamma=2.2)(0.5)
    assert rgb(gamma).r > 128


def test_hsl_takes_the_short_way_unless_long():
    assert interpolate_hsl("red", "blue")(0.5) == "rgb(255, 0, 255)"
    assert interpolate_hsl_long("red", "blue")(0.5) == "rgb(0, 255, 0)"


def test_hcl_endpoints():
    f = interpolate_hcl("steelblue", "brown")
    assert rgb(f(0)).format_hex() == "#4682b4"
    assert rgb(f(1)).format_hex() == "#a52a2a"


def test_string_interpolates_embedded_numbers():
    f = interpolate_string("10px 20px", "30px 40px")
    assert f(0.5) == "20px 30px"
    assert interpolate_string("a", "b")(0.5) == "b"
    assert interpolate_string("1", "3")(0.5) == "2"
    # literal text comes from the target string
    assert interpolate_string("width: 0", "height: 10")(0.5) == "height: 5"


def test_value_dispatch():
    assert interpolate(0, 10)(0.5) == 5
    assert interpolate("red", "blue")(1) == "rgb(0, 0, 255)"
    assert interpolate("0px", "10px")(0.5) == "5px"
    assert interpolate([0, 1], [10, 11, 12])(0.5) == [5, 6, 12]
    assert interpolate({"x": 0}, {"x": 4, "y": "a"})(0.25) == {"x": 1, "y": "a"}
    assert interpolate(1, None)(0.5) is None
    assert interpolate(False, True)(0.5) is True


def test_array_and_object_ignore_extra_source_entries():
    assert interpolate_array([0, 0, 0], [2])(0.5) == [1]
    assert interpolate_object({"a": 0, "b": 9}, {"a": 2})(0.5) == {"a": 1}


def test_piecewise_and_quantize():
    f = piecewise(interpolate_number, [0, 10, 30])
    assert f(0) == 0
    assert f(0.5) == 10
    assert f(0.75) == 20
    assert f(1) == 30
    assert quantize(interpolate_number(0, 10), 3) == [0, 5, 10]
    assert quantize(interpolate_number(0, 10), 1) == [0]


def test_svg_transform_parsing_and_interpolation():
    t = parse_svg_transform("translate(10, 20) scale(2)")
    assert t["translate_x"] == 10 and t["translate_y"] == 20
    assert t["scale_x"] == pytest.approx(2)
    assert interpolate_transform_svg("translate(0,0)", "translate(100,50)")(0.5) == "translate(50, 25)"
    assert interpolate_transform_svg("scale(1)", "scale(3)")(0.5) == "scale(2,2)"
    rotated = parse_svg_transform("rotate(90)")
    assert rotated["rotate"] == pytest.approx(90)


def test_zoom_pure_scale():
    f = interpolate_zoom([0, 0, 1], [0, 0, 4])
    assert f(0.5) == pytest.approx([0, 0, 2])
    assert f.duration == pytest.approx(math.log(4) * 1000 / math.sqrt(2))


def test_zoom_pan_hits_both_views():
    f = interpolate_zoom([0, 0, 1], [10, 0, 1])
    assert f(0) == pytest.approx([0, 0, 1])
    assert f(1) == pytest.approx([10, 0, 1])
    # the view zooms out while panning
    assert f(0.5)[2] > 1
    assert f.duration > 0
    assert f.with_rho(1).duration != f.duration
