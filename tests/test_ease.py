import pytest

from d3_svg_math.ease import (
    EASINGS,
    ease_back_in,
    ease_cubic_in,
    ease_elastic_out,
    ease_poly_in,
    ease_quad_in_out,
    get_ease,
)
from d3_svg_math.errors import ConfigurationError


@pytest.mark.parametrize("name", sorted(EASINGS))
def test_easings_pin_the_endpoints(name):
    fn = EASINGS[name]
    assert fn(0.0) == pytest.approx(0.0, abs=1e-9)
    assert fn(1.0) == pytest.approx(1.0, abs=1e-9)


@pytest.mark.parametrize("name", sorted(n for n in EASINGS if n.endswith("in_out")))
def test_symmetric_easings_pass_through_the_midpoint(name):
    assert EASINGS[name](0.5) == pytest.approx(0.5, abs=1e-9)


def test_quad_in_out_values():
    assert ease_quad_in_out(0.25) == pytest.approx(0.125)
    assert ease_quad_in_out(0.75) == pytest.approx(0.875)


def test_poly_exponent_is_copy_on_configure():
    squared = ease_poly_in.exponent(2)
    assert squared(0.5) == pytest.approx(0.25)
    assert ease_poly_in.exponent() == 3
    assert ease_poly_in(0.5) == pytest.approx(ease_cubic_in(0.5))


def test_back_overshoot():
    assert ease_back_in.overshoot(0)(0.5) == pytest.approx(0.125)
    assert ease_back_in(0.5) < 0.125


def test_elastic_parameters():
    assert ease_elastic_out.amplitude(0.5).amplitude() == 1
    assert ease_elastic_out.period(0.5).period() == 0.5
    assert ease_elastic_out.period() == 0.3
    with pytest.raises(ConfigurationError):
        ease_elastic_out.period(0)


def test_get_ease_by_name():
    assert get_ease("cubic_in") is ease_cubic_in
    with pytest.raises(ConfigurationError):
        get_ease("wobble")
