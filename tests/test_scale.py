import math

import pytest

from d3_svg_math.errors import ConfigurationError, DomainError
from d3_svg_math.scale import (
    scale_band,
    scale_diverging,
    scale_identity,
    scale_linear,
    scale_log,
    scale_ordinal,
    scale_point,
    scale_pow,
    scale_quantile,
    scale_quantize,
    scale_sequential,
    scale_sequential_log,
    scale_sqrt,
    scale_symlog,
    scale_threshold,
)


def test_linear_maps_and_inverts():
    x = scale_linear([0, 100], [0, 500])
    assert x(50) == 250
    assert x.invert(250) == 50
    for v in (0, 12.5, 33, 99):
        assert x.invert(x(v)) == pytest.approx(v)


def test_linear_configuration_returns_copies():
    base = scale_linear()
    configured = base.domain([0, 10]).range([0, 1])
    assert base.domain() == [0, 1]
    assert configured.domain() == [0, 10]
    assert configured(5) == 0.5
    clamped = configured.clamp(True)
    assert configured(20) == 2
    assert clamped(20) == 1
    assert clamped.invert(-3) == 0


def test_linear_polylinear_and_reversed_domain():
    x = scale_linear([0, 10, 20], [0, 100, 0])
    assert x(5) == 50
    assert x(15) == 50
    y = scale_linear([10, 0], [0, 1])
    assert y(2.5) == 0.75


def test_linear_interpolates_colors_and_rounds():
    c = scale_linear([0, 1], ["red", "blue"])
    assert c(0.5) == "rgb(128, 0, 128)"
    r = scale_linear([0, 3]).range_round([0, 10])
    assert r(1) == 3


def test_linear_unknown_for_missing_input():
    x = scale_linear([0, 1], [0, 10])
    assert x(None) is None
    assert x.unknown(-1)(math.nan) == -1


def test_linear_nice_and_ticks():
    x = scale_linear([0.123, 9.87], [0, 1]).nice()
    assert x.domain() == [0, 10]
    assert scale_linear([0, 1]).ticks(5) == pytest.approx([0, 0.2, 0.4, 0.6, 0.8, 1])


def test_linear_rejects_short_domain():
    with pytest.raises(ConfigurationError):
        scale_linear().domain([1])
    with pytest.raises(ValueError):
        scale_linear().range([0])


def test_pow_and_sqrt():
    assert scale_pow([0, 10], [0, 100], exponent=2)(5) == pytest.approx(25)
    s = scale_sqrt([0, 100], [0, 10])
    assert s(25) == pytest.approx(5)
    assert s.invert(5) == pytest.approx(25)
    assert scale_pow(exponent=3).exponent() == 3
    with pytest.raises(ConfigurationError):
        scale_pow().exponent(0)


def test_log_scale():
    x = scale_log([1, 1000], [0, 1])
    assert x(10) == pytest.approx(1 / 3)
    assert x(100) == pytest.approx(2 / 3)
    assert x.invert(1 / 3) == pytest.approx(10)
    assert scale_log([-100, -1], [0, 1])(-10) == pytest.approx(0.5)
    assert scale_log([1, 8], [0, 3], base=2)(4) == pytest.approx(2)


def test_log_domain_validation():
    with pytest.raises(DomainError):
        scale_log([0, 10])
    with pytest.raises(DomainError):
        scale_log([-1, 10])
    with pytest.raises(ConfigurationError):
        scale_log().base(1)


def test_log_ticks_and_nice():
    t = scale_log([1, 100]).ticks()
    assert len(t) == 19
    assert t[:3] == [1, 2, 3]
    assert t[9] == 10
    assert t[-1] == 100
    assert scale_log([1.5, 80]).nice().domain() == [1, 100]


def test_symlog_is_odd_and_linear_near_zero():
    s = scale_symlog([-100, 100], [-1, 1])
    assert s(0) == pytest.approx(0)
    assert s(50) == pytest.approx(-s(-50))
    assert s.invert(s(42)) == pytest.approx(42)


def test_identity():
    s = scale_identity([0, 10])
    assert s(3.5) == 3.5
    assert s.invert(2) == 2
    assert s.range() == [0, 10]


def test_sequential_and_diverging():
    s = scale_sequential(lambda t: t * 10, [0, 100])
    assert s(50) == 5
    assert s(150) == 15
    assert s.clamp(True)(150) == 10
    d = scale_diverging(lambda t: t, [-1, 0, 10])
    assert d(-1) == 0
    assert d(0) == 0.5
    assert d(5) == pytest.approx(0.75)
    assert scale_sequential_log(None, [1, 100])(10) == pytest.approx(0.5)


def test_quantize_buckets():
    q = scale_quantize([0, 100], ["a", "b", "c", "d"])
    assert q.thresholds() == [25, 50, 75]
    assert [q(0), q(24.9), q(25), q(99)] == ["a", "a", "b", "d"]
    assert q.invert_extent("b") == [25, 50]
    assert q.invert_extent("a") == [0, 25]


def test_quantile_buckets():
    q = scale_quantile([3, 6, 7, 8, 8, 10, 13, 15, 16, 20], [0, 1, 2, 3])
    assert q.quantiles() == pytest.approx([7.25, 9, 14.5])
    assert q(7) == 0
    assert q(9) == 2
    assert q(100) == 3
    assert q.invert_extent(0) == [3, 7.25]


def test_threshold_scale():
    t = scale_threshold([0, 1], ["a", "b", "c"])
    assert [t(-1), t(0), t(0.5), t(1)] == ["a", "b", "b", "c"]
    assert t.invert_extent("b") == [0, 1]
    assert t.invert_extent("a") == [None, 0]
    with pytest.raises(ConfigurationError):
        scale_threshold([0, 1], ["a", "b"])
    with pytest.raises(ConfigurationError):
        scale_threshold().domain([1, 0])


def test_threshold_scale_checks_chained_configuration():
    with pytest.raises(ConfigurationError):
        scale_threshold().domain([1, 2]).range(["a", "b"])
    with pytest.raises(ConfigurationError):
        scale_threshold().range(["a", "b"]).domain([1, 2])
    t = scale_threshold().domain([1, 2]).range(["a", "b", "c"])
    assert t(1.5) == "b"
    assert scale_threshold().range(["a", "b", "c", "d"]).domain([1, 2, 3])(5) == "d"


def test_ordinal_implicit_domain_growth():
    o = scale_ordinal(["a", "b"], [1, 2])
    assert o("a") == 1
    assert o("c") == 1
    assert o.domain() == ["a", "b", "c"]
    strict = scale_ordinal(["a"], [1]).unknown("z")
    assert strict("q") == "z"
    assert strict.domain() == ["a"]


def test_band_scale():
    b = scale_band(["a", "b", "c"], [0, 120])
    assert [b("a"), b("b"), b("c")] == [0, 40, 80]
    assert b.bandwidth() == 40
    assert b("missing") is None
    padded = b.padding(0.5)
    assert padded.step() == pytest.approx(120 / 3.5)
    assert padded("a") == pytest.approx((120 - padded.step() * 2.5) / 2)
    assert b.bandwidth() == 40
    rounded = scale_band(["a", "b", "c"]).range_round([0, 100])
    assert rounded.bandwidth() == 33
    assert rounded("a") == 1


def test_point_scale():
    p = scale_point(["a", "b", "c"], [0, 100])
    assert [p("a"), p("b"), p("c")] == [0, 50, 100]
    assert p.bandwidth() == 0
    assert p.padding(1)("a") == 25
    with pytest.raises(ConfigurationError):
        p.padding_inner(0.5)
