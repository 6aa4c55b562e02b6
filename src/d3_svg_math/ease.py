"""Easing functions mapping normalised time ``t`` in [0, 1] to eased progress.

Plain families are functions. The parameterised families (poly, back,
elastic) are small callables whose parameter methods return a modified copy::

    ease_poly_in.exponent(2)(0.5)     # 0.25
    ease_back_out.overshoot(3)(0.5)
"""

import math

from .errors import ConfigurationError

_PI = math.pi
_HALF_PI = _PI / 2
_TAU = 2 * _PI
_UNSET = object()


def ease_linear(t):
    return +t


def ease_quad_in(t):
    return t * t


def ease_quad_out(t):
    return t * (2 - t)


def ease_quad_in_out(t):
    t *= 2
    if t <= 1:
        return t * t / 2
    t -= 1
    return (t * (2 - t) + 1) / 2


def ease_cubic_in(t):
    return t * t * t


def ease_cubic_out(t):
    t -= 1
    return t * t * t + 1


def ease_cubic_in_out(t):
    t *= 2
    if t <= 1:
        return t * t * t / 2
    t -= 2
    return (t * t * t + 2) / 2


def ease_sin_in(t):
    return 1.0 if t == 1 else 1 - math.cos(t * _HALF_PI)


def ease_sin_out(t):
    return math.sin(t * _HALF_PI)


def ease_sin_in_out(t):
    return (1 - math.cos(_PI * t)) / 2


def _tpmt(x):
    # 2^(-10x) rescaled so that tpmt(0) == 1 and tpmt(1) == 0
    return (math.pow(2, -10 * x) - 0.0009765625) * 1.0009775171065494


def ease_exp_in(t):
    return _tpmt(1 - t)


def ease_exp_out(t):
    return 1 - _tpmt(t)


def ease_exp_in_out(t):
    t *= 2
    return (_tpmt(1 - t) if t <= 1 else 2 - _tpmt(t - 1)) / 2


def ease_circle_in(t):
    return 1 - math.sqrt(1 - t * t)


def ease_circle_out(t):
    t -= 1
    return math.sqrt(1 - t * t)


def ease_circle_in_out(t):
    t *= 2
    if t <= 1:
        return (1 - math.sqrt(1 - t * t)) / 2
    t -= 2
    return (math.sqrt(1 - t * t) + 1) / 2


_B1 = 4 / 11
_B2 = 6 / 11
_B3 = 8 / 11
_B4 = 3 / 4
_B5 = 9 / 11
_B6 = 10 / 11
_B7 = 15 / 16
_B8 = 21 / 22
_B9 = 63 / 64
_B0 = 1 / _B1 / _B1


def ease_bounce_out(t):
    if t < _B1:
        return _B0 * t * t
    if t < _B3:
        t -= _B2
        return _B0 * t * t + _B4
    if t < _B6:
        t -= _B5
        return _B0 * t * t + _B7
    t -= _B8
    return _B0 * t * t + _B9


def ease_bounce_in(t):
    return 1 - ease_bounce_out(1 - t)


def ease_bounce_in_out(t):
    t *= 2
    return (1 - ease_bounce_out(1 - t) if t <= 1 else ease_bounce_out(t - 1) + 1) / 2


class _Parameterised:
    """Base for easings with a tunable parameter; ``_derive`` returns a modified copy."""

    def _derive(self, **changes):
        params = dict(self.__dict__)
        params.update(changes)
        clone = object.__new__(type(self))
        clone.__dict__.update(params)
        return clone


class PolyEase(_Parameterised):
    def __init__(self, mode, exponent=3.0):
        self.mode = mode
        self._exponent = float(exponent)

    def exponent(self, value=_UNSET):
        if value is _UNSET:
            return self._exponent
        return self._derive(_exponent=float(value))

    def __call__(self, t):
        e = self._exponent
        if self.mode == "in":
            return math.pow(t, e)
        if self.mode == "out":
            return 1 - math.pow(1 - t, e)
        t *= 2
        return (math.pow(t, e) if t <= 1 else 2 - math.pow(2 - t, e)) / 2

    def __repr__(self):
        return f"PolyEase({self.mode!r}, exponent={self._exponent})"


class BackEase(_Parameterised):
    def __init__(self, mode, overshoot=1.70158):
        self.mode = mode
        self._overshoot = float(overshoot)

    def overshoot(self, value=_UNSET):
        if value is _UNSET:
            return self._overshoot
        return self._derive(_overshoot=float(value))

    def __call__(self, t):
        s = self._overshoot
        if self.mode == "in":
            return t * t * (s * (t - 1) + t)
        if self.mode == "out":
            t -= 1
            return t * t * ((t + 1) * s + t) + 1
        t *= 2
        if t < 1:
            return t * t * ((s + 1) * t - s) / 2
        t -= 2
        return (t * t * ((s + 1) * t + s) + 2) / 2

    def __repr__(self):
        return f"BackEase({self.mode!r}, overshoot={self._overshoot})"


class ElasticEase(_Parameterised):
    """Elastic easing; amplitudes below 1 are raised to 1."""

    def __init__(self, mode, amplitude=1.0, period=0.3):
        if period <= 0:
            raise ConfigurationError(f"elastic period must be positive, got {period!r}")
        self.mode = mode
        self._amplitude = max(1.0, float(amplitude))
        self._period = float(period)

    def amplitude(self, value=_UNSET):
        if value is _UNSET:
            return self._amplitude
        return ElasticEase(self.mode, value, self._period)

    def period(self, value=_UNSET):
        if value is _UNSET:
            return self._period
        return ElasticEase(self.mode, self._amplitude, value)

    def __call__(self, t):
        a = self._amplitude
        p = self._period / _TAU
        s = math.asin(1 / a) * p
        if self.mode == "in":
            t -= 1
            return a * _tpmt(-t) * math.sin((s - t) / p)
        if self.mode == "out":
            return 1 - a * _tpmt(t) * math.sin((t + s) / p)
        t = t * 2 - 1
        if t < 0:
            return a * _tpmt(-t) * math.sin((s - t) / p) / 2
        return (2 - a * _tpmt(t) * math.sin((s + t) / p)) / 2

    def __repr__(self):
        return f"ElasticEase({self.mode!r}, amplitude={self._amplitude}, period={self._period})"


ease_poly_in = PolyEase("in")
ease_poly_out = PolyEase("out")
ease_poly_in_out = PolyEase("in_out")
ease_poly = ease_poly_in_out

ease_back_in = BackEase("in")
ease_back_out = BackEase("out")
ease_back_in_out = BackEase("in_out")
ease_back = ease_back_in_out

ease_elastic_in = ElasticEase("in")
ease_elastic_out = ElasticEase("out")
ease_elastic_in_out = ElasticEase("in_out")
ease_elastic = ease_elastic_out

ease_quad = ease_quad_in_out
ease_cubic = ease_cubic_in_out
ease_sin = ease_sin_in_out
ease_exp = ease_exp_in_out
ease_circle = ease_circle_in_out
ease_bounce = ease_bounce_out

EASINGS = {
    "linear": ease_linear,
    "quad_in": ease_quad_in,
    "quad_out": ease_quad_out,
    "quad_in_out": ease_quad_in_out,
    "cubic_in": ease_cubic_in,
    "cubic_out": ease_cubic_out,
    "cubic_in_out": ease_cubic_in_out,
    "poly_in": ease_poly_in,
    "poly_out": ease_poly_out,
    "poly_in_out": ease_poly_in_out,
    "sin_in": ease_sin_in,
    "sin_out": ease_sin_out,
    "sin_in_out": ease_sin_in_out,
    "exp_in": ease_exp_in,
    "exp_out": ease_exp_out,
    "exp_in_out": ease_exp_in_out,
    "circle_in": ease_circle_in,
    "circle_out": ease_circle_out,
    "circle_in_out": ease_circle_in_out,
    "elastic_in": ease_elastic_in,
    "elastic_out": ease_elastic_out,
    "elastic_in_out": ease_elastic_in_out,
    "back_in": ease_back_in,
    "back_out": ease_back_out,
    "back_in_out": ease_back_in_out,
    "bounce_in": ease_bounce_in,
    "bounce_out": ease_bounce_out,
    "bounce_in_out": ease_bounce_in_out,
}


def get_ease(name):
    """Look up an easing by its snake_case name (``"cubic_in_out"``)."""
    try:
        return EASINGS[name]
    except KeyError:
        raise ConfigurationError(f"unknown easing {name!r}") from None
