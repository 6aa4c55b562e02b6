"""Scales: map a data domain onto a visual range.

Every configuration method follows the same convention: called with no
argument it returns the current value, called with an argument it returns a
new, reconfigured scale and leaves the original untouched.

    >>> x = scale_linear().domain([0, 100]).range([0, 500])
    >>> x(50)
    250.0
"""

import copy as _copy
import math

from . import array as _array
from .errors import ConfigurationError, DomainError
from .interpolate import interpolate as _interpolate_value
from .interpolate import interpolate_number, interpolate_round, piecewise

_UNSET = object()
IMPLICIT = object()


def _isnan(x):
    return x != x


def _as_number(x):
    if x is None:
        return math.nan
    try:
        return float(x)
    except (TypeError, ValueError):
        return math.nan


def _identity(x):
    return x


def _normalize(a, b):
    b -= a
    if b and not _isnan(b):
        return lambda x: (x - a) / b
    value = math.nan if _isnan(b) else 0.5
    return lambda x: value


def _clamper(a, b):
    if a > b:
        a, b = b, a
    return lambda x: max(a, min(b, x))


def _bimap(domain, range_, interpolate):
    d0, d1 = domain[0], domain[1]
    r0, r1 = range_[0], range_[1]
    if d1 < d0:
        norm = _normalize(d1, d0)
        interp = interpolate(r1, r0)
    else:
        norm = _normalize(d0, d1)
        interp = interpolate(r0, r1)
    return lambda x: interp(norm(x))


def _polymap(domain, range_, interpolate):
    j = min(len(domain), len(range_)) - 1
    if domain[j] < domain[0]:
        domain = domain[::-1]
        range_ = range_[::-1]
    norms = [_normalize(domain[i], domain[i + 1]) for i in range(j)]
    interps = [interpolate(range_[i], range_[i + 1]) for i in range(j)]

    def poly(x):
        i = _array.bisect_right(domain, x, 1, j) - 1
        return interps[i](norms[i](x))

    return poly


class Scale:
    """Shared copy-on-configure plumbing."""

    _unknown = None

    def copy(self):
        clone = _copy.copy(self)
        clone._reset()
        return clone

    def _reset(self):
        pass

    def _derive(self, **changes):
        clone = _copy.copy(self)
        for name, value in changes.items():
            setattr(clone, name, value)
        clone._reset()
        return clone

    def unknown(self, value=_UNSET):
        if value is _UNSET:
            return self._unknown
        return self._derive(_unknown=value)


# ----------------------------------------------------------------------
# continuous scales
class ContinuousScale(Scale):
    """Maps a continuous domain through a transform onto an interpolated range."""

    def __init__(self, transform=_identity, untransform=_identity):
        self._domain = [0.0, 1.0]
        self._range = [0.0, 1.0]
        self._interpolate = _interpolate_value
        self._clamp = False
        self._unknown = None
        self._transform = transform
        self._untransform = untransform
        self._reset()

    def _reset(self):
        self._output = None
        self._input = None

    def _clamp_fn(self):
        if not self._clamp:
            return _identity
        n = min(len(self._domain), len(self._range))
        return _clamper(self._domain[0], self._domain[n - 1])

    def _piecewise(self):
        n = min(len(self._domain), len(self._range))
        return _polymap if n > 2 else _bimap

    def __call__(self, x):
        x = _as_number(x)
        if _isnan(x):
            return self._unknown
        if self._output is None:
            self._output = self._piecewise()(
                [self._transform(d) for d in self._domain], self._range, self._interpolate
            )
        return self._output(self._transform(self._clamp_fn()(x)))

    def invert(self, y):
        if self._input is None:
            self._input = self._piecewise()(
                [float(r) for r in self._range],
                [self._transform(d) for d in self._domain],
                interpolate_number,
            )
        return self._clamp_fn()(self._untransform(self._input(float(y))))

    def _check_domain(self, values):
        if len(values) < 2:
            raise ConfigurationError(
                f"{type(self).__name__}.domain expects at least two values"
            )

    def domain(self, values=None):
        if values is None:
            return list(self._domain)
        values = [float(v) for v in values]
        self._check_domain(values)
        return self._derive(_domain=values)

    def range(self, values=None):
        if values is None:
            return list(self._range)
        values = list(values)
        if len(values) < 2:
            raise ConfigurationError(f"{type(self).__name__}.range expects at least two values")
        return self._derive(_range=values)

    def range_round(self, values):
        return self.range(values).interpolate(interpolate_round)

    def clamp(self, flag=None):
        if flag is None:
            return self._clamp
        return self._derive(_clamp=bool(flag))

    def interpolate(self, factory=None):
        if factory is None:
            return self._interpolate
        return self._derive(_interpolate=factory)


class _Linearish:
    def ticks(self, count=10):
        d = self._domain
        return _array.ticks(d[0], d[-1], count)

    def nice(self, count=10):
        d = list(self._domain)
        i0, i1 = 0, len(d) - 1
        start, stop = d[i0], d[i1]
        if stop < start:
            start, stop = stop, start
            i0, i1 = i1, i0
        prestep = None
        for _ in range(10):
            step = _array.tick_increment(start, stop, count)
            if step == prestep:
                d[i0] = start
                d[i1] = stop
                return self._derive(_domain=d)
            if step > 0:
                start = math.floor(start / step) * step
                stop = math.ceil(stop / step) * step
            elif step < 0:
                start = math.ceil(start * step) / step
                stop = math.floor(stop * step) / step
            else:
                break
            prestep = step
        return self.copy()


class LinearScale(_Linearish, ContinuousScale):
    pass


def _transform_pow(exponent):
    if exponent == 1:
        return _identity
    if exponent == 0.5:
        return lambda x: -math.sqrt(-x) if x < 0 else math.sqrt(x)
    return lambda x: -((-x) ** exponent) if x < 0 else x ** exponent


class PowScale(_Linearish, ContinuousScale):
    def __init__(self, exponent=1.0):
        self._exponent = float(exponent)
        super().__init__(_transform_pow(self._exponent), _transform_pow(1 / self._exponent))

    def exponent(self, value=None):
        if value is None:
            return self._exponent
        value = float(value)
        if value == 0:
            raise ConfigurationError("PowScale.exponent must be non-zero")
        return self._derive(
            _exponent=value,
            _transform=_transform_pow(value),
            _untransform=_transform_pow(1 / value),
        )


def _pow10(x):
    if math.isfinite(x):
        return float(f"1e{int(x)}") if x == int(x) else 10.0 ** x
    return 0.0 if x < 0 else x


def _powp(base):
    if base == 10:
        return _pow10
    if base == math.e:
        return math.exp
    return lambda x: base ** x


def _logp(base):
    if base == math.e:
        return math.log
    if base == 10:
        return math.log10
    if base == 2:
        return math.log2
    ln = math.log(base)
    return lambda x: math.log(x) / ln


def _reflect(f):
    return lambda x: -f(-x)


def _log(x):
    return math.log(x) if x > 0 else (-math.inf if x == 0 else math.nan)


def _logn(x):
    return -_log(-x)


def _exp(x):
    return math.exp(x) if x < 709.78 else math.inf


def _expn(x):
    return -_exp(-x)


class LogScale(ContinuousScale):
    """Logarithmic scale; the domain must be strictly positive or strictly negative."""

    def __init__(self, base=10.0):
        super().__init__(_log, _exp)
        self._domain = [1.0, 10.0]
        self._base = float(base)

    def _check_domain(self, values):
        super()._check_domain(values)
        if any(v == 0 or _isnan(v) for v in values):
            raise DomainError("LogScale.domain must not include zero")
        if not (all(v > 0 for v in values) or all(v < 0 for v in values)):
            raise DomainError("LogScale.domain values must share the same sign")

    def _reset(self):
        super()._reset()
        if self._domain[0] < 0:
            self._transform, self._untransform = _logn, _expn
        else:
            self._transform, self._untransform = _log, _exp

    def _logs_pows(self):
        logs, pows = _logp(self._base), _powp(self._base)
        if self._domain[0] < 0:
            return _reflect(logs), _reflect(pows)
        return logs, pows

    def base(self, value=None):
        if value is None:
            return self._base
        value = float(value)
        if not value > 0 or value == 1:
            raise ConfigurationError("LogScale.base must be positive and not 1")
        return self._derive(_base=value)

    def ticks(self, count=10):
        """Powers of the base, with 1..base-1 multiples when the domain spans few decades."""
        logs, pows = self._logs_pows()
        base = self._base
        u, v = self._domain[0], self._domain[-1]
        reverse = v < u
        if reverse:
            u, v = v, u
        i, j = logs(u), logs(v)
        n = float(count)
        z = []
        if not base % 1 and j - i < n:
            i, j = math.floor(i), math.ceil(j)
            b = int(base)
            if u > 0:
                for e in range(i, j + 1):
                    for k in range(1, b):
                        t = k / pows(-e) if e < 0 else k * pows(e)
                        if t < u:
                            continue
                        if t > v:
                            break
                        z.append(t)
            else:
                for e in range(i, j + 1):
                    for k in range(b - 1, 0, -1):
                        t = k / pows(-e) if e > 0 else k * pows(e)
                        if t < u:
                            continue
                        if t > v:
                            break
                        z.append(t)
            if len(z) * 2 < n:
                z = _array.ticks(u, v, n)
        else:
            z = [pows(t) for t in _array.ticks(i, j, min(j - i, n))]
        return z[::-1] if reverse else z

    def nice(self):
        logs, pows = self._logs_pows()
        d = list(self._domain)
        i0, i1 = 0, len(d) - 1
        x0, x1 = d[i0], d[i1]
        if x1 < x0:
            i0, i1 = i1, i0
            x0, x1 = x1, x0
        d[i0] = pows(math.floor(logs(x0)))
        d[i1] = pows(math.ceil(logs(x1)))
        return self._derive(_domain=d)


def _symlog(c):
    return lambda x: math.copysign(math.log1p(abs(x / c)), x)


def _symexp(c):
    return lambda x: math.copysign(math.expm1(abs(x)), x) * c


class SymlogScale(_Linearish, ContinuousScale):
    """Bi-symmetric log transform, linear near zero; ``constant`` sets the linear region."""

    def __init__(self, constant=1.0):
        self._constant = float(constant)
        super().__init__(_symlog(self._constant), _symexp(self._constant))

    def constant(self, value=None):
        if value is None:
            return self._constant
        value = float(value)
        return self._derive(_constant=value, _transform=_symlog(value), _untransform=_symexp(value))


class IdentityScale(_Linearish, Scale):
    def __init__(self, domain=(0.0, 1.0)):
        self._domain = [float(v) for v in domain]
        self._unknown = None

    def __call__(self, x):
        x = _as_number(x)
        return self._unknown if _isnan(x) else x

    def invert(self, y):
        return self(y)

    def domain(self, values=None):
        if values is None:
            return list(self._domain)
        return self._derive(_domain=[float(v) for v in values])

    range = domain


# ----------------------------------------------------------------------
# sequential and diverging
class SequentialScale(Scale):
    """Continuous domain mapped onto an interpolator over [0, 1]."""

    def __init__(self, interpolator=_identity, transform=_identity):
        self._interpolator = interpolator
        self._domain = [0.0, 1.0]
        self._transform = transform
        self._clamp = False
        self._unknown = None

    def _t(self):
        t0, t1 = (self._transform(x) for x in self._domain)
        return t0, (0.0 if t0 == t1 else 1 / (t1 - t0))

    def __call__(self, x):
        x = _as_number(x)
        if _isnan(x):
            return self._unknown
        t0, k10 = self._t()
        if k10 == 0:
            return self._interpolator(0.5)
        x = (self._transform(x) - t0) * k10
        if self._clamp:
            x = max(0.0, min(1.0, x))
        return self._interpolator(x)

    def domain(self, values=None):
        if values is None:
            return list(self._domain)
        values = [float(v) for v in values]
        if len(values) != 2:
            raise ConfigurationError("SequentialScale.domain expects two values")
        return self._derive(_domain=values)

    def interpolator(self, fn=None):
        if fn is None:
            return self._interpolator
        return self._derive(_interpolator=fn)

    def range(self, values=None):
        if values is None:
            return [self._interpolator(0), self._interpolator(1)]
        r0, r1 = values
        return self._derive(_interpolator=_interpolate_value(r0, r1))

    def clamp(self, flag=None):
        if flag is None:
            return self._clamp
        return self._derive(_clamp=bool(flag))


class DivergingScale(SequentialScale):
    """Three-point domain ``[low, mid, high]`` mapped onto [0, 0.5, 1]."""

    def __init__(self, interpolator=_identity, transform=_identity):
        super().__init__(interpolator, transform)
        self._domain = [0.0, 0.5, 1.0]

    def __call__(self, x):
        x = _as_number(x)
        if _isnan(x):
            return self._unknown
        t0, t1, t2 = (self._transform(v) for v in self._domain)
        k10 = 0.0 if t0 == t1 else 0.5 / (t1 - t0)
        k21 = 0.0 if t1 == t2 else 0.5 / (t2 - t1)
        s = -1 if t1 < t0 else 1
        x = self._transform(x)
        x = 0.5 + (x - t1) * (k10 if s * x < s * t1 else k21)
        if self._clamp:
            x = max(0.0, min(1.0, x))
        return self._interpolator(x)

    def domain(self, values=None):
        if values is None:
            return list(self._domain)
        values = [float(v) for v in values]
        if len(values) != 3:
            raise ConfigurationError("DivergingScale.domain expects three values")
        return self._derive(_domain=values)

    def range(self, values=None):
        if values is None:
            return [self._interpolator(0), self._interpolator(0.5), self._interpolator(1)]
        return self._derive(_interpolator=piecewise(_interpolate_value, list(values)))


# ----------------------------------------------------------------------
# discretizing scales
class QuantizeScale(_Linearish, Scale):
    """Uniform segments of a continuous domain mapped onto a discrete range."""

    def __init__(self):
        self._x0 = 0.0
        self._x1 = 1.0
        self._range = [0, 1]
        self._unknown = None
        self._reset()

    @property
    def _domain(self):
        return [self._x0, self._x1]

    @_domain.setter
    def _domain(self, values):
        self._x0, self._x1 = values

    def _reset(self):
        n = len(self._range) - 1
        self._thresholds = [
            ((i + 1) * self._x1 - (i - n) * self._x0) / (n + 1) for i in range(n)
        ]

    def __call__(self, x):
        x = _as_number(x)
        if _isnan(x):
            return self._unknown
        return self._range[_array.bisect_right(self._thresholds, x, 0, len(self._thresholds))]

    def domain(self, values=None):
        if values is None:
            return [self._x0, self._x1]
        values = [float(v) for v in values]
        if len(values) != 2:
            raise ConfigurationError("QuantizeScale.domain expects two values")
        return self._derive(_x0=values[0], _x1=values[1])

    def range(self, values=None):
        if values is None:
            return list(self._range)
        values = list(values)
        if not values:
            raise ConfigurationError("QuantizeScale.range must not be empty")
        return self._derive(_range=values)

    def thresholds(self):
        return list(self._thresholds)

    def invert_extent(self, y):
        """The ``[x0, x1)`` slice of the domain that maps onto ``y``."""
        try:
            i = self._range.index(y)
        except ValueError:
            return [math.nan, math.nan]
        n = len(self._thresholds)
        if i < 1:
            return [self._x0, self._thresholds[0] if n else self._x1]
        if i >= n:
            return [self._thresholds[n - 1], self._x1]
        return [self._thresholds[i - 1], self._thresholds[i]]


class QuantileScale(Scale):
    """Sample domain split at its quantiles into ``len(range)`` groups."""

    def __init__(self):
        self._domain = []
        self._range = []
        self._unknown = None
        self._thresholds = []

    def _reset(self):
        n = max(1, len(self._range))
        if not self._domain:
            self._thresholds = []
            return
        self._thresholds = [
            _array.quantile_sorted(self._domain, i / n) for i in range(1, n)
        ]

    def __call__(self, x):
        x = _as_number(x)
        if _isnan(x) or not self._range:
            return self._unknown
        return self._range[_array.bisect_right(self._thresholds, x)]

    def domain(self, values=None):
        if values is None:
            return list(self._domain)
        sample = sorted(_array._numbers(values))
        return self._derive(_domain=sample)

    def range(self, values=None):
        if values is None:
            return list(self._range)
        return self._derive(_range=list(values))

    def quantiles(self):
        return list(self._thresholds)

    def invert_extent(self, y):
        try:
            i = self._range.index(y)
        except ValueError:
            return [math.nan, math.nan]
        t = self._thresholds
        return [
            t[i - 1] if i > 0 else self._domain[0],
            t[i] if i < len(t) else self._domain[-1],
        ]


class ThresholdScale(Scale):
    """Explicit ascending breakpoints; the range holds one more value than the domain."""

    def __init__(self):
        self._domain = [0.5]
        self._range = [0, 1]
        self._unknown = None
        self._explicit = frozenset()

    def _check(self):
        if len(self._range) != len(self._domain) + 1:
            raise ConfigurationError(
                f"ThresholdScale needs {len(self._domain) + 1} range values "
                f"for {len(self._domain)} thresholds, got {len(self._range)}"
            )

    def __call__(self, x):
        self._check()
        x = _as_number(x)
        if _isnan(x):
            return self._unknown
        return self._range[_array.bisect_right(self._domain, x)]

    def domain(self, values=None):
        if values is None:
            return list(self._domain)
        values = list(values)
        if any(b < a for a, b in zip(values, values[1:])):
            raise ConfigurationError("ThresholdScale.domain must be in ascending order")
        return self._configured(_domain=values)

    def range(self, values=None):
        if values is None:
            return list(self._range)
        return self._configured(_range=list(values))

    def _configured(self, **changes):
        # the default pair is consistent; check once both sides were set by the caller
        explicit = self._explicit | set(changes)
        clone = self._derive(_explicit=explicit, **changes)
        if explicit == {"_domain", "_range"}:
            clone._check()
        return clone

    def invert_extent(self, y):
        self._check()
        try:
            i = self._range.index(y)
        except ValueError:
            return [None, None]
        return [
            self._domain[i - 1] if i > 0 else None,
            self._domain[i] if i < len(self._domain) else None,
        ]


# ----------------------------------------------------------------------
# ordinal scales
class OrdinalScale(Scale):
    """Discrete domain to discrete range; unseen values extend the domain unless ``unknown`` is set."""

    def __init__(self, range_=()):
        self._index = {}
        self._domain = []
        self._range = list(range_)
        self._unknown = IMPLICIT

    def _derive(self, **changes):
        clone = super()._derive(**changes)
        clone._index = dict(clone._index)
        clone._domain = list(clone._domain)
        return clone

    def copy(self):
        return self._derive()

    def __call__(self, d):
        i = self._index.get(d)
        if i is None:
            if self._unknown is not IMPLICIT:
                return self._unknown
            self._domain.append(d)
            i = self._index[d] = len(self._domain) - 1
        if not self._range:
            return None
        return self._range[i % len(self._range)]

    def domain(self, values=None):
        if values is None:
            return list(self._domain)
        domain = []
        index = {}
        for v in values:
            if v not in index:
                index[v] = len(domain)
                domain.append(v)
        return self._derive(_domain=domain, _index=index)

    def range(self, values=None):
        if values is None:
            return list(self._range)
        return self._derive(_range=list(values))


class BandScale(OrdinalScale):
    """Ordinal domain laid out as evenly spaced bands across a continuous range."""

    def __init__(self):
        super().__init__()
        self._unknown = None
        self._r0 = 0.0
        self._r1 = 1.0
        self._round = False
        self._padding_inner = 0.0
        self._padding_outer = 0.0
        self._align = 0.5
        self._reset()

    def _reset(self):
        n = len(self._domain)
        reverse = self._r1 < self._r0
        start, stop = (self._r1, self._r0) if reverse else (self._r0, self._r1)
        step = (stop - start) / max(1, n - self._padding_inner + self._padding_outer * 2)
        if self._round:
            step = math.floor(step)
        start += (stop - start - step * (n - self._padding_inner)) * self._align
        bandwidth = step * (1 - self._padding_inner)
        if self._round:
            start = _array._js_round(start)
            bandwidth = _array._js_round(bandwidth)
        values = [start + step * i for i in range(n)]
        self._step = step
        self._bandwidth = bandwidth
        self._range = values[::-1] if reverse else values

    def __call__(self, d):
        i = self._index.get(d)
        if i is None:
            return self._unknown
        return self._range[i]

    def range(self, values=None):
        if values is None:
            return [self._r0, self._r1]
        r0, r1 = (float(v) for v in values)
        return self._derive(_r0=r0, _r1=r1)

    def range_round(self, values):
        r0, r1 = (float(v) for v in values)
        return self._derive(_r0=r0, _r1=r1, _round=True)

    def bandwidth(self):
        return self._bandwidth

    def step(self):
        return self._step

    def round(self, flag=None):
        if flag is None:
            return self._round
        return self._derive(_round=bool(flag))

    def padding(self, value=None):
        if value is None:
            return self._padding_inner
        value = float(value)
        return self._derive(_padding_inner=min(1.0, value), _padding_outer=value)

    def padding_inner(self, value=None):
        if value is None:
            return self._padding_inner
        return self._derive(_padding_inner=min(1.0, float(value)))

    def padding_outer(self, value=None):
        if value is None:
            return self._padding_outer
        return self._derive(_padding_outer=float(value))

    def align(self, value=None):
        if value is None:
            return self._align
        return self._derive(_align=max(0.0, min(1.0, float(value))))


class PointScale(BandScale):
    """Band scale with zero bandwidth: each domain value maps onto a single point."""

    def __init__(self):
        super().__init__()
        self._padding_inner = 1.0
        self._reset()

    def padding(self, value=None):
        if value is None:
            return self._padding_outer
        return self._derive(_padding_outer=float(value))

    def padding_inner(self, value=None):
        if value is None:
            return self._padding_inner
        raise ConfigurationError("PointScale has a fixed inner padding of 1")


# ----------------------------------------------------------------------
# factories
def _configure(scale, domain, range_):
    if domain is not None:
        scale = scale.domain(domain)
    if range_ is not None:
        scale = scale.range(range_)
    return scale


def scale_linear(domain=None, range=None):
    return _configure(LinearScale(), domain, range)


def scale_pow(domain=None, range=None, exponent=1.0):
    return _configure(PowScale(exponent), domain, range)


def scale_sqrt(domain=None, range=None):
    return _configure(PowScale(0.5), domain, range)


def scale_log(domain=None, range=None, base=10.0):
    scale = LogScale().base(base)
    return _configure(scale, domain, range)


def scale_symlog(domain=None, range=None, constant=1.0):
    return _configure(SymlogScale(constant), domain, range)


def scale_identity(domain=None):
    scale = IdentityScale()
    return scale.domain(domain) if domain is not None else scale


def scale_quantize(domain=None, range=None):
    return _configure(QuantizeScale(), domain, range)


def scale_quantile(domain=None, range=None):
    return _configure(QuantileScale(), domain, range)


def scale_threshold(domain=None, range=None):
    return _configure(ThresholdScale(), domain, range)


def scale_ordinal(domain=None, range=None):
    return _configure(OrdinalScale(), domain, range)


def scale_band(domain=None, range=None):
    return _configure(BandScale(), domain, range)


def scale_point(domain=None, range=None):
    return _configure(PointScale(), domain, range)


def scale_sequential(interpolator=None, domain=None):
    scale = SequentialScale(interpolator or _identity)
    return scale.domain(domain) if domain is not None else scale


def scale_sequential_log(interpolator=None, domain=(1.0, 10.0)):
    scale = SequentialScale(interpolator or _identity, _log)
    return scale.domain(domain)


def scale_diverging(interpolator=None, domain=None):
    scale = DivergingScale(interpolator or _identity)
    return scale.domain(domain) if domain is not None else scale
