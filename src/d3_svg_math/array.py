"""Summary statistics, search, tick generation and binning over plain sequences."""

import bisect as _bisect
import math
from collections import defaultdict

from .errors import ConfigurationError

_E10 = math.sqrt(50)
_E5 = math.sqrt(10)
_E2 = math.sqrt(2)


def _js_round(x):
    # JS Math.round: halves go toward +infinity
    return math.floor(x + 0.5)


def _valid(value):
    return value is not None and not (isinstance(value, float) and value != value)


def _values(values, accessor=None):
    if accessor is None:
        for v in values:
            if _valid(v):
                yield v
    else:
        for i, d in enumerate(values):
            v = accessor(d, i)
            if _valid(v):
                yield v


def _numbers(values, accessor=None):
    for v in _values(values, accessor):
        try:
            f = float(v)
        except (TypeError, ValueError):
            continue
        if f == f:
            yield f


def ascending(a, b):
    if a is None or b is None:
        return math.nan
    return -1 if a < b else 1 if a > b else 0 if a == b else math.nan


def descending(a, b):
    if a is None or b is None:
        return math.nan
    return -1 if b < a else 1 if b > a else 0 if b == a else math.nan


# ----------------------------------------------------------------------
# summaries
def min_(values, accessor=None):
    result = None
    for v in _values(values, accessor):
        if result is None or v < result:
            result = v
    return result


def max_(values, accessor=None):
    result = None
    for v in _values(values, accessor):
        if result is None or v > result:
            result = v
    return result


def extent(values, accessor=None):
    lo = hi = None
    for v in _values(values, accessor):
        if lo is None:
            lo = hi = v
        else:
            if v < lo:
                lo = v
            if v > hi:
                hi = v
    return [lo, hi]


def sum_(values, accessor=None):
    total = 0.0
    for v in _numbers(values, accessor):
        total += v
    return total


def count(values, accessor=None):
    return sum(1 for _ in _numbers(values, accessor))


def mean(values, accessor=None):
    total = 0.0
    n = 0
    for v in _numbers(values, accessor):
        total += v
        n += 1
    return total / n if n else None


def variance(values, accessor=None):
    """Unbiased sample variance (Welford); None with fewer than two values."""
    n = 0
    avg = 0.0
    acc = 0.0
    for v in _numbers(values, accessor):
        n += 1
        delta = v - avg
        avg += delta / n
        acc += delta * (v - avg)
    if n > 1:
        return acc / (n - 1)
    return None


def deviation(values, accessor=None):
    v = variance(values, accessor)
    return math.sqrt(v) if v is not None else None


def quantile_sorted(values, p, accessor=None):
    """Quantile of already-sorted values using R-7 linear interpolation."""
    n = len(values)
    if not n or p is None or p != p:
        return None
    get = (lambda i: float(values[i])) if accessor is None else (
        lambda i: float(accessor(values[i], i))
    )
    if p <= 0 or n < 2:
        return get(0)
    if p >= 1:
        return get(n - 1)
    i = (n - 1) * p
    i0 = math.floor(i)
    value0 = get(i0)
    value1 = get(i0 + 1)
    return value0 + (value1 - value0) * (i - i0)


def quantile(values, p, accessor=None):
    return quantile_sorted(sorted(_numbers(values, accessor)), p)


def median(values, accessor=None):
    return quantile(values, 0.5, accessor)


def cumsum(values, accessor=None):
    total = 0.0
    out = []
    for i, d in enumerate(values):
        v = d if accessor is None else accessor(d, i)
        if _valid(v):
            total += float(v)
        out.append(total)
    return out


# ----------------------------------------------------------------------
# search
def bisect_right(a, x, lo=0, hi=None, key=None):
    hi = len(a) if hi is None else hi
    return _bisect.bisect_right(a, x, lo, hi, key=key)


def bisect_left(a, x, lo=0, hi=None, key=None):
    hi = len(a) if hi is None else hi
    return _bisect.bisect_left(a, x, lo, hi, key=key)


def bisect_center(a, x, lo=0, hi=None, key=None):
    """Index of the element closest to x (ties go left)."""
    hi = len(a) if hi is None else hi
    get = key or (lambda d: d)
    i = bisect_left(a, x, lo, hi - 1, key=key)
    if i > lo and get(a[i - 1]) - x > -(get(a[i]) - x):
        return i - 1
    return i


# ----------------------------------------------------------------------
# ticks
def _tick_spec(start, stop, count):
    step = (stop - start) / max(0, count) if count > 0 else math.inf
    if not (step > 0 and math.isfinite(step)):
        return 0, -1, math.nan
    power = math.floor(math.log10(step))
    error = step / 10.0 ** power
    factor = 10 if error >= _E10 else 5 if error >= _E5 else 2 if error >= _E2 else 1
    if power < 0:
        inc = 10.0 ** -power / factor
        i1 = _js_round(start * inc)
        i2 = _js_round(stop * inc)
        if i1 / inc < start:
            i1 += 1
        if i2 / inc > stop:
            i2 -= 1
        inc = -inc
    else:
        inc = 10.0 ** power * factor
        i1 = _js_round(start / inc)
        i2 = _js_round(stop / inc)
        if i1 * inc < start:
            i1 += 1
        if i2 * inc > stop:
            i2 -= 1
    if i2 < i1 and 0.5 <= count < 2:
        return _tick_spec(start, stop, count * 2)
    return i1, i2, inc


def ticks(start, stop, count=10):
    """Nicely-rounded values spanning [start, stop], about ``count`` of them."""
    start, stop, count = float(start), float(stop), float(count)
    if not count > 0:
        return []
    if start == stop:
        return [start]
    reverse = stop < start
    i1, i2, inc = _tick_spec(stop, start, count) if reverse else _tick_spec(start, stop, count)
    if not i2 >= i1:
        return []
    n = i2 - i1 + 1
    if reverse:
        if inc < 0:
            return [(i2 - i) / -inc for i in range(n)]
        return [float((i2 - i) * inc) for i in range(n)]
    if inc < 0:
        return [(i1 + i) / -inc for i in range(n)]
    return [float((i1 + i) * inc) for i in range(n)]


def tick_increment(start, stop, count=10):
    """Tick step as a positive integer multiple, or a negative inverse when below 1."""
    return _tick_spec(float(start), float(stop), float(count))[2]


def tick_step(start, stop, count=10):
    start, stop = float(start), float(stop)
    reverse = stop < start
    inc = tick_increment(stop, start, count) if reverse else tick_increment(start, stop, count)
    return (-1 if reverse else 1) * (1 / -inc if inc < 0 else inc)


def nice(start, stop, count=10):
    """Extend [start, stop] outward until both ends land on tick values."""
    start, stop = float(start), float(stop)
    prestep = None
    while True:
        step = tick_increment(start, stop, count)
        if step == prestep or step == 0 or not math.isfinite(step):
            return [start, stop]
        if step > 0:
            start = math.floor(start / step) * step
            stop = math.ceil(stop / step) * step
        elif step < 0:
            start = math.ceil(start * step) / step
            stop = math.floor(stop * step) / step
        prestep = step


def range_(start, stop=None, step=1.0):
    if stop is None:
        start, stop = 0.0, start
    n = max(0, math.ceil((stop - start) / step))
    return [start + i * step for i in range(int(n))]


# ----------------------------------------------------------------------
# binning
def threshold_sturges(values, *_):
    c = count(values)
    return max(1, math.ceil(math.log2(c)) + 1) if c else 1


def threshold_scott(values, lo, hi):
    c = count(values)
    d = deviation(values)
    return math.ceil((hi - lo) * c ** (1 / 3) / (3.49 * d)) if c and d else 1


def threshold_freedman_diaconis(values, lo, hi):
    c = count(values)
    d = (quantile(values, 0.75) or 0.0) - (quantile(values, 0.25) or 0.0)
    return math.ceil((hi - lo) / (2 * d * c ** (-1 / 3))) if c and d else 1


class Bin(list):
    """A list of data with the half-open interval [x0, x1) it covers."""

    def __init__(self, x0, x1, items=()):
        super().__init__(items)
        self.x0 = x0
        self.x1 = x1

    def __repr__(self):
        return f"Bin(x0={self.x0!r}, x1={self.x1!r}, n={len(self)})"


class BinGenerator:
    """Histogram builder similar to d3.bin."""

    def __init__(self, value=None, domain=None, thresholds=None):
        self._value = value or (lambda d, *_: d)
        self._domain = domain
        self._thresholds = thresholds if thresholds is not None else threshold_sturges

    def value(self, fn):
        self._value = fn
        return self

    def domain(self, dom):
        if dom is not None and not callable(dom) and len(dom) != 2:
            raise ConfigurationError("bin domain expects two values")
        self._domain = dom
        return self

    def thresholds(self, spec):
        self._thresholds = spec
        return self

    def __call__(self, data):
        data = list(data)
        values = []
        for i, d in enumerate(data):
            v = self._value(d, i)
            values.append(float(v) if _valid(v) else None)
        present = [v for v in values if v is not None and v == v]

        if self._domain is None:
            x0, x1 = extent(present)
            from_extent = True
        elif callable(self._domain):
            x0, x1 = self._domain(present)
            from_extent = False
        else:
            x0, x1 = (float(v) for v in self._domain)
            from_extent = False
        if x0 is None:
            return [Bin(None, None)]

        spec = self._thresholds
        if callable(spec):
            spec = spec(present, x0, x1)
        step = math.nan
        if isinstance(spec, (list, tuple)):
            tz = sorted(float(t) for t in spec)
        else:
            hi = x1
            tn = float(spec)
            if from_extent:
                x0, x1 = nice(x0, x1, tn)
            tz = ticks(x0, x1, tn)
            if tz and tz[0] <= x0:
                step = tick_increment(x0, x1, tn)
            if tz and tz[-1] >= x1:
                if hi >= x1 and from_extent:
                    inc = tick_increment(x0, x1, tn)
                    if math.isfinite(inc):
                        if inc > 0:
                            x1 = (math.floor(x1 / inc) + 1) * inc
                        elif inc < 0:
                            x1 = (math.ceil(x1 * -inc) + 1) / -inc
                else:
                    tz.pop()

        a, b = 0, len(tz)
        while a < b and tz[a] <= x0:
            a += 1
        while b > a and tz[b - 1] > x1:
            b -= 1
        tz = tz[a:b]
        m = len(tz)

        bins = [Bin(tz[i - 1] if i > 0 else x0, tz[i] if i < m else x1) for i in range(m + 1)]
        for datum, x in zip(data, values):
            if x is None or not (x0 <= x <= x1):
                continue
            if math.isfinite(step) and step > 0:
                j = min(m, math.floor((x - x0) / step))
            elif math.isfinite(step) and step < 0:
                j = math.floor((x0 - x) * step)
                j = min(m, j + (1 if j < m and tz[j] <= x else 0))
            else:
                j = bisect_right(tz, x, 0, m)
            bins[j].append(datum)
        return bins


def bin_(value=None, domain=None, thresholds=None):
    return BinGenerator(value=value, domain=domain, thresholds=thresholds)


# ----------------------------------------------------------------------
# sequence transforms
def pairs(values, reducer=None):
    reducer = reducer or (lambda a, b: (a, b))
    values = list(values)
    return [reducer(values[i - 1], values[i]) for i in range(1, len(values))]


def transpose(matrix):
    matrix = [list(row) for row in matrix]
    if not matrix:
        return []
    n = min(len(row) for row in matrix)
    return [[row[i] for row in matrix] for i in range(n)]


def zip_(*arrays):
    return transpose(arrays)


def merge(arrays):
    return [v for arr in arrays for v in arr]


def cross(*arrays, reducer=None):
    result = [[]]
    for arr in arrays:
        result = [prefix + [v] for prefix in result for v in arr]
    if reducer is None:
        return [tuple(r) for r in result]
    return [reducer(*r) for r in result]


def group(values, *keys):
    """Nest values into dicts keyed by each key function, in first-seen order."""
    if not keys:
        return list(values)
    key, rest = keys[0], keys[1:]
    buckets = defaultdict(list)
    for d in values:
        buckets[key(d)].append(d)
    return {k: group(v, *rest) for k, v in buckets.items()}
