"""Stack layout: turn tabular data into baseline/topline pairs per series."""

from .shape import Generator, _UNSET


class StackPoint(list):
    """``[y0, y1]`` for one datum within a series; ``data`` is the source row."""

    def __init__(self, y0, y1, data=None):
        super().__init__((y0, y1))
        self.data = data


class Series(list):
    def __init__(self, key, points=()):
        super().__init__(points)
        self.key = key
        self.index = None

    def __repr__(self):
        return f"Series(key={self.key!r}, index={self.index}, points={list.__repr__(self)})"


def _isnan(v):
    return v != v


def _num(v):
    return 0.0 if _isnan(v) else v


# ----------------------------------------------------------------------
# orders
def order_none(series):
    return list(range(len(series)))


def _sum(s):
    return sum(v for v in (p[1] for p in s) if v and not _isnan(v))


def _peak(s):
    best, j = -float("inf"), 0
    for i, p in enumerate(s):
        if p[1] > best:
            best, j = p[1], i
    return j


def order_ascending(series):
    sums = [_sum(s) for s in series]
    return sorted(order_none(series), key=lambda i: sums[i])


def order_descending(series):
    return order_ascending(series)[::-1]


def order_appearance(series):
    peaks = [_peak(s) for s in series]
    return sorted(order_none(series), key=lambda i: peaks[i])


def order_inside_out(series):
    """Largest series in the middle, alternating outward by peak position."""
    sums = [_sum(s) for s in series]
    top = bottom = 0.0
    tops, bottoms = [], []
    for j in order_appearance(series):
        if top < bottom:
            top += sums[j]
            tops.append(j)
        else:
            bottom += sums[j]
            bottoms.append(j)
    return bottoms[::-1] + tops


def order_reverse(series):
    return order_none(series)[::-1]


# ----------------------------------------------------------------------
# offsets
def offset_none(series, order):
    n = len(series)
    if n <= 1:
        return
    s1 = series[order[0]]
    m = len(s1)
    for i in range(1, n):
        s0, s1 = s1, series[order[i]]
        for j in range(m):
            base = s0[j][0] if _isnan(s0[j][1]) else s0[j][1]
            s1[j][0] = base
            s1[j][1] += base


def offset_expand(series, order):
    """Normalise each column so the stack spans [0, 1]."""
    n = len(series)
    if n <= 0:
        return
    for j in range(len(series[0])):
        y = sum(_num(series[i][j][1]) for i in range(n))
        if y:
            for i in range(n):
                series[i][j][1] /= y
    offset_none(series, order)


def offset_diverging(series, order):
    """Positive values stack upward from zero, negative values downward."""
    n = len(series)
    if n <= 0:
        return
    for j in range(len(series[order[0]])):
        yp = yn = 0.0
        for i in range(n):
            d = series[order[i]][j]
            dy = d[1] - d[0]
            if dy > 0:
                d[0] = yp
                yp += dy
                d[1] = yp
            elif dy < 0:
                d[1] = yn
                yn += dy
                d[0] = yn
            else:
                d[0] = 0.0
                d[1] = dy


def offset_silhouette(series, order):
    n = len(series)
    if n <= 0:
        return
    s0 = series[order[0]]
    for j in range(len(s0)):
        y = sum(_num(series[i][j][1]) for i in range(n))
        s0[j][0] = -y / 2
        s0[j][1] += s0[j][0]
    offset_none(series, order)


def offset_wiggle(series, order):
    """Minimise weighted change in slope (streamgraph baseline)."""
    n = len(series)
    if n <= 0:
        return
    s0 = series[order[0]]
    m = len(s0)
    if m <= 0:
        return
    y = 0.0
    j = 1
    while j < m:
        s1 = s2 = 0.0
        for i in range(n):
            si = series[order[i]]
            sij0 = _num(si[j][1])
            sij1 = _num(si[j - 1][1])
            s3 = (sij0 - sij1) / 2
            for k in range(i):
                sk = series[order[k]]
                s3 += _num(sk[j][1]) - _num(sk[j - 1][1])
            s1 += sij0
            s2 += s3 * sij0
        s0[j - 1][0] = y
        s0[j - 1][1] += y
        if s1:
            y -= s2 / s1
        j += 1
    s0[j - 1][0] = y
    s0[j - 1][1] += y
    offset_none(series, order)


ORDERS = {
    "none": order_none,
    "ascending": order_ascending,
    "descending": order_descending,
    "appearance": order_appearance,
    "inside_out": order_inside_out,
    "reverse": order_reverse,
}

OFFSETS = {
    "none": offset_none,
    "expand": offset_expand,
    "diverging": offset_diverging,
    "silhouette": offset_silhouette,
    "wiggle": offset_wiggle,
}


def _stack_value(d, key):
    return d[key]


class StackGenerator(Generator):
    def __init__(self, keys=(), value=_stack_value, order=order_none, offset=offset_none):
        self._keys = keys
        self._value = value
        self._order = ORDERS[order] if isinstance(order, str) else order
        self._offset = OFFSETS[offset] if isinstance(offset, str) else offset
        self._context = None

    def keys(self, value=_UNSET):
        return self._option("keys", value)

    def value(self, value=_UNSET):
        return self._option("value", value)

    def order(self, value=_UNSET):
        if isinstance(value, str):
            value = ORDERS[value]
        return self._option("order", value)

    def offset(self, value=_UNSET):
        if isinstance(value, str):
            value = OFFSETS[value]
        return self._option("offset", value)

    def __call__(self, data):
        data = list(data)
        keys = self._keys(data) if callable(self._keys) else self._keys
        series = [Series(key) for key in keys]
        for d in data:
            for s in series:
                s.append(StackPoint(0.0, float(self._value(d, s.key)), d))
        order = list(self._order(series))
        for i, k in enumerate(order):
            series[k].index = i
        self._offset(series, order)
        return series


def stack(keys=(), value=_stack_value, order=order_none, offset=offset_none):
    return StackGenerator(keys, value, order, offset)
