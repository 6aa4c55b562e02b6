"""Marching-squares contours, filled contour bands and kernel density estimation.

Grids are flat row-major sequences of ``width * height`` values. Contours come
back as GeoJSON-style MultiPolygons in grid coordinates, where the sample at
``(i, j)`` covers the unit square ``[i, i + 1] x [j, j + 1]``. Exterior rings
have positive ``_ring_area`` (counter-clockwise with y pointing down) and holes
negative.
"""

import copy as _copy
import math
from dataclasses import dataclass, field

import numpy as np
import structlog

from . import array
from .errors import ConfigurationError, ValidationError

logger = structlog.get_logger(__name__)

_UNSET = object()

# segment table indexed by the 4-bit corner mask (t0 | t1 << 1 | t2 << 2 | t3 << 3)
_CASES = [
    [],
    [[[1.0, 1.5], [0.5, 1.0]]],
    [[[1.5, 1.0], [1.0, 1.5]]],
    [[[1.5, 1.0], [0.5, 1.0]]],
    [[[1.0, 0.5], [1.5, 1.0]]],
    [[[1.0, 1.5], [0.5, 1.0]], [[1.0, 0.5], [1.5, 1.0]]],
    [[[1.0, 0.5], [1.0, 1.5]]],
    [[[1.0, 0.5], [0.5, 1.0]]],
    [[[0.5, 1.0], [1.0, 0.5]]],
    [[[1.0, 1.5], [1.0, 0.5]]],
    [[[0.5, 1.0], [1.0, 0.5]], [[1.5, 1.0], [1.0, 1.5]]],
    [[[1.5, 1.0], [1.0, 0.5]]],
    [[[0.5, 1.0], [1.5, 1.0]]],
    [[[1.0, 1.5], [1.5, 1.0]]],
    [[[0.5, 1.0], [1.0, 1.5]]],
    [],
]


def _above(v, value):
    # invalid samples count as below everything
    if v is None:
        return 0
    v = float(v)
    return 1 if v >= value else 0


def _valid(v):
    if v is None:
        return -math.inf
    v = float(v)
    return -math.inf if v != v else v


def _ring_area(ring):
    n = len(ring)
    area = ring[n - 1][1] * ring[0][0] - ring[n - 1][0] * ring[0][1]
    for i in range(1, n):
        area += ring[i - 1][1] * ring[i][0] - ring[i - 1][0] * ring[i][1]
    return area


def _segment_contains(a, b, c):
    collinear = (b[0] - a[0]) * (c[1] - a[1]) == (c[0] - a[0]) * (b[1] - a[1])
    if not collinear:
        return False
    i = 1 if a[0] == b[0] else 0
    p, q, r = a[i], c[i], b[i]
    return p <= q <= r or r <= q <= p


def _ring_contains(ring, point):
    """1 inside, -1 outside, 0 on the boundary."""
    x, y = point
    inside = -1
    j = len(ring) - 1
    for i in range(len(ring)):
        xi, yi = ring[i]
        xj, yj = ring[j]
        if _segment_contains(ring[i], ring[j], point):
            return 0
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = -inside
        j = i
    return inside


def _contains(ring, hole):
    for point in hole:
        c = _ring_contains(ring, point)
        if c:
            return c
    return 0


def _smooth1(x, v0, v1, value):
    a = value - v0
    b = v1 - v0
    if math.isfinite(a) or math.isfinite(b):
        try:
            d = a / b
        except ZeroDivisionError:
            d = math.nan if a == 0 else math.copysign(math.inf, a)
    elif a != a or b != b:
        d = math.nan
    else:
        d = math.copysign(1.0, a) / math.copysign(1.0, b)
    return x if d != d else x + d - 0.5


@dataclass
class Contour:
    """All polygons at one threshold: ``coordinates[polygon][ring][point] = [x, y]``."""

    value: float
    coordinates: list = field(default_factory=list)

    type = "MultiPolygon"

    @property
    def rings(self):
        return [ring for polygon in self.coordinates for ring in polygon]

    @property
    def area(self):
        """Enclosed area: exterior rings minus their holes."""
        total = 0.0
        for polygon in self.coordinates:
            if not polygon:
                continue
            total += abs(_ring_area(polygon[0])) / 2
            for hole in polygon[1:]:
                total -= abs(_ring_area(hole)) / 2
        return total

    def to_geojson(self):
        return {"type": self.type, "value": self.value, "coordinates": self.coordinates}


@dataclass
class ContourBand(Contour):
    """Polygons covering ``value <= v < upper``; ``value`` is the lower bound."""

    upper: float = math.inf

    @property
    def lower(self):
        return self.value

    @property
    def mid_value(self):
        return (self.value + self.upper) / 2

    def to_geojson(self):
        geo = super().to_geojson()
        geo["upper"] = self.upper
        return geo


class ContourGenerator:
    def __init__(self, size=(1, 1), thresholds=array.threshold_sturges, smooth=True):
        self._dx, self._dy = self._check_size(size)
        self._thresholds = thresholds
        self._smooth = smooth

    @staticmethod
    def _check_size(size):
        dx, dy = math.floor(size[0]), math.floor(size[1])
        if not (dx >= 0 and dy >= 0):
            raise ConfigurationError(f"invalid size: {size!r}")
        return int(dx), int(dy)

    def _derive(self, **changes):
        clone = _copy.copy(self)
        for name, value in changes.items():
            setattr(clone, name, value)
        return clone

    def size(self, value=_UNSET):
        if value is _UNSET:
            return [self._dx, self._dy]
        dx, dy = self._check_size(value)
        return self._derive(_dx=dx, _dy=dy)

    def thresholds(self, value=_UNSET):
        """A count, an explicit list, or a callable ``f(values)`` returning either."""
        if value is _UNSET:
            return self._thresholds
        return self._derive(_thresholds=value)

    def smooth(self, value=_UNSET):
        if value is _UNSET:
            return self._smooth
        return self._derive(_smooth=bool(value))

    def _resolve_thresholds(self, values):
        tz = self._thresholds(values) if callable(self._thresholds) else self._thresholds
        if isinstance(tz, (list, tuple)):
            return sorted(float(t) for t in tz)
        finite = [float(v) for v in values if v is not None and math.isfinite(float(v))]
        if not finite:
            return []
        lo, hi = min(finite), max(finite)
        tz = array.ticks(*array.nice(lo, hi, tz), tz)
        while tz and tz[-1] >= hi:
            tz.pop()
        while len(tz) > 1 and tz[1] < lo:
            tz.pop(0)
        return tz

    def _check_values(self, values):
        values = list(values)
        if len(values) != self._dx * self._dy:
            raise ValidationError(
                f"expected {self._dx * self._dy} grid values for size {self._dx}x{self._dy}, "
                f"got {len(values)}"
            )
        return values

    def __call__(self, values):
        values = self._check_values(values)
        tz = self._resolve_thresholds(values)
        result = [self._contour(values, t) for t in tz]
        logger.debug("contours computed", size=(self._dx, self._dy), thresholds=len(tz))
        return result

    def contour(self, values, value):
        """The single contour at ``value``."""
        return self._contour(self._check_values(values), value)

    def _contour(self, values, value):
        v = self._threshold(value)
        if all(_above(x, v) for x in values):
            # a threshold at or below every sample encloses nothing, not the whole frame
            return Contour(v, [])
        polygons = []
        holes = []
        for ring in self._rings(values, v):
            if _ring_area(ring) > 0:
                polygons.append([ring])
            else:
                holes.append(ring)
        for hole in holes:
            for polygon in polygons:
                if _contains(polygon[0], hole) != -1:
                    polygon.append(hole)
                    break
        return Contour(v, polygons)

    @staticmethod
    def _threshold(value):
        v = math.nan if value is None else float(value)
        if v != v:
            raise ConfigurationError(f"invalid threshold: {value!r}")
        return v

    def _rings(self, values, value):
        rings = self._isorings(values, value)
        if self._smooth:
            for ring in rings:
                self._smooth_linear(ring, values, value)
        return rings

    def bands(self, values):
        """One :class:`ContourBand` per pair of consecutive thresholds."""
        values = self._check_values(values)
        tz = self._resolve_thresholds(values)
        result = [self._band(values, lo, hi) for lo, hi in zip(tz, tz[1:])]
        logger.debug("contour bands computed", size=(self._dx, self._dy), bands=len(result))
        return result

    def band(self, values, lower, upper):
        """The region where ``lower <= v < upper``."""
        return self._band(self._check_values(values), lower, upper)

    def _band(self, values, lower, upper):
        lo, hi = self._threshold(lower), self._threshold(upper)
        if not lo < hi:
            raise ConfigurationError(f"band bounds must increase: {lower!r}, {upper!r}")
        if all(_above(x, hi) for x in values) or not any(_above(x, lo) for x in values):
            return ContourBand(lo, [], hi)
        # the region above ``upper`` is cut out of the region above ``lower``:
        # reversing its rings turns exteriors into holes and holes into islands
        rings = self._rings(values, lo) + [ring[::-1] for ring in self._rings(values, hi)]
        polygons = [[ring] for ring in rings if _ring_area(ring) > 0]
        holes = [ring for ring in rings if _ring_area(ring) <= 0]
        for hole in holes:
            owner = None
            for polygon in polygons:
                if _contains(polygon[0], hole) == -1:
                    continue
                if owner is None or _ring_area(polygon[0]) < _ring_area(owner[0]):
                    owner = polygon
            if owner is not None:
                owner.append(hole)
        return ContourBand(lo, polygons, hi)

    def _isorings(self, values, value):
        dx, dy = self._dx, self._dy
        by_start = {}
        by_end = {}
        rings = []

        def index(point):
            return point[0] * 2 + point[1] * (dx + 1) * 4

        def stitch(line, x, y):
            start = [line[0][0] + x, line[0][1] + y]
            end = [line[1][0] + x, line[1][1] + y]
            si = index(start)
            ei = index(end)
            f = by_end.get(si)
            if f is not None:
                g = by_start.get(ei)
                if g is not None:
                    del by_end[f["end"]]
                    del by_start[g["start"]]
                    if f is g:
                        f["ring"].append(end)
                        rings.append(f["ring"])
                    else:
                        merged = {"start": f["start"], "end": g["end"], "ring": f["ring"] + g["ring"]}
                        by_start[merged["start"]] = by_end[merged["end"]] = merged
                else:
                    del by_end[f["end"]]
                    f["ring"].append(end)
                    f["end"] = ei
                    by_end[ei] = f
                return
            f = by_start.get(ei)
            if f is not None:
                g = by_end.get(si)
                if g is not None:
                    del by_start[f["start"]]
                    del by_end[g["end"]]
                    if f is g:
                        f["ring"].append(end)
                        rings.append(f["ring"])
                    else:
                        merged = {"start": g["start"], "end": f["end"], "ring": g["ring"] + f["ring"]}
                        by_start[merged["start"]] = by_end[merged["end"]] = merged
                else:
                    del by_start[f["start"]]
                    f["ring"].insert(0, start)
                    f["start"] = si
                    by_start[si] = f
                return
            fragment = {"start": si, "end": ei, "ring": [start, end]}
            by_start[si] = by_end[ei] = fragment

        def emit(case, x, y):
            for line in _CASES[case]:
                stitch(line, x, y)

        # first row, with an implicit row of below-threshold samples above it
        y = -1
        t1 = _above(values[0], value)
        emit(t1 << 1, -1, y)
        for x in range(dx - 1):
            t0, t1 = t1, _above(values[x + 1], value)
            emit(t0 | t1 << 1, x, y)
        emit(t1, dx - 1, y)

        # intermediate rows
        for y in range(dy - 1):
            t1 = _above(values[y * dx + dx], value)
            t2 = _above(values[y * dx], value)
            emit(t1 << 1 | t2 << 2, -1, y)
            for x in range(dx - 1):
                t0, t1 = t1, _above(values[y * dx + dx + x + 1], value)
                t3, t2 = t2, _above(values[y * dx + x + 1], value)
                emit(t0 | t1 << 1 | t2 << 2 | t3 << 3, x, y)
            emit(t1 | t2 << 3, dx - 1, y)

        # last row, with an implicit row of below-threshold samples beneath it
        y = dy - 1
        t2 = _above(values[y * dx], value)
        emit(t2 << 2, -1, y)
        for x in range(dx - 1):
            t3, t2 = t2, _above(values[y * dx + x + 1], value)
            emit(t2 << 2 | t3 << 3, x, y)
        emit(t2 << 3, dx - 1, y)
        return rings

    def _smooth_linear(self, ring, values, value):
        dx, dy = self._dx, self._dy
        for point in ring:
            x, y = point
            xt, yt = int(x), int(y)
            v1 = _valid(values[yt * dx + xt]) if xt < dx and yt < dy else -math.inf
            if 0 < x < dx and xt == x:
                point[0] = _smooth1(x, _valid(values[yt * dx + xt - 1]), v1, value)
            if 0 < y < dy and yt == y:
                point[1] = _smooth1(y, _valid(values[(yt - 1) * dx + xt]), v1, value)


def contours(size=(1, 1), thresholds=array.threshold_sturges, smooth=True):
    return ContourGenerator(size, thresholds, smooth)


def contour(values, value, size):
    """Shortcut for one threshold over a ``size = (width, height)`` grid."""
    return ContourGenerator(size).contour(values, value)


def isobands(values, thresholds, size, smooth=True):
    """Filled bands between consecutive ``thresholds`` over a ``size = (width, height)`` grid."""
    return ContourGenerator(size, list(thresholds), smooth).bands(values)


# ----------------------------------------------------------------------
# density
def _default_x(d, i):
    return d[0]


def _default_y(d, i):
    return d[1]


def _default_weight(d, i):
    return 1.0


def _gaussian(d, bandwidth):
    return np.exp(-(d * d) / (2 * bandwidth * bandwidth)) / (math.sqrt(2 * math.pi) * bandwidth)


def _epanechnikov(d, bandwidth):
    u = d / bandwidth
    return np.where(np.abs(u) <= 1, 0.75 * (1 - u * u) / bandwidth, 0.0)


KERNELS = {"gaussian": _gaussian, "epanechnikov": _epanechnikov}


class DensityEstimator:
    """Kernel density estimate rasterised onto a padded grid.

    ``size`` is the extent of the data space, ``cell_size`` the side of one
    grid cell (rounded down to a power of two) and ``bandwidth`` the standard
    deviation of the gaussian kernel, or the half-width of the epanechnikov
    kernel's support. Kernels are applied separably along x and y. The
    grid extends three bandwidths beyond the data space on every side so the
    gaussian tails are not cut off.
    """

    def __init__(self, x=_default_x, y=_default_y, weight=_default_weight, size=(960, 500),
                 cell_size=4, bandwidth=20.4939015319192, thresholds=20, kernel="gaussian"):
        self._x = x
        self._y = y
        self._weight = weight
        self._size = self._check_size(size)
        self._k = self._check_cell_size(cell_size)
        self._bandwidth = self._check_bandwidth(bandwidth)
        self._thresholds = thresholds
        self._kernel = self._check_kernel(kernel)

    @staticmethod
    def _check_size(size):
        w, h = float(size[0]), float(size[1])
        if not (w >= 0 and h >= 0):
            raise ConfigurationError(f"invalid size: {size!r}")
        return (w, h)

    @staticmethod
    def _check_cell_size(value):
        value = float(value)
        if not value >= 1:
            raise ConfigurationError(f"invalid cell size: {value!r}")
        return int(math.floor(math.log2(value)))

    @staticmethod
    def _check_bandwidth(value):
        value = float(value)
        if not value >= 0:
            raise ConfigurationError(f"invalid bandwidth: {value!r}")
        return value

    @staticmethod
    def _check_kernel(name):
        if name not in KERNELS:
            raise ConfigurationError(f"unknown kernel {name!r}; expected one of {sorted(KERNELS)}")
        return name

    def _derive(self, **changes):
        clone = _copy.copy(self)
        for name, value in changes.items():
            setattr(clone, name, value)
        return clone

    def x(self, value=_UNSET):
        return self._x if value is _UNSET else self._derive(_x=value)

    def y(self, value=_UNSET):
        return self._y if value is _UNSET else self._derive(_y=value)

    def weight(self, value=_UNSET):
        return self._weight if value is _UNSET else self._derive(_weight=value)

    def size(self, value=_UNSET):
        if value is _UNSET:
            return list(self._size)
        return self._derive(_size=self._check_size(value))

    def cell_size(self, value=_UNSET):
        if value is _UNSET:
            return 1 << self._k
        return self._derive(_k=self._check_cell_size(value))

    def bandwidth(self, value=_UNSET):
        if value is _UNSET:
            return self._bandwidth
        return self._derive(_bandwidth=self._check_bandwidth(value))

    def thresholds(self, value=_UNSET):
        if value is _UNSET:
            return self._thresholds
        return self._derive(_thresholds=value)

    def kernel(self, value=_UNSET):
        if value is _UNSET:
            return self._kernel
        return self._derive(_kernel=self._check_kernel(value))

    @property
    def _offset(self):
        return self._bandwidth * 3

    @property
    def shape(self):
        """Grid ``(width, height)`` in cells."""
        o = self._offset
        w, h = self._size
        return int(w + 2 * o) >> self._k, int(h + 2 * o) >> self._k

    def grid(self, data):
        """Density per square unit at each grid cell centre, as a ``(height, width)`` array."""
        data = list(data)
        n, m = self.shape
        xs, ys, ws = [], [], []
        w, h = self._size
        for i, d in enumerate(data):
            x = float(self._x(d, i))
            y = float(self._y(d, i))
            wi = float(self._weight(d, i))
            if not (math.isfinite(x) and math.isfinite(y) and math.isfinite(wi)):
                raise ValidationError(f"non-finite density point at index {i}: {d!r}")
            if wi and 0 <= x <= w and 0 <= y <= h:
                xs.append(x)
                ys.append(y)
                ws.append(wi)
        values = np.zeros((m, n))
        if not xs or n == 0 or m == 0:
            return values

        cell = float(1 << self._k)
        o = self._offset
        cx = (np.arange(n) + 0.5) * cell - o
        cy = (np.arange(m) + 0.5) * cell - o
        px = np.asarray(xs)[:, None]
        py = np.asarray(ys)[:, None]
        sigma = self._bandwidth
        if sigma == 0:
            # degenerate kernel: all mass in the containing cell
            for x, y, wi in zip(xs, ys, ws):
                i = min(int((x + o) / cell), n - 1)
                j = min(int((y + o) / cell), m - 1)
                values[j, i] += wi / (cell * cell)
            return values
        k = KERNELS[self._kernel]
        kx = k(cx[None, :] - px, sigma)
        ky = k(cy[None, :] - py, sigma)
        return (ky * np.asarray(ws)[:, None]).T @ kx

    def _geometry(self, contour):
        cell = float(1 << self._k)
        o = self._offset
        for polygon in contour.coordinates:
            for ring in polygon:
                for point in ring:
                    point[0] = point[0] * cell - o
                    point[1] = point[1] * cell - o
        return contour

    def __call__(self, data):
        grid = self.grid(data)
        peak = float(grid.max()) if grid.size else 0.0
        if peak <= 0:
            logger.warning("empty density grid", shape=self.shape)
            return []
        tz = self._thresholds(grid) if callable(self._thresholds) else self._thresholds
        if not isinstance(tz, (list, tuple)):
            tz = array.ticks(5e-324, peak, tz)
        n, m = self.shape
        generator = ContourGenerator((n, m), sorted(float(t) for t in tz))
        result = [self._geometry(c) for c in generator(grid.ravel().tolist())]
        logger.debug("density contours computed", shape=(n, m), thresholds=len(result), peak=peak)
        return result

    def contours(self, data):
        """A callable ``value -> Contour`` over one fixed grid; ``.max`` is the peak density."""
        grid = self.grid(data)
        n, m = self.shape
        flat = grid.ravel().tolist()
        generator = ContourGenerator((n, m))

        def at(value):
            return self._geometry(generator.contour(flat, value))

        at.max = float(grid.max()) if grid.size else 0.0
        return at


def density(x=_default_x, y=_default_y, weight=_default_weight, size=(960, 500), cell_size=4,
            bandwidth=20.4939015319192, thresholds=20, kernel="gaussian"):
    return DensityEstimator(x, y, weight, size, cell_size, bandwidth, thresholds, kernel)
