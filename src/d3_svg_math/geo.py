"""Spherical geometry and cartographic projections.

Coordinates are ``[longitude, latitude]`` in degrees. Geometry arguments are
GeoJSON-like dicts (``Point``, ``MultiPoint``, ``LineString``,
``MultiLineString``, ``Polygon``, ``MultiPolygon``, ``GeometryCollection``,
``Feature``, ``FeatureCollection`` and ``Sphere``). Polygon rings follow the
spherical convention: exterior rings wind clockwise, so a small ring encloses
the small area.
"""

import copy as _copy
import math

import structlog

from . import array
from .errors import ConfigurationError, ValidationError
from .path import Path

logger = structlog.get_logger(__name__)

_EPSILON = 1e-6
_EPSILON2 = 1e-12
_PI = math.pi
_HALF_PI = _PI / 2
_QUARTER_PI = _PI / 4
_TAU = _PI * 2
_RADIANS = _PI / 180
_DEGREES = 180 / _PI
_UNSET = object()


def _asin(x):
    return _HALF_PI if x > 1 else -_HALF_PI if x < -1 else math.asin(x)


def _acos(x):
    return 0.0 if x > 1 else _PI if x < -1 else math.acos(x)


def _sign(x):
    return 1 if x > 0 else -1 if x < 0 else 0


def _log(x):
    return -math.inf if x == 0 else math.log(x)


def _haversin(x):
    x = math.sin(x / 2)
    return x * x


def _js_round(x):
    return math.floor(x + 0.5)


def _cartesian(lam, phi):
    cos_phi = math.cos(phi)
    return [cos_phi * math.cos(lam), cos_phi * math.sin(lam), math.sin(phi)]


def _cross(a, b):
    return [a[1] * b[2] - a[2] * b[1], a[2] * b[0] - a[0] * b[2], a[0] * b[1] - a[1] * b[0]]


def _normalize(d):
    length = math.sqrt(d[0] * d[0] + d[1] * d[1] + d[2] * d[2])
    if length:
        d[0] /= length
        d[1] /= length
        d[2] /= length
    return d


# ----------------------------------------------------------------------
# geometry traversal
def _geometries(obj):
    """Flatten features and collections into bare geometry dicts."""
    if obj is None:
        return
    kind = obj.get("type")
    if kind == "FeatureCollection":
        for feature in obj.get("features", ()):
            yield from _geometries(feature)
    elif kind == "Feature":
        yield from _geometries(obj.get("geometry"))
    elif kind == "GeometryCollection":
        for geometry in obj.get("geometries", ()):
            yield from _geometries(geometry)
    elif kind in {"Sphere", "Point", "MultiPoint", "LineString", "MultiLineString", "Polygon",
                  "MultiPolygon"}:
        yield obj
    else:
        raise ValidationError(f"unsupported geometry type: {kind!r}")


def _parts(geometry):
    """``(points, lines, polygons)`` of a bare geometry; lines are lists of points."""
    kind = geometry["type"]
    coords = geometry.get("coordinates")
    if kind == "Point":
        return [coords], [], []
    if kind == "MultiPoint":
        return list(coords), [], []
    if kind == "LineString":
        return [], [coords], []
    if kind == "MultiLineString":
        return [], list(coords), []
    if kind == "Polygon":
        return [], [], [coords]
    if kind == "MultiPolygon":
        return [], [], list(coords)
    return [], [], []


def _open_ring(ring):
    ring = [tuple(p) for p in ring]
    if len(ring) > 1 and ring[0] == ring[-1]:
        ring = ring[:-1]
    return ring


# ----------------------------------------------------------------------
# spherical measures
def geo_distance(a, b):
    """Great-circle distance between two points, in radians."""
    lam0, phi0 = a[0] * _RADIANS, a[1] * _RADIANS
    lam, phi = b[0] * _RADIANS, b[1] * _RADIANS
    sin_phi0, cos_phi0 = math.sin(phi0), math.cos(phi0)
    sin_phi, cos_phi = math.sin(phi), math.cos(phi)
    delta = abs(lam - lam0)
    cos_delta, sin_delta = math.cos(delta), math.sin(delta)
    x = cos_phi * sin_delta
    y = cos_phi0 * sin_phi - sin_phi0 * cos_phi * cos_delta
    z = sin_phi0 * sin_phi + cos_phi0 * cos_phi * cos_delta
    return math.atan2(math.sqrt(x * x + y * y), z)


def _line_length(line):
    return sum(geo_distance(line[i - 1], line[i]) for i in range(1, len(line)))


def geo_length(obj):
    """Great-arc length in radians; polygons contribute the perimeter of every ring."""
    total = 0.0
    for geometry in _geometries(obj):
        _, lines, polygons = _parts(geometry)
        for line in lines:
            total += _line_length(line)
        for polygon in polygons:
            for ring in polygon:
                ring = _open_ring(ring)
                if ring:
                    total += _line_length(ring + [ring[0]])
    return total


class GeoInterpolator:
    """Great-circle interpolation between two points; ``distance`` is in radians."""

    def __init__(self, a, b):
        x0, y0 = a[0] * _RADIANS, a[1] * _RADIANS
        x1, y1 = b[0] * _RADIANS, b[1] * _RADIANS
        cy0, sy0 = math.cos(y0), math.sin(y0)
        cy1, sy1 = math.cos(y1), math.sin(y1)
        self._x0, self._y0 = x0, y0
        self._k0 = (cy0 * math.cos(x0), cy0 * math.sin(x0), sy0)
        self._k1 = (cy1 * math.cos(x1), cy1 * math.sin(x1), sy1)
        self.distance = 2 * _asin(math.sqrt(_haversin(y1 - y0) + cy0 * cy1 * _haversin(x1 - x0)))
        self._k = math.sin(self.distance)

    def __call__(self, t):
        d = self.distance
        if not d:
            return [self._x0 * _DEGREES, self._y0 * _DEGREES]
        t *= d
        b = math.sin(t) / self._k
        a = math.sin(d - t) / self._k
        x = a * self._k0[0] + b * self._k1[0]
        y = a * self._k0[1] + b * self._k1[1]
        z = a * self._k0[2] + b * self._k1[2]
        return [math.atan2(y, x) * _DEGREES, math.atan2(z, math.sqrt(x * x + y * y)) * _DEGREES]


def geo_interpolate(a, b):
    return GeoInterpolator(a, b)


def _ring_area_sum(rings):
    total = 0.0
    for ring in rings:
        ring = _open_ring(ring)
        if not ring:
            continue
        lam00, phi00 = ring[0]
        lam0 = lam00 * _RADIANS
        phi0 = phi00 * _RADIANS / 2 + _QUARTER_PI
        cos_phi0, sin_phi0 = math.cos(phi0), math.sin(phi0)
        for lon, lat in ring[1:] + [ring[0]]:
            lam = lon * _RADIANS
            phi = lat * _RADIANS / 2 + _QUARTER_PI
            d_lam = lam - lam0
            sd_lam = 1 if d_lam >= 0 else -1
            ad_lam = sd_lam * d_lam
            cos_phi, sin_phi = math.cos(phi), math.sin(phi)
            k = sin_phi0 * sin_phi
            u = cos_phi0 * cos_phi + k * math.cos(ad_lam)
            v = k * sd_lam * math.sin(ad_lam)
            total += math.atan2(v, u)
            lam0, cos_phi0, sin_phi0 = lam, cos_phi, sin_phi
    return total


def geo_area(obj):
    """Spherical area in steradians; clockwise exterior rings enclose the smaller side."""
    area = 0.0
    for geometry in _geometries(obj):
        if geometry["type"] == "Sphere":
            area += 2 * _TAU
            continue
        _, _, polygons = _parts(geometry)
        for polygon in polygons:
            ring_sum = _ring_area_sum(polygon)
            area += (_TAU + ring_sum if ring_sum < 0 else ring_sum) * 2
    return area


def _polygon_contains(polygon, point):
    """Winding test on the sphere; ``polygon`` is a list of open rings in radians."""

    def longitude(p):
        if abs(p[0]) <= _PI:
            return p[0]
        return _sign(p[0]) * (math.fmod(abs(p[0]) + _PI, _TAU) - _PI)

    lam = longitude(point)
    phi = point[1]
    sin_phi = math.sin(phi)
    normal = [math.sin(lam), -math.cos(lam), 0.0]
    angle = 0.0
    winding = 0
    total = 0.0
    if sin_phi == 1:
        phi = _HALF_PI + _EPSILON
    elif sin_phi == -1:
        phi = -_HALF_PI - _EPSILON

    for ring in polygon:
        m = len(ring)
        if not m:
            continue
        point0 = ring[m - 1]
        lam0 = longitude(point0)
        phi0 = point0[1] / 2 + _QUARTER_PI
        sin_phi0, cos_phi0 = math.sin(phi0), math.cos(phi0)
        for j in range(m):
            point1 = ring[j]
            lam1 = longitude(point1)
            phi1 = point1[1] / 2 + _QUARTER_PI
            sin_phi1, cos_phi1 = math.sin(phi1), math.cos(phi1)
            delta = lam1 - lam0
            sign = 1 if delta >= 0 else -1
            abs_delta = sign * delta
            antimeridian = abs_delta > _PI
            k = sin_phi0 * sin_phi1
            total += math.atan2(k * sign * math.sin(abs_delta), cos_phi0 * cos_phi1 + k * math.cos(abs_delta))
            angle += delta + sign * _TAU if antimeridian else delta
            if antimeridian ^ (lam0 >= lam) ^ (lam1 >= lam):
                arc = _normalize(_cross(_cartesian(*point0), _cartesian(*point1)))
                intersection = _normalize(_cross(normal, arc))
                phi_arc = (-1 if antimeridian ^ (delta >= 0) else 1) * _asin(intersection[2])
                if phi > phi_arc or (phi == phi_arc and (arc[0] or arc[1])):
                    winding += 1 if antimeridian ^ (delta >= 0) else -1
            lam0, sin_phi0, cos_phi0, point0 = lam1, sin_phi1, cos_phi1, point1

    return bool((angle < -_EPSILON or (angle < _EPSILON and total < -_EPSILON2)) ^ (winding & 1))


def _radians_ring(ring):
    return [(p[0] * _RADIANS, p[1] * _RADIANS) for p in _open_ring(ring)]


def _line_contains(line, point):
    for i in range(1, len(line)):
        ab = geo_distance(line[i - 1], line[i])
        ao = geo_distance(line[i - 1], point)
        ob = geo_distance(point, line[i])
        if ao == 0 or ob == 0 or ao + ob - ab < _EPSILON2 * 1e3:
            return True
    return False


def geo_contains(obj, point):
    """Whether ``point`` lies inside (or on) the given geometry."""
    for geometry in _geometries(obj):
        if geometry["type"] == "Sphere":
            return True
        points, lines, polygons = _parts(geometry)
        if any(geo_distance(p, point) == 0 for p in points):
            return True
        if any(_line_contains(line, point) for line in lines):
            return True
        target = (point[0] * _RADIANS, point[1] * _RADIANS)
        if any(_polygon_contains([_radians_ring(r) for r in polygon], target) for polygon in polygons):
            return True
    return False


class _CentroidAccumulator:
    def __init__(self):
        self.w0 = self.w1 = 0.0
        self.x0 = self.y0 = self.z0 = 0.0
        self.x1 = self.y1 = self.z1 = 0.0
        self.x2 = self.y2 = self.z2 = 0.0

    def point_cartesian(self, x, y, z):
        self.w0 += 1
        self.x0 += (x - self.x0) / self.w0
        self.y0 += (y - self.y0) / self.w0
        self.z0 += (z - self.z0) / self.w0

    def point(self, lon, lat):
        self.point_cartesian(*_cartesian(lon * _RADIANS, lat * _RADIANS))

    def line(self, coords):
        if not coords:
            return
        px, py, pz = _cartesian(coords[0][0] * _RADIANS, coords[0][1] * _RADIANS)
        self.point_cartesian(px, py, pz)
        for lon, lat in coords[1:]:
            x, y, z = _cartesian(lon * _RADIANS, lat * _RADIANS)
            cx, cy, cz = py * z - pz * y, pz * x - px * z, px * y - py * x
            w = math.atan2(math.sqrt(cx * cx + cy * cy + cz * cz), px * x + py * y + pz * z)
            self.w1 += w
            self.x1 += w * (px + x)
            self.y1 += w * (py + y)
            self.z1 += w * (pz + z)
            px, py, pz = x, y, z
            self.point_cartesian(px, py, pz)

    def ring(self, coords):
        coords = _open_ring(coords)
        if not coords:
            return
        px, py, pz = _cartesian(coords[0][0] * _RADIANS, coords[0][1] * _RADIANS)
        self.point_cartesian(px, py, pz)
        for lon, lat in coords[1:] + [coords[0]]:
            x, y, z = _cartesian(lon * _RADIANS, lat * _RADIANS)
            cx, cy, cz = py * z - pz * y, pz * x - px * z, px * y - py * x
            m = math.sqrt(cx * cx + cy * cy + cz * cz)
            w = _asin(m)
            v = -w / m if m else 0.0
            self.x2 += v * cx
            self.y2 += v * cy
            self.z2 += v * cz
            self.w1 += w
            self.x1 += w * (px + x)
            self.y1 += w * (py + y)
            self.z1 += w * (pz + z)
            px, py, pz = x, y, z
            self.point_cartesian(px, py, pz)

    def result(self):
        x, y, z = self.x2, self.y2, self.z2
        m = math.sqrt(x * x + y * y + z * z)
        if m < _EPSILON2:
            x, y, z = self.x1, self.y1, self.z1
            if self.w1 < _EPSILON:
                x, y, z = self.x0, self.y0, self.z0
            m = math.sqrt(x * x + y * y + z * z)
            if m < _EPSILON2:
                return [math.nan, math.nan]
        return [math.atan2(y, x) * _DEGREES, _asin(z / m) * _DEGREES]


def geo_centroid(obj):
    """Spherical centroid; polygons weigh by area, lines by length, points by count."""
    acc = _CentroidAccumulator()
    for geometry in _geometries(obj):
        points, lines, polygons = _parts(geometry)
        for lon, lat in points:
            acc.point(lon, lat)
        for line in lines:
            acc.line(line)
        for polygon in polygons:
            for ring in polygon:
                acc.ring(ring)
    return acc.result()


def _lat_extrema(a, b):
    """Latitudes (degrees) reached strictly inside the great-circle arc a->b."""
    pa = _cartesian(a[0] * _RADIANS, a[1] * _RADIANS)
    pb = _cartesian(b[0] * _RADIANS, b[1] * _RADIANS)
    normal = _cross(pa, pb)
    # direction in the arc's plane pointing toward the pole
    equatorial = [-normal[1], normal[0], 0.0]
    inflection = _normalize(_cross(equatorial, normal))
    out = []
    for candidate in (inflection, [-inflection[0], -inflection[1], -inflection[2]]):
        c1 = _cross(pa, candidate)
        c2 = _cross(candidate, pb)
        # candidate lies between a and b when both cross products agree with the normal
        if (sum(u * v for u, v in zip(c1, normal)) > 0 and sum(u * v for u, v in zip(c2, normal)) > 0):
            out.append(_asin(candidate[2]) * _DEGREES)
    return out


def _longitude_span(lons):
    """Smallest ``(west, east)`` covering the longitudes; west > east crosses the antimeridian."""
    lons = sorted(set(((lon + 180) % 360) - 180 for lon in lons))
    if len(lons) == 1:
        return lons[0], lons[0]
    gaps = [(lons[(i + 1) % len(lons)] - lons[i]) % 360 for i in range(len(lons))]
    widest = max(range(len(gaps)), key=lambda i: gaps[i])
    west = lons[(widest + 1) % len(lons)]
    east = lons[widest]
    return west, east


def geo_bounds(obj):
    """``[[west, south], [east, north]]`` in degrees; west > east when crossing the antimeridian."""
    lons = []
    lats = []
    full = False
    for geometry in _geometries(obj):
        if geometry["type"] == "Sphere":
            return [[-180.0, -90.0], [180.0, 90.0]]
        points, lines, polygons = _parts(geometry)
        for lon, lat in points:
            lons.append(lon)
            lats.append(lat)
        rings = [_open_ring(r) for polygon in polygons for r in polygon]
        for seq in list(lines) + [r + r[:1] for r in rings if r]:
            for i, (lon, lat) in enumerate(seq):
                lons.append(lon)
                lats.append(lat)
                if i:
                    lats.extend(_lat_extrema(seq[i - 1], (lon, lat)))
        for polygon in polygons:
            for pole in (90.0, -90.0):
                if geo_contains({"type": "Polygon", "coordinates": polygon}, [0.0, pole]):
                    lats.append(pole)
                    full = True
    if not lats:
        return [[math.nan, math.nan], [math.nan, math.nan]]
    if full:
        return [[-180.0, min(lats)], [180.0, max(lats)]]
    west, east = _longitude_span(lons)
    return [[west, min(lats)], [east, max(lats)]]


# ----------------------------------------------------------------------
# rotation
class _Rotation:
    """Composite spherical rotation in radians; callable forward, ``invert`` backward."""

    def __init__(self, d_lambda, d_phi, d_gamma):
        self.d_lambda = math.fmod(d_lambda, _TAU)
        self.phi_gamma = bool(d_phi or d_gamma)
        self._cos_phi, self._sin_phi = math.cos(d_phi), math.sin(d_phi)
        self._cos_gamma, self._sin_gamma = math.cos(d_gamma), math.sin(d_gamma)

    @staticmethod
    def _wrap(lam):
        if abs(lam) > _PI:
            lam -= _js_round(lam / _TAU) * _TAU
        return lam

    def _forward_pg(self, lam, phi):
        cos_phi = math.cos(phi)
        x = math.cos(lam) * cos_phi
        y = math.sin(lam) * cos_phi
        z = math.sin(phi)
        k = z * self._cos_phi + x * self._sin_phi
        return (
            math.atan2(y * self._cos_gamma - k * self._sin_gamma, x * self._cos_phi - z * self._sin_phi),
            _asin(k * self._cos_gamma + y * self._sin_gamma),
        )

    def _invert_pg(self, lam, phi):
        cos_phi = math.cos(phi)
        x = math.cos(lam) * cos_phi
        y = math.sin(lam) * cos_phi
        z = math.sin(phi)
        k = z * self._cos_gamma - y * self._sin_gamma
        return (
            math.atan2(y * self._cos_gamma + z * self._sin_gamma, x * self._cos_phi + k * self._sin_phi),
            _asin(k * self._cos_phi - x * self._sin_phi),
        )

    def __call__(self, lam, phi):
        if self.d_lambda:
            lam = self._wrap(lam + self.d_lambda)
        elif not self.phi_gamma:
            return self._wrap(lam), phi
        if self.phi_gamma:
            return self._forward_pg(lam, phi)
        return lam, phi

    def invert(self, lam, phi):
        if self.phi_gamma:
            lam, phi = self._invert_pg(lam, phi)
        if self.d_lambda:
            return self._wrap(lam - self.d_lambda), phi
        if not self.phi_gamma:
            return self._wrap(lam), phi
        return lam, phi


class Rotation:
    """Rotate ``[lon, lat]`` points by ``[lambda, phi, gamma]`` degrees."""

    def __init__(self, angles):
        angles = list(angles) + [0.0] * (3 - len(angles))
        self.angles = [float(a) for a in angles[:3]]
        self._rotate = _Rotation(*(a * _RADIANS for a in self.angles))

    def __call__(self, point):
        lam, phi = self._rotate(point[0] * _RADIANS, point[1] * _RADIANS)
        return [lam * _DEGREES, phi * _DEGREES]

    def invert(self, point):
        lam, phi = self._rotate.invert(point[0] * _RADIANS, point[1] * _RADIANS)
        return [lam * _DEGREES, phi * _DEGREES]


def geo_rotation(angles):
    return Rotation(angles)


def geo_circle(center=(0.0, 0.0), radius=90.0, precision=6.0):
    """Polygon approximating a small circle of ``radius`` degrees around ``center``."""
    r = radius * _RADIANS
    p = precision * _RADIANS
    rotate = _Rotation(-center[0] * _RADIANS, -center[1] * _RADIANS, 0.0)
    ring = []
    if p:
        cos_r, sin_r = math.cos(r), math.sin(r)
        t = r + _TAU
        t1 = r - p / 2
        while t > t1:
            x, y, z = cos_r, -sin_r * math.cos(t), -sin_r * math.sin(t)
            lam, phi = math.atan2(y, x), _asin(z)
            lam, phi = rotate.invert(lam, phi)
            ring.append([lam * _DEGREES, phi * _DEGREES])
            t -= p
    return {"type": "Polygon", "coordinates": [ring]}


# ----------------------------------------------------------------------
# raw projections (radians in, unit-sphere plane out)
class RawProjection:
    def __call__(self, lam, phi):
        raise NotImplementedError

    def invert(self, x, y):
        raise NotImplementedError


class EquirectangularRaw(RawProjection):
    def __call__(self, lam, phi):
        return lam, phi

    def invert(self, x, y):
        return x, y


class MercatorRaw(RawProjection):
    def __call__(self, lam, phi):
        return lam, _log(math.tan((_HALF_PI + phi) / 2))

    def invert(self, x, y):
        return x, 2 * math.atan(math.exp(y)) - _HALF_PI


class TransverseMercatorRaw(RawProjection):
    def __call__(self, lam, phi):
        return _log(math.tan((_HALF_PI + phi) / 2)), -lam

    def invert(self, x, y):
        return -y, 2 * math.atan(math.exp(x)) - _HALF_PI


class _AzimuthalRaw(RawProjection):
    """Azimuthal family: ``scale(cos c)`` radial factor, ``angle(z)`` for the inverse."""

    def scale(self, cxcy):
        raise NotImplementedError

    def angle(self, z):
        raise NotImplementedError

    def __call__(self, lam, phi):
        cx, cy = math.cos(lam), math.cos(phi)
        k = self.scale(cx * cy)
        if k == math.inf:
            return 2.0, 0.0
        return k * cy * math.sin(lam), k * math.sin(phi)

    def invert(self, x, y):
        z = math.sqrt(x * x + y * y)
        c = self.angle(z)
        sc, cc = math.sin(c), math.cos(c)
        return math.atan2(x * sc, z * cc), _asin(y * sc / z if z else 0.0)


class OrthographicRaw(_AzimuthalRaw):
    def __call__(self, lam, phi):
        return math.cos(phi) * math.sin(lam), math.sin(phi)

    def angle(self, z):
        return _asin(z)


class StereographicRaw(_AzimuthalRaw):
    def __call__(self, lam, phi):
        cy = math.cos(phi)
        k = 1 + math.cos(lam) * cy
        return cy * math.sin(lam) / k, math.sin(phi) / k

    def angle(self, z):
        return 2 * math.atan(z)


class GnomonicRaw(_AzimuthalRaw):
    def __call__(self, lam, phi):
        cy = math.cos(phi)
        k = math.cos(lam) * cy
        return cy * math.sin(lam) / k, math.sin(phi) / k

    def angle(self, z):
        return math.atan(z)


class AzimuthalEqualAreaRaw(_AzimuthalRaw):
    def scale(self, cxcy):
        denominator = 1 + cxcy
        return math.sqrt(2 / denominator) if denominator else math.inf

    def angle(self, z):
        return 2 * _asin(z / 2)


class AzimuthalEquidistantRaw(_AzimuthalRaw):
    def scale(self, cxcy):
        c = _acos(cxcy)
        return c / math.sin(c) if c else c

    def angle(self, z):
        return z


class CylindricalEqualAreaRaw(RawProjection):
    def __init__(self, phi0):
        self._cos_phi0 = math.cos(phi0)

    def __call__(self, lam, phi):
        return lam * self._cos_phi0, math.sin(phi) / self._cos_phi0

    def invert(self, x, y):
        return x / self._cos_phi0, _asin(y * self._cos_phi0)


class ConicEqualAreaRaw(RawProjection):
    def __init__(self, y0, y1):
        sy0 = math.sin(y0)
        self.n = (sy0 + math.sin(y1)) / 2
        self.c = 1 + sy0 * (2 * self.n - sy0)
        self.r0 = math.sqrt(self.c) / self.n

    def __call__(self, lam, phi):
        n = self.n
        r = math.sqrt(max(self.c - 2 * n * math.sin(phi), 0.0)) / n
        lam *= n
        return r * math.sin(lam), self.r0 - r * math.cos(lam)

    def invert(self, x, y):
        n = self.n
        r0y = self.r0 - y
        lam = math.atan2(x, abs(r0y)) * _sign(r0y)
        if r0y * n < 0:
            lam -= _PI * _sign(x) * _sign(r0y)
        return lam / n, _asin((self.c - (x * x + r0y * r0y) * n * n) / (2 * n))


def _tany(y):
    return math.tan((_HALF_PI + y) / 2)


class ConicConformalRaw(RawProjection):
    def __init__(self, y0, y1):
        cy0 = math.cos(y0)
        self.n = math.sin(y0) if y0 == y1 else math.log(cy0 / math.cos(y1)) / math.log(_tany(y1) / _tany(y0))
        self.f = cy0 * math.pow(_tany(y0), self.n) / self.n

    def __call__(self, lam, phi):
        if self.f > 0:
            phi = max(phi, -_HALF_PI + _EPSILON)
        else:
            phi = min(phi, _HALF_PI - _EPSILON)
        r = self.f / math.pow(_tany(phi), self.n)
        return r * math.sin(self.n * lam), self.f - r * math.cos(self.n * lam)

    def invert(self, x, y):
        n, f = self.n, self.f
        fy = f - y
        r = _sign(n) * math.sqrt(x * x + fy * fy)
        lam = math.atan2(x, abs(fy)) * _sign(fy)
        if fy * n < 0:
            lam -= _PI * _sign(x) * _sign(fy)
        return lam / n, 2 * math.atan(math.pow(f / r, 1 / n)) - _HALF_PI


class ConicEquidistantRaw(RawProjection):
    def __init__(self, y0, y1):
        cy0 = math.cos(y0)
        self.n = math.sin(y0) if y0 == y1 else (cy0 - math.cos(y1)) / (y1 - y0)
        self.g = cy0 / self.n + y0

    def __call__(self, lam, phi):
        gy = self.g - phi
        nx = self.n * lam
        return gy * math.sin(nx), self.g - gy * math.cos(nx)

    def invert(self, x, y):
        n, g = self.n, self.g
        gy = g - y
        lam = math.atan2(x, abs(gy)) * _sign(gy)
        if gy * n < 0:
            lam -= _PI * _sign(x) * _sign(gy)
        return lam / n, g - _sign(n) * math.sqrt(x * x + gy * gy)


def conic_equal_area_raw(y0, y1):
    if abs((math.sin(y0) + math.sin(y1)) / 2) < _EPSILON:
        return CylindricalEqualAreaRaw(y0)
    return ConicEqualAreaRaw(y0, y1)


def conic_conformal_raw(y0, y1):
    raw = ConicConformalRaw(y0, y1)
    return raw if raw.n else MercatorRaw()


def conic_equidistant_raw(y0, y1):
    cy0 = math.cos(y0)
    n = math.sin(y0) if y0 == y1 else (cy0 - math.cos(y1)) / (y1 - y0)
    if abs(n) < _EPSILON:
        return EquirectangularRaw()
    return ConicEquidistantRaw(y0, y1)


_A1, _A2, _A3, _A4 = 1.340264, -0.081106, 0.000893, 0.003796
_M = math.sqrt(3) / 2


class EqualEarthRaw(RawProjection):
    def __call__(self, lam, phi):
        l = _asin(_M * math.sin(phi))
        l2 = l * l
        l6 = l2 * l2 * l2
        return (
            lam * math.cos(l) / (_M * (_A1 + 3 * _A2 * l2 + l6 * (7 * _A3 + 9 * _A4 * l2))),
            l * (_A1 + _A2 * l2 + l6 * (_A3 + _A4 * l2)),
        )

    def invert(self, x, y):
        l = y
        l2 = l * l
        l6 = l2 * l2 * l2
        for _ in range(12):
            fy = l * (_A1 + _A2 * l2 + l6 * (_A3 + _A4 * l2)) - y
            fpy = _A1 + 3 * _A2 * l2 + l6 * (7 * _A3 + 9 * _A4 * l2)
            delta = fy / fpy
            l -= delta
            l2 = l * l
            l6 = l2 * l2 * l2
            if abs(delta) < _EPSILON2:
                break
        return (
            _M * x * (_A1 + 3 * _A2 * l2 + l6 * (7 * _A3 + 9 * _A4 * l2)) / math.cos(l),
            _asin(math.sin(l) / _M),
        )


class NaturalEarth1Raw(RawProjection):
    def __call__(self, lam, phi):
        phi2 = phi * phi
        phi4 = phi2 * phi2
        return (
            lam * (0.8707 - 0.131979 * phi2 + phi4 * (-0.013791 + phi4 * (0.003971 * phi2 - 0.001529 * phi4))),
            phi * (1.007226 + phi2 * (0.015085 + phi4 * (-0.044475 + 0.028874 * phi2 - 0.005916 * phi4))),
        )

    def invert(self, x, y):
        phi = y
        for _ in range(25):
            phi2 = phi * phi
            phi4 = phi2 * phi2
            delta = (
                phi * (1.007226 + phi2 * (0.015085 + phi4 * (-0.044475 + 0.028874 * phi2 - 0.005916 * phi4))) - y
            ) / (1.007226 + phi2 * (0.015085 * 3 + phi4 * (-0.044475 * 7 + 0.028874 * 9 * phi2 - 0.005916 * 11 * phi4)))
            phi -= delta
            if abs(delta) <= _EPSILON:
                break
        phi2 = phi * phi
        return (
            x / (0.8707 + phi2 * (-0.131979 + phi2 * (-0.013791 + phi2 * phi2 * phi2 * (0.003971 - 0.001529 * phi2)))),
            phi,
        )


# ----------------------------------------------------------------------
# projections
class Projection:
    """A raw projection composed with rotation, scale and translation.

    ``projection([lon, lat]) -> [x, y]`` in screen space (y down);
    ``projection.invert([x, y]) -> [lon, lat]``. Configuration methods return
    a modified copy.
    """

    def __init__(self, raw, scale=150.0, translate=(480.0, 250.0), center=(0.0, 0.0),
                 rotate=(0.0, 0.0, 0.0), clip_angle=None, clip_extent=None):
        self._raw = raw
        self._k = float(scale)
        self._translate = (float(translate[0]), float(translate[1]))
        self._center = (float(center[0]), float(center[1]))
        self._rotate = self._angles(rotate)
        self._clip_angle = clip_angle
        self._clip_extent = self._check_extent(clip_extent)
        self._recenter()

    @staticmethod
    def _angles(rotate):
        angles = [float(a) for a in rotate]
        if len(angles) < 2:
            raise ConfigurationError(f"rotate expects two or three angles, got {rotate!r}")
        return tuple(angles + [0.0] * (3 - len(angles)))

    @staticmethod
    def _check_extent(extent):
        if extent is None:
            return None
        (x0, y0), (x1, y1) = extent
        return ((float(x0), float(y0)), (float(x1), float(y1)))

    def _recenter(self):
        self._rotation = _Rotation(*(a * _RADIANS for a in self._rotate))
        cx, cy = self._raw(self._center[0] * _RADIANS, self._center[1] * _RADIANS)
        self._dx = self._translate[0] - self._k * cx
        self._dy = self._translate[1] + self._k * cy

    def _derive(self, **changes):
        clone = _copy.copy(self)
        for name, value in changes.items():
            setattr(clone, name, value)
        clone._recenter()
        return clone

    def __call__(self, point):
        x, y, _, _ = self._project_radians(point[0] * _RADIANS, point[1] * _RADIANS)
        return [x, y]

    def _project_radians(self, lam, phi):
        lam, phi = self._rotation(lam, phi)
        x, y = self._raw(lam, phi)
        return self._dx + self._k * x, self._dy - self._k * y, lam, phi

    def invert(self, point):
        x = (point[0] - self._dx) / self._k
        y = (self._dy - point[1]) / self._k
        lam, phi = self._raw.invert(x, y)
        lam, phi = self._rotation.invert(lam, phi)
        return [lam * _DEGREES, phi * _DEGREES]

    @property
    def raw(self):
        return self._raw

    def scale(self, value=_UNSET):
        if value is _UNSET:
            return self._k
        return self._derive(_k=float(value))

    def translate(self, value=_UNSET):
        if value is _UNSET:
            return list(self._translate)
        return self._derive(_translate=(float(value[0]), float(value[1])))

    def center(self, value=_UNSET):
        if value is _UNSET:
            return list(self._center)
        lon, lat = float(value[0]), float(value[1])
        return self._derive(_center=(math.fmod(lon, 360), math.fmod(lat, 360)))

    def rotate(self, value=_UNSET):
        if value is _UNSET:
            return list(self._rotate)
        angles = self._angles(value)
        return self._derive(_rotate=tuple(math.fmod(a, 360) for a in angles))

    def clip_angle(self, value=_UNSET):
        """Small-circle clip radius in degrees, or None for no clipping."""
        if value is _UNSET:
            return self._clip_angle
        return self._derive(_clip_angle=None if value is None else float(value))

    def clip_extent(self, value=_UNSET):
        """Screen-space rectangle ``[[x0, y0], [x1, y1]]``, or None."""
        if value is _UNSET:
            return None if self._clip_extent is None else [list(p) for p in self._clip_extent]
        return self._derive(_clip_extent=self._check_extent(value))

    def _visible(self, lam, phi):
        """Whether a rotated point survives the clip angle."""
        if self._clip_angle is None:
            return True
        return math.cos(lam) * math.cos(phi) > math.cos(self._clip_angle * _RADIANS)

    def fit_extent(self, extent, obj):
        """Scale and translate so ``obj`` fills ``[[x0, y0], [x1, y1]]``."""
        (x0, y0), (x1, y1) = extent
        trial = self._derive(_k=150.0, _translate=(0.0, 0.0), _clip_extent=None)
        (bx0, by0), (bx1, by1) = GeoPath(trial).bounds(obj)
        if not all(math.isfinite(v) for v in (bx0, by0, bx1, by1)):
            raise ValidationError("cannot fit an empty geometry")
        w, h = x1 - x0, y1 - y0
        spans = [s for s in ((w / (bx1 - bx0)) if bx1 > bx0 else None,
                             (h / (by1 - by0)) if by1 > by0 else None) if s is not None]
        if not spans:
            raise ValidationError("cannot fit a geometry with zero extent")
        k = min(spans)
        tx = x0 + (w - k * (bx1 + bx0)) / 2
        ty = y0 + (h - k * (by1 + by0)) / 2
        logger.debug("projection fitted", extent=extent, scale=150 * k, translate=(tx, ty))
        return self._derive(_k=150 * k, _translate=(tx, ty))

    def fit_size(self, size, obj):
        return self.fit_extent([[0, 0], size], obj)

    def fit_width(self, width, obj):
        """Fit ``obj`` to ``width`` and align its top edge with y = 0."""
        trial = self.fit_extent([[0, 0], [width, 1e9]], obj)
        (_, top), _ = GeoPath(trial).bounds(obj)
        tx, ty = trial.translate()
        return trial.translate([tx, ty - top])

    def fit_height(self, height, obj):
        trial = self.fit_extent([[0, 0], [1e9, height]], obj)
        (left, _), _ = GeoPath(trial).bounds(obj)
        tx, ty = trial.translate()
        return trial.translate([tx - left, ty])


class ConicProjection(Projection):
    """Conic projections parameterised by two standard parallels (degrees)."""

    def __init__(self, raw_factory, parallels=(0.0, 60.0), **kwargs):
        self._raw_factory = raw_factory
        self._parallels = (float(parallels[0]), float(parallels[1]))
        super().__init__(self._build_raw(), **kwargs)

    def _build_raw(self):
        return self._raw_factory(self._parallels[0] * _RADIANS, self._parallels[1] * _RADIANS)

    def parallels(self, value=_UNSET):
        if value is _UNSET:
            return list(self._parallels)
        clone = _copy.copy(self)
        clone._parallels = (float(value[0]), float(value[1]))
        clone._raw = clone._build_raw()
        clone._recenter()
        return clone


class TransverseMercatorProjection(Projection):
    """Transverse Mercator: center and rotate are expressed in the untransposed frame."""

    def center(self, value=_UNSET):
        if value is _UNSET:
            lon, lat = self._center
            return [lat, -lon]
        return super().center([-value[1], value[0]])

    def rotate(self, value=_UNSET):
        if value is _UNSET:
            a, b, c = self._rotate
            return [a, b, c - 90]
        value = list(value)
        gamma = value[2] + 90 if len(value) > 2 else 90
        return super().rotate([value[0], value[1], gamma])


def mercator():
    return Projection(MercatorRaw(), scale=961 / _TAU)


def transverse_mercator():
    return TransverseMercatorProjection(TransverseMercatorRaw(), scale=159.155, rotate=(0, 0, 90))


def equirectangular():
    return Projection(EquirectangularRaw(), scale=152.63)


def orthographic():
    return Projection(OrthographicRaw(), scale=249.5, clip_angle=90 + _EPSILON)


def stereographic():
    return Projection(StereographicRaw(), scale=250, clip_angle=142)


def gnomonic():
    return Projection(GnomonicRaw(), scale=144.049, clip_angle=60)


def azimuthal_equal_area():
    return Projection(AzimuthalEqualAreaRaw(), scale=124.75, clip_angle=180 - 1e-3)


def azimuthal_equidistant():
    return Projection(AzimuthalEquidistantRaw(), scale=79.4188, clip_angle=180 - 1e-3)


def conic_equal_area():
    return ConicProjection(conic_equal_area_raw, scale=155.424, center=(0, 33.6442))


def albers():
    return ConicProjection(
        conic_equal_area_raw,
        parallels=(29.5, 45.5),
        scale=1070,
        translate=(480, 250),
        rotate=(96, 0),
        center=(-0.6, 38.7),
    )


def conic_conformal():
    return ConicProjection(conic_conformal_raw, parallels=(30, 30), scale=109.5)


def conic_equidistant():
    return ConicProjection(conic_equidistant_raw, scale=131.154, center=(0, 13.9389))


def equal_earth():
    return Projection(EqualEarthRaw(), scale=177.158)


def natural_earth1():
    return Projection(NaturalEarth1Raw(), scale=175.295)


PROJECTIONS = {
    "mercator": mercator,
    "transverse_mercator": transverse_mercator,
    "equirectangular": equirectangular,
    "orthographic": orthographic,
    "stereographic": stereographic,
    "gnomonic": gnomonic,
    "azimuthal_equal_area": azimuthal_equal_area,
    "azimuthal_equidistant": azimuthal_equidistant,
    "conic_equal_area": conic_equal_area,
    "albers": albers,
    "conic_conformal": conic_conformal,
    "conic_equidistant": conic_equidistant,
    "equal_earth": equal_earth,
    "natural_earth1": natural_earth1,
}


# ----------------------------------------------------------------------
# graticule
class Graticule:
    """Meridians and parallels at major and minor steps."""

    def __init__(self):
        self._major_extent = ((-180.0, -90.0 + _EPSILON), (180.0, 90.0 - _EPSILON))
        self._minor_extent = ((-180.0, -80.0 - _EPSILON), (180.0, 80.0 + _EPSILON))
        self._major_step = (90.0, 360.0)
        self._minor_step = (10.0, 10.0)
        self._precision = 2.5

    def _derive(self, **changes):
        clone = _copy.copy(self)
        for name, value in changes.items():
            setattr(clone, name, value)
        return clone

    @staticmethod
    def _ordered(extent):
        (x0, y0), (x1, y1) = extent
        x0, x1 = sorted((float(x0), float(x1)))
        y0, y1 = sorted((float(y0), float(y1)))
        return ((x0, y0), (x1, y1))

    def extent_major(self, value=_UNSET):
        if value is _UNSET:
            return [list(p) for p in self._major_extent]
        return self._derive(_major_extent=self._ordered(value))

    def extent_minor(self, value=_UNSET):
        if value is _UNSET:
            return [list(p) for p in self._minor_extent]
        return self._derive(_minor_extent=self._ordered(value))

    def extent(self, value=_UNSET):
        if value is _UNSET:
            return self.extent_minor()
        return self.extent_major(value).extent_minor(value)

    def step_major(self, value=_UNSET):
        if value is _UNSET:
            return list(self._major_step)
        return self._derive(_major_step=(float(value[0]), float(value[1])))

    def step_minor(self, value=_UNSET):
        if value is _UNSET:
            return list(self._minor_step)
        return self._derive(_minor_step=(float(value[0]), float(value[1])))

    def step(self, value=_UNSET):
        if value is _UNSET:
            return self.step_minor()
        return self.step_major(value).step_minor(value)

    def precision(self, value=_UNSET):
        if value is _UNSET:
            return self._precision
        return self._derive(_precision=float(value))

    @staticmethod
    def _meridian(x, y0, y1):
        return [[x, y] for y in array.range_(y0, y1 - _EPSILON, 90.0) + [y1]]

    def _parallel(self, y, x0, x1):
        return [[x, y] for x in array.range_(x0, x1 - _EPSILON, self._precision) + [x1]]

    def _lines(self):
        (X0, Y0), (X1, Y1) = self._major_extent
        (x0, y0), (x1, y1) = self._minor_extent
        DX, DY = self._major_step
        dx, dy = self._minor_step
        lines = [self._meridian(x, Y0, Y1) for x in array.range_(math.ceil(X0 / DX) * DX, X1, DX)]
        lines += [self._parallel(y, X0, X1) for y in array.range_(math.ceil(Y0 / DY) * DY, Y1, DY)]
        lines += [
            self._meridian(x, y0, y1)
            for x in array.range_(math.ceil(x0 / dx) * dx, x1, dx)
            if abs(math.fmod(x, DX)) > _EPSILON
        ]
        lines += [
            self._parallel(y, x0, x1)
            for y in array.range_(math.ceil(y0 / dy) * dy, y1, dy)
            if abs(math.fmod(y, DY)) > _EPSILON
        ]
        return lines

    def __call__(self):
        return {"type": "MultiLineString", "coordinates": self._lines()}

    def lines(self):
        return [{"type": "LineString", "coordinates": line} for line in self._lines()]

    def outline(self):
        (X0, Y0), (X1, Y1) = self._major_extent
        ring = (
            self._meridian(X0, Y0, Y1)
            + self._parallel(Y1, X0, X1)[1:]
            + self._meridian(X1, Y0, Y1)[::-1][1:]
            + self._parallel(Y0, X0, X1)[::-1][1:]
        )
        return {"type": "Polygon", "coordinates": [ring]}


def graticule():
    return Graticule()


def graticule10():
    return Graticule()()


# ----------------------------------------------------------------------
# planar clipping of projected geometry
def _clip_segment(x0, y0, x1, y1, extent):
    """Liang-Barsky; returns the visible part of the segment or None."""
    (ex0, ey0), (ex1, ey1) = extent
    t0, t1 = 0.0, 1.0
    dx, dy = x1 - x0, y1 - y0
    for p, q in ((-dx, x0 - ex0), (dx, ex1 - x0), (-dy, y0 - ey0), (dy, ey1 - y0)):
        if p == 0:
            if q < 0:
                return None
            continue
        r = q / p
        if p < 0:
            if r > t1:
                return None
            t0 = max(t0, r)
        else:
            if r < t0:
                return None
            t1 = min(t1, r)
    return (x0 + t0 * dx, y0 + t0 * dy, x0 + t1 * dx, y0 + t1 * dy)


def _clip_polyline(points, extent):
    runs = []
    current = []
    for (x0, y0), (x1, y1) in zip(points, points[1:]):
        seg = _clip_segment(x0, y0, x1, y1, extent)
        if seg is None:
            if len(current) > 1:
                runs.append(current)
            current = []
            continue
        a, b = (seg[0], seg[1]), (seg[2], seg[3])
        if not current or current[-1] != a:
            if len(current) > 1:
                runs.append(current)
            current = [a]
        current.append(b)
    if len(current) > 1:
        runs.append(current)
    if len(points) == 1:
        (ex0, ey0), (ex1, ey1) = extent
        x, y = points[0]
        if ex0 <= x <= ex1 and ey0 <= y <= ey1:
            runs.append([points[0]])
    return runs


def _clip_ring(points, extent):
    """Sutherland-Hodgman against the four extent edges."""
    (ex0, ey0), (ex1, ey1) = extent
    edges = (
        (lambda p: p[0] >= ex0, lambda a, b: (ex0, a[1] + (b[1] - a[1]) * (ex0 - a[0]) / (b[0] - a[0]))),
        (lambda p: p[0] <= ex1, lambda a, b: (ex1, a[1] + (b[1] - a[1]) * (ex1 - a[0]) / (b[0] - a[0]))),
        (lambda p: p[1] >= ey0, lambda a, b: (a[0] + (b[0] - a[0]) * (ey0 - a[1]) / (b[1] - a[1]), ey0)),
        (lambda p: p[1] <= ey1, lambda a, b: (a[0] + (b[0] - a[0]) * (ey1 - a[1]) / (b[1] - a[1]), ey1)),
    )
    out = list(points)
    for inside, intersect in edges:
        if not out:
            break
        src, out = out, []
        prev = src[-1]
        for cur in src:
            if inside(cur):
                if not inside(prev):
                    out.append(intersect(prev, cur))
                out.append(cur)
            elif inside(prev):
                out.append(intersect(prev, cur))
            prev = cur
    return out


class GeoPath:
    """Render GeoJSON-like geometry through a projection into SVG path data.

    Lines break where consecutive rotated longitudes jump across the
    antimeridian or leave the projection's clip angle; projected output is
    then clipped to the projection's clip extent.
    """

    def __init__(self, projection=None, digits=None, point_radius=4.5):
        self.projection = projection
        self.digits = digits
        self.point_radius = point_radius

    def _point(self, lon, lat):
        if self.projection is None:
            return float(lon), float(lat), lon * _RADIANS, lat * _RADIANS, True
        x, y, lam, phi = self.projection._project_radians(lon * _RADIANS, lat * _RADIANS)
        visible = self.projection._visible(lam, phi) and math.isfinite(x) and math.isfinite(y)
        return x, y, lam, phi, visible

    def _runs(self, coords):
        """Split a coordinate sequence into projected runs of visible, continuous points."""
        runs = []
        current = []
        prev_lam = None
        for lon, lat in ((c[0], c[1]) for c in coords):
            x, y, lam, _, visible = self._point(lon, lat)
            if not visible:
                if current:
                    runs.append(current)
                current = []
                prev_lam = None
                continue
            if prev_lam is not None and abs(lam - prev_lam) > _PI:
                runs.append(current)
                current = []
            current.append((x, y))
            prev_lam = lam
        if current:
            runs.append(current)
        return runs

    def _extent(self):
        if self.projection is None:
            return None
        return self.projection._clip_extent

    def _sphere(self):
        if self.projection is not None and self.projection._clip_angle is not None:
            lam, phi, _ = self.projection._rotate
            radius = min(self.projection._clip_angle, 90.0 if self.projection._clip_angle <= 90 + _EPSILON else 180.0)
            circle = geo_circle([-lam, -phi], radius - _EPSILON, 2.0)
            return circle["coordinates"]
        return Graticule().outline()["coordinates"]

    def _projected(self, obj):
        """Yield ``(kind, runs)`` with kind one of point/line/ring."""
        extent = self._extent()
        for geometry in _geometries(obj):
            if geometry["type"] == "Sphere":
                polygons = [self._sphere()]
                points, lines = [], []
            else:
                points, lines, polygons = _parts(geometry)
            for lon, lat in points:
                x, y, _, _, visible = self._point(lon, lat)
                if visible and (extent is None or (extent[0][0] <= x <= extent[1][0]
                                                   and extent[0][1] <= y <= extent[1][1])):
                    yield "point", [[(x, y)]]
            for line in lines:
                runs = self._runs(line)
                if extent is not None:
                    runs = [r for run in runs for r in _clip_polyline(run, extent)]
                yield "line", runs
            for polygon in polygons:
                for ring in polygon:
                    runs = self._runs(_open_ring(ring))
                    if extent is not None:
                        runs = [_clip_ring(run, extent) for run in runs]
                    yield "ring", [run for run in runs if run]

    def __call__(self, obj, context=None):
        if context is not None:
            buffer = None
        else:
            buffer = Path() if self.digits is None else Path(self.digits)
        ctx = context if context is not None else buffer
        r = self.point_radius
        for kind, runs in self._projected(obj):
            for run in runs:
                if kind == "point":
                    x, y = run[0]
                    ctx.move_to(x + r, y)
                    ctx.arc(x, y, r, 0, _TAU)
                    continue
                ctx.move_to(*run[0])
                for x, y in run[1:]:
                    ctx.line_to(x, y)
                if kind == "ring":
                    ctx.close_path()
        if buffer is None:
            return None
        return buffer.to_svg() or None

    def bounds(self, obj):
        xs, ys = [], []
        for _, runs in self._projected(obj):
            for run in runs:
                for x, y in run:
                    xs.append(x)
                    ys.append(y)
        if not xs:
            return [[math.inf, math.inf], [-math.inf, -math.inf]]
        return [[min(xs), min(ys)], [max(xs), max(ys)]]

    def centroid(self, obj):
        """Planar centroid: area-weighted for rings, length-weighted for lines, else mean of points."""
        area = cx = cy = 0.0
        length = lx = ly = 0.0
        count = px = py = 0.0
        for kind, runs in self._projected(obj):
            for run in runs:
                if kind == "point":
                    count += 1
                    px += run[0][0]
                    py += run[0][1]
                elif kind == "line":
                    for (x0, y0), (x1, y1) in zip(run, run[1:]):
                        d = math.hypot(x1 - x0, y1 - y0)
                        length += d
                        lx += d * (x0 + x1) / 2
                        ly += d * (y0 + y1) / 2
                else:
                    for (x0, y0), (x1, y1) in zip(run, run[1:] + run[:1]):
                        z = x0 * y1 - x1 * y0
                        area += z
                        cx += (x0 + x1) * z
                        cy += (y0 + y1) * z
        if area:
            return [cx / (3 * area), cy / (3 * area)]
        if length:
            return [lx / length, ly / length]
        if count:
            return [px / count, py / count]
        return [math.nan, math.nan]

    def area(self, obj):
        """Planar area of the projected polygons (holes subtract)."""
        total = 0.0
        for kind, runs in self._projected(obj):
            if kind != "ring":
                continue
            for run in runs:
                total += sum(x0 * y1 - x1 * y0 for (x0, y0), (x1, y1) in zip(run, run[1:] + run[:1])) / 2
        return abs(total)

    def measure(self, obj):
        """Planar length of projected lines and ring perimeters."""
        total = 0.0
        for kind, runs in self._projected(obj):
            for run in runs:
                closing = run[:1] if kind == "ring" else []
                seq = run + closing
                total += sum(math.hypot(x1 - x0, y1 - y0) for (x0, y0), (x1, y1) in zip(seq, seq[1:]))
        return total


def geo_path(projection=None, digits=None, point_radius=4.5):
    return GeoPath(projection, digits, point_radius)
