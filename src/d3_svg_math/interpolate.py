"""Interpolators: callables mapping a parameter t to a blended value.

Every factory validates its endpoints eagerly and returns a plain function (or
a small callable object for the zoom interpolator) that holds no mutable state.
"""

import math
import re

from .color import Color, Cubehelix, Hcl, Hsl, Lab, Rgb, color, cubehelix, hcl, hsl, lab, rgb
from ._format import format_number

_DEGREES = 180 / math.pi
_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.?\d+)(?:[eE][-+]?\d+)?")


def _js_round(x):
    return math.floor(x + 0.5)


def _isnan(v):
    return v != v


def _constant(value):
    return lambda t: value


# ----------------------------------------------------------------------
# channel helpers shared by the color spaces
def _linear(a, d):
    return lambda t: a + t * d


def _exponential(a, b, y):
    a = a ** y
    b = b ** y - a
    y = 1 / y
    return lambda t: (a + t * b) ** y


def _nogamma(a, b):
    d = b - a
    if d and not _isnan(d):
        return _linear(a, d)
    return _constant(b if _isnan(a) else a)


def _hue(a, b):
    d = b - a
    if d and not _isnan(d):
        if d > 180 or d < -180:
            d -= 360 * _js_round(d / 360)
        return _linear(a, d)
    return _constant(b if _isnan(a) else a)


def _gamma(y):
    y = float(y)
    if y == 1:
        return _nogamma

    def channel(a, b):
        if b - a and not _isnan(b - a):
            return _exponential(a, b, y)
        return _constant(b if _isnan(a) else a)

    return channel


# ----------------------------------------------------------------------
# numbers
def interpolate_number(a, b):
    a, b = float(a), float(b)
    return lambda t: a * (1 - t) + b * t


def interpolate_round(a, b):
    a, b = float(a), float(b)
    return lambda t: _js_round(a * (1 - t) + b * t)


def interpolate_discrete(values):
    values = list(values)
    n = len(values)
    return lambda t: values[max(0, min(n - 1, math.floor(t * n)))]


def interpolate_hue(a, b):
    i = _hue(float(a), float(b))

    def hue(t):
        x = i(t)
        return x - 360 * math.floor(x / 360)

    return hue


def _basis(t1, v0, v1, v2, v3):
    t2 = t1 * t1
    t3 = t2 * t1
    return (
        (1 - 3 * t1 + 3 * t2 - t3) * v0
        + (4 - 6 * t2 + 3 * t3) * v1
        + (1 + 3 * t1 + 3 * t2 - 3 * t3) * v2
        + t3 * v3
    ) / 6


def interpolate_basis(values):
    """Uniform B-spline through ``values``, passing through the first and last."""
    values = [float(v) for v in values]
    n = len(values) - 1

    def basis(t):
        if t <= 0:
            t = 0.0
            i = 0
        elif t >= 1:
            t = 1.0
            i = n - 1
        else:
            i = math.floor(t * n)
        v1 = values[i]
        v2 = values[i + 1]
        v0 = values[i - 1] if i > 0 else 2 * v1 - v2
        v3 = values[i + 2] if i < n - 1 else 2 * v2 - v1
        return _basis((t - i / n) * n, v0, v1, v2, v3)

    return basis


def interpolate_basis_closed(values):
    values = [float(v) for v in values]
    n = len(values)

    def basis(t):
        t = math.fmod(t, 1)
        if t < 0:
            t += 1
        i = math.floor(t * n)
        v0 = values[(i + n - 1) % n]
        v1 = values[i % n]
        v2 = values[(i + 1) % n]
        v3 = values[(i + 2) % n]
        return _basis((t - i / n) * n, v0, v1, v2, v3)

    return basis


# ----------------------------------------------------------------------
# colors
def interpolate_rgb(a, b, gamma=1.0):
    """RGB interpolation returning ``rgb(...)`` strings; ``gamma`` != 1 blends in gamma space."""
    channel = _gamma(gamma)
    start = rgb(a)
    end = rgb(b)
    r = channel(start.r, end.r)
    g = channel(start.g, end.g)
    bl = channel(start.b, end.b)
    opacity = _nogamma(start.opacity, end.opacity)
    return lambda t: str(Rgb(r(t), g(t), bl(t), opacity(t)))


def _rgb_spline(spline):
    def factory(colors):
        colors = [rgb(c) for c in colors]
        r = spline([c.r if not _isnan(c.r) else 0.0 for c in colors])
        g = spline([c.g if not _isnan(c.g) else 0.0 for c in colors])
        b = spline([c.b if not _isnan(c.b) else 0.0 for c in colors])
        return lambda t: str(Rgb(r(t), g(t), b(t), 1))

    return factory


interpolate_rgb_basis = _rgb_spline(interpolate_basis)
interpolate_rgb_basis_closed = _rgb_spline(interpolate_basis_closed)


def _hsl_factory(hue):
    def factory(a, b):
        start = hsl(a)
        end = hsl(b)
        h = hue(start.h, end.h)
        s = _nogamma(start.s, end.s)
        l = _nogamma(start.l, end.l)
        opacity = _nogamma(start.opacity, end.opacity)
        return lambda t: str(Hsl(h(t), s(t), l(t), opacity(t)))

    return factory


interpolate_hsl = _hsl_factory(_hue)
interpolate_hsl_long = _hsl_factory(_nogamma)


def interpolate_lab(a, b):
    start = lab(a)
    end = lab(b)
    l = _nogamma(start.l, end.l)
    aa = _nogamma(start.a, end.a)
    bb = _nogamma(start.b, end.b)
    opacity = _nogamma(start.opacity, end.opacity)
    return lambda t: str(Lab(l(t), aa(t), bb(t), opacity(t)))


def _hcl_factory(hue):
    def factory(a, b):
        start = hcl(a)
        end = hcl(b)
        h = hue(start.h, end.h)
        c = _nogamma(start.c, end.c)
        l = _nogamma(start.l, end.l)
        opacity = _nogamma(start.opacity, end.opacity)
        return lambda t: str(Hcl(h(t), c(t), l(t), opacity(t)))

    return factory


interpolate_hcl = _hcl_factory(_hue)
interpolate_hcl_long = _hcl_factory(_nogamma)


def _cubehelix_factory(hue):
    def factory(a, b, gamma=1.0):
        y = float(gamma)
        start = cubehelix(a)
        end = cubehelix(b)
        h = hue(start.h, end.h)
        s = _nogamma(start.s, end.s)
        l = _nogamma(start.l, end.l)
        opacity = _nogamma(start.opacity, end.opacity)
        return lambda t: str(Cubehelix(h(t), s(t), l(t ** y), opacity(t)))

    return factory


interpolate_cubehelix = _cubehelix_factory(_hue)
interpolate_cubehelix_long = _cubehelix_factory(_nogamma)


# ----------------------------------------------------------------------
# strings
def interpolate_string(a, b):
    """Interpolate numbers embedded in ``b``'s template; literal text always comes from ``b``."""
    a, b = str(a), str(b)
    s = []
    q = []
    bi = 0

    def push_literal(text):
        if s and s[-1] is not None:
            s[-1] += text
        else:
            s.append(text)

    for am in _NUMBER_RE.finditer(a):
        bm = _NUMBER_RE.search(b, bi)
        if bm is None:
            break
        if bm.start() > bi:
            push_literal(b[bi:bm.start()])
        if am.group(0) == bm.group(0):
            push_literal(bm.group(0))
        else:
            s.append(None)
            q.append((len(s) - 1, interpolate_number(am.group(0), bm.group(0))))
        bi = bm.end()
    if bi < len(b):
        push_literal(b[bi:])

    if len(s) < 2:
        if q:
            only = q[0][1]
            return lambda t: format_number(only(t))
        return _constant(b)

    def string(t):
        out = list(s)
        for idx, fn in q:
            out[idx] = format_number(fn(t))
        return "".join(out)

    return string


# ----------------------------------------------------------------------
# containers and dispatch
def interpolate_array(a, b):
    b = list(b)
    a = list(a or [])
    na = min(len(a), len(b))
    parts = [interpolate(a[i], b[i]) for i in range(na)]

    def array(t):
        out = list(b)
        for i in range(na):
            out[i] = parts[i](t)
        return out

    return array


def interpolate_object(a, b):
    a = dict(a or {})
    parts = {}
    fixed = {}
    for key, value in b.items():
        if key in a:
            parts[key] = interpolate(a[key], value)
        else:
            fixed[key] = value

    def obj(t):
        out = dict(fixed)
        for key, fn in parts.items():
            out[key] = fn(t)
        return out

    return obj


def interpolate(a, b):
    """Pick an interpolator from the type of ``b``."""
    if b is None or isinstance(b, bool):
        return _constant(b)
    if isinstance(b, (int, float)):
        return interpolate_number(a, b)
    if isinstance(b, Color):
        return interpolate_rgb(a, b)
    if isinstance(b, str):
        if color(b) is not None:
            return interpolate_rgb(a, b)
        return interpolate_string(a, b)
    if isinstance(b, dict):
        return interpolate_object(a, b)
    if isinstance(b, (list, tuple)):
        return interpolate_array(a, b)
    return interpolate_number(a, b)


def piecewise(interpolator, values=None):
    """Chain ``interpolator`` over consecutive pairs of ``values`` across t in [0, 1]."""
    if values is None:
        values, interpolator = interpolator, interpolate
    values = list(values)
    n = len(values) - 1
    parts = [interpolator(values[i], values[i + 1]) for i in range(max(n, 0))]

    def chained(t):
        t *= n
        i = max(0, min(n - 1, math.floor(t)))
        return parts[i](t - i)

    return chained


def quantize(interpolator, n):
    if n < 2:
        return [interpolator(0.0)] if n == 1 else []
    return [interpolator(i / (n - 1)) for i in range(n)]


# ----------------------------------------------------------------------
# 2D affine transforms
IDENTITY_TRANSFORM = {
    "translate_x": 0.0,
    "translate_y": 0.0,
    "rotate": 0.0,
    "skew_x": 0.0,
    "scale_x": 1.0,
    "scale_y": 1.0,
}

_TRANSFORM_RE = re.compile(r"(matrix|translate|scale|rotate|skewX|skewY)\s*\(([^)]*)\)")


def decompose(a, b, c, d, e, f):
    """Split an affine matrix into translate/rotate/skewX/scale components (degrees)."""
    scale_x = math.sqrt(a * a + b * b)
    if scale_x:
        a /= scale_x
        b /= scale_x
    skew_x = a * c + b * d
    if skew_x:
        c -= a * skew_x
        d -= b * skew_x
    scale_y = math.sqrt(c * c + d * d)
    if scale_y:
        c /= scale_y
        d /= scale_y
        skew_x /= scale_y
    if a * d < b * c:
        a, b, skew_x, scale_x = -a, -b, -skew_x, -scale_x
    return {
        "translate_x": e,
        "translate_y": f,
        "rotate": math.atan2(b, a) * _DEGREES,
        "skew_x": math.atan(skew_x) * _DEGREES,
        "scale_x": scale_x,
        "scale_y": scale_y,
    }


def _multiply(m, n):
    a1, b1, c1, d1, e1, f1 = m
    a2, b2, c2, d2, e2, f2 = n
    return (
        a1 * a2 + c1 * b2,
        b1 * a2 + d1 * b2,
        a1 * c2 + c1 * d2,
        b1 * c2 + d1 * d2,
        a1 * e2 + c1 * f2 + e1,
        b1 * e2 + d1 * f2 + f1,
    )


def parse_svg_transform(text):
    """Consolidate an SVG transform list into a single decomposed transform."""
    if text is None:
        return dict(IDENTITY_TRANSFORM)
    matrix = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)
    for name, args in _TRANSFORM_RE.findall(str(text)):
        v = [float(x) for x in re.split(r"[\s,]+", args.strip()) if x]
        if name == "matrix" and len(v) == 6:
            step = tuple(v)
        elif name == "translate" and v:
            step = (1.0, 0.0, 0.0, 1.0, v[0], v[1] if len(v) > 1 else 0.0)
        elif name == "scale" and v:
            step = (v[0], 0.0, 0.0, v[1] if len(v) > 1 else v[0], 0.0, 0.0)
        elif name == "rotate" and v:
            r = v[0] / _DEGREES
            cos, sin = math.cos(r), math.sin(r)
            step = (cos, sin, -sin, cos, 0.0, 0.0)
            if len(v) == 3:
                cx, cy = v[1], v[2]
                step = _multiply(
                    _multiply((1.0, 0.0, 0.0, 1.0, cx, cy), step),
                    (1.0, 0.0, 0.0, 1.0, -cx, -cy),
                )
        elif name == "skewX" and v:
            step = (1.0, 0.0, math.tan(v[0] / _DEGREES), 1.0, 0.0, 0.0)
        elif name == "skewY" and v:
            step = (1.0, math.tan(v[0] / _DEGREES), 0.0, 1.0, 0.0, 0.0)
        else:
            continue
        matrix = _multiply(matrix, step)
    return decompose(*matrix)


def _interpolate_transform(parse, px_comma, px_paren, deg_paren):
    def pop(s):
        return s.pop() + " " if s else ""

    def factory(a, b):
        a = parse(a)
        b = parse(b)
        s = []
        q = []

        xa, ya, xb, yb = a["translate_x"], a["translate_y"], b["translate_x"], b["translate_y"]
        if xa != xb or ya != yb:
            s.extend(["translate(", None, px_comma, None, px_paren])
            q.append((len(s) - 4, interpolate_number(xa, xb)))
            q.append((len(s) - 2, interpolate_number(ya, yb)))
        elif xb or yb:
            s.append(f"translate({format_number(xb)}{px_comma}{format_number(yb)}{px_paren}")

        ra, rb = a["rotate"], b["rotate"]
        if ra != rb:
            if ra - rb > 180:
                rb += 360
            elif rb - ra > 180:
                ra += 360
            s.extend([pop(s) + "rotate(", None, deg_paren])
            q.append((len(s) - 2, interpolate_number(ra, rb)))
        elif rb:
            s.append(pop(s) + f"rotate({format_number(rb)}{deg_paren}")

        ka, kb = a["skew_x"], b["skew_x"]
        if ka != kb:
            s.extend([pop(s) + "skewX(", None, deg_paren])
            q.append((len(s) - 2, interpolate_number(ka, kb)))
        elif kb:
            s.append(pop(s) + f"skewX({format_number(kb)}{deg_paren}")

        sxa, sya, sxb, syb = a["scale_x"], a["scale_y"], b["scale_x"], b["scale_y"]
        if sxa != sxb or sya != syb:
            s.extend([pop(s) + "scale(", None, ",", None, ")"])
            q.append((len(s) - 4, interpolate_number(sxa, sxb)))
            q.append((len(s) - 2, interpolate_number(sya, syb)))
        elif sxb != 1 or syb != 1:
            s.append(pop(s) + f"scale({format_number(sxb)},{format_number(syb)})")

        def transform(t):
            out = list(s)
            for idx, fn in q:
                out[idx] = format_number(fn(t))
            return "".join(out)

        return transform

    return factory


interpolate_transform_svg = _interpolate_transform(parse_svg_transform, ", ", ")", ")")
interpolate_transform_css = _interpolate_transform(parse_svg_transform, "px, ", "px)", "deg)")


# ----------------------------------------------------------------------
# smooth zooming (van Wijk and Nuij 2003)
_EPSILON2 = 1e-12


def _cosh(x):
    x = math.exp(x)
    return (x + 1 / x) / 2


def _sinh(x):
    x = math.exp(x)
    return (x - 1 / x) / 2


def _tanh(x):
    x = math.exp(2 * x)
    return (x - 1) / (x + 1)


class ZoomInterpolator:
    """Pan-and-zoom path between two views ``(cx, cy, width)``.

    ``duration`` is the recommended transition length in milliseconds,
    proportional to the length of the path through (x, y, w) space.
    """

    def __init__(self, p0, p1, rho=math.sqrt(2)):
        rho = max(1e-3, float(rho))
        self.rho = rho
        rho2 = rho * rho
        rho4 = rho2 * rho2
        ux0, uy0, w0 = (float(v) for v in p0)
        ux1, uy1, w1 = (float(v) for v in p1)
        dx = ux1 - ux0
        dy = uy1 - uy0
        d2 = dx * dx + dy * dy

        if d2 < _EPSILON2:
            s_total = math.log(w1 / w0) / rho

            def path(t):
                return [ux0 + t * dx, uy0 + t * dy, w0 * math.exp(rho * t * s_total)]

        else:
            d1 = math.sqrt(d2)
            b0 = (w1 * w1 - w0 * w0 + rho4 * d2) / (2 * w0 * rho2 * d1)
            b1 = (w1 * w1 - w0 * w0 - rho4 * d2) / (2 * w1 * rho2 * d1)
            r0 = math.log(math.sqrt(b0 * b0 + 1) - b0)
            r1 = math.log(math.sqrt(b1 * b1 + 1) - b1)
            s_total = (r1 - r0) / rho
            coshr0 = _cosh(r0)
            sinhr0 = _sinh(r0)

            def path(t):
                s = t * s_total
                u = w0 / (rho2 * d1) * (coshr0 * _tanh(rho * s + r0) - sinhr0)
                return [ux0 + u * dx, uy0 + u * dy, w0 * coshr0 / _cosh(rho * s + r0)]

        self._path = path
        self._p0 = (ux0, uy0, w0)
        self._p1 = (ux1, uy1, w1)
        self.duration = s_total * 1000 * rho / math.sqrt(2)

    def __call__(self, t):
        return self._path(t)

    def with_rho(self, rho):
        return ZoomInterpolator(self._p0, self._p1, rho)


def interpolate_zoom(p0, p1, rho=math.sqrt(2)):
    return ZoomInterpolator(p0, p1, rho)
