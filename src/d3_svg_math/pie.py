"""Arc (annular sector) and pie layout generators."""

import math
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any

from .array import descending
from .errors import ValidationError
from .shape import Generator, _UNSET, _evaluate, field

_EPSILON = 1e-12
_PI = math.pi
_HALF_PI = _PI / 2
_TAU = 2 * _PI


def _acos(x):
    return 0.0 if x > 1 else _PI if x < -1 else math.acos(x)


def _asin(x):
    return _HALF_PI if x >= 1 else -_HALF_PI if x <= -1 else math.asin(x)


def _intersect(x0, y0, x1, y1, x2, y2, x3, y3):
    x10, y10 = x1 - x0, y1 - y0
    x32, y32 = x3 - x2, y3 - y2
    t = y32 * x10 - x32 * y10
    if t * t < _EPSILON:
        return None
    t = (x32 * (y0 - y2) - y32 * (x0 - x2)) / t
    return (x0 + t * x10, y0 + t * y10)


def _corner_tangents(x0, y0, x1, y1, r1, rc, cw):
    """Centre and tangent offsets of a rounded corner between two arc edges."""
    x01, y01 = x0 - x1, y0 - y1
    lo = (rc if cw else -rc) / math.sqrt(x01 * x01 + y01 * y01)
    ox, oy = lo * y01, -lo * x01
    x11, y11 = x0 + ox, y0 + oy
    x10, y10 = x1 + ox, y1 + oy
    x00, y00 = (x11 + x10) / 2, (y11 + y10) / 2
    dx, dy = x10 - x11, y10 - y11
    d2 = dx * dx + dy * dy
    r = r1 - rc
    big_d = x11 * y10 - x10 * y11
    d = (-1 if dy < 0 else 1) * math.sqrt(max(0.0, r * r * d2 - big_d * big_d))
    cx0 = (big_d * dy - dx * d) / d2
    cy0 = (-big_d * dx - dy * d) / d2
    cx1 = (big_d * dy + dx * d) / d2
    cy1 = (-big_d * dx + dy * d) / d2
    dx0, dy0 = cx0 - x00, cy0 - y00
    dx1, dy1 = cx1 - x00, cy1 - y00
    if dx0 * dx0 + dy0 * dy0 > dx1 * dx1 + dy1 * dy1:
        cx0, cy0 = cx1, cy1
    return {
        "cx": cx0,
        "cy": cy0,
        "x01": -ox,
        "y01": -oy,
        "x11": cx0 * (r1 / r - 1),
        "y11": cy0 * (r1 / r - 1),
    }


def _default(name):
    return lambda d, i: field(d, name)


class ArcGenerator(Generator):
    """Circular or annular sector, optionally padded and with rounded corners.

    Angles are in radians, clockwise from twelve o'clock.
    """

    def __init__(self, inner_radius=None, outer_radius=None, corner_radius=0.0,
                 pad_radius=None, start_angle=None, end_angle=None, pad_angle=None,
                 context=None):
        self._inner_radius = _default("inner_radius") if inner_radius is None else inner_radius
        self._outer_radius = _default("outer_radius") if outer_radius is None else outer_radius
        self._corner_radius = corner_radius
        self._pad_radius = pad_radius
        self._start_angle = _default("start_angle") if start_angle is None else start_angle
        self._end_angle = _default("end_angle") if end_angle is None else end_angle
        self._pad_angle = (lambda d, i: field(d, "pad_angle", 0.0)) if pad_angle is None else pad_angle
        self._context = context

    def inner_radius(self, value=_UNSET):
        return self._option("inner_radius", value)

    def outer_radius(self, value=_UNSET):
        return self._option("outer_radius", value)

    def corner_radius(self, value=_UNSET):
        return self._option("corner_radius", value)

    def pad_radius(self, value=_UNSET):
        return self._option("pad_radius", value)

    def start_angle(self, value=_UNSET):
        return self._option("start_angle", value)

    def end_angle(self, value=_UNSET):
        return self._option("end_angle", value)

    def pad_angle(self, value=_UNSET):
        return self._option("pad_angle", value)

    def centroid(self, d=None, i=0):
        """Midpoint of the centre line of the arc."""
        r = (float(_evaluate(self._inner_radius, d, i)) + float(_evaluate(self._outer_radius, d, i))) / 2
        a = (float(_evaluate(self._start_angle, d, i)) + float(_evaluate(self._end_angle, d, i))) / 2 - _PI / 2
        return [math.cos(a) * r, math.sin(a) * r]

    def __call__(self, d=None, i=0):
        ctx, buffer = self._output()
        r0 = float(_evaluate(self._inner_radius, d, i))
        r1 = float(_evaluate(self._outer_radius, d, i))
        if r0 != r0 or r1 != r1:
            raise ValidationError("arc radius must be a number")
        a0 = float(_evaluate(self._start_angle, d, i)) - _HALF_PI
        a1 = float(_evaluate(self._end_angle, d, i)) - _HALF_PI
        da = abs(a1 - a0)
        cw = a1 > a0

        if r1 < r0:
            r0, r1 = r1, r0

        if not r1 > _EPSILON:
            ctx.move_to(0, 0)
        elif da > _TAU - _EPSILON:
            ctx.move_to(r1 * math.cos(a0), r1 * math.sin(a0))
            ctx.arc(0, 0, r1, a0, a1, not cw)
            if r0 > _EPSILON:
                ctx.move_to(r0 * math.cos(a1), r0 * math.sin(a1))
                ctx.arc(0, 0, r0, a1, a0, cw)
        else:
            self._sector(ctx, d, i, r0, r1, a0, a1, da, cw)

        ctx.close_path()
        return self._result(buffer)

    def _sector(self, ctx, d, i, r0, r1, a0, a1, da, cw):
        a01 = a00 = a0
        a11 = a10 = a1
        da0 = da1 = da
        ap = float(_evaluate(self._pad_angle, d, i) or 0.0) / 2
        rp = 0.0
        if ap > _EPSILON:
            if self._pad_radius is not None:
                rp = float(_evaluate(self._pad_radius, d, i))
            else:
                rp = math.sqrt(r0 * r0 + r1 * r1)
        rc = min(abs(r1 - r0) / 2, float(_evaluate(self._corner_radius, d, i)))
        rc0 = rc1 = rc

        if rp > _EPSILON:
            p0 = _asin(rp / r0 * math.sin(ap)) if r0 else _HALF_PI
            p1 = _asin(rp / r1 * math.sin(ap))
            da0 -= p0 * 2
            if da0 > _EPSILON:
                p0 *= 1 if cw else -1
                a00 += p0
                a10 -= p0
            else:
                da0 = 0.0
                a00 = a10 = (a0 + a1) / 2
            da1 -= p1 * 2
            if da1 > _EPSILON:
                p1 *= 1 if cw else -1
                a01 += p1
                a11 -= p1
            else:
                da1 = 0.0
                a01 = a11 = (a0 + a1) / 2

        x01, y01 = r1 * math.cos(a01), r1 * math.sin(a01)
        x10, y10 = r0 * math.cos(a10), r0 * math.sin(a10)
        x11, y11 = r1 * math.cos(a11), r1 * math.sin(a11)
        x00, y00 = r0 * math.cos(a00), r0 * math.sin(a00)

        if rc > _EPSILON and da < _PI:
            oc = _intersect(x01, y01, x00, y00, x11, y11, x10, y10)
            if oc is not None:
                ax, ay = x01 - oc[0], y01 - oc[1]
                bx, by = x11 - oc[0], y11 - oc[1]
                kc = 1 / math.sin(
                    _acos((ax * bx + ay * by) / (math.sqrt(ax * ax + ay * ay) * math.sqrt(bx * bx + by * by))) / 2
                )
                lc = math.sqrt(oc[0] * oc[0] + oc[1] * oc[1])
                rc0 = min(rc, (r0 - lc) / (kc - 1))
                rc1 = min(rc, (r1 - lc) / (kc + 1))
            else:
                rc0 = rc1 = 0.0

        # outer ring
        if not da1 > _EPSILON:
            ctx.move_to(x01, y01)
        elif rc1 > _EPSILON:
            t0 = _corner_tangents(x00, y00, x01, y01, r1, rc1, cw)
            t1 = _corner_tangents(x11, y11, x10, y10, r1, rc1, cw)
            ctx.move_to(t0["cx"] + t0["x01"], t0["cy"] + t0["y01"])
            if rc1 < rc:
                ctx.arc(t0["cx"], t0["cy"], rc1, math.atan2(t0["y01"], t0["x01"]),
                        math.atan2(t1["y01"], t1["x01"]), not cw)
            else:
                ctx.arc(t0["cx"], t0["cy"], rc1, math.atan2(t0["y01"], t0["x01"]),
                        math.atan2(t0["y11"], t0["x11"]), not cw)
                ctx.arc(0, 0, r1, math.atan2(t0["cy"] + t0["y11"], t0["cx"] + t0["x11"]),
                        math.atan2(t1["cy"] + t1["y11"], t1["cx"] + t1["x11"]), not cw)
                ctx.arc(t1["cx"], t1["cy"], rc1, math.atan2(t1["y11"], t1["x11"]),
                        math.atan2(t1["y01"], t1["x01"]), not cw)
        else:
            ctx.move_to(x01, y01)
            ctx.arc(0, 0, r1, a01, a11, not cw)

        # inner ring, or the centre point for a plain sector
        if not r0 > _EPSILON or not da0 > _EPSILON:
            ctx.line_to(x10, y10)
        elif rc0 > _EPSILON:
            t0 = _corner_tangents(x10, y10, x11, y11, r0, -rc0, cw)
            t1 = _corner_tangents(x01, y01, x00, y00, r0, -rc0, cw)
            ctx.line_to(t0["cx"] + t0["x01"], t0["cy"] + t0["y01"])
            if rc0 < rc:
                ctx.arc(t0["cx"], t0["cy"], rc0, math.atan2(t0["y01"], t0["x01"]),
                        math.atan2(t1["y01"], t1["x01"]), not cw)
            else:
                ctx.arc(t0["cx"], t0["cy"], rc0, math.atan2(t0["y01"], t0["x01"]),
                        math.atan2(t0["y11"], t0["x11"]), not cw)
                ctx.arc(0, 0, r0, math.atan2(t0["cy"] + t0["y11"], t0["cx"] + t0["x11"]),
                        math.atan2(t1["cy"] + t1["y11"], t1["cx"] + t1["x11"]), cw)
                ctx.arc(t1["cx"], t1["cy"], rc0, math.atan2(t1["y11"], t1["x11"]),
                        math.atan2(t1["y01"], t1["x01"]), not cw)
        else:
            ctx.arc(0, 0, r0, a10, a00, cw)


@dataclass
class PieArc:
    data: Any
    index: int
    value: float
    start_angle: float
    end_angle: float
    pad_angle: float


def _safe_cmp(compare):
    def cmp(a, b):
        r = compare(a, b)
        return 0 if r != r else r

    return cmp_to_key(cmp)


class PieGenerator(Generator):
    """Compute start/end angles of each datum for a pie or donut chart."""

    def __init__(self, value=None, sort_values=descending, sort=None, start_angle=0.0,
                 end_angle=_TAU, pad_angle=0.0):
        self._value = value if value is not None else (lambda d, i: d)
        self._sort_values = sort_values
        self._sort = sort
        self._start_angle = start_angle
        self._end_angle = end_angle
        self._pad_angle = pad_angle
        self._context = None

    def value(self, value=_UNSET):
        return self._option("value", value)

    def sort_values(self, value=_UNSET):
        clone = self._option("sort_values", value)
        if value is not _UNSET:
            clone._sort = None
        return clone

    def sort(self, value=_UNSET):
        clone = self._option("sort", value)
        if value is not _UNSET:
            clone._sort_values = None
        return clone

    def start_angle(self, value=_UNSET):
        return self._option("start_angle", value)

    def end_angle(self, value=_UNSET):
        return self._option("end_angle", value)

    def pad_angle(self, value=_UNSET):
        return self._option("pad_angle", value)

    def __call__(self, data):
        data = list(data)
        n = len(data)
        a0 = float(_evaluate(self._start_angle, data, 0))
        da = min(_TAU, max(-_TAU, float(_evaluate(self._end_angle, data, 0)) - a0))
        p = min(abs(da) / n, float(_evaluate(self._pad_angle, data, 0))) if n else 0.0
        pa = p * (-1 if da < 0 else 1)

        values = []
        total = 0.0
        for i, d in enumerate(data):
            v = float(self._value(d, i))
            values.append(v)
            if v > 0:
                total += v

        index = list(range(n))
        if self._sort_values is not None:
            key = _safe_cmp(self._sort_values)
            index.sort(key=lambda j: key(values[j]))
        elif self._sort is not None:
            key = _safe_cmp(self._sort)
            index.sort(key=lambda j: key(data[j]))

        arcs = [None] * n
        k = (da - n * pa) / total if total else 0.0
        for i, j in enumerate(index):
            v = values[j]
            a1 = a0 + (v * k if v > 0 else 0.0) + pa
            arcs[j] = PieArc(data[j], i, v, a0, a1, p)
            a0 = a1
        return arcs


def arc(inner_radius=None, outer_radius=None, corner_radius=0.0, start_angle=None,
        end_angle=None, pad_angle=None, pad_radius=None):
    return ArcGenerator(
        inner_radius=inner_radius,
        outer_radius=outer_radius,
        corner_radius=corner_radius,
        pad_radius=pad_radius,
        start_angle=start_angle,
        end_angle=end_angle,
        pad_angle=pad_angle,
    )


def pie(value=None, sort_values=descending, sort=None, start_angle=0.0, end_angle=_TAU,
        pad_angle=0.0):
    return PieGenerator(value, sort_values, sort, start_angle, end_angle, pad_angle)
