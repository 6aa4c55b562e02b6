"""SVG path recorder with a canvas-like drawing API."""

import math

from ._format import format_fixed, format_number
from .errors import ValidationError
from .settings import get_settings

_PI = math.pi
_TAU = 2 * _PI
_EPSILON = 1e-6
_TAU_EPSILON = _TAU - _EPSILON
_DEFAULT = object()


class Path:
    """Records drawing commands as ``(command, args)`` segments.

    ``str(path)`` serialises the segments to SVG path data. ``digits`` fixes
    the number of decimals; by default it comes from ``Settings.path_digits``
    (full precision when unset).
    """

    def __init__(self, digits=_DEFAULT):
        if digits is _DEFAULT:
            digits = get_settings().path_digits
        if digits is not None:
            digits = int(digits)
            if digits < 0:
                raise ValidationError(f"invalid digits: {digits}")
        self.digits = digits
        self.segments = []
        self._x0 = self._y0 = None
        self._x1 = self._y1 = None

    def _append(self, command, *args):
        self.segments.append((command, tuple(args)))

    @property
    def current_point(self):
        if self._x1 is None:
            return None
        return (self._x1, self._y1)

    def move_to(self, x, y):
        self._x0 = self._x1 = float(x)
        self._y0 = self._y1 = float(y)
        self._append("M", self._x1, self._y1)

    def close_path(self):
        if self._x1 is not None:
            self._x1, self._y1 = self._x0, self._y0
            self._append("Z")

    def line_to(self, x, y):
        self._x1, self._y1 = float(x), float(y)
        self._append("L", self._x1, self._y1)

    def quadratic_curve_to(self, x1, y1, x, y):
        self._x1, self._y1 = float(x), float(y)
        self._append("Q", float(x1), float(y1), self._x1, self._y1)

    def bezier_curve_to(self, x1, y1, x2, y2, x, y):
        self._x1, self._y1 = float(x), float(y)
        self._append("C", float(x1), float(y1), float(x2), float(y2), self._x1, self._y1)

    def arc_to(self, x1, y1, x2, y2, r):
        x1, y1, x2, y2, r = float(x1), float(y1), float(x2), float(y2), float(r)
        if r < 0:
            raise ValidationError(f"negative radius: {format_number(r)}")
        if self._x1 is None:
            self._x1, self._y1 = x1, y1
            self._append("M", x1, y1)
            return
        x0, y0 = self._x1, self._y1
        x21, y21 = x2 - x1, y2 - y1
        x01, y01 = x0 - x1, y0 - y1
        l01_2 = x01 * x01 + y01 * y01
        if not l01_2 > _EPSILON:
            return
        if not abs(y01 * x21 - y21 * x01) > _EPSILON or not r:
            self._x1, self._y1 = x1, y1
            self._append("L", x1, y1)
            return
        x20, y20 = x2 - x0, y2 - y0
        l21_2 = x21 * x21 + y21 * y21
        l20_2 = x20 * x20 + y20 * y20
        l21 = math.sqrt(l21_2)
        l01 = math.sqrt(l01_2)
        cos = max(-1.0, min(1.0, (l21_2 + l01_2 - l20_2) / (2 * l21 * l01)))
        l = r * math.tan((_PI - math.acos(cos)) / 2)
        t01 = l / l01
        t21 = l / l21
        if abs(t01 - 1) > _EPSILON:
            self._append("L", x1 + t01 * x01, y1 + t01 * y01)
        self._x1, self._y1 = x1 + t21 * x21, y1 + t21 * y21
        self._append("A", r, r, 0, 0, int(y01 * x20 > x01 * y20), self._x1, self._y1)

    def arc(self, x, y, r, a0, a1, ccw=False):
        x, y, r = float(x), float(y), float(r)
        ccw = bool(ccw)
        if r < 0:
            raise ValidationError(f"negative radius: {format_number(r)}")
        dx = r * math.cos(a0)
        dy = r * math.sin(a0)
        x0 = x + dx
        y0 = y + dy
        cw = 1 ^ int(ccw)
        da = a0 - a1 if ccw else a1 - a0

        if self._x1 is None:
            self._append("M", x0, y0)
        elif abs(self._x1 - x0) > _EPSILON or abs(self._y1 - y0) > _EPSILON:
            self._append("L", x0, y0)
        if not r:
            return
        if da < 0:
            da = math.fmod(da, _TAU) + _TAU
        if da > _TAU_EPSILON:
            self._append("A", r, r, 0, 1, cw, x - dx, y - dy)
            self._x1, self._y1 = x0, y0
            self._append("A", r, r, 0, 1, cw, x0, y0)
        elif da > _EPSILON:
            self._x1 = x + r * math.cos(a1)
            self._y1 = y + r * math.sin(a1)
            self._append("A", r, r, 0, int(da >= _PI), cw, self._x1, self._y1)

    def rect(self, x, y, w, h):
        self._x0 = self._x1 = float(x)
        self._y0 = self._y1 = float(y)
        w, h = float(w), float(h)
        self._append("M", self._x1, self._y1)
        self._append("h", w)
        self._append("v", h)
        self._append("h", -w)
        self._append("Z")

    def _number(self, value):
        if self.digits is None:
            return format_number(value)
        return format_fixed(value, self.digits)

    def to_svg(self):
        parts = []
        for command, args in self.segments:
            parts.append(command + ",".join(self._number(a) for a in args))
        return "".join(parts)

    def __str__(self):
        return self.to_svg()

    def __bool__(self):
        return bool(self.segments)

    def __repr__(self):
        return f"Path({self.to_svg()!r})"


def path(digits=_DEFAULT):
    return Path(digits)
