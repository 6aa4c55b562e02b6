"""Line, area and link generators.

Accessors are either constants or callables invoked as ``accessor(d, i)``.
Generators follow the same copy-on-configure convention as scales.
"""

import copy as _copy

from .curve import BumpX, BumpY, Linear, Radial
from .path import Path

_UNSET = object()


def _evaluate(accessor, d, i):
    return accessor(d, i) if callable(accessor) else accessor


def _point_x(d, i):
    return d[0]


def _point_y(d, i):
    return d[1]


def field(d, name, default=None):
    """Read ``name`` from a mapping or an attribute, whichever the datum provides."""
    if isinstance(d, dict):
        return d.get(name, default)
    return getattr(d, name, default)


class Generator:
    """Copy-on-configure option plumbing shared by every shape generator."""

    def _option(self, name, value):
        attr = "_" + name
        if value is _UNSET:
            return getattr(self, attr)
        clone = _copy.copy(self)
        setattr(clone, attr, value)
        return clone

    def context(self, value=_UNSET):
        """Draw into an existing context instead of returning path data."""
        return self._option("context", value)

    def _output(self):
        if self._context is not None:
            return self._context, None
        buffer = Path()
        return buffer, buffer

    @staticmethod
    def _result(buffer):
        if buffer is None:
            return None
        return buffer.to_svg() or None

    def _curve_output(self, ctx):
        return self._curve(ctx)


class LineGenerator(Generator):
    def __init__(self, x=_point_x, y=_point_y, defined=True, curve=Linear, context=None):
        self._x = x
        self._y = y
        self._defined = defined
        self._curve = curve
        self._context = context

    def x(self, value=_UNSET):
        return self._option("x", value)

    def y(self, value=_UNSET):
        return self._option("y", value)

    def defined(self, value=_UNSET):
        return self._option("defined", value)

    def curve(self, value=_UNSET):
        return self._option("curve", value)

    def __call__(self, data):
        data = list(data)
        n = len(data)
        ctx, buffer = self._output()
        output = self._curve_output(ctx)
        defined0 = False
        for i in range(n + 1):
            d = data[i] if i < n else None
            ok = i < n and bool(_evaluate(self._defined, d, i))
            if ok != defined0:
                defined0 = ok
                if defined0:
                    output.line_start()
                else:
                    output.line_end()
            if defined0:
                output.point(float(_evaluate(self._x, d, i)), float(_evaluate(self._y, d, i)))
        return self._result(buffer)


class AreaGenerator(Generator):
    """Region between a baseline (x0, y0) and a topline (x1, y1)."""

    def __init__(self, x0=_point_x, x1=None, y0=0.0, y1=_point_y, defined=True,
                 curve=Linear, context=None):
        self._x0 = x0
        self._x1 = x1
        self._y0 = y0
        self._y1 = y1
        self._defined = defined
        self._curve = curve
        self._context = context

    def x(self, value=_UNSET):
        if value is _UNSET:
            return self._x0
        clone = self._option("x0", value)
        clone._x1 = None
        return clone

    def y(self, value=_UNSET):
        if value is _UNSET:
            return self._y0
        clone = self._option("y0", value)
        clone._y1 = None
        return clone

    def x0(self, value=_UNSET):
        return self._option("x0", value)

    def x1(self, value=_UNSET):
        return self._option("x1", value)

    def y0(self, value=_UNSET):
        return self._option("y0", value)

    def y1(self, value=_UNSET):
        return self._option("y1", value)

    def defined(self, value=_UNSET):
        return self._option("defined", value)

    def curve(self, value=_UNSET):
        return self._option("curve", value)

    def line_x0(self):
        return LineGenerator(self._x0, self._y0, self._defined, self._curve, self._context)

    def line_y0(self):
        return self.line_x0()

    def line_x1(self):
        return LineGenerator(self._x1 or self._x0, self._y0, self._defined, self._curve, self._context)

    def line_y1(self):
        return LineGenerator(self._x0, self._y1 or self._y0, self._defined, self._curve, self._context)

    def __call__(self, data):
        data = list(data)
        n = len(data)
        ctx, buffer = self._output()
        output = self._curve_output(ctx)
        x0z = [0.0] * n
        y0z = [0.0] * n
        defined0 = False
        j = 0
        for i in range(n + 1):
            d = data[i] if i < n else None
            ok = i < n and bool(_evaluate(self._defined, d, i))
            if ok != defined0:
                defined0 = ok
                if defined0:
                    j = i
                    output.area_start()
                    output.line_start()
                else:
                    output.line_end()
                    output.line_start()
                    for k in range(i - 1, j - 1, -1):
                        output.point(x0z[k], y0z[k])
                    output.line_end()
                    output.area_end()
            if defined0:
                x0z[i] = float(_evaluate(self._x0, d, i))
                y0z[i] = float(_evaluate(self._y0, d, i))
                output.point(
                    float(_evaluate(self._x1, d, i)) if self._x1 is not None else x0z[i],
                    float(_evaluate(self._y1, d, i)) if self._y1 is not None else y0z[i],
                )
        return self._result(buffer)


class RadialLineGenerator(LineGenerator):
    """Line in polar coordinates: ``angle`` in radians clockwise from 12 o'clock, ``radius``."""

    def angle(self, value=_UNSET):
        return self.x(value)

    def radius(self, value=_UNSET):
        return self.y(value)

    def _curve_output(self, ctx):
        return Radial(ctx, self._curve)


class RadialAreaGenerator(AreaGenerator):
    """Area between ``inner_radius`` and ``outer_radius`` swept along ``angle``."""

    def angle(self, value=_UNSET):
        return self.x(value)

    def start_angle(self, value=_UNSET):
        return self.x0(value)

    def end_angle(self, value=_UNSET):
        return self.x1(value)

    def radius(self, value=_UNSET):
        return self.y(value)

    def inner_radius(self, value=_UNSET):
        return self.y0(value)

    def outer_radius(self, value=_UNSET):
        return self.y1(value)

    def _radial_line(self, angle, radius):
        return RadialLineGenerator(angle, radius, self._defined, self._curve, self._context)

    def line_start_angle(self):
        return self._radial_line(self._x0, self._y0)

    def line_inner_radius(self):
        return self.line_start_angle()

    def line_end_angle(self):
        return self._radial_line(self._x1 or self._x0, self._y0)

    def line_outer_radius(self):
        return self._radial_line(self._x0, self._y1 or self._y0)

    def _curve_output(self, ctx):
        return Radial(ctx, self._curve)


def _link_source(d, i):
    return field(d, "source")


def _link_target(d, i):
    return field(d, "target")


class LinkGenerator(Generator):
    """Smooth cubic link from ``source`` to ``target``."""

    def __init__(self, curve, source=_link_source, target=_link_target, x=_point_x,
                 y=_point_y, context=None):
        self._curve = curve
        self._source = source
        self._target = target
        self._x = x
        self._y = y
        self._context = context

    def source(self, value=_UNSET):
        return self._option("source", value)

    def target(self, value=_UNSET):
        return self._option("target", value)

    def x(self, value=_UNSET):
        return self._option("x", value)

    def y(self, value=_UNSET):
        return self._option("y", value)

    def __call__(self, d, i=0):
        ctx, buffer = self._output()
        output = self._curve_output(ctx)
        s = _evaluate(self._source, d, i)
        t = _evaluate(self._target, d, i)
        output.line_start()
        output.point(float(_evaluate(self._x, s, i)), float(_evaluate(self._y, s, i)))
        output.point(float(_evaluate(self._x, t, i)), float(_evaluate(self._y, t, i)))
        output.line_end()
        return self._result(buffer)


def line(x=_point_x, y=_point_y, curve=Linear, defined=True):
    return LineGenerator(x=x, y=y, curve=curve, defined=defined)


def area(x0=_point_x, y0=0.0, y1=_point_y, x1=None, curve=Linear, defined=True):
    return AreaGenerator(x0=x0, x1=x1, y0=y0, y1=y1, curve=curve, defined=defined)


def link_horizontal():
    return LinkGenerator(BumpX)


def link_vertical():
    return LinkGenerator(BumpY)


def line_radial(angle=_point_x, radius=_point_y, curve=Linear, defined=True):
    return RadialLineGenerator(x=angle, y=radius, curve=curve, defined=defined)


def area_radial(angle=_point_x, inner_radius=0.0, outer_radius=_point_y, end_angle=None, curve=Linear,
                defined=True):
    return RadialAreaGenerator(x0=angle, x1=end_angle, y0=inner_radius, y1=outer_radius, curve=curve,
                               defined=defined)
