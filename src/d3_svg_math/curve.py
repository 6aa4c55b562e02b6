"""Curve families.

A curve is constructed around a drawing context (normally a :class:`Path`)
and receives the stream ``line_start()``, ``point(x, y)``... ``line_end()``.
Area generators bracket the two boundary lines with ``area_start()`` and
``area_end()``. Each ``curve_*`` name is a factory taking the context;
parameterised families take keyword arguments, e.g.
``functools.partial(curve_cardinal, tension=0.5)``.
"""

import math

_EPSILON = 1e-12


def _on(flag):
    # numeric line flag: None and NaN count as off
    return flag is not None and flag == flag and flag != 0


def _flip(flag):
    return math.nan if flag is None else 1 - flag


def _closes(flag, point, n):
    return _on(flag) or (flag != 0 and point == n)


class Curve:
    def __init__(self, context):
        self._context = context
        self._line = None
        self._point = 0

    def area_start(self):
        self._line = 0

    def area_end(self):
        self._line = math.nan

    def line_start(self):
        self._point = 0

    def line_end(self):
        if _closes(self._line, self._point, 1):
            self._context.close_path()
        self._line = _flip(self._line)

    def _start(self, x, y):
        if _on(self._line):
            self._context.line_to(x, y)
        else:
            self._context.move_to(x, y)


class _ClosedCurve(Curve):
    def area_start(self):
        pass

    def area_end(self):
        pass


# ----------------------------------------------------------------------
class Linear(Curve):
    def point(self, x, y):
        x, y = float(x), float(y)
        if self._point == 0:
            self._point = 1
            self._start(x, y)
        else:
            self._point = 2
            self._context.line_to(x, y)


class LinearClosed(_ClosedCurve):
    def line_end(self):
        if self._point:
            self._context.close_path()

    def point(self, x, y):
        x, y = float(x), float(y)
        if self._point:
            self._context.line_to(x, y)
        else:
            self._point = 1
            self._context.move_to(x, y)


class Step(Curve):
    """Piecewise constant; ``t`` places the vertical step between points (0.5 = midpoint)."""

    def __init__(self, context, t=0.5):
        super().__init__(context)
        self._t = t

    def line_start(self):
        self._x = self._y = math.nan
        self._point = 0

    def line_end(self):
        if 0 < self._t < 1 and self._point == 2:
            self._context.line_to(self._x, self._y)
        if _closes(self._line, self._point, 1):
            self._context.close_path()
        if self._line is not None and self._line >= 0:
            self._t = 1 - self._t
            self._line = 1 - self._line

    def point(self, x, y):
        x, y = float(x), float(y)
        if self._point == 0:
            self._point = 1
            self._start(x, y)
        else:
            self._point = 2
            if self._t <= 0:
                self._context.line_to(self._x, y)
                self._context.line_to(x, y)
            else:
                x1 = self._x * (1 - self._t) + x * self._t
                self._context.line_to(x1, self._y)
                self._context.line_to(x1, y)
        self._x, self._y = x, y


def StepBefore(context):
    return Step(context, 0)


def StepAfter(context):
    return Step(context, 1)


# ----------------------------------------------------------------------
# B-splines
def _basis_point(that, x, y):
    that._context.bezier_curve_to(
        (2 * that._x0 + that._x1) / 3,
        (2 * that._y0 + that._y1) / 3,
        (that._x0 + 2 * that._x1) / 3,
        (that._y0 + 2 * that._y1) / 3,
        (that._x0 + 4 * that._x1 + x) / 6,
        (that._y0 + 4 * that._y1 + y) / 6,
    )


class Basis(Curve):
    def line_start(self):
        self._x0 = self._x1 = self._y0 = self._y1 = math.nan
        self._point = 0

    def line_end(self):
        if self._point == 3:
            _basis_point(self, self._x1, self._y1)
        if self._point in (2, 3):
            self._context.line_to(self._x1, self._y1)
        super().line_end()

    def point(self, x, y):
        x, y = float(x), float(y)
        if self._point == 0:
            self._point = 1
            self._start(x, y)
        elif self._point == 1:
            self._point = 2
        else:
            if self._point == 2:
                self._point = 3
                self._context.line_to(
                    (5 * self._x0 + self._x1) / 6, (5 * self._y0 + self._y1) / 6
                )
            _basis_point(self, x, y)
        self._x0, self._x1 = self._x1, x
        self._y0, self._y1 = self._y1, y


class BasisClosed(_ClosedCurve):
    def line_start(self):
        self._x0 = self._x1 = self._x2 = self._x3 = self._x4 = math.nan
        self._y0 = self._y1 = self._y2 = self._y3 = self._y4 = math.nan
        self._point = 0

    def line_end(self):
        if self._point == 1:
            self._context.move_to(self._x2, self._y2)
            self._context.close_path()
        elif self._point == 2:
            self._context.move_to((self._x2 + 2 * self._x3) / 3, (self._y2 + 2 * self._y3) / 3)
            self._context.line_to((self._x3 + 2 * self._x2) / 3, (self._y3 + 2 * self._y2) / 3)
            self._context.close_path()
        elif self._point == 3:
            self.point(self._x2, self._y2)
            self.point(self._x3, self._y3)
            self.point(self._x4, self._y4)

    def point(self, x, y):
        x, y = float(x), float(y)
        if self._point == 0:
            self._point = 1
            self._x2, self._y2 = x, y
        elif self._point == 1:
            self._point = 2
            self._x3, self._y3 = x, y
        elif self._point == 2:
            self._point = 3
            self._x4, self._y4 = x, y
            self._context.move_to(
                (self._x0 + 4 * self._x1 + x) / 6, (self._y0 + 4 * self._y1 + y) / 6
            )
        else:
            _basis_point(self, x, y)
        self._x0, self._x1 = self._x1, x
        self._y0, self._y1 = self._y1, y


class BasisOpen(Curve):
    def line_start(self):
        self._x0 = self._x1 = self._y0 = self._y1 = math.nan
        self._point = 0

    def line_end(self):
        if _closes(self._line, self._point, 3):
            self._context.close_path()
        self._line = _flip(self._line)

    def point(self, x, y):
        x, y = float(x), float(y)
        if self._point == 0:
            self._point = 1
        elif self._point == 1:
            self._point = 2
        elif self._point == 2:
            self._point = 3
            self._start((self._x0 + 4 * self._x1 + x) / 6, (self._y0 + 4 * self._y1 + y) / 6)
        else:
            self._point = 4
            _basis_point(self, x, y)
        self._x0, self._x1 = self._x1, x
        self._y0, self._y1 = self._y1, y


# ----------------------------------------------------------------------
class Bump(Curve):
    """Cubic links with tangents along x (``horizontal``) or along y."""

    def __init__(self, context, horizontal=True):
        super().__init__(context)
        self._horizontal = horizontal

    def point(self, x, y):
        x, y = float(x), float(y)
        if self._point == 0:
            self._point = 1
            self._start(x, y)
        else:
            self._point = 2
            if self._horizontal:
                self._x0 = (self._x0 + x) / 2
                self._context.bezier_curve_to(self._x0, self._y0, self._x0, y, x, y)
            else:
                self._y0 = (self._y0 + y) / 2
                self._context.bezier_curve_to(self._x0, self._y0, x, self._y0, x, y)
        self._x0, self._y0 = x, y


def BumpX(context):
    return Bump(context, True)


def BumpY(context):
    return Bump(context, False)


# ----------------------------------------------------------------------
# cardinal splines
def _cardinal_point(that, x, y):
    k = that._k
    that._context.bezier_curve_to(
        that._x1 + k * (that._x2 - that._x0),
        that._y1 + k * (that._y2 - that._y0),
        that._x2 + k * (that._x1 - x),
        that._y2 + k * (that._y1 - y),
        that._x2,
        that._y2,
    )


class _CardinalBase(Curve):
    def __init__(self, context, tension=0.0):
        super().__init__(context)
        self._k = (1 - tension) / 6

    def _shift(self, x, y):
        self._x0, self._x1, self._x2 = self._x1, self._x2, x
        self._y0, self._y1, self._y2 = self._y1, self._y2, y


class Cardinal(_CardinalBase):
    def line_start(self):
        self._x0 = self._x1 = self._x2 = self._y0 = self._y1 = self._y2 = math.nan
        self._point = 0

    def line_end(self):
        if self._point == 2:
            self._context.line_to(self._x2, self._y2)
        elif self._point == 3:
            _cardinal_point(self, self._x1, self._y1)
        super().line_end()

    def point(self, x, y):
        x, y = float(x), float(y)
        if self._point == 0:
            self._point = 1
            self._start(x, y)
        elif self._point == 1:
            self._point = 2
            self._x1, self._y1 = x, y
        else:
            self._point = 3
            _cardinal_point(self, x, y)
        self._shift(x, y)


class CardinalClosed(_CardinalBase):
    area_start = _ClosedCurve.area_start
    area_end = _ClosedCurve.area_end

    def line_start(self):
        self._x0 = self._x1 = self._x2 = self._x3 = self._x4 = self._x5 = math.nan
        self._y0 = self._y1 = self._y2 = self._y3 = self._y4 = self._y5 = math.nan
        self._point = 0

    def line_end(self):
        if self._point == 1:
            self._context.move_to(self._x3, self._y3)
            self._context.close_path()
        elif self._point == 2:
            self._context.line_to(self._x3, self._y3)
            self._context.close_path()
        elif self._point == 3:
            self.point(self._x3, self._y3)
            self.point(self._x4, self._y4)
            self.point(self._x5, self._y5)

    def point(self, x, y):
        x, y = float(x), float(y)
        if self._point == 0:
            self._point = 1
            self._x3, self._y3 = x, y
        elif self._point == 1:
            self._point = 2
            self._x4, self._y4 = x, y
            self._context.move_to(x, y)
        elif self._point == 2:
            self._point = 3
            self._x5, self._y5 = x, y
        else:
            _cardinal_point(self, x, y)
        self._shift(x, y)


class CardinalOpen(_CardinalBase):
    def line_start(self):
        self._x0 = self._x1 = self._x2 = self._y0 = self._y1 = self._y2 = math.nan
        self._point = 0

    def line_end(self):
        if _closes(self._line, self._point, 3):
            self._context.close_path()
        self._line = _flip(self._line)

    def point(self, x, y):
        x, y = float(x), float(y)
        if self._point == 0:
            self._point = 1
        elif self._point == 1:
            self._point = 2
        elif self._point == 2:
            self._point = 3
            self._start(self._x2, self._y2)
        else:
            self._point = 4
            _cardinal_point(self, x, y)
        self._shift(x, y)


# ----------------------------------------------------------------------
# Catmull-Rom (Yuksel et al. parameterisation)
def _catmull_rom_point(that, x, y):
    x1, y1, x2, y2 = that._x1, that._y1, that._x2, that._y2
    if that._l01_a > _EPSILON:
        a = 2 * that._l01_2a + 3 * that._l01_a * that._l12_a + that._l12_2a
        n = 3 * that._l01_a * (that._l01_a + that._l12_a)
        x1 = (x1 * a - that._x0 * that._l12_2a + that._x2 * that._l01_2a) / n
        y1 = (y1 * a - that._y0 * that._l12_2a + that._y2 * that._l01_2a) / n
    if that._l23_a > _EPSILON:
        b = 2 * that._l23_2a + 3 * that._l23_a * that._l12_a + that._l12_2a
        m = 3 * that._l23_a * (that._l23_a + that._l12_a)
        x2 = (x2 * b + that._x1 * that._l23_2a - x * that._l12_2a) / m
        y2 = (y2 * b + that._y1 * that._l23_2a - y * that._l12_2a) / m
    that._context.bezier_curve_to(x1, y1, x2, y2, that._x2, that._y2)


class _CatmullRomBase(_CardinalBase):
    def __init__(self, context, alpha=0.5):
        super().__init__(context, 0.0)
        self._alpha = alpha

    def _reset_lengths(self):
        self._l01_a = self._l12_a = self._l23_a = 0.0
        self._l01_2a = self._l12_2a = self._l23_2a = 0.0
        self._point = 0

    def _measure(self, x, y):
        if self._point:
            x23 = self._x2 - x
            y23 = self._y2 - y
            self._l23_2a = (x23 * x23 + y23 * y23) ** self._alpha
            self._l23_a = math.sqrt(self._l23_2a)

    def _shift(self, x, y):
        self._l01_a, self._l12_a = self._l12_a, self._l23_a
        self._l01_2a, self._l12_2a = self._l12_2a, self._l23_2a
        super()._shift(x, y)


class CatmullRom(_CatmullRomBase):
    def line_start(self):
        self._x0 = self._x1 = self._x2 = self._y0 = self._y1 = self._y2 = math.nan
        self._reset_lengths()

    def line_end(self):
        if self._point == 2:
            self._context.line_to(self._x2, self._y2)
        elif self._point == 3:
            self.point(self._x2, self._y2)
        super().line_end()

    def point(self, x, y):
        x, y = float(x), float(y)
        self._measure(x, y)
        if self._point == 0:
            self._point = 1
            self._start(x, y)
        elif self._point == 1:
            self._point = 2
        else:
            self._point = 3
            _catmull_rom_point(self, x, y)
        self._shift(x, y)


class CatmullRomClosed(_CatmullRomBase):
    area_start = _ClosedCurve.area_start
    area_end = _ClosedCurve.area_end
    line_end = CardinalClosed.line_end

    def line_start(self):
        self._x0 = self._x1 = self._x2 = self._x3 = self._x4 = self._x5 = math.nan
        self._y0 = self._y1 = self._y2 = self._y3 = self._y4 = self._y5 = math.nan
        self._reset_lengths()

    def point(self, x, y):
        x, y = float(x), float(y)
        self._measure(x, y)
        if self._point == 0:
            self._point = 1
            self._x3, self._y3 = x, y
        elif self._point == 1:
            self._point = 2
            self._x4, self._y4 = x, y
            self._context.move_to(x, y)
        elif self._point == 2:
            self._point = 3
            self._x5, self._y5 = x, y
        else:
            _catmull_rom_point(self, x, y)
        self._shift(x, y)


class CatmullRomOpen(_CatmullRomBase):
    line_end = CardinalOpen.line_end

    def line_start(self):
        self._x0 = self._x1 = self._x2 = self._y0 = self._y1 = self._y2 = math.nan
        self._reset_lengths()

    def point(self, x, y):
        x, y = float(x), float(y)
        self._measure(x, y)
        if self._point == 0:
            self._point = 1
        elif self._point == 1:
            self._point = 2
        elif self._point == 2:
            self._point = 3
            self._start(self._x2, self._y2)
        else:
            self._point = 4
            _catmull_rom_point(self, x, y)
        self._shift(x, y)


def _catmull_rom_factory(curve, fallback):
    def factory(context, alpha=0.5):
        if alpha:
            return curve(context, alpha)
        return fallback(context, 0.0)

    return factory


# ----------------------------------------------------------------------
# monotone cubic interpolation (Steffen 1990)
def _jsdiv(a, b):
    if b:
        return a / b
    if a == 0 or a != a:
        return math.nan
    return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _sign(x):
    return -1 if x < 0 else 1


def _slope3(that, x2, y2):
    h0 = that._x1 - that._x0
    h1 = x2 - that._x1
    s0 = _jsdiv(that._y1 - that._y0, h0 if h0 and h0 == h0 else (-0.0 if h1 < 0 else 0.0))
    s1 = _jsdiv(y2 - that._y1, h1 if h1 and h1 == h1 else (-0.0 if h0 < 0 else 0.0))
    p = _jsdiv(s0 * h1 + s1 * h0, h0 + h1)
    bounds = (abs(s0), abs(s1), 0.5 * abs(p))
    if any(b != b for b in bounds):
        return 0.0
    return (_sign(s0) + _sign(s1)) * min(bounds) or 0.0


def _slope2(that, t):
    h = that._x1 - that._x0
    return (3 * (that._y1 - that._y0) / h - t) / 2 if h else t


def _monotone_point(that, t0, t1):
    x0, y0, x1, y1 = that._x0, that._y0, that._x1, that._y1
    dx = (x1 - x0) / 3
    that._context.bezier_curve_to(x0 + dx, y0 + dx * t0, x1 - dx, y1 - dx * t1, x1, y1)


class MonotoneX(Curve):
    """Monotone in x: no overshoot between consecutive points."""

    def line_start(self):
        self._x0 = self._x1 = self._y0 = self._y1 = self._t0 = math.nan
        self._point = 0

    def line_end(self):
        if self._point == 2:
            self._context.line_to(self._x1, self._y1)
        elif self._point == 3:
            _monotone_point(self, self._t0, _slope2(self, self._t0))
        super().line_end()

    def point(self, x, y):
        t1 = math.nan
        x, y = float(x), float(y)
        if x == self._x1 and y == self._y1:
            return
        if self._point == 0:
            self._point = 1
            self._start(x, y)
        elif self._point == 1:
            self._point = 2
        elif self._point == 2:
            self._point = 3
            t1 = _slope3(self, x, y)
            _monotone_point(self, _slope2(self, t1), t1)
        else:
            t1 = _slope3(self, x, y)
            _monotone_point(self, self._t0, t1)
        self._x0, self._x1 = self._x1, x
        self._y0, self._y1 = self._y1, y
        self._t0 = t1


class _ReflectContext:
    def __init__(self, context):
        self._context = context

    def move_to(self, x, y):
        self._context.move_to(y, x)

    def close_path(self):
        self._context.close_path()

    def line_to(self, x, y):
        self._context.line_to(y, x)

    def bezier_curve_to(self, x1, y1, x2, y2, x, y):
        self._context.bezier_curve_to(y1, x1, y2, x2, y, x)


class MonotoneY(MonotoneX):
    def __init__(self, context):
        super().__init__(_ReflectContext(context))

    def point(self, x, y):
        super().point(y, x)


# ----------------------------------------------------------------------
def _control_points(x):
    n = len(x) - 1
    a = [0.0] * n
    b = [0.0] * n
    r = [0.0] * n
    a[0], b[0], r[0] = 0.0, 2.0, x[0] + 2 * x[1]
    for i in range(1, n - 1):
        a[i], b[i], r[i] = 1.0, 4.0, 4 * x[i] + 2 * x[i + 1]
    a[n - 1], b[n - 1], r[n - 1] = 2.0, 7.0, 8 * x[n - 1] + x[n]
    for i in range(1, n):
        m = a[i] / b[i - 1]
        b[i] -= m
        r[i] -= m * r[i - 1]
    a[n - 1] = r[n - 1] / b[n - 1]
    for i in range(n - 2, -1, -1):
        a[i] = (r[i] - a[i + 1]) / b[i]
    b[n - 1] = (x[n] + a[n - 1]) / 2
    for i in range(n - 1):
        b[i] = 2 * x[i + 1] - a[i + 1]
    return a, b


class Natural(Curve):
    """Natural cubic spline (zero second derivative at both ends)."""

    def line_start(self):
        self._xs = []
        self._ys = []

    def line_end(self):
        x, y = self._xs, self._ys
        n = len(x)
        if n:
            self._start(x[0], y[0])
            if n == 2:
                self._context.line_to(x[1], y[1])
            elif n > 2:
                px = _control_points(x)
                py = _control_points(y)
                for i0 in range(n - 1):
                    i1 = i0 + 1
                    self._context.bezier_curve_to(
                        px[0][i0], py[0][i0], px[1][i0], py[1][i0], x[i1], y[i1]
                    )
        if _on(self._line) or (self._line != 0 and n == 1):
            self._context.close_path()
        self._line = _flip(self._line)
        self._xs = self._ys = None

    def point(self, x, y):
        self._xs.append(float(x))
        self._ys.append(float(y))


class Radial:
    """Feeds another curve with ``(angle, radius)`` points converted to x, y.

    Angles are radians clockwise from 12 o'clock, so ``(0, r)`` lands on
    ``(0, -r)``.
    """

    def __init__(self, context, curve=Linear):
        self._curve = curve(context)

    def area_start(self):
        self._curve.area_start()

    def area_end(self):
        self._curve.area_end()

    def line_start(self):
        self._curve.line_start()

    def line_end(self):
        self._curve.line_end()

    def point(self, a, r):
        self._curve.point(r * math.sin(a), -r * math.cos(a))


def curve_radial(curve):
    """Wrap a curve factory so it accepts polar points."""

    def factory(context):
        return Radial(context, curve)

    return factory


curve_linear = Linear
curve_linear_closed = LinearClosed
curve_step = Step
curve_step_before = StepBefore
curve_step_after = StepAfter
curve_basis = Basis
curve_basis_closed = BasisClosed
curve_basis_open = BasisOpen
curve_bump_x = BumpX
curve_bump_y = BumpY
curve_cardinal = Cardinal
curve_cardinal_closed = CardinalClosed
curve_cardinal_open = CardinalOpen
curve_catmull_rom = _catmull_rom_factory(CatmullRom, Cardinal)
curve_catmull_rom_closed = _catmull_rom_factory(CatmullRomClosed, CardinalClosed)
curve_catmull_rom_open = _catmull_rom_factory(CatmullRomOpen, CardinalOpen)
curve_monotone_x = MonotoneX
curve_monotone_y = MonotoneY
curve_natural = Natural

CURVES = {
    "linear": curve_linear,
    "linear_closed": curve_linear_closed,
    "step": curve_step,
    "step_before": curve_step_before,
    "step_after": curve_step_after,
    "basis": curve_basis,
    "basis_closed": curve_basis_closed,
    "basis_open": curve_basis_open,
    "bump_x": curve_bump_x,
    "bump_y": curve_bump_y,
    "cardinal": curve_cardinal,
    "cardinal_closed": curve_cardinal_closed,
    "cardinal_open": curve_cardinal_open,
    "catmull_rom": curve_catmull_rom,
    "catmull_rom_closed": curve_catmull_rom_closed,
    "catmull_rom_open": curve_catmull_rom_open,
    "monotone_x": curve_monotone_x,
    "monotone_y": curve_monotone_y,
    "natural": curve_natural,
}
