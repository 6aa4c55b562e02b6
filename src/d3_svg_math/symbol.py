"""Symbol generator: scatterplot markers of a given area, centred on the origin."""

import math

from .shape import Generator, _UNSET, _evaluate

_PI = math.pi
_TAU = 2 * _PI
_SQRT3 = math.sqrt(3)


class SymbolType:
    """A named marker shape; ``draw`` renders it with the given area."""

    name = None

    def draw(self, context, size):
        raise NotImplementedError

    def __repr__(self):
        return f"<symbol {self.name}>"


class Circle(SymbolType):
    name = "circle"

    def draw(self, context, size):
        r = math.sqrt(size / _PI)
        context.move_to(r, 0)
        context.arc(0, 0, r, 0, _TAU)


class Cross(SymbolType):
    name = "cross"

    def draw(self, context, size):
        r = math.sqrt(size / 5) / 2
        context.move_to(-3 * r, -r)
        for x, y in ((-r, -r), (-r, -3 * r), (r, -3 * r), (r, -r), (3 * r, -r), (3 * r, r),
                     (r, r), (r, 3 * r), (-r, 3 * r), (-r, r), (-3 * r, r)):
            context.line_to(x, y)
        context.close_path()


_TAN30 = math.sqrt(1 / 3)
_TAN30_2 = _TAN30 * 2


class Diamond(SymbolType):
    name = "diamond"

    def draw(self, context, size):
        y = math.sqrt(size / _TAN30_2)
        x = y * _TAN30
        context.move_to(0, -y)
        context.line_to(x, 0)
        context.line_to(0, y)
        context.line_to(-x, 0)
        context.close_path()


class Diamond2(SymbolType):
    name = "diamond2"

    def draw(self, context, size):
        r = math.sqrt(size) * 0.62625
        context.move_to(0, -r)
        context.line_to(r, 0)
        context.line_to(0, r)
        context.line_to(-r, 0)
        context.close_path()


class Plus(SymbolType):
    name = "plus"

    def draw(self, context, size):
        r = math.sqrt(size - min(size / 7, 2)) * 0.87559
        context.move_to(-r, 0)
        context.line_to(r, 0)
        context.move_to(0, r)
        context.line_to(0, -r)


class Square(SymbolType):
    name = "square"

    def draw(self, context, size):
        w = math.sqrt(size)
        x = -w / 2
        context.rect(x, x, w, w)


class Square2(SymbolType):
    name = "square2"

    def draw(self, context, size):
        r = math.sqrt(size) * 0.4431
        context.move_to(r, r)
        context.line_to(r, -r)
        context.line_to(-r, -r)
        context.line_to(-r, r)
        context.close_path()


_KA = 0.89081309152928522810
_KR = math.sin(_PI / 10) / math.sin(7 * _PI / 10)
_KX = math.sin(_TAU / 10) * _KR
_KY = -math.cos(_TAU / 10) * _KR


class Star(SymbolType):
    name = "star"

    def draw(self, context, size):
        r = math.sqrt(size * _KA)
        x = _KX * r
        y = _KY * r
        context.move_to(0, -r)
        context.line_to(x, y)
        for i in range(1, 5):
            a = _TAU * i / 5
            c = math.cos(a)
            s = math.sin(a)
            context.line_to(s * r, -c * r)
            context.line_to(c * x - s * y, s * x + c * y)
        context.close_path()


class Triangle(SymbolType):
    name = "triangle"

    def draw(self, context, size):
        y = -math.sqrt(size / (_SQRT3 * 3))
        context.move_to(0, y * 2)
        context.line_to(-_SQRT3 * y, -y)
        context.line_to(_SQRT3 * y, -y)
        context.close_path()


class Triangle2(SymbolType):
    name = "triangle2"

    def draw(self, context, size):
        s = math.sqrt(size) * 0.6824
        t = s / 2
        u = (s * _SQRT3) / 2
        context.move_to(0, -s)
        context.line_to(u, t)
        context.line_to(-u, t)
        context.close_path()


class Times(SymbolType):
    name = "times"

    def draw(self, context, size):
        r = math.sqrt(size - min(size / 6, 1.7)) * 0.6189
        context.move_to(-r, -r)
        context.line_to(r, r)
        context.move_to(-r, r)
        context.line_to(r, -r)


_WYE_C = -0.5
_WYE_S = math.sqrt(3) / 2
_WYE_K = 1 / math.sqrt(12)
_WYE_A = (_WYE_K / 2 + 1) * 3


class Wye(SymbolType):
    name = "wye"

    def draw(self, context, size):
        c, s = _WYE_C, _WYE_S
        r = math.sqrt(size / _WYE_A)
        x0, y0 = r / 2, r * _WYE_K
        x1, y1 = x0, r * _WYE_K + r
        x2, y2 = -x1, y1
        context.move_to(x0, y0)
        context.line_to(x1, y1)
        context.line_to(x2, y2)
        context.line_to(c * x0 - s * y0, s * x0 + c * y0)
        context.line_to(c * x1 - s * y1, s * x1 + c * y1)
        context.line_to(c * x2 - s * y2, s * x2 + c * y2)
        context.line_to(c * x0 + s * y0, c * y0 - s * x0)
        context.line_to(c * x1 + s * y1, c * y1 - s * x1)
        context.line_to(c * x2 + s * y2, c * y2 - s * x2)
        context.close_path()


class Asterisk(SymbolType):
    name = "asterisk"

    def draw(self, context, size):
        r = math.sqrt(size + min(size / 28, 0.75)) * 0.59436
        t = r / 2
        u = t * _SQRT3
        context.move_to(0, r)
        context.line_to(0, -r)
        context.move_to(-u, -t)
        context.line_to(u, t)
        context.move_to(-u, t)
        context.line_to(u, -t)


symbol_circle = Circle()
symbol_cross = Cross()
symbol_diamond = Diamond()
symbol_diamond2 = Diamond2()
symbol_plus = Plus()
symbol_square = Square()
symbol_square2 = Square2()
symbol_star = Star()
symbol_triangle = Triangle()
symbol_triangle2 = Triangle2()
symbol_times = Times()
symbol_wye = Wye()
symbol_asterisk = Asterisk()

# filled and outline-only marker sets
SYMBOLS_FILL = [symbol_circle, symbol_cross, symbol_diamond, symbol_square, symbol_star,
                symbol_triangle, symbol_wye]
SYMBOLS_STROKE = [symbol_circle, symbol_plus, symbol_times, symbol_triangle2, symbol_asterisk,
                  symbol_square2, symbol_diamond2]

SYMBOLS = {s.name: s for s in SYMBOLS_FILL + SYMBOLS_STROKE}


class SymbolGenerator(Generator):
    def __init__(self, type=symbol_circle, size=64.0, context=None):
        self._type = type
        self._size = size
        self._context = context

    def type(self, value=_UNSET):
        if isinstance(value, str):
            value = SYMBOLS[value]
        return self._option("type", value)

    def size(self, value=_UNSET):
        return self._option("size", value)

    def __call__(self, d=None, i=0):
        ctx, buffer = self._output()
        kind = _evaluate(self._type, d, i) if not isinstance(self._type, SymbolType) else self._type
        kind.draw(ctx, float(_evaluate(self._size, d, i)))
        return self._result(buffer)


def symbol(type=symbol_circle, size=64.0):
    if isinstance(type, str):
        type = SYMBOLS[type]
    return SymbolGenerator(type, size)
