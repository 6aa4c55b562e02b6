"""Color representations (RGB, HSL, CIELAB, HCL, Cubehelix) and CSS color parsing."""

import math
import re

from ._format import format_number

DARKER = 0.7
BRIGHTER = 1 / DARKER

_RADIANS = math.pi / 180
_DEGREES = 180 / math.pi

_NAMED = {
    "aliceblue": 0xF0F8FF, "antiquewhite": 0xFAEBD7, "aqua": 0x00FFFF,
    "aquamarine": 0x7FFFD4, "azure": 0xF0FFFF, "beige": 0xF5F5DC,
    "bisque": 0xFFE4C4, "black": 0x000000, "blanchedalmond": 0xFFEBCD,
    "blue": 0x0000FF, "blueviolet": 0x8A2BE2, "brown": 0xA52A2A,
    "burlywood": 0xDEB887, "cadetblue": 0x5F9EA0, "chartreuse": 0x7FFF00,
    "chocolate": 0xD2691E, "coral": 0xFF7F50, "cornflowerblue": 0x6495ED,
    "cornsilk": 0xFFF8DC, "crimson": 0xDC143C, "cyan": 0x00FFFF,
    "darkblue": 0x00008B, "darkcyan": 0x008B8B, "darkgoldenrod": 0xB8860B,
    "darkgray": 0xA9A9A9, "darkgreen": 0x006400, "darkgrey": 0xA9A9A9,
    "darkkhaki": 0xBDB76B, "darkmagenta": 0x8B008B, "darkolivegreen": 0x556B2F,
    "darkorange": 0xFF8C00, "darkorchid": 0x9932CC, "darkred": 0x8B0000,
    "darksalmon": 0xE9967A, "darkseagreen": 0x8FBC8F, "darkslateblue": 0x483D8B,
    "darkslategray": 0x2F4F4F, "darkslategrey": 0x2F4F4F, "darkturquoise": 0x00CED1,
    "darkviolet": 0x9400D3, "deeppink": 0xFF1493, "deepskyblue": 0x00BFFF,
    "dimgray": 0x696969, "dimgrey": 0x696969, "dodgerblue": 0x1E90FF,
    "firebrick": 0xB22222, "floralwhite": 0xFFFAF0, "forestgreen": 0x228B22,
    "fuchsia": 0xFF00FF, "gainsboro": 0xDCDCDC, "ghostwhite": 0xF8F8FF,
    "gold": 0xFFD700, "goldenrod": 0xDAA520, "gray": 0x808080,
    "green": 0x008000, "greenyellow": 0xADFF2F, "grey": 0x808080,
    "honeydew": 0xF0FFF0, "hotpink": 0xFF69B4, "indianred": 0xCD5C5C,
    "indigo": 0x4B0082, "ivory": 0xFFFFF0, "khaki": 0xF0E68C,
    "lavender": 0xE6E6FA, "lavenderblush": 0xFFF0F5, "lawngreen": 0x7CFC00,
    "lemonchiffon": 0xFFFACD, "lightblue": 0xADD8E6, "lightcoral": 0xF08080,
    "lightcyan": 0xE0FFFF, "lightgoldenrodyellow": 0xFAFAD2, "lightgray": 0xD3D3D3,
    "lightgreen": 0x90EE90, "lightgrey": 0xD3D3D3, "lightpink": 0xFFB6C1,
    "lightsalmon": 0xFFA07A, "lightseagreen": 0x20B2AA, "lightskyblue": 0x87CEFA,
    "lightslategray": 0x778899, "lightslategrey": 0x778899, "lightsteelblue": 0xB0C4DE,
    "lightyellow": 0xFFFFE0, "lime": 0x00FF00, "limegreen": 0x32CD32,
    "linen": 0xFAF0E6, "magenta": 0xFF00FF, "maroon": 0x800000,
    "mediumaquamarine": 0x66CDAA, "mediumblue": 0x0000CD, "mediumorchid": 0xBA55D3,
    "mediumpurple": 0x9370DB, "mediumseagreen": 0x3CB371, "mediumslateblue": 0x7B68EE,
    "mediumspringgreen": 0x00FA9A, "mediumturquoise": 0x48D1CC, "mediumvioletred": 0xC71585,
    "midnightblue": 0x191970, "mintcream": 0xF5FFFA, "mistyrose": 0xFFE4E1,
    "moccasin": 0xFFE4B5, "navajowhite": 0xFFDEAD, "navy": 0x000080,
    "oldlace": 0xFDF5E6, "olive": 0x808000, "olivedrab": 0x6B8E23,
    "orange": 0xFFA500, "orangered": 0xFF4500, "orchid": 0xDA70D6,
    "palegoldenrod": 0xEEE8AA, "palegreen": 0x98FB98, "paleturquoise": 0xAFEEEE,
    "palevioletred": 0xDB7093, "papayawhip": 0xFFEFD5, "peachpuff": 0xFFDAB9,
    "peru": 0xCD853F, "pink": 0xFFC0CB, "plum": 0xDDA0DD,
    "powderblue": 0xB0E0E6, "purple": 0x800080, "rebeccapurple": 0x663399,
    "red": 0xFF0000, "rosybrown": 0xBC8F8F, "royalblue": 0x4169E1,
    "saddlebrown": 0x8B4513, "salmon": 0xFA8072, "sandybrown": 0xF4A460,
    "seagreen": 0x2E8B57, "seashell": 0xFFF5EE, "sienna": 0xA0522D,
    "silver": 0xC0C0C0, "skyblue": 0x87CEEB, "slateblue": 0x6A5ACD,
    "slategray": 0x708090, "slategrey": 0x708090, "snow": 0xFFFAFA,
    "springgreen": 0x00FF7F, "steelblue": 0x4682B4, "tan": 0xD2B48C,
    "teal": 0x008080, "thistle": 0xD8BFD8, "tomato": 0xFF6347,
    "turquoise": 0x40E0D0, "violet": 0xEE82EE, "wheat": 0xF5DEB3,
    "white": 0xFFFFFF, "whitesmoke": 0xF5F5F5, "yellow": 0xFFFF00,
    "yellowgreen": 0x9ACD32,
}

_I = r"\s*([+-]?\d+)\s*"
_N = r"\s*([+-]?(?:\d*\.)?\d+(?:[eE][+-]?\d+)?)\s*"
_P = r"\s*([+-]?(?:\d*\.)?\d+(?:[eE][+-]?\d+)?)%\s*"

_RE_HEX = re.compile(r"^#([0-9a-f]{3,8})$")
_RE_RGB_INTEGER = re.compile(rf"^rgb\({_I},{_I},{_I}\)$")
_RE_RGB_PERCENT = re.compile(rf"^rgb\({_P},{_P},{_P}\)$")
_RE_RGBA_INTEGER = re.compile(rf"^rgba\({_I},{_I},{_I},{_N}\)$")
_RE_RGBA_PERCENT = re.compile(rf"^rgba\({_P},{_P},{_P},{_N}\)$")
_RE_HSL_PERCENT = re.compile(rf"^hsl\({_N},{_P},{_P}\)$")
_RE_HSLA_PERCENT = re.compile(rf"^hsla\({_N},{_P},{_P},{_N}\)$")


def _isnan(v):
    return v != v


def _clampa(opacity):
    return 1.0 if _isnan(opacity) else max(0.0, min(1.0, opacity))


def _clampi(value):
    if _isnan(value):
        return 0
    if math.isinf(value):
        return 255 if value > 0 else 0
    return max(0, min(255, math.floor(value + 0.5) or 0))


def _clamph(value):
    value = math.fmod(value, 360)
    return value + 360 if value < 0 else value


def _clampt(value):
    return max(0.0, min(1.0, value if not _isnan(value) else 0.0))


class Color:
    """Common behaviour: every space converts through ``rgb()`` for display."""

    opacity = 1.0

    def rgb(self):
        raise NotImplementedError

    def displayable(self):
        return self.rgb().displayable()

    def format_hex(self):
        return self.rgb().format_hex()

    def format_hex8(self):
        return self.rgb().format_hex8()

    def format_rgb(self):
        return self.rgb().format_rgb()

    def format_hsl(self):
        return hsl(self).format_hsl()

    def copy(self, **changes):
        clone = self.__class__.__new__(self.__class__)
        clone.__dict__.update(self.__dict__)
        clone.__dict__.update(changes)
        return clone

    def __str__(self):
        return self.format_rgb()

    def __eq__(self, other):
        if not isinstance(other, Color):
            return NotImplemented
        return type(self) is type(other) and self._channels() == other._channels()

    def __hash__(self):
        return hash((type(self).__name__,) + self._channels())

    def _channels(self):
        return tuple(self.__dict__.values())


class Rgb(Color):
    def __init__(self, r=math.nan, g=math.nan, b=math.nan, opacity=1.0):
        self.r = float(r)
        self.g = float(g)
        self.b = float(b)
        self.opacity = float(opacity)

    def rgb(self):
        return self

    def brighter(self, k=None):
        k = BRIGHTER if k is None else BRIGHTER ** k
        return Rgb(self.r * k, self.g * k, self.b * k, self.opacity)

    def darker(self, k=None):
        k = DARKER if k is None else DARKER ** k
        return Rgb(self.r * k, self.g * k, self.b * k, self.opacity)

    def clamp(self):
        return Rgb(_clampi(self.r), _clampi(self.g), _clampi(self.b), _clampa(self.opacity))

    def displayable(self):
        return (
            -0.5 <= self.r < 255.5
            and -0.5 <= self.g < 255.5
            and -0.5 <= self.b < 255.5
            and 0 <= self.opacity <= 1
        )

    def format_hex(self):
        return "#%02x%02x%02x" % (_clampi(self.r), _clampi(self.g), _clampi(self.b))

    def format_hex8(self):
        a = _clampi((1.0 if _isnan(self.opacity) else self.opacity) * 255)
        return self.format_hex() + "%02x" % a

    def format_rgb(self):
        a = _clampa(self.opacity)
        channels = f"{_clampi(self.r)}, {_clampi(self.g)}, {_clampi(self.b)}"
        if a == 1:
            return f"rgb({channels})"
        return f"rgba({channels}, {format_number(a)})"

    def __repr__(self):
        return f"Rgb(r={self.r!r}, g={self.g!r}, b={self.b!r}, opacity={self.opacity!r})"


class Hsl(Color):
    def __init__(self, h=math.nan, s=math.nan, l=math.nan, opacity=1.0):
        self.h = float(h)
        self.s = float(s)
        self.l = float(l)
        self.opacity = float(opacity)

    def brighter(self, k=None):
        k = BRIGHTER if k is None else BRIGHTER ** k
        return Hsl(self.h, self.s, self.l * k, self.opacity)

    def darker(self, k=None):
        k = DARKER if k is None else DARKER ** k
        return Hsl(self.h, self.s, self.l * k, self.opacity)

    def rgb(self):
        h = math.fmod(self.h, 360) + (360 if self.h < 0 else 0)
        s = 0.0 if _isnan(h) or _isnan(self.s) else self.s
        l = self.l
        m2 = l + (l if l < 0.5 else 1 - l) * s
        m1 = 2 * l - m2
        return Rgb(
            _hsl2rgb(h - 240 if h >= 240 else h + 120, m1, m2),
            _hsl2rgb(h, m1, m2),
            _hsl2rgb(h + 240 if h < 120 else h - 120, m1, m2),
            self.opacity,
        )

    def clamp(self):
        return Hsl(
            _clamph(self.h),
            _clampt(self.s),
            _clampt(self.l),
            _clampa(self.opacity),
        )

    def displayable(self):
        return (
            (0 <= self.s <= 1 or _isnan(self.s))
            and 0 <= self.l <= 1
            and 0 <= self.opacity <= 1
        )

    def format_hsl(self):
        a = _clampa(self.opacity)
        h = _clamph(self.h) if not _isnan(self.h) else 0.0
        s = _clampt(self.s) * 100
        l = _clampt(self.l) * 100
        body = f"{format_number(h)}, {format_number(s)}%, {format_number(l)}%"
        if a == 1:
            return f"hsl({body})"
        return f"hsla({body}, {format_number(a)})"

    def __repr__(self):
        return f"Hsl(h={self.h!r}, s={self.s!r}, l={self.l!r}, opacity={self.opacity!r})"


def _hsl2rgb(h, m1, m2):
    if h < 60:
        v = m1 + (m2 - m1) * h / 60
    elif h < 180:
        v = m2
    elif h < 240:
        v = m1 + (m2 - m1) * (240 - h) / 60
    else:
        v = m1
    return v * 255


# ----------------------------------------------------------------------
# CIELAB / HCL (D50 white point, Bradford-adapted sRGB)
_K = 18
_XN = 0.96422
_YN = 1
_ZN = 0.82521
_T0 = 4 / 29
_T1 = 6 / 29
_T2 = 3 * _T1 * _T1
_T3 = _T1 * _T1 * _T1


def _xyz2lab(t):
    return t ** (1 / 3) if t > _T3 else t / _T2 + _T0


def _lab2xyz(t):
    return t * t * t if t > _T1 else _T2 * (t - _T0)


def _lrgb2rgb(x):
    return 255 * (12.92 * x if x <= 0.0031308 else 1.055 * x ** (1 / 2.4) - 0.055)


def _rgb2lrgb(x):
    x /= 255
    return x / 12.92 if x <= 0.04045 else ((x + 0.055) / 1.055) ** 2.4


class Lab(Color):
    def __init__(self, l=math.nan, a=math.nan, b=math.nan, opacity=1.0):
        self.l = float(l)
        self.a = float(a)
        self.b = float(b)
        self.opacity = float(opacity)

    def brighter(self, k=None):
        return Lab(self.l + _K * (1 if k is None else k), self.a, self.b, self.opacity)

    def darker(self, k=None):
        return Lab(self.l - _K * (1 if k is None else k), self.a, self.b, self.opacity)

    def rgb(self):
        y = (self.l + 16) / 116
        x = y if _isnan(self.a) else y + self.a / 500
        z = y if _isnan(self.b) else y - self.b / 200
        x = _XN * _lab2xyz(x)
        y = _YN * _lab2xyz(y)
        z = _ZN * _lab2xyz(z)
        return Rgb(
            _lrgb2rgb(3.1338561 * x - 1.6168667 * y - 0.4906146 * z),
            _lrgb2rgb(-0.9787684 * x + 1.9161415 * y + 0.0334540 * z),
            _lrgb2rgb(0.0719453 * x - 0.2289914 * y + 1.4052427 * z),
            self.opacity,
        )

    def __repr__(self):
        return f"Lab(l={self.l!r}, a={self.a!r}, b={self.b!r}, opacity={self.opacity!r})"


class Hcl(Color):
    def __init__(self, h=math.nan, c=math.nan, l=math.nan, opacity=1.0):
        self.h = float(h)
        self.c = float(c)
        self.l = float(l)
        self.opacity = float(opacity)

    def brighter(self, k=None):
        return Hcl(self.h, self.c, self.l + _K * (1 if k is None else k), self.opacity)

    def darker(self, k=None):
        return Hcl(self.h, self.c, self.l - _K * (1 if k is None else k), self.opacity)

    def rgb(self):
        return _hcl2lab(self).rgb()

    def __repr__(self):
        return f"Hcl(h={self.h!r}, c={self.c!r}, l={self.l!r}, opacity={self.opacity!r})"


def _hcl2lab(o):
    if _isnan(o.h):
        return Lab(o.l, 0, 0, o.opacity)
    h = o.h * _RADIANS
    return Lab(o.l, math.cos(h) * o.c, math.sin(h) * o.c, o.opacity)


# ----------------------------------------------------------------------
# Cubehelix (Green 2011)
_A = -0.14861
_B = +1.78277
_C = -0.29227
_D = -0.90649
_E = +1.97294
_ED = _E * _D
_EB = _E * _B
_BC_DA = _B * _C - _D * _A


class Cubehelix(Color):
    def __init__(self, h=math.nan, s=math.nan, l=math.nan, opacity=1.0):
        self.h = float(h)
        self.s = float(s)
        self.l = float(l)
        self.opacity = float(opacity)

    def brighter(self, k=None):
        k = BRIGHTER if k is None else BRIGHTER ** k
        return Cubehelix(self.h, self.s, self.l * k, self.opacity)

    def darker(self, k=None):
        k = DARKER if k is None else DARKER ** k
        return Cubehelix(self.h, self.s, self.l * k, self.opacity)

    def rgb(self):
        h = 0.0 if _isnan(self.h) else (self.h + 120) * _RADIANS
        l = self.l
        a = 0.0 if _isnan(self.s) else self.s * l * (1 - l)
        cosh = math.cos(h)
        sinh = math.sin(h)
        return Rgb(
            255 * (l + a * (_A * cosh + _B * sinh)),
            255 * (l + a * (_C * cosh + _D * sinh)),
            255 * (l + a * (_E * cosh)),
            self.opacity,
        )

    def __repr__(self):
        return f"Cubehelix(h={self.h!r}, s={self.s!r}, l={self.l!r}, opacity={self.opacity!r})"


# ----------------------------------------------------------------------
# parsing and conversion
def _rgbn(n):
    return Rgb(n >> 16 & 0xFF, n >> 8 & 0xFF, n & 0xFF, 1)


def _rgba(r, g, b, a):
    r, g, b, a = float(r), float(g), float(b), float(a)
    if a <= 0:
        r = g = b = math.nan
    return Rgb(r, g, b, a)


def _hsla(h, s, l, a):
    h, s, l, a = float(h), float(s), float(l), float(a)
    if a <= 0:
        h = s = l = math.nan
    elif l <= 0 or l >= 1:
        h = s = math.nan
    elif s <= 0:
        h = math.nan
    return Hsl(h, s, l, a)


def color(spec):
    """Parse a CSS color string; returns an Rgb or Hsl, or None when unparseable."""
    if isinstance(spec, Color):
        return spec
    fmt = str(spec).strip().lower()
    m = _RE_HEX.match(fmt)
    if m:
        digits = m.group(1)
        n = int(digits, 16)
        size = len(digits)
        if size == 6:
            return _rgbn(n)
        if size == 3:
            return Rgb(
                (n >> 8 & 0xF) | (n >> 4 & 0xF0),
                (n >> 4 & 0xF) | (n & 0xF0),
                ((n & 0xF) << 4) | (n & 0xF),
                1,
            )
        if size == 8:
            return _rgba(n >> 24 & 0xFF, n >> 16 & 0xFF, n >> 8 & 0xFF, (n & 0xFF) / 0xFF)
        if size == 4:
            return _rgba(
                (n >> 12 & 0xF) | (n >> 8 & 0xF0),
                (n >> 8 & 0xF) | (n >> 4 & 0xF0),
                (n >> 4 & 0xF) | (n & 0xF0),
                (((n & 0xF) << 4) | (n & 0xF)) / 0xFF,
            )
        return None
    m = _RE_RGB_INTEGER.match(fmt)
    if m:
        return Rgb(*(float(v) for v in m.groups()), 1)
    m = _RE_RGB_PERCENT.match(fmt)
    if m:
        return Rgb(*(float(v) * 255 / 100 for v in m.groups()), 1)
    m = _RE_RGBA_INTEGER.match(fmt)
    if m:
        return _rgba(*m.groups())
    m = _RE_RGBA_PERCENT.match(fmt)
    if m:
        r, g, b, a = m.groups()
        return _rgba(float(r) * 255 / 100, float(g) * 255 / 100, float(b) * 255 / 100, a)
    m = _RE_HSL_PERCENT.match(fmt)
    if m:
        h, s, l = m.groups()
        return _hsla(h, float(s) / 100, float(l) / 100, 1)
    m = _RE_HSLA_PERCENT.match(fmt)
    if m:
        h, s, l, a = m.groups()
        return _hsla(h, float(s) / 100, float(l) / 100, a)
    if fmt in _NAMED:
        return _rgbn(_NAMED[fmt])
    if fmt == "transparent":
        return Rgb(math.nan, math.nan, math.nan, 0)
    return None


def rgb(value, g=None, b=None, opacity=1.0):
    """Rgb from channels, or convert any color/spec to RGB (invalid specs give NaN channels)."""
    if g is not None:
        return Rgb(value, g, b, opacity)
    c = color(value)
    if c is None:
        return Rgb()
    c = c.rgb()
    return Rgb(c.r, c.g, c.b, c.opacity)


def hsl(value, s=None, l=None, opacity=1.0):
    if s is not None:
        return Hsl(value, s, l, opacity)
    o = color(value)
    if o is None:
        return Hsl()
    if isinstance(o, Hsl):
        return Hsl(o.h, o.s, o.l, o.opacity)
    o = o.rgb()
    r, g, b = o.r / 255, o.g / 255, o.b / 255
    lo = min(r, g, b)
    hi = max(r, g, b)
    h = math.nan
    s = hi - lo
    l = (hi + lo) / 2
    if s:
        if r == hi:
            h = (g - b) / s + (6 if g < b else 0)
        elif g == hi:
            h = (b - r) / s + 2
        else:
            h = (r - g) / s + 4
        s /= hi + lo if l < 0.5 else 2 - hi - lo
        h *= 60
    else:
        s = 0.0 if 0 < l < 1 else h
    return Hsl(h, s, l, o.opacity)


def lab(value, a=None, b=None, opacity=1.0):
    if a is not None:
        return Lab(value, a, b, opacity)
    o = color(value)
    if o is None:
        return Lab()
    if isinstance(o, Lab):
        return Lab(o.l, o.a, o.b, o.opacity)
    if isinstance(o, Hcl):
        return _hcl2lab(o)
    o = o.rgb()
    r, g, b_ = _rgb2lrgb(o.r), _rgb2lrgb(o.g), _rgb2lrgb(o.b)
    y = _xyz2lab((0.2225045 * r + 0.7168786 * g + 0.0606169 * b_) / _YN)
    if r == g == b_:
        x = z = y
    else:
        x = _xyz2lab((0.4360747 * r + 0.3850649 * g + 0.1430804 * b_) / _XN)
        z = _xyz2lab((0.0139322 * r + 0.0971045 * g + 0.7141733 * b_) / _ZN)
    return Lab(116 * y - 16, 500 * (x - y), 200 * (y - z), o.opacity)


def gray(l, opacity=1.0):
    return Lab(l, 0, 0, opacity)


def hcl(value, c=None, l=None, opacity=1.0):
    if c is not None:
        return Hcl(value, c, l, opacity)
    o = color(value)
    if o is None:
        return Hcl()
    if isinstance(o, Hcl):
        return Hcl(o.h, o.c, o.l, o.opacity)
    if not isinstance(o, Lab):
        o = lab(o)
    if o.a == 0 and o.b == 0:
        return Hcl(math.nan, 0 if 0 < o.l < 100 else math.nan, o.l, o.opacity)
    h = math.atan2(o.b, o.a) * _DEGREES
    return Hcl(h + 360 if h < 0 else h, math.sqrt(o.a * o.a + o.b * o.b), o.l, o.opacity)


def lch(l, c, h, opacity=1.0):
    return Hcl(h, c, l, opacity)


def cubehelix(value, s=None, l=None, opacity=1.0):
    if s is not None:
        return Cubehelix(value, s, l, opacity)
    o = color(value)
    if o is None:
        return Cubehelix()
    if isinstance(o, Cubehelix):
        return Cubehelix(o.h, o.s, o.l, o.opacity)
    o = o.rgb()
    r, g, b = o.r / 255, o.g / 255, o.b / 255
    l = (_BC_DA * b + _ED * r - _EB * g) / (_BC_DA + _ED - _EB)
    bl = b - l
    k = (_E * (g - l) - _C * bl) / _D
    num = math.sqrt(k * k + bl * bl)
    den = _E * l * (1 - l)
    if den:
        s = num / den
    else:
        s = math.nan if num == 0 else math.inf
    h = math.atan2(k, bl) * _DEGREES - 120 if s and not _isnan(s) else math.nan
    return Cubehelix(h + 360 if h < 0 else h, s, l, o.opacity)
