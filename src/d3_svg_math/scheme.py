"""Color schemes: categorical palettes plus sequential and diverging ramps.

Ramps are interpolators over t in [0, 1] returning ``rgb(...)`` strings, so they
plug directly into sequential and diverging scales.
"""

import math

from .color import Cubehelix, Rgb
from .interpolate import interpolate_cubehelix_long, interpolate_rgb_basis


def colors(specifier):
    """Split a run of six-digit hex codes into ``#rrggbb`` strings."""
    n = len(specifier) // 6
    return ["#" + specifier[i * 6:(i + 1) * 6] for i in range(n)]


# ----------------------------------------------------------------------
# categorical
category10 = colors("1f77b4ff7f0e2ca02cd627289467bd8c564be377c27f7f7fbcbd2217becf")
accent = colors("7fc97fbeaed4fdc086ffff99386cb0f0027fbf5b17666666")
dark2 = colors("1b9e77d95f027570b3e7298a66a61ee6ab02a6761d666666")
paired = colors("a6cee31f78b4b2df8a33a02cfb9a99e31a1cfdbf6fff7f00cab2d66a3d9affff99b15928")
pastel1 = colors("fbb4aeb3cde3ccebc5decbe4fed9a6ffffcce5d8bdfddaecf2f2f2")
pastel2 = colors("b3e2cdfdcdaccbd5e8f4cae4e6f5c9fff2aef1e2cccccccc")
set1 = colors("e41a1c377eb84daf4a984ea3ff7f00ffff33a65628f781bf999999")
set2 = colors("66c2a5fc8d628da0cbe78ac3a6d854ffd92fe5c494b3b3b3")
set3 = colors("8dd3c7ffffb3bebadafb807280b1d3fdb462b3de69fccde5d9d9d9bc80bdccebc5ffed6f")
tableau10 = colors("4e79a7f28e2ce1575976b7b259a14fedc949af7aa1ff9da79c755fbab0ab")

CATEGORICAL = {
    "category10": category10,
    "accent": accent,
    "dark2": dark2,
    "paired": paired,
    "pastel1": pastel1,
    "pastel2": pastel2,
    "set1": set1,
    "set2": set2,
    "set3": set3,
    "tableau10": tableau10,
}

# ----------------------------------------------------------------------
# sequential (single hue, 9 classes) and diverging (11 classes)
_SEQUENTIAL = {
    "blues": "f7fbffdeebf7c6dbef9ecae16baed64292c62171b508519c08306b",
    "greens": "f7fcf5e5f5e0c7e9c0a1d99b74c47641ab5d238b45006d2c00441b",
    "greys": "fffffff0f0f0d9d9d9bdbdbd969696737373525252252525000000",
    "oranges": "fff5ebfee6cefdd0a2fdae6bfd8d3cf16913d94801a636037f2704",
    "purples": "fcfbfdefedf5dadaebbcbddc9e9ac8807dba6a51a354278f3f007d",
    "reds": "fff5f0fee0d2fcbba1fc9272fb6a4aef3b2ccb181da50f1567000d",
}

_DIVERGING = {
    "rd_bu": "67001fb2182bd6604df4a582fddbc7f7f7f7d1e5f092c5de4393c32166ac053061",
    "br_bg": "5430058c510abf812ddfc27df6e8c3f5f5f5c7eae580cdc135978f01665e003c30",
    "pi_yg": "8e0152c51b7dde77aef1b6dafde0eff7f7f7e6f5d0b8e1867fbc414d9221276419",
    "rd_yl_bu": "a50026d73027f46d43fdae61fee090ffffbfe0f3f8abd9e974add14575b4313695",
    "spectral": "9e0142d53e4ff46d43fdae61fee08bffffbfe6f598abdda466c2a53288bd5e4fa2",
}

SCHEMES = {name: colors(spec) for name, spec in {**_SEQUENTIAL, **_DIVERGING}.items()}


def ramp(scheme):
    """Smooth B-spline ramp through the colors of ``scheme``."""
    return interpolate_rgb_basis(scheme)


interpolate_blues = ramp(SCHEMES["blues"])
interpolate_greens = ramp(SCHEMES["greens"])
interpolate_greys = ramp(SCHEMES["greys"])
interpolate_oranges = ramp(SCHEMES["oranges"])
interpolate_purples = ramp(SCHEMES["purples"])
interpolate_reds = ramp(SCHEMES["reds"])

interpolate_rd_bu = ramp(SCHEMES["rd_bu"])
interpolate_br_bg = ramp(SCHEMES["br_bg"])
interpolate_pi_yg = ramp(SCHEMES["pi_yg"])
interpolate_rd_yl_bu = ramp(SCHEMES["rd_yl_bu"])
interpolate_spectral = ramp(SCHEMES["spectral"])

# ----------------------------------------------------------------------
# formula based
interpolate_cubehelix_default = interpolate_cubehelix_long(
    Cubehelix(300, 0.5, 0.0), Cubehelix(-240, 0.5, 1.0)
)
interpolate_warm = interpolate_cubehelix_long(
    Cubehelix(-100, 0.75, 0.35), Cubehelix(80, 1.50, 0.8)
)
interpolate_cool = interpolate_cubehelix_long(
    Cubehelix(260, 0.75, 0.35), Cubehelix(80, 1.50, 0.8)
)


def interpolate_rainbow(t):
    """Cyclical rainbow: warm then cool, wrapping outside [0, 1]."""
    if t < 0 or t > 1:
        t -= math.floor(t)
    ts = abs(t - 0.5)
    return str(Cubehelix(360 * t - 100, 1.5 - 1.5 * ts, 0.8 - 0.9 * ts))


def interpolate_sinebow(t):
    t = (0.5 - t) * math.pi
    r = math.sin(t)
    g = math.sin(t + math.pi / 3)
    b = math.sin(t + math.pi * 2 / 3)
    return str(Rgb(255 * r * r, 255 * g * g, 255 * b * b))


def _channel(v):
    return max(0, min(255, math.floor(v + 0.5)))


def interpolate_turbo(t):
    t = max(0.0, min(1.0, t))
    r = 34.61 + t * (1172.33 - t * (10793.56 - t * (33300.12 - t * (38649.67 - t * 15094.91))))
    g = 23.31 + t * (557.33 + t * (1225.33 - t * (3574.96 - t * (1073.77 + t * 707.56))))
    b = 27.2 + t * (3211.1 - t * (15327.97 - t * (27814 - t * (22569.18 - t * 6838.66))))
    return f"rgb({_channel(r)}, {_channel(g)}, {_channel(b)})"


SEQUENTIAL = {
    "blues": interpolate_blues,
    "greens": interpolate_greens,
    "greys": interpolate_greys,
    "oranges": interpolate_oranges,
    "purples": interpolate_purples,
    "reds": interpolate_reds,
    "cubehelix_default": interpolate_cubehelix_default,
    "warm": interpolate_warm,
    "cool": interpolate_cool,
    "rainbow": interpolate_rainbow,
    "sinebow": interpolate_sinebow,
    "turbo": interpolate_turbo,
}

DIVERGING = {
    "rd_bu": interpolate_rd_bu,
    "br_bg": interpolate_br_bg,
    "pi_yg": interpolate_pi_yg,
    "rd_yl_bu": interpolate_rd_yl_bu,
    "spectral": interpolate_spectral,
}
