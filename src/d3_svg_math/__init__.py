"""d3_svg_math: d3's visualization math in Python, with lxml SVG output.

Scales, interpolators, curves and shapes, spatial indices, contours, map
projections and easing, reproducing d3's numeric behaviour. Configuration
methods return modified copies, and geometry is produced as SVG path data
that :mod:`d3_svg_math.svg` can place into a document.
"""

from .array import (
    ascending,
    bin_,
    bisect_center,
    bisect_left,
    bisect_right,
    count,
    cross,
    cumsum,
    descending,
    deviation,
    extent,
    group,
    max_,
    mean,
    median,
    merge,
    min_,
    nice,
    pairs,
    quantile,
    quantile_sorted,
    range_,
    sum_,
    threshold_freedman_diaconis,
    threshold_scott,
    threshold_sturges,
    tick_increment,
    tick_step,
    ticks,
    transpose,
    variance,
    zip_,
)
from .color import Color, Cubehelix, Hcl, Hsl, Lab, Rgb, color, cubehelix, gray, hcl, hsl, lab, lch, rgb
from .contour import (
    Contour,
    ContourBand,
    ContourGenerator,
    DensityEstimator,
    contour,
    contours,
    density,
    isobands,
)
from .curve import (
    CURVES,
    curve_basis,
    curve_basis_closed,
    curve_basis_open,
    curve_bump_x,
    curve_bump_y,
    curve_cardinal,
    curve_cardinal_closed,
    curve_cardinal_open,
    curve_catmull_rom,
    curve_catmull_rom_closed,
    curve_catmull_rom_open,
    curve_linear,
    curve_linear_closed,
    curve_monotone_x,
    curve_monotone_y,
    curve_natural,
    curve_radial,
    curve_step,
    curve_step_after,
    curve_step_before,
)
from .delaunay import Delaunay, Voronoi, delaunay
from .ease import EASINGS, get_ease
from .errors import ConfigurationError, D3MathError, DomainError, ValidationError
from .geo import (
    PROJECTIONS,
    GeoPath,
    Graticule,
    Projection,
    Rotation,
    albers,
    azimuthal_equal_area,
    azimuthal_equidistant,
    conic_conformal,
    conic_equal_area,
    conic_equidistant,
    equal_earth,
    equirectangular,
    geo_area,
    geo_bounds,
    geo_centroid,
    geo_circle,
    geo_contains,
    geo_distance,
    geo_interpolate,
    geo_length,
    geo_path,
    geo_rotation,
    gnomonic,
    graticule,
    graticule10,
    mercator,
    natural_earth1,
    orthographic,
    stereographic,
    transverse_mercator,
)
from .interpolate import (
    interpolate,
    interpolate_array,
    interpolate_basis,
    interpolate_basis_closed,
    interpolate_cubehelix,
    interpolate_cubehelix_long,
    interpolate_discrete,
    interpolate_hcl,
    interpolate_hcl_long,
    interpolate_hsl,
    interpolate_hsl_long,
    interpolate_hue,
    interpolate_lab,
    interpolate_number,
    interpolate_object,
    interpolate_rgb,
    interpolate_round,
    interpolate_string,
    interpolate_transform_svg,
    interpolate_zoom,
    piecewise,
)
from .path import Path, path
from .polygon import (
    polygon_area,
    polygon_area_signed,
    polygon_centroid,
    polygon_contains,
    polygon_hull,
    polygon_length,
)
from .pie import arc, pie
from .quadtree import QuadTree, quadtree
from .scale import (
    scale_band,
    scale_diverging,
    scale_identity,
    scale_linear,
    scale_log,
    scale_ordinal,
    scale_point,
    scale_pow,
    scale_quantile,
    scale_quantize,
    scale_sequential,
    scale_sequential_log,
    scale_sqrt,
    scale_symlog,
    scale_threshold,
)
from . import scheme
from .scheme import CATEGORICAL, SCHEMES, category10, interpolate_turbo, ramp, tableau10
from .settings import Settings, configure_logging, get_settings
from .shape import area, area_radial, line, line_radial, link_horizontal, link_vertical
from .stack import stack
from .symbol import SYMBOLS, symbol
from .svg import SVGDocument, Selection, render_contours, render_graph, render_graticule, render_voronoi
from .timer import TimerQueue, Transition, transition

__version__ = "0.1.0"
