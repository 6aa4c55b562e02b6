"""Golden-file verification: recorded d3 outputs replayed against this library.

A golden file is JSON of the form::

    {"module": "d3-scale", "function": "linear", "tolerance": 1e-6,
     "test_cases": [{"name": ..., "config": {...}, "inputs": [...], "outputs": [...]}]}

Cases carry module-specific extra fields. Each ``(module, function)`` pair has
a runner that evaluates a case and yields ``(field, actual, expected)``
triples which :func:`compare` checks within the file's tolerance.
"""

import math
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from . import array, ease, geo
from .contour import contours
from .delaunay import delaunay
from .errors import ConfigurationError, ValidationError
from .interpolate import interpolate_zoom
from .quadtree import quadtree
from .scale import scale_linear
from .settings import get_settings

logger = structlog.get_logger(__name__)


class GoldenCase(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    config: Optional[Dict[str, Any]] = None
    inputs: Optional[List[Any]] = None
    outputs: Optional[List[Any]] = None

    def get(self, key, default=None):
        if key in type(self).model_fields:
            value = getattr(self, key)
            return default if value is None else value
        return (self.model_extra or {}).get(key, default)

    def __contains__(self, key):
        return self.get(key) is not None


class GoldenFile(BaseModel):
    model_config = ConfigDict(extra="allow")

    module: str
    function: str
    tolerance: float = Field(default_factory=lambda: get_settings().golden_tolerance)
    d3_version: Optional[str] = None
    generated_at: Optional[str] = None
    test_cases: List[GoldenCase]


def load_golden(path):
    path = Path(path)
    try:
        golden = GoldenFile.model_validate_json(path.read_text())
    except PydanticValidationError as exc:
        raise ValidationError(f"malformed golden file {path}: {exc}") from exc
    logger.debug("golden file loaded", path=str(path), module=golden.module, cases=len(golden.test_cases))
    return golden


def discover(directory=None):
    """Every ``*.json`` golden file below ``directory`` (default: settings.golden_dir)."""
    directory = directory or get_settings().golden_dir
    if directory is None:
        raise ConfigurationError("no golden directory configured (set D3_SVG_MATH_GOLDEN_DIR)")
    return sorted(Path(directory).rglob("*.json"))


def _missing(value):
    return value is None or (isinstance(value, float) and not math.isfinite(value))


def compare(actual, expected, tolerance, where="$"):
    """Differences between ``actual`` and ``expected`` as a list of messages.

    JSON ``null`` matches None and non-finite numbers, since JSON cannot
    carry NaN or Infinity.
    """
    if expected is None:
        return [] if _missing(actual) else [f"{where}: expected null, got {actual!r}"]
    if isinstance(expected, bool) or isinstance(expected, str):
        return [] if actual == expected else [f"{where}: expected {expected!r}, got {actual!r}"]
    if isinstance(expected, (int, float)):
        if isinstance(actual, bool) or not isinstance(actual, (int, float)):
            return [f"{where}: expected {expected!r}, got {actual!r}"]
        if math.isclose(actual, expected, rel_tol=tolerance, abs_tol=tolerance):
            return []
        return [f"{where}: expected {expected!r}, got {actual!r} (tolerance {tolerance})"]
    if isinstance(expected, dict):
        if not isinstance(actual, dict):
            return [f"{where}: expected object, got {actual!r}"]
        diffs = []
        for key, value in expected.items():
            if key not in actual:
                diffs.append(f"{where}.{key}: missing")
            else:
                diffs.extend(compare(actual[key], value, tolerance, f"{where}.{key}"))
        return diffs
    if isinstance(expected, (list, tuple)):
        try:
            actual = list(actual)
        except TypeError:
            return [f"{where}: expected list, got {actual!r}"]
        if len(actual) != len(expected):
            return [f"{where}: expected {len(expected)} items, got {len(actual)}"]
        diffs = []
        for i, (a, e) in enumerate(zip(actual, expected)):
            diffs.extend(compare(a, e, tolerance, f"{where}[{i}]"))
        return diffs
    return [f"{where}: unsupported expected value {expected!r}"]


RUNNERS = {}


def runner(module, function):
    """Register a case runner for ``(module, function)``."""

    def decorate(fn):
        RUNNERS[(module, function)] = fn
        return fn

    return decorate


def run_case(golden, case):
    try:
        run = RUNNERS[(golden.module, golden.function)]
    except KeyError:
        raise ConfigurationError(f"no golden runner for {golden.module}/{golden.function}") from None
    diffs = []
    for field, actual, expected in run(case):
        diffs.extend(compare(actual, expected, golden.tolerance, f"{case.name}.{field}"))
    return diffs


def run_file(golden):
    """``{case name: [differences]}`` for every case in ``golden``."""
    results = {case.name: run_case(golden, case) for case in golden.test_cases}
    failed = sum(1 for diffs in results.values() if diffs)
    if failed:
        logger.warning("golden mismatches", module=golden.module, function=golden.function, failed=failed)
    return results


# ----------------------------------------------------------------------
# runners
@runner("d3-scale", "linear")
def _run_linear(case):
    config = case.get("config", {})
    s = scale_linear(config.get("domain"), config.get("range"))
    if config.get("clamp"):
        s = s.clamp(True)
    if config.get("nice"):
        s = s.nice()
    if "outputs" in case:
        yield "outputs", [s(x) for x in case.inputs], case.outputs
    if "invert_outputs" in case:
        yield "invert_outputs", [s.invert(y) for y in case.get("invert_inputs")], case.get("invert_outputs")
    if "ticks" in case:
        yield "ticks", s.ticks(case.get("count", 10)), case.get("ticks")


@runner("d3-array", "ticks")
def _run_ticks(case):
    start, stop, count = case.get("start"), case.get("stop"), case.get("count")
    if "ticks" in case:
        yield "ticks", array.ticks(start, stop, count), case.get("ticks")
    if "nice" in case:
        yield "nice", array.nice(start, stop, count), case.get("nice")
    if "tick_step" in case:
        yield "tick_step", array.tick_step(start, stop, count), case.get("tick_step")


@runner("d3-ease", "ease")
def _run_ease(case):
    name = case.name
    if name.startswith("poly_in_") and "exponent" in case:
        fn = ease.ease_poly_in.exponent(case.get("exponent"))
    else:
        fn = ease.get_ease(name)
    yield "outputs", [fn(t) for t in case.inputs], case.outputs


@runner("d3-zoom", "zoom")
def _run_zoom(case):
    if case.name != "interpolate_zoom":
        raise ConfigurationError(f"unsupported zoom case {case.name!r}")
    interp = interpolate_zoom(case.get("start"), case.get("end"))
    yield "outputs", [interp(t) for t in case.inputs], case.outputs
    if "duration" in case:
        yield "duration", interp.duration, case.get("duration")


@runner("d3-quadtree", "quadtree")
def _run_quadtree(case):
    points = [list(p) for p in case.get("points", [])]
    name = case.name
    if name in {"basic_add", "coincident"}:
        tree = quadtree()
        for p in points:
            tree.add(p)
    else:
        tree = quadtree(points)

    if "size" in case and name != "remove":
        yield "size", tree.size(), case.get("size")
    if "extent" in case:
        yield "extent", tree.extent(), case.get("extent")
    if "data" in case:
        yield "data", tree.data(), case.get("data")
    for i, query in enumerate(case.get("queries", [])):
        found = tree.find(query["x"], query["y"], query.get("radius"))
        yield f"queries[{i}]", found, query["result"]
    if name == "remove":
        before = tree.size()
        target = tree.find(*case.get("remove"), 0.001)
        if target is not None:
            tree.remove(target)
        yield "size_before", before, case.get("size_before")
        yield "size_after", tree.size(), case.get("size_after")
    if "visited_count" in case:
        visited = []
        tree.visit(lambda node, *_: visited.append(node.is_leaf))
        yield "visited_count", len(visited), case.get("visited_count")
        yield "leaf_count", sum(visited), case.get("leaf_count")


def _cycle(indices):
    """Rotate a cyclic index sequence to start at its smallest entry, keeping the order."""
    indices = [int(i) for i in indices]
    if not indices:
        return indices
    k = indices.index(min(indices))
    return indices[k:] + indices[:k]


def _polygon_key(ring, digits=6):
    ring = ring[:-1] if len(ring) > 1 and list(ring[0]) == list(ring[-1]) else ring
    return sorted((round(x, digits), round(y, digits)) for x, y in ring)


@runner("d3-delaunay", "delaunay")
def _run_delaunay(case):
    d = delaunay(case.get("points"))
    if "triangles" in case:
        # triangle order and rotation depend on the triangulator; compare as sets
        mine = sorted(sorted(int(v) for v in d.triangles[i:i + 3]) for i in range(0, len(d.triangles), 3))
        ref = case.get("triangles")
        theirs = sorted(sorted(ref[i:i + 3]) for i in range(0, len(ref), 3))
        yield "triangles", mine, theirs
    if "hull" in case:
        # the start vertex is arbitrary but the winding is not
        yield "hull", _cycle(d.hull), _cycle(case.get("hull"))
    if "neighbors" in case:
        mine = [sorted(int(j) for j in d.neighbors(i)) for i in range(len(d.points))]
        yield "neighbors", mine, [sorted(n) for n in case.get("neighbors")]
    for i, query in enumerate(case.get("queries", [])):
        yield f"queries[{i}]", int(d.find(*query["query"])), query["nearest_index"]
    if "cell_polygons" in case:
        v = d.voronoi(case.get("bounds"))
        mine = [_polygon_key(v.cell_polygon(i)) for i in range(len(d.points))]
        theirs = [_polygon_key(ring) for ring in case.get("cell_polygons")]
        yield "cell_polygons", mine, theirs


@runner("d3-contour", "contour")
def _run_contour(case):
    if case.name != "grid_contours" and "contours" not in case:
        raise ConfigurationError(f"unsupported contour case {case.name!r}")
    width, height = case.get("size")
    gen = contours(size=(width, height), thresholds=case.get("thresholds"))
    result = gen(case.get("values"))
    yield "contour_count", len(result), case.get("contour_count")
    summary = [{"value": c.value, "coordinates_count": len(c.coordinates)} for c in result]
    yield "contours", summary, case.get("contours")


_PROJECTION_NAMES = {
    "naturalEarth1": "natural_earth1",
    "equalEarth": "equal_earth",
    "transverseMercator": "transverse_mercator",
    "azimuthalEqualArea": "azimuthal_equal_area",
    "azimuthalEquidistant": "azimuthal_equidistant",
    "conicEqualArea": "conic_equal_area",
    "conicConformal": "conic_conformal",
    "conicEquidistant": "conic_equidistant",
}


@runner("d3-geo", "geo")
def _run_geo(case):
    if "projection" in case:
        name = case.get("projection")
        factory = geo.PROJECTIONS[_PROJECTION_NAMES.get(name, name)]
        p = factory()
        if "center" in case:
            p = p.center(case.get("center"))
        if "rotate" in case:
            p = p.rotate(case.get("rotate"))
        p = p.scale(case.get("scale")).translate(case.get("translate"))
        if "clipExtent" in case:
            p = p.clip_extent(case.get("clipExtent"))
        points = case.get("points")
        projected = [p(pt) for pt in points]
        yield "projected", projected, case.get("projected")
        if "inverted" in case:
            yield "inverted", [p.invert(xy) for xy in projected], case.get("inverted")
        return

    kind = case.get("type")
    if "distance_radians" in case:
        yield "distance_radians", geo.geo_distance(case.get("from"), case.get("to")), case.get("distance_radians")
    elif kind == "graticule":
        g = geo.graticule()
        if "step" in case:
            g = g.step(case.get("step"))
        if "extent" in case:
            g = g.extent(case.get("extent"))
        yield "line_count", len(g.lines()), case.get("line_count")
    elif kind == "rotation":
        r = geo.geo_rotation(case.get("angles"))
        rotated = r(case.get("input"))
        yield "rotated", rotated, case.get("rotated")
        yield "inverted", r.invert(rotated), case.get("inverted")
    elif kind == "interpolate":
        fn = geo.geo_interpolate(case.get("from"), case.get("to"))
        yield "interpolated", [fn(t) for t in case.get("t_values")], case.get("interpolated")
    elif kind == "length":
        yield "length_radians", geo.geo_length(case.get("geometry")), case.get("length_radians")
    elif kind == "circle":
        ring = geo.geo_circle(case.get("center"), case.get("radius"))["coordinates"][0]
        yield "coordinate_count", len(ring), case.get("coordinate_count")
    else:
        raise ConfigurationError(f"unsupported geo case {case.name!r}")
