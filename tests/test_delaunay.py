import math

import numpy as np
import pytest

from d3_svg_math.delaunay import Delaunay, delaunay
from d3_svg_math.errors import ConfigurationError, ValidationError
from d3_svg_math.path import Path
from d3_svg_math.polygon import polygon_area_signed, polygon_hull

SQUARE = [(0, 0), (1, 0), (1, 1), (0, 1), (0.5, 0.5)]


def _area(ring):
    return sum(x0 * y1 - x1 * y0 for (x0, y0), (x1, y1) in zip(ring, ring[1:])) / 2


def test_square_with_centre():
    d = delaunay(SQUARE)
    assert len(d) == 5
    assert len(d.triangles) == 12
    assert d.hull.tolist() == [0, 1, 2, 3]
    assert sorted(d.neighbors(4)) == [0, 1, 2, 3]
    assert sorted(d.neighbors(0)) == [1, 3, 4]
    for ring in d.triangle_polygons():
        assert _area(ring) > 0


def test_halfedges_are_symmetric():
    d = delaunay(SQUARE)
    halfedges = d.halfedges.tolist()
    for e, opposite in enumerate(halfedges):
        if opposite != -1:
            assert halfedges[opposite] == e
    assert halfedges.count(-1) == len(d.hull)


def test_find_walks_to_nearest():
    d = delaunay(SQUARE)
    assert d.find(0.9, 0.1) == 1
    assert d.find(0.45, 0.55) == 4
    assert d.find(-5, 10, start=2) == 3
    assert d.find(math.nan, 0) == -1
    assert delaunay([]).find(0, 0) == -1


def test_collinear_points_fall_back_to_a_line():
    d = delaunay([(2, 0), (0, 0), (1, 0)])
    assert d.collinear == [1, 2, 0]
    assert len(d.triangles) == 0
    assert sorted(d.neighbors(2)) == [0, 1]
    assert list(d.edges()) == [(1, 2), (2, 0)]
    assert d.find(1.9, 3) == 0


def test_non_finite_input_rejected():
    with pytest.raises(ValidationError):
        delaunay([(0, 0), (math.inf, 1), (2, 2)])


def test_from_points_accessors():
    data = [{"x": 0, "y": 0}, {"x": 4, "y": 0}, {"x": 0, "y": 3}]
    d = Delaunay.from_points(data, lambda p, i: p["x"], lambda p, i: p["y"])
    assert len(d.triangles) == 3
    assert d.hull_polygon()[0] == d.hull_polygon()[-1]


def test_render_outputs():
    d = delaunay(SQUARE)
    assert d.render().startswith("M")
    assert d.render_hull() == "M0,0L1,0L1,1L0,1Z"
    assert d.render_points(r=1).count("A") == 10
    ctx = Path(digits=None)
    assert d.render_triangle(0, ctx) is None
    assert ctx.segments[-1] == ("Z", ())


def test_to_graph():
    g = delaunay(SQUARE).to_graph()
    assert g.vcount() == 5
    assert g.ecount() == 8
    assert g.vs["Position"][4] == (0.5, 0.5)
    assert sorted(g.neighbors(4)) == [0, 1, 2, 3]


def test_voronoi_cells_tile_the_bounds():
    v = delaunay(SQUARE).voronoi((0, 0, 1, 1))
    assert v.bounds == (0, 0, 1, 1)
    cells = dict(v.cell_polygons())
    assert len(cells) == 5
    assert _area(cells[4]) == pytest.approx(0.5)
    assert _area(cells[0]) == pytest.approx(0.125)
    assert sum(_area(r) for r in cells.values()) == pytest.approx(1.0)


def test_voronoi_neighbors_and_contains():
    v = delaunay(SQUARE).voronoi((0, 0, 1, 1))
    assert sorted(v.neighbors(4)) == [0, 1, 2, 3]
    assert list(v.neighbors(0)) == [4]
    assert v.contains(4, 0.5, 0.6)
    assert not v.contains(4, 0.05, 0.05)
    assert not v.contains(0, math.nan, 0)


def test_voronoi_rendering():
    v = delaunay(SQUARE).voronoi((0, 0, 1, 1))
    assert v.render_bounds() == "M0,0h1v1h-1Z"
    assert v.render().count("M") == 4
    assert v.render_cell(4).endswith("Z")


def test_voronoi_duplicate_point_has_no_cell():
    d = delaunay([(0, 0), (1, 0), (0, 1), (0.9, 0.8), (0, 0)])
    v = d.voronoi((0, 0, 1, 1))
    empty = [i for i in (0, 4) if v.cell_polygon(i) is None]
    assert len(empty) == 1
    assert v.render_cell(empty[0]) == ""
    assert sorted(d.neighbors(4)) == sorted(d.neighbors(0))
    assert len(dict(v.cell_polygons())) == 4


def test_voronoi_invalid_bounds():
    with pytest.raises(ConfigurationError):
        delaunay(SQUARE).voronoi((1, 1, 0, 0))


def _circumcircle(a, b, c):
    ax, ay = a
    bx, by = b
    cx, cy = c
    d = 2 * (ax * (by - cy) + bx * (cy - ay) + cx * (ay - by))
    ux = ((ax * ax + ay * ay) * (by - cy) + (bx * bx + by * by) * (cy - ay) + (cx * cx + cy * cy) * (ay - by)) / d
    uy = ((ax * ax + ay * ay) * (cx - bx) + (bx * bx + by * by) * (ax - cx) + (cx * cx + cy * cy) * (bx - ax)) / d
    return ux, uy, math.hypot(ax - ux, ay - uy)


def test_empty_circumcircles():
    rng = np.random.default_rng(11)
    points = rng.uniform(0, 100, size=(60, 2)).tolist()
    d = delaunay(points)
    for i in range(0, len(d.triangles), 3):
        a, b, c = (points[j] for j in d.triangles[i:i + 3])
        ux, uy, r = _circumcircle(a, b, c)
        for p in points:
            assert math.hypot(p[0] - ux, p[1] - uy) >= r - 1e-7
    for x, y in rng.uniform(0, 100, size=(20, 2)).tolist():
        nearest = min(range(len(points)), key=lambda j: math.hypot(points[j][0] - x, points[j][1] - y))
        found = d.find(x, y)
        assert math.hypot(points[found][0] - x, points[found][1] - y) == pytest.approx(
            math.hypot(points[nearest][0] - x, points[nearest][1] - y)
        )


@pytest.mark.parametrize("seed", range(5))
def test_hull_polygon_is_counter_clockwise(seed):
    rng = np.random.default_rng(seed)
    points = rng.uniform(-50, 50, size=(int(rng.integers(3, 60)), 2)).tolist()
    ring = delaunay(points).hull_polygon()
    assert ring[0] == ring[-1]
    assert polygon_area_signed(ring[:-1]) > 0
    assert polygon_area_signed(ring[:-1]) == pytest.approx(polygon_area_signed(polygon_hull(points)))
