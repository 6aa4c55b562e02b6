import math

import numpy as np
import pytest

from d3_svg_math.errors import ValidationError
from d3_svg_math.polygon import (
    polygon_area,
    polygon_area_signed,
    polygon_centroid,
    polygon_contains,
    polygon_hull,
    polygon_length,
)

SQUARE = [(0, 0), (2, 0), (2, 2), (0, 2)]


def test_area_and_winding():
    assert polygon_area([(0, 0), (1, 0), (0, 1)]) == 0.5
    assert polygon_area_signed(SQUARE) == 4
    assert polygon_area_signed(SQUARE[::-1]) == -4
    assert polygon_area(SQUARE[::-1]) == 4
    assert polygon_area([(0, 0), (1, 1)]) == 0


def test_centroid():
    assert polygon_centroid(SQUARE) == pytest.approx([1, 1])
    assert polygon_centroid([(0, 0), (3, 0), (0, 3)]) == pytest.approx([1, 1])
    assert polygon_centroid([(0, 0), (2, 2), (4, 4)]) == pytest.approx([2, 2])
    cx, cy = polygon_centroid([])
    assert math.isnan(cx) and math.isnan(cy)


def test_contains():
    assert polygon_contains(SQUARE, (1, 1))
    assert polygon_contains(SQUARE, (0.5, 1.5))
    assert not polygon_contains(SQUARE, (-1, 1))
    assert not polygon_contains(SQUARE, (3, 1))
    assert not polygon_contains([(0, 0), (1, 1)], (0.5, 0.5))


def test_length():
    assert polygon_length(SQUARE) == 8
    assert polygon_length([(0, 0), (3, 4)]) == 10
    assert polygon_length([(1, 1)]) == 0


def test_hull_is_counter_clockwise_and_convex():
    rng = np.random.default_rng(2)
    points = rng.normal(size=(100, 2)).tolist()
    hull = polygon_hull(points)
    assert polygon_area_signed(hull) > 0
    for p in points:
        assert polygon_contains(hull, p) or list(p) in hull
    n = len(hull)
    for i in range(n):
        (ax, ay), (bx, by), (cx, cy) = hull[i], hull[(i + 1) % n], hull[(i + 2) % n]
        assert (bx - ax) * (cy - ay) - (by - ay) * (cx - ax) > 0


def test_hull_of_square_with_interior_points():
    hull = polygon_hull(SQUARE + [(1, 1), (0.5, 1.5)])
    assert sorted(map(tuple, hull)) == [(0, 0), (0, 2), (2, 0), (2, 2)]
    assert polygon_area_signed(hull) == 4


def test_hull_degenerate_input():
    assert polygon_hull([(0, 0), (1, 1)]) == [[0, 0], [1, 1]]
    assert polygon_hull([(0, 0), (2, 2), (1, 1)]) == [[0, 0], [2, 2]]
    assert polygon_hull([(1, 1)] * 3) == [[1, 1]]


def test_non_finite_vertices_rejected():
    with pytest.raises(ValidationError):
        polygon_area([(0, 0), (math.nan, 1), (1, 0)])
    with pytest.raises(ValidationError):
        polygon_hull([(0, 0), (1, math.inf), (1, 0)])
