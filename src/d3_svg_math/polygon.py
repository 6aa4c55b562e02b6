"""Planar polygon measures and convex hulls.

A polygon is a sequence of ``(x, y)`` vertices; the closing edge from the
last vertex back to the first is implicit. Signed areas are positive for
counter-clockwise winding with the y axis pointing up.
"""

import math

import numpy as np
import structlog
from scipy.spatial import ConvexHull, QhullError

from .errors import require_finite

logger = structlog.get_logger(__name__)


def _edges(polygon):
    n = len(polygon)
    for i in range(n):
        yield polygon[i], polygon[(i + 1) % n]


def polygon_area_signed(polygon):
    polygon = require_finite(polygon, "vertex")
    if len(polygon) < 3:
        return 0.0
    return sum(ax * by - bx * ay for (ax, ay), (bx, by) in _edges(polygon)) / 2


def polygon_area(polygon):
    return abs(polygon_area_signed(polygon))


def polygon_centroid(polygon):
    """Area-weighted centroid; degenerate (zero-area) polygons fall back to the vertex mean."""
    polygon = require_finite(polygon, "vertex")
    n = len(polygon)
    if n == 0:
        return [math.nan, math.nan]
    cx = cy = area = 0.0
    for (ax, ay), (bx, by) in _edges(polygon):
        cross = ax * by - bx * ay
        cx += (ax + bx) * cross
        cy += (ay + by) * cross
        area += cross
    if abs(area) < 1e-10:
        return [sum(p[0] for p in polygon) / n, sum(p[1] for p in polygon) / n]
    area *= 3
    return [cx / area, cy / area]


def polygon_contains(polygon, point):
    """Even-odd ray casting; points on the boundary may fall either way."""
    polygon = require_finite(polygon, "vertex")
    x, y = float(point[0]), float(point[1])
    if len(polygon) < 3:
        return False
    inside = False
    xj, yj = polygon[-1]
    for xi, yi in polygon:
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        xj, yj = xi, yi
    return inside


def polygon_length(polygon):
    """Perimeter including the closing edge."""
    polygon = require_finite(polygon, "vertex")
    if len(polygon) < 2:
        return 0.0
    return sum(math.hypot(bx - ax, by - ay) for (ax, ay), (bx, by) in _edges(polygon))


def polygon_hull(points):
    """Convex hull vertices in counter-clockwise order.

    Fewer than three points are returned as given. Collinear input has no
    area, so its hull is the two extreme points.
    """
    points = require_finite(points)
    if len(points) < 3:
        return [list(p) for p in points]
    coords = np.asarray(points, dtype=float)
    try:
        hull = ConvexHull(coords)
    except QhullError:
        ordered = sorted(set(points))
        logger.debug("degenerate hull", points=len(points), distinct=len(ordered))
        ends = [ordered[0], ordered[-1]] if len(ordered) > 1 else ordered
        return [list(p) for p in ends]
    return coords[hull.vertices].tolist()
