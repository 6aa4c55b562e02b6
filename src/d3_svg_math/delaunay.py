"""Delaunay triangulation and clipped Voronoi diagrams.

The triangulation itself comes from Qhull (``scipy.spatial.Delaunay``) and is
re-expressed in the flat ``triangles``/``halfedges`` layout: triangle ``t``
owns halfedges ``3t``, ``3t+1`` and ``3t+2``; halfedge ``e`` runs from
``triangles[e]`` to the next vertex of the same triangle and
``halfedges[e]`` is the opposite halfedge, or -1 on the hull.

Orientation is measured with the y axis pointing up: triangles and the hull
wind counter-clockwise (positive signed area).
"""

import math

import igraph as ig
import numpy as np
import structlog
from scipy.spatial import Delaunay as _Qhull
from scipy.spatial import QhullError

from .errors import ConfigurationError, require_finite
from .path import Path

logger = structlog.get_logger(__name__)

_EPSILON = 1e-12


def _next_halfedge(e):
    return e - 2 if e % 3 == 2 else e + 1


def _cross(ax, ay, bx, by, cx, cy):
    return (bx - ax) * (cy - ay) - (by - ay) * (cx - ax)


class Delaunay:
    def __init__(self, points):
        coords = require_finite(points)
        self.points = np.asarray(coords, dtype=float).reshape(-1, 2)
        self.triangles = np.zeros(0, dtype=np.int64)
        self.halfedges = np.zeros(0, dtype=np.int64)
        self.hull = np.zeros(0, dtype=np.int64)
        self.collinear = None
        # duplicate point index -> index of the coincident vertex kept by Qhull
        self._twin = {}
        self._neighbors = None
        self._triangulate()

    @classmethod
    def from_points(cls, data, fx=None, fy=None):
        """Build from arbitrary data using ``fx(d, i)`` / ``fy(d, i)`` accessors."""
        data = list(data)
        if fx is None and fy is None:
            return cls(data)
        fx = fx or (lambda d, i: d[0])
        fy = fy or (lambda d, i: d[1])
        return cls([(fx(d, i), fy(d, i)) for i, d in enumerate(data)])

    def __len__(self):
        return len(self.points)

    def __repr__(self):
        return (
            f"Delaunay(points={len(self.points)}, triangles={len(self.triangles) // 3}, "
            f"hull={len(self.hull)})"
        )

    # ------------------------------------------------------------------
    # construction
    def _triangulate(self):
        n = len(self.points)
        if n >= 3:
            try:
                tri = _Qhull(self.points)
            except QhullError:
                tri = None
            if tri is not None and len(tri.simplices):
                self._from_qhull(tri)
                logger.debug(
                    "delaunay built",
                    points=n,
                    triangles=len(self.triangles) // 3,
                    hull=len(self.hull),
                )
                return
            logger.warning("collinear delaunay input, falling back to a polyline", points=n)
        self._from_line()

    def _from_qhull(self, tri):
        pts = self.points
        simplices = np.array(tri.simplices, dtype=np.int64)
        a, b, c = pts[simplices[:, 0]], pts[simplices[:, 1]], pts[simplices[:, 2]]
        area = (b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (b[:, 1] - a[:, 1]) * (c[:, 0] - a[:, 0])
        flip = area < 0
        simplices[flip, 1], simplices[flip, 2] = simplices[flip, 2], simplices[flip, 1].copy()
        self.triangles = simplices.reshape(-1)

        for point, _facet, vertex in np.asarray(tri.coplanar, dtype=np.int64).reshape(-1, 3):
            self._twin[int(point)] = int(vertex)

        tris = self.triangles.tolist()
        owner = {}
        for e, start in enumerate(tris):
            owner[(start, tris[_next_halfedge(e)])] = e
        halfedges = [-1] * len(tris)
        for (i, j), e in owner.items():
            halfedges[e] = owner.get((j, i), -1)
        self.halfedges = np.asarray(halfedges, dtype=np.int64)

        # walk the boundary halfedges to recover the hull cycle
        following = {}
        for e, opposite in enumerate(halfedges):
            if opposite == -1:
                following[tris[e]] = tris[_next_halfedge(e)]
        start = min(following, key=lambda i: (pts[i, 0], pts[i, 1]))
        hull = [start]
        current = following[start]
        while current != start:
            hull.append(current)
            current = following[current]
        self.hull = np.asarray(hull, dtype=np.int64)

    def _from_line(self):
        n = len(self.points)
        order = sorted(range(n), key=lambda i: (self.points[i, 0], self.points[i, 1]))
        self.collinear = order
        if n:
            self.hull = np.asarray(order, dtype=np.int64)

    # ------------------------------------------------------------------
    # topology
    def _adjacency(self):
        if self._neighbors is None:
            n = len(self.points)
            adjacency = [[] for _ in range(n)]
            if self.collinear is not None:
                for a, b in zip(self.collinear, self.collinear[1:]):
                    adjacency[a].append(b)
                    adjacency[b].append(a)
            else:
                seen = set()
                for a, b in self.edges():
                    if (a, b) in seen:
                        continue
                    seen.add((a, b))
                    seen.add((b, a))
                    adjacency[a].append(b)
                    adjacency[b].append(a)
            self._neighbors = adjacency
        return self._neighbors

    def neighbors(self, i):
        """Indices of the points sharing a Delaunay edge with point ``i``."""
        i = self._twin.get(i, i)
        return iter(self._adjacency()[i])

    def edges(self):
        """Yield every undirected edge once as ``(i, j)``."""
        if self.collinear is not None:
            yield from zip(self.collinear, self.collinear[1:])
            return
        tris = self.triangles.tolist()
        for e, opposite in enumerate(self.halfedges.tolist()):
            if opposite == -1 or e < opposite:
                yield tris[e], tris[_next_halfedge(e)]

    def triangle_polygons(self):
        """Each triangle as a closed ring of coordinates."""
        pts = self.points.tolist()
        tris = self.triangles.tolist()
        for t in range(0, len(tris), 3):
            ring = [tuple(pts[tris[t]]), tuple(pts[tris[t + 1]]), tuple(pts[tris[t + 2]])]
            ring.append(ring[0])
            yield ring

    def triangle_polygon(self, t):
        i, j, k = self.triangles[3 * t:3 * t + 3].tolist()
        ring = [tuple(self.points[i]), tuple(self.points[j]), tuple(self.points[k])]
        ring.append(ring[0])
        return ring

    def hull_polygon(self):
        ring = [tuple(self.points[i]) for i in self.hull.tolist()]
        if ring:
            ring.append(ring[0])
        return ring

    # ------------------------------------------------------------------
    # queries
    def _distance2(self, i, x, y):
        dx = self.points[i, 0] - x
        dy = self.points[i, 1] - y
        return dx * dx + dy * dy

    def find(self, x, y, start=0):
        """Index of the input point nearest ``(x, y)``, walking the triangulation from ``start``.

        Returns -1 for an empty triangulation or a NaN query.
        """
        x, y = float(x), float(y)
        n = len(self.points)
        if n == 0 or x != x or y != y:
            return -1
        current = self._twin.get(start, start) if 0 <= start < n else 0
        adjacency = self._adjacency()
        best = self._distance2(current, x, y)
        while True:
            step = current
            for j in adjacency[current]:
                d2 = self._distance2(j, x, y)
                if d2 < best:
                    best, step = d2, j
            if step == current:
                return current
            current = step

    # ------------------------------------------------------------------
    # rendering
    def render(self, context=None):
        """Draw every edge, interior ones first and then the hull."""
        buffer = None if context is not None else Path()
        ctx = context if context is not None else buffer
        pts = self.points.tolist()
        if self.collinear is None:
            tris = self.triangles.tolist()
            for e, opposite in enumerate(self.halfedges.tolist()):
                if opposite < e:
                    continue
                x0, y0 = pts[tris[e]]
                x1, y1 = pts[tris[opposite]]
                ctx.move_to(x0, y0)
                ctx.line_to(x1, y1)
        self.render_hull(ctx)
        return buffer.to_svg() if buffer is not None else None

    def render_hull(self, context=None):
        buffer = None if context is not None else Path()
        ctx = context if context is not None else buffer
        hull = self.hull.tolist()
        if hull:
            ctx.move_to(*self.points[hull[0]])
            for i in hull[1:]:
                ctx.line_to(*self.points[i])
            ctx.close_path()
        return buffer.to_svg() if buffer is not None else None

    def render_points(self, context=None, r=2.0):
        buffer = None if context is not None else Path()
        ctx = context if context is not None else buffer
        for x, y in self.points.tolist():
            ctx.move_to(x + r, y)
            ctx.arc(x, y, r, 0, 2 * math.pi)
        return buffer.to_svg() if buffer is not None else None

    def render_triangle(self, t, context=None):
        buffer = None if context is not None else Path()
        ctx = context if context is not None else buffer
        ring = self.triangle_polygon(t)
        ctx.move_to(*ring[0])
        ctx.line_to(*ring[1])
        ctx.line_to(*ring[2])
        ctx.close_path()
        return buffer.to_svg() if buffer is not None else None

    # ------------------------------------------------------------------
    def to_graph(self):
        """The triangulation as an undirected igraph Graph with a ``Position`` vertex attribute."""
        graph = ig.Graph(n=len(self.points), edges=list(self.edges()), directed=False)
        graph.vs["Position"] = [tuple(p) for p in self.points.tolist()]
        return graph

    def voronoi(self, bounds=(0.0, 0.0, 960.0, 500.0)):
        return Voronoi(self, bounds)


def _clip(polygon, px, py, qx, qy, tag):
    """Keep the part of ``polygon`` closer to ``p`` than to ``q``.

    ``polygon`` is a list of ``(x, y, tag)`` where ``tag`` names what produced
    the edge leaving that vertex (a neighbour index, or None for the bounds).
    """
    mx, my = (px + qx) / 2, (py + qy) / 2
    nx, ny = qx - px, qy - py
    out = []
    n = len(polygon)
    for k in range(n):
        ax, ay, ta = polygon[k]
        bx, by, _ = polygon[(k + 1) % n]
        da = (ax - mx) * nx + (ay - my) * ny
        db = (bx - mx) * nx + (by - my) * ny
        if da <= 0:
            if db <= 0:
                out.append((ax, ay, ta))
            elif da == 0:
                # a sits on the bisector, which now carries the edge leaving it
                out.append((ax, ay, tag))
            else:
                s = da / (da - db)
                out.append((ax, ay, ta))
                out.append((ax + s * (bx - ax), ay + s * (by - ay), tag))
        elif db < 0:
            s = da / (da - db)
            out.append((ax + s * (bx - ax), ay + s * (by - ay), ta))
    return out


class Voronoi:
    """Voronoi cells of a triangulation, clipped to ``bounds = (xmin, ymin, xmax, ymax)``."""

    def __init__(self, delaunay, bounds=(0.0, 0.0, 960.0, 500.0)):
        xmin, ymin, xmax, ymax = (float(v) for v in bounds)
        if not (xmax >= xmin and ymax >= ymin):
            raise ConfigurationError(f"invalid bounds: {bounds!r}")
        self.delaunay = delaunay
        self.xmin, self.ymin, self.xmax, self.ymax = xmin, ymin, xmax, ymax
        self.circumcenters = self._circumcenters()
        self._cells = {}

    @property
    def bounds(self):
        return (self.xmin, self.ymin, self.xmax, self.ymax)

    def _circumcenters(self):
        pts = self.delaunay.points
        tris = self.delaunay.triangles.reshape(-1, 3)
        if not len(tris):
            return np.zeros((0, 2))
        a, b, c = pts[tris[:, 0]], pts[tris[:, 1]], pts[tris[:, 2]]
        d = 2 * (a[:, 0] * (b[:, 1] - c[:, 1]) + b[:, 0] * (c[:, 1] - a[:, 1])
                 + c[:, 0] * (a[:, 1] - b[:, 1]))
        a2 = (a ** 2).sum(axis=1)
        b2 = (b ** 2).sum(axis=1)
        c2 = (c ** 2).sum(axis=1)
        degenerate = np.abs(d) < _EPSILON
        d = np.where(degenerate, 1.0, d)
        ux = (a2 * (b[:, 1] - c[:, 1]) + b2 * (c[:, 1] - a[:, 1]) + c2 * (a[:, 1] - b[:, 1])) / d
        uy = (a2 * (c[:, 0] - b[:, 0]) + b2 * (a[:, 0] - c[:, 0]) + c2 * (b[:, 0] - a[:, 0])) / d
        centroid = (a + b + c) / 3
        ux = np.where(degenerate, centroid[:, 0], ux)
        uy = np.where(degenerate, centroid[:, 1], uy)
        return np.column_stack([ux, uy])

    def _cell(self, i):
        if i not in self._cells:
            if i in self.delaunay._twin:
                self._cells[i] = None
                return None
            px, py = self.delaunay.points[i]
            polygon = [
                (self.xmin, self.ymin, None),
                (self.xmax, self.ymin, None),
                (self.xmax, self.ymax, None),
                (self.xmin, self.ymax, None),
            ]
            for j in self.delaunay.neighbors(i):
                qx, qy = self.delaunay.points[j]
                polygon = _clip(polygon, px, py, qx, qy, j)
                if not polygon:
                    break
            self._cells[i] = polygon or None
        return self._cells[i]

    def cell_polygon(self, i):
        """The clipped cell of point ``i`` as a closed counter-clockwise ring, or None if empty."""
        cell = self._cell(i)
        if cell is None:
            return None
        ring = [(x, y) for x, y, _ in cell]
        ring.append(ring[0])
        return ring

    def cell_polygons(self):
        """Yield ``(i, ring)`` for every point with a non-empty cell."""
        for i in range(len(self.delaunay.points)):
            ring = self.cell_polygon(i)
            if ring is not None:
                yield i, ring

    def contains(self, i, x, y):
        x, y = float(x), float(y)
        if x != x or y != y:
            return False
        return self.delaunay.find(x, y, i) == self.delaunay._twin.get(i, i)

    def neighbors(self, i):
        """Indices of the points whose clipped cells share an edge with cell ``i``."""
        cell = self._cell(i)
        if cell is None:
            return iter(())
        found = []
        n = len(cell)
        for k in range(n):
            ax, ay, tag = cell[k]
            bx, by, _ = cell[(k + 1) % n]
            if tag is not None and tag not in found and math.hypot(bx - ax, by - ay) > 1e-9:
                found.append(tag)
        return iter(found)

    def render(self, context=None):
        """Draw each interior cell edge once; the bounds are not drawn."""
        buffer = None if context is not None else Path()
        ctx = context if context is not None else buffer
        for i in range(len(self.delaunay.points)):
            cell = self._cell(i)
            if cell is None:
                continue
            n = len(cell)
            for k in range(n):
                ax, ay, tag = cell[k]
                bx, by, _ = cell[(k + 1) % n]
                if tag is not None and tag > i and math.hypot(bx - ax, by - ay) > 1e-9:
                    ctx.move_to(ax, ay)
                    ctx.line_to(bx, by)
        return buffer.to_svg() if buffer is not None else None

    def render_bounds(self, context=None):
        buffer = None if context is not None else Path()
        ctx = context if context is not None else buffer
        ctx.rect(self.xmin, self.ymin, self.xmax - self.xmin, self.ymax - self.ymin)
        return buffer.to_svg() if buffer is not None else None

    def render_cell(self, i, context=None):
        buffer = None if context is not None else Path()
        ctx = context if context is not None else buffer
        cell = self._cell(i)
        if cell:
            ctx.move_to(cell[0][0], cell[0][1])
            for x, y, _ in cell[1:]:
                ctx.line_to(x, y)
            ctx.close_path()
        return buffer.to_svg() if buffer is not None else None


def delaunay(points):
    return Delaunay(points)
