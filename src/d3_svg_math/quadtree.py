"""Point quadtree with nearest-neighbour search.

Internal nodes hold four children (``None`` for an empty quadrant) in the
order top-left, top-right, bottom-left, bottom-right; leaves hold one datum
plus a chain of exactly coincident data. The extent is always square and
doubles outward as needed to cover new points.
"""

import math

import structlog

from .errors import ValidationError

logger = structlog.get_logger(__name__)


class Leaf:
    __slots__ = ("data", "next")

    is_leaf = True

    def __init__(self, data, next=None):
        self.data = data
        self.next = next

    def __iter__(self):
        node = self
        while node is not None:
            yield node.data
            node = node.next


class Node:
    __slots__ = ("children",)

    is_leaf = False

    def __init__(self):
        self.children = [None, None, None, None]

    def __getitem__(self, i):
        return self.children[i]

    def __setitem__(self, i, value):
        self.children[i] = value


def _default_x(d):
    return d[0]


def _default_y(d):
    return d[1]


def _copy_leaf(leaf):
    return Leaf(leaf.data, _copy_leaf(leaf.next) if leaf.next is not None else None)


class QuadTree:
    def __init__(self, x=_default_x, y=_default_y):
        self._x = x
        self._y = y
        self._x0 = self._y0 = self._x1 = self._y1 = math.nan
        self.root = None

    # ------------------------------------------------------------------
    # accessors
    def x(self, fn=None):
        if fn is None:
            return self._x
        self._x = fn
        return self

    def y(self, fn=None):
        if fn is None:
            return self._y
        self._y = fn
        return self

    def _coords(self, d):
        try:
            x = float(self._x(d))
            y = float(self._y(d))
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"invalid quadtree point {d!r}") from exc
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ValidationError(f"non-finite quadtree point {d!r}")
        return x, y

    def extent(self, value=None):
        """``[[x0, y0], [x1, y1]]``, or None for an empty tree; pass an extent to cover it."""
        if value is None:
            if self._x0 != self._x0:
                return None
            return [[self._x0, self._y0], [self._x1, self._y1]]
        (x0, y0), (x1, y1) = value
        return self.cover(x0, y0).cover(x1, y1)

    # ------------------------------------------------------------------
    # construction
    def cover(self, x, y):
        """Grow the extent by doubling until it contains ``(x, y)``."""
        x, y = float(x), float(y)
        if x != x or y != y:
            return self
        x0, y0, x1, y1 = self._x0, self._y0, self._x1, self._y1
        if x0 != x0:
            x0 = math.floor(x)
            x1 = x0 + 1
            y0 = math.floor(y)
            y1 = y0 + 1
        else:
            z = (x1 - x0) or 1
            node = self.root
            while x0 > x or x >= x1 or y0 > y or y >= y1:
                i = (y < y0) << 1 | (x < x0)
                parent = Node()
                parent[i] = node
                node = parent
                z *= 2
                if i == 0:
                    x1, y1 = x0 + z, y0 + z
                elif i == 1:
                    x0, y1 = x1 - z, y0 + z
                elif i == 2:
                    x1, y0 = x0 + z, y1 - z
                else:
                    x0, y0 = x1 - z, y1 - z
            if self.root is not None and not self.root.is_leaf:
                self.root = node
        self._x0, self._y0, self._x1, self._y1 = float(x0), float(y0), float(x1), float(y1)
        return self

    def add(self, d):
        x, y = self._coords(d)
        self.cover(x, y)
        self._insert(x, y, d)
        return self

    def add_all(self, data):
        data = list(data)
        coords = [self._coords(d) for d in data]
        if not coords:
            return self
        xs = [c[0] for c in coords]
        ys = [c[1] for c in coords]
        self.cover(min(xs), min(ys)).cover(max(xs), max(ys))
        for (x, y), d in zip(coords, data):
            self._insert(x, y, d)
        logger.debug("quadtree points added", points=len(data), extent=self.extent())
        return self

    def _insert(self, x, y, d):
        leaf = Leaf(d)
        node = self.root
        if node is None:
            self.root = leaf
            return
        x0, y0, x1, y1 = self._x0, self._y0, self._x1, self._y1
        parent = None
        i = 0
        while not node.is_leaf:
            xm = (x0 + x1) / 2
            ym = (y0 + y1) / 2
            right = x >= xm
            bottom = y >= ym
            if right:
                x0 = xm
            else:
                x1 = xm
            if bottom:
                y0 = ym
            else:
                y1 = ym
            parent = node
            i = bottom << 1 | right
            node = node[i]
            if node is None:
                parent[i] = leaf
                return

        xp = float(self._x(node.data))
        yp = float(self._y(node.data))
        if x == xp and y == yp:
            leaf.next = node
            if parent is not None:
                parent[i] = leaf
            else:
                self.root = leaf
            return

        # split until the new point and the existing leaf land in different quadrants
        while True:
            fresh = Node()
            if parent is not None:
                parent[i] = fresh
            else:
                self.root = fresh
            parent = fresh
            xm = (x0 + x1) / 2
            ym = (y0 + y1) / 2
            right = x >= xm
            bottom = y >= ym
            if right:
                x0 = xm
            else:
                x1 = xm
            if bottom:
                y0 = ym
            else:
                y1 = ym
            i = bottom << 1 | right
            j = (yp >= ym) << 1 | (xp >= xm)
            if i != j:
                break
        parent[j] = node
        parent[i] = leaf

    # ------------------------------------------------------------------
    # removal
    def remove(self, d):
        """Remove the first datum identical to ``d``; unknown data are ignored."""
        try:
            x, y = float(self._x(d)), float(self._y(d))
        except (TypeError, ValueError):
            return self
        if x != x or y != y:
            return self
        node = self.root
        if node is None:
            return self
        x0, y0, x1, y1 = self._x0, self._y0, self._x1, self._y1
        parent = retainer = None
        i = j = 0
        if not node.is_leaf:
            while True:
                xm = (x0 + x1) / 2
                ym = (y0 + y1) / 2
                right = x >= xm
                bottom = y >= ym
                if right:
                    x0 = xm
                else:
                    x1 = xm
                if bottom:
                    y0 = ym
                else:
                    y1 = ym
                parent = node
                i = bottom << 1 | right
                node = node[i]
                if node is None:
                    return self
                if node.is_leaf:
                    break
                if parent[(i + 1) & 3] or parent[(i + 2) & 3] or parent[(i + 3) & 3]:
                    retainer, j = parent, i

        previous = None
        while node.data is not d:
            previous, node = node, node.next
            if node is None:
                return self
        nxt = node.next
        node.next = None
        if previous is not None:
            previous.next = nxt
            return self
        if parent is None:
            self.root = nxt
            return self
        parent[i] = nxt

        # collapse a parent left with a single leaf child
        remaining = [c for c in parent.children if c is not None]
        if len(remaining) == 1 and remaining[0].is_leaf:
            if retainer is not None:
                retainer[j] = remaining[0]
            else:
                self.root = remaining[0]
        return self

    def remove_all(self, data):
        for d in data:
            self.remove(d)
        return self

    # ------------------------------------------------------------------
    # queries
    def data(self):
        out = []

        def collect(node, *_):
            if node.is_leaf:
                out.extend(node)

        self.visit(collect)
        return out

    def size(self):
        return len(self.data())

    def __len__(self):
        return self.size()

    def find(self, x, y, radius=None):
        """The datum closest to ``(x, y)``, optionally within ``radius``; None if nothing qualifies."""
        x, y = float(x), float(y)
        found = None
        x0, y0, x3, y3 = self._x0, self._y0, self._x1, self._y1
        quads = []
        if self.root is not None:
            quads.append((self.root, x0, y0, x3, y3))
        if radius is None:
            radius2 = math.inf
        else:
            x0, y0 = x - radius, y - radius
            x3, y3 = x + radius, y + radius
            radius2 = radius * radius

        while quads:
            node, qx0, qy0, qx1, qy1 = quads.pop()
            if node is None or qx0 > x3 or qy0 > y3 or qx1 < x0 or qy1 < y0:
                continue
            if not node.is_leaf:
                xm = (qx0 + qx1) / 2
                ym = (qy0 + qy1) / 2
                quads.append((node[3], xm, ym, qx1, qy1))
                quads.append((node[2], qx0, ym, xm, qy1))
                quads.append((node[1], xm, qy0, qx1, ym))
                quads.append((node[0], qx0, qy0, xm, ym))
                # visit the quadrant containing the target first
                k = (y >= ym) << 1 | (x >= xm)
                if k:
                    quads[-1], quads[-1 - k] = quads[-1 - k], quads[-1]
            else:
                dx = x - float(self._x(node.data))
                dy = y - float(self._y(node.data))
                d2 = dx * dx + dy * dy
                if d2 < radius2:
                    radius2 = d2
                    d = math.sqrt(d2)
                    x0, y0 = x - d, y - d
                    x3, y3 = x + d, y + d
                    found = node.data
        return found

    def find_all(self, x, y, radius):
        """Every datum within ``radius`` of ``(x, y)``, nearest first."""
        x, y, radius = float(x), float(y), float(radius)
        r2 = radius * radius
        hits = []

        def within(node, x0, y0, x1, y1):
            if node.is_leaf:
                for d in node:
                    dx = x - float(self._x(d))
                    dy = y - float(self._y(d))
                    dist = dx * dx + dy * dy
                    if dist <= r2:
                        hits.append((dist, len(hits), d))
                return False
            return x0 > x + radius or y0 > y + radius or x1 < x - radius or y1 < y - radius

        self.visit(within)
        hits.sort(key=lambda h: (h[0], h[1]))
        return [d for _, _, d in hits]

    def visit(self, callback):
        """Pre-order traversal; a truthy return from ``callback`` skips that node's children."""
        quads = []
        if self.root is not None:
            quads.append((self.root, self._x0, self._y0, self._x1, self._y1))
        while quads:
            node, x0, y0, x1, y1 = quads.pop()
            if not callback(node, x0, y0, x1, y1) and not node.is_leaf:
                xm = (x0 + x1) / 2
                ym = (y0 + y1) / 2
                if node[3] is not None:
                    quads.append((node[3], xm, ym, x1, y1))
                if node[2] is not None:
                    quads.append((node[2], x0, ym, xm, y1))
                if node[1] is not None:
                    quads.append((node[1], xm, y0, x1, ym))
                if node[0] is not None:
                    quads.append((node[0], x0, y0, xm, ym))
        return self

    def visit_after(self, callback):
        """Post-order traversal: children are visited before their parent."""
        quads = []
        order = []
        if self.root is not None:
            quads.append((self.root, self._x0, self._y0, self._x1, self._y1))
        while quads:
            q = quads.pop()
            node, x0, y0, x1, y1 = q
            if not node.is_leaf:
                xm = (x0 + x1) / 2
                ym = (y0 + y1) / 2
                if node[0] is not None:
                    quads.append((node[0], x0, y0, xm, ym))
                if node[1] is not None:
                    quads.append((node[1], xm, y0, x1, ym))
                if node[2] is not None:
                    quads.append((node[2], x0, ym, xm, y1))
                if node[3] is not None:
                    quads.append((node[3], xm, ym, x1, y1))
            order.append(q)
        while order:
            callback(*order.pop())
        return self

    def copy(self):
        clone = QuadTree(self._x, self._y)
        clone._x0, clone._y0, clone._x1, clone._y1 = self._x0, self._y0, self._x1, self._y1
        clone.root = self._copy_node(self.root)
        return clone

    def _copy_node(self, node):
        if node is None:
            return None
        if node.is_leaf:
            return _copy_leaf(node)
        fresh = Node()
        for i, child in enumerate(node.children):
            fresh[i] = self._copy_node(child)
        return fresh


def quadtree(data=None, x=_default_x, y=_default_y):
    tree = QuadTree(x, y)
    if data is not None:
        tree.add_all(data)
    return tree
