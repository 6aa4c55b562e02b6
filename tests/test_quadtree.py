import math
import random

import pytest

from d3_svg_math.errors import ValidationError
from d3_svg_math.quadtree import quadtree


def _diagonal():
    return [(0, 0), (1, 1), (2, 2), (3, 3)]


def test_extent_doubles_to_cover_points():
    q = quadtree(_diagonal())
    assert len(q) == 4
    assert q.extent() == [[0, 0], [4, 4]]
    assert quadtree().extent() is None


def test_find_nearest_with_and_without_radius():
    q = quadtree(_diagonal())
    assert q.find(2.2, 2.1) == (2, 2)
    assert q.find(3.5, 3.5, radius=1) == (3, 3)
    assert q.find(10, 10, radius=1) is None
    assert quadtree().find(0, 0) is None


def test_find_all_orders_by_distance():
    q = quadtree(_diagonal())
    assert q.find_all(1.1, 1.1, 1.6) == [(1, 1), (2, 2), (0, 0)]


def test_remove_by_identity():
    pts = _diagonal()
    q = quadtree(pts)
    q.remove((1, 1.0000001))
    assert len(q) == 4
    q.remove(pts[1])
    assert len(q) == 3
    assert q.find(1.1, 1.1) == (2, 2)
    q.remove_all(pts)
    assert len(q) == 0


def test_coincident_points_share_a_leaf():
    a, b = {"x": 1, "y": 1}, {"x": 1, "y": 1}
    q = quadtree([a, b], x=lambda d: d["x"], y=lambda d: d["y"])
    assert len(q) == 2
    assert q.find(1, 1) in (a, b)
    q.remove(a)
    assert q.data() == [b]


def test_non_finite_points_are_rejected():
    with pytest.raises(ValidationError):
        quadtree([(math.nan, 0)])
    with pytest.raises(ValidationError):
        quadtree().add((0, math.inf))
    with pytest.raises(ValidationError):
        quadtree().add(("a", 0))


def test_visit_pre_and_post_order():
    q = quadtree([(0, 0), (0, 3.5), (3.5, 0), (3.5, 3.5)])
    pre, post = [], []
    q.visit(lambda node, *_: pre.append(node) and False)
    q.visit_after(lambda node, *_: post.append(node))
    assert len(pre) == len(post) == 5
    assert pre[0] is q.root
    assert post[-1] is q.root
    assert sum(1 for n in pre if n.is_leaf) == 4


def test_visit_can_prune():
    q = quadtree(_diagonal())
    seen = []
    q.visit(lambda node, *_: seen.append(node) or True)
    assert seen == [q.root]


def test_copy_is_independent():
    q = quadtree(_diagonal())
    c = q.copy()
    c.add((0.5, 0.5))
    assert len(q) == 4
    assert len(c) == 5
    assert c.extent() == q.extent()


def test_extent_cover_and_accessors():
    q = quadtree().extent([[0, 0], [10, 10]])
    assert q.extent() == [[0, 0], [16, 16]]
    fx = lambda d: d[1]
    q2 = quadtree(x=fx)
    assert q2.x() is fx


def test_find_matches_brute_force():
    rng = random.Random(5)
    pts = [(rng.uniform(-50, 50), rng.uniform(-50, 50)) for _ in range(200)]
    q = quadtree(pts)
    for _ in range(50):
        x, y = rng.uniform(-60, 60), rng.uniform(-60, 60)
        best = min(pts, key=lambda p: (p[0] - x) ** 2 + (p[1] - y) ** 2)
        found = q.find(x, y)
        assert math.dist(found, (x, y)) == pytest.approx(math.dist(best, (x, y)))
    for p in pts[:50]:
        q.remove(p)
    assert len(q) == 150
