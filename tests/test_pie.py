import math

import pytest

from d3_svg_math.errors import ValidationError
from d3_svg_math.path import Path
from d3_svg_math.pie import arc, pie


def _segments(gen, d=None):
    ctx = Path(digits=None)
    assert gen.context(ctx)(d) is None
    return ctx.segments


def test_quarter_sector():
    segs = _segments(arc(inner_radius=0, outer_radius=100, start_angle=0, end_angle=math.pi / 2))
    assert [c for c, _ in segs] == ["M", "A", "L", "Z"]
    assert segs[0][1] == pytest.approx((0, -100))
    assert segs[1][1] == (100.0, 100.0, 0, 0, 1, 100.0, 0.0)
    assert segs[2][1] == (0.0, 0.0)


def test_full_circle_and_annulus():
    full = _segments(arc(inner_radius=0, outer_radius=100, start_angle=0, end_angle=2 * math.pi))
    assert [c for c, _ in full] == ["M", "A", "A", "Z"]

    ring = _segments(arc(inner_radius=50, outer_radius=100, start_angle=0, end_angle=math.pi / 2))
    assert [c for c, _ in ring] == ["M", "A", "L", "A", "Z"]


def test_zero_radius_collapses_to_origin():
    assert arc(inner_radius=0, outer_radius=0, start_angle=0, end_angle=1)() == "M0,0Z"


def test_nan_radius_rejected():
    with pytest.raises(ValidationError):
        arc(inner_radius=0, outer_radius=math.nan, start_angle=0, end_angle=1)()


def test_centroid():
    c = arc(inner_radius=0, outer_radius=100, start_angle=0, end_angle=math.pi / 2).centroid()
    assert c == pytest.approx([50 * math.sqrt(0.5), -50 * math.sqrt(0.5)])


def test_corner_radius_and_padding_still_draw():
    gen = arc(inner_radius=40, outer_radius=100, start_angle=0, end_angle=1, corner_radius=5, pad_angle=0.05)
    out = gen()
    assert out.startswith("M")
    assert out.endswith("Z")


def test_pie_sorts_by_descending_value():
    arcs = pie()([1, 1, 2])
    assert [a.index for a in arcs] == [1, 2, 0]
    assert arcs[2].start_angle == 0
    assert arcs[2].end_angle == pytest.approx(math.pi)
    assert arcs[0].start_angle == pytest.approx(math.pi)
    assert arcs[1].end_angle == pytest.approx(2 * math.pi)


def test_pie_input_order_and_angles():
    arcs = pie(sort_values=None, end_angle=math.pi)([1, 1])
    assert arcs[0].start_angle == 0
    assert arcs[0].end_angle == pytest.approx(math.pi / 2)
    assert arcs[1].end_angle == pytest.approx(math.pi)


def test_pie_padding_and_non_positive_values():
    arcs = pie(sort_values=None, pad_angle=0.1)([1, 1])
    assert arcs[0].pad_angle == 0.1
    assert arcs[0].end_angle == pytest.approx(math.pi)

    zeroed = pie(sort_values=None)([2, -1, 2])
    assert zeroed[1].end_angle - zeroed[1].start_angle == 0
    assert pie()([]) == []


def test_pie_value_accessor_and_arc_rendering():
    data = [{"name": "a", "n": 3}, {"name": "b", "n": 1}]
    arcs = pie(value=lambda d, i: d["n"])(data)
    assert arcs[0].data is data[0]
    assert arcs[0].value == 3
    path = arc(inner_radius=0, outer_radius=50)(arcs[0])
    assert path.startswith("M") and path.endswith("Z")
