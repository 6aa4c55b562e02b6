import math

import pytest

from d3_svg_math.errors import ConfigurationError, ValidationError
from d3_svg_math.geo import (
    PROJECTIONS,
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
    graticule,
    graticule10,
    mercator,
    orthographic,
)
from d3_svg_math.path import Path

SPHERE = {"type": "Sphere"}
TRIANGLE = {"type": "Polygon", "coordinates": [[[0, 0], [10, 0], [10, 10], [0, 0]]]}


@pytest.mark.parametrize("name", sorted(PROJECTIONS))
def test_projections_invert(name):
    projection = PROJECTIONS[name]()
    for point in ([0, 0], [10, 20], [-45, 30]):
        assert projection.invert(projection(point)) == pytest.approx(point, abs=1e-4)


def test_projection_defaults():
    assert mercator()([0, 0]) == pytest.approx([480, 250])
    x, y = equirectangular()([180, 0])
    assert x == pytest.approx(480 + 152.63 * math.pi)
    assert y == pytest.approx(250)


def test_projection_is_copy_on_configure():
    base = equirectangular()
    smaller = base.scale(100).translate([0, 0])
    assert base.scale() == 152.63
    assert base.translate() == [480, 250]
    assert smaller([90, 0]) == pytest.approx([50 * math.pi, 0])


def test_projection_rotate_and_center():
    assert equirectangular().rotate([90, 0])([-90, 0]) == pytest.approx([480, 250])
    assert equirectangular().center([10, 20])([10, 20]) == pytest.approx([480, 250])
    with pytest.raises(ConfigurationError):
        equirectangular().rotate([10])


def test_fit_extent_fills_the_box():
    projection = equirectangular().fit_extent([[0, 0], [100, 50]], SPHERE)
    assert projection.scale() == pytest.approx(100 / (2 * math.pi))
    (x0, y0), (x1, y1) = geo_path(projection).bounds(SPHERE)
    assert [x0, y0, x1, y1] == pytest.approx([0, 0, 100, 50], abs=1e-3)


def test_fit_size_rejects_empty_geometry():
    with pytest.raises(ValidationError):
        equirectangular().fit_size([100, 100], {"type": "FeatureCollection", "features": []})


def test_geo_path_without_projection():
    path = geo_path()
    assert path({"type": "LineString", "coordinates": [[0, 0], [10, 10]]}) == "M0,0L10,10"
    assert path(TRIANGLE) == "M0,0L10,0L10,10Z"
    assert path.area(TRIANGLE) == 50
    assert path.centroid(TRIANGLE) == pytest.approx([20 / 3, 10 / 3])
    assert path.measure(TRIANGLE) == pytest.approx(20 + math.sqrt(200))
    assert path.bounds(TRIANGLE) == [[0, 0], [10, 10]]


def test_geo_path_points():
    path = geo_path(point_radius=2)
    assert path({"type": "Point", "coordinates": [1, 2]}) == "M3,2A2,2,0,1,1,-1,2A2,2,0,1,1,3,2"
    assert path.centroid({"type": "MultiPoint", "coordinates": [[0, 0], [4, 2]]}) == [2, 1]


def test_geo_path_features_and_bad_types():
    feature = {"type": "Feature", "geometry": {"type": "LineString", "coordinates": [[0, 0], [1, 1]]}}
    collection = {"type": "FeatureCollection", "features": [feature, feature]}
    assert geo_path()(collection) == "M0,0L1,1M0,0L1,1"
    with pytest.raises(ValidationError):
        geo_path()({"type": "Circle"})


def test_orthographic_hides_the_far_side():
    path = geo_path(orthographic())
    assert path({"type": "Point", "coordinates": [180, 0]}) is None
    assert path({"type": "Point", "coordinates": [0, 0]}).startswith("M")


def test_clip_extent_cuts_lines():
    projection = equirectangular().clip_extent([[0, 0], [480, 250]])
    ctx = Path(digits=None)
    geo_path(projection)({"type": "LineString", "coordinates": [[-10, 10], [10, -10]]}, ctx)
    (move, start), (line, end) = ctx.segments
    assert (move, line) == ("M", "L")
    assert end == pytest.approx((480, 250))
    assert projection.clip_extent() == [[0, 0], [480, 250]]


def test_graticule():
    default = graticule10()
    assert default["type"] == "MultiLineString"
    assert len(graticule().lines()) == len(default["coordinates"])
    ring = graticule().outline()["coordinates"][0]
    assert ring[0] == ring[-1]
    coarse = graticule().step([30, 30])
    assert graticule().step() == [10, 10]
    assert coarse.step() == [30, 30]
    assert len(coarse()["coordinates"]) < len(default["coordinates"])


def test_graticule_projects_to_path():
    assert geo_path(equirectangular())(graticule10()).startswith("M")


def test_spherical_distance_and_length():
    assert geo_distance([0, 0], [180, 0]) == pytest.approx(math.pi)
    assert geo_distance([0, 0], [0, 90]) == pytest.approx(math.pi / 2)
    assert geo_length({"type": "LineString", "coordinates": [[0, 0], [90, 0]]}) == pytest.approx(math.pi / 2)


def test_interpolate_along_great_circle():
    i = geo_interpolate([0, 0], [90, 0])
    assert i.distance == pytest.approx(math.pi / 2)
    assert i(0.5) == pytest.approx([45, 0])
    assert geo_interpolate([10, 10], [10, 10])(0.5) == pytest.approx([10, 10])


def test_area_of_sphere_and_circles():
    assert geo_area(SPHERE) == pytest.approx(4 * math.pi)
    assert geo_area(geo_circle([0, 0], 90)) == pytest.approx(2 * math.pi, abs=1e-6)
    small = geo_area(geo_circle([30, 40], 10))
    assert small == pytest.approx(2 * math.pi * (1 - math.cos(math.radians(10))), rel=1e-2)


def test_contains():
    circle = geo_circle([0, 0], 10)
    assert geo_contains(circle, [0, 0])
    assert not geo_contains(circle, [50, 0])
    assert geo_contains(SPHERE, [123, -45])
    assert geo_contains({"type": "LineString", "coordinates": [[0, 0], [20, 0]]}, [10, 0])
    assert geo_contains({"type": "Point", "coordinates": [1, 2]}, [1, 2])


def test_centroid():
    assert geo_centroid({"type": "Point", "coordinates": [10, 20]}) == pytest.approx([10, 20])
    assert geo_centroid({"type": "MultiPoint", "coordinates": [[0, 0], [90, 0]]}) == pytest.approx([45, 0])
    assert geo_centroid(geo_circle([20, 30], 5)) == pytest.approx([20, 30], abs=1e-6)


def test_bounds():
    assert geo_bounds({"type": "MultiPoint", "coordinates": [[-10, -5], [20, 15]]}) == [[-10, -5], [20, 15]]
    west_east = geo_bounds({"type": "MultiPoint", "coordinates": [[170, 0], [-170, 10]]})
    assert west_east == [[170, 0], [-170, 10]]
    assert geo_bounds(SPHERE) == [[-180, -90], [180, 90]]


def test_rotation_round_trip():
    r = geo_rotation([30, -20, 10])
    p = r([12, 34])
    assert r.invert(p) == pytest.approx([12, 34])
    assert geo_rotation([90, 0])([0, 0]) == pytest.approx([90, 0])


def test_circle_ring():
    ring = geo_circle([0, 0], 10, 6)["coordinates"][0]
    assert len(ring) == 61
    assert ring[0] == pytest.approx(ring[-1])
    for point in ring:
        assert geo_distance([0, 0], point) == pytest.approx(math.radians(10))
