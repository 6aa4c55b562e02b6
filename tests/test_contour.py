import math

import numpy as np
import pytest

from d3_svg_math.contour import _ring_area, contour, contours, density, isobands
from d3_svg_math.errors import ConfigurationError, ValidationError

PEAK = [0, 0, 0, 0, 1, 0, 0, 0, 0]

RING = [
    0, 0, 0, 0, 0,
    0, 1, 1, 1, 0,
    0, 1, 0, 1, 0,
    0, 1, 1, 1, 0,
    0, 0, 0, 0, 0,
]


def test_single_peak_is_one_closed_ring():
    c = contour(PEAK, 0.5, (3, 3))
    assert c.value == 0.5
    assert len(c.coordinates) == 1
    (ring,) = c.rings
    assert ring[0] == ring[-1]
    assert _ring_area(ring) > 0
    assert c.area == pytest.approx(0.5)


def test_area_shrinks_as_threshold_rises():
    areas = [contour(PEAK, t, (3, 3)).area for t in (0.25, 0.5, 0.75)]
    assert areas[0] > areas[1] > areas[2] > 0


def test_thresholds_outside_the_data_give_no_rings():
    assert contour(PEAK, 0, (3, 3)).coordinates == []
    assert contour(PEAK, 2, (3, 3)).coordinates == []


def test_holes_attach_to_their_polygon():
    c = contour(RING, 0.5, (5, 5))
    assert len(c.coordinates) == 1
    exterior, hole = c.coordinates[0]
    assert _ring_area(exterior) > 0
    assert _ring_area(hole) < 0
    assert 0 < c.area < abs(_ring_area(exterior)) / 2


def test_missing_samples_count_as_below():
    values = [None] * 9
    values[4] = 1
    c = contour(values, 0.5, (3, 3))
    assert len(c.coordinates) == 1
    assert c.rings[0][0] == c.rings[0][-1]


def test_unsmoothed_rings_sit_on_cell_edges():
    c = contours((3, 3), thresholds=[0.25], smooth=False)(PEAK)[0]
    for x, y in c.rings[0]:
        assert x * 2 == int(x * 2)
        assert y * 2 == int(y * 2)


def test_count_thresholds_are_nice_ticks():
    result = contours((3, 3), thresholds=4)(PEAK)
    assert [c.value for c in result] == pytest.approx([0, 0.2, 0.4, 0.6, 0.8])
    assert result[0].coordinates == []
    assert all(c.coordinates for c in result[1:])


def test_generator_is_copy_on_configure():
    base = contours()
    sized = base.size((3, 3))
    assert base.size() == [1, 1]
    assert sized.size() == [3, 3]
    assert sized.smooth(False).smooth() is False
    assert sized.smooth() is True


def test_grid_errors():
    with pytest.raises(ValidationError):
        contours((3, 3), thresholds=[0.5])([0] * 8)
    with pytest.raises(ConfigurationError):
        contours((-1, 3))
    with pytest.raises(ConfigurationError):
        contour(PEAK, math.nan, (3, 3))


def test_to_geojson():
    geo = contour(PEAK, 0.5, (3, 3)).to_geojson()
    assert geo["type"] == "MultiPolygon"
    assert geo["value"] == 0.5
    assert len(geo["coordinates"]) == 1


def test_band_area_is_difference_of_threshold_areas():
    band = contours((3, 3)).band(PEAK, 0.25, 0.75)
    assert (band.lower, band.upper) == (0.25, 0.75)
    assert band.mid_value == 0.5
    (polygon,) = band.coordinates
    exterior, hole = polygon
    assert _ring_area(exterior) > 0
    assert _ring_area(hole) < 0
    expected = contour(PEAK, 0.25, (3, 3)).area - contour(PEAK, 0.75, (3, 3)).area
    assert band.area == pytest.approx(expected)


def test_band_islands_sit_inside_holes():
    band = contours((5, 5)).band(RING, 0.25, 0.75)
    assert len(band.coordinates) == 2
    assert all(len(polygon) == 2 for polygon in band.coordinates)
    outer, inner = sorted(band.coordinates, key=lambda p: _ring_area(p[0]), reverse=True)
    assert abs(_ring_area(inner[0])) < abs(_ring_area(outer[1]))
    expected = contour(RING, 0.25, (5, 5)).area - contour(RING, 0.75, (5, 5)).area
    assert band.area == pytest.approx(expected)


def test_isobands_partition_the_frame():
    low, high = isobands(PEAK, [0.5, 0, 2], (3, 3))
    assert [(low.lower, low.upper), (high.lower, high.upper)] == [(0, 0.5), (0.5, 2)]
    assert high.area == pytest.approx(contour(PEAK, 0.5, (3, 3)).area)
    (whole,) = isobands(PEAK, [0, 2], (3, 3))
    assert whole.area > 1
    assert low.area + high.area == pytest.approx(whole.area)
    assert low.to_geojson()["upper"] == 0.5


def test_band_edges():
    generator = contours((3, 3))
    assert generator.band(PEAK, 2, 3).coordinates == []
    assert generator.band([5] * 9, 0, 1).coordinates == []
    assert len(generator.thresholds([0.25, 0.5, 0.75]).bands(PEAK)) == 2
    assert generator.thresholds([0.5]).bands(PEAK) == []
    with pytest.raises(ConfigurationError):
        generator.band(PEAK, 0.5, 0.5)
    with pytest.raises(ConfigurationError):
        generator.band(PEAK, math.nan, 1)
    with pytest.raises(ValidationError):
        generator.band([0] * 8, 0, 1)


def test_density_grid_conserves_mass():
    estimator = density(size=(100, 100), cell_size=4, bandwidth=10)
    assert estimator.shape == (40, 40)
    grid = estimator.grid([(50, 50), (40, 60), (55, 45)])
    assert grid.shape == (40, 40)
    assert float(grid.sum()) * 16 == pytest.approx(3, rel=0.02)
    assert np.unravel_index(np.argmax(grid), grid.shape) in {(19, 19), (19, 20), (20, 19), (20, 20)}


def test_density_ignores_points_outside_size():
    estimator = density(size=(100, 100), bandwidth=10)
    assert not estimator.grid([(500, 500)]).any()
    assert estimator([(500, 500)]) == []


def test_density_contours_in_data_space():
    estimator = density(size=(100, 100), cell_size=4, bandwidth=10, thresholds=5)
    result = estimator([(50, 50)] * 3)
    assert result
    for c in result:
        for ring in c.rings:
            for x, y in ring:
                assert -30 <= x <= 130
                assert -30 <= y <= 130


def test_density_weight_scales_grid():
    base = density(size=(100, 100), bandwidth=10)
    heavy = base.weight(lambda d, i: 2.0)
    assert float(heavy.grid([(50, 50)]).sum()) == pytest.approx(2 * float(base.grid([(50, 50)]).sum()))


def test_density_contour_at_value():
    at = density(size=(100, 100), bandwidth=10).contours([(50, 50)])
    assert at.max > 0
    c = at(at.max / 2)
    assert len(c.coordinates) == 1


def test_density_parameters():
    assert density(cell_size=5).cell_size() == 4
    with pytest.raises(ConfigurationError):
        density(cell_size=0.5)
    with pytest.raises(ConfigurationError):
        density(bandwidth=-1)
    with pytest.raises(ValidationError):
        density().grid([(math.nan, 1)])


def test_epanechnikov_kernel_has_compact_support():
    gaussian = density(size=(100, 100), cell_size=4, bandwidth=20)
    compact = gaussian.kernel("epanechnikov")
    assert gaussian.kernel() == "gaussian"
    assert compact.kernel() == "epanechnikov"
    grid = compact.grid([(50, 50)])
    assert float(grid.sum()) * 16 == pytest.approx(1, rel=0.05)
    assert grid[0, 0] == 0
    assert gaussian.grid([(50, 50)])[0, 0] > 0
    for c in compact([(50, 50)]):
        for ring in c.rings:
            for x, y in ring:
                assert 22 <= x <= 78
                assert 22 <= y <= 78


def test_unknown_kernel():
    with pytest.raises(ConfigurationError):
        density(kernel="triangular")
    with pytest.raises(ConfigurationError):
        density().kernel("box")
