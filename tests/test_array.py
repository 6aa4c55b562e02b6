import math

import pytest

from d3_svg_math import array
from d3_svg_math.errors import ConfigurationError


def test_summaries_ignore_missing_values():
    values = [3, None, 1, float("nan"), 4, 1, 5]
    assert array.min_(values) == 1
    assert array.max_(values) == 5
    assert array.extent(values) == [1, 5]
    assert array.sum_(values) == 14
    assert array.count(values) == 5
    assert array.mean(values) == pytest.approx(2.8)


def test_summaries_of_empty_input():
    assert array.min_([]) is None
    assert array.extent([]) == [None, None]
    assert array.mean([]) is None
    assert array.median([]) is None
    assert array.variance([1]) is None


def test_accessor_receives_datum_and_index():
    data = [{"v": 2}, {"v": 8}]
    assert array.max_(data, lambda d, i: d["v"] + i) == 9
    assert array.mean(data, lambda d, i: d["v"]) == 5


def test_variance_and_deviation_are_sample_statistics():
    values = [5, 1, 2, 3, 4]
    assert array.variance(values) == pytest.approx(2.5)
    assert array.deviation(values) == pytest.approx(math.sqrt(2.5))


def test_quantiles_use_linear_interpolation():
    values = [3, 6, 7, 8, 8, 10, 13, 15, 16, 20]
    assert array.quantile(values, 0) == 3
    assert array.quantile(values, 0.25) == pytest.approx(7.25)
    assert array.quantile(values, 0.5) == pytest.approx(9)
    assert array.quantile(values, 1) == 20
    assert array.median([1, 3, 2]) == 2
    assert array.quantile_sorted([0, 10], 0.3) == pytest.approx(3)


def test_cumsum_carries_over_missing():
    assert array.cumsum([1, None, 2, 3]) == [1, 1, 3, 6]


def test_bisect_family():
    a = [1, 2, 2, 3]
    assert array.bisect_left(a, 2) == 1
    assert array.bisect_right(a, 2) == 3
    assert array.bisect_center([0, 10, 20], 14) == 1
    assert array.bisect_center([0, 10, 20], 16) == 2
    assert array.bisect_center([0, 10, 20], 4) == 0
    assert array.bisect_center([0, 10, 20], 5) == 1


@pytest.mark.parametrize(
    "start, stop, count, expected",
    [
        (0, 1, 10, [0, 0.1, 0.2, 0.3, 0.4, 0.5, 0.6, 0.7, 0.8, 0.9, 1]),
        (0, 10, 5, [0, 2, 4, 6, 8, 10]),
        (1, 0, 5, [1, 0.8, 0.6, 0.4, 0.2, 0]),
        (5, 5, 10, [5]),
    ],
)
def test_ticks(start, stop, count, expected):
    assert array.ticks(start, stop, count) == pytest.approx(expected)


def test_ticks_with_no_room_is_empty():
    assert array.ticks(0, 1, 0) == []


def test_tick_increment_and_step():
    assert array.tick_increment(0, 1, 10) == -10
    assert array.tick_increment(0, 100, 10) == 10
    assert array.tick_step(0, 1, 10) == pytest.approx(0.1)
    assert array.tick_step(100, 0, 10) == -10


def test_nice_extends_to_tick_boundaries():
    assert array.nice(0.5, 9.5, 10) == [0, 10]
    assert array.nice(1.1, 10.9, 10) == [1, 11]
    assert array.nice(0, 97, 10) == [0, 100]


def test_range_matches_half_open_interval():
    assert array.range_(5) == [0, 1, 2, 3, 4]
    assert array.range_(0, 1, 0.25) == [0, 0.25, 0.5, 0.75]
    assert array.range_(3, 1) == []


def test_bin_with_default_thresholds():
    bins = array.bin_()([0, 1, 2, 3, 4, 5, 6, 7, 8, 9])
    assert sum(len(b) for b in bins) == 10
    assert bins[0].x0 == 0
    assert bins[-1].x1 >= 9
    for b in bins:
        assert all(b.x0 <= v < b.x1 for v in b)


def test_bin_with_explicit_thresholds_and_domain():
    gen = array.bin_(domain=[0, 10], thresholds=[2.5, 5, 7.5])
    bins = gen([1, 3, 4, 6, 9, 10, 11])
    assert [len(b) for b in bins] == [1, 2, 1, 2]
    assert (bins[1].x0, bins[1].x1) == (2.5, 5)


def test_bin_rejects_malformed_domain():
    with pytest.raises(ConfigurationError):
        array.bin_().domain([0, 1, 2])


def test_threshold_sturges():
    assert array.threshold_sturges(range(8)) == 4
    assert array.threshold_sturges([]) == 1


def test_sequence_transforms():
    assert array.pairs([1, 2, 3]) == [(1, 2), (2, 3)]
    assert array.pairs([1, 4, 9], lambda a, b: b - a) == [3, 5]
    assert array.transpose([[1, 2, 3], [4, 5]]) == [[1, 4], [2, 5]]
    assert array.zip_([1, 2], [3, 4]) == [[1, 3], [2, 4]]
    assert array.merge([[1], [2, 3]]) == [1, 2, 3]
    assert array.cross([1, 2], "ab") == [(1, "a"), (1, "b"), (2, "a"), (2, "b")]


def test_group_nests_in_first_seen_order():
    data = [("b", 1), ("a", 2), ("b", 3)]
    grouped = array.group(data, lambda d: d[0])
    assert list(grouped) == ["b", "a"]
    assert grouped["b"] == [("b", 1), ("b", 3)]


def test_comparators_mirror_d3():
    assert array.ascending(1, 2) == -1
    assert array.descending(1, 2) == 1
    assert math.isnan(array.ascending(None, 1))
