import pytest

from d3_svg_math.stack import stack

DATA = [{"a": 1, "b": 2}, {"a": 3, "b": 1}]


def test_stack_default_offset():
    a, b = stack(["a", "b"])(DATA)
    assert a.key == "a"
    assert a == [[0, 1], [0, 3]]
    assert b == [[1, 3], [3, 4]]
    assert a[0].data is DATA[0]
    assert (a.index, b.index) == (0, 1)


def test_stack_reverse_order():
    a, b = stack(["a", "b"], order="reverse")(DATA)
    assert (a.index, b.index) == (1, 0)
    assert b == [[0, 2], [0, 1]]
    assert a == [[2, 3], [1, 4]]


def test_stack_ascending_order():
    a, b = stack(["a", "b"], order="ascending")(DATA)
    assert (a.index, b.index) == (1, 0)


def test_stack_expand():
    a, b = stack(["a", "b"], offset="expand")(DATA)
    assert list(a[0]) == pytest.approx([0, 1 / 3])
    assert list(b[0]) == pytest.approx([1 / 3, 1])
    assert list(b[1]) == pytest.approx([0.75, 1])


def test_stack_diverging():
    a, b = stack(["a", "b"], offset="diverging")([{"a": 1, "b": -2}])
    assert a == [[0, 1]]
    assert b == [[-2, 0]]


def test_stack_silhouette_centres_columns():
    a, b = stack(["a", "b"], offset="silhouette")(DATA)
    assert a[0] == [-1.5, -0.5]
    assert b[0] == [-0.5, 1.5]


def test_stack_wiggle_keeps_thickness():
    series = stack(["a", "b"], offset="wiggle")(DATA)
    for s, key in zip(series, ["a", "b"]):
        for point, row in zip(s, DATA):
            assert point[1] - point[0] == pytest.approx(row[key])


def test_keys_are_copy_on_configure():
    base = stack()
    keyed = base.keys(["a"])
    assert base.keys() == ()
    assert len(keyed(DATA)) == 1
