import math

import pytest

from d3_svg_math.symbol import SYMBOLS, symbol


def test_square_symbol():
    assert symbol("square", 64)() == "M-4,-4h8v8h-8Z"


def test_size_accessor():
    gen = symbol("square").size(lambda d, i: d)
    assert gen(16) == "M-2,-2h4v4h-4Z"


def test_circle_area():
    out = symbol()()
    r = math.sqrt(64 / math.pi)
    assert out.startswith("M" + repr(r) + ",0")
    assert out.count("A") == 2


def test_type_by_name_is_copy_on_configure():
    base = symbol()
    star = base.type("star")
    assert base.type().name == "circle"
    assert star.type().name == "star"


@pytest.mark.parametrize("name", sorted(SYMBOLS))
def test_every_symbol_draws(name):
    out = symbol(name, 100)()
    assert out.startswith("M")


def test_unknown_symbol():
    with pytest.raises(KeyError):
        symbol("hexagon")
