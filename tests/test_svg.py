import gc
import weakref

import igraph as ig
import pytest
from lxml import etree

from d3_svg_math.contour import ContourGenerator
from d3_svg_math.delaunay import Delaunay
from d3_svg_math.errors import ConfigurationError, ValidationError
from d3_svg_math.geo import equirectangular, graticule
from d3_svg_math.svg import (
    SVG_NS,
    Selection,
    SVGDocument,
    render_contours,
    render_graph,
    render_graticule,
    render_voronoi,
)

SQUARE = [(0, 0), (1, 0), (1, 1), (0, 1), (0.5, 0.5)]


class _Datum:
    pass


def test_attr_name_conversion_and_data_binding():
    svg = SVGDocument(width=200, height=100)
    group = svg.append("g")
    data = [{"cx": 10, "cy": 15}, {"cx": 40, "cy": 35.5}]
    nodes = [group.append("circle").elements[0] for _ in data]

    sel = Selection(nodes).data(data)
    sel.attr("stroke_width", 2)
    sel.attr("cx", lambda d, *_: d["cx"]).attr("cy", lambda d, *_: d["cy"])

    assert nodes[0].get("stroke-width") == "2"
    assert nodes[0].get("cx") == "10"
    assert nodes[1].get("cy") == "35.5"
    assert sel.attr("cx") == "10"
    assert sel.data() == data


def test_bound_data_is_scoped_to_its_document():
    first, second = SVGDocument(), SVGDocument()
    first.group("a").join("rect", [1, 2])
    second.group("b").join("rect", [3])
    assert first.select_all("rect").data() == [1, 2]
    assert second.select_all("rect").data() == [3]


def test_bound_data_is_released_with_its_document():
    datum = _Datum()
    ref = weakref.ref(datum)
    svg = SVGDocument()
    rows = svg.group("rows").join("rect", [datum])
    assert svg.select("rect").datum() is datum
    del svg, rows, datum
    gc.collect()
    assert ref() is None


def test_data_length_must_match():
    svg = SVGDocument()
    with pytest.raises(ValidationError):
        svg.append("g").data([1, 2])


def test_join_style_and_sort():
    svg = SVGDocument()
    rows = svg.group("rows").join("rect", [3, 1, 2], height=1)
    rows.attr("width", lambda d, i, el: d * 10).style(fill="red", stroke_width=1)
    assert [el.get("width") for el in rows] == ["30", "10", "20"]
    assert rows.elements[0].get("style") == "fill:red;stroke-width:1"

    rows.sort()
    assert rows.data() == [1, 2, 3]
    parent = rows.elements[0].getparent()
    assert [el.get("width") for el in parent] == ["10", "20", "30"]

    rows.sort(cmp=lambda a, b: b - a)
    assert rows.data() == [3, 2, 1]


def test_select_all_uses_svg_namespace():
    svg = SVGDocument()
    svg.group("a").append("circle", r=1)
    svg.group("b").append("circle", r=2)
    circles = svg.select_all("circle")
    assert len(circles) == 2
    circles.attrs(font_weight="600")
    assert all(c.get("font-weight") == "600" for c in circles)
    assert svg.select("g.b circle").attr("r") == "2"
    svg.select("g.a").remove()
    assert len(svg.select_all("circle")) == 1


def test_document_round_trip_and_style():
    svg = SVGDocument(width=120, height=60, bg="#ffffff")
    svg.add_style(".cell { fill: none; }")
    svg.path("M0,0L1,1", stroke="black")
    assert len(svg.path("")) == 0
    text = svg.to_string(pretty=False)
    root = etree.fromstring(text.encode("utf-8"))
    assert root.tag == f"{{{SVG_NS}}}svg"
    assert root[0].tag.endswith("}style")
    again = SVGDocument.from_string(text)
    assert again.width == "120"
    assert again.select("path").attr("d") == "M0,0L1,1"


def test_render_graph_from_triangulation():
    g = Delaunay(SQUARE).to_graph()
    g.vs["Color"] = ["#ff0000"] * g.vcount()
    svg = SVGDocument()
    edges, nodes = render_graph(svg, g)
    assert len(edges) == g.ecount()
    assert len(nodes) == g.vcount()
    assert nodes.elements[0].get("fill") == "#ff0000"
    assert nodes.elements[0].get("stroke") == "#b20000"
    assert nodes.data()[4].index == 4


def test_render_graph_requires_positions():
    g = ig.Graph.Ring(3)
    svg = SVGDocument()
    with pytest.raises(ConfigurationError):
        render_graph(svg, g)
    with pytest.raises(ValidationError):
        render_graph(svg, g, positions=[(0, 0)])
    edges, nodes = render_graph(svg, g, positions=[(0, 0), (10, 0), (5, 5)])
    assert edges.elements[0].get("x2") == "10"


def test_render_contours_binds_bands():
    values = [0, 0, 0, 0, 1, 0, 0, 0, 0]
    bands = ContourGenerator(size=(3, 3), thresholds=[0.5])(values)
    svg = SVGDocument()
    sel = render_contours(svg, bands, fill=lambda c, i: "#000000")
    assert len(sel) == 1
    assert sel.datum().value == 0.5
    assert sel.attr("fill") == "#000000"
    assert sel.attr("class") == "contour"


def test_render_voronoi_cells_and_bounds():
    voronoi = Delaunay(SQUARE).voronoi([0, 0, 1, 1])
    svg = SVGDocument()
    cells = render_voronoi(svg, voronoi)
    assert cells.data() == [0, 1, 2, 3, 4]
    assert svg.select("path.bounds").attr("d") == "M0,0h1v1h-1Z"


def test_render_graticule():
    svg = SVGDocument()
    lines = render_graticule(svg, equirectangular(), graticule().step([30, 30]), digits=2)
    assert len(lines) > 0
    assert all(el.get("d").startswith("M") for el in lines)
    assert len(svg.select_all("path.outline")) == 1
