"""Voronoi cells with the Delaunay triangulation drawn on top."""

import numpy as np

from d3_svg_math.delaunay import Delaunay
from d3_svg_math.scheme import tableau10
from d3_svg_math.svg import SVGDocument, render_graph, render_voronoi


def main():
    width, height = 500, 300
    rng = np.random.default_rng(3)
    points = rng.uniform((10, 10), (width - 10, height - 10), size=(60, 2)).tolist()

    tri = Delaunay(points)
    voronoi = tri.voronoi((0, 0, width, height))

    svg = SVGDocument(width=width, height=height, bg="#fafafa")
    render_voronoi(svg, voronoi, fill=lambda i, *_: tableau10[i % len(tableau10)], stroke="#ffffff")

    graph = tri.to_graph()
    graph.es["Width"] = [0.5] * graph.ecount()
    edges, nodes = render_graph(svg, graph, node_radius=2, node_fill="#222222", edge_stroke="#555555")
    nodes.attr("opacity", 0.8)

    svg.save("voronoi.svg")


if __name__ == "__main__":
    main()
