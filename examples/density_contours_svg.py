"""Density contours of a point cloud, colored with a sequential scale."""

import numpy as np

from d3_svg_math.contour import density
from d3_svg_math.scale import scale_sequential
from d3_svg_math.scheme import interpolate_blues
from d3_svg_math.svg import SVGDocument, render_contours


def main():
    rng = np.random.default_rng(7)
    points = np.concatenate([
        rng.normal((160, 150), 30, size=(300, 2)),
        rng.normal((320, 120), 45, size=(200, 2)),
    ]).tolist()

    estimator = density(size=(480, 300), bandwidth=12, thresholds=12)
    bands = estimator(points)
    color = scale_sequential(interpolate_blues, (0, bands[-1].value))

    svg = SVGDocument(width=480, height=300, bg="#ffffff")
    render_contours(svg, bands, fill=lambda band, *_: color(band.value), stroke="#ffffff", stroke_width=0.5)

    dots = svg.group("points").join("circle", points, r=1.2, fill="#333333")
    dots.attr("cx", lambda d, *_: round(d[0], 2)).attr("cy", lambda d, *_: round(d[1], 2))

    svg.save("density_contours.svg")


if __name__ == "__main__":
    main()
