"""An orthographic globe: graticule, outline and a few small circles."""

from d3_svg_math.geo import geo_circle, geo_path, orthographic
from d3_svg_math.svg import SVGDocument, render_graticule


def main():
    projection = orthographic().rotate([-20, -30]).fit_size([400, 400], {"type": "Sphere"})

    svg = SVGDocument(width=400, height=400, bg="#ffffff")
    svg.path(geo_path(projection, digits=2)({"type": "Sphere"}), fill="#eef4fb")
    render_graticule(svg, projection, digits=2)

    path = geo_path(projection, digits=2)
    circles = svg.group("circles")
    for lon, lat in [(0, 51.5), (139.7, 35.7), (-74, 40.7), (28, -26)]:
        svg.path(path(geo_circle([lon, lat], 5)), parent=circles, fill="#d62728", fill_opacity=0.6)

    svg.save("world_graticule.svg")


if __name__ == "__main__":
    main()
