"""Minimal lxml-backed SVG document with d3-like selections.

The geometry modules produce SVG path data; this module places it into a
document. ``render_*`` helpers cover the common cases (contour bands,
Voronoi cells, graticules, triangulation graphs) and return the
:class:`Selection` of the created elements so callers can restyle them.
"""

from functools import cmp_to_key, lru_cache

import structlog
from cssselect import GenericTranslator
from lxml import etree
from lxml.cssselect import CSSSelector

from ._format import format_number
from .errors import ConfigurationError, ValidationError
from .geo import GeoPath, Graticule

logger = structlog.get_logger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
NSMAP = {None: SVG_NS}


class _SVGDefaultNamespaceTranslator(GenericTranslator):
    """Ensure bare element selectors target the SVG namespace."""

    def __init__(self, default_prefix="svg"):
        super().__init__()
        self._default_prefix = default_prefix

    def xpath_element(self, selector):
        if self._default_prefix and selector.namespace is None and selector.element is not None:
            selector = selector.__class__(self._default_prefix, selector.element)
        return super().xpath_element(selector)


_SVG_NAMESPACE_PREFIX = "svg"
_SVG_CSS_TRANSLATOR = _SVGDefaultNamespaceTranslator(default_prefix=_SVG_NAMESPACE_PREFIX)
_SVG_CSS_NAMESPACES = {_SVG_NAMESPACE_PREFIX: SVG_NS}


@lru_cache(maxsize=128)
def _svg_css_selector(css):
    return CSSSelector(css, translator=_SVG_CSS_TRANSLATOR, namespaces=_SVG_CSS_NAMESPACES)


def _normalize_attr_name(name):
    """Convert pythonic attr names (stroke_width) into SVG attrs (stroke-width)."""
    return name.replace("_", "-")


def _attr_value(value):
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)


def _el(tag, **attrs):
    el = etree.Element(f"{{{SVG_NS}}}{tag}", nsmap=NSMAP)
    for k, v in attrs.items():
        if v is not None:
            el.set(_normalize_attr_name(k), _attr_value(v))
    return el


def _hex_components(color):
    if not isinstance(color, str):
        return None
    c = color.strip()
    if c.startswith("#"):
        c = c[1:]
    if len(c) == 3:
        c = "".join(ch * 2 for ch in c)
    if len(c) != 6:
        return None
    try:
        return tuple(int(c[i : i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        return None


def _darker_hex(color, factor=0.7):
    comps = _hex_components(color)
    if not comps:
        return color
    darker = tuple(max(0, min(255, int(c * factor))) for c in comps)
    return "#%02x%02x%02x" % darker


def _attr_lookup(obj, candidates, default=None):
    for key in candidates:
        try:
            val = obj[key]
        except (KeyError, ValueError):
            continue
        if val is not None:
            return val
    return default


def _as_float(value, default=None):
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


class Selection:
    """A list of elements with data bound per element.

    Bound data lives in a store shared by a document and every selection
    derived from it, and is released with them.
    """

    def __init__(self, elements, bindings=None):
        self.elements = elements
        self._bindings = {} if bindings is None else bindings

    def __len__(self):
        return len(self.elements)

    def __iter__(self):
        return iter(self.elements)

    def _derive(self, elements):
        return Selection(elements, self._bindings)

    def _get_data(self, el):
        # the stored element keeps its lxml proxy, and so its id, alive
        binding = self._bindings.get(id(el))
        if binding and binding[0] is el:
            return binding[1]
        return None

    def _set_data(self, el, value):
        self._bindings[id(el)] = (el, value)

    def append(self, tag, **attrs):
        """Append a child to every element in the selection; returns a Selection of the new nodes."""
        kids = []
        for el in self.elements:
            child = _el(tag, **attrs)
            self._set_data(child, self._get_data(el))
            el.append(child)
            kids.append(child)
        return self._derive(kids)

    def attr(self, name, value=None):
        """
        Set an attribute on all elements (returns self), or get the first value if value is None.
        Callables receive ``(datum, index, element)``.
        """
        attr_name = _normalize_attr_name(name)
        if value is None:
            return self.elements[0].get(attr_name) if self.elements else None
        for idx, el in enumerate(self.elements):
            val = value
            if callable(value):
                val = value(self._get_data(el), idx, el)
            if val is None:
                continue
            el.set(attr_name, _attr_value(val))
        return self

    def attrs(self, **kvs):
        for k, v in kvs.items():
            self.attr(k, v)
        return self

    def style(self, **kvs):
        """Merge into the 'style' attribute: style(fill='red', stroke='black')."""
        for idx, el in enumerate(self.elements):
            current = {}
            if el.get("style"):
                for pair in el.get("style").split(";"):
                    if pair.strip():
                        k, _, v = pair.partition(":")
                        current[k.strip()] = v.strip()
            for k, v in kvs.items():
                val = v
                if callable(v):
                    val = v(self._get_data(el), idx, el)
                if val is None:
                    continue
                current[_normalize_attr_name(k)] = _attr_value(val)
            el.set("style", ";".join(f"{k}:{v}" for k, v in current.items()))
        return self

    def text(self, s):
        for idx, el in enumerate(self.elements):
            val = s
            if callable(s):
                val = s(self._get_data(el), idx, el)
            if val is None:
                continue
            el.text = str(val)
        return self

    def datum(self, value=None):
        """Get or set bound data on the selection."""
        if value is None:
            return self._get_data(self.elements[0]) if self.elements else None
        for idx, el in enumerate(self.elements):
            current = self._get_data(el)
            new_val = value(current, idx, el) if callable(value) else value
            self._set_data(el, new_val)
        return self

    def data(self, data_iterable=None):
        """Bind a sequence of data (one per element), or read the bound data when called bare."""
        if data_iterable is None:
            return [self._get_data(el) for el in self.elements]
        data_list = list(data_iterable)
        if len(data_list) != len(self.elements):
            raise ValidationError("Selection.data requires len(data) == number of selected elements")
        for el, datum in zip(self.elements, data_list):
            self._set_data(el, datum)
        return self

    def join(self, tag, data, **attrs):
        """Append one ``tag`` child per datum under the first element; returns the new Selection."""
        if not self.elements:
            return self._derive([])
        parent = self.elements[0]
        kids = []
        for idx, datum in enumerate(data):
            child = _el(tag)
            self._set_data(child, datum)
            parent.append(child)
            kids.append(child)
        return self._derive(kids).attrs(**attrs)

    def remove(self):
        for el in self.elements:
            parent = el.getparent()
            if parent is not None:
                parent.remove(el)
        return self

    def select(self, css):
        """Select first match under each element; returns a Selection of all matches."""
        sel = _svg_css_selector(css)
        found = []
        for el in self.elements:
            matches = sel(el)
            if not matches:
                continue
            match = matches[0]
            self._set_data(match, self._get_data(el))
            found.append(match)
        return self._derive(found)

    def select_all(self, css):
        sel = _svg_css_selector(css)
        found = []
        for el in self.elements:
            found.extend(sel(el))
        return self._derive(found)

    def sort(self, key=None, cmp=None, reverse=False):
        """Reorder the elements (and their document order) by bound datum."""
        elements = list(self.elements)
        if not elements:
            return self
        data_items = [self._get_data(el) for el in elements]
        indices = list(range(len(elements)))
        if cmp is not None:
            indices.sort(key=cmp_to_key(lambda i, j: cmp(data_items[i], data_items[j])), reverse=reverse)
        else:

            def sort_key(i):
                value = key(data_items[i]) if key is not None else data_items[i]
                return (value is None, value)

            indices.sort(key=sort_key, reverse=reverse)
        ordered = [elements[i] for i in indices]
        for el in ordered:
            parent = el.getparent()
            if parent is not None:
                parent.append(el)
        self.elements[:] = ordered
        return self


class SVGDocument:
    def __init__(self, width=960, height=500, viewBox=None, bg=None):
        self.width = width
        self.height = height
        self.root = _el("svg", width=width, height=height)
        self._bindings = {}
        if viewBox:
            self.root.set("viewBox", viewBox)
        if bg:
            self.root.append(_el("rect", x=0, y=0, width="100%", height="100%", fill=bg))

    @classmethod
    def from_string(cls, svg_text):
        doc = cls.__new__(cls)
        doc.root = etree.fromstring(svg_text.encode("utf-8"))
        doc._bindings = {}
        doc.width = doc.root.get("width")
        doc.height = doc.root.get("height")
        return doc

    @classmethod
    def from_file(cls, path):
        with open(path, "rb") as f:
            root = etree.parse(f).getroot()
        doc = cls.__new__(cls)
        doc.root = root
        doc._bindings = {}
        doc.width = root.get("width")
        doc.height = root.get("height")
        return doc

    def _selection(self, elements):
        return Selection(elements, self._bindings)

    def select(self, css):
        sel = _svg_css_selector(css)
        return self._selection(sel(self.root)[:1])

    def select_all(self, css):
        sel = _svg_css_selector(css)
        return self._selection(sel(self.root))

    def append(self, tag, **attrs):
        child = _el(tag, **attrs)
        self.root.append(child)
        return self._selection([child])

    def group(self, class_name=None, **attrs):
        if class_name:
            attrs["class"] = class_name
        return self.append("g", **attrs)

    def path(self, d, parent=None, **attrs):
        """Append a ``<path>`` with data ``d``; empty path data is skipped (returns an empty Selection)."""
        if not d:
            return self._selection([])
        target = parent if parent is not None else self._selection([self.root])
        return target.append("path", d=d, **attrs)

    def add_style(self, css_text, **attrs):
        style_attrs = {"type": "text/css"}
        style_attrs.update({_normalize_attr_name(k): v for k, v in attrs.items()})
        style_el = _el("style", **style_attrs)
        style_el.text = css_text
        self.root.insert(0, style_el)
        return self._selection([style_el])

    def to_string(self, pretty=True):
        return etree.tostring(self.root, pretty_print=pretty, encoding="unicode")

    def save(self, path, pretty=True):
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.to_string(pretty=pretty))


# ----------------------------------------------------------------------
# geometry renderers
def _resolve(value, datum, idx):
    return value(datum, idx) if callable(value) else value


def render_contours(doc, contours, path=None, fill="#4C78A8", stroke="none", **attrs):
    """One ``<path class="contour">`` per contour band, bound to its :class:`Contour`.

    ``path`` is a :class:`GeoPath` used to draw the MultiPolygons; the default
    draws grid coordinates unprojected. ``fill`` may be a color or a
    ``fill(contour, index)`` callable such as a sequential scale wrapper.
    """
    path = path or GeoPath()
    layer = doc.group("contours")
    elements = []
    for idx, c in enumerate(contours):
        d = path(c.to_geojson())
        if not d:
            continue
        sel = layer.append("path", d=d, fill=_resolve(fill, c, idx), stroke=stroke, **{"class": "contour"})
        sel.attrs(**attrs)
        sel._set_data(sel.elements[0], c)
        elements.append(sel.elements[0])
    logger.debug("contours rendered", bands=len(elements))
    return layer._derive(elements)


def render_voronoi(doc, voronoi, fill="none", stroke="#999999", bounds_stroke="#333333", **attrs):
    """Voronoi cells as ``<path class="cell">`` bound to point indices, plus the clip bounds."""
    layer = doc.group("voronoi")
    elements = []
    for i in range(len(voronoi.delaunay.points)):
        d = voronoi.render_cell(i)
        if not d:
            continue
        sel = layer.append("path", d=d, fill=_resolve(fill, i, i), stroke=stroke, **{"class": "cell"})
        sel.attrs(**attrs)
        sel._set_data(sel.elements[0], i)
        elements.append(sel.elements[0])
    if bounds_stroke:
        layer.append("path", d=voronoi.render_bounds(), fill="none", stroke=bounds_stroke, **{"class": "bounds"})
    return layer._derive(elements)


def render_graticule(doc, projection, graticule=None, stroke="#cccccc", outline_stroke="#333333",
                     stroke_width=0.5, digits=None):
    """Graticule lines and outline through ``projection``; returns the line Selection."""
    graticule = graticule or Graticule()
    path = GeoPath(projection, digits=digits)
    layer = doc.group("graticule")
    elements = []
    for line in graticule.lines():
        d = path(line)
        if not d:
            continue
        sel = layer.append("path", d=d, fill="none", stroke=stroke, stroke_width=stroke_width,
                           **{"class": "graticule-line"})
        sel._set_data(sel.elements[0], line)
        elements.append(sel.elements[0])
    if outline_stroke:
        outline = path(graticule.outline())
        if outline:
            layer.append("path", d=outline, fill="none", stroke=outline_stroke, **{"class": "outline"})
    return layer._derive(elements)


def render_graph(doc, graph, positions=None, node_radius=3.0, node_fill="#4C78A8", edge_stroke="#999999",
                 edge_width=1.0):
    """Draw an igraph Graph (e.g. :meth:`Delaunay.to_graph`) as lines and circles.

    Vertex ``Color``/``Size`` and edge ``Color``/``Width`` attributes override
    the defaults. Returns ``(edges, nodes)`` selections bound to igraph
    edges and vertices.
    """
    if positions is None:
        if "Position" not in graph.vs.attribute_names():
            raise ConfigurationError("render_graph requires positions or a 'Position' vertex attribute")
        positions = graph.vs["Position"]
    positions = [(float(p[0]), float(p[1])) for p in positions]
    if len(positions) != graph.vcount():
        raise ValidationError("positions must match the number of vertices")

    edge_layer = doc.group("edges")
    node_layer = doc.group("nodes")

    edge_elements = []
    edges = list(graph.es)
    for edge in edges:
        (sx, sy), (tx, ty) = positions[edge.source], positions[edge.target]
        stroke = _attr_lookup(edge, ["Color", "color", "stroke"], edge_stroke)
        width = _as_float(_attr_lookup(edge, ["Width", "width", "stroke_width"]), edge_width)
        sel = edge_layer.append("line", x1=sx, y1=sy, x2=tx, y2=ty, stroke=stroke, stroke_width=width)
        edge_elements.append(sel.elements[0])

    node_elements = []
    vertices = list(graph.vs)
    for vertex, (x, y) in zip(vertices, positions):
        fill = _attr_lookup(vertex, ["Color", "color", "fill"], node_fill)
        radius = _as_float(_attr_lookup(vertex, ["Size", "size", "radius"]), node_radius)
        sel = node_layer.append("circle", cx=x, cy=y, r=radius, fill=fill, stroke=_darker_hex(fill))
        node_elements.append(sel.elements[0])

    edges_sel = edge_layer._derive(edge_elements)
    nodes_sel = node_layer._derive(node_elements)
    if edge_elements:
        edges_sel.data(edges)
    if node_elements:
        nodes_sel.data(vertices)
    logger.debug("graph rendered", vertices=len(vertices), edges=len(edges))
    return edges_sel, nodes_sel
