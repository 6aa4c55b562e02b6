import math
from pathlib import Path

import pytest

from d3_svg_math.errors import ConfigurationError, ValidationError
from d3_svg_math.golden import (
    GoldenCase,
    GoldenFile,
    compare,
    discover,
    load_golden,
    run_case,
    run_file,
)
from d3_svg_math.settings import get_settings

GOLDEN_DIR = Path(__file__).parent / "golden"


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.mark.parametrize("path", discover(GOLDEN_DIR), ids=lambda p: f"{p.parent.name}/{p.name}")
def test_golden_file_matches(path):
    results = run_file(load_golden(path))
    assert results
    failures = {name: diffs for name, diffs in results.items() if diffs}
    assert not failures


def test_discover_uses_configured_directory(monkeypatch):
    monkeypatch.setenv("D3_SVG_MATH_GOLDEN_DIR", str(GOLDEN_DIR))
    assert discover() == discover(GOLDEN_DIR)


def test_discover_without_directory(monkeypatch):
    monkeypatch.delenv("D3_SVG_MATH_GOLDEN_DIR", raising=False)
    with pytest.raises(ConfigurationError):
        discover()


def test_load_golden_rejects_malformed(tmp_path):
    bad = tmp_path / "bad.json"
    bad.write_text('{"module": "d3-scale", "test_cases": [{"inputs": [1]}]}')
    with pytest.raises(ValidationError):
        load_golden(bad)


def test_tolerance_defaults_to_settings(monkeypatch):
    monkeypatch.setenv("D3_SVG_MATH_GOLDEN_TOLERANCE", "0.01")
    golden = GoldenFile(module="d3-ease", function="ease", test_cases=[])
    assert golden.tolerance == 0.01


def test_compare_numbers_and_nulls():
    assert compare(1.0000001, 1, 1e-6) == []
    assert compare(math.nan, None, 1e-6) == []
    assert compare(None, None, 1e-6) == []
    assert compare(1.1, 1, 1e-6)
    assert compare(True, 1, 1e-6)
    assert compare(0, None, 1e-6)


def test_compare_nested_structures():
    assert compare([[1, 2], {"a": "x"}], [[1, 2], {"a": "x"}], 1e-9) == []
    diffs = compare({"a": [1, 2]}, {"a": [1, 3], "b": 1}, 1e-9, where="case")
    assert "case.a[1]: expected 3, got 2 (tolerance 1e-09)" in diffs
    assert "case.b: missing" in diffs
    assert compare([1], [1, 2], 1e-9) == ["$: expected 2 items, got 1"]
    assert compare(5, [5], 1e-9)


def test_case_extra_fields():
    case = GoldenCase(name="c", start=[0, 0, 1], inputs=[0])
    assert case.get("start") == [0, 0, 1]
    assert "start" in case
    assert "outputs" not in case
    assert case.get("missing", 7) == 7


def test_zoom_runner():
    case = GoldenCase(
        name="interpolate_zoom",
        start=[0, 0, 1],
        end=[0, 0, 4],
        inputs=[0, 0.5, 1],
        outputs=[[0, 0, 1], [0, 0, 2], [0, 0, 4]],
        duration=1000 * math.log(4) / math.sqrt(2),
    )
    golden = GoldenFile(module="d3-zoom", function="zoom", tolerance=1e-6, test_cases=[case])
    assert run_file(golden) == {"interpolate_zoom": []}

    other = GoldenCase(name="scale_by", inputs=[], outputs=[])
    with pytest.raises(ConfigurationError):
        run_case(golden, other)


def test_unknown_runner():
    golden = GoldenFile(module="d3-force", function="simulation", test_cases=[GoldenCase(name="x")])
    with pytest.raises(ConfigurationError):
        run_file(golden)


def test_mismatch_is_reported():
    case = GoldenCase(name="linear", inputs=[0.5], outputs=[0.6])
    golden = GoldenFile(module="d3-ease", function="ease", tolerance=1e-9, test_cases=[case])
    (diff,) = run_file(golden)["linear"]
    assert diff.startswith("linear.outputs[0]")


def test_delaunay_hull_compares_as_a_cycle():
    points = [[0, 0], [1, 0], [0, 1], [1, 1], [0.5, 0.5]]

    def run(hull):
        case = GoldenCase(name="square", points=points, hull=hull)
        golden = GoldenFile(module="d3-delaunay", function="delaunay", tolerance=1e-9, test_cases=[case])
        return run_file(golden)["square"]

    assert run([3, 2, 0, 1]) == []
    diffs = run([0, 2, 3, 1])
    assert diffs
    assert all(d.startswith("square.hull") for d in diffs)
