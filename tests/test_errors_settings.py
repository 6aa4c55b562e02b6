import math

import pytest

from d3_svg_math.errors import ConfigurationError, D3MathError, DomainError, ValidationError, require_finite
from d3_svg_math.path import Path
from d3_svg_math.settings import Settings, configure_logging, get_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_errors_are_value_errors():
    for cls in (ConfigurationError, DomainError, ValidationError):
        assert issubclass(cls, D3MathError)
        assert issubclass(cls, ValueError)


def test_require_finite():
    assert require_finite([(1, "2"), [3.5, 4]]) == [(1.0, 2.0), (3.5, 4.0)]
    with pytest.raises(ValidationError, match="index 1"):
        require_finite([(0, 0), (math.inf, 0)])
    with pytest.raises(ValidationError, match="Invalid vertex"):
        require_finite([(0,)], what="vertex")


def test_settings_defaults(monkeypatch):
    for name in ("GOLDEN_TOLERANCE", "GOLDEN_DIR", "PATH_DIGITS", "LOG_LEVEL", "LOG_FORMAT"):
        monkeypatch.delenv(f"D3_SVG_MATH_{name}", raising=False)
    s = Settings()
    assert s.golden_tolerance == 1e-6
    assert s.golden_dir is None
    assert s.path_digits is None
    assert s.log_level == "WARNING"


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("D3_SVG_MATH_PATH_DIGITS", "2")
    monkeypatch.setenv("D3_SVG_MATH_LOG_FORMAT", "json")
    assert get_settings().path_digits == 2
    assert get_settings() is get_settings()
    assert get_settings().log_format == "json"


def test_path_digits_default_from_settings(monkeypatch):
    monkeypatch.setenv("D3_SVG_MATH_PATH_DIGITS", "1")
    p = Path()
    p.move_to(1.26, 0)
    assert p.to_svg() == "M1.3,0"
    explicit = Path(digits=None)
    explicit.move_to(1.26, 0)
    assert explicit.to_svg() == "M1.26,0"


def test_configure_logging_returns_logger(monkeypatch):
    monkeypatch.setenv("D3_SVG_MATH_LOG_LEVEL", "debug")
    log = configure_logging()
    assert hasattr(log, "debug")
    assert configure_logging(Settings(log_format="json")) is not None
