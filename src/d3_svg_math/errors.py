"""Error types raised by the geometry and scale builders."""

import math


class D3MathError(ValueError):
    """Base class; subclasses ValueError so existing ``except ValueError`` keeps working."""


class ConfigurationError(D3MathError):
    """Mismatched domain/range lengths, unordered thresholds, bad parameters."""


class DomainError(D3MathError):
    """Values outside what a scale or spatial query can represent."""


class ValidationError(D3MathError):
    """Empty or non-finite input data."""


def require_finite(points, what="point"):
    """Coerce points to float pairs, raising ValidationError on bad or non-finite values."""
    out = []
    for idx, p in enumerate(points):
        try:
            x = float(p[0])
            y = float(p[1])
        except (TypeError, ValueError, IndexError) as exc:
            raise ValidationError(f"Invalid {what} at index {idx}: {p!r}") from exc
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ValidationError(f"Non-finite {what} at index {idx}: {p!r}")
        out.append((x, y))
    return out
