import math
from decimal import Decimal


def format_number(x):
    """Render a float the way a JavaScript Number stringifies (``10`` not ``10.0``)."""
    x = float(x)
    if x != x:
        return "NaN"
    if math.isinf(x):
        return "Infinity" if x > 0 else "-Infinity"
    if x == int(x) and abs(x) < 1e21:
        return str(int(x))
    text = repr(x)
    if "e" not in text:
        return text
    if 1e-6 <= abs(x) < 1e21:
        return format(Decimal(text), "f")
    mantissa, exponent = text.split("e")
    exponent = int(exponent)
    return f"{mantissa}e{'+' if exponent > 0 else '-'}{abs(exponent)}"


def format_fixed(x, digits):
    """Round to ``digits`` decimals then strip trailing zeros like pathRound."""
    k = 10 ** digits
    return format_number(math.floor(float(x) * k + 0.5) / k)
