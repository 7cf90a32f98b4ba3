"""
Numeric literal helpers.

JavaScript has a single IEEE-754 number type, so numeric literals always parse
to float. BigInt literals parse to int.
"""

import math
from decimal import Decimal

_RADIX_PREFIXES = {"0x": 16, "0o": 8, "0b": 2}


def parse_numeric_literal(text: str) -> float:
    """
    Parse the lexical form of a numeric literal.

    Accepts decimal, scientific, hex/octal/binary prefixes, legacy octal
    ("0777") and numeric separators. Raises ValueError on anything else.
    """
    t = text.replace("_", "").lower()
    radix = _RADIX_PREFIXES.get(t[:2])
    if radix is not None:
        return _int_to_float(int(t[2:], radix))
    if len(t) > 1 and t[0] == "0" and t.isdigit():
        # legacy octal, unless a digit 8/9 makes it decimal ("089")
        if all(c in "01234567" for c in t):
            return _int_to_float(int(t, 8))
        return float(t)
    return float(t)


def parse_bigint_literal(text: str) -> int:
    """Parse "123n", "0xFFn", ... Raises ValueError on malformed text."""
    t = text.replace("_", "")
    if not t.endswith("n"):
        raise ValueError(f"not a bigint literal: {text!r}")
    return int(t[:-1], 0)


def _int_to_float(value: int) -> float:
    try:
        return float(value)
    except OverflowError:
        return math.inf


def format_js_number(value: float) -> str:
    """Render a number the way Number.prototype.toString() does."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""

    # repr() gives the shortest round-tripping digits, same as JS
    dec = Decimal(repr(abs(float(value)))).normalize()
    _, digit_tuple, exponent = dec.as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    k = len(digits)
    n = exponent + k  # position of the decimal point relative to the digits

    if k <= n <= 21:
        body = digits + "0" * (n - k)
    elif 0 < n <= 21:
        body = digits[:n] + "." + digits[n:]
    elif -6 < n <= 0:
        body = "0." + "0" * (-n) + digits
    else:
        e = n - 1
        exp = f"e{'+' if e >= 0 else '-'}{abs(e)}"
        body = (digits if k == 1 else digits[0] + "." + digits[1:]) + exp
    return sign + body
