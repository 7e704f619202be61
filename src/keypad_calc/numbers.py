"""
Numeral parsing and formatting for the calculator display.

The display is kept as raw text; these helpers turn it into a float, turn
results back into text, and render the text for the screen.
"""

import math
import re
from decimal import ROUND_HALF_UP, Decimal

_LEADING_NUMBER = re.compile(
    r"^\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))"
)

# Integers at or beyond this magnitude are written in exponent form.
_EXPONENT_THRESHOLD = 1e21

# Grouped values show at most three fraction digits.
_GROUPED_PLACES = Decimal("0.001")


def parse_float(text: str) -> float:
    """
    Parse the longest leading numeric literal in text.

    Trailing garbage is ignored ("0." -> 0.0, "12abc" -> 12.0). Text with no
    leading literal parses to NaN instead of raising.

    Args:
        text: Raw numeral text

    Returns:
        Parsed value, or NaN
    """
    match = _LEADING_NUMBER.match(text)
    if not match:
        return math.nan
    # An exponent marker without digits ("5e") is not part of the match.
    return float(match.group(1))


def number_to_string(value: float) -> str:
    """
    Convert a float to its shortest display text.

    Integral values drop the ".0", very large and very small magnitudes use
    exponent form ("1e+21", "1e-7"), and negative zero prints as "0".
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    shortest = Decimal(repr(value))
    if value.is_integer() and abs(value) < _EXPONENT_THRESHOLD:
        # Digits past the shortest round-trip form print as zeros
        return format(shortest.normalize(), "f")

    text = str(shortest).lower()
    if "e" in text:
        mantissa, exponent = text.split("e")
        if not exponent.startswith("-"):
            exponent = "+" + exponent.lstrip("+")
        text = f"{mantissa}e{exponent}"
    return text


def format_display(text: str) -> str:
    """
    Render display text for the screen.

    Args:
        text: Raw display text

    Returns:
        The text grouped with thousands separators when its magnitude is at
        least 1000, otherwise the text unchanged (including a trailing ".")
    """
    num = parse_float(text)
    if math.isnan(num):
        return text

    if abs(num) >= 1000:
        return _group_thousands(num)

    return text


def _group_thousands(num: float) -> str:
    if math.isinf(num):
        return "∞" if num > 0 else "-∞"
    shortest = Decimal(repr(num))
    if num.is_integer():
        return format(shortest.normalize(), ",f")
    rounded = shortest.quantize(_GROUPED_PLACES, rounding=ROUND_HALF_UP)
    return format(rounded, ",f").rstrip("0").rstrip(".")
