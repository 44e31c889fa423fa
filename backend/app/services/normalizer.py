"""Numeric coercion helpers for store metrics.

Store documents are written by hand, by spreadsheets and by the demo
generator, so numbers arrive as floats, ints, strings such as ``"$1,200.50"``
or not at all. Everything here degrades to a safe value instead of raising.
"""
import math
import re
from typing import Any, Optional

_STRIP_CHARS = re.compile(r"[,\s$€£]")
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_number(value: Any) -> Optional[float]:
    """
    Coerce a raw metric value to a finite float.

    Returns None when the value is absent, blank, boolean, non-finite or has
    no leading numeric prefix once separators and currency symbols are removed.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None

    if isinstance(value, str):
        match = _LEADING_NUMBER.match(_STRIP_CHARS.sub("", value))
        if not match:
            return None
        try:
            number = float(match.group(0))
        except ValueError:
            return None
        return number if math.isfinite(number) else None

    return None


def to_number(value: Any) -> float:
    """Coerce a raw metric value to a float, using 0.0 for anything unusable."""
    number = parse_number(value)
    return 0.0 if number is None else number


def normalize_percent(x: float) -> float:
    """
    Express a percentage field on the 0-100 scale.

    Values in ``[0, 1]`` are read as fractions and multiplied by 100; anything
    else is assumed to already be a percentage. ``1`` therefore means 100%,
    so a true 1% margin stored as the integer ``1`` is misread upstream.
    """
    if x is None or not math.isfinite(x):
        return 0.0
    if 0 <= x <= 1:
        return x * 100
    return x


def clamp(n: float, lo: float = 0, hi: float = 100) -> float:
    return max(lo, min(hi, n))


def rescale(x: float, lo: float, hi: float) -> float:
    """Map ``[lo, hi]`` linearly onto ``[0, 100]``, clamped."""
    return clamp((x - lo) / (hi - lo) * 100)
