"""Best-effort coercion of raw spreadsheet and oracle values."""

import math
import re
from typing import Any

_STRIP_RE = re.compile(r"[$€£,\s]")


def parse_numeric(value: Any) -> float | None:
    """Parse a number from an int, float or formatted string.

    Currency symbols, thousands separators and whitespace are ignored and
    accounting-style parentheses mean a negative value. Returns None when
    nothing numeric can be read.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return None if math.isnan(number) or math.isinf(number) else number
    if not isinstance(value, str):
        return None

    cleaned = _STRIP_RE.sub("", value)
    negative = cleaned.startswith("(") and cleaned.endswith(")")
    if negative:
        cleaned = cleaned[1:-1]
    try:
        number = float(cleaned)
    except ValueError:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return -number if negative else number


def is_blank(value: Any) -> bool:
    """True for None, NaN, and strings that are empty after stripping."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def as_text(value: Any) -> str | None:
    """Stringify a non-blank value, trimming whitespace."""
    if is_blank(value):
        return None
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()
