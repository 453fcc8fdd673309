"""Normalization helpers.

Centralizes lenient parsing of provider values.
"""

from __future__ import annotations

import math
import re
from typing import Any

# Optional sign, digits, optional fraction: the numeric prefix of values such
# as "1.5mm", "30.0~50.0mm" or "1mm 미만".
_LEADING_NUMBER = re.compile(r"^\s*([+-]?\d+(?:\.\d+)?)")


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--":
        return None
    if isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def leading_float(value: Any) -> float | None:
    """Parse the numeric prefix of a provider text value.

    Plain numbers parse as usual. Text without a numeric prefix (for example
    the KMA "강수없음" placeholder) returns ``None``.
    """
    parsed = safe_float(value)
    if parsed is not None:
        return parsed
    if not isinstance(value, str):
        return None
    match = _LEADING_NUMBER.match(value)
    if match is None:
        return None
    return float(match.group(1))
