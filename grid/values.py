"""Numeric coercion and display formatting for cell values"""

from __future__ import annotations

import math
import re
from typing import Optional

_NUMERIC_PATTERN = re.compile(r"^-?\d*\.?\d+$")


def is_numeric(value: object) -> bool:
    """True for numbers and numeric-looking strings ("12", "-3.5", ".5")."""
    return to_number(value) is not None


def to_number(value: object) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    text = str(value).strip()
    if not _NUMERIC_PATTERN.match(text):
        return None
    return float(text)


def format_number(value: float) -> str:
    """Round to 6 decimals and drop a trailing .0 (3.0 -> "3", 0.1+0.2 -> "0.3")."""
    rounded = round(value, 6)
    if rounded == 0:
        return "0"
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.6f}".rstrip("0").rstrip(".")
