# core/formatters.py

# all pure display helpers
# must never import from models!

import math
from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Any

from core.config import EMPTY_MARK

_TWO_PLACES = Decimal("0.01")

# === generic text formatters ===


def format_banner_text(title: str, width: int = 40) -> str:
    line = "=" * width
    centered_title = f"{title:^{width}}"

    return f"{line}\n{centered_title}\n{line}"


# === number formatters ===


def truncate2(value: Any) -> str:
    """
    Formats a number with exactly two decimals, truncating toward zero instead of rounding.

    The decimal digits are taken from the shortest repr of the float, so a value such
    as 0.3 (stored as 0.29999999999999998...) keeps its last digit. The sign is kept
    even when the truncated magnitude is zero.

    Args:
        value (Any): A number, a numeric string, or the empty-mark sentinel.

    Returns:
        The formatted string, e.g. 13.9969 -> "13.99" and -0.005 -> "-0.00".
        The empty-mark sentinel is returned unchanged for absent or non-finite input.
    """
    if value is None or value == EMPTY_MARK:
        return EMPTY_MARK

    try:
        number = float(value)

    except (TypeError, ValueError):
        return EMPTY_MARK

    if not math.isfinite(number):
        return EMPTY_MARK

    try:
        truncated = Decimal(repr(number)).quantize(_TWO_PLACES, rounding=ROUND_DOWN)

    except InvalidOperation:
        return EMPTY_MARK

    return f"{truncated:f}"


def format_percentage(value: float | None) -> str:
    return "N/A" if value is None else f"{truncate2(value)} %"


def format_mark(value: Any) -> str:
    if value == EMPTY_MARK or value is None:
        return "--"

    number = float(value)
    return f"{int(number)}" if number.is_integer() else f"{number:g}"
