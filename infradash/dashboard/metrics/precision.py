import math
from decimal import ROUND_HALF_UP, Decimal

PERCENT_PRECISION = 2


def finite_or_none(value: float | None) -> float | None:
    """NaN and infinities count as unmeasured."""

    if value is None or not math.isfinite(value):
        return None
    return value


def _quantize(value: float, digits: int) -> Decimal:
    # repr() keeps the shortest decimal form, so 0.875 stays 0.875 and rounds up.
    return Decimal(repr(float(value))).quantize(
        Decimal(1).scaleb(-digits), rounding=ROUND_HALF_UP
    )


def round_whole(value: float) -> int:
    return int(_quantize(value, 0))


def round_fraction(value: float, digits: int = PERCENT_PRECISION) -> float:
    return float(_quantize(value, digits))
