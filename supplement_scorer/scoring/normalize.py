"""
Numeric helpers shared by the calculators and the aggregator.

Rounding policy
---------------
``round_half_up`` rounds half away from zero at the requested decimal,
operating on the float's shortest decimal representation (``repr``). So
``77.75`` becomes ``77.8`` even though the binary double closest to 77.75
is exact and the one closest to ``77.85`` is slightly below it: we round
what the user sees, not the binary expansion. Python's built-in ``round``
is banker's rounding on the binary value and is NOT used for scores.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal


class InvalidRangeError(ValueError):
    """Raised when a normalization range is empty or inverted.

    Attributes:
        min_value: Lower bound supplied by the caller.
        max_value: Upper bound supplied by the caller.
    """

    def __init__(self, min_value: float, max_value: float) -> None:
        self.min_value = min_value
        self.max_value = max_value
        super().__init__(
            f"Invalid range: min ({min_value}) must be less than max ({max_value})."
        )


def normalize(value: float, min_value: float = 0.0, max_value: float = 100.0) -> float:
    """Linearly rescale ``value`` from [min_value, max_value] onto [0, 100].

    Values outside the range clamp to 0 or 100. Non-finite values
    (NaN, ±inf) map to 0.

    Raises:
        InvalidRangeError: If ``min_value >= max_value`` or a bound is
            not finite.
    """
    if not (math.isfinite(min_value) and math.isfinite(max_value)) or min_value >= max_value:
        raise InvalidRangeError(min_value, max_value)
    if not _is_finite_number(value):
        return 0.0
    scaled = (value - min_value) / (max_value - min_value) * 100.0
    return clamp(scaled)


def clamp(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    """Clamp ``value`` to [lo, hi]; non-finite values become ``lo``."""
    if not _is_finite_number(value):
        return lo
    return max(lo, min(hi, value))


def round_half_up(value: float, decimals: int = 1) -> float:
    """Round half away from zero to ``decimals`` places (see module docstring)."""
    if not _is_finite_number(value):
        return value
    if abs(value) >= 1e15:
        # Beyond this the float has no fractional digits left to round.
        return float(value)
    quantum = Decimal(1).scaleb(-decimals)
    return float(to_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def to_decimal(value: float) -> Decimal:
    """Exact decimal of the shortest repr, so 77.75 stays 77.75."""
    return Decimal(repr(float(value)))


def is_positive_number(value: float | None) -> bool:
    """True for a finite number strictly greater than zero."""
    return _is_finite_number(value) and value > 0


def _is_finite_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)
