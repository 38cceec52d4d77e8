"""
Tests for supplement_scorer/scoring/normalize.py.

What we test
------------
normalize():
  - Linear rescale onto [0, 100]; out-of-range values clamp.
  - Non-finite values map to 0.
  - Empty / inverted / non-finite ranges raise InvalidRangeError.
clamp():
  - Bounds respected; non-finite values become the lower bound.
round_half_up():
  - Halves round away from zero on the decimal representation.
  - Non-finite values pass through.
is_positive_number():
  - Rejects zero, negatives, NaN, inf, None and bools.
"""

from __future__ import annotations

import math

import pytest

from supplement_scorer.scoring.normalize import (
    InvalidRangeError,
    clamp,
    is_positive_number,
    normalize,
    round_half_up,
)


# ── normalize ─────────────────────────────────────────────────────────────────

class TestNormalize:
    def test_identity_on_default_range(self) -> None:
        assert normalize(42.0) == pytest.approx(42.0)

    def test_midpoint_of_custom_range(self) -> None:
        assert normalize(5.0, 0.0, 10.0) == pytest.approx(50.0)

    def test_below_range_clamps_to_zero(self) -> None:
        assert normalize(-3.0, 0.0, 10.0) == 0.0

    def test_above_range_clamps_to_hundred(self) -> None:
        assert normalize(30.0, 0.0, 10.0) == 100.0

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_value_maps_to_zero(self, value: float) -> None:
        assert normalize(value, 0.0, 10.0) == 0.0

    @pytest.mark.parametrize("lo,hi", [(10.0, 10.0), (10.0, 0.0)])
    def test_empty_or_inverted_range_raises(self, lo: float, hi: float) -> None:
        with pytest.raises(InvalidRangeError) as exc_info:
            normalize(5.0, lo, hi)
        assert exc_info.value.min_value == lo
        assert exc_info.value.max_value == hi

    def test_non_finite_bound_raises(self) -> None:
        with pytest.raises(InvalidRangeError):
            normalize(5.0, 0.0, math.inf)

    def test_invalid_range_error_is_value_error(self) -> None:
        assert issubclass(InvalidRangeError, ValueError)


# ── clamp ─────────────────────────────────────────────────────────────────────

class TestClamp:
    def test_within_bounds_unchanged(self) -> None:
        assert clamp(55.5) == 55.5

    def test_clamps_both_ends(self) -> None:
        assert clamp(-1.0) == 0.0
        assert clamp(101.0) == 100.0

    def test_custom_bounds(self) -> None:
        assert clamp(50.0, 0.0, 40.0) == 40.0

    def test_nan_becomes_lower_bound(self) -> None:
        assert clamp(math.nan, 10.0, 20.0) == 10.0


# ── round_half_up ─────────────────────────────────────────────────────────────

class TestRoundHalfUp:
    @pytest.mark.parametrize(
        "value,decimals,expected",
        [
            (77.75, 1, 77.8),
            (77.77, 1, 77.8),
            (77.74, 1, 77.7),
            (0.05, 1, 0.1),
            (2.5, 0, 3.0),
            (-2.5, 0, -3.0),
            (33.333, 0, 33.0),
        ],
    )
    def test_rounds_half_away_from_zero(
        self, value: float, decimals: int, expected: float
    ) -> None:
        assert round_half_up(value, decimals) == expected

    def test_default_is_one_decimal(self) -> None:
        assert round_half_up(12.345) == 12.3

    def test_nan_passes_through(self) -> None:
        assert math.isnan(round_half_up(math.nan))

    def test_huge_value_does_not_raise(self) -> None:
        assert round_half_up(1e300) == 1e300


# ── is_positive_number ────────────────────────────────────────────────────────

class TestIsPositiveNumber:
    @pytest.mark.parametrize("value", [0.001, 1, 3000.0])
    def test_positive(self, value: float) -> None:
        assert is_positive_number(value)

    @pytest.mark.parametrize("value", [0, 0.0, -1.0, math.nan, math.inf, None, True])
    def test_not_positive(self, value) -> None:
        assert not is_positive_number(value)
