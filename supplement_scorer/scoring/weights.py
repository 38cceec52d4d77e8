"""
Weight validation and weighted aggregation.

Aggregation formula
-------------------
    total = clamp(quantize(
        evidence       * w.evidence
        + safety       * w.safety
        + cost         * w.cost
        + practicality * w.practicality,
        0.1, ROUND_HALF_UP,
    ))

Products and the sum are taken in ``Decimal`` over each float's shortest
repr, so a total of exactly 77.75 rounds to 77.8 instead of drifting to
77.74999... in binary and rounding down.

``apply_weights`` is the one place in the pipeline that raises instead of
degrading: a malformed weight set is a configuration error, not a
data-quality problem. ``score()`` catches the ``WeightError`` one layer up
and converts it into the fallback result.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

from supplement_scorer.models.score import ScoreComponents, ScoreWeights
from supplement_scorer.scoring.normalize import clamp, to_decimal
from supplement_scorer.taxonomy.product_taxonomy import COMPONENT_ORDER

DEFAULT_WEIGHTS = ScoreWeights(
    evidence=0.35,
    safety=0.30,
    cost=0.20,
    practicality=0.15,
)

WEIGHT_SUM_TOLERANCE = 0.001


class WeightError(ValueError):
    """Raised when a ``ScoreWeights`` record violates its invariant.

    Attributes:
        field: Offending component name, or ``"sum"`` for the sum check.
    """

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(message)


def validate_weights(weights: ScoreWeights) -> None:
    """Check that every weight is in [0, 1] and that they sum to 1.0.

    Individual ranges are checked first, in component order, so the error
    names the first offending component.

    Raises:
        WeightError: ``"<component> must be between 0 and 1, got …"`` or
            ``"weight sum must equal 1.0, got …"``.
    """
    for component in COMPONENT_ORDER:
        value = weights.get(component)
        if not (isinstance(value, (int, float)) and math.isfinite(value) and 0.0 <= value <= 1.0):
            raise WeightError(
                str(component),
                f"{component} must be between 0 and 1, got {value}",
            )

    total = weights.total
    if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
        raise WeightError("sum", f"weight sum must equal 1.0, got {total}")


def is_valid_weights(weights: ScoreWeights) -> bool:
    try:
        validate_weights(weights)
    except WeightError:
        return False
    return True


def apply_weights(components: ScoreComponents, weights: ScoreWeights) -> float:
    """Combine component scores into a single total rounded to one decimal.

    Args:
        components: Per-component scores in [0, 100].
        weights:    Weight set; validated before use.

    Returns:
        Weighted total in [0, 100], rounded half away from zero.

    Raises:
        WeightError: If ``weights`` is malformed.
    """
    validate_weights(weights)

    weighted_total = sum(
        (
            to_decimal(components.get(component)) * to_decimal(weights.get(component))
            for component in COMPONENT_ORDER
        ),
        Decimal(0),
    )
    rounded = weighted_total.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    # Weights may sum to slightly over 1.0 within tolerance.
    return clamp(float(rounded))
