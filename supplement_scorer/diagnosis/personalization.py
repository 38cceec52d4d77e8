"""
Personalized weight derivation from questionnaire answers.

Derivation steps (each step feeds the next)
-------------------------------------------
1. Start from ``DEFAULT_WEIGHTS``.
2. Purpose:  average the overrides of every recognized ``purpose`` answer,
             component-wise. Unrecognized purposes are ignored.
3. Priority: the first ``lifestyle`` answer that is a priority statement
             replaces all four weights.
4. Budget:   the first ``lifestyle`` answer that is a budget bracket fixes
             ``cost`` and rescales the other three to share ``1 - cost`` in
             their current ratios.
5. Renormalize by the running sum.

The result always passes ``validate_weights``: every table entry is a valid
weight set, and steps 2–5 preserve non-negativity and unit sum.
"""

from __future__ import annotations

import logging

from supplement_scorer.diagnosis.tables import (
    BUDGET_COST_WEIGHTS,
    PRIORITY_WEIGHT_OVERRIDES,
    PURPOSE_WEIGHT_OVERRIDES,
)
from supplement_scorer.models.diagnosis import (
    DiagnosisAnswers,
    PersonalizedFactors,
    PersonalizedWeights,
)
from supplement_scorer.models.score import ScoreWeights
from supplement_scorer.scoring.weights import DEFAULT_WEIGHTS

logger = logging.getLogger(__name__)

_OTHER_COMPONENTS = ("evidence", "safety", "practicality")


def calculate_personalized_weights(answers: DiagnosisAnswers) -> PersonalizedWeights:
    """Derive score weights from the user's questionnaire answers.

    Args:
        answers: Questionnaire answers; unknown labels are ignored.

    Returns:
        ``PersonalizedWeights`` summing to 1.0, with display ratios in
        ``personalized_factors``.
    """
    weights: dict[str, float] = DEFAULT_WEIGHTS.model_dump()

    purpose_overrides = [
        PURPOSE_WEIGHT_OVERRIDES[p] for p in answers.purpose
        if p in PURPOSE_WEIGHT_OVERRIDES
    ]
    if purpose_overrides:
        weights = {
            key: sum(o.get(key) for o in purpose_overrides) / len(purpose_overrides)
            for key in weights
        }

    priority = find_priority_answer(answers)
    if priority is not None:
        weights = PRIORITY_WEIGHT_OVERRIDES[priority].model_dump()

    budget = find_budget_answer(answers)
    if budget is not None:
        weights = _apply_budget(weights, BUDGET_COST_WEIGHTS[budget])

    weight_sum = sum(weights.values())
    if weight_sum > 0:
        weights = {key: value / weight_sum for key, value in weights.items()}
    else:
        weights = DEFAULT_WEIGHTS.model_dump()

    logger.debug(
        "Personalized weights: %s (purposes=%d priority=%r budget=%r)",
        {k: round(v, 4) for k, v in weights.items()},
        len(purpose_overrides), priority, budget,
    )

    return PersonalizedWeights(
        **weights,
        personalized_factors=PersonalizedFactors(
            budget_sensitivity=weights["cost"] / DEFAULT_WEIGHTS.cost,
            safety_concern=weights["safety"] / DEFAULT_WEIGHTS.safety,
            convenience_priority=weights["practicality"] / DEFAULT_WEIGHTS.practicality,
            evidence_requirement=weights["evidence"] / DEFAULT_WEIGHTS.evidence,
        ),
    )


def find_priority_answer(answers: DiagnosisAnswers) -> str | None:
    """First ``lifestyle`` answer that is a known priority statement."""
    return next((a for a in answers.lifestyle if a in PRIORITY_WEIGHT_OVERRIDES), None)


def find_budget_answer(answers: DiagnosisAnswers) -> str | None:
    """First ``lifestyle`` answer that is a known monthly budget bracket."""
    return next((a for a in answers.lifestyle if a in BUDGET_COST_WEIGHTS), None)


def _apply_budget(weights: dict[str, float], cost_weight: float) -> dict[str, float]:
    remaining = 1.0 - cost_weight
    other_sum = sum(weights[key] for key in _OTHER_COMPONENTS)

    result = {"cost": cost_weight}
    for key in _OTHER_COMPONENTS:
        if other_sum > 0:
            result[key] = weights[key] * remaining / other_sum
        else:
            result[key] = remaining / len(_OTHER_COMPONENTS)

    return {key: result[key] for key in ScoreWeights.model_fields}
