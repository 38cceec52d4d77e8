"""
Diagnosis orchestrator: personalized weights → base score → danger alerts →
penalty → recommendations, warnings and persona warnings.

    personalized_score = round_half_up(max(0, base_score.total - penalty), 1)

With no danger alerts the penalty is 0, so ``personalized_score`` equals
``base_score.total`` exactly.
"""

from __future__ import annotations

import logging

from supplement_scorer.diagnosis.alerts import (
    alert_penalty,
    calculate_cost_per_day,
    detect_danger_alerts,
)
from supplement_scorer.diagnosis.explain import generate_recommendations, generate_warnings
from supplement_scorer.diagnosis.persona import check_persona_rules, persona_tags_from_answers
from supplement_scorer.diagnosis.personalization import calculate_personalized_weights
from supplement_scorer.models.diagnosis import DiagnosisAnswers, DiagnosisResult
from supplement_scorer.models.product import Product
from supplement_scorer.scoring.calculators import REFERENCE_COST_PER_MG_PER_DAY
from supplement_scorer.scoring.engine import score
from supplement_scorer.scoring.normalize import round_half_up

logger = logging.getLogger(__name__)


def diagnosis_score(
    product: Product,
    answers: DiagnosisAnswers,
    *,
    reference_cost_per_mg_per_day: float = REFERENCE_COST_PER_MG_PER_DAY,
) -> DiagnosisResult:
    """Score ``product`` for the user described by ``answers``.

    Args:
        product: Product to score.
        answers: The user's questionnaire answers.
        reference_cost_per_mg_per_day: Passed through to ``score()``.

    Returns:
        A ``DiagnosisResult``.
    """
    weights = calculate_personalized_weights(answers)
    base_score = score(
        product,
        weights.as_score_weights(),
        reference_cost_per_mg_per_day=reference_cost_per_mg_per_day,
    )
    cost_per_day = calculate_cost_per_day(product)
    danger_alerts = detect_danger_alerts(product, answers)

    penalty = alert_penalty(danger_alerts)
    if penalty > 0:
        personalized = round_half_up(max(0.0, base_score.total - penalty), 1)
    else:
        personalized = base_score.total

    persona = check_persona_rules(product, persona_tags_from_answers(answers))

    logger.debug(
        "Diagnosis for product %r: base=%.1f penalty=%.0f personalized=%.1f alerts=%d",
        product.product_id, base_score.total, penalty, personalized, len(danger_alerts),
        extra={"product_id": product.product_id},
    )

    return DiagnosisResult(
        total_score=personalized,
        personalized_score=personalized,
        base_score=base_score,
        cost_per_day=round_half_up(cost_per_day, 0),
        danger_alerts=danger_alerts,
        recommendations=generate_recommendations(product, answers, base_score),
        warnings=generate_warnings(product, answers, danger_alerts),
        persona_warnings=persona.warnings,
    )


def diagnosis_score_multiple(
    products: list[Product],
    answers:  DiagnosisAnswers,
    *,
    reference_cost_per_mg_per_day: float = REFERENCE_COST_PER_MG_PER_DAY,
) -> list[DiagnosisResult]:
    """Run ``diagnosis_score`` for every product, preserving order."""
    return [
        diagnosis_score(
            product, answers, reference_cost_per_mg_per_day=reference_cost_per_mg_per_day
        )
        for product in products
    ]
