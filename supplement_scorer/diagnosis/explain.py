"""
Recommendation and warning text generation for diagnosis results.

Recommendations (in this order)
-------------------------------
- Component thresholds: evidence >= 80, safety >= 85, cost >= 75,
  practicality >= 80 each add one sentence.
- Purpose fit: a selected purpose whose key ingredients appear in the product.
- Budget fit: monthly cost (cost/day × 30) within the selected bracket.
- Third-party testing.

Warnings (in this order)
------------------------
- Number of danger alerts, when any.
- Allergy labels in ``constitution`` whose keywords appear in ingredient names.
- Medication in use → consult a doctor.

Neither generator raises; unmatched answers simply add nothing.
"""

from __future__ import annotations

from supplement_scorer.diagnosis.alerts import calculate_cost_per_day
from supplement_scorer.diagnosis.personalization import find_budget_answer
from supplement_scorer.diagnosis.tables import (
    ALLERGEN_KEYWORDS,
    BUDGET_MONTHLY_LIMITS,
    MEDICATION_ANSWER,
    PURPOSE_KEY_INGREDIENTS,
)
from supplement_scorer.models.diagnosis import DangerAlert, DiagnosisAnswers
from supplement_scorer.models.product import Product
from supplement_scorer.models.score import ScoreResult

DAYS_PER_MONTH = 30

# (component, minimum score, sentence)
COMPONENT_RECOMMENDATIONS: tuple[tuple[str, float, str], ...] = (
    ("evidence",     80.0, "科学的根拠が豊富で信頼性の高い成分を含んでいます"),
    ("safety",       85.0, "副作用のリスクが低く、安全性に優れています"),
    ("cost",         75.0, "コストパフォーマンスに優れ、経済的です"),
    ("practicality", 80.0, "摂取しやすく、継続しやすい形状・用量です"),
)


def generate_recommendations(
    product:      Product,
    answers:      DiagnosisAnswers,
    score_result: ScoreResult,
) -> list[str]:
    """Build the "why this product fits you" sentences."""
    recommendations: list[str] = []

    for component, threshold, sentence in COMPONENT_RECOMMENDATIONS:
        if score_result.components.get(component) >= threshold:
            recommendations.append(sentence)

    ingredient_names = {ing.name for ing in product.ingredients}
    for purpose in dict.fromkeys(answers.purpose):
        key_ingredients = PURPOSE_KEY_INGREDIENTS.get(purpose)
        if key_ingredients and ingredient_names & key_ingredients:
            recommendations.append(f"{purpose}に効果的な成分を含んでいます")

    budget = find_budget_answer(answers)
    cost_per_day = calculate_cost_per_day(product)
    if budget is not None and cost_per_day > 0:
        if cost_per_day * DAYS_PER_MONTH <= BUDGET_MONTHLY_LIMITS[budget]:
            recommendations.append(f"月額予算（{budget}）内で継続可能です")

    if product.third_party_tested:
        recommendations.append("第三者機関による品質検査を受けています")

    return recommendations


def generate_warnings(
    product:       Product,
    answers:       DiagnosisAnswers,
    danger_alerts: list[DangerAlert],
) -> list[str]:
    """Build the cautions shown next to a diagnosis result."""
    warnings: list[str] = []

    if danger_alerts:
        warnings.append(f"{len(danger_alerts)}件の注意すべき成分が含まれています")

    matched_allergies = find_allergen_matches(product, answers)
    if matched_allergies:
        warnings.append(
            f"アレルギー成分（{', '.join(matched_allergies)}）が含まれている可能性があります"
        )

    if MEDICATION_ANSWER in answers.constitution:
        warnings.append("服用中の薬との相互作用について医師にご相談ください")

    return warnings


def find_allergen_matches(product: Product, answers: DiagnosisAnswers) -> list[str]:
    """Allergy labels from ``constitution`` that match an ingredient name."""
    names = [ing.name.lower() for ing in product.ingredients]
    matched: list[str] = []
    for allergy in dict.fromkeys(answers.constitution):
        keywords = ALLERGEN_KEYWORDS.get(allergy)
        if not keywords:
            continue
        if any(kw.lower() in name for kw in keywords for name in names):
            matched.append(allergy)
    return matched
