"""
Danger-alert detection and the simple cost-per-day figure.

Alert rule
----------
For every ingredient whose name matches an entry of ``DANGER_INGREDIENTS``
(case-insensitive, exact match on any alias), an alert is emitted when::

    entry.severity == "high"  OR  answers.constitution ∩ entry.contraindications

Each table entry alerts at most once per product, in ingredient order.
This is a static rule lookup: the same inputs always give the same alerts.

Penalty (applied by ``diagnosis_score``)
----------------------------------------
    high: 30   medium: 15   low: 5   (summed over alerts)
"""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Mapping

from supplement_scorer.diagnosis.tables import DANGER_INGREDIENTS, DangerIngredient
from supplement_scorer.models.diagnosis import DangerAlert, DiagnosisAnswers
from supplement_scorer.models.product import Product
from supplement_scorer.scoring.normalize import is_positive_number
from supplement_scorer.taxonomy.product_taxonomy import AlertSeverity

SEVERITY_PENALTIES: Mapping[AlertSeverity, float] = MappingProxyType({
    AlertSeverity.HIGH:   30.0,
    AlertSeverity.MEDIUM: 15.0,
    AlertSeverity.LOW:     5.0,
})

GENERIC_CAUTION_REASON = "一般的に注意が必要な成分です"

_ALIAS_INDEX: Mapping[str, DangerIngredient] = MappingProxyType({
    alias: entry
    for entry in DANGER_INGREDIENTS.values()
    for alias in entry.aliases
})


def find_danger_ingredient(ingredient_name: str) -> DangerIngredient | None:
    """Look up a table entry by ingredient name or alias."""
    return _ALIAS_INDEX.get(ingredient_name.strip().lower())


def detect_danger_alerts(product: Product, answers: DiagnosisAnswers) -> list[DangerAlert]:
    """Cross-reference the product's ingredients against the danger table.

    Args:
        product: Product whose ingredients are checked.
        answers: Questionnaire answers; only ``constitution`` is used.

    Returns:
        Alerts in ingredient order (possibly empty). Never raises.
    """
    alerts: list[DangerAlert] = []
    seen: set[str] = set()
    conditions = list(dict.fromkeys(answers.constitution))

    for ingredient in product.ingredients:
        entry = find_danger_ingredient(ingredient.name)
        if entry is None or entry.name in seen:
            continue

        matched = [c for c in conditions if c in entry.contraindications]
        if not matched and entry.severity != AlertSeverity.HIGH:
            continue

        seen.add(entry.name)
        if matched:
            reason = f"あなたの健康状態（{', '.join(matched)}）との相互作用の可能性があります"
        else:
            reason = GENERIC_CAUTION_REASON

        alerts.append(
            DangerAlert(
                ingredient=entry.name,
                severity=entry.severity,
                description=entry.description,
                recommendation=entry.recommendation,
                reason=reason,
            )
        )

    return alerts


def alert_penalty(alerts: list[DangerAlert]) -> float:
    """Total score penalty for ``alerts``."""
    return sum(SEVERITY_PENALTIES.get(alert.severity, 0.0) for alert in alerts)


def calculate_cost_per_day(product: Product) -> float:
    """Effective cost per day in JPY; 0 when price or servings are unusable."""
    price = product.price_jpy
    per_container = product.servings_per_container
    per_day = product.servings_per_day
    if not (is_positive_number(price)
            and is_positive_number(per_container)
            and is_positive_number(per_day)):
        return 0.0
    cost = price / per_container * per_day
    return cost if math.isfinite(cost) else 0.0
