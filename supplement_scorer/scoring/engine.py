"""
Score orchestrator: runs the four calculators, aggregates with the weights,
and records which inputs were missing.

``score()`` never raises. A malformed custom weight set (``WeightError``)
or any unexpected failure inside the calculation produces the single
fallback result built by ``_fallback_result()``: every component 50,
total 50, ``is_complete=False``, ``missing_data=["計算エラーが発生"]``.

Results are a deterministic function of ``(product, weights)``; callers that
memoize should key on ``score_cache_key(product, weights)``.
"""

from __future__ import annotations

import hashlib
import json
import logging

from supplement_scorer.models.product import Product
from supplement_scorer.models.score import (
    ComponentBreakdowns,
    Factor,
    ScoreBreakdown,
    ScoreComponents,
    ScoreResult,
    ScoreWeights,
)
from supplement_scorer.scoring.calculators import (
    REFERENCE_COST_PER_MG_PER_DAY,
    calculate_cost_score,
    calculate_evidence_score,
    calculate_practicality_score,
    calculate_safety_score,
    count_risk_indicators,
)
from supplement_scorer.scoring.normalize import is_positive_number
from supplement_scorer.scoring.weights import DEFAULT_WEIGHTS, WeightError, apply_weights

logger = logging.getLogger(__name__)

FALLBACK_SCORE = 50.0
CALCULATION_ERROR_MARKER = "計算エラーが発生"

# Missing-data labels, in the order they are reported.
MISSING_INGREDIENTS = "成分情報"
MISSING_EVIDENCE_LEVELS = "エビデンスレベル"
MISSING_AMOUNTS = "成分含有量"
MISSING_SAFETY_INFO = "安全性情報"
MISSING_PRICE = "価格"
MISSING_SERVINGS_PER_DAY = "1日あたりの摂取回数"
MISSING_SERVINGS_PER_CONTAINER = "内容量（回数）"


def score(
    product: Product,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
    *,
    reference_cost_per_mg_per_day: float = REFERENCE_COST_PER_MG_PER_DAY,
) -> ScoreResult:
    """Score one product.

    Args:
        product: Product to score.
        weights: Component weights; defaults to ``DEFAULT_WEIGHTS``.
        reference_cost_per_mg_per_day: Market reference for the cost
            component (JPY per mg of actives per day).

    Returns:
        A ``ScoreResult`` with ``total`` in [0, 100]. Never raises.
    """
    try:
        evidence = calculate_evidence_score(product)
        safety = calculate_safety_score(product)
        cost = calculate_cost_score(product, reference_cost_per_mg_per_day)
        practicality = calculate_practicality_score(product)

        components = ScoreComponents(
            evidence=evidence.score,
            safety=safety.score,
            cost=cost.score,
            practicality=practicality.score,
        )
        total = apply_weights(components, weights)
        missing = find_missing_data(product)

        result = ScoreResult(
            total=total,
            components=components,
            weights=weights,
            breakdown=ComponentBreakdowns(
                evidence=evidence,
                safety=safety,
                cost=cost,
                practicality=practicality,
            ),
            is_complete=not missing,
            missing_data=missing,
        )
    except WeightError as exc:
        logger.warning(
            "Invalid score weights (%s); using fallback score.", exc,
            extra={"product_id": product.product_id},
        )
        return _fallback_result(weights, str(exc))
    except Exception as exc:
        logger.exception(
            "Score calculation failed for product %r.", product.product_id,
            extra={"product_id": product.product_id},
        )
        return _fallback_result(weights, str(exc))

    logger.debug(
        "Scored product %r: total=%.1f complete=%s missing=%s",
        product.product_id, result.total, result.is_complete, result.missing_data,
        extra={"product_id": product.product_id},
    )
    return result


def find_missing_data(product: Product) -> list[str]:
    """Return the labels of inputs the score had to fall back on."""
    missing: list[str] = []

    if not product.ingredients:
        missing.append(MISSING_INGREDIENTS)
    else:
        if all(ing.evidence_level is None for ing in product.ingredients):
            missing.append(MISSING_EVIDENCE_LEVELS)
        if not any(is_positive_number(ing.amount_mg_per_serving) for ing in product.ingredients):
            missing.append(MISSING_AMOUNTS)

    if count_risk_indicators(product) is None and product.side_effect_level is None:
        missing.append(MISSING_SAFETY_INFO)
    if not is_positive_number(product.price_jpy):
        missing.append(MISSING_PRICE)
    if not is_positive_number(product.servings_per_day):
        missing.append(MISSING_SERVINGS_PER_DAY)
    if not is_positive_number(product.servings_per_container):
        missing.append(MISSING_SERVINGS_PER_CONTAINER)

    return missing


def score_cache_key(product: Product, weights: ScoreWeights = DEFAULT_WEIGHTS) -> str:
    """Return a 16-char SHA-256 hex digest of ``(product, weights)``."""
    payload = json.dumps(
        {
            "product": product.model_dump(mode="json"),
            "weights": weights.model_dump(mode="json"),
        },
        sort_keys=True,
        ensure_ascii=False,
        default=str,
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:16]


def _fallback_result(weights: ScoreWeights, reason: str) -> ScoreResult:
    """The one all-50 result used whenever scoring cannot complete."""
    breakdown = ScoreBreakdown(
        score=FALLBACK_SCORE,
        factors=[
            Factor(
                name="エラー",
                value=FALLBACK_SCORE,
                weight=1.0,
                description=f"計算エラーが発生しました: {reason or 'unknown error'}",
            )
        ],
        explanation="エラーのためフォールバック値を使用しています",
    )
    return ScoreResult(
        total=FALLBACK_SCORE,
        components=ScoreComponents(
            evidence=FALLBACK_SCORE,
            safety=FALLBACK_SCORE,
            cost=FALLBACK_SCORE,
            practicality=FALLBACK_SCORE,
        ),
        weights=weights,
        breakdown=ComponentBreakdowns(
            evidence=breakdown,
            safety=breakdown,
            cost=breakdown,
            practicality=breakdown,
        ),
        is_complete=False,
        missing_data=[CALCULATION_ERROR_MARKER],
    )
