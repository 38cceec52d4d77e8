"""
Component score calculators: Evidence, Safety, Cost, Practicality.

Each calculator takes the full ``Product`` and returns a ``ScoreBreakdown``
(score 0–100, explainable factors, explanation). All four are total: they
never raise, whatever numbers the product carries. Invalid data degrades to
a documented fallback value instead.

Component explanations
----------------------
evidence (fallback 50):
    Mean of ``EVIDENCE_LEVEL_SCORES`` over graded ingredients
    (A=90, B=75, C=60). No graded ingredient → 50.

safety (fallback 75):
    Risk indicators = len(warnings) + Σ len(ingredient.safety_notes).
    0 → 100, 1–2 → 85, 3–9 → 70, ≥10 → 40. A high side-effect marker
    forces 40. With no safety signal at all the risk is *unknown*, scored
    75 (below the proven-zero 100).

cost (fallback 50):
    cost/day = price / servings_per_container * servings_per_day
    mg/day   = Σ amount_mg_per_serving * servings_per_day
    score    = min(100, 100 * reference / (cost/day ÷ mg/day))

practicality:
    0.4 * dosing burden  (1×/day=100, 2×=85, 3×=70, 4+×=60)
  + 0.3 * form           (capsule > softgel > tablet > gummy = liquid > powder)
  + 0.3 * container days (7 days → 0, 90 days → 100; invalid → 50)
"""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Mapping

from supplement_scorer.models.product import Product
from supplement_scorer.models.score import Factor, ScoreBreakdown
from supplement_scorer.scoring.normalize import (
    clamp,
    is_positive_number,
    normalize,
    round_half_up,
)
from supplement_scorer.taxonomy.product_taxonomy import (
    EvidenceLevel,
    ProductForm,
    SideEffectLevel,
)

INSUFFICIENT_DATA_FACTOR = "データ不足"

EVIDENCE_FALLBACK_SCORE = 50.0
SAFETY_FALLBACK_SCORE = 75.0
COST_FALLBACK_SCORE = 50.0
CONTAINER_FALLBACK_SCORE = 50.0
UNKNOWN_FORM_SCORE = 80.0

# Market reference: ~100 JPY/day for 2,000 mg/day of actives.
REFERENCE_COST_PER_MG_PER_DAY = 0.05

EVIDENCE_LEVEL_SCORES: Mapping[EvidenceLevel, float] = MappingProxyType({
    EvidenceLevel.A: 90.0,
    EvidenceLevel.B: 75.0,
    EvidenceLevel.C: 60.0,
})

FORM_SCORES: Mapping[ProductForm, float] = MappingProxyType({
    ProductForm.CAPSULE: 100.0,
    ProductForm.SOFTGEL: 95.0,
    ProductForm.TABLET:  85.0,
    ProductForm.GUMMY:   75.0,
    ProductForm.LIQUID:  75.0,
    ProductForm.POWDER:  70.0,
})

# (minimum indicator count, score), checked from the top.
SAFETY_RISK_BANDS: tuple[tuple[int, float], ...] = (
    (10, 40.0),
    (3,  70.0),
    (1,  85.0),
    (0, 100.0),
)

PRACTICALITY_FACTOR_WEIGHTS = {"dosing": 0.4, "form": 0.3, "container": 0.3}

CONTAINER_MIN_DAYS = 7.0
CONTAINER_MAX_DAYS = 90.0


# ── Evidence ──────────────────────────────────────────────────────────────────

def calculate_evidence_score(product: Product) -> ScoreBreakdown:
    """Score the scientific support behind the product's ingredients."""
    levels = [
        ing.evidence_level for ing in product.ingredients
        if ing.evidence_level is not None
    ]

    if not levels:
        return ScoreBreakdown(
            score=EVIDENCE_FALLBACK_SCORE,
            factors=[
                Factor(
                    name=INSUFFICIENT_DATA_FACTOR,
                    value=EVIDENCE_FALLBACK_SCORE,
                    weight=1.0,
                    description="エビデンスデータが不足しています",
                )
            ],
            explanation="成分のエビデンスレベルが不明なため中立値を使用しています",
        )

    mean_score = sum(EVIDENCE_LEVEL_SCORES[lv] for lv in levels) / len(levels)
    counts = ", ".join(
        f"{lv.value}={levels.count(lv)}" for lv in EvidenceLevel if lv in levels
    )
    return ScoreBreakdown(
        score=round_half_up(clamp(mean_score), 1),
        factors=[
            Factor(
                name="エビデンスレベル",
                value=round_half_up(mean_score, 1),
                weight=1.0,
                description=f"成分の科学的根拠の質（A=90, B=75, C=60; {counts}）",
            )
        ],
        explanation="エビデンススコアは成分の科学的根拠の質を評価します",
    )


# ── Safety ────────────────────────────────────────────────────────────────────

def count_risk_indicators(product: Product) -> int | None:
    """Return the number of risk indicators, or ``None`` if none are recorded."""
    recorded = False
    count = 0
    if product.warnings is not None:
        recorded = True
        count += len(product.warnings)
    for ing in product.ingredients:
        if ing.safety_notes is not None:
            recorded = True
            count += len(ing.safety_notes)
    return count if recorded else None


def safety_score_for_count(count: int) -> float:
    for threshold, band_score in SAFETY_RISK_BANDS:
        if count >= threshold:
            return band_score
    return SAFETY_RISK_BANDS[-1][1]


def calculate_safety_score(product: Product) -> ScoreBreakdown:
    """Score the product's risk profile from warnings and safety notes."""
    count = count_risk_indicators(product)
    high_marker = product.side_effect_level == SideEffectLevel.HIGH

    if count is None and product.side_effect_level is None:
        return ScoreBreakdown(
            score=SAFETY_FALLBACK_SCORE,
            factors=[
                Factor(
                    name=INSUFFICIENT_DATA_FACTOR,
                    value=SAFETY_FALLBACK_SCORE,
                    weight=1.0,
                    description="安全性データが不足しています（保守的な評価）",
                )
            ],
            explanation="安全性情報が未登録のため保守的な値を使用しています",
        )

    count = count or 0
    band_score = safety_score_for_count(count)
    factors = [
        Factor(
            name="リスク指標",
            value=band_score,
            weight=1.0,
            description=f"注意書き・安全性メモ {count}件（少ないほど高スコア）",
        )
    ]
    if high_marker:
        band_score = SAFETY_RISK_BANDS[0][1]
        factors.append(
            Factor(
                name="副作用リスク",
                value=band_score,
                weight=1.0,
                description="重篤な副作用が報告されています",
            )
        )

    return ScoreBreakdown(
        score=band_score,
        factors=factors,
        explanation="安全性スコアは注意書きや副作用のリスクを評価します",
    )


# ── Cost ──────────────────────────────────────────────────────────────────────

def daily_cost(product: Product) -> float | None:
    """Cost per day in JPY, or ``None`` when price or servings are unusable."""
    price = product.price_jpy
    per_container = product.servings_per_container
    per_day = product.servings_per_day
    if not (is_positive_number(price)
            and is_positive_number(per_container)
            and is_positive_number(per_day)):
        return None
    cost = price / per_container * per_day
    return cost if math.isfinite(cost) else None


def daily_milligrams(product: Product) -> float | None:
    """Total active milligrams per day, or ``None`` when unknown or zero."""
    per_day = product.servings_per_day
    if not is_positive_number(per_day):
        return None
    per_serving = sum(
        ing.amount_mg_per_serving for ing in product.ingredients
        if is_positive_number(ing.amount_mg_per_serving)
    )
    total = per_serving * per_day
    return total if is_positive_number(total) else None


def calculate_cost_score(
    product: Product,
    reference_cost_per_mg_per_day: float = REFERENCE_COST_PER_MG_PER_DAY,
) -> ScoreBreakdown:
    """Score cost efficiency (JPY per mg of actives per day)."""
    cost_per_day = daily_cost(product)
    mg_per_day = daily_milligrams(product)
    cost_per_mg = (
        cost_per_day / mg_per_day
        if cost_per_day is not None and mg_per_day is not None
        else None
    )

    if not (is_positive_number(cost_per_mg)
            and is_positive_number(reference_cost_per_mg_per_day)):
        return ScoreBreakdown(
            score=COST_FALLBACK_SCORE,
            factors=[
                Factor(
                    name=INSUFFICIENT_DATA_FACTOR,
                    value=COST_FALLBACK_SCORE,
                    weight=1.0,
                    description="価格・容量・含有量のデータが不足しています",
                )
            ],
            explanation="コストを算出できないため中立値を使用しています",
        )

    score = min(100.0, 100.0 * reference_cost_per_mg_per_day / cost_per_mg)
    return ScoreBreakdown(
        score=round_half_up(clamp(score), 1),
        factors=[
            Factor(
                name="1日あたりコスト",
                value=round_half_up(cost_per_day, 1),
                weight=0.0,
                description=f"1日あたり約{round_half_up(cost_per_day, 0):.0f}円",
            ),
            Factor(
                name="mgあたりコスト",
                value=round_half_up(clamp(score), 1),
                weight=1.0,
                description=(
                    f"1mgあたり{cost_per_mg:.4f}円/日"
                    f"（基準 {reference_cost_per_mg_per_day:.4f}円、安いほど高スコア）"
                ),
            ),
        ],
        explanation="コストスコアは有効成分1mgあたりの価格効率を評価します",
    )


# ── Practicality ──────────────────────────────────────────────────────────────

def calculate_practicality_score(product: Product) -> ScoreBreakdown:
    """Score ease of use: dosing frequency, form, and container duration."""
    per_day = product.servings_per_day
    frequency = per_day if is_positive_number(per_day) else 1.0
    dosing_score = 100.0 - clamp((frequency - 1.0) * 15.0, 0.0, 40.0)

    form_score = FORM_SCORES.get(product.form, UNKNOWN_FORM_SCORE)
    form_label = product.form.value if product.form is not None else "不明"

    per_container = product.servings_per_container
    if is_positive_number(per_container) and is_positive_number(per_day):
        days = per_container / per_day
        container_score = normalize(days, CONTAINER_MIN_DAYS, CONTAINER_MAX_DAYS)
        container_desc = f"約{round_half_up(days, 0):.0f}日分（長期間ほど高スコア）"
    else:
        container_score = CONTAINER_FALLBACK_SCORE
        container_desc = "容量が不明です（中立値）"

    w = PRACTICALITY_FACTOR_WEIGHTS
    total = (
        dosing_score      * w["dosing"]
        + form_score      * w["form"]
        + container_score * w["container"]
    )

    return ScoreBreakdown(
        score=round_half_up(clamp(total), 1),
        factors=[
            Factor(
                name="摂取頻度",
                value=dosing_score,
                weight=w["dosing"],
                description=f"1日{frequency:g}回（少ない方が高スコア）",
            ),
            Factor(
                name="剤形",
                value=form_score,
                weight=w["form"],
                description=f"{form_label}（摂取しやすさ）",
            ),
            Factor(
                name="容量",
                value=round_half_up(container_score, 1),
                weight=w["container"],
                description=container_desc,
            ),
        ],
        explanation="実用性スコアは続けやすさ（頻度・剤形・容量）を評価します",
    )
