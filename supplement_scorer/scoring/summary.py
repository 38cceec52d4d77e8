"""
Comparison helpers: batch scoring, per-component summaries and rankings for
product comparison tables.

Usage flow
----------
1. score_many(products, weights)
   -> list[ScoredProduct]

2. summarize_components(scored)
   -> list[ComponentSummary]  (one per component, plus "total")

3. rank_products(scored)
   -> list[ProductRanking]    (score desc; ties by product_id asc)
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from supplement_scorer.models.product import Product
from supplement_scorer.models.score import ScoreResult, ScoreWeights
from supplement_scorer.scoring.calculators import REFERENCE_COST_PER_MG_PER_DAY
from supplement_scorer.scoring.engine import score
from supplement_scorer.scoring.weights import DEFAULT_WEIGHTS
from supplement_scorer.taxonomy.product_taxonomy import COMPONENT_ORDER

TOTAL_CATEGORY = "total"


@dataclass(frozen=True)
class ScoredProduct:
    """A product id coupled with its ``ScoreResult``."""

    product_id: str
    result:     ScoreResult


@dataclass(frozen=True)
class ComponentSummary:
    """Spread of one score category across the compared products.

    Attributes:
        category:        Component name or ``"total"``.
        min_score:       Lowest finite score.
        max_score:       Highest finite score.
        average_score:   Mean of finite scores.
        best_product_id: Product with ``max_score`` (lowest id on ties).
        product_count:   Number of products with a finite score.
    """

    category:        str
    min_score:       float
    max_score:       float
    average_score:   float
    best_product_id: str
    product_count:   int


@dataclass(frozen=True)
class ProductRanking:
    product_id: str
    rank:       int
    score:      float
    percentile: float


def score_many(
    products: list[Product],
    weights:  ScoreWeights = DEFAULT_WEIGHTS,
    *,
    reference_cost_per_mg_per_day: float = REFERENCE_COST_PER_MG_PER_DAY,
) -> list[ScoredProduct]:
    """Score every product with the same weights.

    Products without a ``product_id`` get a positional id (``"product-1"``,
    ``"product-2"``, ...).
    """
    return [
        ScoredProduct(
            product_id=product.product_id or f"product-{idx}",
            result=score(
                product, weights,
                reference_cost_per_mg_per_day=reference_cost_per_mg_per_day,
            ),
        )
        for idx, product in enumerate(products, start=1)
    ]


def summarize_components(scored: list[ScoredProduct]) -> list[ComponentSummary]:
    """Summarize each component (and the total) across ``scored``.

    Categories with no finite score are omitted.
    """
    categories = [str(c) for c in COMPONENT_ORDER] + [TOTAL_CATEGORY]
    summaries: list[ComponentSummary] = []

    for category in categories:
        values = [
            (sp.product_id, _category_score(sp.result, category))
            for sp in scored
        ]
        values = [(pid, v) for pid, v in values if math.isfinite(v)]
        if not values:
            continue

        scores = [v for _, v in values]
        max_score = max(scores)
        best = min(pid for pid, v in values if v == max_score)
        summaries.append(
            ComponentSummary(
                category=category,
                min_score=min(scores),
                max_score=max_score,
                average_score=sum(scores) / len(scores),
                best_product_id=best,
                product_count=len(scores),
            )
        )

    return summaries


def rank_products(scored: list[ScoredProduct]) -> list[ProductRanking]:
    """Rank products by total score, descending; ties by product_id ascending."""
    ordered = sorted(scored, key=lambda sp: (-sp.result.total, sp.product_id))
    n = len(ordered)
    return [
        ProductRanking(
            product_id=sp.product_id,
            rank=idx + 1,
            score=sp.result.total,
            percentile=(n - idx) / n * 100.0,
        )
        for idx, sp in enumerate(ordered)
    ]


def _category_score(result: ScoreResult, category: str) -> float:
    if category == TOTAL_CATEGORY:
        return result.total
    return result.components.get(category)
