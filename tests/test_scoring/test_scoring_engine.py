"""
Tests for supplement_scorer/scoring/engine.py.

What we test
------------
score():
  - End-to-end result for a fully-specified product.
  - Empty product: neutral fallbacks per component, all gaps listed.
  - Explicit zero price and servings count as missing, same as absent.
  - Never raises: malformed weights and calculator failures both yield
    the single fallback result (all 50, "計算エラーが発生").
  - Deterministic: same inputs, equal results.
  - Custom weights are echoed back on the result.
find_missing_data():
  - Labels reported in a fixed order; none for a complete product.
score_cache_key():
  - Stable 16-char key; sensitive to product and weights.
"""

from __future__ import annotations

import logging
import math

import pytest

from supplement_scorer.models.product import IngredientEntry, Product
from supplement_scorer.models.score import ScoreWeights
from supplement_scorer.scoring import engine
from supplement_scorer.scoring.engine import (
    CALCULATION_ERROR_MARKER,
    find_missing_data,
    score,
    score_cache_key,
)
from supplement_scorer.scoring.weights import DEFAULT_WEIGHTS


# ── End to end ────────────────────────────────────────────────────────────────

class TestScoreCompleteProduct:
    def test_components(self, sample_product: Product) -> None:
        result = score(sample_product)
        assert result.components.evidence == 90.0
        assert result.components.safety == 100.0
        assert result.components.cost == 50.0
        assert result.components.practicality == 72.3

    def test_total(self, sample_product: Product) -> None:
        # 90*.35 + 100*.30 + 50*.20 + 72.3*.15 = 82.345
        assert score(sample_product).total == 82.3

    def test_is_complete(self, sample_product: Product) -> None:
        result = score(sample_product)
        assert result.is_complete
        assert result.missing_data == []

    def test_weights_echoed(self, sample_product: Product) -> None:
        assert score(sample_product).weights == DEFAULT_WEIGHTS

    def test_breakdown_per_component(self, sample_product: Product) -> None:
        result = score(sample_product)
        for component in ("evidence", "safety", "cost", "practicality"):
            breakdown = result.breakdown.get(component)
            assert breakdown.score == result.components.get(component)
            assert breakdown.factors
            assert breakdown.explanation

    def test_custom_weights(self, sample_product: Product) -> None:
        weights = ScoreWeights(evidence=0.0, safety=1.0, cost=0.0, practicality=0.0)
        result = score(sample_product, weights)
        assert result.total == 100.0
        assert result.weights == weights

    def test_reference_cost_passed_through(self, sample_product: Product) -> None:
        result = score(sample_product, reference_cost_per_mg_per_day=0.1)
        assert result.components.cost == 100.0

    def test_deterministic(self, sample_product: Product) -> None:
        assert score(sample_product) == score(sample_product)


class TestScoreEmptyProduct:
    def test_neutral_components(self, empty_product: Product) -> None:
        result = score(empty_product)
        assert result.components.evidence == 50.0
        assert result.components.safety == 75.0
        assert result.components.cost == 50.0
        assert result.components.practicality == 79.0

    def test_total(self, empty_product: Product) -> None:
        # 50*.35 + 75*.30 + 50*.20 + 79*.15 = 61.85, rounded half-up
        assert score(empty_product).total == 61.9

    def test_incomplete_with_all_gaps(self, empty_product: Product) -> None:
        result = score(empty_product)
        assert not result.is_complete
        assert result.missing_data == [
            "成分情報",
            "安全性情報",
            "価格",
            "1日あたりの摂取回数",
            "内容量（回数）",
        ]

    def test_explicit_zeros_treated_as_missing(self) -> None:
        product = Product(
            ingredients=[],
            servings_per_day=0,
            servings_per_container=0,
            price_jpy=0,
        )
        result = score(product)
        assert not result.is_complete
        for label in ("成分情報", "価格", "1日あたりの摂取回数", "内容量（回数）"):
            assert label in result.missing_data
        assert CALCULATION_ERROR_MARKER not in result.missing_data
        assert 0.0 <= result.total <= 100.0
        assert result.total == score(Product()).total == 61.9

    def test_garbage_numbers_do_not_raise(self) -> None:
        product = Product(
            price_jpy=math.nan,
            servings_per_container=-5.0,
            servings_per_day=math.inf,
            ingredients=[IngredientEntry(name="x", amount_mg_per_serving=-1.0)],
        )
        result = score(product)
        assert 0.0 <= result.total <= 100.0
        assert CALCULATION_ERROR_MARKER not in result.missing_data


# ── Fallback ──────────────────────────────────────────────────────────────────

class TestScoreFallback:
    def _assert_fallback(self, result) -> None:
        assert result.total == 50.0
        for component in ("evidence", "safety", "cost", "practicality"):
            assert result.components.get(component) == 50.0
            assert result.breakdown.get(component).factors[0].name == "エラー"
        assert not result.is_complete
        assert result.missing_data == [CALCULATION_ERROR_MARKER]

    def test_bad_weight_sum(self, sample_product: Product) -> None:
        weights = ScoreWeights(evidence=0.5, safety=0.5, cost=0.5, practicality=0.5)
        result = score(sample_product, weights)
        self._assert_fallback(result)
        assert result.weights == weights

    def test_negative_weight(self, sample_product: Product) -> None:
        weights = ScoreWeights(evidence=0.7, safety=-0.1, cost=0.2, practicality=0.2)
        self._assert_fallback(score(sample_product, weights))

    def test_bad_weights_logged_as_warning(
        self, sample_product: Product, caplog: pytest.LogCaptureFixture
    ) -> None:
        weights = ScoreWeights(evidence=1.0, safety=1.0, cost=0.0, practicality=0.0)
        with caplog.at_level(logging.WARNING, logger="supplement_scorer.scoring.engine"):
            score(sample_product, weights)
        assert any("Invalid score weights" in r.message for r in caplog.records)

    def test_fallback_warning_carries_product_id(
        self, sample_product: Product, caplog: pytest.LogCaptureFixture
    ) -> None:
        weights = ScoreWeights(evidence=1.0, safety=1.0, cost=0.0, practicality=0.0)
        with caplog.at_level(logging.WARNING, logger="supplement_scorer.scoring.engine"):
            score(sample_product, weights)
        assert [r.product_id for r in caplog.records] == ["vitc-1000"]

    def test_calculator_failure(
        self, sample_product: Product, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def _boom(*args, **kwargs):
            raise RuntimeError("calculator exploded")

        monkeypatch.setattr(engine, "calculate_cost_score", _boom)
        result = score(sample_product)
        self._assert_fallback(result)
        assert "calculator exploded" in result.breakdown.cost.factors[0].description


# ── find_missing_data ────────────────────────────────────────────────────────

class TestFindMissingData:
    def test_complete_product(self, sample_product: Product) -> None:
        assert find_missing_data(sample_product) == []

    def test_ungraded_ingredients_without_amounts(self, product_factory) -> None:
        product = product_factory(ingredients=[IngredientEntry(name="x", safety_notes=[])])
        assert find_missing_data(product) == ["エビデンスレベル", "成分含有量"]

    def test_unknown_safety(self, product_factory) -> None:
        product = product_factory(
            warnings=None,
            ingredients=[IngredientEntry(name="x", evidence_level="A", amount_mg_per_serving=1)],
        )
        assert find_missing_data(product) == ["安全性情報"]

    def test_zero_price_counts_as_missing(self, product_factory) -> None:
        assert find_missing_data(product_factory(price_jpy=0.0)) == ["価格"]


# ── score_cache_key ───────────────────────────────────────────────────────────

class TestScoreCacheKey:
    def test_stable_and_short(self, sample_product: Product, product_factory) -> None:
        key = score_cache_key(sample_product)
        assert len(key) == 16
        assert key == score_cache_key(product_factory())

    def test_sensitive_to_product(self, sample_product: Product, product_factory) -> None:
        other = product_factory(price_jpy=3001.0)
        assert score_cache_key(sample_product) != score_cache_key(other)

    def test_sensitive_to_weights(self, sample_product: Product) -> None:
        weights = ScoreWeights(evidence=0.25, safety=0.25, cost=0.25, practicality=0.25)
        assert score_cache_key(sample_product) != score_cache_key(sample_product, weights)
