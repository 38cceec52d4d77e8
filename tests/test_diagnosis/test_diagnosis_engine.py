"""
Tests for supplement_scorer/diagnosis/engine.py.

What we test
------------
diagnosis_score():
  - No danger alerts → personalized_score == base_score.total exactly.
  - Alerts subtract their penalty, floored at 0.
  - total_score always equals personalized_score.
  - base_score is computed with the personalized weights.
  - cost_per_day rounded to whole yen.
  - Recommendations, warnings and persona warnings are filled in.
diagnosis_score_multiple():
  - One result per product, input order preserved.
DiagnosisResult:
  - Rejects inconsistent total_score / personalized_score.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from supplement_scorer.diagnosis.engine import diagnosis_score, diagnosis_score_multiple
from supplement_scorer.diagnosis.personalization import calculate_personalized_weights
from supplement_scorer.models.diagnosis import DiagnosisAnswers, DiagnosisResult
from supplement_scorer.models.product import IngredientEntry, Product
from supplement_scorer.scoring.engine import score
from supplement_scorer.scoring.normalize import round_half_up
from supplement_scorer.taxonomy.product_taxonomy import AlertSeverity


# ── Personalized score ────────────────────────────────────────────────────────

class TestDiagnosisScore:
    def test_no_alerts_equals_base(
        self, sample_product: Product, sample_answers: DiagnosisAnswers
    ) -> None:
        result = diagnosis_score(sample_product, sample_answers)
        assert result.danger_alerts == []
        assert result.personalized_score == result.base_score.total
        assert result.total_score == result.personalized_score

    def test_base_uses_personalized_weights(
        self, sample_product: Product, sample_answers: DiagnosisAnswers
    ) -> None:
        weights = calculate_personalized_weights(sample_answers).as_score_weights()
        result = diagnosis_score(sample_product, sample_answers)
        assert result.base_score.weights == weights
        assert result.base_score == score(sample_product, weights)

    def test_high_alert_penalty(
        self, ephedra_product: Product, empty_answers: DiagnosisAnswers
    ) -> None:
        result = diagnosis_score(ephedra_product, empty_answers)
        assert [a.severity for a in result.danger_alerts] == [AlertSeverity.HIGH]
        expected = round_half_up(max(0.0, result.base_score.total - 30.0), 1)
        assert result.personalized_score == expected
        assert result.total_score == expected

    def test_medium_alert_penalty(self, caffeine_product: Product) -> None:
        answers = DiagnosisAnswers(constitution=["カフェインに敏感"])
        result = diagnosis_score(caffeine_product, answers)
        assert result.personalized_score == round_half_up(result.base_score.total - 15.0, 1)

    def test_penalty_floored_at_zero(self, empty_answers: DiagnosisAnswers) -> None:
        product = Product(
            ingredients=[
                IngredientEntry(name=n) for n in ("エフェドラ", "ヨヒンビン", "DMAA", "synephrine")
            ]
        )
        answers = DiagnosisAnswers(constitution=["高血圧"])
        result = diagnosis_score(product, answers)
        assert len(result.danger_alerts) == 4
        assert result.personalized_score == 0.0

    def test_cost_per_day_whole_yen(self, product_factory, empty_answers) -> None:
        product = product_factory(price_jpy=1000.0, servings_per_container=30.0, servings_per_day=1.0)
        assert diagnosis_score(product, empty_answers).cost_per_day == 33.0

    def test_cost_per_day_unknown(self, empty_product: Product, empty_answers) -> None:
        assert diagnosis_score(empty_product, empty_answers).cost_per_day == 0.0

    def test_texts_filled(self, caffeine_product: Product) -> None:
        answers = DiagnosisAnswers(constitution=["妊娠中", "薬を服用中"])
        result = diagnosis_score(caffeine_product, answers)
        assert "1件の注意すべき成分が含まれています" in result.warnings
        assert "服用中の薬との相互作用について医師にご相談ください" in result.warnings
        assert result.recommendations
        assert [w.rule_id for w in result.persona_warnings] == ["pregnancy-caffeine"]

    def test_empty_product_does_not_raise(
        self, empty_product: Product, sample_answers: DiagnosisAnswers
    ) -> None:
        result = diagnosis_score(empty_product, sample_answers)
        assert 0.0 <= result.personalized_score <= 100.0
        assert not result.base_score.is_complete


# ── Batch ─────────────────────────────────────────────────────────────────────

class TestDiagnosisScoreMultiple:
    def test_order_preserved(
        self,
        sample_product: Product,
        ephedra_product: Product,
        empty_answers: DiagnosisAnswers,
    ) -> None:
        results = diagnosis_score_multiple([ephedra_product, sample_product], empty_answers)
        assert len(results) == 2
        assert results[0].danger_alerts
        assert not results[1].danger_alerts

    def test_empty(self, empty_answers: DiagnosisAnswers) -> None:
        assert diagnosis_score_multiple([], empty_answers) == []


# ── Result model ──────────────────────────────────────────────────────────────

class TestDiagnosisResultModel:
    def test_inconsistent_scores_rejected(
        self, sample_product: Product, empty_answers: DiagnosisAnswers
    ) -> None:
        good = diagnosis_score(sample_product, empty_answers)
        with pytest.raises(ValidationError, match="must equal"):
            DiagnosisResult(
                total_score=good.personalized_score + 1.0,
                personalized_score=good.personalized_score,
                base_score=good.base_score,
                cost_per_day=good.cost_per_day,
            )

    def test_out_of_range_rejected(
        self, sample_product: Product, empty_answers: DiagnosisAnswers
    ) -> None:
        good = diagnosis_score(sample_product, empty_answers)
        with pytest.raises(ValidationError):
            DiagnosisResult(
                total_score=-1.0,
                personalized_score=-1.0,
                base_score=good.base_score,
                cost_per_day=good.cost_per_day,
            )
