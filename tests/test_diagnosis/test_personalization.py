"""
Tests for supplement_scorer/diagnosis/personalization.py.

What we test
------------
calculate_personalized_weights():
  - No (or only unknown) answers → default weights.
  - Purpose overrides, averaged component-wise over recognized purposes.
  - Priority statement replaces the purpose-derived weights.
  - Budget fixes cost and rescales the other three proportionally.
  - Result always satisfies the weight invariant (grid over answers).
  - personalized_factors are ratios to the defaults.
"""

from __future__ import annotations

import itertools

import pytest

from supplement_scorer.diagnosis.personalization import (
    calculate_personalized_weights,
    find_budget_answer,
    find_priority_answer,
)
from supplement_scorer.diagnosis.tables import (
    BUDGET_COST_WEIGHTS,
    PRIORITY_WEIGHT_OVERRIDES,
    PURPOSE_WEIGHT_OVERRIDES,
)
from supplement_scorer.models.diagnosis import DiagnosisAnswers
from supplement_scorer.scoring.weights import DEFAULT_WEIGHTS, is_valid_weights

SAFETY_FIRST = "安全性（副作用のリスクを最小限に）"
COST_FIRST = "コストパフォーマンス（価格と効果のバランス）"


# ── Helpers ────────────────────────────────────────────────────────────────────

def _as_tuple(weights) -> tuple[float, float, float, float]:
    return (weights.evidence, weights.safety, weights.cost, weights.practicality)


# ── Defaults ──────────────────────────────────────────────────────────────────

class TestDefaults:
    def test_empty_answers(self, empty_answers: DiagnosisAnswers) -> None:
        weights = calculate_personalized_weights(empty_answers)
        assert _as_tuple(weights) == pytest.approx(_as_tuple(DEFAULT_WEIGHTS))

    def test_unknown_labels_ignored(self) -> None:
        answers = DiagnosisAnswers(purpose=["空を飛びたい"], lifestyle=["毎日走る"])
        weights = calculate_personalized_weights(answers)
        assert _as_tuple(weights) == pytest.approx(_as_tuple(DEFAULT_WEIGHTS))

    def test_default_factors_are_one(self, empty_answers: DiagnosisAnswers) -> None:
        factors = calculate_personalized_weights(empty_answers).personalized_factors
        assert factors.budget_sensitivity == pytest.approx(1.0)
        assert factors.safety_concern == pytest.approx(1.0)
        assert factors.convenience_priority == pytest.approx(1.0)
        assert factors.evidence_requirement == pytest.approx(1.0)


# ── Purpose ───────────────────────────────────────────────────────────────────

class TestPurpose:
    def test_single_purpose(self) -> None:
        weights = calculate_personalized_weights(DiagnosisAnswers(purpose=["睡眠の質改善"]))
        assert _as_tuple(weights) == pytest.approx((0.35, 0.40, 0.15, 0.10))

    def test_purposes_are_averaged(self) -> None:
        answers = DiagnosisAnswers(purpose=["睡眠の質改善", "筋力・体力向上"])
        weights = calculate_personalized_weights(answers)
        # (0.35, 0.40, 0.15, 0.10) and (0.45, 0.25, 0.15, 0.15)
        assert _as_tuple(weights) == pytest.approx((0.40, 0.325, 0.15, 0.125))

    def test_unknown_purpose_excluded_from_average(self) -> None:
        answers = DiagnosisAnswers(purpose=["睡眠の質改善", "不明な目的"])
        weights = calculate_personalized_weights(answers)
        assert _as_tuple(weights) == pytest.approx((0.35, 0.40, 0.15, 0.10))


# ── Priority ──────────────────────────────────────────────────────────────────

class TestPriority:
    def test_priority_replaces_purpose(self) -> None:
        answers = DiagnosisAnswers(purpose=["筋力・体力向上"], lifestyle=[SAFETY_FIRST])
        weights = calculate_personalized_weights(answers)
        assert _as_tuple(weights) == pytest.approx((0.25, 0.50, 0.15, 0.10))

    def test_first_priority_wins(self) -> None:
        answers = DiagnosisAnswers(lifestyle=["毎日走る", COST_FIRST, SAFETY_FIRST])
        assert find_priority_answer(answers) == COST_FIRST
        weights = calculate_personalized_weights(answers)
        assert weights.cost == pytest.approx(0.35)


# ── Budget ────────────────────────────────────────────────────────────────────

class TestBudget:
    def test_budget_rescales_others(self) -> None:
        weights = calculate_personalized_weights(DiagnosisAnswers(lifestyle=["3,000円未満"]))
        # cost 0.40; others share 0.60 in the default 0.35 : 0.30 : 0.15 ratio
        assert _as_tuple(weights) == pytest.approx((0.2625, 0.225, 0.40, 0.1125))

    def test_budget_applied_after_priority(self) -> None:
        answers = DiagnosisAnswers(lifestyle=[SAFETY_FIRST, "20,000円以上"])
        weights = calculate_personalized_weights(answers)
        # priority (0.25, 0.50, 0.15, 0.10); others share 0.90 of 0.85
        assert weights.cost == pytest.approx(0.10)
        assert weights.safety == pytest.approx(0.50 * 0.90 / 0.85)

    def test_first_budget_wins(self) -> None:
        answers = DiagnosisAnswers(lifestyle=["20,000円以上", "3,000円未満"])
        assert find_budget_answer(answers) == "20,000円以上"

    def test_budget_sensitivity_factor(self) -> None:
        factors = calculate_personalized_weights(
            DiagnosisAnswers(lifestyle=["3,000円未満"])
        ).personalized_factors
        assert factors.budget_sensitivity == pytest.approx(2.0)


# ── Invariant ─────────────────────────────────────────────────────────────────

class TestWeightInvariant:
    def test_every_answer_combination_is_valid(self) -> None:
        purposes = [[], ["睡眠の質改善"], list(PURPOSE_WEIGHT_OVERRIDES)]
        priorities = [None, *PRIORITY_WEIGHT_OVERRIDES]
        budgets = [None, *BUDGET_COST_WEIGHTS]

        for purpose, priority, budget in itertools.product(purposes, priorities, budgets):
            lifestyle = [x for x in (priority, budget) if x is not None]
            weights = calculate_personalized_weights(
                DiagnosisAnswers(purpose=purpose, lifestyle=lifestyle)
            )
            assert is_valid_weights(weights), (purpose, priority, budget)
            assert weights.total == pytest.approx(1.0)
            for value in _as_tuple(weights):
                assert 0.0 <= value <= 1.0

    def test_plain_weights_view(self, sample_answers: DiagnosisAnswers) -> None:
        weights = calculate_personalized_weights(sample_answers)
        plain = weights.as_score_weights()
        assert _as_tuple(plain) == _as_tuple(weights)
        assert not hasattr(plain, "personalized_factors")
