"""
Diagnosis (questionnaire personalization) models.

``DiagnosisAnswers`` holds the labels a user picked in the health
questionnaire. Labels come from a fixed Japanese vocabulary (see
``supplement_scorer.diagnosis.tables``); unrecognized labels are tolerated
everywhere and simply have no effect.

``DiagnosisResult`` is created per ``diagnosis_score()`` call. ``total_score``
duplicates ``personalized_score`` for consumers that read the older field.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from supplement_scorer.models.score import ScoreResult, ScoreWeights
from supplement_scorer.taxonomy.product_taxonomy import AlertSeverity


class DiagnosisAnswers(BaseModel):
    """Questionnaire answers.

    Attributes:
        purpose: Health goals, e.g. ``"睡眠の質改善"``.
        constitution: Health conditions, allergies and medication status,
            e.g. ``"高血圧"``, ``"大豆"``, ``"薬を服用中"``.
        lifestyle: Priority statement and budget bracket, e.g.
            ``"安全性（副作用のリスクを最小限に）"``, ``"3,000円未満"``.
    """

    model_config = ConfigDict(frozen=True)

    purpose: list[str] = []
    constitution: list[str] = []
    lifestyle: list[str] = []


class PersonalizedFactors(BaseModel):
    """Ratios of each derived weight to its default; for UI display only."""

    model_config = ConfigDict(frozen=True)

    budget_sensitivity: float
    safety_concern: float
    convenience_priority: float
    evidence_requirement: float


class PersonalizedWeights(ScoreWeights):
    """``ScoreWeights`` re-derived from questionnaire answers."""

    personalized_factors: PersonalizedFactors

    def as_score_weights(self) -> ScoreWeights:
        return ScoreWeights(
            evidence=self.evidence,
            safety=self.safety,
            cost=self.cost,
            practicality=self.practicality,
        )


class DangerAlert(BaseModel):
    """A flagged ingredient with a user-specific rationale."""

    model_config = ConfigDict(frozen=True)

    ingredient: str
    severity: AlertSeverity
    description: str
    recommendation: str
    reason: str


class PersonaWarning(BaseModel):
    """A persona-rule hit, aggregated across matching ingredients.

    Attributes:
        rule_id: Id of the (first) rule that produced this warning.
        severity: ``"low"``, ``"mid"`` or ``"high"``.
        message: User-facing warning text; unique within one check result.
        action: Suggested action, if the rule defines one.
        affected_ingredients: Matched ingredient patterns, deduplicated.
    """

    model_config = ConfigDict(frozen=True)

    rule_id: str
    severity: str
    message: str
    action: Optional[str] = None
    affected_ingredients: list[str] = []


class PersonaCheckResult(BaseModel):
    """Outcome of checking one product against a set of persona tags."""

    model_config = ConfigDict(frozen=True)

    has_warnings: bool
    warnings: list[PersonaWarning] = []


class DiagnosisResult(BaseModel):
    """Personalized scoring result for one product and one questionnaire.

    Attributes:
        total_score: Same value as ``personalized_score``.
        personalized_score: ``base_score.total`` minus the danger-alert
            penalty, floored at 0, one decimal.
        base_score: Unpenalized score computed with personalized weights.
        cost_per_day: Effective cost per day in JPY (0 when unknown).
        danger_alerts: Alerts for risky ingredients.
        recommendations: Reasons this product fits the user.
        warnings: Cautions for this user.
        persona_warnings: Persona-rule hits (pregnancy, medication, ...).
    """

    model_config = ConfigDict(frozen=True)

    total_score: float
    personalized_score: float
    base_score: ScoreResult
    cost_per_day: float
    danger_alerts: list[DangerAlert] = []
    recommendations: list[str] = []
    warnings: list[str] = []
    persona_warnings: list[PersonaWarning] = []

    @model_validator(mode="after")
    def validate_score_consistency(self) -> "DiagnosisResult":
        if self.total_score != self.personalized_score:
            raise ValueError(
                f"total_score ({self.total_score}) must equal "
                f"personalized_score ({self.personalized_score})."
            )
        if not 0.0 <= self.personalized_score <= 100.0:
            raise ValueError(
                f"personalized_score must be in [0, 100], got {self.personalized_score}."
            )
        return self
