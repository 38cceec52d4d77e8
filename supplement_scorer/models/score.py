"""
Score output models.

``ScoreResult`` is produced fresh on every ``score()`` call and never
mutated afterwards. All models are frozen value objects, so a result can be
cached by the content hash of its inputs (see ``score_cache_key``).

``ScoreWeights`` does NOT validate its own invariant (each weight in
[0, 1], sum within 0.001 of 1.0). ``apply_weights`` rejects a malformed set
with ``WeightError`` and ``score()`` turns that into the fallback result.
Use ``supplement_scorer.scoring.weights.validate_weights`` to check.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, field_validator

from supplement_scorer.taxonomy.product_taxonomy import ScoreComponentName


class ScoreWeights(BaseModel):
    """Relative importance of the four score components."""

    model_config = ConfigDict(frozen=True)

    evidence: float
    safety: float
    cost: float
    practicality: float

    @property
    def total(self) -> float:
        """Sum of the four weights (1.0 for a well-formed set)."""
        return self.evidence + self.safety + self.cost + self.practicality

    def get(self, component: ScoreComponentName | str) -> float:
        return getattr(self, str(component))


class ScoreComponents(BaseModel):
    """Per-component scores, each clamped to [0, 100]."""

    model_config = ConfigDict(frozen=True)

    evidence: float
    safety: float
    cost: float
    practicality: float

    @field_validator("evidence", "safety", "cost", "practicality")
    @classmethod
    def clamp_to_score_range(cls, v: float) -> float:
        if math.isnan(v):
            return 0.0
        return max(0.0, min(100.0, v))

    def get(self, component: ScoreComponentName | str) -> float:
        return getattr(self, str(component))


class Factor(BaseModel):
    """One explainable input to a component score.

    Attributes:
        name: Short factor label, e.g. ``"エビデンスレベル"``.
        value: The factor's own 0–100 sub-score.
        weight: Share of the component this factor contributes (0–1).
        description: Human-readable detail for breakdown panels.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    value: float
    weight: float
    description: str


class ScoreBreakdown(BaseModel):
    """Audit trail for one component: its score and why it has that value."""

    model_config = ConfigDict(frozen=True)

    score: float
    factors: list[Factor]
    explanation: str


class ComponentBreakdowns(BaseModel):
    """One ``ScoreBreakdown`` per score component."""

    model_config = ConfigDict(frozen=True)

    evidence: ScoreBreakdown
    safety: ScoreBreakdown
    cost: ScoreBreakdown
    practicality: ScoreBreakdown

    def get(self, component: ScoreComponentName | str) -> ScoreBreakdown:
        return getattr(self, str(component))


class ScoreResult(BaseModel):
    """Complete scoring result for one product.

    Attributes:
        total: Weighted total, 0–100, rounded to one decimal.
        components: Per-component scores.
        weights: The weights the total was computed with.
        breakdown: Per-component factor lists and explanations.
        is_complete: ``True`` when no input data was missing.
        missing_data: Labels of the missing inputs (Japanese, UI-facing).
    """

    model_config = ConfigDict(frozen=True)

    total: float
    components: ScoreComponents
    weights: ScoreWeights
    breakdown: ComponentBreakdowns
    is_complete: bool
    missing_data: list[str] = []

    @field_validator("total")
    @classmethod
    def validate_total_range(cls, v: float) -> float:
        if not 0.0 <= v <= 100.0:
            raise ValueError(f"total must be in [0, 100], got {v}.")
        return v
