"""
Product input models.

``Product`` is the immutable record the scoring engine consumes. It is
supplied by a content-fetching collaborator (CMS export, fixtures, JSON
file) and never mutated by the engine.

Optional fields model "not known" explicitly:

- ``warnings=None``  means the product's warnings were never recorded.
- ``warnings=[]``    means the product is known to carry no warnings.

The same distinction applies to ``IngredientEntry.safety_notes``. The
safety calculator scores *unknown* risk lower than *proven zero* risk, so
the two must not be conflated.

Numeric fields accept zero, negative and non-finite values. The calculators
treat them as missing data and fall back, so they are not rejected here.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from supplement_scorer.taxonomy.product_taxonomy import (
    EvidenceLevel,
    ProductForm,
    SideEffectLevel,
)


class IngredientEntry(BaseModel):
    """One ingredient line of a product's formulation.

    Attributes:
        name: Ingredient display name, e.g. ``"ビタミンC"`` or ``"caffeine"``.
        category: Free-form ingredient category, e.g. ``"vitamin"``.
        evidence_level: Evidence grade A/B/C, or ``None`` if ungraded.
        safety_notes: Known safety notes; ``None`` if never recorded.
        amount_mg_per_serving: Amount per serving in mg, or ``None``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    category: Optional[str] = None
    evidence_level: Optional[EvidenceLevel] = None
    safety_notes: Optional[list[str]] = None
    amount_mg_per_serving: Optional[float] = None

    @field_validator("name")
    @classmethod
    def validate_name_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("ingredient name must not be empty.")
        return v.strip()


class Product(BaseModel):
    """A supplement product as seen by the scoring engine.

    Attributes:
        product_id: Caller-side identifier (slug, CMS id), optional.
        name: Display name, optional.
        ingredients: Formulation; empty when unknown.
        price_jpy: Reference price of one container in JPY.
        servings_per_container: Number of servings in one container.
        servings_per_day: Recommended servings per day.
        form: Dosage form; unrecognized strings become ``None``.
        warnings: Label warnings; ``None`` if never recorded.
        side_effect_level: Product-level side-effect marker, if known.
        third_party_tested: Whether an independent lab verified the product.
    """

    model_config = ConfigDict(frozen=True)

    product_id: Optional[str] = None
    name: Optional[str] = None
    ingredients: list[IngredientEntry] = []
    price_jpy: Optional[float] = None
    servings_per_container: Optional[float] = None
    servings_per_day: Optional[float] = None
    form: Optional[ProductForm] = None
    warnings: Optional[list[str]] = None
    side_effect_level: Optional[SideEffectLevel] = None
    third_party_tested: bool = False

    @field_validator("form", mode="before")
    @classmethod
    def coerce_unknown_form(cls, v: Any) -> Any:
        if v is None or isinstance(v, ProductForm):
            return v
        try:
            return ProductForm(str(v).strip().lower())
        except ValueError:
            return None

    @field_validator("ingredients", mode="before")
    @classmethod
    def coerce_missing_ingredients(cls, v: Any) -> Any:
        return [] if v is None else v
