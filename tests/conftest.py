"""
Shared pytest fixtures for the Supplement Scorer test suite.

Provides:
  - Sample ``Product`` fixtures: a fully-specified product, an empty one,
    and products carrying risky ingredients.
  - Sample ``DiagnosisAnswers`` fixtures.
  - ``product_factory``: build a product with selective overrides.
  - ``restore_root_logger``: undo ``configure_logging`` after a test.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generator

import pytest

from supplement_scorer.models.diagnosis import DiagnosisAnswers
from supplement_scorer.models.product import IngredientEntry, Product
from supplement_scorer.taxonomy.product_taxonomy import EvidenceLevel, ProductForm


# ── Product factories ─────────────────────────────────────────────────────────

def make_product(**overrides: Any) -> Product:
    """A complete vitamin C product: 3,000 JPY, 60 servings, 2 per day.

    Derived figures: 100 JPY/day, 1,000 mg/day, 30-day container.
    """
    fields: dict[str, Any] = {
        "product_id": "vitc-1000",
        "name": "Vitamin C 1000",
        "ingredients": [
            IngredientEntry(
                name="ビタミンC",
                category="vitamin",
                evidence_level=EvidenceLevel.A,
                safety_notes=[],
                amount_mg_per_serving=500.0,
            )
        ],
        "price_jpy": 3000.0,
        "servings_per_container": 60.0,
        "servings_per_day": 2.0,
        "form": ProductForm.CAPSULE,
        "warnings": [],
        "third_party_tested": True,
    }
    fields.update(overrides)
    return Product(**fields)


def ingredient(name: str, **kwargs: Any) -> IngredientEntry:
    return IngredientEntry(name=name, **kwargs)


@pytest.fixture
def product_factory() -> Callable[..., Product]:
    return make_product


@pytest.fixture
def sample_product() -> Product:
    """A fully-specified product with no missing data."""
    return make_product()


@pytest.fixture
def empty_product() -> Product:
    """A product with no data at all."""
    return Product()


@pytest.fixture
def ephedra_product() -> Product:
    """A product containing a high-severity danger ingredient."""
    return make_product(
        product_id="burner-x",
        name="Fat Burner X",
        ingredients=[
            ingredient("エフェドラ", evidence_level=EvidenceLevel.C, amount_mg_per_serving=20.0),
            ingredient("ビタミンB群", evidence_level=EvidenceLevel.B, amount_mg_per_serving=50.0),
        ],
    )


@pytest.fixture
def caffeine_product() -> Product:
    """A product containing a medium-severity danger ingredient."""
    return make_product(
        product_id="focus-caf",
        name="Focus Caffeine",
        ingredients=[
            ingredient("カフェイン", evidence_level=EvidenceLevel.B, amount_mg_per_serving=100.0),
            ingredient("テアニン", evidence_level=EvidenceLevel.B, amount_mg_per_serving=200.0),
        ],
    )


# ── Questionnaire answers ─────────────────────────────────────────────────────

@pytest.fixture
def empty_answers() -> DiagnosisAnswers:
    return DiagnosisAnswers()


@pytest.fixture
def sample_answers() -> DiagnosisAnswers:
    """Immunity goal, monthly budget of 3,000-5,000 JPY, no conditions."""
    return DiagnosisAnswers(
        purpose=["免疫力向上"],
        constitution=[],
        lifestyle=["3,000円〜5,000円"],
    )


# ── Logging isolation ─────────────────────────────────────────────────────────

@pytest.fixture
def restore_root_logger() -> Generator[None, None, None]:
    """Undo ``configure_logging`` side effects on the root logger."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
