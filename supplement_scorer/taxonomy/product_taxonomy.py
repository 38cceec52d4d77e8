"""
Product taxonomy for supplement scoring.

Categorical vocabularies shared by the product models, the scoring engine
and the diagnosis layer:
  - ``EvidenceLevel``      - externally supplied grade of scientific support.
  - ``ProductForm``        - physical dosage form, ranked for practicality.
  - ``SideEffectLevel``    - product-level side-effect marker.
  - ``AlertSeverity``      - severity of a personalized danger alert.
  - ``ScoreComponentName`` - the four weighted score components.
  - ``PersonaTag``         - user situations that trigger persona warnings.

Usage example::

    from supplement_scorer.taxonomy.product_taxonomy import EvidenceLevel

    level = EvidenceLevel.A

This module has NO imports from any other ``supplement_scorer`` package.
"""

from enum import StrEnum


class EvidenceLevel(StrEnum):
    """Grade of scientific support for an ingredient."""

    A = "A"
    """Multiple high-quality RCTs or meta-analyses."""

    B = "B"
    """Limited RCTs or consistent observational evidence."""

    C = "C"
    """Preliminary, animal or mechanistic evidence only."""


class ProductForm(StrEnum):
    """Physical dosage form of a product."""

    CAPSULE = "capsule"
    SOFTGEL = "softgel"
    TABLET = "tablet"
    GUMMY = "gummy"
    LIQUID = "liquid"
    POWDER = "powder"


class SideEffectLevel(StrEnum):
    """Reported side-effect severity for a product as a whole."""

    NONE = "none"
    LOW = "low"
    MID = "mid"
    HIGH = "high"
    """High-severity marker: forces the lowest safety band."""


class AlertSeverity(StrEnum):
    """Severity of a personalized danger alert."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ScoreComponentName(StrEnum):
    """The four weighted components of a product score, in canonical order."""

    EVIDENCE = "evidence"
    SAFETY = "safety"
    COST = "cost"
    PRACTICALITY = "practicality"


class PersonaTag(StrEnum):
    """User situations that make some ingredients need extra caution."""

    PREGNANCY = "pregnancy"
    LACTATION = "lactation"
    MEDICATION = "medication"
    STIMULANT_SENSITIVITY = "stimulant-sensitivity"


COMPONENT_ORDER: tuple[ScoreComponentName, ...] = tuple(ScoreComponentName)
