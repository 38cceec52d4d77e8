"""
Persona rules: situation-specific ingredient cautions (pregnancy, lactation,
medication, stimulant sensitivity).

Each rule lists ``|``-separated ingredient patterns. A rule fires when any
pattern occurs (case-insensitive substring) in the product's searchable
text: product name plus ingredient names.

Aggregation
-----------
1. Warnings with the same message are merged: affected ingredients are
   unioned (first-seen order) and the highest severity is kept.
2. The merged warnings are sorted by severity, high → mid → low. The sort
   is stable, so equal severities keep rule order.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

from supplement_scorer.models.diagnosis import (
    DiagnosisAnswers,
    PersonaCheckResult,
    PersonaWarning,
)
from supplement_scorer.models.product import Product
from supplement_scorer.taxonomy.product_taxonomy import PersonaTag

SEVERITY_ORDER: Mapping[str, int] = MappingProxyType({"high": 3, "mid": 2, "low": 1})

# Constitution answer -> persona tag
CONSTITUTION_PERSONA_TAGS: Mapping[str, PersonaTag] = MappingProxyType({
    "妊娠中":           PersonaTag.PREGNANCY,
    "授乳中":           PersonaTag.LACTATION,
    "薬を服用中":       PersonaTag.MEDICATION,
    "カフェインに敏感": PersonaTag.STIMULANT_SENSITIVITY,
})


@dataclass(frozen=True)
class PersonaRule:
    id:                 str
    tag:                PersonaTag
    ingredient:         str
    severity:           str
    message:            str
    recommended_action: Optional[str] = None

    @property
    def patterns(self) -> tuple[str, ...]:
        return tuple(p.strip().lower() for p in self.ingredient.split("|") if p.strip())


PERSONA_RULES: tuple[PersonaRule, ...] = (
    # Pregnancy
    PersonaRule(
        "pregnancy-caffeine", PersonaTag.PREGNANCY, "カフェイン|caffeine", "high",
        "妊娠中はカフェインの摂取に注意が必要です", "医師に相談してください",
    ),
    PersonaRule(
        "pregnancy-vitamin-a", PersonaTag.PREGNANCY,
        "ビタミンA|レチノール|vitamin a|retinol", "high",
        "妊娠中は過剰なビタミンA摂取は避けてください", "医師に相談してください",
    ),
    PersonaRule(
        "pregnancy-herbs", PersonaTag.PREGNANCY,
        "セントジョーンズワート|聖ヨハネ草|st john|エキナセア|echinacea", "mid",
        "妊娠中は一部のハーブサプリメントの使用に注意が必要です",
        "使用前に医師に相談してください",
    ),
    # Lactation
    PersonaRule(
        "lactation-herbs", PersonaTag.LACTATION,
        "セントジョーンズワート|聖ヨハネ草|st john", "mid",
        "授乳中は一部のハーブが母乳に影響する可能性があります",
        "使用前に医師に相談してください",
    ),
    PersonaRule(
        "lactation-caffeine", PersonaTag.LACTATION, "カフェイン|caffeine", "mid",
        "授乳中のカフェイン摂取は適量に留めてください",
        "1日200mg以下に制限することをお勧めします",
    ),
    # Medication interactions
    PersonaRule(
        "medication-vitamin-k", PersonaTag.MEDICATION,
        "ビタミンK|vitamin k|ワルファリン|warfarin", "high",
        "服薬中の方は成分の相互作用にご注意ください",
        "医師または薬剤師に相談してください",
    ),
    PersonaRule(
        "medication-ginkgo", PersonaTag.MEDICATION, "イチョウ葉|ginkgo|銀杏", "mid",
        "血液凝固に影響する薬剤との相互作用の可能性があります",
        "医師または薬剤師に相談してください",
    ),
    # Stimulant sensitivity
    PersonaRule(
        "stimulant-caffeine", PersonaTag.STIMULANT_SENSITIVITY, "カフェイン|caffeine", "mid",
        "刺激物に敏感な方は注意が必要な成分が含まれています",
        "少量から始めることをお勧めします",
    ),
    PersonaRule(
        "stimulant-guarana", PersonaTag.STIMULANT_SENSITIVITY, "ガラナ|guarana", "mid",
        "刺激物に敏感な方は注意が必要な成分が含まれています",
        "少量から始めることをお勧めします",
    ),
    PersonaRule(
        "stimulant-taurine", PersonaTag.STIMULANT_SENSITIVITY, "タウリン|taurine", "low",
        "刺激物に敏感な方は注意が必要な成分が含まれています",
        "体調に注意して摂取してください",
    ),
)


def persona_tags_from_answers(answers: DiagnosisAnswers) -> list[PersonaTag]:
    """Map constitution answers onto persona tags (deduplicated, answer order)."""
    tags = [
        CONSTITUTION_PERSONA_TAGS[a] for a in answers.constitution
        if a in CONSTITUTION_PERSONA_TAGS
    ]
    return list(dict.fromkeys(tags))


def check_persona_rules(
    product:      Product,
    persona_tags: list[PersonaTag] | list[str],
) -> PersonaCheckResult:
    """Check ``product`` against the rules of every tag in ``persona_tags``."""
    tags = {str(t) for t in persona_tags}
    rules = [r for r in PERSONA_RULES if r.tag in tags]
    if not rules:
        return PersonaCheckResult(has_warnings=False, warnings=[])

    text = _searchable_text(product)
    raw: list[PersonaWarning] = []
    for rule in rules:
        matched = list(dict.fromkeys(p for p in rule.patterns if p in text))
        if matched:
            raw.append(
                PersonaWarning(
                    rule_id=rule.id,
                    severity=rule.severity,
                    message=rule.message,
                    action=rule.recommended_action,
                    affected_ingredients=matched,
                )
            )

    warnings = sort_by_severity(deduplicate_messages(raw))
    return PersonaCheckResult(has_warnings=bool(warnings), warnings=warnings)


def deduplicate_messages(warnings: list[PersonaWarning]) -> list[PersonaWarning]:
    """Merge warnings sharing a message (see module docstring)."""
    merged: dict[str, PersonaWarning] = {}
    for warning in warnings:
        existing = merged.get(warning.message)
        if existing is None:
            merged[warning.message] = warning
            continue
        ingredients = list(dict.fromkeys(
            existing.affected_ingredients + warning.affected_ingredients
        ))
        severity = existing.severity
        if SEVERITY_ORDER.get(warning.severity, 0) > SEVERITY_ORDER.get(severity, 0):
            severity = warning.severity
        merged[warning.message] = existing.model_copy(
            update={"affected_ingredients": ingredients, "severity": severity}
        )
    return list(merged.values())


def sort_by_severity(warnings: list[PersonaWarning]) -> list[PersonaWarning]:
    return sorted(warnings, key=lambda w: -SEVERITY_ORDER.get(w.severity, 0))


def _searchable_text(product: Product) -> str:
    parts = [product.name or ""] + [ing.name for ing in product.ingredients]
    return " ".join(p for p in parts if p).lower()
