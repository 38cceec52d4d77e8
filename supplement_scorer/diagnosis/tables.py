"""
Static lookup tables for questionnaire personalization.

All keys are the exact labels of the Japanese questionnaire vocabulary.
Tables are immutable (``MappingProxyType`` / tuples / frozensets) and are
safe for unsynchronized concurrent reads.

Tables
------
PURPOSE_WEIGHT_OVERRIDES   purpose label       -> full weight set
PRIORITY_WEIGHT_OVERRIDES  priority statement  -> full weight set
BUDGET_COST_WEIGHTS        monthly budget      -> cost weight
BUDGET_MONTHLY_LIMITS      monthly budget      -> upper limit in JPY
DANGER_INGREDIENTS         canonical name      -> DangerIngredient
PURPOSE_KEY_INGREDIENTS    purpose label       -> ingredient names that serve it
ALLERGEN_KEYWORDS          allergy label       -> substrings in ingredient names
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from supplement_scorer.models.score import ScoreWeights
from supplement_scorer.taxonomy.product_taxonomy import AlertSeverity


def _w(evidence: float, safety: float, cost: float, practicality: float) -> ScoreWeights:
    return ScoreWeights(evidence=evidence, safety=safety, cost=cost, practicality=practicality)


# ── Weight overrides ──────────────────────────────────────────────────────────

PURPOSE_WEIGHT_OVERRIDES: Mapping[str, ScoreWeights] = MappingProxyType({
    "疲労回復・エネルギー向上":  _w(0.40, 0.25, 0.20, 0.15),
    "美容・アンチエイジング":    _w(0.35, 0.35, 0.15, 0.15),
    "免疫力向上":                _w(0.40, 0.30, 0.15, 0.15),
    "筋力・体力向上":            _w(0.45, 0.25, 0.15, 0.15),
    "睡眠の質改善":              _w(0.35, 0.40, 0.15, 0.10),
    "集中力・記憶力向上":        _w(0.45, 0.30, 0.15, 0.10),
    "骨・関節の健康":            _w(0.40, 0.35, 0.15, 0.10),
    "ダイエット・体重管理":      _w(0.35, 0.35, 0.20, 0.10),
    "ストレス軽減":              _w(0.30, 0.40, 0.15, 0.15),
    "栄養補給":                  _w(0.30, 0.30, 0.25, 0.15),
})

PRIORITY_WEIGHT_OVERRIDES: Mapping[str, ScoreWeights] = MappingProxyType({
    "即効性（すぐに効果を感じたい）":               _w(0.45, 0.25, 0.15, 0.15),
    "持続性（長期的な健康維持）":                   _w(0.35, 0.35, 0.15, 0.15),
    "安全性（副作用のリスクを最小限に）":           _w(0.25, 0.50, 0.15, 0.10),
    "コストパフォーマンス（価格と効果のバランス）": _w(0.30, 0.25, 0.35, 0.10),
})

BUDGET_COST_WEIGHTS: Mapping[str, float] = MappingProxyType({
    "3,000円未満":         0.40,
    "3,000円〜5,000円":    0.30,
    "5,000円〜10,000円":   0.20,
    "10,000円〜20,000円":  0.15,
    "20,000円以上":        0.10,
})

BUDGET_MONTHLY_LIMITS: Mapping[str, float] = MappingProxyType({
    "3,000円未満":         3_000.0,
    "3,000円〜5,000円":    5_000.0,
    "5,000円〜10,000円":  10_000.0,
    "10,000円〜20,000円": 20_000.0,
    "20,000円以上":       50_000.0,
})


# ── Danger ingredients ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class DangerIngredient:
    """A risky substance and the user conditions it is contraindicated for.

    Attributes:
        name:              Canonical (display) name used in alerts.
        aliases:           Lower-cased names matched against ingredient names.
        severity:          Fixed alert severity.
        description:       What the risk is.
        recommendation:    What the user should do.
        contraindications: Constitution labels that trigger an alert.
    """

    name:              str
    aliases:           frozenset[str]
    severity:          AlertSeverity
    description:       str
    recommendation:    str
    contraindications: frozenset[str]


def _danger(
    name: str,
    aliases: tuple[str, ...],
    severity: AlertSeverity,
    description: str,
    recommendation: str,
    contraindications: tuple[str, ...],
) -> DangerIngredient:
    return DangerIngredient(
        name=name,
        aliases=frozenset(a.lower() for a in (name, *aliases)),
        severity=severity,
        description=description,
        recommendation=recommendation,
        contraindications=frozenset(contraindications),
    )


DANGER_INGREDIENTS: Mapping[str, DangerIngredient] = MappingProxyType({
    d.name: d for d in (
        _danger(
            "カフェイン", ("caffeine", "無水カフェイン", "anhydrous caffeine"),
            AlertSeverity.MEDIUM,
            "過剰摂取により不眠、動悸、不安感を引き起こす可能性があります",
            "1日400mg以下に制限し、就寝6時間前の摂取は避けてください",
            ("不眠・睡眠不足", "ストレス・イライラ", "カフェインに敏感", "妊娠中"),
        ),
        _danger(
            "エフェドラ", ("ephedra", "麻黄", "ephedrine", "エフェドリン"),
            AlertSeverity.HIGH,
            "心血管系への重篤な副作用のリスクがあります",
            "医師の指導なしに摂取しないでください",
            ("心血管疾患", "高血圧"),
        ),
        _danger(
            "ヨヒンビン", ("yohimbine", "ヨヒンベ", "yohimbe"),
            AlertSeverity.HIGH,
            "血圧上昇、心拍数増加、不安感を引き起こす可能性があります",
            "医師の指導なしに摂取しないでください",
            ("心血管疾患", "不安障害"),
        ),
        _danger(
            "DMAA", ("1,3-dimethylamylamine", "ジメチルアミルアミン"),
            AlertSeverity.HIGH,
            "心血管系への重篤な副作用のリスクがあります",
            "摂取を避けてください",
            ("心血管疾患",),
        ),
        _danger(
            "シネフリン", ("synephrine", "ビターオレンジ", "bitter orange"),
            AlertSeverity.MEDIUM,
            "心拍数や血圧を上昇させる可能性があります",
            "カフェインとの併用を避け、体調に注意して摂取してください",
            ("心血管疾患", "高血圧"),
        ),
        _danger(
            "セントジョーンズワート", ("st john's wort", "セイヨウオトギリソウ"),
            AlertSeverity.MEDIUM,
            "多くの医薬品の効果を弱める相互作用が知られています",
            "服用中の薬がある場合は医師または薬剤師に相談してください",
            ("薬を服用中", "妊娠中"),
        ),
    )
})


# ── Recommendation / warning vocabularies ─────────────────────────────────────

PURPOSE_KEY_INGREDIENTS: Mapping[str, frozenset[str]] = MappingProxyType({
    "疲労回復・エネルギー向上": frozenset({"ビタミンB群", "コエンザイムQ10", "クレアチン"}),
    "美容・アンチエイジング":   frozenset({"ビタミンC", "ビタミンE", "コラーゲン", "ヒアルロン酸"}),
    "免疫力向上":               frozenset({"ビタミンD", "亜鉛", "ビタミンC"}),
    "睡眠の質改善":             frozenset({"グリシン", "テアニン", "マグネシウム"}),
    "骨・関節の健康":           frozenset({"カルシウム", "ビタミンD", "グルコサミン"}),
})

ALLERGEN_KEYWORDS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "乳製品":     ("乳成分", "牛乳", "粉乳", "ホエイ", "カゼイン", "milk", "whey", "casein"),
    "大豆":       ("大豆", "ソイ", "soy"),
    "卵":         ("卵", "egg"),
    "魚・甲殻類": ("魚", "フィッシュ", "甲殻", "エビ", "カニ", "fish", "shellfish"),
    "ナッツ類":   ("ナッツ", "アーモンド", "nuts", "peanut", "almond", "walnut"),
    "グルテン":   ("グルテン", "小麦", "gluten", "wheat"),
})

MEDICATION_ANSWER = "薬を服用中"
