"""
ASCII terminal formatters for CLI output.

All formatters accept result models (or the comparison dataclasses) and
return plain multi-line strings suitable for ``typer.echo()``.

No third-party dependencies (no ``rich``, no ``colorama``).

Completeness banner
-------------------
Every score block starts with a completeness tag so readers can tell at a
glance whether the score rests on full data::

  [COMPLETE] All inputs available
  [PARTIAL]  Missing: 価格, 成分含有量
"""

from __future__ import annotations

from supplement_scorer.models.diagnosis import DiagnosisResult
from supplement_scorer.models.score import ScoreResult
from supplement_scorer.scoring.summary import ComponentSummary, ProductRanking
from supplement_scorer.taxonomy.product_taxonomy import COMPONENT_ORDER

_BAR_WIDTH = 20


def format_completeness_banner(result: ScoreResult) -> str:
    if result.is_complete:
        return "  [COMPLETE] All inputs available"
    return f"  [PARTIAL]  Missing: {', '.join(result.missing_data)}"


def format_score_bar(value: float, width: int = _BAR_WIDTH) -> str:
    """Render a 0–100 value as a fixed-width ``#``/``.`` bar."""
    filled = int(max(0.0, min(100.0, value)) / 100.0 * width + 0.5)
    return "#" * filled + "." * (width - filled)


def format_score_result(result: ScoreResult, title: str = "") -> str:
    """Format a ``ScoreResult`` with per-component bars and factor details.

    Example::

        === Score: Vitamin C 1000 ===
          Total: 82.4 / 100
          [COMPLETE] All inputs available

          Component      Score  Weight  Bar
          ----------------------------------------------------
          evidence        90.0    0.35  ##################..
            - エビデンスレベル: 90.0 (成分の科学的根拠の質 ...)
    """
    lines: list[str] = []
    lines.append("")
    lines.append(f"=== Score{': ' + title if title else ''} ===")
    lines.append(f"  Total: {result.total:.1f} / 100")
    lines.append(format_completeness_banner(result))
    lines.append("")

    header = f"  {'Component':<13}  {'Score':>5}  {'Weight':>6}  Bar"
    lines.append(header)
    lines.append("  " + "-" * (len(header) + _BAR_WIDTH - 1))
    for component in COMPONENT_ORDER:
        value = result.components.get(component)
        weight = result.weights.get(component)
        lines.append(
            f"  {component.value:<13}  {value:>5.1f}  {weight:>6.2f}  {format_score_bar(value)}"
        )
        for factor in result.breakdown.get(component).factors:
            lines.append(f"    - {factor.name}: {factor.value:.1f} ({factor.description})")

    return "\n".join(lines)


def format_diagnosis_result(result: DiagnosisResult, title: str = "") -> str:
    """Format a ``DiagnosisResult``: base score, penalty, alerts and advice."""
    lines: list[str] = [format_score_result(result.base_score, title)]
    lines.append("")
    lines.append(f"  Personalized score: {result.personalized_score:.1f} / 100")
    lines.append(f"  Cost per day:       {result.cost_per_day:.0f} JPY")

    if result.danger_alerts:
        lines.append("")
        lines.append("  Danger alerts:")
        for alert in result.danger_alerts:
            lines.append(f"    [{alert.severity.value.upper()}] {alert.ingredient}: {alert.description}")
            lines.append(f"      {alert.reason}")
            lines.append(f"      -> {alert.recommendation}")

    for heading, items in (
        ("Recommendations", result.recommendations),
        ("Warnings", result.warnings),
        ("Persona warnings", [w.message for w in result.persona_warnings]),
    ):
        if items:
            lines.append("")
            lines.append(f"  {heading}:")
            lines.extend(f"    * {item}" for item in items)

    return "\n".join(lines)


def format_ranking_table(
    rankings:  list[ProductRanking],
    summaries: list[ComponentSummary],
) -> str:
    """Format a comparison: ranking table followed by per-component spread."""
    lines: list[str] = []
    lines.append("")
    lines.append("=== Product Comparison ===")

    if not rankings:
        lines.append("")
        lines.append("  (no products to compare)")
        return "\n".join(lines)

    lines.append("")
    header = f"  {'Rank':>4}  {'Product':<30}  {'Score':>6}  {'Pctl':>6}"
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for r in rankings:
        lines.append(
            f"  {r.rank:>4}  {r.product_id[:30]:<30}  {r.score:>6.1f}  {r.percentile:>5.0f}%"
        )

    if summaries:
        lines.append("")
        header = f"  {'Category':<13}  {'Min':>6}  {'Avg':>6}  {'Max':>6}  Best"
        lines.append(header)
        lines.append("  " + "-" * (len(header) + 20))
        for s in summaries:
            lines.append(
                f"  {s.category:<13}  {s.min_score:>6.1f}  {s.average_score:>6.1f}  "
                f"{s.max_score:>6.1f}  {s.best_product_id}"
            )

    return "\n".join(lines)
