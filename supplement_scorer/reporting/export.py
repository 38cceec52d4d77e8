"""
Export helpers for comparison tables and manual analysis.

All ``export_*`` functions write to disk and return the written ``Path``.
They accept generic ``list[dict]`` data to stay decoupled from specific
result shapes.

CSV exports are flat (no nested dicts) so they load directly in Excel or
pandas without any pre-processing step. The ``flatten_*`` adapters turn
``ScoreResult`` / ``DiagnosisResult`` graphs into such flat rows:

- ``sc_*`` columns: component scores.
- ``w_*``  columns: the weights the total was computed with.
- ``missing_data`` / ``warnings`` / ``recommendations``: ``"; "``-joined.
"""

from __future__ import annotations

import csv
import json
from pathlib import Path

from supplement_scorer.models.diagnosis import DiagnosisResult
from supplement_scorer.models.score import ScoreResult
from supplement_scorer.taxonomy.product_taxonomy import COMPONENT_ORDER

LIST_SEPARATOR = "; "


def export_to_csv(
    records: list[dict],
    path: Path,
    fieldnames: list[str] | None = None,
) -> Path:
    """Write ``records`` to a UTF-8 CSV file.

    Args:
        records:    List of row dicts.
        path:       Destination file path (parent dirs created if missing).
        fieldnames: Column order.  If None, uses the keys of the first record.

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if not records:
        path.write_text("", encoding="utf-8")
        return path
    cols = fieldnames or list(records[0].keys())
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=cols, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(records)
    return path


def export_to_json(
    data: dict | list,
    path: Path,
) -> Path:
    """Write ``data`` to a pretty-printed UTF-8 JSON file.

    Args:
        data: Dict or list to serialise.
        path: Destination file path (parent dirs created if missing).

    Returns:
        ``path`` as written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(data, indent=2, ensure_ascii=False, default=str),
        encoding="utf-8",
    )
    return path


def flatten_score_result(
    result: ScoreResult,
    product_id: str = "",
    product_name: str = "",
) -> dict:
    """Flatten one ``ScoreResult`` into a single CSV row.

    Columns: ``product_id``, ``product_name``, ``total``, ``sc_<component>``
    and ``w_<component>`` for each component, ``is_complete``,
    ``missing_data``.
    """
    row: dict = {
        "product_id":   product_id,
        "product_name": product_name,
        "total":        result.total,
    }
    for component in COMPONENT_ORDER:
        row[f"sc_{component}"] = result.components.get(component)
    for component in COMPONENT_ORDER:
        row[f"w_{component}"] = round(result.weights.get(component), 4)
    row["is_complete"] = result.is_complete
    row["missing_data"] = LIST_SEPARATOR.join(result.missing_data)
    return row


def flatten_diagnosis_result(
    result: DiagnosisResult,
    product_id: str = "",
    product_name: str = "",
) -> dict:
    """Flatten one ``DiagnosisResult`` into a single CSV row.

    Starts from ``flatten_score_result(result.base_score)`` (with ``total``
    renamed ``base_total``) and adds the personalized columns.
    """
    base = flatten_score_result(result.base_score, product_id, product_name)
    base["base_total"] = base.pop("total")
    return {
        "product_id":         base.pop("product_id"),
        "product_name":       base.pop("product_name"),
        "personalized_score": result.personalized_score,
        **base,
        "cost_per_day":       result.cost_per_day,
        "danger_alert_count": len(result.danger_alerts),
        "danger_ingredients": LIST_SEPARATOR.join(a.ingredient for a in result.danger_alerts),
        "recommendations":    LIST_SEPARATOR.join(result.recommendations),
        "warnings":           LIST_SEPARATOR.join(result.warnings),
    }
