"""
Supplement Scorer CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Read and validate input JSON files.
  4. Run the scoring engine (pure; config values passed in explicitly).
  5. Report result to stdout (text, or JSON with ``--json-output``).

Install and run::

    pip install -e .
    supplement-scorer --help
    supplement-scorer validate-config
    supplement-scorer score product.json
    supplement-scorer score product.json --weights 0.4,0.3,0.2,0.1
    supplement-scorer diagnose product.json --answers answers.json --csv data/outputs/diagnosis.csv
    supplement-scorer compare products.json --csv data/outputs/compare.csv
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer

app = typer.Typer(
    name="supplement-scorer",
    help="Supplement product scoring and questionnaire personalization CLI.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from supplement_scorer.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from supplement_scorer.utils.logging import configure_logging
    configure_logging(config.logging)


def _read_json_or_exit(path_str: str) -> Any:
    path = Path(path_str)
    if not path.exists():
        typer.echo(f"[ERROR] File not found: {path}", err=True)
        raise typer.Exit(code=1)
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (json.JSONDecodeError, OSError) as exc:
        typer.echo(f"[ERROR] JSON parse error in {path}: {exc}", err=True)
        raise typer.Exit(code=1)


def _validate_or_exit(model_cls, raw: Any, label: str):
    from pydantic import ValidationError

    if not isinstance(raw, dict):
        typer.echo(f"[ERROR] {label} must be a JSON object.", err=True)
        raise typer.Exit(code=1)
    try:
        return model_cls(**raw)
    except ValidationError as exc:
        typer.echo(f"[ERROR] {label} failed validation:\n{exc}", err=True)
        raise typer.Exit(code=1)


def _parse_weights_or_exit(weights: Optional[str], config):
    """Parse ``--weights e,s,c,p``; fall back to the configured defaults."""
    from supplement_scorer.models.score import ScoreWeights

    if not weights:
        return config.scoring.default_weights.to_score_weights()

    parts = [p.strip() for p in weights.split(",")]
    if len(parts) != 4:
        typer.echo(
            "[ERROR] --weights needs four comma-separated numbers: "
            "evidence,safety,cost,practicality",
            err=True,
        )
        raise typer.Exit(code=1)
    try:
        e, s, c, p = (float(x) for x in parts)
    except ValueError:
        typer.echo(f"[ERROR] --weights values must be numbers, got '{weights}'.", err=True)
        raise typer.Exit(code=1)
    # Validated by the engine; bad weights yield the fallback result.
    return ScoreWeights(evidence=e, safety=s, cost=c, practicality=p)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values."""
    config = _load_config_or_exit(config_path)

    w = config.scoring.default_weights
    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(
        f"  Default weights:  evidence={w.evidence} safety={w.safety} "
        f"cost={w.cost} practicality={w.practicality}"
    )
    typer.echo(f"  Cost reference:   {config.scoring.reference_cost_per_mg_per_day} JPY/mg/day")
    typer.echo(f"  Output dir:       {config.export.output_dir}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("score")
def score_product(
    product_file: str = typer.Argument(..., help="Path to a product JSON object."),
    weights: Optional[str] = typer.Option(
        None,
        "--weights",
        help="Custom weights 'evidence,safety,cost,practicality' (must sum to 1.0).",
    ),
    json_output: bool = typer.Option(
        False,
        "--json-output",
        help="Print the full ScoreResult as JSON instead of a text report.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Score one product with default (or custom) weights."""
    from supplement_scorer.models.product import Product
    from supplement_scorer.reporting.formatters import format_score_result
    from supplement_scorer.scoring.engine import score

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    product = _validate_or_exit(Product, _read_json_or_exit(product_file), "Product")
    score_weights = _parse_weights_or_exit(weights, config)

    result = score(
        product,
        score_weights,
        reference_cost_per_mg_per_day=config.scoring.reference_cost_per_mg_per_day,
    )

    if json_output:
        typer.echo(json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False))
    else:
        typer.echo(format_score_result(result, product.name or product.product_id or ""))


@app.command("diagnose")
def diagnose_product(
    product_file: str = typer.Argument(..., help="Path to a product JSON object."),
    answers_file: str = typer.Option(
        ...,
        "--answers",
        "-a",
        help="Path to questionnaire answers JSON ({purpose, constitution, lifestyle}).",
    ),
    json_output: bool = typer.Option(
        False,
        "--json-output",
        help="Print the full DiagnosisResult as JSON instead of a text report.",
    ),
    csv_path: Optional[str] = typer.Option(
        None,
        "--csv",
        help="Also write the result as a one-row flat CSV to this path.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Score one product personalized to a questionnaire."""
    from supplement_scorer.diagnosis.engine import diagnosis_score
    from supplement_scorer.models.diagnosis import DiagnosisAnswers
    from supplement_scorer.models.product import Product
    from supplement_scorer.reporting.export import export_to_csv, flatten_diagnosis_result
    from supplement_scorer.reporting.formatters import format_diagnosis_result

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    product = _validate_or_exit(Product, _read_json_or_exit(product_file), "Product")
    answers = _validate_or_exit(
        DiagnosisAnswers, _read_json_or_exit(answers_file), "Answers"
    )

    result = diagnosis_score(
        product,
        answers,
        reference_cost_per_mg_per_day=config.scoring.reference_cost_per_mg_per_day,
    )

    if json_output:
        typer.echo(json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False))
    else:
        typer.echo(format_diagnosis_result(result, product.name or product.product_id or ""))

    if csv_path:
        row = flatten_diagnosis_result(result, product.product_id or "", product.name or "")
        written = export_to_csv([row], Path(csv_path))
        # Keep stdout parseable when it carries JSON.
        typer.echo(f"  CSV written: {written}", err=json_output)


@app.command("compare")
def compare_products(
    products_file: str = typer.Argument(..., help="Path to a JSON array of products."),
    csv_path: Optional[str] = typer.Option(
        None,
        "--csv",
        help="Also write a flat CSV of all scores to this path.",
    ),
    json_path: Optional[str] = typer.Option(
        None,
        "--json",
        help="Also write full ScoreResults as JSON to this path.",
    ),
    export: bool = typer.Option(
        False,
        "--export",
        help="Write comparison.csv and comparison.json to the configured output_dir.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Score several products and print a ranked comparison table."""
    from pydantic import ValidationError

    from supplement_scorer.models.product import Product
    from supplement_scorer.reporting.export import (
        export_to_csv,
        export_to_json,
        flatten_score_result,
    )
    from supplement_scorer.reporting.formatters import format_ranking_table
    from supplement_scorer.scoring.summary import (
        rank_products,
        score_many,
        summarize_components,
    )

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    raw_products = _read_json_or_exit(products_file)
    if not isinstance(raw_products, list):
        typer.echo("[ERROR] Products file must contain a JSON array.", err=True)
        raise typer.Exit(code=1)

    products: list[Product] = []
    errors: list[tuple[int, str]] = []
    for i, raw in enumerate(raw_products):
        try:
            products.append(Product(**raw))
        except (ValidationError, TypeError) as exc:
            errors.append((i, str(exc)))

    if errors:
        typer.echo(f"[ERROR] {len(errors)} product(s) failed validation:", err=True)
        for idx, msg in errors[:5]:
            typer.echo(f"  Product #{idx}: {msg}", err=True)
        if len(errors) > 5:
            typer.echo(f"  ... and {len(errors) - 5} more.", err=True)
        raise typer.Exit(code=1)

    scored = score_many(
        products,
        config.scoring.default_weights.to_score_weights(),
        reference_cost_per_mg_per_day=config.scoring.reference_cost_per_mg_per_day,
    )
    typer.echo(format_ranking_table(rank_products(scored), summarize_components(scored)))

    if export:
        out_dir = Path(config.export.output_dir)
        csv_path = csv_path or str(out_dir / "comparison.csv")
        json_path = json_path or str(out_dir / "comparison.json")

    names = {p.product_id: p.name or "" for p in products if p.product_id}
    if csv_path:
        rows = [
            flatten_score_result(sp.result, sp.product_id, names.get(sp.product_id, ""))
            for sp in scored
        ]
        written = export_to_csv(rows, Path(csv_path))
        typer.echo(f"  CSV written: {written}")
    if json_path:
        data = [
            {"product_id": sp.product_id, **sp.result.model_dump(mode="json")}
            for sp in scored
        ]
        written = export_to_json(data, Path(json_path))
        typer.echo(f"  JSON written: {written}")


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
