"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      - committed static defaults
  2. ``config/local.toml``        - optional local overrides (gitignored)
  3. ``.env``                     - local env overrides (gitignored)
  4. Environment variables        - ``SUPPLEMENT_SCORER_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The scoring engine itself never reads configuration: it is a pure function
of its inputs. The CLI loads an ``AppConfig`` and passes the relevant values
(default weights, cost reference) into the engine explicitly.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from supplement_scorer.models.score import ScoreWeights
from supplement_scorer.scoring.calculators import REFERENCE_COST_PER_MG_PER_DAY
from supplement_scorer.scoring.weights import DEFAULT_WEIGHTS, WeightError, validate_weights

# ── Sub-config models ─────────────────────────────────────────────────────────


class WeightsConfig(BaseModel):
    """Default component weights used when no personalization applies."""

    model_config = ConfigDict(frozen=True)

    evidence: float = DEFAULT_WEIGHTS.evidence
    safety: float = DEFAULT_WEIGHTS.safety
    cost: float = DEFAULT_WEIGHTS.cost
    practicality: float = DEFAULT_WEIGHTS.practicality

    @model_validator(mode="after")
    def validate_weight_invariant(self) -> "WeightsConfig":
        try:
            validate_weights(self.to_score_weights())
        except WeightError as exc:
            raise ValueError(str(exc)) from exc
        return self

    def to_score_weights(self) -> ScoreWeights:
        return ScoreWeights(**self.model_dump())


class ScoringConfig(BaseModel):
    """Scoring engine parameters."""

    model_config = ConfigDict(frozen=True)

    default_weights: WeightsConfig = WeightsConfig()
    reference_cost_per_mg_per_day: float = REFERENCE_COST_PER_MG_PER_DAY

    @field_validator("reference_cost_per_mg_per_day")
    @classmethod
    def validate_reference_cost(cls, v: float) -> float:
        if not v > 0:
            raise ValueError(f"reference_cost_per_mg_per_day must be > 0, got {v}.")
        return v


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class ExportConfig(BaseModel):
    """Where CSV / JSON exports are written by default."""

    model_config = ConfigDict(frozen=True)

    output_dir: str = "data/outputs"


class AppConfig(BaseModel):
    """Complete application configuration."""

    model_config = ConfigDict(frozen=True)

    scoring: ScoringConfig = ScoringConfig()
    logging: LoggingConfig = LoggingConfig()
    export: ExportConfig = ExportConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``; when that default file
            is absent, built-in defaults are used.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If an explicit ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    raw: dict[str, Any] = {}
    if config_path is None:
        config_path = root / "config" / "default.toml"
        explicit = False
    else:
        explicit = True

    config_path = Path(config_path)
    if config_path.exists():
        with open(config_path, "rb") as f:
            raw = tomllib.load(f)
    elif explicit:
        raise FileNotFoundError(f"Config file not found: {config_path}")

    # Also merge local.toml if present (gitignored local overrides)
    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply SUPPLEMENT_SCORER_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply SUPPLEMENT_SCORER_* env vars to the raw config dict.

    Supported overrides:
      SUPPLEMENT_SCORER_LOG_LEVEL   → raw["logging"]["level"]
      SUPPLEMENT_SCORER_OUTPUT_DIR  → raw["export"]["output_dir"]
      SUPPLEMENT_SCORER_DEBUG       → raw["debug"]
    """
    if log_level := os.environ.get("SUPPLEMENT_SCORER_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if output_dir := os.environ.get("SUPPLEMENT_SCORER_OUTPUT_DIR"):
        raw.setdefault("export", {})["output_dir"] = output_dir

    if debug := os.environ.get("SUPPLEMENT_SCORER_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    scoring_raw = dict(raw.get("scoring", {}))
    weights_raw = scoring_raw.pop("default_weights", {})

    return AppConfig(
        scoring=ScoringConfig(
            default_weights=WeightsConfig(**weights_raw),
            **scoring_raw,
        ),
        logging=LoggingConfig(**raw.get("logging", {})),
        export=ExportConfig(**raw.get("export", {})),
        debug=raw.get("debug", False),
    )
