"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local env overrides (gitignored)
  4. Environment variables        — ``TV_OPTIMIZER_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

CLI commands and the dashboard receive an ``AppConfig`` instance — never raw
dicts or individual env var lookups scattered through the codebase.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

# ── Sub-config models ─────────────────────────────────────────────────────────


class DataConfig(BaseModel):
    """Filesystem paths for the dataset and exported reports."""

    model_config = ConfigDict(frozen=True)

    data_file: str = "data/santoor_multimarket_data.json"
    output_dir: str = "data/outputs"


class OptimizationConfig(BaseModel):
    """Optimizer defaults and the slider ranges used to clamp user input."""

    model_config = ConfigDict(frozen=True)

    default_intensity: float = 15
    default_threshold: float = 70
    intensity_min: float = 5
    intensity_max: float = 30
    threshold_min: float = 50
    threshold_max: float = 90
    threshold_step: float = 5

    @model_validator(mode="after")
    def validate_bounds(self) -> "OptimizationConfig":
        if self.intensity_min > self.intensity_max:
            raise ValueError(
                f"intensity_min ({self.intensity_min}) must be <= "
                f"intensity_max ({self.intensity_max})."
            )
        if self.threshold_min > self.threshold_max:
            raise ValueError(
                f"threshold_min ({self.threshold_min}) must be <= "
                f"threshold_max ({self.threshold_max})."
            )
        if self.threshold_min < 0 or self.threshold_max > 100:
            raise ValueError("threshold bounds must lie within [0, 100].")
        if self.threshold_step <= 0:
            raise ValueError(f"threshold_step must be positive, got {self.threshold_step}.")
        return self

    def clamp_intensity(self, value: float) -> float:
        return clamp(value, self.intensity_min, self.intensity_max)

    def clamp_threshold(self, value: float) -> float:
        return clamp(value, self.threshold_min, self.threshold_max)


class RelevanceConfig(BaseModel):
    """Cut-offs for hiding channels with no meaningful activity.

    A channel is shown when ANY of its values exceeds its cut-off.
    """

    model_config = ConfigDict(frozen=True)

    min_santoor_reach: float = 0.5
    min_comp_reach: float = 0.5
    min_channel_share: float = 0.1


class DashboardConfig(BaseModel):
    """Streamlit dashboard defaults."""

    model_config = ConfigDict(frozen=True)

    default_market: str = "Maharashtra"
    heatmap_max_channels: int = 20


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = "data/logs/tv_optimizer.log"
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration — the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env.
    """

    model_config = ConfigDict(frozen=True)

    data: DataConfig = DataConfig()
    optimization: OptimizationConfig = OptimizationConfig()
    relevance: RelevanceConfig = RelevanceConfig()
    dashboard: DashboardConfig = DashboardConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


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
            ``<project_root>/config/default.toml``.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If the specified ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    if config_path is None:
        config_path = root / "config" / "default.toml"

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            "Create config/default.toml or pass --config."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply TV_OPTIMIZER_* environment variable overrides
    raw = _apply_env_overrides(raw)

    return _build_app_config(raw)


def resolve_path(path: str | Path) -> Path:
    """Resolve a config-relative path against the project root."""
    p = Path(path)
    return p if p.is_absolute() else _find_project_root() / p


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
    """Apply TV_OPTIMIZER_* env vars to the raw config dict.

    Supported overrides:
      TV_OPTIMIZER_DATA_FILE  → raw["data"]["data_file"]
      TV_OPTIMIZER_LOG_LEVEL  → raw["logging"]["level"]
      TV_OPTIMIZER_DEBUG      → raw["debug"]
    """
    if data_file := os.environ.get("TV_OPTIMIZER_DATA_FILE"):
        raw.setdefault("data", {})["data_file"] = data_file

    if log_level := os.environ.get("TV_OPTIMIZER_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("TV_OPTIMIZER_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        data=DataConfig(**raw.get("data", {})),
        optimization=OptimizationConfig(**raw.get("optimization", {})),
        relevance=RelevanceConfig(**raw.get("relevance", {})),
        dashboard=DashboardConfig(**raw.get("dashboard", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
