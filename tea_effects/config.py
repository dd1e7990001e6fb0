"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local env overrides (gitignored)
  4. Environment variables        — ``TEA_EFFECTS_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The engine and CLI commands receive an ``AppConfig`` instance (or the
sub-configs it carries), never raw dicts or scattered env var lookups.
Component weights, the tie-break priority list and interaction floors live
here rather than in code so they can be tuned without a release.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class ConfigurationError(ValueError):
    """Raised when weights, reference tables or rules are unusable.

    Always raised at load or engine-construction time, never from
    ``TeaEffectEngine.calculate``.
    """


# ── Sub-config models ─────────────────────────────────────────────────────────


class DataConfig(BaseModel):
    """Location of the reference tables."""

    model_config = ConfigDict(frozen=True)

    # None / "" → tables bundled with the package.
    reference_dir: Optional[str] = None

    @field_validator("reference_dir")
    @classmethod
    def blank_is_bundled(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class ComponentWeights(BaseModel):
    """Blend weight for each scoring component.

    Weights need not sum to 1; the combined vector is clamped afterwards.
    A component absent from the mapping contributes nothing.
    """

    model_config = ConfigDict(frozen=True)

    base: float = 0.40
    flavor: float = 0.20
    processing: float = 0.20
    geography: float = 0.10
    seasonal: float = 0.10
    compounds: float = 0.10

    @field_validator(
        "base", "flavor", "processing", "geography", "seasonal", "compounds"
    )
    @classmethod
    def validate_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"Component weight must be >= 0, got {v}.")
        return v

    @model_validator(mode="after")
    def validate_not_all_zero(self) -> "ComponentWeights":
        if sum(self.as_dict().values()) <= 0:
            raise ValueError("At least one component weight must be positive.")
        return self

    def as_dict(self) -> dict[str, float]:
        """Return ``{component_name: weight}``."""
        return {
            "base": self.base,
            "flavor": self.flavor,
            "processing": self.processing,
            "geography": self.geography,
            "seasonal": self.seasonal,
            "compounds": self.compounds,
        }


class RankingConfig(BaseModel):
    """Dominant / supporting effect selection parameters."""

    model_config = ConfigDict(frozen=True)

    supporting_fraction: float = 0.5
    supporting_floor: float = 3.0
    max_supporting: Optional[int] = None
    priority: list[str] = [
        "energizing", "calming", "focusing", "harmonizing",
        "grounding", "elevating", "comforting", "restorative",
    ]

    @field_validator("supporting_fraction")
    @classmethod
    def validate_fraction(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"supporting_fraction must be in [0.0, 1.0], got {v}.")
        return v

    @field_validator("max_supporting")
    @classmethod
    def validate_max_supporting(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError(f"max_supporting must be >= 0, got {v}.")
        return v

    @field_validator("priority")
    @classmethod
    def validate_priority_unique(cls, v: list[str]) -> list[str]:
        dupes = sorted({name for name in v if v.count(name) > 1})
        if dupes:
            raise ValueError(f"Duplicate effects in priority list: {dupes}.")
        return v


class InteractionConfig(BaseModel):
    """Synergy / antagonism pass settings."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    default_floor: float = 4.0
    strength_factor: float = 0.8

    @field_validator("default_floor")
    @classmethod
    def validate_floor(cls, v: float) -> float:
        if not 0.0 <= v <= 10.0:
            raise ValueError(f"default_floor must be in [0, 10], got {v}.")
        return v

    @field_validator("strength_factor")
    @classmethod
    def validate_strength(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"strength_factor must be >= 0, got {v}.")
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


class AppConfig(BaseModel):
    """Complete application configuration.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    data: DataConfig = DataConfig()
    weights: ComponentWeights = ComponentWeights()
    ranking: RankingConfig = RankingConfig()
    interactions: InteractionConfig = InteractionConfig()
    logging: LoggingConfig = LoggingConfig()
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

    Unlike an explicit path, a missing ``config/default.toml`` is not an
    error: an installed package runs on built-in defaults.

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
    raw: dict[str, Any] = {}
    if config_path is None:
        config_path = root / "config" / "default.toml"
        if config_path.exists():
            raw = _read_toml(config_path)
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                "Pass an existing TOML file or omit --config to use defaults."
            )
        raw = _read_toml(config_path)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        raw = _deep_merge(raw, _read_toml(local_config_path))

    # 3. Apply TEA_EFFECTS_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _read_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


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
    """Apply TEA_EFFECTS_* env vars to the raw config dict.

    Supported overrides:
      TEA_EFFECTS_REFERENCE_DIR → raw["data"]["reference_dir"]
      TEA_EFFECTS_LOG_LEVEL     → raw["logging"]["level"]
      TEA_EFFECTS_DEBUG         → raw["debug"]
    """
    if reference_dir := os.environ.get("TEA_EFFECTS_REFERENCE_DIR"):
        raw.setdefault("data", {})["reference_dir"] = reference_dir

    if log_level := os.environ.get("TEA_EFFECTS_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("TEA_EFFECTS_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    return AppConfig(
        data=DataConfig(**raw.get("data", {})),
        weights=ComponentWeights(**raw.get("weights", {})),
        ranking=RankingConfig(**raw.get("ranking", {})),
        interactions=InteractionConfig(**raw.get("interactions", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", False),
    )
