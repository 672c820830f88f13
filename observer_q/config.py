"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local secrets and env overrides (gitignored)
  4. Environment variables        — ``OBSERVER_Q_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The CLI and any embedding session layer receive an ``AppConfig`` instance —
never raw dicts or individual env var lookups scattered through the codebase.
Per-user values (symbiosis constant, thresholds) configured here are the
defaults; ``AppConfig.calibration_settings()`` turns them into the
``CalibrationSettings`` the engine consumes.
"""

from __future__ import annotations

import math
import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from observer_q.models.session import SessionPlan
from observer_q.models.settings import CalibrationSettings

# ── Sub-config models ─────────────────────────────────────────────────────────


class EngineConfig(BaseModel):
    """Bias engine parameters."""

    model_config = ConfigDict(frozen=True)

    k_symbiosis: float = 2.8
    k_death: float = 0.0
    n_trials: int = 1000
    seed: Optional[int] = None    # None → fresh unseeded generator per call

    @field_validator("k_symbiosis", "k_death")
    @classmethod
    def validate_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError(f"Symbiosis constants must be finite, got {v}.")
        return v

    @field_validator("n_trials")
    @classmethod
    def validate_n_trials(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"n_trials must be >= 1, got {v}.")
        return v


class ThresholdsConfig(BaseModel):
    """Default Q-band thresholds."""

    model_config = ConfigDict(frozen=True)

    ocean: float = 0.8
    tank: float = 0.5

    @model_validator(mode="after")
    def validate_order(self) -> "ThresholdsConfig":
        if not 0.0 <= self.tank <= self.ocean <= 1.0:
            raise ValueError(
                f"Thresholds must satisfy 0 <= tank <= ocean <= 1, "
                f"got tank={self.tank}, ocean={self.ocean}."
            )
        return self


class SessionConfig(BaseModel):
    """Calibration session timing."""

    model_config = ConfigDict(frozen=True)

    duration_minutes: int = 5
    interval_seconds: int = 30
    default_baseline_q: float = 0.5

    @field_validator("default_baseline_q")
    @classmethod
    def validate_baseline(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"default_baseline_q must be in [0.0, 1.0], got {v}.")
        return v

    def plan(self) -> SessionPlan:
        return SessionPlan(
            duration_minutes=self.duration_minutes,
            interval_seconds=self.interval_seconds,
        )


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
    """Complete application configuration — the single source of truth.

    Constructed by ``load_config()`` which merges TOML + .env + environment.
    """

    model_config = ConfigDict(frozen=True)

    engine: EngineConfig = EngineConfig()
    thresholds: ThresholdsConfig = ThresholdsConfig()
    session: SessionConfig = SessionConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False

    def calibration_settings(self) -> CalibrationSettings:
        """Default per-user settings built from the engine and threshold sections."""
        return CalibrationSettings(
            k_symbiosis=self.engine.k_symbiosis,
            k_death=self.engine.k_death,
            ocean_threshold=self.thresholds.ocean,
            tank_threshold=self.thresholds.tank,
        )


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
            "Pass --config or create config/default.toml first."
        )

    with open(config_path, "rb") as f:
        raw: dict[str, Any] = tomllib.load(f)

    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply OBSERVER_Q_* environment variable overrides
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
    """Apply OBSERVER_Q_* env vars to the raw config dict.

    Supported overrides:
      OBSERVER_Q_K_SYMBIOSIS → raw["engine"]["k_symbiosis"]
      OBSERVER_Q_N_TRIALS    → raw["engine"]["n_trials"]
      OBSERVER_Q_SEED        → raw["engine"]["seed"]
      OBSERVER_Q_LOG_LEVEL   → raw["logging"]["level"]
      OBSERVER_Q_DEBUG       → raw["debug"]

    Values are passed through as strings; pydantic coerces them.
    """
    if k_symbiosis := os.environ.get("OBSERVER_Q_K_SYMBIOSIS"):
        raw.setdefault("engine", {})["k_symbiosis"] = k_symbiosis

    if n_trials := os.environ.get("OBSERVER_Q_N_TRIALS"):
        raw.setdefault("engine", {})["n_trials"] = n_trials

    if seed := os.environ.get("OBSERVER_Q_SEED"):
        raw.setdefault("engine", {})["seed"] = seed

    if log_level := os.environ.get("OBSERVER_Q_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("OBSERVER_Q_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    return raw


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    return AppConfig(
        engine=EngineConfig(**raw.get("engine", {})),
        thresholds=ThresholdsConfig(**raw.get("thresholds", {})),
        session=SessionConfig(**raw.get("session", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", False),
    )
