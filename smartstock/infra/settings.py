from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from smartstock.infra.logging_std import get_logger

logger = get_logger(__name__)


# =========================
# CONFIG MODELS
# =========================


class ForecastConfig(BaseModel):
  """
  Knobs of the forecast engine.

  Defaults reproduce the dashboard's numbers exactly; changing them is for
  experiments, not for production uploads.
  """

  horizon: int = Field(6, ge=1, le=24)
  min_rows: int = Field(4, ge=2)
  test_fraction: float = Field(0.25, gt=0.0, lt=1.0)
  seasonal_amplitude: float = Field(0.15, ge=0.0, le=1.0)
  default_model: str = "ARIMA"
  seed: Optional[int] = None

  @field_validator("default_model")
  @classmethod
  def _known_model(cls, v: str) -> str:
    # lazy import: settings must stay importable without the engine
    from smartstock.forecast.presets import parse_model_label

    return parse_model_label(v).value


class PreprocessConfig(BaseModel):
  """
  Steps of the data preparation pass, applied in this order:
  duplicates -> missing values -> outliers -> encoding -> scaling.
  """

  remove_duplicates: bool = True
  missing_values: Literal["none", "drop", "mean", "median", "interpolate"] = "drop"
  outliers: Literal["none", "remove", "cap"] = "none"
  encoding: Literal["none", "label", "one-hot"] = "none"
  scale: bool = False


class LoggingConfig(BaseModel):
  level: str = "INFO"
  format: Literal["text", "json"] = "text"


class AppConfig(BaseModel):
  forecast: ForecastConfig = Field(default_factory=ForecastConfig)
  preprocess: PreprocessConfig = Field(default_factory=PreprocessConfig)
  logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =========================
# LOADER
# =========================

_DEFAULT_CONFIG_PATH = (
  Path(__file__).resolve().parents[2] / "config" / "default.yml"
)

_APP_CONFIG: Optional[AppConfig] = None

_ENV_OVERRIDES = {
  "SMARTSTOCK_LOG_LEVEL": ("logging", "level"),
  "SMARTSTOCK_LOG_FORMAT": ("logging", "format"),
  "SMARTSTOCK_DEFAULT_MODEL": ("forecast", "default_model"),
  "SMARTSTOCK_SEED": ("forecast", "seed"),
}


def _read_raw_yaml(path: Path) -> Dict[str, Any]:
  """Reads YAML; a missing or unreadable file means "use defaults"."""
  try:
    with path.open("r", encoding="utf-8") as f:
      data = yaml.safe_load(f) or {}
  except FileNotFoundError:
    logger.warning(
      "Config file not found, using defaults",
      extra={"extra_data": {"config_path": str(path)}},
    )
    return {}
  except (OSError, yaml.YAMLError) as exc:
    logger.error(
      "Error reading config file, using defaults",
      extra={"extra_data": {"config_path": str(path), "error": str(exc)}},
    )
    return {}

  if not isinstance(data, dict):
    logger.error(
      "Config YAML root is not a mapping, falling back to defaults",
      extra={"extra_data": {"config_path": str(path)}},
    )
    return {}
  return data


def _apply_env(raw: Dict[str, Any]) -> Dict[str, Any]:
  out = {k: dict(v) if isinstance(v, dict) else v for k, v in raw.items()}
  for env_key, (section, key) in _ENV_OVERRIDES.items():
    value = os.getenv(env_key)
    if value is None or value == "":
      continue
    block = out.get(section)
    if not isinstance(block, dict):
      block = {}
      out[section] = block
    block[key] = value
  return out


def load_config(path: Optional[Path] = None, *, use_env: bool = True) -> AppConfig:
  """
  Loads config/default.yml (or `path`), applies SMARTSTOCK_* env overrides
  and validates with pydantic.

  - no file -> defaults
  - invalid values -> defaults, logged as error
  - cached when called without a path
  """
  global _APP_CONFIG

  if _APP_CONFIG is not None and path is None:
    return _APP_CONFIG

  if use_env:
    load_dotenv(override=False)

  config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH
  raw = _read_raw_yaml(config_path)
  if use_env:
    raw = _apply_env(raw)

  try:
    app_config = AppConfig(**raw)
  except ValidationError as exc:
    logger.error(
      "Invalid config, using defaults",
      extra={"extra_data": {"config_path": str(config_path), "error": str(exc)}},
    )
    app_config = AppConfig()
  else:
    logger.debug(
      "Config loaded",
      extra={"extra_data": {"config_path": str(config_path)}},
    )

  if path is None:
    _APP_CONFIG = app_config
  return app_config


def reset_config_cache() -> None:
  global _APP_CONFIG
  _APP_CONFIG = None
