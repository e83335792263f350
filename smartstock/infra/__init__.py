# smartstock/infra/__init__.py
"""
Infra package: logging and settings.

Regla: nothing here imports the forecast engine at module level.
"""

from __future__ import annotations

from .logging_std import StructuredFormatter, configure_logging, get_logger, log_kv
from .settings import AppConfig, ForecastConfig, LoggingConfig, PreprocessConfig, load_config, reset_config_cache

__all__ = [
    "StructuredFormatter",
    "configure_logging",
    "get_logger",
    "log_kv",
    "AppConfig",
    "ForecastConfig",
    "LoggingConfig",
    "PreprocessConfig",
    "load_config",
    "reset_config_cache",
]
