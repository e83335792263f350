# smartstock/__init__.py
"""
SmartStock - demand forecasting core.

Módulos:
- forecast: engine CSV -> ForecastResult (trend + seasonality + presets)
- profiling: quick CSV overview before forecasting
- infra: logging and settings
- cli: command line entrypoint
"""

__version__ = "1.0.0"
