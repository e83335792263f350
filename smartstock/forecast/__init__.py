"""
smartstock.forecast

CSV sales history -> 6-period demand forecast with held-out metrics.
The model labels are presets (noise + confidence), not trained models.
"""
from .catalog import ModelPerformance, best_model, get_model_performance
from .diagnostics import RocPoint, confusion_matrix, feature_importance, roc_auc_score, roc_curve
from .engine import ForecastEngine, forecast
from .errors import DataError, ForecastError, UnknownModelError
from .models import (
    ChartRow,
    ConfusionMatrix,
    FeatureImportance,
    ForecastPoint,
    ForecastResult,
    HistoricalPoint,
)
from .parsing import next_period_labels, parse_history, parse_sales
from .presets import MODEL_PRESETS, Confidence, ModelLabel, ModelPreset, get_preset, parse_model_label
from .randomness import RandomSource, SeededRandomSource, SequenceRandomSource, SystemRandomSource
from .split import TrainTestSplit, split_counts, train_test_split

__all__ = [
    "ModelPerformance",
    "best_model",
    "get_model_performance",
    "RocPoint",
    "confusion_matrix",
    "feature_importance",
    "roc_auc_score",
    "roc_curve",
    "ForecastEngine",
    "forecast",
    "DataError",
    "ForecastError",
    "UnknownModelError",
    "ChartRow",
    "ConfusionMatrix",
    "FeatureImportance",
    "ForecastPoint",
    "ForecastResult",
    "HistoricalPoint",
    "next_period_labels",
    "parse_history",
    "parse_sales",
    "MODEL_PRESETS",
    "Confidence",
    "ModelLabel",
    "ModelPreset",
    "get_preset",
    "parse_model_label",
    "RandomSource",
    "SeededRandomSource",
    "SequenceRandomSource",
    "SystemRandomSource",
    "TrainTestSplit",
    "split_counts",
    "train_test_split",
]
