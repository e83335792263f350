"""
Static performance sheet per model label, for the comparison view.

Read-only and unrelated to the engine's own held-out metrics.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Literal

from smartstock.forecast.presets import ModelLabel


@dataclass(frozen=True, slots=True)
class ModelPerformance:
    model: str
    accuracy: float
    f1_score: float

    def to_dict(self) -> Dict[str, object]:
        return {"model": self.model, "accuracy": self.accuracy, "f1Score": self.f1_score}


_PERFORMANCE: Dict[ModelLabel, ModelPerformance] = {
    ModelLabel.ARIMA: ModelPerformance("ARIMA", 0.85, 0.82),
    ModelLabel.PROPHET: ModelPerformance("Prophet", 0.92, 0.90),
    ModelLabel.LSTM: ModelPerformance("LSTM", 0.88, 0.86),
    ModelLabel.RANDOM_FOREST: ModelPerformance("Random Forest", 0.95, 0.94),
    ModelLabel.XGBOOST: ModelPerformance("XGBoost", 0.96, 0.95),
}


def get_model_performance() -> List[ModelPerformance]:
    return list(_PERFORMANCE.values())


def best_model(metric: Literal["accuracy", "f1_score"] = "accuracy") -> ModelPerformance:
    if metric not in ("accuracy", "f1_score"):
        raise ValueError("metric must be 'accuracy' or 'f1_score'")
    return max(_PERFORMANCE.values(), key=lambda p: getattr(p, metric))
