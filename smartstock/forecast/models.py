from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple


@dataclass(frozen=True, slots=True)
class HistoricalPoint:
    month: str
    sales: int


@dataclass(frozen=True, slots=True)
class ForecastPoint:
    month: str
    predicted: int


@dataclass(frozen=True, slots=True)
class ChartRow:
    month: str
    historical: float = 0
    predicted: float = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"month": self.month, "historical": self.historical, "predicted": self.predicted}


@dataclass(frozen=True, slots=True)
class ConfusionMatrix:
    true_positive: int
    false_positive: int
    true_negative: int
    false_negative: int

    @property
    def total(self) -> int:
        return self.true_positive + self.false_positive + self.true_negative + self.false_negative

    def to_dict(self) -> Dict[str, int]:
        return {
            "truePositive": self.true_positive,
            "falsePositive": self.false_positive,
            "trueNegative": self.true_negative,
            "falseNegative": self.false_negative,
        }


@dataclass(frozen=True, slots=True)
class FeatureImportance:
    feature: str
    importance: float


@dataclass(frozen=True, slots=True)
class ForecastResult:
    """
    Everything the dashboard needs from one forecast run.

    Built once per call and never mutated; to_dict() gives the camelCase
    shape the rendering layer consumes.
    """

    summary: str
    predicted_units: int
    confidence: str
    sales_trend: str
    peak_demand_period: str
    chart_data: Tuple[ChartRow, ...]
    model_used: str
    accuracy: float
    f1_score: float
    mae: int
    rmse: int
    r_squared: float
    confusion_matrix: ConfusionMatrix
    roc_auc_score: float
    feature_importance: Tuple[FeatureImportance, ...]
    historical: Tuple[HistoricalPoint, ...] = ()
    forecast: Tuple[ForecastPoint, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary,
            "predictedUnits": self.predicted_units,
            "confidence": self.confidence,
            "salesTrend": self.sales_trend,
            "peakDemandPeriod": self.peak_demand_period,
            "chartData": [r.to_dict() for r in self.chart_data],
            "modelUsed": self.model_used,
            "accuracy": self.accuracy,
            "f1Score": self.f1_score,
            "mae": self.mae,
            "rmse": self.rmse,
            "rSquared": self.r_squared,
            "confusionMatrix": self.confusion_matrix.to_dict(),
            "rocAucScore": self.roc_auc_score,
            "featureImportance": [
                {"feature": f.feature, "importance": f.importance} for f in self.feature_importance
            ],
        }
