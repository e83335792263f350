from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ChartRowSchema(BaseModel):
    month: str = Field(..., description="Period label (e.g. 'Jan')")
    historical: float = Field(..., ge=0, description="Historical units, 0 for forecast months")
    predicted: float = Field(..., ge=0, description="Predicted units, 0 for historical months except the bridge row")


class ConfusionMatrixSchema(BaseModel):
    truePositive: int = Field(..., ge=0)
    falsePositive: int = Field(..., ge=0)
    trueNegative: int = Field(..., ge=0)
    falseNegative: int = Field(..., ge=0)


class FeatureImportanceSchema(BaseModel):
    feature: str
    importance: float = Field(..., ge=0, le=1)


class ForecastResultSchema(BaseModel):
    """Wire shape of a forecast, as consumed by the dashboard."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    summary: str = Field(..., min_length=1, description="Human readable summary")
    predictedUnits: int = Field(..., ge=0, description="Total units over the forecast window")
    confidence: str = Field(..., description="High / Medium / Low")
    salesTrend: str = Field(..., pattern="^(Increasing|Decreasing)$")
    peakDemandPeriod: str = Field(..., description="Forecast month with the highest demand")
    chartData: List[ChartRowSchema] = Field(..., description="Historical rows followed by forecast rows")
    modelUsed: str = Field(..., description="Model label echoed back")
    accuracy: float = Field(..., ge=0, le=1)
    f1Score: float = Field(..., ge=0, le=1)
    mae: int = Field(..., ge=0, description="Mean Absolute Error, rounded")
    rmse: int = Field(..., ge=0, description="Root Mean Squared Error, rounded")
    rSquared: float = Field(..., ge=0, le=1)
    confusionMatrix: ConfusionMatrixSchema
    rocAucScore: float = Field(..., ge=0.5, le=0.99)
    featureImportance: List[FeatureImportanceSchema]


class ModelPerformanceSchema(BaseModel):
    model: str
    accuracy: float = Field(..., ge=0, le=1)
    f1Score: float = Field(..., ge=0, le=1)
