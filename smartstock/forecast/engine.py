from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import deal

from smartstock.forecast.diagnostics import confusion_matrix, feature_importance, roc_auc_score
from smartstock.forecast.errors import DataError, UnknownModelError, insufficient_rows, no_valid_rows
from smartstock.forecast.models import ChartRow, ForecastPoint, ForecastResult, HistoricalPoint
from smartstock.forecast.parsing import next_period_labels, parse_history
from smartstock.forecast.presets import ModelLabel, ModelPreset, get_preset
from smartstock.forecast.randomness import RandomSource, resolve_random_source
from smartstock.forecast.split import train_test_split
from smartstock.forecast.stats import (
    Trend,
    clamp,
    error_metrics,
    fit_ols,
    mean,
    round_half_up,
    seasonal_offset,
)
from smartstock.infra.logging_std import get_logger, log_kv
from smartstock.infra.settings import ForecastConfig

logger = get_logger(__name__)

INCREASING = "Increasing"
DECREASING = "Decreasing"


@dataclass(frozen=True)
class Evaluation:
    accuracy: float
    f1_score: float
    mae: float
    rmse: float
    r_squared: float
    test_size: int


def _check_rows(history: Sequence[HistoricalPoint], min_rows: int) -> None:
    if not history:
        raise no_valid_rows(min_rows)
    if len(history) < min_rows:
        raise insufficient_rows(len(history), min_rows)


def evaluate_holdout(
    train: Sequence[HistoricalPoint],
    test: Sequence[HistoricalPoint],
    preset: ModelPreset,
    rng: RandomSource,
) -> Evaluation:
    """
    Fit on `train`, predict the trailing `test` slice with model noise and score it.

    The time index keeps running from the end of train (x = n_train + i).
    """
    trend = fit_ols([p.sales for p in train])
    n_train = len(train)

    predictions: List[float] = []
    for i in range(len(test)):
        base = trend.at(n_train + i)
        noise = (rng.next() - 0.5) * base * preset.noise_factor
        predictions.append(max(0.0, base + noise))

    m = error_metrics([p.sales for p in test], predictions)
    accuracy = clamp(1.0 - m.mape)
    f1 = clamp(accuracy * (1.0 - preset.noise_factor / 2.0))

    logger.debug(
        "holdout evaluated",
        extra={"extra_data": {"n_train": n_train, "n_test": len(test), "slope": trend.slope, "mape": m.mape}},
    )
    return Evaluation(
        accuracy=accuracy,
        f1_score=f1,
        mae=m.mae,
        rmse=m.rmse,
        r_squared=clamp(m.r_squared),
        test_size=len(test),
    )


def project(
    history: Sequence[HistoricalPoint],
    trend: Trend,
    preset: ModelPreset,
    rng: RandomSource,
    horizon: int = 6,
    seasonal_amplitude: float = 0.15,
) -> Tuple[ForecastPoint, ...]:
    """
    Next `horizon` periods: last value + slope steps + half-sine seasonality + noise.

    Note the anchor is the last observed value, not the fitted line.
    """
    last_sales = float(history[-1].sales)
    avg_sales = mean([float(p.sales) for p in history])
    labels = next_period_labels(history[-1].month, horizon)

    points: List[ForecastPoint] = []
    for i, month in enumerate(labels):
        trend_value = last_sales + trend.slope * (i + 1)
        seasonal = seasonal_offset(avg_sales, i, horizon, seasonal_amplitude)
        noise = (rng.next() - 0.5) * avg_sales * preset.noise_factor
        predicted = round_half_up(max(0.0, trend_value + seasonal + noise))
        points.append(ForecastPoint(month=month, predicted=predicted))
    return tuple(points)


def build_chart(
    history: Sequence[HistoricalPoint],
    forecast: Sequence[ForecastPoint],
) -> Tuple[ChartRow, ...]:
    rows = [ChartRow(month=p.month, historical=p.sales, predicted=0) for p in history]
    if rows and forecast:
        # bridge row: both series meet on the last observed month
        last = rows[-1]
        rows[-1] = ChartRow(month=last.month, historical=last.historical, predicted=last.historical)
    rows.extend(ChartRow(month=f.month, historical=0, predicted=f.predicted) for f in forecast)
    return tuple(rows)


def peak_period(forecast: Sequence[ForecastPoint]) -> ForecastPoint:
    """First point holding the maximum (ties keep the earliest month)."""
    peak = forecast[0]
    for p in forecast[1:]:
        if p.predicted > peak.predicted:
            peak = p
    return peak


def sales_trend(slope: float) -> str:
    # a flat line reads as "Decreasing"
    return INCREASING if slope > 0 else DECREASING


def build_summary(model: str, trend_label: str, accuracy: float, predicted_units: int, peak: str) -> str:
    return (
        f"Based on a simulated {model} model trained on your data, the forecast suggests a "
        f"{trend_label.lower()} trend. The model's performance on a held-out test set achieved "
        f"an accuracy of {accuracy * 100:.0f}%. We predict total sales of {predicted_units:,} "
        f"units over the next period, with demand peaking in {peak}."
    )


class ForecastEngine:
    """
    CSV text + model label -> ForecastResult.

    Stateless between calls: the only thing kept is config and the random
    source. Inject SeededRandomSource/SequenceRandomSource for repeatable runs.
    """

    def __init__(
        self,
        config: Optional[ForecastConfig] = None,
        rng: Optional[RandomSource] = None,
    ) -> None:
        self.config = config if config is not None else ForecastConfig()
        self.rng = resolve_random_source(rng, self.config.seed)

    @deal.pre(lambda self, csv_text, model_label=None: isinstance(csv_text, str), message="csv_text must be str")
    @deal.post(lambda result: result.predicted_units == sum(p.predicted for p in result.forecast))
    @deal.post(lambda result: 0.0 <= result.accuracy <= 1.0 and 0.0 <= result.f1_score <= 1.0)
    @deal.post(lambda result: 0.0 <= result.r_squared <= 1.0 and result.mae >= 0 and result.rmse >= 0)
    @deal.raises(DataError, UnknownModelError, deal.PreContractError)
    def forecast(
        self,
        csv_text: str,
        model_label: Union[str, ModelLabel, None] = None,
    ) -> ForecastResult:
        cfg = self.config
        preset = get_preset(model_label if model_label is not None else cfg.default_model)
        model = preset.label.value

        history = parse_history(csv_text)
        try:
            _check_rows(history, cfg.min_rows)
        except DataError as exc:
            log_kv(logger, "forecast rejected", level=logging.WARNING, code=exc.code, rows_found=exc.rows_found, model=model)
            raise

        split = train_test_split(history, cfg.test_fraction)
        ev = evaluate_holdout(split.train, split.test, preset, self.rng)

        full_trend = fit_ols([p.sales for p in history])
        forecast = project(history, full_trend, preset, self.rng, cfg.horizon, cfg.seasonal_amplitude)

        auc = roc_auc_score(ev.accuracy, self.rng)
        features = feature_importance(self.rng)

        predicted_units = sum(p.predicted for p in forecast)
        trend_label = sales_trend(full_trend.slope)
        peak = peak_period(forecast)

        result = ForecastResult(
            summary=build_summary(model, trend_label, ev.accuracy, predicted_units, peak.month),
            predicted_units=predicted_units,
            confidence=preset.confidence.value,
            sales_trend=trend_label,
            peak_demand_period=peak.month,
            chart_data=build_chart(history, forecast),
            model_used=model,
            accuracy=ev.accuracy,
            f1_score=ev.f1_score,
            mae=round_half_up(ev.mae),
            rmse=round_half_up(ev.rmse),
            r_squared=ev.r_squared,
            confusion_matrix=confusion_matrix(ev.test_size, ev.accuracy),
            roc_auc_score=auc,
            feature_importance=features,
            historical=history,
            forecast=forecast,
        )

        log_kv(
            logger,
            "forecast built",
            model=model,
            rows=len(history),
            predicted_units=predicted_units,
            trend=trend_label,
            peak=peak.month,
        )
        return result


def forecast(
    csv_text: str,
    model_label: Union[str, ModelLabel, None] = None,
    rng: Optional[RandomSource] = None,
    config: Optional[ForecastConfig] = None,
) -> ForecastResult:
    """One-shot helper around ForecastEngine."""
    return ForecastEngine(config=config, rng=rng).forecast(csv_text, model_label)
