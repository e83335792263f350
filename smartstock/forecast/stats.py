from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

import deal


@dataclass(frozen=True)
class Trend:
    """
    Tendencia lineal y = slope * x + intercept.

    x = 0, 1, ..., n-1 (posición de la fila, no la fecha)
    y = ventas observadas.
    """

    slope: float
    intercept: float
    n_points: int

    def at(self, x: float) -> float:
        return self.slope * x + self.intercept


@dataclass(frozen=True)
class ErrorMetrics:
    """Errors of a prediction against a held-out slice. r_squared/mape are raw (unclamped)."""

    mae: float
    rmse: float
    r_squared: float
    mape: float


def mean(values: Sequence[float]) -> float:
    if not values:
        raise ValueError("mean of an empty sequence")
    return sum(values) / float(len(values))


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Math.round semantics: .5 always goes up (also for negatives, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


@deal.pre(lambda values: len(values) >= 1, message="need at least one point")
@deal.post(lambda result: math.isfinite(result.slope) and math.isfinite(result.intercept))
@deal.raises(deal.PreContractError)
def fit_ols(values: Sequence[float]) -> Trend:
    """
    Mínimos cuadrados sobre el índice de la serie.

        slope     = (n*Σxy - Σx*Σy) / (n*Σx² - (Σx)²)
        intercept = (Σy - slope*Σx) / n

    With a single point the denominator is 0: slope 0, intercept = that point.
    """
    n = len(values)
    xs = [float(i) for i in range(n)]
    ys = [float(v) for v in values]

    sum_x = sum(xs)
    sum_y = sum(ys)
    sum_xx = sum(x * x for x in xs)
    sum_xy = sum(x * y for x, y in zip(xs, ys))

    denom = n * sum_xx - sum_x ** 2
    slope = 0.0 if denom == 0.0 else (n * sum_xy - sum_x * sum_y) / denom
    intercept = (sum_y - slope * sum_x) / float(n)

    return Trend(slope=float(slope), intercept=float(intercept), n_points=n)


@deal.pre(lambda actuals, predictions: len(actuals) == len(predictions) and len(actuals) > 0,
          message="actuals/predictions must be same non-zero length")
@deal.post(lambda result: result.mae >= 0.0 and result.rmse >= 0.0 and result.mape >= 0.0)
@deal.raises(deal.PreContractError)
def error_metrics(actuals: Sequence[float], predictions: Sequence[float]) -> ErrorMetrics:
    """
    MAE, RMSE, R² and MAPE of `predictions` against `actuals`.

    Degenerate cases default to 0 instead of raising:
    - every actual equal (SST = 0) -> r_squared = 0
    - actual == 0 terms are left out of the MAPE; none left -> mape = 0
    """
    errors = [float(a) - float(p) for a, p in zip(actuals, predictions)]
    abs_errors = [abs(e) for e in errors]
    sq_errors = [e * e for e in errors]

    mae = mean(abs_errors)
    rmse = math.sqrt(mean(sq_errors))

    mean_actual = mean([float(a) for a in actuals])
    sst = sum((float(a) - mean_actual) ** 2 for a in actuals)
    sse = sum(sq_errors)
    r_squared = 0.0 if sst == 0.0 else 1.0 - sse / sst

    pct = [e / float(a) for e, a in zip(abs_errors, actuals) if a != 0]
    mape = mean(pct) if pct else 0.0

    return ErrorMetrics(mae=mae, rmse=rmse, r_squared=r_squared, mape=mape)


def seasonal_offset(avg_sales: float, step: int, horizon: int, amplitude: float = 0.15) -> float:
    """Half a sine wave across the horizon: 0 at both ends, +amplitude*avg in the middle."""
    if horizon <= 1:
        return 0.0
    return avg_sales * amplitude * math.sin((math.pi * step) / (horizon - 1))


def split_index(n: int, test_fraction: float) -> Tuple[int, int]:
    """(train_size, test_size) with test_size = max(1, floor(n * fraction))."""
    test_size = max(1, int(math.floor(n * test_fraction)))
    return n - test_size, test_size
