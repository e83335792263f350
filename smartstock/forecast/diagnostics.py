"""
Simulated classification diagnostics shown next to a forecast.

Demand forecasting is regression, so none of this is measured: the numbers are
derived from the held-out accuracy (confusion matrix, ROC) or drawn from the
injected random source (AUC jitter, feature importance) to feed the charts.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

import deal

from smartstock.forecast.models import ConfusionMatrix, FeatureImportance
from smartstock.forecast.randomness import RandomSource, draw_many
from smartstock.forecast.stats import clamp, round_half_up

FEATURES: Tuple[str, ...] = (
    "Historical Sales",
    "Seasonal Trend",
    "Market Conditions",
    "Price Factor",
    "Competition",
)

SAMPLES_PER_TEST_POINT = 10


@dataclass(frozen=True)
class RocPoint:
    fpr: float
    tpr: float
    baseline: float


@deal.pre(lambda test_size, accuracy: test_size >= 1 and 0.0 <= accuracy <= 1.0)
@deal.post(lambda result: min(result.to_dict().values()) >= 0, message="cells must be non-negative")
@deal.raises(deal.PreContractError)
def confusion_matrix(test_size: int, accuracy: float) -> ConfusionMatrix:
    total = test_size * SAMPLES_PER_TEST_POINT
    tp = round_half_up(total * accuracy * 0.7)
    fn = round_half_up(total * (1.0 - accuracy) * 0.4)
    tn = round_half_up(total * accuracy * 0.3)
    fp = total - tp - fn - tn
    return ConfusionMatrix(true_positive=tp, false_positive=fp, true_negative=tn, false_negative=fn)


@deal.post(lambda result: 0.5 <= result <= 0.99)
def roc_auc_score(accuracy: float, rng: RandomSource) -> float:
    jitter = rng.next() * 0.1 - 0.05
    # half-up to 3 decimals, like the rounded error metrics
    return round_half_up(clamp(accuracy + 0.1 + jitter, 0.5, 0.99) * 1000) / 1000


def feature_importance(rng: RandomSource) -> Tuple[FeatureImportance, ...]:
    draws = draw_many(rng, len(FEATURES))
    items = [FeatureImportance(feature=f, importance=u * 0.8 + 0.2) for f, u in zip(FEATURES, draws)]
    # stable: equal draws keep FEATURES order
    items.sort(key=lambda f: f.importance, reverse=True)
    return tuple(items)


@deal.pre(lambda auc, points=20: points >= 1)
@deal.raises(deal.PreContractError)
def roc_curve(auc: float, points: int = 20) -> List[RocPoint]:
    """
    Plausible ROC curve for a given AUC, `points + 1` samples from fpr=0 to fpr=1.

    The steeper branches are only used for good scores (> 0.8, > 0.9).
    """
    out: List[RocPoint] = []
    for i in range(points + 1):
        fpr = i / float(points)
        if auc > 0.9:
            tpr = fpr ** 0.3 + (auc - 0.9) * 2.0
        elif auc > 0.8:
            tpr = fpr ** 0.5 + (auc - 0.8) * 1.5
        else:
            tpr = fpr + (auc - 0.5) * 1.2
        tpr = clamp(tpr)
        out.append(RocPoint(fpr=round(fpr, 2), tpr=round(tpr, 2), baseline=fpr))
    return out
