from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union

import deal

from smartstock.forecast.errors import UnknownModelError, unknown_model


class ModelLabel(str, Enum):
    ARIMA = "ARIMA"
    PROPHET = "Prophet"
    LSTM = "LSTM"
    RANDOM_FOREST = "Random Forest"
    XGBOOST = "XGBoost"


class Confidence(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"  # unused by the presets, kept for the display scale


@dataclass(frozen=True, slots=True)
class ModelPreset:
    """
    Cosmetic "personality" of a model label.

    None of these is a trained model: the label only picks how much noise the
    trend projection gets and which confidence word is shown.
    """

    label: ModelLabel
    noise_factor: float
    confidence: Confidence


MODEL_PRESETS: Dict[ModelLabel, ModelPreset] = {
    ModelLabel.ARIMA: ModelPreset(ModelLabel.ARIMA, 0.10, Confidence.MEDIUM),
    ModelLabel.PROPHET: ModelPreset(ModelLabel.PROPHET, 0.08, Confidence.HIGH),
    ModelLabel.LSTM: ModelPreset(ModelLabel.LSTM, 0.12, Confidence.MEDIUM),
    ModelLabel.RANDOM_FOREST: ModelPreset(ModelLabel.RANDOM_FOREST, 0.06, Confidence.HIGH),
    ModelLabel.XGBOOST: ModelPreset(ModelLabel.XGBOOST, 0.05, Confidence.HIGH),
}

# case/spacing-insensitive lookup: "random forest", "RandomForest", "xgboost"...
_ALIASES: Dict[str, ModelLabel] = {
    m.value.replace(" ", "").lower(): m for m in ModelLabel
}


@deal.post(lambda result: isinstance(result, ModelLabel), message="must return ModelLabel")
@deal.raises(UnknownModelError)
def parse_model_label(label: Union[str, ModelLabel]) -> ModelLabel:
    if isinstance(label, ModelLabel):
        return label
    key = str(label).replace(" ", "").replace("_", "").strip().lower()
    try:
        return _ALIASES[key]
    except KeyError:
        raise unknown_model(str(label)) from None


@deal.post(lambda result: 0.0 < result.noise_factor < 1.0, message="noise_factor in (0, 1)")
@deal.raises(UnknownModelError)
def get_preset(label: Union[str, ModelLabel]) -> ModelPreset:
    return MODEL_PRESETS[parse_model_label(label)]
