from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, Sequence, Tuple, TypeVar

import deal

from smartstock.forecast.stats import split_index

T = TypeVar("T")


@dataclass(frozen=True)
class TrainTestSplit(Generic[T]):
    train: Tuple[T, ...]
    test: Tuple[T, ...]


@deal.pre(lambda rows, test_fraction: len(rows) >= 2, message="need at least 2 rows to split")
@deal.pre(lambda rows, test_fraction: 0.0 < test_fraction < 1.0, message="test_fraction in (0, 1)")
@deal.post(lambda result: len(result.train) >= 1 and len(result.test) >= 1)
@deal.raises(deal.PreContractError)
def train_test_split(rows: Sequence[T], test_fraction: float) -> TrainTestSplit[T]:
    """Time-respecting split: the trailing slice is the test set, order untouched."""
    n_train, _ = split_index(len(rows), test_fraction)
    return TrainTestSplit(train=tuple(rows[:n_train]), test=tuple(rows[n_train:]))


@deal.pre(lambda total_rows, test_percent: total_rows >= 0 and 0 <= test_percent <= 100)
@deal.raises(deal.PreContractError)
def split_counts(total_rows: int, test_percent: float) -> Tuple[int, int]:
    """(train, test) row counts for a percentage split preview; test rounds down."""
    test = int(math.floor(total_rows * (test_percent / 100.0)))
    return total_rows - test, test
