from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional, Protocol, Sequence, Tuple


class RandomSource(Protocol):
    """Uniform draws in [0, 1). Every bit of noise in a forecast comes from here."""

    def next(self) -> float: ...


class SystemRandomSource:
    """Production default: a private, unseeded generator (never the module-global one)."""

    def __init__(self) -> None:
        self._rng = random.Random()

    def next(self) -> float:
        return self._rng.random()


class SeededRandomSource:
    def __init__(self, seed: int) -> None:
        self.seed = seed
        self._rng = random.Random(seed)

    def next(self) -> float:
        return self._rng.random()


@dataclass
class SequenceRandomSource:
    """
    Replays a fixed list of draws, cycling when exhausted.

    Handy for pinning exact numbers in tests: SequenceRandomSource([0.5]) means
    "no noise at all", since every noise term is scaled by (u - 0.5).
    """

    values: Sequence[float]
    _pos: int = field(default=0, init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.values:
            raise ValueError("values must be non-empty")
        for v in self.values:
            if not 0.0 <= float(v) < 1.0:
                raise ValueError(f"draw out of [0, 1): {v!r}")
        self.values = tuple(float(v) for v in self.values)

    def next(self) -> float:
        v = self.values[self._pos % len(self.values)]
        self._pos += 1
        return v


def resolve_random_source(rng: Optional[RandomSource] = None, seed: Optional[int] = None) -> RandomSource:
    if rng is not None:
        return rng
    if seed is not None:
        return SeededRandomSource(seed)
    return SystemRandomSource()


def draw_many(rng: RandomSource, n: int) -> Tuple[float, ...]:
    return tuple(rng.next() for _ in range(n))
