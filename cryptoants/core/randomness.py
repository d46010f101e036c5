"""cryptoants.core.randomness

Entropy is a collaborator, not a global.

Every source yields floats uniform in ``[0, 1)``. Mapping a draw onto an integer range
or a probability lives here too, so the engine never touches raw entropy.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class RandomnessSource(Protocol):
    def next(self) -> float: ...


class SeededRandomness:
    """Reproducible source backed by numpy's PCG64 generator."""

    def __init__(self, seed: int | None = None) -> None:
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def next(self) -> float:
        return float(self._rng.random())


class ScriptedRandomness:
    """Replays a fixed sequence of draws. Raises once exhausted.

    With ``cycle=True`` the sequence repeats forever.
    """

    def __init__(self, values: Iterable[float], *, cycle: bool = False) -> None:
        self._values = [float(v) for v in values]
        if not self._values:
            raise ValueError("values must not be empty")
        for v in self._values:
            if not 0.0 <= v < 1.0:
                raise ValueError(f"draw out of range [0, 1): {v}")
        self._cycle = cycle
        self._i = 0

    @property
    def consumed(self) -> int:
        return self._i

    def next(self) -> float:
        if self._i >= len(self._values) and not self._cycle:
            raise IndexError("scripted randomness exhausted")
        v = self._values[self._i % len(self._values)]
        self._i += 1
        return v


def draw_int(u: float, low: int, high: int) -> int:
    """Map a uniform draw onto the inclusive range ``[low, high]``."""

    if high < low:
        raise ValueError(f"empty range [{low}, {high}]")
    span = high - low + 1
    # Clamp guards against u == 1.0 from a misbehaving source.
    return low + min(span - 1, int(math.floor(float(u) * span)))


def draw_chance(u: float, probability: float) -> bool:
    """True with the given probability for a uniform draw."""

    return float(u) < float(probability)
