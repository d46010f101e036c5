"""cryptoants.core.metrics

Counters for the colony.

No exporter here. A snapshot dict is the whole interface.
"""

from __future__ import annotations

from collections import Counter as _Histogram
from dataclasses import dataclass, field
from threading import Lock


@dataclass
class Counter:
    name: str
    _value: int = 0
    _lock: Lock = field(default_factory=Lock, repr=False)

    def inc(self, amount: int = 1) -> None:
        with self._lock:
            self._value += int(amount)

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


@dataclass
class Gauge:
    name: str
    _value: float = 0.0
    _lock: Lock = field(default_factory=Lock, repr=False)

    def set(self, value: float) -> None:
        with self._lock:
            self._value = float(value)

    def add(self, delta: float) -> None:
        with self._lock:
            self._value += float(delta)

    @property
    def value(self) -> float:
        with self._lock:
            return self._value


@dataclass
class Tally:
    """Distribution of integer observations (e.g. eggs per laying)."""

    name: str
    _counts: _Histogram = field(default_factory=_Histogram, repr=False)
    _lock: Lock = field(default_factory=Lock, repr=False)

    def observe(self, value: int) -> None:
        with self._lock:
            self._counts[int(value)] += 1

    @property
    def count(self) -> int:
        with self._lock:
            return sum(self._counts.values())

    @property
    def total(self) -> int:
        with self._lock:
            return sum(k * n for k, n in self._counts.items())

    def bounds(self) -> tuple[int, int] | None:
        with self._lock:
            if not self._counts:
                return None
            return min(self._counts), max(self._counts)

    def mean(self) -> float | None:
        n = self.count
        return None if n == 0 else self.total / n


class MetricsRegistry:
    def __init__(self) -> None:
        self._lock = Lock()
        self._counters: dict[str, Counter] = {}
        self._gauges: dict[str, Gauge] = {}
        self._tallies: dict[str, Tally] = {}

    def counter(self, name: str) -> Counter:
        with self._lock:
            if name not in self._counters:
                self._counters[name] = Counter(name=name)
            return self._counters[name]

    def gauge(self, name: str) -> Gauge:
        with self._lock:
            if name not in self._gauges:
                self._gauges[name] = Gauge(name=name)
            return self._gauges[name]

    def tally(self, name: str) -> Tally:
        with self._lock:
            if name not in self._tallies:
                self._tallies[name] = Tally(name=name)
            return self._tallies[name]

    def snapshot(self) -> dict[str, float]:
        with self._lock:
            data: dict[str, float] = {}
            data.update({f"counter.{k}": float(v.value) for k, v in self._counters.items()})
            data.update({f"gauge.{k}": v.value for k, v in self._gauges.items()})
            for k, t in self._tallies.items():
                data[f"tally.{k}.count"] = float(t.count)
                data[f"tally.{k}.total"] = float(t.total)
            return data
