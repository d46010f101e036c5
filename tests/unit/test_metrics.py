from __future__ import annotations

from cryptoants.core.metrics import MetricsRegistry


def test_registry_reuses_named_instruments() -> None:
    reg = MetricsRegistry()
    reg.counter("ants_created").inc()
    reg.counter("ants_created").inc(2)
    reg.gauge("treasury_wei").set(10)
    reg.gauge("treasury_wei").add(5)

    snap = reg.snapshot()
    assert snap["counter.ants_created"] == 3
    assert snap["gauge.treasury_wei"] == 15


def test_counters_are_independent() -> None:
    reg = MetricsRegistry()
    reg.counter("a").inc()
    assert reg.counter("b").value == 0


def test_tally_tracks_distribution() -> None:
    reg = MetricsRegistry()
    t = reg.tally("eggs_per_lay")
    assert t.bounds() is None
    assert t.mean() is None

    for v in (1, 20, 9):
        t.observe(v)

    assert t.count == 3
    assert t.total == 30
    assert t.bounds() == (1, 20)
    assert t.mean() == 10
    snap = reg.snapshot()
    assert snap["tally.eggs_per_lay.count"] == 3
    assert snap["tally.eggs_per_lay.total"] == 30
