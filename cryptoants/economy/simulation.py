"""cryptoants.economy.simulation

Scripted colony runs against a real engine on simulated time.

Two scenarios:
- lay_until_death: one ant lays every cooldown until it dies (or the cycle budget ends)
- grow_colony: from one purchased egg, hatch and lay until N ants have been created
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from cryptoants.core.config import Config
from cryptoants.core.randomness import RandomnessSource, SeededRandomness
from cryptoants.core.time import ManualClock
from cryptoants.economy.engine import EconomyEngine
from cryptoants.ledger.currency import InMemoryCurrencyLedger

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Colony:
    """An engine wired to simulated collaborators, plus one funded player."""

    engine: EconomyEngine
    clock: ManualClock
    currency: InMemoryCurrencyLedger
    player: str


@dataclass(frozen=True, slots=True)
class DeathRun:
    ant_id: int
    cycles: int
    eggs: int
    died: bool


@dataclass(frozen=True, slots=True)
class GrowthRun:
    created: int
    alive: int
    deaths: int
    lays: int
    eggs_left: int
    elapsed_s: int
    complete: bool


def build_colony(config: Config, *, randomness: RandomnessSource | None = None) -> Colony:
    sim = config.simulation
    clock = ManualClock(start=sim.start_time)
    currency = InMemoryCurrencyLedger()
    currency.fund(sim.player_address, sim.player_funding)
    engine = EconomyEngine(
        config.economy,
        clock=clock,
        randomness=randomness or SeededRandomness(sim.seed),
        currency=currency,
    )
    return Colony(engine=engine, clock=clock, currency=currency, player=sim.player_address)


def lay_until_death(colony: Colony, ant_id: int, *, max_cycles: int) -> DeathRun:
    """Lay with ``ant_id`` once per cooldown until it dies or ``max_cycles`` is spent."""

    engine = colony.engine
    cooldown = engine.config.lay_cooldown_seconds
    eggs = 0
    for cycle in range(1, max_cycles + 1):
        res = engine.create_egg(colony.player, ant_id)
        eggs += res.eggs
        if res.died:
            logger.info("ant %d died on cycle %d after %d eggs", ant_id, cycle, eggs)
            return DeathRun(ant_id=ant_id, cycles=cycle, eggs=eggs, died=True)
        colony.clock.advance(cooldown)
    return DeathRun(ant_id=ant_id, cycles=max_cycles, eggs=eggs, died=False)


def grow_colony(colony: Colony, *, target: int) -> GrowthRun:
    """Buy one egg, then hatch and lay until ``target`` ants have been created.

    Hatching always wins over laying: an egg in hand becomes an ant before any ant
    is asked to lay. When no live ant is ready, the clock jumps to the next one.
    """

    engine = colony.engine
    player = colony.player
    started = colony.clock.now()

    engine.buy_eggs(player, 1, engine.egg_price_for(1))

    created = deaths = lays = 0
    while created < target:
        if engine.egg_balance(player) > 0:
            engine.create_ant(player)
            created += 1
            continue

        # Every lay yields at least one egg, so a colony with no eggs still has a live ant.
        now = colony.clock.now()
        ready_at, ant_id = min((engine.next_lay_time(a.ant_id), a.ant_id) for a in engine.ants_of(player))
        if ready_at > now:
            colony.clock.set(ready_at)

        res = engine.create_egg(player, ant_id)
        lays += 1
        deaths += int(res.died)

    logger.info("colony grew to %d ants in %d lays (%d deaths)", created, lays, deaths)
    return GrowthRun(
        created=created,
        alive=engine.ant_balance(player),
        deaths=deaths,
        lays=lays,
        eggs_left=engine.egg_balance(player),
        elapsed_s=colony.clock.now() - started,
        complete=created >= target,
    )
