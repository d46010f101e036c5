from __future__ import annotations

from cryptoants.core.config import Config, EconomyConfig, SimulationConfig
from cryptoants.core.randomness import ScriptedRandomness
from cryptoants.economy.simulation import build_colony, grow_colony, lay_until_death


def _config(**economy: object) -> Config:
    return Config(
        economy=EconomyConfig(**economy),
        simulation=SimulationConfig(seed=11, player_address="0xsim"),
    )


def test_build_colony_funds_the_player() -> None:
    cfg = _config()
    colony = build_colony(cfg)
    assert colony.player == "0xsim"
    assert colony.currency.balance_of("0xsim") == cfg.simulation.player_funding
    assert colony.clock.now() == cfg.simulation.start_time
    assert colony.engine.config is cfg.economy


def test_lay_until_death_stops_on_death() -> None:
    # survive, survive, die
    draws = ScriptedRandomness([0.5, 0.9, 0.5, 0.9, 0.5, 0.0])
    colony = build_colony(_config(), randomness=draws)
    eng = colony.engine
    eng.buy_eggs(colony.player, 1, eng.egg_price_for(1))
    ant_id = eng.create_ant(colony.player)

    run = lay_until_death(colony, ant_id, max_cycles=10)

    assert run.died is True
    assert run.cycles == 3
    assert run.eggs == 33
    assert eng.ant_balance(colony.player) == 0
    assert colony.clock.now() == colony.engine.config.lay_cooldown_seconds * 2 + 1_600_000_000


def test_lay_until_death_respects_cycle_budget() -> None:
    colony = build_colony(_config(death_chance=0.0))
    eng = colony.engine
    eng.buy_eggs(colony.player, 1, eng.egg_price_for(1))
    ant_id = eng.create_ant(colony.player)

    run = lay_until_death(colony, ant_id, max_cycles=25)

    assert run.died is False
    assert run.cycles == 25
    assert 25 <= run.eggs <= 500


def test_grow_colony_from_a_single_egg() -> None:
    colony = build_colony(_config(death_chance=0.0))

    run = grow_colony(colony, target=100)

    assert run.complete is True
    assert run.created == 100
    assert run.alive == 100
    assert run.deaths == 0
    assert colony.engine.ants.total_minted == 100
    assert colony.engine.eggs.total_minted == 1 + colony.engine.metrics.counter("eggs_laid").value
    assert colony.engine.journal.verify_chain()


def test_grow_colony_with_one_ant_alive_at_a_time() -> None:
    # every lay yields 1 egg and kills the ant: the colony never grows past one ant at a time
    colony = build_colony(_config(death_chance=1.0, max_eggs_per_lay=1, cooldown_from_birth=True))

    run = grow_colony(colony, target=5)

    assert run.complete is True
    assert run.created == 5
    assert run.alive == 1
    assert run.deaths == 4
    assert run.elapsed_s == 4 * colony.engine.config.lay_cooldown_seconds
