from __future__ import annotations

import pytest

from cryptoants.core.events import EventType
from cryptoants.core.exceptions import MintAuthorityError, NoEggsAvailableError
from cryptoants.economy.engine import EconomyEngine
from tests._support import EGG_PRICE, START, USER


def test_create_ant_without_eggs_fails(engine: EconomyEngine) -> None:
    with pytest.raises(NoEggsAvailableError):
        engine.create_ant(USER)
    assert engine.ant_balance(USER) == 0
    assert engine.ants.total_minted == 0


def test_should_buy_an_egg_and_create_a_new_ant_with_it(engine: EconomyEngine) -> None:
    engine.buy_eggs(USER, 1, EGG_PRICE)
    before = engine.ant_balance(USER)

    ant_id = engine.create_ant(USER)

    assert ant_id == 1
    assert engine.ant_balance(USER) == before + 1
    assert engine.egg_balance(USER) == 0

    ant = engine.ant(ant_id)
    assert ant is not None
    assert ant.owner == USER
    assert ant.alive is True
    assert ant.born_at == ant.last_lay_time == START


def test_ids_strictly_increase(engine: EconomyEngine) -> None:
    engine.buy_eggs(USER, 3, 3 * EGG_PRICE)
    ids = [engine.create_ant(USER) for _ in range(3)]
    assert ids == [1, 2, 3]

    engine.sell_ant(USER, 2)
    engine.buy_eggs(USER, 1, EGG_PRICE)
    assert engine.create_ant(USER) == 4


def test_mint_announces_new_token_id(engine: EconomyEngine) -> None:
    engine.buy_eggs(USER, 1, EGG_PRICE)
    ant_id = engine.create_ant(USER)

    (mint,) = engine.journal.events(event_type=EventType.ANT_TRANSFER_V1)
    assert mint.payload == {"from_owner": None, "to_owner": USER, "ant_id": ant_id}
    (created,) = engine.journal.events(event_type=EventType.ANT_CREATED_V1)
    assert created.payload["ant_id"] == ant_id


def test_should_only_allow_the_engine_to_mint(engine: EconomyEngine) -> None:
    with pytest.raises(MintAuthorityError, match="Only the ants contract can call this function"):
        engine.eggs.mint(USER, USER, 1, ts=START)
    with pytest.raises(MintAuthorityError):
        engine.ants.mint(USER, USER, ts=START)

    before = engine.egg_balance(USER)
    engine.buy_eggs(USER, 1, EGG_PRICE)
    assert engine.egg_balance(USER) == before + 1


def test_minted_never_exceeds_eggs_supplied(engine: EconomyEngine) -> None:
    engine.buy_eggs(USER, 2, 2 * EGG_PRICE)
    engine.create_ant(USER)
    engine.create_ant(USER)
    with pytest.raises(NoEggsAvailableError):
        engine.create_ant(USER)

    assert engine.ants.total_minted == engine.eggs.total_burned == 2
    assert engine.ants.total_minted <= engine.eggs.total_minted
