from __future__ import annotations

from collections.abc import Callable

import pytest

from cryptoants.core.events import EventType
from cryptoants.core.exceptions import (
    AntNotFoundError,
    CooldownActiveError,
    InsufficientFundsError,
    NotOwnerError,
)
from cryptoants.core.time import ManualClock
from cryptoants.economy.engine import EconomyEngine
from cryptoants.ledger.currency import InMemoryCurrencyLedger
from tests._support import COOLDOWN, EGG_PRICE, OTHER, SALE_PRICE, USER


def _hatch(engine: EconomyEngine, owner: str = USER) -> int:
    engine.buy_eggs(owner, 1, engine.egg_price_for(1))
    return engine.create_ant(owner)


def test_should_send_funds_to_the_user_who_sells_an_ant(
    engine: EconomyEngine, currency: InMemoryCurrencyLedger
) -> None:
    ant_id = _hatch(engine)
    assert ant_id == 1
    before = currency.balance_of(USER)

    receipt = engine.sell_ant(USER, ant_id)

    assert receipt.payout == SALE_PRICE
    assert currency.balance_of(USER) > before
    assert currency.balance_of(USER) == before + SALE_PRICE
    assert engine.treasury_balance() == EGG_PRICE - SALE_PRICE


def test_should_burn_the_ant_after_the_user_sells_it(engine: EconomyEngine) -> None:
    ant_id = _hatch(engine)
    before = engine.ant_balance(USER)

    engine.sell_ant(USER, ant_id)

    assert engine.ant_balance(USER) == before - 1
    tomb = engine.ant(ant_id)
    assert tomb is not None
    assert tomb.alive is False
    assert tomb.owner is None
    assert tomb.retired_reason == "sold"

    (burn,) = [
        e for e in engine.journal.events(event_type=EventType.ANT_TRANSFER_V1) if e.payload["to_owner"] is None
    ]
    assert burn.payload == {"from_owner": USER, "to_owner": None, "ant_id": ant_id}


def test_sold_ant_is_gone_for_every_operation(engine: EconomyEngine) -> None:
    ant_id = _hatch(engine)
    engine.sell_ant(USER, ant_id)

    with pytest.raises(AntNotFoundError):
        engine.sell_ant(USER, ant_id)
    with pytest.raises(AntNotFoundError):
        engine.create_egg(USER, ant_id)
    with pytest.raises(AntNotFoundError):
        engine.transfer_ant(USER, ant_id, OTHER)
    with pytest.raises(AntNotFoundError):
        engine.next_lay_time(ant_id)


def test_only_the_owner_can_sell(engine: EconomyEngine, currency: InMemoryCurrencyLedger) -> None:
    ant_id = _hatch(engine)
    before = currency.balance_of(OTHER)

    with pytest.raises(NotOwnerError):
        engine.sell_ant(OTHER, ant_id)

    assert currency.balance_of(OTHER) == before
    assert engine.ant_balance(USER) == 1


def test_unknown_ant_cannot_be_sold(engine: EconomyEngine) -> None:
    with pytest.raises(AntNotFoundError):
        engine.sell_ant(USER, 42)


def test_empty_treasury_keeps_the_ant(make_engine: Callable[..., EconomyEngine]) -> None:
    eng = make_engine(egg_price=1, ant_sale_price=10)
    ant_id = _hatch(eng)

    with pytest.raises(InsufficientFundsError):
        eng.sell_ant(USER, ant_id)

    ant = eng.ant(ant_id)
    assert ant is not None and ant.alive
    assert eng.ant_balance(USER) == 1
    assert eng.treasury_balance() == 1
    assert eng.metrics.snapshot()["counter.rejected.sell_ant.InsufficientFundsError"] == 1


def test_transfer_hands_over_ownership(engine: EconomyEngine, clock: ManualClock) -> None:
    ant_id = _hatch(engine)
    engine.create_egg(USER, ant_id)

    moved = engine.transfer_ant(USER, ant_id, OTHER)

    assert moved.owner == OTHER
    assert engine.ant_balance(USER) == 0
    assert engine.ant_balance(OTHER) == 1
    with pytest.raises(NotOwnerError):
        engine.create_egg(USER, ant_id)

    # the cooldown travels with the ant
    with pytest.raises(CooldownActiveError):
        engine.create_egg(OTHER, ant_id)
    clock.advance(COOLDOWN)
    engine.create_egg(OTHER, ant_id)


@pytest.mark.parametrize("to", ["", "  ", USER])
def test_transfer_rejects_bad_recipient(engine: EconomyEngine, to: str) -> None:
    ant_id = _hatch(engine)
    with pytest.raises(ValueError):
        engine.transfer_ant(USER, ant_id, to)
    assert engine.ant_balance(USER) == 1


def test_transfer_by_non_owner_fails(engine: EconomyEngine) -> None:
    ant_id = _hatch(engine)
    with pytest.raises(NotOwnerError):
        engine.transfer_ant(OTHER, ant_id, OTHER + "2")
