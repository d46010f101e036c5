"""cryptoants.economy.engine

The economy engine is the only authority over colony state.

Operations (one at a time, each all-or-nothing):
- buy_eggs:    currency in, eggs out
- create_ant:  one egg in, one ant out
- create_egg:  an ant lays a random clutch, and may die doing it
- sell_ant:    ant in, currency out
- transfer_ant: hand a live ant to another holder

Validation runs first, then at most one ledger call that can fail, then the
infallible mutations. A rejected call leaves every balance where it was.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from threading import Lock

from cryptoants.core.config import EconomyConfig
from cryptoants.core.events import (
    AntCreatedPayload,
    AntDiedPayload,
    AntSoldPayload,
    EggsLaidPayload,
    EggsPurchasedPayload,
    EventType,
)
from cryptoants.core.exceptions import (
    CooldownActiveError,
    EconomyError,
    InsufficientPaymentError,
    LedgerError,
    NoEggsAvailableError,
    NotOwnerError,
)
from cryptoants.core.journal import EventJournal
from cryptoants.core.metrics import MetricsRegistry
from cryptoants.core.randomness import RandomnessSource, draw_chance, draw_int
from cryptoants.core.time import Clock
from cryptoants.ledger.ants import Ant, AntRegistry
from cryptoants.ledger.currency import CurrencyLedger
from cryptoants.ledger.eggs import EggLedger

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EggPurchase:
    buyer: str
    quantity: int
    paid: int
    egg_balance: int


@dataclass(frozen=True, slots=True)
class LayResult:
    ant_id: int
    eggs: int
    died: bool
    laid_at: int
    egg_balance: int


@dataclass(frozen=True, slots=True)
class SaleReceipt:
    ant_id: int
    seller: str
    payout: int


class EconomyEngine:
    """Single-writer state machine over the egg and ant ledgers."""

    def __init__(
        self,
        config: EconomyConfig,
        *,
        clock: Clock,
        randomness: RandomnessSource,
        currency: CurrencyLedger,
        journal: EventJournal | None = None,
        metrics: MetricsRegistry | None = None,
    ) -> None:
        self.config = config
        self.clock = clock
        self.randomness = randomness
        self.currency = currency
        self.journal = journal or EventJournal()
        self.metrics = metrics or MetricsRegistry()

        self.address = config.engine_address
        self.eggs = EggLedger(authority=self.address, journal=self.journal)
        self.ants = AntRegistry(authority=self.address, journal=self.journal)

        self._lock = Lock()

    # -----------------
    # Views
    # -----------------

    def egg_price_for(self, quantity: int) -> int:
        return int(quantity) * self.config.egg_price

    def egg_balance(self, owner: str) -> int:
        return self.eggs.balance_of(owner)

    def ant_balance(self, owner: str) -> int:
        return self.ants.balance_of(owner)

    def ant(self, ant_id: int) -> Ant | None:
        return self.ants.get(ant_id)

    def ants_of(self, owner: str) -> list[Ant]:
        return self.ants.ants_of(owner)

    def treasury_balance(self) -> int:
        return self.currency.treasury_balance()

    def next_lay_time(self, ant_id: int) -> int:
        """Earliest clock time at which ``ant_id`` may lay."""

        ant = self._live_ant(ant_id)
        return self._ready_at(ant)

    # -----------------
    # Operations
    # -----------------

    def buy_eggs(self, caller: str, quantity: int, paid_amount: int) -> EggPurchase:
        if quantity < 0:
            raise ValueError("quantity must be >= 0")
        if paid_amount < 0:
            raise ValueError("paid_amount must be >= 0")

        with self._operation("buy_eggs"):
            price = self.egg_price_for(quantity)
            if paid_amount < price:
                raise InsufficientPaymentError("You have to pay for those eggs!")

            now = self.clock.now()
            # Overpayment is kept by the treasury; no change, no bonus eggs.
            self.currency.credit(caller, paid_amount)
            if quantity:
                balance = self.eggs.mint(self.address, caller, quantity, ts=now)
            else:
                balance = self.eggs.balance_of(caller)
            self.journal.append(
                event_type=EventType.EGGS_PURCHASED_V1,
                payload=EggsPurchasedPayload(
                    buyer=caller, quantity=quantity, paid=paid_amount, price_per_egg=self.config.egg_price
                ),
                ts=now,
                source=self.address,
            )

        self.metrics.counter("eggs_purchased").inc(quantity)
        self.metrics.gauge("treasury_wei").set(self.currency.treasury_balance())
        logger.debug("buy_eggs caller=%s quantity=%d paid=%d", caller, quantity, paid_amount)
        return EggPurchase(buyer=caller, quantity=quantity, paid=paid_amount, egg_balance=balance)

    def create_ant(self, caller: str) -> int:
        """Hatch one egg into a new ant. Returns the ant id."""

        with self._operation("create_ant"):
            if self.eggs.balance_of(caller) < 1:
                raise NoEggsAvailableError(f"{caller} has no eggs")

            now = self.clock.now()
            self.eggs.burn(self.address, caller, 1, ts=now)
            ant = self.ants.mint(self.address, caller, ts=now)
            self.journal.append(
                event_type=EventType.ANT_CREATED_V1,
                payload=AntCreatedPayload(owner=caller, ant_id=ant.ant_id, born_at=now),
                ts=now,
                source=self.address,
            )

        self.metrics.counter("ants_created").inc()
        logger.debug("create_ant caller=%s ant_id=%d", caller, ant.ant_id)
        return ant.ant_id

    def create_egg(self, caller: str, ant_id: int) -> LayResult:
        """Have ``ant_id`` lay eggs for its owner.

        Two draws: the first picks the clutch size, the second decides whether the ant
        dies. A dying ant still delivers its clutch.
        """

        cfg = self.config
        with self._operation("create_egg"):
            ant = self._owned_ant(caller, ant_id)

            now = self.clock.now()
            ready_at = self._ready_at(ant)
            if now < ready_at:
                raise CooldownActiveError("You have to wait", ready_at=ready_at, remaining_s=ready_at - now)

            eggs = draw_int(self.randomness.next(), cfg.min_eggs_per_lay, cfg.max_eggs_per_lay)
            died = draw_chance(self.randomness.next(), cfg.death_chance)

            balance = self.eggs.mint(self.address, caller, eggs, ts=now)
            ant = self.ants.record_lay(self.address, ant_id, ts=now)
            self.journal.append(
                event_type=EventType.EGGS_LAID_V1,
                payload=EggsLaidPayload(owner=caller, ant_id=ant_id, eggs=eggs, laid_at=now),
                ts=now,
                source=self.address,
            )
            if died:
                self.ants.burn(self.address, ant_id, reason="died", ts=now)
                self.journal.append(
                    event_type=EventType.ANT_DIED_V1,
                    payload=AntDiedPayload(owner=caller, ant_id=ant_id, eggs_laid=ant.eggs_laid),
                    ts=now,
                    source=self.address,
                )

        self.metrics.counter("eggs_laid").inc(eggs)
        self.metrics.tally("eggs_per_lay").observe(eggs)
        if died:
            self.metrics.counter("ants_died").inc()
            logger.info("ant %d died after laying %d times (owner=%s)", ant_id, ant.eggs_laid, caller)
        logger.debug("create_egg caller=%s ant_id=%d eggs=%d", caller, ant_id, eggs)
        return LayResult(ant_id=ant_id, eggs=eggs, died=died, laid_at=now, egg_balance=balance)

    def sell_ant(self, caller: str, ant_id: int) -> SaleReceipt:
        """Sell a live ant back to the treasury. The ant is retired.

        Raises ``InsufficientFundsError`` when the treasury holds less than the sale
        price; the ant stays alive and owned in that case.
        """

        payout = self.config.ant_sale_price
        with self._operation("sell_ant"):
            self._owned_ant(caller, ant_id)

            now = self.clock.now()
            self.currency.debit(caller, payout)
            self.ants.burn(self.address, ant_id, reason="sold", ts=now)
            self.journal.append(
                event_type=EventType.ANT_SOLD_V1,
                payload=AntSoldPayload(seller=caller, ant_id=ant_id, payout=payout),
                ts=now,
                source=self.address,
            )

        self.metrics.counter("ants_sold").inc()
        self.metrics.gauge("treasury_wei").set(self.currency.treasury_balance())
        logger.info("ant %d sold by %s for %d wei", ant_id, caller, payout)
        return SaleReceipt(ant_id=ant_id, seller=caller, payout=payout)

    def transfer_ant(self, caller: str, ant_id: int, to: str) -> Ant:
        if not to or not to.strip():
            raise ValueError("recipient must not be empty")
        if to == caller:
            raise ValueError("cannot transfer an ant to its current owner")

        with self._operation("transfer_ant"):
            self._owned_ant(caller, ant_id)
            ant = self.ants.transfer(self.address, ant_id, to, ts=self.clock.now())

        self.metrics.counter("ants_transferred").inc()
        logger.debug("transfer_ant ant_id=%d from=%s to=%s", ant_id, caller, to)
        return ant

    # -----------------
    # Internals
    # -----------------

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        """Serialize one operation and count its rejections."""

        with self._lock:
            try:
                yield
            except (EconomyError, LedgerError) as e:
                self.metrics.counter(f"rejected.{name}.{type(e).__name__}").inc()
                logger.debug("%s rejected: %s: %s", name, type(e).__name__, e)
                raise

    def _live_ant(self, ant_id: int) -> Ant:
        owner = self.ants.owner_of(ant_id)  # raises AntNotFoundError for unknown or retired ids
        ant = self.ants.get(ant_id)
        assert ant is not None and ant.owner == owner
        return ant

    def _owned_ant(self, caller: str, ant_id: int) -> Ant:
        ant = self._live_ant(ant_id)
        if ant.owner != caller:
            raise NotOwnerError(f"ant {ant_id} is not owned by {caller}")
        return ant

    def _ready_at(self, ant: Ant) -> int:
        if ant.eggs_laid == 0 and not self.config.cooldown_from_birth:
            return ant.born_at
        return ant.last_lay_time + self.config.lay_cooldown_seconds
