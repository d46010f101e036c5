"""cryptoants.ledger.currency

Native currency custody.

The engine never holds balances itself. Payments for eggs are credited to the treasury
and sale proceeds are debited from it, always through this boundary.
"""

from __future__ import annotations

import logging
from threading import Lock
from typing import Protocol, runtime_checkable

from cryptoants.core.exceptions import InsufficientFundsError

logger = logging.getLogger(__name__)


@runtime_checkable
class CurrencyLedger(Protocol):
    def credit(self, payer: str, amount: int) -> None:
        """Move ``amount`` from ``payer`` into the treasury."""
        ...

    def debit(self, to: str, amount: int) -> None:
        """Pay ``amount`` out of the treasury to ``to``."""
        ...

    def balance_of(self, address: str) -> int: ...

    def treasury_balance(self) -> int: ...


def _check_amount(amount: int) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"amount must be an int in wei, got {type(amount).__name__}")
    if amount < 0:
        raise ValueError("amount must be >= 0")
    return amount


class InMemoryCurrencyLedger:
    """Wallets plus a single treasury account.

    ``credit`` and ``debit`` either apply fully or raise before touching balances.
    """

    def __init__(self, *, treasury: int = 0) -> None:
        self._lock = Lock()
        self._wallets: dict[str, int] = {}
        self._treasury = _check_amount(treasury)

    def fund(self, address: str, amount: int) -> int:
        """Mint currency into a wallet (test and simulation seeding)."""

        amt = _check_amount(amount)
        with self._lock:
            self._wallets[address] = self._wallets.get(address, 0) + amt
            return self._wallets[address]

    def balance_of(self, address: str) -> int:
        with self._lock:
            return self._wallets.get(address, 0)

    def treasury_balance(self) -> int:
        with self._lock:
            return self._treasury

    def credit(self, payer: str, amount: int) -> None:
        amt = _check_amount(amount)
        with self._lock:
            have = self._wallets.get(payer, 0)
            if have < amt:
                raise InsufficientFundsError(f"{payer} holds {have} wei, needs {amt}")
            self._wallets[payer] = have - amt
            self._treasury += amt
        logger.debug("credit payer=%s amount=%d", payer, amt)

    def debit(self, to: str, amount: int) -> None:
        amt = _check_amount(amount)
        with self._lock:
            if self._treasury < amt:
                raise InsufficientFundsError(f"treasury holds {self._treasury} wei, needs {amt}")
            self._treasury -= amt
            self._wallets[to] = self._wallets.get(to, 0) + amt
        logger.debug("debit to=%s amount=%d", to, amt)
