"""cryptoants.ledger.eggs

Fungible egg balances.

Anyone may read. Only the authority address (the engine) may mint or burn. There is
no holder-to-holder transfer: eggs move only by purchase, laying, and hatching.
"""

from __future__ import annotations

import logging
from threading import Lock

from cryptoants.core.events import EggTransferPayload, EventType
from cryptoants.core.exceptions import MintAuthorityError, NoEggsAvailableError
from cryptoants.core.journal import EventJournal

logger = logging.getLogger(__name__)

ONLY_AUTHORITY = "Only the ants contract can call this function, please refer to the ants contract"


class EggLedger:
    def __init__(self, *, authority: str, journal: EventJournal) -> None:
        self.authority = authority
        self.journal = journal
        self._lock = Lock()
        self._balances: dict[str, int] = {}
        self._total_minted = 0
        self._total_burned = 0

    def _require_authority(self, caller: str) -> None:
        if caller != self.authority:
            raise MintAuthorityError(ONLY_AUTHORITY)

    def balance_of(self, owner: str) -> int:
        with self._lock:
            return self._balances.get(owner, 0)

    @property
    def total_minted(self) -> int:
        with self._lock:
            return self._total_minted

    @property
    def total_burned(self) -> int:
        with self._lock:
            return self._total_burned

    @property
    def total_supply(self) -> int:
        with self._lock:
            return self._total_minted - self._total_burned

    def mint(self, caller: str, to: str, amount: int, *, ts: int) -> int:
        """Credit ``amount`` eggs to ``to``. Returns the new balance."""

        self._require_authority(caller)
        if amount <= 0:
            raise ValueError("amount must be > 0")
        with self._lock:
            new = self._balances.get(to, 0) + amount
            self._balances[to] = new
            self._total_minted += amount
        self.journal.append(
            event_type=EventType.EGG_TRANSFER_V1,
            payload=EggTransferPayload(from_owner=None, to_owner=to, amount=amount),
            ts=ts,
            source=caller,
        )
        logger.debug("egg mint to=%s amount=%d balance=%d", to, amount, new)
        return new

    def burn(self, caller: str, owner: str, amount: int, *, ts: int) -> int:
        """Remove ``amount`` eggs from ``owner``. Returns the new balance."""

        self._require_authority(caller)
        if amount <= 0:
            raise ValueError("amount must be > 0")
        with self._lock:
            have = self._balances.get(owner, 0)
            if have < amount:
                raise NoEggsAvailableError(f"{owner} holds {have} eggs, needs {amount}")
            new = have - amount
            self._balances[owner] = new
            self._total_burned += amount
        self.journal.append(
            event_type=EventType.EGG_TRANSFER_V1,
            payload=EggTransferPayload(from_owner=owner, to_owner=None, amount=amount),
            ts=ts,
            source=caller,
        )
        logger.debug("egg burn owner=%s amount=%d balance=%d", owner, amount, new)
        return new
