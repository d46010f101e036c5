"""cryptoants.ledger.ants

The ant arena.

Ids come from a counter that starts at 1 and only goes up. Retired ants (sold or dead)
stay in the arena as tombstones so an id can never point at a different ant later.

Every mutating method is gated to the authority address. The registry checks that the
ant exists and is alive; ownership and cooldown rules belong to the engine.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from threading import Lock
from typing import Literal

from cryptoants.core.events import AntTransferPayload, EventType
from cryptoants.core.exceptions import AntNotFoundError, MintAuthorityError
from cryptoants.core.journal import EventJournal
from cryptoants.ledger.eggs import ONLY_AUTHORITY

logger = logging.getLogger(__name__)

RetiredReason = Literal["sold", "died"]


@dataclass(frozen=True, slots=True)
class Ant:
    ant_id: int
    owner: str | None
    alive: bool
    born_at: int
    last_lay_time: int
    eggs_laid: int = 0
    retired_reason: RetiredReason | None = None


class AntRegistry:
    def __init__(self, *, authority: str, journal: EventJournal) -> None:
        self.authority = authority
        self.journal = journal
        self._lock = Lock()
        self._arena: dict[int, Ant] = {}
        self._by_owner: dict[str, set[int]] = {}
        self._next_id = 1

    def _require_authority(self, caller: str) -> None:
        if caller != self.authority:
            raise MintAuthorityError(ONLY_AUTHORITY)

    def _live(self, ant_id: int) -> Ant:
        ant = self._arena.get(ant_id)
        if ant is None:
            raise AntNotFoundError(f"ant {ant_id} does not exist")
        if not ant.alive:
            raise AntNotFoundError(f"ant {ant_id} was {ant.retired_reason}")
        return ant

    # -----------------
    # Reads
    # -----------------

    def get(self, ant_id: int) -> Ant | None:
        with self._lock:
            return self._arena.get(ant_id)

    def owner_of(self, ant_id: int) -> str:
        with self._lock:
            owner = self._live(ant_id).owner
        assert owner is not None
        return owner

    def balance_of(self, owner: str) -> int:
        """Number of live ants held by ``owner``."""

        with self._lock:
            return len(self._by_owner.get(owner, ()))

    def ants_of(self, owner: str) -> list[Ant]:
        with self._lock:
            return [self._arena[i] for i in sorted(self._by_owner.get(owner, ()))]

    @property
    def total_minted(self) -> int:
        with self._lock:
            return self._next_id - 1

    @property
    def live_count(self) -> int:
        with self._lock:
            return sum(len(ids) for ids in self._by_owner.values())

    # -----------------
    # Authority-only writes
    # -----------------

    def mint(self, caller: str, owner: str, *, ts: int) -> Ant:
        self._require_authority(caller)
        with self._lock:
            ant = Ant(ant_id=self._next_id, owner=owner, alive=True, born_at=ts, last_lay_time=ts)
            self._next_id += 1
            self._arena[ant.ant_id] = ant
            self._by_owner.setdefault(owner, set()).add(ant.ant_id)
        self._announce(None, owner, ant.ant_id, ts=ts)
        logger.debug("ant mint id=%d owner=%s", ant.ant_id, owner)
        return ant

    def record_lay(self, caller: str, ant_id: int, *, ts: int) -> Ant:
        self._require_authority(caller)
        with self._lock:
            ant = self._live(ant_id)
            ant = replace(ant, last_lay_time=ts, eggs_laid=ant.eggs_laid + 1)
            self._arena[ant_id] = ant
        return ant

    def transfer(self, caller: str, ant_id: int, to: str, *, ts: int) -> Ant:
        self._require_authority(caller)
        with self._lock:
            ant = self._live(ant_id)
            prev = ant.owner
            assert prev is not None
            ant = replace(ant, owner=to)
            self._arena[ant_id] = ant
            self._by_owner[prev].discard(ant_id)
            self._by_owner.setdefault(to, set()).add(ant_id)
        self._announce(prev, to, ant_id, ts=ts)
        logger.debug("ant transfer id=%d from=%s to=%s", ant_id, prev, to)
        return ant

    def burn(self, caller: str, ant_id: int, *, reason: RetiredReason, ts: int) -> Ant:
        """Tombstone a live ant. The id is retired for good."""

        self._require_authority(caller)
        with self._lock:
            ant = self._live(ant_id)
            prev = ant.owner
            assert prev is not None
            ant = replace(ant, owner=None, alive=False, retired_reason=reason)
            self._arena[ant_id] = ant
            self._by_owner[prev].discard(ant_id)
        self._announce(prev, None, ant_id, ts=ts)
        logger.debug("ant burn id=%d owner=%s reason=%s", ant_id, prev, reason)
        return ant

    def _announce(self, from_owner: str | None, to_owner: str | None, ant_id: int, *, ts: int) -> None:
        self.journal.append(
            event_type=EventType.ANT_TRANSFER_V1,
            payload=AntTransferPayload(from_owner=from_owner, to_owner=to_owner, ant_id=ant_id),
            ts=ts,
            source=self.authority,
        )
