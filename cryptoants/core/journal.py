"""cryptoants.core.journal

Append-only, hash-chained notification journal.

The journal is where ownership changes are announced. It is in-memory: the colony's
durable format is its entity model, not this log.
"""

from __future__ import annotations

from collections.abc import Iterator
from threading import RLock
from typing import Any

from pydantic import BaseModel, ValidationError

from cryptoants.core.events import EventType, payload_model_for
from cryptoants.core.exceptions import JournalError
from cryptoants.core.models import Event, compute_event_hash
from cryptoants.core.time import to_datetime


class EventJournal:
    def __init__(self) -> None:
        self._lock = RLock()
        self._events: list[Event] = []
        self._last_hash: str | None = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def __iter__(self) -> Iterator[Event]:
        with self._lock:
            return iter(list(self._events))

    @property
    def last(self) -> Event | None:
        with self._lock:
            return self._events[-1] if self._events else None

    def append(
        self,
        *,
        event_type: EventType,
        payload: BaseModel | dict[str, Any],
        ts: int,
        source: str | None = None,
        schema_version: str = "v1",
    ) -> Event:
        """Append a single event.

        Dict payloads are validated against the registered payload model.

        Raises:
            JournalError: unknown event type or payload that fails validation.
        """

        model = payload_model_for(event_type)
        if model is None:
            raise JournalError(f"no payload model registered for {event_type}")

        try:
            obj = payload if isinstance(payload, model) else model.model_validate(payload)
        except ValidationError as e:
            raise JournalError(f"invalid payload for {event_type}: {e}") from e
        data = obj.model_dump(mode="json")

        with self._lock:
            seq = len(self._events) + 1
            when = to_datetime(ts)
            h = compute_event_hash(
                prev_hash=self._last_hash,
                seq=seq,
                event_type=event_type,
                payload=data,
                ts=when,
                source=source,
                schema_version=schema_version,
            )
            ev = Event(
                seq=seq,
                type=event_type,
                ts=when,
                source=source,
                schema_version=schema_version,
                payload=data,
                prev_hash=self._last_hash,
                hash=h,
            )
            self._events.append(ev)
            self._last_hash = h
            return ev

    def events(
        self,
        *,
        event_type: EventType | None = None,
        since_seq: int = 0,
        limit: int | None = None,
    ) -> list[Event]:
        with self._lock:
            out = [
                ev
                for ev in self._events
                if ev.seq > since_seq and (event_type is None or ev.type == event_type)
            ]
        return out if limit is None else out[:limit]

    def verify_chain(self) -> bool:
        """Recompute every hash from the start of the journal."""

        prev: str | None = None
        with self._lock:
            for ev in self._events:
                if ev.prev_hash != prev:
                    return False
                expected = compute_event_hash(
                    prev_hash=prev,
                    seq=ev.seq,
                    event_type=ev.type,
                    payload=ev.payload,
                    ts=ev.ts,
                    source=ev.source,
                    schema_version=ev.schema_version,
                )
                if expected != ev.hash:
                    return False
                prev = expected
        return True
