"""cryptoants.core.models

The event envelope is immutable. The colony's memory is append-only.
"""

from __future__ import annotations

import hashlib
from datetime import datetime
from typing import Any

from pydantic import BaseModel

from cryptoants.core.events import EventType, canonical_json


class Event(BaseModel):
    """Immutable notification record."""

    seq: int
    type: EventType
    ts: datetime
    source: str | None = None
    schema_version: str = "v1"
    payload: dict[str, Any]
    prev_hash: str | None = None
    hash: str

    model_config = {"frozen": True}


def compute_event_hash(
    *,
    prev_hash: str | None,
    seq: int,
    event_type: EventType,
    payload: dict[str, Any],
    ts: datetime,
    source: str | None = None,
    schema_version: str = "v1",
) -> str:
    """Compute the canonical SHA-256 event hash.

    Hash = sha256(prev_hash | seq | ts | type | schema_version | source | canonical_payload_json)
    """

    header_parts = [
        prev_hash or "",
        str(seq),
        ts.isoformat(),
        str(event_type),
        schema_version,
        source or "",
    ]

    data = "|".join(header_parts) + "|" + canonical_json(payload)
    return hashlib.sha256(data.encode("utf-8")).hexdigest()
