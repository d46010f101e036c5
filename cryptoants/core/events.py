"""cryptoants.core.events

The notification contract.

Every state transition the engine accepts leaves a record here. Ownership changes
follow the token convention: ``from_owner=None`` is a mint, ``to_owner=None`` a burn.
"""

from __future__ import annotations

import json
from enum import StrEnum
from typing import Any

from pydantic import BaseModel


class EventType(StrEnum):
    """Canonical event type registry.

    Naming: ``{domain}.{action}.v1``.
    """

    # Ownership changes
    EGG_TRANSFER_V1 = "egg.transfer.v1"
    ANT_TRANSFER_V1 = "ant.transfer.v1"

    # Economy
    EGGS_PURCHASED_V1 = "egg.purchased.v1"
    ANT_CREATED_V1 = "ant.created.v1"
    EGGS_LAID_V1 = "egg.laid.v1"
    ANT_DIED_V1 = "ant.died.v1"
    ANT_SOLD_V1 = "ant.sold.v1"


# -----------------
# Typed payloads
# -----------------


class EggTransferPayload(BaseModel):
    from_owner: str | None
    to_owner: str | None
    amount: int


class AntTransferPayload(BaseModel):
    from_owner: str | None
    to_owner: str | None
    ant_id: int


class EggsPurchasedPayload(BaseModel):
    buyer: str
    quantity: int
    paid: int
    price_per_egg: int


class AntCreatedPayload(BaseModel):
    owner: str
    ant_id: int
    born_at: int


class EggsLaidPayload(BaseModel):
    owner: str
    ant_id: int
    eggs: int
    laid_at: int


class AntDiedPayload(BaseModel):
    owner: str
    ant_id: int
    eggs_laid: int


class AntSoldPayload(BaseModel):
    seller: str
    ant_id: int
    payout: int


_EVENT_PAYLOAD_MODELS: dict[EventType, type[BaseModel]] = {
    EventType.EGG_TRANSFER_V1: EggTransferPayload,
    EventType.ANT_TRANSFER_V1: AntTransferPayload,
    EventType.EGGS_PURCHASED_V1: EggsPurchasedPayload,
    EventType.ANT_CREATED_V1: AntCreatedPayload,
    EventType.EGGS_LAID_V1: EggsLaidPayload,
    EventType.ANT_DIED_V1: AntDiedPayload,
    EventType.ANT_SOLD_V1: AntSoldPayload,
}


def payload_model_for(event_type: EventType) -> type[BaseModel] | None:
    return _EVENT_PAYLOAD_MODELS.get(event_type)


def canonical_json(data: Any) -> str:
    """Canonical JSON serialization used for hashing."""

    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
