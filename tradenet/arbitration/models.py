"""Pydantic models for arbitrator listings, filter documents and trade history.

Three record families:
- ArbitratorRecord: a signed listing published by an arbitrator peer
- FilterDocument: the externally distributed ban lists
- TradeRecord: a historical trade carrying a truncated arbitrator hostname
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


# ---------------------------------------------------------------------------
# Trade statistics extra-data keys
# ---------------------------------------------------------------------------

ARBITRATOR_ADDRESS = "arbAddr"
ARBITRATOR_FRAGMENT_LENGTH = 4


# ---------------------------------------------------------------------------
# Arbitrator listing
# ---------------------------------------------------------------------------


class NodeAddress(BaseModel):
    """Network identity of a peer (host + port)."""

    model_config = ConfigDict(frozen=True)

    host_name: str = Field(min_length=1)
    port: int = Field(ge=0, le=65535)

    @property
    def full_address(self) -> str:
        return f"{self.host_name}:{self.port}"

    def __str__(self) -> str:
        return self.full_address


class ArbitratorRecord(BaseModel):
    """Arbitrator listing as published to the network store.

    Snapshots are frozen: the directory only ever reads them.
    """

    model_config = ConfigDict(frozen=True)

    node_address: NodeAddress
    registration_pub_key: bytes
    languages: tuple[str, ...] = ()
    registration_date: datetime | None = None
    email_address: str | None = None
    info: str | None = None

    @property
    def host_name(self) -> str:
        return self.node_address.host_name

    @property
    def registration_key_hex(self) -> str:
        return self.registration_pub_key.hex()


class StorageEntry(BaseModel):
    """Entry of the shared network store; payload kind is not fixed."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    payload: Any = None
    owner_pub_key: bytes | None = None


def interpret_payload(payload: Any) -> ArbitratorRecord | None:
    """Interpret a storage payload as an arbitrator listing.

    Returns None for any payload that is not an arbitrator record, including
    mappings that fail validation.
    """
    if isinstance(payload, ArbitratorRecord):
        return payload
    if isinstance(payload, Mapping):
        try:
            return ArbitratorRecord.model_validate(payload)
        except ValidationError:
            return None
    return None


# ---------------------------------------------------------------------------
# Filter document
# ---------------------------------------------------------------------------


class FilterDocument(BaseModel):
    """Ban lists distributed by the filter authority.

    Only `arbitrators` is consumed here; the other lists belong to the
    offer book and peer manager.
    """

    arbitrators: list[str] = Field(default_factory=list)
    banned_node_addresses: list[str] = Field(default_factory=list)
    banned_offer_ids: list[str] = Field(default_factory=list)

    def banned_arbitrator_hostnames(self) -> list[str]:
        return list(self.arbitrators)


# ---------------------------------------------------------------------------
# Trade history
# ---------------------------------------------------------------------------


class TradeRecord(BaseModel):
    """Historical trade entry from the trade statistics store."""

    model_config = ConfigDict(frozen=True)

    trade_id: str
    trade_date: datetime
    extra_data: dict[str, str] | None = None

    @field_validator("trade_date")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        """Naive trade dates are taken as UTC."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def arbitrator_hostname_fragment(self) -> str | None:
        if not self.extra_data:
            return None
        return self.extra_data.get(ARBITRATOR_ADDRESS)

    @classmethod
    def create(
        cls,
        trade_id: str,
        trade_date: datetime,
        arbitrator_address: NodeAddress | None = None,
        extra_data: dict[str, str] | None = None,
    ) -> TradeRecord:
        """Record a trade, keeping only a short prefix of the arbitrator host."""
        data = dict(extra_data or {})
        if arbitrator_address is not None:
            data[ARBITRATOR_ADDRESS] = arbitrator_address.host_name[:ARBITRATOR_FRAGMENT_LENGTH]
        return cls(trade_id=trade_id, trade_date=trade_date, extra_data=data or None)


__all__ = [
    "ARBITRATOR_ADDRESS",
    "ARBITRATOR_FRAGMENT_LENGTH",
    "ArbitratorRecord",
    "FilterDocument",
    "NodeAddress",
    "StorageEntry",
    "TradeRecord",
    "interpret_payload",
]
