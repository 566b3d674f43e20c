"""Collaborator protocols consumed by the arbitrator directory.

Implementations: the in-memory stores in ``memory`` (tests, embedding),
the P2P data store and trade statistics manager of a full node.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from tradenet.arbitration.models import FilterDocument, StorageEntry, TradeRecord


@runtime_checkable
class EntryStoreListener(Protocol):
    """Change notifications from the network entry store."""

    def on_added(self, entries: Sequence[StorageEntry]) -> None:
        ...

    def on_removed(self, entries: Sequence[StorageEntry]) -> None:
        ...


@runtime_checkable
class RawEntryStore(Protocol):
    """Network-replicated store of signed entries."""

    def snapshot(self) -> list[StorageEntry]:
        """Return an immutable copy of the current entries."""
        ...

    def add_protected_entry(self, payload: Any, broadcast: bool = True) -> bool:
        """Publish a payload. Returns True on success."""
        ...

    def remove_entry(self, payload: Any, broadcast: bool = True) -> bool:
        """Retract a payload. Returns True on success."""
        ...

    def add_listener(self, listener: EntryStoreListener) -> None:
        ...


@runtime_checkable
class FilterSource(Protocol):
    """Source of the current filter document."""

    def current_filter(self) -> FilterDocument | None:
        ...


@runtime_checkable
class TradeHistorySource(Protocol):
    """Read access to trade statistics."""

    def recent_trades(self, limit: int) -> list[TradeRecord]:
        """Most recent trades by trade date, newest first."""
        ...


__all__ = [
    "EntryStoreListener",
    "FilterSource",
    "RawEntryStore",
    "TradeHistorySource",
]
