"""In-memory collaborator implementations.

Used by tests and by embedders that feed the directory from their own
replication layer. The entry store is keyed by payload identity so the same
listing published twice replaces itself.
"""

from __future__ import annotations

import threading
from collections.abc import Hashable, Iterable
from typing import Any

import bittensor as bt

from tradenet.arbitration.models import (
    ArbitratorRecord,
    FilterDocument,
    StorageEntry,
    TradeRecord,
)

from .interface import EntryStoreListener


def _payload_key(payload: Any) -> Hashable:
    """Identity of a payload inside the store."""
    if isinstance(payload, ArbitratorRecord):
        return ("arbitrator", payload.node_address, payload.registration_pub_key)
    try:
        hash(payload)
    except TypeError:
        return ("object", id(payload))
    return ("value", payload)


class InMemoryEntryStore:
    """Thread-safe RawEntryStore with listener notification."""

    def __init__(self, entries: Iterable[StorageEntry] = ()):
        self._lock = threading.Lock()
        self._entries: dict[Hashable, StorageEntry] = {}
        self._listeners: list[EntryStoreListener] = []
        for entry in entries:
            self._entries[_payload_key(entry.payload)] = entry

    def snapshot(self) -> list[StorageEntry]:
        with self._lock:
            return list(self._entries.values())

    def add_listener(self, listener: EntryStoreListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def add_protected_entry(self, payload: Any, broadcast: bool = True) -> bool:
        entry = StorageEntry(payload=payload)
        with self._lock:
            self._entries[_payload_key(payload)] = entry
            listeners = list(self._listeners)
        bt.logging.debug({"entry_store": {"event": "added", "broadcast": broadcast}})
        self._notify(listeners, "on_added", [entry])
        return True

    def remove_entry(self, payload: Any, broadcast: bool = True) -> bool:
        with self._lock:
            entry = self._entries.pop(_payload_key(payload), None)
            listeners = list(self._listeners)
        if entry is None:
            return False
        bt.logging.debug({"entry_store": {"event": "removed", "broadcast": broadcast}})
        self._notify(listeners, "on_removed", [entry])
        return True

    @staticmethod
    def _notify(listeners: list[EntryStoreListener], method: str, entries: list[StorageEntry]) -> None:
        """Listener failures are isolated - one crashing listener doesn't block others."""
        for listener in listeners:
            try:
                getattr(listener, method)(entries)
            except Exception as e:
                bt.logging.warning({"entry_store_listener_error": {"method": method, "error": str(e)}})


class StaticFilterSource:
    """FilterSource holding a replaceable filter document."""

    def __init__(self, document: FilterDocument | None = None):
        self._document = document

    def current_filter(self) -> FilterDocument | None:
        return self._document

    def update(self, document: FilterDocument | None) -> None:
        self._document = document


class InMemoryTradeStatistics:
    """TradeHistorySource over a list of trade records."""

    def __init__(self, trades: Iterable[TradeRecord] = ()):
        self._lock = threading.Lock()
        self._trades: list[TradeRecord] = list(trades)

    def add(self, trade: TradeRecord) -> None:
        with self._lock:
            self._trades.append(trade)

    def recent_trades(self, limit: int) -> list[TradeRecord]:
        with self._lock:
            trades = list(self._trades)
        trades.sort(key=lambda t: t.trade_date, reverse=True)
        return trades[:limit]


__all__ = ["InMemoryEntryStore", "InMemoryTradeStatistics", "StaticFilterSource"]
