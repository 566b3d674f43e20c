from __future__ import annotations

from .interface import EntryStoreListener, FilterSource, RawEntryStore, TradeHistorySource
from .memory import InMemoryEntryStore, InMemoryTradeStatistics, StaticFilterSource

__all__ = [
    "EntryStoreListener",
    "FilterSource",
    "InMemoryEntryStore",
    "InMemoryTradeStatistics",
    "RawEntryStore",
    "StaticFilterSource",
    "TradeHistorySource",
]
