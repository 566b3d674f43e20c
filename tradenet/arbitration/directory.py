"""Eligible arbitrator directory.

Materializes the network entry store into an address-indexed set of
arbitrators: payloads that are not arbitrator listings are skipped, listings
on banned hosts are dropped, and duplicate addresses keep the first record.

Pure computation over an already-fetched snapshot; fetch failures belong to
the store and filter collaborators.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

import bittensor as bt

from .models import (
    ArbitratorRecord,
    FilterDocument,
    NodeAddress,
    StorageEntry,
    interpret_payload,
)


class EligibleDirectory(Mapping[NodeAddress, ArbitratorRecord]):
    """Read-only snapshot mapping address -> arbitrator record."""

    def __init__(self, records: Mapping[NodeAddress, ArbitratorRecord] | None = None):
        self._records = MappingProxyType(dict(records or {}))

    def __getitem__(self, address: NodeAddress) -> ArbitratorRecord:
        return self._records[address]

    def __iter__(self) -> Iterator[NodeAddress]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"EligibleDirectory({[str(a) for a in self._records]})"

    def hostnames(self) -> set[str]:
        return {address.host_name for address in self._records}

    def records(self) -> list[ArbitratorRecord]:
        return list(self._records.values())


def banned_hostnames(filter_document: FilterDocument | None) -> set[str]:
    """Banned arbitrator hosts from the current filter; no filter bans nothing."""
    if filter_document is None:
        return set()
    banned = set(filter_document.banned_arbitrator_hostnames())
    if banned:
        bt.logging.warning({"arbitrator_directory": {"banned_arbitrators": sorted(banned)}})
    return banned


def is_banned(address: NodeAddress, banned: Iterable[str]) -> bool:
    return address.host_name in banned


def allowed_arbitrators(
    entries: Iterable[StorageEntry],
    banned: set[str],
) -> list[ArbitratorRecord]:
    """Arbitrator listings in snapshot order, minus banned hosts.

    The store is shared with other payload kinds, so uninterpretable
    payloads are skipped without error.
    """
    result: list[ArbitratorRecord] = []
    skipped = 0
    for entry in entries:
        record = interpret_payload(entry.payload)
        if record is None:
            skipped += 1
            continue
        if is_banned(record.node_address, banned):
            continue
        result.append(record)

    if skipped:
        bt.logging.debug({"arbitrator_directory": {"non_arbitrator_entries": skipped}})
    return result


def index_by_address(records: Iterable[ArbitratorRecord]) -> dict[NodeAddress, ArbitratorRecord]:
    """Index records by address; on collision the first record is kept."""
    result: dict[NodeAddress, ArbitratorRecord] = {}
    for record in records:
        address = record.node_address
        if address in result:
            bt.logging.warning({
                "arbitrator_directory": {
                    "event": "duplicate_address",
                    "address": address.full_address,
                    "message": "an arbitrator is already registered with the same address",
                }
            })
            continue
        result[address] = record
    return result


def build_directory(
    entries: Iterable[StorageEntry],
    filter_document: FilterDocument | None = None,
) -> EligibleDirectory:
    """Build the eligible directory from a store snapshot and filter.

    Steps:
    1. Extract banned hostnames from the filter
    2. Interpret payloads as arbitrator listings, skipping other kinds
    3. Drop listings whose host is banned
    4. Index by address, first record wins

    Returns:
        A snapshot; callers re-invoke to observe store changes.
    """
    banned = banned_hostnames(filter_document)
    arbitrators = allowed_arbitrators(entries, banned)
    return EligibleDirectory(index_by_address(arbitrators))


__all__ = [
    "EligibleDirectory",
    "allowed_arbitrators",
    "banned_hostnames",
    "build_directory",
    "index_by_address",
    "is_banned",
]
