"""Arbitrator service: directory queries, selection and listing publication.

Publishing is delegated to the network entry store. The only rule added on
top is that a listing signed with the development privilege key is never
accepted on mainnet.
"""

from __future__ import annotations

from typing import Callable

import bittensor as bt

from .config import ArbitrationSettings
from .directory import EligibleDirectory, build_directory
from .errors import PrivilegedKeyError
from .models import ArbitratorRecord
from .selection import pick_arbitrator
from .store.interface import (
    EntryStoreListener,
    FilterSource,
    RawEntryStore,
    TradeHistorySource,
)

ResultHandler = Callable[[], None]
ErrorMessageHandler = Callable[[str], None]


def check_publishable(record: ArbitratorRecord, settings: ArbitrationSettings) -> None:
    """Refuse development-privileged listings on mainnet.

    Raises:
        PrivilegedKeyError: The record carries the dev privilege key and the
            configured network is mainnet.
    """
    if settings.network.is_mainnet and record.registration_key_hex == settings.dev_privilege_pub_key:
        raise PrivilegedKeyError(settings.network.value)


class ArbitratorService:
    """Reads the eligible directory and publishes arbitrator listings."""

    def __init__(
        self,
        store: RawEntryStore,
        filter_source: FilterSource,
        settings: ArbitrationSettings | None = None,
    ):
        self.store = store
        self.filter_source = filter_source
        self.settings = settings or ArbitrationSettings()

    def add_listener(self, listener: EntryStoreListener) -> None:
        """Register for store change notifications."""
        self.store.add_listener(listener)

    # -- Queries --

    def get_arbitrators(self) -> EligibleDirectory:
        """Fresh directory from the current store snapshot and filter."""
        return build_directory(self.store.snapshot(), self.filter_source.current_filter())

    def pick_arbitrator(self, history: TradeHistorySource) -> ArbitratorRecord:
        """Least used eligible arbitrator over the recent trade window."""
        window = self.settings.history_window
        return pick_arbitrator(
            self.get_arbitrators(),
            history.recent_trades(window),
            limit=window,
        )

    # -- Publication --

    def add_arbitrator(
        self,
        record: ArbitratorRecord,
        result_handler: ResultHandler,
        error_message_handler: ErrorMessageHandler,
    ) -> None:
        """Publish a listing; outcome is reported through the handlers."""
        address = record.node_address.full_address
        bt.logging.debug({"arbitrator_service": {"event": "add_arbitrator", "address": address}})

        try:
            check_publishable(record, self.settings)
        except PrivilegedKeyError as e:
            bt.logging.error({"arbitrator_service": {"event": "dev_arbitrator_on_mainnet", "address": address}})
            error_message_handler(f"Add arbitrator failed. {e}")
            return

        try:
            added = self.store.add_protected_entry(record, broadcast=True)
        except Exception as e:
            bt.logging.warning({"arbitrator_service": {"event": "store_add_error", "error": str(e)}})
            added = False

        if added:
            bt.logging.trace({"arbitrator_service": {"event": "arbitrator_added", "address": address}})
            result_handler()
        else:
            error_message_handler("Add arbitrator failed")

    def remove_arbitrator(
        self,
        record: ArbitratorRecord,
        result_handler: ResultHandler,
        error_message_handler: ErrorMessageHandler,
    ) -> None:
        """Retract a listing; outcome is reported through the handlers."""
        address = record.node_address.full_address
        bt.logging.debug({"arbitrator_service": {"event": "remove_arbitrator", "address": address}})

        try:
            removed = self.store.remove_entry(record, broadcast=True)
        except Exception as e:
            bt.logging.warning({"arbitrator_service": {"event": "store_remove_error", "error": str(e)}})
            removed = False

        if removed:
            bt.logging.trace({"arbitrator_service": {"event": "arbitrator_removed", "address": address}})
            result_handler()
        else:
            error_message_handler("Remove arbitrator failed")


__all__ = [
    "ArbitratorService",
    "ErrorMessageHandler",
    "ResultHandler",
    "check_publishable",
]
