"""Arbitrator directory and least-used selection.

The arbitration module turns the network entry store into a directory of
eligible arbitrators and picks one arbitrator per trade:

- Directory: signed listings minus non-arbitrator payloads, banned hosts
  and duplicate addresses
- Selection: least represented arbitrator in the last 100 trades, ties
  broken by hostname
"""

from .config import ArbitrationSettings, NetworkKind, load_settings
from .directory import EligibleDirectory, build_directory
from .errors import (
    ArbitrationError,
    NoEligibleArbitratorError,
    PrivilegedKeyError,
    SelectionInvariantError,
)
from .models import (
    ArbitratorRecord,
    FilterDocument,
    NodeAddress,
    StorageEntry,
    TradeRecord,
    interpret_payload,
)
from .selection import HISTORY_WINDOW, pick_arbitrator, select_least_used
from .service import ArbitratorService, check_publishable

__all__ = [
    "HISTORY_WINDOW",
    "ArbitrationError",
    "ArbitrationSettings",
    "ArbitratorRecord",
    "ArbitratorService",
    "EligibleDirectory",
    "FilterDocument",
    "NetworkKind",
    "NoEligibleArbitratorError",
    "NodeAddress",
    "PrivilegedKeyError",
    "SelectionInvariantError",
    "StorageEntry",
    "TradeRecord",
    "build_directory",
    "check_publishable",
    "interpret_payload",
    "load_settings",
    "pick_arbitrator",
    "select_least_used",
]
