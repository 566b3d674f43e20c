"""Exceptions surfaced by arbitrator selection and publishing.

Malformed payloads and duplicate addresses are absorbed while building the
directory and have no exception type.
"""

from __future__ import annotations


class ArbitrationError(Exception):
    """Base class for arbitration errors."""


class NoEligibleArbitratorError(ArbitrationError):
    """Selection was requested with no eligible arbitrator."""

    def __init__(self, message: str = "no eligible arbitrator available"):
        super().__init__(message)


class SelectionInvariantError(ArbitrationError):
    """The selected hostname has no record in the directory."""

    def __init__(self, host_name: str):
        self.host_name = host_name
        super().__init__(f"selected arbitrator {host_name!r} is not in the directory")


class PrivilegedKeyError(ArbitrationError):
    """A development-privileged listing was published on a production network."""

    def __init__(self, network: str):
        self.network = network
        super().__init__(f"Attempt to publish dev arbitrator on {network}.")


__all__ = [
    "ArbitrationError",
    "NoEligibleArbitratorError",
    "PrivilegedKeyError",
    "SelectionInvariantError",
]
