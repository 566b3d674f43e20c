"""Least-used arbitrator selection.

Tallies how often each eligible arbitrator appears in the most recent trade
history and picks the least used one. Ties are broken by hostname so the
pick is reproducible.

Every eligible hostname is seeded at 1, so arbitrators with no history tie
with each other and remain selectable. History fragments are compared to
hostnames by exact string equality.
"""

from __future__ import annotations

from collections.abc import Iterable

import bittensor as bt

from .directory import EligibleDirectory
from .errors import NoEligibleArbitratorError, SelectionInvariantError
from .models import ArbitratorRecord, TradeRecord

HISTORY_WINDOW = 100


def last_used_fragments(
    trades: Iterable[TradeRecord],
    limit: int = HISTORY_WINDOW,
) -> list[str]:
    """Arbitrator fragments of the `limit` most recent trades, newest first.

    The sort is stable so identical data always yields the same window.
    Trades without a recorded arbitrator are dropped after windowing.
    """
    window = sorted(trades, key=lambda t: t.trade_date, reverse=True)[:limit]
    fragments: list[str] = []
    for trade in window:
        fragment = trade.arbitrator_hostname_fragment()
        if fragment is not None:
            fragments.append(fragment)
    return fragments


def tally_usage(fragments: Iterable[str], eligible_hostnames: Iterable[str]) -> dict[str, int]:
    counts = {host: 1 for host in eligible_hostnames}
    for fragment in fragments:
        if fragment in counts:
            counts[fragment] += 1
    return counts


def rank(tally: dict[str, int]) -> list[str]:
    """Hostnames ordered by (count, hostname) ascending."""
    return [host for host, _ in sorted(tally.items(), key=lambda kv: (kv[1], kv[0]))]


def select_least_used(fragments: Iterable[str], eligible_hostnames: Iterable[str]) -> str:
    """Pick the least used eligible hostname.

    Raises:
        NoEligibleArbitratorError: eligible_hostnames is empty.
    """
    tally = tally_usage(fragments, eligible_hostnames)
    if not tally:
        raise NoEligibleArbitratorError()
    ranked = rank(tally)
    bt.logging.debug({
        "arbitrator_selection": {
            "selected": ranked[0],
            "count": tally[ranked[0]],
            "candidates": len(ranked),
        }
    })
    return ranked[0]


def pick_arbitrator(
    directory: EligibleDirectory,
    trades: Iterable[TradeRecord],
    limit: int = HISTORY_WINDOW,
) -> ArbitratorRecord:
    """Select the least used arbitrator record from the directory.

    Args:
        directory: Current eligible directory.
        trades: Trade history; only the `limit` most recent are sampled.
        limit: History window size.

    Returns:
        Any record whose host matches the selected hostname.

    Raises:
        NoEligibleArbitratorError: The directory is empty.
        SelectionInvariantError: The selected host has no record (a bug).
    """
    fragments = last_used_fragments(trades, limit)
    selected = select_least_used(fragments, directory.hostnames())

    for record in directory.values():
        if record.host_name == selected:
            return record

    bt.logging.error({"arbitrator_selection": {"event": "invariant_violated", "selected": selected}})
    raise SelectionInvariantError(selected)


__all__ = [
    "HISTORY_WINDOW",
    "last_used_fragments",
    "pick_arbitrator",
    "rank",
    "select_least_used",
    "tally_usage",
]
