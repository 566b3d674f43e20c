"""Network settings injected into the arbitrator service.

Resolution order: defaults < CLI arguments < environment variables
(``TRADENET_ARBITRATION__*``), matching the neuron config layering.
"""

from __future__ import annotations

import argparse
import os
from collections.abc import Mapping
from enum import Enum
from typing import Any

import bittensor as bt
from pydantic import BaseModel, Field, field_validator


DEV_PRIVILEGE_PUB_KEY = "027a381b5333a56e1cc3d90d3a7d07f26509adf7029ed06fc997c656621f8da1ee"
DEFAULT_HISTORY_WINDOW = 100

ENV_PREFIX = "TRADENET_ARBITRATION__"


class NetworkKind(str, Enum):
    """Base network the node runs against."""

    MAINNET = "mainnet"
    TESTNET = "testnet"
    REGTEST = "regtest"

    @property
    def is_mainnet(self) -> bool:
        return self is NetworkKind.MAINNET


class ArbitrationSettings(BaseModel):
    """Settings for directory building, selection and publishing."""

    network: NetworkKind = NetworkKind.MAINNET
    dev_privilege_pub_key: str = DEV_PRIVILEGE_PUB_KEY
    history_window: int = Field(default=DEFAULT_HISTORY_WINDOW, gt=0)

    @field_validator("dev_privilege_pub_key")
    @classmethod
    def _normalize_key(cls, value: str) -> str:
        value = value.strip().lower()
        bytes.fromhex(value)
        return value


def load_settings(
    env: Mapping[str, str] | None = None,
    base: ArbitrationSettings | None = None,
) -> ArbitrationSettings:
    """Apply ``TRADENET_ARBITRATION__*`` environment overrides on top of base."""
    env = os.environ if env is None else env
    values: dict[str, Any] = (base or ArbitrationSettings()).model_dump()

    network = env.get(f"{ENV_PREFIX}NETWORK")
    if network:
        values["network"] = network.lower()
    dev_key = env.get(f"{ENV_PREFIX}DEV_PRIVILEGE_PUB_KEY")
    if dev_key:
        values["dev_privilege_pub_key"] = dev_key
    window = env.get(f"{ENV_PREFIX}HISTORY_WINDOW")
    if window:
        values["history_window"] = window

    settings = ArbitrationSettings(**values)
    bt.logging.debug({"arbitration_config": settings.model_dump(mode="json")})
    return settings


def add_args(parser: argparse.ArgumentParser) -> None:
    """Adds arbitration arguments to the parser."""

    parser.add_argument(
        "--arbitration.network",
        type=str,
        choices=[n.value for n in NetworkKind],
        help="Base network; privileged dev listings are refused on mainnet.",
        default=NetworkKind.MAINNET.value,
    )

    parser.add_argument(
        "--arbitration.dev_privilege_pub_key",
        type=str,
        help="Hex registration key reserved for development arbitrators.",
        default=DEV_PRIVILEGE_PUB_KEY,
    )

    parser.add_argument(
        "--arbitration.history_window",
        type=int,
        help="Number of most recent trades sampled for least-used selection.",
        default=DEFAULT_HISTORY_WINDOW,
    )


def settings_from_args(
    args: argparse.Namespace,
    env: Mapping[str, str] | None = None,
) -> ArbitrationSettings:
    """Build settings from parsed CLI args; environment variables win."""
    base = ArbitrationSettings(
        network=getattr(args, "arbitration.network", NetworkKind.MAINNET.value),
        dev_privilege_pub_key=getattr(args, "arbitration.dev_privilege_pub_key", DEV_PRIVILEGE_PUB_KEY),
        history_window=getattr(args, "arbitration.history_window", DEFAULT_HISTORY_WINDOW),
    )
    return load_settings(env=env, base=base)


__all__ = [
    "ArbitrationSettings",
    "DEFAULT_HISTORY_WINDOW",
    "DEV_PRIVILEGE_PUB_KEY",
    "NetworkKind",
    "add_args",
    "load_settings",
    "settings_from_args",
]
