"""
Network configuration for vault-ops.

Contains RPC endpoints, chain IDs and explorers for the supported networks,
plus fork resolution for the local development node.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any
from collections.abc import Mapping

from vault_ops.errors import ConfigurationError

logger = logging.getLogger(__name__)


# Signing-source descriptors
REMOTE_ACCOUNTS = "remote"        # accounts unlocked on the node itself
PERSISTED_ACCOUNTS = "persisted"  # deployer key from the credential store

LOCAL_NETWORK = "localhost"
DEFAULT_NETWORK = LOCAL_NETWORK


# =============================================================================
# NETWORK TABLE
# =============================================================================

NETWORKS: dict[str, dict[str, Any]] = {
    "localhost": {
        "url": "http://127.0.0.1:8545",
        "timeout": 300,
        "accounts": REMOTE_ACCOUNTS,
        "tags": ["dev"],
    },
    "bsc": {
        "url": "https://bsc-dataseed.binance.org/",
        "chain_id": 56,
        "accounts": PERSISTED_ACCOUNTS,
        "explorer": "https://bscscan.com",
    },
    "heco": {
        "url": "https://http-mainnet.hecochain.com",
        "chain_id": 128,
        "accounts": PERSISTED_ACCOUNTS,
        "explorer": "https://hecoinfo.com",
    },
    "avax": {
        "url": "https://api.avax.network/ext/bc/C/rpc",
        "chain_id": 43114,
        "accounts": PERSISTED_ACCOUNTS,
        "explorer": "https://snowtrace.io",
    },
    "polygon": {
        "url": "https://polygon-rpc.com",
        "chain_id": 137,
        "accounts": PERSISTED_ACCOUNTS,
        "explorer": "https://polygonscan.com",
    },
    "fantom": {
        "url": "https://rpc.ftm.tools",
        "chain_id": 250,
        "accounts": PERSISTED_ACCOUNTS,
        "explorer": "https://ftmscan.com",
    },
    "testnet": {
        "url": "https://data-seed-prebsc-1-s1.binance.org:8545/",
        "chain_id": 97,
        "accounts": PERSISTED_ACCOUNTS,
        "explorer": "https://testnet.bscscan.com",
    },
}


# =============================================================================
# PROFILES
# =============================================================================

@dataclass(frozen=True)
class NetworkProfile:
    name: str
    url: str
    chain_id: int | None = None
    timeout: float | None = None
    # tuple of explicit keys, REMOTE_ACCOUNTS or PERSISTED_ACCOUNTS
    accounts: tuple[str, ...] | str = PERSISTED_ACCOUNTS
    explorer_url: str | None = None
    tags: tuple[str, ...] = ()

    @property
    def is_local(self) -> bool:
        return "dev" in self.tags

    def require_endpoint(self) -> NetworkProfile:
        """Return self, or raise ConfigurationError if the profile has no endpoint."""
        if not self.url or not self.url.strip():
            raise ConfigurationError(f"Network '{self.name}' has no RPC endpoint configured")
        return self


@dataclass(frozen=True)
class NetworkConfig:
    """Read-only network table plus the default network name."""

    profiles: Mapping[str, NetworkProfile]
    default: str | None = DEFAULT_NETWORK

    def __post_init__(self):
        object.__setattr__(self, "profiles", MappingProxyType(dict(self.profiles)))

    def __contains__(self, name: object) -> bool:
        return name in self.profiles

    def names(self) -> list[str]:
        return list(self.profiles.keys())

    def profile(self, name: str | None = None) -> NetworkProfile:
        """Get the profile for a network.

        Unknown names fall back to the default network with a warning.

        Raises:
            ConfigurationError: If neither the name nor the default resolves.
        """
        if name is None:
            name = self.default
        if name in self.profiles:
            return self.profiles[name]
        if self.default in self.profiles:
            logger.warning("Unknown network '%s'; using default '%s'", name, self.default)
            return self.profiles[self.default]
        raise ConfigurationError(f"Unsupported network: {name}. Supported: {self.names()}")

    def with_profile(self, profile: NetworkProfile) -> NetworkConfig:
        profiles = dict(self.profiles)
        profiles[profile.name] = profile
        return NetworkConfig(profiles=profiles, default=self.default)


def _profile_from_entry(name: str, entry: dict[str, Any]) -> NetworkProfile:
    accounts = entry.get("accounts", PERSISTED_ACCOUNTS)
    if isinstance(accounts, (list, tuple)):
        accounts = tuple(accounts)
    return NetworkProfile(
        name=name,
        url=entry.get("url", ""),
        chain_id=entry.get("chain_id"),
        timeout=entry.get("timeout"),
        accounts=accounts,
        explorer_url=entry.get("explorer"),
        tags=tuple(entry.get("tags", ())),
    )


def build_network_config(
    table: dict[str, dict[str, Any]] | None = None,
    default: str | None = None,
) -> NetworkConfig:
    """Build the immutable network configuration.

    Args:
        table: Network table; defaults to NETWORKS.
        default: Default network name. Falls back to the VAULT_OPS_NETWORK
                 environment variable, then 'localhost'.

    The RPC_URL override is applied separately, once the selected network
    is known (see :func:`with_rpc_override`).
    """
    table = NETWORKS if table is None else table
    if default is None:
        default = os.getenv("VAULT_OPS_NETWORK", DEFAULT_NETWORK).lower()

    profiles = {name: _profile_from_entry(name, entry) for name, entry in table.items()}

    if default not in profiles:
        logger.warning("Default network '%s' is not configured", default)

    return NetworkConfig(profiles=profiles, default=default)


def with_rpc_override(config: NetworkConfig, network: str) -> NetworkConfig:
    """Point ``network`` at the RPC_URL endpoint when that variable is set."""
    env_rpc = os.getenv("RPC_URL")
    if not env_rpc or network not in config.profiles:
        return config
    logger.info("Using RPC_URL for network '%s'", network)
    return config.with_profile(replace(config.profiles[network], url=env_rpc))


# =============================================================================
# FORK RESOLUTION
# =============================================================================

@dataclass(frozen=True)
class ForkPlan:
    config: NetworkConfig
    target: str
    fork_url: str | None = None
    fork_network: str | None = None
    no_reset: bool = False
    write: bool = True
    chain_id: int | None = None

    @property
    def forking(self) -> bool:
        return self.fork_url is not None


def resolve_fork(
    config: NetworkConfig,
    target: str = LOCAL_NETWORK,
    fork_from: str | None = None,
    *,
    no_reset: bool = False,
    write: bool = True,
) -> ForkPlan:
    """Resolve the effective network context for a local node run.

    If ``fork_from`` names a configured network, the plan forks from its
    endpoint, forces ``no_reset=True`` and ``write=False``, and copies its
    chain ID (when declared) onto the local profiles. Otherwise the
    invocation is returned untouched.
    """
    local_profile = config.profiles.get(target)
    base_chain_id = local_profile.chain_id if local_profile else None

    source = config.profiles.get(fork_from) if fork_from else None
    if source is None:
        if fork_from:
            logger.warning("Fork source '%s' is not a configured network; not forking", fork_from)
        return ForkPlan(
            config=config,
            target=target,
            no_reset=no_reset,
            write=write,
            chain_id=base_chain_id,
        )

    effective = config
    chain_id = base_chain_id
    targets = tuple(dict.fromkeys((target, LOCAL_NETWORK)))
    if source.chain_id is not None:
        chain_id = source.chain_id
        for name in targets:
            if name in effective.profiles:
                effective = effective.with_profile(replace(effective.profiles[name], chain_id=chain_id))

    return ForkPlan(
        config=effective,
        target=target,
        fork_url=source.url,
        fork_network=source.name,
        no_reset=True,
        write=False,
        chain_id=chain_id,
    )
