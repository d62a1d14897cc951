#!/usr/bin/env python3
from __future__ import annotations

"""
Deployment registry lookup.

Maps logical contract names (e.g. "foo-vault") to deployed addresses per
network, reading the hardhat-deploy layout:

    deployments/<network>/<name>.json  ->  {"address": "0x...", "abi": [...], "transactionHash": "0x..."}

When the local node forks a live network, start-network leaves a ``.fork``
marker naming the source in the local network's directory, and lookups
against the local network read that network's records instead.
VAULT_OPS_DEPLOY_FORK overrides the marker.
"""

import json
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from eth_utils import to_checksum_address
from web3 import Web3
from web3.contract import Contract

from vault_ops.config.network import LOCAL_NETWORK
from vault_ops.errors import DeploymentNotFoundError, UnknownActionError

logger = logging.getLogger(__name__)

DEFAULT_DEPLOYMENTS_DIR = Path("deployments")
FORK_ENV = "VAULT_OPS_DEPLOY_FORK"
# written by start-network into deployments/<local network>/
FORK_MARKER = ".fork"


def _is_hex_address(s: str) -> bool:
    return bool(re.fullmatch(r"0x[a-fA-F0-9]{40}", s or ""))


@dataclass(frozen=True)
class Deployment:
    name: str
    address: str
    abi: list[dict[str, Any]] = field(default_factory=list)
    transaction_hash: str | None = None


def fork_marker_path(root: Path, network: str = LOCAL_NETWORK) -> Path:
    return root / network / FORK_MARKER


def write_fork_marker(root: Path, network: str, fork_network: str | None) -> None:
    """Record (or clear, when ``fork_network`` is None) the fork source of a local network."""
    path = fork_marker_path(root, network)
    if fork_network is None:
        path.unlink(missing_ok=True)
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(fork_network + "\n")


def read_fork_marker(root: Path, network: str = LOCAL_NETWORK) -> str | None:
    try:
        value = fork_marker_path(root, network).read_text().strip()
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.warning("Could not read fork marker for %s: %s", network, e)
        return None
    return value or None


def effective_network(network: str, local: bool = False, root: Path | str = DEFAULT_DEPLOYMENTS_DIR) -> str:
    """Network whose records back ``network``; the fork source for local runs.

    VAULT_OPS_DEPLOY_FORK wins over the marker left by ``start-network``.
    """
    if not (local or network == LOCAL_NETWORK):
        return network
    fork = os.getenv(FORK_ENV) or read_fork_marker(Path(root), network)
    return fork or network


class DeploymentRegistry:
    """Read-only view of deployment records for one network."""

    def __init__(self, root: Path | str = DEFAULT_DEPLOYMENTS_DIR, network: str = LOCAL_NETWORK, *, local: bool = False):
        self.root = Path(root)
        self.network = effective_network(network, local, self.root)

    @property
    def network_dir(self) -> Path:
        return self.root / self.network

    def names(self) -> list[str]:
        if not self.network_dir.is_dir():
            return []
        return sorted(p.stem for p in self.network_dir.glob("*.json"))

    def get(self, name: str) -> Deployment:
        """Resolve a logical name to its deployment record.

        Raises:
            DeploymentNotFoundError: If the record is missing or malformed.
        """
        path = self.network_dir / f"{name}.json"
        try:
            with open(path) as f:
                data = json.load(f)
        except FileNotFoundError:
            raise DeploymentNotFoundError(name, self.network) from None
        except (OSError, ValueError) as e:
            raise DeploymentNotFoundError(name, self.network, f"unreadable record {path}: {e}") from e

        address = data.get("address") if isinstance(data, dict) else None
        if not isinstance(address, str) or not _is_hex_address(address):
            raise DeploymentNotFoundError(name, self.network, f"record {path} has no valid address")

        abi = data.get("abi")
        tx = data.get("transactionHash")
        return Deployment(
            name=name,
            address=to_checksum_address(address),
            abi=abi if isinstance(abi, list) else [],
            transaction_hash=tx if isinstance(tx, str) else None,
        )


class ContractHandle:
    """A deployed contract plus the administrative actions callable on it."""

    def __init__(self, name: str, address: str, contract: Contract):
        self.name = name
        self.address = address
        self.contract = contract

    def __repr__(self) -> str:
        return f"ContractHandle(name={self.name!r}, address={self.address!r})"

    def has_action(self, action: str) -> bool:
        return any(
            item.get("type") == "function" and item.get("name") == action
            for item in (self.contract.abi or [])
        )

    def function(self, action: str, *args: Any):
        """Bound contract function for ``action``.

        Raises:
            UnknownActionError: If the ABI has no function of that name.
        """
        if not self.has_action(action):
            raise UnknownActionError(f"{self.name} at {self.address} has no '{action}' action")
        return getattr(self.contract.functions, action)(*args)


def contract_handle(w3: Web3, address: str, abi: list[dict[str, Any]], name: str | None = None) -> ContractHandle:
    checksum = to_checksum_address(address)
    contract = w3.eth.contract(address=checksum, abi=abi)
    return ContractHandle(name or checksum, checksum, contract)


def handle_for_deployment(w3: Web3, deployment: Deployment, abi: list[dict[str, Any]] | None = None) -> ContractHandle:
    """Handle for a deployment record; ``abi`` overrides the recorded ABI."""
    return contract_handle(w3, deployment.address, abi or deployment.abi, deployment.name)
