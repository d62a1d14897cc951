"""
Process-wide runtime configuration.

Built once by ``load_runtime_config`` before any command runs and treated
as read-only afterwards.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from vault_ops.config.accounts import ADDRESS_BOOK_FILENAME, NamedAccounts, load_address_book
from vault_ops.config.network import NetworkConfig, NetworkProfile, build_network_config, with_rpc_override
from vault_ops.helpers.deployments import DEFAULT_DEPLOYMENTS_DIR
from vault_ops.setup.credentials import DEFAULT_CONFIG_DIR, CredentialStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuntimeConfig:
    networks: NetworkConfig
    named_accounts: NamedAccounts
    network: str
    config_dir: Path = DEFAULT_CONFIG_DIR
    deployments_dir: Path = DEFAULT_DEPLOYMENTS_DIR

    @property
    def profile(self) -> NetworkProfile:
        return self.networks.profile(self.network)

    @property
    def credentials(self) -> CredentialStore:
        return CredentialStore(self.config_dir)


def load_runtime_config(
    network: str | None = None,
    config_dir: Path | str | None = None,
    deployments_dir: Path | str | None = None,
    networks: NetworkConfig | None = None,
) -> RuntimeConfig:
    """Build the runtime configuration.

    Args:
        network: Selected network; VAULT_OPS_NETWORK or 'localhost' when None.
        config_dir: Credential/address-book directory (default .config).
        deployments_dir: Deployment records root (default deployments).
        networks: Pre-built network table, mainly for tests.

    An unknown network is reported and replaced by the default network.
    """
    networks = networks or build_network_config()
    selected = (network or networks.default or "").lower()
    if selected not in networks:
        fallback = networks.profile(selected).name
        selected = fallback
    networks = with_rpc_override(networks, selected)

    config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
    book_path = Path(os.getenv("VAULT_OPS_ADDRESS_BOOK") or config_dir / ADDRESS_BOOK_FILENAME)
    named_accounts = NamedAccounts(address_book=load_address_book(book_path))

    return RuntimeConfig(
        networks=networks,
        named_accounts=named_accounts,
        network=selected,
        config_dir=config_dir,
        deployments_dir=Path(deployments_dir) if deployments_dir else DEFAULT_DEPLOYMENTS_DIR,
    )
