"""
Configuration package for vault-ops.

Static network and named-account tables plus the administrative ABIs.
"""

from vault_ops.config.network import (
    NETWORKS,
    DEFAULT_NETWORK,
    LOCAL_NETWORK,
    PERSISTED_ACCOUNTS,
    REMOTE_ACCOUNTS,
    ForkPlan,
    NetworkConfig,
    NetworkProfile,
    build_network_config,
    resolve_fork,
    with_rpc_override,
)

from vault_ops.config.accounts import (
    NAMED_ACCOUNTS,
    NamedAccounts,
    load_address_book,
)

from vault_ops.config.abis import (
    OWNABLE_ABI,
    STRATEGY_ABI,
)

__all__ = [
    # Network
    'NETWORKS',
    'DEFAULT_NETWORK',
    'LOCAL_NETWORK',
    'PERSISTED_ACCOUNTS',
    'REMOTE_ACCOUNTS',
    'ForkPlan',
    'NetworkConfig',
    'NetworkProfile',
    'build_network_config',
    'resolve_fork',
    'with_rpc_override',

    # Named accounts
    'NAMED_ACCOUNTS',
    'NamedAccounts',
    'load_address_book',

    # ABIs
    'OWNABLE_ABI',
    'STRATEGY_ABI',
]
