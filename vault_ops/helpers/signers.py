"""
Signing identities for a network profile.

A profile's ``accounts`` descriptor picks the source:

- a tuple of explicit 0x-hex keys,
- ``"persisted"``: the deployer (and, if present, the secondary) key from the
  credential store, environment overrides included,
- ``"remote"``: accounts unlocked on the node, used via eth_sendTransaction.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address
from web3 import Web3

from vault_ops.config.network import NetworkProfile, PERSISTED_ACCOUNTS, REMOTE_ACCOUNTS
from vault_ops.errors import CredentialError
from vault_ops.setup.credentials import DEPLOYER, OTHER, CredentialStore
from vault_ops.setup.keystore import account_from_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Signer:
    address: str
    account: Optional[LocalAccount] = None

    @property
    def is_local(self) -> bool:
        return self.account is not None

    @classmethod
    def from_key(cls, private_key_hex: str) -> "Signer":
        try:
            acct = account_from_key(private_key_hex)
        except ValueError as e:
            raise CredentialError(f"Invalid private key: {e}") from e
        return cls(address=to_checksum_address(acct.address), account=acct)

    @classmethod
    def remote(cls, address: str) -> "Signer":
        return cls(address=to_checksum_address(address))


def _persisted_signer(store: CredentialStore, role: str) -> Optional[Signer]:
    lookup = store.load(role)
    if not lookup.found:
        if role == DEPLOYER:
            logger.warning(lookup.message)
        return None
    return Signer.from_key(lookup.secret)


def resolve_signers(
    profile: NetworkProfile,
    store: CredentialStore,
    w3: Optional[Web3] = None,
) -> list[Signer]:
    """Resolve the ordered signer list for a profile (deployer first).

    Missing persisted credentials are logged, not raised; callers needing a
    signer use :func:`primary_signer`.
    """
    accounts = profile.accounts

    if isinstance(accounts, tuple):
        return [Signer.from_key(k) for k in accounts]

    if accounts == PERSISTED_ACCOUNTS:
        deployer = _persisted_signer(store, DEPLOYER)
        if deployer is None:
            return []
        signers = [deployer]
        # a broken secondary key never costs the deployer its signer
        try:
            other = _persisted_signer(store, OTHER)
        except CredentialError as e:
            logger.warning("Ignoring %s key: %s", OTHER, e)
            other = None
        if other is not None:
            signers.append(other)
        return signers

    if accounts == REMOTE_ACCOUNTS:
        if w3 is None:
            return []
        try:
            return [Signer.remote(a) for a in w3.eth.accounts]
        except Exception as e:
            logger.warning("Could not list accounts on %s: %s", profile.name, e)
            return []

    raise CredentialError(f"Unsupported accounts setting for network '{profile.name}': {accounts!r}")


def primary_signer(
    profile: NetworkProfile,
    store: CredentialStore,
    w3: Optional[Web3] = None,
) -> Signer:
    """Return the deployer signer for a profile.

    Raises:
        CredentialError: With an actionable message when no signer is available.
    """
    if profile.accounts == PERSISTED_ACCOUNTS:
        signer = _persisted_signer(store, DEPLOYER)
        if signer is not None:
            return signer
        raise CredentialError(store.load(DEPLOYER).message or "Deployer account not available")

    signers = resolve_signers(profile, store, w3)
    if signers:
        return signers[0]

    if profile.accounts == REMOTE_ACCOUNTS:
        message = f"Node at {profile.url} exposes no unlocked accounts"
    else:
        message = f"No accounts configured for network '{profile.name}'"
    raise CredentialError(message)
