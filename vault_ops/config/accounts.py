"""
Named accounts for vault-ops.

Maps roles (deployer, keeper, vaultOwner, ...) to addresses per network.
An integer entry is an index into the signer list of the active network
(deployer first, then the secondary account); a string entry is a literal
address. Per-network platform addresses come from an optional address book.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any
from collections.abc import Mapping, Sequence

from eth_utils import is_address, to_checksum_address

logger = logging.getLogger(__name__)


# role -> {"default": index, <network>: <address-book key>}
NAMED_ACCOUNTS: dict[str, dict[str, Any]] = {
    "deployer": {"default": 0},
    "user": {"default": 1},
    "keeper": {"default": 0, "book_key": "keeper"},
    "vaultOwner": {"default": 0, "book_key": "vaultOwner"},
    "stratOwner": {"default": 0, "book_key": "strategyOwner"},
}

ADDRESS_BOOK_FILENAME = "addressbook.json"


def load_address_book(path: Path) -> dict[str, dict[str, str]]:
    """Load a per-network address book.

    Expected layout::

        {"bsc": {"keeper": "0x...", "vaultOwner": "0x...", "strategyOwner": "0x..."}}

    A missing file yields an empty book. Malformed files and invalid
    addresses are logged and skipped.
    """
    if not path.exists():
        return {}
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error("Could not read address book %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.error("Address book %s must be a JSON object keyed by network", path)
        return {}

    book: dict[str, dict[str, str]] = {}
    for network, entries in data.items():
        if not isinstance(entries, dict):
            continue
        clean: dict[str, str] = {}
        for key, addr in entries.items():
            if isinstance(addr, str) and is_address(addr):
                clean[key] = to_checksum_address(addr)
            else:
                logger.warning("Ignoring invalid address for %s.%s in %s", network, key, path)
        book[network] = clean
    return book


class NamedAccounts:
    """Resolves role names to addresses for a given network."""

    def __init__(
        self,
        table: Mapping[str, Mapping[str, Any]] | None = None,
        address_book: Mapping[str, Mapping[str, str]] | None = None,
    ):
        table = NAMED_ACCOUNTS if table is None else table
        self._table = MappingProxyType({k: MappingProxyType(dict(v)) for k, v in table.items()})
        self._book = MappingProxyType({k: MappingProxyType(dict(v)) for k, v in (address_book or {}).items()})

    def roles(self) -> list[str]:
        return list(self._table.keys())

    def resolve(self, role: str, network: str, signers: Sequence[str]) -> str | None:
        """Resolve a role to a checksum address.

        Args:
            role: Role name, e.g. 'vaultOwner'.
            network: Active network name.
            signers: Ordered signer addresses of the network (deployer first).

        Returns:
            The address, or None if the role is unknown or its index is out of
            range for the available signers.
        """
        entry = self._table.get(role)
        if entry is None:
            return None

        value: Any = entry.get(network)
        if value is None:
            book_key = entry.get("book_key")
            if book_key:
                value = self._book.get(network, {}).get(book_key)
        if value is None:
            value = entry.get("default")

        if isinstance(value, int):
            if 0 <= value < len(signers):
                return to_checksum_address(signers[value])
            return None
        if isinstance(value, str) and is_address(value):
            return to_checksum_address(value)
        return None

    def resolve_all(self, network: str, signers: Sequence[str]) -> dict[str, str | None]:
        return {role: self.resolve(role, network, signers) for role in self._table}
