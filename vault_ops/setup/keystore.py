#!/usr/bin/env python3
from __future__ import annotations

import os
from pathlib import Path

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address


# owner read/write only
SECRET_FILE_MODE = 0o600


def normalize_private_key(pk: str) -> str:
    if not isinstance(pk, str):
        raise ValueError("private key must be a hex string")
    pk = pk.strip()
    if pk.startswith("0x"):
        pk = pk[2:]
    if len(pk) != 64:
        raise ValueError("private key hex must be 64 characters (32 bytes)")
    int(pk, 16)  # validate hex
    return "0x" + pk


def account_from_key(private_key_hex: str) -> LocalAccount:
    """Build a local signing account from 0x-hex key material."""
    return Account.from_key(normalize_private_key(private_key_hex))


def create_random_key() -> tuple[str, str]:
    """Generate a fresh private key.

    Returns (private_key_hex, checksum_address).
    """
    acct: LocalAccount = Account.create()
    priv_hex = "0x" + bytes(acct.key).hex()
    return priv_hex, to_checksum_address(acct.address)


def write_secret_exclusive(path: Path, secret: str) -> None:
    """Create ``path`` and write ``secret`` to it, failing if it already exists.

    The file is created with O_EXCL and mode 0o600, so a concurrent writer or
    a pre-existing secret makes this raise FileExistsError without touching
    the existing file. If the write fails after the create, the partial file
    is removed so a later attempt can start over.
    """
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, SECRET_FILE_MODE)
    try:
        try:
            f = os.fdopen(fd, "w")
        except Exception:
            os.close(fd)
            raise
        with f:
            f.write(secret)
            f.flush()
            os.fsync(f.fileno())
    except OSError:
        Path(path).unlink(missing_ok=True)
        raise


def read_secret(path: Path) -> str:
    with open(path) as f:
        return f.read().strip()
