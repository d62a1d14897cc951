#!/usr/bin/env python3
"""
Credential store for the deployer and secondary signing identities.

Each role owns exactly one file under the config directory holding the raw
0x-hex private key. Files are created once with exclusive-create semantics
and never overwritten; an environment variable per role overrides the file.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .keystore import create_random_key, read_secret, write_secret_exclusive

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path(".config")

DEPLOYER = "deployer"
OTHER = "other"

# role -> (file name, environment override, display label)
ROLES: dict[str, tuple[str, str, str]] = {
    DEPLOYER: ("DEPLOYER_PK", "DEPLOYER_PK", "Deployer"),
    OTHER: ("OTHER_PK", "OTHER_PK", "Other"),
}


class GenerateStatus(str, Enum):
    CREATED = "created"
    EXISTS = "exists"
    FAILED = "failed"


@dataclass(frozen=True)
class GenerateResult:
    role: str
    status: GenerateStatus
    path: Path
    address: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is not GenerateStatus.FAILED

    def describe(self) -> str:
        label = ROLES.get(self.role, ("", "", self.role.capitalize()))[2]
        if self.status is GenerateStatus.CREATED:
            return f"{label + ' account':<16}: {self.address}"
        if self.status is GenerateStatus.EXISTS:
            return f"{label} key exists. Not overwriting"
        return f"Could not create {label.lower()} key at {self.path}: {self.error}"


@dataclass(frozen=True)
class CredentialLookup:
    role: str
    secret: str | None
    source: str | None = None  # "env" or "file"
    message: str | None = None

    @property
    def found(self) -> bool:
        return self.secret is not None


class CredentialStore:
    """File-backed store for the fixed set of signing roles."""

    def __init__(self, config_dir: Path | str = DEFAULT_CONFIG_DIR, roles: dict[str, tuple[str, str, str]] | None = None):
        self.config_dir = Path(config_dir)
        self.roles = dict(ROLES if roles is None else roles)

    def _role(self, role: str) -> tuple[str, str, str]:
        try:
            return self.roles[role]
        except KeyError:
            raise ValueError(f"Unknown credential role '{role}'. Known roles: {list(self.roles)}") from None

    def path_for(self, role: str) -> Path:
        return self.config_dir / self._role(role)[0]

    def env_var_for(self, role: str) -> str:
        return self._role(role)[1]

    def generate(self, role: str) -> GenerateResult:
        """Create a new key for ``role`` unless its file already exists.

        Never raises for I/O conditions: an existing file yields EXISTS and
        is left untouched, any other OSError yields FAILED.
        """
        path = self.path_for(role)

        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            # The per-role create below reports its own error
            logger.error("Could not create config directory %s: %s", self.config_dir, e)

        priv_hex, address = create_random_key()
        try:
            write_secret_exclusive(path, priv_hex)
        except FileExistsError:
            logger.info("%s key exists at %s; not overwriting", role, path)
            return GenerateResult(role=role, status=GenerateStatus.EXISTS, path=path)
        except OSError as e:
            logger.error("Failed to write %s key to %s: %s", role, path, e)
            return GenerateResult(role=role, status=GenerateStatus.FAILED, path=path, error=str(e))

        logger.info("Created %s key at %s for %s", role, path, address)
        return GenerateResult(role=role, status=GenerateStatus.CREATED, path=path, address=address)

    def generate_all(self) -> list[GenerateResult]:
        return [self.generate(role) for role in self.roles]

    def load(self, role: str) -> CredentialLookup:
        """Read the secret for ``role``; the environment override wins over the file."""
        env_var = self.env_var_for(role)
        env_value = os.getenv(env_var)
        if env_value and env_value.strip():
            return CredentialLookup(role=role, secret=env_value.strip(), source="env")

        path = self.path_for(role)
        try:
            secret = read_secret(path)
        except FileNotFoundError:
            label = self._role(role)[2]
            return CredentialLookup(
                role=role,
                secret=None,
                message=(
                    f"{label} account not found. Create {path}, set {env_var}, "
                    f"or run `vault-ops generate-accounts`."
                ),
            )
        except OSError as e:
            logger.error("Could not read %s key from %s: %s", role, path, e)
            return CredentialLookup(role=role, secret=None, message=f"Could not read {path}: {e}")

        if not secret:
            return CredentialLookup(role=role, secret=None, message=f"{path} is empty")
        return CredentialLookup(role=role, secret=secret, source="file")
