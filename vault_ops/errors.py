"""
Exception types shared across the vault-ops package.

Lower layers raise these; the executor, the ownership orchestrator and the
CLI command handlers turn them into printed results.
"""


class VaultOpsError(Exception):
    """Base class for all vault-ops errors."""


class ConfigurationError(VaultOpsError):
    """Unknown network, missing endpoint or malformed static configuration."""


class CredentialError(VaultOpsError):
    """No usable signing identity for the requested role or network."""


class DeploymentNotFoundError(VaultOpsError):
    """A logical contract name has no deployment record for the network."""

    def __init__(self, name: str, network: str, detail: str | None = None):
        self.name = name
        self.network = network
        msg = f"No deployment found for '{name}' on network '{network}'"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


class UnknownActionError(VaultOpsError):
    """The contract handle does not expose the requested action."""
