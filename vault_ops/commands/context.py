"""
Per-command wiring: network profile, Web3 connection, signer, executor and
deployment registry for the selected network. Everything is created lazily,
so commands that never touch the chain never connect.
"""

from __future__ import annotations

from functools import cached_property

from web3 import Web3

from vault_ops.config.network import NetworkProfile
from vault_ops.config.runtime import RuntimeConfig
from vault_ops.executor.operations import OperationExecutor
from vault_ops.helpers.deployments import DeploymentRegistry
from vault_ops.helpers.signers import Signer, primary_signer, resolve_signers
from vault_ops.helpers.web3_setup import get_web3_instance


class CommandContext:
    def __init__(self, runtime: RuntimeConfig):
        self.runtime = runtime

    @property
    def profile(self) -> NetworkProfile:
        return self.runtime.profile

    @cached_property
    def w3(self) -> Web3:
        return get_web3_instance(self.profile)

    def signer(self) -> Signer:
        """Deployer signer; raises CredentialError with a remedy when missing."""
        return primary_signer(self.profile, self.runtime.credentials, self.w3)

    def signer_addresses(self) -> list[str]:
        return [s.address for s in resolve_signers(self.profile, self.runtime.credentials, self.w3)]

    @cached_property
    def executor(self) -> OperationExecutor:
        return OperationExecutor(
            self.w3,
            explorer_url=self.profile.explorer_url,
            network=self.profile.name,
        )

    @cached_property
    def registry(self) -> DeploymentRegistry:
        return DeploymentRegistry(self.runtime.deployments_dir, self.profile.name, local=self.profile.is_local)

    def named_account(self, role: str) -> str | None:
        return self.runtime.named_accounts.resolve(role, self.profile.name, self.signer_addresses())
