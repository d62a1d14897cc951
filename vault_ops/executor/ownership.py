"""
Ownership transfer workflow for a vault and its paired strategy.

The vault step runs first, then the strategy step. Each step resolves its
deployment, submits ``transferOwnership`` and reports the transaction
hash as soon as it is submitted, then its confirmation. Steps are not
rolled back; partial completion is reported as such.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from web3 import Web3

from vault_ops.config.abis import OWNABLE_ABI
from vault_ops.executor.operations import OperationExecutor, OperationResult
from vault_ops.helpers.deployments import DeploymentRegistry, handle_for_deployment
from vault_ops.helpers.signers import Signer

logger = logging.getLogger(__name__)

TRANSFER_ACTION = "transferOwnership"


class FailurePolicy(str, Enum):
    CONTINUE = "continue"  # attempt every step regardless of earlier failures
    ABORT = "abort"        # skip remaining steps after the first failure


def vault_name(vault: str) -> str:
    return f"{vault}-vault"


def strategy_name(vault: str) -> str:
    return f"{vault}-strat"


@dataclass
class TransferStep:
    label: str
    contract_name: str
    new_owner: Optional[str]
    result: Optional[OperationResult] = None
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.result is not None and self.result.success


@dataclass
class TransferReport:
    vault: str
    policy: FailurePolicy
    steps: list[TransferStep] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return bool(self.steps) and all(s.ok for s in self.steps)

    @property
    def completed(self) -> bool:
        """True when every step was attempted (none skipped)."""
        return all(not s.skipped for s in self.steps)


def _run_step(
    step: TransferStep,
    w3: Web3,
    registry: DeploymentRegistry,
    executor: OperationExecutor,
    signer: Signer,
    out: Callable[..., None],
) -> OperationResult:
    if not step.new_owner:
        out(f'Cannot transfer "{step.contract_name}": no {step.label} owner configured for this network')
        return OperationResult.failure(TRANSFER_ACTION, f"no {step.label} owner configured", contract_name=step.contract_name)

    try:
        deployment = registry.get(step.contract_name)
        handle = handle_for_deployment(w3, deployment, OWNABLE_ABI)
    except Exception as e:
        out(f'Cannot transfer "{step.contract_name}": {e}')
        return OperationResult.failure(TRANSFER_ACTION, str(e), contract_name=step.contract_name)

    out(f'Transferring ownership of "{step.contract_name}" at "{handle.address}" to "{step.new_owner}"', end="")

    def _submitted(tx_hash: str, url: Optional[str]) -> None:
        out(f" (tx: {tx_hash})")

    result = executor.execute(handle, TRANSFER_ACTION, signer, step.new_owner, on_submitted=_submitted)
    if result.tx_hash is None:
        # nothing was submitted, so close the pending line
        out("")
    if result.success:
        out(f"  confirmed: {result.reference}")
    else:
        out(f"  failed: {result.error}")
    return result


def transfer_ownership(
    vault: str,
    vault_owner: Optional[str],
    strat_owner: Optional[str],
    signer: Signer,
    *,
    w3: Web3,
    registry: DeploymentRegistry,
    executor: OperationExecutor,
    policy: FailurePolicy = FailurePolicy.CONTINUE,
    out: Callable[..., None] = print,
) -> TransferReport:
    """Transfer ownership of ``<vault>-vault`` then ``<vault>-strat``.

    With FailurePolicy.CONTINUE the strategy step is attempted even if the
    vault step failed (including at name resolution). With ABORT it is
    skipped and reported as skipped. "done" is printed once both steps have
    been attempted or skipped.
    """
    report = TransferReport(vault=vault, policy=policy)
    steps = [
        TransferStep("vault", vault_name(vault), vault_owner),
        TransferStep("strategy", strategy_name(vault), strat_owner),
    ]

    for step in steps:
        report.steps.append(step)
        if policy is FailurePolicy.ABORT and any(not s.ok for s in report.steps[:-1]):
            step.skipped = True
            out(f'Skipping "{step.contract_name}": an earlier step failed')
            continue
        step.result = _run_step(step, w3, registry, executor, signer, out)
        logger.info("%s step for %s: %s", step.label, vault, "ok" if step.ok else "failed")

    if not report.ok:
        done = [s.contract_name for s in report.steps if s.ok]
        out(f"Partial transfer: completed {done or 'nothing'}; remaining steps need manual follow-up")
    out("done")
    return report
