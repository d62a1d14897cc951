"""
Strategy lifecycle commands: panic, pause, unpause and harvest.
"""

import logging
from typing import Callable, Optional

from eth_utils import is_address

from vault_ops.config.abis import STRATEGY_ABI
from vault_ops.commands.context import CommandContext
from vault_ops.errors import VaultOpsError
from vault_ops.executor.operations import OperationResult
from vault_ops.helpers.deployments import contract_handle

logger = logging.getLogger(__name__)


def run_strategy_action(
    ctx: CommandContext,
    action: str,
    strategy: str,
    out: Callable[..., None] = print,
) -> OperationResult:
    """Invoke ``action`` on the strategy at ``strategy`` and report the outcome.

    Prints the transaction reference once submitted, then the confirmed or
    failed outcome. Never raises.
    """
    if not is_address(strategy):
        out(f"Couldn't {action} due to invalid strategy address: {strategy}")
        return OperationResult.failure(action, f"invalid address {strategy}", address=strategy)

    try:
        signer = ctx.signer()
        handle = contract_handle(ctx.w3, strategy, STRATEGY_ABI, name="strategy")
    except Exception as e:
        if not isinstance(e, VaultOpsError):
            logger.debug("Setup for %s failed", action, exc_info=True)
        out(f"Couldn't {action} due to {e}")
        return OperationResult.failure(action, str(e), address=strategy)

    def _submitted(tx_hash: str, url: Optional[str]) -> None:
        out(f"Submitted {action} (tx: {url or tx_hash}); waiting for confirmation")

    result = ctx.executor.execute(handle, action, signer, on_submitted=_submitted)
    if result.success:
        out(f"Successful {action} with tx at {result.reference}")
    else:
        out(f"Couldn't {action} due to {result.error}")
    return result
