"""
Operation executor.

Submits one state-changing call on a contract handle, waits for the
transaction to be confirmed, and reports the outcome as an OperationResult.
Errors never escape ``execute``: they come back as failed results.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from web3 import Web3

from vault_ops.config.logging_config import log_operation
from vault_ops.helpers.deployments import ContractHandle
from vault_ops.helpers.signers import Signer

logger = logging.getLogger(__name__)

# Actions the CLI exposes against strategies; any ABI function is accepted
STRATEGY_ACTIONS = ("panic", "pause", "unpause", "harvest")

SubmittedCallback = Callable[[str, Optional[str]], None]


@dataclass(frozen=True)
class OperationResult:
    action: str
    success: bool
    contract_name: Optional[str] = None
    address: Optional[str] = None
    tx_hash: Optional[str] = None
    explorer_url: Optional[str] = None
    confirmed: bool = False
    error: Optional[str] = None

    @property
    def reference(self) -> Optional[str]:
        """Human-checkable transaction reference: explorer link, else the hash."""
        return self.explorer_url or self.tx_hash

    @classmethod
    def failure(cls, action: str, error: str, handle: Optional[ContractHandle] = None, **kwargs: Any) -> "OperationResult":
        return cls(
            action=action,
            success=False,
            contract_name=handle.name if handle else kwargs.pop("contract_name", None),
            address=handle.address if handle else kwargs.pop("address", None),
            error=error,
            **kwargs,
        )


class OperationExecutor:
    """Submits calls for one network context.

    Args:
        w3: Connected Web3 instance.
        explorer_url: Base URL of the network's block explorer, for links.
        confirmation_timeout: Seconds to wait for a receipt; web3's default when None.
        network: Network name, for the audit log.
    """

    def __init__(
        self,
        w3: Web3,
        explorer_url: Optional[str] = None,
        confirmation_timeout: Optional[float] = None,
        network: Optional[str] = None,
    ):
        self.w3 = w3
        self.explorer_url = explorer_url
        self.confirmation_timeout = confirmation_timeout
        self.network = network

    def tx_url(self, tx_hash: str) -> Optional[str]:
        if not self.explorer_url:
            return None
        return f"{self.explorer_url.rstrip('/')}/tx/{tx_hash}"

    def _submit(self, fn, signer: Signer) -> str:
        if signer.is_local:
            tx = fn.build_transaction({
                "from": signer.address,
                "nonce": self.w3.eth.get_transaction_count(signer.address),
                "chainId": self.w3.eth.chain_id,
            })
            signed = signer.account.sign_transaction(tx)
            tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
        else:
            tx_hash = fn.transact({"from": signer.address})
        return Web3.to_hex(tx_hash)

    def _wait(self, tx_hash: str):
        if self.confirmation_timeout is None:
            return self.w3.eth.wait_for_transaction_receipt(tx_hash)
        return self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.confirmation_timeout)

    def execute(
        self,
        handle: ContractHandle,
        action: str,
        signer: Signer,
        *args: Any,
        on_submitted: Optional[SubmittedCallback] = None,
    ) -> OperationResult:
        """Submit ``action(*args)`` on ``handle`` and wait for confirmation.

        ``on_submitted(tx_hash, explorer_url)`` is called once the network has
        accepted the transaction and before the confirmation wait starts.
        Exactly one transaction is submitted; there is no retry.
        """
        try:
            fn = handle.function(action, *args)
            logger.info("Submitting %s on %s (%s) from %s", action, handle.name, handle.address, signer.address)
            tx_hash = self._submit(fn, signer)
        except Exception as e:
            result = OperationResult.failure(action, str(e), handle)
            log_operation(logger, result, self.network)
            return result

        url = self.tx_url(tx_hash)
        if on_submitted is not None:
            try:
                on_submitted(tx_hash, url)
            except Exception:
                logger.exception("Submission callback failed for %s", tx_hash)

        try:
            receipt = self._wait(tx_hash)
        except Exception as e:
            result = OperationResult.failure(
                action, f"confirmation failed: {e}", handle, tx_hash=tx_hash, explorer_url=url
            )
            log_operation(logger, result, self.network)
            return result

        status = receipt.get("status") if hasattr(receipt, "get") else getattr(receipt, "status", None)
        if status == 0:
            result = OperationResult.failure(
                action, "transaction reverted", handle, tx_hash=tx_hash, explorer_url=url
            )
        else:
            result = OperationResult(
                action=action,
                success=True,
                contract_name=handle.name,
                address=handle.address,
                tx_hash=tx_hash,
                explorer_url=url,
                confirmed=True,
            )
        log_operation(logger, result, self.network)
        return result
