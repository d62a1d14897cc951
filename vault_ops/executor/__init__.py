"""Transaction submission and multi-step administrative workflows."""

from vault_ops.executor.operations import OperationExecutor, OperationResult
from vault_ops.executor.ownership import FailurePolicy, TransferReport, transfer_ownership

__all__ = [
    "OperationExecutor",
    "OperationResult",
    "FailurePolicy",
    "TransferReport",
    "transfer_ownership",
]
