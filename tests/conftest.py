"""
Pytest configuration and shared fixtures.
"""
import json
import logging
from unittest.mock import MagicMock

import pytest
from eth_utils import to_checksum_address

from vault_ops.executor.operations import OperationResult

# Well-known throwaway keys (anvil dev accounts 0 and 1)
DEPLOYER_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
OTHER_KEY = "0x59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d"

STRATEGY_ADDRESS = to_checksum_address("0x000000000000000000000000000000000000beef")
VAULT_OWNER = "0x1111111111111111111111111111111111111111"
STRAT_OWNER = "0x2222222222222222222222222222222222222222"

_ENV_VARS = (
    "RPC_URL",
    "VAULT_OPS_NETWORK",
    "VAULT_OPS_DEPLOY_FORK",
    "VAULT_OPS_ADDRESS_BOOK",
    "VAULT_OPS_LOG_DIR",
    "DEPLOYER_PK",
    "OTHER_PK",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    """Isolate every test from operator environment and working directory."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    # the CLI binds console handlers to the stream of the test that created them
    logging.getLogger("vault_ops").handlers.clear()


def make_contract(address, abi):
    contract = MagicMock()
    contract.address = address
    contract.abi = abi
    return contract


@pytest.fixture
def mock_w3():
    """Web3 double: contracts carry their ABI, receipts confirm with status 1."""
    w3 = MagicMock()
    w3.eth.chain_id = 56
    w3.eth.get_transaction_count.return_value = 7
    w3.eth.contract.side_effect = lambda address, abi: make_contract(address, abi)
    w3.eth.wait_for_transaction_receipt.return_value = {"status": 1}
    return w3


class RecordingExecutor:
    """Executor double that records calls and reports submissions."""

    def __init__(self, fail=()):
        self.fail = set(fail)
        self.calls = []

    def execute(self, handle, action, signer, *args, on_submitted=None):
        self.calls.append((handle.name, action, args))
        if handle.name in self.fail:
            return OperationResult.failure(action, "execution reverted: Ownable: caller is not the owner", handle)
        tx_hash = "0x" + f"{len(self.calls):064x}"
        if on_submitted:
            on_submitted(tx_hash, None)
        return OperationResult(
            action=action,
            success=True,
            contract_name=handle.name,
            address=handle.address,
            tx_hash=tx_hash,
            confirmed=True,
        )


@pytest.fixture
def recording_executor():
    return RecordingExecutor()


def write_deployment(root, network, name, address):
    path = root / network / f"{name}.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"address": address, "abi": [], "transactionHash": "0x" + "00" * 32}))
    return path
