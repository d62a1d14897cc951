"""
Operation executor: submission, confirmation ordering and failure reporting.
"""
from unittest.mock import MagicMock

from eth_account import Account

from vault_ops.config.abis import STRATEGY_ABI
from vault_ops.executor.operations import OperationExecutor
from vault_ops.helpers.deployments import contract_handle
from vault_ops.helpers.signers import Signer

from conftest import DEPLOYER_KEY, STRATEGY_ADDRESS

TX_HASH = b"\xab" * 32
TX_HEX = "0x" + "ab" * 32


def _strategy(mock_w3):
    return contract_handle(mock_w3, STRATEGY_ADDRESS, STRATEGY_ABI, name="strategy")


def test_remote_signer_success_reports_hash_then_confirms(mock_w3):
    handle = _strategy(mock_w3)
    events = []
    handle.contract.functions.panic.return_value.transact.side_effect = lambda tx: events.append("submit") or TX_HASH
    mock_w3.eth.wait_for_transaction_receipt.side_effect = lambda h: events.append("confirm") or {"status": 1}
    signer = Signer.remote(Account.from_key(DEPLOYER_KEY).address)

    executor = OperationExecutor(mock_w3, explorer_url="https://bscscan.com")
    result = executor.execute(handle, "panic", signer, on_submitted=lambda h, url: events.append(("reported", h, url)))

    assert result.success
    assert result.confirmed
    assert result.tx_hash == TX_HEX
    assert result.reference == f"https://bscscan.com/tx/{TX_HEX}"
    assert events == ["submit", ("reported", TX_HEX, f"https://bscscan.com/tx/{TX_HEX}"), "confirm"]
    handle.contract.functions.panic.return_value.transact.assert_called_once_with({"from": signer.address})


def test_local_signer_signs_and_sends_raw(mock_w3):
    handle = _strategy(mock_w3)
    signer = Signer.from_key(DEPLOYER_KEY)
    fn = handle.contract.functions.harvest.return_value
    fn.build_transaction.return_value = {
        "to": STRATEGY_ADDRESS,
        "data": "0x4641257d",
        "value": 0,
        "gas": 100_000,
        "gasPrice": 5_000_000_000,
        "nonce": 7,
        "chainId": 56,
    }
    mock_w3.eth.send_raw_transaction.return_value = TX_HASH

    result = OperationExecutor(mock_w3).execute(handle, "harvest", signer)

    assert result.success
    assert result.tx_hash == TX_HEX
    assert result.reference == TX_HEX
    fn.build_transaction.assert_called_once_with({"from": signer.address, "nonce": 7, "chainId": 56})
    raw = mock_w3.eth.send_raw_transaction.call_args[0][0]
    expected = signer.account.sign_transaction(fn.build_transaction.return_value).raw_transaction
    assert bytes(raw) == bytes(expected)


def test_revert_during_estimation_is_reported_not_raised(mock_w3):
    handle = _strategy(mock_w3)
    handle.contract.functions.panic.return_value.transact.side_effect = RuntimeError(
        "execution reverted: Pausable: paused"
    )
    submitted = MagicMock()

    result = OperationExecutor(mock_w3).execute(
        handle, "panic", Signer.remote(STRATEGY_ADDRESS), on_submitted=submitted
    )

    assert not result.success
    assert result.tx_hash is None
    assert "Pausable: paused" in result.error
    submitted.assert_not_called()
    mock_w3.eth.wait_for_transaction_receipt.assert_not_called()


def test_reverted_receipt_is_a_failure_with_reference(mock_w3):
    handle = _strategy(mock_w3)
    handle.contract.functions.unpause.return_value.transact.return_value = TX_HASH
    mock_w3.eth.wait_for_transaction_receipt.return_value = {"status": 0}

    result = OperationExecutor(mock_w3).execute(handle, "unpause", Signer.remote(STRATEGY_ADDRESS))

    assert not result.success
    assert not result.confirmed
    assert result.tx_hash == TX_HEX
    assert result.error == "transaction reverted"


def test_confirmation_error_keeps_tx_hash(mock_w3):
    handle = _strategy(mock_w3)
    handle.contract.functions.harvest.return_value.transact.return_value = TX_HASH
    mock_w3.eth.wait_for_transaction_receipt.side_effect = TimeoutError("not mined")

    executor = OperationExecutor(mock_w3, confirmation_timeout=5)
    result = executor.execute(handle, "harvest", Signer.remote(STRATEGY_ADDRESS))

    assert not result.success
    assert result.tx_hash == TX_HEX
    assert "not mined" in result.error
    mock_w3.eth.wait_for_transaction_receipt.assert_called_once_with(TX_HEX, timeout=5)


def test_unknown_action_is_a_failure(mock_w3):
    handle = _strategy(mock_w3)

    result = OperationExecutor(mock_w3).execute(handle, "selfdestruct", Signer.remote(STRATEGY_ADDRESS))

    assert not result.success
    assert "selfdestruct" in result.error
    mock_w3.eth.send_raw_transaction.assert_not_called()


def test_one_submission_per_call_without_retry(mock_w3):
    handle = _strategy(mock_w3)
    transact = handle.contract.functions.panic.return_value.transact
    transact.side_effect = ConnectionError("rpc down")

    OperationExecutor(mock_w3).execute(handle, "panic", Signer.remote(STRATEGY_ADDRESS))

    assert transact.call_count == 1
