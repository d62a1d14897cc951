"""
Ownership transfer workflow: ordering, per-step isolation and failure policy.
"""
from eth_utils import to_checksum_address

from vault_ops.executor.ownership import FailurePolicy, strategy_name, transfer_ownership, vault_name
from vault_ops.helpers.deployments import DeploymentRegistry
from vault_ops.helpers.signers import Signer

from conftest import STRAT_OWNER, VAULT_OWNER, RecordingExecutor, write_deployment

VAULT_ADDR = to_checksum_address("0x" + "aa" * 20)
STRAT_ADDR = to_checksum_address("0x" + "bb" * 20)
SIGNER = Signer.remote("0x" + "cc" * 20)


def _registry(tmp_path, *names):
    addresses = {"foo-vault": VAULT_ADDR, "foo-strat": STRAT_ADDR}
    for name in names:
        write_deployment(tmp_path / "deployments", "bsc", name, addresses[name])
    return DeploymentRegistry(tmp_path / "deployments", "bsc")


def test_logical_names_derive_from_vault():
    assert vault_name("foo") == "foo-vault"
    assert strategy_name("foo") == "foo-strat"


def test_transfers_vault_then_strategy(tmp_path, mock_w3, recording_executor, capsys):
    registry = _registry(tmp_path, "foo-vault", "foo-strat")

    report = transfer_ownership(
        "foo", VAULT_OWNER, STRAT_OWNER, SIGNER,
        w3=mock_w3, registry=registry, executor=recording_executor,
    )

    assert report.ok
    assert report.completed
    assert recording_executor.calls == [
        ("foo-vault", "transferOwnership", (VAULT_OWNER,)),
        ("foo-strat", "transferOwnership", (STRAT_OWNER,)),
    ]
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == (
        f'Transferring ownership of "foo-vault" at "{VAULT_ADDR}" to "{VAULT_OWNER}"'
        f' (tx: 0x{1:064x})'
    )
    strat_line = next(i for i, l in enumerate(lines) if l.startswith('Transferring ownership of "foo-strat"'))
    assert f"(tx: 0x{2:064x})" in lines[strat_line]
    assert strat_line > 0
    assert lines[-1] == "done"


def test_strategy_step_runs_when_vault_resolution_fails(tmp_path, mock_w3, recording_executor, capsys):
    registry = _registry(tmp_path, "foo-strat")

    report = transfer_ownership(
        "foo", VAULT_OWNER, STRAT_OWNER, SIGNER,
        w3=mock_w3, registry=registry, executor=recording_executor,
    )

    assert not report.ok
    assert report.completed
    assert [s.ok for s in report.steps] == [False, True]
    assert "No deployment found for 'foo-vault'" in report.steps[0].result.error
    assert recording_executor.calls == [("foo-strat", "transferOwnership", (STRAT_OWNER,))]
    out = capsys.readouterr().out
    assert "Partial transfer" in out
    assert out.splitlines()[-1] == "done"


def test_strategy_step_runs_when_vault_submission_fails(tmp_path, mock_w3, capsys):
    registry = _registry(tmp_path, "foo-vault", "foo-strat")
    executor = RecordingExecutor(fail={"foo-vault"})

    report = transfer_ownership(
        "foo", VAULT_OWNER, STRAT_OWNER, SIGNER,
        w3=mock_w3, registry=registry, executor=executor,
    )

    assert [name for name, _, _ in executor.calls] == ["foo-vault", "foo-strat"]
    assert "caller is not the owner" in report.steps[0].result.error
    assert report.steps[1].ok


def test_abort_policy_skips_strategy_after_failure(tmp_path, mock_w3, recording_executor, capsys):
    registry = _registry(tmp_path, "foo-strat")

    report = transfer_ownership(
        "foo", VAULT_OWNER, STRAT_OWNER, SIGNER,
        w3=mock_w3, registry=registry, executor=recording_executor,
        policy=FailurePolicy.ABORT,
    )

    assert recording_executor.calls == []
    assert report.steps[1].skipped
    assert not report.completed
    out = capsys.readouterr().out
    assert 'Skipping "foo-strat"' in out
    assert out.splitlines()[-1] == "done"


def test_missing_owner_fails_only_that_step(tmp_path, mock_w3, recording_executor):
    registry = _registry(tmp_path, "foo-vault", "foo-strat")

    report = transfer_ownership(
        "foo", None, STRAT_OWNER, SIGNER,
        w3=mock_w3, registry=registry, executor=recording_executor,
    )

    assert [s.ok for s in report.steps] == [False, True]
    assert recording_executor.calls == [("foo-strat", "transferOwnership", (STRAT_OWNER,))]


def test_registry_follows_fork_source_for_local_network(tmp_path, monkeypatch):
    write_deployment(tmp_path, "bsc", "foo-vault", VAULT_ADDR)
    monkeypatch.setenv("VAULT_OPS_DEPLOY_FORK", "bsc")

    registry = DeploymentRegistry(tmp_path, "localhost", local=True)

    assert registry.network == "bsc"
    assert registry.get("foo-vault").address == VAULT_ADDR
    assert registry.names() == ["foo-vault"]
