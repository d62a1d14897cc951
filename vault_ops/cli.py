#!/usr/bin/env python3
"""
vault-ops command line.

Usage:
    vault-ops generate-accounts
    vault-ops --network bsc panic --strat 0x...
    vault-ops --network bsc transfer foo
    vault-ops start-network --fork bsc
"""
from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from dotenv import load_dotenv

from vault_ops import __version__
from vault_ops.commands.context import CommandContext
from vault_ops.commands.node import DEFAULT_HOST, DEFAULT_PORT, start_network
from vault_ops.commands.strategy import run_strategy_action
from vault_ops.config.logging_config import default_log_dir, setup_logger
from vault_ops.config.runtime import RuntimeConfig, load_runtime_config
from vault_ops.errors import VaultOpsError
from vault_ops.executor.operations import STRATEGY_ACTIONS
from vault_ops.executor.ownership import FailurePolicy, transfer_ownership

logger = logging.getLogger(__name__)


def cmd_start_network(args: argparse.Namespace, runtime: RuntimeConfig) -> int:
    return start_network(
        runtime.networks,
        args.fork,
        host=args.host,
        port=args.port,
        no_reset=args.no_reset,
        deployments_dir=runtime.deployments_dir,
    )


def cmd_strategy_action(args: argparse.Namespace, runtime: RuntimeConfig) -> int:
    result = run_strategy_action(CommandContext(runtime), args.cmd, args.strat)
    return 0 if result.success else 1


def cmd_transfer(args: argparse.Namespace, runtime: RuntimeConfig) -> int:
    ctx = CommandContext(runtime)
    try:
        signer = ctx.signer()
        vault_owner = ctx.named_account("vaultOwner")
        strat_owner = ctx.named_account("stratOwner")
        w3 = ctx.w3
    except Exception as e:
        print(f"Couldn't transfer {args.vault}: {e}")
        return 1

    policy = FailurePolicy.ABORT if args.fail_fast else FailurePolicy.CONTINUE
    report = transfer_ownership(
        args.vault,
        vault_owner,
        strat_owner,
        signer,
        w3=w3,
        registry=ctx.registry,
        executor=ctx.executor,
        policy=policy,
    )
    return 0 if report.ok else 1


def cmd_generate_accounts(args: argparse.Namespace, runtime: RuntimeConfig) -> int:
    results = runtime.credentials.generate_all()
    for res in results:
        print(res.describe(), file=sys.stdout if res.ok else sys.stderr)
    return 0 if all(r.ok for r in results) else 1


def cmd_accounts(args: argparse.Namespace, runtime: RuntimeConfig) -> int:
    ctx = CommandContext(runtime)
    try:
        signers = ctx.signer_addresses()
    except VaultOpsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"Network: {runtime.network}")
    for role in runtime.named_accounts.roles():
        addr = runtime.named_accounts.resolve(role, runtime.network, signers)
        print(f"  {role:<12} {addr or '-'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vault-ops", description="Vault and strategy operations across networks")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--network", help="Network to operate on (default VAULT_OPS_NETWORK or localhost)")
    parser.add_argument("--config-dir", dest="config_dir", help="Directory holding key files and addressbook.json (default .config)")
    parser.add_argument("--deployments-dir", dest="deployments_dir", help="Root of deployment records (default deployments)")
    parser.add_argument("--env-file", help="Path to .env file to load before resolving env vars")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging (-v info, -vv debug)")
    sub = parser.add_subparsers(dest="cmd")

    p_node = sub.add_parser("start-network", aliases=["node"], help="Start a local node, optionally forking a network")
    p_node.add_argument("--fork", help="Configured network to fork (e.g. bsc)")
    p_node.add_argument("--host", default=DEFAULT_HOST, help=f"Listen host (default {DEFAULT_HOST})")
    p_node.add_argument("--port", type=int, default=DEFAULT_PORT, help=f"Listen port (default {DEFAULT_PORT})")
    p_node.add_argument("--no-reset", dest="no_reset", action="store_true", help="Keep local deployment records from a previous run")
    p_node.set_defaults(func=cmd_start_network)

    descriptions = {
        "panic": "Panics a given strategy.",
        "pause": "Pauses a given strategy.",
        "unpause": "Unpauses a given strategy.",
        "harvest": "Harvests a given strategy.",
    }
    for action in STRATEGY_ACTIONS:
        p_act = sub.add_parser(action, help=descriptions[action])
        p_act.add_argument("--strat", required=True, help=f"The strategy to {action}.")
        p_act.set_defaults(func=cmd_strategy_action)

    p_transfer = sub.add_parser("transfer", help="Transfer contract ownership")
    p_transfer.add_argument("vault", help="Name of vault to transfer")
    p_transfer.add_argument("--fail-fast", dest="fail_fast", action="store_true", help="Skip the strategy step if the vault step fails")
    p_transfer.set_defaults(func=cmd_transfer)

    p_gen = sub.add_parser("generate-accounts", aliases=["generate_accounts"], help="Creates new deployer and test accounts")
    p_gen.set_defaults(func=cmd_generate_accounts)

    p_accts = sub.add_parser("accounts", help="Show named accounts for the network")
    p_accts.set_defaults(func=cmd_accounts)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not getattr(args, "func", None):
        parser.print_help()
        return 2

    # Load environment variables from .env if present so commands work out of the box.
    load_dotenv(args.env_file or ".env")

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    setup_logger(level=level, log_dir=default_log_dir(), detailed=args.verbose > 1)

    try:
        runtime = load_runtime_config(
            network=args.network,
            config_dir=args.config_dir,
            deployments_dir=args.deployments_dir,
        )
    except VaultOpsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return args.func(args, runtime)


if __name__ == "__main__":
    raise SystemExit(main())
