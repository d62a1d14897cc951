#!/usr/bin/env python3
from __future__ import annotations

"""
Local development node (anvil), optionally forking a configured network.

Forking copies the source network's endpoint and chain ID onto the local
network, keeps existing local deployment records (no reset) and disables
the node's on-disk RPC cache (no persistent write). The fork source is
recorded under the local deployments directory so later commands against
the local network resolve the source network's deployments.
"""

import logging
import os
import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path

from vault_ops.config.network import LOCAL_NETWORK, ForkPlan, NetworkConfig, resolve_fork
from vault_ops.helpers.deployments import FORK_ENV, write_fork_marker

logger = logging.getLogger(__name__)

NODE_BINARY = "anvil"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8545


def build_node_command(plan: ForkPlan, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT, binary: str = NODE_BINARY) -> list[str]:
    cmd = [binary, "--host", host, "--port", str(port)]
    if plan.fork_url:
        cmd += ["--fork-url", plan.fork_url]
    if plan.chain_id is not None:
        cmd += ["--chain-id", str(plan.chain_id)]
    if not plan.write:
        cmd.append("--no-storage-caching")
    return cmd


def node_environment(plan: ForkPlan, base: dict[str, str] | None = None) -> dict[str, str]:
    env = dict(os.environ if base is None else base)
    if plan.fork_network:
        env[FORK_ENV] = plan.fork_network
    else:
        env.pop(FORK_ENV, None)
    return env


def reset_local_deployments(deployments_dir: Path, network: str = LOCAL_NETWORK) -> bool:
    """Remove deployment records left by a previous local node session."""
    target = deployments_dir / network
    if not target.exists():
        return False
    try:
        shutil.rmtree(target)
    except OSError as e:
        logger.error("Could not reset %s: %s", target, e)
        return False
    logger.info("Reset local deployments at %s", target)
    return True


def start_network(
    networks: NetworkConfig,
    fork: str | None = None,
    *,
    target: str = LOCAL_NETWORK,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    no_reset: bool = False,
    deployments_dir: Path = Path("deployments"),
    out: Callable[..., None] = print,
    runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
) -> int:
    """Run the local node in the foreground until it exits.

    Returns the process exit code; a missing binary is reported and yields 1.
    """
    plan = resolve_fork(networks, target, fork, no_reset=no_reset, write=True)
    if fork and not plan.forking:
        out(f"Unknown fork source '{fork}'; starting without fork")
    if plan.forking:
        out(f"Forking {plan.fork_network} from RPC: {plan.fork_url}")
        if plan.chain_id is not None:
            out(f"Using chain ID {plan.chain_id}")

    if not plan.no_reset:
        reset_local_deployments(deployments_dir, target)
    try:
        write_fork_marker(deployments_dir, target, plan.fork_network)
    except OSError as e:
        logger.error("Could not record fork source for %s: %s", target, e)

    cmd = build_node_command(plan, host, port)
    logger.info("Starting node: %s", " ".join(cmd))
    try:
        proc = runner(cmd, env=node_environment(plan))
    except FileNotFoundError:
        out(f"Could not start node: '{cmd[0]}' not found on PATH (install foundry)")
        return 1
    except KeyboardInterrupt:
        out("Node stopped")
        return 0
    except OSError as e:
        out(f"Could not start node: {e}")
        return 1

    if proc.returncode != 0:
        out(f"Node exited with code {proc.returncode}")
    return proc.returncode
