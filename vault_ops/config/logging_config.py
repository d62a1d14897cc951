"""
Logging Configuration for vault-ops

Provides structured logging with:
- Timestamps
- Log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
- Optional file rotation (1 file per day) and a separate error log
- An audit line per submitted operation
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from vault_ops.executor.operations import OperationResult


# Log formats
DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
SIMPLE_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER = "vault_ops"


def default_log_dir() -> Optional[Path]:
    """Log directory from VAULT_OPS_LOG_DIR; file logging is off when unset."""
    value = os.getenv("VAULT_OPS_LOG_DIR")
    return Path(value) if value else None


def setup_logger(
    name: str = ROOT_LOGGER,
    level: int = logging.WARNING,
    log_dir: Optional[Path] = None,
    console: bool = True,
    detailed: bool = False,
) -> logging.Logger:
    """
    Setup a logger with console and (optionally) file handlers.

    Args:
        name: Logger name; the package root by default so every module logger inherits it
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for rotating log files; no file handlers when None
        console: Whether to log to the console (stderr)
        detailed: Whether to use detailed format (includes file/line)

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logger(level=logging.INFO)
        >>> logger.info("Submitting panic")
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Prevent duplicate handlers
    if logger.handlers:
        return logger

    log_format = DETAILED_FORMAT if detailed else SIMPLE_FORMAT
    formatter = logging.Formatter(log_format, datefmt=DATE_FORMAT)

    if console:
        # stdout carries command output, so diagnostics go to stderr
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)

        file_handler = TimedRotatingFileHandler(
            log_dir / f"{name}.log",
            when="midnight",
            interval=1,
            backupCount=30,  # Keep 30 days of logs
            encoding="utf-8",
        )
        file_handler.setLevel(min(level, logging.INFO))
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        error_handler = RotatingFileHandler(
            log_dir / f"{name}_errors.log",
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(logging.Formatter(DETAILED_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(error_handler)

    return logger


def log_operation(logger: logging.Logger, result: "OperationResult", network: Optional[str] = None) -> None:
    """
    Log a submitted operation in structured format.

    Args:
        logger: Logger instance
        result: Outcome of the operation
        network: Network name the operation ran against
    """
    status = "SUCCESS" if result.success else "FAILED"
    msg = f"{status} | {result.action} | {result.contract_name or '-'} @ {result.address or '-'}"
    if network:
        msg += f" | network: {network}"
    if result.tx_hash:
        msg += f" | TX: {result.tx_hash}"
    if result.error:
        msg += f" | error: {result.error}"

    if result.success:
        logger.info(msg)
    else:
        logger.error(msg)
