"""
Bounded execution of native command-line tools.
Maps process-level failures onto the adapter error taxonomy.
"""

import logging
import shutil
import subprocess
from typing import Sequence

from aw_watcher_network.errors import (
    CommandFailed,
    CommandTimeout,
    CommandUnavailable,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10


def is_available(tool: str) -> bool:
    """Check if a tool can be found on PATH."""
    return shutil.which(tool) is not None


def run_command(
        args: Sequence[str],
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        check: bool = True) -> subprocess.CompletedProcess:
    """
    Run a command and capture its text output.

    Args:
        args: Command and arguments
        timeout_seconds: Kill the command after this many seconds
        check: Raise CommandFailed on a non-zero exit status

    Returns:
        CompletedProcess with stdout/stderr as text

    Raises:
        CommandUnavailable: If the executable does not exist
        CommandTimeout: If the command exceeds timeout_seconds
        CommandFailed: If check is set and the command exits non-zero
    """
    command = " ".join(args)
    logger.debug(f"Running: {command}")
    try:
        result = subprocess.run(
            list(args),
            capture_output=True,
            text=True,
            timeout=timeout_seconds
        )
    except FileNotFoundError as e:
        raise CommandUnavailable(args[0]) from e
    except subprocess.TimeoutExpired as e:
        raise CommandTimeout(command, timeout_seconds) from e

    if check and result.returncode != 0:
        raise CommandFailed(args, result.returncode, result.stderr or "")
    return result
