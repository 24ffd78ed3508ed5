"""
Exception hierarchy for the network watcher.
Adapter errors are contained within a single sampling cycle; only
configuration and event sink startup failures are fatal.
"""

from typing import Optional, Sequence


class AdapterError(Exception):
    """Base class for failures talking to platform Wi-Fi tooling."""


class CommandUnavailable(AdapterError):
    """Required native tool is not installed."""

    def __init__(self, command: str):
        super().__init__(f"Command not available: {command}")
        self.command = command


class CommandTimeout(AdapterError):
    """Native command exceeded its time bound."""

    def __init__(self, command: str, timeout_seconds: float):
        super().__init__(
            f"Command timed out after {timeout_seconds}s: {command}")
        self.command = command
        self.timeout_seconds = timeout_seconds


class CommandFailed(AdapterError):
    """Native command exited with a non-zero status."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str = ""):
        command = " ".join(args)
        message = f"Command failed with exit code {returncode}: {command}"
        if stderr:
            message = f"{message} ({stderr.strip()})"
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class ParseError(AdapterError):
    """Tool output did not match the expected textual shape."""

    def __init__(self, message: str, output: Optional[str] = None):
        super().__init__(message)
        self.output = output


class PowerControlUnsupported(AdapterError):
    """Platform cannot toggle the wireless interface power state."""


class PowerStateRestoreFailure(AdapterError):
    """Interface could not be returned to its prior power state."""


class ConfigError(Exception):
    """Configuration file exists but cannot be used at all."""


class EventSinkError(Exception):
    """Event logging server rejected a request or is unreachable."""
