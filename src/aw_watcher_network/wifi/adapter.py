"""
Wi-Fi adapter interface for abstraction over platform-native tooling.
One implementation per OS family; allows test doubles to be injected in CI environments.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Optional


class InterfacePowerState(Enum):
    """Power state of the wireless interface."""
    ON = "on"
    OFF = "off"
    UNKNOWN = "unknown"


class WifiNetwork:
    """Represents a discovered Wi-Fi network."""

    def __init__(
            self,
            ssid: str,
            signal_strength: Optional[float] = None):
        """
        Args:
            ssid: Network SSID
            signal_strength: Signal strength in dBm or percentage (implementation-dependent),
                None when the tool does not report one
        """
        self.ssid = ssid
        self.signal_strength = signal_strength

    @property
    def key(self) -> str:
        """Identity of the network: the trimmed SSID."""
        return (self.ssid or "").strip()

    def __eq__(self, other: object) -> bool:
        # Same network regardless of the reading it was seen with
        if not isinstance(other, WifiNetwork):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        return (f"WifiNetwork(ssid={self.ssid!r}, "
                f"strength={self.signal_strength})")


class WifiAdapter(ABC):
    """Abstract base class for Wi-Fi adapter implementations."""

    #: Whether the platform can toggle the wireless interface on and off.
    supports_power_control = True

    #: Human readable name used in log messages.
    name = "wifi"

    #: Executable the adapter drives, if it depends on a single tool.
    tool: Optional[str] = None

    @abstractmethod
    def get_power_state(self) -> InterfacePowerState:
        """
        Query whether the wireless interface is enabled.

        Returns:
            Current InterfacePowerState

        Raises:
            CommandUnavailable: If the required native tool is missing
            ParseError: If tool output has an unexpected shape
        """

    @abstractmethod
    def set_power_state(self, state: InterfacePowerState) -> None:
        """
        Enable or disable the wireless interface.
        Setting the current state again is a successful no-op.

        Args:
            state: InterfacePowerState.ON or InterfacePowerState.OFF

        Raises:
            AdapterError: If the platform command fails
        """

    @abstractmethod
    def scan_networks(self, timeout_seconds: float = 20) -> List[WifiNetwork]:
        """
        List visible Wi-Fi networks.

        Args:
            timeout_seconds: Upper bound for the listing command

        Returns:
            List of WifiNetwork objects as reported (may contain duplicates)

        Raises:
            CommandTimeout: If the listing command exceeds the bound
            AdapterError: For any other tool failure
        """

    @abstractmethod
    def get_connected_ssid(self) -> Optional[str]:
        """
        Query the currently associated network.

        Returns:
            SSID string, or None when not associated

        Raises:
            AdapterError: If the association query fails
        """
