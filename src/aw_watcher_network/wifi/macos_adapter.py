"""
macOS Wi-Fi adapter implementation.
Uses networksetup for power control and system_profiler for scanning and association.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from aw_watcher_network.errors import ParseError
from aw_watcher_network.wifi.adapter import (
    InterfacePowerState,
    WifiAdapter,
    WifiNetwork,
)
from aw_watcher_network.wifi.commands import run_command

logger = logging.getLogger(__name__)

_POWER_RE = re.compile(r'Wi-Fi Power \([^)]*\):\s*(On|Off)', re.IGNORECASE)
_SIGNAL_RE = re.compile(r'(-?\d+)\s*dBm')


def parse_signal_noise(value: Optional[str]) -> Optional[float]:
    """Extract the signal part of e.g. '-40 dBm / -90 dBm'."""
    if not value:
        return None
    match = _SIGNAL_RE.search(value)
    return float(match.group(1)) if match else None


class MacOSAdapter(WifiAdapter):
    """Wi-Fi adapter implementation for macOS."""

    name = "macos"

    def __init__(
            self,
            interface: Optional[str] = None,
            command_timeout_seconds: float = 10):
        """
        Initialize macOS adapter.

        Args:
            interface: Wi-Fi hardware device (default: detected, else en0)
            command_timeout_seconds: Timeout for networksetup calls
        """
        self.command_timeout_seconds = command_timeout_seconds
        self._interface = interface
        # Record from the last scan, consumed by the next association query
        self._scanned_record: Optional[Dict[str, Any]] = None

    @property
    def interface(self) -> str:
        if self._interface is None:
            self._interface = self._detect_interface()
        return self._interface

    def _detect_interface(self) -> str:
        """Get the Wi-Fi device name from networksetup hardware ports."""
        result = run_command(
            ['networksetup', '-listallhardwareports'],
            timeout_seconds=self.command_timeout_seconds)

        lines = result.stdout.splitlines()
        for i, line in enumerate(lines):
            if ('Wi-Fi' in line or 'AirPort' in line) and i + 1 < len(lines):
                device_line = lines[i + 1]
                if device_line.startswith('Device:'):
                    return device_line.split(':', 1)[1].strip()
        logger.debug("No Wi-Fi hardware port listed; assuming en0")
        return 'en0'

    def get_power_state(self) -> InterfacePowerState:
        result = run_command(
            ['networksetup', '-getairportpower', self.interface],
            timeout_seconds=self.command_timeout_seconds)
        match = _POWER_RE.search(result.stdout)
        if not match:
            raise ParseError(
                f"Unexpected networksetup output: {result.stdout.strip()!r}",
                result.stdout)
        if match.group(1).lower() == 'on':
            return InterfacePowerState.ON
        return InterfacePowerState.OFF

    def set_power_state(self, state: InterfacePowerState) -> None:
        if state == InterfacePowerState.UNKNOWN:
            raise ValueError("Cannot set power state to UNKNOWN")
        value = 'on' if state == InterfacePowerState.ON else 'off'
        run_command(
            ['networksetup', '-setairportpower', self.interface, value],
            timeout_seconds=self.command_timeout_seconds)
        logger.info(f"Wi-Fi power on {self.interface} switched {value}")

    def scan_networks(self, timeout_seconds: float = 20) -> List[WifiNetwork]:
        """
        List networks from system_profiler.
        The currently associated network is included first.
        """
        info = self._airport_interface(timeout_seconds)
        self._scanned_record = info
        networks = []

        current = info.get('spairport_current_network_information')
        if isinstance(current, dict) and current.get('_name'):
            networks.append(WifiNetwork(
                current['_name'],
                parse_signal_noise(current.get('spairport_signal_noise'))))

        for entry in info.get(
                'spairport_airport_other_local_wireless_networks') or []:
            if not isinstance(entry, dict) or not entry.get('_name'):
                continue
            networks.append(WifiNetwork(
                entry['_name'],
                parse_signal_noise(entry.get('spairport_signal_noise'))))

        logger.info(f"Scan found {len(networks)} networks")
        return networks

    def get_connected_ssid(self) -> Optional[str]:
        """
        Read the associated network.
        Reuses the record of a preceding scan instead of profiling again.
        """
        info, self._scanned_record = self._scanned_record, None
        if info is None:
            info = self._airport_interface(self.command_timeout_seconds * 3)
        current = info.get('spairport_current_network_information')
        if isinstance(current, dict):
            return current.get('_name') or None
        return None

    def _airport_interface(self, timeout_seconds: float) -> Dict[str, Any]:
        """Return the system_profiler record for the Wi-Fi interface."""
        result = run_command(
            ['system_profiler', 'SPAirPortDataType', '-json'],
            timeout_seconds=timeout_seconds)
        try:
            data = json.loads(result.stdout)
            interfaces = data['SPAirPortDataType'][0][
                'spairport_airport_interfaces']
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ParseError(
                f"Unexpected system_profiler output: {e}",
                result.stdout) from e

        for info in interfaces:
            if isinstance(info, dict) and info.get('_name') == self.interface:
                return info
        raise ParseError(
            f"Interface {self.interface} not reported by system_profiler",
            result.stdout)
