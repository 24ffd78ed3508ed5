"""
NetworkManager-based Wi-Fi adapter implementation.
Uses nmcli terse output for power control, scanning and association queries.
"""

import logging
from typing import List, Optional

from aw_watcher_network.errors import ParseError
from aw_watcher_network.wifi.adapter import (
    InterfacePowerState,
    WifiAdapter,
    WifiNetwork,
)
from aw_watcher_network.wifi.commands import run_command

logger = logging.getLogger(__name__)


def split_terse(line: str) -> List[str]:
    """
    Split an nmcli terse (-t) line into fields.
    Colons inside values are escaped as '\\:' and backslashes as '\\\\'.
    """
    fields = []
    current = []
    chars = iter(line)
    for ch in chars:
        if ch == '\\':
            escaped = next(chars, '')
            current.append(escaped)
        elif ch == ':':
            fields.append(''.join(current))
            current = []
        else:
            current.append(ch)
    fields.append(''.join(current))
    return fields


class NetworkManagerAdapter(WifiAdapter):
    """Wi-Fi adapter implementation using NetworkManager's nmcli."""

    name = "nmcli"
    tool = "nmcli"

    def __init__(self, command_timeout_seconds: float = 10):
        """
        Initialize NetworkManager adapter.

        Args:
            command_timeout_seconds: Timeout for non-scan nmcli calls
        """
        self.command_timeout_seconds = command_timeout_seconds

    def get_power_state(self) -> InterfacePowerState:
        """Get radio state via 'nmcli radio wifi'."""
        result = run_command(
            ['nmcli', 'radio', 'wifi'],
            timeout_seconds=self.command_timeout_seconds)
        output = result.stdout.strip().lower()
        if output == 'enabled':
            return InterfacePowerState.ON
        if output == 'disabled':
            return InterfacePowerState.OFF
        raise ParseError(
            f"Unexpected 'nmcli radio wifi' output: {output!r}",
            result.stdout)

    def set_power_state(self, state: InterfacePowerState) -> None:
        """Switch the Wi-Fi radio on or off."""
        if state == InterfacePowerState.UNKNOWN:
            raise ValueError("Cannot set power state to UNKNOWN")
        value = 'on' if state == InterfacePowerState.ON else 'off'
        run_command(
            ['nmcli', 'radio', 'wifi', value],
            timeout_seconds=self.command_timeout_seconds)
        logger.info(f"Wi-Fi radio switched {value}")

    def scan_networks(self, timeout_seconds: float = 20) -> List[WifiNetwork]:
        """
        Scan using 'nmcli device wifi list'.
        Signal strength is reported as a percentage.
        """
        result = run_command(
            ['nmcli', '-t', '-f', 'IN-USE,SSID,SIGNAL',
             'device', 'wifi', 'list', '--rescan', 'auto'],
            timeout_seconds=timeout_seconds)
        networks = [
            network for _in_use, network in self._parse_list(result.stdout)]
        logger.info(f"Scan found {len(networks)} networks")
        return networks

    def get_connected_ssid(self) -> Optional[str]:
        """Get the active SSID via 'nmcli -t -f ACTIVE,SSID device wifi'."""
        result = run_command(
            ['nmcli', '-t', '-f', 'ACTIVE,SSID', 'device', 'wifi'],
            timeout_seconds=self.command_timeout_seconds)

        for line in result.stdout.splitlines():
            if not line.strip():
                continue
            fields = split_terse(line)
            if len(fields) < 2:
                raise ParseError(
                    f"Unexpected nmcli association line: {line!r}",
                    result.stdout)
            if fields[0] == 'yes' and fields[1]:
                return fields[1]
        return None

    @staticmethod
    def _parse_list(output: str):
        """Yield (in_use, WifiNetwork) pairs from terse list output."""
        for line in output.splitlines():
            if not line.strip():
                continue

            # Format: IN-USE:SSID:SIGNAL
            fields = split_terse(line)
            if len(fields) != 3:
                raise ParseError(
                    f"Unexpected nmcli scan line: {line!r}", output)

            in_use, ssid, signal = fields
            if ssid in ('', '--'):
                continue
            try:
                strength = float(signal) if signal else None
            except ValueError as e:
                raise ParseError(
                    f"Invalid signal value {signal!r}", output) from e

            yield in_use == '*', WifiNetwork(ssid, strength)
