"""
Windows Wi-Fi adapter implementation.
Shells out to 'netsh wlan'. Power toggling is not available on this platform.
"""

import logging
import re
from typing import List, Optional

from aw_watcher_network.errors import ParseError, PowerControlUnsupported
from aw_watcher_network.wifi.adapter import (
    InterfacePowerState,
    WifiAdapter,
    WifiNetwork,
)
from aw_watcher_network.wifi.commands import run_command

logger = logging.getLogger(__name__)

_NETWORK_SSID_RE = re.compile(r'^\s*SSID \d+\s*:\s?(.*)$')
_SIGNAL_RE = re.compile(r'^\s*Signal\s*:\s*(\d+)%')
_IFACE_SSID_RE = re.compile(r'^\s*SSID\s*:\s?(.*)$')
_IFACE_STATE_RE = re.compile(r'^\s*State\s*:\s*(\S.*)$')


class WindowsAdapter(WifiAdapter):
    """Wi-Fi adapter implementation using netsh (scan and association only)."""

    supports_power_control = False
    name = "netsh"

    def __init__(self, command_timeout_seconds: float = 10):
        self.command_timeout_seconds = command_timeout_seconds

    def get_power_state(self) -> InterfacePowerState:
        return InterfacePowerState.UNKNOWN

    def set_power_state(self, state: InterfacePowerState) -> None:
        raise PowerControlUnsupported(
            "Wi-Fi power control is not supported on Windows")

    def scan_networks(self, timeout_seconds: float = 20) -> List[WifiNetwork]:
        """
        Scan using 'netsh wlan show networks mode=bssid'.
        One SSID block may list several BSSIDs; the strongest signal is kept per block.
        """
        result = run_command(
            ['netsh', 'wlan', 'show', 'networks', 'mode=bssid'],
            timeout_seconds=timeout_seconds)

        networks = []
        ssid = None
        signal = None
        seen_block = False

        for line in result.stdout.splitlines():
            match = _NETWORK_SSID_RE.match(line)
            if match:
                if ssid:
                    networks.append(WifiNetwork(ssid, signal))
                ssid = match.group(1).strip()
                signal = None
                seen_block = True
                continue

            match = _SIGNAL_RE.match(line)
            if match and ssid is not None:
                value = float(match.group(1))
                signal = value if signal is None else max(signal, value)

        if ssid:
            networks.append(WifiNetwork(ssid, signal))

        if not seen_block and 'Interface name' not in result.stdout:
            raise ParseError("Unexpected netsh networks output", result.stdout)

        logger.info(f"Scan found {len(networks)} networks")
        return networks

    def get_connected_ssid(self) -> Optional[str]:
        """Get the SSID of a connected interface from 'netsh wlan show interfaces'."""
        result = run_command(
            ['netsh', 'wlan', 'show', 'interfaces'],
            timeout_seconds=self.command_timeout_seconds)

        state = None
        for line in result.stdout.splitlines():
            match = _IFACE_STATE_RE.match(line)
            if match:
                state = match.group(1).strip().lower()
                continue
            match = _IFACE_SSID_RE.match(line)
            if match and state == 'connected':
                return match.group(1).strip() or None
        return None
