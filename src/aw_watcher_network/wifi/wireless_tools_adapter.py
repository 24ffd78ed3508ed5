"""
wireless-tools based Wi-Fi adapter implementation.
Provides fallback for systems without NetworkManager.
Shells out to iwlist, iwgetid and rfkill.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional

from aw_watcher_network.errors import ParseError
from aw_watcher_network.wifi.adapter import (
    InterfacePowerState,
    WifiAdapter,
    WifiNetwork,
)
from aw_watcher_network.wifi.commands import run_command

logger = logging.getLogger(__name__)

SYS_CLASS_NET = Path("/sys/class/net")

_CELL_RE = re.compile(r'^\s*Cell \d+ - ')
_ESSID_RE = re.compile(r'ESSID:"(.*)"')
_SIGNAL_DBM_RE = re.compile(r'Signal level[=:]\s*(-?\d+(?:\.\d+)?)\s*dBm')
_SIGNAL_RATIO_RE = re.compile(r'Signal level[=:]\s*(\d+)/(\d+)')
_BLOCKED_RE = re.compile(r'^\s*(Soft|Hard) blocked:\s*(yes|no)\s*$')


def detect_wireless_interface(default: str = "wlan0") -> str:
    """Find the first interface exposing a 'wireless' directory in sysfs."""
    try:
        for iface in sorted(SYS_CLASS_NET.iterdir()):
            if (iface / "wireless").is_dir():
                return iface.name
    except OSError as e:
        logger.debug(f"Cannot list {SYS_CLASS_NET}: {e}")
    return default


class WirelessToolsAdapter(WifiAdapter):
    """Wi-Fi adapter implementation using iwlist / iwgetid / rfkill."""

    name = "wireless-tools"

    def __init__(
            self,
            interface: Optional[str] = None,
            command_timeout_seconds: float = 10):
        """
        Initialize wireless-tools adapter.

        Args:
            interface: Wi-Fi interface name (default: first wireless interface, else wlan0)
            command_timeout_seconds: Timeout for non-scan calls
        """
        self.interface = interface or detect_wireless_interface()
        self.command_timeout_seconds = command_timeout_seconds

    def get_power_state(self) -> InterfacePowerState:
        """Interface is ON unless rfkill reports a soft or hard block."""
        result = run_command(
            ['rfkill', 'list', 'wifi'],
            timeout_seconds=self.command_timeout_seconds)

        states = []
        for line in result.stdout.splitlines():
            match = _BLOCKED_RE.match(line)
            if match:
                states.append(match.group(2) == 'yes')

        if not states:
            raise ParseError(
                "rfkill reported no wireless devices", result.stdout)
        return InterfacePowerState.OFF if any(
            states) else InterfacePowerState.ON

    def set_power_state(self, state: InterfacePowerState) -> None:
        """Block or unblock Wi-Fi via rfkill."""
        if state == InterfacePowerState.UNKNOWN:
            raise ValueError("Cannot set power state to UNKNOWN")
        action = 'unblock' if state == InterfacePowerState.ON else 'block'
        run_command(
            ['rfkill', action, 'wifi'],
            timeout_seconds=self.command_timeout_seconds)
        logger.info(f"Wi-Fi {action}ed via rfkill")

    def scan_networks(self, timeout_seconds: float = 20) -> List[WifiNetwork]:
        """
        Scan using 'iwlist <iface> scan'.
        Signal strength is in dBm when reported, otherwise a percentage.
        """
        result = run_command(
            ['iwlist', self.interface, 'scan'],
            timeout_seconds=timeout_seconds)
        networks = self._parse_scan(result.stdout)
        logger.info(f"Scan found {len(networks)} networks")
        return networks

    def get_connected_ssid(self) -> Optional[str]:
        """
        Get the associated SSID via 'iwgetid -r'.
        iwgetid exits non-zero with no output when not associated.
        """
        result = run_command(
            ['iwgetid', '-r'],
            timeout_seconds=self.command_timeout_seconds,
            check=False)
        ssid = result.stdout.strip()
        return ssid or None

    def _parse_scan(self, output: str) -> List[WifiNetwork]:
        """Parse iwlist cell blocks into networks."""
        if 'Scan completed' not in output:
            if 'No scan results' in output:
                return []
            raise ParseError("Unexpected iwlist scan output", output)

        networks = []
        ssid = None
        signal = None
        in_cell = False

        def flush():
            if in_cell and ssid:
                networks.append(WifiNetwork(ssid, signal))

        for line in output.splitlines():
            if _CELL_RE.match(line):
                flush()
                in_cell = True
                ssid = None
                signal = None
                continue

            essid = _ESSID_RE.search(line)
            if essid:
                ssid = essid.group(1)
                continue

            dbm = _SIGNAL_DBM_RE.search(line)
            if dbm:
                signal = float(dbm.group(1))
                continue

            ratio = _SIGNAL_RATIO_RE.search(line)
            if ratio and int(ratio.group(2)) > 0:
                signal = round(
                    100 * int(ratio.group(1)) / int(ratio.group(2)), 1)

        flush()
        return networks
