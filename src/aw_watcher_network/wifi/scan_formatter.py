"""
Deduplication and formatting of raw Wi-Fi scan listings.
Platform tools may report one network several times (per band or BSSID).
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from aw_watcher_network.wifi.adapter import WifiNetwork

NOT_CONNECTED = "Not connected"


@dataclass(frozen=True)
class WifiScanResult:
    """Deduplicated scan plus the currently associated network."""
    networks: Tuple[WifiNetwork, ...] = ()
    connected_ssid: Optional[str] = None

    @property
    def title(self) -> str:
        """Display label: connected SSID or 'Not connected'."""
        return self.connected_ssid or NOT_CONNECTED

    @property
    def ssids(self) -> List[str]:
        return [network.ssid for network in self.networks]

    def to_event_data(self) -> Dict[str, Any]:
        """Convert to the heartbeat data payload."""
        return {
            "title": self.title,
            "ssid": self.title,
            "networks": self.ssids,
        }


def _is_stronger(candidate: Optional[float], current: Optional[float]) -> bool:
    if candidate is None:
        return False
    if current is None:
        return True
    return candidate > current


def deduplicate_networks(networks: Iterable[WifiNetwork]) -> List[WifiNetwork]:
    """
    Collapse duplicate SSIDs, keeping the strongest signal reading.

    SSIDs are trimmed and compared case-sensitively. Hidden networks (empty
    SSID) are dropped. Output keeps first-seen order; on equal or missing
    readings the first entry wins.
    """
    best: Dict[str, WifiNetwork] = {}
    for network in networks:
        ssid = network.key
        if not ssid:
            continue
        current = best.get(ssid)
        if current is None or _is_stronger(
                network.signal_strength, current.signal_strength):
            # dict keeps the original insertion position on update
            best[ssid] = WifiNetwork(ssid, network.signal_strength)
    return list(best.values())


def build_scan_result(
        networks: Iterable[WifiNetwork],
        connected_ssid: Optional[str]) -> WifiScanResult:
    """
    Build a WifiScanResult from raw adapter output.

    The association query is trusted even if the connected SSID did not
    show up in the scan list.
    """
    connected = (connected_ssid or "").strip() or None
    return WifiScanResult(
        networks=tuple(deduplicate_networks(networks)),
        connected_ssid=connected,
    )
