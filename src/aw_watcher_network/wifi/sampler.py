"""
Wi-Fi sampler: one guarded scan plus association query per cycle.
"""

import logging
import time
from typing import Callable

from aw_watcher_network.errors import AdapterError
from aw_watcher_network.wifi.adapter import WifiAdapter
from aw_watcher_network.wifi.power_guard import (
    DEFAULT_SETTLE_SECONDS,
    wifi_enabled,
)
from aw_watcher_network.wifi.scan_formatter import (
    WifiScanResult,
    build_scan_result,
)

logger = logging.getLogger(__name__)


class WifiSampler:
    """Runs a Wi-Fi scan inside the power guard and formats the result."""

    def __init__(
        self,
        adapter: WifiAdapter,
        scan_timeout_seconds: float = 20,
        settle_seconds: float = DEFAULT_SETTLE_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            adapter: Platform Wi-Fi adapter
            scan_timeout_seconds: Bound for the platform listing command
            settle_seconds: Wait after powering the interface up
            sleep: Sleep function (injectable for tests)
        """
        self.adapter = adapter
        self.scan_timeout_seconds = scan_timeout_seconds
        self.settle_seconds = settle_seconds
        self._sleep = sleep

    def sample(self) -> WifiScanResult:
        """
        Perform one scan cycle.

        Raises:
            AdapterError: If the scan itself fails; the power state is restored first
        """
        with wifi_enabled(self.adapter, self.settle_seconds, self._sleep):
            networks = self.adapter.scan_networks(self.scan_timeout_seconds)
            try:
                connected = self.adapter.get_connected_ssid()
            except AdapterError as e:
                # Keep the scan; only the association query failed
                logger.warning(f"Could not read association state: {e}")
                connected = None

        result = build_scan_result(networks, connected)
        logger.debug(
            f"Wi-Fi sample: {len(result.networks)} networks, "
            f"connected={result.title!r}")
        return result
