"""
Linux Wi-Fi adapter.
Prefers NetworkManager and falls back to wireless-tools per operation.
"""

import logging
import time
from typing import Callable, List, Optional, TypeVar

from aw_watcher_network.errors import AdapterError, CommandTimeout
from aw_watcher_network.wifi.adapter import (
    InterfacePowerState,
    WifiAdapter,
    WifiNetwork,
)
from aw_watcher_network.wifi.commands import is_available
from aw_watcher_network.wifi.nm_adapter import NetworkManagerAdapter
from aw_watcher_network.wifi.wireless_tools_adapter import WirelessToolsAdapter

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LinuxAdapter(WifiAdapter):
    """
    Composite adapter: every operation is tried on the primary adapter first.

    A missing or failing primary tool is not fatal; the same operation is
    retried on the fallback and only the fallback's error is surfaced.
    A primary whose tool is not installed is skipped altogether.

    A scan shares one time budget across both adapters, so a primary that
    times out leaves the fallback only what remains of it.
    """

    name = "linux"

    def __init__(
        self,
        primary: Optional[WifiAdapter] = None,
        fallback: Optional[WifiAdapter] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.primary = primary or NetworkManagerAdapter()
        self.fallback = fallback or WirelessToolsAdapter()
        self._clock = clock
        self.supports_power_control = (
            self.primary.supports_power_control
            or self.fallback.supports_power_control
        )

        self.primary_installed = (
            self.primary.tool is None or is_available(self.primary.tool))
        if not self.primary_installed:
            logger.info(
                f"{self.primary.tool} not found on PATH; "
                f"using {self.fallback.name} only")

    def _with_fallback(
            self,
            operation: str,
            call: Callable[[WifiAdapter], T]) -> T:
        if self.primary_installed:
            try:
                return call(self.primary)
            except AdapterError as e:
                logger.warning(
                    f"{self.primary.name} {operation} failed ({e}); "
                    f"falling back to {self.fallback.name}")
        return call(self.fallback)

    def get_power_state(self) -> InterfacePowerState:
        return self._with_fallback(
            "power query", lambda adapter: adapter.get_power_state())

    def set_power_state(self, state: InterfacePowerState) -> None:
        self._with_fallback(
            "power change", lambda adapter: adapter.set_power_state(state))

    def scan_networks(self, timeout_seconds: float = 20) -> List[WifiNetwork]:
        deadline = self._clock() + timeout_seconds

        def scan(adapter: WifiAdapter) -> List[WifiNetwork]:
            remaining = deadline - self._clock()
            if remaining <= 0:
                raise CommandTimeout(f"{adapter.name} scan", timeout_seconds)
            return adapter.scan_networks(remaining)

        return self._with_fallback("scan", scan)

    def get_connected_ssid(self) -> Optional[str]:
        return self._with_fallback(
            "association query",
            lambda adapter: adapter.get_connected_ssid())
