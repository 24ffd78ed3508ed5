"""
Wi-Fi power guard.

Powers the wireless interface up for the duration of a scan and returns it
to its prior state on every exit path (success, scan error, timeout).
"""

import logging
import time
from contextlib import contextmanager
from typing import Callable, Iterator, TypeVar

from aw_watcher_network.errors import AdapterError, PowerStateRestoreFailure
from aw_watcher_network.wifi.adapter import InterfacePowerState, WifiAdapter

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_SETTLE_SECONDS = 3.0


@contextmanager
def wifi_enabled(
    adapter: WifiAdapter,
    settle_seconds: float = DEFAULT_SETTLE_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> Iterator[InterfacePowerState]:
    """
    Context manager keeping Wi-Fi powered inside the block.

    Yields the power state captured on entry. The interface is switched back
    off on exit if and only if it was off on entry.

    Raises:
        PowerStateRestoreFailure: If the interface could not be switched back off
    """
    if not adapter.supports_power_control:
        yield InterfacePowerState.UNKNOWN
        return

    try:
        initial = adapter.get_power_state()
    except AdapterError as e:
        logger.warning(f"Could not read Wi-Fi power state: {e}")
        initial = InterfacePowerState.UNKNOWN

    if initial == InterfacePowerState.OFF:
        logger.info("Wi-Fi is off; enabling for scan")
        try:
            adapter.set_power_state(InterfacePowerState.ON)
            sleep(settle_seconds)
        except BaseException:
            _restore_off(adapter)
            raise

    try:
        yield initial
    finally:
        if initial == InterfacePowerState.OFF:
            _restore_off(adapter)


def _restore_off(adapter: WifiAdapter) -> None:
    try:
        adapter.set_power_state(InterfacePowerState.OFF)
    except AdapterError as e:
        logger.critical(
            f"Failed to restore Wi-Fi power state to off: {e}")
        raise PowerStateRestoreFailure(
            f"Wi-Fi left powered on after scan: {e}") from e
    logger.info("Wi-Fi power state restored to off")


def with_wifi_enabled(
    adapter: WifiAdapter,
    fn: Callable[[], T],
    settle_seconds: float = DEFAULT_SETTLE_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Run fn with Wi-Fi powered and return its result."""
    with wifi_enabled(adapter, settle_seconds, sleep):
        return fn()
