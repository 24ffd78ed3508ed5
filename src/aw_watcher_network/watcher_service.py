"""
Main watcher service.
Coordinates connectivity probing, Wi-Fi sampling and event emission on two
independent schedules.
"""

import logging
import socket
import threading
from typing import Any, Dict, Optional

from .config import PollingConfig
from .connectivity.prober import ConnectivityProber, ConnectivityStatus
from .errors import (
    AdapterError,
    CommandTimeout,
    CommandUnavailable,
    EventSinkError,
    ParseError,
    PowerStateRestoreFailure,
)
from .events.client import Event, EventClient
from .scheduling.periodic import DualScheduler, PeriodicActivity
from .wifi.sampler import WifiSampler
from .wifi.scan_formatter import WifiScanResult

logger = logging.getLogger(__name__)


class NetworkWatcher:
    """
    Network state watcher service.

    Lifecycle:
    1. Initialize: Create the event buckets
    2. Run: Connectivity and Wi-Fi activities tick on their own threads,
       each sending exactly one heartbeat per cycle
    3. Error handling: Per-cycle failures are logged and contained
    4. Cleanup: Stop both activities, letting in-flight scans restore Wi-Fi power
    """

    CLIENT_NAME = "aw-watcher-network"
    NETWORK_BUCKET_PREFIX = "aw-watcher-network"
    WIFI_BUCKET_PREFIX = "aw-watcher-wifi"
    NETWORK_EVENT_TYPE = "network-status"
    WIFI_EVENT_TYPE = "wifi-status"

    def __init__(
        self,
        client: EventClient,
        config: PollingConfig,
        prober: Optional[ConnectivityProber] = None,
        sampler: Optional[WifiSampler] = None,
        hostname: Optional[str] = None,
    ):
        """
        Initialize watcher service.

        Args:
            client: Event server client (shared by both activities)
            config: Loaded polling configuration
            prober: Connectivity prober (default: public DNS resolvers)
            sampler: Wi-Fi sampler; None disables Wi-Fi scanning
            hostname: Host name used in bucket ids (default: socket.gethostname())
        """
        self.client = client
        self.config = config
        self.prober = prober or ConnectivityProber()
        self.sampler = sampler if config.wifi_enabled else None
        self.hostname = hostname or socket.gethostname()

        self.scheduler: Optional[DualScheduler] = None
        self._last_status: Optional[ConnectivityStatus] = None
        self._last_wifi: Optional[WifiScanResult] = None

        logger.info(f"NetworkWatcher initialized for host {self.hostname}")

    @property
    def network_bucket_id(self) -> str:
        return f"{self.NETWORK_BUCKET_PREFIX}_{self.hostname}"

    @property
    def wifi_bucket_id(self) -> str:
        return f"{self.WIFI_BUCKET_PREFIX}_{self.hostname}"

    @property
    def wifi_active(self) -> bool:
        return self.sampler is not None

    def initialize(self) -> None:
        """
        Create event buckets.

        Raises:
            EventSinkError: If the server rejects bucket creation
        """
        self.client.create_bucket(
            self.network_bucket_id, self.NETWORK_EVENT_TYPE, self.hostname)
        if self.wifi_active:
            self.client.create_bucket(
                self.wifi_bucket_id, self.WIFI_EVENT_TYPE, self.hostname)

    def _send(self, bucket_id: str, data: Dict[str, Any],
              pulsetime: float) -> bool:
        try:
            self.client.heartbeat(bucket_id, Event.now(data), pulsetime)
            return True
        except EventSinkError as e:
            logger.error(f"Failed to send heartbeat: {e}")
            return False

    def connectivity_cycle(self) -> ConnectivityStatus:
        """Probe reachability and send one connectivity heartbeat."""
        status = self.prober.check_connectivity()
        if status != self._last_status:
            logger.info(f"Connectivity is now {status.value}")
        self._last_status = status

        self._send(
            self.network_bucket_id,
            {"status": status.value, "title": status.value},
            2.0 * self.config.polling_interval,
        )
        return status

    def wifi_cycle(self) -> WifiScanResult:
        """
        Scan Wi-Fi and send one heartbeat.

        A failed scan still emits an event with an empty network list.
        """
        if self.sampler is None:
            raise RuntimeError("Wi-Fi scanning is disabled")

        try:
            result = self.sampler.sample()
        except PowerStateRestoreFailure as e:
            logger.error(f"Wi-Fi scan left interface powered on: {e}")
            result = WifiScanResult()
        except (CommandUnavailable, ParseError, CommandTimeout) as e:
            logger.warning(f"Wi-Fi scan skipped: {e}")
            result = WifiScanResult()
        except AdapterError as e:
            logger.error(f"Wi-Fi scan failed: {e}")
            result = WifiScanResult()

        self._last_wifi = result
        self._send(
            self.wifi_bucket_id,
            result.to_event_data(),
            2.0 * self.config.wifi_scan_interval,
        )
        return result

    def build_scheduler(self) -> DualScheduler:
        activities = [
            PeriodicActivity(
                "connectivity",
                self.config.polling_interval,
                self.connectivity_cycle,
            )
        ]
        if self.wifi_active:
            activities.append(PeriodicActivity(
                "wifi",
                self.config.wifi_scan_interval,
                self.wifi_cycle,
            ))
        return DualScheduler(activities)

    def start(self) -> None:
        if self.scheduler is not None and self.scheduler.is_running():
            raise RuntimeError("NetworkWatcher already running")
        self.scheduler = self.build_scheduler()
        self.scheduler.start()
        logger.info(
            f"Polling connectivity every {self.config.polling_interval}s"
            + (f", Wi-Fi every {self.config.wifi_scan_interval}s"
               if self.wifi_active else ", Wi-Fi scanning disabled"))

    def stop(self) -> None:
        """Stop both activities and wait for in-flight cycles."""
        if self.scheduler is not None:
            self.scheduler.stop()
        logger.info("NetworkWatcher stopped")

    def run_forever(self, stop_event: threading.Event) -> None:
        """Run until stop_event is set."""
        self.start()
        try:
            stop_event.wait()
        finally:
            self.stop()

    def get_status(self) -> Dict[str, Any]:
        """Get service status for diagnostics."""
        activities = self.scheduler.activities if self.scheduler else []
        return {
            'hostname': self.hostname,
            'wifi_active': self.wifi_active,
            'last_connectivity': (
                self._last_status.value if self._last_status else None),
            'last_wifi_title': (
                self._last_wifi.title if self._last_wifi else None),
            'activities': {
                activity.name: {
                    'state': activity.state.value,
                    'cycles': activity.cycle_count,
                    'errors': activity.error_count,
                }
                for activity in activities
            },
        }
