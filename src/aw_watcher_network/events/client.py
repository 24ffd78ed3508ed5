"""
ActivityWatch REST API client for sending watcher events.
Handles bucket creation and heartbeats; safe to share between threads.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import requests

from aw_watcher_network.errors import EventSinkError

logger = logging.getLogger(__name__)


@dataclass
class Event:
    """Single timestamped event."""
    timestamp: datetime
    duration: float = 0.0
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def now(cls, data: Dict[str, Any]) -> "Event":
        return cls(timestamp=datetime.now(timezone.utc), data=data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "timestamp": self.timestamp.isoformat(),
            "duration": self.duration,
            "data": self.data,
        }


class EventClient:
    """
    Client for the ActivityWatch server API.

    Requests are serialized with a lock so both watcher activities can
    share one client and its HTTP session.
    """

    DEFAULT_HOST = "localhost"
    DEFAULT_PORT = 5600
    TESTING_PORT = 5666

    def __init__(
        self,
        client_name: str,
        host: str = DEFAULT_HOST,
        port: int = DEFAULT_PORT,
        timeout_seconds: float = 10,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize event client.

        Args:
            client_name: Name reported when creating buckets
            host: Server host name
            port: Server port
            timeout_seconds: HTTP request timeout
            session: Optional preconfigured requests session
        """
        self.client_name = client_name
        self.base_url = f"http://{host}:{port}/api/0"
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()
        self._lock = threading.Lock()

    def _post(self, path: str, payload: Dict[str, Any],
              params: Optional[Dict[str, Any]] = None) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            with self._lock:
                response = self.session.post(
                    url,
                    json=payload,
                    params=params,
                    timeout=self.timeout_seconds
                )
        except requests.exceptions.RequestException as e:
            raise EventSinkError(f"Request to {url} failed: {e}") from e
        return response

    def get_info(self) -> Dict[str, Any]:
        """Fetch server info; used as a reachability check."""
        url = f"{self.base_url}/info"
        try:
            with self._lock:
                response = self.session.get(url, timeout=self.timeout_seconds)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            raise EventSinkError(f"Server not reachable at {url}: {e}") from e
        except ValueError as e:
            raise EventSinkError(f"Invalid server info response: {e}") from e

    def wait_for_server(
        self,
        attempts: int = 10,
        delay_seconds: float = 3.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> Dict[str, Any]:
        """
        Block until the server answers, up to a bounded number of attempts.

        Raises:
            EventSinkError: If the server never became reachable
        """
        last_error = None
        for attempt in range(1, attempts + 1):
            try:
                info = self.get_info()
                logger.info(
                    f"Connected to event server {info.get('hostname', '?')} "
                    f"(version {info.get('version', '?')})")
                return info
            except EventSinkError as e:
                last_error = e
                logger.warning(
                    f"Event server not reachable (attempt {attempt}/{attempts}): {e}")
            if attempt < attempts:
                sleep(delay_seconds)
        raise EventSinkError(
            f"Event server unreachable after {attempts} attempts: {last_error}")

    def create_bucket(self, bucket_id: str, event_type: str,
                      hostname: str) -> None:
        """
        Create a bucket; an existing bucket is not an error.

        Raises:
            EventSinkError: If the server rejects the request
        """
        response = self._post(
            f"/buckets/{bucket_id}",
            {
                "client": self.client_name,
                "type": event_type,
                "hostname": hostname,
            }
        )
        if response.status_code == 304:
            logger.debug(f"Bucket {bucket_id} already exists")
            return
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            raise EventSinkError(
                f"Failed to create bucket {bucket_id}: {e}") from e
        logger.info(f"Bucket {bucket_id} ready")

    def heartbeat(self, bucket_id: str, event: Event,
                  pulsetime: float) -> None:
        """
        Send a heartbeat; the server merges it with the previous event when
        data is equal and it falls within pulsetime seconds.

        Raises:
            EventSinkError: If the request fails
        """
        response = self._post(
            f"/buckets/{bucket_id}/heartbeat",
            event.to_dict(),
            params={"pulsetime": pulsetime}
        )
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            raise EventSinkError(
                f"Heartbeat to {bucket_id} failed: {e}") from e
