"""
Internet reachability probing.
Attempts short-timeout TCP connections to several public DNS resolvers.
"""

import logging
import socket
from enum import Enum
from typing import Sequence, Tuple

logger = logging.getLogger(__name__)

DEFAULT_TARGETS: Tuple[Tuple[str, int], ...] = (
    ("1.1.1.1", 53),  # Cloudflare
    ("8.8.8.8", 53),  # Google
    ("9.9.9.9", 53),  # Quad9
)


class ConnectivityStatus(Enum):
    """Binary reachability result of one polling cycle."""
    ONLINE = "online"
    OFFLINE = "offline"


class ConnectivityProber:
    """
    Reduces several endpoint probes to ONLINE / OFFLINE.

    ONLINE if at least one endpoint accepts a connection within the timeout.
    Probing stops at the first success; no retries within a cycle.
    """

    def __init__(
        self,
        targets: Sequence[Tuple[str, int]] = DEFAULT_TARGETS,
        timeout_seconds: float = 1.0,
    ):
        if not targets:
            raise ValueError("At least one probe target is required")
        self.targets = tuple(targets)
        self.timeout_seconds = timeout_seconds

    def probe(self, host: str, port: int) -> bool:
        """Attempt a single TCP connection; failures are not raised."""
        try:
            with socket.create_connection(
                    (host, port), timeout=self.timeout_seconds):
                return True
        except OSError as e:
            logger.debug(f"Probe {host}:{port} failed: {e}")
            return False

    def check_connectivity(self) -> ConnectivityStatus:
        for host, port in self.targets:
            if self.probe(host, port):
                return ConnectivityStatus.ONLINE
        logger.info(f"All {len(self.targets)} connectivity probes failed")
        return ConnectivityStatus.OFFLINE
