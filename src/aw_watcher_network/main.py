"""
Watcher entry point.
Loads configuration, connects to the event server and runs until SIGINT/SIGTERM.
"""

import argparse
import signal
import sys
import threading
from typing import List, Optional

from aw_watcher_network.config import load_config, resolve_config_path
from aw_watcher_network.connectivity.prober import ConnectivityProber
from aw_watcher_network.errors import ConfigError, EventSinkError
from aw_watcher_network.events.client import EventClient
from aw_watcher_network.logging import configure_logging
from aw_watcher_network.watcher_service import NetworkWatcher
from aw_watcher_network.wifi.sampler import WifiSampler
from aw_watcher_network.wifi.selection import select_adapter


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="aw-watcher-network",
        description="Report connectivity and Wi-Fi state to ActivityWatch")
    parser.add_argument("--config", help="Path to config.yaml")
    parser.add_argument(
        "--testing", action="store_true",
        help=f"Use the testing server port ({EventClient.TESTING_PORT})")
    parser.add_argument("--host", help="Event server host")
    parser.add_argument("--port", type=int, help="Event server port")
    parser.add_argument("--verbose", action="store_true",
                        help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Watcher entry point."""
    args = parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        configure_logging(log_level="ERROR")
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    logger = configure_logging(
        log_level="DEBUG" if args.verbose else config.log_level,
        log_file=config.log_file)
    logger.info(f"Using config {resolve_config_path(args.config)}")

    port = args.port or (
        EventClient.TESTING_PORT if args.testing else config.server_port)
    client = EventClient(
        NetworkWatcher.CLIENT_NAME,
        host=args.host or config.server_host,
        port=port)

    adapter = select_adapter(config.platform) if config.wifi_enabled else None
    watcher = NetworkWatcher(
        client,
        config,
        prober=ConnectivityProber(),
        sampler=WifiSampler(adapter) if adapter else None,
    )

    try:
        client.wait_for_server()
        watcher.initialize()
    except EventSinkError as e:
        logger.error(f"Cannot reach event server: {e}")
        return 1

    stop_event = threading.Event()

    def _request_stop(signum, _frame):
        logger.info(f"Received signal {signum}; shutting down")
        stop_event.set()

    signal.signal(signal.SIGINT, _request_stop)
    signal.signal(signal.SIGTERM, _request_stop)

    try:
        watcher.run_forever(stop_event)
    except Exception as e:
        logger.error(f"Unexpected error in watcher: {e}", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
