"""
Platform adapter selection.
The adapter variant is chosen once at startup from the detected OS.
"""

import logging
import platform
from typing import Optional

from aw_watcher_network.wifi.adapter import WifiAdapter

logger = logging.getLogger(__name__)


def select_adapter(system: Optional[str] = None) -> Optional[WifiAdapter]:
    """
    Select the Wi-Fi adapter for the host OS.

    Args:
        system: Override for platform.system() (e.g. 'darwin', 'linux', 'windows')

    Returns:
        WifiAdapter implementation, or None if the platform is unsupported
    """
    name = (system or platform.system()).lower()

    if name in ('darwin', 'macos', 'mac'):
        from aw_watcher_network.wifi.macos_adapter import MacOSAdapter
        adapter = MacOSAdapter()
    elif name == 'linux':
        from aw_watcher_network.wifi.linux_adapter import LinuxAdapter
        adapter = LinuxAdapter()
    elif name == 'windows':
        from aw_watcher_network.wifi.windows_adapter import WindowsAdapter
        adapter = WindowsAdapter()
    else:
        logger.warning(f"Wi-Fi scanning not supported on platform {name!r}")
        return None

    logger.info(f"Using {adapter.name} Wi-Fi adapter for platform {name!r}")
    return adapter
