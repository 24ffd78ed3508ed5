import logging
import os
from dataclasses import asdict, dataclass, fields
from typing import Optional

import yaml

from aw_watcher_network.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.join(
    '~', '.config', 'activitywatch', 'aw-watcher-network', 'config.yaml')


@dataclass(frozen=True)
class PollingConfig:
    polling_interval: int = 5
    wifi_scan_interval: int = 300
    wifi_enabled: bool = True
    server_host: str = "localhost"
    server_port: int = 5600
    log_level: str = "INFO"
    log_file: Optional[str] = None
    platform: Optional[str] = None


DEFAULTS = PollingConfig()

# Written to a freshly created config file
DEFAULT_FILE_VALUES = {
    'polling_interval': DEFAULTS.polling_interval,
    'wifi_scan_interval': DEFAULTS.wifi_scan_interval,
}

_MIN_INTERVAL = 1


def resolve_config_path(path: str | None = None) -> str:
    cfg_path = path or os.environ.get(
        'AW_WATCHER_NETWORK_CONFIG') or DEFAULT_CONFIG_PATH
    return os.path.abspath(os.path.expanduser(cfg_path))


def write_default_config(cfg_path: str) -> None:
    os.makedirs(os.path.dirname(cfg_path), exist_ok=True)
    with open(cfg_path, 'w', encoding='utf-8') as fh:
        yaml.safe_dump(DEFAULT_FILE_VALUES, fh, default_flow_style=False)
    logger.info(f"Created default config at {cfg_path}")


def _read_mapping(cfg_path: str) -> dict:
    try:
        with open(cfg_path, 'r', encoding='utf-8') as fh:
            data = yaml.safe_load(fh)
    except yaml.YAMLError as e:
        logger.error(f"Config {cfg_path} is not valid YAML, using defaults: {e}")
        return {}
    except OSError as e:
        raise ConfigError(f"Cannot read config {cfg_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.error(f"Config {cfg_path} is not a mapping, using defaults")
        return {}
    return data


def _coerce(name: str, value, default):
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        raise ValueError("expected true/false")
    if name in ('polling_interval', 'wifi_scan_interval', 'server_port'):
        if isinstance(value, bool):
            raise ValueError("expected a number")
        number = int(value)
        if name != 'server_port' and number < _MIN_INTERVAL:
            raise ValueError(f"must be at least {_MIN_INTERVAL} second")
        return number
    if value is None:
        return None
    return str(value)


def load_config(path: str | None = None) -> PollingConfig:
    """
    Load watcher configuration, creating the file with defaults if missing.
    Invalid values fall back to their defaults with a warning.

    Raises:
        ConfigError: If the path exists but cannot be read
    """
    cfg_path = resolve_config_path(path)
    if not os.path.exists(cfg_path):
        try:
            write_default_config(cfg_path)
        except OSError as e:
            logger.warning(f"Could not create config {cfg_path}: {e}")
        return DEFAULTS

    data = _read_mapping(cfg_path)
    values = {}
    defaults = asdict(DEFAULTS)
    for f in fields(PollingConfig):
        if f.name not in data:
            continue
        try:
            values[f.name] = _coerce(f.name, data[f.name], defaults[f.name])
        except (TypeError, ValueError) as e:
            logger.warning(
                f"Invalid {f.name}={data[f.name]!r} in {cfg_path} ({e}); "
                f"using default {defaults[f.name]!r}")

    unknown = sorted(set(data) - set(defaults))
    if unknown:
        logger.warning(f"Ignoring unknown config keys: {', '.join(map(str, unknown))}")

    return PollingConfig(**values)
