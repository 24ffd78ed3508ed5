"""
Unit tests for the watcher entry point.
Config loading, the event server and the run loop are patched.
"""

from unittest.mock import patch

import pytest

from aw_watcher_network import main as entry
from aw_watcher_network.config import PollingConfig
from aw_watcher_network.errors import ConfigError, EventSinkError
from aw_watcher_network.events.client import EventClient
from aw_watcher_network.watcher_service import NetworkWatcher

NO_WIFI = PollingConfig(wifi_enabled=False)


@pytest.fixture(autouse=True)
def no_signal_handlers():
    with patch('aw_watcher_network.main.signal.signal') as mock_signal:
        yield mock_signal


class TestExitCodes:
    """Test process exit codes for fatal conditions."""

    @patch('aw_watcher_network.main.load_config',
           side_effect=ConfigError("Cannot read config /etc/x.yaml"))
    def test_unreadable_config_exits_2(self, mock_load):
        assert entry.main(["--config", "/etc/x.yaml"]) == 2
        mock_load.assert_called_once_with("/etc/x.yaml")

    @patch.object(EventClient, 'wait_for_server',
                  side_effect=EventSinkError("Event server unreachable"))
    @patch('aw_watcher_network.main.load_config', return_value=NO_WIFI)
    def test_unreachable_server_exits_1(self, mock_load, mock_wait):
        with patch.object(NetworkWatcher, 'run_forever') as mock_run:
            assert entry.main([]) == 1
        mock_wait.assert_called_once()
        mock_run.assert_not_called()

    @patch.object(EventClient, 'create_bucket',
                  side_effect=EventSinkError("500 Server Error"))
    @patch.object(EventClient, 'wait_for_server', return_value={})
    @patch('aw_watcher_network.main.load_config', return_value=NO_WIFI)
    def test_bucket_creation_failure_exits_1(self, mock_load, mock_wait,
                                             mock_create):
        assert entry.main([]) == 1

    @patch.object(NetworkWatcher, 'run_forever', autospec=True)
    @patch.object(EventClient, 'create_bucket', return_value=None)
    @patch.object(EventClient, 'wait_for_server', return_value={})
    @patch('aw_watcher_network.main.load_config', return_value=NO_WIFI)
    def test_clean_run_exits_0(self, mock_load, mock_wait, mock_create,
                               mock_run, no_signal_handlers):
        assert entry.main([]) == 0
        mock_run.assert_called_once()
        assert no_signal_handlers.call_count == 2


@patch.object(NetworkWatcher, 'run_forever', autospec=True)
@patch.object(EventClient, 'create_bucket', return_value=None)
@patch.object(EventClient, 'wait_for_server', return_value={})
class TestServerSelection:
    """Test which event server the watcher reports to."""

    def run_main(self, argv, mock_run, config=NO_WIFI):
        with patch('aw_watcher_network.main.load_config', return_value=config):
            assert entry.main(argv) == 0
        watcher = mock_run.call_args.args[0]
        return watcher.client

    def test_configured_port(self, mock_wait, mock_create, mock_run):
        client = self.run_main([], mock_run)
        assert client.base_url == "http://localhost:5600/api/0"

    def test_testing_flag_selects_testing_port(self, mock_wait, mock_create,
                                               mock_run):
        client = self.run_main(["--testing"], mock_run)
        assert client.base_url == "http://localhost:5666/api/0"

    def test_explicit_port_wins(self, mock_wait, mock_create, mock_run):
        client = self.run_main(["--testing", "--port", "5700"], mock_run)
        assert client.base_url == "http://localhost:5700/api/0"

    def test_host_from_config(self, mock_wait, mock_create, mock_run):
        config = PollingConfig(wifi_enabled=False, server_host="aw.local")
        client = self.run_main([], mock_run, config=config)
        assert client.base_url == "http://aw.local:5600/api/0"

    @patch('aw_watcher_network.main.select_adapter')
    def test_wifi_disabled_skips_adapter(self, mock_select, mock_wait,
                                         mock_create, mock_run):
        self.run_main([], mock_run)
        mock_select.assert_not_called()
