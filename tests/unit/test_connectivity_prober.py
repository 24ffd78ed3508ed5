"""
Unit tests for the connectivity prober.
Socket connections are mocked; no network access is needed.
"""

import socket
from unittest.mock import MagicMock, patch

import pytest

from aw_watcher_network.connectivity.prober import (
    DEFAULT_TARGETS,
    ConnectivityProber,
    ConnectivityStatus,
)

CREATE_CONNECTION = 'aw_watcher_network.connectivity.prober.socket.create_connection'


def connect_results(*outcomes):
    """Build a side_effect: True -> connected socket, exception -> raised."""
    results = []
    for outcome in outcomes:
        results.append(MagicMock() if outcome is True else outcome)
    return results


class TestConnectivityProber:
    """Test the at-least-one-success policy."""

    def test_default_targets(self):
        prober = ConnectivityProber()
        assert prober.targets == DEFAULT_TARGETS
        assert len(prober.targets) >= 3
        assert prober.timeout_seconds == 1.0

    def test_requires_targets(self):
        with pytest.raises(ValueError):
            ConnectivityProber(targets=[])

    @patch(CREATE_CONNECTION)
    def test_online_when_first_succeeds(self, mock_connect):
        mock_connect.side_effect = connect_results(True)
        prober = ConnectivityProber()

        assert prober.check_connectivity() == ConnectivityStatus.ONLINE
        mock_connect.assert_called_once_with(("1.1.1.1", 53), timeout=1.0)

    @patch(CREATE_CONNECTION)
    def test_online_when_only_last_succeeds(self, mock_connect):
        mock_connect.side_effect = connect_results(
            socket.timeout("timed out"),
            ConnectionRefusedError("refused"),
            True,
        )
        prober = ConnectivityProber()

        assert prober.check_connectivity() == ConnectivityStatus.ONLINE
        assert mock_connect.call_count == 3

    @patch(CREATE_CONNECTION)
    def test_offline_when_all_fail(self, mock_connect):
        mock_connect.side_effect = OSError("Network is unreachable")
        prober = ConnectivityProber()

        assert prober.check_connectivity() == ConnectivityStatus.OFFLINE
        assert mock_connect.call_count == len(DEFAULT_TARGETS)

    @patch(CREATE_CONNECTION)
    def test_offline_when_all_time_out(self, mock_connect):
        mock_connect.side_effect = socket.timeout("timed out")
        prober = ConnectivityProber(
            targets=[("192.0.2.1", 53), ("192.0.2.2", 53)],
            timeout_seconds=0.5)

        assert prober.check_connectivity() == ConnectivityStatus.OFFLINE
        for call in mock_connect.call_args_list:
            assert call.kwargs['timeout'] == 0.5

    @patch(CREATE_CONNECTION)
    def test_probe_failure_not_raised(self, mock_connect):
        mock_connect.side_effect = socket.gaierror("name resolution")
        prober = ConnectivityProber()

        assert prober.probe("example.invalid", 53) is False

    @patch(CREATE_CONNECTION)
    def test_connection_is_closed(self, mock_connect):
        conn = MagicMock()
        mock_connect.return_value = conn
        ConnectivityProber().probe("1.1.1.1", 53)

        conn.__exit__.assert_called_once()

    def test_status_values(self):
        assert ConnectivityStatus.ONLINE.value == "online"
        assert ConnectivityStatus.OFFLINE.value == "offline"
