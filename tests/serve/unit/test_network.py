"""Unit tests for phonegap_serve.core.network."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from phonegap_serve.core.network import (
    FALLBACK_ADDRESS,
    _is_private_ip,
    format_url,
    get_local_ip,
)

pytestmark = pytest.mark.unit


def _udp_socket_returning(address: str) -> MagicMock:
    sock = MagicMock()
    sock.__enter__.return_value = sock
    sock.getsockname.return_value = (address, 54321)
    return sock


class TestGetLocalIp:
    """Tests for get_local_ip."""

    @patch("phonegap_serve.core.network.socket.socket")
    def test_get_local_ip_when_route_probe_succeeds_then_returns_interface_address(
        self, mock_socket: MagicMock
    ) -> None:
        mock_socket.return_value = _udp_socket_returning("192.168.1.23")

        assert get_local_ip() == "192.168.1.23"
        mock_socket.return_value.connect.assert_called_once_with(("8.8.8.8", 80))

    @patch("phonegap_serve.core.network.socket.gethostbyname", return_value="10.0.0.7")
    @patch("phonegap_serve.core.network.socket.socket")
    def test_get_local_ip_when_route_probe_fails_then_uses_hostname(
        self, mock_socket: MagicMock, _mock_lookup: MagicMock
    ) -> None:
        mock_socket.return_value = _udp_socket_returning("")
        mock_socket.return_value.connect.side_effect = OSError("Network is unreachable")

        assert get_local_ip() == "10.0.0.7"

    @patch("phonegap_serve.core.network.socket.gethostbyname", side_effect=OSError("no dns"))
    @patch("phonegap_serve.core.network.socket.socket", side_effect=OSError("no sockets"))
    def test_get_local_ip_when_everything_fails_then_placeholder(
        self, _mock_socket: MagicMock, _mock_lookup: MagicMock
    ) -> None:
        assert get_local_ip() == FALLBACK_ADDRESS == "127.0.0.1"

    @patch("phonegap_serve.core.network.socket.gethostbyname", return_value="172.16.4.2")
    @patch("phonegap_serve.core.network.socket.socket")
    def test_get_local_ip_when_probe_returns_unspecified_then_uses_hostname(
        self, mock_socket: MagicMock, _mock_lookup: MagicMock
    ) -> None:
        mock_socket.return_value = _udp_socket_returning("0.0.0.0")

        assert get_local_ip() == "172.16.4.2"

    def test_get_local_ip_when_called_for_real_then_returns_string(self) -> None:
        address = get_local_ip()

        assert isinstance(address, str)
        assert address


class TestIsPrivateIp:
    """Tests for _is_private_ip."""

    @pytest.mark.parametrize(
        ("ip", "expected"),
        [
            ("10.1.2.3", True),
            ("172.16.0.1", True),
            ("172.31.255.255", True),
            ("172.32.0.1", False),
            ("192.168.0.10", True),
            ("127.0.0.1", True),
            ("8.8.8.8", False),
            ("300.1.1.1", False),
            ("1.2.3", False),
            ("not-an-ip", False),
        ],
    )
    def test_is_private_ip(self, ip: str, expected: bool) -> None:
        assert _is_private_ip(ip) is expected


def test_format_url() -> None:
    assert format_url("192.168.1.23", 3000) == "http://192.168.1.23:3000/"
