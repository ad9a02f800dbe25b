"""Unit tests for the RCON transports.

The datagram transport is exercised against a real UDP responder bound to
the loopback interface; the stream transport is checked for its explicit
refusal to open.
"""

import socket
import time
from unittest.mock import MagicMock

import pytest

from q2rcon.rconclient.errors import (
    RCONClientCloseFailed,
    RCONClientNotConnected,
    RCONClientNotSupported,
)
from q2rcon.rconclient.transport import (
    DatagramTransport,
    StreamTransport,
    TransportKind,
    create_transport,
)

SHORT_TIMEOUT_MS = 100
REPLY_TIMEOUT_MS = 2000


class TestDatagramTransport:
    """Test suite for the UDP transport."""

    def test_round_trip_with_local_server(self, rcon_server) -> None:
        """Test that one datagram goes out and one fragment comes back."""
        server = rcon_server([b"pong"])
        transport = DatagramTransport("127.0.0.1", server.port)
        transport.open()

        try:
            transport.send_bytes(b"ping")
            fragment = transport.receive_fragment(REPLY_TIMEOUT_MS)
        finally:
            transport.close()

        assert fragment == b"pong"
        assert server.received == [b"ping"]

    def test_receive_times_out_without_reply(self, rcon_server) -> None:
        """Test that a silent server raises TimeoutError."""
        server = rcon_server([])
        transport = DatagramTransport("127.0.0.1", server.port)
        transport.open()

        try:
            with pytest.raises(TimeoutError):
                transport.receive_fragment(SHORT_TIMEOUT_MS)
        finally:
            transport.close()

    def test_discard_pending_drops_queued_datagrams(self, rcon_server) -> None:
        """Test that datagrams already queued are dropped without blocking."""
        server = rcon_server([b"one", b"two"])
        transport = DatagramTransport("127.0.0.1", server.port)
        transport.open()

        try:
            transport.send_bytes(b"ping")
            time.sleep(0.2)

            assert transport.discard_pending() == 2
            assert transport.discard_pending() == 0
            with pytest.raises(TimeoutError):
                transport.receive_fragment(SHORT_TIMEOUT_MS)
        finally:
            transport.close()

    def test_unknown_host_raises_os_error(self) -> None:
        """Test that name resolution failures surface as OSError."""
        transport = DatagramTransport("invalid_host", 12345)

        with pytest.raises(OSError):
            transport.open()

        assert transport.closed

    def test_operations_before_open_raise_not_connected(self) -> None:
        """Test that an unopened transport refuses I/O."""
        transport = DatagramTransport("127.0.0.1", 12345)

        with pytest.raises(RCONClientNotConnected):
            transport.send_bytes(b"ping")
        with pytest.raises(RCONClientNotConnected):
            transport.receive_fragment(SHORT_TIMEOUT_MS)
        with pytest.raises(RCONClientNotConnected):
            transport.discard_pending()

    def test_close_twice_is_safe(self) -> None:
        """Test that closing again is a no-op."""
        transport = DatagramTransport("127.0.0.1", 12345)
        transport.open()

        transport.close()
        transport.close()

        assert transport.closed

    def test_close_failure_is_logged_not_raised(self, caplog) -> None:
        """Test that socket close errors are suppressed for UDP."""
        transport = DatagramTransport("127.0.0.1", 12345)
        failing_socket = MagicMock(spec=socket.socket)
        failing_socket.close.side_effect = OSError("close failed")
        transport._socket = failing_socket  # noqa: SLF001

        transport.close()

        assert transport.closed
        assert "Error closing UDP socket" in caplog.text


class TestStreamTransport:
    """Test suite for the unsupported TCP transport."""

    def test_open_is_not_supported(self) -> None:
        """Test that opening a stream transport fails explicitly."""
        transport = StreamTransport("127.0.0.1", 12345)

        with pytest.raises(RCONClientNotSupported, match="not supported"):
            transport.open()

        assert transport.closed

    def test_io_without_socket_raises_not_connected(self) -> None:
        """Test that stream I/O is refused."""
        transport = StreamTransport("127.0.0.1", 12345)

        with pytest.raises(RCONClientNotConnected):
            transport.send_bytes(b"ping")
        with pytest.raises(RCONClientNotConnected):
            transport.receive_fragment(SHORT_TIMEOUT_MS)
        with pytest.raises(RCONClientNotConnected):
            transport.discard_pending()

    def test_close_without_socket_is_a_no_op(self) -> None:
        """Test that closing a never-opened stream transport is safe."""
        transport = StreamTransport("127.0.0.1", 12345)

        transport.close()
        transport.close()

    def test_close_failure_is_raised(self) -> None:
        """Test that socket close errors are wrapped for TCP."""
        transport = StreamTransport("127.0.0.1", 12345)
        failing_socket = MagicMock(spec=socket.socket)
        failing_socket.close.side_effect = OSError("close failed")
        transport._socket = failing_socket  # noqa: SLF001

        with pytest.raises(RCONClientCloseFailed) as exc_info:
            transport.close()

        assert isinstance(exc_info.value.__cause__, OSError)
        assert transport.closed


class TestCreateTransport:
    """Test suite for the transport factory."""

    def test_kinds_map_to_variants(self) -> None:
        """Test that each kind builds the matching transport."""
        assert isinstance(
            create_transport(TransportKind.DATAGRAM, "localhost", 27910),
            DatagramTransport,
        )
        assert isinstance(
            create_transport(TransportKind.STREAM, "localhost", 27910),
            StreamTransport,
        )

    def test_kind_accepts_its_value(self) -> None:
        """Test that "udp" selects the datagram transport."""
        transport = create_transport("udp", "localhost", 27910)

        assert isinstance(transport, DatagramTransport)
        assert (transport.host, transport.port) == ("localhost", 27910)
        assert transport.closed
