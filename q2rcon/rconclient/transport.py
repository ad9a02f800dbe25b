"""
Transports carrying RCON packets to a Quake II server.

A transport only moves bytes. Framing, header stripping and the timeout
policy live in the session, so every variant exposes the same four
operations: open, send_bytes, receive_fragment and close. Timeouts are
always given in milliseconds.

Only the datagram (UDP) variant is implemented. The stream (TCP) variant
exists so callers can name it, but it refuses to open.
"""

from __future__ import annotations

import logging
import socket
from abc import ABC, abstractmethod
from enum import Enum

from .codec import MAX_DATAGRAM_SIZE
from .errors import (
    RCONClientCloseFailed,
    RCONClientNotConnected,
    RCONClientNotSupported,
)

LOGGER = logging.getLogger(__name__)
LOGGER.setLevel(logging.DEBUG)


class TransportKind(Enum):
    """
    Transport variants a session can be opened with.

    :cvar DATAGRAM: Connectionless UDP, one packet per datagram
    :cvar STREAM: Connection-oriented TCP, not supported yet
    """

    DATAGRAM = "udp"
    STREAM = "tcp"


class Transport(ABC):
    """
    Byte transport bound to a single (host, port) pair.

    Owned exclusively by one session, so implementations do no locking.
    """

    def __init__(self, host: str, port: int) -> None:
        self.host = host
        self.port = port

    @property
    @abstractmethod
    def closed(self) -> bool:
        """Whether the underlying handle is released or was never opened."""

    @abstractmethod
    def open(self) -> None:
        """
        Acquire the underlying handle.

        :raises OSError: if the handle cannot be created or bound
        :raises RCONClientNotSupported: if the variant is not implemented
        """

    @abstractmethod
    def send_bytes(self, data: bytes) -> None:
        """
        Transmit one complete packet.

        :param data: The encoded packet
        :raises OSError: if the packet cannot be sent
        """

    @abstractmethod
    def receive_fragment(self, timeout_ms: float) -> bytes:
        """
        Block until one reply fragment arrives.

        :param timeout_ms: Longest wait for this attempt, in milliseconds
        :return: The raw fragment
        :raises TimeoutError: if nothing arrives in time
        :raises OSError: on any other I/O failure
        """

    @abstractmethod
    def discard_pending(self) -> int:
        """
        Drop fragments that arrived after the previous reply window closed.

        :return: The number of fragments dropped
        :raises OSError: on an I/O failure other than an empty queue
        """

    @abstractmethod
    def close(self) -> None:
        """Release the underlying handle. Calling it again is a no-op."""


class DatagramTransport(Transport):
    """UDP transport using a connected datagram socket."""

    def __init__(self, host: str, port: int) -> None:
        super().__init__(host, port)
        self._socket: socket.socket | None = None

    @property
    def closed(self) -> bool:
        return self._socket is None

    def open(self) -> None:
        if self._socket is not None:
            return

        # resolves the hostname, raising socket.gaierror for unknown hosts
        family, sock_type, proto, _, address = socket.getaddrinfo(
            self.host, self.port, type=socket.SOCK_DGRAM
        )[0]

        udp_socket = socket.socket(family, sock_type, proto)
        try:
            udp_socket.connect(address)
        except OSError:
            udp_socket.close()
            raise

        self._socket = udp_socket
        LOGGER.debug("UDP socket connected to %s:%d", self.host, self.port)

    def _require_socket(self) -> socket.socket:
        if self._socket is None:
            msg = "UDP socket is not open"
            raise RCONClientNotConnected(msg)
        return self._socket

    def send_bytes(self, data: bytes) -> None:
        self._require_socket().send(data)

    def receive_fragment(self, timeout_ms: float) -> bytes:
        udp_socket = self._require_socket()
        udp_socket.settimeout(timeout_ms / 1000)
        return udp_socket.recv(MAX_DATAGRAM_SIZE)

    def discard_pending(self) -> int:
        udp_socket = self._require_socket()
        dropped = 0

        udp_socket.setblocking(False)
        try:
            while True:
                udp_socket.recv(MAX_DATAGRAM_SIZE)
                dropped += 1
        except BlockingIOError:
            pass
        finally:
            udp_socket.setblocking(True)

        if dropped:
            LOGGER.debug(
                "Dropped %d late datagram(s) from %s:%d", dropped, self.host, self.port
            )
        return dropped

    def close(self) -> None:
        """Close the socket (best effort), logging instead of raising."""
        if self._socket is None:
            return

        udp_socket, self._socket = self._socket, None
        try:
            udp_socket.close()
        except OSError as e:
            LOGGER.warning(
                "Error closing UDP socket for %s:%d: %s", self.host, self.port, e
            )
            return

        LOGGER.debug("UDP socket for %s:%d closed", self.host, self.port)


class StreamTransport(Transport):
    """
    TCP transport placeholder.

    Quake II servers answer RCON over UDP only, so there is no stream
    framing to implement against yet. Opening always fails with
    RCONClientNotSupported, and nothing is ever acquired.
    """

    def __init__(self, host: str, port: int) -> None:
        super().__init__(host, port)
        self._socket: socket.socket | None = None

    @property
    def closed(self) -> bool:
        return self._socket is None

    def open(self) -> None:
        msg = "Stream transport is not supported yet"
        raise RCONClientNotSupported(msg)

    def send_bytes(self, data: bytes) -> None:
        msg = "TCP socket is not open"
        raise RCONClientNotConnected(msg)

    def receive_fragment(self, timeout_ms: float) -> bytes:
        msg = "TCP socket is not open"
        raise RCONClientNotConnected(msg)

    def discard_pending(self) -> int:
        msg = "TCP socket is not open"
        raise RCONClientNotConnected(msg)

    def close(self) -> None:
        """
        Close the socket if one was ever acquired.

        Unlike the datagram variant, failures are raised to the caller.

        :raises RCONClientCloseFailed: if the socket cannot be closed
        """
        if self._socket is None:
            return

        tcp_socket, self._socket = self._socket, None
        try:
            tcp_socket.close()
        except OSError as e:
            msg = f"Error closing TCP socket: {e}"
            raise RCONClientCloseFailed(msg) from e


_TRANSPORTS: dict[TransportKind, type[Transport]] = {
    TransportKind.DATAGRAM: DatagramTransport,
    TransportKind.STREAM: StreamTransport,
}


def create_transport(kind: TransportKind, host: str, port: int) -> Transport:
    """
    Build an unopened transport of the requested kind.

    :param kind: The transport variant
    :param host: Hostname or IP address of the server
    :param port: RCON port of the server
    :return: The transport, not yet opened
    """
    return _TRANSPORTS[TransportKind(kind)](host, port)
