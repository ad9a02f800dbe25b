"""
RCON session for Quake II engine servers.

A session owns one transport and runs every command/reply exchange under a
single lock, so threads sharing a session never interleave datagrams. The
philosophy is to surface every failure as a typed RCONClientError and never
retry; the caller decides whether a command is worth sending again. The one
exception is closing a datagram transport, which logs and carries on.

Replies have no terminator, so the receive loop keeps listening while
datagrams keep arriving and returns at the first silent gap of
``timeout_ms`` milliseconds.

**Example Usage:**

.. code-block:: python

    with RconSession.open("127.0.0.1", 27910, "secret") as session:
        print(session.send("status"))
"""

from __future__ import annotations

import logging
import threading
import time
from enum import Enum
from typing import Any

from .codec import (
    DEFAULT_TIMEOUT_MS,
    STATUS_COMMAND,
    decode_response,
    encode_command,
    is_bad_password_reply,
    strip_reply_header,
)
from .errors import (
    RCONClientAuthenticationFailed,
    RCONClientConnectionFailed,
    RCONClientError,
    RCONClientInvalidConfig,
    RCONClientNotConnected,
    RCONClientReceiveFailed,
    RCONClientSendFailed,
    RCONClientTimeout,
)
from .transport import Transport, TransportKind, create_transport

LOGGER = logging.getLogger(__name__)
LOGGER.setLevel(logging.DEBUG)

_PORT_UPPER_BOUND = 65535


class SessionState(Enum):
    """
    Lifecycle of a session. CLOSED is terminal.

    :cvar UNOPENED: Transport not acquired yet
    :cvar OPEN: Transport acquired, commands may be sent
    :cvar CLOSED: Transport released
    """

    UNOPENED = "unopened"
    OPEN = "open"
    CLOSED = "closed"


def validate_address(host: str, port: int) -> None:
    """
    Check a server address before any network activity.

    :param host: Hostname or IP address
    :param port: RCON port, 1 to 65535 inclusive
    :raises RCONClientInvalidConfig: if either value is unusable
    """
    if not host or not isinstance(host, str):
        msg = "Invalid hostname."
        raise RCONClientInvalidConfig(msg)

    if (
        isinstance(port, bool)
        or not isinstance(port, int)
        or not 0 < port <= _PORT_UPPER_BOUND
    ):
        msg = "Invalid port number."
        raise RCONClientInvalidConfig(msg)


def validate_password(password: str) -> None:
    """
    Check that a password can be embedded in a command packet.

    Emptiness is left for the server to judge.

    :param password: The RCON password
    :raises RCONClientInvalidConfig: if the password is not ASCII text
    """
    if not isinstance(password, str) or not password.isascii():
        msg = "Invalid password, RCON passwords must be ASCII."
        raise RCONClientInvalidConfig(msg)


class RconSession:
    """
    Authenticated RCON session bound to one server.

    Thread-safe: send, receive_all and close share one reentrant lock.
    Use :meth:`open` rather than the constructor so a wrong password is
    detected before the session is handed out.
    """

    def __init__(
        self,
        transport: Transport,
        password: str,
        timeout_ms: float = DEFAULT_TIMEOUT_MS,
    ) -> None:
        """
        Wrap an unopened transport.

        :param transport: The transport to own, not yet opened
        :param password: The RCON password embedded in every command
        :param timeout_ms: Silent gap that ends a reply, in milliseconds
        """
        self._transport = transport
        self._password = password
        self._timeout_ms = timeout_ms
        self._lock = threading.RLock()
        self._state = SessionState.UNOPENED

    @classmethod
    def open(
        cls,
        host: str,
        port: int,
        password: str,
        *,
        transport: TransportKind | str = TransportKind.DATAGRAM,
        timeout_ms: float = DEFAULT_TIMEOUT_MS,
    ) -> RconSession:
        """
        Open a transport to the server and validate the password.

        The password is checked by sending a "status" command and
        comparing the reply against the server's bad password messages.

        :param host: Hostname or IP address of the server
        :param port: RCON port of the server
        :param password: The RCON password
        :param transport: Which transport variant to use (default: UDP)
        :param timeout_ms: Silent gap that ends a reply, in milliseconds
        :return: An open, validated session

        :raises RCONClientInvalidConfig: if the host, port, password or timeout
            is invalid
        :raises RCONClientNotSupported: if the transport variant is not implemented
        :raises RCONClientConnectionFailed: if the transport cannot be opened
        :raises RCONClientAuthenticationFailed: if the server rejects the password
        :raises RCONClientTimeout: if the server does not answer the password check
        """
        validate_address(host, port)
        validate_password(password)

        if timeout_ms <= 0:
            msg = "Timeout must be a positive number of milliseconds."
            raise RCONClientInvalidConfig(msg)

        try:
            kind = TransportKind(transport)
        except ValueError as e:
            msg = f"Unknown transport: {transport}"
            raise RCONClientInvalidConfig(msg) from e

        session = cls(create_transport(kind, host, port), password, timeout_ms)
        session._open_transport()
        session._validate_password()

        LOGGER.info("RCON session opened to %s:%d over %s", host, port, kind.value)
        return session

    @property
    def host(self) -> str:
        return self._transport.host

    @property
    def port(self) -> int:
        return self._transport.port

    @property
    def timeout_ms(self) -> float:
        return self._timeout_ms

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._state is SessionState.CLOSED

    def _open_transport(self) -> None:
        try:
            self._transport.open()
        except OSError as e:
            LOGGER.error(
                "Unable to set up the RCON connection to %s:%d: %s",
                self.host,
                self.port,
                e,
            )
            msg = f"Unable to set up the RCON connection: {e}"
            raise RCONClientConnectionFailed(msg) from e

        self._state = SessionState.OPEN

    def _validate_password(self) -> None:
        try:
            response = self.send(STATUS_COMMAND)
        except RCONClientError:
            self.close()
            raise

        if is_bad_password_reply(response):
            self.close()
            msg = "Bad rcon password supplied"
            raise RCONClientAuthenticationFailed(msg)

    def _require_open(self) -> Transport:
        if self._state is not SessionState.OPEN:
            msg = f"Session is {self._state.value}"
            raise RCONClientNotConnected(msg)
        return self._transport

    def send(self, command: str | None) -> str:
        """
        Send a command and collect the whole reply.

        :param command: The console command to execute
        :return: The trimmed reply text

        :raises RCONClientInvalidInput: if the command is missing or empty
        :raises RCONClientNotConnected: if the session is not open
        :raises RCONClientSendFailed: if the packet cannot be transmitted
        :raises RCONClientTimeout: if the server does not answer in time
        :raises RCONClientReceiveFailed: if reading the reply fails
        """
        packet = encode_command(self._password, command)

        with self._lock:
            transport = self._require_open()

            LOGGER.debug("Sending to %s:%d: %s", self.host, self.port, command)
            try:
                # replies carry no request id, so leftovers would join this one
                transport.discard_pending()
                transport.send_bytes(packet)
            except OSError as e:
                msg = f"Unable to send RCON command: {e}"
                raise RCONClientSendFailed(msg) from e

            response = self._receive_all(transport, self._timeout_ms)

        LOGGER.debug("Response from %s:%d: %s", self.host, self.port, response)
        return response

    def receive_all(self, timeout_ms: float) -> str:
        """
        Collect reply datagrams until a silent gap of ``timeout_ms``.

        :param timeout_ms: Silent gap that ends the reply, in milliseconds
        :return: The trimmed reply text

        :raises RCONClientNotConnected: if the session is not open
        :raises RCONClientTimeout: if no datagram arrives at all
        :raises RCONClientReceiveFailed: if reading fails for another reason
        """
        with self._lock:
            return self._receive_all(self._require_open(), timeout_ms)

    @staticmethod
    def _receive_all(transport: Transport, timeout_ms: float) -> str:
        response = bytearray()
        data_received = False

        window = timeout_ms / 1000
        deadline = time.monotonic() + window

        while True:
            remaining_ms = (deadline - time.monotonic()) * 1000
            if remaining_ms <= 0:
                break

            try:
                fragment = transport.receive_fragment(remaining_ms)
            except TimeoutError:
                break
            except OSError as e:
                msg = f"Error receiving data: {e}"
                raise RCONClientReceiveFailed(msg) from e

            if not fragment:
                continue

            response += strip_reply_header(fragment)
            data_received = True
            # every datagram restarts the window
            deadline = time.monotonic() + window

        if not data_received:
            msg = "No data received within the timeout period."
            raise RCONClientTimeout(msg)

        return decode_response(bytes(response))

    def close(self) -> None:
        """
        Release the transport. Safe to call more than once.

        Waits for an in-flight :meth:`send` to finish first. Closing a
        datagram transport never raises; a stream transport raises
        RCONClientCloseFailed if its socket cannot be closed.
        """
        with self._lock:
            if self._state is SessionState.CLOSED:
                return

            self._state = SessionState.CLOSED
            self._transport.close()

        LOGGER.info("RCON session to %s:%d closed", self.host, self.port)

    def __enter__(self) -> RconSession:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
