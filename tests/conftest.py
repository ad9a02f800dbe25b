"""Pytest configuration file for setting up test environment."""

import socket
import sys
import threading
import time
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

# Add the project root to Python path so tests can import q2rcon uninstalled
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

REPLY_HEADER = b"\xff\xff\xff\xffprint\n"


class MockRconServer:
    """Local UDP server answering every datagram with canned fragments."""

    def __init__(
        self,
        fragments: list[bytes],
        delay: float = 0.0,
        late_fragments: list[bytes] | None = None,
        late_delay: float = 0.0,
    ) -> None:
        """Bind to an ephemeral loopback port.

        :param fragments: Datagrams sent back for each datagram received
        :param delay: Seconds to wait before each reply datagram
        :param late_fragments: Datagrams sent in the background after the reply
        :param late_delay: Seconds between the reply and the late datagrams
        """
        self.fragments = fragments
        self.delay = delay
        self.late_fragments = late_fragments or []
        self.late_delay = late_delay
        self.received: list[bytes] = []

        self._socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self._socket.bind(("127.0.0.1", 0))
        self._socket.settimeout(0.05)
        self.port: int = self._socket.getsockname()[1]

        self._stop = threading.Event()
        self._timers: list[threading.Timer] = []
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def _serve(self) -> None:
        while not self._stop.is_set():
            try:
                data, address = self._socket.recvfrom(4096)
            except socket.timeout:
                continue

            self.received.append(data)
            for fragment in self.fragments:
                if self.delay:
                    time.sleep(self.delay)
                self._socket.sendto(fragment, address)

            # late datagrams must not hold up the next request
            for fragment in self.late_fragments:
                timer = threading.Timer(
                    self.late_delay, self._socket.sendto, (fragment, address)
                )
                timer.start()
                self._timers.append(timer)

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        self._thread.join()
        for timer in self._timers:
            timer.cancel()
            timer.join()
        self._socket.close()


@pytest.fixture
def rcon_server() -> Iterator[Callable[..., MockRconServer]]:
    """Start local RCON responders, stopping them after the test."""
    servers: list[MockRconServer] = []

    def start(fragments: list[bytes], **kwargs) -> MockRconServer:
        server = MockRconServer(fragments, **kwargs)
        server.start()
        servers.append(server)
        return server

    yield start

    for server in servers:
        server.stop()
