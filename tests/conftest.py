"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import queue
import time

import pytest
import structlog

from glowlamp.config import LinkConfig
from glowlamp.exceptions import ConnectionError, TransportError
from glowlamp.link.device_link import DeviceLink
from glowlamp.state import TemperatureReading
from glowlamp.transport.base import Transport


class FakeTransport(Transport):
    """In-memory transport that records writes and replays queued reads.

    Queue bytes with :meth:`feed`, ``None`` for end of stream, or an
    exception instance to make the next read raise it.
    """

    def __init__(self, config: LinkConfig, fail_open: bool = False) -> None:
        super().__init__(config)
        self.fail_open = fail_open
        self.written = bytearray()
        self.inbound: queue.Queue = queue.Queue()
        self.closed = False
        self.cancel_count = 0
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def sent_lines(self) -> list[str]:
        return self.written.decode("ascii").splitlines(keepends=True)

    def open(self) -> None:
        if self.fail_open:
            raise ConnectionError(f"Port busy: {self._config.port}")
        self._open = True

    def close(self) -> None:
        self._open = False
        self.closed = True

    def write(self, data: bytes) -> None:
        if not self._open:
            raise TransportError("closed")
        # Byte at a time so unserialized writers would interleave.
        for byte in data:
            self.written.append(byte)
            time.sleep(0)

    def read(self) -> bytes | None:
        try:
            item = self.inbound.get(timeout=0.01)
        except queue.Empty:
            return b""
        if isinstance(item, Exception):
            raise item
        return item

    def cancel_read(self) -> None:
        self.cancel_count += 1

    def feed(self, item) -> None:
        self.inbound.put(item)


def wait_for(predicate, timeout: float = 2.0) -> bool:
    """Poll *predicate* until it is true or *timeout* expires."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop logging configured by CLI tests against CliRunner streams."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def transports() -> list[FakeTransport]:
    """Every FakeTransport created by ``transport_factory``, in order."""
    return []


@pytest.fixture
def transport_factory(transports):
    def factory(config: LinkConfig) -> FakeTransport:
        transport = FakeTransport(config)
        transports.append(transport)
        return transport
    return factory


@pytest.fixture
def link_config() -> LinkConfig:
    return LinkConfig(port="/dev/ttyACM0")


@pytest.fixture
def temperature() -> TemperatureReading:
    return TemperatureReading()


@pytest.fixture
def link(temperature, transport_factory):
    device_link = DeviceLink(temperature, transport_factory=transport_factory)
    yield device_link
    device_link.close()


@pytest.fixture
def wait():
    return wait_for


@pytest.fixture
def failing_transport_factory(transports):
    def factory(config: LinkConfig) -> FakeTransport:
        transport = FakeTransport(config, fail_open=True)
        transports.append(transport)
        return transport
    return factory
