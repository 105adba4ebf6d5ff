"""Abstract byte transport used by the device link."""

from __future__ import annotations

from abc import ABC, abstractmethod

from glowlamp.config import LinkConfig


class Transport(ABC):
    """Abstract base for byte-stream transports."""

    def __init__(self, config: LinkConfig) -> None:
        self._config = config

    @property
    def config(self) -> LinkConfig:
        return self._config

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """Whether the underlying port is open."""

    @abstractmethod
    def open(self) -> None:
        """Open the transport.

        Raises:
            ConnectionError: If the port cannot be opened.
        """

    @abstractmethod
    def close(self) -> None:
        """Close the transport. Safe to call more than once."""

    @abstractmethod
    def write(self, data: bytes) -> None:
        """Write all of *data*.

        Raises:
            TransportError: If the write fails.
        """

    @abstractmethod
    def read(self) -> bytes | None:
        """Read whatever bytes are available.

        Returns an empty bytes object when the read timed out with nothing
        pending, and None at end of stream.

        Raises:
            ReadStreamError: If the read fails.
        """

    def cancel_read(self) -> None:
        """Interrupt a blocking read from another thread, if supported."""

    def __enter__(self) -> Transport:
        self.open()
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
