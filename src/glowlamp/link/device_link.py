"""Device link: serial session lifecycle and the background read loop.

State machine::

    DISCONNECTED --open()--> CONNECTING --ok--> CONNECTED
    CONNECTING   --fail--> DISCONNECTED
    CONNECTED    --stream end / read error--> DISCONNECTED
    CONNECTED    --close()--> CLOSING --> DISCONNECTED

Every successful open bumps a generation counter. A read loop only
publishes readings while its generation is current, so a loop left over
from an earlier connection can never touch the shared temperature.
"""

from __future__ import annotations

import codecs
import threading
from enum import StrEnum
from typing import Callable

from glowlamp.config import LinkConfig
from glowlamp.exceptions import ConnectionError, ReadStreamError
from glowlamp.protocol.parser import TempTagScanner
from glowlamp.state import TemperatureReading
from glowlamp.transport.base import Transport
from glowlamp.transport.serial import SerialTransport
from glowlamp.utils.logging import get_logger

logger = get_logger(__name__)

READER_JOIN_TIMEOUT = 2.0


class LinkState(StrEnum):
    """Lifecycle state of the device link."""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    CLOSING = "closing"


class DeviceLink:
    """One serial session to the lamp.

    Writes are serialized through a single lock so lines from concurrent UI
    events never interleave. Reads happen on a daemon thread started by
    :meth:`open`.

    Usage:
        link = DeviceLink(TemperatureReading())
        link.open(LinkConfig(port="/dev/ttyACM0"))
        link.send_line("AUTO\\n")
        link.close()
    """

    def __init__(
        self,
        temperature: TemperatureReading,
        transport_factory: Callable[[LinkConfig], Transport] = SerialTransport,
        on_state_change: Callable[[LinkState], None] | None = None,
    ) -> None:
        self._temperature = temperature
        self._transport_factory = transport_factory
        self._on_state_change = on_state_change

        self._lock = threading.Lock()
        self._write_lock = threading.Lock()
        self._state = LinkState.DISCONNECTED
        self._generation = 0
        self._config: LinkConfig | None = None
        self._transport: Transport | None = None
        self._reader: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._last_error: str | None = None
        self._pending_states: list[LinkState] = []

    @property
    def state(self) -> LinkState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is LinkState.CONNECTED

    @property
    def port(self) -> str | None:
        return self._config.port if self._config else None

    @property
    def config(self) -> LinkConfig | None:
        return self._config

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def last_error(self) -> str | None:
        return self._last_error

    def _set_state(self, state: LinkState) -> None:
        """Change state. Caller holds ``self._lock``.

        The listener is queued, not called; see :meth:`_notify_state`.
        """
        if state is self._state:
            return
        previous = self._state
        self._state = state
        logger.info(
            "link_state_changed",
            previous=previous.value,
            state=state.value,
            port=self.port,
        )
        self._pending_states.append(state)

    def _notify_state(self) -> None:
        """Deliver queued state changes to the listener. Caller holds no lock."""
        while True:
            with self._lock:
                if not self._pending_states:
                    return
                state = self._pending_states.pop(0)
            if self._on_state_change is not None:
                self._on_state_change(state)

    # --- Lifecycle ---

    def open(self, config: LinkConfig) -> None:
        """Open the transport and start the read loop.

        Opening an already connected link is a no-op.

        Raises:
            ConnectionError: If the link is busy or the transport cannot be
                opened. The link is left DISCONNECTED.
        """
        with self._lock:
            if self._state is LinkState.CONNECTED:
                logger.debug("link_already_connected", port=self.port)
                return
            if self._state is not LinkState.DISCONNECTED:
                raise ConnectionError(f"Link is busy ({self._state.value})")
            self._config = config
            self._set_state(LinkState.CONNECTING)

        self._notify_state()

        try:
            transport = self._transport_factory(config)
            transport.open()
        except Exception as exc:
            logger.error("link_open_failed", port=config.port, error=str(exc))
            with self._lock:
                self._last_error = str(exc)
                self._set_state(LinkState.DISCONNECTED)
            self._notify_state()
            if isinstance(exc, ConnectionError):
                raise
            raise ConnectionError(f"Cannot open {config.port}: {exc}") from exc

        with self._lock:
            self._generation += 1
            generation = self._generation
            stop_event = threading.Event()
            reader = threading.Thread(
                target=self._read_loop,
                args=(transport, generation, stop_event),
                name=f"glowlamp-reader-{generation}",
                daemon=True,
            )
            self._transport = transport
            self._stop_event = stop_event
            self._reader = reader
            self._last_error = None
            self._set_state(LinkState.CONNECTED)

        reader.start()
        self._notify_state()
        logger.info("link_connected", port=config.port, baud_rate=config.baud_rate)

    def close(self) -> None:
        """Stop the read loop and release the transport.

        No-op unless the link is CONNECTED.
        """
        with self._lock:
            if self._state is not LinkState.CONNECTED:
                return
            self._set_state(LinkState.CLOSING)
            # Retire the running loop before it can publish again.
            self._generation += 1
            transport = self._transport
            reader = self._reader
            stop_event = self._stop_event
        self._notify_state()

        stop_event.set()
        if transport is not None:
            transport.cancel_read()
        if reader is not None and reader is not threading.current_thread():
            reader.join(timeout=READER_JOIN_TIMEOUT)
            if reader.is_alive():
                logger.warning("reader_join_timeout", port=self.port)

        try:
            if transport is not None:
                with self._write_lock:
                    transport.close()
        finally:
            with self._lock:
                self._transport = None
                self._reader = None
                self._set_state(LinkState.DISCONNECTED)
            self._notify_state()
        logger.info("link_closed", port=self.port)

    def __enter__(self) -> DeviceLink:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # --- Outbound ---

    def send_line(self, text: str) -> bool:
        """Write one already-terminated command line.

        Returns False without writing when the link is not connected.

        Raises:
            TransportError: If the transport rejects the write.
        """
        transport = self._transport
        if self._state is not LinkState.CONNECTED or transport is None:
            logger.debug("send_skipped", reason="not_connected", line=text.rstrip())
            return False

        data = text.encode("ascii")
        with self._write_lock:
            transport.write(data)
        logger.debug("line_sent", line=text.rstrip())
        return True

    # --- Inbound ---

    def _is_current(self, generation: int, stop_event: threading.Event) -> bool:
        return generation == self._generation and not stop_event.is_set()

    def _read_loop(
        self,
        transport: Transport,
        generation: int,
        stop_event: threading.Event,
    ) -> None:
        scanner = TempTagScanner()
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        port = transport.config.port
        logger.debug("read_loop_started", port=port, generation=generation)
        try:
            while self._is_current(generation, stop_event):
                data = transport.read()
                if data is None:
                    logger.info("read_stream_ended", port=port)
                    break
                if not data:
                    continue
                value = scanner.feed(decoder.decode(data))
                if value is not None and self._is_current(generation, stop_event):
                    self._temperature.update(value)
                    logger.debug("temperature_updated", port=port, value=value)
        except ReadStreamError as exc:
            if not stop_event.is_set():
                logger.error("read_stream_error", port=port, error=str(exc))
                self._last_error = str(exc)
        finally:
            self._on_loop_exit(transport, generation)
            logger.debug("read_loop_stopped", port=port, generation=generation)

    def _on_loop_exit(self, transport: Transport, generation: int) -> None:
        """Drop to DISCONNECTED when the current loop ends on its own."""
        with self._lock:
            if generation != self._generation or self._state is not LinkState.CONNECTED:
                return
            self._generation += 1
            self._transport = None
            self._reader = None
            self._set_state(LinkState.DISCONNECTED)
        with self._write_lock:
            transport.close()
        self._notify_state()
