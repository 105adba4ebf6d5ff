"""Serial port transport backed by pyserial."""

from __future__ import annotations

import serial
from serial.tools.list_ports import comports

from glowlamp.config import LinkConfig
from glowlamp.exceptions import ConnectionError, ReadStreamError, TransportError
from glowlamp.transport.base import Transport
from glowlamp.utils.logging import get_logger

logger = get_logger(__name__)


def scan_ports() -> list[str]:
    """Return the device paths of the serial ports present on this host."""
    return sorted(p.device for p in comports())


class SerialTransport(Transport):
    """Transport over a local serial (USB CDC / UART) port."""

    def __init__(self, config: LinkConfig) -> None:
        super().__init__(config)
        self._serial: serial.Serial | None = None

    @property
    def is_open(self) -> bool:
        return self._serial is not None and self._serial.is_open

    def open(self) -> None:
        if self.is_open:
            return
        logger.info(
            "serial_opening",
            port=self._config.port,
            baud_rate=self._config.baud_rate,
        )
        try:
            self._serial = serial.Serial(
                port=self._config.port,
                baudrate=self._config.baud_rate,
                timeout=self._config.read_timeout,
                write_timeout=self._config.write_timeout,
            )
        except (serial.SerialException, ValueError) as exc:
            self._serial = None
            raise ConnectionError(
                f"Cannot open {self._config.port} at {self._config.baud_rate} baud: {exc}"
            ) from exc
        logger.info("serial_opened", port=self._config.port)

    def close(self) -> None:
        if self._serial is None:
            return
        logger.info("serial_closing", port=self._config.port)
        try:
            self._serial.close()
        finally:
            self._serial = None
        logger.info("serial_closed", port=self._config.port)

    def write(self, data: bytes) -> None:
        ser = self._serial
        if ser is None or not ser.is_open:
            raise TransportError(f"Serial port {self._config.port} is not open")
        try:
            ser.write(data)
            ser.flush()
        except serial.SerialException as exc:
            raise TransportError(f"Write to {self._config.port} failed: {exc}") from exc

    def read(self) -> bytes | None:
        ser = self._serial
        if ser is None or not ser.is_open:
            return None
        try:
            return ser.read(ser.in_waiting or 1)
        except (serial.SerialException, OSError, TypeError) as exc:
            # pyserial raises TypeError when the port is closed mid-read.
            raise ReadStreamError(f"Read from {self._config.port} failed: {exc}") from exc

    def cancel_read(self) -> None:
        ser = self._serial
        if ser is not None and hasattr(ser, "cancel_read"):
            ser.cancel_read()
