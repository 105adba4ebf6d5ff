"""Transport layer for the lamp's serial link."""

from glowlamp.transport.base import Transport
from glowlamp.transport.serial import SerialTransport, scan_ports

__all__ = [
    "SerialTransport",
    "Transport",
    "scan_ports",
]
