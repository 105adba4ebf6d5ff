"""Serial link configuration."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass

DEFAULT_BAUD_RATE = 9600

_SERIAL_PORT_PATTERNS: dict[str, re.Pattern] = {
    "win32": re.compile(r"^COM\d{1,3}$"),
    "linux": re.compile(
        r"^/dev/("
        r"tty(USB|ACM|S|AMA|THS|mxc|O)\d{1,3}"
        r"|rfcomm\d{1,3}"
        r"|pts/\d{1,4}"
        r"|serial/by-(id|path)/[\w.:\-]+"
        r")$"
    ),
    "darwin": re.compile(r"^/dev/(tty|cu)\.[\w.\-]+$"),
}


def validate_port(port: str) -> None:
    """Validate that port looks like a real serial port path.

    Raises:
        ValueError: If port does not match expected serial port patterns.
    """
    if not port or not isinstance(port, str):
        raise ValueError("Serial port path must be a non-empty string")
    pattern = _SERIAL_PORT_PATTERNS.get(sys.platform)
    if pattern and not pattern.match(port):
        raise ValueError(f"Invalid serial port path: {port}")


@dataclass(frozen=True)
class LinkConfig:
    """Settings for one serial connection to the lamp."""

    port: str
    baud_rate: int = DEFAULT_BAUD_RATE
    read_timeout: float = 0.1
    write_timeout: float = 1.0

    def __post_init__(self) -> None:
        if self.baud_rate <= 0:
            raise ValueError(f"Baud rate must be positive, got {self.baud_rate}")
