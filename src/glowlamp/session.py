"""Process-level lamp session.

At most one connection to the lamp exists per process. The API routes, the
NiceGUI page and the ``serve`` command all share the session returned by
:func:`get_session`.
"""

from __future__ import annotations

import threading
from typing import Callable

from pydantic import BaseModel

from glowlamp.config import LinkConfig
from glowlamp.control import LampController
from glowlamp.link.device_link import DeviceLink, LinkState
from glowlamp.protocol.commands import Effect, Mode
from glowlamp.state import LampState, TemperatureReading
from glowlamp.transport.base import Transport
from glowlamp.transport.serial import SerialTransport
from glowlamp.utils.logging import get_logger

logger = get_logger(__name__)


class LampStatus(BaseModel):
    """Snapshot of the session for display and the REST API."""

    link_state: LinkState
    port: str | None = None
    baud_rate: int | None = None
    mode: Mode
    color: str
    effect: Effect
    temperature: str | None = None
    temperature_age_seconds: float | None = None
    last_error: str | None = None


class LampSession:
    """Owns the lamp state, the temperature reading, and the device link."""

    def __init__(
        self,
        transport_factory: Callable[[LinkConfig], Transport] = SerialTransport,
    ) -> None:
        self.state = LampState()
        self.temperature = TemperatureReading()
        self.link = DeviceLink(self.temperature, transport_factory=transport_factory)
        self.controller = LampController(self.state, self.link)

    def status(self) -> LampStatus:
        config = self.link.config
        return LampStatus(
            link_state=self.link.state,
            port=config.port if config else None,
            baud_rate=config.baud_rate if config else None,
            mode=self.state.mode,
            color=self.state.color.hex,
            effect=self.state.effect,
            temperature=self.temperature.value,
            temperature_age_seconds=self.temperature.age_seconds(),
            last_error=self.link.last_error,
        )

    def close(self) -> None:
        self.link.close()


_lock = threading.Lock()
_session: LampSession | None = None


def get_session() -> LampSession:
    """Get or create the process-wide session."""
    global _session
    with _lock:
        if _session is None:
            _session = LampSession()
        return _session


def set_session(session: LampSession) -> None:
    """Install *session* as the process-wide session, closing any previous one."""
    global _session
    with _lock:
        previous, _session = _session, session
    if previous is not None and previous is not session:
        previous.close()


def shutdown() -> None:
    """Close and forget the process-wide session."""
    global _session
    with _lock:
        session, _session = _session, None
    if session is not None:
        logger.info("session_shutdown", port=session.link.port)
        session.close()
