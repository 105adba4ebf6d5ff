"""Shared lamp state: user intent and the last reported temperature."""

from __future__ import annotations

import threading
import time

from pydantic import BaseModel, Field

from glowlamp.protocol.commands import Effect, Mode, Rgb

UNKNOWN_TEMPERATURE = "--"


class LampState(BaseModel):
    """What the panel last told the lamp.

    Mirrors sent commands, not confirmed device state. Only the control
    surface writes these fields.
    """

    mode: Mode = Mode.AUTO
    color: Rgb = Field(default_factory=lambda: Rgb(r=255, g=0, b=0))
    effect: Effect = Effect.STATIC

    @property
    def is_manual(self) -> bool:
        return self.mode == Mode.MANUAL


class TemperatureReading:
    """Latest temperature reported by the device.

    Written only by the device link's read loop; read by the UI and API from
    other threads. Holds None until the first well-formed tag arrives and is
    never reset afterwards.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: str | None = None
        self._updated_at: float | None = None
        self._update_count = 0

    @property
    def value(self) -> str | None:
        with self._lock:
            return self._value

    @property
    def is_known(self) -> bool:
        return self.value is not None

    @property
    def update_count(self) -> int:
        with self._lock:
            return self._update_count

    @property
    def display(self) -> str:
        value = self.value
        return value if value is not None else UNKNOWN_TEMPERATURE

    def age_seconds(self) -> float | None:
        """Seconds since the last update, or None if never updated."""
        with self._lock:
            if self._updated_at is None:
                return None
            return time.monotonic() - self._updated_at

    def update(self, value: str) -> None:
        with self._lock:
            self._value = value
            self._updated_at = time.monotonic()
            self._update_count += 1
