"""Outbound command vocabulary for the lamp firmware.

All commands are ASCII, one per line, newline terminated:

    AUTO
    MANUAL
    RGB:<r>,<g>,<b>
    EFFECT:<STATIC|BREATH|HEART|STROBE>
"""

from __future__ import annotations

import re
from enum import StrEnum

from pydantic import BaseModel, Field

LINE_TERMINATOR = "\n"

RGB_PREFIX = "RGB:"
EFFECT_PREFIX = "EFFECT:"

_HEX_COLOR_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


class Mode(StrEnum):
    """Lamp operating mode."""
    AUTO = "auto"
    MANUAL = "manual"

    @property
    def command(self) -> str:
        return self.value.upper()


class Effect(StrEnum):
    """Lighting effect, named by its canonical lowercase form."""
    STATIC = "static"
    BREATHING = "breathing"
    HEARTBEAT = "heartbeat"
    STROBE = "strobe"

    @property
    def wire_name(self) -> str:
        """Token the firmware expects after EFFECT:."""
        return _WIRE_NAMES[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, value: str) -> Effect:
        """Resolve a canonical name, wire token, or long upper-case word.

        ``breathing``, ``BREATH`` and ``BREATHING`` all give
        ``Effect.BREATHING``.

        Raises:
            ValueError: If *value* names no known effect.
        """
        key = value.strip().upper()
        for effect in cls:
            if key in (effect.wire_name, effect.value.upper()):
                return effect
        raise ValueError(f"Unknown effect: {value!r}")


_WIRE_NAMES: dict[Effect, str] = {
    Effect.STATIC: "STATIC",
    Effect.BREATHING: "BREATH",
    Effect.HEARTBEAT: "HEART",
    Effect.STROBE: "STROBE",
}


class Rgb(BaseModel):
    """An 8-bit-per-channel color."""

    r: int = Field(default=0, ge=0, le=255)
    g: int = Field(default=0, ge=0, le=255)
    b: int = Field(default=0, ge=0, le=255)

    @classmethod
    def from_hex(cls, value: str) -> Rgb:
        """Parse ``#RRGGBB`` (the leading ``#`` is optional)."""
        match = _HEX_COLOR_RE.match(value.strip())
        if not match:
            raise ValueError(f"Invalid hex color: {value!r} (expected #RRGGBB)")
        digits = match.group(1)
        return cls(
            r=int(digits[0:2], 16),
            g=int(digits[2:4], 16),
            b=int(digits[4:6], 16),
        )

    @property
    def hex(self) -> str:
        return f"#{self.r:02X}{self.g:02X}{self.b:02X}"


def mode_command(mode: Mode) -> str:
    return f"{mode.command}{LINE_TERMINATOR}"


def rgb_command(color: Rgb) -> str:
    return f"{RGB_PREFIX}{color.r},{color.g},{color.b}{LINE_TERMINATOR}"


def effect_command(effect: Effect) -> str:
    return f"{EFFECT_PREFIX}{effect.wire_name}{LINE_TERMINATOR}"
