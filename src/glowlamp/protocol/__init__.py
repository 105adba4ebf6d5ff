"""Lamp line protocol: outbound commands and inbound tag scanning."""

from glowlamp.protocol.commands import (
    Effect,
    Mode,
    Rgb,
    effect_command,
    mode_command,
    rgb_command,
)
from glowlamp.protocol.parser import TempTagScanner, parse_temperature

__all__ = [
    "Effect",
    "Mode",
    "Rgb",
    "TempTagScanner",
    "effect_command",
    "mode_command",
    "parse_temperature",
    "rgb_command",
]
