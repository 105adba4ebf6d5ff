"""Control-surface semantics: user gestures to lamp commands.

Each gesture updates :class:`~glowlamp.state.LampState` and sends its
command lines through the device link. Color and effect gestures only act
in manual mode, matching a panel that hides those controls in auto mode.
"""

from __future__ import annotations

from glowlamp.link.device_link import DeviceLink
from glowlamp.protocol.commands import (
    Effect,
    Mode,
    Rgb,
    effect_command,
    mode_command,
    rgb_command,
)
from glowlamp.state import LampState
from glowlamp.utils.logging import get_logger

logger = get_logger(__name__)


class LampController:
    """Turns mode, effect, and color gestures into command lines.

    Every gesture returns the lines it produced, in send order. An empty
    list means the gesture was ignored. Lines are produced (and the state
    updated) even when the link is down; sending is fire-and-forget.
    """

    def __init__(self, state: LampState, link: DeviceLink) -> None:
        self._state = state
        self._link = link

    @property
    def state(self) -> LampState:
        return self._state

    def _send(self, lines: list[str]) -> list[str]:
        for line in lines:
            self._link.send_line(line)
        return lines

    def select_mode(self, mode: Mode | str) -> list[str]:
        """Switch mode. Always re-sends, even if the mode is unchanged."""
        mode = Mode(mode)
        self._state.mode = mode
        logger.info("mode_selected", mode=mode.value)
        return self._send([mode_command(mode)])

    def select_effect(self, effect: Effect | str) -> list[str]:
        """Select a lighting effect (manual mode only)."""
        effect = effect if isinstance(effect, Effect) else Effect.parse(effect)
        if not self._state.is_manual:
            logger.debug("effect_ignored", effect=effect.value, mode=self._state.mode.value)
            return []
        self._state.effect = effect
        logger.info("effect_selected", effect=effect.value)
        return self._send([effect_command(effect)])

    def change_color(self, color: Rgb | str) -> list[str]:
        """Set the manual color and re-assert the current effect.

        Sends ``RGB:`` then ``EFFECT:``. Accepts an :class:`Rgb` or a
        ``#RRGGBB`` string.
        """
        color = color if isinstance(color, Rgb) else Rgb.from_hex(color)
        if not self._state.is_manual:
            logger.debug("color_ignored", color=color.hex, mode=self._state.mode.value)
            return []
        self._state.color = color
        logger.info("color_changed", color=color.hex)
        return self._send([rgb_command(color), effect_command(self._state.effect)])
