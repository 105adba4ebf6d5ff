"""Unit tests for gesture-to-command translation."""

from __future__ import annotations

import pytest

from glowlamp.control import LampController
from glowlamp.protocol.commands import Effect, Mode, Rgb
from glowlamp.state import LampState


@pytest.fixture
def connected(link, link_config, transports):
    """Controller over a connected link, plus the transport it writes to."""
    link.open(link_config)
    return LampController(LampState(), link), transports[0]


class TestSelectMode:
    def test_manual(self, connected):
        controller, transport = connected

        lines = controller.select_mode(Mode.MANUAL)

        assert lines == ["MANUAL\n"]
        assert transport.sent_lines == ["MANUAL\n"]
        assert controller.state.mode is Mode.MANUAL

    def test_auto_while_auto_resends(self, connected):
        controller, transport = connected

        controller.select_mode(Mode.AUTO)
        controller.select_mode("auto")

        assert transport.sent_lines == ["AUTO\n", "AUTO\n"]
        assert controller.state.mode is Mode.AUTO


class TestSelectEffect:
    @pytest.mark.parametrize(
        "effect, wire",
        [
            (Effect.STATIC, "STATIC"),
            (Effect.BREATHING, "BREATH"),
            (Effect.HEARTBEAT, "HEART"),
            (Effect.STROBE, "STROBE"),
        ],
    )
    def test_effect_click(self, connected, effect, wire):
        controller, transport = connected
        controller.select_mode(Mode.MANUAL)

        lines = controller.select_effect(effect)

        assert lines == [f"EFFECT:{wire}\n"]
        assert transport.sent_lines[-1] == f"EFFECT:{wire}\n"
        assert controller.state.effect.value == effect.value.lower()

    def test_ignored_in_auto(self, connected):
        controller, transport = connected

        assert controller.select_effect(Effect.STROBE) == []
        assert transport.sent_lines == []
        assert controller.state.effect is Effect.STATIC

    def test_accepts_wire_name(self, connected):
        controller, _ = connected
        controller.select_mode(Mode.MANUAL)

        assert controller.select_effect("HEART") == ["EFFECT:HEART\n"]
        assert controller.state.effect is Effect.HEARTBEAT


class TestChangeColor:
    @pytest.mark.parametrize("r, g, b", [(0, 0, 0), (255, 255, 255), (18, 200, 7)])
    def test_sends_rgb_then_effect(self, connected, r, g, b):
        controller, transport = connected
        controller.select_mode(Mode.MANUAL)
        controller.select_effect(Effect.BREATHING)
        before = len(transport.sent_lines)

        lines = controller.change_color(Rgb(r=r, g=g, b=b))

        assert lines == [f"RGB:{r},{g},{b}\n", "EFFECT:BREATH\n"]
        assert transport.sent_lines[before:] == lines

    def test_effect_vocabulary_matches_effect_click(self, connected):
        controller, _ = connected
        controller.select_mode(Mode.MANUAL)

        clicked = controller.select_effect(Effect.HEARTBEAT)
        recolored = controller.change_color("#00FF00")

        assert recolored[1] == clicked[0]

    def test_hex_string(self, connected):
        controller, _ = connected
        controller.select_mode(Mode.MANUAL)

        assert controller.change_color("#ff8000")[0] == "RGB:255,128,0\n"
        assert controller.state.color.hex == "#FF8000"

    def test_ignored_in_auto(self, connected):
        controller, transport = connected

        assert controller.change_color("#00FF00") == []
        assert transport.sent_lines == []
        assert controller.state.color.hex == "#FF0000"


class TestDisconnected:
    def test_state_updates_without_link(self, link):
        controller = LampController(LampState(), link)

        assert controller.select_mode(Mode.MANUAL) == ["MANUAL\n"]
        assert controller.state.mode is Mode.MANUAL
