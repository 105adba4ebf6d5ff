"""Lamp control page - connection, temperature, mode, color and effect."""

from __future__ import annotations

from nicegui import run, ui

from glowlamp import session
from glowlamp.config import DEFAULT_BAUD_RATE, LinkConfig, validate_port
from glowlamp.exceptions import ConnectionError, TransportError
from glowlamp.link.device_link import LinkState
from glowlamp.protocol.commands import Effect, Mode, Rgb
from glowlamp.transport.serial import scan_ports
from glowlamp.ui.components.common import (
    card_header,
    link_state_badge,
    set_status_error,
    set_status_ok,
    stat_card,
    status_indicator,
    update_link_state_badge,
)
from glowlamp.ui.layout import page_layout
from glowlamp.ui.theme import COLORS
from glowlamp.utils.logging import get_logger

logger = get_logger(__name__)

REFRESH_INTERVAL_S = 0.5


def _temp_color(celsius: float) -> str:
    """Return color based on temperature threshold."""
    if celsius < 35:
        return COLORS.green
    if celsius < 50:
        return COLORS.yellow
    return COLORS.red


def _set_active(button: ui.button, active: bool) -> None:
    if active:
        button.props(remove="outline")
    else:
        button.props("outline")


def control_page(baud_rate: int = DEFAULT_BAUD_RATE) -> None:
    """Render the lamp control page."""

    def content():
        lamp = session.get_session()
        controller = lamp.controller

        # Connection
        with ui.card().classes("w-full max-w-2xl p-4"):
            card_header("Connection", "usb")
            with ui.row().classes("w-full items-center gap-2 no-wrap"):
                port_select = ui.select(
                    options=[],
                    label="Serial port",
                    with_input=True,
                    new_value_mode="add-unique",
                ).classes("flex-1")
                ui.button(icon="refresh", on_click=lambda: refresh_ports()).props(
                    "flat round"
                ).tooltip("Rescan ports")
                connect_btn = ui.button("Connect", icon="link", on_click=lambda: connect())
                disconnect_btn = ui.button(
                    "Disconnect", icon="link_off", on_click=lambda: disconnect()
                ).props("outline")
            with ui.row().classes("items-center gap-2 mt-2"):
                badge = link_state_badge()
                ui.label(f"{baud_rate} baud").classes("text-caption").style(
                    f"color: {COLORS.text_secondary}"
                )

        # Temperature
        with ui.row().classes("w-full max-w-2xl gap-4"):
            temp_label = stat_card("Temperature", "thermostat")

        # Mode
        with ui.card().classes("w-full max-w-2xl p-4"):
            card_header("Mode", "tune")
            with ui.row().classes("gap-4"):
                mode_buttons = {
                    mode: ui.button(
                        mode.command,
                        on_click=lambda m=mode: on_mode(m),
                    ).classes("min-w-[120px]")
                    for mode in Mode
                }

        # Manual controls, hidden in auto mode
        manual_panel = ui.card().classes("w-full max-w-2xl p-4")
        with manual_panel:
            card_header("Choose LED Color", "palette")
            ui.color_input(
                label="Color",
                value=lamp.state.color.hex,
                on_change=lambda e: on_color(e.value),
            ).classes("w-48")

            card_header("Lighting Effects", "auto_awesome")
            with ui.row().classes("gap-2 flex-wrap"):
                effect_buttons = {
                    effect: ui.button(
                        effect.label,
                        on_click=lambda e=effect: on_effect(e),
                    ).props("color=secondary").classes("min-w-[110px]")
                    for effect in Effect
                }

        status = status_indicator()

        def render():
            update_link_state_badge(badge, lamp.link.state)
            connected = lamp.link.state is LinkState.CONNECTED
            connect_btn.set_enabled(lamp.link.state is LinkState.DISCONNECTED)
            disconnect_btn.set_enabled(connected)

            value = lamp.temperature.value
            if value is None:
                temp_label.text = "--°C"
                temp_label.style(f"color: {COLORS.text_primary}")
            else:
                temp_label.text = f"{value}°C"
                temp_label.style(f"color: {_temp_color(float(value))}")

            for mode, button in mode_buttons.items():
                _set_active(button, lamp.state.mode == mode)
            for effect, button in effect_buttons.items():
                _set_active(button, lamp.state.effect == effect)
            manual_panel.set_visibility(lamp.state.is_manual)

            if lamp.link.last_error and not connected:
                status.text = f"Link: {lamp.link.last_error[:200]}"
                status.style(f"color: {COLORS.red}")

        async def refresh_ports():
            ports = await run.io_bound(scan_ports)
            current = port_select.value
            if current and current not in ports:
                ports.append(current)
            port_select.set_options(ports, value=current or (ports[0] if ports else None))

        async def connect():
            port = port_select.value
            if not port:
                ui.notify("Select a serial port first", type="warning")
                return
            try:
                validate_port(port)
                await run.io_bound(lamp.link.open, LinkConfig(port=port, baud_rate=baud_rate))
            except (ValueError, ConnectionError) as exc:
                set_status_error(status, exc)
                ui.notify(f"Connection failed: {exc}", type="negative")
            else:
                set_status_ok(status, f"Connected to {port}")
            render()

        async def disconnect():
            await run.io_bound(lamp.link.close)
            set_status_ok(status, "Disconnected")
            render()

        async def send(gesture, value):
            try:
                await run.io_bound(gesture, value)
            except TransportError as exc:
                logger.error("send_failed", error=str(exc))
                set_status_error(status, exc)
            render()

        async def on_mode(mode: Mode):
            await send(controller.select_mode, mode)

        async def on_effect(effect: Effect):
            await send(controller.select_effect, effect)

        async def on_color(value: str | None):
            try:
                color = Rgb.from_hex(value or "")
            except ValueError:
                # Partial input while typing.
                return
            await send(controller.change_color, color)

        if lamp.link.port:
            port_select.set_options([lamp.link.port], value=lamp.link.port)
        render()
        ui.timer(0.1, refresh_ports, once=True)
        ui.timer(REFRESH_INTERVAL_S, render)

    page_layout("Smart RGB Lamp Control", content)
