"""Common UI components for the control panel."""

from __future__ import annotations

from nicegui import ui

from glowlamp.link.device_link import LinkState
from glowlamp.ui.theme import COLORS

_LINK_STATE_COLORS: dict[LinkState, str] = {
    LinkState.CONNECTED: COLORS.green,
    LinkState.CONNECTING: COLORS.yellow,
    LinkState.CLOSING: COLORS.yellow,
    LinkState.DISCONNECTED: COLORS.text_secondary,
}


def stat_card(title: str, icon: str) -> ui.label:
    """Create a stat card with title and icon, return the value label.

    The returned label can be updated in timer callbacks to show live data.
    """
    with ui.card().classes("flex-1 p-4 min-w-[240px]"):
        with ui.row().classes("items-center gap-2 mb-2"):
            ui.icon(icon).classes("text-lg").style(f"color: {COLORS.cyan}")
            ui.label(title).classes("text-subtitle2").style(
                f"color: {COLORS.text_primary}"
            )
        value_label = ui.label("--").classes("text-h4").style(
            f"color: {COLORS.text_primary}"
        )
    return value_label


def card_header(title: str, icon: str) -> None:
    """Render a card section header with icon."""
    with ui.row().classes("items-center gap-2 mb-3"):
        ui.icon(icon).classes("text-lg").style(f"color: {COLORS.cyan}")
        ui.label(title).classes("text-subtitle2").style(
            f"color: {COLORS.text_primary}"
        )


def link_state_badge() -> ui.label:
    label = ui.label().classes("px-2 py-1 rounded text-xs font-bold")
    update_link_state_badge(label, LinkState.DISCONNECTED)
    return label


def update_link_state_badge(label: ui.label, state: LinkState) -> None:
    """Show *state* on a badge created by :func:`link_state_badge`."""
    color = _LINK_STATE_COLORS[state]
    label.text = state.value.upper()
    label.style(f"background: {color}20; color: {color}; border: 1px solid {color}40")


def status_indicator() -> ui.label:
    """Create a status indicator label for ok/error state."""
    return ui.label("").classes("text-caption mt-2").style(
        f"color: {COLORS.text_muted}"
    )


def set_status_ok(label: ui.label, text: str) -> None:
    label.text = text
    label.style(f"color: {COLORS.green}")


def set_status_error(label: ui.label, error: Exception) -> None:
    """Set status indicator to error state."""
    label.text = f"Error: {str(error)[:200]}"
    label.style(f"color: {COLORS.red}")
