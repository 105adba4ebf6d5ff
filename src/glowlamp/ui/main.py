"""NiceGUI control panel setup and page registration."""

from __future__ import annotations

from fastapi import FastAPI
from nicegui import ui

from glowlamp.config import DEFAULT_BAUD_RATE


def setup_ui(fastapi_app: FastAPI, default_baud_rate: int | None = None) -> None:
    """Register NiceGUI pages with the FastAPI application."""
    baud_rate = default_baud_rate or DEFAULT_BAUD_RATE

    @ui.page("/")
    def index():
        from glowlamp.ui.pages.control import control_page
        control_page(baud_rate=baud_rate)

    ui.run_with(
        fastapi_app,
        title="Glowlamp - Smart RGB Lamp Control",
    )
