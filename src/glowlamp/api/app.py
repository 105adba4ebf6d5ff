"""FastAPI application factory and configuration."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from glowlamp import __version__, session
from glowlamp.config import LinkConfig
from glowlamp.exceptions import ConnectionError
from glowlamp.utils.logging import get_logger

logger = get_logger(__name__)


def _make_lifespan(auto_connect: LinkConfig | None):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Application lifespan handler for startup/shutdown."""
        logger.info("glowlamp_api_starting")
        if auto_connect is not None:
            try:
                await asyncio.to_thread(session.get_session().link.open, auto_connect)
            except ConnectionError as exc:
                # Stay up; the panel offers connect again.
                logger.warning("auto_connect_failed", port=auto_connect.port, error=str(exc))
        yield
        session.shutdown()
        logger.info("glowlamp_api_stopped")

    return lifespan


def create_app(
    enable_ui: bool = True,
    auto_connect: LinkConfig | None = None,
    default_baud_rate: int | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        enable_ui: Whether to mount the NiceGUI control panel.
        auto_connect: Serial settings to open on startup, if any.
        default_baud_rate: Baud rate the control panel connects with.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title="Glowlamp API",
        description="Serial control panel for an RGB lamp",
        version=__version__,
        lifespan=_make_lifespan(auto_connect),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from glowlamp.api.routes import lamp
    app.include_router(lamp.router)

    if enable_ui:
        from glowlamp.ui.main import setup_ui
        setup_ui(app, default_baud_rate=default_baud_rate)

    return app
