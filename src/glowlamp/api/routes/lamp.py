"""API routes for the lamp link and control surface."""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from glowlamp import session
from glowlamp.config import DEFAULT_BAUD_RATE, LinkConfig, validate_port
from glowlamp.exceptions import ConnectionError, TransportError
from glowlamp.protocol.commands import Effect, Mode, Rgb
from glowlamp.session import LampStatus
from glowlamp.transport.serial import scan_ports

router = APIRouter(prefix="/api/lamp", tags=["lamp"])


class ConnectRequest(BaseModel):
    port: str = Field(description="Serial port path, e.g. /dev/ttyACM0 or COM3")
    baud_rate: int = Field(default=DEFAULT_BAUD_RATE, gt=0)


class ModeRequest(BaseModel):
    mode: Mode


class EffectRequest(BaseModel):
    effect: str = Field(description="static, breathing, heartbeat or strobe")


class ColorRequest(BaseModel):
    color: str = Field(description="Hex color, e.g. #FF8800")


class CommandResult(BaseModel):
    """Lines a gesture sent, plus the resulting status."""

    sent: list[str] = Field(default_factory=list)
    status: LampStatus


async def _gesture(fn, value) -> CommandResult:
    lamp = session.get_session()
    try:
        lines = await asyncio.to_thread(fn, value)
    except TransportError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return CommandResult(sent=[line.rstrip("\n") for line in lines], status=lamp.status())


@router.get("/ports")
async def list_ports() -> list[str]:
    """Scan for serial ports on this host."""
    return await asyncio.to_thread(scan_ports)


@router.post("/connect")
async def connect(request: ConnectRequest) -> LampStatus:
    """Open the serial link to the lamp."""
    try:
        validate_port(request.port)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    lamp = session.get_session()
    config = LinkConfig(port=request.port, baud_rate=request.baud_rate)
    try:
        await asyncio.to_thread(lamp.link.open, config)
    except ConnectionError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return lamp.status()


@router.post("/disconnect")
async def disconnect() -> LampStatus:
    """Close the serial link."""
    lamp = session.get_session()
    await asyncio.to_thread(lamp.link.close)
    return lamp.status()


@router.get("/state")
async def get_state() -> LampStatus:
    """Current link state, lamp intent, and temperature."""
    return session.get_session().status()


@router.post("/mode")
async def set_mode(request: ModeRequest) -> CommandResult:
    """Switch between auto and manual mode."""
    return await _gesture(session.get_session().controller.select_mode, request.mode)


@router.post("/effect")
async def set_effect(request: EffectRequest) -> CommandResult:
    """Select a lighting effect (manual mode only)."""
    try:
        effect = Effect.parse(request.effect)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return await _gesture(session.get_session().controller.select_effect, effect)


@router.post("/color")
async def set_color(request: ColorRequest) -> CommandResult:
    """Set the manual color (manual mode only)."""
    try:
        color = Rgb.from_hex(request.color)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return await _gesture(session.get_session().controller.change_color, color)
