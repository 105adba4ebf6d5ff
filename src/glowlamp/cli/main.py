"""Glowlamp CLI - command-line interface for the RGB lamp."""

from __future__ import annotations

import json
import time

import click

from glowlamp.config import DEFAULT_BAUD_RATE
from glowlamp.utils.logging import setup_logging


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.pass_context
def cli(ctx: click.Context, debug: bool, json_output: bool) -> None:
    """Glowlamp - serial control panel for an RGB lamp."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug
    ctx.obj["json_output"] = json_output
    setup_logging(level="DEBUG" if debug else "INFO", json_output=json_output)


@cli.command()
@click.pass_context
def ports(ctx: click.Context) -> None:
    """List serial ports on this host."""
    from glowlamp.transport.serial import scan_ports

    found = scan_ports()
    if ctx.obj.get("json_output"):
        click.echo(json.dumps(found, indent=2))
        return
    if not found:
        click.echo("No serial ports found.")
        return
    click.echo(f"Found {len(found)} port(s):")
    for device in found:
        click.echo(f"  {device}")


def _open_session(ctx: click.Context, port: str, baud: int, settle: float):
    """Open a private session on *port*, exiting with an error on failure."""
    from glowlamp.config import LinkConfig, validate_port
    from glowlamp.exceptions import ConnectionError
    from glowlamp.session import LampSession

    try:
        validate_port(port)
        config = LinkConfig(port=port, baud_rate=baud)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--port") from exc

    lamp = LampSession()
    try:
        lamp.link.open(config)
    except ConnectionError as exc:
        click.echo(f"ERROR: Failed to connect to lamp: {exc}", err=True)
        ctx.exit(1)
    # Most boards reset when the port opens.
    if settle > 0:
        time.sleep(settle)
    return lamp


def _report(ctx: click.Context, lines: list[str]) -> None:
    sent = [line.rstrip("\n") for line in lines]
    if ctx.obj.get("json_output"):
        click.echo(json.dumps({"sent": sent}, indent=2))
    elif not sent:
        click.echo("Nothing sent.")
    else:
        for line in sent:
            click.echo(f"> {line}")


@cli.group()
@click.option("--port", "-p", required=True, help="Serial port (e.g. /dev/ttyACM0 or COM3)")
@click.option("--baud", type=int, default=DEFAULT_BAUD_RATE, show_default=True, help="Baud rate")
@click.option("--settle", type=float, default=2.0, show_default=True,
              help="Seconds to wait after opening before sending")
@click.pass_context
def send(ctx: click.Context, port: str, baud: int, settle: float) -> None:
    """Send one command to the lamp."""
    ctx.ensure_object(dict)
    ctx.obj["port"] = port
    ctx.obj["baud"] = baud
    ctx.obj["settle"] = settle


@send.command()
@click.argument("mode", type=click.Choice(["auto", "manual"]))
@click.pass_context
def mode(ctx: click.Context, mode: str) -> None:
    """Switch the lamp to auto or manual mode."""
    lamp = _open_session(ctx, ctx.obj["port"], ctx.obj["baud"], ctx.obj["settle"])
    with lamp.link:
        _report(ctx, lamp.controller.select_mode(mode))


@send.command()
@click.argument("effect", type=click.Choice(["static", "breathing", "heartbeat", "strobe"]))
@click.option("--manual", is_flag=True, help="Send MANUAL before the effect")
@click.pass_context
def effect(ctx: click.Context, effect: str, manual: bool) -> None:
    """Select a lighting effect."""
    from glowlamp.protocol.commands import Mode

    lamp = _open_session(ctx, ctx.obj["port"], ctx.obj["baud"], ctx.obj["settle"])
    with lamp.link:
        lines = lamp.controller.select_mode(Mode.MANUAL) if manual else []
        # Without --manual the lamp is assumed to be in manual mode already.
        lamp.state.mode = Mode.MANUAL
        lines += lamp.controller.select_effect(effect)
        _report(ctx, lines)


@send.command()
@click.argument("color")
@click.option("--effect", "effect_name", default="static", show_default=True,
              type=click.Choice(["static", "breathing", "heartbeat", "strobe"]),
              help="Effect to re-assert with the color")
@click.option("--manual", is_flag=True, help="Send MANUAL before the color")
@click.pass_context
def color(ctx: click.Context, color: str, effect_name: str, manual: bool) -> None:
    """Set the manual color, given as #RRGGBB."""
    from glowlamp.protocol.commands import Effect, Mode, Rgb

    try:
        rgb = Rgb.from_hex(color)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="COLOR") from exc

    lamp = _open_session(ctx, ctx.obj["port"], ctx.obj["baud"], ctx.obj["settle"])
    with lamp.link:
        lines = lamp.controller.select_mode(Mode.MANUAL) if manual else []
        lamp.state.mode = Mode.MANUAL
        lamp.state.effect = Effect.parse(effect_name)
        lines += lamp.controller.change_color(rgb)
        _report(ctx, lines)


@cli.command()
@click.option("--port", "-p", required=True, help="Serial port (e.g. /dev/ttyACM0 or COM3)")
@click.option("--baud", type=int, default=DEFAULT_BAUD_RATE, show_default=True, help="Baud rate")
@click.option("--count", type=int, default=0, help="Number of readings (0=until Ctrl-C)")
@click.option("--interval", type=float, default=0.5, show_default=True, help="Poll interval in seconds")
@click.pass_context
def monitor(ctx: click.Context, port: str, baud: int, count: int, interval: float) -> None:
    """Print temperature readings reported by the lamp."""
    lamp = _open_session(ctx, port, baud, settle=0)
    seen = 0
    readings = 0

    with lamp.link:
        try:
            while count == 0 or readings < count:
                time.sleep(interval)
                if not lamp.link.is_connected:
                    click.echo("Link closed.", err=True)
                    break
                current = lamp.temperature.update_count
                if current == seen:
                    continue
                seen = current
                readings += 1
                value = lamp.temperature.value
                if ctx.obj.get("json_output"):
                    click.echo(json.dumps({"temperature": value}))
                else:
                    click.echo(f"Temperature: {value} C")
        except KeyboardInterrupt:
            pass


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind address (0.0.0.0 for network access)")
@click.option("--http-port", type=int, default=8000, show_default=True, help="HTTP port")
@click.option("--serial-port", default=None, help="Serial port to connect on startup")
@click.option("--baud", type=int, default=DEFAULT_BAUD_RATE, show_default=True, help="Baud rate")
@click.option("--no-ui", is_flag=True, help="API only, no web control panel")
def serve(host: str, http_port: int, serial_port: str | None, baud: int, no_ui: bool) -> None:
    """Start the web server (API + control panel)."""
    import uvicorn

    from glowlamp.api.app import create_app
    from glowlamp.config import LinkConfig, validate_port

    auto_connect = None
    if serial_port:
        try:
            validate_port(serial_port)
            auto_connect = LinkConfig(port=serial_port, baud_rate=baud)
        except ValueError as exc:
            raise click.BadParameter(str(exc), param_hint="--serial-port") from exc
    app = create_app(enable_ui=not no_ui, auto_connect=auto_connect, default_baud_rate=baud)
    uvicorn.run(app, host=host, port=http_port)


if __name__ == "__main__":
    cli()
