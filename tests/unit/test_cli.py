"""Unit tests for the click CLI."""

from __future__ import annotations

import json
import sys

import pytest
import uvicorn
from click.testing import CliRunner

import glowlamp.session
from glowlamp.cli.main import cli
from glowlamp.session import LampSession


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def fake_sessions(transport_factory, monkeypatch):
    """Route CLI sessions to in-memory transports."""
    monkeypatch.setattr("glowlamp.config.validate_port", lambda port: None)
    monkeypatch.setattr(
        glowlamp.session,
        "LampSession",
        lambda: LampSession(transport_factory=transport_factory),
    )


SEND = ["send", "--port", "/dev/ttyACM0", "--settle", "0"]


def _json_block(output: str):
    """Decode the indented JSON document in *output*, skipping log lines."""
    start = output.index("{\n") if "{\n" in output else output.index("[")
    value, _ = json.JSONDecoder().raw_decode(output, start)
    return value


class TestPorts:
    def test_lists_ports(self, runner, monkeypatch):
        monkeypatch.setattr(
            "glowlamp.transport.serial.scan_ports", lambda: ["/dev/ttyACM0"]
        )
        result = runner.invoke(cli, ["ports"])

        assert result.exit_code == 0
        assert "/dev/ttyACM0" in result.output

    def test_no_ports(self, runner, monkeypatch):
        monkeypatch.setattr("glowlamp.transport.serial.scan_ports", lambda: [])
        result = runner.invoke(cli, ["ports"])

        assert "No serial ports found." in result.output

    def test_json(self, runner, monkeypatch):
        monkeypatch.setattr(
            "glowlamp.transport.serial.scan_ports", lambda: ["COM3"]
        )
        result = runner.invoke(cli, ["--json-output", "ports"])

        assert _json_block(result.output) == ["COM3"]


class TestSend:
    def test_mode(self, runner, fake_sessions, transports):
        result = runner.invoke(cli, SEND + ["mode", "manual"])

        assert result.exit_code == 0, result.output
        assert "> MANUAL" in result.output
        assert transports[0].sent_lines == ["MANUAL\n"]
        assert transports[0].closed

    def test_effect_with_manual(self, runner, fake_sessions, transports):
        result = runner.invoke(cli, SEND + ["effect", "heartbeat", "--manual"])

        assert result.exit_code == 0, result.output
        assert transports[0].sent_lines == ["MANUAL\n", "EFFECT:HEART\n"]

    def test_color(self, runner, fake_sessions, transports):
        result = runner.invoke(cli, SEND + ["color", "#0080FF", "--effect", "strobe"])

        assert result.exit_code == 0, result.output
        assert transports[0].sent_lines == ["RGB:0,128,255\n", "EFFECT:STROBE\n"]

    def test_color_json(self, runner, fake_sessions):
        result = runner.invoke(cli, ["--json-output"] + SEND + ["color", "#000000"])

        assert _json_block(result.output) == {"sent": ["RGB:0,0,0", "EFFECT:STATIC"]}

    def test_bad_color(self, runner, fake_sessions, transports):
        result = runner.invoke(cli, SEND + ["color", "teal"])

        assert result.exit_code != 0
        assert transports == []

    def test_connect_failure(self, runner, failing_transport_factory, monkeypatch):
        monkeypatch.setattr("glowlamp.config.validate_port", lambda port: None)
        monkeypatch.setattr(
            glowlamp.session,
            "LampSession",
            lambda: LampSession(transport_factory=failing_transport_factory),
        )
        result = runner.invoke(cli, SEND + ["mode", "auto"])

        assert result.exit_code == 1
        assert "Failed to connect" in result.output


class TestMonitor:
    def test_prints_readings(self, runner, monkeypatch, transports, transport_factory):
        def feeding_factory(config):
            transport = transport_factory(config)
            transport.feed(b"TEMP:21.5\r\n")
            return transport

        monkeypatch.setattr("glowlamp.config.validate_port", lambda port: None)
        monkeypatch.setattr(
            glowlamp.session,
            "LampSession",
            lambda: LampSession(transport_factory=feeding_factory),
        )
        result = runner.invoke(
            cli, ["monitor", "--port", "/dev/ttyACM0", "--count", "1", "--interval", "0.05"]
        )

        assert result.exit_code == 0, result.output
        assert "Temperature: 21.5 C" in result.output
        assert transports[0].closed


class TestServe:
    @pytest.fixture
    def served(self, monkeypatch):
        calls: list[dict] = []
        monkeypatch.setattr(sys, "platform", "linux")
        monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append(kwargs))
        return calls

    def test_rejects_invalid_serial_port(self, runner, served):
        result = runner.invoke(cli, ["serve", "--no-ui", "--serial-port", "/etc/passwd"])

        assert result.exit_code == 2
        assert "Invalid serial port path" in result.output
        assert served == []

    def test_starts_with_valid_serial_port(self, runner, served):
        result = runner.invoke(
            cli, ["serve", "--no-ui", "--serial-port", "/dev/rfcomm0", "--http-port", "8123"]
        )

        assert result.exit_code == 0, result.output
        assert served == [{"host": "127.0.0.1", "port": 8123}]
