"""Unit tests for serial port validation and link settings."""

from __future__ import annotations

import sys

import pytest

from glowlamp.config import DEFAULT_BAUD_RATE, LinkConfig, validate_port


class TestValidatePort:
    @pytest.mark.parametrize(
        "port",
        [
            "/dev/ttyUSB0",
            "/dev/ttyACM0",
            "/dev/ttyS1",
            "/dev/ttyAMA0",
            "/dev/ttyTHS1",
            "/dev/rfcomm0",
            "/dev/pts/3",
            "/dev/serial/by-id/usb-Arduino_Uno_7563-if00",
            "/dev/serial/by-path/pci-0000:00:14.0-usb-0:2:1.0",
        ],
    )
    def test_linux_accepts(self, monkeypatch, port):
        monkeypatch.setattr(sys, "platform", "linux")
        validate_port(port)

    @pytest.mark.parametrize(
        "port",
        ["/dev/sda1", "/etc/passwd", "ttyUSB0", "/dev/ttyUSB0; rm -rf /", "COM3"],
    )
    def test_linux_rejects(self, monkeypatch, port):
        monkeypatch.setattr(sys, "platform", "linux")
        with pytest.raises(ValueError, match="Invalid serial port path"):
            validate_port(port)

    def test_darwin_accepts_any_cu_device(self, monkeypatch):
        monkeypatch.setattr(sys, "platform", "darwin")
        validate_port("/dev/cu.usbmodem14101")
        validate_port("/dev/cu.HC-05")
        validate_port("/dev/tty.SLAB_USBtoUART")

    def test_darwin_rejects_other_paths(self, monkeypatch):
        monkeypatch.setattr(sys, "platform", "darwin")
        with pytest.raises(ValueError):
            validate_port("/dev/disk2")

    def test_windows(self, monkeypatch):
        monkeypatch.setattr(sys, "platform", "win32")
        validate_port("COM12")
        with pytest.raises(ValueError):
            validate_port("/dev/ttyUSB0")

    def test_empty(self):
        with pytest.raises(ValueError, match="non-empty"):
            validate_port("")


class TestLinkConfig:
    def test_defaults(self):
        config = LinkConfig(port="/dev/ttyACM0")

        assert config.baud_rate == DEFAULT_BAUD_RATE == 9600
        assert config.read_timeout > 0

    @pytest.mark.parametrize("baud", [0, -9600])
    def test_rejects_non_positive_baud(self, baud):
        with pytest.raises(ValueError, match="Baud rate must be positive"):
            LinkConfig(port="/dev/ttyACM0", baud_rate=baud)
