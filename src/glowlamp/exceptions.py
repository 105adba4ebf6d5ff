"""Exception hierarchy for the lamp link and control surface."""

from __future__ import annotations


class GlowlampError(Exception):
    """Base exception for all Glowlamp errors."""


class TransportError(GlowlampError):
    """Error in the serial transport layer."""


class ConnectionError(TransportError):
    """Failed to establish a connection to the lamp."""


class ReadStreamError(TransportError):
    """The inbound byte stream failed while reading."""


class MalformedTagError(GlowlampError):
    """A TEMP: tag was followed by something that is not a number."""

    def __init__(self, payload: str) -> None:
        self.payload = payload
        super().__init__(f"Malformed TEMP payload: {payload!r}")
