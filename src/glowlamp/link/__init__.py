"""Device link: serial session to the lamp."""

from glowlamp.link.device_link import DeviceLink, LinkState

__all__ = ["DeviceLink", "LinkState"]
