"""Glowlamp - serial control panel for an RGB lamp."""

__version__ = "0.1.0"
