"""Dark theme configuration for the control panel."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class _Palette:
    bg_primary: str = "#0d0d0d"
    bg_secondary: str = "#14142b"
    bg_card: str = "rgba(255, 255, 255, 0.07)"
    border: str = "rgba(255, 255, 255, 0.12)"
    text_primary: str = "#e6edf3"
    text_secondary: str = "#8b949e"
    text_muted: str = "#484f58"
    cyan: str = "#3a86ff"
    purple: str = "#8338ec"
    pink: str = "#ff0078"
    blue: str = "#3c96ff"
    green: str = "#3fb950"
    yellow: str = "#d29922"
    red: str = "#f85149"


COLORS = _Palette()

GLOBAL_CSS = f"""
body {{
    background: linear-gradient(180deg, {COLORS.bg_primary}, #1a1a40) !important;
    color: {COLORS.text_primary} !important;
}}
.q-card {{
    background-color: {COLORS.bg_card} !important;
    border: 1px solid {COLORS.border} !important;
    border-radius: 14px !important;
}}
.q-header {{
    background-color: {COLORS.bg_secondary} !important;
    border-bottom: 1px solid {COLORS.border} !important;
}}
.q-btn {{
    text-transform: none !important;
}}
"""
