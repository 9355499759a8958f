"""
Color conversion utilities

Pure functions converting between the textual #RRGGBB form used by the API
and frame text, and the 24-bit integers stored in playback buffers.
"""

import re
from typing import List, Tuple

from models.errors import InvalidColorFormatError

HEX_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")
_HEX_DIGITS = re.compile(r"^[0-9A-Fa-f]{6}$")


def is_hex_color(token: str) -> bool:
    """True if token is exactly #RRGGBB (case-insensitive)"""
    return isinstance(token, str) and HEX_COLOR_PATTERN.match(token) is not None


def hex_to_int(hex_color: str) -> int:
    """
    Convert "#RRGGBB" (or "RRGGBB") to a 24-bit integer

    Permissive: anything that is not exactly 6 hex digits after the
    optional leading '#' converts to 0 (black) instead of raising.

    Example:
        hex_to_int("#FF0000")  # 16711680
        hex_to_int("#F00")     # 0
    """
    cleaned = hex_color.replace("#", "", 1) if hex_color.startswith("#") else hex_color
    if not _HEX_DIGITS.match(cleaned):
        return 0
    return int(cleaned, 16)


def int_to_hex(value: int) -> str:
    """Convert a 24-bit integer to canonical "#RRGGBB" (uppercase)"""
    return f"#{value:06X}"


def int_to_wire_hex(value: int) -> str:
    """Buffer wire form: 6 lowercase hex digits, no prefix"""
    return f"{value:06x}"


def normalize_hex(token: str) -> str:
    """Validate and uppercase a single color, raises InvalidColorFormatError"""
    if not is_hex_color(token):
        raise InvalidColorFormatError(str(token))
    return token.upper()


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    value = hex_to_int(hex_color)
    return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Clamp and round (half up) each channel, then format as #RRGGBB"""
    def channel(v: float) -> int:
        return int(max(0, min(255, v)) + 0.5)

    return int_to_hex((channel(r) << 16) | (channel(g) << 8) | channel(b))


def average_colors(colors: List[str]) -> str:
    """
    Average several #RRGGBB colors channel by channel

    Used where moving lights overlap on the same LED.
    """
    if not colors:
        return "#000000"
    if len(colors) == 1:
        return colors[0].upper()

    rgbs = [hex_to_rgb(c) for c in colors]
    count = len(rgbs)
    return rgb_to_hex(
        sum(r for r, _, _ in rgbs) / count,
        sum(g for _, g, _ in rgbs) / count,
        sum(b for _, _, b in rgbs) / count,
    )
