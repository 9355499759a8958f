"""
Utility functions for the LED ring controller
"""

from .colors import (
    hex_to_int,
    int_to_hex,
    int_to_wire_hex,
    is_hex_color,
    normalize_hex,
)

__all__ = [
    'hex_to_int',
    'int_to_hex',
    'int_to_wire_hex',
    'is_hex_color',
    'normalize_hex',
]
