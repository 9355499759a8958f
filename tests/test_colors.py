"""
Tests for color conversion utilities.

- hex_to_int / int_to_hex round trip
- permissive parsing (malformed input -> 0)
- wire encoding and channel averaging
"""

import pytest

from models.errors import InvalidColorFormatError
from utils.colors import (
    hex_to_int, int_to_hex, int_to_wire_hex, is_hex_color,
    normalize_hex, hex_to_rgb, rgb_to_hex, average_colors
)


class TestHexToInt:

    def test_parses_with_and_without_hash(self):
        assert hex_to_int("#FF0000") == 16711680
        assert hex_to_int("00ff00") == 0x00FF00

    @pytest.mark.parametrize("value", ["#F00", "#GG0000", "", "#FF00000", "##FF0000"])
    def test_malformed_input_is_black(self, value):
        """Anything that is not exactly 6 hex digits converts to 0."""
        assert hex_to_int(value) == 0

    @pytest.mark.parametrize("value", ["#ff8800", "#0000FF", "#abcdef", "#000000", "#FFFFFF"])
    def test_round_trip_uppercases(self, value):
        assert int_to_hex(hex_to_int(value)) == value.upper()


class TestFormatting:

    def test_int_to_hex_zero_pads(self):
        assert int_to_hex(0xFF) == "#0000FF"
        assert int_to_hex(0) == "#000000"

    def test_wire_hex_is_lowercase_without_prefix(self):
        assert int_to_wire_hex(0xFF0000) == "ff0000"
        assert int_to_wire_hex(0x0A) == "00000a"

    def test_is_hex_color(self):
        assert is_hex_color("#aBcDeF")
        assert not is_hex_color("aBcDeF")
        assert not is_hex_color(" #FFFFFF")
        assert not is_hex_color(None)

    def test_normalize_hex(self):
        assert normalize_hex("#ff00aa") == "#FF00AA"
        with pytest.raises(InvalidColorFormatError) as exc:
            normalize_hex("red")
        assert exc.value.code == "INVALID_COLOR_FORMAT"


class TestBlending:

    def test_rgb_conversions(self):
        assert hex_to_rgb("#102030") == (0x10, 0x20, 0x30)
        assert rgb_to_hex(300, -5, 127.5) == "#FF0080"

    def test_average_colors(self):
        assert average_colors([]) == "#000000"
        assert average_colors(["#ff0000"]) == "#FF0000"
        assert average_colors(["#FF0000", "#00FF00"]) == "#808000"
        assert average_colors(["#FF0000", "#00FF00", "#0000FF"]) == "#555555"
