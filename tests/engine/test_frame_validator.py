"""
Tests for the frame validator.

Frames are lines of exactly 60 #RRGGBB colors; the first bad frame fails
the whole submission and is reported with 1-based indices.
"""

import pytest

from engine.frame_validator import validate_frames, parse_program_output, split_frame
from models.errors import (
    EmptyInputError, WrongColorCountError, InvalidColorFormatError, FrameValidationError
)


class TestSplitFrame:

    def test_commas_and_whitespace(self):
        assert split_frame("#FF0000, #00FF00 #0000FF,,#FFFFFF") == [
            "#FF0000", "#00FF00", "#0000FF", "#FFFFFF"
        ]

    def test_surrounding_whitespace_ignored(self):
        assert split_frame("  #FF0000,#00FF00  ") == ["#FF0000", "#00FF00"]


class TestValidateFrames:

    def test_accepts_valid_frames_verbatim(self, make_frame):
        lines = [make_frame("#ff0000"), make_frame("#00FF00"), " ".join(["#0000FF"] * 60)]
        result = validate_frames(lines)

        assert result.count == 3
        assert result.frames == lines

    def test_empty_input(self):
        with pytest.raises(EmptyInputError) as exc:
            validate_frames([])
        assert exc.value.status_code == 400

    def test_wrong_color_count_names_frame(self, make_frame):
        lines = [make_frame(), make_frame(), make_frame(count=59), make_frame()]

        with pytest.raises(WrongColorCountError) as exc:
            validate_frames(lines)

        assert exc.value.frame_index == 3
        assert exc.value.message == "Frame 3: Expected 60 colors, got 59"

    def test_invalid_color_names_frame_and_color(self, make_frame):
        colors = ["#000000"] * 60
        colors[9] = "#12345G"
        lines = [make_frame(), ",".join(colors)]

        with pytest.raises(InvalidColorFormatError) as exc:
            validate_frames(lines)

        assert exc.value.frame_index == 2
        assert exc.value.color_index == 10
        assert "#12345G" in exc.value.message

    def test_errors_are_validation_errors(self, make_frame):
        with pytest.raises(FrameValidationError):
            validate_frames([make_frame(count=61)])

    def test_custom_led_count(self, make_frame):
        assert validate_frames([make_frame(count=8)], num_leds=8).count == 1


class TestParseProgramOutput:

    def test_trims_and_drops_blank_lines(self, make_frame):
        output = f"\n  {make_frame()}  \n\n{make_frame('#00FF00')}\n"
        result = parse_program_output(output)

        assert result.count == 2
        assert result.frames[0] == make_frame()

    def test_no_output(self):
        with pytest.raises(EmptyInputError):
            parse_program_output("\n \n")

    def test_explanatory_text_fails(self, make_frame):
        with pytest.raises(WrongColorCountError) as exc:
            parse_program_output(f"Here is my animation:\n{make_frame()}")
        assert exc.value.frame_index == 1
