"""
Frame validator - enforces the fixed-grid animation text format

One frame per line, exactly NUM_LEDS colors per frame, each color #RRGGBB.
Validation runs once per submission so a malformed animation never reaches
storage or the device.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List

from models.errors import EmptyInputError, WrongColorCountError, InvalidColorFormatError
from utils.colors import is_hex_color
from utils.logger import get_logger
from models.enums import LogCategory

log = get_logger().for_category(LogCategory.SCRIPT)

NUM_LEDS = 60

_SEPARATORS = re.compile(r"[,\s]+")


@dataclass
class FrameValidationResult:
    """Frames that passed validation, verbatim, plus their count"""
    frames: List[str]
    count: int


def split_frame(line: str) -> List[str]:
    """Tokenize a frame line on commas and/or whitespace runs"""
    return [token for token in _SEPARATORS.split(line.strip()) if token]


def validate_frames(lines: Iterable[str], num_leds: int = NUM_LEDS) -> FrameValidationResult:
    """
    Validate candidate frame lines

    Args:
        lines: Raw text lines, one frame each
        num_leds: Colors required per frame

    Returns:
        FrameValidationResult with the original lines (not re-encoded)

    Raises:
        EmptyInputError: No lines at all
        WrongColorCountError: Frame k (1-based) has != num_leds tokens
        InvalidColorFormatError: Frame k, color j (1-based) is not #RRGGBB
    """
    frames = list(lines)
    if not frames:
        raise EmptyInputError()

    for frame_index, line in enumerate(frames, start=1):
        tokens = split_frame(line)
        if len(tokens) != num_leds:
            raise WrongColorCountError(frame_index, num_leds, len(tokens))

        for color_index, token in enumerate(tokens, start=1):
            if not is_hex_color(token):
                raise InvalidColorFormatError(token, frame_index, color_index)

    log.debug(f"Validated {len(frames)} frames", num_leds=num_leds)
    return FrameValidationResult(frames=frames, count=len(frames))


def parse_program_output(output: str, num_leds: int = NUM_LEDS) -> FrameValidationResult:
    """
    Validate the stdout of an animation generator

    Lines are trimmed and blank lines dropped before validation. Any bad
    line fails the whole output.
    """
    lines = [line.strip() for line in output.split("\n")]
    return validate_frames([line for line in lines if line], num_leds)
