"""
Buffer segmenter - groups frames into fixed-duration playback chunks

A buffer is the flat list of 24-bit colors for `framesPerBuffer` consecutive
frames (NUM_LEDS colors each). Buffers keep each HTTP response small enough
for the microcontroller to parse; the default 0.5s at 60 fps is 30 frames,
1800 colors, 10800 hex characters on the wire.
"""

import math
from typing import List, Sequence

from engine.frame_validator import split_frame, NUM_LEDS
from models.errors import ValidationError
from utils.colors import hex_to_int, int_to_wire_hex

DEFAULT_FRAMERATE = 60
BUFFER_DURATION_SECONDS = 0.5


def frames_per_buffer(framerate: int, buffer_duration_seconds: float = BUFFER_DURATION_SECONDS) -> int:
    """
    Number of frames in one buffer

    Raises:
        ValidationError: framerate <= 0, or a duration too short to hold one frame
    """
    if isinstance(framerate, bool) or not isinstance(framerate, int) or framerate <= 0:
        raise ValidationError(
            f"framerate must be a positive integer, got {framerate!r}",
            details={"framerate": framerate}
        )

    count = math.floor(framerate * buffer_duration_seconds)
    if count < 1:
        raise ValidationError(
            f"framerate {framerate} with {buffer_duration_seconds}s buffers yields no frames per buffer",
            details={"framerate": framerate, "buffer_duration_seconds": buffer_duration_seconds}
        )
    return count


def segment_frames(
    frames: Sequence[str],
    framerate: int = DEFAULT_FRAMERATE,
    buffer_duration_seconds: float = BUFFER_DURATION_SECONDS
) -> List[List[int]]:
    """
    Split validated frame lines into buffers of integer colors

    The last buffer may hold fewer frames than the others.
    """
    per_buffer = frames_per_buffer(framerate, buffer_duration_seconds)
    buffers: List[List[int]] = []

    for start in range(0, len(frames), per_buffer):
        buffer: List[int] = []
        for frame in frames[start:start + per_buffer]:
            buffer.extend(hex_to_int(color) for color in split_frame(frame))
        buffers.append(buffer)

    return buffers


def rechunk_buffers(
    buffers: Sequence[Sequence[int]],
    framerate: int,
    buffer_duration_seconds: float = BUFFER_DURATION_SECONDS,
    num_leds: int = NUM_LEDS
) -> List[List[int]]:
    """
    Regroup existing buffers for a new framerate

    Buffers only keep the flattened colors, so they are joined back into one
    stream and cut at framesPerBuffer(framerate) frames each.
    """
    size = frames_per_buffer(framerate, buffer_duration_seconds) * num_leds
    flat = [color for buffer in buffers for color in buffer]
    return [flat[start:start + size] for start in range(0, len(flat), size)]


def encode_buffer(buffer: Sequence[int]) -> str:
    """Serialize a buffer as one hex string, 6 chars per color, no separators"""
    return "".join(int_to_wire_hex(color) for color in buffer)


class BufferSegmenter:
    """Segmenter bound to the configured buffer duration and ring size"""

    def __init__(self, buffer_duration_seconds: float = BUFFER_DURATION_SECONDS, num_leds: int = NUM_LEDS):
        if buffer_duration_seconds <= 0:
            raise ValueError(f"buffer_duration_seconds must be positive, got {buffer_duration_seconds}")
        self.buffer_duration_seconds = buffer_duration_seconds
        self.num_leds = num_leds

    def frames_per_buffer(self, framerate: int) -> int:
        return frames_per_buffer(framerate, self.buffer_duration_seconds)

    def segment(self, frames: Sequence[str], framerate: int = DEFAULT_FRAMERATE) -> List[List[int]]:
        return segment_frames(frames, framerate, self.buffer_duration_seconds)

    @staticmethod
    def encode(buffer: Sequence[int]) -> str:
        return encode_buffer(buffer)

    def rechunk(self, buffers: Sequence[Sequence[int]], framerate: int) -> List[List[int]]:
        return rechunk_buffers(buffers, framerate, self.buffer_duration_seconds, self.num_leds)
