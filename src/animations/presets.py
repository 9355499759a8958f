"""
Preset Animations

Frame generators for the built-in scripts. Each generator returns frame
text lines (NUM_LEDS comma-separated #RRGGBB colors) ready for
validation and segmentation.
"""

import math
from dataclasses import dataclass
from typing import Callable, List

from engine.frame_validator import NUM_LEDS
from utils.colors import average_colors

FRAMERATE = 60
OFF = "#000000"


@dataclass(frozen=True)
class Preset:
    name: str
    description: str
    framerate: int
    generate: Callable[[], List[str]]


def _frame(colors: List[str]) -> str:
    return ",".join(colors)


def red_green(duration_seconds: int = 10) -> List[str]:
    """First half of the ring red, second half green, static"""
    half = NUM_LEDS // 2
    frame = _frame(["#FF0000"] * half + ["#00FF00"] * (NUM_LEDS - half))
    return [frame] * (FRAMERATE * duration_seconds)


def ring() -> List[str]:
    """One white light, one full rotation"""
    frames = []
    for position in range(NUM_LEDS):
        colors = [OFF] * NUM_LEDS
        colors[position] = "#FFFFFF"
        frames.append(_frame(colors))
    return frames


# (color, LEDs advanced per frame)
MULTI_RING_LIGHTS = [
    ("#FF0000", 1.0),
    ("#00FF00", 0.5),
    ("#0000FF", 0.33),
    ("#FFFF00", 0.25),
]


def multi_ring(duration_seconds: int = 10) -> List[str]:
    """
    Four lights orbiting at different speeds

    Lights landing on the same LED are averaged channel by channel.
    """
    frames = []
    for frame_num in range(FRAMERATE * duration_seconds):
        at_led: List[List[str]] = [[] for _ in range(NUM_LEDS)]
        for color, speed in MULTI_RING_LIGHTS:
            position = math.floor((frame_num * speed) % NUM_LEDS)
            at_led[position].append(color)

        frames.append(_frame([average_colors(lights) if lights else OFF for lights in at_led]))
    return frames


PRESETS: List[Preset] = [
    Preset(
        name="Red and Green",
        description="First 30 LEDs red, last 30 LEDs green for 10 seconds",
        framerate=FRAMERATE,
        generate=red_green,
    ),
    Preset(
        name="Ring Animation",
        description="Single light moving around the ring, completing one full rotation",
        framerate=FRAMERATE,
        generate=ring,
    ),
    Preset(
        name="Multi-Ring Animation",
        description="4 different colored lights moving around the ring at different speeds, "
                    "colors blend when overlapping",
        framerate=FRAMERATE,
        generate=multi_ring,
    ),
]
