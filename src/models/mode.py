"""
LED mode model - tagged union of display modes

Exactly one mode is active at a time. The persisted record form is
{"mode": "<name>", "data": {...fields}}, the same shape the single-row
state store keeps.
"""

from dataclasses import dataclass, field, asdict, fields
from typing import ClassVar, List, Union

from models.enums import LedMode

DEFAULT_COLOR = "#0000FF"
DEFAULT_LOOP_COLORS = ["#FF0000", "#00FF00", "#0000FF"]
DEFAULT_LOOP_DELAY_MS = 1000
DEFAULT_FRAMERATE = 60


@dataclass
class SimpleMode:
    """Static single color"""
    on: bool = False
    color: str = DEFAULT_COLOR

    mode: ClassVar[LedMode] = LedMode.SIMPLE


@dataclass
class LoopMode:
    """Device cycles through colors at a fixed delay"""
    colors: List[str] = field(default_factory=lambda: list(DEFAULT_LOOP_COLORS))
    delay_ms: int = DEFAULT_LOOP_DELAY_MS

    mode: ClassVar[LedMode] = LedMode.LOOP


@dataclass
class ScriptMode:
    """
    Precomputed animation

    buffers: flat 24-bit color lists, one per time slice
    current_buffer_index: server-side cursor advanced by POST /control/complete
    """
    framerate: int = DEFAULT_FRAMERATE
    buffers: List[List[int]] = field(default_factory=list)
    total_buffers: int = 0
    current_buffer_index: int = 0

    mode: ClassVar[LedMode] = LedMode.SCRIPT


@dataclass
class ClaudeMode:
    """Alias for the active (or most recent) AI-generated script"""
    current_buffer_index: int = 0

    mode: ClassVar[LedMode] = LedMode.CLAUDE


Mode = Union[SimpleMode, LoopMode, ScriptMode, ClaudeMode]

_MODE_TYPES = {cls.mode: cls for cls in (SimpleMode, LoopMode, ScriptMode, ClaudeMode)}


def default_mode() -> SimpleMode:
    return SimpleMode(on=False, color=DEFAULT_COLOR)


def mode_to_record(mode: Mode) -> dict:
    """Serialize to the persisted {"mode", "data"} form"""
    return {"mode": mode.mode.value, "data": asdict(mode)}


def mode_from_record(record: dict) -> Mode:
    """
    Deserialize a persisted record

    Unknown mode names fall back to the default Simple mode. Missing
    fields take the dataclass defaults, unknown fields are ignored.
    """
    try:
        led_mode = LedMode(record.get("mode"))
    except ValueError:
        return default_mode()

    cls = _MODE_TYPES[led_mode]
    data = record.get("data") or {}
    names = {f.name for f in fields(cls)}
    known = {k: v for k, v in data.items() if k in names}
    return cls(**known)


def mode_to_dict(mode: Mode) -> dict:
    """Flat form used by the API: {"mode": "loop", "colors": [...], "delay_ms": 1000}"""
    return {"mode": mode.mode.value, **asdict(mode)}
