"""
Control Service - switches the LED ring between display modes

Every setter is a read-modify-write over the mode store: fields the caller
leaves as None keep the value of the current mode when it has the same
shape, and fall back to hard defaults when switching shape.
"""

from typing import List, Optional

from engine.buffer_segmenter import BufferSegmenter
from engine.frame_validator import validate_frames, NUM_LEDS
from models.enums import LogCategory
from models.errors import ValidationError
from models.mode import (
    Mode, SimpleMode, LoopMode, ScriptMode, ClaudeMode, DEFAULT_FRAMERATE
)
from services.mode_store import ModeStore
from services.script_repository import ScriptRepository
from utils.colors import normalize_hex
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.STATE)


class ControlService:
    """
    Mode switching and state projections

    Example:
        await control.set_loop(colors=["#FF0000", "#0000FF"], delay_ms=250)
        await control.get_device_view()
        # {"mode": "loop", "colors": ["#FF0000", "#0000FF"], "delay_ms": 250}
    """

    def __init__(
        self,
        mode_store: ModeStore,
        scripts: ScriptRepository,
        segmenter: Optional[BufferSegmenter] = None,
        num_leds: int = NUM_LEDS
    ):
        self.mode_store = mode_store
        self.scripts = scripts
        self.segmenter = segmenter or BufferSegmenter(num_leds=num_leds)
        self.num_leds = num_leds

    async def get_mode(self) -> Mode:
        return await self.mode_store.get()

    # ------------------------------------------------------------------
    # Setters
    # ------------------------------------------------------------------

    async def set_simple(self, on: Optional[bool] = None, color: Optional[str] = None) -> SimpleMode:
        current = await self.mode_store.get()
        base = current if isinstance(current, SimpleMode) else SimpleMode()

        mode = SimpleMode(
            on=base.on if on is None else bool(on),
            color=base.color if color is None else normalize_hex(color)
        )
        await self.mode_store.set(mode)
        log.info("Mode set to simple", on=mode.on, color=mode.color)
        return mode

    async def set_loop(self, colors: Optional[List[str]] = None, delay_ms: Optional[int] = None) -> LoopMode:
        current = await self.mode_store.get()
        base = current if isinstance(current, LoopMode) else LoopMode()

        if colors is None:
            colors = base.colors
        if not colors:
            raise ValidationError("Loop mode needs at least one color", details={"colors": []})
        normalized = [normalize_hex(color) for color in colors]

        if delay_ms is None:
            delay_ms = base.delay_ms
        if isinstance(delay_ms, bool) or not isinstance(delay_ms, int) or delay_ms < 0:
            raise ValidationError(
                f"delay_ms must be a non-negative integer, got {delay_ms!r}",
                details={"delay_ms": delay_ms}
            )

        mode = LoopMode(colors=normalized, delay_ms=delay_ms)
        await self.mode_store.set(mode)
        log.info("Mode set to loop", colors=len(normalized), delay_ms=delay_ms)
        return mode

    async def set_script(self, framerate: Optional[int] = None, frames: Optional[List[str]] = None) -> ScriptMode:
        """
        Switch to script mode

        With frames: validates them and replaces the buffers. Without frames
        the current colors are kept (none when coming from another mode) and
        regrouped into buffers for the new framerate.

        Raises:
            FrameValidationError: Frames do not follow the LED text format
            ValidationError: framerate <= 0
        """
        current = await self.mode_store.get()
        base = current if isinstance(current, ScriptMode) else ScriptMode()

        framerate = base.framerate if framerate is None else framerate
        self.segmenter.frames_per_buffer(framerate)

        if frames is not None:
            result = validate_frames(frames, self.num_leds)
            buffers = self.segmenter.segment(result.frames, framerate)
            log.info(f"Segmented {result.count} frames into {len(buffers)} buffers", framerate=framerate)
        else:
            buffers = self.segmenter.rechunk(base.buffers, framerate)

        mode = ScriptMode(
            framerate=framerate,
            buffers=buffers,
            total_buffers=len(buffers),
            current_buffer_index=0
        )
        await self.mode_store.set(mode)
        log.info("Mode set to script", framerate=framerate, total_buffers=mode.total_buffers)
        return mode

    async def set_claude(self) -> ClaudeMode:
        mode = ClaudeMode()
        await self.mode_store.set(mode)
        log.info("Mode set to claude")
        return mode

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------

    async def get_device_view(self) -> dict:
        """
        What the microcontroller polls

        Script-like modes are reduced to {mode: "script", framerate}; the
        frame data is fetched separately, one buffer at a time.
        """
        mode = await self.mode_store.get()

        if isinstance(mode, SimpleMode):
            return {"mode": mode.mode.value, "on": mode.on, "color": mode.color}
        if isinstance(mode, LoopMode):
            return {"mode": mode.mode.value, "colors": list(mode.colors), "delay_ms": mode.delay_ms}
        if isinstance(mode, ScriptMode):
            return {"mode": "script", "framerate": mode.framerate}

        script = await self.scripts.get_playback_script()
        return {"mode": "script", "framerate": script.framerate if script else DEFAULT_FRAMERATE}

    async def get_state(self) -> dict:
        """Full state for the web UI, without the buffer payloads"""
        mode = await self.mode_store.get()
        state = {"mode": mode.mode.value}

        if isinstance(mode, SimpleMode):
            state.update(on=mode.on, color=mode.color)
        elif isinstance(mode, LoopMode):
            state.update(colors=list(mode.colors), delay_ms=mode.delay_ms)
        elif isinstance(mode, ScriptMode):
            state.update(
                framerate=mode.framerate,
                total_buffers=mode.total_buffers,
                current_buffer_index=mode.current_buffer_index
            )
        else:
            script = await self.scripts.get_playback_script()
            state.update(
                current_buffer_index=mode.current_buffer_index,
                script_id=script.id if script else None,
                script_title=script.title if script else None,
                framerate=script.framerate if script else DEFAULT_FRAMERATE,
                frame_count=script.frame_count if script else 0
            )
        return state
