"""
Playback Service - serves one buffer at a time to the device

The device is stateless and may fall out of sync (mode switched, animation
replaced, reboot). Any index it cannot use silently becomes 0 so the ring
keeps showing something; only a non-buffered mode or an empty animation is
reported as an error.
"""

from dataclasses import dataclass, replace
from typing import List, Optional, Tuple, Union

from engine.buffer_segmenter import BufferSegmenter, encode_buffer
from models.enums import LogCategory
from models.errors import StateMismatchError, NoBuffersError
from models.mode import Mode, ScriptMode
from services.mode_store import ModeStore
from services.script_repository import ScriptRepository
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.PLAYBACK)


@dataclass
class BufferPayload:
    buffer: str
    buffer_index: int
    next_buffer_index: int
    total_buffers: int
    framerate: int
    format: str = "hex"


@dataclass
class CompletionResult:
    current_buffer_index: int
    total_buffers: int


def resolve_index(requested: Union[int, str, None], total_buffers: int) -> int:
    """
    Map a client-supplied index onto [0, total_buffers)

    None, non-numeric text, negatives and out-of-range values all yield 0.
    Text must be a whole integer: "1.5" and "3abc" are invalid (0), not
    truncated to their leading digits.
    """
    if requested is None or isinstance(requested, bool):
        return 0

    if isinstance(requested, str):
        try:
            requested = int(requested.strip())
        except ValueError:
            return 0

    if not isinstance(requested, int) or requested < 0 or requested >= total_buffers:
        return 0
    return requested


class PlaybackService:
    """Buffer negotiation for SCRIPT and CLAUDE modes"""

    def __init__(self, mode_store: ModeStore, scripts: ScriptRepository, segmenter: Optional[BufferSegmenter] = None):
        self.mode_store = mode_store
        self.scripts = scripts
        self.segmenter = segmenter or BufferSegmenter()

    async def _resolve_buffers(self, mode: Mode) -> Tuple[List[List[int]], int]:
        if not mode.mode.is_buffered:
            raise StateMismatchError(mode.mode.value)

        if isinstance(mode, ScriptMode):
            buffers, framerate = mode.buffers, mode.framerate
        else:
            script = await self.scripts.get_playback_script()
            if script is None:
                raise NoBuffersError(mode.mode.value)
            buffers = self.segmenter.segment(script.frames, script.framerate)
            framerate = script.framerate

        if not buffers:
            raise NoBuffersError(mode.mode.value)
        return buffers, framerate

    async def get_buffer(self, requested_index: Union[int, str, None] = None) -> BufferPayload:
        """
        Fetch one encoded buffer

        Raises:
            StateMismatchError: Current mode is SIMPLE or LOOP
            NoBuffersError: Buffered mode with nothing to play
        """
        mode = await self.mode_store.get()
        buffers, framerate = await self._resolve_buffers(mode)
        total = len(buffers)

        index = resolve_index(requested_index, total)
        if requested_index is not None and str(index) != str(requested_index).strip():
            log.debug("Buffer index fell back to 0", requested=requested_index, total_buffers=total)

        return BufferPayload(
            buffer=encode_buffer(buffers[index]),
            buffer_index=index,
            next_buffer_index=(index + 1) % total,
            total_buffers=total,
            framerate=framerate
        )

    async def complete_buffer(self) -> CompletionResult:
        """Advance the server-side cursor to the next buffer, wrapping at the end"""
        mode = await self.mode_store.get()
        buffers, _ = await self._resolve_buffers(mode)
        total = len(buffers)

        next_index = (mode.current_buffer_index + 1) % total
        await self.mode_store.set(replace(mode, current_buffer_index=next_index))

        log.debug("Buffer completed", current_buffer_index=next_index, total_buffers=total)
        return CompletionResult(current_buffer_index=next_index, total_buffers=total)
