"""
Control service tests

Mode setters are read-modify-write: omitted fields keep their current
value within the same mode and take defaults when switching modes.
"""

import pytest
import pytest_asyncio

from models.enums import ScriptAuthor
from models.errors import ValidationError, InvalidColorFormatError, WrongColorCountError
from models.mode import SimpleMode, LoopMode, ScriptMode, ClaudeMode
from services.control_service import ControlService


@pytest_asyncio.fixture
async def control(mode_store, repository, segmenter):
    return ControlService(mode_store, repository, segmenter)


class TestSimpleMode:

    @pytest.mark.asyncio
    async def test_partial_update_keeps_color(self, control):
        await control.set_simple(on=True, color="#ff0000")
        mode = await control.set_simple(on=False)

        assert mode == SimpleMode(on=False, color="#FF0000")

    @pytest.mark.asyncio
    async def test_from_other_mode_uses_defaults(self, control):
        await control.set_loop(colors=["#FF0000"])
        mode = await control.set_simple(on=True)

        assert mode.color == "#0000FF"

    @pytest.mark.asyncio
    async def test_invalid_color_rejected_and_state_unchanged(self, control):
        with pytest.raises(InvalidColorFormatError):
            await control.set_simple(color="blue")

        assert await control.get_mode() == SimpleMode()


class TestLoopMode:

    @pytest.mark.asyncio
    async def test_defaults(self, control):
        mode = await control.set_loop()

        assert mode.colors == ["#FF0000", "#00FF00", "#0000FF"]
        assert mode.delay_ms == 1000

    @pytest.mark.asyncio
    async def test_partial_update_keeps_colors(self, control):
        await control.set_loop(colors=["#FFFFFF", "#000000"], delay_ms=100)
        mode = await control.set_loop(delay_ms=250)

        assert mode == LoopMode(colors=["#FFFFFF", "#000000"], delay_ms=250)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kwargs", [
        {"colors": []},
        {"delay_ms": -1},
        {"delay_ms": True},
    ])
    async def test_rejects_bad_input(self, control, kwargs):
        with pytest.raises(ValidationError):
            await control.set_loop(**kwargs)


class TestScriptMode:

    @pytest.mark.asyncio
    async def test_frames_are_segmented(self, control, make_frame):
        mode = await control.set_script(framerate=60, frames=[make_frame()] * 120)

        assert mode.total_buffers == 4
        assert len(mode.buffers[0]) == 1800
        assert mode.current_buffer_index == 0

    @pytest.mark.asyncio
    async def test_without_frames_keeps_colors_and_resets_cursor(self, control, mode_store, make_frame):
        await control.set_script(framerate=60, frames=[make_frame()] * 60)
        current = await mode_store.get()
        await mode_store.set(ScriptMode(current.framerate, current.buffers, current.total_buffers, 1))

        mode = await control.set_script()

        assert mode.framerate == 60
        assert mode.buffers == current.buffers
        assert mode.current_buffer_index == 0

    @pytest.mark.asyncio
    async def test_framerate_change_regroups_buffers(self, control, make_frame):
        """Buffers always hold floor(framerate * 0.5s) frames, also after a framerate-only update."""
        colors = ["#FF0000", "#00FF00", "#0000FF", "#FFFFFF"]
        await control.set_script(framerate=60, frames=[make_frame(colors[i // 30]) for i in range(120)])

        faster = await control.set_script(framerate=120)

        assert faster.total_buffers == 2
        assert [len(b) for b in faster.buffers] == [3600, 3600]
        assert faster.buffers[0][1800] == 0x00FF00

        slower = await control.set_script(framerate=30)

        assert slower.total_buffers == 8
        assert all(len(b) == 900 for b in slower.buffers)
        assert sum(len(b) for b in slower.buffers) == 120 * 60

    @pytest.mark.asyncio
    async def test_from_other_mode_without_frames_is_empty(self, control):
        mode = await control.set_script()

        assert mode == ScriptMode(framerate=60, buffers=[], total_buffers=0, current_buffer_index=0)

    @pytest.mark.asyncio
    async def test_invalid_frames_leave_state_untouched(self, control, make_frame):
        with pytest.raises(WrongColorCountError):
            await control.set_script(frames=[make_frame(count=59)])

        assert isinstance(await control.get_mode(), SimpleMode)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("framerate", [0, -5])
    async def test_non_positive_framerate(self, control, framerate):
        with pytest.raises(ValidationError):
            await control.set_script(framerate=framerate)


class TestProjections:

    @pytest.mark.asyncio
    async def test_device_view_simple(self, control):
        await control.set_simple(on=True, color="#00ff00")

        assert await control.get_device_view() == {"mode": "simple", "on": True, "color": "#00FF00"}

    @pytest.mark.asyncio
    async def test_device_view_loop(self, control):
        await control.set_loop(colors=["#FF0000"], delay_ms=5)

        assert await control.get_device_view() == {"mode": "loop", "colors": ["#FF0000"], "delay_ms": 5}

    @pytest.mark.asyncio
    async def test_device_view_script_hides_buffers(self, control, make_frame):
        await control.set_script(framerate=30, frames=[make_frame()] * 30)

        assert await control.get_device_view() == {"mode": "script", "framerate": 30}

    @pytest.mark.asyncio
    async def test_claude_mode_reports_as_script(self, control, repository, make_frame):
        await repository.create("ai", "d", "", [make_frame()], created_by=ScriptAuthor.AI, framerate=24)
        await control.set_claude()

        assert await control.get_device_view() == {"mode": "script", "framerate": 24}

    @pytest.mark.asyncio
    async def test_claude_mode_without_script_defaults_framerate(self, control):
        mode = await control.set_claude()

        assert mode == ClaudeMode()
        assert await control.get_device_view() == {"mode": "script", "framerate": 60}

    @pytest.mark.asyncio
    async def test_state_describes_claude_script(self, control, repository, make_frame):
        script = await repository.create("Calm", "d", "", [make_frame()] * 3, set_as_active=True)
        await control.set_claude()

        state = await control.get_state()

        assert state["mode"] == "claude"
        assert state["script_id"] == script.id
        assert state["script_title"] == "Calm"
        assert state["frame_count"] == 3

    @pytest.mark.asyncio
    async def test_state_script_has_no_buffers(self, control, make_frame):
        await control.set_script(frames=[make_frame()] * 60)

        assert await control.get_state() == {
            "mode": "script", "framerate": 60, "total_buffers": 2, "current_buffer_index": 0
        }
