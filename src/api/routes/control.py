"""
Control Endpoints - HTTP routes for mode switching and buffer playback

The microcontroller polls GET /control for the current mode and, in script
or claude mode, walks the animation with GET /control/buffer?index=N,
feeding back next_buffer_index each time. The web UI uses POST /control
and GET /control/state.
"""

from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query

from api.dependencies import get_service_container
from api.schemas.control import (
    ControlRequest, SimpleModeRequest, LoopModeRequest, ScriptModeRequest,
    BufferResponse, CompleteBufferResponse
)
from models.enums import LogCategory
from services.service_container import ServiceContainer
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.API)

router = APIRouter(
    prefix="/control",
    tags=["Control"],
)


@router.get(
    "",
    summary="Device view of the current mode",
    description="Current mode as the microcontroller sees it (no frame data)"
)
async def get_control(
    services: ServiceContainer = Depends(get_service_container)
) -> Dict[str, Any]:
    """
    Get the current mode, reduced for the device.

    Script and claude modes are both reported as `{"mode": "script", "framerate": N}`;
    the frames are fetched separately via `/control/buffer`.

    **Example Response (loop):**
    ```json
    {"mode": "loop", "colors": ["#FF0000", "#00FF00"], "delay_ms": 1000}
    ```
    """
    return await services.control_service.get_device_view()


@router.post(
    "",
    summary="Switch mode",
    description="Set simple, loop, script or claude mode; unset fields keep their current value"
)
async def set_control(
    request: Annotated[ControlRequest, Body(discriminator="mode")],
    services: ServiceContainer = Depends(get_service_container)
) -> Dict[str, Any]:
    """
    Switch the LED ring to a new mode.

    **Example Requests:**
    ```json
    {"mode": "simple", "on": true, "color": "#FF8800"}
    {"mode": "loop", "colors": ["#FF0000", "#0000FF"], "delay_ms": 500}
    {"mode": "script", "framerate": 60, "frames": ["#FF0000,#FF0000,...(60 colors)"]}
    {"mode": "claude"}
    ```

    **Errors:**
    - 400: Invalid color, wrong color count in a frame, framerate <= 0, malformed JSON
    """
    control = services.control_service

    if isinstance(request, SimpleModeRequest):
        await control.set_simple(on=request.on, color=request.color)
    elif isinstance(request, LoopModeRequest):
        await control.set_loop(colors=request.colors, delay_ms=request.delay_ms)
    elif isinstance(request, ScriptModeRequest):
        await control.set_script(framerate=request.framerate, frames=request.frames)
    else:
        await control.set_claude()

    return await control.get_state()


@router.get(
    "/state",
    summary="Full state for the UI",
    description="Current mode with playback details, without buffer payloads"
)
async def get_control_state(
    services: ServiceContainer = Depends(get_service_container)
) -> Dict[str, Any]:
    return await services.control_service.get_state()


@router.get(
    "/buffer",
    response_model=BufferResponse,
    summary="Fetch one playback buffer",
    description="Any missing, malformed or out-of-range index falls back to buffer 0"
)
async def get_buffer(
    index: Optional[str] = Query(None, description="Buffer index from the previous next_buffer_index"),
    services: ServiceContainer = Depends(get_service_container)
) -> BufferResponse:
    """
    Get one buffer of the current animation.

    The buffer is a single hex string, 6 lowercase characters per color,
    60 colors per frame, frames concatenated.

    **Errors:**
    - 400 WRONG_MODE: Current mode is simple or loop (details.current_mode)
    - 400 NO_BUFFERS: Nothing to play
    """
    payload = await services.playback_service.get_buffer(index)
    return BufferResponse(
        buffer=payload.buffer,
        buffer_index=payload.buffer_index,
        next_buffer_index=payload.next_buffer_index,
        total_buffers=payload.total_buffers,
        framerate=payload.framerate,
        format=payload.format
    )


@router.post(
    "/complete",
    response_model=CompleteBufferResponse,
    summary="Advance the playback cursor",
    description="Move the server-side cursor to the next buffer (wraps to 0)"
)
async def complete_buffer(
    services: ServiceContainer = Depends(get_service_container)
) -> CompleteBufferResponse:
    result = await services.playback_service.complete_buffer()
    return CompleteBufferResponse(
        current_buffer_index=result.current_buffer_index,
        total_buffers=result.total_buffers
    )
