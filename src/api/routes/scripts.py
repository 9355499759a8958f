"""
Script Endpoints - HTTP routes for stored animations

Creating or updating a script runs its Python code on the sandbox; only
code whose output is valid frame text is stored.
"""

from fastapi import APIRouter, Depends, status

from api.dependencies import get_service_container
from api.schemas.script import (
    ScriptCodeRequest, ScriptCreateRequest, ScriptUpdateRequest, ScriptFromFramesRequest,
    ScriptResponse, ScriptSummaryResponse, ScriptListResponse,
    ScriptTestResponse, ScriptSaveResponse
)
from models.enums import LogCategory
from services.script_service import SavedScript
from services.service_container import ServiceContainer
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.API)

router = APIRouter(
    prefix="/scripts",
    tags=["Scripts"],
)


def _saved_response(saved: SavedScript) -> ScriptSaveResponse:
    execution = saved.execution
    return ScriptSaveResponse(
        script=ScriptSummaryResponse.from_script(saved.script),
        frame_count=saved.script.frame_count,
        execution_time=execution.execution_time if execution else None,
        memory=execution.memory if execution else None
    )


# ============================================================================
# GET ENDPOINTS
# ============================================================================

@router.get(
    "",
    response_model=ScriptListResponse,
    summary="List scripts",
    description="All scripts, newest first, without frames"
)
async def list_scripts(
    services: ServiceContainer = Depends(get_service_container)
) -> ScriptListResponse:
    listing = await services.script_service.list_scripts()
    return ScriptListResponse(
        scripts=[ScriptSummaryResponse.from_script(s) for s in listing.scripts],
        active_id=listing.active_id,
        count=len(listing.scripts)
    )


@router.get(
    "/{script_id}",
    response_model=ScriptResponse,
    summary="Get script",
    description="One script including its frames"
)
async def get_script(
    script_id: int,
    services: ServiceContainer = Depends(get_service_container)
) -> ScriptResponse:
    """
    **Errors:**
    - 404 SCRIPT_NOT_FOUND
    """
    script = await services.script_service.get_script(script_id)
    return ScriptResponse.from_script(script)


# ============================================================================
# POST / PUT / DELETE ENDPOINTS
# ============================================================================

@router.post(
    "/test",
    response_model=ScriptTestResponse,
    summary="Dry run a script",
    description="Execute and validate without saving"
)
async def test_script(
    request: ScriptCodeRequest,
    services: ServiceContainer = Depends(get_service_container)
) -> ScriptTestResponse:
    """
    **Errors:**
    - 400: Blank fields, or output that is not valid frame text (message names the frame)
    - 502 EXTERNAL_SERVICE_ERROR: Sandbox failure or program error (details.stderr)
    """
    result = await services.script_service.test_script(
        request.title, request.description, request.source_code
    )
    return ScriptTestResponse(
        frame_count=result.frame_count,
        frames=result.frames,
        execution_time=result.execution_time,
        memory=result.memory
    )


@router.post(
    "",
    response_model=ScriptSaveResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create script",
    description="Execute the code, validate its output and store the frames"
)
async def create_script(
    request: ScriptCreateRequest,
    services: ServiceContainer = Depends(get_service_container)
) -> ScriptSaveResponse:
    saved = await services.script_service.create_script(
        request.title,
        request.description,
        request.source_code,
        set_as_active=request.set_as_active,
        framerate=request.framerate
    )
    log.info("Script created", script_id=saved.script.id, frames=saved.script.frame_count)
    return _saved_response(saved)


@router.post(
    "/from-frames",
    response_model=ScriptSummaryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create script from frames",
    description="Store already-rendered frame lines (no code execution)"
)
async def create_script_from_frames(
    request: ScriptFromFramesRequest,
    services: ServiceContainer = Depends(get_service_container)
) -> ScriptSummaryResponse:
    script = await services.script_service.create_from_frames(
        request.title,
        request.description,
        request.frames,
        framerate=request.framerate,
        set_as_active=request.set_as_active
    )
    return ScriptSummaryResponse.from_script(script)


@router.put(
    "/{script_id}",
    response_model=ScriptSaveResponse,
    summary="Update script",
    description="Re-execute the new code and replace the stored frames"
)
async def update_script(
    script_id: int,
    request: ScriptUpdateRequest,
    services: ServiceContainer = Depends(get_service_container)
) -> ScriptSaveResponse:
    saved = await services.script_service.update_script(
        script_id,
        request.title,
        request.description,
        request.source_code,
        framerate=request.framerate
    )
    return _saved_response(saved)


@router.delete(
    "/{script_id}",
    summary="Delete script"
)
async def delete_script(
    script_id: int,
    services: ServiceContainer = Depends(get_service_container)
) -> dict:
    await services.script_service.delete_script(script_id)
    return {"success": True, "script_id": script_id}


@router.post(
    "/{script_id}/activate",
    response_model=ScriptSummaryResponse,
    summary="Activate script",
    description="Make this the one active script (claude mode plays it)"
)
async def activate_script(
    script_id: int,
    services: ServiceContainer = Depends(get_service_container)
) -> ScriptSummaryResponse:
    script = await services.script_service.activate_script(script_id)
    return ScriptSummaryResponse.from_script(script)
