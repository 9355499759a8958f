"""
Generation trigger - scheduled AI animation run
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_service_container
from api.middleware.auth import verify_cron_trigger
from api.schemas.script import GenerationResponse
from models.enums import LogCategory
from services.service_container import ServiceContainer
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.API)

router = APIRouter(
    prefix="/cron",
    tags=["Generation"],
    dependencies=[Depends(verify_cron_trigger)],
)


@router.get(
    "/generate",
    response_model=GenerationResponse,
    summary="Generate a new AI animation",
    description="Model writes a generator, the sandbox runs it, valid output is stored as the active script"
)
async def generate(
    services: ServiceContainer = Depends(get_service_container)
) -> GenerationResponse:
    """
    **Errors:**
    - 401 UNAUTHORIZED: Trigger header missing or wrong
    - 500 CONFIGURATION_ERROR: Missing API keys
    - 502 EXTERNAL_SERVICE_ERROR: Model or sandbox failed after all retries
    """
    log.info("Generation triggered")
    result = await services.generation_service.generate()
    return GenerationResponse(
        script_id=result.script.id,
        title=result.script.title,
        reasoning=result.reasoning,
        source_code=result.source_code,
        frame_count=result.frame_count,
        attempts=result.attempts,
        sample_frames=result.sample_frames
    )
