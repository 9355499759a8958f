"""
Trigger authentication for API

The generation endpoint is meant to be hit by a scheduler, not by users.
The scheduler is recognized by one header value (by default the
"user-agent: vercel-cron/1.0" that Vercel Cron sends). Endpoints opt in
with: dependencies=[Depends(verify_cron_trigger)].
"""

from fastapi import Depends, Request

from api.dependencies import get_service_container
from models.enums import LogCategory
from models.errors import UnauthorizedError
from services.service_container import ServiceContainer
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.API)


async def verify_cron_trigger(
    request: Request,
    services: ServiceContainer = Depends(get_service_container)
) -> None:
    """
    FastAPI dependency that admits only the configured scheduler.

    Raises:
        UnauthorizedError: 401 when the trigger header is missing or different
    """
    cron = services.config.cron
    value = request.headers.get(cron.trigger_header)

    if value != cron.trigger_value:
        log.warn("Unauthorized generation trigger", header=cron.trigger_header, value=value)
        raise UnauthorizedError("Unauthorized")
