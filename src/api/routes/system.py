"""
System endpoints - storage and configuration introspection
"""

from fastapi import APIRouter, Depends
from typing import Dict, Any
from datetime import datetime, timezone

from api.dependencies import get_service_container
from models.enums import LogCategory, StorageBackend
from services.service_container import ServiceContainer
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.API)

router = APIRouter(prefix="/system", tags=["System"])


@router.get("/storage")
async def get_storage_info(
    services: ServiceContainer = Depends(get_service_container)
) -> Dict[str, Any]:
    """
    Where state lives and what it holds.

    Returns:
        - backend: "json" or "memory"
        - mode_file / scripts_file: File paths (json backend only)
        - current_mode: Mode currently stored
        - script_count / active_script_id
        - config_source: YAML file the config was loaded from
    """
    config = services.config
    storage = config.storage
    scripts = await services.script_repository.list_all()
    mode = await services.mode_store.get()
    active = next((s for s in scripts if s.is_active), None)

    info = {
        "backend": storage.backend.value,
        "current_mode": mode.mode.value,
        "script_count": len(scripts),
        "active_script_id": active.id if active else None,
        "config_source": config.source_path,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if storage.backend == StorageBackend.JSON:
        info["mode_file"] = str(services.mode_store.path)
        info["scripts_file"] = str(services.script_repository.path)
    return info
