"""Service Container - Dependency injection container for all core services"""

from dataclasses import dataclass
from typing import Optional

from managers.config_manager import ConfigManager
from models.config import AppConfig
from services.control_service import ControlService
from services.generation_service import GenerationService
from services.mode_store import ModeStore
from services.playback_service import PlaybackService
from services.script_repository import ScriptRepository
from services.script_service import ScriptService


@dataclass
class ServiceContainer:
    """
    Centralized dependency injection container for all core services.

    Built once at startup (main_asyncio.py) and handed to the API layer via
    api.dependencies.set_service_container().

    Services included:
    - control_service: Mode switching and device/UI state projections
    - playback_service: Buffer negotiation for the device
    - script_service: Script CRUD, dry runs and presets
    - generation_service: Scheduled AI animation pipeline

    Stores included:
    - mode_store: The single current LED mode
    - script_repository: Persisted scripts

    Usage:
        services = ServiceContainer(
            config=config,
            mode_store=mode_store,
            script_repository=repository,
            control_service=control_service,
            playback_service=playback_service,
            script_service=script_service,
            generation_service=generation_service,
        )
        set_service_container(services)
    """

    config: AppConfig
    mode_store: ModeStore
    script_repository: ScriptRepository
    control_service: ControlService
    playback_service: PlaybackService
    script_service: ScriptService
    generation_service: GenerationService
    config_manager: Optional[ConfigManager] = None
