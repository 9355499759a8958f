"""Wiring of stores and services from AppConfig"""

from pathlib import Path
from typing import Optional

import httpx

from engine.buffer_segmenter import BufferSegmenter
from managers.config_manager import ConfigManager
from models.config import AppConfig
from models.enums import LogCategory, StorageBackend
from services.code_runner import Judge0CodeRunner
from services.control_service import ControlService
from services.generation_service import GenerationService
from services.mode_store import JsonModeStore, InMemoryModeStore
from services.model_client import AnthropicModelClient
from services.playback_service import PlaybackService
from services.script_executor import ScriptExecutor
from services.script_repository import JsonScriptRepository, InMemoryScriptRepository
from services.script_service import ScriptService
from services.service_container import ServiceContainer
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.SYSTEM)


def build_services(
    config: AppConfig,
    config_manager: Optional[ConfigManager] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> ServiceContainer:
    """
    Build the ServiceContainer

    Args:
        config: Loaded application config
        config_manager: Kept on the container for the system routes
        transport: httpx transport shared by the Judge0 and model clients (tests)
    """
    storage = config.storage
    if storage.backend == StorageBackend.MEMORY:
        mode_store = InMemoryModeStore()
        script_repository = InMemoryScriptRepository()
    else:
        state_dir = Path(storage.state_dir)
        mode_store = JsonModeStore(state_dir / storage.mode_file)
        script_repository = JsonScriptRepository(state_dir / storage.scripts_file)

    num_leds = config.playback.num_leds
    segmenter = BufferSegmenter(config.playback.buffer_duration_seconds, num_leds)

    runner = Judge0CodeRunner(config.judge0, transport=transport)
    executor = ScriptExecutor(runner, num_leds=num_leds)
    model = AnthropicModelClient(config.generation, transport=transport)

    log.info(
        "Services created",
        storage=storage.backend.value,
        buffer_duration=config.playback.buffer_duration_seconds
    )

    return ServiceContainer(
        config=config,
        mode_store=mode_store,
        script_repository=script_repository,
        control_service=ControlService(mode_store, script_repository, segmenter, num_leds),
        playback_service=PlaybackService(mode_store, script_repository, segmenter),
        script_service=ScriptService(script_repository, executor, segmenter, num_leds),
        generation_service=GenerationService(
            config.generation, config.judge0, model, runner, script_repository, num_leds
        ),
        config_manager=config_manager
    )
