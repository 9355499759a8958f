"""Services layer"""

from .mode_store import ModeStore, JsonModeStore, InMemoryModeStore
from .script_repository import ScriptRepository, JsonScriptRepository, InMemoryScriptRepository
from .control_service import ControlService
from .playback_service import PlaybackService, BufferPayload
from .code_runner import Judge0CodeRunner, ExecutionResult
from .script_executor import ScriptExecutor, strip_markdown_code_fences
from .script_service import ScriptService
from .model_client import AnthropicModelClient
from .generation_service import GenerationService
from .service_container import ServiceContainer
from .factory import build_services

__all__ = [
    "ModeStore",
    "JsonModeStore",
    "InMemoryModeStore",
    "ScriptRepository",
    "JsonScriptRepository",
    "InMemoryScriptRepository",
    "ControlService",
    "PlaybackService",
    "BufferPayload",
    "Judge0CodeRunner",
    "ExecutionResult",
    "ScriptExecutor",
    "strip_markdown_code_fences",
    "ScriptService",
    "AnthropicModelClient",
    "GenerationService",
    "ServiceContainer",
    "build_services",
]
