"""
Configuration models

Typed view of config.yaml. Defaults here are the single source of truth;
YAML keys and environment variables only override them.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from models.enums import LogLevel, StorageBackend


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8000
    docs_enabled: bool = True
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


@dataclass
class StorageConfig:
    backend: StorageBackend = StorageBackend.JSON
    state_dir: str = "data"
    mode_file: str = "led_state.json"
    scripts_file: str = "scripts.json"


@dataclass
class PlaybackConfig:
    num_leds: int = 60
    buffer_duration_seconds: float = 0.5


@dataclass
class GenerationConfig:
    anthropic_api_key: str = ""
    anthropic_base_url: str = "https://api.anthropic.com"
    anthropic_version: str = "2023-06-01"
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 16000
    thinking_enabled: bool = True
    thinking_budget_tokens: int = 10000
    web_search_enabled: bool = True
    max_retries: int = 3
    retry_delay_seconds: float = 2.0
    timeout_seconds: float = 300.0


@dataclass
class Judge0Config:
    endpoint: str = ""
    api_key: str = ""
    host: str = "judge0-ce.p.rapidapi.com"
    language_id: int = 71  # Python 3
    timeout_seconds: float = 60.0


@dataclass
class CronConfig:
    """The scheduled trigger is recognized by one header value"""
    trigger_header: str = "user-agent"
    trigger_value: str = "vercel-cron/1.0"


@dataclass
class LoggingConfig:
    level: LogLevel = LogLevel.INFO
    use_colors: bool = True


@dataclass
class AppConfig:
    server: ServerConfig = field(default_factory=ServerConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    playback: PlaybackConfig = field(default_factory=PlaybackConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    judge0: Judge0Config = field(default_factory=Judge0Config)
    cron: CronConfig = field(default_factory=CronConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    source_path: Optional[str] = None
