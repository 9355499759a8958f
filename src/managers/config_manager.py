"""
Config Manager

Loads config.yaml (falling back to factory defaults), overlays secrets and
deployment settings from the environment, and builds the typed AppConfig.
"""

import os
import yaml
from dataclasses import fields
from pathlib import Path
from typing import Dict, Mapping, Optional

from models.config import (
    AppConfig, ServerConfig, StorageConfig, PlaybackConfig,
    GenerationConfig, Judge0Config, CronConfig, LoggingConfig
)
from models.enums import LogCategory, LogLevel, StorageBackend
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.CONFIG)

# Environment variable -> (section, key)
ENV_OVERRIDES = {
    "ANTHROPIC_API_KEY": ("generation", "anthropic_api_key"),
    "ANTHROPIC_MODEL": ("generation", "model"),
    "JUDGE0_API_KEY": ("judge0", "api_key"),
    "JUDGE0_ENDPOINT": ("judge0", "endpoint"),
    "LED_STATE_DIR": ("storage", "state_dir"),
    "LED_STORAGE_BACKEND": ("storage", "backend"),
    "LED_API_HOST": ("server", "host"),
    "LED_API_PORT": ("server", "port"),
    "LED_LOG_LEVEL": ("logging", "level"),
}

_SECTIONS = {
    "server": ServerConfig,
    "storage": StorageConfig,
    "playback": PlaybackConfig,
    "generation": GenerationConfig,
    "judge0": Judge0Config,
    "cron": CronConfig,
    "logging": LoggingConfig,
}


class ConfigManager:
    """
    Configuration manager

    Example:
        config_manager = ConfigManager()
        config = config_manager.load()

        config.playback.buffer_duration_seconds  # 0.5
        config.judge0.endpoint                   # from JUDGE0_ENDPOINT
    """

    def __init__(
        self,
        config_path="config/config.yaml",
        defaults_path="config/factory_defaults.yaml",
        environ: Optional[Mapping[str, str]] = None
    ):
        """
        Args:
            config_path: Path to main config.yaml (relative to src/ unless absolute)
            defaults_path: Path to factory defaults fallback
            environ: Environment mapping (os.environ when None)
        """
        src_dir = Path(__file__).parent.parent
        self.config_path = self._resolve(src_dir, config_path)
        self.factory_defaults_path = self._resolve(src_dir, defaults_path)
        self.environ = os.environ if environ is None else environ
        self.data: Dict = {}
        self.config: Optional[AppConfig] = None

    @staticmethod
    def _resolve(src_dir: Path, path) -> Path:
        path = Path(path)
        return path if path.is_absolute() else src_dir / path

    def load(self) -> AppConfig:
        """
        Load configuration

        Process:
        1. Load config.yaml
        2. Fallback to factory_defaults.yaml on failure
        3. Apply environment overrides
        4. Build AppConfig (unknown keys are logged and ignored)
        """
        source = self.config_path
        try:
            self.data = self._read_yaml(self.config_path)
        except Exception as ex:
            log.error("Failed to load config.yaml", error=str(ex), error_type=type(ex).__name__)
            log.warn("Falling back to factory defaults")
            source = self.factory_defaults_path
            self.data = self._read_yaml(self.factory_defaults_path)

        self._apply_env_overrides()
        self.config = self._build(self.data)
        self.config.source_path = str(source)

        log.info(
            "Configuration loaded",
            source=source.name,
            storage=self.config.storage.backend.value,
            judge0=bool(self.config.judge0.endpoint),
            anthropic=bool(self.config.generation.anthropic_api_key)
        )
        return self.config

    @staticmethod
    def _read_yaml(path: Path) -> Dict:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}

    def _apply_env_overrides(self) -> None:
        for env_name, (section, key) in ENV_OVERRIDES.items():
            value = self.environ.get(env_name)
            if value is None or value == "":
                continue
            self.data.setdefault(section, {})
            if self.data[section] is None:
                self.data[section] = {}
            self.data[section][key] = value
            log.debug(f"Override from environment: {env_name}", section=section, key=key)

    def _build(self, data: Dict) -> AppConfig:
        config = AppConfig()
        for section, cls in _SECTIONS.items():
            raw = data.get(section) or {}
            setattr(config, section, self._build_section(section, cls, raw))
        return config

    def _build_section(self, section: str, cls, raw: Dict):
        defaults = cls()
        known = {f.name: f for f in fields(cls)}
        values = {}

        for key, value in raw.items():
            if key not in known:
                log.warn(f"Unknown config key ignored: {section}.{key}")
                continue
            values[key] = self._coerce(getattr(defaults, key), value, f"{section}.{key}")

        return cls(**values)

    @staticmethod
    def _coerce(default, value, name: str):
        """Coerce YAML/env values to the type of the dataclass default"""
        if isinstance(default, bool):
            if isinstance(value, str):
                return value.strip().lower() in ("1", "true", "yes", "on")
            return bool(value)
        if isinstance(default, LogLevel):
            return LogLevel[str(value).upper()]
        if isinstance(default, StorageBackend):
            return StorageBackend(str(value).lower())
        if isinstance(default, int):
            return int(value)
        if isinstance(default, float):
            return float(value)
        if isinstance(default, list):
            if not isinstance(value, list):
                raise ValueError(f"{name} must be a list")
            return list(value)
        return str(value)
