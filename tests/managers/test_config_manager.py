"""ConfigManager: YAML loading, factory fallback and environment overrides"""

import textwrap

import pytest

from managers.config_manager import ConfigManager
from models.enums import LogLevel, StorageBackend


@pytest.fixture
def write_yaml(tmp_path):
    def writer(name, content):
        path = tmp_path / name
        path.write_text(textwrap.dedent(content))
        return path
    return writer


def test_loads_typed_sections(write_yaml):
    config_path = write_yaml("config.yaml", """
        server:
          port: 9000
          cors_origins: ["http://localhost:3000"]
        storage:
          backend: memory
        playback:
          buffer_duration_seconds: 1
        generation:
          thinking_enabled: false
          max_retries: 2
        logging:
          level: debug
    """)

    config = ConfigManager(config_path, config_path, environ={}).load()

    assert config.server.port == 9000
    assert config.server.cors_origins == ["http://localhost:3000"]
    assert config.storage.backend == StorageBackend.MEMORY
    assert config.playback.buffer_duration_seconds == 1.0
    assert isinstance(config.playback.buffer_duration_seconds, float)
    assert config.generation.thinking_enabled is False
    assert config.generation.max_retries == 2
    assert config.logging.level == LogLevel.DEBUG
    assert config.source_path == str(config_path)


def test_missing_sections_use_defaults(write_yaml):
    config_path = write_yaml("config.yaml", "server:\n  port: 8001\n")

    config = ConfigManager(config_path, config_path, environ={}).load()

    assert config.playback.num_leds == 60
    assert config.judge0.language_id == 71
    assert config.cron.trigger_value == "vercel-cron/1.0"


def test_falls_back_to_factory_defaults(tmp_path, write_yaml):
    defaults = write_yaml("factory_defaults.yaml", "storage:\n  state_dir: fallback\n")

    config = ConfigManager(tmp_path / "missing.yaml", defaults, environ={}).load()

    assert config.storage.state_dir == "fallback"
    assert config.source_path == str(defaults)


def test_environment_overrides(write_yaml):
    config_path = write_yaml("config.yaml", "judge0:\n  endpoint: https://from-yaml\n")
    environ = {
        "ANTHROPIC_API_KEY": "sk-env",
        "JUDGE0_ENDPOINT": "https://from-env",
        "JUDGE0_API_KEY": "j-env",
        "LED_API_PORT": "8123",
        "LED_STORAGE_BACKEND": "MEMORY",
        "LED_LOG_LEVEL": "",
    }

    config = ConfigManager(config_path, config_path, environ=environ).load()

    assert config.generation.anthropic_api_key == "sk-env"
    assert config.judge0.endpoint == "https://from-env"
    assert config.judge0.api_key == "j-env"
    assert config.server.port == 8123
    assert config.storage.backend == StorageBackend.MEMORY
    assert config.logging.level == LogLevel.INFO


def test_unknown_keys_are_ignored(write_yaml, capsys):
    config_path = write_yaml("config.yaml", "playback:\n  brightness: 50\n")

    config = ConfigManager(config_path, config_path, environ={}).load()

    assert not hasattr(config.playback, "brightness")
    assert "Unknown config key ignored: playback.brightness" in capsys.readouterr().out


def test_shipped_config_files_load():
    config = ConfigManager(environ={}).load()

    assert config.playback.num_leds == 60
    assert config.playback.buffer_duration_seconds == 0.5
