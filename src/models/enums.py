"""
Enums for the LED ring controller
"""

from enum import Enum, auto


class LedMode(Enum):
    """
    Display modes of the ring (exactly one is active at a time)

    SIMPLE: Static single color, on/off
    LOOP: Device cycles through a color list at a fixed delay
    SCRIPT: Pre-rendered animation buffers stored with the mode
    CLAUDE: Plays the active (or most recent) AI-generated script
    """
    SIMPLE = "simple"
    LOOP = "loop"
    SCRIPT = "script"
    CLAUDE = "claude"

    @property
    def is_buffered(self) -> bool:
        """True for modes whose animation is served buffer by buffer"""
        return self in (LedMode.SCRIPT, LedMode.CLAUDE)


class ScriptAuthor(Enum):
    """Who created a stored script"""
    USER = "user"
    AI = "ai"


class StorageBackend(Enum):
    """Persistence backend for mode state and scripts"""
    JSON = "json"
    MEMORY = "memory"


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()      # Configuration loading, validation
    STATE = auto()       # Mode store reads/writes, mode switches
    PLAYBACK = auto()    # Buffer negotiation
    SCRIPT = auto()      # Script CRUD, activation
    EXECUTION = auto()   # Remote code execution (Judge0)
    MODEL = auto()       # LLM calls
    GENERATION = auto()  # AI animation pipeline
    API = auto()
    SYSTEM = auto()      # Startup, shutdown, errors
