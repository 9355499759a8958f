"""
Models package - Data models for the LED ring controller
"""

from .enums import LedMode, ScriptAuthor, LogLevel, LogCategory
from .mode import SimpleMode, LoopMode, ScriptMode, ClaudeMode, Mode

__all__ = [
    'LedMode',
    'ScriptAuthor',
    'LogLevel',
    'LogCategory',
    'SimpleMode',
    'LoopMode',
    'ScriptMode',
    'ClaudeMode',
    'Mode',
]
