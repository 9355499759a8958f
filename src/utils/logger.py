"""
Console logger for the LED ring service

Every module takes a category handle at import time:

    log = get_logger().for_category(LogCategory.PLAYBACK)
    log.info("Served buffer", index=3, next=0)

which prints

    [14:23:45] PLAYBACK   ✓ Served buffer
               ├─ index: 3
               └─ next: 0

configure_logger() changes level and colors on the shared instance, so
handles taken before startup configuration follow it.
"""

from datetime import datetime

from models.enums import LogLevel, LogCategory

RESET = '\033[0m'
DIM = '\033[2m'

CATEGORY_COLORS = {
    LogCategory.CONFIG: '\033[36m',
    LogCategory.STATE: '\033[96m',
    LogCategory.PLAYBACK: '\033[92m',
    LogCategory.SCRIPT: '\033[93m',
    LogCategory.EXECUTION: '\033[94m',
    LogCategory.MODEL: '\033[95m',
    LogCategory.GENERATION: '\033[35m',
    LogCategory.API: '\033[34m',
    LogCategory.SYSTEM: '\033[97m',
}

# symbol, color
LEVEL_STYLES = {
    LogLevel.DEBUG: ('·', DIM),
    LogLevel.INFO: ('✓', '\033[32m'),
    LogLevel.WARN: ('⚠', '\033[33m'),
    LogLevel.ERROR: ('✗', '\033[31m'),
}

LEVEL_ORDER = [LogLevel.DEBUG, LogLevel.INFO, LogLevel.WARN, LogLevel.ERROR]

DETAIL_INDENT = " " * 11


class Logger:
    """Prints one line per event plus one tree line per keyword detail"""

    def __init__(self, min_level: LogLevel = LogLevel.INFO, use_colors: bool = True):
        self.min_level = min_level
        self.use_colors = use_colors

    def _paint(self, text: str, color: str) -> str:
        return f"{color}{text}{RESET}" if self.use_colors else text

    def log(self, category: LogCategory, message: str, level: LogLevel = LogLevel.INFO, **details):
        if LEVEL_ORDER.index(level) < LEVEL_ORDER.index(self.min_level):
            return

        symbol, color = LEVEL_STYLES[level]
        stamp = datetime.now().strftime('[%H:%M:%S]')
        name = self._paint(category.name.ljust(10), CATEGORY_COLORS[category])
        print(f"{stamp} {name} {self._paint(symbol, color)} {self._paint(message, color)}")

        items = list(details.items())
        for i, (key, value) in enumerate(items):
            branch = "└─" if i == len(items) - 1 else "├─"
            print(f"{DETAIL_INDENT}{self._paint(branch, DIM)} {key}: {value}")

    def for_category(self, category: LogCategory) -> 'CategoryLogger':
        return CategoryLogger(self, category)


class CategoryLogger:
    """Handle that logs every event under one category"""

    def __init__(self, base: Logger, category: LogCategory):
        self._base = base
        self.category = category

    def debug(self, message: str, **details): self._base.log(self.category, message, LogLevel.DEBUG, **details)
    def info(self, message: str, **details): self._base.log(self.category, message, LogLevel.INFO, **details)
    def warn(self, message: str, **details): self._base.log(self.category, message, LogLevel.WARN, **details)
    def error(self, message: str, **details): self._base.log(self.category, message, LogLevel.ERROR, **details)


_logger = Logger()


def get_logger() -> Logger:
    return _logger


def configure_logger(min_level: LogLevel = LogLevel.INFO, use_colors: bool = True):
    """Update the shared instance in place (handles hold a reference to it)"""
    _logger.min_level = min_level
    _logger.use_colors = use_colors
