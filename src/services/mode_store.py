"""
Mode State Store

Holds exactly one current Mode. The JSON store keeps it as a single record
on disk and rewrites the whole file on every set (last writer wins). Each
write goes through its own temp file. The in-memory store is the drop-in
substitute for tests.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from copy import deepcopy
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import aiofiles

from models.enums import LogCategory
from models.errors import StorageError
from models.mode import Mode, default_mode, mode_from_record, mode_to_record
from utils.json_files import write_json_atomic
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.STATE)


class ModeStore(ABC):
    """Single-row repository for the current LED mode"""

    @abstractmethod
    async def get(self) -> Mode:
        """Last persisted mode, or the default Simple mode if none exists"""

    @abstractmethod
    async def set(self, mode: Mode) -> None:
        """Replace the persisted mode"""


class InMemoryModeStore(ModeStore):

    def __init__(self, initial: Optional[Mode] = None):
        self._record: Optional[dict] = mode_to_record(initial) if initial is not None else None

    async def get(self) -> Mode:
        if self._record is None:
            return default_mode()
        return mode_from_record(deepcopy(self._record))

    async def set(self, mode: Mode) -> None:
        self._record = deepcopy(mode_to_record(mode))
        log.debug(f"Mode set: {mode.mode.value}")


class JsonModeStore(ModeStore):
    """
    Mode persisted to a JSON file

    File format:
    {
        "mode": "script",
        "data": {"framerate": 60, "buffers": [[...]], "total_buffers": 4, "current_buffer_index": 0},
        "updated_at": "2025-01-01T12:00:00+00:00"
    }
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    async def get(self) -> Mode:
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                content = await f.read()
        except FileNotFoundError:
            log.debug("No stored LED state found, returning default")
            return default_mode()
        except OSError as ex:
            raise StorageError(f"Failed to read LED state: {ex}", str(self.path)) from ex

        try:
            record = json.loads(content)
        except json.JSONDecodeError as ex:
            log.error("Invalid JSON in LED state file", path=str(self.path), error=str(ex))
            raise StorageError(f"LED state file is corrupted: {ex}", str(self.path)) from ex

        return mode_from_record(record)

    async def set(self, mode: Mode) -> None:
        record = mode_to_record(mode)
        record["updated_at"] = datetime.now(timezone.utc).isoformat()

        try:
            async with self._lock:
                await write_json_atomic(self.path, record)
        except OSError as ex:
            log.error("Failed to save LED state", path=str(self.path), error=str(ex))
            raise StorageError(f"Failed to save LED state: {ex}", str(self.path)) from ex

        log.debug(f"Saved LED state: {mode.mode.value}", path=str(self.path))
