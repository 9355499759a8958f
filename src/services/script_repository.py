"""
Script Repository

Persisted animations. At most one script is active: set_active() clears
every flag, then sets one. The base class does it as two writes; the
bundled repositories do both in a single locked write.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from copy import deepcopy
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

import aiofiles

from models.domain.script import Script
from models.enums import LogCategory, ScriptAuthor
from models.errors import ScriptNotFoundError, StorageError
from utils.json_files import write_json_atomic
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.SCRIPT)


class ScriptRepository(ABC):
    """CRUD + activation over stored scripts"""

    @abstractmethod
    async def list_all(self) -> List[Script]:
        """All scripts, newest first"""

    @abstractmethod
    async def get(self, script_id: int) -> Optional[Script]:
        ...

    @abstractmethod
    async def create(
        self,
        title: str,
        description: str,
        source_code: str,
        frames: List[str],
        created_by: ScriptAuthor = ScriptAuthor.USER,
        reasoning: Optional[str] = None,
        set_as_active: bool = False,
        framerate: int = 60
    ) -> Script:
        ...

    @abstractmethod
    async def update(
        self,
        script_id: int,
        title: str,
        description: str,
        source_code: str,
        frames: List[str],
        framerate: int = 60
    ) -> Script:
        """Raises ScriptNotFoundError"""

    @abstractmethod
    async def delete(self, script_id: int) -> None:
        """Raises ScriptNotFoundError"""

    @abstractmethod
    async def deactivate_all(self) -> None:
        ...

    @abstractmethod
    async def mark_active(self, script_id: int) -> None:
        """Raises ScriptNotFoundError"""

    async def set_active(self, script_id: int) -> None:
        await self.deactivate_all()
        await self.mark_active(script_id)
        log.info("Script activated", script_id=script_id)

    async def get_active(self) -> Optional[Script]:
        for script in await self.list_all():
            if script.is_active:
                return script
        return None

    async def get_latest(self, created_by: Optional[ScriptAuthor] = None) -> Optional[Script]:
        for script in await self.list_all():
            if created_by is None or script.created_by == created_by:
                return script
        return None

    async def get_playback_script(self) -> Optional[Script]:
        """What CLAUDE mode plays: the active script, else the newest AI script"""
        active = await self.get_active()
        if active is not None:
            return active
        return await self.get_latest(ScriptAuthor.AI)


class InMemoryScriptRepository(ScriptRepository):
    """
    Dict-backed repository; also the working set of JsonScriptRepository

    Every operation runs under one lock so a load, mutate and save sequence
    is never interleaved with another one on the same working set.
    """

    def __init__(self):
        self._scripts: Dict[int, Script] = {}
        self._next_id = 1
        self._lock = asyncio.Lock()

    async def _load(self) -> None:
        """Hook for subclasses that keep the working set on disk"""

    async def _save(self) -> None:
        """Hook for subclasses that keep the working set on disk"""

    async def list_all(self) -> List[Script]:
        async with self._lock:
            await self._load()
            scripts = sorted(self._scripts.values(), key=lambda s: (s.created_at, s.id), reverse=True)
            return [deepcopy(s) for s in scripts]

    async def get(self, script_id: int) -> Optional[Script]:
        async with self._lock:
            await self._load()
            script = self._scripts.get(script_id)
            return deepcopy(script) if script else None

    async def create(
        self,
        title: str,
        description: str,
        source_code: str,
        frames: List[str],
        created_by: ScriptAuthor = ScriptAuthor.USER,
        reasoning: Optional[str] = None,
        set_as_active: bool = False,
        framerate: int = 60
    ) -> Script:
        async with self._lock:
            await self._load()
            if set_as_active:
                for existing in self._scripts.values():
                    existing.is_active = False

            script = Script(
                id=self._next_id,
                title=title,
                description=description,
                source_code=source_code,
                frames=list(frames),
                framerate=framerate,
                created_by=created_by,
                reasoning=reasoning,
                is_active=set_as_active,
                created_at=datetime.now(timezone.utc),
            )
            self._scripts[script.id] = script
            self._next_id += 1
            await self._save()

        log.info(
            "Saved script",
            script_id=script.id,
            title=title,
            frames=script.frame_count,
            created_by=created_by.value
        )
        return deepcopy(script)

    async def update(
        self,
        script_id: int,
        title: str,
        description: str,
        source_code: str,
        frames: List[str],
        framerate: int = 60
    ) -> Script:
        async with self._lock:
            await self._load()
            script = self._require(script_id)
            script.title = title
            script.description = description
            script.source_code = source_code
            script.frames = list(frames)
            script.framerate = framerate
            await self._save()
        log.info("Updated script", script_id=script_id, frames=script.frame_count)
        return deepcopy(script)

    async def delete(self, script_id: int) -> None:
        async with self._lock:
            await self._load()
            self._require(script_id)
            del self._scripts[script_id]
            await self._save()
        log.info("Deleted script", script_id=script_id)

    async def deactivate_all(self) -> None:
        async with self._lock:
            await self._load()
            for script in self._scripts.values():
                script.is_active = False
            await self._save()

    async def mark_active(self, script_id: int) -> None:
        async with self._lock:
            await self._load()
            self._require(script_id).is_active = True
            await self._save()

    async def set_active(self, script_id: int) -> None:
        async with self._lock:
            await self._load()
            target = self._require(script_id)
            for script in self._scripts.values():
                script.is_active = False
            target.is_active = True
            await self._save()
        log.info("Script activated", script_id=script_id)

    def _require(self, script_id: int) -> Script:
        script = self._scripts.get(script_id)
        if script is None:
            raise ScriptNotFoundError(script_id)
        return script


class JsonScriptRepository(InMemoryScriptRepository):
    """
    Scripts persisted to one JSON file

    File format:
    {"next_id": 4, "scripts": [{"id": 1, "title": ..., "frames": [...], ...}]}

    The file is re-read before every operation, so several processes
    sharing it see each other's writes (last writer wins).
    """

    def __init__(self, path: Path):
        super().__init__()
        self.path = Path(path)

    async def _load(self) -> None:
        try:
            async with aiofiles.open(self.path, "r", encoding="utf-8") as f:
                content = await f.read()
        except FileNotFoundError:
            self._scripts = {}
            self._next_id = 1
            return
        except OSError as ex:
            raise StorageError(f"Failed to read scripts: {ex}", str(self.path)) from ex

        try:
            data = json.loads(content)
            scripts = [Script.from_dict(item) for item in data.get("scripts", [])]
        except (json.JSONDecodeError, KeyError, ValueError, TypeError) as ex:
            log.error("Invalid scripts file", path=str(self.path), error=str(ex))
            raise StorageError(f"Scripts file is corrupted: {ex}", str(self.path)) from ex

        self._scripts = {s.id: s for s in scripts}
        self._next_id = max(int(data.get("next_id", 1)), max(self._scripts, default=0) + 1)

    async def _save(self) -> None:
        payload = {
            "next_id": self._next_id,
            "scripts": [s.to_dict() for s in self._scripts.values()],
        }
        try:
            await write_json_atomic(self.path, payload, indent=2)
        except OSError as ex:
            log.error("Failed to save scripts", path=str(self.path), error=str(ex))
            raise StorageError(f"Failed to save scripts: {ex}", str(self.path)) from ex
