"""
Script Service - create, test, edit and activate stored animations

User scripts are Python generators: every create/update runs the code on
the sandbox and stores the validated frames it printed. Presets skip the
sandbox and are stored from generated frames directly.
"""

from dataclasses import dataclass
from typing import List, Optional

from animations.presets import PRESETS, Preset
from engine.buffer_segmenter import BufferSegmenter
from engine.frame_validator import validate_frames, NUM_LEDS
from models.domain.script import Script
from models.enums import LogCategory, ScriptAuthor
from models.errors import ValidationError, ScriptNotFoundError
from services.script_executor import ScriptExecutor, ScriptExecutionResult
from services.script_repository import ScriptRepository
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.SCRIPT)


@dataclass
class ScriptList:
    scripts: List[Script]
    active_id: Optional[int]


@dataclass
class SavedScript:
    script: Script
    execution: Optional[ScriptExecutionResult] = None


class ScriptService:

    def __init__(
        self,
        repository: ScriptRepository,
        executor: ScriptExecutor,
        segmenter: Optional[BufferSegmenter] = None,
        num_leds: int = NUM_LEDS
    ):
        self.repository = repository
        self.executor = executor
        self.segmenter = segmenter or BufferSegmenter(num_leds=num_leds)
        self.num_leds = num_leds

    async def list_scripts(self) -> ScriptList:
        scripts = await self.repository.list_all()
        active = next((s for s in scripts if s.is_active), None)
        return ScriptList(scripts=scripts, active_id=active.id if active else None)

    async def get_script(self, script_id: int) -> Script:
        script = await self.repository.get(script_id)
        if script is None:
            raise ScriptNotFoundError(script_id)
        return script

    async def test_script(self, title: str, description: str, source_code: str) -> ScriptExecutionResult:
        """Dry run: execute and validate without saving"""
        return await self.executor.execute_and_validate(title, description, source_code)

    async def create_script(
        self,
        title: str,
        description: str,
        source_code: str,
        set_as_active: bool = False,
        framerate: int = 60
    ) -> SavedScript:
        """
        Execute, validate and store a user script

        Raises:
            ValidationError: Blank fields or framerate <= 0
            ExternalServiceError: Sandbox failure or program error
            FrameValidationError: Output is not valid frame text
        """
        self.segmenter.frames_per_buffer(framerate)
        execution = await self.executor.execute_and_validate(title, description, source_code)

        script = await self.repository.create(
            title=title.strip(),
            description=description.strip(),
            source_code=source_code,
            frames=execution.frames,
            created_by=ScriptAuthor.USER,
            set_as_active=set_as_active,
            framerate=framerate
        )
        return SavedScript(script=script, execution=execution)

    async def create_from_frames(
        self,
        title: str,
        description: str,
        frames: List[str],
        framerate: int = 60,
        set_as_active: bool = False,
        source_code: str = "",
        created_by: ScriptAuthor = ScriptAuthor.USER
    ) -> Script:
        """Store already-rendered frames (no code execution)"""
        if not (title or "").strip():
            raise ValidationError("Title is required", details={"field": "title"})
        self.segmenter.frames_per_buffer(framerate)
        result = validate_frames(frames, self.num_leds)

        return await self.repository.create(
            title=title.strip(),
            description=(description or "").strip(),
            source_code=source_code,
            frames=result.frames,
            created_by=created_by,
            set_as_active=set_as_active,
            framerate=framerate
        )

    async def update_script(
        self,
        script_id: int,
        title: str,
        description: str,
        source_code: str,
        framerate: int = 60
    ) -> SavedScript:
        """Re-execute the new code and replace the stored frames"""
        await self.get_script(script_id)
        self.segmenter.frames_per_buffer(framerate)
        execution = await self.executor.execute_and_validate(title, description, source_code)

        script = await self.repository.update(
            script_id,
            title=title.strip(),
            description=description.strip(),
            source_code=source_code,
            frames=execution.frames,
            framerate=framerate
        )
        return SavedScript(script=script, execution=execution)

    async def delete_script(self, script_id: int) -> None:
        await self.repository.delete(script_id)

    async def activate_script(self, script_id: int) -> Script:
        await self.get_script(script_id)
        await self.repository.set_active(script_id)
        return await self.get_script(script_id)

    async def seed_presets(self, presets: Optional[List[Preset]] = None) -> List[Script]:
        """
        Store the built-in animations

        Presets whose name already exists are skipped, so seeding twice is
        harmless.
        """
        existing = {s.title for s in await self.repository.list_all()}
        seeded = []

        for preset in presets if presets is not None else PRESETS:
            if preset.name in existing:
                log.debug(f"Preset already stored: {preset.name}")
                continue

            script = await self.create_from_frames(
                preset.name,
                preset.description,
                preset.generate(),
                framerate=preset.framerate
            )
            log.info(f"Seeded preset: {preset.name}", frames=script.frame_count)
            seeded.append(script)

        return seeded
