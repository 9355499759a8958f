"""
Script Executor - runs an animation generator and validates what it prints
"""

import re
from dataclasses import dataclass
from typing import List, Optional

from engine.frame_validator import parse_program_output, NUM_LEDS
from models.enums import LogCategory
from models.errors import ValidationError
from services.code_runner import Judge0CodeRunner
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.EXECUTION)

_OPENING_FENCE = re.compile(r"^```(?:python|py)?\s*\n", re.IGNORECASE)
_CLOSING_FENCE = re.compile(r"\n```\s*$")
_STANDALONE_FENCE = re.compile(r"^```\s*$", re.MULTILINE)


def strip_markdown_code_fences(code: str) -> str:
    """Remove ```python ... ``` wrapping that models like to add"""
    cleaned = code.strip()
    cleaned = _OPENING_FENCE.sub("", cleaned, count=1)
    cleaned = _CLOSING_FENCE.sub("", cleaned, count=1)
    cleaned = _STANDALONE_FENCE.sub("", cleaned)
    return cleaned.strip()


@dataclass
class ScriptExecutionResult:
    source_code: str
    frames: List[str]
    frame_count: int
    execution_time: Optional[str] = None
    memory: Optional[int] = None


class ScriptExecutor:

    def __init__(self, runner: Judge0CodeRunner, num_leds: int = NUM_LEDS):
        self.runner = runner
        self.num_leds = num_leds

    async def execute_and_validate(self, title: str, description: str, source_code: str) -> ScriptExecutionResult:
        """
        Run source_code and validate its stdout as LED frames

        Raises:
            ValidationError: Blank title, description or code
            ExternalServiceError: Sandbox failed or the program crashed
            FrameValidationError: Program output is not valid frame text
        """
        if not (title or "").strip():
            raise ValidationError("Title is required", details={"field": "title"})
        if not (description or "").strip():
            raise ValidationError("Description is required", details={"field": "description"})
        if not (source_code or "").strip():
            raise ValidationError("Python code is required", details={"field": "source_code"})

        cleaned = strip_markdown_code_fences(source_code)
        execution = await self.runner.run(cleaned)
        parsed = parse_program_output(execution.output, self.num_leds)

        log.info(f"Script produced {parsed.count} valid frames", title=title, time=execution.time)
        return ScriptExecutionResult(
            source_code=cleaned,
            frames=parsed.frames,
            frame_count=parsed.count,
            execution_time=execution.time,
            memory=execution.memory
        )
