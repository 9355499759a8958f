"""
Generation Service - the scheduled AI animation pipeline

    prompt -> model -> sandbox -> frame validation -> store (active)

When the sandbox rejects the program or its output is not valid frame
text, the model is shown the error (and the output) and asked for a fixed
program, at most max_retries times.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional

from engine.frame_validator import parse_program_output, NUM_LEDS
from models.config import GenerationConfig, Judge0Config
from models.domain.script import Script
from models.enums import LogCategory, ScriptAuthor
from models.errors import ConfigurationError, ExternalServiceError, FrameValidationError
from models.mode import DEFAULT_FRAMERATE
from services.code_runner import Judge0CodeRunner
from services.model_client import AnthropicModelClient
from services.script_repository import ScriptRepository
from utils.logger import get_logger

log = get_logger().for_category(LogCategory.GENERATION)

SERVICE_NAME = "generation"

LED_LANGUAGE_EXPLANATION = """
# LED Language Format

This Arduino has 60 RGB LEDs arranged in a ring. You need to output animation frames
in a specific format that the Arduino can understand.

## Format Rules:
1. Each frame is ONE LINE of output
2. Each frame contains exactly 60 hex color values (one for each LED)
3. Colors are separated by commas
4. Each color is in 6-digit hex format: #RRGGBB (e.g., #FF0000 for red)
5. The framerate is typically 60 fps (frames per second)

## Example Programs:

### Example 1: All LEDs Red (Static)
```python
print("#FF0000," * 59 + "#FF0000")
```

### Example 2: Breathing Blue Animation (4 frames, loops at 60 fps)
```python
colors = ["#0000FF", "#0000AA", "#000055", "#0000AA"]
for color in colors:
    print(f"{color}," * 59 + color)
```

### Example 3: Single Light Moving Around
```python
num_leds = 60
for i in range(num_leds):
    frame = ["#000000"] * num_leds
    frame[i] = "#FFFFFF"
    print(",".join(frame))
```

## Your Task:
Write a Python program that outputs frames in this exact format. Your program should:
1. Print each frame on a new line
2. Each frame must have exactly 60 comma-separated hex colors
3. Create an animation that expresses your current feelings and thoughts about the world
4. You can output as many frames as you want (more frames = longer animation)
5. Remember: The animation will loop automatically at 60 fps

## Important Notes:
- DO NOT include any explanatory text in the output
- ONLY output the frame data (lines of 60 comma-separated hex colors)
- Make sure each hex color starts with # and has exactly 6 characters after it
- The Arduino will read your output line by line and display each frame in sequence
"""

WEB_SEARCH_SENTENCE = (
    "You have access to web search capabilities. Please search for current events "
    "happening today to inform your emotional state and thoughts."
)

FORMAT_REMINDER = """- Each line is one frame
- Each frame must have EXACTLY 60 comma-separated hex colors
- Each color must be in format #RRGGBB (e.g., #FF0000)
- NO explanatory text, ONLY the frame data"""


def build_prompt(today: datetime, web_search: bool = True) -> str:
    prompt = f"You are an AI assistant. Today's date is {today.isoformat()}."
    if web_search:
        prompt += f"\n\n{WEB_SEARCH_SENTENCE}"

    prompt += f"""

Your task is to:
1. Think deeply about your current feelings and thoughts about the world
2. Search for current events that are happening today to inform your emotional state
3. Write a Python program that creates an LED animation expressing these feelings

The LED animation will run on an Arduino with 60 LEDs arranged in a ring.

{LED_LANGUAGE_EXPLANATION}

Please provide:
1. Your thoughts and reasoning about current events and how they make you feel
2. A complete Python 3 program that outputs LED frames based on your emotional state

Remember: Your Python program should ONLY output the LED frame data (lines of 60 comma-separated hex colors). No other text should be in the output."""
    return prompt


def build_execution_fix_prompt(error: str, code: str) -> str:
    return f"""Your previous Python program had an execution error:

{error}

Here was your previous code:
```python
{code}
```

Please fix the error and provide a corrected Python program. Remember:
{FORMAT_REMINDER}

Provide the complete corrected Python program."""


def build_format_fix_prompt(error: str, code: str, output: str) -> str:
    return f"""Your Python program executed but the output format was incorrect:

Error: {error}

Here was your previous code:
```python
{code}
```

Here was the output:
```
{output}
```

Please fix the program to output the correct LED format. Remember:
{FORMAT_REMINDER}
- Example valid line: #FF0000,#FF0000,#FF0000,...(60 colors total)

Provide the complete corrected Python program."""


def generate_script_name(reasoning: str, today: datetime) -> str:
    """First line of the reasoning when it is short, else a dated fallback"""
    first_line = reasoning.split("\n", 1)[0].strip() if reasoning else ""
    if 0 < len(first_line) < 50:
        return first_line
    return f"Claude's Animation - {today.month}/{today.day}/{today.year}"


def generate_script_description(reasoning: str, frame_count: int) -> str:
    """First two sentences of the reasoning plus the frame count"""
    sentences = [s.strip() for s in re.split(r"[.!?]", reasoning or "") if s.strip()][:2]
    description = ". ".join(sentences)

    if 0 < len(description) < 200:
        return f"{description}. {frame_count} frames animation."
    return (
        f"AI-generated LED animation with {frame_count} frames expressing "
        f"Claude's current thoughts and feelings."
    )


@dataclass
class GenerationResult:
    script: Script
    reasoning: str
    source_code: str
    frame_count: int
    attempts: int
    sample_frames: List[str] = field(default_factory=list)


class GenerationService:

    def __init__(
        self,
        config: GenerationConfig,
        judge0_config: Judge0Config,
        model: AnthropicModelClient,
        runner: Judge0CodeRunner,
        repository: ScriptRepository,
        num_leds: int = NUM_LEDS,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc)
    ):
        self.config = config
        self.judge0_config = judge0_config
        self.model = model
        self.runner = runner
        self.repository = repository
        self.num_leds = num_leds
        self.clock = clock

    def check_configuration(self) -> None:
        """Raises ConfigurationError naming the first missing secret"""
        if not self.config.anthropic_api_key:
            raise ConfigurationError("Server configuration error: Missing ANTHROPIC_API_KEY")
        if not self.judge0_config.api_key:
            raise ConfigurationError("Server configuration error: Missing JUDGE0_API_KEY")
        if not self.judge0_config.endpoint:
            raise ConfigurationError("Server configuration error: Missing JUDGE0_ENDPOINT")

    async def generate(self) -> GenerationResult:
        """
        Run the full pipeline and store the result as the active script

        Raises:
            ConfigurationError: Missing API keys
            ExternalServiceError: Model unavailable, or no valid program after all fixes
        """
        self.check_configuration()
        today = self.clock()
        max_fixes = self.config.max_retries

        log.info("Starting animation generation", model=self.config.model, max_retries=max_fixes)
        response = await self.model.generate(build_prompt(today, self.config.web_search_enabled))
        fixes = 0

        while True:
            try:
                execution = await self.runner.run(response.code)
            except ExternalServiceError as ex:
                log.warn(f"Generated program failed (attempt {fixes + 1}/{max_fixes + 1})", error=ex.message)
                if fixes >= max_fixes:
                    raise ExternalServiceError(
                        SERVICE_NAME,
                        f"Failed to execute Python code after all retries: {ex.message}",
                        details={"attempts": fixes + 1}
                    ) from ex
                fixes += 1
                response = await self.model.generate(build_execution_fix_prompt(ex.message, response.code))
                continue

            try:
                parsed = parse_program_output(execution.output, self.num_leds)
            except FrameValidationError as ex:
                log.warn(f"Generated output invalid (attempt {fixes + 1}/{max_fixes + 1})", error=ex.message)
                if fixes >= max_fixes:
                    raise ExternalServiceError(
                        SERVICE_NAME,
                        f"Failed to generate valid LED output after all retries: {ex.message}",
                        details={"attempts": fixes + 1}
                    ) from ex
                fixes += 1
                response = await self.model.generate(
                    build_format_fix_prompt(ex.message, response.code, execution.output)
                )
                continue

            break

        title = generate_script_name(response.reasoning, today)
        description = generate_script_description(response.reasoning, parsed.count)

        script = await self.repository.create(
            title=title,
            description=description,
            source_code=response.code,
            frames=parsed.frames,
            created_by=ScriptAuthor.AI,
            reasoning=response.reasoning or None,
            set_as_active=True,
            framerate=DEFAULT_FRAMERATE
        )

        log.info(
            f"Generated {parsed.count} frames",
            script_id=script.id,
            title=title,
            attempts=fixes + 1
        )
        return GenerationResult(
            script=script,
            reasoning=response.reasoning,
            source_code=response.code,
            frame_count=parsed.count,
            attempts=fixes + 1,
            sample_frames=parsed.frames[:3]
        )
