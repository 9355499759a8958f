"""
Script schemas - Pydantic models for script CRUD, dry runs and generation
"""

from datetime import datetime
from pydantic import BaseModel, Field
from typing import List, Optional

from models.domain.script import Script
from models.enums import ScriptAuthor


class ScriptCodeRequest(BaseModel):
    """A Python animation generator plus its metadata"""
    title: str = Field(description="Script title (required, non-blank)")
    description: str = Field(description="What the animation shows (required, non-blank)")
    source_code: str = Field(description="Python 3 program printing one frame per line")


class ScriptCreateRequest(ScriptCodeRequest):
    set_as_active: bool = Field(False, description="Make this the active script")
    framerate: int = Field(60, gt=0, description="Playback frames per second")


class ScriptUpdateRequest(ScriptCodeRequest):
    framerate: int = Field(60, gt=0, description="Playback frames per second")


class ScriptFromFramesRequest(BaseModel):
    """Store already-rendered frames without running any code"""
    title: str
    description: str = ""
    frames: List[str] = Field(description="One line of 60 comma-separated #RRGGBB colors per frame")
    framerate: int = Field(60, gt=0)
    set_as_active: bool = False


class ScriptSummaryResponse(BaseModel):
    """Script metadata without frames"""
    id: int
    title: str
    description: str
    source_code: str
    frame_count: int
    framerate: int
    created_by: ScriptAuthor
    reasoning: Optional[str] = None
    is_active: bool
    created_at: datetime

    @classmethod
    def from_script(cls, script: Script) -> 'ScriptSummaryResponse':
        return cls(
            id=script.id,
            title=script.title,
            description=script.description,
            source_code=script.source_code,
            frame_count=script.frame_count,
            framerate=script.framerate,
            created_by=script.created_by,
            reasoning=script.reasoning,
            is_active=script.is_active,
            created_at=script.created_at
        )


class ScriptResponse(ScriptSummaryResponse):
    """Full script including frames"""
    frames: List[str]

    @classmethod
    def from_script(cls, script: Script) -> 'ScriptResponse':
        summary = ScriptSummaryResponse.from_script(script)
        return cls(**summary.model_dump(), frames=list(script.frames))


class ScriptListResponse(BaseModel):
    scripts: List[ScriptSummaryResponse]
    active_id: Optional[int] = None
    count: int


class ScriptTestResponse(BaseModel):
    """Dry run result"""
    success: bool = True
    frame_count: int
    frames: List[str]
    execution_time: Optional[str] = None
    memory: Optional[int] = None


class ScriptSaveResponse(BaseModel):
    success: bool = True
    script: ScriptSummaryResponse
    frame_count: int
    execution_time: Optional[str] = None
    memory: Optional[int] = None


class GenerationResponse(BaseModel):
    message: str = "Cron job executed successfully"
    success: bool = True
    script_id: int
    title: str
    reasoning: str
    source_code: str
    frame_count: int
    attempts: int
    sample_frames: List[str]
