"""
Control schemas - Pydantic models for mode switching and buffer playback

POST /control takes one of four bodies, selected by the "mode" field.
Colors and frames are checked by the services so that errors carry the
frame and color index.
"""

from pydantic import BaseModel, Field
from typing import List, Literal, Optional, Union


class SimpleModeRequest(BaseModel):
    """Static single color"""
    mode: Literal["simple"]
    on: Optional[bool] = Field(None, description="Power state (keeps current value when omitted)")
    color: Optional[str] = Field(None, description="Color as #RRGGBB")


class LoopModeRequest(BaseModel):
    """Cycle through colors"""
    mode: Literal["loop"]
    colors: Optional[List[str]] = Field(None, description="Ordered #RRGGBB colors, at least one")
    delay_ms: Optional[int] = Field(None, ge=0, description="Delay between colors in milliseconds")


class ScriptModeRequest(BaseModel):
    """Play uploaded frames"""
    mode: Literal["script"]
    framerate: Optional[int] = Field(None, gt=0, description="Frames per second")
    frames: Optional[List[str]] = Field(
        None,
        description="One line of 60 comma-separated #RRGGBB colors per frame"
    )


class ClaudeModeRequest(BaseModel):
    """Play the active (or latest) AI-generated script"""
    mode: Literal["claude"]


# Discriminated on "mode" at the route: Body(discriminator="mode")
ControlRequest = Union[SimpleModeRequest, LoopModeRequest, ScriptModeRequest, ClaudeModeRequest]


class BufferResponse(BaseModel):
    """One playback buffer, hex encoded (6 lowercase hex chars per color)"""
    buffer: str
    buffer_index: int
    next_buffer_index: int
    total_buffers: int
    framerate: int
    format: str = "hex"


class CompleteBufferResponse(BaseModel):
    success: bool = True
    current_buffer_index: int
    total_buffers: int
