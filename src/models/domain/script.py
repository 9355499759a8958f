"""Script domain model"""

from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import List, Optional

from models.enums import ScriptAuthor


@dataclass
class Script:
    """
    A persisted, named animation

    frames are the validated frame lines exactly as submitted. At most one
    script has is_active=True; it is what CLAUDE mode plays.
    """

    id: int
    title: str
    description: str
    source_code: str
    frames: List[str]
    framerate: int = 60
    created_by: ScriptAuthor = ScriptAuthor.USER
    reasoning: Optional[str] = None  # AI scripts only
    is_active: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def frame_count(self) -> int:
        return len(self.frames)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["created_by"] = self.created_by.value
        data["created_at"] = self.created_at.isoformat()
        data["frame_count"] = self.frame_count
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'Script':
        return cls(
            id=int(data["id"]),
            title=data["title"],
            description=data["description"],
            source_code=data.get("source_code") or "",
            frames=list(data.get("frames") or []),
            framerate=int(data.get("framerate") or 60),
            created_by=ScriptAuthor(data.get("created_by", ScriptAuthor.USER.value)),
            reasoning=data.get("reasoning"),
            is_active=bool(data.get("is_active", False)),
            created_at=datetime.fromisoformat(data["created_at"]) if data.get("created_at")
            else datetime.now(timezone.utc),
        )
