"""Domain models"""

from models.domain.script import Script

__all__ = [
    "Script",
]
