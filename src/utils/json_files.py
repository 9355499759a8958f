"""
Atomic JSON file writes

The payload goes to a temp file next to the target (unique per write) and
is then moved over it with os.replace, so readers see either the old or
the new document and concurrent writers never share a temp file.
"""

import json
import os
import uuid
from pathlib import Path
from typing import Any, Optional

import aiofiles


async def write_json_atomic(path: Path, payload: Any, indent: Optional[int] = None) -> None:
    """
    Raises:
        OSError: Directory cannot be created or the file cannot be written
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")
    try:
        async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(payload, indent=indent))
        os.replace(tmp_path, path)
    except OSError:
        if tmp_path.exists():
            tmp_path.unlink()
        raise
